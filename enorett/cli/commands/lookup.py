"""Word lookup and article guessing commands."""

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from enorett.cli.utils.async_runner import run_async
from enorett.cli.utils.console import article_markup, console, error_console
from enorett.config import settings
from enorett.services.heuristics import guess_article
from enorett.services.lookup import LookupResult, build_orchestrator


def render_result(result: LookupResult) -> None:
    """Print a lookup result as a panel."""
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("Label", style="bold")
    table.add_column("Value")

    if result.article:
        table.add_row("Article", article_markup(result.article, result.word))
    if result.genus:
        table.add_row("Genus", result.genus.value)
    if result.translation:
        table.add_row("Translation", escape(result.translation))
    if result.ipa:
        table.add_row("IPA", escape(f"[{result.ipa}]"))
    for i, example in enumerate(result.examples, start=1):
        table.add_row("Example" if i == 1 else "", f"[dim]{escape(example)}[/]")

    flags = result.source_flags
    sources = [
        name
        for name, used in (
            ("dictionary", flags.dictionary),
            ("sparv", flags.morphology),
            ("lexicon", flags.lexicon),
            ("korp", flags.corpus),
        )
        if used
    ]
    table.add_row("Sources", ", ".join(sources) or "-")
    table.add_row("Confidence", result.confidence.value)
    if result.is_premium_data:
        table.add_row("Premium", "[success]yes[/]")

    console.print(Panel(table, title=f"[bold]{escape(result.word)}[/]", border_style="blue"))


def lookup(
    word: str = typer.Argument(..., help="Swedish noun to look up"),
    premium: bool = typer.Option(False, "--premium", "-p", help="Include the premium dictionary"),
    offline: bool = typer.Option(
        False, "--offline", help="Skip Sparv and Korp; dictionary and lexicon only"
    ),
) -> None:
    """Look up whether a word takes "en" or "ett"."""
    result = run_async(_lookup(word, premium, offline))
    if not result.success:
        raise typer.Exit(1)


async def _lookup(word: str, premium: bool, offline: bool) -> LookupResult:
    """Async implementation of lookup command."""
    orchestrator = build_orchestrator(settings)
    if offline:
        orchestrator.morphology = None
        orchestrator.corpus = None

    result = await orchestrator.resolve(word, premium)

    if result.requires_premium:
        error_console.print(f"[warning]{result.error}[/] [dim]({result.error_localized})[/]")
        console.print("[dim]Run with --premium to include the full dictionary.[/]")
        return result

    if not result.success:
        error_console.print(f"[error]{result.error}[/] [dim]({result.error_localized})[/]")
        _print_guess(result.word)
        return result

    render_result(result)
    return result


def _print_guess(word: str) -> None:
    guess = guess_article(word)
    if guess:
        console.print(
            f"Guess: {article_markup(guess.article, guess.word)} "
            f"[dim]({guess.explanation}, confidence {guess.confidence})[/]"
        )


def guess(word: str = typer.Argument(..., help="Swedish noun")) -> None:
    """Guess the article from the word ending, without any lookups."""
    result = guess_article(word)
    if result is None:
        error_console.print(f"[warning]No suffix rule matches '{escape(word)}'[/]")
        raise typer.Exit(1)

    console.print(article_markup(result.article, result.word))
    console.print(f"[dim]{result.explanation}. This is a guess ({result.confidence}).[/]")
