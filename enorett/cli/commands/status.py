"""Status command for displaying loaded resources and remote services."""

from rich.panel import Panel
from rich.table import Table

from enorett.cli.utils.console import console
from enorett.config import settings
from enorett.services.lookup import build_orchestrator


def status() -> None:
    """Show dictionary, lexicon and remote service configuration."""
    orchestrator = build_orchestrator(settings)
    dictionary = orchestrator.dictionary
    pronunciations = orchestrator.pronunciations

    data_table = Table(show_header=False, box=None, padding=(0, 2))
    data_table.add_column("Label", style="bold")
    data_table.add_column("Value", justify="right")

    data_table.add_row("Dictionary", str(dictionary.path))
    data_table.add_row("Entries", str(len(dictionary)))
    data_table.add_row("Free tier", str(len(dictionary.load_free())))
    data_table.add_row("Lexicon", str(pronunciations.path))
    data_table.add_row(
        "Pronunciations",
        str(pronunciations.size) if pronunciations.size else "[yellow]0[/]",
    )

    data_panel = Panel(data_table, title="[bold]Local data[/]", border_style="blue")

    remote_table = Table(show_header=False, box=None, padding=(0, 2))
    remote_table.add_column("Label", style="bold")
    remote_table.add_column("Value")

    if orchestrator.morphology:
        remote_table.add_row("Sparv", f"[green]{orchestrator.morphology.endpoint}[/]")
    else:
        remote_table.add_row("Sparv", "[yellow]Disabled[/]")

    if orchestrator.corpus:
        remote_table.add_row(
            "Korp", f"[green]{orchestrator.corpus.endpoint}[/] ({orchestrator.corpus.corpora})"
        )
    else:
        remote_table.add_row("Korp", "[yellow]Disabled[/]")

    remote_panel = Panel(remote_table, title="[bold]Remote services[/]", border_style="blue")

    console.print()
    console.print(data_panel)
    console.print(remote_panel)
    console.print()
