"""Main CLI application entry point."""

import sys

import typer

from enorett.cli.commands import lookup, status
from enorett.logging_config import setup_logging

app = typer.Typer(
    name="enorett",
    help="Swedish en/ett article lookup",
    no_args_is_help=True,
    rich_markup_mode="rich",
)


@app.callback()
def startup(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show log output"),
) -> None:
    """Configure logging before any command runs."""
    setup_logging(level=None if verbose else "WARNING", stream=sys.stderr)


app.command(name="lookup", help="Look up the article of a word")(lookup.lookup)
app.command(name="guess", help="Guess the article from the word ending")(lookup.guess)
app.command(name="status", help="Show loaded data and remote services")(status.status)


if __name__ == "__main__":
    app()
