"""CLI utility modules."""

from enorett.cli.utils.async_runner import run_async
from enorett.cli.utils.console import article_markup, console, error_console

__all__ = ["run_async", "article_markup", "console", "error_console"]
