"""Async runner utilities for CLI commands."""

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

import typer

from enorett.cli.utils.console import error_console

T = TypeVar("T")


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """Run a command coroutine to completion; Ctrl-C exits with status 130."""
    try:
        return asyncio.run(coro)
    except KeyboardInterrupt:
        error_console.print("[warning]Interrupted[/]")
        raise typer.Exit(130) from None
