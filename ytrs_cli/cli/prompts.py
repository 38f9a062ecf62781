"""
Interactive selection and confirmation prompts.
"""

import logging
import sys
from typing import Protocol

import typer
from click import IntRange
from rich.console import Console
from rich.table import Table

log = logging.getLogger(__name__)


class Prompter(Protocol):
    interactive: bool

    def choose(self, title: str, options: list[str]) -> int: ...

    def confirm(self, question: str, default: bool = False) -> bool: ...


class ConsolePrompter:
    """Prompts on the terminal. Without a TTY the first option is taken."""

    def __init__(self, console: Console, interactive: bool | None = None):
        self.console = console
        self.interactive = sys.stdin.isatty() if interactive is None else interactive

    def choose(self, title: str, options: list[str]) -> int:
        """Shows a numbered list and returns the 0-based index picked."""
        if not options:
            raise ValueError("Nothing to choose from.")
        if len(options) == 1:
            return 0
        if not self.interactive:
            log.info(f"No terminal attached, using the first entry for '{title}'.")
            return 0

        table = Table(title=title, show_header=False, box=None, padding=(0, 1))
        table.add_column(style="cyan", justify="right")
        table.add_column()
        for i, option in enumerate(options, start=1):
            table.add_row(f"{i}.", option)
        self.console.print(table)

        choice = typer.prompt(
            "Enter a number", default=1, type=IntRange(1, len(options))
        )
        return choice - 1

    def confirm(self, question: str, default: bool = False) -> bool:
        if not self.interactive:
            return default
        return typer.confirm(question, default=default)
