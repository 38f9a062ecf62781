"""
Main entry point for the ytrs application.
This module handles top-level setup, exception handling, and CLI invocation.
"""

import asyncio
import logging
import os
import sys

import click
import typer
from rich.console import Console

from ytrs_cli.cli.app import app
from ytrs_cli.cli.formatters import format_error_with_suggestions
from ytrs_cli.exceptions import YtrsError

HELP_FLAGS = ("-h", "--help")


def wants_help(argv: list[str]) -> bool:
    """True if a help flag appears before any `--` separator."""
    for arg in argv:
        if arg == "--":
            return False
        if arg in HELP_FLAGS:
            return True
    return False


def main(argv: list[str] | None = None) -> None:
    """Main entry point function."""
    if os.name == "nt":
        try:
            sys.stdout.reconfigure(encoding="utf-8")
            sys.stderr.reconfigure(encoding="utf-8")
        except (TypeError, AttributeError):
            pass

    log = logging.getLogger("ytrs_cli")
    console = Console(stderr=True)

    args = sys.argv[1:] if argv is None else list(argv)
    # Help wins over everything else on the line, unknown flags included.
    if wants_help(args):
        args = ["--help"]

    try:
        exit_code = app(args=args, prog_name="ytrs", standalone_mode=False)
    except click.ClickException as e:
        e.show()
        sys.exit(e.exit_code)
    except typer.Abort as e:
        if isinstance(e.__cause__, KeyboardInterrupt):
            console.print("\n[yellow]⚠️  Operation cancelled by user.[/yellow]")
            sys.exit(0)
        console.print("[red]Aborted.[/red]")
        sys.exit(1)
    except (KeyboardInterrupt, asyncio.CancelledError):
        console.print("\n[yellow]⚠️  Operation cancelled by user.[/yellow]")
        sys.exit(0)
    except YtrsError as e:
        console.print()
        console.print(format_error_with_suggestions(e))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)
    except Exception as e:
        console.print()
        console.print(format_error_with_suggestions(e, {"type": "Unexpected"}))
        log.debug("Full traceback:", exc_info=True)
        sys.exit(1)

    sys.exit(exit_code if isinstance(exit_code, int) else 0)


if __name__ == "__main__":
    main()
