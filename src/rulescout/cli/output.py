"""
CLI Output Utilities

Machine-aware output functions that adapt based on machine mode, and the
rich progress bar used as a discovery progress sink.
"""

import json
import re
from typing import Any, Optional

import typer
from rich.console import Console as RichConsole
from rich.progress import (
    BarColumn,
    Progress,
    TaskProgressColumn,
    TextColumn,
    TimeElapsedColumn,
    TimeRemainingColumn,
)
from rich.table import Table

from rulescout.cli.config import CLIConfig
from rulescout.progress import PROGRESS_TOTAL


class MachineAwareConsole:
    """
    A Console wrapper that automatically adapts output based on machine mode.
    Acts as a drop-in replacement for rich.console.Console.
    """

    def __init__(self):
        self._rich_console = RichConsole()

    def print(self, *args, **kwargs):
        """Print that respects machine mode."""
        if not CLIConfig.is_machine_mode():
            self._rich_console.print(*args, **kwargs)
            return

        for arg in args:
            if isinstance(arg, str):
                # Remove rich markup
                plain = re.sub(r'\[.*?\]', '', arg).strip()
                if plain:
                    print(plain)
            elif isinstance(arg, Table) or hasattr(arg, '__rich__'):
                # Tables and other renderables are suppressed; use --json instead
                pass
            elif arg:
                print(arg)

    def __getattr__(self, name):
        """Delegate all other attributes to the rich console."""
        return getattr(self._rich_console, name)


_console = MachineAwareConsole()


def echo(message: str = "", **kwargs) -> None:
    """
    Print a message respecting machine mode.
    In machine mode, strips formatting and prints plain text.
    """
    if CLIConfig.is_machine_mode():
        print(message, **kwargs)
    else:
        typer.echo(message, **kwargs)


def print_json(data: Any, minified: Optional[bool] = None) -> None:
    """
    Print JSON data respecting machine mode.
    In machine mode, always minifies. In human mode, pretty prints.
    """
    if minified is None:
        minified = CLIConfig.is_machine_mode()

    if minified:
        echo(json.dumps(data, separators=(',', ':')))
    else:
        echo(json.dumps(data, indent=2))


def structured_error(code: str, message: str, input_value: Optional[str] = None,
                     suggestions: Optional[list] = None) -> dict:
    """
    Create a structured error object for machine mode.

    Args:
        code: Error code (e.g., "PARSE_ERROR", "EMPTY_CORPUS")
        message: Human-readable error message
        input_value: The input that caused the error
        suggestions: List of alternative suggestions

    Returns:
        Structured error dictionary
    """
    error_obj = {
        "status": "error",
        "code": code,
        "message": message
    }
    if input_value:
        error_obj["input"] = input_value
    if suggestions:
        error_obj["suggestions"] = suggestions
    return error_obj


class RichProgressSink:
    """
    Progress sink backed by a rich progress bar on stderr.

    Usage:
        with RichProgressSink() as sink:
            run_discovery(base, patterns, sink)
    """

    def __init__(self, total: float = PROGRESS_TOTAL, description: str = "Determining config"):
        self.total = total
        self._progress = Progress(
            TextColumn("[bold blue]{task.description}"),
            BarColumn(bar_width=30),
            TaskProgressColumn(),
            TimeElapsedColumn(),
            TimeRemainingColumn(),
            console=RichConsole(stderr=True),
        )
        self._description = description
        self._task = None

    def __enter__(self) -> "RichProgressSink":
        self._progress.start()
        self._task = self._progress.add_task(self._description, total=self.total)
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        self._progress.stop()
        return False

    def report(self, increment: float) -> None:
        if self._task is not None:
            self._progress.advance(self._task, increment)


def get_console() -> MachineAwareConsole:
    """
    Get the console instance for advanced usage.
    Note: Direct console usage should check machine mode.
    """
    return _console
