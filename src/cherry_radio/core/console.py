"""Rich console output for the non-interactive subcommands.

Results go to stdout and failures to stderr, so ``cherry-radio title URL``
can be piped without picking up error text.
"""

from typing import Iterable, Sequence

from rich.console import Console
from rich.table import Table

_stdout_console: Console | None = None
_stderr_console: Console | None = None


def get_console(stderr: bool = False) -> Console:
    """Get or create the shared Rich Console for stdout (or stderr).

    Returns:
        Console: The global Rich Console instance for that stream
    """
    global _stdout_console, _stderr_console
    if stderr:
        if _stderr_console is None:
            _stderr_console = Console(stderr=True)
        return _stderr_console
    if _stdout_console is None:
        _stdout_console = Console()
    return _stdout_console


def print_result(message: str, style: str | None = None) -> None:
    """Print a command result to stdout.

    Args:
        message: The message to print
        style: Optional Rich style string (e.g., "green", "dim")
    """
    get_console().print(message, style=style, markup=False, highlight=False)


def print_error(message: str) -> None:
    """Print a failure to stderr in bold red."""
    get_console(stderr=True).print(
        message, style="bold red", markup=False, highlight=False
    )


def print_table(
    title: str, columns: Sequence[str], rows: Iterable[Sequence[str]]
) -> None:
    """Print rows as a table; the first column is bold."""
    table = Table(title=title)
    for index, column in enumerate(columns):
        table.add_column(column, style="bold" if index == 0 else None)
    for row in rows:
        table.add_row(*row)
    get_console().print(table)
