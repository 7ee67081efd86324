"""Rich Console factory and theme for subspacectl output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SUBSPACE_THEME = Theme(
    {
        "ssc.ok": "bold green",
        "ssc.error": "bold red",
        "ssc.warning": "bold yellow",
        "ssc.op": "bold cyan",
        "ssc.key": "dim",
        "ssc.name": "bold blue",
        "ssc.path": "dim",
        "ssc.status.installed": "green",
        "ssc.status.generated": "cyan",
        "ssc.status.install_failed": "yellow",
        "ssc.status.failed": "red",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=SUBSPACE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_status(status: str) -> str:
    """Return the Rich style name for a subspace status."""
    return f"ssc.status.{status}" if status else ""
