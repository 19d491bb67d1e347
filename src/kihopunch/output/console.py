"""Rich Console factory and theme for kihopunch output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

PUNCH_THEME = Theme(
    {
        "punch.ok": "bold green",
        "punch.error": "bold red",
        "punch.warning": "bold yellow",
        "punch.op": "bold cyan",
        "punch.key": "dim",
        "punch.id": "bold blue",
        "punch.time": "bold",
        "punch.type.login": "green",
        "punch.type.logout": "yellow",
        "punch.type.break": "cyan",
        "punch.ccc": "magenta",
    }
)

_TYPE_STYLES: dict[str, str] = {
    "LOGIN": "punch.type.login",
    "LOGOUT": "punch.type.logout",
    "BREAK": "punch.type.break",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=PUNCH_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_type(punch_type: str) -> str:
    """Return the Rich style name for a punch type."""
    return _TYPE_STYLES.get(punch_type, "")
