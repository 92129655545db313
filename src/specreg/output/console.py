"""Rich Console factory and theme for specreg output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

SPECREG_THEME = Theme(
    {
        "specreg.ok": "bold green",
        "specreg.error": "bold red",
        "specreg.warning": "bold yellow",
        "specreg.op": "bold cyan",
        "specreg.key": "dim",
        "specreg.name": "bold blue",
        "specreg.path": "dim",
        "specreg.type": "magenta",
        "specreg.direction.input": "green",
        "specreg.direction.output": "yellow",
    }
)

_DIRECTION_STYLES: dict[str, str] = {
    "input": "specreg.direction.input",
    "output": "specreg.direction.output",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer.

    Args:
        no_color: Disable ANSI escape codes (used in tests).
        width: Override terminal width (useful for consistent test output).
    """
    return Console(
        file=StringIO(),
        theme=SPECREG_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_direction(direction: str) -> str:
    """Return the Rich style name for a port direction."""
    return _DIRECTION_STYLES.get(direction, "")
