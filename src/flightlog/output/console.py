"""Rich Console factory and theme for flightlog output.

Creates Console instances that render to a StringIO buffer, preserving
the ``format_result() -> str`` contract.  In non-TTY environments
(tests, pipes) Rich automatically disables color codes.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

FLIGHTLOG_THEME = Theme(
    {
        "fl.ok": "bold green",
        "fl.error": "bold red",
        "fl.warning": "bold yellow",
        "fl.op": "bold cyan",
        "fl.key": "dim",
        "fl.tail": "bold blue",
        "fl.cost": "magenta",
        "fl.state.completed": "green",
        "fl.state.in_progress": "yellow",
        "fl.state.arrived_only": "cyan",
    }
)

_STATE_STYLES: dict[str, str] = {
    "completed": "fl.state.completed",
    "in_progress": "fl.state.in_progress",
    "arrived_only": "fl.state.arrived_only",
}


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=FLIGHTLOG_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_state(state: str) -> str:
    """Return the Rich style name for a session state."""
    return _STATE_STYLES.get(state, "")
