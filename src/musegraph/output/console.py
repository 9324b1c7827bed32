"""Rich Console factory and theme for musegraph output.

Consoles render into a StringIO buffer so that ``format_result`` can
keep returning a plain string. In non-TTY environments (tests, pipes)
Rich drops color codes on its own.
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

MUSE_THEME = Theme(
    {
        "mg.ok": "bold green",
        "mg.error": "bold red",
        "mg.op": "bold cyan",
        "mg.key": "dim",
        "mg.id": "bold blue",
        "mg.name": "bold",
        "mg.community": "magenta",
        "mg.score": "magenta",
        "mg.kind.performer": "green",
        "mg.kind.work": "yellow",
        "mg.kind.collection": "blue",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=MUSE_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_kind(kind: str) -> str:
    """Rich style name for a node kind (empty for unknown kinds)."""
    return f"mg.kind.{kind}" if kind in ("performer", "work", "collection") else ""
