"""Rich Console factory and theme for rememberme output.

Consoles render into a StringIO buffer so ``format_result() -> str`` stays
a pure function. Rich drops colour codes on its own when stdout is not a
terminal (tests, pipes).
"""

from __future__ import annotations

from io import StringIO

from rich.console import Console
from rich.theme import Theme

RM_THEME = Theme(
    {
        "rm.ok": "bold green",
        "rm.error": "bold red",
        "rm.warning": "bold yellow",
        "rm.op": "bold cyan",
        "rm.key": "dim",
        "rm.id": "bold blue",
        "rm.name": "bold",
        "rm.score": "magenta",
        "rm.bucket.healthy": "green",
        "rm.bucket.warning": "yellow",
        "rm.bucket.dying": "dark_orange",
        "rm.bucket.dormant": "bright_black",
        "rm.action.keep": "dim",
        "rm.action.adopt": "green",
        "rm.action.append": "cyan",
        "rm.action.union": "blue",
    }
)


def create_console(*, no_color: bool = False, width: int | None = None) -> Console:
    """Create a Console that renders to a StringIO buffer."""
    return Console(
        file=StringIO(),
        theme=RM_THEME,
        no_color=no_color,
        highlight=False,
        width=width or 120,
    )


def get_output(console: Console) -> str:
    """Extract rendered text from a StringIO-backed Console."""
    assert isinstance(console.file, StringIO)
    return console.file.getvalue()


def style_for_bucket(bucket: str) -> str:
    return f"rm.bucket.{bucket}" if bucket in ("healthy", "warning", "dying", "dormant") else ""


def style_for_action(action: str) -> str:
    return f"rm.action.{action}" if action in ("keep", "adopt", "append", "union") else ""
