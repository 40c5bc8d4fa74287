"""Coloured console output for CLI results.

Log lines produced by the operations carry a leading tag such as ``[OK]``
or ``[WARN]``; ``render_line`` colours the tag, everything else is printed
as plain text.
"""

from __future__ import annotations

from typing import Dict, Optional

from rich.console import Console
from rich.text import Text

TAG_STYLES: Dict[str, str] = {
    "[OK]": "green",
    "[DEL]": "magenta",
    "[SKIP]": "cyan",
    "[WARN]": "yellow",
    "[FAIL]": "bold red",
}

console = Console(highlight=False)
error_console = Console(stderr=True, highlight=False)


def render_line(line: str) -> Text:
    """Return ``line`` as rich Text with its leading tag coloured."""
    for tag, style in TAG_STYLES.items():
        if line.startswith(tag):
            text = Text(tag, style=style)
            text.append(line[len(tag):])
            return text
    return Text(line)


def print_line(line: str, target: Optional[Console] = None) -> None:
    (target or console).print(render_line(line))


def print_warning(message: str) -> None:
    error_console.print(Text("Warning: ", style="yellow") + Text(message))


def print_error(message: str) -> None:
    error_console.print(Text("Error: ", style="bold red") + Text(message))


__all__ = [
    "TAG_STYLES",
    "console",
    "error_console",
    "render_line",
    "print_line",
    "print_warning",
    "print_error",
]
