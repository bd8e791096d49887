from __future__ import annotations

"""
Console Output Sink.

Implements the print_line(text, style) interface consumed by the driver
and resolver, rendering StyleConfig options through rich.
"""

from typing import Any, Optional

from rich.console import Console
from rich.errors import StyleSyntaxError
from rich.style import Style

from hearth.domain.errors import InvalidArgumentError
from hearth.domain.models import StyleConfig


def to_rich_style(style: StyleConfig) -> Optional[Style]:
    """
    Convert a StyleConfig into a rich Style.

    Raises:
        InvalidArgumentError: If a color or attribute is not recognized.
    """
    parts = []
    if style.attribute:
        parts.append(style.attribute)
    if style.foreground:
        parts.append(style.foreground)
    if style.background:
        parts.append(f"on {style.background}")
    if not parts:
        return None

    definition = " ".join(parts)
    try:
        return Style.parse(definition)
    except StyleSyntaxError as e:
        raise InvalidArgumentError(f"Invalid console style '{definition}': {e}") from e


class ConsoleOutput:
    """Terminal sink writing one styled line per call."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self.console = console if console is not None else Console(highlight=False)

    def print_line(self, text: str, style: Any = None) -> "ConsoleOutput":
        rich_style = to_rich_style(StyleConfig.from_value(style))
        self.console.print(text, style=rich_style, markup=False, highlight=False)
        return self
