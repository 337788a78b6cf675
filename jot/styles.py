"""styles.py - Terminal color capability and ANSI styling of text segments.

Colors are addressed by name (``"cyan"``, ``"orange"``...) and rendered as
256-color ANSI sequences through ``rich.style.Style``. A ``Styler`` that is not
enabled returns text untouched, which is how file, syslog and JSON output stay
free of escape sequences.
"""

import sys
from typing import Optional, TextIO, Tuple

from rich.color import ColorSystem
from rich.console import Console
from rich.style import Style

# Indexes follow the classic `tput setaf` palette.
COLORS = {
    "black": "color(0)",
    "red": "color(1)",
    "green": "color(2)",
    "yellow": "color(3)",
    "blue": "color(4)",
    "magenta": "color(5)",
    "cyan": "color(6)",
    "white": "color(7)",
    "dark_blue": "color(33)",
    "user_cyan_37": "color(37)",
    "purple": "color(125)",
    "power_blue": "color(153)",
    "orange": "color(166)",
    "lime_yellow": "color(190)",
}

DEFAULT_COLOR = "white"

LEVEL_COLORS = {
    "INFO": "green",
    "DEBUG": "blue",
    "WARNING": "orange",
    "ERROR": "red",
    "CRITICAL": "red",
}
BOLD_LEVELS = frozenset({"ERROR", "CRITICAL"})


def supports_color(stream: Optional[TextIO] = None) -> bool:
    """Return True if ``stream`` (default stdout) is a color-capable terminal."""
    console = Console(file=stream or sys.stdout)
    return console.color_system is not None and not console.no_color


def level_style(level: str) -> Tuple[str, bool]:
    """Return ``(color_name, bold)`` for a level name; unknown levels are white."""
    level = level.upper()
    return LEVEL_COLORS.get(level, DEFAULT_COLOR), level in BOLD_LEVELS


class Styler:
    """Applies named colors and attributes to text when enabled.

    Example:
        >>> Styler(enabled=False).style("x", "red", bold=True)
        'x'
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled

    @classmethod
    def for_stream(cls, stream: Optional[TextIO] = None, use_colors: bool = True) -> "Styler":
        """Build a Styler that is enabled only if colors are wanted and supported."""
        return cls(enabled=use_colors and supports_color(stream))

    def style(
        self,
        text: object,
        color: str = DEFAULT_COLOR,
        bold: bool = False,
        italic: bool = False,
    ) -> str:
        text = str(text)
        if not self.enabled:
            return text
        ansi_color = COLORS.get(color, COLORS[DEFAULT_COLOR])
        style = Style(color=ansi_color, bold=bold or None, italic=italic or None)
        return style.render(text, color_system=ColorSystem.EIGHT_BIT)

    def level(self, level: str) -> str:
        """Style a level name with its level color."""
        color, bold = level_style(level)
        return self.style(level, color, bold=bold)
