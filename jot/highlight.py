"""highlight.py - Syntax highlighting of trace excerpts through rich.

The highlighter is an optional enrichment: any failure while building or
rendering the highlighted text yields None, and callers fall back to plain
rendering. It never raises.
"""

import io
import logging
from typing import Optional, Tuple

from rich.console import Console
from rich.syntax import Syntax

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "python"


class Highlighter:
    """Render source text as ANSI-styled, syntax-highlighted text.

    Attributes:
        width: Console width used for rendering, or None to let rich decide.
        color_system: rich color system name, ``"256"`` by default.
    """

    def __init__(self, width: Optional[int] = None, color_system: str = "256") -> None:
        self.width = width
        self.color_system = color_system

    def highlight(
        self,
        text: str,
        language: str = DEFAULT_LANGUAGE,
        theme: str = "monokai",
        line_range: Optional[Tuple[int, int]] = None,
        highlight_line: Optional[int] = None,
    ) -> Optional[str]:
        """Highlight ``text`` and return the styled result.

        When ``line_range`` is given, only that inclusive window of ``text`` is
        shown, with line numbers; ``highlight_line`` marks one line inside it.

        Returns:
            The rendered text without its trailing newline, or None if rich
            could not render it.
        """
        buf = io.StringIO()
        try:
            syntax = Syntax(
                text,
                language,
                theme=theme,
                line_numbers=line_range is not None,
                line_range=line_range,
                highlight_lines={highlight_line} if highlight_line else None,
            )
            console = Console(
                file=buf,
                force_terminal=True,
                color_system=self.color_system,
                width=self.width,
            )
            console.print(syntax)
        except Exception:
            logger.debug("syntax highlighting failed", exc_info=True)
            return None
        return buf.getvalue().rstrip("\n")

    @staticmethod
    def guess_language(path: str, code: str) -> str:
        """Best lexer name for ``path``; falls back to Python."""
        try:
            return Syntax.guess_lexer(path, code=code)
        except Exception:
            return DEFAULT_LANGUAGE
