"""render.py - Turning a StackFrame into a display block.

Two strategies share the FrameRenderer interface:

    PlainFrameRenderer      ``File "<path>", line N, in func`` plus, optionally,
                            the source text of the call line. Segments are
                            colored by role through a Styler (a disabled Styler
                            yields plain text).
    HighlightFrameRenderer  The same context line plus a numbered source
                            excerpt, both syntax-highlighted through rich. Any
                            highlighting failure falls back to the plain
                            strategy for that block.

Blocks never end with a newline; the traceback builder joins them.
"""

import linecache
from abc import ABC, abstractmethod
from typing import Optional, Tuple

from .frames import StackFrame
from .highlight import Highlighter
from .paths import FRAME_MAX_COMPONENTS, shorten_path
from .styles import Styler

PREVIEW_WINDOW = 10

DEFAULT_CONTEXT_THEME = "monokai"
DEFAULT_LINES_THEME = "dracula"


def read_source_line(path: str, lineno: int) -> str:
    """Return the stripped source text of ``lineno`` in ``path``.

    Unreadable files and out-of-range lines give a placeholder instead.
    """
    line = linecache.getline(path, lineno)
    if not line:
        return f"<Source line not readable or file not found: {path}>"
    return line.strip()


class FrameRenderer(ABC):
    """Interface for frame and header rendering strategies."""

    @abstractmethod
    def render(self, frame: StackFrame, show_source_line: bool = True) -> str:
        """Render one frame as a block of text (no trailing newline)."""

    @abstractmethod
    def render_header(self, text: str) -> str:
        """Render a section header such as ``Context:``.

        The result starts with a newline so it can follow a log message.
        """


class PlainFrameRenderer(FrameRenderer):
    """Python-traceback style frames, colored per role when the Styler allows.

    Roles: literal keywords white, path cyan, line number yellow, function
    bold green, headers bold white.
    """

    def __init__(
        self,
        styler: Optional[Styler] = None,
        path_components: int = FRAME_MAX_COMPONENTS,
    ) -> None:
        self.styler = styler or Styler(enabled=False)
        self.path_components = path_components

    def render(self, frame: StackFrame, show_source_line: bool = True) -> str:
        s = self.styler
        short = shorten_path(frame.source_path, self.path_components)
        text = "  {} {}, {} {}, {} {}".format(
            s.style("File", "white"),
            s.style(f'"{short}"', "cyan"),
            s.style("line", "white"),
            s.style(frame.call_line, "yellow"),
            s.style("in", "white"),
            s.style(frame.function_name, "green", bold=True),
        )
        if show_source_line:
            text += "\n    " + read_source_line(frame.source_path, frame.call_line)
        return text

    def render_header(self, text: str) -> str:
        return "\n" + self.styler.style(text, "white", bold=True)


class HighlightFrameRenderer(FrameRenderer):
    """Frames rendered as highlighted source excerpts.

    The excerpt window runs from the function's definition line (or
    ``PREVIEW_WINDOW`` lines before the call when the definition is unknown)
    to the call line, which is highlighted.

    Attributes:
        highlighter: The Highlighter doing the actual styling.
        context_theme: Theme for the ``File ..., line ..., in ...`` line.
        lines_theme: Theme for the source excerpt and headers.
        fallback: Renderer used whenever highlighting fails.
    """

    def __init__(
        self,
        highlighter: Optional[Highlighter] = None,
        context_theme: str = DEFAULT_CONTEXT_THEME,
        lines_theme: str = DEFAULT_LINES_THEME,
        fallback: Optional[FrameRenderer] = None,
        path_components: int = FRAME_MAX_COMPONENTS,
    ) -> None:
        self.highlighter = highlighter or Highlighter()
        self.context_theme = context_theme
        self.lines_theme = lines_theme
        self.fallback = fallback or PlainFrameRenderer(path_components=path_components)
        self.path_components = path_components

    def context_line(self, frame: StackFrame) -> str:
        short = shorten_path(frame.source_path, self.path_components)
        if frame.def_line is not None:
            short = f"{short}:{frame.def_line}"
        return f'File "{short}", line {frame.call_line}, in {frame.function_name}'

    def line_range(self, frame: StackFrame) -> Tuple[int, int]:
        """Inclusive ``(start, end)`` excerpt window for ``frame``."""
        if frame.def_line is not None:
            start = frame.def_line
        else:
            start = frame.call_line - PREVIEW_WINDOW
        start = max(start, 1)
        end = max(frame.call_line, start)
        return start, end

    def render(self, frame: StackFrame, show_source_line: bool = True) -> str:
        code = "".join(linecache.getlines(frame.source_path))
        if not code:
            return self.fallback.render(frame, show_source_line)

        context = self.highlighter.highlight(
            self.context_line(frame), theme=self.context_theme
        )
        lines = self.highlighter.highlight(
            code,
            language=self.highlighter.guess_language(frame.source_path, code),
            theme=self.lines_theme,
            line_range=self.line_range(frame),
            highlight_line=frame.call_line,
        )
        if context is None or lines is None:
            return self.fallback.render(frame, show_source_line)
        return f"   {context}\n{lines}"

    def render_header(self, text: str) -> str:
        styled = self.highlighter.highlight(text, theme=self.lines_theme)
        if styled is None:
            return self.fallback.render_header(text)
        return "\n   " + styled


def make_renderer(
    use_colors: bool = False,
    use_highlight: bool = False,
    context_theme: str = DEFAULT_CONTEXT_THEME,
    lines_theme: str = DEFAULT_LINES_THEME,
    highlighter: Optional[Highlighter] = None,
) -> FrameRenderer:
    """Select the rendering strategy.

    Highlighting produces escape sequences, so it is only chosen together with
    colors. With colors off the result is a PlainFrameRenderer whose output
    contains no escape sequences at all.
    """
    plain = PlainFrameRenderer(styler=Styler(enabled=use_colors))
    if use_colors and use_highlight:
        return HighlightFrameRenderer(
            highlighter=highlighter,
            context_theme=context_theme,
            lines_theme=lines_theme,
            fallback=plain,
        )
    return plain
