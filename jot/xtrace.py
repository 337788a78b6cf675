"""xtrace.py - Line-by-line execution tracing, in the spirit of ``set -x``.

``XTracer`` owns all of its state: whether tracing is active and which trace
function it replaced. ``enable()`` installs a ``sys.settrace`` hook that prints

    + [file.py:42] func(): source text of the line

for every line executed outside the jot package; ``disable()`` puts the
previous trace function back. Both are no-ops when already in that state.
Tracing is per thread, like ``sys.settrace`` itself.
"""

import linecache
import os
import sys
from types import FrameType
from typing import Any, Callable, Optional, TextIO

from .frames import is_package_path
from .highlight import Highlighter
from .paths import resolve_path
from .styles import Styler

TraceFunction = Callable[[FrameType, str, Any], Any]


class XTracer:
    """Explicit, caller-owned execution tracer.

    Attributes:
        stream: Output stream; ``sys.stderr`` at write time when None.
        highlighter: Used to style lines when highlighting is enabled.
        theme: Highlighting theme.
    """

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        use_highlight: bool = False,
        theme: str = "gruvbox-dark",
        highlighter: Optional[Highlighter] = None,
    ) -> None:
        self.stream = stream
        self.use_highlight = use_highlight
        self.theme = theme
        self.highlighter = highlighter or Highlighter()
        self._active = False
        self._saved_trace: Optional[TraceFunction] = None
        self._saved_once = False
        self._traced_frame: Optional[FrameType] = None

    @property
    def active(self) -> bool:
        return self._active

    def enable(self) -> None:
        """Start tracing new calls and the rest of the calling function."""
        self._start(sys._getframe(1))

    def disable(self) -> None:
        """Stop tracing and restore the trace function that was installed before."""
        if not self._active:
            return
        sys.settrace(self._saved_trace)
        if self._traced_frame is not None:
            self._traced_frame.f_trace = None
            self._traced_frame = None
        self._active = False

    def __enter__(self) -> "XTracer":
        self._start(sys._getframe(1))
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.disable()

    def format_line(self, frame: FrameType) -> str:
        """Build the ``+ [file:line] func(): source`` text for ``frame``."""
        code = frame.f_code
        lineno = frame.f_lineno
        source = linecache.getline(code.co_filename, lineno).strip()
        func = "" if code.co_name == "<module>" else f"{code.co_name}(): "
        return f"+ [{os.path.basename(code.co_filename)}:{lineno}] {func}{source}"

    # ---------------------------------------------------------------------- #
    # Trace hooks
    # ---------------------------------------------------------------------- #

    def _start(self, frame: FrameType) -> None:
        if self._active:
            return
        if not self._saved_once:
            self._saved_trace = sys.gettrace()
            self._saved_once = True
        sys.settrace(self._trace_call)
        # settrace() only affects new frames; the caller's frame is hooked directly.
        frame.f_trace = self._trace_line
        self._traced_frame = frame
        self._active = True

    def _trace_call(self, frame: FrameType, event: str, arg: Any) -> Optional[TraceFunction]:
        if event != "call":
            return None
        if is_package_path(resolve_path(frame.f_code.co_filename)):
            return None
        return self._trace_line

    def _trace_line(self, frame: FrameType, event: str, arg: Any) -> Optional[TraceFunction]:
        if event == "line":
            self._write(self.format_line(frame))
        return self._trace_line

    def _write(self, text: str) -> None:
        stream = self.stream or sys.stderr
        if self.use_highlight and Styler.for_stream(stream).enabled:
            styled = self.highlighter.highlight(text, theme=self.theme)
            if styled is not None:
                text = styled
        stream.write(text + "\n")

