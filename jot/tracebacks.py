"""tracebacks.py - Traceback and context strings built from stack walks.

    format_traceback(skip, regex)   Every surviving frame, nearest first, under
                                    "Traceback (most recent call last):".
    format_context(skip, regex)     A single frame under "Context:".
    format_exception(exc)           The traceback carried by an exception.
    format_simple_backtrace(skip)   One compact line per frame, newest first.

Traceback and context output begins with a newline so it can be appended to a
log message as-is. When nothing survives filtering the result is ``""``; a
header is never printed on its own.
"""

import re
from typing import Iterable, List, Optional

from .frames import StackFrame, capture_stack, frames_from_traceback, resolve_frame, walk
from .render import FrameRenderer, PlainFrameRenderer
from .styles import Styler

TRACEBACK_HEADER = "Traceback (most recent call last):"
CONTEXT_HEADER = "Context:"
SIMPLE_BACKTRACE_HEADER = "Simple Backtrace (newest first):"


def render_frames(
    header: str,
    frames: Iterable[StackFrame],
    renderer: Optional[FrameRenderer] = None,
    show_source_line: bool = True,
) -> str:
    """Render ``frames`` beneath ``header`` in the order given, nearest first.

    Returns ``""`` when ``frames`` is empty.
    """
    renderer = renderer or PlainFrameRenderer()
    blocks: List[str] = [renderer.render(frame, show_source_line) for frame in frames]
    if not blocks:
        return ""
    return renderer.render_header(header) + "".join("\n" + block for block in blocks)


def format_traceback(
    skip_frames: int = 0,
    ignore_regex: Optional[str] = None,
    renderer: Optional[FrameRenderer] = None,
    show_source_line: bool = True,
) -> str:
    """Render the current call stack, starting at the caller.

    Args:
        skip_frames: Additional frames to skip above the caller.
        ignore_regex: Frames whose source path matches are left out.
        renderer: Rendering strategy; plain and uncolored by default.
        show_source_line: Show the call line's source text (plain strategy).

    Returns:
        The traceback text, or ``""`` if no frame survives.
    """
    frames = walk(1 + skip_frames, ignore_regex)
    return render_frames(TRACEBACK_HEADER, frames, renderer, show_source_line)


def format_context(
    skip_frames: int = 0,
    ignore_regex: Optional[str] = None,
    renderer: Optional[FrameRenderer] = None,
    show_source_line: bool = True,
) -> str:
    """Render a single frame as context.

    The frame examined sits one level deeper than ``format_traceback``'s
    starting point: with ``skip_frames=0`` it is the caller of the function
    that called ``format_context``, since context is requested on behalf of a
    logging call one level removed from the user's code.

    Returns:
        The context text, or ``""`` if the frame is missing or filtered out.
    """
    frame = resolve_frame(1 + skip_frames + 1)
    if frame is None:
        return ""
    if ignore_regex and re.search(ignore_regex, frame.source_path):
        return ""
    return render_frames(CONTEXT_HEADER, [frame], renderer, show_source_line)


def format_exception(
    exc: BaseException,
    renderer: Optional[FrameRenderer] = None,
    show_source_line: bool = True,
) -> str:
    """Render the traceback carried by ``exc`` followed by ``Type: message``."""
    frames = frames_from_traceback(exc.__traceback__)
    summary = f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__
    return render_frames(TRACEBACK_HEADER, frames, renderer, show_source_line) + "\n" + summary


def format_simple_backtrace(
    skip_frames: int = 0,
    styler: Optional[Styler] = None,
    frames: Optional[List[StackFrame]] = None,
) -> str:
    """One ``  <line> <function> <path>`` line per frame, newest first.

    Args:
        skip_frames: Frames to skip above the caller when ``frames`` is None.
        styler: Styles the header; plain when omitted.
        frames: Pre-captured frames (nearest first) to use instead of the
            current stack, e.g. from an exception traceback.

    Returns:
        The backtrace, or ``""`` when there are no frames.
    """
    if frames is None:
        frames = capture_stack(1 + skip_frames)
    if not frames:
        return ""
    styler = styler or Styler(enabled=False)
    lines = [styler.style(SIMPLE_BACKTRACE_HEADER, "white", bold=True)]
    lines.extend(
        f"  {frame.call_line} {frame.function_name} {frame.source_path}"
        for frame in frames
    )
    return "\n".join(lines)
