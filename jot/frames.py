"""frames.py - Call-stack snapshots as immutable StackFrame values.

This module is the only place that touches the interpreter's frame objects.
Everything downstream (renderers, the traceback builder, the event assembler)
works on ``StackFrame`` values, so a snapshot can be inspected, filtered and
rendered without holding references to live frames.

    resolve_frame(depth)   One frame at ``depth`` above the caller, or None.
    capture_stack(skip)    Every frame above the caller, nearest first.
    walk(skip, regex)      A one-shot iterator over a fresh snapshot that marks
                           the oldest frame as the boundary and drops frames
                           whose source path matches ``regex``.

The definition line of a function is read from its code object
(``co_firstlineno``). Module-level code has no definition site and is reported
under the name ``"(main)"``.
"""

import os
import re
import runpy
import sys
from dataclasses import dataclass, replace
from types import FrameType, TracebackType
from typing import Iterator, List, Optional, Union

from .paths import resolve_path

MAIN_FUNCTION = "(main)"

_MODULE_CODE_NAME = "<module>"

# Resolved directory of the jot package; frames from files under it are ours.
PACKAGE_DIR = resolve_path(os.path.dirname(os.path.abspath(__file__)))

# Frames of the module runner sit below ``python -m`` programs; at interpreter
# start-up they come from frozen modules ("<frozen runpy>").
RUNPY_PATH = resolve_path(runpy.__file__)
_FROZEN_PREFIX = "<frozen "


@dataclass(frozen=True)
class StackFrame:
    """One entry of a captured call stack.

    Attributes:
        function_name: Qualified function name, ``"(main)"`` for module-level
            code, or ``"<name>"`` when the frame is the oldest of a walk.
        source_path: Resolved path of the file containing the call site.
        call_line: Line number of the call site (always >= 1).
        def_line: Line where the function is defined, or None for module-level
            and boundary frames.
        is_boundary: True when the name carries the ``<...>`` boundary wrapping.
    """

    function_name: str
    source_path: str
    call_line: int
    def_line: Optional[int] = None
    is_boundary: bool = False


def _source_path(filename: str) -> str:
    # Pseudo files such as "<string>" or "<stdin>" have nothing to resolve.
    if filename.startswith("<") and filename.endswith(">"):
        return filename
    return resolve_path(filename)


def _to_stack_frame(frame: FrameType, lineno: Optional[int] = None) -> StackFrame:
    code = frame.f_code
    call_line = max(lineno or frame.f_lineno or code.co_firstlineno, 1)
    if code.co_name == _MODULE_CODE_NAME:
        return StackFrame(MAIN_FUNCTION, _source_path(code.co_filename), call_line)
    name = getattr(code, "co_qualname", code.co_name)
    return StackFrame(
        name, _source_path(code.co_filename), call_line, code.co_firstlineno
    )


def resolve_frame(depth: int = 0) -> Optional[StackFrame]:
    """Resolve the frame ``depth`` levels above the caller.

    ``depth=0`` is the function calling ``resolve_frame``. Returns None when
    the stack is shallower than ``depth`` instead of raising.
    """
    if depth < 0:
        return None
    try:
        frame = sys._getframe(depth + 1)
    except ValueError:
        return None
    return _to_stack_frame(frame)


def capture_stack(skip: int = 0) -> List[StackFrame]:
    """Snapshot the current call stack, nearest frame first.

    Args:
        skip: Number of frames to leave out, counted from the caller of
            ``capture_stack`` (which is depth 0).

    Returns:
        A new list of StackFrame values; empty if ``skip`` exceeds the depth.
    """
    frames: List[StackFrame] = []
    if skip < 0:
        skip = 0
    try:
        frame: Optional[FrameType] = sys._getframe(skip + 1)
    except ValueError:
        return frames
    while frame is not None:
        frames.append(_to_stack_frame(frame))
        frame = frame.f_back
    return frames


def frames_from_traceback(tb: Optional[TracebackType]) -> List[StackFrame]:
    """Convert an exception traceback into StackFrames, nearest (raising) first."""
    frames: List[StackFrame] = []
    while tb is not None:
        frames.append(_to_stack_frame(tb.tb_frame, tb.tb_lineno))
        tb = tb.tb_next
    frames.reverse()
    return frames


def mark_boundary(frame: StackFrame) -> StackFrame:
    """Return ``frame`` wrapped as ``<name>`` unless it is ``(main)``."""
    if frame.function_name == MAIN_FUNCTION or frame.is_boundary:
        return frame
    return replace(
        frame,
        function_name=f"<{frame.function_name}>",
        def_line=None,
        is_boundary=True,
    )


def walk(
    skip: int = 0,
    ignore_source_regex: Union[str, re.Pattern, None] = None,
) -> Iterator[StackFrame]:
    """Walk the current call stack starting ``skip`` frames above the caller.

    The snapshot is taken immediately; the returned iterator only replays it,
    once. The oldest frame of the snapshot is passed through
    ``mark_boundary`` before filtering, so if it is filtered out no frame in
    the output carries the boundary marker.

    Args:
        skip: Frames to skip, counted from the caller of ``walk`` (depth 0).
        ignore_source_regex: Frames whose ``source_path`` matches this pattern
            (``re.search``) are dropped. Empty or None disables filtering.

    Returns:
        An iterator of StackFrame values, nearest first.
    """
    frames = capture_stack(skip + 1)
    pattern = re.compile(ignore_source_regex) if ignore_source_regex else None
    return _iter_frames(frames, pattern)


def _iter_frames(
    frames: List[StackFrame], pattern: Optional[re.Pattern]
) -> Iterator[StackFrame]:
    last = len(frames) - 1
    for index, frame in enumerate(frames):
        if index == last:
            frame = mark_boundary(frame)
        if pattern is not None and pattern.search(frame.source_path):
            continue
        yield frame


def is_package_path(path: str) -> bool:
    """True when ``path`` (already resolved) lies inside the jot package."""
    return path == PACKAGE_DIR or path.startswith(PACKAGE_DIR + os.sep)


def is_bootstrap_path(path: str) -> bool:
    """True for the interpreter's module runner (``python -m``) and frozen modules."""
    return path.startswith(_FROZEN_PREFIX) or path == RUNPY_PATH


def first_external_index(frames: List[StackFrame]) -> Optional[int]:
    """Index of the first frame that is neither jot's own nor bootstrap code."""
    for index, frame in enumerate(frames):
        path = frame.source_path
        if not is_package_path(path) and not is_bootstrap_path(path):
            return index
    return None


def entry_index(frames: List[StackFrame]) -> Optional[int]:
    """Index of the outermost frame that is not bootstrap code.

    Under ``python -m jot`` this is jot's own ``__main__`` module, which then
    stands in as the caller.
    """
    for index in range(len(frames) - 1, -1, -1):
        if not is_bootstrap_path(frames[index].source_path):
            return index
    return None


def package_source_regex() -> str:
    """Regex matching source paths that never belong to the calling program.

    That is jot's own modules plus the module runner and frozen modules.
    """
    return "|".join(
        (
            "^" + re.escape(PACKAGE_DIR + os.sep),
            "^" + re.escape(_FROZEN_PREFIX),
            "^" + re.escape(RUNPY_PATH) + "$",
        )
    )
