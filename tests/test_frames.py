"""test_frames.py - Unit tests for stack snapshots and the stack walker.

Covers:
    - resolve_frame() reports the caller's function, file and call line
    - resolve_frame() reports the definition line from the code object
    - resolve_frame() returns None past the top of the stack
    - module-level code is reported as '(main)' without a definition line
    - walk() yields max(0, depth - skip) frames, nearest first
    - walk() marks only the oldest frame as the boundary
    - walk() drops frames whose source path matches the ignore regex
    - walk() snapshots eagerly and the iterator is single-use
    - frames_from_traceback() orders frames nearest (raising) first
"""

import os
import sys

from jot.frames import (
    MAIN_FUNCTION,
    PACKAGE_DIR,
    RUNPY_PATH,
    StackFrame,
    capture_stack,
    entry_index,
    first_external_index,
    frames_from_traceback,
    is_bootstrap_path,
    is_package_path,
    mark_boundary,
    package_source_regex,
    resolve_frame,
    walk,
)

THIS_FILE = os.path.realpath(__file__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _outer():
    return _inner()


def _inner():
    return resolve_frame(1)


def _recurse(n, fn):
    if n == 0:
        return fn()
    return _recurse(n - 1, fn)


# ---------------------------------------------------------------------------
# resolve_frame()
# ---------------------------------------------------------------------------


class TestResolveFrame:
    def test_depth_zero_is_caller(self):
        """depth=0 describes the function calling resolve_frame()."""
        line = sys._getframe().f_lineno + 1
        frame = resolve_frame(0)
        assert frame.function_name.endswith("test_depth_zero_is_caller")
        assert frame.source_path == THIS_FILE
        assert frame.call_line == line

    def test_depth_one_is_callers_caller(self):
        """depth=1 describes the caller of the calling function."""
        frame = _outer()
        assert frame.function_name == "_outer"
        assert frame.def_line == _outer.__code__.co_firstlineno

    def test_def_line_from_code_object(self):
        """def_line is the first line of the function's code object."""
        frame = resolve_frame(0)
        expected = TestResolveFrame.test_def_line_from_code_object.__code__.co_firstlineno
        assert frame.def_line == expected

    def test_too_deep_returns_none(self):
        """Depths past the top of the stack return None."""
        assert resolve_frame(100000) is None

    def test_negative_depth_returns_none(self):
        """Negative depths return None."""
        assert resolve_frame(-1) is None

    def test_module_level_reported_as_main(self):
        """Code running at module level is named '(main)' with no def_line."""
        namespace = {"resolve_frame": resolve_frame}
        exec(compile("frame = resolve_frame(0)", "<snippet>", "exec"), namespace)
        frame = namespace["frame"]
        assert frame.function_name == MAIN_FUNCTION
        assert frame.def_line is None
        assert frame.source_path == "<snippet>"


# ---------------------------------------------------------------------------
# walk()
# ---------------------------------------------------------------------------


class TestWalk:
    def test_frame_count_matches_depth_minus_skip(self):
        """walk(k) yields max(0, d - k) frames for a stack of depth d."""
        depth = len(capture_stack())
        for skip in (0, 1, 3, depth - 1, depth, depth + 5):
            assert len(list(walk(skip))) == max(0, depth - skip)

    def test_nearest_frame_first(self):
        """The first frame is the caller of walk()."""
        first = next(walk())
        assert first.function_name.endswith("test_nearest_frame_first")

    def test_only_last_frame_marked(self):
        """Exactly the oldest frame carries the boundary marker."""
        frames = list(walk())
        boundary = [frame for frame in frames if frame.is_boundary]
        assert len(boundary) <= 1
        last = frames[-1]
        if last.function_name != MAIN_FUNCTION:
            assert last.is_boundary
            assert last.function_name.startswith("<") and last.function_name.endswith(">")
            assert last.def_line is None
        assert not any(frame.is_boundary for frame in frames[:-1])

    def test_recursion_frames_not_marked(self):
        """Recursive frames in the middle of the stack are never wrapped."""
        frames = _recurse(5, lambda: list(walk(1)))
        names = [frame.function_name for frame in frames[:6]]
        assert names == ["_recurse"] * 6

    def test_regex_drops_matching_frames(self):
        """Frames whose path matches the regex are dropped."""
        frames = list(walk(0, r"test_frames\.py$"))
        assert all(frame.source_path != THIS_FILE for frame in frames)

    def test_regex_matching_everything_yields_nothing(self):
        """A regex matching every path leaves an empty walk."""
        assert list(walk(0, ".")) == []

    def test_empty_regex_disables_filtering(self):
        """An empty regex behaves like no regex."""
        assert len(list(walk(0, ""))) == len(list(walk(0)))

    def test_iterator_is_single_use(self):
        """A walk can be consumed once."""
        it = walk()
        assert list(it)
        assert list(it) == []

    def test_snapshot_taken_at_call_time(self):
        """Consuming the iterator elsewhere still reflects the original stack."""
        it = walk()
        frames = _recurse(3, lambda: list(it))
        assert frames[0].function_name.endswith("test_snapshot_taken_at_call_time")


# ---------------------------------------------------------------------------
# Boundary marking and package helpers
# ---------------------------------------------------------------------------


class TestMarkBoundary:
    def test_wraps_name(self):
        """Function names are wrapped in angle brackets."""
        frame = mark_boundary(StackFrame("run", "/x.py", 3, 1))
        assert frame.function_name == "<run>"
        assert frame.def_line is None
        assert frame.is_boundary

    def test_main_not_wrapped(self):
        """'(main)' is never wrapped."""
        frame = StackFrame(MAIN_FUNCTION, "/x.py", 3)
        assert mark_boundary(frame) is frame

    def test_not_wrapped_twice(self):
        """Marking a boundary frame again changes nothing."""
        once = mark_boundary(StackFrame("run", "/x.py", 3, 1))
        assert mark_boundary(once).function_name == "<run>"


class TestPackageHelpers:
    def test_package_path_detection(self):
        """Files under the jot package are recognised as its own."""
        assert is_package_path(os.path.join(PACKAGE_DIR, "core.py"))
        assert not is_package_path(THIS_FILE)

    def test_first_external_index(self):
        """The first frame outside the package is found."""
        frames = [
            StackFrame("a", os.path.join(PACKAGE_DIR, "core.py"), 1),
            StackFrame("b", THIS_FILE, 2),
        ]
        assert first_external_index(frames) == 1
        assert first_external_index(frames[:1]) is None

    def test_package_regex(self):
        """The package regex matches package files only."""
        import re

        pattern = package_source_regex()
        assert re.search(pattern, os.path.join(PACKAGE_DIR, "frames.py"))
        assert not re.search(pattern, THIS_FILE)

    def test_bootstrap_paths(self):
        """The module runner and frozen modules count as bootstrap code."""
        assert is_bootstrap_path("<frozen runpy>")
        assert is_bootstrap_path(RUNPY_PATH)
        assert not is_bootstrap_path(THIS_FILE)
        assert not is_bootstrap_path("<string>")

    def test_bootstrap_frames_are_not_external(self):
        """Frames of ``python -m`` start-up are skipped like package frames."""
        frames = [
            StackFrame("main", os.path.join(PACKAGE_DIR, "cli.py"), 53, 35),
            StackFrame(MAIN_FUNCTION, os.path.join(PACKAGE_DIR, "__main__.py"), 5),
            StackFrame("_run_code", "<frozen runpy>", 88, 65),
            StackFrame("_run_module_as_main", "<frozen runpy>", 198, 173),
        ]
        assert first_external_index(frames) is None
        assert entry_index(frames) == 1
        assert entry_index(frames[2:]) is None

    def test_package_regex_covers_bootstrap(self):
        """The package regex also drops the module runner's frames."""
        import re

        pattern = package_source_regex()
        assert re.search(pattern, "<frozen runpy>")
        assert re.search(pattern, RUNPY_PATH)
        assert not re.search(pattern, "<stdin>")


class TestFramesFromTraceback:
    def test_raising_frame_first(self):
        """The frame that raised comes first."""

        def fail():
            raise RuntimeError("boom")

        try:
            fail()
        except RuntimeError as exc:
            frames = frames_from_traceback(exc.__traceback__)

        assert frames[0].function_name.endswith("fail")
        assert frames[-1].function_name.endswith("test_raising_frame_first")

    def test_none_traceback(self):
        """No traceback gives no frames."""
        assert frames_from_traceback(None) == []
