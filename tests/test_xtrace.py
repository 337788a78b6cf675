"""test_xtrace.py - Tests for the line-by-line execution tracer."""

import io
import sys

from jot.xtrace import XTracer


def _traced_work():
    total = 1
    total += 1
    return total


class TestXTracer:
    def setup_method(self):
        self.stream = io.StringIO()
        self.tracer = XTracer(stream=self.stream)

    def test_traces_lines_of_called_functions(self):
        """Lines executed in called functions are printed with location."""
        self.tracer.enable()
        try:
            _traced_work()
        finally:
            self.tracer.disable()
        first = _traced_work.__code__.co_firstlineno
        output = self.stream.getvalue()
        assert f"+ [test_xtrace.py:{first + 1}] _traced_work(): total = 1\n" in output
        assert f"+ [test_xtrace.py:{first + 3}] _traced_work(): return total\n" in output

    def test_context_manager(self):
        """The with-block itself is traced and tracing stops afterwards."""
        with self.tracer:
            _traced_work()
        assert not self.tracer.active
        before = self.stream.getvalue()
        _traced_work()
        assert self.stream.getvalue() == before
        assert "[xtrace.py:" not in before
        assert "test_context_manager(): _traced_work()" in before

    def test_package_frames_not_traced(self):
        """Code inside the jot package is never printed."""
        self.tracer.enable()
        self.tracer.disable()
        assert "[xtrace.py:" not in self.stream.getvalue()

    def test_disable_restores_previous_trace(self):
        """The trace function active before enable() is put back."""
        previous = sys.gettrace()
        self.tracer.enable()
        assert self.tracer.active
        self.tracer.disable()
        assert sys.gettrace() == previous
        assert not self.tracer.active

    def test_enable_disable_idempotent(self):
        """Repeated enable()/disable() calls are harmless."""
        previous = sys.gettrace()
        self.tracer.disable()
        self.tracer.enable()
        self.tracer.enable()
        self.tracer.disable()
        self.tracer.disable()
        assert sys.gettrace() == previous

    def test_format_line(self):
        """format_line() shows file, line, function and source text."""
        frame = sys._getframe()
        text = self.tracer.format_line(frame)
        line = frame.f_lineno - 1
        assert text == f"+ [test_xtrace.py:{line}] test_format_line(): text = self.tracer.format_line(frame)"
