"""test_styles.py - Unit tests for Styler and level colors.

Covers:
    - disabled Styler returns text untouched
    - enabled Styler emits 256-color ANSI sequences
    - ERROR and CRITICAL are bold red, unknown levels plain white
    - for_stream() disables colors on non-terminal streams
"""

import io

from jot.styles import COLORS, LEVEL_COLORS, Styler, level_style, supports_color


class TestStyler:
    def test_disabled_is_identity(self):
        """A disabled Styler returns the text unchanged."""
        s = Styler(enabled=False)
        assert s.style("hello", "red", bold=True, italic=True) == "hello"
        assert s.level("ERROR") == "ERROR"

    def test_enabled_wraps_in_escape_sequences(self):
        """An enabled Styler wraps text in ANSI codes and a reset."""
        styled = Styler(enabled=True).style("hello", "cyan")
        assert styled.startswith("\x1b[")
        assert "hello" in styled
        assert styled.endswith("\x1b[0m")

    def test_non_string_values_are_converted(self):
        """Numbers are styled as their string form."""
        assert Styler(enabled=False).style(42) == "42"

    def test_extended_palette_uses_256_colors(self):
        """Colors above 15 use the 38;5;N form."""
        assert "38;5;166" in Styler(enabled=True).style("warn", "orange")

    def test_unknown_color_falls_back_to_white(self):
        """Unknown color names render as white."""
        s = Styler(enabled=True)
        assert s.style("x", "no-such-color") == s.style("x", "white")


class TestLevelStyle:
    def test_error_is_bold_red(self):
        """ERROR renders bold red."""
        assert level_style("ERROR") == ("red", True)
        assert "\x1b[1;31mERROR" in Styler(enabled=True).level("ERROR")

    def test_critical_is_bold_red(self):
        """CRITICAL renders bold red."""
        assert level_style("critical") == ("red", True)

    def test_known_levels(self):
        """INFO green, DEBUG blue, WARNING orange, none bold."""
        assert level_style("INFO") == ("green", False)
        assert level_style("DEBUG") == ("blue", False)
        assert level_style("WARNING") == ("orange", False)

    def test_unknown_level_is_plain_white(self):
        """Unrecognised levels are white and not bold."""
        assert level_style("TRACE") == ("white", False)
        s = Styler(enabled=True)
        assert s.level("TRACE") == s.style("TRACE", "white")

    def test_every_level_color_is_in_palette(self):
        """All level colors exist in the palette."""
        assert set(LEVEL_COLORS.values()) <= set(COLORS)


class TestColorSupport:
    def test_string_io_is_not_a_terminal(self):
        """In-memory streams do not support color."""
        assert not supports_color(io.StringIO())

    def test_for_stream_respects_use_colors(self):
        """for_stream() is disabled when colors are not wanted."""
        assert not Styler.for_stream(io.StringIO(), use_colors=False).enabled
        assert not Styler.for_stream(io.StringIO(), use_colors=True).enabled
