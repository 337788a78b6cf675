"""test_template.py - Unit tests for the template engine.

Covers:
    - every placeholder is substituted
    - unknown placeholders stay literal
    - placeholders inside the message are not expanded
    - console rendering styles fields and uses the console attachment
    - plain rendering never contains escape sequences
"""

from jot.event import LogEvent
from jot.styles import Styler
from jot.template import (
    DEFAULT_CONSOLE_TEMPLATE,
    DEFAULT_FILE_TEMPLATE,
    console_style_fn,
    render_template,
)


def _event(**changes) -> LogEvent:
    fields = dict(
        timestamp="2024-05-01T12:00:00",
        level="ERROR",
        script="backup.py",
        function="run",
        line=42,
        func_def_loc=".../app/backup.py:30",
        message="disk full",
    )
    fields.update(changes)
    return LogEvent(**fields)


class TestRenderTemplate:
    def test_all_placeholders(self):
        """Every known placeholder is replaced by its value."""
        text = render_template(
            "%timestamp%|%level%|%script%|%func_loc%|%func%|%line%|%message%", _event()
        )
        assert text == "2024-05-01T12:00:00|ERROR|backup.py|.../app/backup.py:30|run|42|disk full"

    def test_default_file_template(self):
        """The default file template produces the documented layout."""
        text = render_template(DEFAULT_FILE_TEMPLATE, _event())
        assert text == (
            "2024-05-01T12:00:00 [ERROR] backup.py:run@42 (.../app/backup.py:30): disk full"
        )

    def test_default_console_template_plain(self):
        """The console template renders without styling when no style_fn is given."""
        text = render_template(DEFAULT_CONSOLE_TEMPLATE, _event())
        assert text == (
            "(backup.py) [2024-05-01T12:00:00] [ERROR] (.../app/backup.py:30) (run│42) disk full"
        )

    def test_unknown_placeholder_left_alone(self):
        """Unrecognised %name% sequences remain in the output."""
        assert render_template("%level% %host% %", _event()) == "ERROR %host% %"

    def test_message_not_rescanned(self):
        """A message containing placeholders is inserted literally."""
        text = render_template("%message% @ %line%", _event(message="%level% at %line%"))
        assert text == "%level% at %line% @ 42"

    def test_plain_uses_plain_attachment(self):
        """Without a style function the plain attachment is appended."""
        event = _event(attachment="\x1b[1mstyled\x1b[0m", plain_attachment="\nplain")
        assert render_template("%message%", event) == "disk full\nplain"


class TestConsoleStyling:
    def setup_method(self):
        self.styler = Styler(enabled=True)
        self.style_fn = console_style_fn(self.styler)

    def test_level_is_bold_red_for_error(self):
        """The ERROR level is rendered bold red."""
        text = render_template("[%level%] %message%", _event(), self.style_fn)
        assert text == f"[{self.styler.level('ERROR')}] disk full"
        assert "\x1b[1;31mERROR" in text

    def test_script_is_cyan(self):
        """The script name is styled cyan."""
        text = render_template("%script%", _event(), self.style_fn)
        assert text == self.styler.style("backup.py", "cyan")

    def test_message_not_styled(self):
        """The message is inserted as-is."""
        assert render_template("%message%", _event(), self.style_fn) == "disk full"

    def test_console_uses_console_attachment(self):
        """Console rendering appends the styled attachment."""
        event = _event(attachment="\nSTYLED", plain_attachment="\nplain")
        assert render_template("%message%", event, self.style_fn) == "disk full\nSTYLED"

    def test_disabled_styler_is_plain(self):
        """A disabled styler renders the same text as no styling."""
        plain_fn = console_style_fn(Styler(enabled=False))
        event = _event(attachment="\nctx", plain_attachment="\nctx")
        assert render_template(DEFAULT_CONSOLE_TEMPLATE, event, plain_fn) == render_template(
            DEFAULT_CONSOLE_TEMPLATE, event
        )
