"""test_event.py - Unit tests for LogEvent and its JSON form."""

import json

from jot.event import LogEvent


def _event(message="hello", **kwargs) -> LogEvent:
    return LogEvent("2024-01-01T00:00:00", "INFO", "app.py", "main", 7, "app.py:3", message, **kwargs)


class TestLogEvent:
    def test_json_keys_in_order(self):
        """The JSON object has the seven fields in a fixed order."""
        keys = list(json.loads(_event().to_json()))
        assert keys == [
            "timestamp",
            "level",
            "script",
            "function",
            "line",
            "func_def_loc",
            "message",
        ]

    def test_json_is_one_compact_line(self):
        """JSON output has no newline and no padding."""
        text = _event("a\nb").to_json()
        assert "\n" not in text
        assert '"line":7' in text

    def test_json_round_trips_special_characters(self):
        """Quotes, backslashes and control characters survive json.loads()."""
        message = 'say "hi" \\ tab\tbell\x07 nl\n unicode é'
        assert json.loads(_event(message).to_json())["message"] == message

    def test_json_uses_plain_attachment(self):
        """The JSON message includes the plain attachment, never the styled one."""
        event = _event(attachment="\x1b[31mX\x1b[0m", plain_attachment="\nTraceback")
        data = json.loads(event.to_json())
        assert data["message"] == "hello\nTraceback"
        assert "\x1b" not in event.to_json()

    def test_messages(self):
        """console_message and plain_message append their attachments."""
        event = _event(attachment="+c", plain_attachment="+p")
        assert event.console_message == "hello+c"
        assert event.plain_message == "hello+p"
