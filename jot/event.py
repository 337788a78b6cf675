"""event.py - The LogEvent value and its JSON form."""

import json
from dataclasses import dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class LogEvent:
    """Everything a sink needs to render one log call.

    ``attachment`` is the traceback/context text rendered for the console
    (possibly styled); ``plain_attachment`` is the same text rendered without
    colors or highlighting for file, syslog and JSON output.
    """

    timestamp: str
    level: str
    script: str
    function: str
    line: int
    func_def_loc: str
    message: str
    attachment: str = ""
    plain_attachment: str = ""

    @property
    def console_message(self) -> str:
        return self.message + self.attachment

    @property
    def plain_message(self) -> str:
        return self.message + self.plain_attachment

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "level": self.level,
            "script": self.script,
            "function": self.function,
            "line": self.line,
            "func_def_loc": self.func_def_loc,
            "message": self.plain_message,
        }

    def to_json(self) -> str:
        """Serialise as one compact JSON line (no trailing newline).

        Control characters, quotes and backslashes in string fields are
        escaped, so the line always parses back to the original values.
        """
        return json.dumps(self.to_dict(), ensure_ascii=False, separators=(",", ":"))
