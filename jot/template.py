"""template.py - Placeholder substitution for text log lines.

A template is free text containing any of the placeholders

    %timestamp%  %level%  %script%  %func_loc%  %func%  %line%  %message%

Substitution happens in a single pass over the template, so values inserted
for one placeholder (the message in particular) are never scanned for further
placeholders. Unknown ``%...%`` sequences are left as they are.
"""

import re
from typing import Callable, Dict, Optional

from .event import LogEvent
from .styles import Styler

DEFAULT_CONSOLE_TEMPLATE = (
    "(%script%) [%timestamp%] [%level%] (%func_loc%) (%func%│%line%) %message%"
)
DEFAULT_FILE_TEMPLATE = "%timestamp% [%level%] %script%:%func%@%line% (%func_loc%): %message%"

# func_loc must be tried before func.
_PLACEHOLDER_RE = re.compile(r"%(timestamp|level|script|func_loc|func|line|message)%")

StyleFn = Callable[[str, str], str]


def console_style_fn(styler: Styler) -> StyleFn:
    """Return a style function applying the console colors per field.

    The message is returned unchanged: it may already contain styled
    traceback or context text.
    """

    def style(field: str, value: str) -> str:
        if field == "timestamp":
            return styler.style(value, "white", italic=True)
        if field == "level":
            return styler.level(value)
        if field == "script":
            return styler.style(value, "cyan")
        if field == "func_loc":
            return styler.style(value, "magenta")
        if field in ("func", "line"):
            return styler.style(value, "white")
        return value

    return style


def event_fields(event: LogEvent, message: str) -> Dict[str, str]:
    return {
        "timestamp": event.timestamp,
        "level": event.level,
        "script": event.script,
        "func_loc": event.func_def_loc,
        "func": event.function,
        "line": str(event.line),
        "message": message,
    }


def render_template(
    template: str,
    event: LogEvent,
    style_fn: Optional[StyleFn] = None,
) -> str:
    """Render ``event`` through ``template``.

    Args:
        template: Template text with placeholders.
        event: The event supplying the values.
        style_fn: Console rendering when given; each non-message value is
            passed through it and the console attachment is used. Without it
            raw values and the plain attachment are substituted.

    Returns:
        The rendered line, without a trailing newline.

    Example:
        >>> ev = LogEvent("t", "INFO", "app.py", "main", 3, "app.py", "hi")
        >>> render_template("[%level%] %message% %unknown%", ev)
        '[INFO] hi %unknown%'
    """
    if style_fn is None:
        values = event_fields(event, event.plain_message)
    else:
        values = event_fields(event, event.console_message)
        for field, value in values.items():
            if field != "message":
                values[field] = style_fn(field, value)
    return _PLACEHOLDER_RE.sub(lambda match: values[match.group(1)], template)
