"""hooks.py - Exit reporting for scripts that die with an error.

``exit_handler()`` renders a short post-mortem block on stderr: a banner with
the exit code, the last line of an optional stderr log file, and a simple
backtrace. ``install_exit_handler()`` wires it into ``sys.excepthook`` so the
block is printed whenever the program ends with an unhandled exception.
"""

import os
import sys
from collections import deque
from types import TracebackType
from typing import Callable, Optional, TextIO, Type

from .config import JotConfig
from .frames import frames_from_traceback
from .styles import Styler
from .tracebacks import format_simple_backtrace

ExceptHook = Callable[[Type[BaseException], BaseException, Optional[TracebackType]], None]


def last_line(path: str) -> str:
    """Last non-empty line of the text file at ``path`` ("" if unreadable)."""
    try:
        with open(path, encoding="utf-8", errors="replace") as f:
            tail = deque((line for line in f if line.strip()), maxlen=1)
    except OSError:
        return ""
    return tail[0].rstrip("\n") if tail else ""


def exit_handler(
    error_code: int,
    tb: Optional[TracebackType] = None,
    config: Optional[JotConfig] = None,
    stream: Optional[TextIO] = None,
    styler: Optional[Styler] = None,
) -> str:
    """Print the exit report for ``error_code`` and return its text.

    Nothing is printed for a zero exit code.

    Args:
        error_code: The process exit status being reported.
        tb: Traceback to take the backtrace from; the current stack otherwise.
        config: Supplies ``stderr_log`` and ``use_colors``.
        stream: Output stream; stderr by default.
        styler: Overrides the styler derived from ``config`` and ``stream``.
    """
    if error_code == 0:
        return ""
    config = config or JotConfig()
    stream = stream or sys.stderr
    s = styler or Styler.for_stream(stream, config.use_colors)

    lines = ["", s.style(f"--- EXIT HANDLER (Error Code: {error_code}) ---", "red", bold=True)]
    if config.stderr_log and os.path.isfile(config.stderr_log):
        content = last_line(config.stderr_log)
        if content:
            lines.append(f"Last line from {s.style(config.stderr_log, 'yellow')}: {content}")
    else:
        lines.append(
            s.style(
                "(No stderr_log configured or found for additional error details)",
                "yellow",
                italic=True,
            )
        )

    lines.append(s.style("Call Stack at Exit:", "white"))
    frames = frames_from_traceback(tb) if tb is not None else None
    backtrace = format_simple_backtrace(1, styler=s, frames=frames)
    if backtrace:
        lines.append(backtrace)
    else:
        lines.append(
            "  " + s.style("(No backtrace available or stack too shallow)", "yellow", italic=True)
        )
    lines.append(s.style("Exiting due to error!", "red", bold=True))
    lines.append("")

    text = "\n".join(lines)
    print(text, file=stream)
    return text


def install_exit_handler(
    config: Optional[JotConfig] = None,
    stream: Optional[TextIO] = None,
    error_code: int = 1,
) -> ExceptHook:
    """Install an excepthook that prints the exit report, then chains on.

    Args:
        config: Settings for the report; read from the environment if omitted.
        stream: Output stream; stderr by default.
        error_code: Code shown in the banner (the interpreter exits with 1
            after an unhandled exception).

    Returns:
        The installed hook.
    """
    config = config or JotConfig.from_env()
    previous = sys.excepthook

    def hook(
        exc_type: Type[BaseException],
        exc: BaseException,
        tb: Optional[TracebackType],
    ) -> None:
        exit_handler(error_code, tb, config, stream)
        previous(exc_type, exc, tb)

    sys.excepthook = hook
    return hook
