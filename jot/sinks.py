"""sinks.py - Output destinations for rendered log events.

This module defines the Sink protocol and the three concrete destinations:

    ConsoleSink  writes the colorized text line (or the JSON line) to a stream.
    FileSink     appends the plain text line (or the JSON line) to a file.
    SyslogSink   forwards the plain line to syslog through the ``logger``
                 command, mapping levels to syslog priorities.

Each sink formats the event itself, so every destination gets its own
rendering. ``dispatch()`` drives the fan-out: a failing sink is reported on the
error stream and never prevents delivery to the others.

Typical usage::

    from jot.sinks import ConsoleSink, FileSink, dispatch

    dispatch(event, [ConsoleSink(), FileSink("/var/log/app.log")])
"""

import logging
import os
import shutil
import subprocess
import sys
from abc import ABC, abstractmethod
from typing import Callable, Dict, Iterable, Optional, TextIO

from .config import (
    DEFAULT_SYSLOG_LEVEL_MAP_STRING,
    DEFAULT_SYSLOG_PRIORITY,
    parse_level_map,
)
from .event import LogEvent
from .styles import Styler
from .template import (
    DEFAULT_CONSOLE_TEMPLATE,
    DEFAULT_FILE_TEMPLATE,
    console_style_fn,
    render_template,
)

logger = logging.getLogger(__name__)


class SinkError(OSError):
    """Raised by a sink that could not deliver an event."""


class Sink(ABC):
    """Abstract base class for all log event destinations.

    Subclasses implement ``format()`` to produce the line for their medium and
    ``write()`` to deliver it.

    Attributes:
        json_output: When True the sink emits ``LogEvent.to_json()`` and
            ignores its template.
    """

    name = "Sink"

    def __init__(self, json_output: bool = False) -> None:
        self.json_output = json_output

    @abstractmethod
    def format(self, event: LogEvent) -> str:
        """Return the line (without newline) this sink emits for ``event``."""

    @abstractmethod
    def write(self, event: LogEvent) -> bool:
        """Deliver ``event``.

        Returns:
            True on success, False when the sink skipped the event.

        Raises:
            SinkError: If delivery was attempted and failed.
        """


class ConsoleSink(Sink):
    """Write colorized text lines (or JSON lines) to a stream.

    Attributes:
        _stream: Target stream; ``sys.stdout`` at write time when not given.
        _template: Console template for text output.
        _styler: Styler for the per-field colors.
    """

    name = "Console"

    def __init__(
        self,
        stream: Optional[TextIO] = None,
        template: str = DEFAULT_CONSOLE_TEMPLATE,
        styler: Optional[Styler] = None,
        json_output: bool = False,
    ) -> None:
        super().__init__(json_output)
        self._stream = stream
        self._template = template
        self._styler = styler or Styler(enabled=False)

    def format(self, event: LogEvent) -> str:
        if self.json_output:
            return event.to_json()
        return render_template(self._template, event, console_style_fn(self._styler))

    def write(self, event: LogEvent) -> bool:
        stream = self._stream or sys.stdout
        stream.write(self.format(event) + "\n")
        stream.flush()
        return True


class FileSink(Sink):
    """Append plain text lines (or NDJSON lines) to a file on disk.

    Each event is written with one ``write()`` call of the complete line plus
    ``\\n``. There is no header, rotation or locking; concurrent writers may
    interleave whole lines. The parent directory is created on first write.

    Attributes:
        _path (str): Path of the log file.
        _template (str): File template for text output.
        _encoding (str): File encoding. Defaults to ``"utf-8"``.

    Example:
        >>> from jot.sinks import FileSink
        >>> sink = FileSink("/var/log/myapp/jot.log")
    """

    name = "File"

    def __init__(
        self,
        path: str,
        template: str = DEFAULT_FILE_TEMPLATE,
        json_output: bool = False,
        encoding: str = "utf-8",
    ) -> None:
        """Initialise the file sink.

        Args:
            path: Path to the log file. Parent directories are created
                automatically if they do not exist.
            template: Template used for text output.
            json_output: Write JSON lines instead of text lines.
            encoding: Character encoding for the file.

        Raises:
            ValueError: If ``path`` is empty.
        """
        super().__init__(json_output)
        if not path:
            raise ValueError("FileSink requires a non-empty path")
        self._path = path
        self._template = template
        self._encoding = encoding

    @property
    def path(self) -> str:
        return self._path

    def format(self, event: LogEvent) -> str:
        if self.json_output:
            return event.to_json()
        return render_template(self._template, event)

    def write(self, event: LogEvent) -> bool:
        line = self.format(event) + "\n"
        kind = "JSON" if self.json_output else "Text"
        try:
            self._ensure_dir()
            with open(self._path, "a", encoding=self._encoding) as f:
                f.write(line)
        except OSError as exc:
            raise SinkError(f"{kind}: Could not write to log file {self._path}") from exc
        return True

    def _ensure_dir(self) -> None:
        """Create parent directories for the log file if they do not exist."""
        parent = os.path.dirname(os.path.abspath(self._path))
        os.makedirs(parent, exist_ok=True)


class SyslogSink(Sink):
    """Forward plain lines to syslog via the ``logger`` command.

    The event level selects the priority through ``level_map``; unmapped
    levels use ``notice``. When the ``logger`` command is not installed the
    sink silently skips every event.

    Attributes:
        _tag: Syslog tag; the event's script name when empty.
        _facility: Syslog facility, e.g. ``"user"`` or ``"local0"``.
        _level_map: Upper-case level name to syslog priority keyword.
    """

    name = "Syslog"

    def __init__(
        self,
        tag: str = "",
        facility: str = "user",
        level_map: Optional[Dict[str, str]] = None,
        template: str = DEFAULT_FILE_TEMPLATE,
        json_output: bool = False,
        command: str = "logger",
        runner: Optional[Callable[..., "subprocess.CompletedProcess"]] = None,
    ) -> None:
        super().__init__(json_output)
        self._tag = tag
        self._facility = facility
        self._level_map = (
            parse_level_map(DEFAULT_SYSLOG_LEVEL_MAP_STRING) if level_map is None else level_map
        )
        self._template = template
        self._command = command
        self._runner = runner or subprocess.run

    def priority(self, level: str) -> str:
        """Syslog priority keyword for ``level``."""
        return self._level_map.get(level.upper(), DEFAULT_SYSLOG_PRIORITY)

    def format(self, event: LogEvent) -> str:
        if self.json_output:
            return event.to_json()
        return render_template(self._template, event)

    def send(self, tag: str, selector: str, message: str) -> bool:
        """Hand one message to the syslog transport.

        Args:
            tag: Syslog tag.
            selector: ``facility.priority``, e.g. ``"user.err"``.
            message: The message text.

        Returns:
            True if the transport ran and exited with status 0.
        """
        executable = shutil.which(self._command)
        if executable is None:
            return False
        try:
            result = self._runner(
                [executable, "-t", tag, "-p", selector, "--", message],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                check=False,
            )
        except OSError:
            logger.debug("syslog transport %s failed to start", executable, exc_info=True)
            return False
        return result.returncode == 0

    def write(self, event: LogEvent) -> bool:
        tag = self._tag or event.script
        selector = f"{self._facility}.{self.priority(event.level)}"
        return self.send(tag, selector, self.format(event))


def report_error(message: str, error_stream: Optional[TextIO] = None) -> None:
    """Print a ``LOGGER ERROR`` line on the error stream (stderr by default)."""
    print(f"LOGGER ERROR: {message}", file=error_stream or sys.stderr)


def dispatch(
    event: LogEvent,
    sinks: Iterable[Sink],
    error_stream: Optional[TextIO] = None,
) -> bool:
    """Deliver ``event`` to every sink independently.

    A sink that raises is reported on ``error_stream`` and the remaining sinks
    still run.

    Returns:
        True if no sink raised.
    """
    ok = True
    for sink in sinks:
        try:
            sink.write(event)
        except Exception as exc:
            ok = False
            logger.debug("%s sink failed", sink.name, exc_info=True)
            text = str(exc) if isinstance(exc, SinkError) else f"{sink.name}: {exc}"
            report_error(text, error_stream)
    return ok
