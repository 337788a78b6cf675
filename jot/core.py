"""core.py - The event assembler behind every jot logging call.

``Jot.log()`` turns one call into a LogEvent and fans it out:

    1. Pick the level (argument, else ``config.default_level``) and apply the
       ``config.min_level`` threshold.
    2. Find the calling context: the first stack frame outside this package.
    3. Work out where the calling function is defined.
    4. Substitute the arguments into the printf-style format.
    5. Optionally render a traceback or context twice: styled for the
       console, plain for file, syslog and JSON.
    6. Dispatch to the sinks built from the config.

Typical usage::

    from jot import Jot, JotConfig

    log = Jot(JotConfig(log_file_path="/tmp/app.log"))
    log.info("starting %s", "worker")
    log.error("disk full")          # traceback attached
"""

import logging
import os
import sys
from datetime import datetime
from typing import Callable, List, Optional, TextIO

from .config import JotConfig, is_level_enabled
from .event import LogEvent
from .frames import (
    MAIN_FUNCTION,
    StackFrame,
    capture_stack,
    entry_index,
    first_external_index,
    is_bootstrap_path,
    package_source_regex,
)
from .highlight import Highlighter
from .paths import shorten_path
from .render import FrameRenderer, make_renderer
from .sinks import ConsoleSink, FileSink, Sink, SyslogSink, dispatch, report_error
from .styles import Styler
from .tracebacks import (
    format_context,
    format_exception,
    format_simple_backtrace,
    format_traceback,
)

logger = logging.getLogger(__name__)

FrameMatcher = Callable[[StackFrame], bool]


def entry_script_name(stack: List[StackFrame]) -> str:
    """Basename of the outermost real source file on ``stack``."""
    for frame in reversed(stack):
        path = frame.source_path
        if not path.startswith("<") and not is_bootstrap_path(path):
            return os.path.basename(path)
    if stack:
        return os.path.basename(stack[-1].source_path)
    return os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "(unknown)"


def format_message(fmt: str, args: tuple) -> str:
    """Substitute ``args`` into ``fmt`` with printf semantics.

    When the argument count does not match the format's conversions, all
    arguments are joined with spaces and substituted as a single value.

    Raises:
        ValueError: If ``fmt`` is not a valid format string.
    """
    try:
        return fmt % args
    except TypeError:
        pass
    try:
        return fmt % (" ".join(str(arg) for arg in args),)
    except TypeError as exc:
        raise ValueError(str(exc)) from exc


class Jot:
    """Leveled logging with optional traceback and context attachments.

    Attributes:
        config: Active settings.
        delegate: Optional stdlib logger that also receives every message.
    """

    def __init__(
        self,
        config: Optional[JotConfig] = None,
        stream: Optional[TextIO] = None,
        error_stream: Optional[TextIO] = None,
        styler: Optional[Styler] = None,
        highlighter: Optional[Highlighter] = None,
        delegate: Optional[logging.Logger] = None,
    ) -> None:
        self.config = config or JotConfig()
        self.delegate = delegate
        self._stream = stream
        self._error_stream = error_stream
        self._styler = styler
        self._highlighter = highlighter

    # ---------------------------------------------------------------------- #
    # Public interface
    # ---------------------------------------------------------------------- #

    def log(
        self,
        *args: object,
        level: Optional[str] = None,
        fmt: str = "%s",
        trace: bool = False,
        ctx: bool = False,
    ) -> bool:
        """Log one message.

        Args:
            *args: Values substituted into ``fmt``. At least one is required.
            level: Level name; ``config.default_level`` when omitted.
            fmt: printf-style format for the message.
            trace: Attach a traceback of the calling code.
            ctx: Attach the calling frame as context (ignored with ``trace``).

        Returns:
            True if the event was delivered (or filtered by the threshold),
            False for a malformed call or a failing sink.
        """
        return self._log(args, level, fmt, trace, ctx, self.config)

    def debug(self, *args: object, **kwargs) -> bool:
        return self.log(*args, level="DEBUG", **kwargs)

    def info(self, *args: object, **kwargs) -> bool:
        return self.log(*args, level="INFO", **kwargs)

    def warn(self, *args: object, trace: bool = True, **kwargs) -> bool:
        return self.log(*args, level="WARNING", trace=trace, **kwargs)

    warning = warn

    def error(self, *args: object, trace: bool = True, **kwargs) -> bool:
        return self.log(*args, level="ERROR", trace=trace, **kwargs)

    def critical(self, *args: object, trace: bool = True, **kwargs) -> bool:
        return self.log(*args, level="CRITICAL", trace=trace, **kwargs)

    def fatal(self, message: str = "Fatal error occurred", exit_code: int = 1) -> None:
        """Log ``message`` at CRITICAL with a traceback, then exit.

        Output is forced to colored text on the console with highlighting off,
        whatever the current settings are.

        Raises:
            SystemExit: Always, with ``exit_code``.
        """
        config = self.config.replace(
            output_format="text",
            log_to_console=True,
            use_highlight=False,
            use_colors=True,
        )
        self._log((message,), "CRITICAL", "%s", True, False, config)
        raise SystemExit(exit_code)

    def trace(self, depth_offset: int = 0) -> str:
        """Traceback of the calling code, without jot's own frames."""
        config = self.config
        return self._section(True, self._console_renderer(config), config, depth_offset)

    def context(self, depth_offset: int = 0) -> str:
        """The calling frame (or one ``depth_offset`` further out) as context."""
        config = self.config
        return self._section(False, self._console_renderer(config), config, depth_offset)

    def simple_backtrace(self, depth_offset: int = 0) -> str:
        """Compact backtrace of the calling code, newest frame first."""
        stack = capture_stack()
        index = first_external_index(stack)
        if index is None:
            return ""
        return format_simple_backtrace(
            index + depth_offset, styler=self._console_styler(self.config)
        )

    def emit_record(self, record: logging.LogRecord, trace: bool = False) -> bool:
        """Log a stdlib ``LogRecord`` through jot's sinks.

        Caller data comes from the record. If the record carries exception
        info its traceback is attached; otherwise, with ``trace``, the stack
        from the logging call site outwards is attached.
        """
        config = self.config
        level = record.levelname.upper()
        if not is_level_enabled(level, config.min_level):
            return True

        path = os.path.realpath(record.pathname) if record.pathname else ""
        stack = capture_stack()

        def is_call_site(frame: StackFrame) -> bool:
            return frame.source_path == path and frame.call_line == record.lineno

        site = next((frame for frame in stack if is_call_site(frame)), None)
        function = record.funcName or MAIN_FUNCTION
        if function == "<module>":
            function = f"({os.path.basename(path)})"
        if site is not None and site.def_line is not None:
            func_def_loc = f"{shorten_path(path, config.path_max_components)}:{site.def_line}"
        else:
            func_def_loc = shorten_path(path, config.path_max_components)

        attachment = plain_attachment = ""
        exc = record.exc_info[1] if record.exc_info else None
        if exc is not None:
            attachment = format_exception(
                exc, self._console_renderer(config), config.show_source_line
            )
            plain_attachment = format_exception(
                exc, self._plain_renderer(), config.show_source_line
            )
        elif trace and site is not None:
            attachment = self._section(
                True, self._console_renderer(config), config, 0, is_call_site
            )
            plain_attachment = self._section(
                True, self._plain_renderer(), config, 0, is_call_site
            )

        event = LogEvent(
            timestamp=datetime.fromtimestamp(record.created).strftime(config.timestamp_format),
            level=level,
            script=entry_script_name(stack),
            function=function,
            line=record.lineno,
            func_def_loc=func_def_loc,
            message=record.getMessage(),
            attachment=attachment,
            plain_attachment=plain_attachment,
        )
        return dispatch(event, self.build_sinks(config), self._error_stream)

    def build_sinks(self, config: Optional[JotConfig] = None) -> List[Sink]:
        """Create the sinks enabled by ``config`` (default: the active config)."""
        config = config or self.config
        sinks: List[Sink] = []
        if config.log_to_console:
            sinks.append(
                ConsoleSink(
                    stream=self._stream,
                    template=config.console_template,
                    styler=self._console_styler(config),
                    json_output=config.json_output,
                )
            )
        if config.log_file_path:
            sinks.append(
                FileSink(
                    config.log_file_path,
                    template=config.file_template,
                    json_output=config.json_output,
                )
            )
        if config.log_to_syslog:
            sinks.append(
                SyslogSink(
                    tag=config.syslog_tag,
                    facility=config.syslog_facility,
                    level_map=config.syslog_level_map,
                    template=config.file_template,
                    json_output=config.json_output,
                )
            )
        return sinks

    # ---------------------------------------------------------------------- #
    # Private helpers
    # ---------------------------------------------------------------------- #

    def _log(
        self,
        args: tuple,
        level: Optional[str],
        fmt: str,
        trace: bool,
        ctx: bool,
        config: JotConfig,
    ) -> bool:
        if not args:
            report_error("jot.log: Log message required.", self._error_stream)
            return False

        uc_level = (level or config.default_level).upper()
        if not is_level_enabled(uc_level, config.min_level):
            logger.debug("dropping %s event below threshold %s", uc_level, config.min_level)
            return True

        try:
            message = format_message(fmt, args)
        except ValueError as exc:
            report_error(f"jot.log: Invalid message format {fmt!r}: {exc}", self._error_stream)
            return False

        stack = capture_stack()
        index = first_external_index(stack)
        if index is None:
            index = entry_index(stack)
        caller = stack[index] if index is not None else stack[-1]

        function = caller.function_name
        if function == MAIN_FUNCTION:
            function = f"({os.path.basename(caller.source_path)})"
            func_def_loc = shorten_path(caller.source_path, config.path_max_components)
        elif caller.def_line is not None:
            short = shorten_path(caller.source_path, config.path_max_components)
            func_def_loc = f"{short}:{caller.def_line}"
        else:
            func_def_loc = shorten_path(caller.source_path, config.path_max_components)

        attachment = plain_attachment = ""
        if trace or ctx:
            attachment = self._section(trace, self._console_renderer(config), config)
            plain_attachment = self._section(trace, self._plain_renderer(), config)

        event = LogEvent(
            timestamp=datetime.now().strftime(config.timestamp_format),
            level=uc_level,
            script=entry_script_name(stack),
            function=function,
            line=caller.call_line,
            func_def_loc=func_def_loc,
            message=message,
            attachment=attachment,
            plain_attachment=plain_attachment,
        )
        if self.delegate is not None:
            self._delegate(event)
        return dispatch(event, self.build_sinks(config), self._error_stream)

    def _section(
        self,
        want_trace: bool,
        renderer: FrameRenderer,
        config: JotConfig,
        depth_offset: int = 0,
        anchor: Optional[FrameMatcher] = None,
    ) -> str:
        """Traceback or context text starting at the anchor frame.

        The anchor is the first frame outside this package unless a matcher is
        given; ``depth_offset`` moves the start further out.
        """
        stack = capture_stack()
        if anchor is None:
            index = first_external_index(stack)
        else:
            index = next((i for i, frame in enumerate(stack) if anchor(frame)), None)
        if index is None:
            return ""
        # format_* count depth from their own frame, one below this one.
        regex = package_source_regex()
        show_source = config.show_source_line
        if want_trace:
            return format_traceback(index + depth_offset, regex, renderer, show_source)
        return format_context(index + depth_offset - 1, regex, renderer, show_source)

    def _console_styler(self, config: JotConfig) -> Styler:
        if not config.use_colors:
            return Styler(enabled=False)
        if self._styler is not None:
            return self._styler
        return Styler.for_stream(self._stream or sys.stdout)

    def _console_renderer(self, config: JotConfig) -> FrameRenderer:
        return make_renderer(
            use_colors=self._console_styler(config).enabled,
            use_highlight=config.use_highlight,
            context_theme=config.context_theme,
            lines_theme=config.lines_theme,
            highlighter=self._highlighter,
        )

    @staticmethod
    def _plain_renderer() -> FrameRenderer:
        return make_renderer(use_colors=False, use_highlight=False)

    def _delegate(self, event: LogEvent) -> None:
        levelno = logging.getLevelName(event.level)
        if not isinstance(levelno, int):
            levelno = logging.INFO
        self.delegate.log(levelno, event.plain_message)


# ---------------------------------------------------------------------------
# Process-wide default instance, configured from the environment on first use.
# ---------------------------------------------------------------------------
_default: Optional[Jot] = None


def get_jot() -> Jot:
    """Return the default Jot, creating it from the environment if needed."""
    global _default
    if _default is None:
        _default = Jot(JotConfig.from_env())
    return _default


def configure(config: Optional[JotConfig] = None, **kwargs) -> Jot:
    """Replace the default Jot.

    Args:
        config: Settings to use; read from the environment when omitted.
        **kwargs: Passed to the Jot constructor (streams, styler...).
    """
    global _default
    _default = Jot(config or JotConfig.from_env(), **kwargs)
    return _default


def log(*args: object, **kwargs) -> bool:
    return get_jot().log(*args, **kwargs)


def debug(*args: object, **kwargs) -> bool:
    return get_jot().debug(*args, **kwargs)


def info(*args: object, **kwargs) -> bool:
    return get_jot().info(*args, **kwargs)


def warn(*args: object, **kwargs) -> bool:
    return get_jot().warn(*args, **kwargs)


def error(*args: object, **kwargs) -> bool:
    return get_jot().error(*args, **kwargs)


def critical(*args: object, **kwargs) -> bool:
    return get_jot().critical(*args, **kwargs)


def fatal(message: str = "Fatal error occurred", exit_code: int = 1) -> None:
    get_jot().fatal(message, exit_code)


def trace(depth_offset: int = 0) -> str:
    return get_jot().trace(depth_offset)


def context(depth_offset: int = 0) -> str:
    return get_jot().context(depth_offset)


def simple_backtrace(depth_offset: int = 0) -> str:
    return get_jot().simple_backtrace(depth_offset)
