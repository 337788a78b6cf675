"""jot/__init__.py - Public API for the jot package.

jot is a logging and execution-tracing library for command-line programs. Each
log call records who called it (script, function, line and where the function
is defined), can attach a traceback or a single-frame context, and is rendered
independently for every output: colored console text, plain file text, syslog,
or JSON lines.

Quick start:
    import jot

    jot.info("job started")
    jot.debug("fetched %d records", 42)
    jot.error("database timeout")       # traceback attached
    jot.warn("slow response", trace=False, ctx=True)

    # Explicit configuration instead of JOT_* environment variables
    from jot import Jot, JotConfig
    log = Jot(JotConfig(log_file_path="/var/log/app.log", output_format="json"))
    log.critical("out of memory")

    # Route standard logging through jot
    import logging
    logging.getLogger().addHandler(jot.JotHandler())

Exported names:
    Jot, JotConfig:      The event assembler and its settings.
    JotHandler:          logging.Handler that renders records through jot.
    log, debug, info, warn, error, critical, fatal:
                         Leveled calls on the default, environment-configured Jot.
    trace, context, simple_backtrace:
                         Traceback / context / backtrace text of the calling code.
    configure, get_jot:  Replace or fetch the default Jot.
    StackFrame, walk, capture_stack, resolve_frame:
                         Call-stack snapshots.
    format_traceback, format_context:
                         Low-level traceback and context builders.
    render_template, LogEvent:
                         Template engine and the event it renders.
    XTracer:             ``set -x`` style line tracing.
    install_exit_handler, exit_handler:
                         Post-mortem report on unhandled exceptions.
"""

from .config import JotConfig
from .core import (
    Jot,
    configure,
    context,
    critical,
    debug,
    error,
    fatal,
    get_jot,
    info,
    log,
    simple_backtrace,
    trace,
    warn,
)
from .event import LogEvent
from .frames import StackFrame, capture_stack, resolve_frame, walk
from .handler import JotHandler
from .hooks import exit_handler, install_exit_handler
from .paths import shorten_path
from .template import render_template
from .tracebacks import format_context, format_traceback
from .xtrace import XTracer

__all__ = [
    "Jot",
    "JotConfig",
    "JotHandler",
    "LogEvent",
    "StackFrame",
    "XTracer",
    "capture_stack",
    "configure",
    "context",
    "critical",
    "debug",
    "error",
    "exit_handler",
    "fatal",
    "format_context",
    "format_traceback",
    "get_jot",
    "info",
    "install_exit_handler",
    "log",
    "render_template",
    "resolve_frame",
    "shorten_path",
    "simple_backtrace",
    "trace",
    "walk",
    "warn",
]
__version__ = "0.1.0"
