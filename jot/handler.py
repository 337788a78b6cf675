"""handler.py - Standard logging integration for jot.

This module provides JotHandler, a logging.Handler subclass that routes records
from the Python standard logging infrastructure through jot's renderers and
sinks, so an application can adopt jot without changing its logging calls.

Design contract:
    - Attaching a JotHandler to a logger is the whole integration; existing
      logger calls stay as they are.
    - Every record that passes the handler's level is rendered as a jot event:
      console, file, syslog and JSON output follow the handler's JotConfig.
    - Records at ``trace_level`` (ERROR by default) or above carry a traceback:
      the exception's traceback when ``exc_info`` is set, otherwise the stack
      leading to the logging call.

Typical usage:
    import logging
    from jot import JotHandler

    logging.getLogger().addHandler(JotHandler())
    logger = logging.getLogger(__name__)

    logger.info("Starting job")    # one console line
    logger.error("Job failed")     # console line plus traceback
"""

import logging
from typing import Optional

from .config import JotConfig
from .core import Jot


class JotHandler(logging.Handler):
    """A logging.Handler that renders records through a Jot instance.

    Concurrency:
        emit() runs under the handler lock that ``logging.Handler.handle`` takes,
        so records from several threads reach the Jot one at a time.

    Attributes:
        jot (Jot): The assembler doing the rendering and fan-out.
        trace_level (int): Records at or above this level get a traceback.

    Example:
        >>> import logging
        >>> from jot import JotHandler
        >>> logging.getLogger().addHandler(JotHandler())
        >>> logging.getLogger("myapp").warning("disk almost full")
    """

    def __init__(
        self,
        jot: Optional[Jot] = None,
        config: Optional[JotConfig] = None,
        level: int = logging.NOTSET,
        trace_level: int = logging.ERROR,
    ) -> None:
        """Initialise the handler.

        Args:
            jot: Jot instance to emit through. Built from ``config`` (or the
                environment) when omitted.
            config: Settings for the Jot built by the handler.
            level: Standard handler level threshold.
            trace_level: Minimum record level that gets a traceback attached.
        """
        super().__init__(level)
        self.jot = jot or Jot(config or JotConfig.from_env())
        self.trace_level = trace_level

    def emit(self, record: logging.LogRecord) -> None:
        """Render and deliver a single log record.

        Args:
            record: The LogRecord produced by the logging framework.
        """
        try:
            self.jot.emit_record(record, trace=record.levelno >= self.trace_level)
        except Exception:
            # A bug inside jot must never silence the application's own logs.
            self.handleError(record)
