"""config.py - Runtime settings for jot.

All behaviour switches live in a single ``JotConfig`` value. Defaults match the
environment-variable interface, and ``JotConfig.from_env()`` reads those
variables so that scripts can be reconfigured without code changes:

    JOT_USE_COLORS, JOT_TRACE_SHOW_SOURCE_LINE, JOT_LOG_PATH_MAX_COMPONENTS,
    JOT_LOG_TO_CONSOLE, JOT_LOG_FILE_PATH, JOT_LOG_TEXT_FORMAT_CONSOLE,
    JOT_LOG_TEXT_FORMAT_FILE, JOT_OUTPUT_FORMAT, JOT_USE_BAT (alias
    JOT_USE_HIGHLIGHT), JOT_BAT_THEME_TRACE_CONTEXT, JOT_BAT_THEME_TRACE_LINES,
    JOT_BAT_THEME_XTRACE, JOT_LOG_TO_SYSLOG, JOT_SYSLOG_TAG,
    JOT_SYSLOG_FACILITY, JOT_SYSLOG_LEVEL_MAP_STRING, JOT_TIMESTAMP_FORMAT,
    JOT_STDERR_LOG, LOG_LEVEL, JOT_MIN_LEVEL

A config is immutable; ``replace()`` returns an adjusted copy.
"""

import dataclasses
import os
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from .paths import DEFAULT_MAX_COMPONENTS
from .render import DEFAULT_CONTEXT_THEME, DEFAULT_LINES_THEME
from .template import DEFAULT_CONSOLE_TEMPLATE, DEFAULT_FILE_TEMPLATE

OUTPUT_FORMATS = ("text", "json")

# Severity order used for threshold filtering, lowest first.
LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_SYSLOG_LEVEL_MAP_STRING = (
    "CRITICAL=crit,ERROR=err,WARNING=warning,INFO=notice,DEBUG=debug"
)
DEFAULT_SYSLOG_PRIORITY = "notice"

_TRUE = frozenset({"1", "true", "yes", "on"})


def parse_level_map(text: str) -> Dict[str, str]:
    """Parse ``"LEVEL=priority,..."`` into a dict; malformed entries are skipped."""
    mapping: Dict[str, str] = {}
    for entry in text.split(","):
        key, sep, value = entry.partition("=")
        key, value = key.strip().upper(), value.strip()
        if sep and key and value:
            mapping[key] = value
    return mapping


def level_rank(level: str) -> Optional[int]:
    """Position of ``level`` in LEVELS, or None for unknown levels."""
    level = level.upper()
    return LEVELS.index(level) if level in LEVELS else None


def is_level_enabled(level: str, min_level: str) -> bool:
    """True if ``level`` should be emitted under the ``min_level`` threshold.

    Unknown levels, and unknown thresholds, never suppress output.
    """
    rank = level_rank(level)
    threshold = level_rank(min_level)
    if rank is None or threshold is None:
        return True
    return rank >= threshold


@dataclass(frozen=True)
class JotConfig:
    """Settings shared by the event assembler, renderers and sinks."""

    use_colors: bool = True
    show_source_line: bool = True
    path_max_components: int = DEFAULT_MAX_COMPONENTS
    log_to_console: bool = True
    log_file_path: str = ""
    console_template: str = DEFAULT_CONSOLE_TEMPLATE
    file_template: str = DEFAULT_FILE_TEMPLATE
    output_format: str = "text"
    use_highlight: bool = True
    context_theme: str = DEFAULT_CONTEXT_THEME
    lines_theme: str = DEFAULT_LINES_THEME
    xtrace_theme: str = "gruvbox-dark"
    log_to_syslog: bool = False
    syslog_tag: str = ""
    syslog_facility: str = "user"
    syslog_level_map: Dict[str, str] = field(
        default_factory=lambda: parse_level_map(DEFAULT_SYSLOG_LEVEL_MAP_STRING)
    )
    timestamp_format: str = "%Y-%m-%dT%H:%M:%S"
    default_level: str = "DEBUG"
    min_level: str = "DEBUG"
    stderr_log: str = ""

    def __post_init__(self) -> None:
        if self.output_format not in OUTPUT_FORMATS:
            raise ValueError(
                f"output_format must be one of {OUTPUT_FORMATS}, got {self.output_format!r}"
            )
        if self.path_max_components < 0:
            raise ValueError(
                f"path_max_components must be >= 0, got {self.path_max_components}"
            )

    @property
    def json_output(self) -> bool:
        return self.output_format == "json"

    def replace(self, **changes) -> "JotConfig":
        return dataclasses.replace(self, **changes)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "JotConfig":
        """Build a config from environment variables, falling back to defaults.

        Args:
            environ: Mapping to read from; ``os.environ`` when omitted.

        Raises:
            ValueError: If a numeric or enumerated variable holds a bad value.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        def flag(name: str, default: bool) -> bool:
            value = env.get(name)
            if value is None or value == "":
                return default
            return value.strip().lower() in _TRUE

        def text(name: str, default: str) -> str:
            value = env.get(name)
            return default if value is None or value == "" else value

        highlight_var = "JOT_USE_BAT" if "JOT_USE_BAT" in env else "JOT_USE_HIGHLIGHT"
        level_map = env.get("JOT_SYSLOG_LEVEL_MAP_STRING")

        return cls(
            use_colors=flag("JOT_USE_COLORS", defaults.use_colors),
            show_source_line=flag("JOT_TRACE_SHOW_SOURCE_LINE", defaults.show_source_line),
            path_max_components=int(
                text("JOT_LOG_PATH_MAX_COMPONENTS", str(defaults.path_max_components))
            ),
            log_to_console=flag("JOT_LOG_TO_CONSOLE", defaults.log_to_console),
            log_file_path=text("JOT_LOG_FILE_PATH", defaults.log_file_path),
            console_template=text("JOT_LOG_TEXT_FORMAT_CONSOLE", defaults.console_template),
            file_template=text("JOT_LOG_TEXT_FORMAT_FILE", defaults.file_template),
            output_format=text("JOT_OUTPUT_FORMAT", defaults.output_format).lower(),
            use_highlight=flag(highlight_var, defaults.use_highlight),
            context_theme=text("JOT_BAT_THEME_TRACE_CONTEXT", defaults.context_theme),
            lines_theme=text("JOT_BAT_THEME_TRACE_LINES", defaults.lines_theme),
            xtrace_theme=text("JOT_BAT_THEME_XTRACE", defaults.xtrace_theme),
            log_to_syslog=flag("JOT_LOG_TO_SYSLOG", defaults.log_to_syslog),
            syslog_tag=text("JOT_SYSLOG_TAG", defaults.syslog_tag),
            syslog_facility=text("JOT_SYSLOG_FACILITY", defaults.syslog_facility),
            syslog_level_map=(
                parse_level_map(level_map) if level_map else defaults.syslog_level_map
            ),
            # `date`-style formats start with "+".
            timestamp_format=text("JOT_TIMESTAMP_FORMAT", defaults.timestamp_format).lstrip("+"),
            default_level=text("LOG_LEVEL", defaults.default_level).upper(),
            min_level=text("JOT_MIN_LEVEL", defaults.min_level).upper(),
            stderr_log=text("JOT_STDERR_LOG", defaults.stderr_log),
        )
