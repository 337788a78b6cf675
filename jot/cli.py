"""Command-line front end: log one message from a shell script.

    jot --level WARNING --trace "disk %s full" 90%
    JOT_OUTPUT_FORMAT=json jot -l ERROR "upload failed"

Settings come from the JOT_* environment variables; options given here
override them for this one call.
"""

import argparse
import sys
from typing import List, Optional

from .config import OUTPUT_FORMATS, JotConfig
from .core import Jot


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="jot",
        description="Log a message through jot's console, file and syslog sinks.",
    )
    parser.add_argument("-l", "--level", help="log level (default: $LOG_LEVEL or DEBUG)")
    parser.add_argument("--fmt", default="%s", help="printf-style message format")
    attach = parser.add_mutually_exclusive_group()
    attach.add_argument("-t", "--trace", action="store_true", help="attach a traceback")
    attach.add_argument("-x", "--ctx", action="store_true", help="attach the calling frame")
    parser.add_argument("--output-format", choices=OUTPUT_FORMATS, help="text or json output")
    parser.add_argument("--file", dest="log_file_path", help="also append to this log file")
    parser.add_argument("--no-color", action="store_true", help="disable colored output")
    parser.add_argument("msg", nargs="*", help="message arguments")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI and return the process exit status.

    Argument errors exit with status 2 (argparse); a missing message returns 1.
    """
    args = build_parser().parse_args(argv)

    config = JotConfig.from_env()
    changes = {}
    if args.output_format:
        changes["output_format"] = args.output_format
    if args.log_file_path:
        changes["log_file_path"] = args.log_file_path
    if args.no_color:
        changes["use_colors"] = False
    if changes:
        config = config.replace(**changes)

    ok = Jot(config).log(
        *args.msg,
        level=args.level,
        fmt=args.fmt,
        trace=args.trace,
        ctx=args.ctx,
    )
    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
