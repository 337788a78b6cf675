"""examples/file_and_json_usage.py - Send events to a file, as text or JSON lines.

The console keeps its colored line while the file receives the plain
rendering of the same event. Switching to JSON turns every destination into
one JSON object per line, ready for log shippers.

Run:
    python examples/file_and_json_usage.py
    cat /tmp/jot_demo/app.log /tmp/jot_demo/app.jsonl
"""

from jot import Jot, JotConfig

TEXT_LOG = "/tmp/jot_demo/app.log"
JSON_LOG = "/tmp/jot_demo/app.jsonl"

text_log = Jot(JotConfig(log_file_path=TEXT_LOG))
json_log = Jot(JotConfig(log_file_path=JSON_LOG, output_format="json", log_to_console=False))


def backup(volume: str) -> None:
    text_log.info("Backing up %s", volume)
    json_log.info("Backing up %s", volume)
    # Both error calls attach the traceback: styled on the console, plain in the files.
    text_log.error("disk full on %s", volume)
    json_log.error("disk full on %s", volume)


if __name__ == "__main__":
    backup("/dev/sdb1")
    print(f"\nText log written to {TEXT_LOG}")
    print(f"JSON log written to {JSON_LOG}")
