"""
Console and log-file output for the feedback workflow.

Every line is echoed to stdout and appended to LOG_FILE with a UTC timestamp.
Structured records (`log_event`) are single lines of key=value pairs, so
dispatch failures and deadline hits can be grepped out of the file.
"""

import sys
from datetime import datetime, timezone

from settings import LOG_FILE


def log(message: str, end: str = "\n") -> None:
    """
    Echo a line to stdout and append it, timestamped, to LOG_FILE.

    Called from gateway and notification worker threads as well; a log-file
    failure only produces a warning on stderr.

    Args:
        message: The message to log
        end: Line ending (default newline, matches print() behavior)
    """
    print(message, end=end)

    try:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")

        # Only add timestamp prefix for actual content lines (not empty lines)
        if message.strip():
            log_entry = f"[{timestamp}] {message}{end}"
        else:
            log_entry = f"{message}{end}"

        with open(LOG_FILE, "a", encoding="utf-8") as f:
            f.write(log_entry)

    except IOError as e:
        # Print warning to stderr to avoid interfering with stdout
        print(f"Warning: Failed to write to log file: {e}", file=sys.stderr)


def log_event(event: str, **fields) -> None:
    """Log a structured record: `event key=value key=value`."""
    details = " ".join(f"{key}={value!r}" for key, value in fields.items() if value is not None)
    log(f"{event} {details}".rstrip())


def log_separator() -> None:
    """Log a visual separator line."""
    log("=" * 60)


def log_invocation_start() -> None:
    """Log the start of a gateway invocation."""
    log_separator()
    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    log(f"Feedback invocation started: {timestamp}")


def log_invocation_end() -> None:
    """Log the end of a gateway invocation."""
    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
    log(f"Feedback invocation ended: {timestamp}")
    log_separator()
