"""Centralized logging configuration with JSON-formatted extras."""

import json
import logging
import sys


class JSONExtrasFormatter(logging.Formatter):
    """Pipe-separated log line; ``extra=`` fields are appended as one JSON object."""

    RESERVED_ATTRS = frozenset(vars(logging.makeLogRecord({})).keys()) | {
        "asctime",
        "message",
        "taskName",
    }

    def format(self, record: logging.LogRecord) -> str:
        record.message = record.getMessage()
        timestamp = self.formatTime(record, self.datefmt)
        base = f"{timestamp} | {record.levelname:<8} | {record.name} | {record.message}"

        extras = {
            k: v
            for k, v in record.__dict__.items()
            if k not in self.RESERVED_ATTRS and not k.startswith("_")
        }

        if extras:
            try:
                extras_str = json.dumps(extras, default=str, ensure_ascii=False)
            except (TypeError, ValueError):
                # Circular or otherwise unencodable extras.
                extras_str = repr(extras)
            base = f"{base} {extras_str}"

        if record.exc_info and not record.exc_text:
            record.exc_text = self.formatException(record.exc_info)
        if record.exc_text:
            base = f"{base}\n{record.exc_text}"

        return base


def setup_logging(level: int = logging.INFO) -> None:
    """Configure the 'blogpulse' logger with console output and JSON extras."""
    logger = logging.getLogger("blogpulse")
    logger.setLevel(level)

    # Called from both the API lifespan and the CLI
    if logger.handlers:
        return

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(JSONExtrasFormatter(datefmt="%Y-%m-%d %H:%M:%S"))

    logger.addHandler(handler)
    logger.propagate = False
