"""
Log Formatters - JSON lines for files, one-liners for plain consoles.
"""

import json
import logging
import re
from datetime import UTC, datetime

# Theme tags used by AtomLogger messages
_MARKUP = re.compile(r"\[/?(?:attribute|batch|cdp)\]")


def plain_message(record: logging.LogRecord) -> str:
    return _MARKUP.sub("", record.getMessage())


class JSONFormatter(logging.Formatter):
    """
    One JSON object per record.

    Atom context passed through ``extra`` (element, attribute, batch) is
    copied into the object when set.
    """

    EXTRA_FIELDS = ("element_id", "attribute", "batch")

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": plain_message(record),
        }
        entry.update(
            (name, getattr(record, name))
            for name in self.EXTRA_FIELDS
            if getattr(record, name, None) is not None
        )
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class CompactFormatter(logging.Formatter):
    """``HH:MM:SS <symbol> <module>: message`` for consoles without Rich."""

    SYMBOLS = {
        "DEBUG": "·",
        "INFO": "→",
        "WARNING": "⚠",
        "ERROR": "✗",
        "CRITICAL": "☠",
    }

    def format(self, record: logging.LogRecord) -> str:
        clock = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")
        symbol = self.SYMBOLS.get(record.levelname, "?")
        module = record.name.rsplit(".", 1)[-1]
        return f"{clock} {symbol} {module}: {plain_message(record)}"


def create_file_handler(
    path: str,
    formatter: logging.Formatter | None = None,
    level: int = logging.DEBUG,
) -> logging.FileHandler:
    """
    File handler for structured logs.

    Args:
        path: Log file path
        formatter: Defaults to JSONFormatter
        level: Minimum level written
    """
    handler = logging.FileHandler(path, encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(formatter or JSONFormatter())
    return handler
