"""
Logging Configuration - Structured logging with Rich console.

Provides pretty, structured logging for debugging attribute reads and
keyboard batches.
"""

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme

from webatoms.config import LogLevel
from webatoms.logging.formatters import CompactFormatter, create_file_handler

if TYPE_CHECKING:
    from webatoms.atoms.keyboard import KeyBatch

WEBATOMS_THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "bold red",
        "debug": "dim",
        "attribute": "bold green",
        "batch": "bold magenta",
        "cdp": "dim cyan",
    }
)

# Shared console instance
console = Console(theme=WEBATOMS_THEME)


def setup_logging(
    level: LogLevel = "INFO",
    show_path: bool = False,
    json_path: str | Path | None = None,
    plain: bool = False,
) -> None:
    """
    Configure logging with Rich console handler.

    Args:
        level: Logging level
        show_path: Show file path in log messages
        json_path: Also write JSON lines to this file
        plain: One-line records on stderr instead of Rich output
    """
    if plain:
        handler: logging.Handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(CompactFormatter())
    else:
        handler = RichHandler(
            console=console,
            show_time=True,
            show_level=True,
            show_path=show_path,
            rich_tracebacks=True,
            markup=True,
        )
        handler.setFormatter(logging.Formatter("%(message)s"))

    handlers: list[logging.Handler] = [handler]
    if json_path:
        handlers.append(create_file_handler(str(json_path)))

    root = logging.getLogger("webatoms")
    root.setLevel(level)
    root.handlers = handlers
    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger with webatoms prefix.

    Args:
        name: Logger name (will be prefixed with 'webatoms.')

    Returns:
        Configured logger
    """
    if not name.startswith("webatoms."):
        name = f"webatoms.{name}"
    return logging.getLogger(name)


class AtomLogger:
    """
    Structured logger for atom operations.

    Provides semantic logging methods for different operation types.
    """

    def __init__(self, name: str = "webatoms"):
        self._logger = get_logger(name)

    def attribute(self, name: str, value: str | None, element_id: object = None) -> None:
        """Log a resolved attribute (debug level)."""
        shown = "null" if value is None else repr(value[:60])
        self._logger.debug(
            f"[attribute]{name}[/attribute] = {shown}",
            extra={"attribute": name, "element_id": element_id},
        )

    def batch(self, index: int, batch: "KeyBatch") -> None:
        """Log a keyboard batch about to be dispatched (debug level)."""
        keys = "".join(k if isinstance(k, str) else f"<{k.name}>" for k in batch.keys)
        self._logger.debug(
            f"[batch]Batch {index}[/batch] persist={batch.persist} keys={keys[:60]!r}",
            extra={"batch": index},
        )

    def cdp(self, command: str, params: dict | None = None, element_id: object = None) -> None:
        """Log a CDP command sent on behalf of an atom (debug level)."""
        shown = str(params)[:50] if params else ""
        self._logger.debug(f"[cdp]CDP[/cdp] {command}({shown})", extra={"element_id": element_id})


# Default logger instance
logger = AtomLogger()
