"""
WebAtoms Logging Module.

Provides structured logging with Rich console output.
"""

from webatoms.logging.config import (
    AtomLogger,
    console,
    get_logger,
    logger,
    setup_logging,
)
from webatoms.logging.formatters import (
    CompactFormatter,
    JSONFormatter,
    create_file_handler,
)

__all__ = [
    "setup_logging",
    "get_logger",
    "AtomLogger",
    "logger",
    "console",
    "JSONFormatter",
    "CompactFormatter",
    "create_file_handler",
]
