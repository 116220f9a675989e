"""
Structured logging module.

Provides JSON logging with context propagation and a handler that
publishes records on a NATS subject.
"""

from core.logging.context import (
    clear_log_context,
    get_log_context,
    set_log_context,
)
from core.logging.formatters import ConsoleFormatter, JSONFormatter
from core.logging.nats_handler import (
    LogSinkRegistration,
    NatsLogHandler,
    attach_log_sink,
)
from core.logging.setup import get_logger, setup_logging
from core.logging.utilities import log_exception

__all__ = [
    # Setup
    "setup_logging",
    "get_logger",
    # Formatters
    "JSONFormatter",
    "ConsoleFormatter",
    # Context
    "set_log_context",
    "get_log_context",
    "clear_log_context",
    # NATS sink
    "NatsLogHandler",
    "LogSinkRegistration",
    "attach_log_sink",
    # Utilities
    "log_exception",
]
