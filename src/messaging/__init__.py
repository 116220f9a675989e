"""
NATS connection helpers.

Resolves connection settings from a NatsConfig, connects with a structured
error handler installed, and optionally publishes application logs on the
bus.

Usage:
    >>> from config import load_config
    >>> from messaging import configure_nats_connection
    >>>
    >>> config = load_config()
    >>> connection = await configure_nats_connection(config.nats, logger)
    >>> if connection is not None:
    ...     await connection.client.publish("greetings", b"hello")
    ...     await connection.close()
"""

from messaging.connection import (
    NATS_SCHEME,
    NatsConnection,
    configure_nats_connection,
    connect_to_nats,
    discover_nats_urls,
    server_string,
)
from messaging.error_handler import (
    ErrorHandler,
    build_error_handler,
    handle_consumer_error,
)
from messaging.status import ConnectionStatus, connection_status

__all__ = [
    # Connection setup
    "configure_nats_connection",
    "connect_to_nats",
    "discover_nats_urls",
    "server_string",
    "NatsConnection",
    "NATS_SCHEME",
    # Error handling
    "ErrorHandler",
    "build_error_handler",
    "handle_consumer_error",
    # Status
    "ConnectionStatus",
    "connection_status",
]
