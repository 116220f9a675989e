"""
Structured logging for asynchronous NATS errors.

The NATS client reports subscription and connection errors through a
callback rather than to a caller. The handler built here turns each report
into a single error-level log record carrying the subscription and
connection context. It never closes, unsubscribes or retries.
"""

import logging
from typing import Any, Callable

from nats.errors import BadSubscriptionError, SlowConsumerError

from core.errors.nats_classifier import nats_error_category
from messaging.status import connection_status

ERROR_LOGGER_COMPONENT = "error-logger"

ErrorHandler = Callable[[Any, Any, Exception], None]


def pending_messages(sub: Any) -> int:
    """Number of messages queued for ``sub`` but not yet delivered."""
    if sub is None:
        raise BadSubscriptionError()
    return sub.pending_msgs


def handle_consumer_error(
    log: logging.Logger,
    conn: Any,
    sub: Any,
    nats_err: Exception,
) -> None:
    """
    Log one transport error with subscription and connection context.

    For slow-consumer errors the pending message count is attached. If
    reading that count fails, the read failure is logged in place of the
    slow-consumer error. Errors without a subscription (failed connect and
    reconnect attempts included) are logged as connection errors.

    Args:
        log: Logger to emit on
        conn: Client the error was reported on
        sub: Subscription the error relates to, or None for connection errors
        nats_err: Error reported by the client
    """
    err = nats_err
    subject = sub.subject if sub is not None else ""

    fields = {
        "component": ERROR_LOGGER_COMPONENT,
        "subject": subject,
        "group": (sub.queue or "") if sub is not None else "",
        "conn_status": connection_status(conn).value,
    }

    if isinstance(err, SlowConsumerError):
        try:
            fields["pending_messages"] = pending_messages(sub)
        except Exception as perr:
            err = perr

    fields["error"] = str(err)
    fields["error_type"] = type(err).__name__
    fields["error_category"] = nats_error_category(err).value

    if sub is None:
        log.error("Error on nats connection", extra=fields)
    else:
        log.error(f"Error while consuming from {subject}", extra=fields)


def build_error_handler(log: logging.Logger) -> ErrorHandler:
    """
    Build an error handler that logs transport errors on ``log``.

    The returned callable holds no state besides the logger, so it is safe
    to invoke concurrently for different subscriptions.
    """

    def error_handler(conn: Any, sub: Any, nats_err: Exception) -> None:
        handle_consumer_error(log, conn, sub, nats_err)

    return error_handler


__all__ = [
    "ERROR_LOGGER_COMPONENT",
    "ErrorHandler",
    "build_error_handler",
    "handle_consumer_error",
    "pending_messages",
]
