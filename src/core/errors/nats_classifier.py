"""
NATS error classification for asynchronous transport errors.

Maps nats-py exception types onto ErrorCategory so that consumer error
records can be filtered by category without parsing messages.
"""

from typing import Optional

from core.errors.exceptions import classify_exception
from core.types import ErrorCategory


# NATS error classifications based on nats-py exception type names
NATS_ERROR_MAPPINGS = {
    # Transient errors (connection-level, usually recovered by the client)
    "transient": [
        "ConnectionClosedError",
        "ConnectionDrainingError",
        "ConnectionReconnectingError",
        "StaleConnectionError",
        "UnexpectedEOF",
        "TimeoutError",
        "FlushTimeoutError",
        "DrainTimeoutError",
        "NoServersError",
        "NoRespondersError",
    ],
    # Auth errors (credentials or permissions)
    "auth": [
        "AuthorizationError",
    ],
    # Permanent errors (won't clear up on their own)
    "permanent": [
        "BadSubscriptionError",
        "BadSubjectError",
        "BadTimeoutError",
        "InvalidCallbackTypeError",
        "InvalidUserCredentialsError",
        "MaxPayloadError",
        "ProtocolError",
        "SecureConnRequiredError",
        "SecureConnWantedError",
        "SecureConnFailedError",
    ],
    # Throttling (consumer or producer outpaced)
    "throttling": [
        "SlowConsumerError",
        "OutboundBufferLimitError",
    ],
}

_CATEGORY_BY_NAME = {
    "transient": ErrorCategory.TRANSIENT,
    "auth": ErrorCategory.AUTH,
    "permanent": ErrorCategory.PERMANENT,
    "throttling": ErrorCategory.THROTTLING,
}


def classify_nats_error_type(error_type_name: str) -> Optional[str]:
    """
    Classify NATS error by exception type name.

    Args:
        error_type_name: Name of the exception class

    Returns:
        Error category: "transient", "auth", "permanent", "throttling", or None
    """
    for category, error_types in NATS_ERROR_MAPPINGS.items():
        if error_type_name in error_types:
            return category
    return None


def nats_error_category(error: Exception) -> ErrorCategory:
    """
    Category for an error reported by the NATS client.

    Known nats-py exception types are classified by name; anything else
    falls back to the generic classification in core.errors.exceptions.
    """
    category = classify_nats_error_type(type(error).__name__)
    if category is not None:
        return _CATEGORY_BY_NAME[category]
    return classify_exception(error)


__all__ = [
    "NATS_ERROR_MAPPINGS",
    "classify_nats_error_type",
    "nats_error_category",
]
