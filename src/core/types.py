"""
Core types used across modules.

This module provides base enums shared across the core library to ensure
consistency between the exception hierarchy and the NATS error mapping.
"""

from enum import Enum


class ErrorCategory(Enum):
    """
    Classification of error types for handling decisions.

    Categories:
        TRANSIENT: Temporary failures that may clear up on their own
                   (e.g., DNS timeouts, stale connections)
        AUTH: Authorization failures requiring credential changes
        PERMANENT: Failures that won't succeed on retry
                   (e.g., bad TLS material, oversized payloads)
        THROTTLING: Consumer or producer is being outpaced
                    (e.g., slow consumer, outbound buffer full)
        UNKNOWN: Unclassified errors
    """

    TRANSIENT = "transient"
    AUTH = "auth"
    PERMANENT = "permanent"
    THROTTLING = "throttling"
    UNKNOWN = "unknown"


__all__ = [
    "ErrorCategory",
]
