"""
Exception hierarchy for the messaging helpers.

Provides typed exceptions with a category so callers can decide how to
react to connection-setup failures without string matching.
"""

# Import ErrorCategory from canonical source to avoid duplicate enum issues
# (comparing enums from different classes always returns False)
from core.types import ErrorCategory


class MessagingError(Exception):
    """
    Base exception for all messaging errors.

    Attributes:
        message: Human-readable error description
        category: Error classification
        cause: Original exception if wrapping
        context: Additional context dict for debugging
    """

    category: ErrorCategory = ErrorCategory.UNKNOWN

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        context: dict | None = None,
    ):
        self.message = message
        self.cause = cause
        self.context = context or {}
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.cause:
            parts.append(f"Caused by: {self.cause}")
        return " | ".join(parts)


# =============================================================================
# Base categories
# =============================================================================


class AuthError(MessagingError):
    """Base class for authorization errors."""

    category = ErrorCategory.AUTH


class TransientError(MessagingError):
    """Base class for transient errors."""

    category = ErrorCategory.TRANSIENT


class PermanentError(MessagingError):
    """Base class for permanent errors."""

    category = ErrorCategory.PERMANENT


# =============================================================================
# Connection-setup errors
# =============================================================================


class DiscoveryError(TransientError):
    """Service discovery lookup failed or returned no endpoints."""

    def __init__(
        self,
        service_name: str,
        message: str | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(
            message or f"Failed to discover endpoints for '{service_name}'",
            cause,
            {"service_name": service_name},
        )
        self.service_name = service_name


class TLSConfigError(PermanentError):
    """TLS settings could not be built from the configured material."""

    pass


class ConfigurationError(PermanentError):
    """Configuration is structurally invalid."""

    pass


# =============================================================================
# Classification utilities
# =============================================================================

# Markers for string-based detection (fallback for non-MessagingError exceptions)
AUTH_ERROR_MARKERS = frozenset(
    {
        "authorization violation",
        "authentication",
        "unauthorized",
        "permissions violation",
    }
)

TRANSIENT_ERROR_MARKERS = frozenset(
    {
        "timeout",
        "timed out",
        "connection",
        "reconnect",
        "stale",
        "temporarily unavailable",
    }
)


def is_auth_error(exc: Exception) -> bool:
    """Check if exception is authorization-related."""
    if isinstance(exc, MessagingError):
        return exc.category == ErrorCategory.AUTH

    error_str = str(exc).lower()
    return any(marker in error_str for marker in AUTH_ERROR_MARKERS)


def is_transient_error(exc: Exception) -> bool:
    """Check if exception is transient."""
    if isinstance(exc, MessagingError):
        return exc.category == ErrorCategory.TRANSIENT

    error_str = str(exc).lower()
    return any(marker in error_str for marker in TRANSIENT_ERROR_MARKERS)


def classify_exception(exc: Exception) -> ErrorCategory:
    """Classify an exception into error category."""
    # Already classified
    if isinstance(exc, MessagingError):
        return exc.category

    if isinstance(exc, (TimeoutError, ConnectionError)):
        return ErrorCategory.TRANSIENT

    if is_auth_error(exc):
        return ErrorCategory.AUTH

    if is_transient_error(exc):
        return ErrorCategory.TRANSIENT

    return ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "MessagingError",
    "AuthError",
    "TransientError",
    "PermanentError",
    "DiscoveryError",
    "TLSConfigError",
    "ConfigurationError",
    "is_auth_error",
    "is_transient_error",
    "classify_exception",
]
