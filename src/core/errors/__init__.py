"""
Error classification and exception hierarchy.

Provides:
- ErrorCategory enum for classifying errors
- MessagingError hierarchy for typed exceptions
- NATS error-type classifier for asynchronous transport errors
"""

from core.errors.exceptions import (
    AuthError,
    ConfigurationError,
    DiscoveryError,
    # Enums
    ErrorCategory,
    # Base classes
    MessagingError,
    PermanentError,
    TLSConfigError,
    TransientError,
    # Classification utilities
    classify_exception,
    is_auth_error,
    is_transient_error,
)
from core.errors.nats_classifier import (
    NATS_ERROR_MAPPINGS,
    classify_nats_error_type,
    nats_error_category,
)

__all__ = [
    # Enums
    "ErrorCategory",
    # Base classes
    "MessagingError",
    "AuthError",
    "TransientError",
    "PermanentError",
    # Connection-setup errors
    "DiscoveryError",
    "TLSConfigError",
    "ConfigurationError",
    # Classification utilities
    "is_auth_error",
    "is_transient_error",
    "classify_exception",
    # NATS classifiers
    "NATS_ERROR_MAPPINGS",
    "classify_nats_error_type",
    "nats_error_category",
]
