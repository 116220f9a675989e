"""
Tests for exception hierarchy and error classification.
"""

from core.errors.exceptions import (
    AuthError,
    ConfigurationError,
    DiscoveryError,
    ErrorCategory,
    MessagingError,
    PermanentError,
    TLSConfigError,
    TransientError,
    classify_exception,
    is_auth_error,
    is_transient_error,
)


class TestErrorCategory:
    """Test ErrorCategory enum."""

    def test_all_categories_exist(self):
        """All expected categories are defined."""
        assert ErrorCategory.TRANSIENT.value == "transient"
        assert ErrorCategory.AUTH.value == "auth"
        assert ErrorCategory.PERMANENT.value == "permanent"
        assert ErrorCategory.THROTTLING.value == "throttling"
        assert ErrorCategory.UNKNOWN.value == "unknown"


class TestMessagingError:
    """Test base MessagingError class."""

    def test_basic_error(self):
        err = MessagingError("Something went wrong")
        assert err.message == "Something went wrong"
        assert err.cause is None
        assert err.context == {}
        assert err.category == ErrorCategory.UNKNOWN
        assert str(err) == "Something went wrong"

    def test_error_with_cause(self):
        cause = ValueError("Invalid value")
        err = MessagingError("Wrapper message", cause=cause)
        assert err.cause is cause
        assert str(err) == "Wrapper message | Caused by: Invalid value"

    def test_error_with_context(self):
        err = MessagingError("Error", context={"subject": "logs.app"})
        assert err.context["subject"] == "logs.app"


class TestConnectionSetupErrors:

    def test_discovery_error_is_transient(self):
        err = DiscoveryError("_nats._tcp.example.com")
        assert isinstance(err, TransientError)
        assert err.category == ErrorCategory.TRANSIENT
        assert err.service_name == "_nats._tcp.example.com"
        assert err.context == {"service_name": "_nats._tcp.example.com"}
        assert "_nats._tcp.example.com" in err.message

    def test_discovery_error_custom_message(self):
        err = DiscoveryError("svc", message="No endpoints found for 'svc'")
        assert err.message == "No endpoints found for 'svc'"

    def test_tls_config_error_is_permanent(self):
        err = TLSConfigError("bad cert", cause=OSError("missing"))
        assert isinstance(err, PermanentError)
        assert err.category == ErrorCategory.PERMANENT
        assert "missing" in str(err)

    def test_configuration_error_is_permanent(self):
        assert ConfigurationError("bad").category == ErrorCategory.PERMANENT


class TestClassification:

    def test_messaging_errors_keep_their_category(self):
        assert classify_exception(AuthError("denied")) == ErrorCategory.AUTH
        assert classify_exception(DiscoveryError("svc")) == ErrorCategory.TRANSIENT

    def test_builtin_timeout_and_connection_errors_are_transient(self):
        assert classify_exception(TimeoutError()) == ErrorCategory.TRANSIENT
        assert classify_exception(ConnectionRefusedError()) == ErrorCategory.TRANSIENT

    def test_auth_markers(self):
        exc = RuntimeError("nats: Authorization Violation")
        assert is_auth_error(exc) is True
        assert classify_exception(exc) == ErrorCategory.AUTH

    def test_transient_markers(self):
        exc = RuntimeError("stale connection")
        assert is_transient_error(exc) is True
        assert classify_exception(exc) == ErrorCategory.TRANSIENT

    def test_unknown(self):
        assert classify_exception(ValueError("odd")) == ErrorCategory.UNKNOWN

    def test_messaging_error_not_matched_by_text(self):
        assert is_auth_error(PermanentError("unauthorized")) is False
