"""Error hierarchy and classifier tests.

These tests verify:
- StorefrontError is the base of every handler error
- each error carries the status code it maps to
- ErrorClassifier status codes, classify() structure and the singleton
"""

from __future__ import annotations

import pytest

from storefront.errors import (
    CollaboratorError,
    ConfigurationError,
    NotFoundError,
    StorefrontError,
    UnknownActionError,
    ValidationError,
)
from storefront.errors.error_classifier import (
    ErrorClassifier,
    get_classifier,
    status_code_for,
)


class TestErrorHierarchy:
    """Test exception class hierarchy."""

    @pytest.mark.parametrize(
        ("error_class", "status"),
        [
            (ValidationError, 400),
            (UnknownActionError, 400),
            (NotFoundError, 404),
            (CollaboratorError, 500),
            (ConfigurationError, 500),
        ],
    )
    def test_status_codes(self, error_class, status):
        """Each error class maps to its response status."""
        assert issubclass(error_class, StorefrontError)
        assert error_class.status_code == status

    def test_unknown_action_is_validation_error(self):
        """Unknown actions are a kind of bad request."""
        error = UnknownActionError("deleteOrder")

        assert isinstance(error, ValidationError)
        assert error.action == "deleteOrder"
        assert error.message == "Invalid action"

    def test_missing_fields_factory(self):
        """ValidationError.missing_fields records the absent names."""
        error = ValidationError.missing_fields(["orderId", "status"])

        assert error.missing == ["orderId", "status"]
        assert error.metadata == {"missing": ["orderId", "status"]}

    def test_to_dict(self):
        """to_dict exposes type, message, status and metadata."""
        error = NotFoundError("Order not found", metadata={"orderId": "o1"})

        assert error.to_dict() == {
            "error_type": "NotFoundError",
            "message": "Order not found",
            "status_code": 404,
            "metadata": {"orderId": "o1"},
        }

    def test_collaborator_error_keeps_cause(self):
        """CollaboratorError carries the underlying exception for logging."""
        cause = RuntimeError("connection reset")
        error = CollaboratorError("put_item failed", cause=cause)

        data = error.to_dict()
        assert error.cause is cause
        assert data["cause_type"] == "RuntimeError"
        assert data["cause"] == "connection reset"

    def test_can_catch_by_base_class(self):
        """Errors can be caught by the base class."""
        with pytest.raises(StorefrontError):
            raise CollaboratorError("scan failed")


class TestErrorClassifier:
    """Test status code classification."""

    @pytest.mark.parametrize(
        ("exception", "status"),
        [
            (ValidationError("bad"), 400),
            (UnknownActionError("x"), 400),
            (NotFoundError("missing"), 404),
            (CollaboratorError("down"), 500),
            (ConfigurationError("unset"), 500),
            (RuntimeError("bug"), 500),
            (KeyError("k"), 500),
        ],
    )
    def test_status_code(self, exception, status):
        """Exceptions map to their response status; unknown ones to 500."""
        assert ErrorClassifier().status_code(exception) == status

    def test_default_status_override(self):
        """The default applies to unrecognised exceptions only."""
        classifier = ErrorClassifier(default_status=503)

        assert classifier.status_code(RuntimeError("x")) == 503
        assert classifier.status_code(NotFoundError("x")) == 404

    @pytest.mark.parametrize(
        ("exception", "classification"),
        [
            (NotFoundError("x"), "client_class"),
            (UnknownActionError("x"), "client_class"),
            (CollaboratorError("x"), "server_class"),
            (StorefrontError("x"), "explicit_attribute"),
            (ValueError("x"), "default"),
        ],
    )
    def test_classify(self, exception, classification):
        """classify() reports how the status was decided."""
        result = ErrorClassifier().classify(exception)

        assert result["error_type"] == type(exception).__name__
        assert result["classification"] == classification

    def test_singleton_and_convenience(self):
        """get_classifier returns one instance; status_code_for uses it."""
        assert get_classifier() is get_classifier()
        assert status_code_for(ValidationError("x")) == 400
