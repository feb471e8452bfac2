"""Error classes for the storefront handlers.

Every error a handler can produce maps onto one response status code:
- ValidationError: a required request field is absent (400)
- NotFoundError: no record stored under the requested key (404)
- CollaboratorError: the record store or the notifier failed (500)

Example:
    >>> from storefront.errors import NotFoundError, ValidationError
    >>>
    >>> raise ValidationError.missing_fields(["orderId"])
    >>>
    >>> raise NotFoundError("Order not found", metadata={"orderId": "o1"})
"""

from __future__ import annotations

from typing import Any


class StorefrontError(Exception):
    """Base class for all storefront errors.

    Attributes:
        message: Human-readable error message
        status_code: Response status code this error maps to
        metadata: Additional error context (logged, never returned)
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the error.

        Args:
            message: Error message
            metadata: Additional context
        """
        super().__init__(message)
        self.message = message
        self.metadata = metadata or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for structured logging.

        Returns:
            Dictionary with error details
        """
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "status_code": self.status_code,
            "metadata": self.metadata,
        }


class ValidationError(StorefrontError):
    """A required request field is absent.

    Example:
        >>> raise ValidationError.missing_fields(["userId", "email"])
    """

    status_code: int = 400

    def __init__(
        self,
        message: str,
        *,
        missing: list[str] | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, metadata=metadata)
        self.missing = list(missing or [])

    @classmethod
    def missing_fields(cls, missing: list[str]) -> ValidationError:
        """Build the error raised when required fields are absent."""
        return cls(
            "Missing required parameters",
            missing=missing,
            metadata={"missing": missing},
        )


class UnknownActionError(ValidationError):
    """The request names an action the handler does not serve.

    Example:
        >>> raise UnknownActionError("deleteOrder")
    """

    def __init__(self, action: Any) -> None:
        super().__init__("Invalid action", metadata={"action": action})
        self.action = action


class NotFoundError(StorefrontError):
    """No record is stored under the requested key.

    Raised by record stores on conditional updates and by handlers
    when a read comes back empty.

    Example:
        >>> raise NotFoundError("Order not found", metadata={"orderId": "o1"})
    """

    status_code: int = 404


class CollaboratorError(StorefrontError):
    """The record store or the notifier failed.

    The original exception is kept as ``cause`` for logging; it is never
    included in a response body.

    Example:
        >>> try:
        ...     table.put_item(Item=item)
        ... except ClientError as e:
        ...     raise CollaboratorError("put_item failed", cause=e) from e
    """

    status_code: int = 500

    def __init__(
        self,
        message: str,
        *,
        cause: BaseException | None = None,
        metadata: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, metadata=metadata)
        self.cause = cause

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.cause is not None:
            data["cause_type"] = type(self.cause).__name__
            data["cause"] = str(self.cause)
        return data


class ConfigurationError(StorefrontError):
    """The environment does not describe a usable handler.

    Example:
        >>> raise ConfigurationError("ORDERS_TABLE is not set")
    """

    status_code: int = 500


__all__ = [
    "StorefrontError",
    "ValidationError",
    "UnknownActionError",
    "NotFoundError",
    "CollaboratorError",
    "ConfigurationError",
]
