"""Error classifier for mapping exceptions to response status codes.

Handlers never let an exception escape; they ask the classifier which
status code the failure deserves and answer with that.

Example:
    >>> from storefront.errors.error_classifier import ErrorClassifier
    >>>
    >>> classifier = ErrorClassifier()
    >>> classifier.status_code(NotFoundError("missing"))
    404
    >>> classifier.status_code(RuntimeError("boom"))
    500
"""

from __future__ import annotations

from . import (
    CollaboratorError,
    ConfigurationError,
    NotFoundError,
    StorefrontError,
    ValidationError,
)

INTERNAL_ERROR = 500


class ErrorClassifier:
    """Classifies exceptions into response status codes.

    Determines the status code based on:
    1. The exception's own `status_code` attribute (storefront errors)
    2. Default behavior (500)

    Unknown errors default to 500 so that a collaborator failure is never
    reported as the caller's fault.

    Example:
        >>> classifier = ErrorClassifier()
        >>> classifier.status_code(ValidationError("missing orderId"))
        400
        >>> classifier.status_code(CollaboratorError("scan failed"))
        500
    """

    CLIENT_ERROR_CLASSES: tuple[type[Exception], ...] = (
        ValidationError,
        NotFoundError,
    )

    SERVER_ERROR_CLASSES: tuple[type[Exception], ...] = (
        CollaboratorError,
        ConfigurationError,
    )

    def __init__(self, *, default_status: int = INTERNAL_ERROR) -> None:
        """Initialize the classifier.

        Args:
            default_status: Status code for exceptions the classifier
                does not recognise.
        """
        self._default_status = default_status

    def status_code(self, exception: BaseException) -> int:
        """Return the response status code for an exception.

        Args:
            exception: The exception to classify

        Returns:
            HTTP-style status code
        """
        if isinstance(exception, StorefrontError):
            return exception.status_code
        return self._default_status

    def classify(self, exception: BaseException) -> dict[str, int | str]:
        """Classify an exception and return full details.

        Args:
            exception: The exception to classify

        Returns:
            Dictionary with classification details:
            - error_type: Exception class name
            - status_code: Response status code
            - classification: How the classification was determined

        Example:
            >>> ErrorClassifier().classify(NotFoundError("missing"))
            {'error_type': 'NotFoundError', 'status_code': 404, 'classification': 'client_class'}
        """
        error_type = type(exception).__name__
        status = self.status_code(exception)

        if isinstance(exception, self.CLIENT_ERROR_CLASSES):
            classification = "client_class"
        elif isinstance(exception, self.SERVER_ERROR_CLASSES):
            classification = "server_class"
        elif isinstance(exception, StorefrontError):
            classification = "explicit_attribute"
        else:
            classification = "default"

        return {
            "error_type": error_type,
            "status_code": status,
            "classification": classification,
        }


_default_classifier: ErrorClassifier | None = None


def get_classifier() -> ErrorClassifier:
    """Get the default error classifier instance.

    Returns:
        The singleton ErrorClassifier instance
    """
    global _default_classifier
    if _default_classifier is None:
        _default_classifier = ErrorClassifier()
    return _default_classifier


def status_code_for(exception: BaseException) -> int:
    """Convenience function returning the status code for an exception.

    Example:
        >>> from storefront.errors.error_classifier import status_code_for
        >>> status_code_for(ValidationError("bad"))
        400
    """
    return get_classifier().status_code(exception)


__all__ = [
    "ErrorClassifier",
    "get_classifier",
    "status_code_for",
]
