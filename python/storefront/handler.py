"""Action handler base class.

This module provides the ActionHandler abstract base class that the order
and user handlers inherit from. A subclass declares which enum lists its
actions and which method serves each one; the base class checks that
table when the subclass is defined, dispatches each request, and turns
every outcome, including failures, into a response envelope.

Example:
    >>> from enum import Enum
    >>> from storefront.handler import ActionHandler
    >>>
    >>> class PingAction(str, Enum):
    ...     PING = "ping"
    ...
    >>> class PingHandler(ActionHandler):
    ...     handler_name = "ping"
    ...     action_type = PingAction
    ...     actions = {PingAction.PING: "ping"}
    ...
    ...     def ping(self, event):
    ...         return self.ok({"message": "pong"})
    ...
    >>> PingHandler().handle({"action": "ping"}).status_code
    200
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime, timezone
from enum import Enum
from typing import Any, ClassVar

from .dispatch import ActionDispatch, build_dispatch_table, check_action_table
from .errors import NotFoundError, StorefrontError, UnknownActionError, ValidationError
from .errors.error_classifier import ErrorClassifier, get_classifier
from .logging import log_error, log_info, log_warn
from .types import HandlerResponse, LogContext

OK = 200
CREATED = 201


def utc_timestamp() -> str:
    """Current time as an ISO-8601 UTC string with millisecond precision.

    Example:
        >>> utc_timestamp()
        '2024-05-01T09:30:00.123Z'
    """
    now = datetime.now(timezone.utc)
    return now.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def is_present(value: Any) -> bool:
    """Whether a request value counts as supplied.

    None and the empty string are absent; zero, False and empty
    collections are present.
    """
    return value is not None and value != ""


def require_fields(event: Mapping[str, Any], fields: Iterable[str]) -> list[Any]:
    """Return the values of ``fields`` from ``event``.

    Raises:
        ValidationError: Naming every absent field.
    """
    fields = list(fields)
    missing = [f for f in fields if not is_present(event.get(f))]
    if missing:
        raise ValidationError.missing_fields(missing)
    return [event[f] for f in fields]


def supplied_fields(event: Mapping[str, Any], fields: Iterable[str]) -> dict[str, Any]:
    """Return the subset of ``fields`` present in ``event``."""
    return {f: event[f] for f in fields if is_present(event.get(f))}


class ActionHandler:
    """Base class for action-dispatched handlers.

    Class Attributes:
        handler_name: Identifier used in logs.
        action_type: Enum listing every action the handler serves.
        actions: Mapping of action -> method name. Must cover action_type.
        failure_messages: Mapping of action -> message returned on a 500.
        entity: Name of the record type, used in "not found" messages.

    Example:
        >>> handler = OrderHandler(store, notifier)
        >>> response = handler.handle({"action": "getOrder", "orderId": "o1"})
        >>> response.status_code
        200
    """

    handler_name: ClassVar[str] = ""
    action_type: ClassVar[type[Enum] | None] = None
    actions: ClassVar[Mapping[Any, str]] = {}
    failure_messages: ClassVar[Mapping[Any, str]] = {}
    entity: ClassVar[str] = "Record"

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        if cls.action_type is None:
            return
        check_action_table(cls.__name__, cls.action_type, cls.actions)
        for action, method in cls.actions.items():
            if not callable(getattr(cls, method, None)):
                label = getattr(action, "value", action)
                raise TypeError(f"{cls.__name__}.{method} (for {label!r}) is not defined")

    def __init__(self, classifier: ErrorClassifier | None = None) -> None:
        if self.action_type is None:
            raise TypeError(f"{self.__class__.__name__} must set action_type")
        self._classifier = classifier or get_classifier()
        self._dispatch: dict[Any, ActionDispatch] = build_dispatch_table(
            self, self.action_type, self.actions
        )

    @property
    def name(self) -> str:
        return self.handler_name or self.__class__.__name__

    def __call__(self, event: Mapping[str, Any] | None, context: Any = None) -> dict[str, Any]:
        """Serve one invocation and return the wire-form envelope."""
        return self.handle(event, request_id=getattr(context, "aws_request_id", None)).to_dict()

    def handle(
        self,
        event: Mapping[str, Any] | None,
        *,
        request_id: str | None = None,
    ) -> HandlerResponse:
        """Dispatch ``event`` on its ``action`` field.

        Never raises: every failure becomes an error response.

        Args:
            event: The request object.
            request_id: Invocation id to attach to log lines.

        Returns:
            The response envelope.
        """
        event = dict(event or {})
        log_info("Event received", {"handler": self.name, "request_id": request_id, "event": event})

        raw_action = event.get("action")
        try:
            action = self.action_type(raw_action)  # type: ignore[misc]
        except ValueError:
            log_warn("Invalid action", {"handler": self.name, "action": raw_action})
            return self.error_response(UnknownActionError(raw_action))

        try:
            return self._dispatch[action].call(event)
        except Exception as e:
            return self._failure(action, event, e, request_id=request_id)

    def _failure(
        self,
        action: Any,
        event: Mapping[str, Any],
        error: Exception,
        *,
        request_id: str | None = None,
    ) -> HandlerResponse:
        context = LogContext(
            handler=self.name,
            action=getattr(action, "value", action),
            request_id=request_id,
        )
        fields: dict[str, Any] = {
            **context.model_dump(exclude_none=True),
            **self._classifier.classify(error),
        }

        if isinstance(error, ValidationError):
            log_error("Missing required parameters", {**fields, "missing": error.missing, "event": event})
            return self.error_response(error)

        if isinstance(error, NotFoundError):
            log_warn(error.message, {**fields, **error.metadata})
            return self.error_response(error)

        detail = error.to_dict() if isinstance(error, StorefrontError) else {"error": str(error)}
        message = self.failure_messages.get(action, "Internal error")
        log_error(message, {**fields, "detail": detail})
        return self.respond(int(fields["status_code"]), {"message": message})

    # =========================================================================
    # Response helpers
    # =========================================================================

    def respond(self, status_code: int, payload: Any) -> HandlerResponse:
        return HandlerResponse.build(status_code, payload)

    def ok(self, payload: Any) -> HandlerResponse:
        return self.respond(OK, payload)

    def created(self, payload: Any) -> HandlerResponse:
        return self.respond(CREATED, payload)

    def error_response(self, error: StorefrontError) -> HandlerResponse:
        """Response for a client error; only the message (and missing fields) leave."""
        payload: dict[str, Any] = {"message": error.message}
        if isinstance(error, ValidationError) and error.missing:
            payload["missing"] = error.missing
        return self.respond(error.status_code, payload)

    def not_found(self, key_name: str, key: Any) -> NotFoundError:
        """Build the NotFoundError for ``key``."""
        return NotFoundError(f"{self.entity} not found", metadata={key_name: key})

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(name={self.name!r})"


__all__ = [
    "ActionHandler",
    "utc_timestamp",
    "is_present",
    "require_fields",
    "supplied_fields",
]
