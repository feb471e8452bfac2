"""Handler bootstrap and Lambda entry points.

This module builds handlers from the environment and exposes the two
functions a Lambda runtime invokes. Handlers (and their boto3 resources)
are built on first use and reused for the life of the process.

Example:
    >>> # Lambda configuration: handler = storefront.bootstrap.order_handler
    >>> order_handler({"action": "getOrder", "orderId": "o1"}, context)
    {'statusCode': 200, 'body': '{...}'}
    >>>
    >>> # Custom wiring
    >>> handler = build_order_handler(HandlerConfig(orders_table="orders-dev"))
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .errors import StorefrontError
from .logging import configure_logging, log_error, log_info
from .notifier import Notifier, SesNotifier
from .orders import OrderHandler
from .store import DynamoRecordStore, RecordStore
from .types import HandlerConfig, HandlerResponse
from .users import UserHandler

_order_handler: OrderHandler | None = None
_user_handler: UserHandler | None = None


def build_order_handler(
    config: HandlerConfig | None = None,
    *,
    store: RecordStore | None = None,
    notifier: Notifier | None = None,
) -> OrderHandler:
    """Build an order handler.

    Collaborators not passed in are created from ``config``: a DynamoDB
    store on ``orders_table`` and an SES notifier sending as
    ``sender_email``.

    Args:
        config: Handler configuration. Loaded from the environment if None.
        store: Orders store to use instead of DynamoDB.
        notifier: Notifier to use instead of SES.

    Returns:
        The configured OrderHandler.

    Raises:
        ConfigurationError: If ORDERS_TABLE is needed but not set.
    """
    config = config or HandlerConfig.from_env()
    configure_logging(config.log_level)

    if store is None:
        store = DynamoRecordStore.from_table_name(
            config.require_table("orders"), "orderId", region_name=config.region_name
        )
    if notifier is None:
        notifier = SesNotifier(config.sender_email, region_name=config.region_name)

    log_info("Order handler built", {"store": store.name, "notifier": type(notifier).__name__})
    return OrderHandler(store, notifier)


def build_user_handler(
    config: HandlerConfig | None = None,
    *,
    store: RecordStore | None = None,
) -> UserHandler:
    """Build a user handler on a DynamoDB store unless ``store`` is given.

    Raises:
        ConfigurationError: If USERS_TABLE is needed but not set.
    """
    config = config or HandlerConfig.from_env()
    configure_logging(config.log_level)

    if store is None:
        store = DynamoRecordStore.from_table_name(
            config.require_table("users"), "userId", region_name=config.region_name
        )

    log_info("User handler built", {"store": store.name})
    return UserHandler(store)


def order_handler(event: Mapping[str, Any] | None, context: Any = None) -> dict[str, Any]:
    """Lambda entry point for order actions."""
    global _order_handler
    if _order_handler is None:
        try:
            _order_handler = build_order_handler()
        except StorefrontError as e:
            return _bootstrap_failure("orders", e)
    return _order_handler(event, context)


def user_handler(event: Mapping[str, Any] | None, context: Any = None) -> dict[str, Any]:
    """Lambda entry point for user actions."""
    global _user_handler
    if _user_handler is None:
        try:
            _user_handler = build_user_handler()
        except StorefrontError as e:
            return _bootstrap_failure("users", e)
    return _user_handler(event, context)


def reset_handlers() -> None:
    """Forget the cached handlers.

    This is primarily for testing, so the next invocation rebuilds from
    the current environment.
    """
    global _order_handler, _user_handler
    _order_handler = None
    _user_handler = None


def _bootstrap_failure(kind: str, error: StorefrontError) -> dict[str, Any]:
    log_error("Handler bootstrap failed", {"handler": kind, "error": error.to_dict()})
    return HandlerResponse.build(error.status_code, {"message": "Internal error"}).to_dict()


__all__ = [
    "build_order_handler",
    "build_user_handler",
    "order_handler",
    "user_handler",
    "reset_handlers",
]
