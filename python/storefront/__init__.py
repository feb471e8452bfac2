"""
Storefront handlers

Action-dispatched request handlers for orders and users, backed by a
DynamoDB table per record type and SES for order confirmations.

Example:
    >>> from storefront import OrderHandler, MemoryRecordStore, MemoryNotifier
    >>> handler = OrderHandler(MemoryRecordStore("orderId"), MemoryNotifier())
    >>> response = handler.handle({
    ...     "action": "createOrder",
    ...     "orderId": "o1",
    ...     "customerId": "c1",
    ...     "items": [{"sku": "A1", "qty": 1}],
    ...     "totalAmount": 10,
    ...     "status": "pending",
    ...     "shippingAddress": "1 Main St",
    ... })
    >>> response.status_code
    201

    >>> # Lambda entry points build their collaborators from the environment
    >>> from storefront import order_handler, user_handler
"""

from __future__ import annotations

__version__ = "0.1.0"

from storefront.bootstrap import (
    build_order_handler,
    build_user_handler,
    order_handler,
    reset_handlers,
    user_handler,
)
from storefront.dispatch import ActionDispatch
from storefront.errors import (
    CollaboratorError,
    ConfigurationError,
    NotFoundError,
    StorefrontError,
    UnknownActionError,
    ValidationError,
)
from storefront.errors.error_classifier import ErrorClassifier
from storefront.handler import ActionHandler
from storefront.logging import (
    configure_logging,
    log_debug,
    log_error,
    log_info,
    log_trace,
    log_warn,
)
from storefront.notifier import MemoryNotifier, Notifier, SesNotifier
from storefront.orders import OrderHandler
from storefront.store import DynamoRecordStore, MemoryRecordStore, RecordStore
from storefront.types import (
    HandlerConfig,
    HandlerResponse,
    LogContext,
    Order,
    OrderAction,
    User,
    UserAction,
)
from storefront.users import UserHandler


def version() -> str:
    """Return the package version."""
    return __version__


__all__ = [
    "__version__",
    "version",
    # Handlers
    "ActionHandler",
    "ActionDispatch",
    "OrderHandler",
    "UserHandler",
    # Entry points
    "order_handler",
    "user_handler",
    "build_order_handler",
    "build_user_handler",
    "reset_handlers",
    # Collaborators
    "RecordStore",
    "MemoryRecordStore",
    "DynamoRecordStore",
    "Notifier",
    "MemoryNotifier",
    "SesNotifier",
    # Types
    "HandlerConfig",
    "HandlerResponse",
    "LogContext",
    "Order",
    "OrderAction",
    "User",
    "UserAction",
    # Errors
    "StorefrontError",
    "ValidationError",
    "UnknownActionError",
    "NotFoundError",
    "CollaboratorError",
    "ConfigurationError",
    "ErrorClassifier",
    # Logging
    "configure_logging",
    "log_error",
    "log_warn",
    "log_info",
    "log_debug",
    "log_trace",
]
