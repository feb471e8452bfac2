"""Pydantic models for the storefront handlers.

This module provides the record shapes, the action enums that key the
dispatch tables, the response envelope and the environment-driven
handler configuration, using Pydantic v2 for validation and
serialization.
"""

from __future__ import annotations

import json
import os
from collections.abc import Mapping
from enum import Enum
from typing import Any

from pydantic import BaseModel, Field
from pydantic import ValidationError as PydanticValidationError

from .errors import ConfigurationError


class OrderAction(str, Enum):
    """Actions served by the order handler."""

    CREATE_ORDER = "createOrder"
    UPDATE_ORDER = "updateOrder"
    GET_ORDER = "getOrder"
    LIST_ORDERS = "listOrders"
    SEND_ORDER_CONFIRMATION = "sendOrderConfirmation"


class UserAction(str, Enum):
    """Actions served by the user handler."""

    REGISTER_USER = "registerUser"
    GET_USER = "getUser"
    UPDATE_USER = "updateUser"
    LIST_USERS = "listUsers"


class Order(BaseModel):
    """An order record as stored in the orders table.

    Attribute names are snake_case in Python and camelCase in the store
    and in response bodies.

    Example:
        >>> order = Order(
        ...     order_id="o1",
        ...     customer_id="c1",
        ...     items=[{"sku": "A1", "qty": 2}],
        ...     total_amount=10,
        ...     status="pending",
        ...     shipping_address="1 Main St",
        ...     created_at="2024-01-01T00:00:00.000Z",
        ...     updated_at="2024-01-01T00:00:00.000Z",
        ... )
        >>> order.to_record()["orderId"]
        'o1'
    """

    order_id: Any = Field(alias="orderId", description="Unique order identifier.")
    customer_id: Any = Field(alias="customerId", description="Customer placing the order.")
    items: Any = Field(description="Ordered items, in order.")
    total_amount: Any = Field(alias="totalAmount", description="Order total.")
    status: Any = Field(description="Free-form order status.")
    shipping_address: Any = Field(alias="shippingAddress", description="Where to ship.")
    created_at: str = Field(alias="createdAt", description="ISO-8601 creation time.")
    updated_at: str = Field(alias="updatedAt", description="ISO-8601 last update time.")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    def to_record(self) -> dict[str, Any]:
        """Return the record in its stored (camelCase) form."""
        return self.model_dump(by_alias=True)


class User(BaseModel):
    """A user record as stored in the users table.

    The password is stored exactly as supplied.
    """

    user_id: Any = Field(alias="userId", description="Unique user identifier.")
    name: Any = Field(description="Display name.")
    email: Any = Field(description="Contact email.")
    password: Any = Field(description="Password, stored as given.")
    created_at: str = Field(alias="createdAt", description="ISO-8601 creation time.")
    updated_at: str = Field(alias="updatedAt", description="ISO-8601 last update time.")

    model_config = {"populate_by_name": True, "extra": "ignore"}

    def to_record(self) -> dict[str, Any]:
        """Return the record in its stored (camelCase) form."""
        return self.model_dump(by_alias=True)


class HandlerResponse(BaseModel):
    """Response envelope returned by every handler invocation.

    ``body`` is always a JSON string; use :meth:`json_body` to decode it.

    Example:
        >>> response = HandlerResponse.build(404, {"message": "Order not found"})
        >>> response.to_dict()
        {'statusCode': 404, 'body': '{"message": "Order not found"}'}
    """

    status_code: int = Field(alias="statusCode", description="HTTP-style status code.")
    body: str = Field(description="JSON-encoded response payload.")

    model_config = {"populate_by_name": True}

    @classmethod
    def build(cls, status_code: int, payload: Any) -> HandlerResponse:
        """Create a response with ``payload`` JSON-encoded into the body."""
        return cls(status_code=status_code, body=json.dumps(payload))

    @property
    def ok(self) -> bool:
        """Check if the response indicates success (2xx status)."""
        return 200 <= self.status_code < 300

    def json_body(self) -> Any:
        """Decode the JSON body."""
        return json.loads(self.body)

    def to_dict(self) -> dict[str, Any]:
        """Return the envelope in its wire form."""
        return self.model_dump(by_alias=True)


class LogContext(BaseModel):
    """Context fields for structured logging.

    Example:
        >>> context = LogContext(action="getOrder", record_key="o1")
        >>> log_info("Order fetched", context)
    """

    action: str | None = Field(
        default=None,
        description="Action being served.",
    )
    handler: str | None = Field(
        default=None,
        description="Handler name.",
    )
    record_key: str | None = Field(
        default=None,
        description="Primary key of the record involved.",
    )
    request_id: str | None = Field(
        default=None,
        description="Invocation request id, when the runtime provides one.",
    )


class HandlerConfig(BaseModel):
    """Configuration for building handlers.

    Usually loaded from the environment with :meth:`from_env`.

    Example:
        >>> config = HandlerConfig(orders_table="orders", log_level="debug")
        >>> config.require_table("orders")
        'orders'
    """

    orders_table: str | None = Field(
        default=None,
        description="DynamoDB table holding orders.",
    )
    users_table: str | None = Field(
        default=None,
        description="DynamoDB table holding users.",
    )
    log_level: str = Field(
        default="info",
        pattern="^(trace|debug|info|warn|error)$",
        description="Log level (trace, debug, info, warn, error).",
    )
    sender_email: str = Field(
        default="no-reply@example.com",
        description="Source address for confirmation emails.",
    )
    region_name: str | None = Field(
        default=None,
        description="AWS region; boto3's default chain is used when unset.",
    )

    model_config = {"extra": "forbid"}

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> HandlerConfig:
        """Load configuration from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Returns:
            The validated configuration.

        Raises:
            ConfigurationError: If a variable holds an invalid value.
        """
        env = os.environ if environ is None else environ
        level = env.get("LOG_LEVEL", "info").lower()
        if level == "warning":
            level = "warn"
        try:
            return cls(
                orders_table=env.get("ORDERS_TABLE") or None,
                users_table=env.get("USERS_TABLE") or None,
                log_level=level,
                sender_email=env.get("SENDER_EMAIL") or "no-reply@example.com",
                region_name=env.get("AWS_REGION") or None,
            )
        except PydanticValidationError as e:
            raise ConfigurationError(
                "Invalid handler configuration",
                metadata={"errors": e.errors(include_url=False)},
            ) from e

    def require_table(self, kind: str) -> str:
        """Return the table name for ``kind`` ("orders" or "users").

        Raises:
            ConfigurationError: If the table name is not configured.
        """
        table = self.orders_table if kind == "orders" else self.users_table
        if not table:
            raise ConfigurationError(
                f"{kind.upper()}_TABLE is not set",
                metadata={"kind": kind},
            )
        return table


__all__ = [
    "OrderAction",
    "UserAction",
    "Order",
    "User",
    "HandlerResponse",
    "LogContext",
    "HandlerConfig",
]
