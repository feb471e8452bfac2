"""Order handler: create, update, read and list orders.

Actions:
    createOrder: orderId, customerId, items, totalAmount, status,
        shippingAddress required; email optional. Stores the order and then
        tries to email a confirmation.
    updateOrder: orderId required; status and shippingAddress merged when
        supplied.
    getOrder: orderId required.
    listOrders: no fields.
    sendOrderConfirmation: orderId and email required.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .errors import NotFoundError
from .handler import ActionHandler, is_present, require_fields, supplied_fields, utc_timestamp
from .logging import log_error, log_info, log_warn
from .notifier import Notifier, confirmation_email
from .store import RecordStore
from .types import Order, OrderAction

KEY = "orderId"

REQUIRED_FIELDS = (
    "orderId",
    "customerId",
    "items",
    "totalAmount",
    "status",
    "shippingAddress",
)

UPDATABLE_FIELDS = ("status", "shippingAddress")


class OrderHandler(ActionHandler):
    """Serve order actions against an orders store and a notifier.

    Example:
        >>> handler = OrderHandler(MemoryRecordStore("orderId"), MemoryNotifier())
        >>> handler.handle({"action": "listOrders"}).json_body()
        []
    """

    handler_name = "orders"
    entity = "Order"
    action_type = OrderAction
    actions = {
        OrderAction.CREATE_ORDER: "create_order",
        OrderAction.UPDATE_ORDER: "update_order",
        OrderAction.GET_ORDER: "get_order",
        OrderAction.LIST_ORDERS: "list_orders",
        OrderAction.SEND_ORDER_CONFIRMATION: "send_order_confirmation",
    }
    failure_messages = {
        OrderAction.CREATE_ORDER: "Error creating order",
        OrderAction.UPDATE_ORDER: "Error updating order",
        OrderAction.GET_ORDER: "Error fetching order",
        OrderAction.LIST_ORDERS: "Error listing orders",
        OrderAction.SEND_ORDER_CONFIRMATION: "Error sending order confirmation",
    }

    def __init__(self, store: RecordStore, notifier: Notifier, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.store = store
        self.notifier = notifier

    def create_order(self, event: Mapping[str, Any]):
        order_id, customer_id, items, total_amount, status, shipping_address = require_fields(
            event, REQUIRED_FIELDS
        )
        now = utc_timestamp()
        order = Order(
            order_id=order_id,
            customer_id=customer_id,
            items=items,
            total_amount=total_amount,
            status=status,
            shipping_address=shipping_address,
            created_at=now,
            updated_at=now,
        )
        self.store.put(order.to_record())
        log_info("Order created", {KEY: order_id})

        confirmation_sent = self._confirm_created_order(order_id, event.get("email"))
        return self.created(
            {
                "message": "Order created successfully",
                KEY: order_id,
                "confirmationSent": confirmation_sent,
            }
        )

    def update_order(self, event: Mapping[str, Any]):
        (order_id,) = require_fields(event, (KEY,))
        changes = supplied_fields(event, UPDATABLE_FIELDS)
        changes["updatedAt"] = utc_timestamp()

        try:
            updated = self.store.update(order_id, changes)
        except NotFoundError as e:
            raise self.not_found(KEY, order_id) from e

        log_info("Order updated", {KEY: order_id, "fields": sorted(changes)})
        return self.ok({"message": "Order updated successfully", "updatedOrder": updated})

    def get_order(self, event: Mapping[str, Any]):
        (order_id,) = require_fields(event, (KEY,))
        order = self.store.get(order_id)
        if order is None:
            raise self.not_found(KEY, order_id)

        log_info("Order fetched", {KEY: order_id})
        return self.ok(order)

    def list_orders(self, event: Mapping[str, Any]):
        orders = self.store.scan()
        log_info("Orders listed", {"count": len(orders)})
        return self.ok(orders)

    def send_order_confirmation(self, event: Mapping[str, Any]):
        order_id, email = require_fields(event, (KEY, "email"))
        self._send_confirmation(order_id, email)
        return self.ok({"message": "Order confirmation sent"})

    def _send_confirmation(self, order_id: Any, email: str) -> None:
        subject, body = confirmation_email(order_id)
        self.notifier.send(email, subject, body)
        log_info("Order confirmation sent", {KEY: order_id, "email": email})

    def _confirm_created_order(self, order_id: Any, email: Any) -> bool:
        """Best-effort confirmation after create; reports whether it went out."""
        if not is_present(email):
            log_warn("No email supplied, confirmation skipped", {KEY: order_id})
            return False
        try:
            self._send_confirmation(order_id, email)
        except Exception as e:
            log_error(
                "Order confirmation failed after create",
                {KEY: order_id, "error_type": type(e).__name__, "error": str(e)},
            )
            return False
        return True


__all__ = ["OrderHandler"]
