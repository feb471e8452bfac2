"""pytest configuration and fixtures for storefront tests.

This module provides shared fixtures for testing the handlers, including
in-memory stores and notifiers, collaborators that always fail, and
sample request events.
"""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Any

import pytest

from storefront import (
    CollaboratorError,
    MemoryNotifier,
    MemoryRecordStore,
    Notifier,
    OrderHandler,
    RecordStore,
    UserHandler,
    reset_handlers,
)


class FailingRecordStore(RecordStore):
    """Record store whose every operation fails like an unreachable table."""

    def __init__(self, key_name: str) -> None:
        super().__init__(key_name)
        self.calls: list[str] = []

    @property
    def name(self) -> str:
        return "failing"

    def _fail(self, operation: str) -> Any:
        self.calls.append(operation)
        raise CollaboratorError(
            f"{operation} failed",
            cause=RuntimeError("boom: table unreachable"),
        )

    def get(self, key):
        return self._fail("get")

    def put(self, record):
        return self._fail("put")

    def update(self, key, fields):
        return self._fail("update")

    def scan(self):
        return self._fail("scan")


class FailingNotifier(Notifier):
    """Notifier that always fails to send."""

    def __init__(self) -> None:
        self.attempts = 0

    def send(self, recipient, subject, body):
        self.attempts += 1
        raise CollaboratorError("send failed", cause=RuntimeError("boom: SES rejected"))


@pytest.fixture(autouse=True)
def reset_storefront_state() -> Generator[None, None, None]:
    """Restore logging and cached entry-point handlers after each test."""
    yield
    logger = logging.getLogger("storefront")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    reset_handlers()


@pytest.fixture
def orders_store() -> MemoryRecordStore:
    return MemoryRecordStore("orderId", name="orders")


@pytest.fixture
def users_store() -> MemoryRecordStore:
    return MemoryRecordStore("userId", name="users")


@pytest.fixture
def notifier() -> MemoryNotifier:
    return MemoryNotifier()


@pytest.fixture
def orders_handler(orders_store: MemoryRecordStore, notifier: MemoryNotifier) -> OrderHandler:
    return OrderHandler(orders_store, notifier)


@pytest.fixture
def users_handler(users_store: MemoryRecordStore) -> UserHandler:
    return UserHandler(users_store)


@pytest.fixture
def failing_store_factory():
    """Build a FailingRecordStore for a key attribute."""
    return FailingRecordStore


@pytest.fixture
def failing_notifier() -> FailingNotifier:
    return FailingNotifier()


@pytest.fixture
def create_order_event() -> dict[str, Any]:
    """A complete createOrder request without an email."""
    return {
        "action": "createOrder",
        "orderId": "o1",
        "customerId": "c1",
        "items": [{"sku": "A1", "qty": 2}, {"sku": "B7", "qty": 1}],
        "totalAmount": 10,
        "status": "pending",
        "shippingAddress": "1 Main St, Springfield",
    }


@pytest.fixture
def register_user_event() -> dict[str, Any]:
    """A complete registerUser request."""
    return {
        "action": "registerUser",
        "userId": "u1",
        "name": "Ann",
        "email": "a@x.com",
        "password": "p",
    }


def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (require AWS credentials)",
    )
