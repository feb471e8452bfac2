"""Tests for the bin/invoke.py local runner."""

from __future__ import annotations

import importlib.util
import json
from pathlib import Path

import pytest

SCRIPT = Path(__file__).resolve().parent.parent / "bin" / "invoke.py"


@pytest.fixture
def invoke(monkeypatch):
    """Load bin/invoke.py as a module with a clean handler environment."""
    for name in ("ORDERS_TABLE", "USERS_TABLE", "LOG_LEVEL", "SENDER_EMAIL", "AWS_REGION"):
        monkeypatch.delenv(name, raising=False)
    spec = importlib.util.spec_from_file_location("invoke", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestInvokeScript:
    """Tests for running events through the local runner."""

    def test_event_list_shares_memory_store(self, invoke, tmp_path, capsys):
        """Test a create followed by a get in one run finds the order."""
        events = tmp_path / "events.json"
        events.write_text(
            json.dumps(
                [
                    {
                        "action": "createOrder",
                        "orderId": "o1",
                        "customerId": "c1",
                        "items": [{"sku": "A1"}],
                        "totalAmount": 5,
                        "status": "pending",
                        "shippingAddress": "1 Main St",
                        "email": "a@x.com",
                    },
                    {"action": "getOrder", "orderId": "o1"},
                ]
            )
        )

        assert invoke.main(["orders", "--event", str(events)]) == 0

        captured = capsys.readouterr()
        assert '"statusCode": 201' in captured.out
        assert '"statusCode": 200' in captured.out
        assert "[email] to=a@x.com subject='Order Confirmation'" in captured.err

    def test_aws_without_table_fails(self, invoke, tmp_path, capsys):
        """Test --aws reports a missing table instead of raising."""
        event = tmp_path / "event.json"
        event.write_text(json.dumps({"action": "listUsers"}))

        assert invoke.main(["users", "--aws", "--event", str(event)]) == 1
        assert "USERS_TABLE is not set" in capsys.readouterr().err

    def test_load_events_accepts_single_object(self, invoke, tmp_path):
        event = tmp_path / "event.json"
        event.write_text(json.dumps({"action": "listOrders"}))

        assert invoke.load_events(str(event)) == [{"action": "listOrders"}]
