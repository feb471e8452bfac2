#!/usr/bin/env python3
"""Invoke a storefront handler locally.

Reads one event object, or a JSON array of events run in order, from a
file or stdin and prints each response envelope. By default the handler
runs on in-memory collaborators, so an array of events can create records
and read them back in one run. With --aws the handler is built from the
environment exactly as the Lambda entry points build it.

Usage:
    echo '{"action": "listOrders"}' | bin/invoke.py orders
    bin/invoke.py users --event events/register_then_get.json
    ORDERS_TABLE=orders-dev bin/invoke.py orders --aws --event event.json
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from typing import Any

sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "python"))

from storefront import (
    HandlerConfig,
    MemoryNotifier,
    MemoryRecordStore,
    build_order_handler,
    build_user_handler,
)
from storefront.errors import StorefrontError


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("handler", choices=["orders", "users"])
    parser.add_argument("--event", help="JSON file with the event(s); stdin when omitted")
    parser.add_argument("--aws", action="store_true", help="use DynamoDB/SES from the environment")
    return parser.parse_args(argv)


def load_events(path: str | None) -> list[dict[str, Any]]:
    if path:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    else:
        data = json.load(sys.stdin)
    return data if isinstance(data, list) else [data]


def build(kind: str, use_aws: bool) -> Any:
    config = HandlerConfig.from_env()
    if kind == "orders":
        if use_aws:
            return build_order_handler(config)
        return build_order_handler(
            config, store=MemoryRecordStore("orderId"), notifier=MemoryNotifier()
        )
    if use_aws:
        return build_user_handler(config)
    return build_user_handler(config, store=MemoryRecordStore("userId"))


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    try:
        handler = build(args.handler, args.aws)
    except StorefrontError as e:
        print(f"Cannot build {args.handler} handler: {e.message}", file=sys.stderr)
        return 1

    for event in load_events(args.event):
        print(json.dumps(handler(event), indent=2))

    notifier = getattr(handler, "notifier", None)
    if isinstance(notifier, MemoryNotifier):
        for email in notifier.sent:
            print(f"[email] to={email.recipient} subject={email.subject!r}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
