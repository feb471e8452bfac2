"""User handler: register, read, update and list users.

Passwords are stored as supplied and stripped from every response body.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .errors import NotFoundError
from .handler import ActionHandler, require_fields, supplied_fields, utc_timestamp
from .logging import log_info
from .store import RecordStore
from .types import User, UserAction

KEY = "userId"

REQUIRED_FIELDS = ("userId", "name", "email", "password")

UPDATABLE_FIELDS = ("name", "email", "password")

HIDDEN_FIELDS = frozenset({"password"})


def public_user(record: Mapping[str, Any]) -> dict[str, Any]:
    """Return ``record`` without the fields that never leave the handler."""
    return {k: v for k, v in record.items() if k not in HIDDEN_FIELDS}


class UserHandler(ActionHandler):
    """Serve user actions against a users store.

    Example:
        >>> handler = UserHandler(MemoryRecordStore("userId"))
        >>> handler.handle({"action": "getUser", "userId": "u1"}).status_code
        404
    """

    handler_name = "users"
    entity = "User"
    action_type = UserAction
    actions = {
        UserAction.REGISTER_USER: "register_user",
        UserAction.GET_USER: "get_user",
        UserAction.UPDATE_USER: "update_user",
        UserAction.LIST_USERS: "list_users",
    }
    failure_messages = {
        UserAction.REGISTER_USER: "Error registering user",
        UserAction.GET_USER: "Error fetching user",
        UserAction.UPDATE_USER: "Error updating user",
        UserAction.LIST_USERS: "Error listing users",
    }

    def __init__(self, store: RecordStore, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.store = store

    def register_user(self, event: Mapping[str, Any]):
        user_id, name, email, password = require_fields(event, REQUIRED_FIELDS)
        now = utc_timestamp()
        user = User(
            user_id=user_id,
            name=name,
            email=email,
            password=password,
            created_at=now,
            updated_at=now,
        )
        self.store.put(user.to_record())
        log_info("User registered", {KEY: user_id})
        return self.created({"message": "User registered successfully", KEY: user_id})

    def get_user(self, event: Mapping[str, Any]):
        (user_id,) = require_fields(event, (KEY,))
        user = self.store.get(user_id)
        if user is None:
            raise self.not_found(KEY, user_id)

        log_info("User fetched", {KEY: user_id})
        return self.ok(public_user(user))

    def update_user(self, event: Mapping[str, Any]):
        (user_id,) = require_fields(event, (KEY,))
        changes = supplied_fields(event, UPDATABLE_FIELDS)
        changes["updatedAt"] = utc_timestamp()

        try:
            updated = self.store.update(user_id, changes)
        except NotFoundError as e:
            raise self.not_found(KEY, user_id) from e

        log_info("User updated", {KEY: user_id, "fields": sorted(changes)})
        return self.ok({"message": "User updated successfully", "updatedUser": public_user(updated)})

    def list_users(self, event: Mapping[str, Any]):
        users = self.store.scan()
        log_info("Users listed", {"count": len(users)})
        return self.ok([public_user(u) for u in users])


__all__ = ["UserHandler", "public_user"]
