"""Action dispatch for storefront handlers.

An :class:`ActionDispatch` binds one action to the handler method that
serves it, so that ``dispatch.call(event)`` invokes
``handler.<method>(event)``. :func:`build_dispatch_table` turns a handler's
declared action table into these bindings and refuses tables that leave an
action unserved.

Example:
    >>> class Greeter:
    ...     def hello(self, event):
    ...         return {"greeting": f"hello {event['name']}"}
    ...
    >>> dispatch = ActionDispatch(Greeter(), "sayHello", "hello")
    >>> dispatch.call({"name": "Ann"})
    {'greeting': 'hello Ann'}
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Any


class ActionDispatch:
    """Binding of an action to the handler method that serves it.

    Attributes:
        handler: The handler instance.
        action: The action this binding serves.
        target_method: The method name invoked for the action.
    """

    def __init__(self, handler: Any, action: Any, target_method: str) -> None:
        """Initialize the binding.

        Args:
            handler: The handler instance.
            action: The action served.
            target_method: Name of the handler method to invoke.

        Raises:
            AttributeError: If handler doesn't have the target method.
        """
        if not callable(getattr(handler, target_method, None)):
            raise AttributeError(
                f"Handler {handler.__class__.__name__} does not have method '{target_method}'"
            )

        self._handler = handler
        self._action = action
        self._target_method = target_method
        self._method = getattr(handler, target_method)

    @property
    def handler(self) -> Any:
        return self._handler

    @property
    def action(self) -> Any:
        return self._action

    @property
    def target_method(self) -> str:
        return self._target_method

    def call(self, event: Mapping[str, Any]) -> Any:
        """Invoke the target method with the request event."""
        return self._method(event)

    def __repr__(self) -> str:
        action = self._action.value if isinstance(self._action, Enum) else self._action
        return (
            f"ActionDispatch("
            f"{self._handler.__class__.__name__}, "
            f"action={action!r}, "
            f"target_method={self._target_method!r})"
        )


def check_action_table(
    owner: str,
    action_type: type[Enum],
    actions: Mapping[Any, str],
) -> None:
    """Verify that ``actions`` maps every member of ``action_type``.

    Args:
        owner: Name used in error messages (usually the class name).
        action_type: Enum listing the actions that must be served.
        actions: Declared action -> method name table.

    Raises:
        TypeError: If an action is unmapped or a key is not an action.
    """
    declared = set(actions)
    expected = set(action_type)
    missing = expected - declared
    unknown = declared - expected

    if missing:
        names = sorted(a.value for a in missing)
        raise TypeError(f"{owner} does not serve actions: {', '.join(names)}")
    if unknown:
        raise TypeError(f"{owner} maps unknown actions: {sorted(map(str, unknown))}")


def build_dispatch_table(
    handler: Any,
    action_type: type[Enum],
    actions: Mapping[Any, str],
) -> dict[Any, ActionDispatch]:
    """Bind every action in ``actions`` to its method on ``handler``.

    Returns:
        Mapping of action -> ActionDispatch.
    """
    check_action_table(handler.__class__.__name__, action_type, actions)
    return {action: ActionDispatch(handler, action, method) for action, method in actions.items()}


__all__ = [
    "ActionDispatch",
    "build_dispatch_table",
    "check_action_table",
]
