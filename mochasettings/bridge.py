"""Routing of JSON messages from the web front end to named actions."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any, Optional

ActionHandler = Callable[[Any, Optional[str]], None]


def _get_item(obj: dict, name: str) -> tuple[bool, Any]:
    """Look up a member by name, ignoring case; return (found, value)."""
    wanted = name.lower()
    for key, value in obj.items():
        if key.lower() == wanted:
            return True, value
    return False, None


class Bridge:
    """Dispatches ``{"action": ..., "data": ...}`` messages to handlers."""

    def __init__(self) -> None:
        self._handlers: dict[str, ActionHandler] = {}

    def register_action(self, action: str, handler: ActionHandler) -> None:
        """Register ``handler`` for ``action``, replacing any earlier one."""
        self._handlers[action] = handler

    def handle_message(self, webview: Any, message: Any) -> bool:
        """Dispatch a message; return True if a handler was called.

        The handler receives the webview and the ``data`` member as compact
        JSON text, or None when the message carries no ``data``.
        """
        if not isinstance(message, str):
            return False
        try:
            root = json.loads(message)
        except ValueError:
            return False
        if not isinstance(root, dict):
            return False
        found, action = _get_item(root, "action")
        if not found or not isinstance(action, str):
            return False
        handler = self._handlers.get(action)
        if handler is None:
            return False
        has_data, data = _get_item(root, "data")
        payload = (
            json.dumps(data, separators=(",", ":"), ensure_ascii=False)
            if has_data
            else None
        )
        handler(webview, payload)
        return True