"""Topic based event bus shared by the app and its views.

Everything runs on the single asyncio/Qt thread, so subscribers are called
synchronously and in subscription order.

Example usage:
    services.event_bus.subscribe(STATE_CHANGED, self._on_state_changed)
    services.event_bus.emit(STATE_CHANGED, {"state": state})
"""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

EventCallback = Callable[[str, Dict[str, Any]], None]

STATE_CHANGED = "home.state_changed"


class EventBus:
    """Central event bus for decoupled notifications."""

    def __init__(self) -> None:
        self._subscribers: Dict[str, List[EventCallback]] = {}

    def subscribe(self, event_name: str, callback: EventCallback) -> None:
        """Register ``callback`` for ``event_name``; duplicates are ignored."""
        callbacks = self._subscribers.setdefault(event_name, [])
        if callback not in callbacks:
            callbacks.append(callback)

    def unsubscribe(self, event_name: str, callback: EventCallback) -> None:
        callbacks = self._subscribers.get(event_name)
        if callbacks and callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event_name: str, data: Optional[Dict[str, Any]] = None) -> None:
        """Call every subscriber of ``event_name`` with ``(event_name, data)``.

        A subscriber that raises is logged and skipped; the remaining
        subscribers still receive the event.
        """
        if data is None:
            data = {}
        for callback in list(self._subscribers.get(event_name, [])):
            try:
                callback(event_name, data)
            except Exception:
                logger.exception("Subscriber for '%s' failed", event_name)
