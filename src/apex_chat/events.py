"""Event bus used by the session store to notify presentation layers.

Usage:
    bus = EventBus()

    def on_changed(event):
        print(event.data["loading"])

    bus.subscribe(SESSION_CHANGED, on_changed)
    bus.publish(SESSION_CHANGED, {"loading": True})
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
from typing import Any

LOGGER = logging.getLogger(__name__)

SESSION_CHANGED = "session.changed"
ATTACHMENT_CHANGED = "attachment.changed"
TOGGLES_CHANGED = "toggles.changed"


@dataclass
class Event:
    """Event data container."""

    name: str
    data: dict[str, Any]
    source: str | None = None


Handler = Callable[[Event], None]


class EventBus:
    """Synchronous publish/subscribe hub.

    Handlers run in subscription order on the caller's thread, which is the
    event loop thread for every mutation the engine performs.
    """

    def __init__(self) -> None:
        self._subscribers: dict[str, list[Handler]] = {}

    def subscribe(self, event_name: str, handler: Handler) -> None:
        """Register ``handler`` for ``event_name``."""
        self._subscribers.setdefault(event_name, []).append(handler)
        LOGGER.debug(
            "events.subscribe",
            extra={"event": "events.subscribe", "event_name": event_name},
        )

    def unsubscribe(self, event_name: str, handler: Handler) -> None:
        """Remove ``handler``; unknown handlers are ignored."""
        handlers = self._subscribers.get(event_name)
        if handlers and handler in handlers:
            handlers.remove(handler)

    def publish(
        self, event_name: str, data: dict[str, Any], source: str | None = None
    ) -> None:
        """Deliver an event to every subscriber.

        A failing handler is logged and does not stop delivery to the rest.
        """
        event = Event(name=event_name, data=data, source=source)
        for handler in list(self._subscribers.get(event_name, [])):
            try:
                handler(event)
            except Exception:
                LOGGER.exception(
                    "events.handler.failed",
                    extra={"event": "events.handler.failed", "event_name": event_name},
                )

    def clear(self, event_name: str | None = None) -> None:
        """Clear subscribers for one event, or all of them."""
        if event_name:
            self._subscribers.pop(event_name, None)
        else:
            self._subscribers.clear()
