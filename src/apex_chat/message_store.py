"""Append-only conversation storage with a single-flight loading gate."""

from __future__ import annotations

from dataclasses import dataclass
import json
import logging
from typing import Any, Literal

from .events import SESSION_CHANGED, EventBus, Handler

LOGGER = logging.getLogger(__name__)

Role = Literal["user", "assistant"]
ROLES: frozenset[str] = frozenset({"user", "assistant"})


@dataclass(frozen=True)
class Message:
    """A single role-tagged conversation entry."""

    role: Role
    content: str

    def __post_init__(self) -> None:
        if self.role not in ROLES:
            raise ValueError(f"Unsupported message role {self.role!r}.")

    def to_dict(self) -> dict[str, str]:
        """Return the wire representation used in request bodies."""
        return {"role": self.role, "content": self.content}


class MessageStore:
    """Hold the ordered conversation and the in-flight flag.

    Every mutation publishes exactly one ``session.changed`` event carrying a
    snapshot, so observers never see a half-applied transition.
    """

    def __init__(self, bus: EventBus | None = None) -> None:
        self._messages: list[Message] = []
        self._loading = False
        self.bus = bus or EventBus()

    @property
    def messages(self) -> tuple[Message, ...]:
        """Return an immutable snapshot of the conversation."""
        return tuple(self._messages)

    @property
    def loading(self) -> bool:
        return self._loading

    @property
    def message_count(self) -> int:
        return len(self._messages)

    def subscribe(self, handler: Handler) -> None:
        """Receive a ``session.changed`` event after every mutation."""
        self.bus.subscribe(SESSION_CHANGED, handler)

    def unsubscribe(self, handler: Handler) -> None:
        self.bus.unsubscribe(SESSION_CHANGED, handler)

    def try_send(self) -> bool:
        """Take the loading flag; return False without mutating if already held."""
        if self._loading:
            LOGGER.info(
                "store.send.rejected", extra={"event": "store.send.rejected"}
            )
            return False
        self._loading = True
        self._notify("send")
        return True

    def begin_turn(self, content: str) -> bool:
        """Take the loading flag and append the user message as one mutation."""
        if self._loading:
            LOGGER.info(
                "store.send.rejected", extra={"event": "store.send.rejected"}
            )
            return False
        self._loading = True
        self._messages.append(Message(role="user", content=content))
        self._notify("user")
        return True

    def append_user(self, content: str) -> None:
        """Append the composed user message for the in-flight turn."""
        self._messages.append(Message(role="user", content=content))
        self._notify("user")

    def append_assistant(self, message: Message) -> None:
        """Append the assistant reply and clear the loading flag."""
        if message.role != "assistant":
            raise ValueError("append_assistant requires an assistant-role message.")
        self._finish(message, "assistant")

    def append_error(self, text: str) -> None:
        """Append a diagnostic as an assistant-role message and clear the flag.

        Also valid when no turn holds the flag, for failures that happen before
        the user message is appended.
        """
        self._finish(Message(role="assistant", content=text), "error")

    def export_json(self) -> str:
        """Export current history using stable list and field ordering."""
        return json.dumps(
            [message.to_dict() for message in self._messages],
            ensure_ascii=False,
            separators=(",", ":"),
        )

    def _finish(self, message: Message, kind: str) -> None:
        self._messages.append(message)
        self._loading = False
        self._notify(kind)

    def _notify(self, kind: str) -> None:
        snapshot: dict[str, Any] = {
            "kind": kind,
            "messages": self.messages,
            "loading": self._loading,
        }
        self.bus.publish(SESSION_CHANGED, snapshot, source="message_store")
