"""Tests for the append-only store and its loading gate."""

from __future__ import annotations

import json
import unittest

from apex_chat.events import Event
from apex_chat.message_store import Message, MessageStore


class MessageStoreTests(unittest.TestCase):
    """Validate single-flight and notification behavior."""

    def setUp(self) -> None:
        self.store = MessageStore()
        self.events: list[Event] = []
        self.store.subscribe(self.events.append)

    def test_try_send_is_rejected_while_loading(self) -> None:
        self.assertTrue(self.store.try_send())
        self.store.append_user("first")
        before = self.store.messages
        event_count = len(self.events)

        self.assertFalse(self.store.try_send())
        self.assertEqual(self.store.messages, before)
        self.assertEqual(len(self.events), event_count)
        self.assertTrue(self.store.loading)

    def test_terminal_appends_clear_loading(self) -> None:
        self.store.begin_turn("q")
        self.store.append_assistant(Message(role="assistant", content="a"))
        self.assertFalse(self.store.loading)

        self.store.begin_turn("q2")
        self.store.append_error("Sorry, something went wrong: boom")
        self.assertFalse(self.store.loading)
        self.assertEqual(
            self.store.messages[-1],
            Message(role="assistant", content="Sorry, something went wrong: boom"),
        )

    def test_begin_turn_publishes_one_snapshot_with_flag_and_message(self) -> None:
        self.assertTrue(self.store.begin_turn("hello"))
        self.assertEqual(len(self.events), 1)
        snapshot = self.events[0].data
        self.assertTrue(snapshot["loading"])
        self.assertEqual(snapshot["messages"], (Message(role="user", content="hello"),))

    def test_append_error_without_turn_is_one_terminal_mutation(self) -> None:
        self.store.append_error("Sorry, failed to read the file: gone")
        self.assertEqual(len(self.events), 1)
        self.assertFalse(self.events[0].data["loading"])
        self.assertEqual(self.store.messages[0].role, "assistant")

    def test_begin_turn_rejected_while_loading(self) -> None:
        self.store.begin_turn("one")
        self.assertFalse(self.store.begin_turn("two"))
        self.assertEqual(len(self.store.messages), 1)

    def test_append_assistant_requires_assistant_role(self) -> None:
        with self.assertRaises(ValueError):
            self.store.append_assistant(Message(role="user", content="x"))

    def test_message_rejects_unknown_role(self) -> None:
        with self.assertRaises(ValueError):
            Message(role="system", content="x")  # type: ignore[arg-type]

    def test_unsubscribe_stops_notifications(self) -> None:
        self.store.unsubscribe(self.events.append)
        self.store.try_send()
        self.assertEqual(self.events, [])

    def test_export_json_uses_stable_structure(self) -> None:
        self.store.begin_turn("hello")
        self.store.append_assistant(Message(role="assistant", content="hi"))
        parsed = json.loads(self.store.export_json())
        self.assertEqual(
            parsed,
            [
                {"role": "user", "content": "hello"},
                {"role": "assistant", "content": "hi"},
            ],
        )


if __name__ == "__main__":
    unittest.main()
