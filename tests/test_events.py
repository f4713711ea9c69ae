"""Tests for the synchronous event bus."""

from __future__ import annotations

import unittest

from apex_chat.events import Event, EventBus


class EventBusTests(unittest.TestCase):
    def test_publish_reaches_subscribers_in_order(self) -> None:
        bus = EventBus()
        received: list[tuple[str, Event]] = []
        bus.subscribe("x", lambda e: received.append(("a", e)))
        bus.subscribe("x", lambda e: received.append(("b", e)))

        bus.publish("x", {"n": 1}, source="test")

        self.assertEqual([tag for tag, _ in received], ["a", "b"])
        self.assertEqual(received[0][1].data, {"n": 1})
        self.assertEqual(received[0][1].source, "test")

    def test_failing_handler_does_not_block_others(self) -> None:
        bus = EventBus()
        received: list[Event] = []

        def broken(event: Event) -> None:
            raise RuntimeError("boom")

        bus.subscribe("x", broken)
        bus.subscribe("x", received.append)
        with self.assertLogs("apex_chat.events", level="ERROR"):
            bus.publish("x", {})
        self.assertEqual(len(received), 1)

    def test_subscribe_logs_at_debug(self) -> None:
        bus = EventBus()
        with self.assertLogs("apex_chat.events", level="DEBUG") as logs:
            bus.subscribe("x", print)
        self.assertEqual(logs.records[0].event_name, "x")

    def test_unsubscribe_and_clear(self) -> None:
        bus = EventBus()
        received: list[Event] = []
        bus.subscribe("x", received.append)
        bus.unsubscribe("x", received.append)
        bus.unsubscribe("missing", received.append)
        bus.publish("x", {})
        self.assertEqual(received, [])

        bus.subscribe("y", received.append)
        bus.clear()
        bus.publish("y", {})
        self.assertEqual(received, [])


if __name__ == "__main__":
    unittest.main()
