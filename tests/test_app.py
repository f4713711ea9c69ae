"""Headless UI tests driven through Textual's pilot."""

from __future__ import annotations

from copy import deepcopy
import logging
import unittest

import httpx
from textual.widgets import Input

from apex_chat.app import ApexChatApp
from apex_chat.client import CompletionClient
from apex_chat.config import DEFAULT_CONFIG
from apex_chat.session import ChatSession
from apex_chat.widgets import CodeBlock, ConversationView, MessageBubble, ToggleBar

from fakes import RecordingTransport, completion_body


class ApexChatAppTests(unittest.IsolatedAsyncioTestCase):
    """Drive turns through the terminal front-end."""

    def setUp(self) -> None:
        root = logging.getLogger()
        self._original_level = root.level
        self._original_handlers = list(root.handlers)

    def tearDown(self) -> None:
        root = logging.getLogger()
        root.setLevel(self._original_level)
        root.handlers.clear()
        root.handlers.extend(self._original_handlers)

    def _app(self, reply: str) -> tuple[ApexChatApp, RecordingTransport]:
        transport = RecordingTransport(
            lambda request: httpx.Response(200, json=completion_body(reply))
        )
        config = deepcopy(DEFAULT_CONFIG)
        config["logging"]["structured"] = False
        config["defaults"]["markdown_output"] = True
        client = CompletionClient(api_key="sk-test", client=transport.client())
        session = ChatSession(config, client=client)
        return ApexChatApp(config=config, session=session), transport

    async def test_enter_sends_message_and_renders_reply(self) -> None:
        app, transport = self._app("Here:\n```python\nprint(4)\n```")
        async with app.run_test() as pilot:
            app.query_one("#message_input", Input).value = "What is 2+2?"
            await pilot.press("enter")
            await app.workers.wait_for_complete()
            await pilot.pause()

            self.assertEqual(transport.calls, 1)
            self.assertEqual(
                [m.role for m in app.session.messages], ["user", "assistant"]
            )
            view = app.query_one(ConversationView)
            self.assertEqual(len(view.query(MessageBubble)), 2)
            self.assertEqual(len(view.query(CodeBlock)), 1)
            self.assertEqual(app.query_one("#message_input", Input).value, "")

    async def test_markdown_toggle_rerenders_past_replies(self) -> None:
        app, _ = self._app("Here:\n```python\nprint(4)\n```")
        async with app.run_test() as pilot:
            app.query_one("#message_input", Input).value = "code please"
            await pilot.press("enter")
            await app.workers.wait_for_complete()
            await pilot.pause()
            view = app.query_one(ConversationView)
            self.assertEqual(len(view.query(CodeBlock)), 1)

            app.query_one(ToggleBar).post_message(
                ToggleBar.ToggleChanged("markdown_output", False)
            )
            await pilot.pause()
            await pilot.pause()

            self.assertFalse(app.session.toggles.markdown_output)
            self.assertEqual(len(view.query(MessageBubble)), 2)
            self.assertEqual(len(view.query(CodeBlock)), 0)

    async def test_blank_input_sends_nothing(self) -> None:
        app, transport = self._app("unused")
        async with app.run_test() as pilot:
            await pilot.press("enter")
            await pilot.pause()
            self.assertEqual(transport.calls, 0)
            self.assertEqual(app.session.messages, ())

    async def test_toggle_change_updates_session(self) -> None:
        app, _ = self._app("unused")
        async with app.run_test() as pilot:
            app.query_one(ToggleBar).post_message(
                ToggleBar.ToggleChanged("web_search", True)
            )
            await pilot.pause()
            self.assertTrue(app.session.toggles.web_search)


if __name__ == "__main__":
    unittest.main()
