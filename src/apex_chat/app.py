"""Terminal front-end that renders whatever the chat session produces."""

from __future__ import annotations

import logging
from typing import Any

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container
from textual.widgets import Footer, Header, Input

from .attachment import PathHandle
from .config import load_config
from .events import ATTACHMENT_CHANGED, TOGGLES_CHANGED, Event
from .logging_utils import configure_logging
from .renderer import DirectoryDownloader
from .screens import TextPromptScreen
from .session import ChatSession
from .widgets import ConversationView, InputBox, ToggleBar

LOGGER = logging.getLogger(__name__)


class AppClipboard:
    """Clipboard capability backed by the terminal's OSC 52 support."""

    def __init__(self, app: App[Any]) -> None:
        self._app = app

    def write_text(self, text: str) -> None:
        self._app.copy_to_clipboard(text)


class ApexChatApp(App[None]):
    """Chat UI for the DeepSeek completion endpoint."""

    CSS = """
    Screen {
        layout: vertical;
        background: $background;
    }

    #app-root {
        layout: vertical;
        width: 100%;
        height: 1fr;
    }

    #conversation {
        height: 1fr;
        padding: 1;
    }

    InputBox {
        height: auto;
        padding: 0 1 1 1;
        border-top: solid $panel;
        background: $surface;
    }

    #input_row, #attachment_row {
        height: auto;
    }

    #attachment_row.hidden {
        display: none;
    }

    #message_input {
        width: 1fr;
    }

    #send_button, #attach_button {
        margin: 0 1;
        min-width: 10;
    }

    MessageBubble {
        width: 85%;
        margin: 1 0;
        padding: 1 2;
        border: round $panel;
    }

    .message-user {
        background: $primary;
    }

    .message-assistant {
        background: $surface;
    }
    """

    BINDINGS = [
        Binding("ctrl+o", "attach_file", "Attach"),
        Binding("ctrl+e", "export_conversation", "Export"),
        Binding("ctrl+q", "quit", "Quit"),
    ]

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        session: ChatSession | None = None,
    ) -> None:
        self.config = config or load_config()
        configure_logging(self.config["logging"])
        super().__init__()
        self.title = str(self.config["app"]["title"])
        self.session = session or ChatSession(self.config)
        self.downloader = DirectoryDownloader(
            self.config.get("attachments", {}).get("download_directory") or None
        )

    def compose(self) -> ComposeResult:
        yield Header()
        with Container(id="app-root"):
            yield ConversationView(
                AppClipboard(self), self.downloader, id="conversation"
            )
            yield ToggleBar(self.session.toggles, id="toggle_bar")
            yield InputBox()
        yield Footer()

    def on_mount(self) -> None:
        self.session.store.subscribe(self._on_session_changed)
        self.session.store.bus.subscribe(ATTACHMENT_CHANGED, self._on_attachment_changed)
        self.session.store.bus.subscribe(TOGGLES_CHANGED, self._on_toggles_changed)
        self.query_one("#message_input", Input).focus()
        if not self.session.client.has_credential:
            self.notify(
                f"{self.session.api_key_env} is not set; sends will fail.",
                severity="warning",
            )

    def on_unmount(self) -> None:
        self.session.store.unsubscribe(self._on_session_changed)
        self.session.store.bus.unsubscribe(
            ATTACHMENT_CHANGED, self._on_attachment_changed
        )
        self.session.store.bus.unsubscribe(TOGGLES_CHANGED, self._on_toggles_changed)

    def _on_session_changed(self, event: Event) -> None:
        messages = event.data["messages"]
        loading = bool(event.data["loading"])
        self.call_later(self._render_snapshot, messages, loading)

    async def _render_snapshot(self, messages: tuple[Any, ...], loading: bool) -> None:
        view = self.query_one(ConversationView)
        await view.sync(messages, loading, self.session.toggles.markdown_output)
        self.query_one(InputBox).set_busy(loading)

    def _on_toggles_changed(self, event: Event) -> None:
        store = self.session.store
        self.call_later(self._render_snapshot, store.messages, store.loading)

    def _on_attachment_changed(self, event: Event) -> None:
        attachment = event.data.get("attachment")
        self.query_one(InputBox).show_attachment(attachment.name if attachment else None)

    async def _send_from_input(self) -> None:
        input_widget = self.query_one("#message_input", Input)
        text = input_widget.value
        if not self.session.can_submit(text):
            if self.session.loading:
                self.notify("Busy. Wait for the current reply.")
            return
        input_widget.value = ""
        self.run_worker(self.session.submit(text), group="turn")

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        if event.input.id == "message_input":
            event.stop()
            await self._send_from_input()

    async def on_input_box_send_requested(self, event: InputBox.SendRequested) -> None:
        event.stop()
        await self._send_from_input()

    def on_input_box_attach_requested(self, event: InputBox.AttachRequested) -> None:
        event.stop()
        self.action_attach_file()

    def on_input_box_clear_attachment_requested(
        self, event: InputBox.ClearAttachmentRequested
    ) -> None:
        event.stop()
        self.session.clear_attachment()

    def on_toggle_bar_toggle_changed(self, event: ToggleBar.ToggleChanged) -> None:
        event.stop()
        self.session.set_toggles(**{event.field: event.value})

    def action_attach_file(self) -> None:
        self.push_screen(
            TextPromptScreen("Attach file", placeholder="/path/to/file"),
            callback=self._on_attach_dismissed,
        )

    def _on_attach_dismissed(self, path: str | None) -> None:
        if not path:
            return
        handle = PathHandle(path)
        if not handle.path.is_file():
            self.notify(f"Not a file: {path}", severity="error")
            return
        self.session.attach(handle)

    def action_export_conversation(self) -> None:
        self.copy_to_clipboard(self.session.store.export_json())
        self.notify("Conversation copied to clipboard as JSON.")
