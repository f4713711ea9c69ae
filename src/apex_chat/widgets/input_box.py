"""Input row containing message field, attach button, and send button."""

from __future__ import annotations

from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.message import Message
from textual.widgets import Button, Input, Label


class InputBox(Vertical):
    """Input region with message field, attach/clear buttons, and send button."""

    class AttachRequested(Message):
        """Posted when the user clicks the attach button."""

    class ClearAttachmentRequested(Message):
        """Posted when the user removes the selected file."""

    class SendRequested(Message):
        """Posted when the user clicks send."""

    def compose(self) -> ComposeResult:
        with Horizontal(id="input_row"):
            yield Button("Attach", id="attach_button", variant="default")
            yield Input(placeholder="Type your question...", id="message_input")
            yield Button("Send", id="send_button", variant="success")
        with Horizontal(id="attachment_row", classes="hidden"):
            yield Label("", id="attachment_label")
            yield Button("x", id="clear_attachment_button", variant="error")

    def show_attachment(self, name: str | None) -> None:
        row = self.query_one("#attachment_row", Horizontal)
        if name:
            self.query_one("#attachment_label", Label).update(f"Selected: {name}")
            row.remove_class("hidden")
        else:
            row.add_class("hidden")

    def set_busy(self, busy: bool) -> None:
        self.query_one("#message_input", Input).disabled = busy
        send = self.query_one("#send_button", Button)
        send.disabled = busy
        send.label = "Sending..." if busy else "Send"

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "attach_button":
            event.stop()
            self.post_message(self.AttachRequested())
        elif event.button.id == "clear_attachment_button":
            event.stop()
            self.post_message(self.ClearAttachmentRequested())
        elif event.button.id == "send_button":
            event.stop()
            self.post_message(self.SendRequested())
