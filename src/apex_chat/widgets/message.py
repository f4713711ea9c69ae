"""Message bubble widget for conversation rendering."""

from __future__ import annotations

from typing import Any

from rich.markdown import Markdown
from rich.text import Text
from textual.app import ComposeResult
from textual.containers import Vertical
from textual.widget import Widget
from textual.widgets import Static

from ..message_store import Message
from ..renderer import (
    ClipboardWriter,
    CodeBlockActions,
    FileDownloader,
    render_segments,
)
from .code_block import CodeBlock


class MessageBubble(Vertical):
    """Render a single chat message, splitting assistant replies into code blocks."""

    DEFAULT_CSS = """
    MessageBubble {
        height: auto;
    }
    MessageBubble > #header-block {
        padding: 0;
    }
    MessageBubble > .prose-segment {
        height: auto;
        padding: 0;
    }
    """

    def __init__(
        self,
        message: Message,
        *,
        markdown_output: bool,
        clipboard: ClipboardWriter,
        downloader: FileDownloader,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.message = message
        self.markdown_output = markdown_output
        self.clipboard = clipboard
        self.downloader = downloader
        self.add_class(f"message-{message.role}")

    @property
    def role_prefix(self) -> str:
        return "You" if self.message.role == "user" else "Assistant"

    def compose(self) -> ComposeResult:
        yield Static(Markdown(f"**{self.role_prefix}**"), id="header-block")
        yield from self._content_widgets()

    def _content_widgets(self) -> list[Widget]:
        content = self.message.content.rstrip()
        if self.message.role == "user":
            return [Static(Text(content), classes="prose-segment")]

        widgets: list[Widget] = []
        for segment in render_segments(content, self.markdown_output):
            if segment.region is not None:
                actions = CodeBlockActions(
                    segment.region, self.clipboard, self.downloader
                )
                widgets.append(CodeBlock(actions))
            elif self.markdown_output:
                widgets.append(Static(Markdown(segment.text), classes="prose-segment"))
            else:
                widgets.append(Static(Text(segment.text), classes="prose-segment"))
        return widgets
