"""Scrollable conversation view widget."""

from __future__ import annotations

from textual.containers import VerticalScroll
from textual.widgets import Static

from ..message_store import Message
from ..renderer import ClipboardWriter, FileDownloader
from .message import MessageBubble


class ConversationView(VerticalScroll):
    """A scrollable container that mirrors the conversation snapshot."""

    def __init__(
        self,
        clipboard: ClipboardWriter,
        downloader: FileDownloader,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.clipboard = clipboard
        self.downloader = downloader
        self._rendered = 0
        self._markdown_output: bool | None = None
        self._indicator: Static | None = None

    async def sync(
        self, messages: tuple[Message, ...], loading: bool, markdown_output: bool
    ) -> None:
        """Mount bubbles for messages not yet shown and update the pending indicator.

        The conversation is append-only, so only the tail is rendered unless
        the Markdown setting changed, in which case every bubble is rebuilt.
        """
        if self._indicator is not None:
            await self._indicator.remove()
            self._indicator = None
        if markdown_output != self._markdown_output:
            await self.remove_children()
            self._rendered = 0
            self._markdown_output = markdown_output
        for message in messages[self._rendered :]:
            await self.mount(
                MessageBubble(
                    message,
                    markdown_output=markdown_output,
                    clipboard=self.clipboard,
                    downloader=self.downloader,
                )
            )
        self._rendered = len(messages)
        if loading:
            self._indicator = Static("...", id="pending-indicator")
            await self.mount(self._indicator)
        self.scroll_end(animate=False)
