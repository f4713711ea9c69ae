"""Code block widget with copy and download buttons."""

from __future__ import annotations

import logging
from typing import Any

from rich.syntax import Syntax
from textual.app import ComposeResult
from textual.containers import Horizontal, Vertical
from textual.widgets import Button, Label, Static

from ..renderer import CodeBlockActions

LOGGER = logging.getLogger(__name__)

COPY_LABEL = "copy"
COPIED_LABEL = "copied"


class CodeBlock(Vertical):
    """Render a fenced code region with copy/download buttons in its header."""

    DEFAULT_CSS = """
    CodeBlock {
        height: auto;
        margin: 1 0;
        border: solid $panel;
        background: $surface-darken-1;
    }
    CodeBlock > #code-header {
        height: 1;
        padding: 0 1;
        background: $panel;
    }
    CodeBlock > #code-header > #lang-label {
        width: 1fr;
        color: $text-muted;
    }
    CodeBlock > #code-header > Button {
        width: auto;
        min-width: 8;
        height: 1;
        border: none;
        background: $panel;
        color: $text;
        padding: 0 1;
    }
    CodeBlock > #code-header > Button:hover {
        background: $accent;
    }
    CodeBlock > #code-body {
        height: auto;
        padding: 0 1;
    }
    """

    def __init__(self, actions: CodeBlockActions, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.actions = actions

    def compose(self) -> ComposeResult:
        region = self.actions.region
        with Horizontal(id="code-header"):
            yield Label(region.language or "code", id="lang-label")
            yield Button(COPY_LABEL, id="copy-btn")
            yield Button("download", id="download-btn")
        syntax = Syntax(
            region.code,
            region.language or "text",
            theme="monokai",
            line_numbers=False,
            word_wrap=True,
        )
        yield Static(syntax, id="code-body")

    def _refresh_copy_label(self) -> None:
        label = COPIED_LABEL if self.actions.copied else COPY_LABEL
        self.query_one("#copy-btn", Button).label = label

    def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id == "copy-btn":
            event.stop()
            self.actions.copy()
            self._refresh_copy_label()
            self.set_timer(self.actions.reset_after, self._refresh_copy_label)
            self.app.notify("Code copied to clipboard.")
        elif event.button.id == "download-btn":
            event.stop()
            try:
                target = self.actions.download()
            except OSError as exc:
                LOGGER.warning(
                    "ui.download.failed",
                    extra={"event": "ui.download.failed", "error": str(exc)},
                )
                self.app.notify(f"Download failed: {exc}", severity="error")
                return
            self.app.notify(f"Saved {target}")
