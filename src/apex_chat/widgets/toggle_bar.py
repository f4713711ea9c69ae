"""Model picker and feature switches shown above the input row."""

from __future__ import annotations

from typing import Any

from textual.app import ComposeResult
from textual.containers import Horizontal
from textual.message import Message
from textual.widgets import Label, Select, Switch

from ..options import ModelChoice, ToggleConfig

SWITCH_FIELDS = {
    "deep_search_switch": "deep_search",
    "web_search_switch": "web_search",
    "markdown_switch": "markdown_output",
}


class ToggleBar(Horizontal):
    """Expose toggles; changes are forwarded as ``ToggleChanged`` messages."""

    DEFAULT_CSS = """
    ToggleBar {
        height: auto;
    }
    ToggleBar Label {
        padding: 1 1 0 2;
    }
    ToggleBar Select {
        width: 24;
    }
    """

    class ToggleChanged(Message):
        """Posted when a switch or the model picker changes."""

        def __init__(self, field: str, value: Any) -> None:
            super().__init__()
            self.field = field
            self.value = value

    def __init__(self, toggles: ToggleConfig, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._initial = toggles

    def compose(self) -> ComposeResult:
        yield Label("Model:")
        yield Select(
            [(choice.label, choice.value) for choice in ModelChoice],
            value=self._initial.model.value,
            allow_blank=False,
            id="model_select",
        )
        yield Label("Deep search:")
        yield Switch(value=self._initial.deep_search, id="deep_search_switch")
        yield Label("Web search:")
        yield Switch(value=self._initial.web_search, id="web_search_switch")
        yield Label("Markdown:")
        yield Switch(value=self._initial.markdown_output, id="markdown_switch")

    def on_switch_changed(self, event: Switch.Changed) -> None:
        field = SWITCH_FIELDS.get(event.switch.id or "")
        if field:
            event.stop()
            self.post_message(self.ToggleChanged(field, event.value))

    def on_select_changed(self, event: Select.Changed) -> None:
        if event.select.id == "model_select" and isinstance(event.value, str):
            event.stop()
            self.post_message(self.ToggleChanged("model", event.value))
