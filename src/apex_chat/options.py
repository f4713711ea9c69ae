"""Per-turn feature toggles and model selection."""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any


class ModelChoice(str, Enum):
    """Models offered by the completion endpoint."""

    DEEPSEEK_CHAT = "deepseek-chat"
    DEEPSEEK_REASONER = "deepseek-reasoner"

    @property
    def label(self) -> str:
        """Return the display name shown in model pickers."""
        return _MODEL_LABELS[self]

    @classmethod
    def parse(cls, value: ModelChoice | str) -> ModelChoice:
        """Accept either an enum member or its wire identifier."""
        if isinstance(value, ModelChoice):
            return value
        return cls(str(value).strip())


_MODEL_LABELS = {
    ModelChoice.DEEPSEEK_CHAT: "DeepSeek-V3",
    ModelChoice.DEEPSEEK_REASONER: "DeepSeek-R1",
}


@dataclass(frozen=True)
class ToggleConfig:
    """Snapshot of the toggles read when a turn is composed."""

    deep_search: bool = False
    web_search: bool = False
    markdown_output: bool = False
    model: ModelChoice = ModelChoice.DEEPSEEK_CHAT

    @classmethod
    def from_config(cls, config: dict[str, Any]) -> ToggleConfig:
        """Build initial toggles from the [defaults] config section."""
        defaults = config.get("defaults", {})
        return cls(
            deep_search=bool(defaults.get("deep_search", False)),
            web_search=bool(defaults.get("web_search", False)),
            markdown_output=bool(defaults.get("markdown_output", False)),
            model=ModelChoice.parse(defaults.get("model", ModelChoice.DEEPSEEK_CHAT)),
        )

    def with_changes(self, **changes: Any) -> ToggleConfig:
        """Return a copy with ``changes`` applied."""
        if "model" in changes:
            changes["model"] = ModelChoice.parse(changes["model"])
        return replace(self, **changes)
