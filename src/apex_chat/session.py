"""Chat session orchestration: one user submission through its terminal outcome."""

from __future__ import annotations

import logging
from typing import Any

from .attachment import Attachment, AttachmentReader, FileHandle
from .client import CompletionClient
from .composer import compose
from .config import DEFAULT_CONFIG, resolve_api_key
from .events import ATTACHMENT_CHANGED, TOGGLES_CHANGED
from .exceptions import ApexChatError, ConfigError, ReadError
from .message_store import Message, MessageStore
from .options import ModelChoice, ToggleConfig

LOGGER = logging.getLogger(__name__)


def diagnostic_for(exc: BaseException, api_key_env: str = "DEEPSEEK_API_KEY") -> str:
    """Return the human-readable conversation entry for a failed turn."""
    if isinstance(exc, ConfigError):
        return (
            "Sorry, the API key is not configured. Set the "
            f"{api_key_env} environment variable and restart."
        )
    if isinstance(exc, ReadError):
        return f"Sorry, failed to read the file: {exc}"
    reason = str(exc) if isinstance(exc, ApexChatError) else "Unknown error"
    return f"Sorry, something went wrong: {reason}"


class ChatSession:
    """Own the toggles, the pending attachment, and the conversation."""

    def __init__(
        self,
        config: dict[str, Any] | None = None,
        *,
        client: CompletionClient | None = None,
        reader: AttachmentReader | None = None,
        store: MessageStore | None = None,
    ) -> None:
        self.config = config or DEFAULT_CONFIG
        api_config = self.config.get("api", {})
        self.api_key_env = str(api_config.get("api_key_env", "DEEPSEEK_API_KEY"))
        # The credential is read once here; restarting picks up a new value.
        self.client = client or CompletionClient(
            api_key=resolve_api_key(api_config),
            endpoint=str(api_config.get("endpoint", DEFAULT_CONFIG["api"]["endpoint"])),
            timeout=api_config.get("timeout_seconds"),
            api_key_env=self.api_key_env,
        )
        attachments_config = self.config.get("attachments", {})
        self.reader = reader or AttachmentReader(
            max_bytes=int(attachments_config.get("max_bytes", 0))
        )
        self.store = store or MessageStore()
        self._toggles = ToggleConfig.from_config(self.config)
        self._attachment: Attachment | None = None

    @property
    def messages(self) -> tuple[Message, ...]:
        return self.store.messages

    @property
    def loading(self) -> bool:
        return self.store.loading

    @property
    def toggles(self) -> ToggleConfig:
        return self._toggles

    @property
    def attachment(self) -> Attachment | None:
        return self._attachment

    def set_toggles(self, **changes: Any) -> ToggleConfig:
        """Update toggles; they apply from the next submission on."""
        self._toggles = self._toggles.with_changes(**changes)
        self.store.bus.publish(
            TOGGLES_CHANGED, {"toggles": self._toggles}, source="session"
        )
        return self._toggles

    def set_model(self, model: ModelChoice | str) -> ToggleConfig:
        return self.set_toggles(model=model)

    def attach(self, handle: FileHandle) -> Attachment:
        """Select the file sent with the next submission, replacing any other."""
        self._attachment = Attachment(name=handle.name, handle=handle)
        self.store.bus.publish(
            ATTACHMENT_CHANGED, {"attachment": self._attachment}, source="session"
        )
        return self._attachment

    def clear_attachment(self) -> None:
        if self._attachment is None:
            return
        self._attachment = None
        self.store.bus.publish(ATTACHMENT_CHANGED, {"attachment": None}, source="session")

    def can_submit(self, text: str) -> bool:
        """Return whether ``submit(text)`` would start a turn."""
        if self.store.loading:
            return False
        return bool(text.strip()) or self._attachment is not None

    async def submit(self, text: str) -> bool:
        """Run one turn. Returns False when the submission was rejected.

        The credential check, the attachment read and composition all finish
        before the loading flag is taken together with the user message. A
        failure there leaves one diagnostic and no user message.
        """
        if not self.can_submit(text):
            return False

        toggles = self._toggles
        attachment = self._attachment
        self.clear_attachment()
        LOGGER.info(
            "session.turn.start",
            extra={
                "event": "session.turn.start",
                "model": toggles.model.value,
                "has_attachment": attachment is not None,
            },
        )

        try:
            self.client.require_credential()
            attachment_text = (
                self.reader.read(attachment.handle) if attachment is not None else None
            )
            content = compose(text, attachment_text, toggles)
            if content is None:
                raise ReadError("nothing to send")
        except Exception as exc:  # noqa: BLE001 - a turn must always reach a terminal entry.
            self._fail(exc)
            return True

        history = self.store.messages
        if not self.store.begin_turn(content):
            return False

        try:
            reply = await self.client.send(
                history, Message(role="user", content=content), toggles.model
            )
        except Exception as exc:  # noqa: BLE001 - a turn must always reach a terminal entry.
            self._fail(exc)
            return True

        self.store.append_assistant(reply)
        LOGGER.info(
            "session.turn.complete",
            extra={
                "event": "session.turn.complete",
                "message_count": self.store.message_count,
            },
        )
        return True

    def _fail(self, exc: Exception) -> None:
        if isinstance(exc, ApexChatError):
            LOGGER.warning(
                "session.turn.failed",
                extra={
                    "event": "session.turn.failed",
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
        else:
            LOGGER.exception(
                "session.turn.crashed",
                extra={"event": "session.turn.crashed", "error_type": type(exc).__name__},
            )
        self.store.append_error(diagnostic_for(exc, self.api_key_env))
