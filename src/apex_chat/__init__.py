"""Top-level package for apex-chat."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from .app import ApexChatApp
    from .attachment import Attachment, AttachmentReader, PathHandle
    from .client import CompletionClient
    from .composer import compose
    from .config import ensure_config_dir, load_config
    from .exceptions import (
        ApexChatError,
        ApiError,
        ConfigError,
        ConfigValidationError,
        NetworkError,
        ReadError,
    )
    from .message_store import Message, MessageStore
    from .options import ModelChoice, ToggleConfig
    from .session import ChatSession

__all__ = [
    "ApexChatApp",
    "ApexChatError",
    "ApiError",
    "Attachment",
    "AttachmentReader",
    "ChatSession",
    "CompletionClient",
    "ConfigError",
    "ConfigValidationError",
    "Message",
    "MessageStore",
    "ModelChoice",
    "NetworkError",
    "PathHandle",
    "ReadError",
    "ToggleConfig",
    "compose",
    "ensure_config_dir",
    "load_config",
]

_LAZY_EXPORTS: dict[str, str] = {
    "ApexChatApp": ".app",
    "Attachment": ".attachment",
    "AttachmentReader": ".attachment",
    "PathHandle": ".attachment",
    "ChatSession": ".session",
    "CompletionClient": ".client",
    "compose": ".composer",
    "ensure_config_dir": ".config",
    "load_config": ".config",
    "ApexChatError": ".exceptions",
    "ApiError": ".exceptions",
    "ConfigError": ".exceptions",
    "ConfigValidationError": ".exceptions",
    "NetworkError": ".exceptions",
    "ReadError": ".exceptions",
    "Message": ".message_store",
    "MessageStore": ".message_store",
    "ModelChoice": ".options",
    "ToggleConfig": ".options",
}


def __getattr__(name: str) -> Any:
    """Lazily import symbols to keep UI dependencies optional at import time."""
    module_name = _LAZY_EXPORTS.get(name)
    if module_name is None:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    from importlib import import_module

    return getattr(import_module(module_name, __name__), name)
