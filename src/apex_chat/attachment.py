"""Attachment handles and the text reader used when composing a turn."""

from __future__ import annotations

from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Protocol, runtime_checkable

from .exceptions import ReadError

LOGGER = logging.getLogger(__name__)


@runtime_checkable
class FileHandle(Protocol):
    """Anything with a display name and a byte payload."""

    name: str

    def read_bytes(self) -> bytes: ...


class PathHandle:
    """File handle backed by a filesystem path."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path).expanduser()
        self.name = self.path.name

    def read_bytes(self) -> bytes:
        resolved = self.path.resolve()
        if not resolved.exists():
            raise FileNotFoundError(f"File not found: {self.path}")
        if not resolved.is_file():
            raise IsADirectoryError(f"Not a file: {self.path}")
        return resolved.read_bytes()

    def __repr__(self) -> str:
        return f"PathHandle({str(self.path)!r})"


@dataclass(frozen=True)
class Attachment:
    """A file selected for the next turn."""

    name: str
    handle: FileHandle

    @classmethod
    def from_path(cls, path: str | Path) -> Attachment:
        handle = PathHandle(path)
        return cls(name=handle.name, handle=handle)


class AttachmentReader:
    """Read an attachment fully into memory as UTF-8 text."""

    def __init__(self, max_bytes: int = 0) -> None:
        self.max_bytes = max(0, max_bytes)

    def read(self, handle: FileHandle) -> str:
        """Return the decoded text of ``handle`` or raise ``ReadError``."""
        if not isinstance(handle, FileHandle):
            raise ReadError(f"Invalid file handle: {handle!r}")
        try:
            payload = handle.read_bytes()
        except (OSError, ValueError) as exc:
            raise ReadError(str(exc) or type(exc).__name__) from exc

        if not isinstance(payload, (bytes, bytearray)):
            raise ReadError(f"{handle.name}: read did not return bytes")
        if self.max_bytes and len(payload) > self.max_bytes:
            max_mb = self.max_bytes / (1024 * 1024)
            raise ReadError(f"{handle.name} is too large (max {max_mb:.1f}MB)")

        try:
            text = bytes(payload).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ReadError(f"{handle.name} is not valid UTF-8 text") from exc

        LOGGER.info(
            "attachment.read",
            extra={
                "event": "attachment.read",
                "file_name": handle.name,
                "bytes": len(payload),
            },
        )
        return text
