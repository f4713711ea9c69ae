"""Tests for attachment reading."""

from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

from apex_chat.attachment import Attachment, AttachmentReader, PathHandle
from apex_chat.exceptions import ReadError


class BrokenHandle:
    name = "broken.txt"

    def read_bytes(self) -> bytes:
        raise OSError("device not ready")


class MemoryHandle:
    def __init__(self, name: str, payload: bytes) -> None:
        self.name = name
        self.payload = payload

    def read_bytes(self) -> bytes:
        return self.payload


class AttachmentReaderTests(unittest.TestCase):
    """Validate decoding and failure mapping."""

    def test_reads_utf8_file_from_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "notes.md"
            path.write_text("héllo\nworld", encoding="utf-8")
            attachment = Attachment.from_path(path)
            self.assertEqual(attachment.name, "notes.md")
            self.assertEqual(AttachmentReader().read(attachment.handle), "héllo\nworld")

    def test_missing_file_raises_read_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            handle = PathHandle(Path(tmp) / "absent.txt")
            with self.assertRaises(ReadError):
                AttachmentReader().read(handle)

    def test_directory_raises_read_error(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            with self.assertRaises(ReadError):
                AttachmentReader().read(PathHandle(tmp))

    def test_underlying_failure_becomes_read_error(self) -> None:
        with self.assertRaises(ReadError) as ctx:
            AttachmentReader().read(BrokenHandle())
        self.assertIn("device not ready", str(ctx.exception))

    def test_invalid_utf8_raises_read_error(self) -> None:
        with self.assertRaises(ReadError):
            AttachmentReader().read(MemoryHandle("blob.bin", b"\xff\xfe\x00"))

    def test_invalid_handle_raises_read_error(self) -> None:
        with self.assertRaises(ReadError):
            AttachmentReader().read(object())  # type: ignore[arg-type]

    def test_size_bound_is_optional(self) -> None:
        payload = b"x" * 64
        self.assertEqual(AttachmentReader().read(MemoryHandle("a", payload)), "x" * 64)
        with self.assertRaises(ReadError):
            AttachmentReader(max_bytes=10).read(MemoryHandle("a", payload))


if __name__ == "__main__":
    unittest.main()
