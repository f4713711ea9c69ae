"""Fenced-code detection and per-region copy/download actions.

This module only reads assistant text; it never touches the message store.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
from pathlib import Path
import re
import time
from typing import Protocol

from platformdirs import user_downloads_path

LOGGER = logging.getLogger(__name__)

COPY_RESET_SECONDS = 2.0
DEFAULT_EXTENSION = "txt"
DOWNLOAD_STEM = "code-snippet"

_FENCE_RE = re.compile(
    r"```(?P<info>[^\n`]*)\n(?P<code>.*?)```",
    re.DOTALL,
)
_OPEN_FENCE_RE = re.compile(
    r"(?:^|\n)```(?P<info>[^\n`]*)\n(?P<code>.*)\Z",
    re.DOTALL,
)
_LANG_RE = re.compile(r"\w+")

# Conventional extensions for common fence tags; other tags are used verbatim.
_EXTENSIONS: dict[str, str] = {
    "python": "py",
    "py": "py",
    "javascript": "js",
    "js": "js",
    "jsx": "jsx",
    "typescript": "ts",
    "ts": "ts",
    "tsx": "tsx",
    "bash": "sh",
    "shell": "sh",
    "sh": "sh",
    "zsh": "sh",
    "rust": "rs",
    "ruby": "rb",
    "kotlin": "kt",
    "csharp": "cs",
    "cpp": "cpp",
    "markdown": "md",
    "yaml": "yml",
    "text": "txt",
    "plaintext": "txt",
}


@dataclass(frozen=True)
class CodeRegion:
    """A fenced code block found in assistant text."""

    index: int
    language: str
    code: str

    @property
    def extension(self) -> str:
        return file_extension(self.language)

    @property
    def filename(self) -> str:
        return download_filename(self.language)


@dataclass(frozen=True)
class Segment:
    """One piece of rendered content: prose, or a code region."""

    text: str
    region: CodeRegion | None = None

    @property
    def is_code(self) -> bool:
        return self.region is not None


def file_extension(language: str) -> str:
    """Derive a download extension from a fence language tag."""
    tag = language.strip().lower()
    if not tag:
        return DEFAULT_EXTENSION
    return _EXTENSIONS.get(tag, tag)


def download_filename(language: str) -> str:
    return f"{DOWNLOAD_STEM}.{file_extension(language)}"


def _language_from_info(info: str) -> str:
    match = _LANG_RE.match(info.strip())
    return match.group(0) if match else ""


def _strip_line_end(code: str) -> str:
    if code.endswith("\r\n"):
        return code[:-2]
    if code.endswith("\n"):
        return code[:-1]
    return code


def split_message(text: str) -> list[Segment]:
    """Split *text* into alternating prose and code-region segments.

    Whitespace-only prose between fences is dropped. Code keeps its content
    minus the line ending that precedes the closing fence. An unclosed final
    fence runs to the end of the text.
    """
    segments: list[Segment] = []
    cursor = 0
    index = 0
    for match in _FENCE_RE.finditer(text):
        start, end = match.span()
        if start > cursor:
            prose = text[cursor:start]
            if prose.strip():
                segments.append(Segment(prose))
        region = CodeRegion(
            index=index,
            language=_language_from_info(match.group("info")),
            code=_strip_line_end(match.group("code")),
        )
        segments.append(Segment(region.code, region))
        index += 1
        cursor = end
    tail = text[cursor:]
    opened = _OPEN_FENCE_RE.search(tail)
    if opened is not None:
        prose = tail[: opened.start()]
        if prose.strip():
            segments.append(Segment(prose))
        region = CodeRegion(
            index=index,
            language=_language_from_info(opened.group("info")),
            code=_strip_line_end(opened.group("code")),
        )
        segments.append(Segment(region.code, region))
    elif tail.strip():
        segments.append(Segment(tail))
    return segments


def extract_code_regions(text: str) -> list[CodeRegion]:
    """Return every fenced code region in order of appearance."""
    return [s.region for s in split_message(text) if s.region is not None]


def render_segments(content: str, markdown_output: bool) -> list[Segment]:
    """Return the segments to display for an assistant message.

    With markdown output off the message is shown verbatim, without code
    actions.
    """
    if not markdown_output:
        return [Segment(content)]
    return split_message(content)


class ClipboardWriter(Protocol):
    """Places text on the system clipboard."""

    def write_text(self, text: str) -> None: ...


class FileDownloader(Protocol):
    """Saves text under a suggested filename and returns where it went."""

    def save(self, filename: str, text: str) -> Path: ...


class DirectoryDownloader:
    """Write downloads into a directory without overwriting existing files."""

    def __init__(self, directory: str | Path | None = None) -> None:
        self.directory = (
            Path(directory).expanduser() if directory else user_downloads_path()
        )

    def _free_path(self, filename: str) -> Path:
        candidate = self.directory / filename
        stem, suffix = candidate.stem, candidate.suffix
        counter = 1
        while candidate.exists():
            candidate = self.directory / f"{stem}-{counter}{suffix}"
            counter += 1
        return candidate

    def save(self, filename: str, text: str) -> Path:
        self.directory.mkdir(parents=True, exist_ok=True)
        target = self._free_path(filename)
        target.write_text(text, encoding="utf-8")
        LOGGER.info(
            "renderer.download.saved",
            extra={"event": "renderer.download.saved", "path": str(target)},
        )
        return target


class CodeBlockActions:
    """Copy and download actions for one code region.

    ``copied`` turns true on copy and reads false again once
    ``reset_after`` seconds have passed on ``clock``.
    """

    def __init__(
        self,
        region: CodeRegion,
        clipboard: ClipboardWriter,
        downloader: FileDownloader,
        *,
        reset_after: float = COPY_RESET_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.region = region
        self.clipboard = clipboard
        self.downloader = downloader
        self.reset_after = reset_after
        self._clock = clock
        self._copied_until: float | None = None

    @property
    def copied(self) -> bool:
        if self._copied_until is None:
            return False
        if self._clock() >= self._copied_until:
            self._copied_until = None
            return False
        return True

    def copy(self) -> None:
        self.clipboard.write_text(self.region.code)
        self._copied_until = self._clock() + self.reset_after

    def download(self) -> Path:
        return self.downloader.save(self.region.filename, self.region.code)
