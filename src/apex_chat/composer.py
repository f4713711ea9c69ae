"""Compose the outbound user message from text, attachment, and toggles."""

from __future__ import annotations

from .options import ToggleConfig

ATTACHMENT_HEADER = "[Uploaded file content]:\n"
QUESTION_HEADER = "\n\n[My question]:\n"

DEEP_SEARCH_MARKER = "\n\n(Deep search enabled)"
WEB_SEARCH_MARKER = "\n\n(Web search enabled)"
MARKDOWN_MARKER = (
    "\n\n(Please format the output with Markdown syntax"
    " and put the final result in a code block)"
)


def toggle_suffix(toggles: ToggleConfig) -> str:
    """Return the markers for active toggles in their fixed order."""
    parts: list[str] = []
    if toggles.deep_search:
        parts.append(DEEP_SEARCH_MARKER)
    if toggles.web_search:
        parts.append(WEB_SEARCH_MARKER)
    if toggles.markdown_output:
        parts.append(MARKDOWN_MARKER)
    return "".join(parts)


def compose(
    user_text: str,
    attachment_text: str | None,
    toggles: ToggleConfig,
) -> str | None:
    """Build the message sent for one turn.

    Returns ``None`` when there is neither text nor an attachment. An empty
    attachment contributes no file section.
    """
    if not user_text.strip() and attachment_text is None:
        return None

    if attachment_text:
        base = f"{ATTACHMENT_HEADER}{attachment_text}{QUESTION_HEADER}{user_text}"
    else:
        base = user_text
    return base + toggle_suffix(toggles)
