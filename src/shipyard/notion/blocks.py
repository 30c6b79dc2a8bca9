"""Conversion between plain text and Notion blocks."""

from __future__ import annotations

from typing import Any

from shipyard.config import DEFAULT_BLOCK_CHUNK_SIZE

# Prefixes for rendering list/heading blocks as text
_PREFIXES = {
    "heading_1": "# ",
    "heading_2": "## ",
    "heading_3": "### ",
    "bulleted_list_item": "- ",
    "numbered_list_item": "1. ",
    "quote": "> ",
    "callout": "> ",
}


def chunk_text(text: str, size: int = DEFAULT_BLOCK_CHUNK_SIZE) -> list[str]:
    """Split text into consecutive spans of at most ``size`` characters.

    Joining the result reproduces ``text`` exactly.
    """
    if size <= 0:
        raise ValueError(f"chunk size must be positive, got {size}")
    return [text[i : i + size] for i in range(0, len(text), size)]


def text_spans(content: str) -> list[dict[str, Any]]:
    """Rich text value holding a single text span."""
    return [{"type": "text", "text": {"content": content}}]


def paragraph_blocks(body: str, size: int = DEFAULT_BLOCK_CHUNK_SIZE) -> list[dict[str, Any]]:
    """One paragraph block per chunk of ``body``, in order."""
    return [
        {
            "object": "block",
            "type": "paragraph",
            "paragraph": {"rich_text": text_spans(chunk)},
        }
        for chunk in chunk_text(body, size)
    ]


def _plain_text(rich_text: Any) -> str:
    if not isinstance(rich_text, list):
        return ""
    return "".join(
        span.get("plain_text", "") for span in rich_text if isinstance(span, dict)
    )


def render_block(block: dict[str, Any]) -> str | None:
    """Render one block as text, or None for blocks without text content."""
    block_type = block.get("type")
    payload = block.get(block_type) if isinstance(block_type, str) else None
    if not isinstance(payload, dict) or "rich_text" not in payload:
        return None

    text = _plain_text(payload.get("rich_text"))
    if block_type == "code":
        language = payload.get("language") or ""
        return f"```{language}\n{text}\n```"
    if block_type == "to_do":
        mark = "x" if payload.get("checked") else " "
        return f"[{mark}] {text}"
    return _PREFIXES.get(block_type, "") + text


def render_blocks(blocks: list[dict[str, Any]]) -> str:
    """Render page content blocks as newline-separated plain text."""
    lines = [line for line in (render_block(b) for b in blocks) if line is not None]
    return "\n".join(lines)
