"""Unit tests for block helpers."""

import pytest

from shipyard.notion import chunk_text, paragraph_blocks, render_blocks
from shipyard.notion.blocks import render_block


@pytest.mark.unit
class TestChunkText:
    """Tests for chunk_text."""

    def test_splits_long_body(self) -> None:
        """4500 characters become 2000 + 2000 + 500."""
        body = "".join(chr(ord("a") + i % 26) for i in range(4500))

        chunks = chunk_text(body, 2000)

        assert [len(c) for c in chunks] == [2000, 2000, 500]
        assert "".join(chunks) == body

    def test_exact_multiple(self) -> None:
        assert chunk_text("abcd", 2) == ["ab", "cd"]

    def test_empty_text(self) -> None:
        assert chunk_text("") == []

    def test_rejects_non_positive_size(self) -> None:
        with pytest.raises(ValueError):
            chunk_text("abc", 0)


@pytest.mark.unit
class TestParagraphBlocks:
    """Tests for paragraph_blocks."""

    def test_one_paragraph_per_chunk(self) -> None:
        blocks = paragraph_blocks("x" * 4500, 2000)

        assert len(blocks) == 3
        assert all(b["type"] == "paragraph" for b in blocks)
        contents = [b["paragraph"]["rich_text"][0]["text"]["content"] for b in blocks]
        assert "".join(contents) == "x" * 4500


def _block(block_type: str, text: str, **extra) -> dict:
    return {
        "type": block_type,
        block_type: {"rich_text": [{"plain_text": text}], **extra},
    }


@pytest.mark.unit
class TestRenderBlocks:
    """Tests for rendering page content as text."""

    @pytest.mark.parametrize(
        ("block_type", "expected"),
        [
            ("paragraph", "text"),
            ("heading_1", "# text"),
            ("heading_2", "## text"),
            ("heading_3", "### text"),
            ("bulleted_list_item", "- text"),
            ("numbered_list_item", "1. text"),
            ("quote", "> text"),
            ("callout", "> text"),
        ],
    )
    def test_prefixes(self, block_type: str, expected: str) -> None:
        assert render_block(_block(block_type, "text")) == expected

    def test_code_block(self) -> None:
        block = _block("code", "print(1)", language="python")
        assert render_block(block) == "```python\nprint(1)\n```"

    def test_to_do(self) -> None:
        assert render_block(_block("to_do", "ship", checked=True)) == "[x] ship"
        assert render_block(_block("to_do", "ship", checked=False)) == "[ ] ship"

    def test_blocks_without_text_are_skipped(self) -> None:
        blocks = [
            _block("paragraph", "first"),
            {"type": "divider", "divider": {}},
            {"type": "image", "image": {"file": {"url": "x"}}},
            _block("paragraph", "second"),
        ]
        assert render_blocks(blocks) == "first\nsecond"

    def test_empty(self) -> None:
        assert render_blocks([]) == ""
