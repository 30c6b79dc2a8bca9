"""Notion - async transport and block helpers for the Notion API."""

from shipyard.notion.blocks import chunk_text, paragraph_blocks, render_blocks, text_spans
from shipyard.notion.client import NotionClient, Transport, error_message, is_error
from shipyard.notion.exceptions import NotionError, NotionTransportError
from shipyard.notion.rate_limit import RateLimiter

__all__ = [
    "NotionClient",
    "NotionError",
    "NotionTransportError",
    "RateLimiter",
    "Transport",
    "chunk_text",
    "error_message",
    "is_error",
    "paragraph_blocks",
    "render_blocks",
    "text_spans",
]
