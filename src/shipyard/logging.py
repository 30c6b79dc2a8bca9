"""Logging setup for the ``shipyard`` logger namespace.

Component modules log through ``logging.getLogger(__name__)``; records
propagate to the handlers installed here.
"""

from __future__ import annotations

import logging
import os
import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FILE = "shipyard.log"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_SECRET_PATTERNS = [
    (re.compile(r"(?:secret|ntn)_[a-zA-Z0-9]{20,}"), "[NOTION_TOKEN]"),
    (re.compile(r"Bearer [a-zA-Z0-9._-]+"), "Bearer [REDACTED]"),
    (re.compile(r"token=[a-zA-Z0-9._-]+"), "token=[REDACTED]"),
]


def setup_logging(
    log_dir: str | Path | None = None,
    level: str | None = None,
    console: bool = True,
) -> logging.Logger:
    """Install a rotating file handler (and optionally stderr) on ``shipyard``.

    Calling it again replaces the handlers instead of stacking them.

    Args:
        log_dir: Directory for ``shipyard.log``. Falls back to
            ``SHIPYARD_LOG_DIR``, then ``./logs``.
        level: Level name. Falls back to ``SHIPYARD_LOG_LEVEL``, then INFO.
        console: Also log to stderr.

    Returns:
        The ``shipyard`` logger.
    """
    log_path = Path(log_dir or os.environ.get("SHIPYARD_LOG_DIR", "logs"))
    log_path.mkdir(parents=True, exist_ok=True)
    level = level or os.environ.get("SHIPYARD_LOG_LEVEL", "INFO")
    log_level = getattr(logging, level.upper(), logging.INFO)

    logger = logging.getLogger("shipyard")
    logger.setLevel(log_level)
    logger.handlers.clear()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)
    handlers: list[logging.Handler] = [
        RotatingFileHandler(
            log_path / LOG_FILE, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8"
        )
    ]
    if console:
        handlers.append(logging.StreamHandler())
    for handler in handlers:
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logger.info("Logging to %s at %s", log_path / LOG_FILE, level.upper())
    return logger


def truncate_output(output: str, max_length: int = 2000) -> str:
    """Cut long text (e.g. raw API error bodies) down for a log line."""
    if len(output) <= max_length:
        return output
    return output[:max_length] + f"\n... [truncated, {len(output) - max_length} more chars]"


def sanitize_for_log(text: str) -> str:
    """Mask Notion integration tokens and bearer credentials in ``text``."""
    for pattern, replacement in _SECRET_PATTERNS:
        text = pattern.sub(replacement, text)
    return text
