"""Logging helpers."""

from __future__ import annotations

import logging


def configure_logging(*, level: str = "INFO") -> None:
    """Configure application-wide logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    # httpx logs every request line at INFO, which duplicates our own request logs.
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger."""
    return logging.getLogger(name)


def preview(text: str, *, enabled: bool, limit: int = 200) -> str:
    """Return a log suffix with a truncated text preview, or nothing when disabled."""
    if not enabled:
        return ""
    return f" preview={text[:limit]!r}"
