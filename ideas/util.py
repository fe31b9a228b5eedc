# SPDX-License-Identifier: MIT
"""Small text and time helpers shared by the CLI and the TUI."""

import time
from datetime import datetime, timezone
from typing import Optional

ELLIPSIS = "…"


def truncate(text: str, max_len: int) -> str:
    """Cut ``text`` to ``max_len`` characters, ending with an ellipsis."""
    if len(text) <= max_len:
        return text
    if max_len <= 1:
        return ELLIPSIS[:max_len]
    return text[: max_len - 1] + ELLIPSIS


def clean_desc(text: str) -> str:
    """Drop a leading article and capitalize: "A tool for x" -> "Tool for x"."""
    text = text.strip()
    if text.startswith("A "):
        text = text[2:]
    if not text:
        return text
    return text[0].upper() + text[1:]


def chrono_lite(epoch_secs: float) -> str:
    """Local ``YYYY-MM-DD`` for a unix timestamp."""
    return datetime.fromtimestamp(epoch_secs).strftime("%Y-%m-%d")


def chrono_now(now: Optional[float] = None) -> str:
    """UTC timestamp in the form stored in the analysis metadata."""
    stamp = time.time() if now is None else now
    return datetime.fromtimestamp(stamp, tz=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def format_size(size: int) -> str:
    if size < 1024:
        return f"{size} B"
    if size < 1024 * 1024:
        return f"{size / 1024:.1f} KB"
    return f"{size / (1024 * 1024):.1f} MB"
