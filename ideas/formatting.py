#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Terminal output helpers for the CLI.

Plain ANSI escapes for table rows (cheap, grep-friendly) and Rich for
rendering markdown documents.
"""

import os
import sys
from typing import Optional, TextIO

from rich.console import Console
from rich.markdown import Markdown

MARKDOWN_MAX_WIDTH = 100

# ANSI color codes for terminal output
ANSI_COLORS = {
    "bold": "\033[1m",
    "dim": "\033[2m",
    "red": "\033[31m",
    "green": "\033[32m",
    "yellow": "\033[33m",
    "blue": "\033[34m",
    "magenta": "\033[35m",
    "cyan": "\033[36m",
    "reset": "\033[0m",
}

# Idea status -> color name
STATUS_COLORS = {
    "active": "green",
    "dormant": "yellow",
    "unknown": "dim",
}


def use_color(stream: Optional[TextIO] = None) -> bool:
    """Colors only for a TTY, and never when NO_COLOR is set."""
    if os.environ.get("NO_COLOR"):
        return False
    stream = stream or sys.stdout
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


def colorize(text: str, *styles: str, enabled: Optional[bool] = None) -> str:
    if enabled is None:
        enabled = use_color()
    if not enabled or not styles:
        return text
    codes = "".join(ANSI_COLORS.get(s, "") for s in styles)
    return f"{codes}{text}{ANSI_COLORS['reset']}"


def status_color(status: str) -> str:
    return STATUS_COLORS.get(status, "magenta")


def print_markdown(content: str, file: Optional[TextIO] = None) -> None:
    """Render markdown to the terminal, capped at a readable width."""
    stream = file or sys.stdout
    console = Console(file=stream, no_color=not use_color(stream), highlight=False)
    console.width = min(console.width, MARKDOWN_MAX_WIDTH)
    console.print(Markdown(content))
