# SPDX-License-Identifier: MIT
"""
Markdown helpers built on the external ``mq`` query tool.

``run_mq`` is the only place that shells out; the parsers are pure so they
can be tested against captured ``mq`` output. A missing ``mq`` binary or a
failed invocation degrades to the documented defaults ("unknown" status,
no open questions, no title).
"""

import subprocess
from pathlib import Path
from typing import List, Optional

UNKNOWN_STATUS = "unknown"
MQ_TIMEOUT = 10


def run_mq(selector: str, path: Path) -> Optional[str]:
    """Run ``mq <selector> <path>`` and return stdout, or None on failure."""
    argv = ["mq", selector, str(path)]
    try:
        result = subprocess.run(argv, capture_output=True, text=True, timeout=MQ_TIMEOUT)
    except (OSError, subprocess.TimeoutExpired) as e:
        from ideas.debug_logger import get_logger

        get_logger().subprocess_error(argv, str(e))
        return None
    if result.returncode != 0:
        from ideas.debug_logger import get_logger

        get_logger().subprocess_error(argv, result.stderr.strip(), result.returncode)
        return None
    return result.stdout


def parse_status(content: str) -> str:
    """Value after the first ``Status:`` marker, with bold markers removed."""
    for line in content.splitlines():
        if "Status:" in line:
            return line.split("Status:", 1)[1].strip().strip("*").strip()
    return UNKNOWN_STATUS


def parse_open_questions(content: str) -> List[str]:
    """Unchecked checklist items (``- [ ] ...``) as plain text."""
    questions = []
    for line in content.splitlines():
        if "[ ]" not in line:
            continue
        text = line.strip().lstrip("-").lstrip("*").strip()
        if text.startswith("[ ]"):
            text = text[3:].strip()
        questions.append(text)
    return questions


def parse_title(content: str) -> Optional[str]:
    for line in content.splitlines():
        title = line.strip().lstrip("#").strip()
        if title:
            return title
    return None


def get_status(readme: Path) -> str:
    if not readme.is_file():
        return UNKNOWN_STATUS
    out = run_mq(".", readme)
    if out is None:
        return UNKNOWN_STATUS
    return parse_status(out) or UNKNOWN_STATUS


def get_open_questions(readme: Path) -> List[str]:
    if not readme.is_file():
        return []
    out = run_mq(".list", readme)
    if out is None:
        return []
    return parse_open_questions(out)


def get_title(path: Path) -> Optional[str]:
    out = run_mq(".h1", path)
    if out is None:
        return None
    return parse_title(out)


def find_markdown_files(directory: Path) -> List[Path]:
    """Markdown files in ``directory``, README.md first then by name."""
    if not directory.is_dir():
        return []
    files = [p for p in directory.iterdir() if p.is_file() and p.suffix == ".md"]
    return sorted(files, key=lambda p: (p.name != "README.md", p.name.lower()))
