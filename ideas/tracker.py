# SPDX-License-Identifier: MIT
"""
Ideas tracker (``_tracker.csv``) reading and writing.

Columns: folder, tags, description, created, modified, sessions. Status and
open questions are not stored in the CSV; they are read from each idea's
README through ``mq``.
"""

import csv
from pathlib import Path
from typing import List

from ideas import markdown
from ideas.errors import DataLoadError
from ideas.models import Idea
from ideas.paths import TRACKER_FILE

TRACKER_COLUMNS = ["folder", "tags", "description", "created", "modified", "sessions"]


def parse_tags(raw: str) -> List[str]:
    raw = raw.strip().strip('"')
    if not raw:
        return []
    return [t.strip() for t in raw.split(",") if t.strip()]


def _parse_sessions(raw: str) -> int:
    try:
        return int(raw.strip())
    except (AttributeError, ValueError):
        return 0


def _read_rows(tracker_path: Path) -> List[List[str]]:
    try:
        with open(tracker_path, newline="") as f:
            rows = list(csv.reader(f))
    except (OSError, csv.Error, UnicodeDecodeError) as e:
        raise DataLoadError(tracker_path, str(e)) from e
    # First row is the header
    return rows[1:]


def _cell(row: List[str], i: int) -> str:
    return row[i] if i < len(row) else ""


def load_ideas(repo_root: Path) -> List[Idea]:
    """Load every idea listed in the tracker, enriched from its README.

    Raises:
        DataLoadError: if the tracker cannot be read.
    """
    repo_root = Path(repo_root)
    tracker_path = repo_root / TRACKER_FILE
    ideas = []
    for row in _read_rows(tracker_path):
        folder = _cell(row, 0).strip()
        if not folder:
            continue
        readme = repo_root / folder / "README.md"
        ideas.append(
            Idea(
                folder=folder,
                tags=parse_tags(_cell(row, 1)),
                description=_cell(row, 2).strip('"'),
                created=_cell(row, 3),
                modified=_cell(row, 4),
                sessions=_parse_sessions(_cell(row, 5)),
                status=markdown.get_status(readme),
                open_questions=markdown.get_open_questions(readme),
            )
        )
    return ideas


def save_ideas(repo_root: Path, ideas: List[Idea]) -> None:
    """Write the tracker columns back. README-derived fields are not saved."""
    tracker_path = Path(repo_root) / TRACKER_FILE
    with open(tracker_path, "w", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(TRACKER_COLUMNS)
        for idea in ideas:
            writer.writerow(
                [
                    idea.folder,
                    ",".join(idea.tags),
                    idea.description,
                    idea.created,
                    idea.modified,
                    idea.sessions,
                ]
            )


def tracker_to_markdown(tracker_path: Path) -> str:
    """Render the tracker CSV as a markdown table."""
    lines = [
        "# Ideas Tracker",
        "",
        "| Folder | Tags | Description | Created | Modified | Sessions |",
        "|--------|------|-------------|---------|----------|----------|",
    ]
    for row in _read_rows(tracker_path):
        folder = _cell(row, 0)
        if not folder:
            continue
        lines.append(
            "| {} | {} | {} | {} | {} | {} |".format(
                folder,
                _cell(row, 1).strip('"'),
                _cell(row, 2).strip('"'),
                _cell(row, 3),
                _cell(row, 4),
                _cell(row, 5) or "0",
            )
        )
    return "\n".join(lines) + "\n"
