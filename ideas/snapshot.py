# SPDX-License-Identifier: MIT
"""
Export archive of the portfolio as markdown, for feeding into notebook-style
research tools.

Archive layout:
    analysis/<name>.md       every analysis file
    project-inventory.md     inventory grouped by category
    ideas-tracker.md         tracker as a markdown table
    README.md, CLAUDE.md     repo docs, when present
"""

import zipfile
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional

from ideas.paths import IdeasPaths, TRACKER_FILE
from ideas.projects import inventory_to_markdown, load_projects
from ideas.tracker import tracker_to_markdown

REPO_DOCS = ("README.md", "CLAUDE.md")


@dataclass
class SnapshotResult:
    path: Path
    analysis_count: int
    has_inventory: bool
    has_tracker: bool
    doc_count: int
    size: int


def default_snapshot_path(home: Optional[Path] = None, today: Optional[date] = None) -> Path:
    home = home or Path.home()
    today = today or date.today()
    return home / "Downloads" / f"ideas-snapshot-{today.isoformat()}.zip"


def create_snapshot(paths: IdeasPaths, output: Path) -> SnapshotResult:
    """Write the archive to ``output`` and report what went into it.

    Raises:
        DataLoadError: if the inventory or tracker cannot be parsed.
        OSError: if the archive cannot be written.
    """
    output = Path(output)
    output.parent.mkdir(parents=True, exist_ok=True)
    analysis_count = 0
    doc_count = 0
    has_inventory = False
    has_tracker = False

    with zipfile.ZipFile(output, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        analysis_dir = paths.analysis_dir
        if analysis_dir.is_dir():
            for path in sorted(analysis_dir.glob("*.md")):
                zf.write(path, f"analysis/{path.name}")
                analysis_count += 1

        if paths.project_inventory_path.exists():
            projects = load_projects(paths)
            zf.writestr("project-inventory.md", inventory_to_markdown(projects))
            has_inventory = True

        tracker_path = paths.ideas_repo / TRACKER_FILE
        if tracker_path.exists():
            zf.writestr("ideas-tracker.md", tracker_to_markdown(tracker_path))
            has_tracker = True

        for name in REPO_DOCS:
            doc = paths.ideas_repo / name
            if doc.is_file():
                zf.write(doc, name)
                doc_count += 1

    return SnapshotResult(
        path=output,
        analysis_count=analysis_count,
        has_inventory=has_inventory,
        has_tracker=has_tracker,
        doc_count=doc_count,
        size=output.stat().st_size,
    )
