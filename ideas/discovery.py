# SPDX-License-Identifier: MIT
"""
Discovery of projects outside the inventory and of recent git activity.
"""

from pathlib import Path
from typing import Iterable, List

from ideas.git import count_commits, last_commit_since
from ideas.models import Project, RecentProject, UntrackedProject
from ideas.paths import IdeasPaths

# Marker file -> tech label; checked in this order
TECH_MARKERS = (
    ("Cargo.toml", "rust"),
    ("go.mod", "go"),
    ("package.json", "js"),
    ("pyproject.toml", "python"),
)


def guess_tech(path: Path) -> str:
    for marker, tech in TECH_MARKERS:
        if (path / marker).exists():
            return tech
    return "unknown"


def looks_like_project(path: Path) -> bool:
    if (path / ".git").exists():
        return True
    return any((path / marker).exists() for marker, _ in TECH_MARKERS)


def detect_untracked_projects(
    paths: IdeasPaths, projects: Iterable[Project]
) -> List[UntrackedProject]:
    """Project-looking directories in the developer dir missing from the inventory.

    Hidden and underscore-prefixed directories are skipped. Results are
    ordered by commit count, busiest first.
    """
    dev_dir = paths.developer_dir
    if not dev_dir.is_dir():
        return []

    known = {p.path.rstrip("/") for p in projects}
    untracked = []
    for path in dev_dir.iterdir():
        if not path.is_dir() or path.name.startswith((".", "_")):
            continue
        if str(path) in known or not looks_like_project(path):
            continue
        commits = count_commits(path) if (path / ".git").exists() else None
        untracked.append(
            UntrackedProject(
                name=path.name, path=path, tech=guess_tech(path), commits=commits or 0
            )
        )

    untracked.sort(key=lambda p: p.commits, reverse=True)
    return untracked


def get_recent_activity(projects: Iterable[Project], days: int = 7) -> List[RecentProject]:
    """Projects with a commit in the last ``days`` days, newest first."""
    recent = []
    for project in projects:
        hit = last_commit_since(project.path, days)
        if hit is None:
            continue
        date, message = hit
        recent.append(
            RecentProject(name=project.name, last_commit_date=date, last_commit_msg=message)
        )
    recent.sort(key=lambda r: r.last_commit_date, reverse=True)
    return recent
