# SPDX-License-Identifier: MIT
"""
Bodies of the TUI's background tasks.

Each factory captures what its job needs (paths, a copy of the project
records) and returns a zero-argument callable for ``TaskSlot.start``. The
callables never touch UI state; everything flows back in the ``Finished``
message.
"""

from dataclasses import dataclass, field
from typing import List, Sequence, Tuple

from ideas.analysis import check_project_dirty, load_analysis_meta, record_analysis, stale_projects
from ideas.discovery import detect_untracked_projects, get_recent_activity
from ideas.errors import DataLoadError
from ideas.models import Project, RecentProject, UntrackedProject
from ideas.paths import IdeasPaths
from ideas.projects import load_projects
from ideas.scripts import analyze_project, scan_projects
from ideas.tasks import Finished, TaskKind, Work


@dataclass
class StatusReport:
    untracked: List[UntrackedProject] = field(default_factory=list)
    stale: List[Tuple[str, int]] = field(default_factory=list)
    recent: List[RecentProject] = field(default_factory=list)


def analyze_progress_message(name: str, deep: bool) -> str:
    verb = "Deep analyzing" if deep else "Analyzing"
    return f"{verb} {name}…"


REFRESH_PROGRESS_MESSAGE = "Refreshing inventory…"


def refresh_inventory_work(paths: IdeasPaths) -> Work:
    """Rescan the developer dir, then reload the inventory file."""

    def work() -> Finished:
        kind = TaskKind.REFRESH_INVENTORY
        if not scan_projects(paths, quiet=True):
            return Finished(kind, False, "Refresh failed")
        try:
            projects = load_projects(paths)
        except DataLoadError as e:
            return Finished(kind, False, f"Reload failed: {e}")
        return Finished(kind, True, "Inventory refreshed", payload=projects)

    return work


def analyze_project_work(paths: IdeasPaths, project: Project, deep: bool = False) -> Work:
    """Run the analysis script unless the recorded analysis is current.

    The payload is the project's new ``ProjectAnalysisMeta`` entry.
    """

    def work() -> Finished:
        kind = TaskKind.ANALYZE_PROJECT
        name = project.name
        try:
            meta = load_analysis_meta(paths)
        except DataLoadError as e:
            return Finished(kind, False, f"Load meta failed: {e}", target=name)

        dirty = check_project_dirty(project, meta)
        if dirty.analyzed_at is not None and not dirty.commits_since:
            return Finished(kind, True, "Up to date", payload=meta.projects.get(name), target=name)

        if not analyze_project(paths, project.path, deep=deep, quiet=True):
            return Finished(kind, False, "Analysis failed", target=name)

        try:
            meta = record_analysis(paths, project, meta)
        except OSError as e:
            return Finished(kind, False, f"Save meta failed: {e}", target=name)
        return Finished(
            kind, True, "Analysis complete", payload=meta.projects[name], target=name
        )

    return work


def refresh_status_work(paths: IdeasPaths, projects: Sequence[Project], days: int) -> Work:
    """Gather untracked, stale and recently active projects."""
    snapshot = list(projects)

    def work() -> Finished:
        untracked = detect_untracked_projects(paths, snapshot)
        try:
            meta = load_analysis_meta(paths)
        except DataLoadError:
            stale = []
        else:
            stale = [(p.name, n) for p, n in stale_projects(paths, snapshot, meta)]
        recent = get_recent_activity(snapshot, days)
        return Finished(
            TaskKind.REFRESH_STATUS,
            True,
            payload=StatusReport(untracked=untracked, stale=stale, recent=recent),
        )

    return work
