# SPDX-License-Identifier: MIT
"""
Analysis files and their metadata.

Each analyzed project has ``<analysis_dir>/<name>.md`` plus an entry in
``_meta.json`` recording when it was analyzed and at which commit, so that
staleness can be measured as commits since that commit.
"""

from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from ideas.debug_logger import get_logger
from ideas.errors import DataLoadError
from ideas.git import count_commits_since, get_project_head_commit
from ideas.models import AnalysisMeta, DirtyProject, Project, ProjectAnalysisMeta
from ideas.paths import IdeasPaths, analysis_file_path, has_analysis_file
from ideas.projects import read_json, write_json
from ideas.util import chrono_now

SUMMARY_STOP_MARKERS = ("---",)
DEEP_DIVE_HEADING = "## Deep Dive"


def extract_summary(content: str) -> Optional[str]:
    """Leading summary block of an analysis document.

    Collection starts at the first title (``# ``) or blockquote (``> ``) line
    and stops before a horizontal rule or the Deep Dive section.
    """
    collected = []
    in_summary = False
    for line in content.splitlines():
        if line.startswith("# ") or line.startswith("> "):
            in_summary = True
        if line in SUMMARY_STOP_MARKERS or line.startswith(DEEP_DIVE_HEADING):
            break
        if in_summary:
            collected.append(line)
    if not collected:
        return None
    return "\n".join(collected) + "\n"


def load_analysis_content(paths: IdeasPaths, name: str) -> Optional[str]:
    path = analysis_file_path(paths, name)
    try:
        return path.read_text()
    except (OSError, UnicodeDecodeError):
        return None


def load_analysis_summary(paths: IdeasPaths, name: str) -> Optional[str]:
    content = load_analysis_content(paths, name)
    if content is None:
        return None
    return extract_summary(content)


def load_analysis_meta(paths: IdeasPaths) -> AnalysisMeta:
    """Read ``_meta.json``; an absent file is an empty map.

    Raises:
        DataLoadError: if the file exists but cannot be parsed.
    """
    path = paths.analysis_meta_path
    data = read_json(path)
    if data is None:
        return AnalysisMeta()
    try:
        return AnalysisMeta.from_dict(data)
    except ValueError as e:
        raise DataLoadError(path, str(e)) from e


def save_analysis_meta(paths: IdeasPaths, meta: AnalysisMeta) -> None:
    write_json(paths.analysis_meta_path, meta.to_dict())


def check_project_dirty(project: Project, meta: AnalysisMeta) -> DirtyProject:
    """Compare the project's HEAD with the commit it was last analyzed at."""
    entry = meta.projects.get(project.name)
    current = get_project_head_commit(project.path)
    dirty = DirtyProject(name=project.name, path=project.path, current_commit=current)
    if entry is None:
        return dirty
    dirty.analyzed_at = entry.analyzed_at
    dirty.analyzed_commit = entry.analyzed_commit
    if current is not None and entry.analyzed_commit:
        dirty.commits_since = count_commits_since(project.path, entry.analyzed_commit)
    return dirty


def record_analysis(
    paths: IdeasPaths, project: Project, meta: Optional[AnalysisMeta] = None
) -> AnalysisMeta:
    """Stamp the project's current HEAD and time into the metadata and save it.

    The metadata is re-read when not supplied so that concurrent writers at
    least start from the latest file contents.
    """
    meta = meta if meta is not None else load_analysis_meta(paths)
    commit = get_project_head_commit(project.path)
    meta.projects[project.name] = ProjectAnalysisMeta(
        analyzed_at=chrono_now(), analyzed_commit=commit
    )
    save_analysis_meta(paths, meta)
    get_logger().analysis_recorded(project.name, commit)
    return meta


def stale_projects(
    paths: IdeasPaths, projects: Iterable[Project], meta: AnalysisMeta
) -> List[Tuple[Project, int]]:
    """Analyzed projects with commits since their analysis, most behind first."""
    stale = []
    for project in projects:
        if not has_analysis_file(paths, project.name):
            continue
        commits = check_project_dirty(project, meta).commits_since or 0
        if commits > 0:
            stale.append((project, commits))
    stale.sort(key=lambda pair: pair[1], reverse=True)
    return stale


def never_analyzed(paths: IdeasPaths, projects: Iterable[Project]) -> List[Project]:
    """Projects with history but no analysis file, most commits first."""
    pending = [
        p for p in projects if p.commits > 0 and not has_analysis_file(paths, p.name)
    ]
    pending.sort(key=lambda p: p.commits, reverse=True)
    return pending


def find_orphaned_analyses(
    paths: IdeasPaths, projects: Iterable[Project]
) -> List[Tuple[str, Path]]:
    """Analysis files whose project is no longer in the inventory."""
    analysis_dir = paths.analysis_dir
    if not analysis_dir.is_dir():
        return []
    known = {p.name for p in projects}
    orphans = [
        (path.stem, path)
        for path in analysis_dir.iterdir()
        if path.suffix == ".md" and path.stem not in known
    ]
    orphans.sort(key=lambda pair: pair[0])
    return orphans


def prune_orphans(paths: IdeasPaths, orphans: List[Tuple[str, Path]]) -> AnalysisMeta:
    """Delete orphaned analysis files and drop them from the metadata."""
    meta = load_analysis_meta(paths)
    for name, path in orphans:
        path.unlink()
        meta.projects.pop(name, None)
    save_analysis_meta(paths, meta)
    return meta
