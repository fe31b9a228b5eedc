# SPDX-License-Identifier: MIT
"""
Data access facade shared by the CLI commands and the TUI.

``IdeasStore`` hides which file backs which kind of record. Loads raise
``DataLoadError`` for unreadable files and return empty lists for missing
optional data; the ideas repo itself is located lazily and its absence is
fatal (``RepoNotFoundError``).
"""

import time
from pathlib import Path
from typing import List, Optional

from ideas.analysis import check_project_dirty, load_analysis_meta
from ideas.debug_logger import get_logger
from ideas.dotfiles import load_dotfiles, save_dotfiles
from ideas.errors import DataLoadError
from ideas.models import AnalysisMeta, Kind, Project, ProjectAnalysisMeta
from ideas.paths import IdeasPaths, find_ideas_repo, has_analysis_file
from ideas.plans import load_plans
from ideas.projects import load_projects, save_projects
from ideas.tracker import load_ideas, save_ideas


class IdeasStore:
    def __init__(
        self,
        paths: IdeasPaths,
        repo_root: Optional[Path] = None,
        cwd: Optional[Path] = None,
    ):
        self.paths = paths
        self._repo_root = Path(repo_root) if repo_root else None
        self._cwd = cwd
        self._meta: Optional[AnalysisMeta] = None

    @property
    def repo_root(self) -> Path:
        """The ideas repo, discovered on first use."""
        if self._repo_root is None:
            self._repo_root = find_ideas_repo(self.paths, self._cwd)
        return self._repo_root

    def load(self, kind: Kind) -> List:
        """Load all records of ``kind`` in file order."""
        started = time.perf_counter()
        try:
            if kind is Kind.IDEAS:
                records = load_ideas(self.repo_root)
            elif kind is Kind.PROJECTS:
                records = load_projects(self.paths)
            elif kind is Kind.PLANS:
                records = load_plans(self.paths)
            else:
                records = load_dotfiles(self.paths)
        except DataLoadError as e:
            get_logger().load_error(kind.value, e.path, e.reason)
            raise
        get_logger().load_timing(kind.value, len(records), (time.perf_counter() - started) * 1000)
        return records

    def save(self, kind: Kind, records: List) -> bool:
        """Persist records. Plans are read-only and always report failure."""
        try:
            if kind is Kind.IDEAS:
                save_ideas(self.repo_root, records)
                path = self.repo_root / "_tracker.csv"
            elif kind is Kind.PROJECTS:
                save_projects(self.paths, records)
                path = self.paths.project_inventory_path
            elif kind is Kind.DOTFILES:
                save_dotfiles(self.paths, records)
                path = self.paths.dx_inventory_path
            else:
                return False
        except OSError as e:
            get_logger().error(f"save_{kind.value}", str(e))
            return False
        get_logger().data_saved(kind.value, len(records), path)
        return True

    # Derived lookups

    def analysis_meta(self, reload: bool = False) -> AnalysisMeta:
        if self._meta is None or reload:
            self._meta = load_analysis_meta(self.paths)
        return self._meta

    def has_analysis(self, name: str) -> bool:
        return has_analysis_file(self.paths, name)

    def analyzed_status(self, name: str) -> Optional[ProjectAnalysisMeta]:
        """``{analyzed_at, analyzed_commit}`` for a project, if recorded."""
        return self.analysis_meta().projects.get(name)

    def update_analyzed_status(self, name: str, entry: ProjectAnalysisMeta) -> None:
        self.analysis_meta().projects[name] = entry

    def commits_since_analysis(self, project: Project) -> Optional[int]:
        return check_project_dirty(project, self.analysis_meta()).commits_since
