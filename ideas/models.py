#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Data models for the ideas toolkit.

Contains the record dataclasses loaded from the tracker CSV and the JSON
inventories, plus the derived records produced by the status checks.
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional


# =============================================================================
# Constants
# =============================================================================

META_VERSION = 1
NO_TITLE = "(no title)"
NO_DATE = "-"


class Kind(str, Enum):
    """Entity kinds handled by the store, the search and the TUI tabs."""

    IDEAS = "ideas"
    PROJECTS = "projects"
    PLANS = "plans"
    DOTFILES = "dotfiles"

    @property
    def label(self) -> str:
        return self.value.capitalize()


def _str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    return "" if value is None else str(value)


def _int(data: Dict[str, Any], key: str) -> int:
    try:
        return int(data.get(key) or 0)
    except (TypeError, ValueError):
        return 0


# =============================================================================
# Records
# =============================================================================


@dataclass
class Idea:
    folder: str
    tags: List[str] = field(default_factory=list)
    description: str = ""
    created: str = ""
    modified: str = ""
    sessions: int = 0
    status: str = "unknown"
    open_questions: List[str] = field(default_factory=list)


@dataclass
class Project:
    name: str
    path: str
    source: str = ""
    category: str = ""
    tech: str = ""
    last_commit: str = ""
    commits: int = 0
    summary: str = ""
    description: str = ""

    @property
    def display_description(self) -> str:
        """The generated summary when present, otherwise the description."""
        return self.summary or self.description

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Project":
        if not isinstance(data, dict):
            raise ValueError("project entry must be an object")
        if "name" not in data or "path" not in data:
            raise ValueError("project entry needs 'name' and 'path'")
        return cls(
            name=_str(data, "name"),
            path=_str(data, "path"),
            source=_str(data, "source"),
            category=_str(data, "category"),
            tech=_str(data, "tech"),
            last_commit=_str(data, "last_commit"),
            commits=_int(data, "commits"),
            summary=_str(data, "summary"),
            description=_str(data, "description"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "path": self.path,
            "source": self.source,
            "category": self.category,
            "tech": self.tech,
            "last_commit": self.last_commit,
            "commits": self.commits,
            "summary": self.summary,
            "description": self.description,
        }


@dataclass
class Plan:
    name: str
    title: str
    modified: str
    path: Path


@dataclass
class DxItem:
    name: str
    category: str = ""
    path: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DxItem":
        if not isinstance(data, dict):
            raise ValueError("dotfiles entry must be an object")
        if "name" not in data:
            raise ValueError("dotfiles entry needs 'name'")
        return cls(
            name=_str(data, "name"),
            category=_str(data, "category"),
            path=_str(data, "path"),
            description=_str(data, "description"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "category": self.category,
            "path": self.path,
            "description": self.description,
        }


# =============================================================================
# Analysis metadata
# =============================================================================


@dataclass
class ProjectAnalysisMeta:
    analyzed_at: str
    analyzed_commit: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectAnalysisMeta":
        commit = data.get("analyzed_commit")
        return cls(
            analyzed_at=_str(data, "analyzed_at"),
            analyzed_commit=str(commit) if commit else None,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"analyzed_at": self.analyzed_at, "analyzed_commit": self.analyzed_commit}


@dataclass
class AnalysisMeta:
    """Map of project name to when (and at which commit) it was analyzed."""

    version: int = META_VERSION
    projects: Dict[str, ProjectAnalysisMeta] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisMeta":
        raw = data.get("projects") or {}
        if not isinstance(raw, dict):
            raise ValueError("'projects' must be an object")
        return cls(
            version=_int(data, "version") or META_VERSION,
            projects={
                name: ProjectAnalysisMeta.from_dict(entry)
                for name, entry in raw.items()
                if isinstance(entry, dict)
            },
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "projects": {name: m.to_dict() for name, m in self.projects.items()},
        }


# =============================================================================
# Derived records
# =============================================================================


@dataclass
class DirtyProject:
    """Staleness check for one project against the analysis metadata."""

    name: str
    path: str = ""
    analyzed_at: Optional[str] = None
    analyzed_commit: Optional[str] = None
    current_commit: Optional[str] = None
    commits_since: Optional[int] = None

    @property
    def is_stale(self) -> bool:
        return bool(self.commits_since)


@dataclass
class UntrackedProject:
    name: str
    path: Path
    tech: str
    commits: int = 0


@dataclass
class RecentProject:
    name: str
    last_commit_date: str
    last_commit_msg: str


@dataclass
class SearchResult:
    """One cross-entity search hit; ``index`` points into the source list."""

    source: Kind
    name: str
    description: str
    index: int
