# SPDX-License-Identifier: MIT
"""
Sort modes per entity kind, and the ideas status filter.

Each mode cycles with ``next()`` and maps to a ``(key, reverse)`` pair for
``FilteredList.sort``. Python's sort is stable in both directions, so
records that compare equal keep their previous relative order.
"""

from enum import Enum
from typing import Any, Callable, List, Optional, Tuple

from ideas.models import DxItem, Idea, Plan, Project

SortSpec = Tuple[Callable[[Any], Any], bool]


class _CyclicMode(Enum):
    """Enum whose members cycle in declaration order."""

    def next(self):
        members = list(type(self))
        return members[(members.index(self) + 1) % len(members)]

    @property
    def label(self) -> str:
        return self.value

    @classmethod
    def choices(cls) -> List[str]:
        return [m.value for m in cls]


class IdeaSort(_CyclicMode):
    NAME = "name"
    STATUS = "status"
    QUESTIONS = "questions"
    SESSIONS = "sessions"
    MODIFIED = "modified"


class ProjectSort(_CyclicMode):
    NAME = "name"
    CATEGORY = "category"
    LAST_COMMIT = "last commit"
    ANALYZED = "analyzed"


class PlanSort(_CyclicMode):
    NAME = "name"
    MODIFIED = "modified"


class DotfilesSort(_CyclicMode):
    NAME = "name"
    CATEGORY = "category"


class StatusFilter(_CyclicMode):
    ALL = "all"
    ACTIVE = "active"
    DORMANT = "dormant"
    UNKNOWN = "unknown"

    def matches(self, status: str) -> bool:
        if self is StatusFilter.ALL:
            return True
        return status == self.value


def idea_sort_spec(mode: IdeaSort) -> SortSpec:
    if mode is IdeaSort.NAME:
        return (lambda i: i.folder), False
    if mode is IdeaSort.STATUS:
        return (lambda i: i.status), False
    if mode is IdeaSort.QUESTIONS:
        return (lambda i: len(i.open_questions)), True
    if mode is IdeaSort.SESSIONS:
        return (lambda i: i.sessions), True
    return (lambda i: i.modified), True


def project_sort_spec(
    mode: ProjectSort, has_analysis: Optional[Callable[[str], bool]] = None
) -> SortSpec:
    if mode is ProjectSort.NAME:
        return (lambda p: p.name), False
    if mode is ProjectSort.CATEGORY:
        return (lambda p: p.category), False
    if mode is ProjectSort.LAST_COMMIT:
        return (lambda p: p.last_commit), True
    if has_analysis is None:
        raise ValueError("sorting by analyzed needs an analysis lookup")
    return (lambda p: has_analysis(p.name)), True


def plan_sort_spec(mode: PlanSort) -> SortSpec:
    if mode is PlanSort.NAME:
        return (lambda p: p.name), False
    return (lambda p: p.modified), True


def dotfiles_sort_spec(mode: DotfilesSort) -> SortSpec:
    if mode is DotfilesSort.NAME:
        return (lambda d: d.name), False
    return (lambda d: d.category), False


def sort_ideas(ideas: List[Idea], mode: IdeaSort) -> None:
    key, reverse = idea_sort_spec(mode)
    ideas.sort(key=key, reverse=reverse)


def sort_projects(
    projects: List[Project],
    mode: ProjectSort,
    has_analysis: Optional[Callable[[str], bool]] = None,
) -> None:
    key, reverse = project_sort_spec(mode, has_analysis)
    projects.sort(key=key, reverse=reverse)


def sort_plans(plans: List[Plan], mode: PlanSort) -> None:
    key, reverse = plan_sort_spec(mode)
    plans.sort(key=key, reverse=reverse)


def sort_dotfiles(items: List[DxItem], mode: DotfilesSort) -> None:
    key, reverse = dotfiles_sort_spec(mode)
    items.sort(key=key, reverse=reverse)
