# SPDX-License-Identifier: MIT
"""State management dataclasses for the TUI app.

The dataclasses keep all navigation state out of the widgets so it can be
tested without a running app:

- Tab / View: which collection is shown and in which mode
- IdeasState, ProjectsState, PlansState, DotfilesState: one FilteredList
  per list tab plus its sort mode
- StatusState: the portfolio health dashboard
- GlobalSearchState: cross-tab search results
- AppState: top-level container and the single tab -> list dispatch point
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List, Optional, Tuple, Union

from ideas.filtered_list import FilteredList
from ideas.models import DxItem, Idea, Kind, Plan, Project, RecentProject, SearchResult, UntrackedProject
from ideas.search import (
    dxitem_matches_query,
    global_search,
    idea_matches_query,
    normalize_query,
    plan_matches_query,
    project_matches_query,
)
from ideas.sorting import (
    DotfilesSort,
    IdeaSort,
    PlanSort,
    ProjectSort,
    StatusFilter,
    dotfiles_sort_spec,
    idea_sort_spec,
    plan_sort_spec,
    project_sort_spec,
)


class Tab(Enum):
    IDEAS = "ideas"
    PROJECTS = "projects"
    PLANS = "plans"
    DOTFILES = "dotfiles"
    STATUS = "status"

    @property
    def label(self) -> str:
        return self.value.capitalize()

    @property
    def kind(self) -> Optional[Kind]:
        """Entity kind listed on this tab; None for the status dashboard."""
        if self is Tab.STATUS:
            return None
        return Kind(self.value)

    @classmethod
    def for_kind(cls, kind: Kind) -> "Tab":
        return cls(kind.value)

    def next(self) -> "Tab":
        tabs = list(Tab)
        return tabs[(tabs.index(self) + 1) % len(tabs)]

    def prev(self) -> "Tab":
        tabs = list(Tab)
        return tabs[(tabs.index(self) - 1) % len(tabs)]


class View(Enum):
    LIST = "list"
    DETAIL = "detail"
    MARKDOWN_READER = "markdown_reader"
    PROJECT_DETAIL = "project_detail"
    PLAN_VIEWER = "plan_viewer"
    GLOBAL_SEARCH = "global_search"


class ProjectDetailTab(Enum):
    INFO = "info"
    ANALYSIS = "analysis"

    def next(self) -> "ProjectDetailTab":
        return ProjectDetailTab.ANALYSIS if self is ProjectDetailTab.INFO else ProjectDetailTab.INFO


class StatusSection(Enum):
    UNTRACKED = 0
    STALE = 1
    RECENT = 2

    def next(self) -> "StatusSection":
        return StatusSection((self.value + 1) % 3)

    def prev(self) -> "StatusSection":
        return StatusSection((self.value - 1) % 3)


@dataclass
class IdeasState:
    """Ideas tab: text query plus a status filter."""

    list: FilteredList[Idea] = field(default_factory=FilteredList)
    sort_by: IdeaSort = IdeaSort.NAME
    filter: StatusFilter = StatusFilter.ALL

    def update_filter(self, query: str) -> None:
        q = normalize_query(query)
        status_filter = self.filter
        self.list.apply_filter(
            lambda idea: status_filter.matches(idea.status) and idea_matches_query(idea, q)
        )

    def apply_sort(self, query: str) -> None:
        self.list.sort(*idea_sort_spec(self.sort_by))
        self.update_filter(query)

    def cycle_sort(self, query: str) -> None:
        self.sort_by = self.sort_by.next()
        self.apply_sort(query)

    def cycle_filter(self, query: str) -> None:
        self.filter = self.filter.next()
        self.update_filter(query)


@dataclass
class ProjectsState:
    list: FilteredList[Project] = field(default_factory=FilteredList)
    sort_by: ProjectSort = ProjectSort.ANALYZED
    has_analysis: Callable[[str], bool] = lambda name: False
    detail_tab: ProjectDetailTab = ProjectDetailTab.INFO

    def update_filter(self, query: str) -> None:
        q = normalize_query(query)
        self.list.apply_filter(lambda p: project_matches_query(p, q))

    def apply_sort(self, query: str) -> None:
        self.list.sort(*project_sort_spec(self.sort_by, self.has_analysis))
        self.update_filter(query)

    def cycle_sort(self, query: str) -> None:
        self.sort_by = self.sort_by.next()
        self.apply_sort(query)

    def selected_name(self) -> Optional[str]:
        project = self.list.selected_item()
        return project.name if project else None

    def select_by_name(self, name: Optional[str]) -> bool:
        if name is None:
            return False
        return self.list.select_where(lambda p: p.name == name)

    def resort_keeping_selection(self, query: str) -> None:
        """Re-sort and re-filter, then reselect the previously selected project."""
        name = self.selected_name()
        self.apply_sort(query)
        self.select_by_name(name)

    def replace_items(self, projects: List[Project], query: str) -> None:
        """Swap in a freshly scanned inventory."""
        name = self.selected_name()
        self.list.set_items(projects)
        self.apply_sort(query)
        self.select_by_name(name)


@dataclass
class PlansState:
    list: FilteredList[Plan] = field(default_factory=FilteredList)
    sort_by: PlanSort = PlanSort.MODIFIED

    def update_filter(self, query: str) -> None:
        q = normalize_query(query)
        self.list.apply_filter(lambda plan: plan_matches_query(plan, q))

    def apply_sort(self, query: str) -> None:
        self.list.sort(*plan_sort_spec(self.sort_by))
        self.update_filter(query)

    def cycle_sort(self, query: str) -> None:
        self.sort_by = self.sort_by.next()
        self.apply_sort(query)


@dataclass
class DotfilesState:
    list: FilteredList[DxItem] = field(default_factory=FilteredList)
    sort_by: DotfilesSort = DotfilesSort.CATEGORY

    def update_filter(self, query: str) -> None:
        q = normalize_query(query)
        self.list.apply_filter(lambda item: dxitem_matches_query(item, q))

    def apply_sort(self, query: str) -> None:
        self.list.sort(*dotfiles_sort_spec(self.sort_by))
        self.update_filter(query)

    def cycle_sort(self, query: str) -> None:
        self.sort_by = self.sort_by.next()
        self.apply_sort(query)


@dataclass
class StatusState:
    """Portfolio health dashboard, filled by the status background task."""

    untracked: List[UntrackedProject] = field(default_factory=list)
    stale: List[Tuple[str, int]] = field(default_factory=list)
    recent: List[RecentProject] = field(default_factory=list)
    section: StatusSection = StatusSection.UNTRACKED
    loaded: bool = False

    def apply(self, report) -> None:
        self.untracked = list(report.untracked)
        self.stale = list(report.stale)
        self.recent = list(report.recent)
        self.loaded = True

    def next_section(self) -> None:
        self.section = self.section.next()

    def prev_section(self) -> None:
        self.section = self.section.prev()


@dataclass
class GlobalSearchState:
    query: str = ""
    results: List[SearchResult] = field(default_factory=list)


ListState = Union[IdeasState, ProjectsState, PlansState, DotfilesState]


@dataclass
class AppState:
    """Top-level app state container."""

    ideas: IdeasState = field(default_factory=IdeasState)
    projects: ProjectsState = field(default_factory=ProjectsState)
    plans: PlansState = field(default_factory=PlansState)
    dotfiles: DotfilesState = field(default_factory=DotfilesState)
    status: StatusState = field(default_factory=StatusState)
    search: GlobalSearchState = field(default_factory=GlobalSearchState)
    tab: Tab = Tab.IDEAS
    view: View = View.LIST
    search_query: str = ""

    def list_state(self, tab: Optional[Tab] = None) -> Optional[ListState]:
        """The list controller behind ``tab`` (default: current tab)."""
        tab = tab or self.tab
        if tab is Tab.IDEAS:
            return self.ideas
        if tab is Tab.PROJECTS:
            return self.projects
        if tab is Tab.PLANS:
            return self.plans
        if tab is Tab.DOTFILES:
            return self.dotfiles
        return None

    def load(
        self,
        ideas: List[Idea],
        projects: List[Project],
        plans: List[Plan],
        dotfiles: List[DxItem],
    ) -> None:
        """Fill every list and apply each tab's default sort."""
        self.ideas.list.set_items(ideas)
        self.projects.list.set_items(projects)
        self.plans.list.set_items(plans)
        self.dotfiles.list.set_items(dotfiles)
        for tab in (Tab.IDEAS, Tab.PROJECTS, Tab.PLANS, Tab.DOTFILES):
            self.list_state(tab).apply_sort(self.search_query)

    def set_query(self, query: str) -> None:
        self.search_query = query
        current = self.list_state()
        if current is not None:
            current.update_filter(query)

    def switch_tab(self, tab: Tab) -> bool:
        """Change tab, dropping the previous tab's query. False if unchanged."""
        if tab is self.tab:
            return False
        previous = self.list_state()
        self.tab = tab
        if self.search_query:
            self.search_query = ""
            if previous is not None:
                previous.update_filter("")
            current = self.list_state()
            if current is not None:
                current.update_filter("")
        return True

    def cycle_sort(self) -> None:
        current = self.list_state()
        if current is not None:
            current.cycle_sort(self.search_query)

    def run_global_search(self, query: str) -> List[SearchResult]:
        self.search.query = query
        self.search.results = global_search(
            self.ideas.list.items,
            self.projects.list.items,
            self.plans.list.items,
            self.dotfiles.list.items,
            query,
        )
        return self.search.results

    def jump_to(self, result: SearchResult) -> bool:
        """Show a search hit: switch tab, clear the query, select the record."""
        tab = Tab.for_kind(result.source)
        self.switch_tab(tab)
        self.set_query("")
        state = self.list_state(tab)
        items = state.list.items
        if 0 <= result.index < len(items) and record_name(result.source, items[result.index]) == result.name:
            return state.list.select_item(result.index)
        return state.list.select_where(lambda r: record_name(result.source, r) == result.name)


def record_name(kind: Kind, record) -> str:
    if kind is Kind.IDEAS:
        return record.folder
    return record.name
