#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Main TUI application for the ideas toolkit.

Browses ideas, projects, plans and dotfiles in a tabbed interface with:
- Per-tab filtering, sorting and a status filter for ideas
- Detail screens for ideas, projects (info and analysis) and plans
- Background project analysis and inventory refresh
- A portfolio status dashboard (untracked, stale, recently active)
- Global search across every collection
"""

import os
import platform
import shlex
import subprocess
from pathlib import Path
from typing import Callable, Dict, List, Optional, Tuple

from rich.markdown import Markdown
from rich.markup import escape
from rich.text import Text
from textual.app import App, ComposeResult, SuspendNotSupported
from textual.binding import Binding
from textual.containers import Vertical, VerticalScroll
from textual.screen import ModalScreen
from textual.widgets import (
    DataTable,
    Footer,
    Header,
    Input,
    OptionList,
    Static,
    TabbedContent,
    TabPane,
)
from textual.widgets.option_list import Option

from ideas.analysis import load_analysis_content
from ideas.config import message_seconds, recent_days, tick_seconds
from ideas.debug_logger import get_logger
from ideas.errors import DataLoadError
from ideas.markdown import find_markdown_files
from ideas.models import DxItem, Idea, Kind, Plan, Project, SearchResult
from ideas.store import IdeasStore
from ideas.tasks import Finished, MergeStrategy, TaskKind, TaskSlot, worker_runner
from ideas.tui.app_state import AppState, ProjectDetailTab, StatusSection, Tab, View, record_name
from ideas.tui.formatting import (
    PortfolioStats,
    analyzed_mark,
    category_markup,
    idea_detail_markup,
    project_info_markup,
    stats_line,
    status_markup,
)
from ideas.util import clean_desc, truncate
from ideas.workers import (
    REFRESH_PROGRESS_MESSAGE,
    analyze_progress_message,
    analyze_project_work,
    refresh_inventory_work,
    refresh_status_work,
)

STATUS_PROGRESS_MESSAGE = "Checking status…"
NO_ANALYSIS_TEXT = "*No analysis yet.* Press `a` to analyze or `A` for a deep analysis."
DESCRIPTION_WIDTH = 60

# Actions that only make sense on the main list screen
LIST_ACTIONS = {
    "next_tab",
    "prev_tab",
    "cursor_down",
    "cursor_up",
    "open",
    "sort",
    "cycle_filter",
    "filter",
    "clear_filter",
    "refresh",
    "global_search",
}

Records = Dict[Kind, List]


def load_all(store: IdeasStore) -> Tuple[Records, List[str]]:
    """Load every collection for the TUI.

    The ideas tracker is required and its errors propagate. A broken
    inventory, plans dir or dotfiles file degrades to an empty tab and a
    warning.
    """
    records: Records = {Kind.IDEAS: store.load(Kind.IDEAS)}
    warnings: List[str] = []
    for kind in (Kind.PROJECTS, Kind.PLANS, Kind.DOTFILES):
        try:
            records[kind] = store.load(kind)
        except DataLoadError as e:
            records[kind] = []
            warnings.append(str(e))
    return records, warnings


def opener_command() -> str:
    return "open" if platform.system() == "Darwin" else "xdg-open"


def read_text(path: Path) -> Optional[str]:
    try:
        return path.read_text(errors="replace")
    except OSError:
        return None


class ListTable(DataTable, can_focus=False):
    """Row table driven by the app's key bindings rather than focus."""


# =============================================================================
# Modal screens
# =============================================================================


class MarkdownReaderScreen(ModalScreen):
    """Scrollable rendering of one markdown file."""

    BINDINGS = [
        Binding("escape", "dismiss", "Back"),
        Binding("q", "app.quit", "Quit"),
        Binding("j", "scroll(1)", "Down", show=False),
        Binding("k", "scroll(-1)", "Up", show=False),
        Binding("d", "scroll(10)", "Page down", show=False),
        Binding("u", "scroll(-10)", "Page up", show=False),
        Binding("g", "top", "Top", show=False),
        Binding("G", "bottom", "Bottom", show=False),
    ]

    def __init__(self, title: str, content: str) -> None:
        super().__init__()
        self.title_text = title
        self.content = content

    def compose(self) -> ComposeResult:
        with Vertical(classes="modal-body"):
            yield Static(f"[bold]{escape(self.title_text)}[/bold]", classes="modal-title")
            with VerticalScroll(id="reader-scroll"):
                yield Static(Markdown(self.content), id="reader-content")
            yield Static("j/k scroll  d/u page  g/G top/bottom  esc back", classes="modal-hint")

    def on_mount(self) -> None:
        self.query_one("#reader-scroll", VerticalScroll).focus()

    def action_scroll(self, lines: int) -> None:
        scroll = self.query_one("#reader-scroll", VerticalScroll)
        scroll.scroll_to(y=max(0, scroll.scroll_y + lines), animate=False)

    def action_top(self) -> None:
        self.query_one("#reader-scroll", VerticalScroll).scroll_home(animate=False)

    def action_bottom(self) -> None:
        self.query_one("#reader-scroll", VerticalScroll).scroll_end(animate=False)


class PlanViewerScreen(MarkdownReaderScreen):
    """Read-only view of a Claude plan file."""

    def __init__(self, plan: Plan) -> None:
        content = read_text(plan.path)
        if content is None:
            content = f"*Could not read {plan.path}*"
        super().__init__(f"{plan.title}  ({plan.name}, {plan.modified})", content)
        self.plan = plan


class IdeaDetailScreen(ModalScreen):
    """Idea summary with its open questions and markdown files.

    Enter on a file opens it in the markdown reader.
    """

    BINDINGS = [
        Binding("escape", "dismiss", "Back"),
        Binding("q", "app.quit", "Quit"),
        Binding("j", "cursor_down", "Down", show=False),
        Binding("k", "cursor_up", "Up", show=False),
        Binding("e", "app.edit_idea", "Edit"),
        Binding("o", "app.open_folder", "Open folder"),
    ]

    def __init__(self, idea: Idea, folder: Path) -> None:
        super().__init__()
        self.idea = idea
        self.folder = folder
        self.files = find_markdown_files(folder)

    def compose(self) -> ComposeResult:
        with Vertical(classes="modal-body"):
            yield Static("[bold]Idea[/bold]", classes="modal-title")
            with VerticalScroll(id="idea-info"):
                yield Static(idea_detail_markup(self.idea))
            yield Static(f"[bold]Files ({len(self.files)})[/bold]")
            yield OptionList(
                *[Option(path.name, id=str(i)) for i, path in enumerate(self.files)],
                id="idea-files",
            )
            yield Static("enter read  e edit  o open folder  esc back", classes="modal-hint")

    def on_mount(self) -> None:
        files = self.query_one("#idea-files", OptionList)
        if self.files:
            files.highlighted = 0
        files.focus()

    def action_cursor_down(self) -> None:
        self.query_one("#idea-files", OptionList).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#idea-files", OptionList).action_cursor_up()

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        path = self.files[int(event.option.id)]
        content = read_text(path)
        if content is None:
            self.app.notify(f"Could not read {path.name}", severity="error")
            return
        self.app.open_screen(
            MarkdownReaderScreen(f"{self.idea.folder}/{path.name}", content),
            View.MARKDOWN_READER,
        )


class ProjectDetailScreen(ModalScreen):
    """Project info and its analysis document, toggled with tab or t."""

    BINDINGS = [
        Binding("escape", "dismiss", "Back"),
        Binding("q", "app.quit", "Quit"),
        Binding("tab", "toggle_view", "Info/Analysis", priority=True),
        Binding("t", "toggle_view", "Info/Analysis", show=False),
        Binding("a", "app.analyze(False)", "Analyze"),
        Binding("A", "app.analyze(True)", "Deep analyze"),
        Binding("o", "app.open_folder", "Open folder"),
        Binding("j", "scroll(1)", "Down", show=False),
        Binding("k", "scroll(-1)", "Up", show=False),
    ]

    def __init__(self, project: Project, info: str, analysis: Optional[str]) -> None:
        super().__init__()
        self.project = project
        self.info = info
        self.analysis = analysis

    def compose(self) -> ComposeResult:
        with Vertical(classes="modal-body"):
            yield Static("", id="detail-title", classes="modal-title")
            with VerticalScroll(id="detail-info"):
                yield Static(self.info, id="detail-info-content")
            with VerticalScroll(id="detail-analysis"):
                yield Static(Markdown(self.analysis or NO_ANALYSIS_TEXT), id="detail-analysis-content")
            yield Static("tab info/analysis  a analyze  A deep  o open  esc back", classes="modal-hint")

    def on_mount(self) -> None:
        self._show_current()

    def _current_scroll(self) -> VerticalScroll:
        if self.app.state.projects.detail_tab is ProjectDetailTab.ANALYSIS:
            return self.query_one("#detail-analysis", VerticalScroll)
        return self.query_one("#detail-info", VerticalScroll)

    def _show_current(self) -> None:
        tab = self.app.state.projects.detail_tab
        analysis_shown = tab is ProjectDetailTab.ANALYSIS
        self.query_one("#detail-info").display = not analysis_shown
        self.query_one("#detail-analysis").display = analysis_shown
        label = "Analysis" if analysis_shown else "Info"
        self.query_one("#detail-title", Static).update(
            f"[bold]{escape(self.project.name)}[/bold]  [dim]{label}[/dim]"
        )

    def action_toggle_view(self) -> None:
        projects = self.app.state.projects
        projects.detail_tab = projects.detail_tab.next()
        self._show_current()

    def action_scroll(self, lines: int) -> None:
        scroll = self._current_scroll()
        scroll.scroll_to(y=max(0, scroll.scroll_y + lines), animate=False)

    def reload(self, info: str, analysis: Optional[str]) -> None:
        """Swap in fresh content after a background analysis."""
        self.info = info
        self.analysis = analysis
        self.query_one("#detail-info-content", Static).update(info)
        self.query_one("#detail-analysis-content", Static).update(
            Markdown(analysis or NO_ANALYSIS_TEXT)
        )


class GlobalSearchScreen(ModalScreen[Optional[SearchResult]]):
    """Search every collection at once; dismisses with the chosen hit."""

    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("down", "cursor_down", "Down", show=False),
        Binding("up", "cursor_up", "Up", show=False),
    ]

    def __init__(self, search: Callable[[str], List[SearchResult]]) -> None:
        super().__init__()
        self.search = search
        self.results: List[SearchResult] = []

    def compose(self) -> ComposeResult:
        with Vertical(classes="modal-body"):
            yield Static("[bold]Global search[/bold]", classes="modal-title")
            yield Input(id="search-input", placeholder="search ideas, projects, plans, dotfiles")
            yield OptionList(id="search-results")
            yield Static("type to search  ↑/↓ select  enter jump  esc cancel", classes="modal-hint")

    def on_mount(self) -> None:
        self.query_one("#search-input", Input).focus()

    def on_input_changed(self, event: Input.Changed) -> None:
        self.results = self.search(event.value)
        options = self.query_one("#search-results", OptionList)
        options.clear_options()
        for i, result in enumerate(self.results):
            label = Text.assemble(
                (f"[{result.source.label}] ", "bold"),
                result.name,
                ("  " + truncate(result.description, DESCRIPTION_WIDTH), "dim"),
            )
            options.add_option(Option(label, id=str(i)))
        if self.results:
            options.highlighted = 0

    def on_input_submitted(self, event: Input.Submitted) -> None:
        highlighted = self.query_one("#search-results", OptionList).highlighted
        if highlighted is None or not self.results:
            return
        self.dismiss(self.results[highlighted])

    def on_option_list_option_selected(self, event: OptionList.OptionSelected) -> None:
        self.dismiss(self.results[int(event.option.id)])

    def action_cursor_down(self) -> None:
        self.query_one("#search-results", OptionList).action_cursor_down()

    def action_cursor_up(self) -> None:
        self.query_one("#search-results", OptionList).action_cursor_up()

    def action_cancel(self) -> None:
        self.dismiss(None)


# =============================================================================
# Main app
# =============================================================================


class IdeasApp(App):
    """
    Main Textual application for browsing the ideas portfolio.

    Navigation state lives in ``self.state`` (AppState); widgets are
    re-rendered from it after every change. Background work runs in two
    TaskSlots polled on a timer.
    """

    TITLE = "Ideas"
    CSS_PATH = "styles/app.tcss"
    AUTO_FOCUS = None

    BINDINGS = [
        Binding("q", "quit", "Quit"),
        Binding("tab", "next_tab", "Next tab", show=False, priority=True),
        Binding("shift+tab", "prev_tab", "Prev tab", show=False, priority=True),
        Binding("j,down", "cursor_down", "Down", show=False),
        Binding("k,up", "cursor_up", "Up", show=False),
        Binding("enter", "open", "Open"),
        Binding("s", "sort", "Sort"),
        Binding("f", "cycle_filter", "Status filter"),
        Binding("slash", "filter", "Filter"),
        Binding("escape", "clear_filter", "Clear filter", show=False),
        Binding("r", "refresh", "Refresh"),
        Binding("a", "analyze(False)", "Analyze"),
        Binding("A", "analyze(True)", "Deep analyze", show=False),
        Binding("e", "edit_idea", "Edit"),
        Binding("o", "open_folder", "Open folder"),
        Binding("ctrl+f", "global_search", "Search all"),
    ]

    def __init__(
        self,
        store: IdeasStore,
        records: Optional[Records] = None,
        initial_tab: Tab = Tab.IDEAS,
        warnings: Optional[List[str]] = None,
    ) -> None:
        """
        Initialize the app.

        Args:
            store: Data access for every collection
            records: Preloaded collections (loaded from ``store`` if omitted)
            initial_tab: Tab shown at startup
            warnings: Load problems to report once mounted
        """
        super().__init__()
        self.store = store
        self.state = AppState()
        self.state.tab = initial_tab
        self.state.projects.has_analysis = store.has_analysis
        if records is None:
            records, warnings = load_all(store)
        self._warnings = list(warnings or [])
        self.state.load(
            records.get(Kind.IDEAS, []),
            records.get(Kind.PROJECTS, []),
            records.get(Kind.PLANS, []),
            records.get(Kind.DOTFILES, []),
        )

        seconds = message_seconds()
        runner = worker_runner(self)
        self.projects_slot = TaskSlot("projects", runner, seconds)
        self.status_slot = TaskSlot("status", runner, seconds)
        self.projects_slot.on_merge(MergeStrategy.PATCH_RECORD, self._merge_analysis)
        self.projects_slot.on_merge(MergeStrategy.REPLACE_ITEMS, self._merge_inventory)
        self.status_slot.on_merge(MergeStrategy.REPLACE_STATUS, self._merge_status)
        self._stats = ""
        self._tick_timer = None

    def compose(self) -> ComposeResult:
        """Compose the app layout."""
        yield Header()
        yield Static("", id="stats-bar")

        with TabbedContent(initial=self.state.tab.value):
            with TabPane(Tab.IDEAS.label, id=Tab.IDEAS.value):
                yield ListTable(id="ideas-table", classes="list-table")
            with TabPane(Tab.PROJECTS.label, id=Tab.PROJECTS.value):
                yield ListTable(id="projects-table", classes="list-table")
            with TabPane(Tab.PLANS.label, id=Tab.PLANS.value):
                yield ListTable(id="plans-table", classes="list-table")
            with TabPane(Tab.DOTFILES.label, id=Tab.DOTFILES.value):
                yield ListTable(id="dotfiles-table", classes="list-table")
            with TabPane(Tab.STATUS.label, id=Tab.STATUS.value):
                yield VerticalScroll(
                    Static("", id="status-untracked", classes="status-section"),
                    Static("", id="status-stale", classes="status-section"),
                    Static("", id="status-recent", classes="status-section"),
                    id="status-panel",
                )

        yield Input(id="filter-input", placeholder="filter")
        yield Static("", id="status-line")
        yield Footer()

    def on_mount(self) -> None:
        """Set up tables, render, and start the task timer."""
        self._setup_columns()
        for tab in (Tab.IDEAS, Tab.PROJECTS, Tab.PLANS, Tab.DOTFILES):
            self._render_table(tab)
        self._render_status()
        self._refresh_stats()
        self._update_status_line()
        for warning in self._warnings:
            self.notify(warning, severity="warning")
        self._tick_timer = self.set_interval(tick_seconds(), self._on_tick)
        if self.state.tab is Tab.STATUS:
            self._start_status_refresh()

    # -------------------------------------------------------------------------
    # Rendering
    # -------------------------------------------------------------------------

    def _table(self, tab: Tab) -> DataTable:
        return self.query_one(f"#{tab.value}-table", DataTable)

    def _setup_columns(self) -> None:
        columns = {
            Tab.IDEAS: ("Idea", "Status", "Q", "Sessions", "Modified", "Description"),
            Tab.PROJECTS: (" ", "Project", "Category", "Tech", "Last commit", "Description"),
            Tab.PLANS: ("Plan", "Title", "Modified"),
            Tab.DOTFILES: ("Name", "Category", "Description"),
        }
        for tab, names in columns.items():
            table = self._table(tab)
            table.cursor_type = "row"
            table.zebra_stripes = True
            table.add_columns(*names)

    def _row(self, tab: Tab, record) -> tuple:
        if tab is Tab.IDEAS:
            idea: Idea = record
            return (
                Text(idea.folder),
                status_markup(idea.status),
                str(len(idea.open_questions)) if idea.open_questions else "",
                str(idea.sessions),
                Text(idea.modified),
                Text(truncate(idea.description, DESCRIPTION_WIDTH)),
            )
        if tab is Tab.PROJECTS:
            project: Project = record
            return (
                analyzed_mark(self.store.has_analysis(project.name)),
                Text(project.name),
                category_markup(project.category),
                Text(project.tech),
                Text(project.last_commit),
                Text(truncate(clean_desc(project.display_description), DESCRIPTION_WIDTH)),
            )
        if tab is Tab.PLANS:
            plan: Plan = record
            return (Text(plan.name), Text(plan.title), Text(plan.modified))
        item: DxItem = record
        return (
            Text(item.name),
            category_markup(item.category),
            Text(truncate(item.description, DESCRIPTION_WIDTH)),
        )

    def _render_table(self, tab: Tab) -> None:
        """Rebuild a list table from its FilteredList."""
        state = self.state.list_state(tab)
        table = self._table(tab)
        table.clear()
        for index in state.list.filtered_indices:
            table.add_row(*self._row(tab, state.list.items[index]), key=str(index))
        self._sync_cursor(tab)

    def _sync_cursor(self, tab: Tab) -> None:
        selected = self.state.list_state(tab).list.selected
        if selected is not None:
            self._table(tab).move_cursor(row=selected)

    def _render_status(self) -> None:
        status = self.state.status
        days = recent_days()
        sections = {
            StatusSection.UNTRACKED: ("status-untracked", f"New projects ({len(status.untracked)})"),
            StatusSection.STALE: ("status-stale", f"Needs re-analysis ({len(status.stale)})"),
            StatusSection.RECENT: ("status-recent", f"Recent activity, {days}d ({len(status.recent)})"),
        }
        for section, (widget_id, title) in sections.items():
            widget = self.query_one(f"#{widget_id}", Static)
            widget.border_title = title
            widget.set_class(section is status.section, "selected")
            widget.update(self._status_body(section))

    def _status_body(self, section: StatusSection) -> str:
        status = self.state.status
        if not status.loaded:
            return "[dim]Loading…[/dim]"
        if section is StatusSection.UNTRACKED:
            lines = [
                f"{escape(p.name)}  [dim]{escape(p.tech)}, {p.commits} commits[/dim]"
                for p in status.untracked
            ]
        elif section is StatusSection.STALE:
            lines = [f"{escape(name)}  [red]{n} commits since analysis[/red]" for name, n in status.stale]
        else:
            lines = [
                f"{escape(p.name)}  [dim]{escape(p.last_commit_date)}[/dim]  {escape(p.last_commit_msg)}"
                for p in status.recent
            ]
        return "\n".join(lines) if lines else "[dim]Nothing here[/dim]"

    def _refresh_stats(self) -> None:
        ideas = self.state.ideas.list.items
        projects = self.state.projects.list.items
        status = self.state.status
        stats = PortfolioStats(
            ideas_total=len(ideas),
            ideas_active=sum(1 for i in ideas if i.status == "active"),
            ideas_dormant=sum(1 for i in ideas if i.status == "dormant"),
            open_questions=sum(len(i.open_questions) for i in ideas),
            projects_total=len(projects),
            projects_analyzed=sum(1 for p in projects if self.store.has_analysis(p.name)),
            status_new=len(status.untracked),
            status_stale=len(status.stale),
            status_recent=len(status.recent),
        )
        self._stats = stats_line(stats, recent_days())
        self.query_one("#stats-bar", Static).update(self._stats)

    def status_line_text(self) -> str:
        """Filter, sort mode and task messages for the bottom line."""
        parts = []
        current = self.state.list_state()
        if current is not None:
            parts.append(f"sort: {current.sort_by.label}")
        if self.state.tab is Tab.IDEAS:
            parts.append(f"status: {self.state.ideas.filter.label}")
        if self.state.search_query:
            parts.append(f"filter: /{self.state.search_query}")
        for slot in (self.projects_slot, self.status_slot):
            if slot.message:
                parts.append(slot.message)
        return "  │  ".join(parts)

    def _update_status_line(self) -> None:
        self.query_one("#status-line", Static).update(Text(self.status_line_text()))

    # -------------------------------------------------------------------------
    # Background tasks
    # -------------------------------------------------------------------------

    def _on_tick(self) -> None:
        for slot in (self.projects_slot, self.status_slot):
            slot.poll()
            slot.tick()
        self._update_status_line()

    def _query_for(self, tab: Tab) -> str:
        return self.state.search_query if tab is self.state.tab else ""

    def _start_status_refresh(self) -> None:
        work = refresh_status_work(self.store.paths, self.state.projects.list.items, recent_days())
        self.status_slot.start(TaskKind.REFRESH_STATUS, work, STATUS_PROGRESS_MESSAGE)
        self._update_status_line()

    def _merge_analysis(self, finished: Finished) -> None:
        if not finished.success:
            self.notify(f"{finished.target}: {finished.message}", severity="error")
            return
        if finished.payload is not None:
            self.store.update_analyzed_status(finished.target, finished.payload)
        self.state.projects.resort_keeping_selection(self._query_for(Tab.PROJECTS))
        self._render_table(Tab.PROJECTS)
        self._refresh_stats()
        screen = self.screen
        if isinstance(screen, ProjectDetailScreen) and screen.project.name == finished.target:
            screen.reload(
                self._project_info(screen.project),
                load_analysis_content(self.store.paths, screen.project.name),
            )
        self._start_status_refresh()

    def _merge_inventory(self, finished: Finished) -> None:
        if not finished.success:
            self.notify(finished.message, severity="error")
            return
        self.state.projects.replace_items(finished.payload, self._query_for(Tab.PROJECTS))
        self._render_table(Tab.PROJECTS)
        self._refresh_stats()
        self._start_status_refresh()

    def _merge_status(self, finished: Finished) -> None:
        if finished.success and finished.payload is not None:
            self.state.status.apply(finished.payload)
        self._render_status()
        self._refresh_stats()

    # -------------------------------------------------------------------------
    # Screens
    # -------------------------------------------------------------------------

    def open_screen(self, screen: ModalScreen, view: View, callback=None) -> None:
        """Push a modal screen, restoring the previous view when it closes."""
        previous = self.state.view
        self.state.view = view

        def closed(result) -> None:
            self.state.view = previous
            if callback is not None:
                callback(result)

        self.push_screen(screen, closed)

    def _project_info(self, project: Project) -> str:
        return project_info_markup(
            project,
            self.store.has_analysis(project.name),
            self.store.analyzed_status(project.name),
        )

    def _modal_open(self) -> bool:
        return isinstance(self.screen, ModalScreen)

    def check_action(self, action: str, parameters: tuple) -> Optional[bool]:
        """List-only actions are disabled while a modal screen is open."""
        if action in LIST_ACTIONS and self._modal_open():
            return False
        if action == "cycle_filter" and self.state.tab is not Tab.IDEAS:
            return False
        return True

    # -------------------------------------------------------------------------
    # Event handlers
    # -------------------------------------------------------------------------

    def on_tabbed_content_tab_activated(self, event: TabbedContent.TabActivated) -> None:
        """Keep AppState in step with the visible tab."""
        tab = Tab(event.pane.id)
        previous = self.state.tab
        if not self.state.switch_tab(tab):
            return
        self._hide_filter()
        for t in (previous, tab):
            if t.kind is not None:
                self._render_table(t)
        self._update_status_line()
        self.refresh_bindings()
        if tab is Tab.STATUS:
            self._start_status_refresh()

    def on_data_table_row_highlighted(self, event: DataTable.RowHighlighted) -> None:
        """Mouse clicks move the table cursor; mirror that into the list state."""
        if event.row_key is None or event.row_key.value is None:
            return
        tab = Tab(event.data_table.id.rsplit("-", 1)[0])
        self.state.list_state(tab).list.select_item(int(event.row_key.value))

    def on_input_changed(self, event: Input.Changed) -> None:
        if event.input.id == "filter-input":
            self.state.set_query(event.value)
            if self.state.tab.kind is not None:
                self._render_table(self.state.tab)
            self._update_status_line()

    def on_input_submitted(self, event: Input.Submitted) -> None:
        """Enter keeps the filter and hands keys back to the list."""
        if event.input.id == "filter-input":
            event.input.blur()
            if not event.value:
                self._hide_filter()

    # -------------------------------------------------------------------------
    # Actions
    # -------------------------------------------------------------------------

    def _set_tab(self, tab: Tab) -> None:
        self.query_one(TabbedContent).active = tab.value

    def action_next_tab(self) -> None:
        self._set_tab(self.state.tab.next())

    def action_prev_tab(self) -> None:
        self._set_tab(self.state.tab.prev())

    def action_cursor_down(self) -> None:
        self._move(1)

    def action_cursor_up(self) -> None:
        self._move(-1)

    def _move(self, step: int) -> None:
        if self.state.tab is Tab.STATUS:
            if step > 0:
                self.state.status.next_section()
            else:
                self.state.status.prev_section()
            self._render_status()
            return
        items = self.state.list_state().list
        if step > 0:
            items.next()
        else:
            items.previous()
        self._sync_cursor(self.state.tab)

    def action_sort(self) -> None:
        if self.state.tab is Tab.STATUS:
            return
        self.state.cycle_sort()
        self._render_table(self.state.tab)
        self._update_status_line()

    def action_cycle_filter(self) -> None:
        self.state.ideas.cycle_filter(self.state.search_query)
        self._render_table(Tab.IDEAS)
        self._update_status_line()

    def action_filter(self) -> None:
        if self.state.tab is Tab.STATUS:
            return
        filter_input = self.query_one("#filter-input", Input)
        filter_input.add_class("active")
        filter_input.focus()

    def _hide_filter(self) -> None:
        filter_input = self.query_one("#filter-input", Input)
        with filter_input.prevent(Input.Changed):
            filter_input.value = ""
        filter_input.remove_class("active")
        filter_input.blur()

    def action_clear_filter(self) -> None:
        self._hide_filter()
        if self.state.search_query:
            self.state.set_query("")
            if self.state.tab.kind is not None:
                self._render_table(self.state.tab)
        self._update_status_line()

    def action_open(self) -> None:
        tab = self.state.tab
        if tab is Tab.STATUS:
            self._status_enter()
            return
        record = self.state.list_state().list.selected_item()
        if record is None:
            return
        if tab is Tab.IDEAS:
            self.open_screen(
                IdeaDetailScreen(record, self.store.repo_root / record.folder),
                View.DETAIL,
            )
        elif tab is Tab.PROJECTS:
            self.open_screen(
                ProjectDetailScreen(
                    record,
                    self._project_info(record),
                    load_analysis_content(self.store.paths, record.name),
                ),
                View.PROJECT_DETAIL,
            )
        elif tab is Tab.PLANS:
            self.open_screen(PlanViewerScreen(record), View.PLAN_VIEWER)
        else:
            self._open_path(Path(record.path).expanduser())

    def _status_enter(self) -> None:
        status = self.state.status
        if status.section is StatusSection.UNTRACKED:
            if status.untracked:
                self._open_path(Path(status.untracked[0].path))
            return
        if status.section is StatusSection.STALE:
            name = status.stale[0][0] if status.stale else None
        else:
            name = status.recent[0].name if status.recent else None
        if name is None:
            return
        self._set_tab(Tab.PROJECTS)
        self.state.switch_tab(Tab.PROJECTS)
        self.state.set_query("")
        self.state.projects.select_by_name(name)
        self._render_table(Tab.PROJECTS)
        self._update_status_line()

    def action_refresh(self) -> None:
        tab = self.state.tab
        if tab is Tab.STATUS:
            self._start_status_refresh()
            return
        if tab is Tab.PROJECTS:
            started = self.projects_slot.start(
                TaskKind.REFRESH_INVENTORY,
                refresh_inventory_work(self.store.paths),
                REFRESH_PROGRESS_MESSAGE,
            )
            if not started:
                self.notify("A project task is already running", severity="warning")
            self._update_status_line()
            return
        self._reload(tab)

    def _reload(self, tab: Tab) -> None:
        """Re-read one collection from disk, keeping the selection by name."""
        state = self.state.list_state(tab)
        selected = state.list.selected_item()
        try:
            records = self.store.load(tab.kind)
        except DataLoadError as e:
            self.notify(str(e), severity="error")
            return
        state.list.set_items(records)
        state.apply_sort(self._query_for(tab))
        if selected is not None:
            name = record_name(tab.kind, selected)
            state.list.select_where(lambda r: record_name(tab.kind, r) == name)
        self._render_table(tab)
        self._refresh_stats()

    def action_analyze(self, deep: bool = False) -> None:
        if self.state.tab is not Tab.PROJECTS:
            return
        project = self.state.projects.list.selected_item()
        if project is None:
            self.notify("No project selected", severity="warning")
            return
        started = self.projects_slot.start(
            TaskKind.ANALYZE_PROJECT,
            analyze_project_work(self.store.paths, project, deep),
            analyze_progress_message(project.name, deep),
            target=project.name,
        )
        if not started:
            self.notify("A project task is already running", severity="warning")
        self._update_status_line()

    def action_edit_idea(self) -> None:
        """Edit the selected idea's README in $EDITOR, then reload ideas."""
        if self.state.tab is not Tab.IDEAS:
            return
        idea = self.state.ideas.list.selected_item()
        if idea is None:
            return
        readme = self.store.repo_root / idea.folder / "README.md"
        editor = shlex.split(os.environ.get("EDITOR") or "vim")
        try:
            with self.suspend():
                subprocess.run(editor + [str(readme)])
        except SuspendNotSupported:
            self.notify("Cannot suspend the terminal to run the editor", severity="error")
            return
        except OSError as e:
            get_logger().error("edit_idea", str(e))
            self.notify(f"Editor failed: {e}", severity="error")
            return
        self._reload(Tab.IDEAS)

    def action_open_folder(self) -> None:
        tab = self.state.tab
        record = self.state.list_state().list.selected_item() if tab.kind else None
        if record is None:
            return
        if tab is Tab.IDEAS:
            self._open_path(self.store.repo_root / record.folder)
        elif tab is Tab.PLANS:
            self._open_path(record.path.parent)
        else:
            self._open_path(Path(record.path).expanduser())

    def _open_path(self, path: Path) -> None:
        try:
            subprocess.Popen(
                [opener_command(), str(path)],
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
            )
        except OSError as e:
            get_logger().error("open_path", str(e))
            self.notify(f"Could not open {path}: {e}", severity="error")

    def action_global_search(self) -> None:
        self.open_screen(
            GlobalSearchScreen(self.state.run_global_search),
            View.GLOBAL_SEARCH,
            self._on_search_result,
        )

    def _on_search_result(self, result: Optional[SearchResult]) -> None:
        if result is None:
            return
        tab = Tab.for_kind(result.source)
        previous = self.state.tab
        self._hide_filter()
        self.state.jump_to(result)
        if previous.kind is not None:
            self._render_table(previous)
        self._set_tab(tab)
        self._render_table(tab)
        self._update_status_line()
