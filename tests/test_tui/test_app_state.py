# SPDX-License-Identifier: MIT
"""Tests for TUI app state dataclasses."""

from dataclasses import is_dataclass
from pathlib import Path

import pytest

from ideas.models import DxItem, Idea, Kind, Plan, Project, RecentProject, SearchResult
from ideas.sorting import IdeaSort, ProjectSort, StatusFilter
from ideas.tui.app_state import (
    AppState,
    IdeasState,
    ProjectDetailTab,
    ProjectsState,
    StatusSection,
    StatusState,
    Tab,
    View,
    record_name,
)
from ideas.workers import StatusReport


def make_state():
    state = AppState()
    state.projects.has_analysis = lambda name: name == "rogue"
    state.load(
        ideas=[
            Idea("weaver", description="Loom sim", status="dormant"),
            Idea("atlas", description="Map viewer", status="active"),
            Idea("quill", description="Essay tool", status="active"),
        ],
        projects=[
            Project("tiny", "/d/tiny", category="cli"),
            Project("rogue", "/d/rogue", category="roguelike"),
            Project("notes", "/d/notes", category="knowledge"),
        ],
        plans=[
            Plan("old", "Old plan", "2024-01-01", Path("/p/old.md")),
            Plan("new", "New plan", "2024-05-01", Path("/p/new.md")),
        ],
        dotfiles=[DxItem("zshrc", "shell-config"), DxItem("git-sync", "dx-script")],
    )
    return state


def visible(state, tab):
    lst = state.list_state(tab).list
    return [record_name(tab.kind, lst.items[i]) for i in lst.filtered_indices]


class TestEnums:
    def test_tab_cycle_wraps(self):
        assert Tab.IDEAS.next() is Tab.PROJECTS
        assert Tab.STATUS.next() is Tab.IDEAS
        assert Tab.IDEAS.prev() is Tab.STATUS

    def test_tab_kinds(self):
        assert Tab.PLANS.kind is Kind.PLANS
        assert Tab.STATUS.kind is None
        assert Tab.for_kind(Kind.DOTFILES) is Tab.DOTFILES
        assert Tab.DOTFILES.label == "Dotfiles"

    def test_detail_tab_toggles(self):
        assert ProjectDetailTab.INFO.next() is ProjectDetailTab.ANALYSIS
        assert ProjectDetailTab.ANALYSIS.next() is ProjectDetailTab.INFO

    def test_status_sections_wrap(self):
        assert StatusSection.RECENT.next() is StatusSection.UNTRACKED
        assert StatusSection.UNTRACKED.prev() is StatusSection.RECENT


class TestDefaults:
    def test_dataclasses(self):
        assert is_dataclass(AppState)
        assert is_dataclass(IdeasState)

    def test_app_state_defaults(self):
        state = AppState()
        assert state.tab is Tab.IDEAS
        assert state.view is View.LIST
        assert state.search_query == ""
        assert state.ideas.sort_by is IdeaSort.NAME
        assert state.ideas.filter is StatusFilter.ALL
        assert state.projects.sort_by is ProjectSort.ANALYZED
        assert state.projects.detail_tab is ProjectDetailTab.INFO

    def test_load_applies_default_sorts(self):
        state = make_state()
        assert visible(state, Tab.IDEAS) == ["atlas", "quill", "weaver"]
        assert visible(state, Tab.PROJECTS) == ["rogue", "tiny", "notes"]
        assert visible(state, Tab.PLANS) == ["new", "old"]
        assert visible(state, Tab.DOTFILES) == ["git-sync", "zshrc"]
        assert state.ideas.list.selected == 0


class TestFiltering:
    def test_query_filters_current_tab_only(self):
        state = make_state()
        state.set_query("  MAP ")
        assert visible(state, Tab.IDEAS) == ["atlas"]
        assert len(state.projects.list.filtered_indices) == 3

    def test_status_filter_combines_with_query(self):
        state = make_state()
        state.ideas.cycle_filter(state.search_query)
        assert state.ideas.filter is StatusFilter.ACTIVE
        assert visible(state, Tab.IDEAS) == ["atlas", "quill"]
        state.set_query("essay")
        assert visible(state, Tab.IDEAS) == ["quill"]

    def test_no_match_clears_selection(self):
        state = make_state()
        state.set_query("zzz")
        assert state.ideas.list.selected is None
        assert state.ideas.list.selected_item() is None

    def test_switch_tab_drops_query(self):
        state = make_state()
        state.set_query("map")
        assert state.switch_tab(Tab.PROJECTS)
        assert state.search_query == ""
        assert visible(state, Tab.IDEAS) == ["atlas", "quill", "weaver"]

    def test_switch_to_same_tab(self):
        state = make_state()
        state.set_query("map")
        assert state.switch_tab(Tab.IDEAS) is False
        assert state.search_query == "map"

    def test_status_tab_has_no_list(self):
        state = make_state()
        state.switch_tab(Tab.STATUS)
        assert state.list_state() is None
        state.set_query("x")
        state.cycle_sort()


class TestSorting:
    def test_cycle_sort_keeps_query(self):
        state = make_state()
        state.set_query("a")
        state.cycle_sort()
        assert state.ideas.sort_by is IdeaSort.STATUS
        assert visible(state, Tab.IDEAS) == ["atlas", "quill", "weaver"]

    def test_resort_keeping_selection(self):
        state = make_state()
        projects = state.projects
        assert projects.select_by_name("notes")
        projects.sort_by = ProjectSort.NAME
        projects.resort_keeping_selection("")
        assert projects.selected_name() == "notes"
        assert visible(state, Tab.PROJECTS) == ["notes", "rogue", "tiny"]

    def test_replace_items_keeps_selection(self):
        state = make_state()
        state.projects.select_by_name("tiny")
        state.projects.replace_items(
            [Project("fresh", "/d/fresh"), Project("tiny", "/d/tiny")], ""
        )
        assert state.projects.selected_name() == "tiny"

    def test_replace_items_selection_gone(self):
        state = make_state()
        state.projects.select_by_name("tiny")
        state.projects.replace_items([Project("fresh", "/d/fresh")], "")
        assert state.projects.selected_name() == "fresh"

    def test_select_by_missing_name(self):
        projects = ProjectsState()
        assert projects.select_by_name(None) is False
        assert projects.select_by_name("nope") is False


class TestStatus:
    def test_apply_report(self):
        status = StatusState()
        assert not status.loaded
        status.apply(
            StatusReport(stale=[("rogue", 3)], recent=[RecentProject("rogue", "2024-03-10", "Fix")])
        )
        assert status.loaded
        assert status.stale == [("rogue", 3)]
        assert status.untracked == []

    def test_section_navigation(self):
        status = StatusState()
        status.next_section()
        assert status.section is StatusSection.STALE
        status.prev_section()
        status.prev_section()
        assert status.section is StatusSection.RECENT


class TestGlobalSearch:
    def test_run_records_results(self):
        state = make_state()
        results = state.run_global_search("rogue")
        assert [(r.source, r.name) for r in results] == [(Kind.PROJECTS, "rogue")]
        assert state.search.query == "rogue"
        assert state.search.results == results

    def test_jump_to_switches_tab_and_selects(self):
        state = make_state()
        state.set_query("map")
        result = state.run_global_search("zshrc")[0]
        assert state.jump_to(result)
        assert state.tab is Tab.DOTFILES
        assert state.search_query == ""
        assert state.dotfiles.list.selected_item().name == "zshrc"
        assert visible(state, Tab.IDEAS) == ["atlas", "quill", "weaver"]

    def test_jump_to_falls_back_to_name(self):
        state = make_state()
        stale = SearchResult(Kind.PROJECTS, "notes", "", index=0)
        assert state.jump_to(stale)
        assert state.projects.selected_name() == "notes"

    def test_jump_to_missing_record(self):
        state = make_state()
        assert state.jump_to(SearchResult(Kind.PLANS, "gone", "", index=9)) is False


@pytest.mark.parametrize(
    "kind,record,expected",
    [
        (Kind.IDEAS, Idea("atlas"), "atlas"),
        (Kind.PROJECTS, Project("rogue", "/d/rogue"), "rogue"),
        (Kind.DOTFILES, DxItem("zshrc"), "zshrc"),
    ],
)
def test_record_name(kind, record, expected):
    assert record_name(kind, record) == expected
