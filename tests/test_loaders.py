#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""Tests for the tracker, inventory, plans and dotfiles loaders."""

import json
import os
import pathlib

import pytest

from ideas.dotfiles import load_dotfiles, save_dotfiles
from ideas.errors import DataLoadError, ProjectNotFoundError
from ideas.models import DxItem, Project
from ideas.plans import load_plans
from ideas.projects import (
    find_project,
    group_by_category,
    inventory_to_markdown,
    load_projects,
    save_projects,
)
from ideas.tracker import load_ideas, parse_tags, save_ideas, tracker_to_markdown


class TestTracker:
    def test_loads_rows_in_file_order(self, ideas_env):
        ideas = load_ideas(ideas_env.repo)
        assert [i.folder for i in ideas] == ["alpha", "beta", "gamma"]

    def test_csv_fields(self, ideas_env):
        alpha = load_ideas(ideas_env.repo)[0]
        assert alpha.tags == ["cli", "rust"]
        assert alpha.description == "A command line tool for notes"
        assert alpha.created == "2024-01-01"
        assert alpha.modified == "2024-03-01"
        assert alpha.sessions == 3

    def test_readme_enrichment(self, ideas_env):
        alpha, beta, gamma = load_ideas(ideas_env.repo)
        assert alpha.status == "active"
        assert alpha.open_questions == ["Which storage format?", "Ship as a single binary?"]
        assert beta.status == "dormant"
        assert gamma.status == "unknown"
        assert gamma.open_questions == []

    def test_blank_folder_rows_skipped(self, tmp_path, monkeypatch):
        monkeypatch.setattr("ideas.markdown.run_mq", lambda s, p: None)
        (tmp_path / "_tracker.csv").write_text("folder,tags\n,\nreal,\n")
        assert [i.folder for i in load_ideas(tmp_path)] == ["real"]

    def test_bad_sessions_default_to_zero(self, tmp_path, monkeypatch):
        monkeypatch.setattr("ideas.markdown.run_mq", lambda s, p: None)
        (tmp_path / "_tracker.csv").write_text("folder,tags,description,created,modified,sessions\nx,,,,,lots\n")
        assert load_ideas(tmp_path)[0].sessions == 0

    def test_missing_tracker_is_load_error(self, tmp_path):
        with pytest.raises(DataLoadError):
            load_ideas(tmp_path)

    def test_parse_tags(self):
        assert parse_tags('"a, b,,c"') == ["a", "b", "c"]
        assert parse_tags("") == []

    def test_save_round_trips_csv_columns(self, ideas_env):
        ideas = load_ideas(ideas_env.repo)
        ideas[1].sessions = 9
        save_ideas(ideas_env.repo, ideas)
        reloaded = load_ideas(ideas_env.repo)
        assert reloaded[1].sessions == 9
        assert reloaded[0].tags == ["cli", "rust"]

    def test_tracker_to_markdown(self, ideas_env):
        md = tracker_to_markdown(ideas_env.repo / "_tracker.csv")
        assert md.startswith("# Ideas Tracker\n")
        assert "| alpha | cli,rust | A command line tool for notes | 2024-01-01 | 2024-03-01 | 3 |" in md
        assert "| gamma |  | Dormant sound experiment | 2023-05-01 | 2023-06-01 | 0 |" in md


class TestProjects:
    def test_load_inventory(self, ideas_env):
        projects = load_projects(ideas_env.paths)
        assert [p.name for p in projects] == ["rogue", "notes", "tiny"]
        assert projects[0].commits == 120
        assert projects[1].summary == ""

    def test_display_description_prefers_summary(self, ideas_env):
        rogue, notes, _ = load_projects(ideas_env.paths)
        assert rogue.display_description == "A roguelike in Rust"
        assert notes.display_description == "Personal wiki"

    def test_missing_inventory_is_empty(self, tmp_path):
        from ideas.paths import IdeasPaths

        paths = IdeasPaths.detect(env={"IDEAS_REPO": str(tmp_path)}, home=tmp_path)
        assert load_projects(paths) == []

    def test_corrupt_inventory_is_load_error(self, ideas_env):
        ideas_env.paths.project_inventory_path.write_text("{oops")
        with pytest.raises(DataLoadError) as excinfo:
            load_projects(ideas_env.paths)
        assert excinfo.value.path == ideas_env.paths.project_inventory_path

    def test_entry_without_path_is_load_error(self, ideas_env):
        ideas_env.paths.project_inventory_path.write_text(json.dumps({"projects": [{"name": "x"}]}))
        with pytest.raises(DataLoadError):
            load_projects(ideas_env.paths)

    @pytest.mark.parametrize("entry", [None, 1, "rogue"])
    def test_non_object_entry_is_load_error(self, ideas_env, entry):
        ideas_env.paths.project_inventory_path.write_text(json.dumps({"projects": [entry]}))
        with pytest.raises(DataLoadError) as excinfo:
            load_projects(ideas_env.paths)
        assert "must be an object" in excinfo.value.reason

    def test_save_keeps_other_keys(self, ideas_env):
        projects = load_projects(ideas_env.paths)
        projects[2].summary = "Now summarized"
        save_projects(ideas_env.paths, projects)
        data = json.loads(ideas_env.paths.project_inventory_path.read_text())
        assert data["generated"] == "2024-03-10"
        assert load_projects(ideas_env.paths)[2].summary == "Now summarized"

    def test_find_project(self, ideas_env):
        projects = load_projects(ideas_env.paths)
        assert find_project(projects, "notes").category == "knowledge"
        with pytest.raises(ProjectNotFoundError, match="Project not found: nope"):
            find_project(projects, "nope")

    def test_group_by_category_is_sorted(self, ideas_env):
        groups = group_by_category(load_projects(ideas_env.paths))
        assert list(groups) == ["cli", "knowledge", "roguelike"]

    def test_inventory_markdown(self, ideas_env):
        md = inventory_to_markdown(load_projects(ideas_env.paths))
        assert "Total projects: 3" in md
        assert "## roguelike (1 projects)" in md
        assert "- **Description**: A roguelike in Rust" in md


class TestPlans:
    def test_plans_with_titles(self, ideas_env):
        plans = {p.name: p for p in load_plans(ideas_env.paths)}
        assert set(plans) == {"refactor-loader", "ship-tui"}
        assert plans["ship-tui"].title == "Ship the TUI"
        assert plans["ship-tui"].path == ideas_env.plans_dir / "ship-tui.md"

    def test_newest_first(self, ideas_env):
        old = ideas_env.plans_dir / "refactor-loader.md"
        os.utime(old, (1_000_000_000, 1_000_000_000))
        plans = load_plans(ideas_env.paths)
        assert plans[0].name == "ship-tui"
        assert plans[-1].name == "refactor-loader"

    def test_missing_title_placeholder(self, ideas_env, monkeypatch):
        monkeypatch.setattr("ideas.markdown.run_mq", lambda s, p: None)
        assert {p.title for p in load_plans(ideas_env.paths)} == {"(no title)"}

    def test_non_markdown_ignored(self, ideas_env):
        (ideas_env.plans_dir / "scratch.txt").write_text("x")
        assert len(load_plans(ideas_env.paths)) == 2

    def test_missing_dir_is_empty(self, tmp_path):
        from ideas.paths import IdeasPaths

        assert load_plans(IdeasPaths.detect(env={}, home=tmp_path)) == []

    def test_unreadable_dir_is_load_error(self, ideas_env, monkeypatch):
        def deny(self):
            raise PermissionError(13, "Permission denied", str(self))

        monkeypatch.setattr(pathlib.Path, "iterdir", deny)
        with pytest.raises(DataLoadError) as excinfo:
            load_plans(ideas_env.paths)
        assert excinfo.value.path == ideas_env.plans_dir


class TestDotfiles:
    def test_load_items(self, ideas_env):
        items = load_dotfiles(ideas_env.paths)
        assert [d.name for d in items] == ["zshrc", "git-sync"]
        assert items[0].category == "shell-config"

    def test_missing_inventory_is_empty(self, tmp_path):
        from ideas.paths import IdeasPaths

        assert load_dotfiles(IdeasPaths.detect(env={}, home=tmp_path)) == []

    def test_items_must_be_a_list(self, ideas_env):
        ideas_env.paths.dx_inventory_path.write_text(json.dumps({"items": {}}))
        with pytest.raises(DataLoadError):
            load_dotfiles(ideas_env.paths)

    @pytest.mark.parametrize("entry", [None, 1])
    def test_non_object_item_is_load_error(self, ideas_env, entry):
        ideas_env.paths.dx_inventory_path.write_text(json.dumps({"items": [entry]}))
        with pytest.raises(DataLoadError):
            load_dotfiles(ideas_env.paths)

    def test_save_and_reload(self, ideas_env):
        save_dotfiles(ideas_env.paths, [DxItem(name="tmux", category="app-config")])
        assert [d.name for d in load_dotfiles(ideas_env.paths)] == ["tmux"]
