#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""Tests for the background task bodies and the helper script runner."""

import pytest

from ideas import scripts, workers
from ideas.models import Project, RecentProject
from ideas.tasks import TaskKind


def write_script(ideas_env, name, body):
    path = ideas_env.scripts_dir / name
    path.write_text("#!/usr/bin/env bash\n" + body + "\n")
    return path


@pytest.fixture
def quiet_git(monkeypatch):
    """No real git for discovery in these tests."""
    monkeypatch.setattr(workers, "get_recent_activity", lambda projects, days: [])
    monkeypatch.setattr(workers, "detect_untracked_projects", lambda paths, projects: [])


class TestRunScript:
    def test_passes_arguments(self, ideas_env):
        out = ideas_env.scripts_dir / "args.txt"
        script = write_script(ideas_env, "echo.sh", f'echo "$@" > "{out}"')
        assert scripts.run_script(script, "one", "two", quiet=True)
        assert out.read_text().strip() == "one two"

    def test_nonzero_exit(self, ideas_env):
        script = write_script(ideas_env, "fail.sh", "exit 3")
        assert scripts.run_script(script, quiet=True) is False

    def test_missing_script(self, ideas_env):
        assert scripts.run_script(ideas_env.scripts_dir / "absent.sh", quiet=True) is False

    def test_analyze_summary_only_flag(self, ideas_env):
        out = ideas_env.scripts_dir / "args.txt"
        write_script(ideas_env, scripts.ANALYZE_PROJECT, f'echo "$@" > "{out}"')
        assert scripts.analyze_project(ideas_env.paths, "/d/x", summary_only=True, quiet=True)
        assert out.read_text().strip() == "/d/x --summary-only"


class TestRefreshInventory:
    def test_success_reloads(self, ideas_env):
        write_script(ideas_env, scripts.PROJECTS_SCAN, "exit 0")
        result = workers.refresh_inventory_work(ideas_env.paths)()
        assert result.kind is TaskKind.REFRESH_INVENTORY
        assert result.success
        assert result.message == "Inventory refreshed"
        assert [p.name for p in result.payload] == ["rogue", "notes", "tiny"]

    def test_scan_failure(self, ideas_env):
        write_script(ideas_env, scripts.PROJECTS_SCAN, "exit 1")
        result = workers.refresh_inventory_work(ideas_env.paths)()
        assert not result.success
        assert result.message == "Refresh failed"
        assert result.payload is None

    def test_reload_failure(self, ideas_env):
        inventory = ideas_env.paths.project_inventory_path
        write_script(ideas_env, scripts.PROJECTS_SCAN, f'echo "nope" > "{inventory}"')
        result = workers.refresh_inventory_work(ideas_env.paths)()
        assert not result.success
        assert result.message.startswith("Reload failed")


class TestAnalyzeProject:
    def test_up_to_date_skips_script(self, ideas_env, fake_git):
        rogue = Project("rogue", str(ideas_env.developer / "rogue"))
        fake_git.heads[rogue.path] = "abc1234"
        fake_git.since[rogue.path] = 0
        marker = ideas_env.scripts_dir / "ran"
        write_script(ideas_env, scripts.ANALYZE_PROJECT, f'touch "{marker}"')

        result = workers.analyze_project_work(ideas_env.paths, rogue)()
        assert result.success
        assert result.message == "Up to date"
        assert result.target == "rogue"
        assert result.payload.analyzed_commit == "abc1234"
        assert not marker.exists()

    def test_runs_and_records(self, ideas_env, fake_git):
        notes = Project("notes", str(ideas_env.developer / "notes"))
        fake_git.heads[notes.path] = "n0t35"
        out = ideas_env.scripts_dir / "args.txt"
        write_script(ideas_env, scripts.ANALYZE_PROJECT_DEEP, f'echo "$1" > "{out}"')

        result = workers.analyze_project_work(ideas_env.paths, notes, deep=True)()
        assert result.success
        assert result.message == "Analysis complete"
        assert result.payload.analyzed_commit == "n0t35"
        assert out.read_text().strip() == notes.path

    def test_script_failure(self, ideas_env, fake_git):
        notes = Project("notes", str(ideas_env.developer / "notes"))
        write_script(ideas_env, scripts.ANALYZE_PROJECT, "exit 2")
        result = workers.analyze_project_work(ideas_env.paths, notes)()
        assert not result.success
        assert result.message == "Analysis failed"
        assert result.payload is None

    def test_corrupt_meta(self, ideas_env, fake_git):
        ideas_env.paths.analysis_meta_path.write_text("not json")
        notes = Project("notes", str(ideas_env.developer / "notes"))
        result = workers.analyze_project_work(ideas_env.paths, notes)()
        assert not result.success
        assert result.message.startswith("Load meta failed")

    def test_progress_message(self):
        assert workers.analyze_progress_message("rogue", False) == "Analyzing rogue…"
        assert workers.analyze_progress_message("rogue", True) == "Deep analyzing rogue…"


class TestRefreshStatus:
    def test_collects_report(self, ideas_env, fake_git, monkeypatch):
        rogue = Project("rogue", str(ideas_env.developer / "rogue"))
        fake_git.heads[rogue.path] = "fff0000"
        fake_git.since[rogue.path] = 2
        recent = [RecentProject("rogue", "2024-03-10", "Add boss")]
        monkeypatch.setattr(workers, "get_recent_activity", lambda projects, days: recent)
        monkeypatch.setattr(workers, "detect_untracked_projects", lambda paths, projects: [])

        result = workers.refresh_status_work(ideas_env.paths, [rogue], 7)()
        assert result.kind is TaskKind.REFRESH_STATUS
        assert result.success
        assert result.message == ""
        assert result.payload.stale == [("rogue", 2)]
        assert result.payload.recent == recent

    def test_bad_meta_gives_empty_stale(self, ideas_env, fake_git, quiet_git):
        ideas_env.paths.analysis_meta_path.write_text("[]")
        rogue = Project("rogue", str(ideas_env.developer / "rogue"))
        result = workers.refresh_status_work(ideas_env.paths, [rogue], 7)()
        assert result.payload.stale == []

    def test_snapshot_of_projects(self, ideas_env, fake_git, quiet_git):
        projects = [Project("rogue", str(ideas_env.developer / "rogue"))]
        work = workers.refresh_status_work(ideas_env.paths, projects, 7)
        projects.clear()
        fake_git.heads[str(ideas_env.developer / "rogue")] = "fff0000"
        fake_git.since[str(ideas_env.developer / "rogue")] = 1
        assert work().payload.stale == [("rogue", 1)]
