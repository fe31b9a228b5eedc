# SPDX-License-Identifier: MIT
"""Tests for the ideas-tui entry point."""

import pytest

pytest.importorskip("textual")

from ideas.tui.app import IdeasApp
from ideas.tui.app_state import Tab
from ideas.tui_cli import build_parser, main


def test_default_tab():
    assert build_parser().parse_args([]).tab == "ideas"


def test_tab_choices():
    assert build_parser().parse_args(["-t", "status"]).tab == "status"
    with pytest.raises(SystemExit):
        build_parser().parse_args(["--tab", "bogus"])


def test_missing_repo(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("HOME", str(tmp_path / "nobody"))
    monkeypatch.chdir(tmp_path)
    assert main([]) == 1
    assert capsys.readouterr().err.startswith("Error: Could not find ideas repo")


def test_runs_app_on_requested_tab(ideas_env, monkeypatch):
    launched = []

    def fake_run(self, *args, **kwargs):
        launched.append(self)

    monkeypatch.setattr(IdeasApp, "run", fake_run)
    ideas_env.paths.dx_inventory_path.write_text("not json")

    assert main(["--tab", "projects"]) == 0
    app = launched[0]
    assert app.state.tab is Tab.PROJECTS
    assert len(app.state.ideas.list.items) == 3
    assert app.state.dotfiles.list.items == []
    assert len(app._warnings) == 1
