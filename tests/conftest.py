"""
Pytest configuration and fixtures for ideas toolkit tests.
"""

import sys
from pathlib import Path

# Ensure project root is in sys.path for 'ideas' package imports
# This must happen before any imports from ideas
_project_root = Path(__file__).parent.parent
if str(_project_root) not in sys.path:
    sys.path.insert(0, str(_project_root))

import json
from types import SimpleNamespace

import pytest

# Env vars that would otherwise leak the developer's real layout into tests
IDEAS_ENV_VARS = (
    "IDEAS_REPO",
    "IDEAS_DEVELOPER_DIR",
    "DOTFILES_REPO",
    "IDEAS_CLAUDE_PLANS_DIR",
    "IDEAS_SCRIPTS_DIR",
    "IDEAS_DEBUG",
    "XDG_STATE_HOME",
    "NO_COLOR",
)

TRACKER_CSV = """folder,tags,description,created,modified,sessions
alpha,"cli,rust",A command line tool for notes,2024-01-01,2024-03-01,3
beta,web,Web dashboard for habits,2024-02-01,2024-02-15,1
gamma,,Dormant sound experiment,2023-05-01,2023-06-01,0
"""

ALPHA_README = """# Alpha

**Status:** active

## Open Questions

- [ ] Which storage format?
- [x] Pick a name
- [ ] Ship as a single binary?
"""

BETA_README = """# Beta

Status: dormant
"""

ROGUE_ANALYSIS = """# rogue

> A roguelike written in Rust.

Key points of the summary.

---

## Deep Dive

Internals.
"""


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "slow: marks tests as slow")
    config.addinivalue_line("markers", "integration: marks integration tests")
    config.addinivalue_line("markers", "tui: marks TUI tests")


@pytest.fixture
def temp_state_dir(tmp_path: Path, monkeypatch) -> Path:
    """Create and return a temporary state directory.

    Sets IDEAS_STATE env var and resets debug logger.
    """
    state_dir = tmp_path / ".local" / "state" / "ideas"
    state_dir.mkdir(parents=True)
    monkeypatch.setenv("IDEAS_STATE", str(state_dir))

    # Reset the debug logger so it picks up the new path
    from ideas.debug_logger import reset_logger
    reset_logger()

    return state_dir


@pytest.fixture(autouse=True)
def isolate_state_dir(temp_state_dir: Path, tmp_path: Path, monkeypatch):
    """Autouse fixture that keeps every test away from the real home layout.

    Clears the IDEAS_* overrides, points settings at a file that does not
    exist and isolates the debug log.
    """
    for var in IDEAS_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("IDEAS_SETTINGS", str(tmp_path / "no-settings.json"))

    yield temp_state_dir

    # Reset logger after test
    from ideas.debug_logger import reset_logger
    reset_logger()


def fake_run_mq(selector: str, path: Path):
    """Stand-in for the mq binary: returns the whole file for any selector.

    The parsers only look for their own markers, so the full document is
    an adequate answer for ".", ".list" and ".h1".
    """
    try:
        return Path(path).read_text()
    except OSError:
        return None


def write_json(path: Path, data) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2))


@pytest.fixture
def ideas_env(tmp_path: Path, monkeypatch):
    """A complete fake home: ideas repo, inventory, analyses, plans, dotfiles.

    Environment variables point at the layout, the working directory is the
    temp dir, and ``mq`` is replaced by ``fake_run_mq``.
    """
    from ideas.paths import IdeasPaths

    home = tmp_path / "home"
    developer = home / "Developer"
    repo = developer / "ideas"
    dotfiles = home / "dotfiles"
    plans_dir = home / ".claude" / "plans"
    scripts_dir = tmp_path / "scripts"

    repo.mkdir(parents=True)
    (repo / "_tracker.csv").write_text(TRACKER_CSV)
    (repo / "alpha").mkdir()
    (repo / "alpha" / "README.md").write_text(ALPHA_README)
    (repo / "alpha" / "notes.md").write_text("# Notes\n\nScratch.\n")
    (repo / "beta").mkdir()
    (repo / "beta" / "README.md").write_text(BETA_README)
    (repo / "README.md").write_text("# Ideas\n")

    data_dir = repo / "_data"
    write_json(
        data_dir / "project-inventory.json",
        {
            "generated": "2024-03-10",
            "projects": [
                {
                    "name": "rogue",
                    "path": str(developer / "rogue"),
                    "source": "github",
                    "category": "roguelike",
                    "tech": "rust",
                    "last_commit": "2024-03-10",
                    "commits": 120,
                    "summary": "A roguelike in Rust",
                    "description": "Dungeon crawler",
                },
                {
                    "name": "notes",
                    "path": str(developer / "notes"),
                    "source": "local",
                    "category": "knowledge",
                    "tech": "python",
                    "last_commit": "2024-01-05",
                    "commits": 40,
                    "description": "Personal wiki",
                },
                {
                    "name": "tiny",
                    "path": str(developer / "tiny"),
                    "category": "cli",
                    "tech": "go",
                    "last_commit": "2023-11-20",
                    "commits": 0,
                    "description": "Scratch tool",
                },
            ],
        },
    )
    analysis_dir = data_dir / "analysis"
    analysis_dir.mkdir(parents=True)
    (analysis_dir / "rogue.md").write_text(ROGUE_ANALYSIS)
    write_json(
        analysis_dir / "_meta.json",
        {
            "version": 1,
            "projects": {
                "rogue": {"analyzed_at": "2024-03-01T10:00:00Z", "analyzed_commit": "abc1234"}
            },
        },
    )

    plans_dir.mkdir(parents=True)
    (plans_dir / "refactor-loader.md").write_text("# Refactor the loader\n\nSteps.\n")
    (plans_dir / "ship-tui.md").write_text("# Ship the TUI\n\nSteps.\n")

    write_json(
        dotfiles / "_data" / "dx-inventory.json",
        {
            "items": [
                {
                    "name": "zshrc",
                    "category": "shell-config",
                    "path": "~/.zshrc",
                    "description": "Shell setup and aliases",
                },
                {
                    "name": "git-sync",
                    "category": "dx-script",
                    "path": "~/bin/git-sync",
                    "description": "Sync all repos",
                },
            ]
        },
    )
    scripts_dir.mkdir()

    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("IDEAS_REPO", str(repo))
    monkeypatch.setenv("IDEAS_DEVELOPER_DIR", str(developer))
    monkeypatch.setenv("DOTFILES_REPO", str(dotfiles))
    monkeypatch.setenv("IDEAS_CLAUDE_PLANS_DIR", str(plans_dir))
    monkeypatch.setenv("IDEAS_SCRIPTS_DIR", str(scripts_dir))
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr("ideas.markdown.run_mq", fake_run_mq)

    return SimpleNamespace(
        home=home,
        developer=developer,
        repo=repo,
        dotfiles=dotfiles,
        plans_dir=plans_dir,
        scripts_dir=scripts_dir,
        analysis_dir=analysis_dir,
        paths=IdeasPaths.detect(),
    )


@pytest.fixture
def store(ideas_env):
    """IdeasStore over the fake layout."""
    from ideas.store import IdeasStore

    return IdeasStore(ideas_env.paths, cwd=ideas_env.repo.parent)


@pytest.fixture
def fake_git(monkeypatch):
    """Replace git lookups used by the analysis code with table-driven fakes.

    Returns a namespace whose ``heads`` and ``since`` dicts map a project
    path to its HEAD commit and to commits since the analyzed commit.
    """
    heads = {}
    since = {}

    def head(path):
        return heads.get(str(path))

    def count_since(path, commit):
        return since.get(str(path))

    monkeypatch.setattr("ideas.analysis.get_project_head_commit", head)
    monkeypatch.setattr("ideas.analysis.count_commits_since", count_since)
    return SimpleNamespace(heads=heads, since=since)
