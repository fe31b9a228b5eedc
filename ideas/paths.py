# SPDX-License-Identifier: MIT
"""Centralized path resolution for the ideas toolkit.

All filesystem roots are resolved once at startup into an ``IdeasPaths``
value which is then passed to every component that needs it.
"""
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

from ideas.errors import ConfigError, RepoNotFoundError
from ideas.git import git_toplevel

TRACKER_FILE = "_tracker.csv"


def _home(env: Mapping[str, str]) -> Path:
    home = env.get("HOME")
    if home:
        return Path(home)
    try:
        return Path.home()
    except RuntimeError as e:
        raise ConfigError(f"Could not determine home directory: {e}") from e


@dataclass(frozen=True)
class IdeasPaths:
    """Resolved filesystem layout.

    Everything under the ideas repo and the dotfiles repo is derived from the
    two roots, so overriding ``IDEAS_REPO`` moves the inventory, analysis
    directory and metadata file together.
    """

    ideas_repo: Path
    developer_dir: Path
    dotfiles_repo: Path
    claude_plans_dir: Path
    scripts_dir: Path

    @property
    def ideas_data_dir(self) -> Path:
        return self.ideas_repo / "_data"

    @property
    def analysis_dir(self) -> Path:
        return self.ideas_data_dir / "analysis"

    @property
    def project_inventory_path(self) -> Path:
        return self.ideas_data_dir / "project-inventory.json"

    @property
    def analysis_meta_path(self) -> Path:
        return self.analysis_dir / "_meta.json"

    @property
    def dx_inventory_path(self) -> Path:
        return self.dotfiles_repo / "_data" / "dx-inventory.json"

    @classmethod
    def detect(
        cls, env: Optional[Mapping[str, str]] = None, home: Optional[Path] = None
    ) -> "IdeasPaths":
        """Resolve paths from the environment.

        Resolution order for each root:
        1. Its environment variable (IDEAS_REPO, IDEAS_DEVELOPER_DIR,
           DOTFILES_REPO, IDEAS_CLAUDE_PLANS_DIR, IDEAS_SCRIPTS_DIR)
        2. A conventional default under the home directory
        """
        env = os.environ if env is None else env
        home = home if home is not None else _home(env)

        developer_dir = Path(env.get("IDEAS_DEVELOPER_DIR") or home / "Developer")
        ideas_repo = Path(env.get("IDEAS_REPO") or home / "Developer" / "ideas")
        dotfiles_repo = Path(env.get("DOTFILES_REPO") or home / "dotfiles")
        plans_dir = Path(env.get("IDEAS_CLAUDE_PLANS_DIR") or home / ".claude" / "plans")
        scripts_dir = Path(
            env.get("IDEAS_SCRIPTS_DIR") or dotfiles_repo / "scripts" / "ideas" / "mq"
        )
        return cls(
            ideas_repo=ideas_repo,
            developer_dir=developer_dir,
            dotfiles_repo=dotfiles_repo,
            claude_plans_dir=plans_dir,
            scripts_dir=scripts_dir,
        )


def state_dir() -> Path:
    """Get the state directory for mutable data (debug log).

    Resolution order:
    1. IDEAS_STATE env var
    2. XDG_STATE_HOME/ideas
    3. ~/.local/state/ideas
    """
    state = os.environ.get("IDEAS_STATE")
    if state:
        return Path(state)
    xdg_state = os.environ.get("XDG_STATE_HOME")
    if xdg_state:
        return Path(xdg_state) / "ideas"
    return Path.home() / ".local" / "state" / "ideas"


def _is_ideas_repo(path: Optional[Path]) -> bool:
    return path is not None and (path / TRACKER_FILE).is_file()


def find_ideas_repo(paths: IdeasPaths, cwd: Optional[Path] = None) -> Path:
    """Locate the ideas repo.

    Checks the working directory, then its git root, then the configured
    ``ideas_repo``. The first one holding ``_tracker.csv`` wins.

    Raises:
        RepoNotFoundError: if none of the candidates qualifies.
    """
    cwd = Path(cwd) if cwd is not None else Path.cwd()
    for candidate in (cwd, git_toplevel(cwd), paths.ideas_repo):
        if _is_ideas_repo(candidate):
            return candidate
    raise RepoNotFoundError()


def analysis_file_path(paths: IdeasPaths, name: str) -> Path:
    return paths.analysis_dir / f"{name}.md"


def has_analysis_file(paths: IdeasPaths, name: str) -> bool:
    return analysis_file_path(paths, name).is_file()


def script_path(paths: IdeasPaths, name: str) -> Path:
    """Path of a helper shell script such as ``projects-scan.sh``."""
    return paths.scripts_dir / name
