# SPDX-License-Identifier: MIT
"""
Git helpers.

Every helper degrades to ``None`` when git is missing, the path is not a
repository, or the command exits nonzero. Callers pick their own default.
"""

import subprocess
from pathlib import Path
from typing import List, Optional, Tuple, Union

PathLike = Union[str, Path]

GIT_TIMEOUT = 10


def _git(args: List[str]) -> Optional[str]:
    argv = ["git", *args]
    try:
        result = subprocess.run(
            argv, capture_output=True, text=True, timeout=GIT_TIMEOUT
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        _log_failure(argv, str(e))
        return None
    if result.returncode != 0:
        _log_failure(argv, result.stderr.strip(), result.returncode)
        return None
    return result.stdout


def _log_failure(argv: List[str], message: str, returncode: Optional[int] = None) -> None:
    # Imported lazily: the logger resolves its location through ideas.paths
    from ideas.debug_logger import get_logger

    get_logger().subprocess_error(argv, message, returncode)


def _parse_count(out: Optional[str]) -> Optional[int]:
    if out is None:
        return None
    try:
        return int(out.strip())
    except ValueError:
        return None


def get_project_head_commit(path: PathLike) -> Optional[str]:
    """Short hash of HEAD."""
    out = _git(["-C", str(path), "rev-parse", "--short", "HEAD"])
    if out is None:
        return None
    return out.strip() or None


def count_commits_since(path: PathLike, since_commit: str) -> Optional[int]:
    """Number of commits reachable from HEAD but not from ``since_commit``."""
    return _parse_count(_git(["-C", str(path), "rev-list", "--count", f"{since_commit}..HEAD"]))


def count_commits(path: PathLike) -> Optional[int]:
    return _parse_count(_git(["-C", str(path), "rev-list", "--count", "HEAD"]))


def git_toplevel(cwd: PathLike) -> Optional[Path]:
    out = _git(["-C", str(cwd), "rev-parse", "--show-toplevel"])
    if not out or not out.strip():
        return None
    return Path(out.strip())


def last_commit_since(path: PathLike, days: int) -> Optional[Tuple[str, str]]:
    """(date, subject) of the newest commit within ``days`` days, if any.

    The date is the ``YYYY-MM-DD`` part of the committer date.
    """
    out = _git(
        ["-C", str(path), "log", "-1", f"--since={days} days ago", "--format=%ci|%s"]
    )
    if not out:
        return None
    line = out.strip()
    if not line:
        return None
    date_part, _, message = line.partition("|")
    tokens = date_part.split()
    if not tokens:
        return None
    return tokens[0], message
