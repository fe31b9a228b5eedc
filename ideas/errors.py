# SPDX-License-Identifier: MIT
"""
Exception types for the ideas toolkit.

Configuration and not-found errors are fatal for the CLI and are reported
as ``Error: <message>`` with a nonzero exit. Missing optional data is never
an error (loaders return empty collections), and subprocess failures degrade
to default values inside the data layer instead of raising.
"""

from pathlib import Path
from typing import Optional


class IdeasError(Exception):
    """Base class for all errors raised by the toolkit."""


class ConfigError(IdeasError):
    """The environment cannot be resolved (e.g. no home directory)."""


class RepoNotFoundError(IdeasError):
    """No directory containing ``_tracker.csv`` could be found."""

    def __init__(self, message: str = "Could not find ideas repo (no _tracker.csv found)"):
        super().__init__(message)


class DataLoadError(IdeasError):
    """A data file exists but could not be read or parsed."""

    def __init__(self, path: Path, reason: str):
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"Failed to load {self.path}: {reason}")


class ProjectNotFoundError(IdeasError):
    """A project name did not match any inventory entry."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Project not found: {name}")


class AnalysisNotFoundError(IdeasError):
    """A command needed an analysis file that does not exist."""

    def __init__(self, name: str, path: Optional[Path] = None):
        self.name = name
        self.path = path
        where = f" ({path})" if path else ""
        super().__init__(f"No analysis file for '{name}'{where}")
