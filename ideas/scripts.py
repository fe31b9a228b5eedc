# SPDX-License-Identifier: MIT
"""
Helper shell scripts that live in the dotfiles repo.

The scripts do the heavy lifting (scanning ~/Developer, generating analysis
markdown, writing summaries). A failure to launch or a nonzero exit is
reported as ``False``; callers decide how to surface it.
"""

import subprocess
from pathlib import Path
from typing import Union

from ideas.debug_logger import get_logger
from ideas.paths import IdeasPaths, script_path

PROJECTS_SCAN = "projects-scan.sh"
ANALYZE_PROJECT = "analyze-project.sh"
ANALYZE_PROJECT_DEEP = "analyze-project-deep.sh"
GENERATE_SUMMARY = "generate-summary.sh"


def run_script(script: Path, *args: Union[str, Path], quiet: bool = False) -> bool:
    """Run ``bash <script> <args...>``.

    With ``quiet`` the script's output is discarded (background tasks must
    not write to the terminal the TUI owns).
    """
    argv = ["bash", str(script), *(str(a) for a in args)]
    output = subprocess.DEVNULL if quiet else None
    try:
        result = subprocess.run(argv, stdout=output, stderr=output)
    except OSError as e:
        get_logger().error("run_script", f"{script}: {e}")
        return False
    if result.returncode != 0:
        get_logger().subprocess_error(argv, "script failed", result.returncode)
        return False
    return True


def scan_projects(paths: IdeasPaths, quiet: bool = False) -> bool:
    return run_script(script_path(paths, PROJECTS_SCAN), quiet=quiet)


def analyze_project(
    paths: IdeasPaths,
    project_path: str,
    deep: bool = False,
    summary_only: bool = False,
    quiet: bool = False,
) -> bool:
    name = ANALYZE_PROJECT_DEEP if deep else ANALYZE_PROJECT
    args = [project_path]
    if summary_only:
        args.append("--summary-only")
    return run_script(script_path(paths, name), *args, quiet=quiet)


def generate_summary(paths: IdeasPaths, project_name: str) -> bool:
    return run_script(script_path(paths, GENERATE_SUMMARY), project_name)
