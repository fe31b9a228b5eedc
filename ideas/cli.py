#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
CLI interface for the ideas toolkit.

Each invocation loads what it needs, prints, and exits.

Usage:
    icli <command> [args]
    python3 -m ideas.cli <command> [args]
"""

import argparse
import sys
import time
from typing import List, Optional

from ideas._version import __version__
from ideas.commands import COMMAND_REGISTRY, dispatch_command
from ideas.debug_logger import get_logger
from ideas.errors import IdeasError
from ideas.paths import IdeasPaths
from ideas.sorting import DotfilesSort, IdeaSort, PlanSort, ProjectSort
from ideas.store import IdeasStore


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="icli",
        description="Ideas - inventory of ideas, projects, plans and dotfiles",
    )
    parser.add_argument("--version", action="version", version=f"ideas {__version__}")
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # ideas command
    ideas_parser = subparsers.add_parser("ideas", help="List and search ideas from the ideas repo")
    ideas_parser.add_argument(
        "--status", "-s", help="Filter by status (active, dormant, unknown)"
    )
    ideas_parser.add_argument("--search", "-q", help="Search term")
    ideas_parser.add_argument("--sort", choices=IdeaSort.choices(), help="Sort order")

    # projects command
    projects_parser = subparsers.add_parser(
        "projects", help="List and search projects from the inventory"
    )
    projects_parser.add_argument("--category", "-c", help="Filter by category")
    projects_parser.add_argument("--search", "-q", help="Search term")
    projects_parser.add_argument("--group", "-g", action="store_true", help="Group by category")
    projects_parser.add_argument(
        "--analyzed", "-a", action="store_true", help="Only show projects with analysis files"
    )
    projects_parser.add_argument(
        "--show-analysis", action="store_true", help="Show analysis status column"
    )
    projects_parser.add_argument("--sort", choices=ProjectSort.choices(), help="Sort order")

    # summary command
    summary_parser = subparsers.add_parser(
        "summary", help="Show analysis summary for a project (quick preview)"
    )
    summary_parser.add_argument("project", help="Project name")

    # plans command
    plans_parser = subparsers.add_parser("plans", help="List and search assistant plans")
    plans_parser.add_argument("--search", "-q", help="Search term")
    plans_parser.add_argument("--sort", choices=PlanSort.choices(), help="Sort order")

    # search command
    search_parser = subparsers.add_parser(
        "search", help="Search across all sources (ideas, projects, plans, dotfiles)"
    )
    search_parser.add_argument("query", help="Search term")

    subparsers.add_parser("stats", help="Show statistics across all sources")
    subparsers.add_parser("refresh", help="Refresh the project inventory cache")

    # dotfiles command
    dotfiles_parser = subparsers.add_parser(
        "dotfiles", help="List DX tools and configs from dotfiles"
    )
    dotfiles_parser.add_argument(
        "--category",
        "-c",
        help="Filter by category (dx-script, dx-tool, shell-config, app-config, tool-list, claude-skill)",
    )
    dotfiles_parser.add_argument("--search", "-q", help="Search term")
    dotfiles_parser.add_argument("--sort", choices=DotfilesSort.choices(), help="Sort order")

    # dirty command
    dirty_parser = subparsers.add_parser("dirty", help="Show projects that need (re-)analysis")
    dirty_parser.add_argument(
        "--tracked-only",
        action="store_true",
        help="Only show projects that already have analysis files",
    )
    dirty_parser.add_argument(
        "--stale-only",
        action="store_true",
        help="Only show projects with commits since last analysis",
    )

    # analyze command
    analyze_parser = subparsers.add_parser("analyze", help="Generate analysis for a project")
    analyze_parser.add_argument("project", help="Project name to analyze")
    analyze_parser.add_argument(
        "--summary-only", action="store_true", help="Only generate summary section (faster)"
    )
    analyze_parser.add_argument(
        "--force", action="store_true", help="Force re-analysis even if not dirty"
    )
    analyze_parser.add_argument(
        "--deep", action="store_true", help="Fill in analysis content with the deep script"
    )

    # context command
    context_parser = subparsers.add_parser(
        "context", help="Output analysis file content for a project"
    )
    context_parser.add_argument("project", help="Project name")

    # snapshot command
    snapshot_parser = subparsers.add_parser(
        "snapshot", help="Create a zip bundle of analyses, inventory and tracker"
    )
    snapshot_parser.add_argument(
        "--output", "-o", help="Output path (defaults to ~/Downloads/ideas-snapshot-YYYY-MM-DD.zip)"
    )

    subparsers.add_parser(
        "status", help="Show portfolio health: new projects, stale analyses, recent activity"
    )

    # prune command
    prune_parser = subparsers.add_parser(
        "prune", help="Remove orphaned analysis files (no matching project in inventory)"
    )
    prune_parser.add_argument(
        "--force", action="store_true", help="Actually delete files (default is dry-run)"
    )

    # summarize command
    summarize_parser = subparsers.add_parser(
        "summarize", help="Generate a one-line summary for project(s)"
    )
    summarize_parser.add_argument(
        "project",
        help='Project name (or "all-missing" for every project without a summary)',
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    started = time.perf_counter()
    exit_code = 1
    try:
        store = IdeasStore(IdeasPaths.detect())
        if args.command in COMMAND_REGISTRY:
            exit_code = dispatch_command(args, store)
        return exit_code
    except (IdeasError, OSError) as e:
        get_logger().error(args.command, str(e))
        print(f"Error: {e}", file=sys.stderr)
        return 1
    finally:
        get_logger().command(args.command, exit_code, (time.perf_counter() - started) * 1000)


if __name__ == "__main__":
    sys.exit(main())
