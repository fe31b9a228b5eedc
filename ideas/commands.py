#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Command pattern implementation for the ``icli`` tool.

Each subcommand is a class implementing the Command interface:
- execute(args, store) -> int

Commands are registered in COMMAND_REGISTRY and dispatched via
dispatch_command(). Errors that should end the command with a message are
raised as IdeasError and reported by cli.main().
"""

import sys
from abc import ABC, abstractmethod
from argparse import Namespace
from collections import Counter
from pathlib import Path
from typing import Dict, List, Type

from ideas.analysis import (
    check_project_dirty,
    find_orphaned_analyses,
    load_analysis_content,
    load_analysis_summary,
    never_analyzed,
    prune_orphans,
    record_analysis,
    stale_projects,
)
from ideas.config import recent_days
from ideas.discovery import detect_untracked_projects, get_recent_activity
from ideas.errors import AnalysisNotFoundError
from ideas.formatting import colorize, print_markdown, status_color
from ideas.models import Kind, Project
from ideas.paths import analysis_file_path
from ideas.projects import find_project, group_by_category
from ideas.scripts import analyze_project, generate_summary, scan_projects
from ideas.search import filter_records
from ideas.snapshot import create_snapshot, default_snapshot_path
from ideas.sorting import (
    DotfilesSort,
    IdeaSort,
    PlanSort,
    ProjectSort,
    sort_dotfiles,
    sort_ideas,
    sort_plans,
    sort_projects,
)
from ideas.store import IdeasStore
from ideas.util import clean_desc, format_size, truncate

# Category -> color for the project and dotfiles tables
PROJECT_CATEGORY_COLORS = {
    "roguelike": "red",
    "writing": "magenta",
    "knowledge": "blue",
    "simulation": "green",
    "tui": "cyan",
    "cli": "cyan",
}

DOTFILES_CATEGORY_COLORS = {
    "dx-script": "green",
    "dx-tool": "cyan",
    "shell-config": "yellow",
    "app-config": "blue",
    "tool-list": "magenta",
    "claude-skill": "red",
}

STATUS_TOP_N = 5
STALE_TOP_N = 3
NEVER_TOP_N = 10


def cell(text: str, width: int, *styles: str) -> str:
    """Left-aligned, truncated column; padding happens before coloring."""
    return colorize(f"{truncate(text, width - 1):<{width}}", *styles)


def heading(*columns) -> str:
    return " ".join(colorize(f"{name:<{width}}" if width else name, "bold") for name, width in columns)


class Command(ABC):
    """Abstract base class for all CLI commands.

    Commands receive parsed args and the IdeasStore for data access.
    """

    @abstractmethod
    def execute(self, args: Namespace, store: IdeasStore) -> int:
        """Execute the command.

        Args:
            args: Parsed command-line arguments
            store: IdeasStore instance

        Returns:
            Exit code (0 for success, non-zero for errors)
        """
        pass


# =============================================================================
# Listing Commands
# =============================================================================


class IdeasCommand(Command):
    """List ideas, optionally filtered by status and search term."""

    def execute(self, args: Namespace, store: IdeasStore) -> int:
        ideas = store.load(Kind.IDEAS)
        if args.sort:
            sort_ideas(ideas, IdeaSort(args.sort))
        if args.status:
            ideas = [i for i in ideas if i.status == args.status]
        ideas = filter_records(Kind.IDEAS, ideas, args.search or "")

        print(heading(("FOLDER", 22), ("STATUS", 10), ("MODIFIED", 12), ("DESCRIPTION", 0)))
        for idea in ideas:
            print(
                cell(idea.folder, 22),
                cell(idea.status, 10, status_color(idea.status)),
                cell(idea.modified, 12),
                truncate(idea.description, 40),
            )
        return 0


class ProjectsCommand(Command):
    """List projects from the inventory."""

    def execute(self, args: Namespace, store: IdeasStore) -> int:
        projects = store.load(Kind.PROJECTS)
        if args.sort:
            sort_projects(projects, ProjectSort(args.sort), store.has_analysis)
        if args.analyzed:
            projects = [p for p in projects if store.has_analysis(p.name)]
        if args.category:
            projects = [p for p in projects if p.category == args.category]
        projects = filter_records(Kind.PROJECTS, projects, args.search or "")

        if args.group:
            self._print_grouped(projects, store, args.show_analysis)
        else:
            self._print_table(projects, store, args.show_analysis)
        return 0

    @staticmethod
    def _marker(store: IdeasStore, name: str) -> str:
        if store.has_analysis(name):
            return colorize("[A]", "green")
        return colorize("[ ]", "dim")

    def _print_grouped(self, projects: List[Project], store: IdeasStore, show_analysis: bool) -> None:
        for category, members in group_by_category(projects).items():
            print(f"\n{colorize(f'=== {category} ===', 'cyan')} ({len(members)})")
            for p in members:
                desc = clean_desc(p.display_description)
                if show_analysis:
                    print(
                        f"  {self._marker(store, p.name)}",
                        cell(p.name, 18),
                        cell(p.last_commit, 12),
                        truncate(desc, 30),
                    )
                else:
                    print(f"  {cell(p.name, 20)}", cell(p.last_commit, 12), truncate(desc, 35))

    def _print_table(self, projects: List[Project], store: IdeasStore, show_analysis: bool) -> None:
        if show_analysis:
            print(
                heading(
                    ("", 3), ("NAME", 20), ("CATEGORY", 12), ("LAST_COMMIT", 12), ("DESCRIPTION", 0)
                )
            )
        else:
            print(
                heading(
                    ("NAME", 22),
                    ("CATEGORY", 12),
                    ("LAST_COMMIT", 12),
                    ("SOURCE", 10),
                    ("DESCRIPTION", 0),
                )
            )
        for p in projects:
            color = PROJECT_CATEGORY_COLORS.get(p.category, "")
            desc = truncate(clean_desc(p.display_description), 30)
            if show_analysis:
                print(
                    self._marker(store, p.name),
                    cell(p.name, 20),
                    cell(p.category, 12, color),
                    cell(p.last_commit, 12),
                    desc,
                )
            else:
                print(
                    cell(p.name, 22),
                    cell(p.category, 12, color),
                    cell(p.last_commit, 12),
                    cell(p.source, 10),
                    desc,
                )


class PlansCommand(Command):
    """List assistant plans, newest first."""

    def execute(self, args: Namespace, store: IdeasStore) -> int:
        plans = store.load(Kind.PLANS)
        if args.sort:
            sort_plans(plans, PlanSort(args.sort))
        plans = filter_records(Kind.PLANS, plans, args.search or "")

        print(heading(("NAME", 35), ("MODIFIED", 12), ("TITLE", 0)))
        for plan in plans:
            print(cell(plan.name, 35), cell(plan.modified, 12), truncate(plan.title, 45))
        return 0


class DotfilesCommand(Command):
    """List DX tools and configs from the dotfiles inventory."""

    def execute(self, args: Namespace, store: IdeasStore) -> int:
        items = store.load(Kind.DOTFILES)
        if args.sort:
            sort_dotfiles(items, DotfilesSort(args.sort))
        if args.category:
            items = [d for d in items if d.category == args.category]
        items = filter_records(Kind.DOTFILES, items, args.search or "")

        print(heading(("NAME", 20), ("CATEGORY", 14), ("PATH", 30), ("DESCRIPTION", 0)))
        for item in items:
            print(
                cell(item.name, 20),
                cell(item.category, 14, DOTFILES_CATEGORY_COLORS.get(item.category, "")),
                cell(item.path, 30),
                truncate(item.description, 40),
            )
        return 0


class SearchCommand(Command):
    """Search ideas, projects, plans and dotfiles at once."""

    def execute(self, args: Namespace, store: IdeasStore) -> int:
        query = args.query
        ideas = filter_records(Kind.IDEAS, store.load(Kind.IDEAS), query)
        projects = filter_records(Kind.PROJECTS, store.load(Kind.PROJECTS), query)
        plans = filter_records(Kind.PLANS, store.load(Kind.PLANS), query)
        dotfiles = filter_records(Kind.DOTFILES, store.load(Kind.DOTFILES), query)

        if ideas:
            print(colorize(f"\n=== Ideas ({len(ideas)}) ===", "yellow"))
            for i in ideas:
                print(f"  {i.folder:<20} [{i.status}] {truncate(i.description, 40)}")
        if projects:
            print(colorize(f"\n=== Projects ({len(projects)}) ===", "cyan"))
            for p in projects:
                print(f"  {p.name:<20} [{p.category}] {truncate(p.display_description, 40)}")
        if plans:
            print(colorize(f"\n=== Plans ({len(plans)}) ===", "magenta"))
            for p in plans:
                print(f"  {p.name:<30} {truncate(p.title, 45)}")
        if dotfiles:
            print(colorize(f"\n=== Dotfiles ({len(dotfiles)}) ===", "blue"))
            for d in dotfiles:
                print(f"  {d.name:<20} [{d.category}] {truncate(d.description, 40)}")

        total = len(ideas) + len(projects) + len(plans) + len(dotfiles)
        print(f"\n{colorize(str(total), 'bold')} total matches for '{query}'")
        return 0


# =============================================================================
# Portfolio Commands
# =============================================================================


class StatsCommand(Command):
    """Counts across every source."""

    def execute(self, args: Namespace, store: IdeasStore) -> int:
        ideas = store.load(Kind.IDEAS)
        projects = store.load(Kind.PROJECTS)
        plans = store.load(Kind.PLANS)
        dotfiles = store.load(Kind.DOTFILES)
        meta = store.analysis_meta()

        print(colorize("=== Portfolio Stats ===", "bold"))
        print()
        active = sum(1 for i in ideas if i.status == "active")
        dormant = sum(1 for i in ideas if i.status == "dormant")
        print(f"{colorize('Ideas', 'yellow')}: {len(ideas)} ({active} active, {dormant} dormant)")

        print(f"{colorize('Projects', 'cyan')}: {len(projects)} ({len(meta.projects)} analyzed)")
        for category, count in Counter(p.category for p in projects).most_common(5):
            print(f"  {category}: {count}")

        print(f"{colorize('Plans', 'magenta')}: {len(plans)}")

        dx_counts = Counter(d.category for d in dotfiles)
        dx_summary = ", ".join(f"{n} {c}" for c, n in sorted(dx_counts.items()))
        print(f"{colorize('Dotfiles', 'blue')}: {len(dotfiles)} ({dx_summary})")

        print()
        total = len(ideas) + len(projects) + len(plans) + len(dotfiles)
        print(f"{colorize('Total items', 'bold')}: {total}")
        return 0


class StatusCommand(Command):
    """Portfolio health: new projects, missing and stale analyses, recent activity."""

    def execute(self, args: Namespace, store: IdeasStore) -> int:
        paths = store.paths
        print(colorize("=== Portfolio Status ===", "bold"))
        print()

        projects = store.load(Kind.PROJECTS)
        untracked = detect_untracked_projects(paths, projects)
        if untracked:
            print(colorize("⚠ New Projects (not in inventory):", "yellow"))
            for p in untracked[:STATUS_TOP_N]:
                print(f"  {cell(p.name, 18, 'cyan')} {p.path} ({p.commits} commits, {p.tech})")
            if len(untracked) > STATUS_TOP_N:
                print(f"  ... {len(untracked) - STATUS_TOP_N} more")
            print(f"  Run {colorize('icli refresh', 'green')} to add them")
            print()

        meta = store.analysis_meta()
        pending = never_analyzed(paths, projects)
        if pending:
            print(colorize(f"⚠ Needs Analysis ({len(pending)} projects):", "yellow"))
            for p in pending[:STATUS_TOP_N]:
                print(f"  {cell(p.name, 18, 'cyan')} {p.commits} commits  [{p.category}]")
            if len(pending) > STATUS_TOP_N:
                print(
                    f"  ... {len(pending) - STATUS_TOP_N} more (run {colorize('icli dirty', 'green')})"
                )
            print()

        stale = stale_projects(paths, projects, meta)
        if stale:
            print(colorize(f"⚠ Stale Analyses ({len(stale)} total):", "yellow"))
            for p, commits in stale[:STALE_TOP_N]:
                print(f"  {cell(p.name, 18, 'cyan')} {colorize(str(commits), 'red')} commits since analysis")
            if len(stale) > STALE_TOP_N:
                print(f"  ... run {colorize('icli dirty', 'green')} for full list")
            print()

        days = recent_days()
        recent = get_recent_activity(projects, days)
        if recent:
            print(colorize(f"Recent Activity (last {days} days):", "blue"))
            for r in recent[:STATUS_TOP_N]:
                print(
                    f"  {cell(r.name, 18, 'cyan')} {r.last_commit_date}  {truncate(r.last_commit_msg, 40)}"
                )
            if len(recent) > STATUS_TOP_N:
                print(f"  ... {len(recent) - STATUS_TOP_N} more active projects")
            print()

        ideas = store.load(Kind.IDEAS)
        print(
            f"{colorize('Quick Stats', 'bold')}: {len(projects)} projects │ "
            f"{len(meta.projects)} analyzed │ {len(ideas)} ideas"
        )
        if not (untracked or pending or stale):
            print()
            print(colorize("✓ Portfolio is healthy!", "green"))
        return 0


# =============================================================================
# Analysis Commands
# =============================================================================


class DirtyCommand(Command):
    """Projects needing (re-)analysis."""

    def execute(self, args: Namespace, store: IdeasStore) -> int:
        paths = store.paths
        projects = store.load(Kind.PROJECTS)
        meta = store.analysis_meta()
        stale = stale_projects(paths, projects, meta)
        show_never = not (args.tracked_only or args.stale_only)
        never = never_analyzed(paths, projects) if show_never else []

        print(colorize("=== Analysis Status ===", "bold"))
        print()

        if stale:
            print(colorize(f"Stale ({len(stale)} projects):", "yellow"))
            for p, commits in stale:
                print(
                    f"  {cell(p.name, 22, 'cyan')} {colorize(str(commits), 'red')} commits since  [{p.category}]"
                )
            print()

        if never:
            print(colorize(f"Never Analyzed ({len(never)} projects):", "cyan"))
            for p in never[:NEVER_TOP_N]:
                print(f"  {p.name:<22} {p.commits} commits  [{p.category}]")
            if len(never) > NEVER_TOP_N:
                print(f"  ... {len(never) - NEVER_TOP_N} more")
            print()

        if args.stale_only:
            return 0

        analyzed = len(meta.projects)
        up_to_date = max(analyzed - len(stale), 0)
        summary = (
            f"{colorize('Summary', 'bold')}: {analyzed} analyzed "
            f"({colorize(str(up_to_date), 'green')} up to date, "
            f"{colorize(str(len(stale)), 'yellow')} stale)"
        )
        if show_never:
            summary += f", {colorize(str(len(never)), 'cyan')} never analyzed"
        print(summary)

        if not stale and not never:
            print()
            print(colorize("✓ All projects are analyzed and up to date!", "green"))
        return 0


class AnalyzeCommand(Command):
    """Run the analysis script for one project and record the commit."""

    def execute(self, args: Namespace, store: IdeasStore) -> int:
        paths = store.paths
        project = find_project(store.load(Kind.PROJECTS), args.project)
        meta = store.analysis_meta()

        dirty = check_project_dirty(project, meta)
        needs_analysis = args.force or dirty.analyzed_at is None or bool(dirty.commits_since)
        if not needs_analysis:
            print(
                f"Project '{project.name}' is up to date "
                f"(analyzed at {dirty.analyzed_at or '-'}, commit {dirty.analyzed_commit or '-'})"
            )
            print("Use --force to re-analyze anyway.")
            return 0

        if args.deep:
            mode = "deep (assistant-powered)"
        elif args.summary_only:
            mode = "summary only"
        else:
            mode = "scaffold"

        print(colorize(f"Analyzing {project.name}...", "cyan"))
        print(f"  Path: {project.path}")
        print(f"  Tech: {project.tech}")
        print(f"  Mode: {mode}")
        print()

        if not analyze_project(paths, project.path, deep=args.deep, summary_only=args.summary_only):
            print(colorize("Analysis failed", "red"))
            return 1

        record_analysis(paths, project, meta)
        print(colorize("Analysis complete!", "green"))
        print(f"  Output: {analysis_file_path(paths, project.name)}")
        return 0


class SummaryCommand(Command):
    """Print the summary block of a project's analysis."""

    def execute(self, args: Namespace, store: IdeasStore) -> int:
        summary = load_analysis_summary(store.paths, args.project)
        if summary is None:
            raise AnalysisNotFoundError(args.project)
        print_markdown(summary)
        return 0


class ContextCommand(Command):
    """Print a project's full analysis document."""

    def execute(self, args: Namespace, store: IdeasStore) -> int:
        content = load_analysis_content(store.paths, args.project)
        if content is None:
            raise AnalysisNotFoundError(args.project, analysis_file_path(store.paths, args.project))
        print_markdown(content)
        return 0


# =============================================================================
# Maintenance Commands
# =============================================================================


class RefreshCommand(Command):
    """Rescan the developer dir and rebuild the project inventory."""

    def execute(self, args: Namespace, store: IdeasStore) -> int:
        print("Refreshing project inventory...")
        if scan_projects(store.paths):
            print(colorize("Done!", "green"))
            return 0
        print(colorize("Failed to refresh inventory", "red"))
        return 1


class PruneCommand(Command):
    """Remove analysis files whose project left the inventory."""

    def execute(self, args: Namespace, store: IdeasStore) -> int:
        orphans = find_orphaned_analyses(store.paths, store.load(Kind.PROJECTS))
        if not orphans:
            print(colorize("✓ No orphaned analysis files found", "green"))
            return 0

        print(colorize(f"Found {len(orphans)} orphaned analysis files:", "yellow"))
        print()
        for name, path in orphans:
            print(f"  {colorize(name, 'red')} → {path}")
        print()

        if not args.force:
            print(f"Run {colorize('icli prune --force', 'cyan')} to delete these files")
            return 0

        prune_orphans(store.paths, orphans)
        for name, _ in orphans:
            print(f"  {colorize('Deleted:', 'red')} {name}")
        print()
        print(f"{colorize('Done', 'green')}: Removed {len(orphans)} orphaned files")
        return 0


class SnapshotCommand(Command):
    """Bundle analyses, inventory and tracker into a zip of markdown files."""

    def execute(self, args: Namespace, store: IdeasStore) -> int:
        output = Path(args.output).expanduser() if args.output else default_snapshot_path()
        print(colorize("Creating snapshot...", "cyan"))
        result = create_snapshot(store.paths, output)
        print(f"  {colorize(str(result.analysis_count), 'bold')} analysis files")
        print(f"  {colorize(str(int(result.has_inventory)), 'bold')} project inventory (as markdown)")
        print(f"  {colorize(str(int(result.has_tracker)), 'bold')} tracker (as markdown)")
        print(f"  {colorize(str(result.doc_count), 'bold')} repo docs")
        print()
        print(f"{colorize('Snapshot', 'green')}: {result.path} ({format_size(result.size)} compressed)")
        return 0


class SummarizeCommand(Command):
    """Generate one-line summaries via the summary script."""

    ALL_MISSING = "all-missing"

    def execute(self, args: Namespace, store: IdeasStore) -> int:
        projects = store.load(Kind.PROJECTS)
        if args.project != self.ALL_MISSING:
            project = find_project(projects, args.project)
            if not generate_summary(store.paths, project.name):
                print(colorize("Failed to generate summary", "red"), file=sys.stderr)
                return 1
            print()
            print(colorize("Done! Run 'icli refresh' to update the inventory.", "green"))
            return 0

        missing = [p for p in projects if not p.summary]
        if not missing:
            print(colorize("All projects have summaries!", "green"))
            return 0

        print(colorize(f"Generating summaries for {len(missing)} projects...", "cyan"))
        failures = 0
        for p in missing:
            print()
            print(colorize(f"=== {p.name} ===", "yellow"))
            if not generate_summary(store.paths, p.name):
                failures += 1
                print(colorize(f"Failed to generate summary for {p.name}", "red"), file=sys.stderr)

        print()
        print(colorize("Done! Run 'icli refresh' to update the inventory.", "green"))
        return 1 if failures == len(missing) else 0


# =============================================================================
# Command Registry
# =============================================================================

COMMAND_REGISTRY: Dict[str, Type[Command]] = {
    "ideas": IdeasCommand,
    "projects": ProjectsCommand,
    "plans": PlansCommand,
    "dotfiles": DotfilesCommand,
    "search": SearchCommand,
    "stats": StatsCommand,
    "status": StatusCommand,
    "dirty": DirtyCommand,
    "analyze": AnalyzeCommand,
    "summary": SummaryCommand,
    "context": ContextCommand,
    "refresh": RefreshCommand,
    "prune": PruneCommand,
    "snapshot": SnapshotCommand,
    "summarize": SummarizeCommand,
}


# =============================================================================
# Dispatch Function
# =============================================================================


def dispatch_command(args: Namespace, store: IdeasStore) -> int:
    """Dispatch to appropriate command handler.

    Args:
        args: Parsed arguments with 'command' attribute
        store: IdeasStore instance

    Returns:
        Exit code (0 for success, 1 for unknown command)
    """
    command_name = args.command
    if command_name not in COMMAND_REGISTRY:
        print(f"Unknown command: {command_name}", file=sys.stderr)
        return 1

    command_class = COMMAND_REGISTRY[command_name]
    command = command_class()
    return command.execute(args, store)
