#!/usr/bin/env python3
# SPDX-License-Identifier: MIT
"""
Rich markup helpers for the TUI.

Color names here are Textual/Rich markup names, not ANSI codes; the CLI
keeps its own ANSI table in ideas.formatting.
"""

from dataclasses import dataclass
from typing import Optional

from rich.markup import escape

from ideas.models import Idea, Project, ProjectAnalysisMeta
from ideas.util import clean_desc

# Idea status -> markup color
STATUS_COLORS = {
    "active": "green",
    "dormant": "yellow",
    "unknown": "dim",
}

# Project category -> markup color
CATEGORY_COLORS = {
    "roguelike": "red",
    "writing": "magenta",
    "knowledge": "blue",
    "simulation": "green",
    "tui": "cyan",
    "cli": "cyan",
}

ANALYZED_MARK = "[green]●[/green]"
PENDING_MARK = "[dim]○[/dim]"


def markup(text: str, color: Optional[str]) -> str:
    text = escape(text)
    if not color:
        return text
    return f"[{color}]{text}[/{color}]"


def status_markup(status: str) -> str:
    return markup(status, STATUS_COLORS.get(status, "magenta"))


def category_markup(category: str) -> str:
    return markup(category, CATEGORY_COLORS.get(category))


def analyzed_mark(has_analysis: bool) -> str:
    return ANALYZED_MARK if has_analysis else PENDING_MARK


@dataclass
class PortfolioStats:
    ideas_total: int = 0
    ideas_active: int = 0
    ideas_dormant: int = 0
    open_questions: int = 0
    projects_total: int = 0
    projects_analyzed: int = 0
    status_new: int = 0
    status_stale: int = 0
    status_recent: int = 0

    @property
    def projects_pending(self) -> int:
        return self.projects_total - self.projects_analyzed


def stats_line(stats: PortfolioStats, recent_days: int = 7) -> str:
    """One-line summary shown above the tabs."""
    return (
        f"[bold]Ideas[/bold] {stats.ideas_total} "
        f"([green]{stats.ideas_active} active[/green], "
        f"[yellow]{stats.ideas_dormant} dormant[/yellow], "
        f"{stats.open_questions} open questions)  │  "
        f"[bold]Projects[/bold] {stats.projects_total} "
        f"([green]{stats.projects_analyzed} analyzed[/green], "
        f"{stats.projects_pending} pending)  │  "
        f"[bold]Status[/bold] {stats.status_new} new, "
        f"[red]{stats.status_stale} stale[/red], "
        f"{stats.status_recent} recent {recent_days}d"
    )


def idea_detail_markup(idea: Idea) -> str:
    lines = [
        f"[bold]{escape(idea.folder)}[/bold]  {status_markup(idea.status)}",
        "",
        escape(idea.description) or "[dim](no description)[/dim]",
        "",
        f"[bold]Tags:[/bold] {escape(', '.join(idea.tags)) or '-'}",
        f"[bold]Created:[/bold] {escape(idea.created) or '-'}   "
        f"[bold]Modified:[/bold] {escape(idea.modified) or '-'}   "
        f"[bold]Sessions:[/bold] {idea.sessions}",
    ]
    if idea.open_questions:
        lines.append("")
        lines.append(f"[bold]Open questions ({len(idea.open_questions)}):[/bold]")
        lines.extend(f"  • {escape(q)}" for q in idea.open_questions)
    return "\n".join(lines)


def project_info_markup(
    project: Project,
    has_analysis: bool,
    analyzed: Optional[ProjectAnalysisMeta],
) -> str:
    lines = [
        f"[bold]{escape(project.name)}[/bold]  {category_markup(project.category)}",
        "",
        escape(clean_desc(project.display_description)) or "[dim](no description)[/dim]",
        "",
        f"[bold]Path:[/bold] {escape(project.path)}",
        f"[bold]Tech:[/bold] {escape(project.tech) or '-'}",
        f"[bold]Source:[/bold] {escape(project.source) or '-'}",
        f"[bold]Last commit:[/bold] {escape(project.last_commit) or '-'}",
        f"[bold]Commits:[/bold] {project.commits}",
        "",
        f"[bold]Analysis:[/bold] {analyzed_mark(has_analysis)} "
        + ("present" if has_analysis else "none"),
    ]
    if analyzed is not None:
        lines.append(
            f"[bold]Analyzed at:[/bold] {escape(analyzed.analyzed_at)} "
            f"(commit {escape(analyzed.analyzed_commit or '-')})"
        )
    return "\n".join(lines)
