# SPDX-License-Identifier: MIT
"""
Case-insensitive substring matching shared by the CLI and the TUI.

All ``*_matches_query`` helpers expect an already normalized query and treat
the empty query as matching everything.
"""

from typing import Callable, Iterable, List, Sequence

from ideas.models import DxItem, Idea, Kind, Plan, Project, SearchResult


def normalize_query(query: str) -> str:
    return query.strip().lower()


def _any_contains(query: str, *fields: str) -> bool:
    return any(query in field.lower() for field in fields)


def idea_matches_query(idea: Idea, query: str) -> bool:
    if not query:
        return True
    return _any_contains(query, idea.folder, idea.description, *idea.tags)


def project_matches_query(project: Project, query: str) -> bool:
    if not query:
        return True
    return _any_contains(
        query,
        project.name,
        project.summary,
        project.description,
        project.category,
        project.tech,
    )


def plan_matches_query(plan: Plan, query: str) -> bool:
    if not query:
        return True
    return _any_contains(query, plan.name, plan.title)


def dxitem_matches_query(item: DxItem, query: str) -> bool:
    if not query:
        return True
    return _any_contains(query, item.name, item.description, item.category)


MATCHERS = {
    Kind.IDEAS: idea_matches_query,
    Kind.PROJECTS: project_matches_query,
    Kind.PLANS: plan_matches_query,
    Kind.DOTFILES: dxitem_matches_query,
}


def filter_records(kind: Kind, records: Iterable, query: str) -> List:
    """Records of ``kind`` matching the raw (unnormalized) query."""
    q = normalize_query(query)
    matcher: Callable = MATCHERS[kind]
    return [r for r in records if matcher(r, q)]


def global_search(
    ideas: Sequence[Idea],
    projects: Sequence[Project],
    plans: Sequence[Plan],
    dotfiles: Sequence[DxItem],
    query: str,
) -> List[SearchResult]:
    """Matches across every collection, grouped by kind in tab order.

    An empty query returns nothing rather than every record.
    """
    q = normalize_query(query)
    if not q:
        return []

    results: List[SearchResult] = []
    for i, idea in enumerate(ideas):
        if idea_matches_query(idea, q):
            results.append(SearchResult(Kind.IDEAS, idea.folder, idea.description, i))
    for i, project in enumerate(projects):
        if project_matches_query(project, q):
            results.append(
                SearchResult(Kind.PROJECTS, project.name, project.display_description, i)
            )
    for i, plan in enumerate(plans):
        if plan_matches_query(plan, q):
            results.append(SearchResult(Kind.PLANS, plan.name, plan.title, i))
    for i, item in enumerate(dotfiles):
        if dxitem_matches_query(item, q):
            results.append(SearchResult(Kind.DOTFILES, item.name, item.description, i))
    return results
