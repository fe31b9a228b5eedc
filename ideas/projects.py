# SPDX-License-Identifier: MIT
"""Project inventory (``_data/project-inventory.json``)."""

import json
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, List, Optional

from ideas.errors import DataLoadError, ProjectNotFoundError
from ideas.models import Project
from ideas.paths import IdeasPaths


def read_json(path: Path) -> Optional[Dict[str, Any]]:
    """Parse a JSON object file. Missing file -> None.

    Raises:
        DataLoadError: if the file exists but is unreadable or not an object.
    """
    if not path.exists():
        return None
    try:
        with open(path) as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
        raise DataLoadError(path, str(e)) from e
    if not isinstance(data, dict):
        raise DataLoadError(path, "expected a JSON object")
    return data


def write_json(path: Path, data: Dict[str, Any]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w") as f:
        json.dump(data, f, indent=2)
        f.write("\n")


def load_projects(paths: IdeasPaths) -> List[Project]:
    """Load the inventory; an absent file is an empty inventory."""
    path = paths.project_inventory_path
    data = read_json(path)
    if data is None:
        return []
    raw = data.get("projects")
    if not isinstance(raw, list):
        raise DataLoadError(path, "'projects' must be a list")
    try:
        return [Project.from_dict(entry) for entry in raw]
    except (AttributeError, ValueError) as e:
        raise DataLoadError(path, str(e)) from e


def save_projects(paths: IdeasPaths, projects: List[Project]) -> None:
    path = paths.project_inventory_path
    data = read_json(path) or {}
    data["projects"] = [p.to_dict() for p in projects]
    write_json(path, data)


def find_project(projects: List[Project], name: str) -> Project:
    for project in projects:
        if project.name == name:
            return project
    raise ProjectNotFoundError(name)


def group_by_category(projects: List[Project]) -> Dict[str, List[Project]]:
    """Projects keyed by category, categories in sorted order."""
    groups: Dict[str, List[Project]] = defaultdict(list)
    for project in projects:
        groups[project.category].append(project)
    return {cat: groups[cat] for cat in sorted(groups)}


def inventory_to_markdown(projects: List[Project]) -> str:
    lines = ["# Project Inventory", "", f"Total projects: {len(projects)}", ""]
    for category, members in group_by_category(projects).items():
        lines.append(f"## {category} ({len(members)} projects)")
        lines.append("")
        for p in members:
            lines.extend(
                [
                    f"### {p.name}",
                    "",
                    f"- **Path**: {p.path}",
                    f"- **Tech**: {p.tech}",
                    f"- **Last commit**: {p.last_commit}",
                    f"- **Description**: {p.display_description}",
                    "",
                ]
            )
    return "\n".join(lines) + "\n"
