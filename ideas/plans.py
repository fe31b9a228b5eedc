# SPDX-License-Identifier: MIT
"""Assistant plan documents (``*.md`` in the plans directory)."""

from typing import List

from ideas import markdown
from ideas.errors import DataLoadError
from ideas.models import NO_DATE, NO_TITLE, Plan
from ideas.paths import IdeasPaths
from ideas.util import chrono_lite


def load_plans(paths: IdeasPaths) -> List[Plan]:
    """Plans sorted newest first; a missing directory yields no plans.

    Raises:
        DataLoadError: if the directory exists but cannot be listed.
    """
    plans_dir = paths.claude_plans_dir
    if not plans_dir.is_dir():
        return []

    try:
        entries = sorted(plans_dir.iterdir())
    except OSError as e:
        raise DataLoadError(plans_dir, str(e)) from e

    plans = []
    for path in entries:
        if path.suffix != ".md" or not path.is_file():
            continue
        try:
            modified = chrono_lite(path.stat().st_mtime)
        except OSError:
            modified = NO_DATE
        plans.append(
            Plan(
                name=path.stem,
                title=markdown.get_title(path) or NO_TITLE,
                modified=modified,
                path=path,
            )
        )

    plans.sort(key=lambda p: p.modified, reverse=True)
    return plans
