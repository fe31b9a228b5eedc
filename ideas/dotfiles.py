# SPDX-License-Identifier: MIT
"""Dotfiles/DX tooling inventory (``<dotfiles>/_data/dx-inventory.json``)."""

from typing import List

from ideas.errors import DataLoadError
from ideas.models import DxItem
from ideas.paths import IdeasPaths
from ideas.projects import read_json, write_json


def load_dotfiles(paths: IdeasPaths) -> List[DxItem]:
    path = paths.dx_inventory_path
    data = read_json(path)
    if data is None:
        return []
    raw = data.get("items")
    if not isinstance(raw, list):
        raise DataLoadError(path, "'items' must be a list")
    try:
        return [DxItem.from_dict(entry) for entry in raw]
    except (AttributeError, ValueError) as e:
        raise DataLoadError(path, str(e)) from e


def save_dotfiles(paths: IdeasPaths, items: List[DxItem]) -> None:
    path = paths.dx_inventory_path
    data = read_json(path) or {}
    data["items"] = [item.to_dict() for item in items]
    write_json(path, data)
