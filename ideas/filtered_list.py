# SPDX-License-Identifier: MIT
"""
Generic selection/filter/sort controller used by every list tab.

The controller owns its items and exposes a filtered view as a list of
positions into them. Invariant: ``selected`` is None exactly when the view
is empty, otherwise it is a valid position in ``filtered_indices``.
"""

from typing import Any, Callable, Generic, Iterable, List, Optional, TypeVar

T = TypeVar("T")


class FilteredList(Generic[T]):
    def __init__(self, items: Optional[Iterable[T]] = None):
        self.items: List[T] = []
        self.filtered_indices: List[int] = []
        self.selected: Optional[int] = None
        self.set_items(items or [])

    def __len__(self) -> int:
        return len(self.items)

    @property
    def filtered_len(self) -> int:
        return len(self.filtered_indices)

    def set_items(self, items: Iterable[T]) -> None:
        """Replace the collection; the view shows everything until filtered."""
        self.items = list(items)
        self.filtered_indices = list(range(len(self.items)))
        self._reset_selection()

    def apply_filter(self, predicate: Callable[[T], bool]) -> None:
        """Recompute the view in original order and select its first row."""
        self.filtered_indices = [i for i, item in enumerate(self.items) if predicate(item)]
        self._reset_selection()

    def sort(self, key: Callable[[T], Any], reverse: bool = False) -> None:
        """Stable in-place sort of the items.

        Positions in the view are stale afterwards; the caller re-applies its
        current filter.
        """
        self.items.sort(key=key, reverse=reverse)

    def next(self) -> None:
        if not self.filtered_indices:
            return
        if self.selected is None:
            self.selected = 0
        else:
            self.selected = (self.selected + 1) % len(self.filtered_indices)

    def previous(self) -> None:
        if not self.filtered_indices:
            return
        if self.selected is None or self.selected == 0:
            self.selected = len(self.filtered_indices) - 1
        else:
            self.selected -= 1

    def select(self, position: Optional[int]) -> None:
        """Select a row of the view; out-of-range positions are ignored."""
        if position is None or not self.filtered_indices:
            return
        if 0 <= position < len(self.filtered_indices):
            self.selected = position

    def position_of(self, index: int) -> Optional[int]:
        """Row in the view showing ``items[index]``, if visible."""
        try:
            return self.filtered_indices.index(index)
        except ValueError:
            return None

    def select_item(self, index: int) -> bool:
        position = self.position_of(index)
        if position is None:
            return False
        self.selected = position
        return True

    def select_where(self, predicate: Callable[[T], bool]) -> bool:
        """Select the first visible row whose item satisfies ``predicate``."""
        for position, index in enumerate(self.filtered_indices):
            if predicate(self.items[index]):
                self.selected = position
                return True
        return False

    def selected_item(self) -> Optional[T]:
        if self.selected is None or self.selected >= len(self.filtered_indices):
            return None
        return self.items[self.filtered_indices[self.selected]]

    def filtered_items(self) -> List[T]:
        return [self.items[i] for i in self.filtered_indices]

    def _reset_selection(self) -> None:
        self.selected = 0 if self.filtered_indices else None
