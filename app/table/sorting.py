"""Single-key sort state for data tables.

Only one column can be sorted at a time.  Asking to sort by a second column
while one is already active does nothing; the active sort has to be removed
first.  Every transition returns a new state and leaves the old one intact.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class Sort:
    id: str
    desc: bool = False


@dataclass(frozen=True)
class SortState:
    entries: tuple[Sort, ...] = ()

    @property
    def active(self) -> Sort | None:
        return self.entries[0] if self.entries else None

    @property
    def sorted_by(self) -> str | None:
        return self.active.id if self.active else None

    def find(self, column: str) -> Sort | None:
        return next((s for s in self.entries if s.id == column), None)

    def add(self, column: str) -> SortState:
        if self.entries:
            return self
        return SortState((Sort(column, desc=False),))

    def remove(self) -> SortState:
        return SortState()

    def toggle_direction(self, column: str) -> SortState:
        # An inactive column becomes active with the direction flipped from
        # its default (ascending), i.e. descending.
        current = self.find(column)
        desc = not current.desc if current else True
        return SortState((Sort(column, desc=desc),))

    def to_list(self) -> list[dict[str, Any]]:
        return [{"id": s.id, "desc": s.desc} for s in self.entries]

    @classmethod
    def from_list(cls, items: list[dict[str, Any]] | None) -> SortState:
        # Anything past the first entry would be a second sort key
        if not items:
            return cls()
        first = items[0]
        return cls((Sort(str(first["id"]), bool(first.get("desc", False))),))
