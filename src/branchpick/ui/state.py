"""Branch list cursor and selection state."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from branchpick.git.models import BranchRecord


def initial_cursor(branches: Sequence[BranchRecord]) -> int | None:
    for index, branch in enumerate(branches):
        if branch.is_current:
            return index
    return 0 if branches else None


@dataclass
class BranchListModel:
    """Cursor arithmetic over an immutable branch listing.

    Single steps wrap around, page steps saturate at either end. Once
    ``done`` is set the model is terminated and navigation is rejected.
    """

    branches: tuple[BranchRecord, ...]
    page_size: int = 1
    cursor: int | None = None
    done: bool = False
    confirmed_branch: str | None = None

    def __post_init__(self) -> None:
        self.branches = tuple(self.branches)
        if self.page_size < 1:
            raise ValueError(f"page_size must be positive: {self.page_size}")
        if not self.branches:
            self.cursor = None

    @classmethod
    def from_listing(cls, branches: Sequence[BranchRecord], *, page_size: int = 1) -> BranchListModel:
        return cls(branches=tuple(branches), page_size=page_size, cursor=initial_cursor(branches))

    @property
    def is_empty(self) -> bool:
        return not self.branches

    @property
    def selected(self) -> BranchRecord | None:
        if self.cursor is None:
            return None
        return self.branches[self.cursor]

    def _ensure_active(self) -> None:
        if self.done:
            raise RuntimeError("Branch list is terminated; no further transitions are allowed.")

    def move_next(self) -> None:
        self._ensure_active()
        if self.is_empty:
            return
        if self.cursor is None or self.cursor >= len(self.branches) - 1:
            self.cursor = 0
        else:
            self.cursor += 1

    def move_previous(self) -> None:
        self._ensure_active()
        if self.is_empty:
            return
        if self.cursor is None:
            self.cursor = 0
        elif self.cursor == 0:
            self.cursor = len(self.branches) - 1
        else:
            self.cursor -= 1

    def page_forward(self, page_size: int | None = None) -> None:
        self._ensure_active()
        if self.is_empty:
            return
        step = self.page_size if page_size is None else page_size
        if self.cursor is None:
            self.cursor = 0
            return
        self.cursor = min(self.cursor + step, len(self.branches) - 1)

    def page_backward(self, page_size: int | None = None) -> None:
        self._ensure_active()
        if self.is_empty:
            return
        step = self.page_size if page_size is None else page_size
        if self.cursor is None:
            self.cursor = 0
            return
        self.cursor = max(self.cursor - step, 0)

    def confirm(self) -> None:
        self._ensure_active()
        selected = self.selected
        if selected is not None:
            self.confirmed_branch = selected.name
        self.quit()

    def quit(self) -> None:
        self.done = True
