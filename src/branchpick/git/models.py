"""Local branch domain models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class BranchRecord:
    name: str
    is_current: bool = False
    has_upstream: bool = False
    tracking_info: str = ""
    last_commit_display: str = ""
    last_commit_epoch: int = 0
    pr_number: int | None = None

    @property
    def is_stale(self) -> bool:
        """No upstream, or the upstream ref has been deleted."""
        return not self.has_upstream or "gone" in self.tracking_info
