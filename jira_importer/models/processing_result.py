from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

"""Result models for one orchestration run."""


@dataclass(frozen=True)
class GroupStat:
    """Per-group outcome (internal helper for ImportResult)."""
    name: str
    status: str  # success/failed
    parent_key: str | None  # None when the parent could not be created
    children_created: int = 0
    children_failed: int = 0


@dataclass(frozen=True)
class ImportResult:
    """Aggregated counts for the SUMMARY line."""
    success_groups: int
    failed_groups: int
    children_created: int
    children_failed: int
    start_time: datetime
    end_time: datetime
    elapsed_seconds: float
    group_stats: list[GroupStat] | None = None

    @property
    def total_groups(self) -> int:
        return self.success_groups + self.failed_groups

    @property
    def children_attempted(self) -> int:
        return self.children_created + self.children_failed
