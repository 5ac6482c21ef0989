from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

"""Parent/child task models produced by the hierarchy builder."""

__all__ = [
    "ChildTask",
    "ParentTask",
    "TaskHierarchy",
]


@dataclass(frozen=True)
class ChildTask:
    name: str
    description: str = ""
    estimate: float | int = 0


@dataclass(frozen=True)
class ParentTask:
    """One parent issue plus its ordered sub-tasks."""
    name: str
    description: str
    children: tuple[ChildTask, ...] = ()

    @property
    def total_estimate(self) -> float | int:
        """Sum of child estimates; non-numeric values count as zero."""
        total: float | int = 0
        for child in self.children:
            if isinstance(child.estimate, (int, float)) and not isinstance(child.estimate, bool):
                total += child.estimate
        return total


class TaskHierarchy:
    """Ordered mapping of parent name -> ParentTask.

    Iteration follows first-seen order of the parent names. The list holds
    the order; the dict is only a lookup index into it.
    """

    def __init__(self, groups: list[ParentTask] | None = None) -> None:
        self._groups: list[ParentTask] = []
        self._index: dict[str, int] = {}
        for group in groups or []:
            if group.name in self._index:
                raise ValueError(f"duplicate parent task: {group.name!r}")
            self._index[group.name] = len(self._groups)
            self._groups.append(group)

    def __iter__(self) -> Iterator[ParentTask]:
        return iter(tuple(self._groups))

    def __len__(self) -> int:
        return len(self._groups)

    def __getitem__(self, name: str) -> ParentTask:
        return self._groups[self._index[name]]

    def names(self) -> list[str]:
        return [g.name for g in self._groups]

    @property
    def child_count(self) -> int:
        return sum(len(g.children) for g in self._groups)
