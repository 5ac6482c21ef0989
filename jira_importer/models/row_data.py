from __future__ import annotations

from dataclasses import dataclass
from typing import Any

"""Row-level models.

RowData is a raw spreadsheet row as returned by the reader; TaskRow is the
same row after the validator resolved the six logical columns.
"""

__all__ = [
    "RowData",
    "RowIssue",
    "TaskRow",
]


@dataclass(frozen=True)
class RowData:
    """A single spreadsheet row (header = row 1, first data row = row 2)."""
    row_number: int  # 1-based spreadsheet row number
    values: dict[str, Any]  # header -> cell value, empty cells normalized to ""


@dataclass(frozen=True)
class RowIssue:
    """Warning or error attached to a spreadsheet row."""
    row_number: int
    message: str

    def __str__(self) -> str:
        return f"row {self.row_number}: {self.message}"


@dataclass(frozen=True)
class TaskRow:
    """A row with a non-empty task name, logical columns resolved."""
    row_number: int
    task: str
    description: str
    type: str
    sub_task: str
    sub_task_description: str
    estimate: float | int = 0  # 0 when the cell is empty
