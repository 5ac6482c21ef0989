from __future__ import annotations

import math
import numbers
from dataclasses import dataclass, field
from typing import Any

from jira_importer.excel.reader import SheetData
from jira_importer.models.config_models import ColumnMapping
from jira_importer.models.row_data import RowIssue, TaskRow

"""Structural & data validation of a task sheet.

Pass 1 checks the header row against the configured column names (trimmed,
case-insensitive). Pass 2 checks every row that carries a task name; rows
without one are skipped silently. Any row error aborts the whole import,
warnings do not.
"""

MAX_REPORTED_ISSUES = 20


class SheetValidationError(Exception):
    """Base class for validation failures."""


class EmptySheetError(SheetValidationError):
    pass


class SchemaInvalidError(SheetValidationError):
    def __init__(self, missing: list[str], present: list[str]) -> None:
        self.missing = list(missing)
        self.present = list(present)
        super().__init__(
            f"missing required columns: {', '.join(self.missing)}; "
            f"present columns: {', '.join(self.present) or '(none)'}"
        )


class NoValidRowsError(SheetValidationError):
    pass


class DataInvalidError(SheetValidationError):
    def __init__(self, errors: list[RowIssue]) -> None:
        self.errors = list(errors)
        lines = format_issue_lines(self.errors)
        super().__init__(f"{len(self.errors)} invalid row(s): " + "; ".join(lines))


@dataclass
class ValidationResult:
    rows: list[TaskRow]
    warnings: list[RowIssue] = field(default_factory=list)


def format_issue_lines(issues: list[RowIssue], limit: int = MAX_REPORTED_ISSUES) -> list[str]:
    """First ``limit`` issues as text plus a remainder line."""
    lines = [str(i) for i in issues[:limit]]
    if len(issues) > limit:
        lines.append(f"... and {len(issues) - limit} more")
    return lines


def _normalize_header(name: str) -> str:
    return str(name).strip().casefold()


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def parse_estimate(value: Any) -> float | int | None:
    """Parse an estimate cell.

    Returns 0 for an empty cell, the number for a finite value >= 0 and
    None when the value is invalid.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, numbers.Real):
        number = float(value)
    else:
        text = _text(value)
        if text == "":
            return 0
        try:
            number = float(text)
        except ValueError:
            return None
    if not math.isfinite(number) or number < 0:
        return None
    return int(number) if number.is_integer() else number


def resolve_columns(sheet: SheetData, columns: ColumnMapping) -> dict[str, str]:
    """Map each logical column to the actual header text in the sheet.

    Raises:
        EmptySheetError: header row missing or blank
        SchemaInvalidError: one or more configured columns absent
    """
    present = [c for c in sheet.columns if c.strip() != ""]
    if not present:
        raise EmptySheetError(f"sheet '{sheet.sheet_name}' has no header row")

    by_normalized: dict[str, str] = {}
    for header in present:
        by_normalized.setdefault(_normalize_header(header), header)

    resolved: dict[str, str] = {}
    missing: list[str] = []
    for logical, configured in columns.as_dict().items():
        actual = by_normalized.get(_normalize_header(configured))
        if actual is None:
            missing.append(configured)
        else:
            resolved[logical] = actual
    if missing:
        raise SchemaInvalidError(missing, present)
    return resolved


def validate_sheet(sheet: SheetData, columns: ColumnMapping) -> ValidationResult:
    """Run header and row checks over a sheet.

    Returns:
        every row with a non-empty task name, plus collected warnings

    Raises:
        EmptySheetError, SchemaInvalidError: header problems
        NoValidRowsError: no row has a task name
        DataInvalidError: one or more rows hold an invalid estimate
    """
    cols = resolve_columns(sheet, columns)

    rows: list[TaskRow] = []
    warnings: list[RowIssue] = []
    errors: list[RowIssue] = []

    for row in sheet.rows:
        values = row.values
        task = _text(values.get(cols["task"]))
        if not task:
            continue

        sub_task = _text(values.get(cols["sub_task"]))
        sub_desc = _text(values.get(cols["sub_task_description"]))
        if sub_task and not sub_desc:
            warnings.append(RowIssue(row.row_number, f"sub-task '{sub_task}' has no description"))

        raw_estimate = values.get(cols["sub_task_estimate"])
        estimate = parse_estimate(raw_estimate)
        if estimate is None:
            errors.append(
                RowIssue(
                    row.row_number,
                    f"invalid {columns.sub_task_estimate} value {_text(raw_estimate)!r} "
                    "(expected a number >= 0)",
                )
            )
            estimate = 0

        rows.append(
            TaskRow(
                row_number=row.row_number,
                task=task,
                description=_text(values.get(cols["description"])),
                type=_text(values.get(cols["type"])),
                sub_task=sub_task,
                sub_task_description=sub_desc,
                estimate=estimate,
            )
        )

    if not rows:
        raise NoValidRowsError(
            f"sheet '{sheet.sheet_name}' has no rows with a {columns.task} value"
        )
    if errors:
        raise DataInvalidError(errors)
    return ValidationResult(rows=rows, warnings=warnings)
