from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

from jira_importer.models.row_data import RowData

"""Excel reader.

Row 1 of the sheet is the header row, data starts at row 2. Cells are read
as raw objects (no dtype inference, no "NA" -> NaN conversion) and empty
cells are normalized to "".
"""

SPREADSHEET_SUFFIXES = (".xlsx", ".xls", ".xlsm")


class ExcelReadError(Exception):
    """Base class for workbook/sheet read failures."""


class WorkbookNotFoundError(ExcelReadError):
    pass


class UnreadableWorkbookError(ExcelReadError):
    pass


class SheetNotFoundError(ExcelReadError):
    def __init__(self, sheet_name: str, available: list[str]) -> None:
        self.sheet_name = sheet_name
        self.available = list(available)
        super().__init__(
            f"sheet '{sheet_name}' not found. available sheets: {', '.join(self.available) or '(none)'}"
        )


@dataclass
class SheetData:
    sheet_name: str
    columns: list[str]  # header cells, stripped, "" for empty cells
    rows: list[RowData]


def _open_workbook(path: Path) -> pd.ExcelFile:
    if not path.is_file():
        raise WorkbookNotFoundError(f"file not found: {path}")
    try:
        return pd.ExcelFile(path)
    except Exception as e:
        raise UnreadableWorkbookError(f"cannot read '{path.name}' as a spreadsheet: {e}") from e


def list_sheet_names(path: Path) -> list[str]:
    """Sheet names of a workbook, in workbook order."""
    with _open_workbook(path) as xls:
        return [str(name) for name in xls.sheet_names]


def _normalize_cell(value: Any) -> Any:
    if value is None:
        return ""
    try:
        if pd.isna(value):
            return ""
    except (TypeError, ValueError):
        pass
    return value


def read_sheet(path: Path, sheet_name: str) -> SheetData:
    """Read one sheet as ordered row records.

    Raises:
        WorkbookNotFoundError: path does not exist
        UnreadableWorkbookError: not parseable as a spreadsheet
        SheetNotFoundError: sheet_name not among the workbook's sheets
    """
    with _open_workbook(path) as xls:
        available = [str(name) for name in xls.sheet_names]
        if sheet_name not in available:
            raise SheetNotFoundError(sheet_name, available)
        try:
            df = xls.parse(sheet_name, header=None, dtype=object, keep_default_na=False, na_values=[])
        except Exception as e:
            raise UnreadableWorkbookError(f"cannot read sheet '{sheet_name}' of '{path.name}': {e}") from e
    return normalize_sheet(df, sheet_name)


def normalize_sheet(df: pd.DataFrame, sheet_name: str) -> SheetData:
    """Turn a headerless DataFrame into SheetData.

    An empty DataFrame yields no columns; the validator reports that.
    Rows whose cells are all empty are dropped.
    """
    if df.shape[0] == 0:
        return SheetData(sheet_name=sheet_name, columns=[], rows=[])

    columns = [str(_normalize_cell(c)).strip() for c in df.iloc[0].tolist()]
    rows: list[RowData] = []
    for position, raw in enumerate(df.iloc[1:].itertuples(index=False, name=None)):
        values = [_normalize_cell(v) for v in raw]
        if all(isinstance(v, str) and v.strip() == "" for v in values):
            continue
        row_dict: dict[str, Any] = {}
        for col, val in zip(columns, values, strict=False):
            # first occurrence of a duplicated header wins
            if col and col not in row_dict:
                row_dict[col] = val
        # header = row 1 -> first data row = row 2
        rows.append(RowData(row_number=position + 2, values=row_dict))
    return SheetData(sheet_name=sheet_name, columns=columns, rows=rows)
