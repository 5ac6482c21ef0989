# Shared pytest fixtures
from __future__ import annotations

from pathlib import Path
from typing import Any

import pandas as pd
import pytest

from jira_importer.config.loader import COLUMN_ENV_VARS, load_config
from jira_importer.logging.init import reset_logging
from jira_importer.tracker.client import IssueCreateError

HEADER = ["TASK", "DESCRIPTION", "TYPE", "SUB-TASK", "SUB-TASK DESC", "SUB-TASK POINT"]

CONFIG_ENV_VARS = [
    "JIRA_HOST",
    "JIRA_EMAIL",
    "JIRA_API_TOKEN",
    "JIRA_PROJECT_KEY",
    "JIRA_PROTOCOL",
    "JIRA_API_VERSION",
    "JIRA_STRICT_SSL",
    "STORY_POINTS_FIELD_ID",
    "SHEET_NAME",
    "DEFAULT_TASK_TYPE",
    "DEFAULT_SUBTASK_TYPE",
    *COLUMN_ENV_VARS.values(),
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch) -> None:
    for var in CONFIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch, tmp_path: Path) -> Path:
    (tmp_path / "config").mkdir()
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture()
def jira_env(monkeypatch) -> dict[str, str]:
    values = {
        "JIRA_HOST": "https://example.atlassian.net",
        "JIRA_EMAIL": "dev@example.com",
        "JIRA_API_TOKEN": "token-123",
        "JIRA_PROJECT_KEY": "PROJ",
    }
    for k, v in values.items():
        monkeypatch.setenv(k, v)
    return values


@pytest.fixture()
def import_config(temp_workdir: Path, jira_env):
    return load_config()


def write_workbook(path: Path, sheets: dict[str, list[list[Any]]]) -> Path:
    """Write raw rows (header included) into an .xlsx file."""
    with pd.ExcelWriter(path) as writer:
        for sheet, rows in sheets.items():
            pd.DataFrame(rows).to_excel(writer, sheet_name=sheet, header=False, index=False)
    return path


@pytest.fixture()
def sample_rows() -> list[list[Any]]:
    return [
        HEADER,
        ["Auth", "Login flow", "Story", "Add login UI", "Build form", 3],
        ["Auth", "Login flow", "Story", "Add login API", None, 2],
        ["Billing", None, "Story", None, None, 0],
    ]


@pytest.fixture()
def sample_workbook(temp_workdir: Path, sample_rows) -> Path:
    return write_workbook(temp_workdir / "tasks.xlsx", {"Sheet1": sample_rows})


class FakeTracker:
    """In-memory IssueTracker; summaries listed in ``fail_on`` raise IssueCreateError."""

    def __init__(self, fail_on: set[str] | None = None, fields: list[dict[str, Any]] | None = None) -> None:
        self.fail_on = fail_on or set()
        self.calls: list[dict[str, Any]] = []
        self.fields = fields or []
        self._next = 1

    def create_issue(self, fields: dict[str, Any]) -> str:
        self.calls.append(fields)
        if fields["summary"] in self.fail_on:
            raise IssueCreateError(f"HTTP 400: cannot create {fields['summary']}")
        key = f"PROJ-{self._next}"
        self._next += 1
        return key

    def list_fields(self) -> list[dict[str, Any]]:
        return list(self.fields)


@pytest.fixture()
def fake_tracker() -> FakeTracker:
    return FakeTracker()
