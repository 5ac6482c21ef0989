from __future__ import annotations

import os
import subprocess
import sys
from pathlib import Path
from unittest.mock import patch

from conftest import HEADER, FakeTracker, write_workbook

from jira_importer.cli.__main__ import main as cli_main

"""Exit code contract: 1 for anything failing before issue creation, 0 otherwise."""

CLIENT_FACTORY = "jira_importer.cli.__main__.JiraTrackerClient.from_config"
DELAY = "jira_importer.services.orchestrator.CHILD_REQUEST_DELAY_SECONDS"


def test_exit_code_missing_config(temp_workdir: Path, sample_workbook: Path, capsys):
    with patch(CLIENT_FACTORY) as factory:
        code = cli_main([str(sample_workbook)])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR config: missing required configuration: JIRA_HOST" in out
    factory.assert_not_called()


def test_exit_code_file_not_found(temp_workdir: Path, jira_env, capsys):
    code = cli_main(["absent.xlsx"])
    assert code == 1
    assert "ERROR read: file not found" in capsys.readouterr().out


def test_exit_code_sheet_not_found(temp_workdir: Path, jira_env, monkeypatch, sample_workbook, capsys):
    monkeypatch.setenv("SHEET_NAME", "Backlog")
    code = cli_main([str(sample_workbook)])
    out = capsys.readouterr().out
    assert code == 1
    assert "sheet 'Backlog' not found" in out
    assert "Sheet1" in out


def test_exit_code_schema_invalid(temp_workdir: Path, jira_env, capsys):
    wb = write_workbook(temp_workdir / "t.xlsx", {"Sheet1": [HEADER[:4], ["A", "", "", ""]]})
    code = cli_main([str(wb)])
    out = capsys.readouterr().out
    assert code == 1
    assert "ERROR validate: missing required columns: SUB-TASK DESC, SUB-TASK POINT" in out


def test_exit_code_data_invalid_makes_no_remote_calls(temp_workdir: Path, jira_env, capsys):
    wb = write_workbook(
        temp_workdir / "t.xlsx",
        {"Sheet1": [HEADER, ["A", "", "Story", "c1", "d", 1], ["A", "", "Story", "c2", "d", "abc"]]},
    )
    tracker = FakeTracker()
    with patch(CLIENT_FACTORY, return_value=tracker) as factory:
        code = cli_main([str(wb)])
    out = capsys.readouterr().out
    assert code == 1
    assert "row 3" in out
    factory.assert_not_called()
    assert tracker.calls == []


def test_exit_code_no_candidate_files(temp_workdir: Path, jira_env, capsys):
    code = cli_main([])
    assert code == 1
    assert "ERROR select: no spreadsheet files" in capsys.readouterr().out


def test_exit_code_zero_with_partial_failure(temp_workdir: Path, jira_env, sample_workbook, capsys):
    tracker = FakeTracker(fail_on={"Billing", "Add login UI"})
    with patch(CLIENT_FACTORY, return_value=tracker), patch(DELAY, 0):
        code = cli_main([str(sample_workbook)])
    out = capsys.readouterr().out
    assert code == 0
    assert "SUMMARY groups=2 success=1 failed=1 sub_tasks=1/2" in out


def test_exit_code_dry_run(temp_workdir: Path, jira_env, sample_workbook, capsys):
    with patch(CLIENT_FACTORY) as factory:
        code = cli_main([str(sample_workbook), "--dry-run"])
    out = capsys.readouterr().out
    assert code == 0
    factory.assert_not_called()
    assert "Auth (5 points)" in out
    assert "  - Add login API (2 points)" in out
    assert "Billing (0 points)" in out


def test_module_entry_point_runs_cleanly(temp_workdir: Path, sample_workbook: Path):
    repo_root = Path(__file__).resolve().parents[2]
    env = {k: v for k, v in os.environ.items() if not k.startswith(("JIRA_", "SHEET_NAME"))}
    env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(repo_root), env.get("PYTHONPATH")]))
    proc = subprocess.run(
        [sys.executable, "-W", "error::RuntimeWarning", "-m", "jira_importer.cli", str(sample_workbook)],
        cwd=temp_workdir, env=env, capture_output=True, text=True, timeout=60,
    )
    assert proc.returncode == 1
    assert "RuntimeWarning" not in proc.stderr
    assert "ERROR config: missing required configuration: JIRA_HOST" in proc.stdout
