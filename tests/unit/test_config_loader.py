from __future__ import annotations

from pathlib import Path

import pytest

from jira_importer.config.loader import ConfigError, MissingConfigurationError, load_config


def test_load_config_from_env_with_defaults(temp_workdir: Path, jira_env):
    cfg = load_config()
    assert cfg.tracker.host == "example.atlassian.net"
    assert cfg.tracker.server_url == "https://example.atlassian.net"
    assert cfg.tracker.project_key == "PROJ"
    assert cfg.tracker.api_version == "2"
    assert cfg.tracker.strict_ssl is True
    assert cfg.tracker.estimate_field == "customfield_10016"
    assert cfg.excel.sheet_name == "Sheet1"
    assert cfg.excel.columns.task == "TASK"
    assert cfg.excel.columns.sub_task_estimate == "SUB-TASK POINT"
    assert cfg.issue_types.parent == "Story"
    assert cfg.issue_types.child == "Sub-task"


def test_missing_configuration_names_every_field(temp_workdir: Path, monkeypatch):
    monkeypatch.setenv("JIRA_EMAIL", "dev@example.com")
    with pytest.raises(MissingConfigurationError) as e:
        load_config()
    assert e.value.missing == ["JIRA_HOST", "JIRA_API_TOKEN", "JIRA_PROJECT_KEY"]
    assert "JIRA_HOST, JIRA_API_TOKEN, JIRA_PROJECT_KEY" in str(e.value)


def test_blank_env_value_counts_as_missing(temp_workdir: Path, jira_env, monkeypatch):
    monkeypatch.setenv("JIRA_PROJECT_KEY", "   ")
    with pytest.raises(MissingConfigurationError) as e:
        load_config()
    assert e.value.missing == ["JIRA_PROJECT_KEY"]


def test_env_overrides(temp_workdir: Path, jira_env, monkeypatch):
    monkeypatch.setenv("SHEET_NAME", "Backlog")
    monkeypatch.setenv("DEFAULT_TASK_TYPE", "Task")
    monkeypatch.setenv("DEFAULT_SUBTASK_TYPE", "Subtask")
    monkeypatch.setenv("STORY_POINTS_FIELD_ID", "customfield_10028")
    monkeypatch.setenv("JIRA_STRICT_SSL", "false")
    monkeypatch.setenv("COLUMN_SUB_TASK_POINT", "POINTS")
    cfg = load_config()
    assert cfg.excel.sheet_name == "Backlog"
    assert cfg.issue_types.parent == "Task"
    assert cfg.issue_types.child == "Subtask"
    assert cfg.tracker.estimate_field == "customfield_10028"
    assert cfg.tracker.strict_ssl is False
    assert cfg.excel.columns.sub_task_estimate == "POINTS"


def test_yaml_values_used_when_env_unset(temp_workdir: Path):
    (temp_workdir / "config" / "import.yml").write_text(
        """jira:
  host: jira.internal
  email: bot@example.com
  api_token: t
  project_key: OPS
  protocol: http
  api_version: 3
  strict_ssl: false
excel:
  sheet_name: Tasks
  columns:
    task: Feature
issue_types:
  child: Subtask
""",
        encoding="utf-8",
    )
    cfg = load_config()
    assert cfg.tracker.server_url == "http://jira.internal"
    assert cfg.tracker.api_version == "3"
    assert cfg.tracker.strict_ssl is False
    assert cfg.excel.sheet_name == "Tasks"
    assert cfg.excel.columns.task == "Feature"
    assert cfg.excel.columns.description == "DESCRIPTION"
    assert cfg.issue_types.child == "Subtask"


def test_env_wins_over_yaml(temp_workdir: Path, jira_env):
    (temp_workdir / "config" / "import.yml").write_text(
        "jira:\n  project_key: FROMYAML\n", encoding="utf-8"
    )
    cfg = load_config()
    assert cfg.tracker.project_key == "PROJ"


def test_yaml_unknown_key_rejected(temp_workdir: Path, jira_env):
    (temp_workdir / "config" / "import.yml").write_text("extra_field: 1\n", encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_config()
    assert "config validation failed" in str(e.value)


def test_invalid_yaml(temp_workdir: Path, jira_env):
    (temp_workdir / "config" / "import.yml").write_text("jira: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_config()


def test_explicit_config_path_must_exist(temp_workdir: Path, jira_env):
    with pytest.raises(ConfigError, match="config file not found"):
        load_config(temp_workdir / "nope.yml")


def test_invalid_boolean(temp_workdir: Path, jira_env, monkeypatch):
    monkeypatch.setenv("JIRA_STRICT_SSL", "maybe")
    with pytest.raises(ConfigError, match="JIRA_STRICT_SSL"):
        load_config()


def test_config_is_frozen(temp_workdir: Path, jira_env):
    cfg = load_config()
    with pytest.raises(AttributeError):
        cfg.tracker.project_key = "OTHER"  # type: ignore[misc]
