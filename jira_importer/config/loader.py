from __future__ import annotations

import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import jsonschema
import yaml
from jsonschema.exceptions import ValidationError

from jira_importer.models.config_models import (
    DEFAULT_ESTIMATE_FIELD,
    ColumnMapping,
    ExcelConfig,
    ImportConfig,
    IssueTypes,
    TrackerConfig,
)

"""Config loader.

Resolution order for every setting (first hit wins):
1. environment variables (``.env`` is loaded into the environment by the CLI)
2. optional YAML file (default ``config/import.yml``), validated against
   ``config_schema.json``
3. built-in defaults

The four connection fields (host, email, API token, project key) are
mandatory; all of them are checked before any network call and reported
together.
"""

SCHEMA_PATH = Path(__file__).with_name("config_schema.json")
DEFAULT_CONFIG_PATH = Path("config/import.yml")

# (yaml key under "jira", env var) -- order is the order of the error message
MANDATORY_TRACKER_FIELDS = (
    ("host", "JIRA_HOST"),
    ("email", "JIRA_EMAIL"),
    ("api_token", "JIRA_API_TOKEN"),
    ("project_key", "JIRA_PROJECT_KEY"),
)

COLUMN_ENV_VARS = {
    "task": "COLUMN_TASK",
    "description": "COLUMN_DESCRIPTION",
    "type": "COLUMN_TYPE",
    "sub_task": "COLUMN_SUB_TASK",
    "sub_task_description": "COLUMN_SUB_TASK_DESC",
    "sub_task_estimate": "COLUMN_SUB_TASK_POINT",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


class ConfigError(Exception):
    pass


class MissingConfigurationError(ConfigError):
    """Raised when mandatory connection settings are absent."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = list(missing)
        super().__init__(f"missing required configuration: {', '.join(self.missing)}")


def _validate_config_schema(data: dict[str, Any]) -> None:
    """Validate YAML data against the packaged JSON schema.

    Raises:
        ConfigError: schema file unreadable or data fails validation
    """
    try:
        schema = json.loads(SCHEMA_PATH.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"invalid schema file: {e}") from e
    try:
        jsonschema.validate(data, schema)
    except ValidationError as e:
        raise ConfigError(f"config validation failed: {e.message}") from e


def _read_yaml(path: Path | None) -> dict[str, Any]:
    if path is None:
        path = DEFAULT_CONFIG_PATH
        if not path.exists():
            return {}
    elif not path.exists():
        raise ConfigError(f"config file not found: {path}")
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"invalid yaml: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"config root must be a mapping: {path}")
    _validate_config_schema(data)
    return data


def _pick(env: Mapping[str, str], var: str, section: Mapping[str, Any], key: str, default: Any = None) -> Any:
    value = env.get(var)
    if value is not None and str(value).strip() != "":
        return str(value).strip()
    value = section.get(key)
    if value is not None and str(value).strip() != "":
        return value
    return default


def _parse_bool(value: Any, name: str) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ConfigError(f"{name}: expected a boolean, got {value!r}")


def _strip_scheme(host: str) -> str:
    for prefix in ("https://", "http://"):
        if host.startswith(prefix):
            host = host[len(prefix):]
    return host.rstrip("/")


def load_config(path: Path | None = None, env: Mapping[str, str] | None = None) -> ImportConfig:
    """Build the ImportConfig for one run.

    Args:
        path: explicit YAML file; must exist when given. None means use
            ``config/import.yml`` if present.
        env: environment mapping, ``os.environ`` by default

    Raises:
        MissingConfigurationError: one or more connection fields absent
        ConfigError: unreadable or invalid YAML, malformed value
    """
    if env is None:
        env = os.environ
    data = _read_yaml(path)
    jira_raw = data.get("jira") or {}
    excel_raw = data.get("excel") or {}
    columns_raw = excel_raw.get("columns") or {}
    types_raw = data.get("issue_types") or {}

    mandatory: dict[str, str] = {}
    missing: list[str] = []
    for key, var in MANDATORY_TRACKER_FIELDS:
        value = _pick(env, var, jira_raw, key)
        if value is None:
            missing.append(var)
        else:
            mandatory[key] = str(value)
    if missing:
        raise MissingConfigurationError(missing)

    tracker = TrackerConfig(
        host=_strip_scheme(mandatory["host"]),
        email=mandatory["email"],
        api_token=mandatory["api_token"],
        project_key=mandatory["project_key"],
        protocol=str(_pick(env, "JIRA_PROTOCOL", jira_raw, "protocol", "https")).lower(),
        api_version=str(_pick(env, "JIRA_API_VERSION", jira_raw, "api_version", "2")),
        strict_ssl=_parse_bool(_pick(env, "JIRA_STRICT_SSL", jira_raw, "strict_ssl", True), "JIRA_STRICT_SSL"),
        estimate_field=str(
            _pick(env, "STORY_POINTS_FIELD_ID", jira_raw, "estimate_field", DEFAULT_ESTIMATE_FIELD)
        ),
    )
    if tracker.protocol not in ("http", "https"):
        raise ConfigError(f"JIRA_PROTOCOL: expected http or https, got {tracker.protocol!r}")

    defaults = ColumnMapping().as_dict()
    columns = ColumnMapping(**{
        key: str(_pick(env, var, columns_raw, key, defaults[key]))
        for key, var in COLUMN_ENV_VARS.items()
    })
    excel = ExcelConfig(
        sheet_name=str(_pick(env, "SHEET_NAME", excel_raw, "sheet_name", "Sheet1")),
        columns=columns,
    )
    issue_types = IssueTypes(
        parent=str(_pick(env, "DEFAULT_TASK_TYPE", types_raw, "parent", "Story")),
        child=str(_pick(env, "DEFAULT_SUBTASK_TYPE", types_raw, "child", "Sub-task")),
    )
    return ImportConfig(tracker=tracker, excel=excel, issue_types=issue_types)
