from __future__ import annotations

from dataclasses import dataclass, field

"""Config dataclasses for the Excel -> Jira import tool.

Built once by ``jira_importer.config.loader.load_config`` and passed by
reference into every pipeline stage. All instances are frozen.
"""

DEFAULT_ESTIMATE_FIELD = "customfield_10016"


@dataclass(frozen=True)
class TrackerConfig:
    """Jira connection parameters.

    ``host`` is stored without scheme; ``protocol`` decides http/https.
    """
    host: str
    email: str
    api_token: str
    project_key: str
    protocol: str = "https"
    api_version: str = "2"
    strict_ssl: bool = True
    estimate_field: str = DEFAULT_ESTIMATE_FIELD

    @property
    def server_url(self) -> str:
        return f"{self.protocol}://{self.host}"


@dataclass(frozen=True)
class ColumnMapping:
    """Display names of the six logical spreadsheet columns."""
    task: str = "TASK"
    description: str = "DESCRIPTION"
    type: str = "TYPE"
    sub_task: str = "SUB-TASK"
    sub_task_description: str = "SUB-TASK DESC"
    sub_task_estimate: str = "SUB-TASK POINT"

    def as_dict(self) -> dict[str, str]:
        """Logical name -> configured header, in sheet order."""
        return {
            "task": self.task,
            "description": self.description,
            "type": self.type,
            "sub_task": self.sub_task,
            "sub_task_description": self.sub_task_description,
            "sub_task_estimate": self.sub_task_estimate,
        }


@dataclass(frozen=True)
class ExcelConfig:
    sheet_name: str = "Sheet1"
    columns: ColumnMapping = field(default_factory=ColumnMapping)


@dataclass(frozen=True)
class IssueTypes:
    parent: str = "Story"
    child: str = "Sub-task"


@dataclass(frozen=True)
class ImportConfig:
    """Root configuration object for one import run."""
    tracker: TrackerConfig
    excel: ExcelConfig = field(default_factory=ExcelConfig)
    issue_types: IssueTypes = field(default_factory=IssueTypes)
