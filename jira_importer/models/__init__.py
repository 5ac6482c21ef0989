"""Domain models for the Excel -> Jira import tool.

This package contains the frozen dataclasses passed between the pipeline
stages: configuration, spreadsheet rows, parent/child task groups and the
aggregated import result.
"""

from .config_models import ColumnMapping, ExcelConfig, ImportConfig, IssueTypes, TrackerConfig
from .error_record import ErrorRecord
from .processing_result import GroupStat, ImportResult
from .row_data import RowData, RowIssue, TaskRow
from .task_group import ChildTask, ParentTask, TaskHierarchy

__all__ = [
    # Configuration models
    "ColumnMapping",
    "ExcelConfig",
    "ImportConfig",
    "IssueTypes",
    "TrackerConfig",
    # Processing models
    "RowData",
    "RowIssue",
    "TaskRow",
    "ChildTask",
    "ParentTask",
    "TaskHierarchy",
    # Results
    "ErrorRecord",
    "GroupStat",
    "ImportResult",
]
