from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any

from ..logging.error_log import ErrorLogBuffer
from ..models.config_models import ImportConfig
from ..models.error_record import ErrorRecord
from ..models.processing_result import GroupStat, ImportResult
from ..models.task_group import ChildTask, ParentTask, TaskHierarchy
from ..tracker.client import IssueTracker, TrackerError
from .progress import ProgressTracker

"""Issue-creation orchestration.

For each parent group, in hierarchy order:
1. create the parent issue (estimate field = sum of child estimates, only if > 0)
2. create each sub-task linked to the parent, pausing between consecutive
   sub-task requests to stay under the tracker's rate limit

A failed parent marks its group failed and skips its sub-tasks. A failed
sub-task is logged and its siblings still run. Nothing is retried or
rolled back.
"""

logger = logging.getLogger(__name__)

# Pause between consecutive sub-task create requests (seconds)
CHILD_REQUEST_DELAY_SECONDS = 0.5

PARENT_CREATE_FAILED = "PARENT_CREATE_FAILED"
CHILD_CREATE_FAILED = "CHILD_CREATE_FAILED"


def _format_points(value: float | int) -> str:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def build_parent_fields(group: ParentTask, config: ImportConfig) -> dict[str, Any]:
    """Create-issue payload for a parent group."""
    fields: dict[str, Any] = {
        "project": {"key": config.tracker.project_key},
        "summary": group.name,
        "description": group.description,
        "issuetype": {"name": config.issue_types.parent},
    }
    total = group.total_estimate
    if total > 0:
        fields[config.tracker.estimate_field] = total
    return fields


def build_child_fields(child: ChildTask, parent_key: str, config: ImportConfig) -> dict[str, Any]:
    """Create-issue payload for a sub-task linked to ``parent_key``."""
    fields: dict[str, Any] = {
        "project": {"key": config.tracker.project_key},
        "parent": {"key": parent_key},
        "summary": child.name,
        "description": child.description,
        "issuetype": {"name": config.issue_types.child},
    }
    if child.estimate > 0:
        fields[config.tracker.estimate_field] = child.estimate
    return fields


def create_issues(
    hierarchy: TaskHierarchy,
    client: IssueTracker,
    config: ImportConfig,
    *,
    sleep: Callable[[float], None] = time.sleep,
    error_log: ErrorLogBuffer | None = None,
    source_file: str = "",
    sheet_name: str = "",
) -> ImportResult:
    """Create all parent and sub-task issues of ``hierarchy``.

    Args:
        hierarchy: output of ``build_hierarchy``
        client: tracker used for create-issue calls
        config: run configuration (project key, issue types, estimate field)
        sleep: pacing primitive; tests pass a no-op
        error_log: failure log buffer, flushed once at the end
        source_file, sheet_name: context recorded in the failure log

    Returns:
        ImportResult with per-group stats
    """
    start_time = datetime.now(UTC)
    if error_log is None:
        error_log = ErrorLogBuffer()

    group_stats: list[GroupStat] = []
    success_count = 0
    failed_count = 0
    children_created = 0
    children_failed = 0
    total = len(hierarchy)

    with ProgressTracker(total) as progress:
        for index, group in enumerate(hierarchy, start=1):
            progress.start_group(group.name)
            logger.info("[%d/%d] %s", index, total, group.name)

            stat = _process_group(group, client, config, sleep, error_log, source_file, sheet_name)
            group_stats.append(stat)
            if stat.status == "success":
                success_count += 1
            else:
                failed_count += 1
            children_created += stat.children_created
            children_failed += stat.children_failed

            progress.set_postfix(success=success_count, failed=failed_count)
            progress.finish_group()

    try:
        path = error_log.flush()
        if path is not None:
            logger.info("failures written to %s", path)
    except OSError as e:
        logger.warning("could not write failure log: %s", e)

    end_time = datetime.now(UTC)
    return ImportResult(
        success_groups=success_count,
        failed_groups=failed_count,
        children_created=children_created,
        children_failed=children_failed,
        start_time=start_time,
        end_time=end_time,
        elapsed_seconds=(end_time - start_time).total_seconds(),
        group_stats=group_stats,
    )


def _process_group(
    group: ParentTask,
    client: IssueTracker,
    config: ImportConfig,
    sleep: Callable[[float], None],
    error_log: ErrorLogBuffer,
    source_file: str,
    sheet_name: str,
) -> GroupStat:
    total_points = group.total_estimate
    logger.info("  -> creating parent '%s' (%s points)", group.name, _format_points(total_points))
    try:
        parent_key = client.create_issue(build_parent_fields(group, config))
    except TrackerError as e:
        logger.error("  failed to create parent '%s': %s", group.name, e)
        error_log.append(
            ErrorRecord.create(source_file, sheet_name, group.name, None, PARENT_CREATE_FAILED, str(e))
        )
        return GroupStat(name=group.name, status="failed", parent_key=None)
    logger.info("  created %s", parent_key)

    created = 0
    failed = 0
    if group.children:
        logger.info("  creating %d sub-task(s)", len(group.children))
    for position, child in enumerate(group.children):
        if position > 0:
            sleep(CHILD_REQUEST_DELAY_SECONDS)
        logger.info("    -> creating sub-task '%s' (%s points)", child.name, _format_points(child.estimate))
        try:
            child_key = client.create_issue(build_child_fields(child, parent_key, config))
        except TrackerError as e:
            failed += 1
            logger.error("    failed to create sub-task '%s' of %s: %s", child.name, parent_key, e)
            error_log.append(
                ErrorRecord.create(source_file, sheet_name, group.name, child.name, CHILD_CREATE_FAILED, str(e))
            )
            continue
        created += 1
        logger.info("    created %s (sub-task of %s)", child_key, parent_key)

    return GroupStat(
        name=group.name,
        status="success",
        parent_key=parent_key,
        children_created=created,
        children_failed=failed,
    )
