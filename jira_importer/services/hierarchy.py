from __future__ import annotations

from ..models.row_data import TaskRow
from ..models.task_group import ChildTask, ParentTask, TaskHierarchy

"""Group validated rows into parent tasks with ordered sub-tasks.

Pure function of its input: parents keep first-seen order, the first
description seen for a parent wins, and sub-tasks keep row order.
"""


def build_hierarchy(rows: list[TaskRow]) -> TaskHierarchy:
    order: list[str] = []
    descriptions: dict[str, str] = {}
    children: dict[str, list[ChildTask]] = {}

    for row in rows:
        if row.task not in descriptions:
            order.append(row.task)
            descriptions[row.task] = row.description
            children[row.task] = []
        if row.sub_task:
            children[row.task].append(
                ChildTask(
                    name=row.sub_task,
                    description=row.sub_task_description or "",
                    estimate=row.estimate or 0,
                )
            )

    return TaskHierarchy(
        [ParentTask(name=name, description=descriptions[name], children=tuple(children[name])) for name in order]
    )
