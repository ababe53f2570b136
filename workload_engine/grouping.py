"""Active-task selection and per-assignee fan-out."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from datetime import date
from typing import Optional

from workload_engine.config import EngineConfig
from workload_engine.distribution import with_distribution
from workload_engine.normalize import UNASSIGNED, is_completed, split_assignees
from workload_engine.schema import GroupedData, Project, Task
from workload_engine.workdays import day_label

logger = logging.getLogger(__name__)


def _open_or_recent(task: Task, window: Sequence[date], completed_statuses) -> bool:
    if not is_completed(task.status, completed_statuses):
        return True
    if not window or task.closed_date is None:
        return False
    return window[0] <= task.closed_date <= window[-1]


def is_active(task: Task, window: Sequence[date], completed_statuses) -> bool:
    """Open tasks, tasks closed inside the window, or parents of either."""

    if _open_or_recent(task, window, completed_statuses):
        return True
    return any(_open_or_recent(sub, window, completed_statuses) for sub in task.subtasks)


def _sort_key(group: GroupedData) -> tuple[int, str]:
    return (0 if group.assignee == UNASSIGNED else 1, group.assignee)


def group_tasks(
    tasks: Sequence[Task],
    window: Sequence[date],
    config: Optional[EngineConfig] = None,
) -> list[GroupedData]:
    """Distribute active tasks over the window and file them under each owner.

    A jointly owned task is the same object in every owner's project list.
    """

    config = config or EngineConfig()
    labels = [day_label(day) for day in window]

    buckets: dict[str, dict[str, Project]] = {}
    active = 0
    for task in tasks:
        if not is_active(task, window, config.completed_statuses):
            continue
        active += 1
        distributed = with_distribution(task, window, config.holidays)
        for name in split_assignees(distributed.assignee):
            projects = buckets.setdefault(name, {})
            project = projects.get(distributed.project)
            if project is None:
                project = projects[distributed.project] = Project(name=distributed.project)
            project.tasks.append(distributed)

    logger.debug("Grouped %d active of %d tasks under %d assignees", active, len(tasks), len(buckets))

    groups = [
        GroupedData(assignee=name, projects=list(projects.values()), window=list(labels))
        for name, projects in buckets.items()
    ]
    return sorted(groups, key=_sort_key)
