"""Parent/subtask linking with budget rollup."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import replace
from datetime import date
from typing import Any, Optional

from workload_engine.config import EngineConfig
from workload_engine.normalize import field, is_completed, normalize_assignee, parse_date, parse_duration
from workload_engine.schema import Task

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "TO DO"
DEFAULT_PROJECT = "Unknown Project"


def _with_flags(task: Task, config: EngineConfig, reference: date) -> Task:
    done = is_completed(task.status, config.completed_statuses)
    return replace(
        task,
        is_overdue=bool(task.due_date and task.due_date < reference and not done),
        has_negative_budget=task.remaining < 0 and not done,
    )


def build_task(record: Mapping[str, Any], index: int, config: EngineConfig, reference: date) -> Optional[Task]:
    """Normalize one raw record; records without a task name yield None."""

    name = field(record, "name")
    if not name:
        return None

    raw_assignee = field(record, "assignee")
    parent_name = field(record, "parent_name")
    task = Task(
        task_id=field(record, "task_id") or f"{index}-{name}",
        name=name,
        status=field(record, "status") or DEFAULT_STATUS,
        assignee=normalize_assignee(raw_assignee, config.name_mappings),
        raw_assignee=raw_assignee,
        start_date=parse_date(field(record, "start_date"), reference),
        due_date=parse_date(field(record, "due_date"), reference),
        closed_date=parse_date(field(record, "closed_date"), reference),
        description=field(record, "description"),
        priority=field(record, "priority").upper(),
        planned=parse_duration(field(record, "planned")),
        logged=parse_duration(field(record, "logged")),
        project=field(record, "project") or DEFAULT_PROJECT,
        parent_name=parent_name,
        is_subtask=bool(parent_name),
    )
    return _with_flags(task, config, reference)


def rollup(parent: Task, subtasks: Iterable[Task]) -> Task:
    """Attach subtasks to a parent and recompute its planned/logged budget."""

    children = tuple(subtasks)
    if not children:
        return parent

    sub_planned = sum(child.planned for child in children)
    sub_logged = sum(child.logged for child in children)
    return replace(
        parent,
        subtasks=children,
        planned=parent.planned if parent.planned > 0 else sub_planned,
        logged=max(parent.logged, sub_logged),
    )


def link_tasks(
    records: Iterable[Mapping[str, Any]],
    config: Optional[EngineConfig] = None,
    reference: Optional[date] = None,
) -> list[Task]:
    """Build the two-level task hierarchy from flat records.

    Subtasks whose parent is missing are promoted to top-level tasks.
    """

    config = config or EngineConfig()
    reference = reference or date.today()

    top_level: list[Task] = []
    by_name: dict[str, int] = {}
    pending: dict[str, list[Task]] = {}
    dropped = 0

    for index, record in enumerate(records):
        task = build_task(record, index, config, reference)
        if task is None:
            dropped += 1
            continue
        if task.is_subtask:
            pending.setdefault(task.parent_name, []).append(task)
        else:
            # last record with a given name receives its subtasks
            by_name[task.name] = len(top_level)
            top_level.append(task)

    if dropped:
        logger.debug("Dropped %d records without a task name", dropped)

    promoted: list[Task] = []
    for parent_name, children in pending.items():
        position = by_name.get(parent_name)
        if position is None:
            logger.info("Promoting %d orphan subtasks of missing parent %r", len(children), parent_name)
            promoted.extend(_with_flags(replace(child, is_subtask=False), config, reference) for child in children)
            continue
        top_level[position] = _with_flags(rollup(top_level[position], children), config, reference)

    return top_level + promoted
