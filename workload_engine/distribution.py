"""Spread a task's hours across the working days of the display window."""

from __future__ import annotations

from collections.abc import Collection, Sequence
from dataclasses import replace
from datetime import date

from workload_engine.schema import Task
from workload_engine.workdays import day_label, is_working_day, working_days_between


def format_hours(hours: float) -> str:
    """Render hours as "45m", "2h" or "1h 30m"; non-positive values render empty."""

    if hours <= 0:
        return ""
    total_minutes = round(hours * 60)
    if total_minutes < 60:
        return f"{total_minutes}m"
    whole, minutes = divmod(total_minutes, 60)
    if minutes == 0:
        return f"{whole}h"
    return f"{whole}h {minutes}m"


def distribute(task: Task, window: Sequence[date], holidays: Collection[str] = ()) -> dict[str, str]:
    """Map window day labels to the task's per-day share of hours."""

    total = task.planned if task.planned > 0 else task.logged
    if total <= 0:
        return {}
    if task.start_date is None and task.due_date is None:
        return {}

    start = task.start_date or task.due_date
    end = task.due_date or task.start_date

    per_day = total / max(1, working_days_between(start, end, holidays))
    label = format_hours(per_day)

    return {
        day_label(day): label
        for day in window
        if start <= day <= end and is_working_day(day, holidays)
    }


def with_distribution(task: Task, window: Sequence[date], holidays: Collection[str] = ()) -> Task:
    """Return a copy of the task with its own and its subtasks' distributions filled in."""

    return replace(
        task,
        distribution=tuple(distribute(task, window, holidays).items()),
        subtasks=tuple(
            replace(sub, distribution=tuple(distribute(sub, window, holidays).items())) for sub in task.subtasks
        ),
    )
