"""Plain-dict rendering of engine results for JSON output."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from workload_engine.pipeline import WorkloadResult
from workload_engine.quality import MemberScore, QualityReport
from workload_engine.schema import GroupedData, Task

logger = logging.getLogger(__name__)


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def task_to_dict(task: Task) -> dict:
    return {
        "task_id": task.task_id,
        "name": task.name,
        "status": task.status,
        "assignee": task.assignee,
        "project": task.project,
        "priority": task.priority,
        "start_date": _iso(task.start_date),
        "due_date": _iso(task.due_date),
        "closed_date": _iso(task.closed_date),
        "planned": task.planned,
        "logged": task.logged,
        "remaining": task.remaining,
        "overflow": task.overflow,
        "is_overdue": task.is_overdue,
        "has_negative_budget": task.has_negative_budget,
        "distribution": dict(task.distribution),
        "subtasks": [task_to_dict(sub) for sub in task.subtasks],
    }


def group_to_dict(group: GroupedData) -> dict:
    return {
        "assignee": group.assignee,
        "window": list(group.window),
        "projects": [
            {
                "name": project.name,
                "planned": project.planned,
                "logged": project.logged,
                "task_ids": [task.task_id for task in project.tasks],
            }
            for project in group.projects
        ],
    }


def quality_to_dict(report: QualityReport) -> dict:
    return {
        "score": report.score,
        "total_tasks": report.total_tasks,
        "total_penalty": report.total_penalty,
        "max_penalty": report.max_penalty,
        "total_issues": report.total_issues,
        "issues": {name: [task.task_id for task in tasks] for name, tasks in report.issues.items()},
    }


def member_to_dict(member: MemberScore) -> dict:
    return {
        "name": member.name,
        "score": member.score,
        "tier": member.tier,
        "total_tasks": member.total_tasks,
        "issues_count": member.issues_count,
        "penalty": member.penalty,
        "breakdown": dict(member.breakdown),
    }


def result_to_dict(result: WorkloadResult) -> dict:
    """Groups reference tasks by id; task content lives once under "tasks"."""

    tasks = {}
    seen: dict[str, Task] = {}
    for group in result.groups:
        for project in group.projects:
            for task in project.tasks:
                first = seen.setdefault(task.task_id, task)
                if first is task:
                    if task.task_id not in tasks:
                        tasks[task.task_id] = task_to_dict(task)
                elif first != task:
                    logger.warning(
                        "Task id %s is shared by different tasks (%r and %r); keeping the first",
                        task.task_id,
                        first.name,
                        task.name,
                    )

    return {
        "window": [day.isoformat() for day in result.window],
        "tasks": tasks,
        "groups": [group_to_dict(group) for group in result.groups],
        "quality": quality_to_dict(result.quality),
    }
