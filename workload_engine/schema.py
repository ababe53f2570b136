"""Core data schema for linked tasks and grouped workload views."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional


@dataclass(frozen=True)
class Task:
    """Normalized task record shared by every module.

    Instances are never mutated; rollup and distribution return new values via
    ``dataclasses.replace``.
    """

    task_id: str
    name: str
    status: str
    assignee: str
    raw_assignee: str = ""
    start_date: Optional[date] = None
    due_date: Optional[date] = None
    closed_date: Optional[date] = None
    description: str = ""
    priority: str = ""
    planned: float = 0.0
    logged: float = 0.0
    project: str = "Unknown Project"
    parent_name: str = ""
    is_subtask: bool = False
    is_overdue: bool = False
    has_negative_budget: bool = False
    subtasks: tuple["Task", ...] = ()
    # (day label, formatted hours) pairs in window order; `dict(task.distribution)`
    # gives the mapping view.
    distribution: tuple[tuple[str, str], ...] = ()

    @property
    def remaining(self) -> float:
        return self.planned - self.logged

    @property
    def overflow(self) -> float:
        return max(0.0, self.logged - self.planned)


@dataclass
class Project:
    """Tasks of one project as seen by one assignee."""

    name: str
    tasks: list[Task] = field(default_factory=list)

    @property
    def planned(self) -> float:
        return sum(task.planned for task in self.tasks)

    @property
    def logged(self) -> float:
        return sum(task.logged for task in self.tasks)


@dataclass
class GroupedData:
    """One assignee's view: projects plus the window labels used to distribute."""

    assignee: str
    projects: list[Project]
    window: list[str]

