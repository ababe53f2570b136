"""Weighted data-completeness scoring.

Predicate failures are evaluated once into a boolean matrix (tasks x
predicates). Scoring is a weighted sum over that matrix, so changing the
weights only needs a new call to :func:`score_matrix`.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from workload_engine.config import EngineConfig
from workload_engine.normalize import UNASSIGNED, is_completed, split_assignees
from workload_engine.schema import Task


def _missing_assignee(task: Task, config: EngineConfig) -> bool:
    return not task.assignee or task.assignee == UNASSIGNED or task.assignee in config.placeholder_assignees


def _missing_priority(task: Task, config: EngineConfig) -> bool:
    return not task.priority or task.priority.upper() in config.lowest_priorities


def _missing_description(task: Task, config: EngineConfig) -> bool:
    return len((task.description or "").strip()) < config.min_description_length


PREDICATES: dict[str, Callable[[Task, EngineConfig], bool]] = {
    "assignee": _missing_assignee,
    "due_date": lambda task, config: task.due_date is None,
    "priority": _missing_priority,
    "start_date": lambda task, config: task.start_date is None,
    "estimate": lambda task, config: task.planned <= 0,
    "description": _missing_description,
}
PREDICATE_NAMES = tuple(PREDICATES)

_TIERS = ((90, "elite"), (70, "professional"), (60, "attention"))


@dataclass
class IssueMatrix:
    """Predicate failures for a set of open tasks."""

    tasks: list[Task]
    failures: np.ndarray

    def subset(self, mask: Sequence[bool]) -> "IssueMatrix":
        rows = np.asarray(mask, dtype=bool)
        return IssueMatrix(
            tasks=[task for task, keep in zip(self.tasks, rows) if keep],
            failures=self.failures[rows],
        )


@dataclass
class QualityReport:
    score: int
    total_tasks: int
    total_penalty: float
    max_penalty: float
    issues: dict[str, list[Task]] = field(default_factory=dict)

    @property
    def total_issues(self) -> int:
        return sum(len(tasks) for tasks in self.issues.values())


@dataclass
class MemberScore:
    name: str
    score: int
    tier: str
    total_tasks: int
    issues_count: int
    penalty: float
    breakdown: dict[str, int]


def tier_for(score: int) -> str:
    for threshold, tier in _TIERS:
        if score >= threshold:
            return tier
    return "critical"


def evaluate(tasks: Sequence[Task], config: Optional[EngineConfig] = None) -> IssueMatrix:
    """Evaluate every predicate on every non-completed task."""

    config = config or EngineConfig()
    open_tasks = [task for task in tasks if not is_completed(task.status, config.completed_statuses)]
    failures = np.zeros((len(open_tasks), len(PREDICATE_NAMES)), dtype=bool)
    for row, task in enumerate(open_tasks):
        for col, name in enumerate(PREDICATE_NAMES):
            failures[row, col] = PREDICATES[name](task, config)
    return IssueMatrix(tasks=open_tasks, failures=failures)


def _weight_vector(weights: Mapping[str, float]) -> np.ndarray:
    unknown = sorted(set(weights) - set(PREDICATE_NAMES))
    if unknown:
        raise ValueError(f"Unknown quality predicates {unknown}; expected a subset of {list(PREDICATE_NAMES)}")

    vector = np.zeros(len(PREDICATE_NAMES), dtype=float)
    for col, name in enumerate(PREDICATE_NAMES):
        value = float(weights.get(name, 0.0))
        if value < 0:
            raise ValueError(f"Quality weight for '{name}' must be non-negative, got {value}")
        vector[col] = value
    return vector


def _bounded_score(avg_penalty: float, max_penalty: float) -> int:
    if max_penalty <= 0:
        return 100
    raw = 100.0 - (avg_penalty / max_penalty) * 100.0
    return max(0, min(100, math.floor(raw + 0.5)))


def score_matrix(matrix: IssueMatrix, weights: Mapping[str, float]) -> QualityReport:
    """Score an evaluated task set under the given predicate weights."""

    vector = _weight_vector(weights)
    max_penalty = float(vector.sum())
    total_tasks = len(matrix.tasks)

    penalties = matrix.failures.astype(float) @ vector
    total_penalty = float(penalties.sum())
    avg_penalty = total_penalty / total_tasks if total_tasks else 0.0

    issues = {
        name: [task for task, failed in zip(matrix.tasks, matrix.failures[:, col]) if failed]
        for col, name in enumerate(PREDICATE_NAMES)
        if name in weights
    }
    return QualityReport(
        score=_bounded_score(avg_penalty, max_penalty),
        total_tasks=total_tasks,
        total_penalty=total_penalty,
        max_penalty=max_penalty,
        issues=issues,
    )


def for_assignee(matrix: IssueMatrix, assignee: str) -> IssueMatrix:
    return matrix.subset([assignee in split_assignees(task.assignee) for task in matrix.tasks])


def score_tasks(
    tasks: Sequence[Task],
    weights: Optional[Mapping[str, float]] = None,
    config: Optional[EngineConfig] = None,
    assignee: Optional[str] = None,
) -> QualityReport:
    """Team score, or one assignee's score when ``assignee`` is given."""

    config = config or EngineConfig()
    matrix = evaluate(tasks, config)
    if assignee is not None:
        matrix = for_assignee(matrix, assignee)
    return score_matrix(matrix, config.quality_weights if weights is None else weights)


def member_rankings(
    tasks: Sequence[Task],
    weights: Optional[Mapping[str, float]] = None,
    config: Optional[EngineConfig] = None,
) -> list[MemberScore]:
    """Score every assignee identity and rank best first."""

    config = config or EngineConfig()
    weights = config.quality_weights if weights is None else weights
    matrix = evaluate(tasks, config)

    names = sorted({name for task in matrix.tasks for name in split_assignees(task.assignee)})
    members = []
    for name in names:
        report = score_matrix(for_assignee(matrix, name), weights)
        flagged = {id(task) for offenders in report.issues.values() for task in offenders}
        members.append(
            MemberScore(
                name=name,
                score=report.score,
                tier=tier_for(report.score),
                total_tasks=report.total_tasks,
                issues_count=len(flagged),
                penalty=report.total_penalty,
                breakdown={key: len(offenders) for key, offenders in report.issues.items()},
            )
        )

    return sorted(members, key=lambda member: (-member.score, member.name))
