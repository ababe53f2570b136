from datetime import date

import pytest

from workload_engine.config import EngineConfig
from workload_engine.quality import evaluate, member_rankings, score_matrix, score_tasks, tier_for
from workload_engine.schema import Task

WEIGHTS = {"assignee": 2, "due_date": 2, "description": 0.5}


def make_task(task_id, assignee="Alice", status="TO DO", **kwargs):
    base = {
        "due_date": date(2025, 3, 7),
        "start_date": date(2025, 3, 3),
        "description": "Well described task",
        "priority": "HIGH",
        "planned": 2.0,
    }
    base.update(kwargs)
    return Task(task_id=task_id, name=f"Task {task_id}", status=status, assignee=assignee, **base)


def test_fully_incomplete_task_scores_zero():
    task = make_task("1", assignee="Unassigned", due_date=None, description="")
    report = score_tasks([task], WEIGHTS)
    assert report.max_penalty == 4.5
    assert report.total_penalty == 4.5
    assert report.score == 0
    assert [t.task_id for t in report.issues["assignee"]] == ["1"]
    assert set(report.issues) == set(WEIGHTS)


def test_complete_task_scores_full():
    assert score_tasks([make_task("1")], WEIGHTS).score == 100


def test_average_penalty_drives_score():
    tasks = [make_task("1", due_date=None), make_task("2")]
    report = score_tasks(tasks, WEIGHTS)
    assert report.total_tasks == 2
    assert report.total_penalty == 2.0
    # avg 1.0 of a possible 4.5
    assert report.score == 78


def test_completed_tasks_are_not_evaluated():
    report = score_tasks([make_task("1", status="DONE", due_date=None)], WEIGHTS)
    assert report.total_tasks == 0
    assert report.score == 100


def test_short_description_and_low_priority_fail():
    tasks = [make_task("1", description="todo", priority="LOW"), make_task("2", priority="")]
    report = score_tasks(tasks, {"description": 1, "priority": 1})
    assert [t.task_id for t in report.issues["description"]] == ["1"]
    assert [t.task_id for t in report.issues["priority"]] == ["1", "2"]


def test_rescoring_reuses_evaluated_matrix():
    tasks = [make_task("1", due_date=None), make_task("2", planned=0.0)]
    matrix = evaluate(tasks)
    first = score_matrix(matrix, {"due_date": 1, "estimate": 1})
    second = score_matrix(matrix, {"due_date": 3, "estimate": 1})
    assert first.score == 50
    assert second.score == 50
    assert score_matrix(matrix, {"due_date": 1}).score == 50
    assert score_matrix(matrix, {"assignee": 1}).score == 100
    assert score_matrix(matrix, {"due_date": 1, "estimate": 1}) == first


def test_zero_weights_score_full():
    report = score_tasks([make_task("1", due_date=None)], {"due_date": 0})
    assert report.max_penalty == 0
    assert report.score == 100


def test_invalid_weights_raise():
    with pytest.raises(ValueError):
        score_tasks([make_task("1")], {"colour": 1})
    with pytest.raises(ValueError):
        score_tasks([make_task("1")], {"assignee": -1})


def test_individual_view_filters_by_identity():
    tasks = [
        make_task("1", assignee="Alice / Bob", due_date=None),
        make_task("2", assignee="Bob"),
        make_task("3", assignee="Carla", due_date=None),
    ]
    bob = score_tasks(tasks, WEIGHTS, assignee="Bob")
    assert bob.total_tasks == 2
    assert [t.task_id for t in bob.issues["due_date"]] == ["1"]
    team = score_tasks(tasks, WEIGHTS)
    assert team.total_tasks == 3


def test_default_weights_come_from_config():
    config = EngineConfig(quality_weights={"estimate": 1})
    report = score_tasks([make_task("1", planned=0.0)], config=config)
    assert report.score == 0
    assert list(report.issues) == ["estimate"]


def test_unassigned_is_missing_even_with_custom_placeholders():
    config = EngineConfig(placeholder_assignees=frozenset({"Nobody"}), quality_weights={"assignee": 1})
    tasks = [make_task("1", assignee="Unassigned"), make_task("2", assignee="Nobody"), make_task("3")]
    report = score_tasks(tasks, config=config)
    assert [t.task_id for t in report.issues["assignee"]] == ["1", "2"]


def test_member_rankings_orders_by_score():
    tasks = [
        make_task("1", assignee="Alice"),
        make_task("2", assignee="Bob", due_date=None, description=""),
        make_task("3", assignee="Alice / Bob", due_date=None),
    ]
    rankings = member_rankings(tasks, WEIGHTS)
    assert [member.name for member in rankings] == ["Alice", "Bob"]
    alice, bob = rankings
    assert alice.total_tasks == 2
    assert alice.breakdown["due_date"] == 1
    assert bob.issues_count == 2
    assert bob.tier == tier_for(bob.score)


def test_tiers():
    assert tier_for(95) == "elite"
    assert tier_for(75) == "professional"
    assert tier_for(65) == "attention"
    assert tier_for(10) == "critical"
