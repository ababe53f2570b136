from datetime import date

from workload_engine.distribution import distribute, format_hours, with_distribution
from workload_engine.normalize import parse_duration
from workload_engine.schema import Task
from workload_engine.workdays import display_window

MONDAY = date(2025, 3, 3)
WINDOW = display_window(MONDAY)


def make_task(**kwargs):
    base = {"task_id": "1", "name": "Task", "status": "TO DO", "assignee": "Alice"}
    base.update(kwargs)
    return Task(**base)


def test_format_hours():
    assert format_hours(0) == ""
    assert format_hours(-1) == ""
    assert format_hours(0.5) == "30m"
    assert format_hours(2) == "2h"
    assert format_hours(1.5) == "1h 30m"
    assert format_hours(0.9999) == "1h"


def test_monday_to_friday_splits_evenly():
    task = make_task(start_date=MONDAY, due_date=date(2025, 3, 7), planned=10.0)
    assert distribute(task, WINDOW) == {
        "03/03": "2h",
        "04/03": "2h",
        "05/03": "2h",
        "06/03": "2h",
        "07/03": "2h",
    }


def test_weekend_inside_span_gets_no_entry():
    task = make_task(start_date=date(2025, 3, 6), due_date=date(2025, 3, 11), planned=8.0)
    result = distribute(task, WINDOW)
    assert result == {"06/03": "2h", "07/03": "2h", "10/03": "2h", "11/03": "2h"}
    assert "08/03" not in result and "09/03" not in result


def test_holidays_are_excluded_and_share_rises():
    task = make_task(start_date=MONDAY, due_date=date(2025, 3, 7), planned=8.0)
    result = distribute(task, WINDOW, holidays={"05/03"})
    assert result == {"03/03": "2h", "04/03": "2h", "06/03": "2h", "07/03": "2h"}


def test_logged_used_when_planned_missing():
    task = make_task(start_date=MONDAY, due_date=MONDAY, logged=1.5)
    assert distribute(task, WINDOW) == {"03/03": "1h 30m"}


def test_empty_when_no_hours_or_no_dates():
    assert distribute(make_task(start_date=MONDAY, due_date=MONDAY), WINDOW) == {}
    assert distribute(make_task(planned=4.0), WINDOW) == {}


def test_single_date_is_a_single_day_span():
    assert distribute(make_task(due_date=date(2025, 3, 5), planned=3.0), WINDOW) == {"05/03": "3h"}
    assert distribute(make_task(start_date=date(2025, 3, 5), planned=3.0), WINDOW) == {"05/03": "3h"}


def test_weekend_only_span_does_not_divide_by_zero():
    task = make_task(start_date=date(2025, 3, 8), due_date=date(2025, 3, 9), planned=4.0)
    assert distribute(task, WINDOW) == {}


def test_span_beyond_window_only_fills_window_days():
    task = make_task(start_date=date(2025, 2, 24), due_date=date(2025, 3, 21), planned=40.0)
    result = distribute(task, WINDOW)
    assert len(result) == 10
    assert set(result.values()) == {"2h"}


def test_distribution_sums_back_to_total():
    task = make_task(start_date=MONDAY, due_date=date(2025, 3, 12), planned=7.0)
    result = distribute(task, WINDOW)
    assert len(result) == 8
    total = sum(parse_duration(value) for value in result.values())
    assert abs(total - 7.0) <= len(result) / 60.0


def test_with_distribution_fills_subtasks_without_mutating():
    sub = make_task(task_id="2", name="Sub", due_date=MONDAY, planned=1.0, is_subtask=True)
    task = make_task(start_date=MONDAY, due_date=MONDAY, planned=2.0, subtasks=(sub,))
    result = with_distribution(task, WINDOW)
    assert dict(result.distribution) == {"03/03": "2h"}
    assert dict(result.subtasks[0].distribution) == {"03/03": "1h"}
    assert task.distribution == ()
    assert sub.distribution == ()


def test_distributed_task_is_hashable_and_keeps_window_order():
    task = make_task(start_date=MONDAY, due_date=date(2025, 3, 5), planned=3.0)
    result = with_distribution(task, WINDOW)
    assert result.distribution == (("03/03", "1h"), ("04/03", "1h"), ("05/03", "1h"))
    assert hash(result) == hash(with_distribution(task, WINDOW))
    assert len({result, with_distribution(task, WINDOW)}) == 1
