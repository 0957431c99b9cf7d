from datetime import datetime, timedelta, timezone

import pytest

from src.priority_tasks.models import FILTER_ALL, Priority, SortMode, Task
from src.priority_tasks.view import build_view, filter_tasks, sort_tasks

BASE_TIME = datetime(2025, 3, 1, 9, 0, tzinfo=timezone.utc)


def make_task(task_id, text, priority, minutes=0, completed=False):
    return Task(
        id=task_id,
        text=text,
        priority=priority,
        created_at=BASE_TIME + timedelta(minutes=minutes),
        completed=completed,
    )


@pytest.fixture
def tasks():
    return [
        make_task(1, "banana", Priority.LOW, minutes=0),
        make_task(2, "apple", Priority.HIGH, minutes=1, completed=True),
        make_task(3, "cherry", Priority.MEDIUM, minutes=2),
        make_task(4, "date", Priority.HIGH, minutes=3),
        make_task(5, "elderberry", Priority.LOW, minutes=4, completed=True),
        make_task(6, "fig", Priority.MEDIUM, minutes=5),
    ]


def test_filter_all_keeps_everything(tasks):
    assert filter_tasks(tasks, FILTER_ALL) == tasks


@pytest.mark.parametrize("level", list(Priority))
def test_filter_by_level(tasks, level):
    filtered = filter_tasks(tasks, level)
    assert filtered
    assert all(task.priority is level for task in filtered)


def test_filter_accepts_plain_strings(tasks):
    assert [task.id for task in filter_tasks(tasks, "high")] == [2, 4]


def test_filter_includes_completed_tasks(tasks):
    assert [task.id for task in filter_tasks(tasks, Priority.LOW)] == [1, 5]


def test_unknown_filter_matches_nothing(tasks):
    assert filter_tasks(tasks, "urgent") == []


@pytest.mark.parametrize("mode", list(SortMode))
def test_completed_tasks_always_last(tasks, mode):
    ordered = sort_tasks(tasks, mode)
    flags = [task.completed for task in ordered]
    assert flags == sorted(flags)


def test_sort_by_priority(tasks):
    ordered = sort_tasks(tasks, SortMode.PRIORITY)
    assert [task.id for task in ordered] == [4, 3, 6, 1, 2, 5]


def test_sort_by_created_newest_first(tasks):
    ordered = sort_tasks(tasks, SortMode.CREATED)
    assert [task.id for task in ordered] == [6, 4, 3, 1, 5, 2]


def test_sort_alphabetical(tasks):
    ordered = sort_tasks(tasks, SortMode.ALPHABETICAL)
    assert [task.text for task in ordered] == [
        "banana",
        "cherry",
        "date",
        "fig",
        "apple",
        "elderberry",
    ]


def test_sort_alphabetical_ignores_case_and_accents():
    tasks = [
        make_task(1, "Zebra", Priority.LOW),
        make_task(2, "éclair", Priority.LOW),
        make_task(3, "apple", Priority.LOW),
        make_task(4, "Apple", Priority.LOW),
    ]
    ordered = sort_tasks(tasks, "alphabetical")
    assert [task.text for task in ordered] == ["apple", "Apple", "éclair", "Zebra"]


def test_ties_preserve_input_order():
    tasks = [make_task(task_id, f"t{task_id}", Priority.MEDIUM) for task_id in (5, 3, 9, 1)]

    assert [task.id for task in sort_tasks(tasks, SortMode.PRIORITY)] == [5, 3, 9, 1]
    assert [task.id for task in sort_tasks(tasks, SortMode.CREATED)] == [5, 3, 9, 1]


def test_unknown_sort_mode_only_applies_completion_tier(tasks):
    ordered = sort_tasks(tasks, "random")
    assert [task.id for task in ordered] == [1, 3, 4, 6, 2, 5]


def test_sort_is_stable_across_calls(tasks):
    assert sort_tasks(tasks, SortMode.PRIORITY) == sort_tasks(tasks, SortMode.PRIORITY)


def test_build_view_returns_fresh_list(tasks):
    view = build_view(tasks, Priority.HIGH, SortMode.PRIORITY)
    assert [task.id for task in view] == [4, 2]
    view.clear()
    assert len(tasks) == 6
