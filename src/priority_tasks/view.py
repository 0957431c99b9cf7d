"""Derive the filtered and sorted task sequence shown to the user."""

from __future__ import annotations

import unicodedata
from typing import Any, Callable, Dict, Iterable, List, Tuple

from .models import FILTER_ALL, FilterPriority, SortMode, Task


def _collation_key(text: str) -> Tuple[str, str]:
    """Case- and accent-insensitive key; lowercase sorts first on ties."""
    decomposed = unicodedata.normalize("NFKD", text)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return base.casefold(), text.swapcase()


_SORT_KEYS: Dict[SortMode, Callable[[Task], Any]] = {
    SortMode.PRIORITY: lambda task: -task.priority.rank,
    SortMode.CREATED: lambda task: -task.created_at.timestamp(),
    SortMode.ALPHABETICAL: lambda task: _collation_key(task.text),
}


def filter_tasks(tasks: Iterable[Task], filter_priority: FilterPriority) -> List[Task]:
    """Keep tasks matching the filter; completion state is not considered."""
    if filter_priority == FILTER_ALL:
        return list(tasks)
    return [task for task in tasks if task.priority == filter_priority]


def sort_tasks(tasks: Iterable[Task], sort_mode: SortMode | str) -> List[Task]:
    """Incomplete tasks first, then the mode key; ties keep input order."""
    try:
        secondary = _SORT_KEYS.get(SortMode(sort_mode))
    except ValueError:
        secondary = None

    if secondary is None:
        return sorted(tasks, key=lambda task: task.completed)
    return sorted(tasks, key=lambda task: (task.completed, secondary(task)))


def build_view(
    tasks: Iterable[Task],
    filter_priority: FilterPriority = FILTER_ALL,
    sort_mode: SortMode | str = SortMode.PRIORITY,
) -> List[Task]:
    return sort_tasks(filter_tasks(tasks, filter_priority), sort_mode)
