"""Summary counts of open tasks per priority."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Dict, Iterable

from .models import Priority, Task


@dataclass(frozen=True, slots=True)
class PriorityStats:
    high: int = 0
    medium: int = 0
    low: int = 0
    total: int = 0

    def as_dict(self) -> Dict[str, int]:
        return asdict(self)


def compute_stats(tasks: Iterable[Task]) -> PriorityStats:
    """Count incomplete tasks by priority. Completed tasks are not counted."""
    counts = {level: 0 for level in Priority}
    for task in tasks:
        if not task.completed:
            counts[task.priority] += 1
    return PriorityStats(
        high=counts[Priority.HIGH],
        medium=counts[Priority.MEDIUM],
        low=counts[Priority.LOW],
        total=sum(counts.values()),
    )


def count_completed(tasks: Iterable[Task]) -> int:
    return sum(1 for task in tasks if task.completed)
