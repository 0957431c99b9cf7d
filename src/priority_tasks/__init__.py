"""Priority task list core: task store, view builder and stats shared by the CLI session."""

from .board import BoardState
from .models import FILTER_ALL, PRIORITY_LEVELS, Priority, SortMode, Task
from .stats import PriorityStats, compute_stats
from .store import TaskStore
from .view import build_view, filter_tasks, sort_tasks

__all__ = [
    "BoardState",
    "FILTER_ALL",
    "PRIORITY_LEVELS",
    "Priority",
    "PriorityStats",
    "SortMode",
    "Task",
    "TaskStore",
    "build_view",
    "compute_stats",
    "filter_tasks",
    "sort_tasks",
]
