"""Caller-owned board state threaded through the task core.

A BoardState bundles the canonical TaskStore with the selection state of the
UI (creation priority, filter, sort mode). Every operation returns a new
state; invalid selections leave the state unchanged.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, List, Optional

from .config import Config
from .models import (
    FILTER_ALL,
    FilterPriority,
    Priority,
    SortMode,
    Task,
    parse_filter,
    parse_priority,
    parse_sort_mode,
)
from .stats import PriorityStats, compute_stats
from .store import TaskStore
from .view import build_view


@dataclass(frozen=True)
class BoardState:
    store: TaskStore = field(default_factory=TaskStore)
    selected_priority: Priority = Priority.MEDIUM
    filter_priority: FilterPriority = FILTER_ALL
    sort_mode: SortMode = SortMode.PRIORITY

    @classmethod
    def from_config(cls, config: Config) -> "BoardState":
        """Build the initial state from the board section of the config."""
        return cls(
            selected_priority=parse_priority(config.board.default_priority) or Priority.MEDIUM,
            filter_priority=parse_filter(config.board.default_filter) or FILTER_ALL,
            sort_mode=parse_sort_mode(config.board.default_sort) or SortMode.PRIORITY,
        )

    def _with_store(self, store: TaskStore) -> "BoardState":
        if store is self.store:
            return self
        return replace(self, store=store)

    def add_task(self, text: str, now: Optional[datetime] = None) -> "BoardState":
        return self._with_store(self.store.create(text, self.selected_priority, now=now))

    def toggle_task(self, task_id: int) -> "BoardState":
        return self._with_store(self.store.toggle_complete(task_id))

    def delete_task(self, task_id: int) -> "BoardState":
        return self._with_store(self.store.delete(task_id))

    def change_priority(self, task_id: int, priority: Any) -> "BoardState":
        return self._with_store(self.store.set_priority(task_id, priority))

    def select_priority(self, priority: Any) -> "BoardState":
        level = parse_priority(priority)
        if level is None:
            return self
        return replace(self, selected_priority=level)

    def set_filter(self, filter_priority: Any) -> "BoardState":
        value = parse_filter(filter_priority)
        if value is None:
            return self
        return replace(self, filter_priority=value)

    def set_sort(self, sort_mode: Any) -> "BoardState":
        mode = parse_sort_mode(sort_mode)
        if mode is None:
            return self
        return replace(self, sort_mode=mode)

    def visible_tasks(self) -> List[Task]:
        return build_view(self.store, self.filter_priority, self.sort_mode)

    def stats(self) -> PriorityStats:
        return compute_stats(self.store)
