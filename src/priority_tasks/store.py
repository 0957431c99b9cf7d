"""Copy-on-writeなタスクストア

全ての操作は新しいTaskStoreを返し、入力側のストアは変更しない。
不正な入力（空テキスト・存在しないID・不正な優先度）は例外にせず、
元のストアをそのまま返す。
"""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Iterator, Optional

from .models import Task, parse_priority

logger = logging.getLogger(__name__)


class TaskStore:
    """IDをキーにしたタスクの正本コレクション。"""

    __slots__ = ("_tasks", "_last_id")

    def __init__(self, tasks: Iterable[Task] = (), *, last_id: int = 0):
        self._tasks: Dict[int, Task] = {}
        for task in tasks:
            self._tasks[task.id] = task
        # 削除済みIDも含め、この系列で発行済みの最大ID
        self._last_id = max([last_id, *self._tasks.keys()])

    @staticmethod
    def _now() -> datetime:
        return datetime.now(timezone.utc)

    def _derive(self, tasks: Dict[int, Task], last_id: Optional[int] = None) -> "TaskStore":
        store = TaskStore.__new__(TaskStore)
        store._tasks = tasks
        store._last_id = self._last_id if last_id is None else last_id
        return store

    def _next_id(self, created_at: datetime) -> int:
        candidate = int(created_at.timestamp() * 1000)
        return candidate if candidate > self._last_id else self._last_id + 1

    @property
    def last_id(self) -> int:
        return self._last_id

    def list(self) -> list[Task]:
        return list(self._tasks.values())

    def get(self, task_id: int) -> Optional[Task]:
        return self._tasks.get(task_id)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._tasks.values()))

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, TaskStore):
            return NotImplemented
        return self.list() == other.list()

    def __hash__(self) -> int:
        return hash(tuple(self._tasks.values()))

    def __repr__(self) -> str:
        return f"TaskStore({self.list()!r})"

    def create(self, text: str, priority: Any, now: Optional[datetime] = None) -> "TaskStore":
        """タスクを追加した新しいストアを返す。

        Args:
            text: タスク本文（前後空白のみの場合は追加しない）
            priority: high / medium / low
            now: 作成日時（省略時は現在のUTC時刻）
        """
        if not isinstance(text, str) or not text.strip():
            logger.debug("Ignoring task creation with empty text")
            return self

        level = parse_priority(priority)
        if level is None:
            logger.debug("Ignoring task creation with invalid priority: %r", priority)
            return self

        created_at = now if now is not None else self._now()
        task_id = self._next_id(created_at)
        task = Task(id=task_id, text=text, priority=level, created_at=created_at)

        tasks = dict(self._tasks)
        tasks[task_id] = task
        logger.debug("Created task %s (%s)", task_id, level.value)
        return self._derive(tasks, last_id=task_id)

    def toggle_complete(self, task_id: int) -> "TaskStore":
        task = self._tasks.get(task_id)
        if task is None:
            logger.debug("Ignoring toggle for unknown task id %s", task_id)
            return self

        tasks = dict(self._tasks)
        tasks[task_id] = replace(task, completed=not task.completed)
        return self._derive(tasks)

    def delete(self, task_id: int) -> "TaskStore":
        if task_id not in self._tasks:
            logger.debug("Ignoring delete for unknown task id %s", task_id)
            return self

        tasks = {key: task for key, task in self._tasks.items() if key != task_id}
        return self._derive(tasks)

    def set_priority(self, task_id: int, new_priority: Any) -> "TaskStore":
        """優先度を変更する。完了済みタスクも対象。"""
        task = self._tasks.get(task_id)
        level = parse_priority(new_priority)
        if task is None or level is None:
            logger.debug(
                "Ignoring priority change for task %s to %r", task_id, new_priority
            )
            return self

        tasks = dict(self._tasks)
        tasks[task_id] = replace(task, priority=level)
        return self._derive(tasks)
