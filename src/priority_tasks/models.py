"""優先度付きタスクのデータモデル

Related Classes:
  - store.TaskStore: Taskの生成・更新を担当
  - view.build_view: 表示用の絞り込み・並び替え
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, Union


class Priority(str, Enum):
    """固定3段階の優先度。"""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def label(self) -> str:
        return PRIORITY_LEVELS[self]["label"]

    @property
    def rank(self) -> int:
        return PRIORITY_LEVELS[self]["rank"]


# 表示ラベルと並び替え用ランク（大きいほど優先）
PRIORITY_LEVELS: Dict[Priority, Dict[str, Any]] = {
    Priority.HIGH: {"label": "High", "rank": 3},
    Priority.MEDIUM: {"label": "Medium", "rank": 2},
    Priority.LOW: {"label": "Low", "rank": 1},
}


class SortMode(str, Enum):
    """完了状態の次に適用される並び替えキー。"""

    PRIORITY = "priority"
    CREATED = "created"
    ALPHABETICAL = "alphabetical"


# 絞り込みなしを表すフィルタ値
FILTER_ALL = "all"

FilterPriority = Union[Priority, str]


def parse_priority(value: Any) -> Optional[Priority]:
    """文字列/Priorityを検証してPriorityに変換する。不正値はNone。"""
    if isinstance(value, Priority):
        return value
    if isinstance(value, str):
        try:
            return Priority(value.strip().lower())
        except ValueError:
            return None
    return None


def parse_filter(value: Any) -> Optional[FilterPriority]:
    """フィルタ値を FILTER_ALL または Priority に変換する。不正値はNone。"""
    if isinstance(value, str) and value.strip().lower() == FILTER_ALL:
        return FILTER_ALL
    return parse_priority(value)


def parse_sort_mode(value: Any) -> Optional[SortMode]:
    """文字列/SortModeを検証してSortModeに変換する。不正値はNone。"""
    if isinstance(value, SortMode):
        return value
    if isinstance(value, str):
        try:
            return SortMode(value.strip().lower())
        except ValueError:
            return None
    return None


@dataclass(frozen=True, slots=True)
class Task:
    """単一タスクの表現。変更はdataclasses.replaceで新しい値を作る。"""

    id: int
    text: str
    priority: Priority
    created_at: datetime
    completed: bool = False
