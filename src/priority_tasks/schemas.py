"""Pydantic schemas for JSON output of the task session."""

from __future__ import annotations

from datetime import datetime
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .board import BoardState
from .models import Priority, SortMode, Task
from .stats import PriorityStats


class TaskResponse(BaseModel):
    """Serialized task."""

    model_config = ConfigDict(use_enum_values=True)

    id: int
    text: str = Field(..., min_length=1)
    completed: bool
    priority: Priority
    priority_label: str
    created_at: datetime


class StatsResponse(BaseModel):
    """Open task counts per priority."""

    high: int = Field(default=0, ge=0)
    medium: int = Field(default=0, ge=0)
    low: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)


class ViewResponse(BaseModel):
    """Filtered and sorted task list with the selection that produced it."""

    model_config = ConfigDict(use_enum_values=True)

    filter: str
    sort: SortMode
    selected_priority: Priority
    tasks: List[TaskResponse]
    stats: StatsResponse


def serialize_task(task: Task) -> TaskResponse:
    """Convert domain Task to a response model."""
    return TaskResponse(
        id=task.id,
        text=task.text,
        completed=task.completed,
        priority=task.priority,
        priority_label=task.priority.label,
        created_at=task.created_at,
    )


def serialize_stats(stats: PriorityStats) -> StatsResponse:
    return StatsResponse(**stats.as_dict())


def serialize_view(state: BoardState) -> ViewResponse:
    """Build the full view payload from the current board state."""
    filter_value = state.filter_priority
    return ViewResponse(
        filter=filter_value.value if isinstance(filter_value, Priority) else filter_value,
        sort=state.sort_mode,
        selected_priority=state.selected_priority,
        tasks=[serialize_task(task) for task in state.visible_tasks()],
        stats=serialize_stats(state.stats()),
    )
