"""Pydantic schemas for the FastAPI server."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from src.tasks import TaskFilter


class TaskResponse(BaseModel):
    """Serialized task (same field names as the stored record)."""

    model_config = ConfigDict(populate_by_name=True)

    id: int
    name: str
    date_added: str = Field(..., alias="dateAdded")
    completed: bool


class TaskListResponse(BaseModel):
    """Tasks visible under the current filter, in canonical order."""

    model_config = ConfigDict(use_enum_values=True)

    filter: TaskFilter
    tasks: List[TaskResponse]


class TaskCreateRequest(BaseModel):
    """Request body for creating a task. Blank names are accepted and ignored."""

    name: str


class TaskReorderRequest(BaseModel):
    """Full or partial ordering of task ids."""

    ids: List[int] = Field(default_factory=list)


class TaskMoveRequest(BaseModel):
    """Drop position for a single dragged task."""

    index: int = Field(..., ge=0)


class FilterRequest(BaseModel):
    """Request body for changing the view filter."""

    filter: TaskFilter
