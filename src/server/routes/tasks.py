"""Task endpoints."""

from __future__ import annotations

import asyncio
import logging
from typing import Callable, Optional

from fastapi import FastAPI, HTTPException

from src.tasks import StorageWriteError, TaskStore

from ..dependencies import get_task_store, serialize_task, serialize_task_list
from ..schemas import (
    FilterRequest,
    TaskCreateRequest,
    TaskListResponse,
    TaskMoveRequest,
    TaskReorderRequest,
    TaskResponse,
)

logger = logging.getLogger(__name__)


async def _mutate_and_project(action: Callable[[TaskStore], None], failure: str) -> TaskListResponse:
    """Apply one store mutation, then return the re-projected visible list."""
    store = get_task_store()

    def run() -> TaskListResponse:
        action(store)
        return serialize_task_list(store)

    try:
        return await asyncio.to_thread(run)
    except StorageWriteError as exc:
        logger.exception("%s: %s", failure, exc)
        raise HTTPException(status_code=500, detail=failure) from exc


def register_task_routes(app: FastAPI) -> None:
    """Register task endpoints."""

    @app.get("/api/tasks", response_model=TaskListResponse)
    async def list_tasks() -> TaskListResponse:
        """List tasks visible under the current filter."""
        store = get_task_store()
        return await asyncio.to_thread(serialize_task_list, store)

    @app.post("/api/tasks", response_model=Optional[TaskResponse])
    async def create_task(request: TaskCreateRequest) -> Optional[TaskResponse]:
        """Append a task. Returns null when the name is blank."""
        store = get_task_store()
        try:
            task = await asyncio.to_thread(store.add_task, request.name)
        except StorageWriteError as exc:
            logger.exception("Failed to save new task: %s", exc)
            raise HTTPException(status_code=500, detail="Failed to save task") from exc
        return serialize_task(task) if task else None

    @app.delete("/api/tasks/{task_id}", response_model=TaskListResponse)
    async def delete_task(task_id: int) -> TaskListResponse:
        """Delete a task. Unknown ids are ignored."""
        return await _mutate_and_project(
            lambda store: store.delete_task(task_id), "Failed to delete task"
        )

    @app.post("/api/tasks/{task_id}/toggle", response_model=TaskListResponse)
    async def toggle_task(task_id: int) -> TaskListResponse:
        """Flip a task's completion flag. Unknown ids are ignored."""
        return await _mutate_and_project(
            lambda store: store.toggle_task(task_id), "Failed to toggle task"
        )

    @app.put("/api/tasks/order", response_model=TaskListResponse)
    async def reorder_tasks(request: TaskReorderRequest) -> TaskListResponse:
        """Reorder tasks; omitted ids keep their relative order at the end."""
        return await _mutate_and_project(
            lambda store: store.reorder_tasks(request.ids), "Failed to reorder tasks"
        )

    @app.post("/api/tasks/{task_id}/move", response_model=TaskListResponse)
    async def move_task(task_id: int, request: TaskMoveRequest) -> TaskListResponse:
        """Move one task to a new position (drag-and-drop drop target)."""
        return await _mutate_and_project(
            lambda store: store.move_task(task_id, request.index), "Failed to move task"
        )

    @app.get("/api/filter", response_model=TaskListResponse)
    async def get_filter() -> TaskListResponse:
        """Current filter together with the tasks it exposes."""
        store = get_task_store()
        return await asyncio.to_thread(serialize_task_list, store)

    @app.put("/api/filter", response_model=TaskListResponse)
    async def set_filter(request: FilterRequest) -> TaskListResponse:
        """Change the view filter. Not persisted."""
        store = get_task_store()

        def run() -> TaskListResponse:
            store.set_filter(request.filter)
            return serialize_task_list(store)

        return await asyncio.to_thread(run)
