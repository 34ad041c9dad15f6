"""Dependency helpers shared across FastAPI routes."""

from __future__ import annotations

from functools import lru_cache

from src.task_tracker.config import Config
from src.task_tracker.logger import setup_logger
from src.tasks import Task, TaskStore, create_task_store

from .schemas import TaskListResponse, TaskResponse

config = Config.from_yaml()
setup_logger(log_level=config.log_level, log_file=config.log_file)


@lru_cache(maxsize=1)
def get_task_store() -> TaskStore:
    """Singleton TaskStore loaded from the configured storage slot."""
    return create_task_store(config)


def serialize_task(task: Task) -> TaskResponse:
    """Convert domain Task to API response."""
    return TaskResponse(
        id=task.id,
        name=task.name,
        date_added=task.date_added,
        completed=task.completed,
    )


def serialize_task_list(store: TaskStore) -> TaskListResponse:
    """Project the store's visible tasks into an API response."""
    return TaskListResponse(
        filter=store.filter,
        tasks=[serialize_task(task) for task in store.visible_tasks()],
    )
