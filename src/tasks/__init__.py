"""Task tracking core shared by the HTTP API and the CLI."""

from .exceptions import (
    StorageReadError,
    StorageWriteError,
    StoreAlreadyLoadedError,
    StoreNotReadyError,
    TaskStoreError,
)
from .models import StoreState, Task, TaskFilter
from .storage import KeyValueStorage, MemoryKeyValueStorage, SqliteKeyValueStorage
from .store import TaskStore, create_task_store

__all__ = [
    "Task",
    "TaskFilter",
    "StoreState",
    "TaskStore",
    "create_task_store",
    "KeyValueStorage",
    "MemoryKeyValueStorage",
    "SqliteKeyValueStorage",
    "TaskStoreError",
    "StoreNotReadyError",
    "StoreAlreadyLoadedError",
    "StorageReadError",
    "StorageWriteError",
]
