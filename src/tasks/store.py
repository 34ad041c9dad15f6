"""TaskStore: タスクリスト・表示フィルタ・永続化境界を管理する

タスクリストの変更はすべてこのクラスのメソッドを経由し、変更のたびに
全件をキー "tasks" へ同期的に書き戻す。表示フィルタはメモリ上のみ。
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import date
from pathlib import Path
from typing import TYPE_CHECKING, Callable, Iterable, List, Optional, Tuple, Union

from .exceptions import StorageReadError, StorageWriteError, StoreAlreadyLoadedError, StoreNotReadyError
from .models import StoreState, Task, TaskFilter, format_date_added
from .serialization import decode_tasks, encode_tasks
from .storage import KeyValueStorage, SqliteKeyValueStorage

if TYPE_CHECKING:
    from src.task_tracker.config import Config

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "tasks"


class TaskStore:
    """タスクリストの唯一の所有者。

    Args:
        storage: 永続化スロット
        key: 保存キー（既定 "tasks"）
        date_format: 作成日の strftime 形式（None なら M/D/YYYY）
        today: 作成日の取得関数（テスト用に差し替え可能）
        autoload: True なら生成時に load() まで行う
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        date_format: Optional[str] = None,
        today: Callable[[], date] = date.today,
        autoload: bool = True,
    ):
        self._storage = storage
        self._key = key
        self._date_format = date_format
        self._today = today
        self._lock = threading.RLock()
        self._tasks: Tuple[Task, ...] = ()
        self._filter = TaskFilter.ALL
        self._next_id = 1
        self._state = StoreState.UNINITIALIZED
        if autoload:
            self.load()

    # ---- lifecycle ----

    @property
    def state(self) -> StoreState:
        return self._state

    def load(self) -> None:
        """保存済みタスクを読み込み READY に遷移する（1回のみ）。

        値が無い・壊れている・読み出せない場合は空リストで開始する。
        """
        with self._lock:
            if self._state is StoreState.READY:
                raise StoreAlreadyLoadedError("TaskStore is already loaded")

            try:
                raw = self._storage.get_item(self._key)
            except StorageReadError as exc:
                logger.warning("Cannot read stored tasks under key=%s; starting empty: %s", self._key, exc)
                raw = None
            tasks: List[Task] = []
            if raw is not None:
                try:
                    tasks = decode_tasks(raw)
                except ValueError as exc:
                    logger.warning("Ignoring malformed stored tasks under key=%s: %s", self._key, exc)
                    tasks = []

            self._tasks = tuple(self._drop_duplicate_ids(tasks))
            self._next_id = max((task.id for task in self._tasks), default=0) + 1
            self._filter = TaskFilter.ALL
            self._state = StoreState.READY
            logger.info("TaskStore ready key=%s total=%d", self._key, len(self._tasks))

    @staticmethod
    def _drop_duplicate_ids(tasks: Iterable[Task]) -> List[Task]:
        seen: set[int] = set()
        unique: List[Task] = []
        for task in tasks:
            if task.id in seen:
                logger.warning("Dropping stored task with duplicate id=%s", task.id)
                continue
            seen.add(task.id)
            unique.append(task)
        return unique

    def _ensure_ready(self) -> None:
        if self._state is not StoreState.READY:
            raise StoreNotReadyError("TaskStore.load() has not been called")

    # ---- read side ----

    @property
    def tasks(self) -> Tuple[Task, ...]:
        """全タスクのスナップショット（正規順）"""
        self._ensure_ready()
        return self._tasks

    @property
    def filter(self) -> TaskFilter:
        self._ensure_ready()
        return self._filter

    def get_task(self, task_id: int) -> Optional[Task]:
        self._ensure_ready()
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    def visible_tasks(self) -> List[Task]:
        """現在のフィルタに一致するタスクを正規順で返す（副作用なし）"""
        self._ensure_ready()
        return [task for task in self._tasks if self._filter.matches(task)]

    # ---- mutations ----

    def add_task(self, name: str) -> Optional[Task]:
        """タスクを末尾に追加する。空白のみの名前は何もせず None を返す。"""
        with self._lock:
            self._ensure_ready()
            trimmed = (name or "").strip()
            if not trimmed:
                logger.debug("Rejected blank task name")
                return None

            task = Task(
                id=self._next_id,
                name=trimmed,
                date_added=format_date_added(self._today(), self._date_format),
                completed=False,
            )
            self._next_id += 1
            self._commit(self._tasks + (task,))
            logger.debug("Task added id=%s name=%r", task.id, task.name)
            return task

    def delete_task(self, task_id: int) -> None:
        with self._lock:
            self._ensure_ready()
            remaining = tuple(task for task in self._tasks if task.id != task_id)
            if len(remaining) == len(self._tasks):
                logger.debug("delete_task: unknown id=%s", task_id)
            self._commit(remaining)

    def toggle_task(self, task_id: int) -> None:
        with self._lock:
            self._ensure_ready()
            updated = tuple(
                replace(task, completed=not task.completed) if task.id == task_id else task
                for task in self._tasks
            )
            self._commit(updated)

    def reorder_tasks(self, new_order: Iterable[int]) -> None:
        """new_order の順にタスクを並べ替える。

        new_order に無いタスクは元の相対順を保って末尾に残す。
        未知のIDと重複IDは無視する。
        """
        with self._lock:
            self._ensure_ready()
            by_id = {task.id: task for task in self._tasks}
            ordered: List[Task] = []
            for task_id in new_order:
                task = by_id.pop(task_id, None)
                if task is not None:
                    ordered.append(task)
            ordered.extend(task for task in self._tasks if task.id in by_id)
            self._commit(tuple(ordered))

    def move_task(self, task_id: int, to_index: int) -> None:
        """ドラッグ&ドロップ1回分: task_id を全体リストの to_index へ移動する。"""
        with self._lock:
            self._ensure_ready()
            ids = [task.id for task in self._tasks]
            if task_id not in ids:
                logger.debug("move_task: unknown id=%s", task_id)
                return
            ids.remove(task_id)
            to_index = max(0, min(to_index, len(ids)))
            ids.insert(to_index, task_id)
            self.reorder_tasks(ids)

    def set_filter(self, task_filter: Union[TaskFilter, str]) -> None:
        """表示フィルタを設定する（永続化しない）

        Raises:
            ValueError: 不明なフィルタ値
        """
        with self._lock:
            self._ensure_ready()
            self._filter = TaskFilter(task_filter)

    # ---- persistence ----

    def _commit(self, tasks: Tuple[Task, ...]) -> None:
        """新しいスナップショットを採用し、全件を保存する。

        書き込みに失敗してもメモリ上の変更は保持し、StorageWriteError を送出する。
        """
        self._tasks = tasks
        try:
            self._storage.set_item(self._key, encode_tasks(tasks))
        except StorageWriteError:
            logger.exception("Failed to persist %d tasks under key=%s", len(tasks), self._key)
            raise


def create_task_store(config: "Config", db_path: Optional[Path] = None) -> TaskStore:
    """設定からSQLiteバックエンドのTaskStoreを組み立てる"""
    storage = SqliteKeyValueStorage(db_path=Path(db_path) if db_path else config.resolve_db_path())
    return TaskStore(
        storage,
        key=config.storage.key,
        date_format=config.tasks.date_format,
    )
