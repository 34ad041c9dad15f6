from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Optional


class TaskFilter(str, Enum):
    """表示フィルタ。永続化されず、ロード直後は常に ALL。"""

    ALL = "all"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"

    def matches(self, task: "Task") -> bool:
        if self is TaskFilter.ALL:
            return True
        return task.completed == (self is TaskFilter.COMPLETED)


class StoreState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"


@dataclass(frozen=True, slots=True)
class Task:
    """タスク1件の表現。変更は dataclasses.replace で新しいインスタンスを作る。"""

    id: int
    name: str
    date_added: str  # ロケール表記の作成日（作成後は不変）
    completed: bool = False


def format_date_added(day: date, date_format: Optional[str] = None) -> str:
    """作成日を表示用文字列に変換する。

    date_format が無い場合は M/D/YYYY（例: 10/19/2026）。
    """
    if date_format:
        return day.strftime(date_format)
    return f"{day.month}/{day.day}/{day.year}"
