"""永続化スロットに保存するJSON配列のエンコード/デコード

保存形式: [{"id": 1, "name": "...", "dateAdded": "10/19/2026", "completed": false}, ...]
"""

from __future__ import annotations

import json
from typing import Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter

from .models import Task


class TaskRecord(BaseModel):
    """保存データ1件分のスキーマ"""

    model_config = ConfigDict(strict=True, populate_by_name=True)

    id: int
    name: str
    date_added: str = Field(alias="dateAdded")
    completed: bool

    @classmethod
    def from_task(cls, task: Task) -> "TaskRecord":
        return cls(
            id=task.id,
            name=task.name,
            date_added=task.date_added,
            completed=task.completed,
        )

    def to_task(self) -> Task:
        return Task(
            id=self.id,
            name=self.name,
            date_added=self.date_added,
            completed=self.completed,
        )


_TASK_RECORDS = TypeAdapter(List[TaskRecord])


def encode_tasks(tasks: Iterable[Task]) -> str:
    """タスク列をJSON文字列に変換"""
    payload = [TaskRecord.from_task(task).model_dump(by_alias=True) for task in tasks]
    return json.dumps(payload, ensure_ascii=False)


def decode_tasks(raw: Optional[str]) -> List[Task]:
    """JSON文字列をタスク列に変換

    Raises:
        ValueError: JSONとして不正、または配列/レコードの形が合わない場合
            （pydantic.ValidationError は ValueError のサブクラス）
    """
    if raw is None:
        raise ValueError("no stored value")
    return [record.to_task() for record in _TASK_RECORDS.validate_json(raw)]
