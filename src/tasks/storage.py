"""永続化スロット（キー/値ストレージ）

ブラウザの localStorage と同じ契約: 文字列キーに文字列値を1つ保存し、
読み出しは存在しなければ None を返す。書き込みは上書きで同期的に完了する。
"""

from __future__ import annotations

import logging
import os
import sqlite3
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional

from .exceptions import StorageReadError, StorageWriteError

logger = logging.getLogger(__name__)


class KeyValueStorage(ABC):
    """キー/値ストレージの共通インターフェース"""

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        """値を取得（存在しなければ None）

        Raises:
            StorageReadError: 読み出しに失敗した場合
        """

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        """値を上書き保存

        Raises:
            StorageWriteError: 書き込みに失敗した場合
        """

    @abstractmethod
    def remove_item(self, key: str) -> None:
        """値を削除（存在しなければ何もしない）"""


class MemoryKeyValueStorage(KeyValueStorage):
    """プロセス内のみで保持するストレージ（テスト・一時利用向け）"""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)


class SqliteKeyValueStorage(KeyValueStorage):
    """SQLiteベースの永続キー/値ストレージ。

    DBファイルが壊れていても生成・読み出しでは落とさず、読み出しは
    StorageReadError、書き込みは StorageWriteError として呼び出し側に返す。
    """

    def __init__(self, db_path: Optional[Path] = None):
        root = Path(__file__).resolve().parents[2]
        default_path = root / "data" / "task_tracker.db"
        env_path = os.getenv("TASK_TRACKER_DB_PATH")
        if db_path:
            self.db_path = Path(db_path)
        elif env_path:
            self.db_path = Path(env_path)
        else:
            self.db_path = default_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._initialize()

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        return conn

    @staticmethod
    def _create_table(conn: sqlite3.Connection) -> None:
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS key_value (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            """
        )

    def _initialize(self) -> None:
        try:
            with self._connect() as conn:
                self._create_table(conn)
                conn.commit()
        except sqlite3.Error as exc:
            logger.warning("Cannot initialize key-value table in %s: %s", self.db_path, exc)

    def get_item(self, key: str) -> Optional[str]:
        try:
            with self._connect() as conn:
                row = conn.execute("SELECT value FROM key_value WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as exc:
            raise StorageReadError(f"Failed to read key {key!r} from {self.db_path}: {exc}") from exc
        return row["value"] if row else None

    def set_item(self, key: str, value: str) -> None:
        try:
            with self._connect() as conn:
                self._create_table(conn)
                conn.execute(
                    """
                    INSERT INTO key_value (key, value) VALUES (?, ?)
                    ON CONFLICT(key) DO UPDATE SET value = excluded.value
                    """,
                    (key, value),
                )
                conn.commit()
        except (sqlite3.Error, OSError) as exc:
            raise StorageWriteError(f"Failed to write key {key!r} to {self.db_path}: {exc}") from exc
        logger.debug("Stored key=%s bytes=%d", key, len(value.encode("utf-8")))

    def remove_item(self, key: str) -> None:
        try:
            with self._connect() as conn:
                conn.execute("DELETE FROM key_value WHERE key = ?", (key,))
                conn.commit()
        except (sqlite3.Error, OSError) as exc:
            raise StorageWriteError(f"Failed to remove key {key!r} from {self.db_path}: {exc}") from exc
