"""
設定管理モジュール

関連クラス:
  - tasks.store.TaskStore: storage/tasks設定を使用するメインクラス
  - server.dependencies: この設定からTaskStoreを組み立てる
"""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

logger = logging.getLogger(__name__)

PROJECT_ROOT = Path(__file__).parent.parent.parent


@dataclass
class StorageConfig:
    """永続化スロット設定"""

    db_path: str = "data/task_tracker.db"
    key: str = "tasks"


@dataclass
class TasksConfig:
    """タスク生成設定"""

    # None の場合は M/D/YYYY（ブラウザ既定のロケール表記）
    date_format: Optional[str] = None


@dataclass
class Config:
    """アプリケーション設定クラス"""

    storage: StorageConfig = None  # type: ignore
    tasks: TasksConfig = None  # type: ignore

    # ログ設定
    log_level: str = "INFO"
    log_file: str = "logs/task_tracker.log"

    def __post_init__(self):
        """デフォルト値の初期化"""
        if self.storage is None:
            self.storage = StorageConfig()
        if self.tasks is None:
            self.tasks = TasksConfig()

    def resolve_db_path(self) -> Path:
        """DBファイルの絶対パスを返す（環境変数 TASK_TRACKER_DB_PATH が優先）"""
        env_path = os.getenv("TASK_TRACKER_DB_PATH")
        if env_path:
            return Path(env_path)
        path = Path(self.storage.db_path)
        if not path.is_absolute():
            path = PROJECT_ROOT / path
        return path

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "Config":
        """YAMLファイルから設定を読み込む

        Args:
            config_path: 設定ファイルパス（省略時は TASK_TRACKER_CONFIG、
                なければ config/app_config.yaml を使用）

        Returns:
            Config: 設定インスタンス（ファイルが無い場合はデフォルト値）
        """
        if config_path is None:
            env_path = os.getenv("TASK_TRACKER_CONFIG")
            config_path = Path(env_path) if env_path else PROJECT_ROOT / "config" / "app_config.yaml"

        config_path = Path(config_path)
        if not config_path.exists():
            logger.info("Config file %s not found; using defaults", config_path)
            return cls()

        with open(config_path, "r", encoding="utf-8") as f:
            yaml_data: Dict[str, Any] = yaml.safe_load(f) or {}

        # YAML構造から設定を抽出
        storage_data = yaml_data.get("storage") or {}
        tasks_data = yaml_data.get("tasks") or {}
        log_data = yaml_data.get("log") or {}

        return cls(
            storage=StorageConfig(
                db_path=storage_data.get("db_path", "data/task_tracker.db"),
                key=storage_data.get("key", "tasks"),
            ),
            tasks=TasksConfig(
                date_format=tasks_data.get("date_format"),
            ),
            log_level=log_data.get("level", "INFO"),
            log_file=log_data.get("file", "logs/task_tracker.log"),
        )

    @classmethod
    def from_env(cls) -> "Config":
        """環境変数から設定を読み込む"""
        return cls(
            storage=StorageConfig(
                db_path=os.getenv("TASK_TRACKER_DB_PATH", "data/task_tracker.db"),
                key=os.getenv("TASK_TRACKER_STORAGE_KEY", "tasks"),
            ),
            tasks=TasksConfig(
                date_format=os.getenv("TASK_TRACKER_DATE_FORMAT"),
            ),
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_file=os.getenv("LOG_FILE", "logs/task_tracker.log"),
        )
