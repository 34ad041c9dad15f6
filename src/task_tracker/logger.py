"""
ロギング設定モジュール

サーバーはコンソールにも同じレベルで出力し、CLIはコンソールを
WARNING 以上に絞って標準出力の結果表示を邪魔しないようにする。
"""

import logging
from pathlib import Path
from typing import Optional


def _level(name: str) -> int:
    return getattr(logging, name.upper(), logging.INFO)


def setup_logger(
    log_level: str = "INFO",
    log_file: str = "logs/task_tracker.log",
    console_level: Optional[str] = None,
) -> None:
    """
    ロガーのセットアップ

    Args:
        log_level: ファイルに書くログレベル (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: ログファイルのパス
        console_level: 標準エラー出力のログレベル（省略時は log_level と同じ）
    """
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(_level(log_level))

    stream_handler = logging.StreamHandler()
    stream_handler.setLevel(_level(console_level or log_level))

    # 再呼び出し時はハンドラを差し替える
    logging.basicConfig(
        level=min(file_handler.level, stream_handler.level),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[file_handler, stream_handler],
        force=True,
    )
