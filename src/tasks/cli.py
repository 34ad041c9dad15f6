#!/usr/bin/env python3
"""
タスク管理CLI

Usage:
    python -m src.tasks list [--filter all|completed|incomplete] [--format json|text]
    python -m src.tasks add --name "タスク名" [--format json|text]
    python -m src.tasks toggle --id ID [--format json|text]
    python -m src.tasks delete --id ID [--format json|text]
    python -m src.tasks reorder --ids ID [ID ...] [--format json|text]
    python -m src.tasks move --id ID --index N [--format json|text]
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, List, Optional

from src.task_tracker.config import Config
from src.task_tracker.logger import setup_logger

from .exceptions import StorageWriteError
from .models import Task, TaskFilter
from .store import TaskStore, create_task_store

EMPTY_MESSAGE = "No tasks available."


def format_task_text(task: Task) -> str:
    """タスクをテキスト形式で整形"""
    mark = "x" if task.completed else " "
    return f"[{mark}] {task.id}: {task.name} (Added on {task.date_added})"


def format_task_json(task: Task) -> Dict[str, Any]:
    """タスクを保存形式と同じキーの辞書に変換"""
    return {
        "id": task.id,
        "name": task.name,
        "dateAdded": task.date_added,
        "completed": task.completed,
    }


def print_tasks(tasks: List[Task], output_format: str) -> None:
    if output_format == "json":
        print(json.dumps([format_task_json(task) for task in tasks], ensure_ascii=False))
    elif not tasks:
        print(EMPTY_MESSAGE)
    else:
        for task in tasks:
            print(format_task_text(task))


def cmd_list(store: TaskStore, task_filter: str, output_format: str) -> int:
    """フィルタ適用後のタスクを表示"""
    store.set_filter(task_filter)
    print_tasks(store.visible_tasks(), output_format)
    return 0


def cmd_add(store: TaskStore, name: str, output_format: str) -> int:
    """新しいタスクを追加（空白のみの名前は何もしない）"""
    task = store.add_task(name)
    if task is None:
        if output_format == "json":
            print("null")
        return 0

    if output_format == "json":
        print(json.dumps(format_task_json(task), ensure_ascii=False))
    else:
        print(f"Added: {format_task_text(task)}")
    return 0


def cmd_toggle(store: TaskStore, task_id: int, output_format: str) -> int:
    """完了状態を反転"""
    store.toggle_task(task_id)
    task = store.get_task(task_id)
    if output_format == "json":
        print(json.dumps(format_task_json(task) if task else None, ensure_ascii=False))
    elif task:
        print(format_task_text(task))
    return 0


def cmd_delete(store: TaskStore, task_id: int, output_format: str) -> int:
    """タスクを削除（存在しないIDは何もしない）"""
    existed = store.get_task(task_id) is not None
    store.delete_task(task_id)
    if output_format == "json":
        print(json.dumps({"deleted": existed, "id": task_id}))
    elif existed:
        print(f"Deleted: {task_id}")
    return 0


def cmd_reorder(store: TaskStore, ids: List[int], output_format: str) -> int:
    """指定順に並べ替え、結果の全件を表示"""
    store.reorder_tasks(ids)
    print_tasks(list(store.tasks), output_format)
    return 0


def cmd_move(store: TaskStore, task_id: int, index: int, output_format: str) -> int:
    """1件を指定位置へ移動し、結果の全件を表示"""
    store.move_task(task_id, index)
    print_tasks(list(store.tasks), output_format)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Task tracker CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument(
        "--db-path",
        type=str,
        help="SQLiteデータベースファイルのパス（デフォルト: 設定ファイルの storage.db_path）",
    )
    parser.add_argument("--config", type=str, help="設定ファイル（YAML）のパス")

    subparsers = parser.add_subparsers(dest="command", help="実行するコマンド", required=True)

    def add_format(sub: argparse.ArgumentParser) -> None:
        sub.add_argument(
            "--format",
            choices=["json", "text"],
            default="text",
            help="出力フォーマット（デフォルト: text）",
        )

    parser_list = subparsers.add_parser("list", help="タスクを表示")
    parser_list.add_argument(
        "--filter",
        choices=[f.value for f in TaskFilter],
        default=TaskFilter.ALL.value,
        help="表示フィルタ（デフォルト: all）",
    )
    add_format(parser_list)

    parser_add = subparsers.add_parser("add", help="新しいタスクを追加")
    parser_add.add_argument("--name", required=True, help="タスク名")
    add_format(parser_add)

    parser_toggle = subparsers.add_parser("toggle", help="完了/未完了を切り替え")
    parser_toggle.add_argument("--id", type=int, required=True, help="対象タスクのID")
    add_format(parser_toggle)

    parser_delete = subparsers.add_parser("delete", help="タスクを削除")
    parser_delete.add_argument("--id", type=int, required=True, help="削除するタスクのID")
    add_format(parser_delete)

    parser_reorder = subparsers.add_parser("reorder", help="タスクを並べ替え")
    parser_reorder.add_argument("--ids", type=int, nargs="+", required=True, help="新しい順序のID列")
    add_format(parser_reorder)

    parser_move = subparsers.add_parser("move", help="タスクを指定位置へ移動")
    parser_move.add_argument("--id", type=int, required=True, help="移動するタスクのID")
    parser_move.add_argument("--index", type=int, required=True, help="移動先の位置（0始まり）")
    add_format(parser_move)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLIエントリポイント"""
    args = build_parser().parse_args(argv)

    config = Config.from_yaml(args.config)
    setup_logger(config.log_level, config.log_file, console_level="WARNING")
    store = create_task_store(config, db_path=args.db_path)

    try:
        if args.command == "list":
            return cmd_list(store, args.filter, args.format)
        elif args.command == "add":
            return cmd_add(store, args.name, args.format)
        elif args.command == "toggle":
            return cmd_toggle(store, args.id, args.format)
        elif args.command == "delete":
            return cmd_delete(store, args.id, args.format)
        elif args.command == "reorder":
            return cmd_reorder(store, args.ids, args.format)
        elif args.command == "move":
            return cmd_move(store, args.id, args.index, args.format)
        else:
            print(f"Error: unknown command: {args.command}", file=sys.stderr)
            return 1
    except StorageWriteError as exc:
        print(f"Error: failed to save tasks: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
