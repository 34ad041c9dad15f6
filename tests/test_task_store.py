"""TaskStore Unit Tests

TaskStoreの単体テスト（MemoryKeyValueStorage使用）
"""

import json
import threading
from datetime import date

import pytest

from src.tasks import (
    MemoryKeyValueStorage,
    StorageWriteError,
    StoreAlreadyLoadedError,
    StoreNotReadyError,
    StoreState,
    TaskFilter,
    TaskStore,
)


def fixed_today() -> date:
    return date(2026, 10, 19)


@pytest.fixture
def storage():
    """テスト用のメモリストレージ"""
    return MemoryKeyValueStorage()


@pytest.fixture
def store(storage):
    """空の状態からロード済みのTaskStore"""
    return TaskStore(storage, today=fixed_today)


def stored_records(storage):
    return json.loads(storage.get_item("tasks"))


def test_concrete_scenario(store):
    """追加→完了→フィルタ切り替えの一連の流れ"""
    task = store.add_task("Buy milk")
    assert task is not None
    assert [(t.name, t.completed) for t in store.tasks] == [("Buy milk", False)]

    store.toggle_task(task.id)
    assert store.get_task(task.id).completed is True

    store.set_filter("incomplete")
    assert store.visible_tasks() == []

    store.set_filter("completed")
    visible = store.visible_tasks()
    assert len(visible) == 1
    assert visible[0].id == task.id


def test_add_task_fields_and_persistence(store, storage):
    """追加したタスクのフィールドと保存内容"""
    task = store.add_task("  Write report  ")

    assert task.name == "Write report"
    assert task.date_added == "10/19/2026"
    assert task.completed is False
    assert stored_records(storage) == [
        {"id": task.id, "name": "Write report", "dateAdded": "10/19/2026", "completed": False}
    ]


@pytest.mark.parametrize("name", ["", "   ", "\t\n"])
def test_blank_names_rejected(store, storage, name):
    """空白のみの名前は何もしない"""
    store.add_task("Existing")
    before = store.tasks
    raw_before = storage.get_item("tasks")

    assert store.add_task(name) is None
    assert store.tasks == before
    assert storage.get_item("tasks") == raw_before


def test_ids_unique_and_not_reused(store):
    """IDは一意で、削除後も再利用されない"""
    first = store.add_task("a")
    second = store.add_task("b")
    store.delete_task(second.id)
    third = store.add_task("c")

    assert len({first.id, second.id, third.id}) == 3
    assert third.id > second.id


def test_toggle_twice_restores_state(store):
    """2回の切り替えで元に戻る"""
    task = store.add_task("Laundry")
    store.toggle_task(task.id)
    store.toggle_task(task.id)
    assert store.get_task(task.id) == task


def test_add_then_delete_is_inverse(store):
    """追加→削除で元のタスク集合に戻る"""
    store.add_task("one")
    done = store.add_task("two")
    store.toggle_task(done.id)
    before = store.tasks

    added = store.add_task("temporary")
    store.delete_task(added.id)

    assert store.tasks == before


def test_unknown_id_is_noop(store):
    """存在しないIDの削除・切り替えは何もしない"""
    task = store.add_task("keep")
    store.delete_task(999)
    store.toggle_task(999)
    store.move_task(999, 0)
    assert store.tasks == (task,)


def test_filter_partition(store):
    """completed と incomplete は all を重複なく分割する"""
    for name in ["a", "b", "c", "d"]:
        store.add_task(name)
    store.toggle_task(store.tasks[1].id)
    store.toggle_task(store.tasks[3].id)

    store.set_filter(TaskFilter.ALL)
    all_ids = [t.id for t in store.visible_tasks()]
    store.set_filter(TaskFilter.COMPLETED)
    completed_ids = [t.id for t in store.visible_tasks()]
    store.set_filter(TaskFilter.INCOMPLETE)
    incomplete_ids = [t.id for t in store.visible_tasks()]

    assert set(completed_ids) | set(incomplete_ids) == set(all_ids)
    assert not set(completed_ids) & set(incomplete_ids)
    # 部分集合でも正規順を保つ
    assert completed_ids == [all_ids[1], all_ids[3]]
    assert incomplete_ids == [all_ids[0], all_ids[2]]


def test_set_filter_does_not_persist(store, storage):
    """フィルタ変更は保存しない"""
    store.add_task("a")
    raw = storage.get_item("tasks")
    store.set_filter("completed")
    assert storage.get_item("tasks") == raw
    assert TaskStore(storage).filter is TaskFilter.ALL


def test_set_filter_rejects_unknown_value(store):
    with pytest.raises(ValueError):
        store.set_filter("archived")


def test_reorder_full_and_partial(store):
    """並べ替え: 指定外のタスクは相対順を保って末尾へ"""
    a, b, c, d = (store.add_task(n) for n in "abcd")

    store.reorder_tasks([d.id, b.id, a.id, c.id])
    assert [t.id for t in store.tasks] == [d.id, b.id, a.id, c.id]

    store.reorder_tasks([c.id, 12345, c.id])
    assert [t.id for t in store.tasks] == [c.id, d.id, b.id, a.id]


def test_move_task(store):
    """ドラッグ&ドロップ相当の移動（範囲外は端に丸める）"""
    a, b, c = (store.add_task(n) for n in "abc")

    store.move_task(a.id, 2)
    assert [t.name for t in store.tasks] == ["b", "c", "a"]

    store.move_task(a.id, -5)
    assert [t.name for t in store.tasks] == ["a", "b", "c"]

    store.move_task(b.id, 99)
    assert [t.name for t in store.tasks] == ["a", "c", "b"]


def test_persistence_round_trip(store, storage):
    """再構築したストアは同じタスク列を持つ"""
    a = store.add_task("Buy milk")
    b = store.add_task("日本語のタスク")
    c = store.add_task("Call mom")
    store.toggle_task(b.id)
    store.reorder_tasks([c.id, a.id])
    store.delete_task(a.id)

    reloaded = TaskStore(storage)
    assert reloaded.tasks == store.tasks
    # 再ロード後のIDも一意
    assert reloaded.add_task("next").id not in {a.id, b.id, c.id}


def test_snapshots_are_immutable(store):
    """変更ごとに新しいスナップショットになる"""
    store.add_task("a")
    snapshot = store.tasks
    store.add_task("b")
    assert len(snapshot) == 1
    assert len(store.tasks) == 2


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "null",
        "{}",
        '[{"id": 1}]',
        '[{"id": "1", "name": "a", "dateAdded": "1/1/2024", "completed": false}]',
        '[{"id": 1, "name": "a", "dateAdded": "1/1/2024", "completed": "yes"}]',
    ],
)
def test_malformed_storage_loads_empty(raw):
    """壊れた保存データは空リストとして扱う"""
    store = TaskStore(MemoryKeyValueStorage({"tasks": raw}))
    assert store.state is StoreState.READY
    assert store.tasks == ()


def test_loads_legacy_timestamp_ids():
    """既存データ（ミリ秒タイムスタンプID）をそのまま読み込む"""
    raw = json.dumps(
        [
            {"id": 1700000000000, "name": "old", "dateAdded": "11/14/2023", "completed": True},
            {"id": 1700000000001, "name": "older", "dateAdded": "11/14/2023", "completed": False},
        ]
    )
    store = TaskStore(MemoryKeyValueStorage({"tasks": raw}))
    assert [t.name for t in store.tasks] == ["old", "older"]
    assert store.add_task("new").id == 1700000000002


def test_duplicate_ids_keep_first():
    """重複IDは最初のレコードを採用"""
    raw = json.dumps(
        [
            {"id": 5, "name": "first", "dateAdded": "1/1/2024", "completed": False},
            {"id": 5, "name": "second", "dateAdded": "1/1/2024", "completed": True},
        ]
    )
    store = TaskStore(MemoryKeyValueStorage({"tasks": raw}))
    assert [t.name for t in store.tasks] == ["first"]


def test_custom_date_format_and_key():
    storage = MemoryKeyValueStorage()
    store = TaskStore(storage, key="my-tasks", date_format="%Y-%m-%d", today=fixed_today)
    store.add_task("a")
    assert store.tasks[0].date_added == "2026-10-19"
    assert storage.get_item("tasks") is None
    assert storage.get_item("my-tasks") is not None


def test_lifecycle_errors(storage):
    """ロード前の操作と二重ロードはエラー"""
    store = TaskStore(storage, autoload=False)
    assert store.state is StoreState.UNINITIALIZED
    with pytest.raises(StoreNotReadyError):
        store.add_task("a")
    with pytest.raises(StoreNotReadyError):
        store.visible_tasks()

    store.load()
    assert store.state is StoreState.READY
    with pytest.raises(StoreAlreadyLoadedError):
        store.load()


class FailingStorage(MemoryKeyValueStorage):
    def set_item(self, key, value):
        raise StorageWriteError("quota exceeded")


def test_write_failure_propagates_and_keeps_memory_state():
    """保存失敗は例外として伝播し、メモリ上の変更は残る"""
    store = TaskStore(FailingStorage())
    with pytest.raises(StorageWriteError):
        store.add_task("unsaved")
    assert [t.name for t in store.tasks] == ["unsaved"]


def test_set_filter_waits_for_running_mutation(store):
    """フィルタ変更は実行中の変更処理の完了を待つ"""
    store._lock.acquire()
    worker = threading.Thread(target=store.set_filter, args=("completed",))
    try:
        worker.start()
        worker.join(0.2)
        assert worker.is_alive()
        assert store.filter is TaskFilter.ALL
    finally:
        store._lock.release()
    worker.join(2)
    assert store.filter is TaskFilter.COMPLETED
