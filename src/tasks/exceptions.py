"""TaskStoreのカスタム例外定義

通常運用で起こる入力エラー（空のタスク名、存在しないID、壊れた保存データ）は
例外ではなく no-op として扱う。ここで定義するのは呼び出し側が知るべき失敗のみ。
"""


class TaskStoreError(Exception):
    """TaskStore基底例外"""

    pass


class StoreNotReadyError(TaskStoreError):
    """load() 前に操作が呼ばれた"""

    pass


class StoreAlreadyLoadedError(TaskStoreError):
    """load() が2回呼ばれた"""

    pass


class StorageWriteError(TaskStoreError):
    """永続化スロットへの書き込み失敗（容量超過、I/Oエラーなど）"""

    pass


class StorageReadError(TaskStoreError):
    """永続化スロットからの読み出し失敗（DBファイル破損など）"""

    pass
