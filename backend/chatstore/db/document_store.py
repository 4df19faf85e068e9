"""
JSON 文档存储
每个集合对应一个 JSON 数组文件，读取与写入均为整表操作
"""

import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List

from chatstore.exceptions import StorageError

logger = logging.getLogger(__name__)

USERS = "users"
MESSAGES = "messages"


class DocumentStore:
    """
    文档存储对象

    为 users / messages 两个集合提供 load / save，
    并为每个集合提供一把可重入锁，供 Repository 包住整个"读取-修改-写入"周期
    """

    def __init__(self, users_file: Path, messages_file: Path):
        """
        初始化存储

        Args:
            users_file: 用户集合文件路径
            messages_file: 消息集合文件路径
        """
        self._paths = {
            USERS: Path(users_file),
            MESSAGES: Path(messages_file),
        }
        self._locks = {name: threading.RLock() for name in self._paths}

    def path_for(self, collection: str) -> Path:
        """返回集合的文件路径，未知集合抛出 KeyError"""
        return self._paths[collection]

    @contextmanager
    def locked(self, collection: str) -> Iterator[None]:
        """
        持有集合锁

        同一进程内的写操作在锁内完成 load -> 修改 -> save，避免后写覆盖先写
        """
        with self._locks[collection]:
            yield

    def ensure(self, collection: str) -> None:
        """文件不存在时初始化为空数组"""
        path = self.path_for(collection)
        if not path.exists():
            path.parent.mkdir(parents=True, exist_ok=True)
            self._write(path, [])
            logger.info("[DocumentStore] 初始化空集合 %s: %s", collection, path)

    def load(self, collection: str) -> List[Dict[str, Any]]:
        """
        读取整个集合

        Returns:
            记录字典列表

        Raises:
            StorageError: 文件存在但不是合法的 JSON 数组
        """
        path = self.path_for(collection)
        with self.locked(collection):
            self.ensure(collection)
            try:
                with open(path, "r", encoding="utf-8") as f:
                    documents = json.load(f)
            except (OSError, json.JSONDecodeError, UnicodeDecodeError) as e:
                logger.error("[DocumentStore] 读取集合 %s 失败: %s", collection, e)
                raise StorageError(f"Cannot read {collection} store at {path}: {e}") from e

        if not isinstance(documents, list):
            logger.error("[DocumentStore] 集合 %s 内容不是数组: %s", collection, path)
            raise StorageError(f"{collection} store at {path} does not hold a JSON array")
        return documents

    def save(self, collection: str, documents: List[Dict[str, Any]]) -> None:
        """
        整表重写集合

        先写入同目录临时文件，再原子替换目标文件
        """
        path = self.path_for(collection)
        with self.locked(collection):
            path.parent.mkdir(parents=True, exist_ok=True)
            self._write(path, documents)
        logger.debug("[DocumentStore] 已保存集合 %s (%d 条)", collection, len(documents))

    @staticmethod
    def _write(path: Path, documents: List[Dict[str, Any]]) -> None:
        fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(documents, f, indent=2, ensure_ascii=False)
            os.replace(tmp_name, path)
        except OSError as e:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            logger.error("[DocumentStore] 写入 %s 失败: %s", path, e)
            raise StorageError(f"Cannot write store at {path}: {e}") from e
