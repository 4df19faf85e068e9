"""
AttachmentManager - 附件目录管理

负责两棵目录树：
- uploads/<conversation_id>/<uuid><ext>   会话附件（无会话 ID 时落到 general）
- user_account_images/<user_id>/profile<ext>   用户头像（每人一张，覆盖写）

这里只做磁盘操作，不读写 JSON 文档。
"""

import logging
import shutil
import uuid
from pathlib import Path
from typing import Optional

from chatstore.exceptions import ValidationError

logger = logging.getLogger(__name__)

GENERAL_DIR = "general"
PROFILE_FILENAME = "profile"


class AttachmentManager:
    """会话 / 用户 -> 附件目录的映射"""

    def __init__(self, uploads_dir: Path, user_images_dir: Path):
        """
        Args:
            uploads_dir: 会话附件根目录
            user_images_dir: 用户头像根目录
        """
        self.uploads_dir = Path(uploads_dir)
        self.user_images_dir = Path(user_images_dir)

    def ensure_roots(self) -> None:
        """创建两个根目录（已存在时无操作）"""
        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        self.user_images_dir.mkdir(parents=True, exist_ok=True)

    # ==================== 会话附件 ====================

    def conversation_dir(self, conversation_id: Optional[str] = None) -> Path:
        """
        返回会话附件目录，不存在时创建（含缺失的父目录）

        Args:
            conversation_id: 会话 ID，为空时使用 general 目录
        """
        directory = self._child(self.uploads_dir, conversation_id or GENERAL_DIR)
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def store_conversation_file(
        self,
        conversation_id: Optional[str],
        original_filename: str,
        content: bytes
    ) -> str:
        """
        保存会话附件

        文件名为新生成的 UUID 加原扩展名，不会覆盖已有文件

        Returns:
            uploads 根目录下的相对路径（即 fileUrl）
        """
        directory = self.conversation_dir(conversation_id)
        filename = f"{uuid.uuid4()}{Path(original_filename or '').suffix}"
        (directory / filename).write_bytes(content)
        file_url = f"{directory.relative_to(self.uploads_dir.resolve()).as_posix()}/{filename}"
        logger.info("[Attachments] 已保存会话附件: %s (%d bytes)", file_url, len(content))
        return file_url

    def remove_upload(self, file_url: str) -> bool:
        """
        删除单个会话附件（尽力而为，用于记录写入失败后的回滚）

        Returns:
            实际删除了文件返回 True
        """
        path = self._child(self.uploads_dir, file_url)
        try:
            path.unlink()
        except FileNotFoundError:
            return False
        except OSError as e:
            logger.warning("[Attachments] 删除附件失败（遗留孤立文件）%s: %s", path, e)
            return False
        logger.info("[Attachments] 已删除附件: %s", file_url)
        return True

    def remove_conversation_dir(self, conversation_id: str) -> bool:
        """
        递归删除会话附件目录（尽力而为）

        目录不存在不算错误；删除失败只记录日志，不抛出

        Returns:
            实际删除了目录返回 True
        """
        directory = self._child(self.uploads_dir, conversation_id)
        if not directory.exists():
            return False
        try:
            shutil.rmtree(directory)
        except OSError as e:
            logger.warning("[Attachments] 删除会话目录失败（遗留孤立目录）%s: %s", directory, e)
            return False
        logger.info("[Attachments] 已删除会话目录: %s", directory)
        return True

    # ==================== 用户头像 ====================

    def user_dir(self, user_id: str) -> Path:
        """返回用户头像目录，不存在时创建"""
        directory = self._child(self.user_images_dir, user_id)
        directory.mkdir(parents=True, exist_ok=True)
        return directory

    def store_profile_image(self, user_id: str, original_filename: str, content: bytes) -> str:
        """
        保存用户头像，固定文件名 profile<ext>，覆盖旧头像

        旧头像扩展名不同时（profile.png -> profile.jpg）先删除，每个用户只保留一张

        Returns:
            user_images 根目录下的相对路径
        """
        directory = self.user_dir(user_id)
        filename = f"{PROFILE_FILENAME}{Path(original_filename or '').suffix}"
        for old in directory.iterdir():
            if old.is_file() and old.stem == PROFILE_FILENAME and old.name != filename:
                old.unlink()
                logger.debug("[Attachments] 已删除旧头像: %s/%s", user_id, old.name)
        (directory / filename).write_bytes(content)
        logger.info("[Attachments] 已更新用户头像: %s/%s", user_id, filename)
        return f"{user_id}/{filename}"

    # ==================== 路径解析 ====================

    def resolve_upload(self, relative_path: str) -> Path:
        """将 fileUrl 解析为绝对路径（用于静态文件服务）"""
        return self._child(self.uploads_dir, relative_path)

    def resolve_user_image(self, relative_path: str) -> Path:
        """将 profileImage 解析为绝对路径"""
        return self._child(self.user_images_dir, relative_path)

    @staticmethod
    def _child(root: Path, relative: str) -> Path:
        """
        拼接根目录下的子路径

        Raises:
            ValidationError: 路径为空或逃逸出根目录
        """
        if not relative:
            raise ValidationError("Missing path")
        root = root.resolve()
        candidate = (root / relative).resolve()
        if candidate == root or root not in candidate.parents:
            raise ValidationError(f"Invalid path: {relative}")
        return candidate
