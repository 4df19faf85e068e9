"""
存储初始化脚本
负责创建 users.json / messages.json（初始为空数组）和附件根目录
"""

import logging
from typing import Optional

from chatstore.config import Settings, get_settings
from chatstore.db.document_store import DocumentStore, MESSAGES, USERS
from chatstore.storage.attachment_manager import AttachmentManager

logger = logging.getLogger(__name__)


def get_store(settings: Optional[Settings] = None) -> DocumentStore:
    """
    根据配置创建并返回文档存储
    """
    settings = settings or get_settings()
    return DocumentStore(
        users_file=settings.users_file,
        messages_file=settings.messages_file,
    )


def get_attachments(settings: Optional[Settings] = None) -> AttachmentManager:
    """
    根据配置创建并返回附件目录管理器
    """
    settings = settings or get_settings()
    return AttachmentManager(
        uploads_dir=settings.uploads_dir,
        user_images_dir=settings.user_images_dir,
    )


def init_storage(settings: Optional[Settings] = None) -> DocumentStore:
    """
    完整的存储初始化流程
    1. 创建文档存储
    2. 缺失的集合文件初始化为 []
    3. 创建附件根目录
    """
    settings = settings or get_settings()
    logger.info("[InitStorage] 正在初始化存储...")

    store = get_store(settings)
    store.ensure(USERS)
    store.ensure(MESSAGES)

    get_attachments(settings).ensure_roots()

    logger.info(
        "[InitStorage] 存储初始化完成: users=%s, messages=%s, uploads=%s",
        settings.users_file, settings.messages_file, settings.uploads_dir,
    )
    return store


if __name__ == "__main__":
    # 直接运行此脚本时，执行存储初始化
    from chatstore.logging_config import setup_logging

    setup_logging(get_settings().log_level)
    init_storage()
