"""
存储模块
提供 JSON 文档存储、初始化和管理功能
"""

from .document_store import DocumentStore, USERS, MESSAGES
from .init_db import init_storage, get_store, get_attachments

__all__ = [
    "DocumentStore",
    "USERS",
    "MESSAGES",
    "init_storage",
    "get_store",
    "get_attachments"
]
