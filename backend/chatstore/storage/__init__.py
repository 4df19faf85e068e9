"""
附件存储模块
"""

from .attachment_manager import AttachmentManager, GENERAL_DIR

__all__ = [
    "AttachmentManager",
    "GENERAL_DIR"
]
