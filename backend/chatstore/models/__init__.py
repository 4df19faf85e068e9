"""
记录模型模块
导出用户模型、账本记录模型和枚举类型
"""

# 用户域模型
from .user import User, FriendView, DEFAULT_PROFILE_IMAGE, DEFAULT_STATUS

# 会话域模型
from .message import Message, FileMessage
from .chat import ChatDescriptor, FriendChatDescriptor, UserConversations, DEFAULT_FRIEND_CHAT_NAME
from .ledger import LedgerRecord, parse_record, is_descriptor, belongs_to_conversation

# 基础模型
from .base import RecordModel, RecordType, TimestampModel

# 定义导出的内容
__all__ = [
    # 用户域
    "User", "FriendView",
    "DEFAULT_PROFILE_IMAGE", "DEFAULT_STATUS",
    # 会话域
    "Message", "FileMessage",
    "ChatDescriptor", "FriendChatDescriptor", "UserConversations",
    "DEFAULT_FRIEND_CHAT_NAME",
    "LedgerRecord", "parse_record", "is_descriptor", "belongs_to_conversation",
    # 基础模型
    "RecordModel", "RecordType", "TimestampModel"
]
