"""
会话域模型 - 会话描述记录
描述记录的 id 同时就是该会话内所有消息的 conversationId
"""

from typing import List, Optional

from sqlmodel import Field

from .base import RecordModel, RecordType, TimestampModel
from .message import new_record_id

DEFAULT_FRIEND_CHAT_NAME = "Friend Chat"


class ChatDescriptor(TimestampModel):
    """广播（公开）会话，对所有用户可见"""
    id: str = Field(default_factory=new_record_id)
    conversation_name: str
    type: RecordType = RecordType.CHAT


class FriendChatDescriptor(TimestampModel):
    """好友私聊会话，creator 与 participants 均为用户 ID"""
    id: str = Field(default_factory=new_record_id)
    conversation_name: str
    creator: str
    participants: List[str]
    type: RecordType = RecordType.FRIEND_CHAT


class UserConversations(RecordModel):
    """
    用户可见会话列表
    created: 自己创建的会话
    joined: 其余可见会话（包含全部广播会话）
    """
    created: list = Field(default_factory=list)
    joined: list = Field(default_factory=list)


def friend_chat_name(
    initial_message: Optional[str] = None,
    conversation_name: Optional[str] = None
) -> str:
    """
    计算私聊会话名称

    优先使用显式名称；否则取首条消息的前两个词；都没有时使用固定名称
    """
    if conversation_name:
        return conversation_name
    if initial_message:
        return " ".join(initial_message.split(" ")[:2])
    return DEFAULT_FRIEND_CHAT_NAME
