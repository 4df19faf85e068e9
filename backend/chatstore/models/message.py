"""
会话域模型 - 消息记录
messages.json 中的文本消息与文件消息
"""

import uuid

from sqlmodel import Field

from .base import RecordType, TimestampModel


def new_record_id() -> str:
    """生成新的记录 ID（UUID 字符串）"""
    return str(uuid.uuid4())


class Message(TimestampModel):
    """
    文本消息
    conversation_id 指向会话描述记录的 id（或无描述记录的隐式会话）
    """
    id: str = Field(default_factory=new_record_id)
    from_username: str
    conversation_id: str
    message: str
    type: RecordType = RecordType.MESSAGE


class FileMessage(TimestampModel):
    """
    文件消息
    file_url 是附件目录下的相对路径：<conversation_id>/<文件名>

    旧数据中文件消息没有 type 字段，加载时根据 fileUrl 推断并补齐为 "file"
    """
    id: str = Field(default_factory=new_record_id)
    from_username: str
    to_username: str
    conversation_id: str
    file_url: str
    type: RecordType = RecordType.FILE
