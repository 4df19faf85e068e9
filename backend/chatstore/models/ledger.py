"""
账本记录 - 四种变体的联合类型
messages.json 是一个异构集合，按 type 标签分派到具体模型
"""

from typing import Any, Dict, Union

from .base import RecordType
from .chat import ChatDescriptor, FriendChatDescriptor
from .message import FileMessage, Message

LedgerRecord = Union[Message, FileMessage, ChatDescriptor, FriendChatDescriptor]

RECORD_CLASSES = {
    RecordType.MESSAGE: Message,
    RecordType.FILE: FileMessage,
    RecordType.CHAT: ChatDescriptor,
    RecordType.FRIEND_CHAT: FriendChatDescriptor,
}

DESCRIPTOR_TYPES = (RecordType.CHAT, RecordType.FRIEND_CHAT)


def infer_record_type(document: Dict[str, Any]) -> RecordType:
    """
    推断记录类型

    优先读取 type 标签；旧数据中的文件消息没有标签，以 fileUrl 的存在判断

    Raises:
        ValueError: type 标签不是已知的记录类型
    """
    tag = document.get("type")
    if tag is None:
        return RecordType.FILE if "fileUrl" in document else RecordType.MESSAGE
    return RecordType(tag)


def parse_record(document: Dict[str, Any]) -> LedgerRecord:
    """将 JSON 字典解析为对应的账本记录模型"""
    record_type = infer_record_type(document)
    data = dict(document)
    data["type"] = record_type.value
    return RECORD_CLASSES[record_type].model_validate(data)


def is_descriptor(record: LedgerRecord) -> bool:
    """是否为会话描述记录（广播或私聊）"""
    return record.type in DESCRIPTOR_TYPES


def belongs_to_conversation(record: LedgerRecord, conversation_id: str) -> bool:
    """
    记录是否属于某会话：消息的 conversationId 匹配，或描述记录自身 id 匹配
    """
    if is_descriptor(record):
        return record.id == conversation_id
    return record.conversation_id == conversation_id
