"""
基础模型模块
提供所有记录共用的基础类：camelCase 别名映射、时间戳字段、记录类型枚举
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict

from pydantic import ConfigDict, field_serializer
from pydantic.alias_generators import to_camel
from sqlmodel import SQLModel, Field


class RecordType(str, Enum):
    """账本记录类型枚举 - 决定记录属于哪一种变体"""
    MESSAGE = "message"
    FILE = "file"
    CHAT = "chat"
    FRIEND_CHAT = "friend-chat"


class RecordModel(SQLModel):
    """
    JSON 文档记录基类

    磁盘上的 JSON 键使用 camelCase（如 fromUsername），Python 属性使用 snake_case，
    通过 alias_generator 映射。未知字段原样保留，整表重写时不会丢失。
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="allow",
    )

    def to_document(self) -> Dict[str, Any]:
        """序列化为可写入 JSON 文件的字典（camelCase 键，省略空值）"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


def utc_now() -> datetime:
    """当前 UTC 时间，精度截断到毫秒（与磁盘上的时间戳格式一致）"""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def format_timestamp(value: datetime) -> str:
    """序列化为 2024-01-01T10:00:00.000Z 形式（UTC，毫秒，Z 后缀）"""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TimestampModel(RecordModel):
    """时间戳基类，为账本记录提供 timestamp 字段

    使用 timezone-aware datetime 替代已弃用的 utcnow()；
    写回磁盘时保持已有数据文件的时间戳格式
    """
    timestamp: datetime = Field(default_factory=utc_now)

    @field_serializer("timestamp")
    def _serialize_timestamp(self, value: datetime) -> str:
        return format_timestamp(value)
