"""
用户域模型 - 用户记录
对应 users.json 中的一项
"""

import uuid
from typing import List, Optional

from sqlmodel import Field

from .base import RecordModel

DEFAULT_PROFILE_IMAGE = "/images/default.png"
DEFAULT_STATUS = "online"


class User(RecordModel):
    """
    用户记录
    好友关系以用户名列表的形式冗余存储在双方各自的 friends 中
    """

    # 主键：UUID 字符串
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))

    # 唯一用户名（大小写敏感）
    username: str

    # 明文密码，登录时逐字比较
    password: str

    # 好友用户名列表（有序，不强制去重）
    friends: List[str] = Field(default_factory=list)

    # 头像相对路径（user_images 根目录下）
    profile_image: Optional[str] = None

    # 在线状态
    status: Optional[str] = None

    def is_friend_of(self, username: str) -> bool:
        """friends 列表中是否已包含该用户名"""
        return username in self.friends

    def public_view(self) -> dict:
        """登录成功后返回给客户端的信息"""
        return {"id": self.id, "username": self.username}


class FriendView(RecordModel):
    """好友列表中的一项（只读视图，缺失字段使用默认值）"""
    username: str
    profile_image: str = DEFAULT_PROFILE_IMAGE
    status: str = DEFAULT_STATUS

    @classmethod
    def from_user(cls, username: str, friend: Optional[User]) -> "FriendView":
        """
        根据好友记录构造视图

        Args:
            username: friends 列表中的用户名
            friend: 对应的用户记录，不存在时为 None
        """
        if friend is None:
            return cls(username=username)
        return cls(
            username=username,
            profile_image=friend.profile_image or DEFAULT_PROFILE_IMAGE,
            status=friend.status or DEFAULT_STATUS,
        )
