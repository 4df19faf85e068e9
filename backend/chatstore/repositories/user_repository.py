"""
用户与好友关系 Repository
提供 users 集合的增删改查，以及登录时的好友关系修复
"""

import logging
from typing import List, Optional

from chatstore.db.document_store import DocumentStore, USERS
from chatstore.exceptions import AuthError, ConflictError, NotFoundError, ValidationError
from chatstore.models.user import FriendView, User

logger = logging.getLogger(__name__)


def repair_friendships(user: User, users: List[User]) -> int:
    """
    修复单向好友关系

    对每个在自己 friends 中包含 user.username 的其他用户 O，
    如果 user.friends 还没有 O.username，就追加进去。
    只修改 user 自己的列表，不改写 O；重复执行不会产生新的变化。

    Args:
        user: 正在登录的用户（原地修改）
        users: 全部用户

    Returns:
        修复的条数
    """
    repaired = 0
    for other in users:
        if other.id == user.id:
            continue
        if other.is_friend_of(user.username) and not user.is_friend_of(other.username):
            user.friends.append(other.username)
            repaired += 1
            logger.info("[UserRepository] 修复单向好友关系: %s -> %s", user.username, other.username)
    return repaired


class UserRepository:
    """
    用户数据访问对象
    封装所有与 users 集合相关的读写操作
    """

    def __init__(self, store: DocumentStore):
        """
        初始化 Repository

        Args:
            store: JSON 文档存储
        """
        self.store = store

    def _load(self) -> List[User]:
        return [User.model_validate(doc) for doc in self.store.load(USERS)]

    def _save(self, users: List[User]) -> None:
        self.store.save(USERS, [user.to_document() for user in users])

    @staticmethod
    def _find_by_username(users: List[User], username: str) -> Optional[User]:
        return next((u for u in users if u.username == username), None)

    @staticmethod
    def _find_by_id(users: List[User], user_id: str) -> Optional[User]:
        return next((u for u in users if u.id == user_id), None)

    # ==================== 查询 ====================

    def list_users(self) -> List[User]:
        """获取全部用户"""
        return self._load()

    def get_by_username(self, username: str) -> Optional[User]:
        """
        根据用户名获取用户（大小写敏感）

        Returns:
            User 对象，不存在则返回 None
        """
        return self._find_by_username(self._load(), username)

    def get_by_id(self, user_id: str) -> Optional[User]:
        """
        根据 ID 获取用户

        Returns:
            User 对象，不存在则返回 None
        """
        return self._find_by_id(self._load(), user_id)

    # ==================== 账号 ====================

    def signup(self, username: str, password: str) -> User:
        """
        注册新用户

        Args:
            username: 用户名（必须唯一）
            password: 密码（明文保存）

        Returns:
            创建的 User 对象

        Raises:
            ValidationError: 用户名或密码为空
            ConflictError: 用户名已存在
        """
        if not username or not password:
            raise ValidationError("Username and password required")

        with self.store.locked(USERS):
            users = self._load()
            if self._find_by_username(users, username):
                raise ConflictError("Username already exists")

            user = User(username=username, password=password)
            users.append(user)
            self._save(users)

        logger.info("[UserRepository] 新用户创建成功 (ID: %s, username: %s)", user.id, username)
        return user

    def login(self, username: str, password: str) -> User:
        """
        登录校验，并修复该用户的单向好友关系

        只有发生了修复才会写回文件

        Raises:
            AuthError: 用户名或密码不匹配
        """
        with self.store.locked(USERS):
            users = self._load()
            user = next(
                (u for u in users if u.username == username and u.password == password),
                None
            )
            if user is None:
                raise AuthError("Invalid username or password")

            if repair_friendships(user, users):
                self._save(users)

        return user

    def update_profile_image(self, user_id: str, stored_file_path: str) -> str:
        """
        更新用户头像路径

        Returns:
            新的头像相对路径

        Raises:
            NotFoundError: 用户不存在
        """
        with self.store.locked(USERS):
            users = self._load()
            user = self._find_by_id(users, user_id)
            if user is None:
                raise NotFoundError("User not found")

            user.profile_image = stored_file_path
            self._save(users)

        return stored_file_path

    def change_password(self, user_id: str, old_password: str, new_password: str) -> None:
        """
        修改密码

        Raises:
            NotFoundError: 用户不存在
            AuthError: 旧密码不匹配
        """
        with self.store.locked(USERS):
            users = self._load()
            user = self._find_by_id(users, user_id)
            if user is None:
                raise NotFoundError("User not found")
            if user.password != old_password:
                raise AuthError("Invalid current password")

            user.password = new_password
            self._save(users)

        logger.info("[UserRepository] 用户 %s 已修改密码", user_id)

    # ==================== 好友 ====================

    def send_friend_request(self, from_username: str, to_username: str) -> None:
        """
        发送好友请求（自动接受）

        同一次保存内把双方用户名互相追加到对方的 friends

        Raises:
            NotFoundError: 任一用户不存在
            ConflictError: 已经是好友
        """
        with self.store.locked(USERS):
            users = self._load()
            from_user = self._find_by_username(users, from_username)
            to_user = self._find_by_username(users, to_username)

            if from_user is None or to_user is None:
                raise NotFoundError("User not found")
            if to_user.is_friend_of(from_username):
                raise ConflictError("Already friends")

            to_user.friends.append(from_username)
            from_user.friends.append(to_username)
            self._save(users)

        logger.info("[UserRepository] 好友请求已接受: %s <-> %s", from_username, to_username)

    def list_friends(self, username: str) -> List[FriendView]:
        """
        获取好友列表

        好友记录不存在时按空记录处理，头像和状态使用默认值

        Raises:
            NotFoundError: 用户不存在
        """
        users = self._load()
        user = self._find_by_username(users, username)
        if user is None:
            raise NotFoundError("User not found")

        return [
            FriendView.from_user(name, self._find_by_username(users, name))
            for name in user.friends
        ]
