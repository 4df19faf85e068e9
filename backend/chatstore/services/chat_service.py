"""
聊天服务层

对外（HTTP 层）暴露的全部操作，组合以下组件：
1. UserRepository：账号与好友关系
2. LedgerRepository：会话与消息账本
3. AttachmentManager：上传文件落盘

本层与传输协议无关，失败一律抛出 chatstore.exceptions 中的类型化异常。
"""

import logging
from typing import List, Optional

from chatstore.config import Settings
from chatstore.db.document_store import DocumentStore
from chatstore.db.init_db import get_attachments, init_storage
from chatstore.exceptions import NotFoundError, StorageError, ValidationError
from chatstore.models.chat import ChatDescriptor, FriendChatDescriptor, UserConversations
from chatstore.models.ledger import LedgerRecord
from chatstore.models.message import FileMessage, Message
from chatstore.models.user import FriendView, User
from chatstore.repositories.ledger_repository import LedgerRepository
from chatstore.repositories.user_repository import UserRepository
from chatstore.storage.attachment_manager import AttachmentManager

logger = logging.getLogger(__name__)


class ChatService:
    """
    聊天服务类

    使用示例：
        service = ChatService.from_settings()
        alice = service.signup("alice", "p1")
        service.send_friend_request("alice", "bob")
    """

    def __init__(self, store: DocumentStore, attachments: AttachmentManager):
        """
        初始化服务

        Args:
            store: 注入的文档存储（两个 Repository 共用）
            attachments: 附件目录管理器
        """
        self.attachments = attachments
        self.users = UserRepository(store)
        self.ledger = LedgerRepository(store, attachments)

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "ChatService":
        """根据配置初始化存储并创建服务"""
        store = init_storage(settings)
        return cls(store, get_attachments(settings))

    # ==================== 账号 ====================

    def signup(self, username: str, password: str) -> User:
        return self.users.signup(username, password)

    def login(self, username: str, password: str) -> dict:
        """登录，返回 {id, username}"""
        return self.users.login(username, password).public_view()

    def update_profile_image(self, user_id: str, filename: str, content: Optional[bytes]) -> str:
        """
        上传并更新用户头像

        Raises:
            ValidationError: 缺少用户 ID 或文件
            NotFoundError: 用户不存在
        """
        if not user_id or not content:
            raise ValidationError("Missing user ID or file")
        if self.users.get_by_id(user_id) is None:
            raise NotFoundError("User not found")

        stored_path = self.attachments.store_profile_image(user_id, filename, content)
        return self.users.update_profile_image(user_id, stored_path)

    def change_password(self, user_id: str, old_password: str, new_password: str) -> None:
        self.users.change_password(user_id, old_password, new_password)

    # ==================== 好友 ====================

    def send_friend_request(self, from_username: str, to_username: str) -> None:
        self.users.send_friend_request(from_username, to_username)

    def list_friends(self, username: str) -> List[FriendView]:
        if not username:
            raise ValidationError("Username query parameter required")
        return self.users.list_friends(username)

    # ==================== 消息 ====================

    def post_message(self, from_username: str, conversation_id: str, text: str) -> Message:
        return self.ledger.post_message(from_username, conversation_id, text)

    def post_file_message(
        self,
        conversation_id: str,
        from_username: str,
        to_username: str,
        filename: Optional[str],
        content: Optional[bytes]
    ) -> FileMessage:
        """
        上传附件并追加文件消息

        校验顺序：会话 ID -> 双方用户 -> 文件内容

        Raises:
            ValidationError: 缺少会话 ID 或文件
            NotFoundError: 任一用户不存在
            StorageError: 账本写入失败（已保存的附件会被删除）
        """
        if not conversation_id:
            raise ValidationError("No conversation ID provided")
        if self.users.get_by_username(from_username) is None or self.users.get_by_username(to_username) is None:
            raise NotFoundError("User not found")
        if not content:
            raise ValidationError("No file uploaded")

        stored_path = self.attachments.store_conversation_file(conversation_id, filename, content)
        try:
            return self.ledger.post_file_message(conversation_id, from_username, to_username, stored_path)
        except StorageError:
            logger.error("[ChatService] 文件消息写入失败，回滚附件: %s", stored_path)
            self.attachments.remove_upload(stored_path)
            raise

    # ==================== 会话 ====================

    def create_broadcast_chat(self, conversation_name: str) -> ChatDescriptor:
        return self.ledger.create_broadcast_chat(conversation_name)

    def create_friend_chat(
        self,
        from_user_id: str,
        to_user_id: str,
        initial_message: Optional[str] = None,
        conversation_name: Optional[str] = None
    ) -> FriendChatDescriptor:
        return self.ledger.create_friend_chat(from_user_id, to_user_id, initial_message, conversation_name)

    def delete_conversation(self, conversation_id: str) -> int:
        return self.ledger.delete_conversation(conversation_id)

    def list_conversation_messages(self, conversation_id: str) -> List[LedgerRecord]:
        return self.ledger.list_conversation_messages(conversation_id)

    def list_user_conversations(self, user_id: str) -> UserConversations:
        return self.ledger.list_user_conversations(user_id)
