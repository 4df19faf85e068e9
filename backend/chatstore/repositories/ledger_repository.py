"""
会话与消息 Repository
messages 集合是一个异构账本：文本消息、文件消息、广播会话描述、私聊会话描述
"""

import logging
from typing import List, Optional

from chatstore.db.document_store import DocumentStore, MESSAGES
from chatstore.exceptions import StorageError, ValidationError
from chatstore.models.base import RecordType
from chatstore.models.chat import (
    ChatDescriptor,
    FriendChatDescriptor,
    UserConversations,
    friend_chat_name,
)
from chatstore.models.ledger import LedgerRecord, belongs_to_conversation, parse_record
from chatstore.models.message import FileMessage, Message
from chatstore.storage.attachment_manager import AttachmentManager

logger = logging.getLogger(__name__)


class LedgerRepository:
    """
    账本数据访问对象

    记录只追加不修改，唯一的删除操作是按会话批量删除。
    账本没有外键约束，删除会话时由本类同时清理描述记录、消息记录和附件目录。
    """

    def __init__(self, store: DocumentStore, attachments: AttachmentManager):
        """
        初始化 Repository

        Args:
            store: JSON 文档存储
            attachments: 附件目录管理器（创建 / 删除会话目录）
        """
        self.store = store
        self.attachments = attachments

    def _append(self, record: LedgerRecord) -> LedgerRecord:
        with self.store.locked(MESSAGES):
            documents = self.store.load(MESSAGES)
            documents.append(record.to_document())
            self.store.save(MESSAGES, documents)
        return record

    # ==================== 查询 ====================

    def list_records(self) -> List[LedgerRecord]:
        """
        获取账本中的全部记录（按写入顺序）

        Raises:
            StorageError: 存在未知 type 标签或字段不合法的记录
        """
        records = []
        for index, doc in enumerate(self.store.load(MESSAGES)):
            if not isinstance(doc, dict):
                logger.error("[Ledger] 第 %d 条记录不是 JSON 对象: %r", index, doc)
                raise StorageError(f"Malformed ledger record at index {index}: not an object")
            try:
                records.append(parse_record(doc))
            except ValueError as e:
                logger.error("[Ledger] 第 %d 条记录无法解析 (id: %s): %s", index, doc.get("id"), e)
                raise StorageError(f"Malformed ledger record at index {index}: {e}") from e
        return records

    def get_record(self, record_id: str) -> Optional[LedgerRecord]:
        """
        根据 ID 获取记录

        Returns:
            记录对象，不存在则返回 None
        """
        return next((r for r in self.list_records() if r.id == record_id), None)

    def list_conversation_messages(self, conversation_id: str) -> List[LedgerRecord]:
        """
        获取会话的全部记录

        包含 conversationId 匹配的消息，以及 id 匹配的描述记录，
        因此刚创建的空会话至少返回它自己的描述记录

        Raises:
            ValidationError: conversation_id 为空
        """
        if not conversation_id:
            raise ValidationError("conversationId required")

        records = [r for r in self.list_records() if belongs_to_conversation(r, conversation_id)]
        logger.debug("[Ledger] 会话 %s 共 %d 条记录", conversation_id, len(records))
        return records

    def list_user_conversations(self, user_id: str) -> UserConversations:
        """
        获取用户可见的会话

        可见条件：参与者包含该用户、创建者是该用户、或者是广播会话（对所有人可见）。
        created 为自己创建的会话，joined 为其余可见会话。

        Raises:
            ValidationError: user_id 为空
        """
        if not user_id:
            raise ValidationError("userId required")

        created, joined = [], []
        for record in self.list_records():
            if record.type == RecordType.CHAT:
                joined.append(record)
            elif record.type == RecordType.FRIEND_CHAT:
                if record.creator == user_id:
                    created.append(record)
                elif user_id in record.participants:
                    joined.append(record)

        logger.debug(
            "[Ledger] 用户 %s: 创建 %d 个会话, 加入 %d 个会话",
            user_id, len(created), len(joined),
        )
        return UserConversations(created=created, joined=joined)

    # ==================== 消息 ====================

    def post_message(self, from_username: str, conversation_id: str, text: str) -> Message:
        """
        追加文本消息

        Raises:
            ValidationError: 任一参数为空
        """
        if not from_username or not conversation_id or not text:
            raise ValidationError("Missing required fields")

        message = Message(
            from_username=from_username,
            conversation_id=conversation_id,
            message=text,
        )
        return self._append(message)

    def post_file_message(
        self,
        conversation_id: str,
        from_username: str,
        to_username: str,
        stored_file_path: Optional[str]
    ) -> FileMessage:
        """
        追加文件消息

        Args:
            conversation_id: 会话 ID
            from_username: 发送者用户名
            to_username: 接收者用户名
            stored_file_path: 已保存附件的相对路径（fileUrl）

        Raises:
            ValidationError: 缺少会话 ID 或没有保存文件
        """
        if not conversation_id:
            raise ValidationError("No conversation ID provided")
        if not stored_file_path:
            raise ValidationError("No file uploaded")

        file_message = FileMessage(
            from_username=from_username,
            to_username=to_username,
            conversation_id=conversation_id,
            file_url=stored_file_path,
        )
        self._append(file_message)
        logger.info("[Ledger] 文件消息已存库: %s -> %s (%s)", from_username, to_username, stored_file_path)
        return file_message

    # ==================== 会话 ====================

    def create_broadcast_chat(self, conversation_name: str) -> ChatDescriptor:
        """
        创建广播会话

        Raises:
            ValidationError: 会话名称为空
        """
        if not conversation_name:
            raise ValidationError("Conversation name required")

        chat = ChatDescriptor(conversation_name=conversation_name)
        self.attachments.conversation_dir(chat.id)
        self._append(chat)
        logger.info("[Ledger] 广播会话创建成功 (ID: %s, name: %s)", chat.id, conversation_name)
        return chat

    def create_friend_chat(
        self,
        from_user_id: str,
        to_user_id: str,
        initial_message: Optional[str] = None,
        conversation_name: Optional[str] = None
    ) -> FriendChatDescriptor:
        """
        创建好友私聊会话

        未指定名称时取首条消息的前两个词，否则使用 "Friend Chat"

        Raises:
            ValidationError: 任一用户 ID 为空
        """
        if not from_user_id or not to_user_id:
            raise ValidationError("Both fromUserId and toUserId required")

        chat = FriendChatDescriptor(
            conversation_name=friend_chat_name(initial_message, conversation_name),
            creator=from_user_id,
            participants=[from_user_id, to_user_id],
        )
        self.attachments.conversation_dir(chat.id)
        self._append(chat)
        logger.info("[Ledger] 私聊会话创建成功 (ID: %s, name: %s)", chat.id, chat.conversation_name)
        return chat

    def delete_conversation(self, conversation_id: str) -> int:
        """
        删除会话（描述记录 + 全部消息 + 附件目录）

        先重写账本，再删除目录；目录删除失败只会留下孤立目录

        Returns:
            删除的记录数量

        Raises:
            ValidationError: conversation_id 为空
        """
        if not conversation_id:
            raise ValidationError("Missing conversationId")

        with self.store.locked(MESSAGES):
            documents = self.store.load(MESSAGES)
            kept = [
                doc for doc in documents
                if doc.get("conversationId") != conversation_id and doc.get("id") != conversation_id
            ]
            removed = len(documents) - len(kept)
            self.store.save(MESSAGES, kept)

        self.attachments.remove_conversation_dir(conversation_id)
        logger.info("[Ledger] 会话 %s 已删除，共移除 %d 条记录", conversation_id, removed)
        return removed
