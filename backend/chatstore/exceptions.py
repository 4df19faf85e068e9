"""
领域异常
由 Repository / Service 抛出，外层 HTTP 层负责映射为状态码
"""


class ChatStoreError(Exception):
    """所有存储层异常的基类，携带可读的 message"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ChatStoreError):
    """
    必填参数缺失或为空
    Maps to: HTTP 400 Bad Request
    """


class ConflictError(ChatStoreError):
    """
    用户名重复、好友关系重复
    Maps to: HTTP 409 Conflict
    """


class NotFoundError(ChatStoreError):
    """
    引用的用户 / 会话不存在
    Maps to: HTTP 404 Not Found
    """


class AuthError(ChatStoreError):
    """
    用户名密码或旧密码不匹配
    Maps to: HTTP 401 Unauthorized
    """


class StorageError(ChatStoreError, OSError):
    """
    存储文件不可读或内容损坏（不会自动重试）
    Maps to: HTTP 500 Internal Server Error
    """
