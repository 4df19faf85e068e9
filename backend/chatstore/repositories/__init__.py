"""
Repository (DAO) 模块
提供 JSON 文档的访问抽象层，封装读写逻辑
"""

from .user_repository import UserRepository, repair_friendships
from .ledger_repository import LedgerRepository

__all__ = [
    "UserRepository",
    "LedgerRepository",
    "repair_friendships"
]
