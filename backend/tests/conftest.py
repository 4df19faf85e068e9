"""
Pytest 测试配置
提供临时存储目录、Repository、Service 等测试基础设施
"""

import sys
from pathlib import Path

import pytest

# 添加项目根目录到 sys.path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from chatstore.config import Settings
from chatstore.db.document_store import DocumentStore
from chatstore.models.user import User
from chatstore.storage.attachment_manager import AttachmentManager


# ==================== 存储 Fixtures ====================

@pytest.fixture(scope="function")
def test_settings(tmp_path) -> Settings:
    """
    指向临时目录的配置
    每个测试函数都会获得一套全新的文件
    """
    return Settings(
        users_file=tmp_path / "users.json",
        messages_file=tmp_path / "messages.json",
        uploads_dir=tmp_path / "uploads",
        user_images_dir=tmp_path / "user_account_images",
    )


@pytest.fixture(scope="function")
def test_store(test_settings) -> DocumentStore:
    """
    创建测试用的文档存储
    """
    return DocumentStore(
        users_file=test_settings.users_file,
        messages_file=test_settings.messages_file,
    )


@pytest.fixture(scope="function")
def test_attachments(test_settings) -> AttachmentManager:
    """
    创建测试用的附件目录管理器
    """
    return AttachmentManager(
        uploads_dir=test_settings.uploads_dir,
        user_images_dir=test_settings.user_images_dir,
    )


# ==================== Repository Fixtures ====================

@pytest.fixture(scope="function")
def user_repository(test_store):
    """
    创建 UserRepository 实例
    """
    from chatstore.repositories.user_repository import UserRepository
    return UserRepository(test_store)


@pytest.fixture(scope="function")
def ledger_repository(test_store, test_attachments):
    """
    创建 LedgerRepository 实例
    """
    from chatstore.repositories.ledger_repository import LedgerRepository
    return LedgerRepository(test_store, test_attachments)


@pytest.fixture(scope="function")
def chat_service(test_store, test_attachments):
    """
    创建 ChatService 实例
    """
    from chatstore.services.chat_service import ChatService
    return ChatService(test_store, test_attachments)


# ==================== 测试数据 Fixtures ====================

@pytest.fixture(scope="function")
def alice(user_repository) -> User:
    """
    创建测试用户 alice
    """
    return user_repository.signup("alice", "p1")


@pytest.fixture(scope="function")
def bob(user_repository) -> User:
    """
    创建测试用户 bob
    """
    return user_repository.signup("bob", "p2")


# ==================== Pytest 配置 ====================

def pytest_configure(config):
    """
    Pytest 初始化配置
    """
    # 标记测试分类
    config.addinivalue_line(
        "markers", "unit: Unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests"
    )
