"""
配置模块
从系统环境变量读取存储路径与日志级别（不读取 .env 文件）
"""

import os
from dataclasses import dataclass
from pathlib import Path

# 项目根目录：backend/chatstore/config.py -> backend/
PROJECT_ROOT = Path(__file__).parent.parent


def _resolve_path(env_key: str, default: str) -> Path:
    """
    读取路径型环境变量
    相对路径从项目根目录解析，确保路径是绝对路径
    """
    raw = os.environ.get(env_key, default)
    path = Path(raw)
    if not path.is_absolute():
        path = PROJECT_ROOT / path
    return path


@dataclass(frozen=True)
class Settings:
    """存储与日志配置"""
    users_file: Path
    messages_file: Path
    uploads_dir: Path
    user_images_dir: Path
    log_level: str = "INFO"


def get_settings() -> Settings:
    """
    获取当前配置
    每次调用都重新读取环境变量，方便测试中通过 monkeypatch 覆盖
    """
    return Settings(
        users_file=_resolve_path("CHATSTORE_USERS_FILE", "users.json"),
        messages_file=_resolve_path("CHATSTORE_MESSAGES_FILE", "messages.json"),
        uploads_dir=_resolve_path("CHATSTORE_UPLOADS_DIR", "uploads"),
        user_images_dir=_resolve_path("CHATSTORE_USER_IMAGES_DIR", "user_account_images"),
        log_level=os.environ.get("CHATSTORE_LOG_LEVEL", "INFO"),
    )
