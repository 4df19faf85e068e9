"""
AttachmentManager 单元测试
验证会话附件目录、用户头像目录的创建、命名与删除
"""

from unittest.mock import patch

import pytest

from chatstore.exceptions import ValidationError
from chatstore.storage.attachment_manager import GENERAL_DIR


class TestConversationFiles:
    """测试会话附件"""

    def test_conversation_dir_created_with_parents(self, test_attachments):
        """测试目录不存在时连同父目录一起创建"""
        directory = test_attachments.conversation_dir("c1")

        assert directory.is_dir()
        assert directory.name == "c1"
        # 重复调用无副作用
        assert test_attachments.conversation_dir("c1") == directory

    def test_general_dir_when_no_conversation(self, test_attachments):
        """测试没有会话 ID 时使用 general 目录"""
        directory = test_attachments.conversation_dir(None)

        assert directory.name == GENERAL_DIR

    def test_store_conversation_file(self, test_attachments):
        """测试保存附件：UUID 文件名 + 原扩展名"""
        file_url = test_attachments.store_conversation_file("c1", "photo.PNG", b"data")

        folder, filename = file_url.split("/")
        assert folder == "c1"
        assert filename.endswith(".PNG")
        assert filename != "photo.PNG"
        assert test_attachments.resolve_upload(file_url).read_bytes() == b"data"

    def test_store_conversation_file_never_overwrites(self, test_attachments):
        """测试同名上传生成不同文件"""
        first = test_attachments.store_conversation_file("c1", "a.txt", b"1")
        second = test_attachments.store_conversation_file("c1", "a.txt", b"2")

        assert first != second
        assert test_attachments.resolve_upload(first).read_bytes() == b"1"

    def test_store_generic_upload(self, test_attachments):
        """测试没有会话 ID 的上传落到 general"""
        file_url = test_attachments.store_conversation_file(None, "notes", b"x")

        assert file_url.startswith("general/")

    def test_nested_conversation_id_url_matches_location(self, test_attachments):
        """测试会话 ID 含路径分隔符时 fileUrl 指向实际保存位置"""
        file_url = test_attachments.store_conversation_file("a/b", "x.png", b"data")

        assert file_url.startswith("a/b/")
        assert test_attachments.resolve_upload(file_url).read_bytes() == b"data"

    def test_remove_upload(self, test_attachments):
        """测试删除单个附件"""
        file_url = test_attachments.store_conversation_file("c1", "a.txt", b"1")

        assert test_attachments.remove_upload(file_url) is True
        assert not test_attachments.resolve_upload(file_url).exists()
        assert test_attachments.remove_upload(file_url) is False

    def test_remove_conversation_dir(self, test_attachments):
        """测试递归删除会话目录"""
        test_attachments.store_conversation_file("c1", "a.txt", b"1")

        assert test_attachments.remove_conversation_dir("c1") is True
        assert not (test_attachments.uploads_dir / "c1").exists()

    def test_remove_missing_dir_is_not_error(self, test_attachments):
        """测试目录不存在不算错误"""
        assert test_attachments.remove_conversation_dir("never-created") is False

    def test_remove_failure_is_logged_not_raised(self, test_attachments):
        """测试删除失败只记录日志"""
        test_attachments.conversation_dir("c1")

        with patch("chatstore.storage.attachment_manager.shutil.rmtree", side_effect=OSError("busy")):
            assert test_attachments.remove_conversation_dir("c1") is False


class TestProfileImages:
    """测试用户头像"""

    def test_store_profile_image(self, test_attachments):
        """测试头像文件名固定为 profile<ext>"""
        path = test_attachments.store_profile_image("u1", "me.jpg", b"img")

        assert path == "u1/profile.jpg"
        assert test_attachments.resolve_user_image(path).read_bytes() == b"img"

    def test_profile_image_overwrites(self, test_attachments):
        """测试再次上传覆盖旧头像"""
        test_attachments.store_profile_image("u1", "a.jpg", b"old")
        path = test_attachments.store_profile_image("u1", "b.jpg", b"new")

        assert test_attachments.resolve_user_image(path).read_bytes() == b"new"
        assert [p.name for p in test_attachments.user_dir("u1").iterdir()] == ["profile.jpg"]

    def test_profile_image_with_new_extension_replaces_old(self, test_attachments):
        """测试换扩展名上传后只保留一张头像"""
        test_attachments.store_profile_image("u1", "a.png", b"old")
        path = test_attachments.store_profile_image("u1", "b.jpg", b"new")

        assert path == "u1/profile.jpg"
        assert [p.name for p in test_attachments.user_dir("u1").iterdir()] == ["profile.jpg"]


class TestPathResolution:
    """测试路径解析"""

    def test_rejects_escaping_paths(self, test_attachments):
        """测试拒绝逃逸出根目录的路径"""
        with pytest.raises(ValidationError):
            test_attachments.resolve_upload("../users.json")
        with pytest.raises(ValidationError):
            test_attachments.remove_conversation_dir("..")

    def test_rejects_empty_path(self, test_attachments):
        with pytest.raises(ValidationError):
            test_attachments.resolve_user_image("")
