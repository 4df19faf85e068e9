"""
chatstore - 会话与好友关系存储核心
用户、好友关系、会话（私聊 / 群聊广播）、消息与附件的持久化层
"""

__version__ = "0.1.0"
