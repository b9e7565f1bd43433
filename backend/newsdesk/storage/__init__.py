"""
Storage Module

Contains persistence layer:
- repositories: SQL repositories for users, chats and messages
"""

from newsdesk.storage.repositories import UserRepository, ChatRepository, MessageRepository

__all__ = [
    "UserRepository",
    "ChatRepository",
    "MessageRepository",
]
