"""
API Routes

Available routers:
- auth: register, login, profile photo
- chat: guest replies, chats, messages, report PDFs, PDF uploads
"""

from newsdesk.api.routes import auth, chat

__all__ = ["auth", "chat"]
