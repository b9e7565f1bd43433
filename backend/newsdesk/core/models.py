"""
SQLAlchemy models

Table and column names are the lower-cased identifiers PostgreSQL keeps for
the legacy unquoted schema (userInfo, chatId, ...), so an existing
database can be reused as-is.
"""

from typing import List, Optional
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Integer, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from newsdesk.core.database import Base


class User(Base):
    __tablename__ = "userinfo"

    id: Mapped[int] = mapped_column("userid", Integer, primary_key=True)
    user_name: Mapped[str] = mapped_column("username", String(100))
    email: Mapped[str] = mapped_column(String(255), unique=True)
    password_hash: Mapped[str] = mapped_column("userpass", Text)
    photo: Mapped[Optional[str]] = mapped_column("userphoto", Text, nullable=True)

    chats: Mapped[List["Chat"]] = relationship(
        back_populates="user", cascade="all, delete-orphan", passive_deletes=True
    )


class Chat(Base):
    __tablename__ = "chats"

    id: Mapped[int] = mapped_column("chatid", Integer, primary_key=True)
    user_id: Mapped[int] = mapped_column(
        "userid", ForeignKey("userinfo.userid", ondelete="CASCADE"), index=True
    )
    title: Mapped[str] = mapped_column(String(255), default="New Chat")
    created_at: Mapped[datetime] = mapped_column(
        "createdat", DateTime, server_default=func.now()
    )

    user: Mapped[User] = relationship(back_populates="chats")
    messages: Mapped[List["Message"]] = relationship(
        back_populates="chat",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="Message.id",
    )


class Message(Base):
    __tablename__ = "messages"

    id: Mapped[int] = mapped_column("messageid", Integer, primary_key=True)
    chat_id: Mapped[int] = mapped_column(
        "chatid", ForeignKey("chats.chatid", ondelete="CASCADE"), index=True
    )
    sender: Mapped[str] = mapped_column(String(10))
    text: Mapped[str] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(
        "createdat", DateTime, server_default=func.now()
    )
    type: Mapped[str] = mapped_column(String(20), default="text")
    url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    context: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    chat: Mapped[Chat] = relationship(back_populates="messages")
