"""
Request/response schemas.

The wire format keeps the camelCase names the web client uses (chatId,
userName, userPass, ...); Python code uses the snake_case attributes.
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from newsdesk.conversation.turns import Turn
from newsdesk.core.models import Chat, User


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ── Requests ──

class LoginRequest(CamelModel):
    email: Optional[str] = None
    user_pass: Optional[str] = None


class MessageRequest(CamelModel):
    message: str = Field(..., min_length=1, description="User message")


class GeneratePdfRequest(CamelModel):
    chat_id: Optional[int] = None


class GuestMessage(CamelModel):
    sender: str = "user"
    text: str = ""


class GuestChatRequest(CamelModel):
    messages: Optional[List[GuestMessage]] = None


# ── Responses ──

class MessageResponse(CamelModel):
    message: str


class UserOut(CamelModel):
    user_id: int
    user_name: str
    email: str
    user_photo: Optional[str] = None

    @classmethod
    def from_user(cls, user: User) -> "UserOut":
        return cls(
            user_id=user.id,
            user_name=user.user_name,
            email=user.email,
            user_photo=user.photo,
        )


class RegisterResponse(CamelModel):
    message: str
    user_id: int
    token: str


class LoginResponse(CamelModel):
    message: str
    token: str
    user: UserOut


class PhotoResponse(CamelModel):
    message: str
    user: UserOut


class TurnOut(CamelModel):
    id: Optional[int] = None
    sender: str
    text: str
    type: str = "text"
    url: Optional[str] = None
    context: Optional[str] = None

    @classmethod
    def from_turn(cls, turn: Turn) -> "TurnOut":
        return cls(**turn.to_dict())


class ChatSummary(CamelModel):
    # Lower-cased like the raw chats row the web client keys on
    chat_id: int = Field(..., alias="chatid")
    title: str

    @classmethod
    def from_chat(cls, chat: Chat) -> "ChatSummary":
        return cls(chat_id=chat.id, title=chat.title)


class NewChatResponse(CamelModel):
    chat_id: int
    messages: List[TurnOut]
