"""
SQL Repositories

CRUD operations for users, chats and messages.
"""

from typing import Generic, TypeVar, Type, Optional, List, Any
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
import logging

from newsdesk.core.database import Base
from newsdesk.core.models import User, Chat, Message
from newsdesk.conversation.turns import Turn, Sender, TurnType

ModelType = TypeVar("ModelType", bound=Base)

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelType]):
    def __init__(self, model: Type[ModelType], session: AsyncSession):
        self.model = model
        self.session = session

    async def get(self, id: Any) -> Optional[ModelType]:
        result = await self.session.execute(select(self.model).where(self.model.id == id))
        return result.scalars().first()

    async def create(self, attributes: dict) -> ModelType:
        db_obj = self.model(**attributes)
        self.session.add(db_obj)
        await self.session.flush()
        await self.session.refresh(db_obj)
        return db_obj

    async def delete(self, id: Any) -> bool:
        result = await self.session.execute(delete(self.model).where(self.model.id == id))
        return result.rowcount > 0


class UserRepository(BaseRepository[User]):
    def __init__(self, session: AsyncSession):
        super().__init__(User, session)

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.session.execute(select(User).where(User.email == email))
        return result.scalars().first()

    async def update_photo(self, user_id: int, photo: str) -> Optional[User]:
        user = await self.get(user_id)
        if user is None:
            return None
        user.photo = photo
        await self.session.flush()
        return user


class ChatRepository(BaseRepository[Chat]):
    def __init__(self, session: AsyncSession):
        super().__init__(Chat, session)

    async def get_for_user(self, chat_id: int, user_id: int) -> Optional[Chat]:
        """The chat, only if ``user_id`` owns it."""
        result = await self.session.execute(
            select(Chat).where(Chat.id == chat_id, Chat.user_id == user_id)
        )
        return result.scalars().first()

    async def list_for_user(self, user_id: int) -> List[Chat]:
        """Newest first."""
        result = await self.session.execute(
            select(Chat)
            .where(Chat.user_id == user_id)
            .order_by(Chat.created_at.desc(), Chat.id.desc())
        )
        return list(result.scalars().all())

    async def create_titled(self, user_id: int, seed: str) -> Chat:
        """New chat titled from the first 40 characters of ``seed``."""
        return await self.create({"user_id": user_id, "title": seed[:40] + "..."})

    async def delete_with_messages(self, chat_id: int) -> bool:
        await self.session.execute(delete(Message).where(Message.chat_id == chat_id))
        return await self.delete(chat_id)


class MessageRepository(BaseRepository[Message]):
    """Append-only store of conversation turns."""

    def __init__(self, session: AsyncSession):
        super().__init__(Message, session)

    @staticmethod
    def to_turn(row: Message) -> Turn:
        return Turn(
            sender=Sender(row.sender),
            text=row.text,
            type=TurnType(row.type or TurnType.TEXT.value),
            url=row.url,
            context=row.context,
            id=row.id,
        )

    async def save_turn(self, chat_id: int, turn: Turn) -> int:
        """Append ``turn`` to the chat and return the new message id."""
        row = await self.create(
            {
                "chat_id": chat_id,
                "sender": turn.sender.value,
                "text": turn.text,
                "type": turn.type.value,
                "url": turn.url,
                "context": turn.context,
            }
        )
        return row.id

    async def load_conversation(self, chat_id: int) -> List[Turn]:
        """All turns of the chat in creation order."""
        result = await self.session.execute(
            select(Message)
            .where(Message.chat_id == chat_id)
            .order_by(Message.created_at.asc(), Message.id.asc())
        )
        return [self.to_turn(row) for row in result.scalars().all()]
