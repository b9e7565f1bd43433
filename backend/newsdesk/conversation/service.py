"""
ChatService - runs one conversational turn end to end.

incoming message -> load persisted conversation -> route -> materialize ->
persist the AI turn.

Nothing is cached between calls: the previous AI turn type and the active
document context are rebuilt from the stored turns every time.
"""

import logging
from dataclasses import dataclass
from typing import Awaitable, Callable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.adapters.llm import LLMClientInterface, LLMError
from newsdesk.conversation.materializer import ResponseMaterializer
from newsdesk.conversation.router import Route, TurnRouter
from newsdesk.conversation.turns import Turn, TurnType, document_context
from newsdesk.core.models import Chat
from newsdesk.storage.repositories import ChatRepository, MessageRepository

logger = logging.getLogger(__name__)

CancelCheck = Callable[[], Awaitable[bool]]


class ChatAccessDenied(Exception):
    """Chat does not exist or belongs to another user."""
    pass


class TurnCancelled(Exception):
    """The caller went away before the AI turn was produced."""
    pass


@dataclass
class NewChat:
    chat_id: int
    turns: List[Turn]


class ChatService:
    """
    Orchestrates router, materializer and persistence for one user request.

    The LLM client and the DB session are injected per request. Without an
    LLM client only the storage operations are available.
    """

    def __init__(
        self,
        session: AsyncSession,
        llm_client: Optional[LLMClientInterface] = None,
        router: Optional[TurnRouter] = None,
        materializer: Optional[ResponseMaterializer] = None,
    ):
        self.session = session
        self.chats = ChatRepository(session)
        self.messages = MessageRepository(session)
        self.router = router or TurnRouter()
        if materializer is None and llm_client is not None:
            materializer = ResponseMaterializer(llm_client)
        self.materializer = materializer

    async def owned_chat(self, user_id: int, chat_id: int) -> Chat:
        chat = await self.chats.get_for_user(chat_id, user_id)
        if chat is None:
            raise ChatAccessDenied(f"Chat {chat_id} is not accessible")
        return chat

    async def list_chats(self, user_id: int) -> List[Chat]:
        return await self.chats.list_for_user(user_id)

    async def get_turns(self, user_id: int, chat_id: int) -> List[Turn]:
        await self.owned_chat(user_id, chat_id)
        return await self.messages.load_conversation(chat_id)

    async def delete_chat(self, user_id: int, chat_id: int):
        await self.owned_chat(user_id, chat_id)
        await self.chats.delete_with_messages(chat_id)
        await self.session.commit()
        logger.info(f"Deleted chat {chat_id} for user {user_id}")

    async def respond(
        self,
        user_id: int,
        chat_id: int,
        message: str,
        is_cancelled: Optional[CancelCheck] = None,
    ) -> Turn:
        """
        Persist the user's message and produce the AI reply.

        Raises:
            ChatAccessDenied: chat is missing or foreign
            TurnCancelled: ``is_cancelled`` reported an abort; no AI turn stored
            LLMError: no LLM client, or the provider failed after the user
                turn was stored
        """
        if self.materializer is None:
            raise LLMError("No LLM client configured")
        await self.owned_chat(user_id, chat_id)
        history = await self.messages.load_conversation(chat_id)

        # The user turn is kept even if the reply fails
        await self.messages.save_turn(chat_id, Turn.user(message))
        await self.session.commit()

        context = document_context(history)
        route = route_for(history, message, self.router)
        logger.info(f"Chat {chat_id}: routed to {route.value}")

        if is_cancelled is not None and await is_cancelled():
            raise TurnCancelled()

        reply = await self.materializer.materialize(route, message, history, context)

        if is_cancelled is not None and await is_cancelled():
            raise TurnCancelled()

        return await self.save_ai_turn(chat_id, reply)

    async def start_chat(
        self,
        user_id: int,
        message: str,
        is_cancelled: Optional[CancelCheck] = None,
    ) -> NewChat:
        """Create a chat titled from ``message`` and answer it."""
        chat = await self.chats.create_titled(user_id, message)
        await self.session.commit()
        logger.info(f"Started chat {chat.id} for user {user_id}")

        reply = await self.respond(user_id, chat.id, message, is_cancelled)
        turns = await self.messages.load_conversation(chat.id)
        # Only this request's user message and its reply
        return NewChat(chat_id=chat.id, turns=[turns[0], reply])

    async def save_ai_turn(self, chat_id: int, turn: Turn) -> Turn:
        turn_id = await self.messages.save_turn(chat_id, turn)
        await self.session.commit()
        return turn.with_id(turn_id)

    async def save_report(self, user_id: int, chat_id: int, turn: Turn) -> Turn:
        await self.owned_chat(user_id, chat_id)
        return await self.save_ai_turn(chat_id, turn)

    async def attach_pdf(
        self,
        user_id: int,
        chat_id: Optional[int],
        filename: str,
        text: str,
        url: str,
        context: Optional[str],
    ) -> NewChat:
        """
        Show a PDF in a chat, creating the chat when ``chat_id`` is None.

        Returns the chat id and the single new ``pdf`` turn.
        """
        if chat_id is None:
            chat = await self.chats.create_titled(user_id, filename)
            chat_id = chat.id
        else:
            await self.owned_chat(user_id, chat_id)

        turn = Turn.ai(text, type=TurnType.PDF, url=url, context=context)
        saved = await self.save_ai_turn(chat_id, turn)
        return NewChat(chat_id=chat_id, turns=[saved])


def route_for(turns: List[Turn], message: str, router: Optional[TurnRouter] = None) -> Route:
    """Route ``message`` against an in-memory conversation."""
    router = router or TurnRouter()
    context = document_context(turns)
    return router.route(message, turns[-1] if turns else None, context is not None)
