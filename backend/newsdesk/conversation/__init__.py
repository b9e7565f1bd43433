"""
Conversation module: per-turn intent routing.

- turns: Turn / TurnType and document-context replay
- intent: keyword classifiers (news, positive, gratitude, guest small talk)
- router: ordered transition table -> Route
- materializer: Route -> AI turn (LLM or fixed reply)
- service: persistence-backed orchestration of one turn
"""

from newsdesk.conversation.turns import Turn, TurnType, Sender, document_context
from newsdesk.conversation.intent import (
    is_news_intent,
    is_positive_intent,
    is_gratitude_intent,
    guest_reply,
)
from newsdesk.conversation.router import Route, TurnRouter
from newsdesk.conversation.materializer import ResponseMaterializer, to_transcript

__all__ = [
    "Turn",
    "TurnType",
    "Sender",
    "document_context",
    "is_news_intent",
    "is_positive_intent",
    "is_gratitude_intent",
    "guest_reply",
    "Route",
    "TurnRouter",
    "ResponseMaterializer",
    "to_transcript",
]
