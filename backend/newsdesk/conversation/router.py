"""
TurnRouter - decides how the next AI turn is produced.

The state is never stored: it is rebuilt on every call from the type of the
previous AI turn and whether a document is open. The decision procedure is
an ordered transition table; the first row whose guard holds wins and the
last row always holds.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from newsdesk.conversation.intent import (
    is_gratitude_intent,
    is_news_intent,
    is_positive_intent,
)
from newsdesk.conversation.turns import Turn, TurnType, Sender

logger = logging.getLogger(__name__)


class Route(str, Enum):
    """One row of the transition table."""
    CLOSE_PROMPT = "close_prompt"        # Offer to close the open report
    CLOSE = "close"                      # Close confirmed
    KEEP_DISCUSSING = "keep_discussing"  # Close declined
    DOCUMENT_ANSWER = "document_answer"  # Answer grounded in the open document
    REPORT_LOADING = "report_loading"    # Report offer accepted
    REPORT_DECLINED = "report_declined"  # Report offer declined
    REPORT_PROMPT = "report_prompt"      # Offer a news report
    CHAT = "chat"                        # General conversation

    @property
    def category(self) -> TurnType:
        return _CATEGORIES[self]

    @property
    def uses_llm(self) -> bool:
        return self in (Route.DOCUMENT_ANSWER, Route.CHAT)


_CATEGORIES = {
    Route.CLOSE_PROMPT: TurnType.PDF_CLOSE_PROMPT,
    Route.CLOSE: TurnType.PDF_CLOSE,
    Route.KEEP_DISCUSSING: TurnType.TEXT,
    Route.DOCUMENT_ANSWER: TurnType.TEXT,
    Route.REPORT_LOADING: TurnType.PDF_LOADING,
    Route.REPORT_DECLINED: TurnType.TEXT,
    Route.REPORT_PROMPT: TurnType.PDF_PROMPT,
    Route.CHAT: TurnType.TEXT,
}


@dataclass(frozen=True)
class RouterState:
    """Everything a routing decision may look at."""
    message: str
    prior_type: Optional[TurnType]
    has_document_context: bool


Guard = Callable[[RouterState], bool]

TRANSITIONS: List[Tuple[Guard, Route]] = [
    (lambda s: s.has_document_context and is_gratitude_intent(s.message), Route.CLOSE_PROMPT),
    (lambda s: s.prior_type == TurnType.PDF_CLOSE_PROMPT and is_positive_intent(s.message), Route.CLOSE),
    (lambda s: s.prior_type == TurnType.PDF_CLOSE_PROMPT, Route.KEEP_DISCUSSING),
    (lambda s: s.has_document_context, Route.DOCUMENT_ANSWER),
    (lambda s: s.prior_type == TurnType.PDF_PROMPT and is_positive_intent(s.message), Route.REPORT_LOADING),
    (lambda s: s.prior_type == TurnType.PDF_PROMPT, Route.REPORT_DECLINED),
    (lambda s: is_news_intent(s.message), Route.REPORT_PROMPT),
    (lambda s: True, Route.CHAT),
]


class TurnRouter:
    """Classifies an incoming message into exactly one Route."""

    def __init__(self, transitions: Optional[List[Tuple[Guard, Route]]] = None):
        self.transitions = transitions or TRANSITIONS

    def route(
        self,
        message: str,
        prior_turn: Optional[Turn],
        has_document_context: bool,
    ) -> Route:
        """
        Pick the route for ``message``.

        Only an AI ``prior_turn`` contributes state; a user turn (or None)
        counts as no pending prompt.
        """
        prior_type = None
        if prior_turn is not None and prior_turn.sender == Sender.AI:
            prior_type = prior_turn.type

        state = RouterState(
            message=message or "",
            prior_type=prior_type,
            has_document_context=bool(has_document_context),
        )
        for guard, route in self.transitions:
            if guard(state):
                logger.debug(
                    f"Routed message (prior={prior_type}, context={state.has_document_context}) -> {route.value}"
                )
                return route
        # Unreachable with the default table; custom tables fall back to chat
        return Route.CHAT
