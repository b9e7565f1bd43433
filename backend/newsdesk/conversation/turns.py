"""
Turn - one user or AI message inside a conversation.

A conversation is the ordered list of its turns; the active document
context is not stored separately but derived from the turns themselves.
"""

from typing import List, Optional
from dataclasses import dataclass
from enum import Enum


class Sender(str, Enum):
    """Who produced the turn."""
    USER = "user"
    AI = "ai"


class TurnType(str, Enum):
    """Category of a turn; drives both the UI and the router."""
    TEXT = "text"
    PDF_PROMPT = "pdf_prompt"              # Offer to build a news report
    PDF_LOADING = "pdf_loading"            # Report build accepted, in progress
    PDF = "pdf"                            # Report/upload shown, carries context
    PDF_CLOSE_PROMPT = "pdf_close_prompt"  # Offer to close the open report
    PDF_CLOSE = "pdf_close"                # Report closed, context cleared
    LOGIN_REQUIRED = "login_required"      # Guest hit a members-only feature


@dataclass(frozen=True)
class Turn:
    """A single persisted (or about to be persisted) message."""
    sender: Sender
    text: str
    type: TurnType = TurnType.TEXT
    url: Optional[str] = None
    context: Optional[str] = None
    id: Optional[int] = None

    @property
    def is_user(self) -> bool:
        return self.sender == Sender.USER

    def with_id(self, turn_id: int) -> "Turn":
        return Turn(
            sender=self.sender,
            text=self.text,
            type=self.type,
            url=self.url,
            context=self.context,
            id=turn_id,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "sender": self.sender.value,
            "text": self.text,
            "type": self.type.value,
            "url": self.url,
            "context": self.context,
        }

    @classmethod
    def user(cls, text: str) -> "Turn":
        return cls(sender=Sender.USER, text=text)

    @classmethod
    def ai(
        cls,
        text: str,
        type: TurnType = TurnType.TEXT,
        url: Optional[str] = None,
        context: Optional[str] = None,
    ) -> "Turn":
        return cls(sender=Sender.AI, text=text, type=type, url=url, context=context)


def document_context(turns: List[Turn]) -> Optional[str]:
    """
    Replay the conversation to find the active document context.

    A ``pdf`` turn opens its context (possibly None for an unreadable
    upload), a ``pdf_close`` turn clears it.
    """
    context: Optional[str] = None
    for turn in turns:
        if turn.is_user:
            continue
        if turn.type == TurnType.PDF:
            context = turn.context or None
        elif turn.type == TurnType.PDF_CLOSE:
            context = None
    return context
