"""
ResponseMaterializer - turns a routing decision into the AI turn.

Only CHAT and DOCUMENT_ANSWER reach the LLM; every other route is a fixed
reply. The report itself (REPORT_LOADING -> pdf) is produced afterwards by
the caller through NewsReportBuilder.
"""

import logging
from typing import List, Optional

from newsdesk.adapters.llm import HistoryEntry, LLMClientInterface
from newsdesk.conversation.router import Route
from newsdesk.conversation.turns import Turn
from newsdesk.core.prompts import PromptManager, Replies

logger = logging.getLogger(__name__)


FIXED_REPLIES = {
    Route.CLOSE_PROMPT: Replies.CLOSE_PROMPT,
    Route.CLOSE: Replies.CLOSE,
    Route.KEEP_DISCUSSING: Replies.KEEP_DISCUSSING,
    Route.REPORT_LOADING: Replies.REPORT_LOADING,
    Route.REPORT_DECLINED: Replies.REPORT_DECLINED,
    Route.REPORT_PROMPT: Replies.REPORT_PROMPT,
}


def to_transcript(turns: List[Turn]) -> List[HistoryEntry]:
    """
    Map turns to provider roles and drop any leading non-user entries.

    The chat providers require the history to open with a user turn; a
    history made only of model turns becomes empty.
    """
    transcript = [
        {"role": "user" if turn.is_user else "model", "text": turn.text}
        for turn in turns
    ]
    first_user = next(
        (i for i, entry in enumerate(transcript) if entry["role"] == "user"), None
    )
    if first_user is None:
        return []
    return transcript[first_user:]


class ResponseMaterializer:
    """Produces the outgoing AI turn for a Route."""

    def __init__(self, llm_client: LLMClientInterface):
        self.llm = llm_client

    async def materialize(
        self,
        route: Route,
        message: str,
        history: List[Turn],
        document_context: Optional[str] = None,
    ) -> Turn:
        """
        Build the AI turn answering ``message``.

        Args:
            route: decision from TurnRouter
            message: the new user message
            history: persisted turns *before* ``message``
            document_context: active document text, if any

        Raises:
            LLMError: the provider call failed (never retried here)
        """
        if not route.uses_llm:
            text = FIXED_REPLIES[route]
        elif route == Route.DOCUMENT_ANSWER:
            text = await self.answer_from_document(message, history, document_context)
        else:
            text = await self.chat(message, history)

        return Turn.ai(text, type=route.category)

    async def chat(self, message: str, history: List[Turn]) -> str:
        if not message:
            return Replies.EMPTY_CHAT
        transcript = to_transcript(history)
        return await self.llm.send(transcript, message)

    async def answer_from_document(
        self,
        message: str,
        history: List[Turn],
        document_context: Optional[str],
    ) -> str:
        prompt = PromptManager.document_answer(document_context, message)
        return await self.llm.send(
            to_transcript(history),
            prompt,
            system_instruction=PromptManager.DOCUMENT_SYSTEM_INSTRUCTION,
        )
