"""
ResponseMaterializer: fixed replies, chat transcript and document answers.
"""

import asyncio

import pytest

from conftest import MockLLMClient
from newsdesk.adapters.llm import LLMError
from newsdesk.conversation.materializer import ResponseMaterializer, to_transcript
from newsdesk.conversation.router import Route
from newsdesk.conversation.turns import Sender, Turn, TurnType
from newsdesk.core.prompts import PromptManager, Replies


def test_transcript_roles_and_leading_ai_turns():
    turns = [
        Turn.ai("Welcome"),
        Turn.ai("Anything else?", type=TurnType.PDF_PROMPT),
        Turn.user("hi"),
        Turn.ai("Hello!"),
    ]
    assert to_transcript(turns) == [
        {"role": "user", "text": "hi"},
        {"role": "model", "text": "Hello!"},
    ]


def test_transcript_of_only_ai_turns_is_empty():
    assert to_transcript([Turn.ai("a"), Turn.ai("b", type=TurnType.PDF)]) == []
    assert to_transcript([]) == []


def test_fixed_routes_skip_llm():
    llm = MockLLMClient()
    materializer = ResponseMaterializer(llm)
    expected = {
        Route.REPORT_PROMPT: (Replies.REPORT_PROMPT, TurnType.PDF_PROMPT),
        Route.REPORT_LOADING: (Replies.REPORT_LOADING, TurnType.PDF_LOADING),
        Route.REPORT_DECLINED: (Replies.REPORT_DECLINED, TurnType.TEXT),
        Route.CLOSE_PROMPT: (Replies.CLOSE_PROMPT, TurnType.PDF_CLOSE_PROMPT),
        Route.CLOSE: (Replies.CLOSE, TurnType.PDF_CLOSE),
        Route.KEEP_DISCUSSING: (Replies.KEEP_DISCUSSING, TurnType.TEXT),
    }
    for route, (text, turn_type) in expected.items():
        turn = asyncio.run(materializer.materialize(route, "whatever", [], "ctx"))
        assert turn.sender == Sender.AI
        assert (turn.text, turn.type) == (text, turn_type)
        assert turn.url is None and turn.context is None

    assert llm.sent == [] and llm.generated == []


def test_report_prompt_text():
    assert Replies.REPORT_PROMPT == (
        "There's so much news! I can generate a detailed PDF report for you. Shall I proceed?"
    )


def test_chat_sends_transcript():
    llm = MockLLMClient(reply="Doing well!")
    history = [Turn.ai("Hi, I'm your assistant"), Turn.user("hello"), Turn.ai("Hey!")]

    turn = asyncio.run(ResponseMaterializer(llm).materialize(Route.CHAT, "how are you?", history))

    assert (turn.text, turn.type) == ("Doing well!", TurnType.TEXT)
    call = llm.sent[0]
    assert call["message"] == "how are you?"
    assert call["history"] == [
        {"role": "user", "text": "hello"},
        {"role": "model", "text": "Hey!"},
    ]
    assert call["system_instruction"] is None


def test_empty_chat_message_gets_greeting():
    llm = MockLLMClient()
    turn = asyncio.run(ResponseMaterializer(llm).materialize(Route.CHAT, "", []))
    assert turn.text == Replies.EMPTY_CHAT
    assert llm.sent == []


def test_document_answer_wraps_context():
    llm = MockLLMClient(reply="It rained early.")
    turn = asyncio.run(
        ResponseMaterializer(llm).materialize(
            Route.DOCUMENT_ANSWER, "What happened with the monsoon?", [], "Monsoon arrived early."
        )
    )

    assert turn.text == "It rained early."
    call = llm.sent[0]
    assert call["system_instruction"] == PromptManager.DOCUMENT_SYSTEM_INSTRUCTION
    assert "Monsoon arrived early." in call["message"]
    assert "What happened with the monsoon?" in call["message"]


def test_document_answer_without_context_says_so():
    prompt = PromptManager.document_answer(None, "question?")
    assert "CONTEXT:\n    ---\n    No context available." in prompt


def test_llm_failure_propagates():
    llm = MockLLMClient(fail=True)
    with pytest.raises(LLMError):
        asyncio.run(ResponseMaterializer(llm).materialize(Route.CHAT, "hi", []))
