"""
TurnRouter transition table.
"""

import itertools

from newsdesk.conversation.router import Route, TurnRouter
from newsdesk.conversation.service import route_for
from newsdesk.conversation.turns import Turn, TurnType

router = TurnRouter()


def ai(turn_type: TurnType, context=None) -> Turn:
    return Turn.ai("...", type=turn_type, context=context)


# --- No document open ---

def test_plain_message_is_chat():
    assert router.route("how are you?", None, False) == Route.CHAT


def test_news_request_offers_report():
    assert router.route("any news?", None, False) == Route.REPORT_PROMPT
    assert router.route("latest headlines", ai(TurnType.TEXT), False) == Route.REPORT_PROMPT


def test_report_offer_accepted_or_declined():
    prompt = ai(TurnType.PDF_PROMPT)
    assert router.route("yes please", prompt, False) == Route.REPORT_LOADING
    assert router.route("ok please", prompt, False) == Route.REPORT_LOADING
    assert router.route("no", prompt, False) == Route.REPORT_DECLINED
    # A second news request after the offer still counts as declining it
    assert router.route("news from Delhi", prompt, False) == Route.REPORT_DECLINED


def test_user_prior_turn_carries_no_state():
    assert router.route("yes", Turn.user("news?"), False) == Route.CHAT


# --- Document open ---

def test_document_questions_use_context():
    assert router.route("what is chapter 2 about?", ai(TurnType.PDF), True) == Route.DOCUMENT_ANSWER
    # News keywords do not leave the document
    assert router.route("any news today?", ai(TurnType.TEXT), True) == Route.DOCUMENT_ANSWER


def test_gratitude_offers_close():
    assert router.route("thanks, that was helpful", ai(TurnType.TEXT), True) == Route.CLOSE_PROMPT


def test_close_offer_answers():
    prompt = ai(TurnType.PDF_CLOSE_PROMPT)
    assert router.route("yes", prompt, True) == Route.CLOSE
    assert router.route("no, one more question", prompt, True) == Route.KEEP_DISCUSSING


def test_gratitude_beats_close_confirmation():
    # "ok thanks" is both positive and grateful; gratitude is checked first
    assert router.route("ok thanks", ai(TurnType.PDF_CLOSE_PROMPT), True) == Route.CLOSE_PROMPT


def test_gratitude_without_document_is_chat():
    assert router.route("thanks!", ai(TurnType.TEXT), False) == Route.CHAT


def test_every_state_gets_exactly_one_route():
    messages = ["", "yes", "no", "news", "thanks", "hello", "ok thanks for the news"]
    priors = [None, Turn.user("hi")] + [ai(t) for t in TurnType]
    for message, prior, context in itertools.product(messages, priors, [True, False]):
        assert isinstance(router.route(message, prior, context), Route)


def test_route_categories():
    assert Route.REPORT_PROMPT.category == TurnType.PDF_PROMPT
    assert Route.REPORT_LOADING.category == TurnType.PDF_LOADING
    assert Route.CLOSE_PROMPT.category == TurnType.PDF_CLOSE_PROMPT
    assert Route.CLOSE.category == TurnType.PDF_CLOSE
    assert Route.CHAT.category == TurnType.TEXT
    assert [r for r in Route if r.uses_llm] == [Route.DOCUMENT_ANSWER, Route.CHAT]


def test_custom_table_falls_back_to_chat():
    custom = TurnRouter(transitions=[(lambda s: s.message == "x", Route.CLOSE)])
    assert custom.route("x", None, False) == Route.CLOSE
    assert custom.route("y", None, False) == Route.CHAT


# --- Whole conversations ---

def test_route_for_replays_conversation():
    turns = [
        Turn.user("news?"),
        ai(TurnType.PDF_PROMPT),
        Turn.user("yes"),
        ai(TurnType.PDF_LOADING),
        ai(TurnType.PDF, context="report text"),
    ]
    assert route_for(turns, "who won?") == Route.DOCUMENT_ANSWER
    assert route_for(turns, "thanks") == Route.CLOSE_PROMPT

    closed = turns + [Turn.user("thanks"), ai(TurnType.PDF_CLOSE_PROMPT), Turn.user("yes"), ai(TurnType.PDF_CLOSE)]
    assert route_for(closed, "thanks") == Route.CHAT
    assert route_for([], "hello") == Route.CHAT


def test_unreadable_upload_has_no_context():
    turns = [ai(TurnType.PDF, context=None)]
    assert route_for(turns, "what does it say?") == Route.CHAT
