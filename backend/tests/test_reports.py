"""
News client, outline parsing, PDF rendering and the report builder.
"""

import asyncio

import httpx
import pytest

from conftest import SAMPLE_REPORT, MockLLMClient
from newsdesk.adapters.news import Article, GNewsClient
from newsdesk.conversation.turns import TurnType
from newsdesk.core.prompts import PromptManager, Replies
from newsdesk.reports.builder import NewsReportBuilder, ReportGenerationError
from newsdesk.reports.renderer import BlockKind, ReportRenderer, parse_outline
from newsdesk.utils.pdf_parser import extract_pdf_text

GNEWS_PAYLOAD = {
    "totalArticles": 2,
    "articles": [
        {
            "title": "Monsoon arrives early",
            "description": "Rain reached the coast.",
            "content": "Full story about the rain.",
            "url": "https://example.com/monsoon",
            "source": {"name": "The Daily", "url": "https://example.com"},
        },
        {
            "title": "Markets rally",
            "description": "Indices closed higher.",
            "content": None,
            "url": "https://example.com/markets",
            "source": {"name": "Money Wire"},
        },
    ],
}


def gnews_transport(status_code=200, payload=None, seen=None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status_code, json=payload if payload is not None else GNEWS_PAYLOAD)

    return httpx.MockTransport(handler)


# --- GNews ---

def test_fetch_top_headlines():
    seen = []
    client = GNewsClient(api_key="k", transport=gnews_transport(seen=seen))
    articles = asyncio.run(client.fetch_top_headlines(count=2))

    assert [a.title for a in articles] == ["Monsoon arrives early", "Markets rally"]
    assert articles[0].source == "The Daily"
    # Missing content falls back to the description
    assert articles[1].content == "Indices closed higher."

    params = seen[0].url.params
    assert seen[0].url.path.endswith("/top-headlines")
    assert (params["country"], params["lang"], params["max"], params["apikey"]) == ("in", "en", "2", "k")


def test_fetch_failures_return_none():
    assert asyncio.run(GNewsClient(api_key="k", transport=gnews_transport(500)).fetch_top_headlines()) is None
    assert asyncio.run(GNewsClient(api_key="", transport=gnews_transport()).fetch_top_headlines()) is None


def test_fetch_without_articles_is_empty():
    client = GNewsClient(api_key="k", transport=gnews_transport(payload={"articles": []}))
    assert asyncio.run(client.fetch_top_headlines()) == []


# --- Outline ---

def test_parse_outline():
    outline = parse_outline(SAMPLE_REPORT)

    assert outline.title == "AI News Report: Top Headlines from India"
    assert outline.introduction == "A quick overview of the day."
    assert outline.chapters == ["1: Monsoon arrives early", "2: Markets rally"]

    kinds = [b.kind for b in outline.blocks]
    assert kinds == [
        BlockKind.CHAPTER,
        BlockKind.SOURCE,
        BlockKind.MINOR_HEADING,
        BlockKind.BODY,
        BlockKind.CHAPTER,
        BlockKind.SOURCE,
        BlockKind.SUBHEADING,
        BlockKind.BULLET,
    ]
    assert outline.blocks[0].anchor == "chap1"
    assert outline.blocks[1].text == "Source: The Daily"
    # The introduction is not repeated in the body
    assert all(b.text != "A quick overview of the day." for b in outline.blocks)


def test_parse_outline_without_title():
    outline = parse_outline("Just some text.")
    assert outline.title == "AI News Report"
    assert outline.introduction == ""
    assert [b.kind for b in outline.blocks] == [BlockKind.BODY]


# --- Rendering ---

def test_render_writes_pdf(tmp_path):
    renderer = ReportRenderer(tmp_path / "pdfs")
    report = asyncio.run(renderer.render(SAMPLE_REPORT))

    assert report.file_url.startswith("/uploads/pdfs/news_report_")
    assert report.file_url.endswith(".pdf")
    assert report.raw_text == SAMPLE_REPORT
    assert report.file_path.read_bytes().startswith(b"%PDF")

    text = extract_pdf_text(report.file_path)
    assert "Table of Contents" in text
    assert "Markets rally" in text


# --- Builder ---

def make_builder(tmp_path, llm, transport=None):
    return NewsReportBuilder(
        llm_client=llm,
        news_client=GNewsClient(api_key="k", transport=transport or gnews_transport()),
        renderer=ReportRenderer(tmp_path),
    )


def test_build_report_turn(tmp_path):
    llm = MockLLMClient()
    turn = asyncio.run(make_builder(tmp_path, llm).build())

    assert turn.type == TurnType.PDF
    assert turn.text == Replies.REPORT_READY
    assert turn.context == SAMPLE_REPORT
    assert turn.url.startswith("/uploads/pdfs/")

    call = llm.generated[0]
    assert "Monsoon arrives early" in call["prompt"]
    assert call["system_instruction"] == PromptManager.NEWS_SYSTEM_INSTRUCTION
    assert call["temperature"] == 0.7


def test_no_news_skips_llm(tmp_path):
    llm = MockLLMClient()
    turn = asyncio.run(make_builder(tmp_path, llm, gnews_transport(503)).build())

    assert llm.generated == []
    assert turn.context == PromptManager.NO_NEWS_REPORT
    assert turn.type == TurnType.PDF


def test_llm_failure_is_report_error(tmp_path):
    with pytest.raises(ReportGenerationError):
        asyncio.run(make_builder(tmp_path, MockLLMClient(fail=True)).build())


def test_news_prompt_lists_articles():
    articles = [Article("T1", "d", "S1", "c", "u"), Article("T2", "d", "S2", "c", "u")]
    prompt = PromptManager.news_report([a.to_dict() for a in articles])
    assert "top 2 articles" in prompt
    assert "## 1: T1" in prompt and "(Source: S2)" in prompt


def test_unreadable_pdf_has_no_text():
    assert extract_pdf_text(b"this is not a pdf") is None


def test_malformed_news_bodies_return_none():
    as_list = GNewsClient(api_key="k", transport=gnews_transport(payload=[{"title": "x"}]))
    assert asyncio.run(as_list.fetch_top_headlines()) is None

    string_source = {"articles": [{"title": "x", "source": "The Daily"}]}
    client = GNewsClient(api_key="k", transport=gnews_transport(payload=string_source))
    assert asyncio.run(client.fetch_top_headlines()) is None


def test_malformed_news_still_builds_report(tmp_path):
    llm = MockLLMClient()
    turn = asyncio.run(make_builder(tmp_path, llm, gnews_transport(payload=["oops"])).build())
    assert turn.context == PromptManager.NO_NEWS_REPORT
    assert llm.generated == []
