"""
NewsReportBuilder - headlines -> LLM summary -> PDF -> ``pdf`` turn.

Runs after the user accepted the report offer (a ``pdf_loading`` turn).
The summary text becomes the document context of the resulting turn.
"""

import logging
from typing import List, Optional

from newsdesk.adapters.llm import LLMClientInterface, LLMError
from newsdesk.adapters.news import Article, GNewsClient
from newsdesk.conversation.turns import Turn, TurnType
from newsdesk.core.prompts import PromptManager, Replies
from newsdesk.reports.renderer import RenderedReport, ReportRenderer

logger = logging.getLogger(__name__)


class ReportGenerationError(Exception):
    pass


class NewsReportBuilder:
    """Builds the news report PDF and the turn that presents it."""

    def __init__(
        self,
        llm_client: LLMClientInterface,
        news_client: GNewsClient,
        renderer: ReportRenderer,
        temperature: float = 0.7,
    ):
        self.llm = llm_client
        self.news = news_client
        self.renderer = renderer
        self.temperature = temperature

    async def summarize(self, articles: Optional[List[Article]]) -> str:
        """Ask the LLM for the report text; no articles -> fixed notice."""
        if not articles:
            return PromptManager.NO_NEWS_REPORT

        prompt = PromptManager.news_report([a.to_dict() for a in articles])
        return await self.llm.generate(
            prompt,
            system_instruction=PromptManager.NEWS_SYSTEM_INSTRUCTION,
            temperature=self.temperature,
        )

    async def build_report(self) -> RenderedReport:
        articles = await self.news.fetch_top_headlines()
        logger.info(f"Building news report from {len(articles or [])} articles")

        try:
            summary = await self.summarize(articles)
            return await self.renderer.render(summary, articles)
        except LLMError as e:
            logger.error(f"News summary failed: {e}")
            raise ReportGenerationError("News summary failed") from e
        except OSError as e:
            logger.error(f"Writing report PDF failed: {e}")
            raise ReportGenerationError("Writing report PDF failed") from e

    async def build(self) -> Turn:
        """Produce the ``pdf`` turn carrying the file URL and the summary."""
        report = await self.build_report()
        return Turn.ai(
            Replies.REPORT_READY,
            type=TurnType.PDF,
            url=report.file_url,
            context=report.raw_text,
        )
