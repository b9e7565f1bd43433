from functools import lru_cache
from pathlib import Path
from typing import AsyncGenerator
import logging

from fastapi import Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from newsdesk.adapters.llm import LLMClientInterface, LLMFactory
from newsdesk.adapters.news import GNewsClient
from newsdesk.conversation.service import ChatService
from newsdesk.core.config import settings
from newsdesk.core.database import get_session_factory
from newsdesk.reports.builder import NewsReportBuilder
from newsdesk.reports.renderer import ReportRenderer

logger = logging.getLogger(__name__)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    async with get_session_factory()() as session:
        try:
            yield session
        finally:
            await session.close()


def get_upload_dir() -> Path:
    return Path(settings.UPLOAD_DIR)


@lru_cache()
def _create_llm_client() -> LLMClientInterface:
    if settings.LLM_PROVIDER == "openai":
        return LLMFactory.create_client(
            provider="openai",
            api_key=settings.OPENAI_API_KEY,
            model_name=settings.OPENAI_MODEL,
        )
    return LLMFactory.create_client(
        provider="gemini",
        api_key=settings.GEMINI_API_KEY,
        model_name=settings.GEMINI_MODEL,
    )


def get_llm_client() -> LLMClientInterface:
    try:
        return _create_llm_client()
    except ValueError as e:
        logger.error(f"Failed to create LLM client: {e}")
        raise HTTPException(status_code=500, detail="LLM service unavailable")


def get_chat_service(session: AsyncSession = Depends(get_db)) -> ChatService:
    """Chat storage only; routes that never reach the LLM use this one."""
    return ChatService(session)


def get_conversation_service(
    session: AsyncSession = Depends(get_db),
    llm: LLMClientInterface = Depends(get_llm_client),
) -> ChatService:
    return ChatService(session, llm)


def get_report_builder(
    llm: LLMClientInterface = Depends(get_llm_client),
    upload_dir: Path = Depends(get_upload_dir),
) -> NewsReportBuilder:
    return NewsReportBuilder(
        llm_client=llm,
        news_client=GNewsClient(),
        renderer=ReportRenderer(upload_dir / "pdfs", public_prefix="/uploads/pdfs"),
    )
