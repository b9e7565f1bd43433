"""
Shared test helpers: a recording mock LLM and a throwaway SQLite database.
"""

import asyncio
from pathlib import Path
from typing import List, Optional

import pytest
from sqlalchemy.ext.asyncio import async_sessionmaker
from sqlalchemy.pool import NullPool

from newsdesk.adapters.llm import HistoryEntry, LLMClientInterface, LLMError
from newsdesk.core.database import create_engine, create_tables

SAMPLE_REPORT = (
    "# AI News Report: Top Headlines from India\n"
    "A quick overview of the day.\n"
    "## 1: Monsoon arrives early\n"
    "(Source: The Daily)\n"
    "#### Detailed Elaboration\n"
    "Rain reached the coast a week ahead of schedule.\n"
    "## 2: Markets rally\n"
    "(Source: Money Wire)\n"
    "### Background\n"
    "* Indices closed higher.\n"
)


class MockLLMClient(LLMClientInterface):
    """Mock LLM that records every call."""

    def __init__(self, reply: str = "Mock reply", report: str = SAMPLE_REPORT, fail: bool = False):
        self.reply = reply
        self.report = report
        self.fail = fail
        self.sent: List[dict] = []
        self.generated: List[dict] = []

    async def send(
        self,
        history: List[HistoryEntry],
        message: str,
        system_instruction: Optional[str] = None,
    ) -> str:
        self.sent.append(
            {"history": history, "message": message, "system_instruction": system_instruction}
        )
        if self.fail:
            raise LLMError("provider down")
        return self.reply

    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str:
        self.generated.append(
            {"prompt": prompt, "system_instruction": system_instruction, "temperature": temperature}
        )
        if self.fail:
            raise LLMError("provider down")
        return self.report


def make_engine(db_path: Path):
    engine = create_engine(f"sqlite+aiosqlite:///{db_path}", poolclass=NullPool)
    asyncio.run(create_tables(engine))
    return engine


@pytest.fixture
def mock_llm():
    return MockLLMClient()


@pytest.fixture
def session_factory(tmp_path):
    engine = make_engine(tmp_path / "test.db")
    return async_sessionmaker(engine, expire_on_commit=False)
