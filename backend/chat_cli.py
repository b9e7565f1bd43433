#!/usr/bin/env python3
"""
Newsdesk Chat CLI

Talks to the same router and materializer as the API, keeping the
conversation in memory instead of the database.

Usage:
    python chat_cli.py [--mock] [--provider gemini|openai]

Examples:
    python chat_cli.py                    # Run with Gemini/OpenAI
    python chat_cli.py --mock             # Run with mock LLM
    python chat_cli.py --provider openai  # Force OpenAI
"""

import asyncio
import argparse
import os
import sys
from pathlib import Path
from typing import List, Optional

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent))

from dotenv import load_dotenv
load_dotenv()

from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel
from rich.theme import Theme

from newsdesk.adapters.llm import HistoryEntry, LLMClientInterface, LLMError
from newsdesk.conversation.materializer import ResponseMaterializer
from newsdesk.conversation.router import Route
from newsdesk.conversation.service import route_for
from newsdesk.conversation.turns import Turn, TurnType, document_context
from newsdesk.reports.builder import ReportGenerationError

CHAT_THEME = Theme(
    {
        "info": "cyan",
        "warning": "yellow",
        "error": "red bold",
        "success": "green bold",
        "route": "dim",
        "user": "magenta bold",
    }
)

TURN_STYLES = {
    TurnType.PDF_PROMPT: ("📰 Report?", "yellow"),
    TurnType.PDF_LOADING: ("⏳ Building report", "yellow"),
    TurnType.PDF: ("📄 Report", "green"),
    TurnType.PDF_CLOSE_PROMPT: ("📄 Close report?", "yellow"),
    TurnType.PDF_CLOSE: ("📄 Closed", "dim"),
}


class MockLLMClient(LLMClientInterface):
    """Mock LLM for testing without API keys."""

    async def send(
        self,
        history: List[HistoryEntry],
        message: str,
        system_instruction: Optional[str] = None,
    ) -> str:
        if system_instruction:
            return "Mock answer based on the open document."
        return f"Mock reply ({len(history)} earlier turns): {message[:60]}"

    async def generate(
        self,
        prompt: str,
        system_instruction: Optional[str] = None,
        temperature: Optional[float] = None,
    ) -> str:
        return (
            "# Mock News Report\n"
            "A short look at today's headlines.\n"
            "## Technology\n"
            "### Chips\n"
            "* Demand keeps growing.\n"
            "(Source: Mock Wire)\n"
        )


def create_llm(provider: Optional[str], console: Console) -> LLMClientInterface:
    from newsdesk.adapters.llm import LLMFactory

    gemini_key = os.getenv("GEMINI_API_KEY")
    openai_key = os.getenv("OPENAI_API_KEY")

    if provider != "openai" and gemini_key:
        console.print("[info]Using Gemini API[/info]")
        return LLMFactory.create_client("gemini", api_key=gemini_key)
    if provider != "gemini" and openai_key:
        console.print("[info]Using OpenAI API[/info]")
        return LLMFactory.create_client("openai", api_key=openai_key)

    console.print("[error]No API key found![/error]")
    console.print("""
[bold]Setup required:[/bold]

1. Create a .env file with your API key:
   [cyan]GEMINI_API_KEY=your_key_here[/cyan]
   or
   [cyan]OPENAI_API_KEY=your_key_here[/cyan]

2. Or run in mock mode for testing:
   [cyan]python chat_cli.py --mock[/cyan]
    """)
    sys.exit(1)


class ChatCLI:
    """In-memory conversation loop."""

    def __init__(self, llm_client: LLMClientInterface, report_dir: Path):
        self.console = Console(theme=CHAT_THEME)
        self.llm = llm_client
        self.materializer = ResponseMaterializer(llm_client)
        self.report_dir = report_dir
        self.turns: List[Turn] = []

    def print_turn(self, turn: Turn):
        title, border = TURN_STYLES.get(turn.type, ("🤖 Assistant", "blue"))
        body = turn.text
        if turn.url:
            body += f"\n\n`{turn.url}`"
        self.console.print()
        self.console.print(
            Panel(Markdown(body), title=title, title_align="left", border_style=border, padding=(1, 2))
        )

    async def build_report(self) -> Turn:
        from newsdesk.adapters.news import GNewsClient
        from newsdesk.reports.builder import NewsReportBuilder
        from newsdesk.reports.renderer import ReportRenderer

        builder = NewsReportBuilder(
            llm_client=self.llm,
            news_client=GNewsClient(),
            renderer=ReportRenderer(self.report_dir, public_prefix=str(self.report_dir)),
        )
        with self.console.status("[info]Fetching headlines and writing the report...[/info]"):
            return await builder.build()

    async def handle(self, message: str):
        route = route_for(self.turns, message)
        self.console.print(f"[route]◉ {route.value}[/route]", justify="right")

        history = list(self.turns)
        context = document_context(history)
        self.turns.append(Turn.user(message))

        reply = await self.materializer.materialize(route, message, history, context)
        self.turns.append(reply)
        self.print_turn(reply)

        if route == Route.REPORT_LOADING:
            report = await self.build_report()
            self.turns.append(report)
            self.print_turn(report)

    async def run(self):
        self.console.print(
            Panel("📰 NEWSDESK CHAT\nAsk about the news, or anything else. Type 'quit' to exit.",
                  style="bold cyan", border_style="cyan")
        )
        while True:
            self.console.print()
            message = self.console.input("[user]You:[/user] ").strip()
            if message.lower() in ("quit", "exit"):
                break
            if not message:
                continue
            try:
                await self.handle(message)
            except LLMError as e:
                self.console.print(f"[error]LLM error: {e}[/error]")
            except ReportGenerationError as e:
                self.console.print(f"[error]Report failed: {e}[/error]")
        self.console.print("[success]Goodbye![/success]")


def main():
    """Parse arguments and run CLI."""
    parser = argparse.ArgumentParser(description="Newsdesk Chat CLI")
    parser.add_argument("--mock", action="store_true", help="Use mock LLM for testing")
    parser.add_argument(
        "--provider", choices=["gemini", "openai"], default=None, help="Preferred LLM provider"
    )
    parser.add_argument(
        "--report-dir", default="uploads/pdfs", help="Where generated reports are written"
    )
    args = parser.parse_args()

    console = Console(theme=CHAT_THEME)
    if args.mock:
        console.print("[info]Running in MOCK mode (no API calls)[/info]")
        llm = MockLLMClient()
    else:
        llm = create_llm(args.provider, console)

    try:
        asyncio.run(ChatCLI(llm, Path(args.report_dir)).run())
    except KeyboardInterrupt:
        print("\nGoodbye!")


if __name__ == "__main__":
    main()
