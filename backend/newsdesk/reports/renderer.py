"""
ReportRenderer - lays out the LLM's markdown-like summary as a PDF.

Layout:
- cover page with the "# " title and generation time
- table of contents linking to the introduction and every "## " chapter
- introduction page (lines between the title and the first chapter)
- one page per "## " chapter with "###", "####", "* " and "(Source: ...)"
  lines styled individually
"""

import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence
from xml.sax.saxutils import escape

import structlog
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.platypus import (
    ListFlowable,
    ListItem,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
)

from newsdesk.adapters.news import Article

logger = structlog.get_logger()

DEFAULT_TITLE = "AI News Report"


class BlockKind(str, Enum):
    CHAPTER = "chapter"
    SUBHEADING = "subheading"
    MINOR_HEADING = "minor_heading"
    BULLET = "bullet"
    SOURCE = "source"
    BODY = "body"


@dataclass
class Block:
    kind: BlockKind
    text: str
    anchor: Optional[str] = None


@dataclass
class ReportOutline:
    title: str = DEFAULT_TITLE
    introduction: str = ""
    chapters: List[str] = field(default_factory=list)
    blocks: List[Block] = field(default_factory=list)


@dataclass
class RenderedReport:
    file_url: str
    raw_text: str
    file_path: Optional[Path] = None


def parse_outline(text: str) -> ReportOutline:
    """Split the summary into title, introduction, chapter list and body blocks."""
    outline = ReportOutline()
    lines = text.split("\n")

    found_title = False
    found_chapter = False
    intro_lines: List[str] = []
    for line in lines:
        if line.startswith("# "):
            outline.title = line[2:].strip()
            found_title = True
        elif line.startswith("## "):
            outline.chapters.append(line[3:].strip())
            found_chapter = True
        elif found_title and not found_chapter and line.strip():
            intro_lines.append(line)
    outline.introduction = "\n".join(intro_lines).strip()

    chapter_index = 0
    in_intro = False
    for line in lines:
        stripped = line.strip()
        if line.startswith("# "):
            in_intro = True
            continue
        if line.startswith("## "):
            in_intro = False
            chapter_index += 1
            outline.blocks.append(
                Block(BlockKind.CHAPTER, line[3:].strip(), anchor=f"chap{chapter_index}")
            )
        elif in_intro:
            # Already on the introduction page
            continue
        elif line.startswith("### "):
            outline.blocks.append(Block(BlockKind.SUBHEADING, line[4:].strip()))
        elif line.startswith("#### "):
            outline.blocks.append(Block(BlockKind.MINOR_HEADING, line[5:].strip()))
        elif line.startswith("* "):
            outline.blocks.append(Block(BlockKind.BULLET, line[2:].strip()))
        elif line.startswith("(Source:"):
            outline.blocks.append(Block(BlockKind.SOURCE, line[1:-1]))
        elif stripped and not any(title and title in line for title in outline.chapters):
            outline.blocks.append(Block(BlockKind.BODY, line))

    return outline


def _styles() -> dict:
    body = ParagraphStyle(
        "Body", fontName="Helvetica", fontSize=12, leading=17, alignment=TA_JUSTIFY,
        spaceAfter=6,
    )
    return {
        "title": ParagraphStyle(
            "Title", fontName="Helvetica-Bold", fontSize=28, leading=34,
            alignment=TA_CENTER, spaceBefore=180,
        ),
        "meta": ParagraphStyle(
            "Meta", fontName="Helvetica", fontSize=12, leading=16,
            alignment=TA_CENTER, spaceBefore=200,
        ),
        "toc_heading": ParagraphStyle(
            "TocHeading", fontName="Helvetica-Bold", fontSize=20, leading=24,
            alignment=TA_LEFT, spaceAfter=24,
        ),
        "toc_entry": ParagraphStyle(
            "TocEntry", fontName="Helvetica", fontSize=14, leading=18, spaceAfter=7,
        ),
        "section": ParagraphStyle(
            "Section", fontName="Helvetica-Bold", fontSize=18, leading=22, spaceAfter=12,
        ),
        "chapter": ParagraphStyle(
            "Chapter", fontName="Helvetica-Bold", fontSize=20, leading=24, spaceAfter=12,
        ),
        "subheading": ParagraphStyle(
            "Subheading", fontName="Helvetica-Bold", fontSize=16, leading=20, spaceAfter=3,
        ),
        "minor_heading": ParagraphStyle(
            "MinorHeading", fontName="Helvetica-BoldOblique", fontSize=14, leading=18,
            spaceAfter=7,
        ),
        "source": ParagraphStyle(
            "Source", fontName="Helvetica-Oblique", fontSize=10, leading=13,
            leftIndent=20, spaceAfter=12,
        ),
        "body": body,
    }


class ReportRenderer:
    """Writes report PDFs into ``output_dir`` and returns their public URL."""

    def __init__(self, output_dir: Path, public_prefix: str = "/uploads/pdfs"):
        self.output_dir = Path(output_dir)
        self.public_prefix = public_prefix.rstrip("/")

    def build_story(self, outline: ReportOutline, generated_at: Optional[datetime] = None) -> list:
        """Flowables for the whole document."""
        styles = _styles()
        generated_at = generated_at or datetime.now()
        story: list = []

        # Cover
        story.append(Paragraph(escape(outline.title), styles["title"]))
        story.append(
            Paragraph(
                f"Generated on: {generated_at.strftime('%d/%m/%Y, %I:%M:%S %p')}",
                styles["meta"],
            )
        )
        story.append(PageBreak())

        # Table of contents
        story.append(Paragraph("Table of Contents", styles["toc_heading"]))
        story.append(Paragraph('<a href="#intro">Introduction</a>', styles["toc_entry"]))
        story.append(Spacer(1, 7))
        for index, title in enumerate(outline.chapters, start=1):
            story.append(
                Paragraph(f'<a href="#chap{index}">{escape(title)}</a>', styles["toc_entry"])
            )
        story.append(PageBreak())

        # Introduction
        story.append(Paragraph('<a name="intro"/>Introduction', styles["section"]))
        if outline.introduction:
            for paragraph in outline.introduction.split("\n"):
                story.append(Paragraph(escape(paragraph), styles["body"]))

        for block in outline.blocks:
            text = escape(block.text)
            if block.kind == BlockKind.CHAPTER:
                story.append(PageBreak())
                story.append(
                    Paragraph(f'<a name="{block.anchor}"/><u>{text}</u>', styles["chapter"])
                )
            elif block.kind == BlockKind.SUBHEADING:
                story.append(Paragraph(text, styles["subheading"]))
            elif block.kind == BlockKind.MINOR_HEADING:
                story.append(Paragraph(text, styles["minor_heading"]))
            elif block.kind == BlockKind.BULLET:
                story.append(
                    ListFlowable(
                        [ListItem(Paragraph(text, styles["body"]), leftIndent=20)],
                        bulletType="bullet",
                        start="•",
                        leftIndent=20,
                    )
                )
            elif block.kind == BlockKind.SOURCE:
                story.append(Paragraph(text, styles["source"]))
            else:
                story.append(Paragraph(text, styles["body"]))

        return story

    def write(self, summary_text: str, file_path: Path) -> None:
        outline = parse_outline(summary_text)
        doc = SimpleDocTemplate(
            str(file_path),
            pagesize=A4,
            leftMargin=72,
            rightMargin=72,
            topMargin=72,
            bottomMargin=72,
            title=outline.title,
        )
        doc.build(self.build_story(outline))

    async def render(
        self, summary_text: str, articles: Optional[Sequence[Article]] = None
    ) -> RenderedReport:
        """Render ``summary_text`` to a new PDF file."""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        file_name = f"news_report_{int(time.time() * 1000)}.pdf"
        file_path = self.output_dir / file_name

        await asyncio.to_thread(self.write, summary_text, file_path)
        logger.info(
            "report_rendered",
            file=file_name,
            articles=len(articles or []),
            chars=len(summary_text),
        )
        return RenderedReport(
            file_url=f"{self.public_prefix}/{file_name}",
            raw_text=summary_text,
            file_path=file_path,
        )
