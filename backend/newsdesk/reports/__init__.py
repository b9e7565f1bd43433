"""
Reports module: news headlines -> LLM summary -> PDF.
"""

from newsdesk.reports.renderer import ReportRenderer, RenderedReport, parse_outline
from newsdesk.reports.builder import NewsReportBuilder, ReportGenerationError

__all__ = [
    "ReportRenderer",
    "RenderedReport",
    "parse_outline",
    "NewsReportBuilder",
    "ReportGenerationError",
]
