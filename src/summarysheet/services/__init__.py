"""Service layer entry points for Summary Sheet."""

from __future__ import annotations

from .extractor import ArticleExtractor, extract_article_text, fetch_article  # noqa: F401
from .renderer import render_summary, render_summary_png, wrap_text  # noqa: F401
from .store import SummaryStore  # noqa: F401
from .summarizer import refine_summary, summarize_article  # noqa: F401

__all__ = [
    "ArticleExtractor",
    "SummaryStore",
    "extract_article_text",
    "fetch_article",
    "refine_summary",
    "render_summary",
    "render_summary_png",
    "summarize_article",
    "wrap_text",
]
