"""Article extraction: fetch a page and reduce its DOM to summarisable text."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from urllib.parse import urlparse

import requests
from bs4 import BeautifulSoup

from summarysheet.config import FetchConfig
from summarysheet.errors import (
    AccessDeniedError,
    ExtractionError,
    FetchFailedError,
    InsufficientContentError,
    InvalidInputError,
    NetworkError,
    NotFoundError,
)
from summarysheet.models import ActionResult, ArticleText

__all__ = [
    "ArticleExtractor",
    "FetchedDocument",
    "extract_article_text",
    "fetch_article",
    "validate_url",
]

logger = logging.getLogger(__name__)

REMOVED_TAGS = ["script", "style", "iframe", "noscript", "nav", "footer", "header"]
CONTENT_ROOTS = ("article", "main", "body")
TEXT_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6", "p")
MIN_TEXT_LENGTH = 50

DEFAULT_HEADERS = {
    "Accept": (
        "text/html,application/xhtml+xml,application/xml;q=0.9,"
        "image/avif,image/webp,*/*;q=0.8"
    ),
    "Accept-Language": "en-US,en;q=0.9",
    "Accept-Encoding": "gzip, deflate",
    "Connection": "keep-alive",
}

_BLANK_LINES_RE = re.compile(r"\n{2,}")


@dataclass(slots=True)
class FetchedDocument:
    """Raw payload of a single page fetch."""

    url: str
    status: int
    html: str


def validate_url(url: str) -> str:
    """Return ``url`` stripped, or raise :class:`InvalidInputError` if it is malformed."""

    candidate = (url or "").strip()
    if not candidate or any(char.isspace() for char in candidate):
        raise InvalidInputError()

    try:
        parsed = urlparse(candidate)
        parsed.port  # raises ValueError for an out-of-range port
        requests.Request("GET", candidate).prepare()
    except (ValueError, requests.RequestException) as exc:
        raise InvalidInputError() from exc

    if parsed.scheme not in {"http", "https"} or not parsed.hostname:
        raise InvalidInputError()
    return candidate


def _select_text_elements(soup: BeautifulSoup) -> list:
    """Return heading and paragraph elements of the preferred content root, in document order."""

    for root in CONTENT_ROOTS:
        if soup.find(root) is None:
            continue
        selector = ", ".join(f"{root} {tag}" for tag in TEXT_TAGS)
        return soup.select(selector)

    return soup.find_all(TEXT_TAGS)


def extract_article_text(html: str, *, min_length: int = MIN_TEXT_LENGTH) -> str:
    """Reduce ``html`` to newline separated heading and paragraph text.

    Boilerplate elements are removed first. Content is taken from ``<article>``
    when present, then ``<main>``, then the whole ``<body>``. Raises
    :class:`InsufficientContentError` when fewer than ``min_length`` characters
    remain.
    """

    soup = BeautifulSoup(html, "lxml")
    for tag in soup(REMOVED_TAGS):
        tag.decompose()

    segments = [element.get_text().strip() for element in _select_text_elements(soup)]
    text = "\n".join(segment for segment in segments if segment)

    if len(text) < min_length:
        raise InsufficientContentError()

    return _BLANK_LINES_RE.sub("\n", text).strip()


class ArticleExtractor:
    """Fetch article pages over HTTP and extract their readable text."""

    def __init__(
        self,
        config: FetchConfig | None = None,
        session: requests.Session | None = None,
    ) -> None:
        self._config = config or FetchConfig()
        self._session = session or requests.Session()
        self._session.headers.update(DEFAULT_HEADERS)
        self._session.headers["User-Agent"] = self._config.user_agent

    def fetch(self, url: str) -> FetchedDocument:
        """Download ``url``, translating HTTP and transport failures into typed errors."""

        try:
            response = self._session.get(url, timeout=self._config.timeout)
        except (requests.ConnectionError, requests.Timeout) as exc:
            logger.warning("No response from %s: %s", url, exc)
            raise NetworkError() from exc
        except requests.RequestException as exc:
            logger.error("Request for %s failed: %s", url, exc)
            raise ExtractionError() from exc

        status = response.status_code
        if status in (401, 403):
            raise AccessDeniedError(status)
        if status == 404:
            raise NotFoundError(status)
        if status != 200:
            raise FetchFailedError(status)

        return FetchedDocument(url=url, status=status, html=response.text)

    def extract(self, url: str) -> ArticleText:
        """Validate, fetch and extract the article at ``url``."""

        url = validate_url(url)
        document = self.fetch(url)
        text = extract_article_text(document.html, min_length=self._config.min_text_length)
        logger.info("Extracted %d characters from %s", len(text), url)
        return ArticleText(url=url, text=text)


def fetch_article(url: str, extractor: ArticleExtractor | None = None) -> ActionResult[ArticleText]:
    """Run the extraction pipeline and report the outcome without raising."""

    extractor = extractor or ArticleExtractor()
    try:
        article = extractor.extract(url)
    except ExtractionError as exc:
        logger.info("Extraction of %s failed (%s): %s", url, exc.kind, exc.message)
        return ActionResult[ArticleText].failure(exc)

    return ActionResult[ArticleText].success("Article fetched successfully", article)
