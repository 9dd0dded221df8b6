"""Lay out a headline, subheadline and bullet list onto a fixed-size A4 page."""

from __future__ import annotations

import io
import logging
from functools import partial
from typing import Callable, List, Literal, Protocol

from PIL import Image, ImageDraw, ImageFont

from summarysheet.config import RenderConfig
from summarysheet.errors import RenderInitFailedError
from summarysheet.models import ActionResult, RenderedPage, WrappedLine
from summarysheet.services.retry import call_with_single_retry

__all__ = [
    "BULLET_PREFIX",
    "Canvas",
    "PillowCanvas",
    "allocate_canvas",
    "parse_bullets",
    "render_summary",
    "render_summary_png",
    "wrap_text",
]

logger = logging.getLogger(__name__)

BULLET_PREFIX = "- "
BACKGROUND = "#FFFFFF"
TEXT_COLOR = "#000000"

Align = Literal["left", "center"]

# Failures Pillow reports when it cannot allocate an image buffer.
_ALLOCATION_ERRORS = (MemoryError, OSError, ValueError)


class Canvas(Protocol):
    """Drawing surface used by the layout code."""

    width: int
    height: int

    def fill_rect(self, x: float, y: float, width: float, height: float, color: str) -> None: ...

    def draw_text(
        self, x: float, y: float, text: str, font_size: int, *, align: Align = "left", color: str = TEXT_COLOR
    ) -> None: ...

    def measure_text(self, text: str, font_size: int) -> float: ...

    def encode(self) -> bytes: ...


CanvasFactory = Callable[[int, int], Canvas]


class PillowCanvas:
    """:class:`Canvas` backed by a Pillow RGB image.

    Text coordinates refer to the baseline, like an HTML canvas with the
    default ``alphabetic`` baseline.
    """

    def __init__(self, width: int, height: int, *, font_path: str | None = None) -> None:
        self.width = width
        self.height = height
        self._image = Image.new("RGB", (width, height))
        self._draw = ImageDraw.Draw(self._image)
        self._font_path = font_path
        self._fonts: dict[int, ImageFont.FreeTypeFont] = {}

    def _font(self, size: int) -> ImageFont.FreeTypeFont:
        font = self._fonts.get(size)
        if font is not None:
            return font

        if self._font_path:
            try:
                font = ImageFont.truetype(self._font_path, size)
            except OSError as exc:
                logger.warning("Could not load font %s, using the default font: %s", self._font_path, exc)
                self._font_path = None

        if font is None:
            font = ImageFont.load_default(size=size)

        self._fonts[size] = font
        return font

    def fill_rect(self, x: float, y: float, width: float, height: float, color: str) -> None:
        self._draw.rectangle([x, y, x + width - 1, y + height - 1], fill=color)

    def draw_text(
        self, x: float, y: float, text: str, font_size: int, *, align: Align = "left", color: str = TEXT_COLOR
    ) -> None:
        anchor = "ms" if align == "center" else "ls"
        self._draw.text((x, y), text, font=self._font(font_size), fill=color, anchor=anchor)

    def measure_text(self, text: str, font_size: int) -> float:
        return self._font(font_size).getlength(text)

    def encode(self) -> bytes:
        buffer = io.BytesIO()
        self._image.save(buffer, format="PNG")
        return buffer.getvalue()


def parse_bullets(summary_text: str) -> List[str]:
    """Return the bullet lines of ``summary_text`` with their ``"- "`` marker removed."""

    bullets: List[str] = []
    for raw_line in summary_text.splitlines():
        line = raw_line.strip()
        if line.startswith(BULLET_PREFIX):
            bullets.append(line[len(BULLET_PREFIX):])
    return bullets


def wrap_text(
    measure: Callable[[str], float], text: str, max_width: float, x: float
) -> List[WrappedLine]:
    """Greedily pack the words of ``text`` into lines no wider than ``max_width``.

    Words are separated by single spaces, so text that fits comes back
    unchanged. A word that is wider than ``max_width`` on its own is kept whole
    on a line of its own.
    """

    if not text.strip():
        return []

    words = text.split(" ")
    lines: List[WrappedLine] = []
    current = words[0]
    for word in words[1:]:
        candidate = f"{current} {word}"
        if measure(candidate) <= max_width:
            current = candidate
        else:
            lines.append(WrappedLine(text=current, x=x))
            current = word

    lines.append(WrappedLine(text=current, x=x))
    return lines


def allocate_canvas(factory: CanvasFactory, width: int, height: int) -> Canvas:
    """Create a drawing surface, retrying once before giving up."""

    try:
        return call_with_single_retry(
            factory,
            width,
            height,
            description="canvas allocation",
            retry_on=_ALLOCATION_ERRORS,
        )
    except _ALLOCATION_ERRORS as exc:
        logger.error("Canvas allocation failed after retry: %s", exc)
        raise RenderInitFailedError() from exc


def render_summary(
    headline: str,
    subheadline: str,
    summary_text: str,
    settings: RenderConfig | None = None,
    *,
    canvas_factory: CanvasFactory | None = None,
) -> RenderedPage:
    """Render the summary page and return it as an encoded PNG.

    Content that runs past the printable height is not drawn; the returned page
    is flagged as ``clipped`` instead of raising.
    """

    settings = settings or RenderConfig()
    factory = canvas_factory or partial(PillowCanvas, font_path=settings.font_path)

    canvas = allocate_canvas(factory, settings.width, settings.height)
    width, height = settings.width, settings.height

    canvas.fill_rect(0, 0, width, height, BACKGROUND)
    canvas.draw_text(width / 2, height * settings.headline_y, headline, settings.headline_font_size, align="center")
    canvas.draw_text(
        width / 2, height * settings.subheadline_y, subheadline, settings.subheadline_font_size, align="center"
    )

    font_size = settings.bullet_font_size
    line_height = settings.line_height
    limit = settings.printable_height

    def measure(text: str) -> float:
        return canvas.measure_text(text, font_size)

    current_y = height * settings.bullets_y
    bullets = parse_bullets(summary_text)
    drawn = 0
    clipped = False

    for point in bullets:
        if current_y > limit:
            clipped = True
            break

        canvas.draw_text(settings.margin, current_y, settings.bullet_marker, font_size)
        drawn += 1

        lines = wrap_text(measure, point, settings.max_text_width, settings.text_x)
        if not lines:
            current_y += line_height
        for line in lines:
            if current_y > limit:
                clipped = True
                break
            canvas.draw_text(line.x, current_y, line.text, font_size)
            current_y += line_height

        if clipped:
            break
        current_y += line_height * settings.bullet_gap

    if clipped:
        logger.warning(
            "Summary overflows the page; drew %d of %d bullets and truncated the rest",
            drawn,
            len(bullets),
        )

    return RenderedPage(
        width=canvas.width,
        height=canvas.height,
        png=canvas.encode(),
        bullets_drawn=drawn,
        clipped=clipped,
    )


def render_summary_png(
    headline: str,
    subheadline: str,
    summary_text: str,
    settings: RenderConfig | None = None,
    *,
    canvas_factory: CanvasFactory | None = None,
) -> ActionResult[RenderedPage]:
    """Render the summary page and report the outcome without raising."""

    try:
        page = render_summary(
            headline, subheadline, summary_text, settings, canvas_factory=canvas_factory
        )
    except RenderInitFailedError as exc:
        return ActionResult[RenderedPage].failure(exc)

    message = "PNG generated successfully."
    if page.clipped:
        message = "PNG generated, but the summary was too long and has been truncated."
    return ActionResult[RenderedPage].success(message, page)
