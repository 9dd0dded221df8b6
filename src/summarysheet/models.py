"""Domain models used across the application."""

from __future__ import annotations

import base64
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from summarysheet.errors import FetchFailedError, SummarySheetError

DataT = TypeVar("DataT")


class ArticleText(BaseModel):
    """Readable text extracted from an article page."""

    url: str
    text: str


class SummaryDocument(BaseModel):
    """A stored summary owned by a single user."""

    id: str
    user_id: str
    url: str
    original_text: str
    summary_text: str
    created_at: datetime
    updated_at: datetime


class RefineOption(str, Enum):
    """Ways an existing summary can be reworked by the language model."""

    SHORTER = "shorter"
    LONGER = "longer"
    REWRITE = "rewrite"


class ActionResult(BaseModel, Generic[DataT]):
    """Structured outcome returned at service boundaries instead of raising."""

    is_success: bool
    message: str
    data: Optional[DataT] = None
    error: Optional[str] = Field(default=None, description="Error kind when is_success is false")
    status: Optional[int] = Field(default=None, description="Upstream HTTP status, if any")

    @classmethod
    def success(cls, message: str, data: DataT) -> "ActionResult[DataT]":
        return cls(is_success=True, message=message, data=data)

    @classmethod
    def failure(cls, exc: SummarySheetError) -> "ActionResult[DataT]":
        status = exc.status if isinstance(exc, FetchFailedError) else None
        return cls(is_success=False, message=exc.message, error=exc.kind, status=status)


@dataclass(slots=True, frozen=True)
class WrappedLine:
    """One visually fitting segment of a bullet and its horizontal offset."""

    text: str
    x: float


@dataclass
class RenderedPage:
    """An encoded page produced by a single render call."""

    width: int
    height: int
    png: bytes
    bullets_drawn: int
    clipped: bool = False

    def data_uri(self) -> str:
        encoded = base64.b64encode(self.png).decode("ascii")
        return f"data:image/png;base64,{encoded}"


__all__ = [
    "ActionResult",
    "ArticleText",
    "RefineOption",
    "RenderedPage",
    "SummaryDocument",
    "WrappedLine",
]
