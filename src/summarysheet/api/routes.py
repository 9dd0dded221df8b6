"""API routes exposing extraction, summarisation and rendering functionality."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel, Field

from summarysheet.api.auth import authenticate
from summarysheet.config import AppConfig, load_config
from summarysheet.errors import SummarizerError
from summarysheet.models import ActionResult, ArticleText, RefineOption, SummaryDocument
from summarysheet.services.extractor import ArticleExtractor, fetch_article
from summarysheet.services.renderer import render_summary_png
from summarysheet.services.store import SummaryStore
from summarysheet.services.summarizer import refine_summary, summarize_article

logger = logging.getLogger(__name__)

router = APIRouter()

ERROR_STATUS = {
    "invalid_input": 400,
    "access_denied": 403,
    "not_found": 404,
    "insufficient_content": 422,
    "fetch_failed": 502,
    "network_error": 504,
}


class ArticleRequest(BaseModel):
    url: str


class SummaryUpdateRequest(BaseModel):
    summary_text: str = Field(..., min_length=1)


class RefineRequest(BaseModel):
    option: RefineOption


class PngRequest(BaseModel):
    headline: str = Field(..., min_length=1)
    subheadline: str = Field(..., min_length=1)


class PngResponse(BaseModel):
    image: str = Field(..., description="PNG encoded as a data URI")
    width: int
    height: int
    clipped: bool
    message: str


def get_config() -> AppConfig:
    try:
        return load_config()
    except ValueError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc


def get_store(config: AppConfig = Depends(get_config)) -> SummaryStore:
    return SummaryStore(config.storage.blob_root)


def current_user(request: Request, config: AppConfig = Depends(get_config)) -> str:
    return authenticate(request, config.auth)


def _raise_for_result(result: ActionResult) -> None:
    if result.is_success:
        return
    status_code = ERROR_STATUS.get(result.error or "", 502)
    raise HTTPException(status_code=status_code, detail=result.message)


def _load_owned(store: SummaryStore, summary_id: str, user_id: str) -> SummaryDocument:
    document = store.get(summary_id)
    if document is None:
        raise HTTPException(status_code=404, detail="Summary not found.")
    if document.user_id != user_id:
        raise HTTPException(status_code=403, detail="Unauthorized: You can only access your own summaries.")
    return document


async def _extract(url: str, config: AppConfig) -> ArticleText:
    extractor = ArticleExtractor(config.fetch)
    result = await run_in_threadpool(fetch_article, url, extractor)
    _raise_for_result(result)
    return result.data


@router.post("/articles/fetch", response_model=ArticleText)
async def fetch_article_text(
    payload: ArticleRequest,
    user_id: str = Depends(current_user),
    config: AppConfig = Depends(get_config),
) -> ArticleText:
    """Fetch a URL and return its extracted article text."""

    return await _extract(payload.url, config)


@router.post("/summaries", response_model=SummaryDocument)
async def create_summary(
    payload: ArticleRequest,
    user_id: str = Depends(current_user),
    config: AppConfig = Depends(get_config),
    store: SummaryStore = Depends(get_store),
) -> SummaryDocument:
    """Extract an article, summarise it and store the result for the current user."""

    article = await _extract(payload.url, config)

    try:
        summary_text = await run_in_threadpool(summarize_article, article.text, config.summarizer)
    except SummarizerError as exc:
        logger.exception("Summarisation of %s failed", article.url)
        raise HTTPException(status_code=502, detail=exc.message) from exc

    return store.create(
        user_id=user_id,
        url=article.url,
        original_text=article.text,
        summary_text=summary_text,
    )


@router.get("/summaries/{summary_id}", response_model=SummaryDocument)
async def retrieve_summary(
    summary_id: str,
    user_id: str = Depends(current_user),
    store: SummaryStore = Depends(get_store),
) -> SummaryDocument:
    return _load_owned(store, summary_id, user_id)


@router.patch("/summaries/{summary_id}", response_model=SummaryDocument)
async def edit_summary(
    summary_id: str,
    payload: SummaryUpdateRequest,
    user_id: str = Depends(current_user),
    store: SummaryStore = Depends(get_store),
) -> SummaryDocument:
    """Save a manually edited summary."""

    _load_owned(store, summary_id, user_id)
    updated = store.update(summary_id, summary_text=payload.summary_text)
    if updated is None:
        raise HTTPException(status_code=404, detail="Summary not found for update.")
    return updated


@router.post("/summaries/{summary_id}/refine", response_model=SummaryDocument)
async def refine_stored_summary(
    summary_id: str,
    payload: RefineRequest,
    user_id: str = Depends(current_user),
    config: AppConfig = Depends(get_config),
    store: SummaryStore = Depends(get_store),
) -> SummaryDocument:
    """Make the summary shorter, longer or reword it."""

    document = _load_owned(store, summary_id, user_id)

    try:
        refined = await run_in_threadpool(
            refine_summary,
            payload.option,
            document.original_text,
            document.summary_text,
            config.summarizer,
        )
    except SummarizerError as exc:
        logger.exception("Refining summary %s failed", summary_id)
        raise HTTPException(status_code=502, detail=exc.message) from exc

    updated = store.update(summary_id, summary_text=refined)
    if updated is None:
        raise HTTPException(status_code=404, detail="Summary not found for update.")
    return updated


@router.post("/summaries/{summary_id}/png", response_model=PngResponse)
async def generate_png(
    summary_id: str,
    payload: PngRequest,
    user_id: str = Depends(current_user),
    config: AppConfig = Depends(get_config),
    store: SummaryStore = Depends(get_store),
) -> PngResponse:
    """Render the stored summary as an A4 PNG."""

    document = _load_owned(store, summary_id, user_id)

    result = await run_in_threadpool(
        render_summary_png,
        payload.headline,
        payload.subheadline,
        document.summary_text,
        config.render,
    )
    if not result.is_success:
        raise HTTPException(status_code=500, detail=result.message)

    page = result.data
    return PngResponse(
        image=page.data_uri(),
        width=page.width,
        height=page.height,
        clipped=page.clipped,
        message=result.message,
    )
