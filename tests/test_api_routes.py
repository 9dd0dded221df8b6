"""Tests for the HTTP endpoints in :mod:`summarysheet.api.routes`."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from summarysheet.api.app import create_app
from summarysheet.config import AppConfig, AuthConfig, RenderConfig, StorageConfig
from summarysheet.errors import AccessDeniedError, InsufficientContentError, NetworkError, SummarizerError
from summarysheet.models import ActionResult, ArticleText

USER = {"X-User-Id": "user_1"}
OTHER_USER = {"X-User-Id": "user_2"}

ARTICLE = ArticleText(url="https://example.com/story", text="Original article text " * 5)


@pytest.fixture()
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        storage=StorageConfig(blob_root=str(tmp_path)),
        render=RenderConfig(width=400, height=600, margin=20, bullet_indent=10),
    )


@pytest.fixture()
def client(config: AppConfig):
    with patch("summarysheet.api.routes.load_config", return_value=config):
        yield TestClient(create_app())


def _create_summary(client: TestClient, summary_text: str = "- A\n- B") -> dict:
    with patch(
        "summarysheet.api.routes.fetch_article",
        return_value=ActionResult[ArticleText].success("ok", ARTICLE),
    ), patch("summarysheet.api.routes.summarize_article", return_value=summary_text):
        response = client.post("/api/summaries", json={"url": ARTICLE.url}, headers=USER)
    assert response.status_code == 200
    return response.json()


def test_index_page_is_served(client: TestClient) -> None:
    response = client.get("/")

    assert response.status_code == 200
    assert "Summary Sheet" in response.text
    assert "/api/summaries" in response.text


def test_requests_without_user_are_rejected(client: TestClient) -> None:
    response = client.post("/api/articles/fetch", json={"url": ARTICLE.url})

    assert response.status_code == 401


def test_users_outside_allow_list_are_rejected(config: AppConfig) -> None:
    config.auth = AuthConfig(allowed_user_ids=["user_9"])

    with patch("summarysheet.api.routes.load_config", return_value=config):
        response = TestClient(create_app()).post(
            "/api/articles/fetch", json={"url": ARTICLE.url}, headers=USER
        )

    assert response.status_code == 403


def test_fetch_article_returns_text(client: TestClient) -> None:
    with patch(
        "summarysheet.api.routes.fetch_article",
        return_value=ActionResult[ArticleText].success("ok", ARTICLE),
    ) as mock_fetch:
        response = client.post("/api/articles/fetch", json={"url": ARTICLE.url}, headers=USER)

    assert response.status_code == 200
    assert response.json() == ARTICLE.model_dump()
    assert mock_fetch.call_args.args[0] == ARTICLE.url


@pytest.mark.parametrize(
    ("error", "status_code"),
    [
        (AccessDeniedError(), 403),
        (InsufficientContentError(), 422),
        (NetworkError(), 504),
    ],
)
def test_fetch_article_maps_failures(client: TestClient, error, status_code: int) -> None:
    with patch(
        "summarysheet.api.routes.fetch_article",
        return_value=ActionResult[ArticleText].failure(error),
    ):
        response = client.post("/api/articles/fetch", json={"url": ARTICLE.url}, headers=USER)

    assert response.status_code == status_code
    assert response.json()["detail"] == error.message


def test_fetch_article_rejects_invalid_url(client: TestClient) -> None:
    response = client.post("/api/articles/fetch", json={"url": "not a url"}, headers=USER)

    assert response.status_code == 400
    assert "valid URL" in response.json()["detail"]


def test_create_summary_stores_record(client: TestClient) -> None:
    created = _create_summary(client)

    assert created["user_id"] == "user_1"
    assert created["url"] == ARTICLE.url
    assert created["original_text"] == ARTICLE.text
    assert created["summary_text"] == "- A\n- B"

    response = client.get(f"/api/summaries/{created['id']}", headers=USER)
    assert response.status_code == 200
    assert response.json() == created


def test_create_summary_reports_summarizer_failure(client: TestClient) -> None:
    with patch(
        "summarysheet.api.routes.fetch_article",
        return_value=ActionResult[ArticleText].success("ok", ARTICLE),
    ), patch(
        "summarysheet.api.routes.summarize_article",
        side_effect=SummarizerError(),
    ):
        response = client.post("/api/summaries", json={"url": ARTICLE.url}, headers=USER)

    assert response.status_code == 502
    assert "after retry" in response.json()["detail"]


def test_summaries_are_private_to_their_owner(client: TestClient) -> None:
    created = _create_summary(client)

    response = client.get(f"/api/summaries/{created['id']}", headers=OTHER_USER)

    assert response.status_code == 403


def test_unknown_summary_returns_404(client: TestClient) -> None:
    response = client.get("/api/summaries/00000000-0000-0000-0000-000000000000", headers=USER)

    assert response.status_code == 404


def test_edit_summary(client: TestClient) -> None:
    created = _create_summary(client)

    response = client.patch(
        f"/api/summaries/{created['id']}", json={"summary_text": "- Edited"}, headers=USER
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["summary_text"] == "- Edited"
    assert payload["original_text"] == created["original_text"]


def test_refine_summary(client: TestClient) -> None:
    created = _create_summary(client, "- A\n- B\n- C")

    with patch("summarysheet.api.routes.refine_summary", return_value="- A") as mock_refine:
        response = client.post(
            f"/api/summaries/{created['id']}/refine", json={"option": "shorter"}, headers=USER
        )

    assert response.status_code == 200
    assert response.json()["summary_text"] == "- A"
    option, original_text, current, _config = mock_refine.call_args.args
    assert option == "shorter"
    assert original_text == ARTICLE.text
    assert current == "- A\n- B\n- C"


def test_refine_rejects_unknown_option(client: TestClient) -> None:
    created = _create_summary(client)

    response = client.post(
        f"/api/summaries/{created['id']}/refine", json={"option": "sideways"}, headers=USER
    )

    assert response.status_code == 422


def test_generate_png(client: TestClient) -> None:
    created = _create_summary(client)

    response = client.post(
        f"/api/summaries/{created['id']}/png",
        json={"headline": "Headline", "subheadline": "Subheadline"},
        headers=USER,
    )

    assert response.status_code == 200
    payload = response.json()
    assert payload["image"].startswith("data:image/png;base64,")
    assert (payload["width"], payload["height"]) == (400, 600)
    assert payload["clipped"] is False


def test_generate_png_requires_headlines(client: TestClient) -> None:
    created = _create_summary(client)

    response = client.post(
        f"/api/summaries/{created['id']}/png",
        json={"headline": "", "subheadline": "Subheadline"},
        headers=USER,
    )

    assert response.status_code == 422


def test_generate_png_for_other_users_summary_is_forbidden(client: TestClient) -> None:
    created = _create_summary(client)

    response = client.post(
        f"/api/summaries/{created['id']}/png",
        json={"headline": "Headline", "subheadline": "Subheadline"},
        headers=OTHER_USER,
    )

    assert response.status_code == 403
