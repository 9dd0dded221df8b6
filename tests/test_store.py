from __future__ import annotations

from pathlib import Path

from summarysheet.services.store import DEFAULT_BLOB_ROOT, SummaryStore


def test_create_and_get_round_trip(tmp_path: Path) -> None:
    store = SummaryStore(tmp_path)

    created = store.create(
        user_id="user_1",
        url="https://example.com/story",
        original_text="Original article text",
        summary_text="- A\n- B",
    )

    loaded = store.get(created.id)
    assert loaded == created
    assert (tmp_path / "summaries" / f"{created.id}.json").exists()
    assert created.created_at == created.updated_at


def test_update_changes_only_summary_text(tmp_path: Path) -> None:
    store = SummaryStore(tmp_path)
    created = store.create(
        user_id="user_1",
        url="https://example.com/story",
        original_text="Original article text",
        summary_text="- A",
    )

    updated = store.update(created.id, summary_text="- A\n- B")

    assert updated is not None
    assert updated.summary_text == "- A\n- B"
    assert updated.original_text == created.original_text
    assert updated.user_id == created.user_id
    assert updated.created_at == created.created_at
    assert updated.updated_at >= created.updated_at
    assert store.get(created.id).summary_text == "- A\n- B"


def test_missing_records_return_none(tmp_path: Path) -> None:
    store = SummaryStore(tmp_path)

    assert store.get("00000000-0000-0000-0000-000000000000") is None
    assert store.update("00000000-0000-0000-0000-000000000000", summary_text="- A") is None


def test_ids_outside_the_store_are_rejected(tmp_path: Path) -> None:
    store = SummaryStore(tmp_path / "blob")
    (tmp_path / "secret.json").write_text("{}", encoding="utf-8")

    assert store.get("../secret") is None


def test_unreadable_record_returns_none(tmp_path: Path) -> None:
    store = SummaryStore(tmp_path)
    summary_id = "11111111-1111-1111-1111-111111111111"
    store.directory.mkdir(parents=True)
    (store.directory / f"{summary_id}.json").write_text("not json", encoding="utf-8")

    assert store.get(summary_id) is None


def test_store_defaults_to_project_data_directory() -> None:
    assert SummaryStore().directory == DEFAULT_BLOB_ROOT / "summaries"


def test_store_accepts_string_root_and_creates_it(tmp_path: Path) -> None:
    root = tmp_path / "nested" / "blobs"
    store = SummaryStore(str(root))

    created = store.create(
        user_id="user_1",
        url="https://example.com/story",
        original_text="Original article text",
        summary_text="- A",
    )

    assert (root / "summaries" / f"{created.id}.json").exists()
