"""File-backed storage for summary records."""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
import uuid
from datetime import UTC, datetime
from pathlib import Path

from pydantic import ValidationError

from summarysheet.models import SummaryDocument

__all__ = ["DEFAULT_BLOB_ROOT", "SummaryStore", "store_json"]

logger = logging.getLogger(__name__)

#: Project data directory; summaries live in its ``summaries`` subdirectory.
DEFAULT_BLOB_ROOT = Path(__file__).resolve().parents[3] / "data"
SUMMARIES_SUBDIR = "summaries"

_ID_RE = re.compile(r"^[0-9a-f-]{36}$")


def store_json(path: Path, payload: dict) -> None:
    """Atomically write ``payload`` as UTF-8 JSON to ``path``."""

    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as file:
            json.dump(payload, file, ensure_ascii=False, indent=2)
        os.replace(tmp_name, path)
    except BaseException:
        Path(tmp_name).unlink(missing_ok=True)
        raise


class SummaryStore:
    """Create, read and update :class:`SummaryDocument` records by identifier."""

    def __init__(self, blob_root: Path | str | None = None) -> None:
        self._root = Path(blob_root) if blob_root is not None else DEFAULT_BLOB_ROOT

    @property
    def directory(self) -> Path:
        return self._root / SUMMARIES_SUBDIR

    def _path(self, summary_id: str) -> Path | None:
        if not _ID_RE.match(summary_id):
            return None
        return self.directory / f"{summary_id}.json"

    def _write(self, document: SummaryDocument) -> None:
        path = self.directory / f"{document.id}.json"
        store_json(path, document.model_dump(mode="json"))

    def create(self, *, user_id: str, url: str, original_text: str, summary_text: str) -> SummaryDocument:
        now = datetime.now(UTC)
        document = SummaryDocument(
            id=str(uuid.uuid4()),
            user_id=user_id,
            url=url,
            original_text=original_text,
            summary_text=summary_text,
            created_at=now,
            updated_at=now,
        )
        self._write(document)
        logger.info("Stored summary %s for %s", document.id, url)
        return document

    def get(self, summary_id: str) -> SummaryDocument | None:
        """Return the stored record, or ``None`` when it does not exist."""

        path = self._path(summary_id)
        if path is None or not path.exists():
            return None

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
            return SummaryDocument.model_validate(raw)
        except (OSError, json.JSONDecodeError, ValidationError) as exc:
            logger.warning("Stored summary %s is unreadable: %s", summary_id, exc)
            return None

    def update(self, summary_id: str, *, summary_text: str) -> SummaryDocument | None:
        """Replace the summary text of a record and refresh ``updated_at``."""

        document = self.get(summary_id)
        if document is None:
            return None

        updated = document.model_copy(
            update={"summary_text": summary_text, "updated_at": datetime.now(UTC)}
        )
        self._write(updated)
        logger.info("Updated summary %s", summary_id)
        return updated
