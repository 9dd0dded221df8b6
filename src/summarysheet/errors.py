"""Error taxonomy shared by the extraction, summarisation and rendering services."""

from __future__ import annotations

__all__ = [
    "SummarySheetError",
    "ExtractionError",
    "InvalidInputError",
    "NetworkError",
    "FetchFailedError",
    "AccessDeniedError",
    "NotFoundError",
    "InsufficientContentError",
    "RenderInitFailedError",
    "SummarizerError",
]


class SummarySheetError(Exception):
    """Base class for failures that carry a user-presentable message.

    ``kind`` is a stable machine-readable label; ``message`` is safe to show to
    the person who submitted the request.
    """

    kind = "unexpected"
    default_message = "An unexpected error occurred."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class ExtractionError(SummarySheetError):
    default_message = "An unexpected error occurred while fetching the article."


class InvalidInputError(ExtractionError):
    kind = "invalid_input"
    default_message = "Please enter a valid URL (e.g., https://example.com)"


class NetworkError(ExtractionError):
    kind = "network_error"
    default_message = "Network error: Could not reach the server."


class FetchFailedError(ExtractionError):
    kind = "fetch_failed"

    def __init__(self, status: int, message: str | None = None) -> None:
        self.status = status
        super().__init__(message or f"Failed to fetch article: HTTP Status {status}")


class AccessDeniedError(FetchFailedError):
    kind = "access_denied"

    def __init__(self, status: int = 403, message: str | None = None) -> None:
        super().__init__(
            status,
            message or "Article unavailable: Access denied (possibly behind a paywall).",
        )


class NotFoundError(FetchFailedError):
    kind = "not_found"

    def __init__(self, status: int = 404, message: str | None = None) -> None:
        super().__init__(status, message or "Article not found (404).")


class InsufficientContentError(ExtractionError):
    kind = "insufficient_content"
    default_message = (
        "Could not find substantial article content. "
        "This might not be an article page or is behind a paywall."
    )


class RenderInitFailedError(SummarySheetError):
    kind = "render_init_failed"
    default_message = "Failed to initialize canvas for PNG generation after retry."


class SummarizerError(SummarySheetError):
    kind = "summarizer_failed"
    default_message = "Failed to generate summary after retry."
