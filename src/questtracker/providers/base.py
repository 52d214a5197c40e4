"""Error types shared by the quest data providers."""

from __future__ import annotations


class QuestApiError(Exception):
    """Base exception for quest API errors."""

    def __init__(self, source: str, message: str) -> None:
        self.source = source
        super().__init__(f"[{source}] {message}")


class QuestApiConnectionError(QuestApiError):
    """Raised when the API is unreachable or a request times out."""


class QuestApiResponseError(QuestApiError):
    """Raised on non-200 responses or payloads that do not decode."""

    def __init__(self, source: str, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(source, message)
