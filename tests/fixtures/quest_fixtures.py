"""Factory functions and a fake API for quest loading tests.

Payload builders return dicts shaped like XIVAPI responses so they exercise
the same alias decoding as live data.
"""

from __future__ import annotations

from typing import Any

from questtracker.config import TrackerConfig
from questtracker.models import QuestListPage, QuestRecord
from questtracker.providers.base import QuestApiConnectionError, QuestApiResponseError

MSQ_GENRE = {"ID": 5, "Name": "Seventh Umbral Era"}
SIDE_GENRE = {"ID": 40, "Name": "Gridanian Sidequests"}


def fast_config(**overrides: Any) -> TrackerConfig:
    """Config with no delays and small batches."""
    values: dict[str, Any] = {"page_delay": 0, "batch_delay": 0, "batch_size": 2}
    values.update(overrides)
    return TrackerConfig(**values)


def detail_payload(
    quest_id: int,
    name: str | None = None,
    *,
    prev: tuple[int, int, int] = (0, 0, 0),
    level: int = 1,
    genre: dict[str, Any] | None = None,
    expansion: dict[str, Any] | None = None,
    icon: str = "/i/071000/071201.png",
) -> dict[str, Any]:
    """Build a ``/Quest/{id}`` response body."""
    return {
        "ID": quest_id,
        "Name": f"Quest {quest_id}" if name is None else name,
        "Icon": icon,
        "Expansion": expansion,
        "PreviousQuest0": prev[0],
        "PreviousQuest1": prev[1],
        "PreviousQuest2": prev[2],
        "ClassJobLevel0": level,
        "JournalGenre": genre,
        "ClassJobCategory0": {"Name": "All Classes"},
    }


def make_record(quest_id: int, name: str | None = None, **kwargs: Any) -> QuestRecord:
    return QuestRecord.model_validate(detail_payload(quest_id, name, **kwargs))


def page_payload(page: int, page_total: int, ids: list[int]) -> dict[str, Any]:
    """Build a ``/Quest?page=N`` response body."""
    return {
        "Pagination": {
            "Page": page,
            "PageTotal": page_total,
            "Results": len(ids),
            "ResultsTotal": page_total * len(ids),
        },
        "Results": [{"ID": i, "Name": f"Quest {i}", "Icon": ""} for i in ids],
    }


class FakeQuestApi:
    """In-memory stand-in for ``QuestApiClient``.

    Args:
        pages: Page number -> list of quest ids on that page.
        details: Quest id -> detail payload. Missing ids fail with HTTP 404.
        failing_pages: Pages that raise a connection error.
        failing_details: Quest ids that raise a connection error.
        page_total: Overrides the reported page count.
        omit_pagination: Report page 1 without pagination metadata.
    """

    base_url = "https://xivapi.test"

    def __init__(
        self,
        pages: dict[int, list[int]],
        details: dict[int, dict[str, Any]],
        *,
        failing_pages: set[int] | None = None,
        failing_details: set[int] | None = None,
        page_total: int | None = None,
        omit_pagination: bool = False,
    ) -> None:
        self.pages = pages
        self.details = details
        self.failing_pages = failing_pages or set()
        self.failing_details = failing_details or set()
        self.page_total = page_total if page_total is not None else len(pages)
        self.omit_pagination = omit_pagination
        self.page_calls: list[int] = []
        self.detail_calls: list[int] = []

    async def fetch_page(self, page: int) -> QuestListPage:
        self.page_calls.append(page)
        if page in self.failing_pages:
            raise QuestApiConnectionError("fake", f"page {page} unreachable")
        payload = page_payload(page, self.page_total, self.pages.get(page, []))
        if self.omit_pagination:
            payload["Pagination"] = None
        return QuestListPage.model_validate(payload)

    async def fetch_detail(self, quest_id: int) -> QuestRecord:
        self.detail_calls.append(quest_id)
        if quest_id in self.failing_details:
            raise QuestApiConnectionError("fake", f"quest {quest_id} unreachable")
        if quest_id not in self.details:
            raise QuestApiResponseError("fake", f"quest {quest_id} not found", status_code=404)
        return QuestRecord.model_validate(self.details[quest_id])

    async def fetch_bytes(self, path: str) -> bytes:
        return f"icon:{path}".encode()

    async def aclose(self) -> None:
        return None
