"""XIVAPI quest data client.

Wraps ``httpx.AsyncClient`` around the two quest endpoints the loader needs:

    GET /Quest?page=N&limit=100        paginated summaries
    GET /Quest/{id}?columns=...        one full record, projected to DETAIL_COLUMNS

Every failure surfaces as a ``QuestApiError`` subclass so callers can apply
their own degrade-or-abort policy without knowing about httpx.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import httpx
from pydantic import ValidationError

from questtracker.config import DEFAULT_API_BASE, DEFAULT_PAGE_LIMIT, DEFAULT_REQUEST_TIMEOUT
from questtracker.models import QuestListPage, QuestRecord
from questtracker.observability.logging import get_logger
from questtracker.providers.base import (
    QuestApiConnectionError,
    QuestApiResponseError,
)

if TYPE_CHECKING:
    from questtracker.config import TrackerConfig

log = get_logger(__name__)

_SOURCE = "xivapi"

DETAIL_COLUMNS: tuple[str, ...] = (
    "ID",
    "Name",
    "Icon",
    "Expansion.ID",
    "Expansion.Name",
    "PreviousQuest0",
    "PreviousQuest1",
    "PreviousQuest2",
    "ClassJobLevel0",
    "JournalGenre.ID",
    "JournalGenre.Name",
    "ClassJobCategory0.Name",
)


class QuestApiClient:
    """Async client for the XIVAPI quest endpoints.

    Args:
        base_url: API root, e.g. ``https://xivapi.com``.
        timeout: Per-request timeout in seconds. A timed-out request raises
            ``QuestApiConnectionError``.
        page_limit: Results requested per list page.
        client: Optional pre-built ``httpx.AsyncClient``. When omitted the
            client is created here and closed by ``aclose``.
    """

    def __init__(
        self,
        base_url: str = DEFAULT_API_BASE,
        *,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        page_limit: int = DEFAULT_PAGE_LIMIT,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._page_limit = page_limit
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    @classmethod
    def from_config(cls, config: TrackerConfig) -> QuestApiClient:
        return cls(
            config.api_base,
            timeout=config.request_timeout,
            page_limit=config.page_limit,
        )

    @property
    def base_url(self) -> str:
        return self._base_url

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this instance created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> QuestApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _get(self, path: str, params: dict[str, Any] | None = None) -> httpx.Response:
        url = f"{self._base_url}{path}"
        try:
            response = await self._client.get(url, params=params)
        except httpx.TimeoutException as e:
            raise QuestApiConnectionError(
                _SOURCE, f"Request to {url} timed out after {self._timeout}s: {e}"
            ) from e
        except httpx.TransportError as e:
            raise QuestApiConnectionError(_SOURCE, f"Cannot connect to {url}: {e}") from e
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            # Undecodable bodies, redirect loops, malformed request URLs
            raise QuestApiResponseError(_SOURCE, f"Request to {url} failed: {e}") from e

        if response.status_code != 200:
            body_preview = response.text[:200]
            raise QuestApiResponseError(
                _SOURCE,
                f"{url} returned HTTP {response.status_code}: {body_preview}",
                status_code=response.status_code,
            )
        return response

    async def _get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        response = await self._get(path, params)
        try:
            return response.json()
        except ValueError as e:
            raise QuestApiResponseError(_SOURCE, f"{path} returned invalid JSON: {e}") from e

    async def fetch_page(self, page: int) -> QuestListPage:
        """Fetch one page of quest summaries.

        Raises:
            QuestApiConnectionError: If the API is unreachable.
            QuestApiResponseError: On HTTP errors or undecodable payloads.
        """
        data = await self._get_json("/Quest", {"page": page, "limit": self._page_limit})
        try:
            return QuestListPage.model_validate(data)
        except ValidationError as e:
            raise QuestApiResponseError(
                _SOURCE, f"Quest page {page} has unexpected shape: {e.error_count()} errors"
            ) from e

    async def fetch_detail(self, quest_id: int) -> QuestRecord:
        """Fetch the full record for one quest.

        Raises:
            QuestApiConnectionError: If the API is unreachable.
            QuestApiResponseError: On HTTP errors or undecodable payloads.
        """
        data = await self._get_json(f"/Quest/{quest_id}", {"columns": ",".join(DETAIL_COLUMNS)})
        try:
            return QuestRecord.model_validate(data)
        except ValidationError as e:
            raise QuestApiResponseError(
                _SOURCE, f"Quest {quest_id} has unexpected shape: {e.error_count()} errors"
            ) from e

    async def fetch_bytes(self, path: str) -> bytes:
        """Fetch a raw asset (e.g. an icon) relative to the API root."""
        response = await self._get(path)
        log.debug("xivapi_asset_fetched", path=path, size=len(response.content))
        return response.content
