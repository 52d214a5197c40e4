"""Paginated summary fetcher.

Page 1 is requested first to learn the page count. Remaining pages are
requested strictly one after another with a fixed delay in between; this is
throttling, not a data dependency. A page that fails after page 1 is logged
and skipped.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from questtracker.observability.logging import get_logger
from questtracker.pipeline.errors import LoadAbortedError
from questtracker.providers.base import QuestApiError

if TYPE_CHECKING:
    from questtracker.config import TrackerConfig
    from questtracker.models import QuestListPage, QuestSummary
    from questtracker.providers.xivapi import QuestApiClient

log = get_logger(__name__)

_PROGRESS_EVERY = 10


async def _fetch_page_or_none(client: QuestApiClient, page: int) -> QuestListPage | None:
    try:
        return await client.fetch_page(page)
    except QuestApiError as e:
        log.warning("quest_page_failed", page=page, error=str(e))
        return None


async def fetch_all_summaries(
    client: QuestApiClient,
    config: TrackerConfig,
) -> list[QuestSummary]:
    """Fetch quest summaries across every list page.

    Args:
        client: API client used for page requests.
        config: Supplies ``page_delay`` and the optional ``max_pages`` cap.

    Returns:
        Summaries in arrival order. Duplicates from an inconsistent upstream
        are kept; the identifier-keyed record set absorbs them later.

    Raises:
        LoadAbortedError: If page 1 fails or carries no pagination metadata.
    """
    first_page = await _fetch_page_or_none(client, 1)
    if first_page is None:
        raise LoadAbortedError("first_page", "failed to fetch the first page of quests")
    if first_page.pagination is None:
        raise LoadAbortedError("first_page", "first page has no pagination metadata")

    total_pages = first_page.pagination.page_total
    if config.max_pages is not None and total_pages > config.max_pages:
        log.info("quest_pages_capped", total_pages=total_pages, max_pages=config.max_pages)
        total_pages = config.max_pages

    log.info(
        "quest_pages_start",
        total_pages=total_pages,
        results_total=first_page.pagination.results_total,
    )

    summaries: list[QuestSummary] = list(first_page.results)
    failed_pages: list[int] = []

    for page in range(2, total_pages + 1):
        await asyncio.sleep(config.page_delay)

        page_data = await _fetch_page_or_none(client, page)
        if page_data is None:
            failed_pages.append(page)
        else:
            summaries.extend(page_data.results)

        if page % _PROGRESS_EVERY == 0:
            log.info("quest_pages_progress", page=page, total_pages=total_pages)

    log.info(
        "quest_pages_complete",
        summaries=len(summaries),
        pages=total_pages,
        failed_pages=len(failed_pages),
    )
    if failed_pages:
        log.warning("quest_pages_skipped", pages=failed_pages)

    return summaries
