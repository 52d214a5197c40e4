"""Detail batch loader.

Expands quest identifiers into full records. Each batch is fetched
concurrently and awaited as a whole; its results are then written into the
shared record set one by one from this coroutine, so the concurrent requests
never touch the record set themselves.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from questtracker.observability.logging import get_logger
from questtracker.pipeline.batching import gather_bounded

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from questtracker.config import TrackerConfig
    from questtracker.models import QuestRecord
    from questtracker.providers.xivapi import QuestApiClient

log = get_logger(__name__)

_PROGRESS_EVERY = 10


def _batches(ids: Sequence[int], size: int) -> list[Sequence[int]]:
    return [ids[i : i + size] for i in range(0, len(ids), size)]


async def load_details(
    client: QuestApiClient,
    ids: Sequence[int],
    records: dict[int, QuestRecord],
    config: TrackerConfig,
    *,
    on_accepted: Callable[[QuestRecord], None] | None = None,
) -> int:
    """Fetch full records for ``ids`` and write valid ones into ``records``.

    Args:
        client: API client used for detail requests.
        ids: Quest identifiers to load, in order.
        records: Identifier-keyed record set to populate (last write wins).
        config: Supplies ``batch_size``, ``batch_delay`` and ``max_quests``.
        on_accepted: Called after each record is written, e.g. to publish a
            running count.

    Returns:
        Number of records accepted. Failed fetches and records with an empty
        name are not counted.
    """
    if config.max_quests is not None and len(ids) > config.max_quests:
        log.info("quest_details_capped", total=len(ids), max_quests=config.max_quests)
        ids = ids[: config.max_quests]

    batches = _batches(ids, config.batch_size)
    loaded = 0
    failed = 0
    discarded = 0

    for batch_index, batch in enumerate(batches):
        if batch_index > 0:
            await asyncio.sleep(config.batch_delay)

        results, errors = await gather_bounded(
            batch, client.fetch_detail, max_concurrency=config.batch_size
        )
        failed += len(errors)

        for record in results:
            if record is None:
                continue
            if not record.is_valid:
                discarded += 1
                continue
            records[record.id] = record
            loaded += 1
            if on_accepted is not None:
                on_accepted(record)

        if batch_index % _PROGRESS_EVERY == 0:
            log.info(
                "quest_details_progress",
                batch=batch_index + 1,
                batches=len(batches),
                loaded=loaded,
            )

    log.info(
        "quest_details_complete",
        requested=len(ids),
        loaded=loaded,
        failed=failed,
    )
    log.debug("quest_details_discarded", discarded=discarded)

    return loaded
