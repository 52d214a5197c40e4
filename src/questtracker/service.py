"""Quest data service: load trigger, load-state flags and query surface.

The service exclusively owns the record set and the index. A load runs the
pipeline once per service lifetime:

    summaries -> details -> link -> index

The record set is written only by the loading coroutine. Queries read the
index, which is published only after linking completes, so readers never
observe a half-built graph. Every query is total and returns empty results
before a successful load.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from questtracker.config import TrackerConfig
from questtracker.graph import QuestIndex, link_all
from questtracker.observability.logging import get_logger
from questtracker.pipeline import LoadAbortedError, fetch_all_summaries, load_details
from questtracker.providers.xivapi import QuestApiClient

if TYPE_CHECKING:
    from questtracker.models import QuestCategory, QuestRecord

log = get_logger(__name__)


class QuestDataService:
    """Loads the quest graph and answers (expansion, category) queries.

    Args:
        config: Load configuration. Defaults to ``TrackerConfig()``.
        client: Optional API client. When omitted one is built from
            ``config`` and closed by ``aclose``.
    """

    def __init__(
        self,
        config: TrackerConfig | None = None,
        *,
        client: QuestApiClient | None = None,
    ) -> None:
        self._config = config or TrackerConfig()
        self._owns_client = client is None
        self._client = client or QuestApiClient.from_config(self._config)
        self._records: dict[int, QuestRecord] = {}
        self._index = QuestIndex.empty()
        self._loading = False
        self._loaded = False
        self._loaded_count = 0
        self._load_task: asyncio.Task[bool] | None = None

    async def __aenter__(self) -> QuestDataService:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    # -------------------------------------------------------------------------
    # Load state
    # -------------------------------------------------------------------------

    @property
    def config(self) -> TrackerConfig:
        return self._config

    @property
    def is_loading(self) -> bool:
        return self._loading

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    @property
    def loaded_count(self) -> int:
        """Records accepted so far; grows while a load is running."""
        return self._loaded_count

    @property
    def index(self) -> QuestIndex:
        return self._index

    def start_load(self) -> asyncio.Task[bool] | None:
        """Schedule ``load`` on the running event loop.

        Returns:
            The load task, or None when a load is already running or done.
        """
        if self._loading or self._loaded:
            return None
        if self._load_task is not None and not self._load_task.done():
            return None
        self._load_task = asyncio.get_running_loop().create_task(self.load())
        return self._load_task

    async def load(self) -> bool:
        """Run the full load pipeline once.

        A second call while loading or after a successful load does nothing.
        Failures never propagate: a fatal error is logged, the partial record
        set is discarded and ``is_loaded`` stays False so the caller can retry.

        Returns:
            The value of ``is_loaded`` after the call.
        """
        if self._loading or self._loaded:
            log.debug("quest_load_skipped", loading=self._loading, loaded=self._loaded)
            return self._loaded

        self._loading = True
        self._loaded_count = 0
        log.info("quest_load_start", api_base=self._client.base_url)

        try:
            summaries = await fetch_all_summaries(self._client, self._config)
            log.info("quest_summaries_fetched", summaries=len(summaries))

            await load_details(
                self._client,
                [summary.id for summary in summaries],
                self._records,
                self._config,
                on_accepted=self._on_accepted,
            )

            link_all(self._records)
            self._index = QuestIndex.build(self._records)
            self._loaded = True
            log.info("quest_load_complete", loaded=self._loaded_count, records=len(self._records))
        except LoadAbortedError as e:
            log.error("quest_load_aborted", stage=e.stage, reason=e.reason)
            self._reset()
        except Exception as e:
            log.error("quest_load_failed", error=str(e), exc_info=True)
            self._reset()
        finally:
            self._loading = False

        return self._loaded

    def _on_accepted(self, _record: QuestRecord) -> None:
        self._loaded_count += 1

    def _reset(self) -> None:
        self._records.clear()
        self._index = QuestIndex.empty()
        self._loaded_count = 0

    # -------------------------------------------------------------------------
    # Query surface
    # -------------------------------------------------------------------------

    def by_expansion_and_category(
        self, expansion_id: int, category: QuestCategory
    ) -> list[QuestRecord]:
        return self._index.by_expansion_and_category(expansion_id, category)

    def roots_of(self, expansion_id: int, category: QuestCategory) -> list[QuestRecord]:
        return self._index.roots_of(expansion_id, category)

    def roots_sorted_by_level(
        self, expansion_id: int, category: QuestCategory
    ) -> list[QuestRecord]:
        return self._index.roots_sorted_by_level(expansion_id, category)

    def counts_by_category(self, expansion_id: int) -> dict[QuestCategory, int]:
        return self._index.counts_by_category(expansion_id)

    def all_identifiers(self) -> set[int]:
        return self._index.all_identifiers()

    def get(self, quest_id: int) -> QuestRecord | None:
        return self._index.get(quest_id)

    def successors_of(self, record: QuestRecord) -> list[QuestRecord]:
        return self._index.successors_of(record)

    def predecessors_of(self, record: QuestRecord) -> list[QuestRecord]:
        return self._index.predecessors_of(record)
