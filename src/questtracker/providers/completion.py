"""Quest completion probe.

Live completion state comes from the running game client, which this
package does not talk to directly. Callers supply a ``QuestStateSource``;
the probe adds fail-safe handling and a cached completed set for render
loops that query thousands of quests per frame.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

from questtracker.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Iterable

log = get_logger(__name__)


class QuestStateSource(Protocol):
    """Reads completion state for one quest.

    Returns None when the game state is not available (e.g. not logged in).
    """

    def __call__(self, quest_id: int) -> bool | None: ...


class CompletionProbe:
    """Completion lookups with a refreshable cache."""

    def __init__(self, source: QuestStateSource) -> None:
        self._source = source
        self._completed: set[int] = set()

    def is_complete(self, quest_id: int) -> bool:
        """Check live state. Unavailable state or errors count as incomplete."""
        try:
            return bool(self._source(quest_id))
        except Exception as e:
            log.error("quest_completion_check_failed", quest_id=quest_id, error=str(e))
            return False

    def refresh(self, quest_ids: Iterable[int]) -> int:
        """Recompute the cached completed set for ``quest_ids``.

        Returns:
            Number of completed quests found.
        """
        self._completed = {quest_id for quest_id in quest_ids if self.is_complete(quest_id)}
        log.info("quest_completion_refreshed", completed=len(self._completed))
        return len(self._completed)

    def is_complete_cached(self, quest_id: int) -> bool:
        """Cached result from the last ``refresh``."""
        return quest_id in self._completed

    @property
    def completed_count(self) -> int:
        return len(self._completed)
