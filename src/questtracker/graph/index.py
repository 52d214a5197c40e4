"""Read-only (expansion, category) index over the linked quest graph.

The index is built once from the finished record set and never mutated
afterwards. Every query is total: unknown expansions, empty buckets and
unknown identifiers yield empty results rather than errors.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from questtracker.models import QuestCategory

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping

    from questtracker.models import QuestRecord


class QuestIndex:
    """Quest records grouped by expansion id and category.

    Buckets keep record-set insertion order. The record mapping doubles as
    the arena that resolves edge identifiers back to records.
    """

    def __init__(
        self,
        records: Mapping[int, QuestRecord],
        buckets: dict[int, dict[QuestCategory, list[QuestRecord]]],
    ) -> None:
        self._records = records
        self._buckets = buckets

    @classmethod
    def build(cls, records: Mapping[int, QuestRecord]) -> QuestIndex:
        """Group a linked record set into buckets."""
        buckets: dict[int, dict[QuestCategory, list[QuestRecord]]] = {}
        for record in records.values():
            by_category = buckets.setdefault(record.expansion_id, {})
            by_category.setdefault(record.category, []).append(record)
        return cls(records, buckets)

    @classmethod
    def empty(cls) -> QuestIndex:
        return cls({}, {})

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"QuestIndex(records={len(self._records)}, expansions={len(self._buckets)})"

    # -------------------------------------------------------------------------
    # Bucket queries
    # -------------------------------------------------------------------------

    def by_expansion_and_category(
        self, expansion_id: int, category: QuestCategory
    ) -> list[QuestRecord]:
        """Records in the bucket, in insertion order (empty if absent)."""
        return list(self._buckets.get(expansion_id, {}).get(category, ()))

    def roots_of(self, expansion_id: int, category: QuestCategory) -> list[QuestRecord]:
        """Bucket records that have no resolved predecessor."""
        return [r for r in self.by_expansion_and_category(expansion_id, category) if r.is_root]

    def roots_sorted_by_level(
        self, expansion_id: int, category: QuestCategory
    ) -> list[QuestRecord]:
        """Roots ordered by ascending level; equal levels keep insertion order."""
        return sorted(self.roots_of(expansion_id, category), key=lambda r: r.level)

    def counts_by_category(self, expansion_id: int) -> dict[QuestCategory, int]:
        """Bucket sizes for one expansion, omitting empty categories."""
        return {
            category: len(members)
            for category, members in self._buckets.get(expansion_id, {}).items()
            if members
        }

    def expansion_ids(self) -> list[int]:
        """Expansion ids that have at least one record, ascending."""
        return sorted(self._buckets)

    # -------------------------------------------------------------------------
    # Arena lookups
    # -------------------------------------------------------------------------

    def all_identifiers(self) -> set[int]:
        return set(self._records)

    def get(self, quest_id: int) -> QuestRecord | None:
        return self._records.get(quest_id)

    def _resolve(self, ids: Iterable[int]) -> list[QuestRecord]:
        return [self._records[i] for i in ids if i in self._records]

    def successors_of(self, record: QuestRecord) -> list[QuestRecord]:
        """Records unlocked by ``record``, in link order."""
        return self._resolve(record.next_ids)

    def predecessors_of(self, record: QuestRecord) -> list[QuestRecord]:
        """Records ``record`` depends on, in predecessor-slot order."""
        return self._resolve(record.previous_ids)
