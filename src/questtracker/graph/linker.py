"""Predecessor/successor wiring over a completed record set."""

from __future__ import annotations

from typing import TYPE_CHECKING

from questtracker.observability.logging import get_logger

if TYPE_CHECKING:
    from questtracker.models import QuestRecord

log = get_logger(__name__)


def link_all(records: dict[int, QuestRecord]) -> int:
    """Resolve predecessor slots into bidirectional edges.

    For each record (in insertion order) and each predecessor slot (0, 1, 2),
    a non-zero id present in ``records`` appends the predecessor to the
    record's ``previous_ids`` and the record to the predecessor's
    ``next_ids``. Ids that were never loaded are skipped without an edge.

    Must run once, after every detail fetch has completed.

    Args:
        records: Identifier-keyed record set.

    Returns:
        Number of edges created.
    """
    edges = 0
    unresolved = 0

    for record in records.values():
        for pred_id in record.predecessor_slots:
            if pred_id == 0:
                continue
            predecessor = records.get(pred_id)
            if predecessor is None:
                unresolved += 1
                continue
            record.previous_ids.append(pred_id)
            predecessor.next_ids.append(record.id)
            edges += 1

    log.info("quest_links_built", records=len(records), edges=edges, unresolved=unresolved)
    return edges
