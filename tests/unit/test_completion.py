"""Tests for the quest completion probe."""

from __future__ import annotations

from questtracker.providers import CompletionProbe


def _source(completed: set[int]):
    def _check(quest_id: int) -> bool | None:
        return quest_id in completed

    return _check


def test_is_complete_reads_source() -> None:
    probe = CompletionProbe(_source({1, 3}))

    assert probe.is_complete(1) is True
    assert probe.is_complete(2) is False


def test_unavailable_state_is_incomplete() -> None:
    probe = CompletionProbe(lambda _quest_id: None)

    assert probe.is_complete(1) is False


def test_source_error_is_incomplete() -> None:
    def _broken(quest_id: int) -> bool | None:
        raise RuntimeError(f"game state unavailable for {quest_id}")

    probe = CompletionProbe(_broken)

    assert probe.is_complete(1) is False


def test_refresh_builds_cached_set() -> None:
    probe = CompletionProbe(_source({1, 3}))

    found = probe.refresh([1, 2, 3, 4])

    assert found == 2
    assert probe.completed_count == 2
    assert probe.is_complete_cached(3)
    assert not probe.is_complete_cached(2)


def test_refresh_replaces_previous_set() -> None:
    completed = {1}
    probe = CompletionProbe(_source(completed))
    probe.refresh([1, 2])

    completed.clear()
    completed.add(2)
    probe.refresh([1, 2])

    assert not probe.is_complete_cached(1)
    assert probe.is_complete_cached(2)


def test_cache_empty_before_refresh() -> None:
    probe = CompletionProbe(_source({1}))

    assert probe.completed_count == 0
    assert not probe.is_complete_cached(1)
