"""Bounded-concurrency gather helper for API calls.

Wraps asyncio.Semaphore to limit concurrent requests. Preserves input order
in results and collects per-item failures instead of failing the batch.
"""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, TypeVar

import httpx

from questtracker.observability.logging import get_logger
from questtracker.providers.base import QuestApiConnectionError

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Sequence

log = get_logger(__name__)

T = TypeVar("T")
Item = TypeVar("Item")


def is_connectivity_error(exc: Exception) -> bool:
    """Check if an exception indicates loss of connectivity to the API.

    Recognises httpx network/timeout errors, Python built-in
    ConnectionError, and QuestApiConnectionError. Walks the ``__cause__``
    chain so wrapped errors are also detected.
    """
    if isinstance(
        exc,
        (
            httpx.NetworkError,
            httpx.TimeoutException,
            ConnectionError,
            QuestApiConnectionError,
        ),
    ):
        return True

    cause = exc.__cause__
    if cause is not None and isinstance(cause, Exception):
        return is_connectivity_error(cause)

    return False


def _is_connectivity_loss(errors: list[tuple[int, Exception]]) -> bool:
    """Return True when all errors are connectivity errors and >= 2 items failed."""
    return len(errors) >= 2 and all(is_connectivity_error(e) for _, e in errors)


async def gather_bounded(
    items: Sequence[Item],
    call_fn: Callable[[Item], Awaitable[T]],
    max_concurrency: int = 50,
) -> tuple[list[T | None], list[tuple[int, Exception]]]:
    """Run calls concurrently with bounded parallelism.

    The whole group is awaited before returning; a failing item never
    cancels its siblings.

    Args:
        items: Input items to process.
        call_fn: Async function taking one item and returning its result.
        max_concurrency: Maximum concurrent calls.

    Returns:
        Tuple of:
            - results: List in input order (None for failed items).
            - errors: List of (index, exception) for failed items.
    """
    if not items:
        return [], []

    semaphore = asyncio.Semaphore(max(1, max_concurrency))
    results: list[T | None] = [None] * len(items)
    errors: list[tuple[int, Exception]] = []

    async def _run_one(idx: int, item: Item) -> None:
        async with semaphore:
            try:
                results[idx] = await call_fn(item)
            except Exception as e:
                errors.append((idx, e))
                log.warning(
                    "batch_item_failed",
                    index=idx,
                    item=str(item),
                    error=str(e),
                )

    tasks = [asyncio.create_task(_run_one(i, item)) for i, item in enumerate(items)]
    await asyncio.gather(*tasks, return_exceptions=True)

    if _is_connectivity_loss(errors):
        log.error(
            "batch_connectivity_failure",
            total_items=len(items),
            failed=len(errors),
            error_sample=str(errors[0][1]),
        )

    errors.sort(key=lambda pair: pair[0])

    log.debug(
        "batch_complete",
        total_items=len(items),
        succeeded=len(items) - len(errors),
        failed=len(errors),
    )

    return results, errors
