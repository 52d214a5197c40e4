"""Load pipeline: paginated summaries, batched detail fetches."""

from questtracker.pipeline.batching import gather_bounded, is_connectivity_error
from questtracker.pipeline.details import load_details
from questtracker.pipeline.errors import LoadAbortedError
from questtracker.pipeline.fetcher import fetch_all_summaries

__all__ = [
    "LoadAbortedError",
    "fetch_all_summaries",
    "gather_bounded",
    "is_connectivity_error",
    "load_details",
]
