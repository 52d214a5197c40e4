"""Quest graph package - relationship linking and query index."""

from questtracker.graph.index import QuestIndex
from questtracker.graph.linker import link_all

__all__ = [
    "QuestIndex",
    "link_all",
]
