"""Quest record models and categorization."""

from questtracker.models.category import QuestCategory, categorize
from questtracker.models.quest import (
    EXPANSION_NAMES,
    UNSPECIFIED_EXPANSION_ID,
    UNSPECIFIED_EXPANSION_NAME,
    ClassJobCategoryRef,
    ExpansionRef,
    JournalGenreRef,
    Pagination,
    QuestListPage,
    QuestRecord,
    QuestSummary,
)

__all__ = [
    "EXPANSION_NAMES",
    "UNSPECIFIED_EXPANSION_ID",
    "UNSPECIFIED_EXPANSION_NAME",
    "ClassJobCategoryRef",
    "ExpansionRef",
    "JournalGenreRef",
    "Pagination",
    "QuestCategory",
    "QuestListPage",
    "QuestRecord",
    "QuestSummary",
    "categorize",
]
