"""Pydantic models for XIVAPI quest payloads.

Field aliases follow the XIVAPI column names (``ID``, ``PreviousQuest0``,
``JournalGenre.Name`` ...). Models accept both the alias and the Python field
name so tests and fixtures can build records directly.

Graph edges live on ``QuestRecord`` as lists of quest identifiers rather than
object references; the record set keyed by identifier is the arena that
resolves them.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from questtracker.models.category import QuestCategory, categorize

UNSPECIFIED_EXPANSION_ID = 0
UNSPECIFIED_EXPANSION_NAME = "Unspecified"

# XIVAPI ExVersion row ids
EXPANSION_NAMES: dict[int, str] = {
    0: "A Realm Reborn",
    1: "Heavensward",
    2: "Stormblood",
    3: "Shadowbringers",
    4: "Endwalker",
    5: "Dawntrail",
}

_LINK_FIELDS = ("Expansion", "JournalGenre", "ClassJobCategory0")


class _ApiModel(BaseModel):
    """Base for models decoded from XIVAPI JSON.

    XIVAPI reports unset columns as ``null``; those are dropped before
    validation so field defaults apply.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {key: value for key, value in data.items() if value is not None}
        return data


class ExpansionRef(_ApiModel):
    """Expansion a quest belongs to."""

    id: int = Field(default=0, alias="ID", ge=0)
    name: str = Field(default="", alias="Name")


class JournalGenreRef(_ApiModel):
    """Journal genre row used for categorization."""

    id: int = Field(default=0, alias="ID", ge=0)
    name: str = Field(default="", alias="Name")


class ClassJobCategoryRef(_ApiModel):
    """Class/job restriction label (e.g. ``Disciples of War or Magic``)."""

    name: str = Field(default="", alias="Name")


class QuestSummary(_ApiModel):
    """Lightweight list-endpoint projection used to drive detail fetching."""

    id: int = Field(alias="ID", gt=0)
    name: str = Field(default="", alias="Name")
    icon: str = Field(default="", alias="Icon")


class Pagination(_ApiModel):
    """Pagination metadata returned with every list page."""

    page: int = Field(alias="Page", ge=0)
    page_total: int = Field(alias="PageTotal", ge=0)
    results: int = Field(default=0, alias="Results", ge=0)
    results_total: int = Field(default=0, alias="ResultsTotal", ge=0)


class QuestListPage(_ApiModel):
    """One page of the quest list endpoint."""

    pagination: Pagination | None = Field(default=None, alias="Pagination")
    results: list[QuestSummary] = Field(default_factory=list, alias="Results")


class QuestRecord(_ApiModel):
    """Full quest record after detail fetch.

    Attributes:
        id: Unique positive quest identifier.
        name: Display name. Empty names mark records the loader discards.
        icon: Opaque icon path (e.g. ``/i/071000/071201.png``).
        expansion: Owning expansion, None when XIVAPI has none.
        previous_quest_0: First predecessor slot (0 = no predecessor).
        previous_quest_1: Second predecessor slot.
        previous_quest_2: Third predecessor slot.
        level: Minimum class/job level.
        journal_genre: Genre row driving ``category``.
        class_job_category: Class/job restriction label.
        previous_ids: Resolved predecessor identifiers, filled by the linker.
        next_ids: Resolved successor identifiers, filled by the linker.
    """

    id: int = Field(alias="ID", gt=0)
    name: str = Field(default="", alias="Name")
    icon: str = Field(default="", alias="Icon")
    expansion: ExpansionRef | None = Field(default=None, alias="Expansion")
    previous_quest_0: int = Field(default=0, alias="PreviousQuest0", ge=0)
    previous_quest_1: int = Field(default=0, alias="PreviousQuest1", ge=0)
    previous_quest_2: int = Field(default=0, alias="PreviousQuest2", ge=0)
    level: int = Field(default=0, alias="ClassJobLevel0", ge=0)
    journal_genre: JournalGenreRef | None = Field(default=None, alias="JournalGenre")
    class_job_category: ClassJobCategoryRef | None = Field(
        default=None, alias="ClassJobCategory0"
    )

    previous_ids: list[int] = Field(default_factory=list, exclude=True)
    next_ids: list[int] = Field(default_factory=list, exclude=True)

    @model_validator(mode="before")
    @classmethod
    def drop_empty_links(cls, data: Any) -> Any:
        """Treat link objects with only null/empty columns as absent."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in _LINK_FIELDS:
            value = data.get(key)
            if isinstance(value, dict) and all(v in (None, "") for v in value.values()):
                data.pop(key)
        return data

    @property
    def expansion_id(self) -> int:
        """Expansion bucket id; 0 when the quest carries no expansion."""
        if self.expansion is None:
            return UNSPECIFIED_EXPANSION_ID
        return self.expansion.id

    @property
    def expansion_name(self) -> str:
        if self.expansion is None or not self.expansion.name:
            return UNSPECIFIED_EXPANSION_NAME
        return self.expansion.name

    @property
    def predecessor_slots(self) -> tuple[int, int, int]:
        """Raw predecessor ids in slot order, sentinel zeros included."""
        return (self.previous_quest_0, self.previous_quest_1, self.previous_quest_2)

    @property
    def category(self) -> QuestCategory:
        """Category derived from the journal genre on every access."""
        return categorize(self.journal_genre)

    @property
    def is_valid(self) -> bool:
        return bool(self.name)

    @property
    def is_root(self) -> bool:
        return not self.previous_ids

    def __repr__(self) -> str:
        return f"QuestRecord(id={self.id}, name={self.name!r}, level={self.level})"
