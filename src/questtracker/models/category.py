"""Quest categorization from journal genre metadata.

XIVAPI does not expose an authoritative "quest type" column, so categories
are derived from the JournalGenre row attached to each quest. Rules are
evaluated in order and the first match wins; substring collisions (a raid
genre whose name also mentions a job) resolve by rule precedence.

All name matching is case-sensitive substring matching.
"""

from __future__ import annotations

from enum import StrEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from questtracker.models.quest import JournalGenreRef


class QuestCategory(StrEnum):
    """Fixed set of quest categories."""

    MAIN_SCENARIO = "MainScenario"
    SIDE = "Side"
    JOB_CLASS = "JobClass"
    RAIDS = "Raids"
    TRIBAL = "Tribal"
    FEATURE = "Feature"
    OTHER = "Other"


# JournalGenre rows for the main scenario, A Realm Reborn through Dawntrail
MAIN_SCENARIO_GENRE_IDS = range(1, 14)

# JournalGenre rows for raid and alliance raid storylines
RAID_GENRE_IDS = range(84, 98)

RAID_NAME_MARKERS: tuple[str, ...] = (
    "Raid",
    "Crystal Tower",
    "Binding Coil",
    "Alexander",
    "Omega",
    "Eden",
    "Pandæmonium",
    "Arcadion",
    "Void Ark",
    "Weeping City",
    "Dun Scaith",
    "Return to Ivalice",
    "YoRHa",
    "Myths of the Realm",
    "Echoes of Vana'diel",
)

JOB_NAME_MARKERS: tuple[str, ...] = (
    # Disciples of War and Magic
    "Gladiator",
    "Pugilist",
    "Marauder",
    "Lancer",
    "Archer",
    "Rogue",
    "Conjurer",
    "Thaumaturge",
    "Arcanist",
    "Paladin",
    "Monk",
    "Warrior",
    "Dragoon",
    "Bard",
    "Ninja",
    "White Mage",
    "Black Mage",
    "Summoner",
    "Scholar",
    "Dark Knight",
    "Machinist",
    "Astrologian",
    "Samurai",
    "Red Mage",
    "Blue Mage",
    "Gunbreaker",
    "Dancer",
    "Reaper",
    "Sage",
    "Viper",
    "Pictomancer",
    "Beastmaster",
    # Disciples of the Hand and Land
    "Carpenter",
    "Blacksmith",
    "Armorer",
    "Goldsmith",
    "Leatherworker",
    "Weaver",
    "Alchemist",
    "Culinarian",
    "Miner",
    "Botanist",
    "Fisher",
)

TRIBAL_NAME_MARKERS: tuple[str, ...] = ("Tribal", "Beast Tribe")

FEATURE_NAME_MARKERS: tuple[str, ...] = (
    "Hildibrand",
    "Gold Saucer",
    "Seasonal Event",
    "Custom Deliveries",
    "Doman Enclave",
    "Ishgardian Restoration",
    "Grand Company",
    "Hall of the Novice",
    "Relic",
    "Anima",
    "Zodiac",
    "Resistance Weapon",
    "Manderville",
    "Eureka",
    "Bozja",
    "Island Sanctuary",
    "Deep Dungeon",
    "Chocobo",
    "Wondrous Tails",
    "Treasure Hunt",
    "Cosmic Exploration",
    "Occult Crescent",
)

SIDE_NAME_MARKERS: tuple[str, ...] = ("Sidequests", "Side Quests")


def _contains_any(name: str, markers: tuple[str, ...]) -> bool:
    return any(marker in name for marker in markers)


def categorize(genre: JournalGenreRef | None) -> QuestCategory:
    """Map journal genre metadata to a quest category.

    Args:
        genre: The quest's JournalGenre row, or None when the quest has none.

    Returns:
        The first category whose rule matches, ``OTHER`` when none do.
    """
    if genre is None:
        return QuestCategory.OTHER

    name = genre.name or ""

    if genre.id in MAIN_SCENARIO_GENRE_IDS:
        return QuestCategory.MAIN_SCENARIO
    if genre.id in RAID_GENRE_IDS or _contains_any(name, RAID_NAME_MARKERS):
        return QuestCategory.RAIDS
    if "Quests" in name and _contains_any(name, JOB_NAME_MARKERS):
        return QuestCategory.JOB_CLASS
    if _contains_any(name, TRIBAL_NAME_MARKERS):
        return QuestCategory.TRIBAL
    if _contains_any(name, FEATURE_NAME_MARKERS):
        return QuestCategory.FEATURE
    if _contains_any(name, SIDE_NAME_MARKERS):
        return QuestCategory.SIDE
    return QuestCategory.OTHER
