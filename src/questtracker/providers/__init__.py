"""External collaborators: XIVAPI client, icon cache, completion probe."""

from questtracker.providers.base import (
    QuestApiConnectionError,
    QuestApiError,
    QuestApiResponseError,
)
from questtracker.providers.completion import CompletionProbe, QuestStateSource
from questtracker.providers.icons import IconCache, IconImage, IconState, encode_icon_path
from questtracker.providers.xivapi import DETAIL_COLUMNS, QuestApiClient

__all__ = [
    "DETAIL_COLUMNS",
    "CompletionProbe",
    "IconCache",
    "IconImage",
    "IconState",
    "QuestApiClient",
    "QuestApiConnectionError",
    "QuestApiError",
    "QuestApiResponseError",
    "QuestStateSource",
    "encode_icon_path",
]
