"""Two-tier quest icon cache.

Icons are looked up in memory, then on disk under a filesystem-safe encoding
of the icon path, and finally downloaded and written through both tiers.

``resolve`` is a non-blocking poll meant for render loops: the first call
for a path schedules a background load and returns None; later calls return
whatever has been resolved. A failed load caches None so the path is not
retried on every poll. Two overlapping loads for one path are tolerated; the
later write wins.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

from questtracker.observability.logging import get_logger

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

log = get_logger(__name__)

_CONTENT_TYPES = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
}


def encode_icon_path(icon_path: str) -> str:
    """Map an icon path to a flat cache file name."""
    return icon_path.replace("/", "_").replace("\\", "_")


@dataclass(frozen=True)
class IconImage:
    """Resolved icon bytes.

    Attributes:
        path: Icon path as referenced by the quest record.
        data: Raw image bytes.
        content_type: MIME type guessed from the path suffix.
    """

    path: str
    data: bytes
    content_type: str = "image/png"

    @property
    def size_bytes(self) -> int:
        return len(self.data)


class IconState(Enum):
    PENDING = "pending"
    RESOLVED = "resolved"


@dataclass
class _IconEntry:
    state: IconState
    image: IconImage | None = None


class IconCache:
    """Memory + disk cache of quest icons.

    Args:
        fetch_bytes: Coroutine function downloading an icon path
            (typically ``QuestApiClient.fetch_bytes``).
        cache_dir: Directory for the on-disk tier; created on construction.
    """

    def __init__(
        self,
        fetch_bytes: Callable[[str], Awaitable[bytes]],
        cache_dir: Path,
    ) -> None:
        self._fetch_bytes = fetch_bytes
        self._cache_dir = cache_dir
        self._cache_dir.mkdir(parents=True, exist_ok=True)
        self._entries: dict[str, _IconEntry] = {}
        self._tasks: set[asyncio.Task[IconImage | None]] = set()

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def state_of(self, icon_path: str) -> IconState | None:
        """Current state for a path; None when it was never requested."""
        entry = self._entries.get(icon_path)
        return entry.state if entry else None

    def resolve(self, icon_path: str) -> IconImage | None:
        """Poll for an icon without waiting.

        Returns the cached image once resolved. Otherwise returns None and,
        on first request, schedules a background load on the running loop.
        """
        if not icon_path:
            return None

        entry = self._entries.get(icon_path)
        if entry is not None:
            return entry.image if entry.state is IconState.RESOLVED else None

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            log.warning("icon_resolve_no_event_loop", icon=icon_path)
            return None

        self._entries[icon_path] = _IconEntry(IconState.PENDING)
        task = loop.create_task(self.load(icon_path))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return None

    async def load(self, icon_path: str) -> IconImage | None:
        """Load an icon through the memory, disk and network tiers."""
        if not icon_path:
            return None

        entry = self._entries.get(icon_path)
        if entry is not None and entry.state is IconState.RESOLVED:
            return entry.image

        local_path = self._cache_dir / encode_icon_path(icon_path)
        try:
            if await asyncio.to_thread(local_path.exists):
                data = await asyncio.to_thread(local_path.read_bytes)
                log.debug("icon_disk_hit", icon=icon_path)
            else:
                data = await self._fetch_bytes(icon_path)
                await asyncio.to_thread(local_path.write_bytes, data)
                log.debug("icon_downloaded", icon=icon_path, size=len(data))
        except Exception as e:
            log.error("icon_load_failed", icon=icon_path, error=str(e))
            self._entries[icon_path] = _IconEntry(IconState.RESOLVED, None)
            return None

        content_type = _CONTENT_TYPES.get(Path(icon_path).suffix.lower(), "image/png")
        image = IconImage(path=icon_path, data=data, content_type=content_type)
        self._entries[icon_path] = _IconEntry(IconState.RESOLVED, image)
        return image

    async def wait_pending(self) -> None:
        """Await every background load scheduled by ``resolve``."""
        if self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    def clear(self) -> None:
        """Drop the memory tier; disk files are kept."""
        self._entries.clear()
