"""Tracker configuration loading."""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML

# Default configuration values
DEFAULT_API_BASE = "https://xivapi.com"
DEFAULT_PAGE_LIMIT = 100
DEFAULT_PAGE_DELAY = 0.05
DEFAULT_BATCH_SIZE = 50
DEFAULT_BATCH_DELAY = 0.2
DEFAULT_REQUEST_TIMEOUT = 30.0
DEFAULT_ICON_TIMEOUT = 10.0
DEFAULT_ICON_CACHE_DIR = Path("IconCache")
DEFAULT_CONFIG_FILE = Path("questtracker.yaml")


class ConfigError(Exception):
    """Raised when tracker configuration cannot be loaded or is invalid."""

    def __init__(self, source: str, reason: str) -> None:
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid configuration ({source}): {reason}")


@dataclass
class TrackerConfig:
    """Configuration for a quest load.

    Attributes:
        api_base: Base URL of the XIVAPI instance.
        page_limit: Results requested per list page.
        page_delay: Seconds slept between list page requests.
        batch_size: Detail requests issued concurrently per batch.
        batch_delay: Seconds slept between detail batches.
        request_timeout: Per-request timeout for quest data, in seconds.
        icon_timeout: Per-request timeout for icon downloads, in seconds.
        icon_cache_dir: Directory holding the on-disk icon cache.
        max_pages: Optional cap on list pages fetched (None = all pages).
        max_quests: Optional cap on quest details fetched (None = all quests).
    """

    api_base: str = DEFAULT_API_BASE
    page_limit: int = DEFAULT_PAGE_LIMIT
    page_delay: float = DEFAULT_PAGE_DELAY
    batch_size: int = DEFAULT_BATCH_SIZE
    batch_delay: float = DEFAULT_BATCH_DELAY
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT
    icon_timeout: float = DEFAULT_ICON_TIMEOUT
    icon_cache_dir: Path = field(default_factory=lambda: DEFAULT_ICON_CACHE_DIR)
    max_pages: int | None = None
    max_quests: int | None = None

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ConfigError: If any value is out of range.
        """
        if not self.api_base:
            raise ConfigError("api_base", "must not be empty")
        if self.page_limit < 1:
            raise ConfigError("page_limit", f"must be >= 1, got {self.page_limit}")
        if self.batch_size < 1:
            raise ConfigError("batch_size", f"must be >= 1, got {self.batch_size}")
        for name in ("page_delay", "batch_delay"):
            if getattr(self, name) < 0:
                raise ConfigError(name, f"must be >= 0, got {getattr(self, name)}")
        for name in ("request_timeout", "icon_timeout"):
            if getattr(self, name) <= 0:
                raise ConfigError(name, f"must be > 0, got {getattr(self, name)}")
        for name in ("max_pages", "max_quests"):
            value = getattr(self, name)
            if value is not None and value < 1:
                raise ConfigError(name, f"must be >= 1 when set, got {value}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TrackerConfig:
        """Create config from dictionary.

        Unknown keys are rejected so typos do not silently fall back to
        defaults.

        Args:
            data: Dictionary containing config fields.

        Returns:
            TrackerConfig instance.

        Raises:
            ConfigError: On unknown keys or invalid values.
        """
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ConfigError("config", f"unknown keys: {', '.join(unknown)}")

        values = dict(data)
        if "icon_cache_dir" in values:
            values["icon_cache_dir"] = Path(values["icon_cache_dir"])
        try:
            return cls(**values)
        except TypeError as e:
            raise ConfigError("config", str(e)) from e

    def with_overrides(self, **overrides: Any) -> TrackerConfig:
        """Return a copy with non-None overrides applied."""
        data = {f.name: getattr(self, f.name) for f in fields(self)}
        data.update({k: v for k, v in overrides.items() if v is not None})
        return TrackerConfig(**data)


def _env_int(name: str) -> int | None:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigError(name, f"expected an integer, got {raw!r}") from e


def apply_env_overrides(config: TrackerConfig) -> TrackerConfig:
    """Apply ``QT_*`` environment variable overrides.

    Recognised variables: QT_API_BASE, QT_BATCH_SIZE, QT_MAX_PAGES,
    QT_MAX_QUESTS.
    """
    return config.with_overrides(
        api_base=os.getenv("QT_API_BASE") or None,
        batch_size=_env_int("QT_BATCH_SIZE"),
        max_pages=_env_int("QT_MAX_PAGES"),
        max_quests=_env_int("QT_MAX_QUESTS"),
    )


def load_config(config_path: Path | None = None) -> TrackerConfig:
    """Load tracker configuration from a YAML file.

    A missing default file yields the defaults; a missing explicit path is an
    error. Environment overrides are applied on top of the file values.

    Args:
        config_path: Path to the YAML file. Defaults to ``questtracker.yaml``.

    Returns:
        TrackerConfig instance.

    Raises:
        ConfigError: If an explicit path does not exist, or the file cannot be
            parsed or is invalid.
    """
    path = config_path or DEFAULT_CONFIG_FILE

    if not path.exists():
        if config_path is not None:
            raise ConfigError(str(path), "File not found")
        return apply_env_overrides(TrackerConfig())

    yaml = YAML(typ="safe")
    try:
        with path.open("r", encoding="utf-8") as f:
            data = yaml.load(f)
    except Exception as e:
        raise ConfigError(str(path), str(e)) from e

    if data is None:
        raise ConfigError(str(path), "Empty file")
    if not isinstance(data, dict):
        raise ConfigError(str(path), "Top level must be a mapping")

    return apply_env_overrides(TrackerConfig.from_dict(dict(data)))
