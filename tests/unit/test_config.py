"""Tests for tracker configuration."""

from __future__ import annotations

from pathlib import Path

import pytest

from questtracker.config import (
    DEFAULT_API_BASE,
    DEFAULT_BATCH_SIZE,
    ConfigError,
    TrackerConfig,
    apply_env_overrides,
    load_config,
)


class TestTrackerConfig:
    """Tests for TrackerConfig defaults and validation."""

    def test_defaults(self) -> None:
        config = TrackerConfig()

        assert config.api_base == DEFAULT_API_BASE == "https://xivapi.com"
        assert config.page_limit == 100
        assert config.page_delay == pytest.approx(0.05)
        assert config.batch_size == DEFAULT_BATCH_SIZE == 50
        assert config.batch_delay == pytest.approx(0.2)
        assert config.request_timeout == 30.0
        assert config.icon_timeout == 10.0
        assert config.icon_cache_dir == Path("IconCache")
        assert config.max_pages is None
        assert config.max_quests is None

    @pytest.mark.parametrize(
        ("field_name", "value"),
        [
            ("api_base", ""),
            ("page_limit", 0),
            ("batch_size", 0),
            ("page_delay", -1),
            ("batch_delay", -0.1),
            ("request_timeout", 0),
            ("icon_timeout", -5),
            ("max_pages", 0),
            ("max_quests", -1),
        ],
    )
    def test_rejects_out_of_range(self, field_name: str, value: object) -> None:
        with pytest.raises(ConfigError) as exc_info:
            TrackerConfig(**{field_name: value})

        assert exc_info.value.source == field_name

    def test_from_dict_converts_cache_dir(self) -> None:
        config = TrackerConfig.from_dict({"icon_cache_dir": "cache/icons", "batch_size": 10})

        assert config.icon_cache_dir == Path("cache/icons")
        assert config.batch_size == 10

    def test_from_dict_rejects_unknown_keys(self) -> None:
        with pytest.raises(ConfigError, match="unknown keys: batchsize"):
            TrackerConfig.from_dict({"batchsize": 10})

    def test_with_overrides_ignores_none(self) -> None:
        base = TrackerConfig(max_pages=3)

        updated = base.with_overrides(max_pages=None, max_quests=20)

        assert updated.max_pages == 3
        assert updated.max_quests == 20
        assert base.max_quests is None

    def test_with_overrides_validates(self) -> None:
        with pytest.raises(ConfigError):
            TrackerConfig().with_overrides(batch_size=0)


class TestEnvOverrides:
    def test_no_env_keeps_values(self) -> None:
        config = TrackerConfig(batch_size=7)
        assert apply_env_overrides(config) == config

    def test_env_values_applied(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("QT_API_BASE", "https://mirror.example")
        monkeypatch.setenv("QT_BATCH_SIZE", "5")
        monkeypatch.setenv("QT_MAX_PAGES", "2")
        monkeypatch.setenv("QT_MAX_QUESTS", "40")

        config = apply_env_overrides(TrackerConfig())

        assert config.api_base == "https://mirror.example"
        assert config.batch_size == 5
        assert config.max_pages == 2
        assert config.max_quests == 40

    def test_empty_env_value_ignored(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("QT_MAX_PAGES", "")

        assert apply_env_overrides(TrackerConfig()).max_pages is None

    def test_bad_integer_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("QT_BATCH_SIZE", "fifty")

        with pytest.raises(ConfigError) as exc_info:
            apply_env_overrides(TrackerConfig())

        assert exc_info.value.source == "QT_BATCH_SIZE"


class TestLoadConfig:
    def test_missing_default_file_gives_defaults(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)

        assert load_config() == TrackerConfig()

    def test_missing_explicit_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "typo.yaml"

        with pytest.raises(ConfigError, match="File not found") as exc_info:
            load_config(path)

        assert exc_info.value.source == str(path)

    def test_default_path_is_cwd_relative(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.chdir(tmp_path)
        (tmp_path / "questtracker.yaml").write_text("max_pages: 4\n")

        assert load_config().max_pages == 4

    def test_loads_yaml_values(self, tmp_path: Path) -> None:
        path = tmp_path / "questtracker.yaml"
        path.write_text(
            "api_base: https://xivapi.test\n"
            "batch_size: 25\n"
            "batch_delay: 0.5\n"
            "icon_cache_dir: icons\n"
        )

        config = load_config(path)

        assert config.api_base == "https://xivapi.test"
        assert config.batch_size == 25
        assert config.batch_delay == 0.5
        assert config.icon_cache_dir == Path("icons")

    def test_env_overrides_file(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "questtracker.yaml"
        path.write_text("max_quests: 100\n")
        monkeypatch.setenv("QT_MAX_QUESTS", "10")

        assert load_config(path).max_quests == 10

    def test_empty_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "questtracker.yaml"
        path.write_text("")

        with pytest.raises(ConfigError, match="Empty file"):
            load_config(path)

    def test_non_mapping_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "questtracker.yaml"
        path.write_text("- one\n- two\n")

        with pytest.raises(ConfigError, match="mapping"):
            load_config(path)

    def test_invalid_yaml_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "questtracker.yaml"
        path.write_text("batch_size: [unclosed\n")

        with pytest.raises(ConfigError) as exc_info:
            load_config(path)

        assert exc_info.value.source == str(path)
