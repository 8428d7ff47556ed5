"""Tests for config/loader.py module."""

from __future__ import annotations

from pathlib import Path

import pytest

from pubapi.config.loader import PROJECT_CONFIG_NAME, _deep_merge, _load_yaml, load_config
from pubapi.core.errors import ConfigError


@pytest.fixture(autouse=True)
def no_global_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr("pubapi.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "missing.yaml")
    for var in ("PUBAPI__LOGGING__LEVEL", "PUBAPI__DIFF__DENY", "PUBAPI__REGISTRY__INDEX_URL"):
        monkeypatch.delenv(var, raising=False)


class TestLoadYaml:
    def test_missing_file(self, tmp_path: Path) -> None:
        assert _load_yaml(tmp_path / "nonexistent.yaml") == {}

    def test_valid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "config.yaml"
        yaml_file.write_text("logging:\n  level: DEBUG\n")
        assert _load_yaml(yaml_file) == {"logging": {"level": "DEBUG"}}

    def test_empty_file(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")
        assert _load_yaml(yaml_file) == {}

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "invalid.yaml"
        yaml_file.write_text("logging:\n  level:\n    - invalid: [unclosed")
        with pytest.raises(ConfigError):
            _load_yaml(yaml_file)

    def test_non_mapping(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            _load_yaml(yaml_file)


class TestDeepMerge:
    def test_nested(self) -> None:
        base = {"diff": {"deny": ["all"], "color": "auto"}, "x": 1}
        override = {"diff": {"color": "never"}}
        assert _deep_merge(base, override) == {
            "diff": {"deny": ["all"], "color": "never"},
            "x": 1,
        }

    def test_does_not_mutate(self) -> None:
        base = {"a": {"b": 1}}
        _deep_merge(base, {"a": {"b": 2}})
        assert base == {"a": {"b": 1}}


class TestLoadConfig:
    def test_defaults(self, tmp_path: Path) -> None:
        config = load_config(tmp_path)
        assert config.logging.level == "WARNING"
        assert config.diff.deny == []
        assert config.diff.force_checkouts is False
        assert config.build.target_dir is None
        assert config.registry.index_url == "https://pypi.org/pypi"

    def test_project_yaml(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text(
            "diff:\n  deny: [removed]\nregistry:\n  index_url: https://test.pypi.org/pypi/\n"
        )
        config = load_config(tmp_path)
        assert config.diff.deny == ["removed"]
        assert config.registry.index_url == "https://test.pypi.org/pypi"

    def test_env_overrides_yaml(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text("logging:\n  level: INFO\n")
        monkeypatch.setenv("PUBAPI__LOGGING__LEVEL", "DEBUG")
        assert load_config(tmp_path).logging.level == "DEBUG"

    def test_kwargs_override_everything(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("PUBAPI__LOGGING__LEVEL", "DEBUG")
        config = load_config(tmp_path, logging={"level": "ERROR"}, build={"target_dir": "/tmp/x"})
        assert config.logging.level == "ERROR"
        assert config.build.target_dir == "/tmp/x"

    def test_invalid_value(self, tmp_path: Path) -> None:
        (tmp_path / PROJECT_CONFIG_NAME).write_text("diff:\n  deny: [everything]\n")
        with pytest.raises(ConfigError) as exc_info:
            load_config(tmp_path)
        assert "diff.deny" in str(exc_info.value)

    def test_invalid_index_url(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigError, match="registry.index_url"):
            load_config(tmp_path, registry={"index_url": "ftp://example.org"})
