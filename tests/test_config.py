"""配置加载测试"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from minepack.config import DEFAULT_API_URL, Settings, load_config, load_settings
from minepack.exceptions import ConfigParseError, ConfigValidationError


class TestSettings:
    def test_defaults(self) -> None:
        settings = Settings()
        assert settings.api_base_url == DEFAULT_API_URL
        assert settings.max_concurrent == 8
        assert settings.search_limit == 5

    def test_unknown_keys_ignored(self) -> None:
        settings = Settings.from_dict({"max-concurrent": 2, "colour": "blue"})
        assert settings.max_concurrent == 2

    @pytest.mark.parametrize("data", [
        {"max_concurrent": 0},
        {"search_limit": -1},
        {"api_base_url": "ftp://example.com"},
        {"request_timeout": "slow"},
        {"max_retries": -1},
    ])
    def test_invalid_values(self, data: dict) -> None:
        with pytest.raises(ConfigValidationError):
            Settings.from_dict(data)


class TestLoadConfig:
    def test_toml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.toml"
        path.write_text('search_limit = 10\napi_base_url = "https://staging-api.modrinth.com/v2"\n')
        assert load_config(str(path)) == {
            "search_limit": 10,
            "api_base_url": "https://staging-api.modrinth.com/v2",
        }

    def test_json(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"max_retries": 1}))
        assert load_config(str(path)) == {"max_retries": 1}

    def test_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yml"
        path.write_text("retry_delay: 0.5\n")
        assert load_config(str(path)) == {"retry_delay": 0.5}

    def test_empty_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(str(path)) == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigParseError, match="不存在"):
            load_config(str(tmp_path / "nope.toml"))

    def test_unsupported_suffix(self, tmp_path: Path) -> None:
        path = tmp_path / "config.ini"
        path.write_text("[x]")
        with pytest.raises(ConfigParseError, match="不支持"):
            load_config(str(path))

    def test_broken_json(self, tmp_path: Path) -> None:
        path = tmp_path / "config.json"
        path.write_text("{broken")
        with pytest.raises(ConfigParseError):
            load_config(str(path))


class TestLoadSettings:
    def test_env_config_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "config.json"
        path.write_text(json.dumps({"search_limit": 3}))
        monkeypatch.setenv("MINEPACK_CONFIG", str(path))
        monkeypatch.delenv("MINEPACK_API_URL", raising=False)
        assert load_settings().search_limit == 3

    def test_api_url_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        path = tmp_path / "config.json"
        path.write_text("{}")
        monkeypatch.setenv("MINEPACK_API_URL", "http://localhost:8080/v2")
        settings = load_settings(str(path))
        assert settings.api_base_url == "http://localhost:8080/v2"

    def test_no_config_file(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.delenv("MINEPACK_CONFIG", raising=False)
        monkeypatch.delenv("MINEPACK_API_URL", raising=False)
        monkeypatch.setattr("minepack.config.default_config_path", lambda: None)
        assert load_settings() == Settings()
