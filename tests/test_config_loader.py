"""Tests for configuration loading."""

from pathlib import Path

import pytest
import yaml

from modelmap_proxy.config_loader import (
    DEFAULT_HOST,
    DEFAULT_PORT,
    get_log_level,
    get_model_map_path,
    get_server_settings,
    get_upstream_settings,
    load_config,
)
from modelmap_proxy.core.upstream import DEFAULT_TIMEOUT, DEFAULT_UPSTREAM_URL

ENV_VARS = (
    "MODELMAP_PROXY_CONFIG",
    "MODELMAP_PROXY_HOST",
    "MODELMAP_PROXY_PORT",
    "MODELMAP_PROXY_UPSTREAM_URL",
    "MODELMAP_PROXY_MODELS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


def _write(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file_yields_empty_config(self, tmp_path):
        assert load_config(str(tmp_path / "nope.yaml")) == {}

    def test_reads_yaml(self, tmp_path):
        path = _write(
            tmp_path / "config.yaml",
            "proxy_settings:\n  server:\n    host: 0.0.0.0\n    port: 9000\n",
        )
        config = load_config(str(path))
        assert get_server_settings(config) == ("0.0.0.0", 9000)

    def test_substitutes_from_sibling_env_file(self, tmp_path):
        _write(tmp_path / ".env", "UPSTREAM=http://from-dotenv.local/v1/chat/completions\n")
        path = _write(
            tmp_path / "config.yaml",
            "proxy_settings:\n  upstream:\n    url: ${UPSTREAM}\n",
        )

        config = load_config(str(path))

        assert config["proxy_settings"]["upstream"]["url"] == (
            "http://from-dotenv.local/v1/chat/completions"
        )

    def test_substitutes_from_process_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MODELMAP_TEST_LEVEL", "DEBUG")
        path = _write(
            tmp_path / "config.yaml",
            "proxy_settings:\n  logging:\n    level: $MODELMAP_TEST_LEVEL\n",
        )
        assert get_log_level(load_config(str(path))) == "DEBUG"

    def test_unset_variable_is_left_literal(self, tmp_path):
        path = _write(tmp_path / "config.yaml", "value: ${MODELMAP_TEST_SURELY_UNSET}\n")
        assert load_config(str(path))["value"] == "${MODELMAP_TEST_SURELY_UNSET}"

    def test_substitution_can_be_disabled(self, tmp_path, monkeypatch):
        monkeypatch.setenv("MODELMAP_TEST_VALUE", "x")
        path = _write(tmp_path / "config.yaml", "value: ${MODELMAP_TEST_VALUE}\n")
        assert load_config(str(path), substitute_env=False)["value"] == "${MODELMAP_TEST_VALUE}"

    def test_config_path_from_environment(self, tmp_path, monkeypatch):
        path = _write(tmp_path / "config.yaml", "marker: 1\n")
        monkeypatch.setenv("MODELMAP_PROXY_CONFIG", str(path))
        assert load_config() == {"marker": 1}

    def test_non_mapping_document_is_rejected(self, tmp_path):
        path = _write(tmp_path / "config.yaml", "- a\n- b\n")
        with pytest.raises(RuntimeError):
            load_config(str(path))

    def test_malformed_yaml_is_fatal(self, tmp_path):
        path = _write(tmp_path / "config.yaml", "proxy_settings: [unclosed\n")
        with pytest.raises(yaml.YAMLError):
            load_config(str(path))


class TestSettings:
    """Tests for the settings accessors."""

    def test_defaults(self):
        assert get_server_settings({}) == (DEFAULT_HOST, DEFAULT_PORT)
        assert get_upstream_settings({}) == (DEFAULT_UPSTREAM_URL, DEFAULT_TIMEOUT)
        assert get_log_level({}) == "INFO"
        assert get_model_map_path({}).name == "models.json"

    def test_environment_overrides_file(self, monkeypatch):
        config = {
            "proxy_settings": {
                "server": {"host": "127.0.0.1", "port": 8000},
                "upstream": {"url": "http://file.local/v1/chat/completions"},
                "model_map_path": "/etc/file-models.json",
            }
        }
        monkeypatch.setenv("MODELMAP_PROXY_HOST", "0.0.0.0")
        monkeypatch.setenv("MODELMAP_PROXY_PORT", "9100")
        monkeypatch.setenv("MODELMAP_PROXY_UPSTREAM_URL", "http://env.local/v1/chat/completions")
        monkeypatch.setenv("MODELMAP_PROXY_MODELS", "/tmp/env-models.yaml")

        assert get_server_settings(config) == ("0.0.0.0", 9100)
        assert get_upstream_settings(config)[0] == "http://env.local/v1/chat/completions"
        assert get_model_map_path(config) == Path("/tmp/env-models.yaml")

    def test_invalid_port_falls_back(self):
        config = {"proxy_settings": {"server": {"port": "eighty"}}}
        assert get_server_settings(config) == (DEFAULT_HOST, DEFAULT_PORT)

    def test_null_timeout_disables_it(self):
        config = {"proxy_settings": {"upstream": {"request_timeout": None}}}
        assert get_upstream_settings(config) == (DEFAULT_UPSTREAM_URL, None)

    def test_relative_model_map_path_is_project_relative(self):
        path = get_model_map_path({"proxy_settings": {"model_map_path": "configs/models.json"}})
        assert path.is_absolute()
        assert path.parts[-2:] == ("configs", "models.json")

    def test_malformed_sections_are_ignored(self):
        config = {"proxy_settings": {"server": "oops", "upstream": ["x"]}}
        assert get_server_settings(config) == (DEFAULT_HOST, DEFAULT_PORT)
        assert get_upstream_settings(config) == (DEFAULT_UPSTREAM_URL, DEFAULT_TIMEOUT)
