"""Tests for settings loading"""

import pytest

from metatasks.api.auth import AuthStrategy
from metatasks.utils.config import Settings, load_settings
from metatasks.utils.enums import parse_enum
from metatasks.models.posts import FetchType
from metatasks.utils.exceptions import ConfigError, InvalidArgument


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("METATASKS_SETTINGS", raising=False)


class TestLoadSettings:
    def test_defaults_without_file(self):
        settings = load_settings()

        assert settings == Settings()
        assert settings.graph.api_version == "v24.0"
        assert settings.graph.auth_strategy == AuthStrategy.BEARER_HEADER
        assert settings.polling.poll_interval == 10
        assert settings.polling.max_wait == 300

    def test_yaml_with_env_substitution(self, tmp_path, monkeypatch):
        monkeypatch.setenv("GRAPH_API_VERSION", "v23.0")
        path = tmp_path / "settings.yaml"
        path.write_text(
            "graph:\n"
            "  api_version: ${GRAPH_API_VERSION}\n"
            "  auth_strategy: ${GRAPH_AUTH_STRATEGY:query_param}\n"
            "polling:\n"
            "  poll_interval: 5\n"
            "  max_wait: ${POLL_MAX_WAIT:120}\n"
        )

        settings = load_settings(path)

        assert settings.graph.api_version == "v23.0"
        assert settings.graph.auth_strategy == AuthStrategy.QUERY_PARAM
        assert settings.polling.poll_interval == 5
        assert settings.polling.max_wait == 120

    def test_default_location(self, tmp_path):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "settings.yaml").write_text("logging:\n  level: DEBUG\n")

        assert load_settings().logging.level == "DEBUG"

    def test_path_from_environment(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.yaml"
        path.write_text("graph:\n  read_timeout: 90\n")
        monkeypatch.setenv("METATASKS_SETTINGS", str(path))

        assert load_settings().graph.read_timeout == 90

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_settings(tmp_path / "nope.yaml")

    def test_missing_env_var_without_default(self, tmp_path, monkeypatch):
        monkeypatch.delenv("METATASKS_UNSET_VAR", raising=False)
        path = tmp_path / "settings.yaml"
        path.write_text("graph:\n  api_version: ${METATASKS_UNSET_VAR}\n")

        with pytest.raises(ConfigError):
            load_settings(path)

    @pytest.mark.parametrize(
        "content",
        [
            "graph: [unclosed\n",
            "- just\n- a list\n",
            "polling:\n  max_wait: 0\n",
            "graph:\n  auth_strategy: cookie\n",
        ],
    )
    def test_invalid_settings(self, tmp_path, content):
        path = tmp_path / "settings.yaml"
        path.write_text(content)

        with pytest.raises(ConfigError):
            load_settings(path)


class TestParseEnum:
    @pytest.mark.parametrize("value", ["FETCH_ONE", "fetch_one", " Fetch_One ", FetchType.FETCH_ONE])
    def test_lenient_matching(self, value):
        assert parse_enum(FetchType, value) == FetchType.FETCH_ONE

    def test_unknown_value(self):
        with pytest.raises(InvalidArgument, match="Unknown FetchType"):
            parse_enum(FetchType, "STORE")
