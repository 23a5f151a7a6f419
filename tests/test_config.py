"""
Tests for toolkit configuration.
"""

import json

import pytest
from pydantic import ValidationError

from orm_toolkit import config as config_module
from orm_toolkit.config import ToolkitConfig, configure, get_config, set_config


@pytest.fixture(autouse=True)
def reset_config():
    set_config(None)
    yield
    set_config(None)


class TestToolkitConfig:
    """Test configuration model validation."""

    def test_defaults(self):
        config = ToolkitConfig()

        assert config.database_url == "sqlite:///:memory:"
        assert config.soft_delete_enabled is True
        assert config.include_deleted_option == "include_deleted"
        assert config.get_engine_options() == {"echo": False}

    def test_environment_normalized(self):
        assert ToolkitConfig(environment="Staging").environment == "staging"

    def test_invalid_environment(self):
        with pytest.raises(ValidationError) as exc:
            ToolkitConfig(environment="moon")
        assert "Environment must be one of" in str(exc.value)

    def test_log_level(self):
        assert ToolkitConfig(log_level="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            ToolkitConfig(log_level="chatty")

    def test_empty_option_name_rejected(self):
        with pytest.raises(ValidationError):
            ToolkitConfig(include_deleted_option="")


class TestConfigSources:
    """Test loading configuration from the environment and files."""

    def test_from_env(self, monkeypatch):
        monkeypatch.setenv("ORM_DATABASE_URL", "sqlite:///env.db")
        monkeypatch.setenv("ORM_ECHO_SQL", "yes")
        monkeypatch.setenv("ORM_SOFT_DELETE_ENABLED", "false")

        config = ToolkitConfig.from_env()

        assert config.database_url == "sqlite:///env.db"
        assert config.echo_sql is True
        assert config.soft_delete_enabled is False

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "toolkit.json"
        path.write_text(json.dumps({"database_url": "sqlite:///json.db"}))

        assert ToolkitConfig.from_file(path).database_url == "sqlite:///json.db"

    def test_from_yaml_file(self, tmp_path):
        path = tmp_path / "toolkit.yaml"
        path.write_text("environment: test\ninclude_deleted_option: with_deleted\n")

        config = ToolkitConfig.from_file(path)

        assert config.environment == "test"
        assert config.include_deleted_option == "with_deleted"


class TestGlobalConfig:
    """Test the module-level configuration helpers."""

    def test_get_config_cached(self, monkeypatch):
        monkeypatch.delenv("ORM_ENVIRONMENT", raising=False)
        assert get_config() is get_config()

    def test_configure_updates_existing(self):
        configure(application_name="Tutorial")
        updated = configure(echo_sql=True)

        assert updated.application_name == "Tutorial"
        assert updated.echo_sql is True
        assert config_module.get_config() is updated
