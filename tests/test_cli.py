"""
Tests for the toolkit CLI module.
"""

import pytest
from click.testing import CliRunner

from orm_toolkit import config as config_module
from orm_toolkit.cli import cli


@pytest.fixture
def runner():
    """Create a CLI runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def fresh_config(monkeypatch):
    """Rebuild the global configuration from a clean environment."""
    for name in ("ORM_DATABASE_URL", "ORM_ENVIRONMENT", "ORM_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    config_module.set_config(None)
    yield
    config_module.set_config(None)


class TestCLIBasics:
    """Test basic CLI functionality."""

    def test_cli_help(self, runner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "ORM Learning Toolkit" in result.output

    def test_cli_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "version" in result.output.lower()

    def test_cli_no_command(self, runner):
        result = runner.invoke(cli, [])
        assert result.exit_code == 0
        assert "ORM Learning Toolkit" in result.output


class TestConfigCommands:
    """Test configuration-related commands."""

    def test_config_show(self, runner):
        result = runner.invoke(cli, ["config", "show"])
        assert result.exit_code == 0
        assert "Toolkit Configuration" in result.output
        assert "include_deleted_option" in result.output

    def test_config_show_json(self, runner):
        result = runner.invoke(cli, ["config", "show", "--format", "json"])
        assert result.exit_code == 0
        assert '"database_url"' in result.output

    def test_config_show_yaml(self, runner):
        result = runner.invoke(cli, ["config", "show", "--format", "yaml"])
        assert result.exit_code == 0
        assert "soft_delete_enabled: true" in result.output

    def test_config_show_invalid_environment(self, runner, monkeypatch):
        monkeypatch.setenv("ORM_ENVIRONMENT", "moon")
        result = runner.invoke(cli, ["config", "show"])
        assert result.exit_code == 1
        assert "Error loading configuration" in result.output


class TestDemoCommand:
    """Test the soft delete walkthrough command."""

    def test_demo_default(self, runner):
        result = runner.invoke(cli, ["demo"])
        assert result.exit_code == 0
        assert "Removed person 1" in result.output
        assert "Default view" in result.output
        assert "Unfiltered view" in result.output
        assert "p3" in result.output

    @pytest.mark.integration
    def test_demo_custom_names(self, runner, tmp_path):
        url = f"sqlite:///{tmp_path / 'persons.db'}"
        result = runner.invoke(
            cli, ["demo", "--database-url", url, "--name", "alice", "--name", "bob"]
        )
        assert result.exit_code == 0
        assert "alice" in result.output
        assert "bob" in result.output

    def test_demo_bad_url(self, runner):
        result = runner.invoke(cli, ["demo", "--database-url", "nosuchdb://x"])
        assert result.exit_code == 1
        assert "Error running demo" in result.output
