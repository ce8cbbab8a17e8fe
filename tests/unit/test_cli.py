"""Unit tests for the box-harness CLI."""

import json
from unittest.mock import patch

import pytest
import structlog
from click.testing import CliRunner

from box_harness.cli import cli
from box_harness.config import ENV_CONFIG_JSON
from box_harness.errors import BoxAPIError
from box_harness.lifecycle import LifecycleController
from tests.mocks import FakeAuthenticator

APP_CONFIG = {
    "boxAppSettings": {"clientID": "cid", "clientSecret": "secret"},
    "enterpriseID": "E1",
}


@pytest.fixture
def runner():
    """Create CLI test runner."""
    return CliRunner()


@pytest.fixture
def fake_cli(fake_box, monkeypatch):
    """Point the CLI at the fake backend and keep global logging untouched.

    structlog's default logger prints to stdout, which would mix harness
    events into the command output.
    """
    monkeypatch.setenv(ENV_CONFIG_JSON, json.dumps(APP_CONFIG))
    structlog.configure(logger_factory=structlog.ReturnLoggerFactory())
    with patch("box_harness.cli.configure_logging"), patch(
        "box_harness.cli.LifecycleController",
        side_effect=lambda: LifecycleController(lambda config: FakeAuthenticator(fake_box)),
    ):
        yield fake_box
    structlog.reset_defaults()


class TestCheckCommand:
    """Tests for box-harness check."""

    def test_check_creates_and_deletes_user(self, runner, fake_cli):
        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 0, result.output
        assert "Enterprise: E1" in result.output
        assert "U1 (user, created)" in result.output
        assert "Session OK" in result.output
        assert fake_cli.calls_to("delete_enterprise_user") == [
            ("admin", "delete_enterprise_user", ("U1", False, True))
        ]

    def test_check_with_supplied_user(self, runner, fake_cli, monkeypatch):
        monkeypatch.setenv(ENV_CONFIG_JSON, json.dumps(dict(APP_CONFIG, userID="U42")))

        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 0, result.output
        assert "U42 (user, from config)" in result.output
        assert fake_cli.calls_to("delete_enterprise_user") == []

    def test_check_json_output(self, runner, fake_cli):
        result = runner.invoke(cli, ["--json", "check"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.output)
        assert data["config_source"] == "environment"
        assert data["admin_login"] == "admin@example.com"
        assert data["user_id"] == "U1"
        assert data["user_created"] is True

    def test_check_auth_failure(self, runner, fake_cli):
        fake_cli.fail("admin_client", BoxAPIError("invalid_client", status_code=400))

        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 1
        assert "Error: invalid_client (400)" in result.output

    def test_check_missing_config(self, runner, fake_cli, monkeypatch, tmp_path):
        monkeypatch.delenv(ENV_CONFIG_JSON)

        result = runner.invoke(cli, ["--config", str(tmp_path / "absent.json"), "check"])

        assert result.exit_code == 1
        assert "No config found" in result.output

    def test_verbosity_selects_log_level(self, runner, fake_cli):
        with patch("box_harness.cli.configure_logging") as configure:
            runner.invoke(cli, ["-vv", "check"])
        configure.assert_called_once_with("debug", log_file=None)

    def test_log_file_option(self, runner, fake_cli, tmp_path):
        log_file = tmp_path / "check.log"
        with patch("box_harness.cli.configure_logging") as configure:
            result = runner.invoke(cli, ["--log-file", str(log_file), "check"])

        assert result.exit_code == 0, result.output
        configure.assert_called_once_with("warning", log_file=str(log_file))

    def test_failed_user_delete_still_succeeds(self, runner, fake_cli):
        fake_cli.fail("delete_enterprise_user", BoxAPIError("user has content"))

        result = runner.invoke(cli, ["check"])

        assert result.exit_code == 0, result.output
        assert "U1 (user, created)" in result.output
        assert "deleted" not in result.output
