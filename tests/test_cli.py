"""Tests for fitback/cli.py - command line entry point."""

from unittest.mock import patch

from typer.testing import CliRunner

from fitback.cli import app

runner = CliRunner()


def test_version():
    result = runner.invoke(app, ["version"])

    assert result.exit_code == 0
    assert "FitBack 0.1.0" in result.stdout


def test_serve_builds_config_and_propagates_exit_code():
    with (
        patch("fitback.cli.configure_logging"),
        patch("fitback.cli.Supervisor") as mock_supervisor,
    ):
        mock_supervisor.return_value.run.return_value = 1
        result = runner.invoke(app, ["serve", "--port", "9000", "--workers", "2"])

    assert result.exit_code == 1
    config = mock_supervisor.call_args[0][0]
    assert config.port == 9000
    assert config.workers == 2


def test_serve_rejects_zero_workers():
    with patch("fitback.cli.Supervisor") as mock_supervisor:
        result = runner.invoke(app, ["serve", "--workers", "0"])

    assert result.exit_code != 0
    mock_supervisor.assert_not_called()
