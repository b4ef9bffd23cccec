"""Tests for the logs CLI command."""

import json

import pytest

from discount_function.cli import app


@pytest.fixture(autouse=True)
def in_tmp_dir(tmp_path, monkeypatch):
    """Run every command from an empty directory so no config.yaml is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestLogsCommand:

    def test_no_runs_logged(self, cli_runner):
        result = cli_runner.invoke(app, ["logs"])
        assert result.exit_code == 0
        assert "No runs logged" in result.output

    def test_shows_logged_runs(self, cli_runner, two_line_cart, make_input):
        document = json.dumps(make_input(two_line_cart, ["ORDER"]))
        cli_runner.invoke(app, ["run"], input=document)

        result = cli_runner.invoke(app, ["logs"])

        assert result.exit_code == 0, result.output
        assert "start" in result.output
        assert "complete" in result.output

    def test_errors_only(self, cli_runner, two_line_cart, make_input):
        cli_runner.invoke(app, ["run"], input=json.dumps(make_input(two_line_cart, ["ORDER"])))
        cli_runner.invoke(app, ["run"], input=json.dumps(make_input([], ["ORDER"])))

        result = cli_runner.invoke(app, ["logs", "--errors"])

        assert result.exit_code == 0, result.output
        assert "error" in result.output
        assert "complete" not in result.output

    def test_fixture_runs_filtered_by_run_id(self, cli_runner, fixtures_dir):
        cli_runner.invoke(app, ["test", "--fixtures-dir", str(fixtures_dir)])

        result = cli_runner.invoke(app, ["logs", "--run-id", "shipping-only.json"])
        assert result.exit_code == 0, result.output
        assert "complete" in result.output

        result = cli_runner.invoke(app, ["logs", "--run-id", "missing.json"])
        assert result.exit_code == 0
        assert "No matching runs logged" in result.output

    def test_date_without_runs(self, cli_runner, two_line_cart, make_input):
        cli_runner.invoke(app, ["run"], input=json.dumps(make_input(two_line_cart, ["ORDER"])))

        result = cli_runner.invoke(app, ["logs", "--date", "2000-01-01"])

        assert result.exit_code == 0
        assert "No matching runs logged" in result.output
