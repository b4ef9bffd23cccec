"""Tests for the run, test and validate CLI commands."""

import json
import logging
import shutil

import pytest
from rich.logging import RichHandler

from discount_function import __version__
from discount_function.cli import app


@pytest.fixture(autouse=True)
def in_tmp_dir(tmp_path, monkeypatch):
    """Run every command from an empty directory so no config.yaml is picked up."""
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestVersion:

    def test_version(self, cli_runner):
        result = cli_runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output


class TestRunCommand:

    def test_run_from_file(self, cli_runner, tmp_path, two_line_cart, make_input):
        input_path = tmp_path / "input.json"
        input_path.write_text(json.dumps(make_input(two_line_cart, ["ORDER", "PRODUCT"], "15")))

        result = cli_runner.invoke(app, ["run", "--input", str(input_path)])

        assert result.exit_code == 0, result.output
        output = json.loads(result.stdout)
        messages = [
            next(iter(op.values()))["candidates"][0]["message"] for op in output["operations"]
        ]
        assert messages == ["15% OFF ORDER", "30% OFF PRODUCT"]

    def test_run_from_stdin(self, cli_runner, two_line_cart, make_input):
        document = json.dumps(make_input(two_line_cart, ["PRODUCT"]))

        result = cli_runner.invoke(app, ["run"], input=document)

        assert result.exit_code == 0, result.output
        output = json.loads(result.stdout)
        target = output["operations"][0]["productDiscountsAdd"]["candidates"][0]["targets"][0]
        assert target == {"cartLine": {"id": "gid://shopify/CartLine/B"}}

    def test_run_writes_run_log(self, cli_runner, tmp_path, two_line_cart, make_input):
        document = json.dumps(make_input(two_line_cart, ["ORDER"]))
        cli_runner.invoke(app, ["run"], input=document)

        log_files = list((tmp_path / ".discount-function" / "logs").glob("*.jsonl"))
        assert len(log_files) == 1

    def test_run_logging_disabled_by_config(self, cli_runner, tmp_path, two_line_cart, make_input):
        (tmp_path / "config.yaml").write_text("logging:\n  enabled: false\n")
        document = json.dumps(make_input(two_line_cart, ["ORDER"]))

        result = cli_runner.invoke(app, ["run"], input=document)

        assert result.exit_code == 0
        assert not (tmp_path / ".discount-function").exists()

    def test_empty_cart_exits_1(self, cli_runner, make_input):
        result = cli_runner.invoke(app, ["run"], input=json.dumps(make_input([], ["ORDER"])))
        assert result.exit_code == 1
        assert "No cart lines found" in result.output

    def test_invalid_json_exits_2(self, cli_runner):
        result = cli_runner.invoke(app, ["run"], input="{nope")
        assert result.exit_code == 2

    def test_unknown_export_exits_1(self, cli_runner, two_line_cart, make_input):
        document = json.dumps(make_input(two_line_cart, ["ORDER"]))
        result = cli_runner.invoke(app, ["run", "--export", "missing"], input=document)
        assert result.exit_code == 1

    def test_missing_config_file_exits_1(self, cli_runner):
        result = cli_runner.invoke(app, ["--config", "nope.yaml", "run"], input="{}")
        assert result.exit_code == 1
        assert "Config file not found" in result.output


class TestTestCommand:

    def test_all_recorded_fixtures_pass(self, cli_runner, fixtures_dir):
        result = cli_runner.invoke(app, ["test", "--fixtures-dir", str(fixtures_dir)])
        assert result.exit_code == 0, result.output
        assert "fixture(s) passed" in result.output

    def test_uses_configured_fixtures_dir(self, cli_runner, tmp_path, fixtures_dir):
        recorded = tmp_path / "recorded"
        recorded.mkdir()
        shutil.copy(fixtures_dir / "order-and-product.json", recorded)
        (tmp_path / "config.yaml").write_text("fixtures_dir: recorded\n")

        result = cli_runner.invoke(app, ["test"])

        assert result.exit_code == 0, result.output
        assert "All 1 fixture(s) passed" in result.output

    def test_bad_format_fixture_fails(self, cli_runner, fixtures_dir):
        bad = fixtures_dir / "bad-format" / "metafield-arguments-in-key.json"
        result = cli_runner.invoke(app, ["test", str(bad)])
        assert result.exit_code == 1
        assert "output mismatch" in result.output

    def test_unloadable_fixture_fails(self, cli_runner, tmp_path):
        broken = tmp_path / "broken.json"
        broken.write_text("{")
        result = cli_runner.invoke(app, ["test", str(broken)])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output

    def test_no_fixtures_found(self, cli_runner, tmp_path):
        result = cli_runner.invoke(app, ["test", "--fixtures-dir", str(tmp_path / "empty")])
        assert result.exit_code == 1
        assert "No fixtures found" in result.output


class TestValidateCommand:

    def test_valid_fixture(self, cli_runner, fixtures_dir):
        result = cli_runner.invoke(app, ["validate", str(fixtures_dir / "order-and-product.json")])
        assert result.exit_code == 0, result.output
        assert "fail" not in result.output

    def test_invalid_fixture(self, cli_runner, tmp_path):
        path = tmp_path / "invalid.json"
        path.write_text(json.dumps({
            "payload": {
                "export": "cart_lines_discounts_generate_run",
                "input": {"cart": {"lines": []}, "discount": {}},
                "output": {"operations": [{"unknownOperation": {}}]},
            }
        }))

        result = cli_runner.invoke(app, ["validate", str(path)])

        assert result.exit_code == 1
        assert "Output Fixture:  fail" in result.output


class TestLoggingLevel:

    def test_debug_level_shows_package_logs(self, cli_runner, tmp_path, two_line_cart, make_input):
        (tmp_path / "config.yaml").write_text("logging:\n  level: debug\n")
        document = json.dumps(make_input(two_line_cart, ["ORDER"]))

        result = cli_runner.invoke(app, ["run"], input=document)

        assert result.exit_code == 0
        assert "Generated 1 discount operation(s)" in result.output
        assert logging.getLogger("discount_function").getEffectiveLevel() == logging.DEBUG

    def test_default_level_hides_debug_logs(self, cli_runner, two_line_cart, make_input):
        document = json.dumps(make_input(two_line_cart, ["ORDER"]))

        result = cli_runner.invoke(app, ["run"], input=document)

        assert result.exit_code == 0
        assert "Generated" not in result.output

    def test_handler_attached_once(self, cli_runner):
        cli_runner.invoke(app, ["logs"])
        cli_runner.invoke(app, ["logs"])

        handlers = [
            h for h in logging.getLogger("discount_function").handlers
            if isinstance(h, RichHandler)
        ]
        assert len(handlers) == 1
