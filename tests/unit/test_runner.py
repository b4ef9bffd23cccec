"""Tests for the in-process function runner."""

from discount_function.config import DEFAULT_EXPORT
from discount_function.fixtures import Fixture, load_fixture
from discount_function.logger import RunEventType, RunLogger
from discount_function.runner import FUNCTIONS, run_fixture, run_function


class TestRunFunction:

    def test_default_export_is_registered(self):
        assert DEFAULT_EXPORT in FUNCTIONS

    def test_successful_run(self, two_line_cart, make_input):
        result = run_function(DEFAULT_EXPORT, make_input(two_line_cart, ["ORDER"], "15"))

        assert result.success
        assert result.error is None
        operation = result.output["operations"][0]["orderDiscountsAdd"]
        assert operation["candidates"][0]["message"] == "15% OFF ORDER"

    def test_empty_cart_is_reported_not_raised(self, make_input):
        result = run_function(DEFAULT_EXPORT, make_input([], ["ORDER"]))
        assert not result.success
        assert result.output is None
        assert result.error == "No cart lines found"

    def test_unknown_export(self, two_line_cart, make_input):
        result = run_function("nope", make_input(two_line_cart, ["ORDER"]))
        assert result.error == "No function registered for export 'nope'"

    def test_malformed_input(self):
        result = run_function(DEFAULT_EXPORT, {"cart": {}})
        assert "missing required field 'discount'" in result.error

    def test_logs_run_events(self, tmp_config, two_line_cart, make_input):
        run_logger = RunLogger(DEFAULT_EXPORT, tmp_config)

        run_function(DEFAULT_EXPORT, make_input(two_line_cart, ["ORDER", "PRODUCT"]), run_logger)
        run_function(DEFAULT_EXPORT, make_input([], ["ORDER"]), run_logger)

        events = run_logger.events()
        assert [event.event_type for event in events] == [
            RunEventType.START,
            RunEventType.COMPLETE,
            RunEventType.START,
            RunEventType.ERROR,
        ]
        assert events[1].data == {"operations": 2}
        assert events[3].data["error_type"] == "NoCartLinesError"


class TestRunFixture:

    def test_recorded_fixture_passes(self, fixtures_dir):
        result = run_fixture(load_fixture(fixtures_dir / "order-and-product.json"))
        assert result.passed
        assert result.actual == result.expected

    def test_bad_format_fixture_does_not_match(self, fixtures_dir):
        fixture = load_fixture(fixtures_dir / "bad-format" / "metafield-arguments-in-key.json")
        result = run_fixture(fixture)

        assert result.validation.valid
        assert result.error is None
        assert not result.matches
        assert not result.passed
        messages = [
            next(iter(op.values()))["candidates"][0]["message"]
            for op in result.actual["operations"]
        ]
        assert messages == ["10% OFF ORDER", "20% OFF PRODUCT"]

    def test_mismatched_expectation_fails(self, two_line_cart, make_input):
        fixture = Fixture(
            export=DEFAULT_EXPORT,
            target="cart.lines.discounts.generate.run",
            input=make_input(two_line_cart, ["ORDER"]),
            expected_output={"operations": []},
        )
        result = run_fixture(fixture)
        assert result.run.success
        assert not result.passed

    def test_run_context_tags_entries(self, fixtures_dir, tmp_config):
        run_logger = RunLogger(DEFAULT_EXPORT, tmp_config)
        run_fixture(load_fixture(fixtures_dir / "shipping-only.json"), run_logger)

        events = run_logger.events(run_id="shipping-only.json")
        assert [e.event_type for e in events] == [RunEventType.START, RunEventType.COMPLETE]
