"""
In-process function runner.

This module provides:
- FUNCTIONS, the registry of exports to their entry points
- run_function, which decodes an input document, runs an export and encodes
  the result, reporting function errors instead of raising them
- run_fixture, which validates a fixture, runs it and compares the output
  with the recorded one
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from discount_function.config import DEFAULT_EXPORT
from discount_function.errors import DiscountFunctionError, UnknownExportError
from discount_function.fixtures import Fixture
from discount_function.logger import RunLogger
from discount_function.models import (
    CartLinesDiscountsGenerateRunInput,
    CartLinesDiscountsGenerateRunResult,
)
from discount_function.run import cart_lines_discounts_generate_run
from discount_function.validation import DocumentValidator, FixtureValidationResult

logger = logging.getLogger(__name__)


@dataclass
class FunctionExport:
    """An entry point together with the decoder for its input."""
    decode: Callable[[Any], Any]
    run: Callable[[Any], Any]


FUNCTIONS: dict[str, FunctionExport] = {
    DEFAULT_EXPORT: FunctionExport(
        decode=CartLinesDiscountsGenerateRunInput.from_dict,
        run=cart_lines_discounts_generate_run,
    ),
}


@dataclass
class RunResult:
    """Outcome of a single function run. Exactly one of output and error is set."""
    output: Optional[dict[str, Any]] = None
    error: Optional[str] = None

    @property
    def success(self) -> bool:
        return self.error is None


@dataclass
class FixtureRunResult:
    """Outcome of running a recorded fixture."""
    fixture: Fixture
    validation: FixtureValidationResult
    run: RunResult
    expected: dict[str, Any] = field(default_factory=dict)

    @property
    def actual(self) -> Optional[dict[str, Any]]:
        return self.run.output

    @property
    def error(self) -> Optional[str]:
        return self.run.error

    @property
    def matches(self) -> bool:
        return self.run.success and self.run.output == self.expected

    @property
    def passed(self) -> bool:
        return self.validation.valid and self.matches


def run_function(
    export: str,
    input_data: Any,
    run_logger: Optional[RunLogger] = None,
) -> RunResult:
    """
    Run a registered export against a decoded JSON input document.

    Args:
        export: Export name, e.g. "cart_lines_discounts_generate_run".
        input_data: The decoded input JSON.
        run_logger: Optional JSONL logger for run events.

    Returns:
        RunResult with the encoded output, or the error message if the
        export is unknown, the input is malformed or the function failed.
    """
    if run_logger:
        run_logger.run_start()

    try:
        entry = FUNCTIONS.get(export)
        if entry is None:
            raise UnknownExportError(export)
        result: CartLinesDiscountsGenerateRunResult = entry.run(entry.decode(input_data))
    except DiscountFunctionError as e:
        logger.info("Function %s failed: %s", export, e)
        if run_logger:
            run_logger.run_error(e)
        return RunResult(error=str(e))

    output = result.to_dict()
    if run_logger:
        run_logger.run_complete(len(output["operations"]))
    return RunResult(output=output)


def run_fixture(fixture: Fixture, run_logger: Optional[RunLogger] = None) -> FixtureRunResult:
    """
    Validate and run a fixture, comparing the output to the recorded one.

    The function runs even when validation fails, so both problems can be
    reported together.
    """
    validation = DocumentValidator.validate_fixture(fixture)
    if not validation.valid:
        logger.warning("Fixture %s failed validation", fixture.name)

    if run_logger:
        with run_logger.run_context(fixture.name):
            run = run_function(fixture.export, fixture.input, run_logger)
    else:
        run = run_function(fixture.export, fixture.input)

    return FixtureRunResult(
        fixture=fixture,
        validation=validation,
        run=run,
        expected=fixture.expected_output,
    )
