"""Structural validation of function input and output documents.

Provides validators for:
- Input documents (cart lines, amounts, discount classes)
- Output documents (operation variants, selection strategies, targets, values)
- Fixtures (both of the above, collected into one result)

Validators never raise for bad documents. They return ValidationError records
so the CLI can report every problem at once.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional

from discount_function.errors import InputError
from discount_function.models import (
    CartLinesDiscountsGenerateRunInput,
    OrderDiscountSelectionStrategy,
    ProductDiscountSelectionStrategy,
    parse_amount,
)

if TYPE_CHECKING:
    from discount_function.fixtures import Fixture


@dataclass
class ValidationError:
    """Structured validation error for consistent CLI output."""
    code: str           # e.g., "MISSING_FIELD", "WRONG_TYPE", "UNKNOWN_OPERATION"
    message: str        # Human-readable description
    expected: str       # What was expected
    got: str            # What was actually received
    path: str = ""      # Location in the document, e.g. "operations[0].orderDiscountsAdd"
    hint: Optional[str] = None  # How to fix


@dataclass
class FixtureValidationResult:
    """Validation outcome for a fixture's input and expected output."""
    input_errors: list[ValidationError] = field(default_factory=list)
    output_errors: list[ValidationError] = field(default_factory=list)

    @property
    def input_valid(self) -> bool:
        return not self.input_errors

    @property
    def output_valid(self) -> bool:
        return not self.output_errors

    @property
    def valid(self) -> bool:
        return self.input_valid and self.output_valid


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "bool"
    if isinstance(value, dict):
        return "object"
    if isinstance(value, list):
        return "list"
    return type(value).__name__


class DocumentValidator:
    """Validates function documents against the discount function contract."""

    OPERATION_STRATEGIES = {
        "orderDiscountsAdd": [s.value for s in OrderDiscountSelectionStrategy],
        "productDiscountsAdd": [s.value for s in ProductDiscountSelectionStrategy],
    }

    OPERATION_TARGETS = {
        "orderDiscountsAdd": "orderSubtotal",
        "productDiscountsAdd": "cartLine",
    }

    VALUE_KINDS = ("percentage", "fixedAmount")

    @classmethod
    def validate_input(cls, data: Any) -> list[ValidationError]:
        """Validate an input document.

        Decoding stops at the first problem, so at most one error is returned.

        Args:
            data: The decoded input JSON.

        Returns:
            An empty list if the document decodes, otherwise the decoding error.
        """
        try:
            CartLinesDiscountsGenerateRunInput.from_dict(data)
        except InputError as e:
            return [
                ValidationError(
                    code="INVALID_INPUT",
                    message=str(e),
                    expected="input matching the cart.lines.discounts.generate.run query",
                    got=_type_name(data) if not isinstance(data, dict) else "malformed document",
                    path=e.path,
                    hint="Check the field names and types of the input fixture",
                )
            ]
        return []

    @classmethod
    def validate_output(cls, data: Any) -> list[ValidationError]:
        """Validate an output document.

        Args:
            data: The decoded output JSON.

        Returns:
            Every structural problem found, in document order.
        """
        errors: list[ValidationError] = []
        if not isinstance(data, dict):
            errors.append(cls._wrong_type("", "object", data))
            return errors

        operations = data.get("operations")
        if operations is None:
            errors.append(cls._missing("", "operations"))
            return errors
        if not isinstance(operations, list):
            errors.append(cls._wrong_type("operations", "list", operations))
            return errors

        for index, operation in enumerate(operations):
            cls._validate_operation(operation, f"operations[{index}]", errors)
        return errors

    @classmethod
    def validate_fixture(cls, fixture: Fixture) -> FixtureValidationResult:
        """Validate both documents of a fixture."""
        return FixtureValidationResult(
            input_errors=cls.validate_input(fixture.input),
            output_errors=cls.validate_output(fixture.expected_output),
        )

    # ------------------------------------------------------------------
    # Operation walkers
    # ------------------------------------------------------------------

    @classmethod
    def _validate_operation(cls, operation: Any, path: str, errors: list[ValidationError]) -> None:
        if not isinstance(operation, dict):
            errors.append(cls._wrong_type(path, "object", operation))
            return
        if len(operation) != 1:
            errors.append(
                ValidationError(
                    code="AMBIGUOUS_OPERATION",
                    message="Operation must set exactly one variant",
                    expected="a single key",
                    got=", ".join(sorted(operation)) or "no keys",
                    path=path,
                )
            )
            return

        kind, body = next(iter(operation.items()))
        if kind not in cls.OPERATION_STRATEGIES:
            errors.append(
                ValidationError(
                    code="UNKNOWN_OPERATION",
                    message=f"Unknown operation '{kind}'",
                    expected=" or ".join(cls.OPERATION_STRATEGIES),
                    got=kind,
                    path=path,
                )
            )
            return

        path = f"{path}.{kind}"
        if not isinstance(body, dict):
            errors.append(cls._wrong_type(path, "object", body))
            return

        strategies = cls.OPERATION_STRATEGIES[kind]
        strategy = body.get("selectionStrategy")
        if strategy is None:
            errors.append(cls._missing(path, "selectionStrategy"))
        elif strategy not in strategies:
            errors.append(
                ValidationError(
                    code="INVALID_ENUM",
                    message=f"Invalid selection strategy {strategy!r}",
                    expected=", ".join(strategies),
                    got=repr(strategy),
                    path=f"{path}.selectionStrategy",
                )
            )

        candidates = body.get("candidates")
        if candidates is None:
            errors.append(cls._missing(path, "candidates"))
            return
        if not isinstance(candidates, list):
            errors.append(cls._wrong_type(f"{path}.candidates", "list", candidates))
            return

        for index, candidate in enumerate(candidates):
            cls._validate_candidate(kind, candidate, f"{path}.candidates[{index}]", errors)

    @classmethod
    def _validate_candidate(
        cls, kind: str, candidate: Any, path: str, errors: list[ValidationError]
    ) -> None:
        if not isinstance(candidate, dict):
            errors.append(cls._wrong_type(path, "object", candidate))
            return

        message = candidate.get("message")
        if message is not None and not isinstance(message, str):
            errors.append(cls._wrong_type(f"{path}.message", "str", message))

        targets = candidate.get("targets")
        if targets is None:
            errors.append(cls._missing(path, "targets"))
        elif not isinstance(targets, list):
            errors.append(cls._wrong_type(f"{path}.targets", "list", targets))
        elif not targets:
            errors.append(
                ValidationError(
                    code="EMPTY_LIST",
                    message="Candidate must have at least one target",
                    expected="non-empty list",
                    got="[]",
                    path=f"{path}.targets",
                )
            )
        else:
            for index, target in enumerate(targets):
                cls._validate_target(kind, target, f"{path}.targets[{index}]", errors)

        value = candidate.get("value")
        if value is None:
            errors.append(cls._missing(path, "value"))
        else:
            cls._validate_value(value, f"{path}.value", errors)

    @classmethod
    def _validate_target(cls, kind: str, target: Any, path: str, errors: list[ValidationError]) -> None:
        expected_key = cls.OPERATION_TARGETS[kind]
        if not isinstance(target, dict) or list(target) != [expected_key]:
            errors.append(
                ValidationError(
                    code="INVALID_TARGET",
                    message=f"{kind} targets must be {expected_key} targets",
                    expected=f"{{{expected_key}: {{...}}}}",
                    got=", ".join(target) if isinstance(target, dict) else _type_name(target),
                    path=path,
                )
            )
            return

        body = target[expected_key]
        path = f"{path}.{expected_key}"
        if not isinstance(body, dict):
            errors.append(cls._wrong_type(path, "object", body))
            return

        if expected_key == "orderSubtotal":
            excluded = body.get("excludedCartLineIds")
            if excluded is None:
                errors.append(cls._missing(path, "excludedCartLineIds"))
            elif not isinstance(excluded, list) or not all(isinstance(i, str) for i in excluded):
                errors.append(cls._wrong_type(f"{path}.excludedCartLineIds", "list of str", excluded))
            return

        line_id = body.get("id")
        if line_id is None:
            errors.append(cls._missing(path, "id"))
        elif not isinstance(line_id, str):
            errors.append(cls._wrong_type(f"{path}.id", "str", line_id))

        quantity = body.get("quantity")
        if quantity is not None and (isinstance(quantity, bool) or not isinstance(quantity, int)):
            errors.append(cls._wrong_type(f"{path}.quantity", "int", quantity))

    @classmethod
    def _validate_value(cls, value: Any, path: str, errors: list[ValidationError]) -> None:
        if not isinstance(value, dict) or len(value) != 1 or next(iter(value)) not in cls.VALUE_KINDS:
            errors.append(
                ValidationError(
                    code="INVALID_VALUE",
                    message="Candidate value must be a percentage or a fixed amount",
                    expected="{percentage: {value}} or {fixedAmount: {amount}}",
                    got=", ".join(value) if isinstance(value, dict) else _type_name(value),
                    path=path,
                )
            )
            return

        kind, body = next(iter(value.items()))
        field_name = "value" if kind == "percentage" else "amount"
        path = f"{path}.{kind}"
        if not isinstance(body, dict):
            errors.append(cls._wrong_type(path, "object", body))
            return
        if field_name not in body:
            errors.append(cls._missing(path, field_name))
            return
        try:
            parse_amount(body[field_name], f"{path}.{field_name}")
        except InputError:
            errors.append(cls._wrong_type(f"{path}.{field_name}", "decimal", body[field_name]))

    # ------------------------------------------------------------------
    # Error builders
    # ------------------------------------------------------------------

    @staticmethod
    def _missing(path: str, name: str) -> ValidationError:
        return ValidationError(
            code="MISSING_FIELD",
            message=f"Missing required field '{name}'",
            expected=name,
            got="nothing",
            path=f"{path}.{name}" if path else name,
        )

    @staticmethod
    def _wrong_type(path: str, expected: str, value: Any) -> ValidationError:
        return ValidationError(
            code="WRONG_TYPE",
            message=f"Expected {expected}, got {_type_name(value)}",
            expected=expected,
            got=_type_name(value),
            path=path,
        )
