"""Structural validation of function documents."""

from discount_function.validation.document_validator import (
    DocumentValidator,
    FixtureValidationResult,
    ValidationError,
)

__all__ = ["DocumentValidator", "FixtureValidationResult", "ValidationError"]
