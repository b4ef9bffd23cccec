"""
Error types for the discount function and its tooling.

This module provides:
- DiscountFunctionError, the base for errors raised while running a function
- NoCartLinesError for carts without any lines
- InputError for input documents that do not match the input contract
- UnknownExportError for export names with no registered function
- FixtureError for fixture files that cannot be loaded
"""

from __future__ import annotations

from typing import Optional


class DiscountFunctionError(Exception):
    """
    Base exception for function run errors.

    The runner catches this type and reports it as the run's error
    instead of propagating it.
    """


class NoCartLinesError(DiscountFunctionError):
    """Raised when the cart has no lines to discount."""

    def __init__(self, message: str = "No cart lines found") -> None:
        super().__init__(message)


class InputError(DiscountFunctionError):
    """Raised when an input document does not match the input contract."""

    def __init__(self, message: str, path: str = "") -> None:
        if path:
            message = f"{path}: {message}"
        super().__init__(message)
        self.path = path


class UnknownExportError(DiscountFunctionError):
    """Raised when no function is registered under an export name."""

    def __init__(self, export: str) -> None:
        super().__init__(f"No function registered for export '{export}'")
        self.export = export


class FixtureError(Exception):
    """Raised when a fixture file cannot be read or parsed."""

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        super().__init__(message)
        self.path = path
