"""Display helpers and formatters for the CLI.

Contains Rich formatting utilities for operations, validation errors,
fixture results and run log events.
This module should NOT import from the command modules to avoid circular imports.
"""
from __future__ import annotations

from typing import Any

from rich.table import Table
from rich.text import Text

from discount_function.logger import RunEvent, RunEventType
from discount_function.runner import FixtureRunResult
from discount_function.validation import ValidationError

# Operation kinds and their display names and colors
OPERATION_DISPLAY: dict[str, tuple[str, str]] = {
    "orderDiscountsAdd": ("Order discount", "cyan"),
    "productDiscountsAdd": ("Product discount", "magenta"),
}


def format_check(ok: bool) -> Text:
    """Format a pass/fail flag as colored text."""
    return Text("pass", style="green") if ok else Text("fail", style="red bold")


def format_operation_kind(kind: str) -> Text:
    display_name, style = OPERATION_DISPLAY.get(kind, (kind, "white"))
    return Text(display_name, style=style)


def _describe_target(target: dict[str, Any]) -> str:
    if "orderSubtotal" in target:
        excluded = target["orderSubtotal"].get("excludedCartLineIds") or []
        if excluded:
            return f"order subtotal (excluding {', '.join(excluded)})"
        return "order subtotal"
    if "cartLine" in target:
        line = target["cartLine"]
        quantity = line.get("quantity")
        suffix = f" x{quantity}" if quantity is not None else ""
        return f"{line.get('id', '?')}{suffix}"
    return ", ".join(target)


def _describe_value(value: dict[str, Any]) -> str:
    if "percentage" in value:
        return f"{value['percentage'].get('value')}%"
    if "fixedAmount" in value:
        return str(value["fixedAmount"].get("amount"))
    return "?"


def operations_table(output: dict[str, Any]) -> Table:
    """Build a table with one row per candidate of every operation."""
    table = Table(title="Discount Operations")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Operation")
    table.add_column("Strategy")
    table.add_column("Targets")
    table.add_column("Value", justify="right")
    table.add_column("Message")

    for index, operation in enumerate(output.get("operations", []), start=1):
        for kind, body in operation.items():
            for candidate in body.get("candidates", []):
                table.add_row(
                    str(index),
                    format_operation_kind(kind),
                    body.get("selectionStrategy", ""),
                    "\n".join(_describe_target(t) for t in candidate.get("targets", [])),
                    _describe_value(candidate.get("value", {})),
                    candidate.get("message") or "",
                )
    return table


def validation_errors_table(title: str, errors: list[ValidationError]) -> Table:
    """Build a table listing validation errors."""
    table = Table(title=title)
    table.add_column("Code", style="red")
    table.add_column("Path", style="cyan")
    table.add_column("Message")
    table.add_column("Expected", style="dim")
    table.add_column("Got", style="dim")

    for error in errors:
        message = error.message
        if error.hint:
            message = f"{message}\n[dim]{error.hint}[/dim]"
        table.add_row(error.code, error.path or "-", message, error.expected, error.got)
    return table


def fixture_results_table(results: list[FixtureRunResult]) -> Table:
    """Build the summary table for a fixture test run."""
    table = Table(title="Fixture Results")
    table.add_column("Fixture")
    table.add_column("Input", justify="center")
    table.add_column("Output", justify="center")
    table.add_column("Run", justify="center")
    table.add_column("Match", justify="center")
    table.add_column("Result", justify="center")

    for result in results:
        table.add_row(
            result.fixture.name,
            format_check(result.validation.input_valid),
            format_check(result.validation.output_valid),
            format_check(result.run.success),
            format_check(result.matches),
            format_check(result.passed),
        )
    return table


# Run event types and their display names and colors
RUN_EVENT_DISPLAY: dict[RunEventType, tuple[str, str]] = {
    RunEventType.START: ("start", "dim"),
    RunEventType.COMPLETE: ("complete", "green"),
    RunEventType.ERROR: ("error", "red bold"),
}


def _describe_event(event: RunEvent) -> str:
    if event.event_type is RunEventType.COMPLETE:
        return f"{event.data.get('operations', 0)} operation(s)"
    if event.event_type is RunEventType.ERROR:
        return f"{event.data.get('error_type', 'Error')}: {event.data.get('error', '')}"
    return ""


def run_events_table(title: str, events: list[RunEvent]) -> Table:
    """Build a table listing run log events."""
    table = Table(title=title)
    table.add_column("Time", style="dim")
    table.add_column("Run", style="cyan")
    table.add_column("Event")
    table.add_column("Details")

    for event in events:
        display_name, style = RUN_EVENT_DISPLAY[event.event_type]
        table.add_row(
            event.timestamp,
            event.run_id or "-",
            Text(display_name, style=style),
            _describe_event(event),
        )
    return table
