"""Function commands.

Commands for running the discount function on an input document, testing it
against recorded fixtures and validating fixtures.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Optional

import typer
from rich.panel import Panel

from discount_function.cli.common import (
    get_config_or_default,
    get_console,
    get_error_console,
    get_run_logger,
)

console = get_console()
error_console = get_error_console()


def run_command(
    input_file: Optional[Path] = typer.Option(
        None,
        "--input",
        "-i",
        help="Input JSON file (default: read from stdin)",
    ),
    export: Optional[str] = typer.Option(
        None,
        "--export",
        "-e",
        help="Export to run (default: function.export from config)",
    ),
    table: bool = typer.Option(
        False,
        "--table",
        "-t",
        help="Also render the operations as a table",
    ),
) -> None:
    """
    Run the function on an input document and print the output JSON.

    Example:
        discount-function run --input input.json
        cat input.json | discount-function run
    """
    from discount_function.runner import run_function

    config = get_config_or_default()
    export = export or config.function.export

    try:
        raw = input_file.read_text(encoding="utf-8") if input_file else sys.stdin.read()
    except OSError as e:
        error_console.print(f"[red]Error: Cannot read input: {e}[/red]")
        raise typer.Exit(2)

    try:
        input_data = json.loads(raw)
    except json.JSONDecodeError as e:
        error_console.print(f"[red]Error: Input is not valid JSON: {e}[/red]")
        raise typer.Exit(2)

    result = run_function(export, input_data, get_run_logger(config, export))
    if not result.success:
        error_console.print(f"[red]Error: {result.error}[/red]")
        raise typer.Exit(1)

    typer.echo(json.dumps(result.output, indent=2))

    if table:
        from discount_function.cli.display import operations_table

        error_console.print(operations_table(result.output))


def fixtures_test_command(
    fixtures: Optional[list[Path]] = typer.Argument(
        None,
        help="Fixture files to run (default: every *.json in the fixtures directory)",
    ),
    fixtures_dir: Optional[Path] = typer.Option(
        None,
        "--fixtures-dir",
        "-d",
        help="Directory to discover fixtures in (default: fixtures_dir from config)",
    ),
) -> None:
    """
    Run recorded fixtures and compare the output with the recorded output.

    Each fixture's input and output are validated, the fixture's export is
    run on its input, and the result must equal the recorded output.

    Example:
        discount-function test
        discount-function test tests/fixtures/order-and-product.json
    """
    from discount_function.cli.display import fixture_results_table, validation_errors_table
    from discount_function.errors import FixtureError
    from discount_function.fixtures import discover_fixtures, load_fixture
    from discount_function.runner import run_fixture

    config = get_config_or_default()

    paths = list(fixtures or [])
    if not paths:
        directory = fixtures_dir or config.fixtures_path
        paths = discover_fixtures(directory)
        if not paths:
            console.print(f"[yellow]No fixtures found in {directory}[/yellow]")
            raise typer.Exit(1)

    results = []
    load_failures = 0
    for path in paths:
        try:
            fixture = load_fixture(path)
        except FixtureError as e:
            console.print(f"[red]{e}[/red]")
            load_failures += 1
            continue
        run_logger = get_run_logger(config, fixture.export or config.function.export)
        results.append(run_fixture(fixture, run_logger))

    if results:
        console.print(fixture_results_table(results))

    for result in results:
        if result.passed:
            continue
        name = result.fixture.name
        if result.validation.input_errors:
            console.print(validation_errors_table(f"{name}: input", result.validation.input_errors))
        if result.validation.output_errors:
            console.print(validation_errors_table(f"{name}: output", result.validation.output_errors))
        if result.error:
            console.print(f"[red]{name}: {result.error}[/red]")
        elif not result.matches:
            console.print(
                Panel(
                    f"[bold]Expected:[/bold]\n{json.dumps(result.expected, indent=2)}\n\n"
                    f"[bold]Actual:[/bold]\n{json.dumps(result.actual, indent=2)}",
                    title=f"{name}: output mismatch",
                    border_style="red",
                )
            )

    failed = load_failures + sum(1 for r in results if not r.passed)
    total = load_failures + len(results)
    if failed:
        console.print(f"[red bold]{failed} of {total} fixture(s) failed[/red bold]")
        raise typer.Exit(1)
    console.print(f"[green bold]All {total} fixture(s) passed[/green bold]")


def validate_command(
    fixture_path: Path = typer.Argument(..., help="Fixture file to validate"),
) -> None:
    """
    Validate the structure of a fixture's input and output without running it.

    Example:
        discount-function validate tests/fixtures/order-only.json
    """
    from discount_function.cli.display import format_check, validation_errors_table
    from discount_function.errors import FixtureError
    from discount_function.fixtures import load_fixture
    from discount_function.validation import DocumentValidator

    try:
        fixture = load_fixture(fixture_path)
    except FixtureError as e:
        console.print(f"[red]{e}[/red]")
        raise typer.Exit(1)

    result = DocumentValidator.validate_fixture(fixture)

    console.print(f"Validation for [bold]{fixture.name}[/bold]:")
    console.print("  Input Fixture: ", format_check(result.input_valid))
    console.print("  Output Fixture: ", format_check(result.output_valid))

    if result.input_errors:
        console.print(validation_errors_table("Input errors", result.input_errors))
    if result.output_errors:
        console.print(validation_errors_table("Output errors", result.output_errors))

    if not result.valid:
        raise typer.Exit(1)
