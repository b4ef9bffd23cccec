"""Main Typer app definition and routing.

This is the canonical entry point for the CLI. The app, callback, and
command registrations are all defined here.
"""
from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from discount_function import __version__
from discount_function.cli.common import (
    configure_logging,
    get_config_or_default,
    get_console,
    set_config_path,
)

# Create Typer app
app = typer.Typer(
    name="discount-function",
    help="Run, test and validate the cart lines discount function and inspect its run log",
    add_completion=False,
)

console = get_console()


def version_callback(value: bool) -> None:
    """Show version and exit."""
    if value:
        console.print(f"discount-function version {__version__}")
        raise typer.Exit()


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Path to config.yaml (default: ./config.yaml if present)",
    ),
    version: bool = typer.Option(
        False,
        "--version",
        "-v",
        help="Show version and exit",
        callback=version_callback,
        is_eager=True,
    ),
) -> None:
    """
    Discount Function - order and product percentage discounts for checkout.

    Use --config/-c to load settings from a config file other than ./config.yaml.
    """
    from discount_function.config import ConfigError

    if config:
        if not Path(config).is_file():
            console.print(f"[red]Error: Config file not found: {config}[/red]")
            raise typer.Exit(1)
    set_config_path(config)

    try:
        settings = get_config_or_default()
    except ConfigError as e:
        console.print(f"[red]Error: {e}[/red]")
        raise typer.Exit(1)
    configure_logging(settings.logging.level)

    # If no subcommand and no --help, show help
    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)


# =========================================================================
# Command Registration
# =========================================================================

from discount_function.cli.function import (  # noqa: E402
    fixtures_test_command,
    run_command,
    validate_command,
)
from discount_function.cli.logs import logs_command  # noqa: E402

app.command("run")(run_command)
app.command("test")(fixtures_test_command)
app.command("validate")(validate_command)
app.command("logs")(logs_command)


# =========================================================================
# Entry Point
# =========================================================================


def cli_main() -> None:
    """Entry point for the CLI."""
    app()


__all__ = ["app", "cli_main"]
