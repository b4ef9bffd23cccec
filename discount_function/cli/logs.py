"""Run log commands.

Shows the run events that the run and test commands append to the
JSONL run log.
"""
from __future__ import annotations

from typing import Optional

import typer

from discount_function.cli.common import get_config_or_default, get_console

console = get_console()


def logs_command(
    export: Optional[str] = typer.Option(
        None,
        "--export",
        "-e",
        help="Export whose runs to show (default: function.export from config)",
    ),
    date: Optional[str] = typer.Option(
        None,
        "--date",
        help="Day to show, YYYY-MM-DD (default: the most recent day with runs)",
    ),
    run_id: Optional[str] = typer.Option(
        None,
        "--run-id",
        "-r",
        help="Only show events of one fixture run",
    ),
    errors: bool = typer.Option(
        False,
        "--errors",
        help="Only show failed runs",
    ),
    limit: int = typer.Option(
        50,
        "--limit",
        "-n",
        min=1,
        help="Show at most this many of the most recent events",
    ),
) -> None:
    """
    Show logged function runs.

    Example:
        discount-function logs
        discount-function logs --errors --date 2024-06-01
    """
    from discount_function.cli.display import run_events_table
    from discount_function.logger import RunLogger

    config = get_config_or_default()
    export = export or config.function.export
    run_logger = RunLogger(export, config)

    if date is None:
        dates = run_logger.log_dates()
        if not dates:
            console.print(f"[yellow]No runs logged for {export}[/yellow]")
            return
        date = dates[0]

    events = run_logger.events(date=date, run_id=run_id, errors_only=errors, limit=limit)
    if not events:
        console.print(f"[yellow]No matching runs logged for {export} on {date}[/yellow]")
        return

    console.print(run_events_table(f"{export} runs on {date}", events))
