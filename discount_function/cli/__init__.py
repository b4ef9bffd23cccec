"""CLI package for discount-function.

Modules:
    app.py      - Main Typer app, version callback, command registration
    function.py - Function commands (run, test, validate)
    display.py  - Rich formatting utilities (operations, validation errors, fixture results)
    common.py   - Shared helpers (get_console, config path, run logger)

Usage:
    from discount_function.cli import app, cli_main
"""
from discount_function.cli.app import app, cli_main

__all__ = ["app", "cli_main"]
