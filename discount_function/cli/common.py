"""Common utilities and global state for the CLI.

Contains console singletons, config path management and config loading.
This module should NOT import from the command modules to avoid circular imports.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from rich.console import Console
from rich.logging import RichHandler

if TYPE_CHECKING:
    from discount_function.config import DiscountConfig
    from discount_function.logger import RunLogger

# ============================================================================
# Global State
# ============================================================================

# Config file override (set via --config flag)
_config_path: Optional[str] = None

# Console singletons
_console: Optional[Console] = None
_error_console: Optional[Console] = None

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warn": logging.WARNING,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def get_config_path() -> Optional[str]:
    """Get the config file override if set."""
    return _config_path


def set_config_path(path: Optional[str]) -> None:
    """Set the config file override."""
    global _config_path
    _config_path = path


def get_console() -> Console:
    """Get or create the console singleton."""
    global _console
    if _console is None:
        _console = Console()
    return _console


def get_error_console() -> Console:
    """Get or create the stderr console singleton."""
    global _error_console
    if _error_console is None:
        _error_console = Console(stderr=True)
    return _error_console


# ============================================================================
# Config Helpers
# ============================================================================


def load_config_safe() -> Optional["DiscountConfig"]:
    """
    Load config, returning None if no config file exists.

    A config file that exists but cannot be loaded is still an error.
    """
    from pathlib import Path

    from discount_function.config import load_config

    config_path = get_config_path()
    if config_path is None and not Path("config.yaml").exists():
        return None
    return load_config(config_path)


def get_config_or_default() -> "DiscountConfig":
    """Get config or the defaults when no config.yaml is present."""
    from discount_function.config import DiscountConfig

    config = load_config_safe()
    if config is not None:
        return config
    return DiscountConfig()


def get_run_logger(config: "DiscountConfig", export: str) -> Optional["RunLogger"]:
    """Create a run logger for an export, or None when run logging is disabled."""
    if not config.logging.enabled:
        return None

    from discount_function.logger import RunLogger

    return RunLogger(export, config)


def configure_logging(level: str) -> None:
    """Show the package's log records on stderr at the configured level."""
    package_logger = logging.getLogger("discount_function")
    package_logger.setLevel(LOG_LEVELS[level])
    # Commands may run several times in one process, so attach the handler once.
    if not any(isinstance(h, RichHandler) for h in package_logger.handlers):
        package_logger.addHandler(RichHandler(console=get_error_console(), show_path=False))
