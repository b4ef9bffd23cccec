"""
Configuration loading for the discount function tooling.

This module handles:
- Loading config.yaml from the working directory
- Environment variable resolution (${VAR} syntax)
- Default values for optional fields
- Caching of the loaded configuration
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml


DEFAULT_EXPORT = "cart_lines_discounts_generate_run"
DEFAULT_TARGET = "cart.lines.discounts.generate.run"


class ConfigError(Exception):
    """Raised when configuration is invalid or cannot be loaded."""
    pass


@dataclass
class FunctionConfig:
    """Which function entry point the tooling runs by default."""
    export: str = DEFAULT_EXPORT               # Export name registered with the runner
    target: str = DEFAULT_TARGET               # Host target the export serves


@dataclass
class LoggingConfig:
    """Run log configuration."""
    enabled: bool = True                       # Write JSONL run events
    level: str = "info"                        # Minimum level for the stdlib logger


@dataclass
class DiscountConfig:
    """
    Main configuration for the discount function tooling.

    This is the top-level config loaded from config.yaml.
    """
    # Paths
    repo_root: str = "."
    fixtures_dir: str = "tests/fixtures"
    data_dir: str = ".discount-function"

    # Nested configurations
    function: FunctionConfig = field(default_factory=FunctionConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    def __post_init__(self) -> None:
        """Convert paths to absolute paths based on repo_root."""
        self.repo_root = str(Path(self.repo_root).absolute())

    @property
    def fixtures_path(self) -> Path:
        """Absolute path to the fixtures directory."""
        return Path(self.repo_root) / self.fixtures_dir

    @property
    def data_path(self) -> Path:
        """Absolute path to the tooling data directory."""
        return Path(self.repo_root) / self.data_dir

    @property
    def logs_path(self) -> Path:
        """Absolute path to logs directory."""
        return self.data_path / "logs"


# Module-level cache for the loaded configuration
_config_cache: Optional[DiscountConfig] = None


def _resolve_env_vars(value: Any) -> Any:
    """
    Resolve environment variables in a value.

    Supports ${VAR} syntax for environment variable substitution.
    Returns the original value if it's not a string.
    """
    if isinstance(value, str):
        pattern = re.compile(r'\$\{([A-Za-z_][A-Za-z0-9_]*)\}')

        def replace(match: re.Match) -> str:
            var_name = match.group(1)
            env_value = os.environ.get(var_name)
            if env_value is None:
                raise ConfigError(f"Environment variable ${{{var_name}}} is not set")
            return env_value

        return pattern.sub(replace, value)

    if isinstance(value, dict):
        return {k: _resolve_env_vars(v) for k, v in value.items()}

    if isinstance(value, list):
        return [_resolve_env_vars(item) for item in value]

    return value


def _parse_function_config(data: dict[str, Any]) -> FunctionConfig:
    """Parse function configuration from dict."""
    return FunctionConfig(
        export=data.get("export", DEFAULT_EXPORT),
        target=data.get("target", DEFAULT_TARGET),
    )


def _parse_logging_config(data: dict[str, Any]) -> LoggingConfig:
    """Parse logging configuration from dict."""
    level = str(data.get("level", "info")).lower()
    if level not in ("debug", "info", "warn", "warning", "error"):
        raise ConfigError(f"logging.level must be one of debug, info, warn, error (got {level!r})")
    return LoggingConfig(
        enabled=data.get("enabled", True),
        level=level,
    )


def load_config(config_path: Optional[str] = None) -> DiscountConfig:
    """
    Load configuration from config.yaml.

    Args:
        config_path: Optional path to config file. If not provided,
                     looks for config.yaml in current directory.

    Returns:
        DiscountConfig: Loaded configuration.

    Raises:
        ConfigError: If config is invalid or cannot be loaded.
    """
    if config_path is None:
        config_path = "config.yaml"

    path = Path(config_path)
    if not path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(path, "r") as f:
            raw_data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in config file: {e}")

    if not raw_data:
        raise ConfigError("Configuration file is empty")
    if not isinstance(raw_data, dict):
        raise ConfigError("Configuration file must contain a mapping")

    data = _resolve_env_vars(raw_data)

    return DiscountConfig(
        repo_root=data.get("repo_root", str(path.absolute().parent)),
        fixtures_dir=data.get("fixtures_dir", "tests/fixtures"),
        data_dir=data.get("data_dir", ".discount-function"),
        function=_parse_function_config(data.get("function") or {}),
        logging=_parse_logging_config(data.get("logging") or {}),
    )


def get_config(config_path: Optional[str] = None, force_reload: bool = False) -> DiscountConfig:
    """
    Get the cached configuration, loading it if necessary.

    Args:
        config_path: Optional path to config file.
        force_reload: If True, reload configuration even if cached.

    Returns:
        DiscountConfig: The loaded configuration.

    Raises:
        ConfigError: If config is invalid or cannot be loaded.
    """
    global _config_cache

    if _config_cache is None or force_reload:
        _config_cache = load_config(config_path)

    return _config_cache


def clear_config_cache() -> None:
    """Clear the configuration cache. Useful for testing."""
    global _config_cache
    _config_cache = None
