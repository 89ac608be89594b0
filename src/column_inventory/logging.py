"""Logging setup for the column inventory.

Configuration is read from YAML files in the package's config/ directory and
applied with logging.config.dictConfig(). Library modules only call
logging.getLogger(__name__); handlers are set up here, once, by the CLI.

File selection:
    logging-{env}.yaml, where env comes from the ``environment`` argument or
    the COLUMN_INVENTORY_ENV variable, then logging.yaml.
"""

from __future__ import annotations

import logging
import logging.config
import os
import sys
from pathlib import Path
from typing import Any, cast

import yaml

CONFIG_DIR = Path(__file__).parent / "config"
DEFAULT_CONFIG_FILE = "logging.yaml"
ENVIRONMENT_ENV_VAR = "COLUMN_INVENTORY_ENV"

BASIC_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
BASIC_DATEFMT = "%Y-%m-%d %H:%M:%S"

logger = logging.getLogger(__name__)


class LoggingError(Exception):
    """Logging configuration could not be found, read or applied."""


def _candidate_files(config_name: str | None, environment: str | None) -> list[str]:
    if config_name:
        return [f"{config_name}.yaml", DEFAULT_CONFIG_FILE]
    env = (environment or os.getenv(ENVIRONMENT_ENV_VAR, "")).strip().lower()
    if env:
        return [f"logging-{env}.yaml", DEFAULT_CONFIG_FILE]
    return [DEFAULT_CONFIG_FILE]


def get_config_path(
    config_name: str | None = None, environment: str | None = None
) -> Path:
    """Pick the logging configuration file to use.

    A named or environment-specific file that does not exist falls back to
    logging.yaml.

    Raises:
        LoggingError: If not even logging.yaml exists

    """
    candidates = _candidate_files(config_name, environment)
    for name in candidates:
        path = CONFIG_DIR / name
        if path.exists():
            return path
    raise LoggingError(
        f"No logging configuration found in {CONFIG_DIR} "
        f"(tried: {', '.join(candidates)})"
    )


def load_config(config_path: Path) -> dict[str, Any]:
    """Read a dictConfig mapping from a YAML file.

    Raises:
        LoggingError: If the file cannot be read, parsed, or is not a mapping

    """
    try:
        text = Path(config_path).read_text(encoding="utf-8")
    except OSError as e:
        raise LoggingError(f"Failed to read config file {config_path}: {e}") from e

    try:
        config = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise LoggingError(f"Failed to parse YAML config {config_path}: {e}") from e

    if not isinstance(config, dict):
        raise LoggingError(f"Invalid configuration format in {config_path}")
    return cast(dict[str, Any], config)


def _numeric_level(level: str) -> int:
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise LoggingError(f"Invalid log level: {level}")
    return value


def _override_levels(config: dict[str, Any], level: str) -> dict[str, Any]:
    """Set every logger to level; lower handler thresholds that would hide it."""
    target = _numeric_level(level)
    name = logging.getLevelName(target)

    sections = [*config.get("loggers", {}).values()]
    if "root" in config:
        sections.append(config["root"])
    for section in sections:
        section["level"] = name

    for handler in config.get("handlers", {}).values():
        if not isinstance(handler, dict) or "level" not in handler:
            continue
        current = logging.getLevelName(str(handler["level"]).upper())
        if not isinstance(current, int) or target < current:
            handler["level"] = name
    return config


def _basic_logging(level: str) -> None:
    numeric = logging.getLevelName(level.upper())
    logging.basicConfig(
        level=numeric if isinstance(numeric, int) else logging.INFO,
        format=BASIC_FORMAT,
        datefmt=BASIC_DATEFMT,
        stream=sys.stderr,
        force=True,
    )


def setup_logging(
    config_path: Path | str | None = None,
    level: str | None = None,
    environment: str | None = None,
    force_basic: bool = False,
) -> None:
    """Configure logging for a command run.

    Any failure to configure from file falls back to basic stderr logging at
    ``level`` (INFO when unset or invalid) and logs a warning about it.

    Args:
        config_path: Explicit configuration file, overriding file selection
        level: Level applied to every configured logger
        environment: Environment name used for file selection
        force_basic: Skip the configuration file entirely

    """
    if force_basic:
        _basic_logging(level or "INFO")
        return

    try:
        path = Path(config_path) if config_path else get_config_path(
            environment=environment
        )
        config = load_config(path)
        if level:
            config = _override_levels(config, level)
        logging.config.dictConfig(config)
    except (LoggingError, ImportError, KeyError, ValueError, TypeError) as e:
        _basic_logging(level or "INFO")
        logger.warning(
            "Using basic console logging at %s level: %s", level or "INFO", e
        )
        return

    logger.debug("Logging configured from %s", path)
