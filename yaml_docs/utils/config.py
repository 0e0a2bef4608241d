"""Configuration loader for yaml-docs.

Loads settings from a YAML file (``.yaml-docs.yaml`` in the working
directory by default) and provides typed access to all configuration
sections via dataclasses. Command-line options override these values.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".yaml-docs.yaml"
DEFAULT_TEMPLATE_FILE = "README.md.j2"
DEFAULT_OUTPUT_FILE = "README.md"
DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


@dataclass
class ChartsConfig:
    """Which charts to document and with which templates."""

    values_files: list[str] = field(default_factory=list)
    template_files: list[str] = field(
        default_factory=lambda: [DEFAULT_TEMPLATE_FILE]
    )


@dataclass
class OutputConfig:
    """Configuration for documentation output."""

    output_file: str = DEFAULT_OUTPUT_FILE
    dry_run: bool = False
    jobs: int = 4


@dataclass
class LoggingConfig:
    """Configuration for logging."""

    level: str = "INFO"
    format: str = DEFAULT_LOG_FORMAT
    file: Optional[str] = None


@dataclass
class AppConfig:
    """Top-level application configuration."""

    charts: ChartsConfig = field(default_factory=ChartsConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def _as_list(value: object, default: list[str]) -> list[str]:
    """Accept either a single string or a list of strings."""
    if value is None:
        return list(default)
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def load_config(config_path: Optional[str] = None) -> AppConfig:
    """Load application configuration from a YAML file.

    Reads the YAML config file and constructs a fully typed AppConfig
    object. Falls back to defaults for any missing values.

    Args:
        config_path: Path to the YAML config file. If None, uses
            ``.yaml-docs.yaml`` in the current directory.

    Returns:
        A fully populated AppConfig instance.

    Raises:
        yaml.YAMLError: If the config file contains invalid YAML.
    """
    path = Path(config_path) if config_path else Path(DEFAULT_CONFIG_FILE)

    if not path.exists():
        logger.debug("Config file not found at %s, using defaults", path)
        return AppConfig()

    with open(path, encoding="utf-8") as f:
        raw = yaml.safe_load(f) or {}

    logger.debug("Loaded configuration from %s", path)

    charts_data = raw.get("charts") or {}
    charts_config = ChartsConfig(
        values_files=_as_list(charts_data.get("values_files"), []),
        template_files=_as_list(
            charts_data.get("template_files"), [DEFAULT_TEMPLATE_FILE]
        ),
    )

    output_data = raw.get("output") or {}
    output_config = OutputConfig(
        output_file=output_data.get("output_file", DEFAULT_OUTPUT_FILE),
        dry_run=output_data.get("dry_run", False),
        jobs=output_data.get("jobs", 4),
    )

    logging_data = raw.get("logging") or {}
    logging_config = LoggingConfig(
        level=logging_data.get("level", "INFO"),
        format=logging_data.get("format", DEFAULT_LOG_FORMAT),
        file=logging_data.get("file"),
    )

    return AppConfig(
        charts=charts_config,
        output=output_config,
        logging=logging_config,
    )
