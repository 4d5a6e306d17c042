"""
Loads the monitoring core settings from a directory of YAML files.

Every file is parsed with yaml.safe_load and validated through the pydantic
models in fieldwatch.config.models. Any failure surfaces as ConfigLoadError.

Files:
    - config/alerts.yaml: Threshold defaults and alert retention
    - config/features.yaml: Availability, freshness and logging settings

Environment overrides:
    - LOG_LEVEL: Application log level
    - FIELDWATCH_EXPECTED_INTERVAL_MINUTES: Expected reading cadence

Example:
    >>> from fieldwatch.config.loader import load_config
    >>> config = load_config("config")
    >>> print(config.alerts.thresholds.erosion_critical)
    0.75
"""

import os
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import ValidationError

from fieldwatch.config.models import (
    AlertSettings,
    AppConfig,
    AvailabilityConfig,
    FeaturesConfig,
    FreshnessConfig,
    LoggingConfig,
    LogLevel,
    ThresholdsConfig,
)
from fieldwatch.exceptions import ConfigLoadError

LOG_LEVEL_ENV = "LOG_LEVEL"
EXPECTED_INTERVAL_ENV = "FIELDWATCH_EXPECTED_INTERVAL_MINUTES"


class ConfigLoader:
    """
    Reads alerts.yaml (required) and features.yaml (optional) into an AppConfig.

    Expects the following directory structure:
        config/
        ├── alerts.yaml    - Threshold defaults and alert retention
        └── features.yaml  - Availability, freshness and logging settings

    Example:
        >>> loader = ConfigLoader("config")
        >>> config = loader.load()
        >>> config.features.availability.expected_interval_minutes
        60.0
    """

    def __init__(self, config_dir: Path | str = "config"):
        """
        Bind the loader to a config directory.

        Args:
            config_dir: Path to configuration directory (default: 'config').

        Raises:
            ConfigLoadError: If config directory does not exist.
        """
        self.config_dir = Path(config_dir)
        if not self.config_dir.exists():
            raise ConfigLoadError(
                f"Config directory {self.config_dir} does not exist",
                file_path=self.config_dir,
            )
        if not self.config_dir.is_dir():
            raise ConfigLoadError(
                f"Config path {self.config_dir} is not a directory",
                file_path=self.config_dir,
            )

    def _load_yaml(self, filename: str) -> Dict[str, Any]:
        """
        Parse one YAML file of the config directory into a dict.

        Args:
            filename: Name of YAML file (e.g., 'alerts.yaml').

        Returns:
            Dict: Top-level mapping of the file.

        Raises:
            ConfigLoadError: If the file is missing, empty, unparsable or not a mapping.
        """
        file_path = self.config_dir / filename
        if not file_path.exists():
            raise ConfigLoadError(
                f"Missing config file {file_path}",
                file_path=file_path,
            )

        try:
            with open(file_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigLoadError(
                f"Could not parse {file_path}: {e}",
                file_path=file_path,
                cause=e,
            ) from e
        except OSError as e:
            raise ConfigLoadError(
                f"Could not read {file_path}: {e}",
                file_path=file_path,
                cause=e,
            ) from e

        if data is None:
            raise ConfigLoadError(
                f"Config file {file_path} is empty",
                file_path=file_path,
            )
        if not isinstance(data, dict):
            raise ConfigLoadError(
                f"Config file {file_path} must hold a mapping at the top level",
                file_path=file_path,
            )
        return data

    def _load_alerts(self) -> AlertSettings:
        """
        Load alert configuration from alerts.yaml.

        Returns:
            AlertSettings object.

        Raises:
            ConfigLoadError: If validation fails.
        """
        data = self._load_yaml("alerts.yaml")

        try:
            threshold_data = data.get("thresholds") or {}
            thresholds = ThresholdsConfig(**threshold_data)

            return AlertSettings(
                thresholds=thresholds,
                retention_hours=data.get("retention_hours", 24),
            )

        except ValidationError as e:
            raise ConfigLoadError(
                f"alerts.yaml failed validation: {e}",
                file_path=self.config_dir / "alerts.yaml",
                cause=e,
            ) from e
        except TypeError as e:
            raise ConfigLoadError(
                f"Malformed thresholds section in alerts configuration: {e}",
                file_path=self.config_dir / "alerts.yaml",
                cause=e,
            ) from e

    def _load_features(self) -> FeaturesConfig:
        """
        Load feature settings from features.yaml.

        The file is optional; defaults apply when it is absent.

        Returns:
            FeaturesConfig object.

        Raises:
            ConfigLoadError: If validation fails.
        """
        if not (self.config_dir / "features.yaml").exists():
            data: Dict[str, Any] = {}
        else:
            data = self._load_yaml("features.yaml")

        try:
            availability_data = dict(data.get("availability") or {})
            interval_override = os.getenv(EXPECTED_INTERVAL_ENV)
            if interval_override:
                availability_data["expected_interval_minutes"] = float(interval_override)

            freshness_data = data.get("freshness") or {}
            logging_data = data.get("logging") or {}

            return FeaturesConfig(
                availability=AvailabilityConfig(**availability_data),
                freshness=FreshnessConfig(**freshness_data),
                logging=LoggingConfig(
                    format=logging_data.get("format", "json"),
                    level=logging_data.get("level", "INFO"),
                ),
            )

        except ValidationError as e:
            raise ConfigLoadError(
                f"features.yaml failed validation: {e}",
                file_path=self.config_dir / "features.yaml",
                cause=e,
            ) from e
        except ValueError as e:
            raise ConfigLoadError(
                f"Invalid {EXPECTED_INTERVAL_ENV} value: {e}",
                cause=e,
            ) from e

    def _get_log_level(self, default: LogLevel = LogLevel.INFO) -> LogLevel:
        """
        Resolve the effective log level.

        Environment variables:
            - LOG_LEVEL: Log level (default: the features.yaml level)

        Returns:
            LogLevel enum value.
        """
        level_str = os.getenv(LOG_LEVEL_ENV)
        if not level_str:
            return default
        try:
            return LogLevel(level_str.strip().upper())
        except ValueError:
            return default

    def load(self) -> AppConfig:
        """
        Build the validated AppConfig from every config file.

        Returns:
            AppConfig: Validated application configuration.

        Raises:
            ConfigLoadError: If any configuration is invalid or missing.
        """
        try:
            alerts = self._load_alerts()
            features = self._load_features()
            log_level = self._get_log_level(features.logging.level)

            return AppConfig(
                alerts=alerts,
                features=features,
                log_level=log_level,
            )

        except ConfigLoadError:
            raise
        except ValidationError as e:
            raise ConfigLoadError(
                f"Config failed validation: {e}",
                cause=e,
            ) from e


def load_config(config_dir: Path | str = "config") -> AppConfig:
    """
    Load the AppConfig stored in config_dir.

    Args:
        config_dir: Path to configuration directory (default: 'config').

    Returns:
        AppConfig: Validated application configuration.

    Raises:
        ConfigLoadError: If configuration loading fails.
    """
    loader = ConfigLoader(config_dir)
    return loader.load()
