"""
Configuration management for zone monitoring.

Configuration is loaded from YAML files in the config/ directory and
validated with Pydantic models:
    - alerts.yaml: Threshold defaults and alert retention
    - features.yaml: Availability, freshness and logging settings

Environment variables override:
    - LOG_LEVEL: Application log level
    - FIELDWATCH_EXPECTED_INTERVAL_MINUTES: Expected reading cadence

Example:
    >>> from fieldwatch.config import load_config
    >>> config = load_config()
    >>> thresholds = config.alerts.thresholds.to_threshold_set()

Modules:
    loader: Configuration file loading utilities
    models: Pydantic models for configuration validation
"""

from fieldwatch.config.loader import ConfigLoader, load_config
from fieldwatch.config.models import (
    # Enums
    LogFormat,
    LogLevel,
    # Alert config
    AlertSettings,
    ThresholdsConfig,
    # Features config
    AvailabilityConfig,
    FeaturesConfig,
    FreshnessConfig,
    LoggingConfig,
    # Root config
    AppConfig,
)
from fieldwatch.exceptions import ConfigLoadError

__all__: list[str] = [
    # Loader
    "load_config",
    "ConfigLoader",
    "ConfigLoadError",
    # Enums
    "LogFormat",
    "LogLevel",
    # Alert config
    "ThresholdsConfig",
    "AlertSettings",
    # Features config
    "AvailabilityConfig",
    "FreshnessConfig",
    "LoggingConfig",
    "FeaturesConfig",
    # Root config
    "AppConfig",
]
