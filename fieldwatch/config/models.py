"""
Pydantic models for application configuration.

This module defines all configuration models that are validated when loading
YAML configuration files. The models ensure type safety and provide sensible
defaults for optional settings.

Configuration files:
    - config/alerts.yaml: Threshold defaults and alert retention
    - config/features.yaml: Availability, freshness and logging settings

Example:
    >>> from fieldwatch.config.models import AppConfig
    >>> config = AppConfig()
    >>> config.alerts.thresholds.to_threshold_set().erosion_critical
    0.75
"""

from enum import Enum

from pydantic import BaseModel, Field, model_validator

from fieldwatch.models.alerts import ThresholdSet


# =============================================================================
# ENUMS
# =============================================================================


class LogFormat(str, Enum):
    """Logging format options."""

    JSON = "json"
    TEXT = "text"


class LogLevel(str, Enum):
    """Logging level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


# =============================================================================
# ALERT CONFIGURATION
# =============================================================================


class ThresholdsConfig(BaseModel):
    """Default threshold set, as supplied by the settings store."""

    model_config = {"frozen": True, "extra": "forbid"}

    erosion_critical: float = Field(
        default=0.75,
        description="Erosion index above which a critical alert fires",
    )
    vegetation_low: float = Field(
        default=0.4,
        description="Vegetation index below which a warning fires",
    )
    moisture_low: float = Field(
        default=25.0,
        description="Moisture percent below which a warning fires",
    )

    def to_threshold_set(self) -> ThresholdSet:
        """Build the runtime ThresholdSet."""
        return ThresholdSet(
            erosion_critical=self.erosion_critical,
            vegetation_low=self.vegetation_low,
            moisture_low=self.moisture_low,
        )


class AlertSettings(BaseModel):
    """Alert configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    thresholds: ThresholdsConfig = Field(
        default_factory=ThresholdsConfig,
        description="Default threshold set",
    )
    retention_hours: float = Field(
        default=24,
        description="Hours an alert stays active after its last refresh",
        gt=0,
        le=24 * 30,
    )


# =============================================================================
# FEATURES CONFIGURATION
# =============================================================================


class AvailabilityConfig(BaseModel):
    """Feed availability scoring configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    expected_interval_minutes: float = Field(
        default=60,
        description="Expected minutes between readings",
        gt=0,
    )
    window_hours: int = Field(
        default=24,
        description="Trailing window counted for availability",
        ge=1,
        le=24 * 7,
    )
    offline_below_pct: float = Field(
        default=50,
        description="Availability below which the feed is offline",
        ge=0,
        le=100,
    )
    degraded_below_pct: float = Field(
        default=80,
        description="Availability below which the feed is degraded",
        ge=0,
        le=100,
    )

    @model_validator(mode="after")
    def validate_status_thresholds(self) -> "AvailabilityConfig":
        """Validate offline threshold does not exceed degraded threshold."""
        if self.offline_below_pct > self.degraded_below_pct:
            raise ValueError(
                f"offline_below_pct ({self.offline_below_pct}) must be <= "
                f"degraded_below_pct ({self.degraded_below_pct})"
            )
        return self


class FreshnessConfig(BaseModel):
    """Freshness bucket boundaries in minutes."""

    model_config = {"frozen": True, "extra": "forbid"}

    fresh_before_minutes: float = Field(default=5, gt=0)
    recent_before_minutes: float = Field(default=60, gt=0)
    stale_before_minutes: float = Field(default=1440, gt=0)

    @model_validator(mode="after")
    def validate_ordering(self) -> "FreshnessConfig":
        """Validate bucket boundaries are ascending."""
        if not (
            self.fresh_before_minutes <= self.recent_before_minutes <= self.stale_before_minutes
        ):
            raise ValueError("freshness boundaries must be ascending: fresh <= recent <= stale")
        return self


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    format: LogFormat = Field(
        default=LogFormat.JSON,
        description="Log output format",
    )
    level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Default log level",
    )


class FeaturesConfig(BaseModel):
    """Complete features configuration."""

    model_config = {"frozen": True, "extra": "forbid"}

    availability: AvailabilityConfig = Field(
        default_factory=AvailabilityConfig,
        description="Availability configuration",
    )
    freshness: FreshnessConfig = Field(
        default_factory=FreshnessConfig,
        description="Freshness configuration",
    )
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig,
        description="Logging configuration",
    )


# =============================================================================
# ROOT CONFIGURATION
# =============================================================================


class AppConfig(BaseModel):
    """
    Root application configuration.

    Aggregates all configuration sections into a single validated object.

    Example:
        >>> config = AppConfig()
        >>> config.features.availability.expected_interval_minutes
        60.0
    """

    model_config = {"frozen": True, "extra": "forbid"}

    alerts: AlertSettings = Field(
        default_factory=AlertSettings,
        description="Alert configuration",
    )
    features: FeaturesConfig = Field(
        default_factory=FeaturesConfig,
        description="Feature settings",
    )
    log_level: LogLevel = Field(
        default=LogLevel.INFO,
        description="Application log level",
    )
