"""
Tests for YAML configuration loading.

Covers:
- Loading the shipped config/ directory
- Optional features file and section defaults
- Environment overrides
- ConfigLoadError for missing, malformed and invalid files
"""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from fieldwatch.config import ConfigLoadError, ConfigLoader, LogFormat, LogLevel, load_config
from fieldwatch.models import ThresholdSet

REPO_CONFIG_DIR = Path(__file__).resolve().parents[3] / "config"

ALERTS_YAML = """
thresholds:
  erosion_critical: 0.8
  vegetation_low: 0.35
  moisture_low: 20
retention_hours: 12
"""

FEATURES_YAML = """
availability:
  expected_interval_minutes: 30
  window_hours: 12
freshness:
  fresh_before_minutes: 10
logging:
  format: text
  level: DEBUG
"""


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv("LOG_LEVEL", raising=False)
    monkeypatch.delenv("FIELDWATCH_EXPECTED_INTERVAL_MINUTES", raising=False)
    yield


def _write(directory: Path, alerts: str | None = ALERTS_YAML, features: str | None = None) -> Path:
    if alerts is not None:
        (directory / "alerts.yaml").write_text(alerts, encoding="utf-8")
    if features is not None:
        (directory / "features.yaml").write_text(features, encoding="utf-8")
    return directory


def test_loads_repository_config() -> None:
    config = load_config(REPO_CONFIG_DIR)

    assert config.alerts.thresholds.to_threshold_set() == ThresholdSet()
    assert config.alerts.retention_hours == 24
    assert config.features.availability.expected_interval_minutes == 60
    assert config.features.logging.format == LogFormat.JSON


def test_loads_custom_files(tmp_path: Path) -> None:
    config = ConfigLoader(_write(tmp_path, features=FEATURES_YAML)).load()

    assert config.alerts.thresholds.to_threshold_set() == ThresholdSet(
        erosion_critical=0.8, vegetation_low=0.35, moisture_low=20.0
    )
    assert config.alerts.retention_hours == 12
    assert config.features.availability.expected_interval_minutes == 30
    assert config.features.availability.window_hours == 12
    assert config.features.availability.degraded_below_pct == 80
    assert config.features.freshness.fresh_before_minutes == 10
    assert config.features.freshness.recent_before_minutes == 60
    assert config.features.logging.format == LogFormat.TEXT
    assert config.log_level == LogLevel.DEBUG


def test_features_file_is_optional(tmp_path: Path) -> None:
    config = load_config(_write(tmp_path))

    assert config.features.availability.expected_interval_minutes == 60
    assert config.features.freshness.stale_before_minutes == 1440
    assert config.log_level == LogLevel.INFO


def test_missing_threshold_section_uses_defaults(tmp_path: Path) -> None:
    config = load_config(_write(tmp_path, alerts="retention_hours: 6\n"))

    assert config.alerts.thresholds.to_threshold_set() == ThresholdSet()
    assert config.alerts.retention_hours == 6


def test_environment_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "warning")
    monkeypatch.setenv("FIELDWATCH_EXPECTED_INTERVAL_MINUTES", "15")

    config = load_config(_write(tmp_path, features=FEATURES_YAML))

    assert config.log_level == LogLevel.WARNING
    assert config.features.availability.expected_interval_minutes == 15


def test_invalid_log_level_env_falls_back(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", "chatty")

    assert load_config(_write(tmp_path)).log_level == LogLevel.INFO


def test_invalid_interval_env_raises(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FIELDWATCH_EXPECTED_INTERVAL_MINUTES", "hourly")

    with pytest.raises(ConfigLoadError):
        load_config(_write(tmp_path))


def test_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError) as exc_info:
        ConfigLoader(tmp_path / "nope")

    assert exc_info.value.file_path == tmp_path / "nope"


def test_file_path_is_not_a_directory(tmp_path: Path) -> None:
    target = tmp_path / "alerts.yaml"
    target.write_text(ALERTS_YAML, encoding="utf-8")

    with pytest.raises(ConfigLoadError):
        ConfigLoader(target)


def test_missing_alerts_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigLoadError) as exc_info:
        load_config(tmp_path)

    assert exc_info.value.file_path == tmp_path / "alerts.yaml"


@pytest.mark.parametrize(
    "alerts",
    [
        "",
        "thresholds: [unclosed\n",
        "- just\n- a list\n",
        "thresholds:\n  moisture_low: dry\n",
        "thresholds:\n  salinity_high: 3\n",
        "thresholds: [1, 2]\n",
        "retention_hours: -1\n",
    ],
)
def test_invalid_alerts_file_raises(tmp_path: Path, alerts: str) -> None:
    with pytest.raises(ConfigLoadError):
        load_config(_write(tmp_path, alerts=alerts))


@pytest.mark.parametrize(
    "features",
    [
        "availability:\n  expected_interval_minutes: 0\n",
        "availability:\n  offline_below_pct: 90\n  degraded_below_pct: 80\n",
        "freshness:\n  fresh_before_minutes: 120\n",
        "logging:\n  format: xml\n",
    ],
)
def test_invalid_features_file_raises(tmp_path: Path, features: str) -> None:
    with pytest.raises(ConfigLoadError):
        load_config(_write(tmp_path, features=features))
