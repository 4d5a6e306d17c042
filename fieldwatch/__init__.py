"""
Zone Alert & Service-Health Monitoring Core.

Answers two standing questions for every monitored zone: is anything
currently wrong with the readings, and is the reading feed itself healthy?

This package provides:
- Data models for readings, thresholds, findings, alerts and feed health
- Threshold evaluation and stateful alert lifecycle management
- Feed availability and freshness scoring
- Prioritized remediation recommendations and plain-text summaries
- YAML configuration and structured logging setup
"""

from fieldwatch.monitor import ZoneMonitor, create_monitor

__version__ = "0.1.0"

__all__ = [
    "ZoneMonitor",
    "create_monitor",
]
