"""
Tests for the alert store.

Covers:
- Refresh-in-place deduplication per (zone, kind)
- No auto-resolve when a breach stops
- Retention expiry and dismissal
- Ordering across zones
- Threshold updates
- Input validation and concurrent ingest
- Stale findings and naive timestamps
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import datetime, timedelta

import pytest

from fieldwatch.detection.store import AlertStore, create_alert_store
from fieldwatch.exceptions import InputValidationError
from fieldwatch.models import AlertKind, AlertSeverity, Finding, Reading, ThresholdSet

FindingFactory = Callable[..., Finding]


@pytest.fixture
def store() -> AlertStore:
    return create_alert_store()


@pytest.fixture
def finding_factory(now: datetime) -> FindingFactory:
    def _make(
        kind: AlertKind = AlertKind.EROSION_CRITICAL,
        value: float = 0.9,
        zone: str = "north-ridge",
        minutes_ago: float = 0.0,
    ) -> Finding:
        severity = (
            AlertSeverity.CRITICAL if kind == AlertKind.EROSION_CRITICAL else AlertSeverity.WARNING
        )
        return Finding(
            kind=kind,
            zone=zone,
            value=value,
            observed_at=now - timedelta(minutes=minutes_ago),
            severity=severity,
        )

    return _make


def test_ingest_creates_alert(store: AlertStore, finding_factory: FindingFactory, now: datetime) -> None:
    created = store.ingest("north-ridge", [finding_factory()])

    assert len(created) == 1
    alert = created[0]
    assert alert.zone == "north-ridge"
    assert alert.kind == AlertKind.EROSION_CRITICAL
    assert alert.severity == AlertSeverity.CRITICAL
    assert alert.value == 0.9
    assert alert.created_at == now
    assert alert.alert_id
    assert store.active_alerts(now) == [alert]


def test_repeat_finding_refreshes_in_place(
    store: AlertStore, finding_factory: FindingFactory, now: datetime
) -> None:
    first = store.ingest("north-ridge", [finding_factory(value=0.8, minutes_ago=60)])[0]
    second = store.ingest("north-ridge", [finding_factory(value=0.95)])[0]

    active = store.active_alerts(now)
    assert len(active) == 1
    assert second.alert_id == first.alert_id
    assert active[0].value == 0.95
    assert active[0].created_at == now
    assert active[0].refresh_count == 1


def test_kinds_are_tracked_separately(
    store: AlertStore, finding_factory: FindingFactory, now: datetime
) -> None:
    store.ingest(
        "north-ridge",
        [
            finding_factory(kind=AlertKind.EROSION_CRITICAL),
            finding_factory(kind=AlertKind.MOISTURE_LOW, value=10.0),
        ],
    )

    kinds = {alert.kind for alert in store.active_alerts(now)}
    assert kinds == {AlertKind.EROSION_CRITICAL, AlertKind.MOISTURE_LOW}


def test_absent_findings_do_not_clear_alerts(
    store: AlertStore, finding_factory: FindingFactory, now: datetime
) -> None:
    store.ingest("north-ridge", [finding_factory(minutes_ago=30)])

    assert store.ingest("north-ridge", []) == []
    assert len(store.active_alerts(now)) == 1


def test_alert_expires_after_retention(
    store: AlertStore, finding_factory: FindingFactory, now: datetime
) -> None:
    store.ingest("north-ridge", [finding_factory(minutes_ago=24 * 60)])
    store.ingest(
        "north-ridge",
        [finding_factory(kind=AlertKind.MOISTURE_LOW, value=10.0, minutes_ago=24 * 60 - 1)],
    )

    active = store.active_alerts(now)

    assert [alert.kind for alert in active] == [AlertKind.MOISTURE_LOW]
    assert len(store) == 1


def test_expired_alert_is_replaced_by_new_identity(
    store: AlertStore, finding_factory: FindingFactory
) -> None:
    old = store.ingest("north-ridge", [finding_factory(minutes_ago=25 * 60)])[0]
    new = store.ingest("north-ridge", [finding_factory()])[0]

    assert new.alert_id != old.alert_id
    assert new.refresh_count == 0


def test_custom_retention(finding_factory: FindingFactory, now: datetime) -> None:
    store = AlertStore(retention_hours=1)
    store.ingest("north-ridge", [finding_factory(minutes_ago=61)])

    assert store.active_alerts(now) == []


def test_invalid_retention_raises() -> None:
    with pytest.raises(ValueError):
        AlertStore(retention_hours=0)


def test_active_alerts_are_ordered_newest_first(
    store: AlertStore, finding_factory: FindingFactory, now: datetime
) -> None:
    store.ingest("north-ridge", [finding_factory(minutes_ago=120)])
    store.ingest("south-slope", [finding_factory(zone="south-slope", minutes_ago=10)])
    store.ingest(
        "north-ridge",
        [finding_factory(kind=AlertKind.VEGETATION_LOW, value=0.2, minutes_ago=60)],
    )

    active = store.active_alerts(now)

    assert [(a.zone, a.kind) for a in active] == [
        ("south-slope", AlertKind.EROSION_CRITICAL),
        ("north-ridge", AlertKind.VEGETATION_LOW),
        ("north-ridge", AlertKind.EROSION_CRITICAL),
    ]
    assert [a.zone for a in store.alerts_for_zone("south-slope", now)] == ["south-slope"]


def test_dismiss_removes_alert(
    store: AlertStore, finding_factory: FindingFactory, now: datetime
) -> None:
    alert = store.ingest("north-ridge", [finding_factory()])[0]

    assert store.get_alert(alert.alert_id) == alert
    assert store.dismiss(alert.alert_id) is True
    assert store.active_alerts(now) == []
    assert store.get_alert(alert.alert_id) is None


def test_dismiss_is_idempotent(
    store: AlertStore, finding_factory: FindingFactory, now: datetime
) -> None:
    alert = store.ingest("north-ridge", [finding_factory()])[0]

    assert store.dismiss(alert.alert_id) is True
    assert store.dismiss(alert.alert_id) is False
    assert store.dismiss("does-not-exist") is False
    assert store.active_alerts(now) == []


def test_finding_after_dismissal_creates_new_alert(
    store: AlertStore, finding_factory: FindingFactory
) -> None:
    first = store.ingest("north-ridge", [finding_factory(minutes_ago=5)])[0]
    store.dismiss(first.alert_id)

    second = store.ingest("north-ridge", [finding_factory()])[0]

    assert second.alert_id != first.alert_id


def test_ingest_accepts_mappings(store: AlertStore, now: datetime) -> None:
    created = store.ingest(
        "north-ridge",
        [
            {
                "kind": "moisture_low",
                "zone": "north-ridge",
                "value": 12.0,
                "observed_at": now,
                "severity": "warning",
            }
        ],
    )

    assert created[0].kind == AlertKind.MOISTURE_LOW


def test_malformed_finding_raises_and_leaves_state(
    store: AlertStore, finding_factory: FindingFactory, now: datetime
) -> None:
    with pytest.raises(InputValidationError) as exc_info:
        store.ingest(
            "north-ridge",
            [
                finding_factory(),
                {"kind": "landslide", "zone": "north-ridge", "value": 1.0,
                 "observed_at": now, "severity": "critical"},
            ],
        )

    assert exc_info.value.field == "kind"
    assert store.active_alerts(now) == []


@pytest.mark.parametrize("missing", ["kind", "zone"])
def test_finding_missing_key_raises(store: AlertStore, now: datetime, missing: str) -> None:
    finding = {"kind": "moisture_low", "zone": "north-ridge", "value": 12.0,
               "observed_at": now, "severity": "warning"}
    del finding[missing]

    with pytest.raises(InputValidationError) as exc_info:
        store.ingest("north-ridge", [finding])

    assert exc_info.value.field == missing
    assert store.active_alerts(now) == []


def test_finding_for_other_zone_raises(store: AlertStore, finding_factory: FindingFactory) -> None:
    with pytest.raises(InputValidationError):
        store.ingest("north-ridge", [finding_factory(zone="south-slope")])


@pytest.mark.parametrize("zone", ["", None, 7])
def test_invalid_zone_raises(store: AlertStore, zone: object) -> None:
    with pytest.raises(InputValidationError):
        store.ingest(zone, [])  # type: ignore[arg-type]


def test_update_thresholds_merges_partial(store: AlertStore) -> None:
    updated = store.update_thresholds({"moisture_low": 30})

    assert updated == ThresholdSet(erosion_critical=0.75, vegetation_low=0.4, moisture_low=30.0)
    assert store.thresholds == updated


def test_update_thresholds_accepts_negative_values(store: AlertStore) -> None:
    assert store.update_thresholds({"erosion_critical": -1.0}).erosion_critical == -1.0


@pytest.mark.parametrize(
    "partial",
    [
        {"salinity_high": 3.0},
        {"moisture_low": "thirty"},
        {"moisture_low": "30"},
        {"vegetation_low": None},
    ],
)
def test_update_thresholds_rejects_bad_input(store: AlertStore, partial: dict) -> None:
    with pytest.raises(InputValidationError):
        store.update_thresholds(partial)

    assert store.thresholds == ThresholdSet()


def test_update_thresholds_rejects_non_mapping(store: AlertStore) -> None:
    with pytest.raises(InputValidationError):
        store.update_thresholds([("moisture_low", 30)])  # type: ignore[arg-type]


def test_evaluate_and_ingest_uses_current_thresholds(
    store: AlertStore, reading_factory: Callable[..., Reading], now: datetime
) -> None:
    batch = [reading_factory(moisture=28.0)]

    assert store.evaluate_and_ingest("north-ridge", batch) == []

    store.update_thresholds({"moisture_low": 30})
    created = store.evaluate_and_ingest("north-ridge", batch)

    assert [a.kind for a in created] == [AlertKind.MOISTURE_LOW]
    assert created[0].threshold == 30.0
    assert created[0].message == "Moisture level below 30%"


def test_evaluate_and_ingest_ignores_other_zones(
    store: AlertStore, reading_factory: Callable[..., Reading], now: datetime
) -> None:
    batch = [
        reading_factory(zone="south-slope", erosion=0.95),
        reading_factory(minutes_ago=30),
    ]

    assert store.evaluate_and_ingest("north-ridge", batch) == []
    assert store.active_alerts(now) == []


def test_stores_are_isolated(finding_factory: FindingFactory, now: datetime) -> None:
    first = create_alert_store()
    second = create_alert_store()

    first.ingest("north-ridge", [finding_factory()])
    second.update_thresholds({"moisture_low": 40})

    assert second.active_alerts(now) == []
    assert first.thresholds == ThresholdSet()


def test_concurrent_ingest_keeps_one_alert_per_key(
    store: AlertStore, finding_factory: FindingFactory, now: datetime
) -> None:
    workers = 8
    rounds = 50
    barrier = threading.Barrier(workers)

    def worker(offset: int) -> None:
        barrier.wait()
        for i in range(rounds):
            store.ingest("north-ridge", [finding_factory(value=0.8 + offset / 100, minutes_ago=i)])

    threads = [threading.Thread(target=worker, args=(n,)) for n in range(workers)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    active = store.active_alerts(now)
    assert len(active) == 1
    assert active[0].refresh_count == workers * rounds - 1


def test_ingest_skips_findings_older_than_retention(
    store: AlertStore, finding_factory: FindingFactory, now: datetime
) -> None:
    created = store.ingest(
        "north-ridge",
        [
            finding_factory(minutes_ago=25 * 60),
            finding_factory(kind=AlertKind.MOISTURE_LOW, value=10.0, minutes_ago=23 * 60),
        ],
        now=now,
    )

    assert [a.kind for a in created] == [AlertKind.MOISTURE_LOW]
    assert store.active_alerts(now) == created


def test_ingest_skips_finding_exactly_one_retention_old(
    store: AlertStore, finding_factory: FindingFactory, now: datetime
) -> None:
    assert store.ingest("north-ridge", [finding_factory(minutes_ago=24 * 60)], now=now) == []
    assert len(store) == 0


def test_naive_findings_and_reference_time(store: AlertStore, now: datetime) -> None:
    naive_now = now.replace(tzinfo=None)
    store.ingest(
        "north-ridge",
        [
            {"kind": "moisture_low", "zone": "north-ridge", "value": 12.0,
             "observed_at": "2025-03-01T11:30:00", "severity": "warning"},
        ],
        now=naive_now,
    )
    store.ingest(
        "north-ridge",
        [
            {"kind": "erosion_critical", "zone": "north-ridge", "value": 0.9,
             "observed_at": now - timedelta(minutes=10), "severity": "critical"},
        ],
    )

    active = store.active_alerts(naive_now)

    assert [a.kind for a in active] == [AlertKind.EROSION_CRITICAL, AlertKind.MOISTURE_LOW]
    assert active[1].created_at == now - timedelta(minutes=30)
    assert store.alerts_for_zone("north-ridge", naive_now) == active


def test_threshold_updates_never_mix_with_evaluation(
    store: AlertStore, reading_factory: Callable[..., Reading]
) -> None:
    low = {"moisture_low": 30.0, "vegetation_low": 0.4}
    high = {"moisture_low": 60.0, "vegetation_low": 0.8}
    batch = [reading_factory(moisture=20.0, vegetation=0.5)]
    rounds = 200
    stop = threading.Event()
    results: list[list] = []
    store.update_thresholds(low)

    def updater() -> None:
        i = 0
        while not stop.is_set():
            store.update_thresholds(high if i % 2 else low)
            i += 1

    def evaluator() -> None:
        for _ in range(rounds):
            results.append(store.evaluate_and_ingest("north-ridge", batch))

    threads = [threading.Thread(target=updater)] + [
        threading.Thread(target=evaluator) for _ in range(4)
    ]
    for thread in threads:
        thread.start()
    for thread in threads[1:]:
        thread.join()
    stop.set()
    threads[0].join()

    assert len(results) == 4 * rounds
    for alerts in results:
        by_kind = {a.kind: a.threshold for a in alerts}
        if by_kind[AlertKind.MOISTURE_LOW] == 60.0:
            assert by_kind == {AlertKind.MOISTURE_LOW: 60.0, AlertKind.VEGETATION_LOW: 0.8}
        else:
            assert by_kind == {AlertKind.MOISTURE_LOW: low["moisture_low"]}
