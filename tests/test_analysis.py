"""Unit tests for interlink analysis service."""

from datetime import datetime, timedelta

import pytest
import pytz

from tracker_interlink.domain.tracker import (
    Entry,
    FieldDefinition,
    GeneratedConfig,
    Tracker,
    TrackerPair,
)
from tracker_interlink.services.analysis import (
    UNAVAILABLE_MESSAGE,
    InterlinkAnalysisService,
    build_fields_map,
    get_suggested_pairs,
)
from tracker_interlink.utils.exceptions import AnalysisError
from tracker_interlink.utils.parameters import AnalysisConfig

START = datetime(2024, 2, 1, 20, 0, 0, tzinfo=pytz.UTC)

PAIN_VALUES = [5, 2, 8, 3, 9, 1, 7, 4, 6, 10, 2, 8, 5, 3, 9, 6, 1, 7, 4, 8]


def _ts(day: int) -> int:
    return int((START + timedelta(days=day)).timestamp() * 1000)


def _trackers() -> list[Tracker]:
    return [
        Tracker(id="pain", name="Pain"),
        Tracker(
            id="sleep",
            name="Sleep",
            generated_config=GeneratedConfig(
                fields=[FieldDefinition(id="hours", type="duration", label="Hours")]
            ),
        ),
    ]


def _entries(days: int = 20) -> list[Entry]:
    pain = [
        Entry(tracker_id="pain", timestamp=_ts(i), intensity=v)
        for i, v in enumerate(PAIN_VALUES[:days])
    ]
    # More pain, less sleep
    sleep = [
        Entry(tracker_id="sleep", timestamp=_ts(i), field_values={"hours": (12 - v) * 3600})
        for i, v in enumerate(PAIN_VALUES[:days])
    ]
    return pain + sleep


def test_full_analysis() -> None:
    """Test correlations, insights and timeline for a clear inverse relationship."""
    service = InterlinkAnalysisService(AnalysisConfig(timezone="UTC"))

    analysis = service.analyze(_entries(), _trackers())

    if not analysis.has_enough_data or analysis.error is not None:
        raise AssertionError(f"Expected a successful analysis, got {analysis.error}")
    if len(analysis.correlations) != 1:
        raise AssertionError(f"Expected 1 correlation, got {len(analysis.correlations)}")

    corr = analysis.correlations[0]
    if corr.direction != "negative" or corr.lag_days != 0:
        raise AssertionError(f"Unexpected correlation {corr}")
    if corr.tracker1.key != "pain:intensity" or corr.tracker2.key != "sleep:hours":
        raise AssertionError(f"Unexpected orientation {corr.tracker1.key} / {corr.tracker2.key}")

    if len(analysis.insights) != 1 or analysis.insights[0].correlation != corr:
        raise AssertionError("Expected one insight for the correlation")

    if len(analysis.timeline_data) != 20:
        raise AssertionError(f"Expected 20 timeline days, got {len(analysis.timeline_data)}")
    if set(analysis.timeline_data[0].values) != {"pain:intensity", "sleep:hours"}:
        raise AssertionError(f"Unexpected timeline keys {analysis.timeline_data[0].values}")

    if [f.key for f in analysis.available_fields] != [
        "pain:intensity",
        "sleep:intensity",
        "sleep:hours",
    ]:
        raise AssertionError(f"Unexpected fields {[f.key for f in analysis.available_fields]}")

    report = analysis.to_dict()
    if report["correlations"][0]["direction"] != "negative":
        raise AssertionError("Expected serializable report")


def test_not_enough_data_returns_empty() -> None:
    """Test the data gate yields no correlations and no error."""
    service = InterlinkAnalysisService(AnalysisConfig(timezone="UTC"))

    analysis = service.analyze(_entries(days=10), _trackers())

    if analysis.has_enough_data:
        raise AssertionError("Expected not enough data")
    if analysis.correlations or analysis.insights or analysis.timeline_data:
        raise AssertionError("Expected empty results")
    if analysis.error is not None:
        raise AssertionError("Insufficient data is not an error")


def test_single_tracker_and_disabled_auto_detect() -> None:
    """Test no analysis with one tracker or with auto-detection disabled."""
    service = InterlinkAnalysisService(AnalysisConfig(timezone="UTC"))

    single = service.analyze(_entries(), _trackers()[:1])
    if single.correlations:
        raise AssertionError("Expected no correlations for a single tracker")

    disabled = service.analyze(_entries(), _trackers(), auto_detect=False)
    if disabled.correlations:
        raise AssertionError("Expected no correlations with auto-detection disabled")


def test_manual_pairs_drive_timeline() -> None:
    """Test manual pairs are analyzed and charted even with short history."""
    service = InterlinkAnalysisService(AnalysisConfig(timezone="UTC"))
    manual = [
        TrackerPair(tracker1_id="sleep", field1_id="hours", tracker2_id="pain", field2_id="intensity"),
        TrackerPair(tracker1_id="pain", field1_id="intensity", tracker2_id="sleep", field2_id="hours"),
    ]

    analysis = service.analyze(_entries(days=10), _trackers(), manual_pairs=manual)

    if len(analysis.correlations) != 2:
        raise AssertionError(f"Expected 2 correlations, got {len(analysis.correlations)}")
    if {c.tracker1.key for c in analysis.correlations} != {"sleep:hours", "pain:intensity"}:
        raise AssertionError("Expected manual pair orientations to be kept")
    if list(analysis.timeline_data[0].values) != ["sleep:hours", "pain:intensity"]:
        raise AssertionError(f"Unexpected timeline keys {list(analysis.timeline_data[0].values)}")


def test_analysis_failure_becomes_unavailable(monkeypatch: pytest.MonkeyPatch) -> None:
    """Test a detector failure is converted into an empty result."""
    service = InterlinkAnalysisService(AnalysisConfig(timezone="UTC"))

    def broken(*args, **kwargs):
        raise AnalysisError("extractor bug")

    monkeypatch.setattr(service.correlation_service, "detect_interlink_patterns", broken)

    analysis = service.analyze(_entries(), _trackers())

    if analysis.error != UNAVAILABLE_MESSAGE:
        raise AssertionError(f"Expected unavailable message, got {analysis.error}")
    if analysis.correlations or analysis.insights:
        raise AssertionError("Expected empty results after failure")
    if not analysis.has_enough_data:
        raise AssertionError("Expected data status to be reported")


def test_suggested_pairs_and_fields_map() -> None:
    """Test suggestions follow the strongest correlations."""
    service = InterlinkAnalysisService(AnalysisConfig(timezone="UTC"))
    analysis = service.analyze(_entries(), _trackers())

    suggestions = get_suggested_pairs(analysis.correlations, limit=3)

    if suggestions != [
        TrackerPair(tracker1_id="pain", field1_id="intensity", tracker2_id="sleep", field2_id="hours")
    ]:
        raise AssertionError(f"Unexpected suggestions {suggestions}")

    fields_map = build_fields_map(_trackers())
    if fields_map["pain"] != [] or [f.id for f in fields_map["sleep"]] != ["hours"]:
        raise AssertionError(f"Unexpected fields map {fields_map}")
