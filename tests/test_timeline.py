"""Unit tests for timeline service."""

from datetime import date, datetime, timedelta

import pytest
import pytz
from pydantic import ValidationError

from tracker_interlink.domain.interlink import DateRange
from tracker_interlink.domain.tracker import Entry, Tracker
from tracker_interlink.services.timeline import TimelineService
from tracker_interlink.utils.parameters import AnalysisConfig

START = datetime(2024, 5, 1, 12, 0, 0, tzinfo=pytz.UTC)


def _ts(day: int) -> int:
    return int((START + timedelta(days=day)).timestamp() * 1000)


def _setup() -> tuple[TimelineService, list, list[Entry]]:
    service = TimelineService(AnalysisConfig(timezone="UTC"))
    pain = service.extractor.extract_numeric_fields(Tracker(id="pain", name="Pain"))[0]
    sleep = service.extractor.extract_numeric_fields(Tracker(id="sleep", name="Sleep"))[0]
    entries = [
        Entry(tracker_id="pain", timestamp=_ts(0), intensity=2),
        Entry(tracker_id="pain", timestamp=_ts(2), intensity=10),
        Entry(tracker_id="sleep", timestamp=_ts(1), intensity=5),
        Entry(tracker_id="sleep", timestamp=_ts(3), intensity=1),
    ]
    return service, [pain, sleep], entries


def test_timeline_covers_union_of_dates() -> None:
    """Test one point per day with gaps left empty."""
    service, fields, entries = _setup()

    points = service.generate_timeline_data(entries, fields)

    if [p.date for p in points] != [date(2024, 5, d) for d in range(1, 5)]:
        raise AssertionError(f"Unexpected dates {[p.date for p in points]}")

    first = points[0].values
    if first != {"pain:intensity": 2.0, "sleep:intensity": None}:
        raise AssertionError(f"Unexpected first point {first}")

    last = points[-1].values
    if last != {"pain:intensity": None, "sleep:intensity": 1.0}:
        raise AssertionError(f"Unexpected last point {last}")


def test_timeline_with_date_range_and_normalization() -> None:
    """Test an explicit range and percentage normalization."""
    service, fields, entries = _setup()
    date_range = DateRange(start=date(2024, 4, 30), end=date(2024, 5, 2))

    points = service.generate_timeline_data(entries, fields, date_range, normalize=True)

    if len(points) != 3:
        raise AssertionError(f"Expected 3 points, got {len(points)}")
    if points[0].values["pain:intensity"] is not None:
        raise AssertionError("Expected no value before the first entry")
    if points[1].values["pain:intensity"] != 11.11:
        raise AssertionError(f"Expected 11.11%, got {points[1].values['pain:intensity']}")
    if points[2].values["sleep:intensity"] != 44.44:
        raise AssertionError(f"Expected 44.44%, got {points[2].values['sleep:intensity']}")

    flat = points[1].to_dict()
    if flat["date"] != "2024-05-01":
        raise AssertionError(f"Expected ISO date, got {flat['date']}")


def test_timeline_empty_without_data() -> None:
    """Test no dates and no range gives an empty timeline."""
    service, fields, _ = _setup()

    if service.generate_timeline_data([], fields) != []:
        raise AssertionError("Expected an empty timeline")


def test_date_range_rejects_reversed_bounds() -> None:
    """Test a range whose start is after its end is invalid."""
    with pytest.raises(ValidationError):
        DateRange(start=date(2024, 5, 2), end=date(2024, 5, 1))
