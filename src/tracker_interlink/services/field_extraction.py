"""
Field extraction service.

Walks tracker definitions and entries, yielding the numeric fields that can
take part in correlation and their daily time series.
"""

import logging
import math
from collections.abc import Iterable
from typing import Any

import pandas as pd

from tracker_interlink.domain.tracker import (
    INTENSITY_FIELD_ID,
    Entry,
    FieldDefinition,
    FieldType,
    Tracker,
    TrackerFieldInfo,
)
from tracker_interlink.utils.parameters import AnalysisConfig
from tracker_interlink.utils.timezone_utils import local_date

logger = logging.getLogger(__name__)

INTENSITY_RANGE = (1.0, 10.0)
DURATION_RANGE = (0.0, 86400.0)
TOGGLE_RANGE = (0.0, 1.0)


class FieldExtractionService:
    """
    Service for extracting numeric fields and daily series.

    Only number scales, durations (seconds), toggles (0/1) and the built-in
    intensity have a numeric projection; every other field type is excluded.
    """

    def __init__(self, config: AnalysisConfig) -> None:
        """
        Initialize field extraction service.

        Args:
            config: Analysis configuration.
        """
        self.config = config

    def _scale_range(self, field: FieldDefinition) -> tuple[float, float] | None:
        """
        Read the [min, max] range of a number scale from its config.

        Args:
            field: Number scale field definition.

        Returns:
            Tuple of (min, max) or None if the config is missing or invalid.
        """
        config = field.config or {}
        low = config.get("min")
        high = config.get("max")

        if not _is_number(low) or not _is_number(high):
            return None
        if low > high:
            return None

        return float(low), float(high)

    def _field_info(
        self, tracker: Tracker, field: FieldDefinition
    ) -> TrackerFieldInfo | None:
        """
        Build the numeric descriptor for one declared field.

        Args:
            tracker: Owning tracker.
            field: Field definition.

        Returns:
            Field descriptor, or None if the field has no numeric projection.
        """
        if field.type == FieldType.NUMBER_SCALE.value:
            value_range = self._scale_range(field)
            if value_range is None:
                logger.warning(
                    f"Tracker {tracker.id}: number scale field '{field.id}' "
                    f"has no valid min/max config, skipping"
                )
                return None
        elif field.type == FieldType.DURATION.value:
            value_range = DURATION_RANGE
        elif field.type == FieldType.TOGGLE.value:
            value_range = TOGGLE_RANGE
        else:
            return None

        return TrackerFieldInfo(
            tracker_id=tracker.id,
            tracker_name=tracker.name,
            field_id=field.id,
            field_label=field.label,
            field_type=FieldType(field.type),
            min_value=value_range[0],
            max_value=value_range[1],
        )

    def extract_numeric_fields(
        self, tracker: Tracker, fields: list[FieldDefinition] | None = None
    ) -> list[TrackerFieldInfo]:
        """
        Extract the numeric fields of a tracker.

        Args:
            tracker: Tracker to inspect.
            fields: Optional field definitions overriding the tracker's own config.

        Returns:
            Numeric field descriptors, built-in intensity first.
        """
        definitions = tracker.fields if fields is None else fields

        result: list[TrackerFieldInfo] = []
        seen: set[str] = set()

        if self.config.include_intensity_field:
            result.append(
                TrackerFieldInfo(
                    tracker_id=tracker.id,
                    tracker_name=tracker.name,
                    field_id=INTENSITY_FIELD_ID,
                    field_label="Intensity",
                    field_type=FieldType.INTENSITY,
                    min_value=INTENSITY_RANGE[0],
                    max_value=INTENSITY_RANGE[1],
                )
            )
            seen.add(INTENSITY_FIELD_ID)

        for field in definitions:
            if field.id in seen:
                logger.debug(f"Tracker {tracker.id}: duplicate field id '{field.id}' ignored")
                continue
            seen.add(field.id)

            info = self._field_info(tracker, field)
            if info is not None:
                result.append(info)

        return result

    def extract_all_fields(
        self,
        trackers: Iterable[Tracker],
        fields_map: dict[str, list[FieldDefinition]] | None = None,
    ) -> list[TrackerFieldInfo]:
        """
        Extract the numeric fields of every tracker, in tracker order.

        Args:
            trackers: Trackers to inspect.
            fields_map: Optional mapping of tracker ID to field definitions.

        Returns:
            All numeric field descriptors.
        """
        all_fields: list[TrackerFieldInfo] = []

        for tracker in trackers:
            fields = fields_map.get(tracker.id, []) if fields_map is not None else None
            all_fields.extend(self.extract_numeric_fields(tracker, fields))

        return all_fields

    def project_value(self, entry: Entry, field: TrackerFieldInfo) -> float | None:
        """
        Project one entry's value for a field onto a number.

        Args:
            entry: Logged entry.
            field: Field descriptor.

        Returns:
            Numeric value, or None if the entry has no usable value.
        """
        if field.field_type == FieldType.INTENSITY.value:
            raw: Any = entry.intensity
        else:
            raw = entry.field_values.get(field.field_id)

        if raw is None:
            return None

        if field.field_type == FieldType.TOGGLE.value:
            if isinstance(raw, bool):
                return 1.0 if raw else 0.0
            if _is_number(raw) and raw in (0, 1):
                return float(raw)
            return None

        if not _is_number(raw):
            return None

        value = float(raw)
        if not math.isfinite(value):
            return None

        return value

    def build_daily_series(self, entries: Iterable[Entry], field: TrackerFieldInfo) -> pd.Series:
        """
        Build the sparse daily series of a field.

        Multiple entries on the same local day are averaged. Days without a
        value are absent; nothing is zero- or forward-filled.

        Args:
            entries: Entries of any tracker; only the field's tracker is used.
            field: Field descriptor.

        Returns:
            Series of daily means indexed by local date, sorted by date.
        """
        rows: list[tuple[Any, float]] = []

        for entry in entries:
            if entry.tracker_id != field.tracker_id:
                continue

            value = self.project_value(entry, field)
            if value is None:
                continue

            rows.append((local_date(entry.timestamp, self.config.timezone), value))

        if not rows:
            return pd.Series(dtype="float64", name=field.key)

        df = pd.DataFrame(rows, columns=["date", "value"])
        series = df.groupby("date")["value"].mean().sort_index()
        series.name = field.key

        return series


def _is_number(value: Any) -> bool:
    """Check for a real number, excluding bools."""
    return isinstance(value, (int, float)) and not isinstance(value, bool)
