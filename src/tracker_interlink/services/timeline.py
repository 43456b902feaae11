"""
Timeline service.

Shapes date-aligned series of selected fields for overlay charts.
"""

import logging

import pandas as pd

from tracker_interlink.domain.interlink import DateRange, TimelineDataPoint
from tracker_interlink.domain.tracker import Entry, TrackerFieldInfo
from tracker_interlink.services.field_extraction import FieldExtractionService
from tracker_interlink.utils.parameters import AnalysisConfig

logger = logging.getLogger(__name__)


class TimelineService:
    """
    Service for building date-indexed timelines.

    Days without a value for a field are reported as None; nothing is
    interpolated.
    """

    def __init__(self, config: AnalysisConfig) -> None:
        """
        Initialize timeline service.

        Args:
            config: Analysis configuration.
        """
        self.config = config
        self.extractor = FieldExtractionService(config)

    @staticmethod
    def _normalize(value: float, field: TrackerFieldInfo) -> float:
        """Scale a value to a 0-100 percentage of the field's range."""
        if field.max_value == field.min_value:
            return 50.0
        ratio = (value - field.min_value) / (field.max_value - field.min_value)
        return round(max(0.0, min(1.0, ratio)) * 100, 2)

    def generate_timeline_data(
        self,
        entries: list[Entry],
        fields: list[TrackerFieldInfo],
        date_range: DateRange | None = None,
        normalize: bool = False,
    ) -> list[TimelineDataPoint]:
        """
        Generate one data point per calendar day for the given fields.

        Args:
            entries: All logged entries.
            fields: Fields to include, keyed by field key in each point.
            date_range: Optional inclusive range; defaults to the union of
                the fields' date ranges.
            normalize: Report values as percentages of each field's range.

        Returns:
            Data points in date order, empty if there are no dates to cover.
        """
        series_by_key = {
            field.key: self.extractor.build_daily_series(entries, field) for field in fields
        }

        if date_range is not None:
            start, end = date_range.start, date_range.end
        else:
            all_dates = [day for series in series_by_key.values() for day in series.index]
            if not all_dates:
                return []
            start, end = min(all_dates), max(all_dates)

        frame = pd.DataFrame(
            {key: series.to_dict() for key, series in series_by_key.items()},
            index=[ts.date() for ts in pd.date_range(start, end, freq="D")],
            dtype="float64",
        )

        points: list[TimelineDataPoint] = []
        for day, row in frame.iterrows():
            values: dict[str, float | None] = {}
            for field in fields:
                value = row[field.key]
                if pd.isna(value):
                    values[field.key] = None
                elif normalize:
                    values[field.key] = self._normalize(float(value), field)
                else:
                    values[field.key] = float(value)
            points.append(TimelineDataPoint(date=day, values=values))

        logger.debug(f"Built timeline of {len(points)} days for {len(fields)} fields")
        return points
