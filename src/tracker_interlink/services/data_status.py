"""
Data status service.

Decides whether enough history exists to run interlink analysis at all.
"""

import logging
from collections import defaultdict
from datetime import date

from tracker_interlink.domain.interlink import DataStatus
from tracker_interlink.domain.tracker import Entry, FieldDefinition, Tracker
from tracker_interlink.services.field_extraction import FieldExtractionService
from tracker_interlink.utils.parameters import AnalysisConfig
from tracker_interlink.utils.timezone_utils import date_span_days, local_date

logger = logging.getLogger(__name__)


class DataStatusService:
    """
    Service for evaluating data sufficiency.

    Correlation over less than the configured number of days, or across a
    single tracker, produces spurious results; this gate keeps such data
    from being analyzed.
    """

    def __init__(self, config: AnalysisConfig) -> None:
        """
        Initialize data status service.

        Args:
            config: Analysis configuration.
        """
        self.config = config
        self.extractor = FieldExtractionService(config)

    def _tracker_has_samples(
        self,
        tracker: Tracker,
        entries: list[Entry],
        fields: list[FieldDefinition] | None,
    ) -> bool:
        for field in self.extractor.extract_numeric_fields(tracker, fields):
            for entry in entries:
                if self.extractor.project_value(entry, field) is not None:
                    return True
        return False

    def get_data_status(
        self,
        entries: list[Entry],
        trackers: list[Tracker],
        fields_map: dict[str, list[FieldDefinition]] | None = None,
    ) -> DataStatus:
        """
        Compute the data status for a set of entries and trackers.

        Args:
            entries: All logged entries.
            trackers: Trackers under analysis.
            fields_map: Optional mapping of tracker ID to field definitions.

        Returns:
            Data status with the span of collected days and trackers with data.
        """
        tracker_ids = {t.id for t in trackers}

        entries_by_tracker: dict[str, list[Entry]] = defaultdict(list)
        days_by_tracker: dict[str, set[date]] = defaultdict(set)

        for entry in entries:
            if entry.tracker_id not in tracker_ids:
                continue
            entries_by_tracker[entry.tracker_id].append(entry)
            days_by_tracker[entry.tracker_id].add(
                local_date(entry.timestamp, self.config.timezone)
            )

        all_days = set().union(*days_by_tracker.values()) if days_by_tracker else set()
        days_collected = date_span_days(min(all_days), max(all_days)) if all_days else 0

        trackers_with_data = 0
        for tracker in trackers:
            fields = fields_map.get(tracker.id, []) if fields_map is not None else None
            if self._tracker_has_samples(tracker, entries_by_tracker[tracker.id], fields):
                trackers_with_data += 1

        has_enough_data = (
            days_collected >= self.config.min_days_threshold
            and trackers_with_data >= self.config.min_trackers_with_data
        )

        logger.debug(
            f"Data status: {days_collected} days, {trackers_with_data} trackers with data, "
            f"enough={has_enough_data}"
        )

        return DataStatus(
            has_enough_data=has_enough_data,
            days_collected=days_collected,
            trackers_with_data=trackers_with_data,
            required_days=self.config.min_days_threshold,
            tracker_data_counts={t.id: len(days_by_tracker[t.id]) for t in trackers},
        )
