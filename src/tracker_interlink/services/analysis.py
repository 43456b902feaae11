"""
Interlink analysis service.

Integration boundary between the pure analysis services and their callers.
Correlation discovery is a best-effort feature: failures here surface as an
empty result with an error message, never as an exception.
"""

import logging

from tracker_interlink.domain.interlink import (
    CorrelationResult,
    DateRange,
    InterlinkAnalysis,
    TimelineDataPoint,
)
from tracker_interlink.domain.tracker import (
    Entry,
    FieldDefinition,
    Tracker,
    TrackerFieldInfo,
    TrackerPair,
)
from tracker_interlink.services.correlation import CorrelationService
from tracker_interlink.services.data_status import DataStatusService
from tracker_interlink.services.field_extraction import FieldExtractionService
from tracker_interlink.services.insights import InsightService
from tracker_interlink.services.pairing import PairGenerationService
from tracker_interlink.services.timeline import TimelineService
from tracker_interlink.utils.exceptions import AnalysisError
from tracker_interlink.utils.parameters import AnalysisConfig

logger = logging.getLogger(__name__)

UNAVAILABLE_MESSAGE = "Interlink insights unavailable"


def build_fields_map(trackers: list[Tracker]) -> dict[str, list[FieldDefinition]]:
    """
    Map each tracker ID to its configured fields.

    Args:
        trackers: Trackers to inspect.

    Returns:
        Dictionary of tracker ID to field definitions (empty when unconfigured).
    """
    return {tracker.id: tracker.fields for tracker in trackers}


def get_suggested_pairs(correlations: list[CorrelationResult], limit: int = 3) -> list[TrackerPair]:
    """
    Suggest pairs to pin from the strongest correlations.

    Args:
        correlations: Correlations, strongest first.
        limit: Maximum number of pairs.

    Returns:
        Pairs for the top correlations.
    """
    return [
        TrackerPair(
            tracker1_id=corr.tracker1.tracker_id,
            field1_id=corr.tracker1.field_id,
            tracker2_id=corr.tracker2.tracker_id,
            field2_id=corr.tracker2.field_id,
        )
        for corr in correlations[:limit]
    ]


class InterlinkAnalysisService:
    """
    Service running the full interlink analysis for one set of inputs.

    Everything is recomputed on every call; callers that want caching should
    memoize on their inputs.
    """

    def __init__(self, config: AnalysisConfig) -> None:
        """
        Initialize interlink analysis service.

        Args:
            config: Analysis configuration.
        """
        self.config = config
        self.extractor = FieldExtractionService(config)
        self.status_service = DataStatusService(config)
        self.pair_generator = PairGenerationService()
        self.correlation_service = CorrelationService(config)
        self.insight_service = InsightService(config)
        self.timeline_service = TimelineService(config)

    def _timeline_fields(
        self,
        available_fields: list[TrackerFieldInfo],
        correlations: list[CorrelationResult],
        manual_pairs: list[TrackerPair],
    ) -> list[TrackerFieldInfo]:
        """
        Pick the fields to chart.

        Manual pairs win over detected correlations; without them the top
        correlation's two fields are shown.
        """
        selected: list[TrackerFieldInfo] = []

        if manual_pairs:
            for pair in manual_pairs[: self.config.timeline_max_pairs]:
                resolved = self.pair_generator.resolve_pair(pair, available_fields)
                if resolved is None:
                    continue
                for field in resolved:
                    if field not in selected:
                        selected.append(field)
        elif correlations:
            by_key = {f.key: f for f in available_fields}
            top = correlations[0]
            for ref in (top.tracker1, top.tracker2):
                field = by_key.get(ref.key)
                if field is not None:
                    selected.append(field)

        return selected

    def analyze(
        self,
        entries: list[Entry],
        trackers: list[Tracker],
        auto_detect: bool = True,
        manual_pairs: list[TrackerPair] | None = None,
        date_range: DateRange | None = None,
    ) -> InterlinkAnalysis:
        """
        Run the interlink analysis.

        Args:
            entries: All logged entries.
            trackers: Trackers under analysis.
            auto_detect: Analyze all cross-tracker pairs when no manual pairs are given.
            manual_pairs: Optional caller-selected pairs.
            date_range: Optional range for the timeline.

        Returns:
            Analysis with correlations, insights, data status and timeline.
        """
        manual_pairs = manual_pairs or []
        fields_map = build_fields_map(trackers)

        data_status = self.status_service.get_data_status(entries, trackers, fields_map)
        available_fields = self.extractor.extract_all_fields(trackers, fields_map)

        correlations: list[CorrelationResult] = []
        error: str | None = None

        if len(trackers) < 2:
            logger.info("Interlink analysis needs at least two trackers")
        elif not data_status.has_enough_data and not manual_pairs:
            logger.info(
                f"Collect more data: {data_status.days_collected}/"
                f"{data_status.required_days} days"
            )
        elif not auto_detect and not manual_pairs:
            logger.debug("Auto-detection disabled and no manual pairs selected")
        else:
            try:
                correlations = self.correlation_service.detect_interlink_patterns(
                    entries, trackers, fields_map, manual_pairs or None
                )
            except AnalysisError:
                logger.exception(
                    f"Interlink analysis failed for {len(trackers)} trackers "
                    f"with {len(entries)} entries"
                )
                error = UNAVAILABLE_MESSAGE

        insights = self.insight_service.generate_interlink_insights(correlations)

        timeline_data: list[TimelineDataPoint] = []
        timeline_fields = self._timeline_fields(available_fields, correlations, manual_pairs)
        if timeline_fields:
            timeline_data = self.timeline_service.generate_timeline_data(
                entries, timeline_fields, date_range
            )

        return InterlinkAnalysis(
            correlations=correlations,
            insights=insights,
            data_status=data_status,
            available_fields=available_fields,
            timeline_data=timeline_data,
            has_enough_data=data_status.has_enough_data,
            error=error,
        )
