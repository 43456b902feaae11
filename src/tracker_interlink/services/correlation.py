"""
Correlation service for detecting interlinks between tracker fields.

For every candidate pair the daily series are aligned by calendar day over a
window of lag offsets, the Pearson coefficient is computed per lag, and the
strongest lag is kept if it clears the significance threshold.
"""

import logging
from collections.abc import Sequence

import pandas as pd

from tracker_interlink.domain.interlink import CorrelationResult, Direction
from tracker_interlink.domain.tracker import (
    Entry,
    FieldDefinition,
    Tracker,
    TrackerFieldInfo,
    TrackerPair,
)
from tracker_interlink.services.data_status import DataStatusService
from tracker_interlink.services.field_extraction import FieldExtractionService
from tracker_interlink.services.pairing import PairGenerationService
from tracker_interlink.utils.exceptions import AnalysisError
from tracker_interlink.utils.parameters import AnalysisConfig
from tracker_interlink.utils.timezone_utils import shift_date

logger = logging.getLogger(__name__)

# Relative spread below which daily means are considered constant
CONSTANT_TOLERANCE = 1e-10


def _is_constant(values: pd.Series) -> bool:
    """Treat a sample as constant when its spread is rounding noise around its mean."""
    scale = max(1.0, abs(float(values.mean())))
    return float(values.std(ddof=0)) < CONSTANT_TOLERANCE * scale


def series_correlation(a: pd.Series, b: pd.Series) -> float | None:
    """
    Pearson coefficient of two aligned series.

    Args:
        a: First sample.
        b: Second sample, aligned with a.

    Returns:
        Coefficient in [-1, 1], or None if it is undefined (fewer than two
        points or a constant sample).
    """
    if len(a) < 2 or len(a) != len(b):
        return None
    if _is_constant(a) or _is_constant(b):
        return None

    r = a.corr(b, method="pearson")
    if pd.isna(r):
        return None

    return max(-1.0, min(1.0, float(r)))


def pearson_correlation(x: Sequence[float], y: Sequence[float]) -> float | None:
    """
    Compute the Pearson product-moment correlation coefficient.

    Args:
        x: First sample.
        y: Second sample, same length as x.

    Returns:
        Coefficient in [-1, 1], or None if it is undefined (fewer than two
        points, unequal lengths, or a constant sample).
    """
    if len(x) != len(y):
        return None
    return series_correlation(pd.Series(x, dtype="float64"), pd.Series(y, dtype="float64"))


def calculate_confidence(sample_size: int) -> float:
    """
    Map a sample size to a confidence score.

    30 samples gives 0.5 (the floor), 75 gives 0.75, 90 or more gives 0.9.

    Args:
        sample_size: Number of aligned daily pairs.

    Returns:
        Confidence in [0.5, 0.9].
    """
    return max(0.5, min(sample_size / 100, 0.9))


class CorrelationService:
    """
    Service for detecting interlink patterns between tracker fields.

    Stateless apart from configuration: identical input always produces
    identical output.
    """

    def __init__(self, config: AnalysisConfig) -> None:
        """
        Initialize correlation service.

        Args:
            config: Analysis configuration.
        """
        self.config = config
        self.extractor = FieldExtractionService(config)
        self.status_service = DataStatusService(config)
        self.pair_generator = PairGenerationService()

    def _lag_order(self) -> list[int]:
        """Lags by increasing magnitude, positive before negative: 0, 1, -1, 2, -2, ..."""
        lags = [0]
        for magnitude in range(1, self.config.max_lag_days + 1):
            lags.extend([magnitude, -magnitude])
        return lags

    def align_series(self, series_a: pd.Series, series_b: pd.Series, lag: int) -> pd.DataFrame:
        """
        Pair A on each day with B lag days later.

        Args:
            series_a: Daily series of the first field.
            series_b: Daily series of the second field.
            lag: Offset in days applied to B.

        Returns:
            DataFrame with columns "a" and "b", one row per aligned day of A.
        """
        shifted_b = pd.Series(
            series_b.to_numpy(),
            index=[shift_date(day, -lag) for day in series_b.index],
            dtype="float64",
        )

        return pd.concat(
            [series_a.rename("a").astype("float64"), shifted_b.rename("b")],
            axis=1,
            join="inner",
        ).sort_index()

    def compute_lagged_correlation(
        self, series_a: pd.Series, series_b: pd.Series, lag: int
    ) -> tuple[float | None, int]:
        """
        Correlate A today with B lag days later.

        Args:
            series_a: Daily series of the first field.
            series_b: Daily series of the second field.
            lag: Offset in days applied to B.

        Returns:
            Tuple of (coefficient, sample_size). The coefficient is None when
            fewer than min_sample_size days align or either side is constant.
        """
        if series_a.empty or series_b.empty:
            return None, 0

        aligned = self.align_series(series_a, series_b, lag)
        sample_size = len(aligned)

        if sample_size < self.config.min_sample_size:
            return None, sample_size

        coefficient = series_correlation(aligned["a"], aligned["b"])
        return coefficient, sample_size

    def analyze_pair(
        self,
        entries: list[Entry],
        field_a: TrackerFieldInfo,
        field_b: TrackerFieldInfo,
    ) -> CorrelationResult | None:
        """
        Find the strongest lagged correlation between two fields.

        Ties go to the smaller absolute lag, then to the positive lag.

        Args:
            entries: All logged entries.
            field_a: First field.
            field_b: Second field.

        Returns:
            Correlation result, or None if no lag is valid or the best
            coefficient is below the significance threshold.
        """
        series_a = self.extractor.build_daily_series(entries, field_a)
        series_b = self.extractor.build_daily_series(entries, field_b)

        best: tuple[float, int, int] | None = None

        for lag in self._lag_order():
            coefficient, sample_size = self.compute_lagged_correlation(series_a, series_b, lag)
            if coefficient is None:
                continue
            if best is None or abs(coefficient) > abs(best[0]):
                best = (coefficient, lag, sample_size)

        if best is None:
            logger.debug(f"No valid lag for {field_a.key} vs {field_b.key}")
            return None

        coefficient, lag, sample_size = best

        if abs(coefficient) < self.config.significance_threshold:
            logger.debug(
                f"{field_a.key} vs {field_b.key}: best r={coefficient:.3f} "
                f"below threshold, skipping"
            )
            return None

        return CorrelationResult(
            tracker1=field_a.to_ref(),
            tracker2=field_b.to_ref(),
            lag_days=lag,
            coefficient=coefficient,
            sample_size=sample_size,
            direction=Direction.POSITIVE if coefficient > 0 else Direction.NEGATIVE,
            confidence=calculate_confidence(sample_size),
        )

    def detect_interlink_patterns(
        self,
        entries: list[Entry],
        trackers: list[Tracker],
        fields_map: dict[str, list[FieldDefinition]] | None = None,
        manual_pairs: list[TrackerPair] | None = None,
    ) -> list[CorrelationResult]:
        """
        Detect interlink patterns across trackers.

        Args:
            entries: All logged entries.
            trackers: Trackers under analysis.
            fields_map: Optional mapping of tracker ID to field definitions.
            manual_pairs: Optional caller-selected pairs; bypasses the data gate.

        Returns:
            Correlation results sorted by absolute coefficient, strongest first.

        Raises:
            AnalysisError: If the analysis fails unexpectedly.
        """
        try:
            fields = self.extractor.extract_all_fields(trackers, fields_map)

            if not manual_pairs:
                status = self.status_service.get_data_status(entries, trackers, fields_map)
                if not status.has_enough_data:
                    logger.info(
                        f"Not enough data for interlink analysis "
                        f"({status.days_collected}/{status.required_days} days, "
                        f"{status.trackers_with_data} trackers with data)"
                    )
                    return []

            pairs = self.pair_generator.generate_pairs(fields, manual_pairs)
            logger.info(f"Analyzing {len(pairs)} tracker field pairs")

            results: list[CorrelationResult] = []
            for pair in pairs:
                resolved = self.pair_generator.resolve_pair(pair, fields)
                if resolved is None:
                    continue

                result = self.analyze_pair(entries, *resolved)
                if result is not None:
                    results.append(result)

            results.sort(key=lambda r: abs(r.coefficient), reverse=True)

            logger.info(f"Found {len(results)} interlinks")
            return results

        except Exception as e:
            raise AnalysisError(f"Failed to detect interlink patterns: {e}") from e
