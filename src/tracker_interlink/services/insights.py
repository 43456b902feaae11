"""
Insight service for turning correlations into readable statements.
"""

import logging

from tracker_interlink.domain.interlink import (
    CorrelationResult,
    Direction,
    Insight,
    InsightType,
    Strength,
)
from tracker_interlink.domain.tracker import FieldRef
from tracker_interlink.utils.hashing import generate_insight_id
from tracker_interlink.utils.parameters import AnalysisConfig

logger = logging.getLogger(__name__)


class InsightService:
    """Service for generating ranked natural-language insights."""

    def __init__(self, config: AnalysisConfig) -> None:
        """
        Initialize insight service.

        Args:
            config: Analysis configuration (strength bands).
        """
        self.config = config

    def classify_strength(self, coefficient: float) -> Strength:
        """
        Map a coefficient's magnitude onto a strength band.

        Args:
            coefficient: Correlation coefficient.

        Returns:
            Weak below the moderate threshold, strong above the strong
            threshold, moderate in between (both bounds inclusive).
        """
        magnitude = abs(coefficient)
        if magnitude > self.config.strong_threshold:
            return Strength.STRONG
        if magnitude >= self.config.moderate_threshold:
            return Strength.MODERATE
        return Strength.WEAK

    @staticmethod
    def _delay_phrase(lag_days: int) -> str:
        if lag_days == 1:
            return "the next day"
        return f"about {lag_days} days later"

    def _orient(self, corr: CorrelationResult) -> tuple[FieldRef, FieldRef, int]:
        """Return (leader, follower, delay) so the delay is never negative."""
        if corr.lag_days < 0:
            return corr.tracker2, corr.tracker1, -corr.lag_days
        return corr.tracker1, corr.tracker2, corr.lag_days

    def _insight_text(
        self, corr: CorrelationResult, strength: Strength
    ) -> tuple[str, str, str | None]:
        """
        Build the title, sentence and optional actionable hint.

        Args:
            corr: Correlation to describe.
            strength: Strength band of the correlation.

        Returns:
            Tuple of (title, text, actionable).
        """
        leader, follower, delay = self._orient(corr)
        positive = corr.direction == Direction.POSITIVE.value
        percent = f"{abs(corr.coefficient) * 100:.0f}%"
        kind = "correlation" if positive else "inverse correlation"
        strong = strength == Strength.STRONG

        text = (
            f"Higher {leader.describe()} tends to accompany "
            f"{'higher' if positive else 'lower'} {follower.describe()}"
        )
        if delay:
            text += f" {self._delay_phrase(delay)}"
        text += f" ({strength.value} {kind}: {percent})."

        if delay == 0:
            if positive:
                title = f"{leader.field_label} and {follower.field_label} rise together"
                actionable = (
                    "These metrics appear closely interlinked. "
                    "Managing one may help manage the other."
                )
            else:
                title = f"{leader.field_label} and {follower.field_label} move inversely"
                actionable = "These metrics may balance each other out."
        elif positive:
            title = f"{leader.field_label} affects {follower.field_label} {self._delay_phrase(delay)}"
            actionable = (
                f"Consider how today's {leader.field_label.lower()} "
                f"might show up in your {follower.field_label.lower()} later."
            )
        else:
            title = f"{leader.field_label} reduces {follower.field_label} {self._delay_phrase(delay)}"
            actionable = (
                f"This suggests {leader.field_label.lower()} may help reduce "
                f"{follower.field_label.lower()} over time."
            )

        return title, text, actionable if strong else None

    def generate_insight(self, corr: CorrelationResult) -> Insight:
        """
        Generate the insight for one correlation.

        Args:
            corr: Correlation to describe.

        Returns:
            Insight with strength band, text and deterministic ID.
        """
        strength = self.classify_strength(corr.coefficient)
        title, text, actionable = self._insight_text(corr, strength)

        return Insight(
            id=generate_insight_id([corr.tracker1.key, corr.tracker2.key, str(corr.lag_days)]),
            type=InsightType.LAG_EFFECT if corr.lag_days != 0 else InsightType.SAME_DAY,
            title=title,
            text=text,
            actionable=actionable,
            strength=strength,
            correlation=corr,
        )

    def generate_interlink_insights(self, correlations: list[CorrelationResult]) -> list[Insight]:
        """
        Generate insights for correlations, preserving their order.

        Args:
            correlations: Correlations, strongest first.

        Returns:
            One insight per correlation, in the same order.
        """
        insights = [self.generate_insight(corr) for corr in correlations]
        logger.debug(f"Generated {len(insights)} insights")
        return insights
