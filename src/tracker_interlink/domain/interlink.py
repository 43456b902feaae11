"""
Interlink analysis result models.

This module defines correlations, insights, the data-sufficiency status and
timeline points produced by the analysis. All of them are derived fresh on
every analysis call.
"""

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from tracker_interlink.domain.tracker import FieldRef, TrackerFieldInfo


class Direction(str, Enum):
    """Direction of a correlation."""

    POSITIVE = "positive"
    NEGATIVE = "negative"


class Strength(str, Enum):
    """Strength band of a correlation."""

    WEAK = "weak"
    MODERATE = "moderate"
    STRONG = "strong"


class InsightType(str, Enum):
    """Kind of relationship an insight describes."""

    SAME_DAY = "same_day"
    LAG_EFFECT = "lag_effect"


class CorrelationResult(BaseModel):
    """
    A detected relationship between two tracker fields.

    A positive lag means tracker1 today relates to tracker2 lag_days later;
    a negative lag means tracker2 leads.
    """

    tracker1: FieldRef
    tracker2: FieldRef
    lag_days: int = Field(description="Offset applied to tracker2, in days")
    coefficient: float = Field(ge=-1.0, le=1.0, description="Pearson correlation coefficient")
    sample_size: int = Field(description="Number of aligned daily pairs")
    direction: Direction
    confidence: float = Field(ge=0.0, le=1.0, description="Confidence based on sample size")

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    @property
    def abs_coefficient(self) -> float:
        """Magnitude of the correlation."""
        return abs(self.coefficient)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class Insight(BaseModel):
    """Ranked, human-readable statement derived from one correlation."""

    id: str
    type: InsightType
    title: str
    text: str
    actionable: str | None = None
    strength: Strength
    correlation: CorrelationResult

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class DataStatus(BaseModel):
    """Whether enough history exists to run the analysis at all."""

    has_enough_data: bool
    days_collected: int
    trackers_with_data: int
    required_days: int
    tracker_data_counts: dict[str, int] = Field(
        default_factory=dict, description="Distinct local days with entries, per tracker"
    )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary representation."""
        return self.model_dump()


class DateRange(BaseModel):
    """Inclusive calendar-day range."""

    start: date
    end: date

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_order(self) -> "DateRange":
        if self.start > self.end:
            raise ValueError(f"start {self.start} is after end {self.end}")
        return self


class TimelineDataPoint(BaseModel):
    """One calendar day of aligned values, keyed by field key."""

    date: date
    values: dict[str, float | None] = Field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a flat dictionary with an ISO date."""
        return {"date": self.date.isoformat(), **self.values}


class InterlinkAnalysis(BaseModel):
    """Everything the integration boundary hands to its consumers."""

    correlations: list[CorrelationResult] = Field(default_factory=list)
    insights: list[Insight] = Field(default_factory=list)
    data_status: DataStatus
    available_fields: list[TrackerFieldInfo] = Field(default_factory=list)
    timeline_data: list[TimelineDataPoint] = Field(default_factory=list)
    has_enough_data: bool = False
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to dictionary representation.

        Returns:
            JSON-compatible dictionary of the whole analysis.
        """
        return {
            "has_enough_data": self.has_enough_data,
            "error": self.error,
            "data_status": self.data_status.to_dict(),
            "available_fields": [f.model_dump() for f in self.available_fields],
            "correlations": [c.to_dict() for c in self.correlations],
            "insights": [i.to_dict() for i in self.insights],
            "timeline": [p.to_dict() for p in self.timeline_data],
        }
