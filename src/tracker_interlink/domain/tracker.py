"""
Tracker domain models.

This module defines trackers, their field definitions and logged entries,
plus the flattened field descriptors used as the unit of correlation.
"""

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FieldType(str, Enum):
    """Enumeration of tracker field types."""

    NUMBER_SCALE = "number_scale"
    DURATION = "duration"
    TOGGLE = "toggle"
    SINGLE_SELECT = "single_select"
    MULTI_SELECT = "multi_select"
    TEXT = "text"
    TIME = "time"
    EMOJI = "emoji"
    # Built-in per-entry intensity, not declared in a tracker's config
    INTENSITY = "intensity"


NUMERIC_FIELD_TYPES = frozenset(
    {FieldType.NUMBER_SCALE, FieldType.DURATION, FieldType.TOGGLE, FieldType.INTENSITY}
)

INTENSITY_FIELD_ID = "intensity"


class FieldDefinition(BaseModel):
    """
    A single field declared in a tracker's generated configuration.

    The type is kept as a plain string so an unknown type only excludes
    that field instead of rejecting the whole tracker.
    """

    id: str
    type: str
    label: str
    required: bool = False
    order: int = 0
    config: dict[str, Any] | None = None

    model_config = ConfigDict(frozen=True)


class GeneratedConfig(BaseModel):
    """Generated tracker configuration holding the field definitions."""

    fields: list[FieldDefinition] = Field(default_factory=list)

    model_config = ConfigDict(frozen=True, extra="ignore")


class Tracker(BaseModel):
    """A user-defined category of health metric (e.g., "Chronic Pain", "Sleep")."""

    id: str
    name: str
    generated_config: GeneratedConfig | None = None

    model_config = ConfigDict(frozen=True, extra="ignore")

    @property
    def fields(self) -> list[FieldDefinition]:
        """Configured fields, or an empty list when the tracker has no config."""
        if self.generated_config is None:
            return []
        return list(self.generated_config.fields)


class Entry(BaseModel):
    """
    One timestamped logging event for a tracker.

    Timestamps are milliseconds since the Unix epoch; the local calendar day
    is resolved by the analysis timezone.
    """

    id: str | None = None
    tracker_id: str
    timestamp: int = Field(description="Milliseconds since the Unix epoch")
    intensity: float | None = Field(None, description="Built-in intensity value")
    field_values: dict[str, Any] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True, extra="ignore")


class TrackerFieldInfo(BaseModel):
    """Flattened, addressable descriptor of one numeric field of one tracker."""

    tracker_id: str
    tracker_name: str
    field_id: str
    field_label: str
    field_type: FieldType
    min_value: float
    max_value: float

    model_config = ConfigDict(frozen=True, use_enum_values=True)

    @property
    def key(self) -> str:
        """Stable key identifying the field across trackers."""
        return f"{self.tracker_id}:{self.field_id}"

    def to_ref(self) -> "FieldRef":
        """Project to the reference embedded in correlation results."""
        return FieldRef(
            tracker_id=self.tracker_id,
            tracker_name=self.tracker_name,
            field_id=self.field_id,
            field_label=self.field_label,
        )


class FieldRef(BaseModel):
    """Reference to a tracker field inside a correlation result."""

    tracker_id: str
    tracker_name: str
    field_id: str
    field_label: str

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> str:
        """Stable key identifying the field across trackers."""
        return f"{self.tracker_id}:{self.field_id}"

    def describe(self) -> str:
        """Human-readable name, e.g. "Sleep duration"."""
        return f"{self.tracker_name} {self.field_label.lower()}"


class TrackerPair(BaseModel):
    """Identification of two tracker fields to correlate."""

    tracker1_id: str
    field1_id: str
    tracker2_id: str
    field2_id: str

    model_config = ConfigDict(frozen=True)

    @classmethod
    def parse(cls, value: str) -> "TrackerPair":
        """
        Parse a pair from "tracker1:field1,tracker2:field2".

        Args:
            value: Pair specification.

        Returns:
            Parsed tracker pair.

        Raises:
            ValueError: If the specification is malformed.
        """
        try:
            first, second = value.split(",")
            tracker1_id, field1_id = first.strip().split(":")
            tracker2_id, field2_id = second.strip().split(":")
        except ValueError as e:
            raise ValueError(
                f"Invalid pair '{value}', expected 'tracker1:field1,tracker2:field2'"
            ) from e

        return cls(
            tracker1_id=tracker1_id,
            field1_id=field1_id,
            tracker2_id=tracker2_id,
            field2_id=field2_id,
        )
