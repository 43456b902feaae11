"""Unit tests for JSON export loader."""

import json
from pathlib import Path

import pytest

from tracker_interlink.infrastructure.loaders.json_loader import JSONExportLoader
from tracker_interlink.utils.exceptions import ParsingError


def test_load_trackers_wrapped_object(tmp_path: Path) -> None:
    """Test trackers wrapped under a "trackers" key, with unknown keys ignored."""
    path = tmp_path / "trackers.json"
    path.write_text(
        json.dumps(
            {
                "trackers": [
                    {
                        "id": "sleep",
                        "name": "Sleep",
                        "icon": "moon",
                        "generated_config": {
                            "fields": [
                                {"id": "hours", "type": "duration", "label": "Hours"},
                                {"id": "vibe", "type": "future_type", "label": "Vibe"},
                            ]
                        },
                    },
                    {"id": "pain", "name": "Pain", "generated_config": None},
                ]
            }
        ),
        encoding="utf-8",
    )

    trackers = JSONExportLoader().load_trackers(path)

    if [t.id for t in trackers] != ["sleep", "pain"]:
        raise AssertionError(f"Unexpected trackers {[t.id for t in trackers]}")
    if len(trackers[0].fields) != 2:
        raise AssertionError("Expected unknown field types to be kept for later filtering")
    if trackers[1].fields != []:
        raise AssertionError("Expected no fields for a tracker without config")


def test_load_entries_skips_invalid(tmp_path: Path) -> None:
    """Test invalid entries are skipped and valid ones kept."""
    path = tmp_path / "entries.json"
    path.write_text(
        json.dumps(
            [
                {"tracker_id": "pain", "timestamp": 1704110400000, "intensity": 6},
                {"tracker_id": "pain"},
                {"tracker_id": "sleep", "timestamp": 1704110400000, "field_values": {"hours": 3600}},
            ]
        ),
        encoding="utf-8",
    )

    entries = JSONExportLoader().load_entries(path)

    if len(entries) != 2:
        raise AssertionError(f"Expected 2 valid entries, got {len(entries)}")
    if entries[1].field_values != {"hours": 3600}:
        raise AssertionError(f"Unexpected field values {entries[1].field_values}")


def test_unreadable_file_raises(tmp_path: Path) -> None:
    """Test malformed JSON and wrong shapes raise ParsingError."""
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")

    with pytest.raises(ParsingError):
        JSONExportLoader().load_entries(broken)

    wrong_shape = tmp_path / "wrong.json"
    wrong_shape.write_text(json.dumps({"items": []}), encoding="utf-8")

    with pytest.raises(ParsingError):
        JSONExportLoader().load_trackers(wrong_shape)

    with pytest.raises(ParsingError):
        JSONExportLoader().load_trackers(tmp_path / "missing.json")
