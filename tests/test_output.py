"""Unit tests for output service."""

import json
from pathlib import Path

import pytest

from tracker_interlink.domain.interlink import DataStatus, InterlinkAnalysis
from tracker_interlink.services.output import OutputService
from tracker_interlink.utils.exceptions import OutputError
from tracker_interlink.utils.parameters import OutputConfig


def _analysis() -> InterlinkAnalysis:
    return InterlinkAnalysis(
        has_enough_data=False,
        data_status=DataStatus(
            has_enough_data=False,
            days_collected=3,
            trackers_with_data=1,
            required_days=14,
            tracker_data_counts={"pain": 3},
        ),
    )


def test_write_report_to_configured_path(tmp_path: Path) -> None:
    """Test the report is written under the configured directory."""
    service = OutputService(OutputConfig(dir=str(tmp_path / "out"), report_file="report.json"))

    report_path = service.write_report(_analysis())

    if report_path != tmp_path / "out" / "report.json":
        raise AssertionError(f"Unexpected report path {report_path}")

    with open(report_path, encoding="utf-8") as f:
        report = json.load(f)

    if report["data_status"]["days_collected"] != 3:
        raise AssertionError(f"Unexpected report {report}")
    if report["correlations"] != []:
        raise AssertionError("Expected no correlations")


def test_write_report_failure(tmp_path: Path) -> None:
    """Test an unwritable target raises OutputError."""
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    service = OutputService(OutputConfig())

    with pytest.raises(OutputError):
        service.write_report(_analysis(), blocker / "report.json")
