"""
Output service for writing analysis reports.
"""

import json
import logging
from pathlib import Path

from tracker_interlink.domain.interlink import InterlinkAnalysis
from tracker_interlink.utils.exceptions import OutputError
from tracker_interlink.utils.parameters import OutputConfig

logger = logging.getLogger(__name__)


class OutputService:
    """Service for writing analysis results to JSON report files."""

    def __init__(self, config: OutputConfig) -> None:
        """
        Initialize output service.

        Args:
            config: Output configuration.
        """
        self.config = config
        self.output_dir = Path(config.dir)

    def write_report(self, analysis: InterlinkAnalysis, path: Path | None = None) -> Path:
        """
        Write an analysis report to JSON.

        Args:
            analysis: Analysis to write.
            path: Optional target path; defaults to the configured report file.

        Returns:
            Path of the written report.

        Raises:
            OutputError: If the report cannot be written.
        """
        report_path = path or self.output_dir / self.config.report_file

        try:
            report_path.parent.mkdir(parents=True, exist_ok=True)
            with open(report_path, "w", encoding="utf-8") as f:
                json.dump(analysis.to_dict(), f, indent=self.config.indent, default=str)
        except OSError as e:
            raise OutputError(f"Failed to write report to {report_path}: {e}") from e

        logger.info(
            f"Wrote report with {len(analysis.correlations)} correlations to {report_path}"
        )
        return report_path
