"""
Command-line interface for Tracker Interlink.

Provides commands for checking data status, listing numeric fields,
detecting interlinks and printing aligned timelines from JSON exports.
"""

import json
from pathlib import Path

import typer

from tracker_interlink.domain.interlink import DateRange
from tracker_interlink.domain.tracker import Entry, Tracker, TrackerPair
from tracker_interlink.infrastructure.loaders.json_loader import JSONExportLoader
from tracker_interlink.services.analysis import InterlinkAnalysisService, get_suggested_pairs
from tracker_interlink.services.data_status import DataStatusService
from tracker_interlink.services.field_extraction import FieldExtractionService
from tracker_interlink.services.output import OutputService
from tracker_interlink.services.pairing import PairGenerationService
from tracker_interlink.services.timeline import TimelineService
from tracker_interlink.utils.exceptions import TrackerInterlinkError
from tracker_interlink.utils.logging_config import get_logger, setup_logging
from tracker_interlink.utils.parameters import ParameterLoader
from tracker_interlink.utils.timezone_utils import parse_date

app = typer.Typer(help="Tracker Interlink - Cross-tracker correlation analysis")

logger = get_logger(__name__)


def init_config(config_path: str = "config/config.yaml", verbose: bool = False) -> ParameterLoader:
    """
    Initialize configuration and logging.

    Args:
        config_path: Path to configuration file.
        verbose: Log at DEBUG level.

    Returns:
        Parameter loader instance.
    """
    param_loader = ParameterLoader(config_path)
    setup_logging(param_loader.get_logging_config(), "tracker_interlink", verbose)
    return param_loader


def load_inputs(trackers_file: str, entries_file: str) -> tuple[list[Tracker], list[Entry]]:
    """
    Load trackers and entries from JSON exports.

    Args:
        trackers_file: Path to trackers JSON file.
        entries_file: Path to entries JSON file.

    Returns:
        Tuple of (trackers, entries).
    """
    loader = JSONExportLoader()
    return loader.load_trackers(Path(trackers_file)), loader.load_entries(Path(entries_file))


def parse_pairs(pairs: list[str] | None) -> list[TrackerPair]:
    """
    Parse "tracker1:field1,tracker2:field2" pair options.

    Raises:
        typer.BadParameter: If a pair is malformed.
    """
    try:
        return [TrackerPair.parse(p) for p in pairs or []]
    except ValueError as e:
        raise typer.BadParameter(str(e)) from e


def parse_date_range(start: str | None, end: str | None) -> DateRange | None:
    """
    Build a date range from optional start/end strings.

    Raises:
        typer.BadParameter: If only one bound is given or the dates are invalid.
    """
    if start is None and end is None:
        return None
    if start is None or end is None:
        raise typer.BadParameter("--start and --end must be given together")

    try:
        return DateRange(start=parse_date(start), end=parse_date(end))
    except ValueError as e:
        raise typer.BadParameter(f"Invalid date range: {e}") from e


@app.command()
def status(
    trackers_file: str = typer.Option(..., "--trackers", help="Trackers JSON export"),
    entries_file: str = typer.Option(..., "--entries", help="Entries JSON export"),
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
) -> None:
    """
    Show whether enough data exists for interlink analysis.
    """
    try:
        param_loader = init_config(config_path)
        trackers, entries = load_inputs(trackers_file, entries_file)

        data_status = DataStatusService(param_loader.get_analysis_config()).get_data_status(
            entries, trackers
        )

        typer.echo(f"Days collected: {data_status.days_collected}/{data_status.required_days}")
        typer.echo(f"Trackers with data: {data_status.trackers_with_data}")
        for tracker_id, days in data_status.tracker_data_counts.items():
            typer.echo(f"  - {tracker_id}: {days} days")

        if data_status.has_enough_data:
            typer.echo("Enough data for interlink analysis")
        else:
            typer.echo("Not enough data yet - keep tracking")

    except TrackerInterlinkError as e:
        logger.error(f"Status failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command()
def fields(
    trackers_file: str = typer.Option(..., "--trackers", help="Trackers JSON export"),
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
) -> None:
    """
    List the numeric fields available for correlation.
    """
    try:
        param_loader = init_config(config_path)
        trackers = JSONExportLoader().load_trackers(Path(trackers_file))

        extractor = FieldExtractionService(param_loader.get_analysis_config())
        available = extractor.extract_all_fields(trackers)

        typer.echo(f"{len(available)} numeric fields")
        for field in available:
            typer.echo(
                f"  - {field.key} ({field.tracker_name} / {field.field_label}, "
                f"{field.field_type}, {field.min_value:g}-{field.max_value:g})"
            )

    except TrackerInterlinkError as e:
        logger.error(f"Listing fields failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command()
def analyze(
    trackers_file: str = typer.Option(..., "--trackers", help="Trackers JSON export"),
    entries_file: str = typer.Option(..., "--entries", help="Entries JSON export"),
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
    pair: list[str] | None = typer.Option(
        None, help="Manual pair 'tracker1:field1,tracker2:field2' (repeatable)"
    ),
    auto: bool = typer.Option(True, help="Auto-detect across all cross-tracker pairs"),
    start: str | None = typer.Option(None, help="Timeline start date"),
    end: str | None = typer.Option(None, help="Timeline end date"),
    output: str | None = typer.Option(None, help="Write the JSON report to this path"),
    write_report: bool = typer.Option(False, help="Write the JSON report to the configured path"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log per-pair details"),
) -> None:
    """
    Detect interlinks and print ranked insights.
    """
    try:
        param_loader = init_config(config_path, verbose)
        analysis_config = param_loader.get_analysis_config()
        trackers, entries = load_inputs(trackers_file, entries_file)

        manual_pairs = parse_pairs(pair)
        date_range = parse_date_range(start, end)

        service = InterlinkAnalysisService(analysis_config)
        analysis = service.analyze(
            entries, trackers, auto_detect=auto, manual_pairs=manual_pairs, date_range=date_range
        )

        if analysis.error:
            typer.echo(analysis.error, err=True)
        elif not analysis.has_enough_data and not manual_pairs:
            typer.echo(
                f"Not enough data yet: {analysis.data_status.days_collected}/"
                f"{analysis.data_status.required_days} days, "
                f"{analysis.data_status.trackers_with_data} trackers with data"
            )
        elif not analysis.insights:
            typer.echo("No interlinks found")

        for rank, insight in enumerate(analysis.insights, start=1):
            corr = insight.correlation
            typer.echo(f"\n{rank}. {insight.title} [{insight.strength}]")
            typer.echo(f"   {insight.text}")
            if insight.actionable:
                typer.echo(f"   {insight.actionable}")
            typer.echo(
                f"   r={corr.coefficient:+.3f}, lag={corr.lag_days}d, "
                f"n={corr.sample_size}, confidence={corr.confidence:.0%}"
            )

        suggestions = get_suggested_pairs(
            analysis.correlations, analysis_config.suggested_pairs_limit
        )
        if suggestions and not manual_pairs:
            typer.echo("\nSuggested pairs:")
            for suggestion in suggestions:
                typer.echo(
                    f"  --pair {suggestion.tracker1_id}:{suggestion.field1_id},"
                    f"{suggestion.tracker2_id}:{suggestion.field2_id}"
                )

        if output or write_report:
            output_service = OutputService(param_loader.get_output_config())
            report_path = output_service.write_report(analysis, Path(output) if output else None)
            typer.echo(f"\nReport written to {report_path}")

    except TrackerInterlinkError as e:
        logger.error(f"Analysis failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command()
def timeline(
    trackers_file: str = typer.Option(..., "--trackers", help="Trackers JSON export"),
    entries_file: str = typer.Option(..., "--entries", help="Entries JSON export"),
    pair: list[str] = typer.Option(..., help="Pair 'tracker1:field1,tracker2:field2' (repeatable)"),
    config_path: str = typer.Option("config/config.yaml", help="Path to configuration file"),
    start: str | None = typer.Option(None, help="Start date"),
    end: str | None = typer.Option(None, help="End date"),
    normalize: bool = typer.Option(False, help="Report values as % of each field's range"),
) -> None:
    """
    Print date-aligned values of the selected pairs as JSON lines.
    """
    try:
        param_loader = init_config(config_path)
        analysis_config = param_loader.get_analysis_config()
        trackers, entries = load_inputs(trackers_file, entries_file)

        extractor = FieldExtractionService(analysis_config)
        available = extractor.extract_all_fields(trackers)
        pair_generator = PairGenerationService()

        selected = []
        for manual_pair in parse_pairs(pair):
            resolved = pair_generator.resolve_pair(manual_pair, available)
            if resolved is None:
                typer.echo(f"Unknown field in pair: {manual_pair}", err=True)
                continue
            for field in resolved:
                if field not in selected:
                    selected.append(field)

        points = TimelineService(analysis_config).generate_timeline_data(
            entries, selected, parse_date_range(start, end), normalize=normalize
        )

        for point in points:
            typer.echo(json.dumps(point.to_dict()))

    except TrackerInterlinkError as e:
        logger.error(f"Timeline failed: {e}")
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=1) from e


if __name__ == "__main__":
    app()
