"""
JSON loader for tracker and entry exports.

Reads trackers and entries from JSON files, either as a bare list or wrapped
in an object under "trackers" / "entries".
"""

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ValidationError

from tracker_interlink.domain.tracker import Entry, Tracker
from tracker_interlink.utils.exceptions import ParsingError

logger = logging.getLogger(__name__)


class JSONExportLoader:
    """
    Loader for JSON tracker and entry exports.

    Invalid records are skipped with a warning; an unreadable file raises.
    """

    def _read_records(self, file_path: Path, key: str) -> list[Any]:
        """
        Read the list of raw records from a JSON file.

        Args:
            file_path: Path to JSON file.
            key: Wrapper key to look under when the file holds an object.

        Returns:
            List of raw records.

        Raises:
            ParsingError: If the file cannot be read or has no record list.
        """
        try:
            with open(file_path, encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ParsingError(f"Failed to read JSON file {file_path}: {e}") from e

        if isinstance(data, dict):
            data = data.get(key)

        if not isinstance(data, list):
            raise ParsingError(f"Expected a list of {key} in {file_path}")

        return data

    def _parse_records(
        self, records: list[Any], model: type[BaseModel], file_path: Path
    ) -> list[Any]:
        parsed = []

        for idx, record in enumerate(records):
            try:
                parsed.append(model.model_validate(record))
            except ValidationError as e:
                logger.warning(
                    f"Skipping invalid {model.__name__.lower()} #{idx} in {file_path.name}: "
                    f"{e.error_count()} validation errors"
                )

        return parsed

    def load_trackers(self, file_path: Path) -> list[Tracker]:
        """
        Load trackers from a JSON export.

        Args:
            file_path: Path to trackers JSON file.

        Returns:
            List of trackers.

        Raises:
            ParsingError: If the file cannot be parsed.
        """
        records = self._read_records(file_path, "trackers")
        trackers: list[Tracker] = self._parse_records(records, Tracker, file_path)

        logger.info(f"Loaded {len(trackers)} trackers from {file_path.name}")
        return trackers

    def load_entries(self, file_path: Path) -> list[Entry]:
        """
        Load entries from a JSON export.

        Args:
            file_path: Path to entries JSON file.

        Returns:
            List of entries.

        Raises:
            ParsingError: If the file cannot be parsed.
        """
        records = self._read_records(file_path, "entries")
        entries: list[Entry] = self._parse_records(records, Entry, file_path)

        logger.info(f"Loaded {len(entries)} entries from {file_path.name}")
        return entries
