"""
Pair generation service.

Enumerates the candidate field pairs handed to the correlation detector.
"""

import logging
from itertools import combinations

from tracker_interlink.domain.tracker import TrackerFieldInfo, TrackerPair

logger = logging.getLogger(__name__)


class PairGenerationService:
    """
    Service for generating candidate tracker field pairs.

    Automatic generation only pairs fields of different trackers: two fields
    of one tracker are usually definitionally related.
    """

    def resolve_pair(
        self, pair: TrackerPair, fields: list[TrackerFieldInfo]
    ) -> tuple[TrackerFieldInfo, TrackerFieldInfo] | None:
        """
        Look up both sides of a pair among the available fields.

        Args:
            pair: Pair to resolve.
            fields: Available field descriptors.

        Returns:
            Tuple of (field1, field2), or None if either side is missing.
        """
        by_key = {f.key: f for f in fields}

        field1 = by_key.get(f"{pair.tracker1_id}:{pair.field1_id}")
        field2 = by_key.get(f"{pair.tracker2_id}:{pair.field2_id}")

        if field1 is None or field2 is None:
            return None

        return field1, field2

    def generate_pairs(
        self,
        fields: list[TrackerFieldInfo],
        manual_pairs: list[TrackerPair] | None = None,
    ) -> list[TrackerPair]:
        """
        Generate the pairs to analyze.

        Manual pairs are used verbatim when given; pairs naming unknown fields
        are dropped. Otherwise every cross-tracker combination is generated.

        Args:
            fields: Available field descriptors.
            manual_pairs: Optional caller-selected pairs.

        Returns:
            Pairs to correlate.
        """
        if manual_pairs:
            valid: list[TrackerPair] = []
            for pair in manual_pairs:
                if self.resolve_pair(pair, fields) is None:
                    logger.debug(f"Dropping manual pair with unknown field: {pair}")
                    continue
                valid.append(pair)
            return valid

        pairs = [
            TrackerPair(
                tracker1_id=a.tracker_id,
                field1_id=a.field_id,
                tracker2_id=b.tracker_id,
                field2_id=b.field_id,
            )
            for a, b in combinations(fields, 2)
            if a.tracker_id != b.tracker_id
        ]

        logger.debug(f"Generated {len(pairs)} cross-tracker pairs from {len(fields)} fields")
        return pairs
