"""
Domain service: Statistics and hotspot clustering over litter entries.

Given an already filtered set of entries, this module computes:
- Total count and per-type breakdown
- The most common type (deterministic tie-break)
- The date range covered by the entries
- Geographic hotspots by snapping coordinates to a fixed degree grid

The service is pure: it performs no I/O, does not mutate its input and keeps
no state between calls, so one instance can be shared across requests.
"""
from collections import Counter
from dataclasses import dataclass
from typing import Optional, Sequence
import logging

import numpy as np

from app.config import settings
from app.domain.models import DateRange, Hotspot, Statistics, TrashEntry
from app.utils.timestamps import utc_now_iso

logger = logging.getLogger(__name__)


@dataclass
class AggregationConfig:
    """Configuration for statistics aggregation."""

    cell_size: float = 0.01
    """Edge of a clustering cell in degrees, applied to latitude and longitude independently"""

    hotspot_radius_m: int = 1000
    """Flat display radius reported for every hotspot"""

    max_hotspots: int = 5
    """Number of hotspots kept after ranking"""


class StatisticsAggregator:
    """
    Domain service turning entries into Statistics.

    Clustering snaps each coordinate to `round(coord / cell_size)` with numpy's
    round-half-to-even rule; entries sharing a (lat cell, lng cell) pair form one
    cluster whose center is the arithmetic mean of its members.
    """

    def __init__(self, config: Optional[AggregationConfig] = None):
        """
        Initialize the aggregator.

        Args:
            config: Aggregation configuration; defaults come from settings
        """
        self.config = config or AggregationConfig(
            cell_size=settings.hotspot_cell_size,
            hotspot_radius_m=settings.hotspot_radius_m,
            max_hotspots=settings.max_hotspots,
        )

    def compute(
        self,
        entries: Sequence[TrashEntry],
        now: Optional[str] = None,
    ) -> Statistics:
        """
        Compute statistics for a set of entries.

        Args:
            entries: Entries to aggregate, in any order
            now: Timestamp used for the date range of an empty set
                (defaults to the current instant)

        Returns:
            Statistics for the entries
        """
        breakdown = self.type_breakdown(entries)
        hotspots = self.compute_hotspots(entries)

        logger.debug(
            f"Aggregated {len(entries)} entries into {len(breakdown)} types "
            f"and {len(hotspots)} hotspots"
        )

        return Statistics(
            total_count=len(entries),
            most_common_type=self.most_common_type(breakdown),
            hotspots=hotspots,
            type_breakdown=breakdown,
            date_range=self.date_range(entries, now=now),
        )

    @staticmethod
    def type_breakdown(entries: Sequence[TrashEntry]) -> dict[str, int]:
        """
        Count entries per trash type.

        Returns:
            Mapping of type value to count, ordered by count descending then name
        """
        counts = Counter(entry.trash_type.value for entry in entries)
        ordered = sorted(counts.items(), key=lambda item: (-item[1], item[0]))
        return dict(ordered)

    @staticmethod
    def most_common_type(breakdown: dict[str, int]) -> str:
        """
        Pick the type with the highest count.

        Ties resolve to the lexicographically smallest type name. An empty
        breakdown yields an empty string.
        """
        if not breakdown:
            return ""
        return min(breakdown.items(), key=lambda item: (-item[1], item[0]))[0]

    @staticmethod
    def date_range(
        entries: Sequence[TrashEntry],
        now: Optional[str] = None,
    ) -> DateRange:
        """
        Earliest and latest timestamp among the entries.

        Both ends fall back to `now` for an empty set so the field is never absent.
        """
        if not entries:
            fallback = now or utc_now_iso()
            return DateRange(start=fallback, end=fallback)

        timestamps = [entry.timestamp for entry in entries]
        return DateRange(start=min(timestamps), end=max(timestamps))

    def compute_hotspots(self, entries: Sequence[TrashEntry]) -> list[Hotspot]:
        """
        Cluster entries on the degree grid and rank the clusters.

        Args:
            entries: Entries to cluster

        Returns:
            Up to `max_hotspots` hotspots, count descending; equal counts are
            ordered by cell (latitude index, then longitude index) so the result
            does not depend on input order
        """
        if not entries:
            return []

        coords = np.array(
            [(entry.latitude, entry.longitude) for entry in entries],
            dtype=float,
        )
        cells = np.round(coords / self.config.cell_size).astype(np.int64)

        members: dict[tuple[int, int], list[int]] = {}
        for index, (cell_lat, cell_lng) in enumerate(cells):
            members.setdefault((int(cell_lat), int(cell_lng)), []).append(index)

        ranked = sorted(members.items(), key=lambda item: (-len(item[1]), item[0]))

        hotspots = []
        for _, indices in ranked[: self.config.max_hotspots]:
            center = coords[indices].mean(axis=0)
            hotspots.append(Hotspot(
                latitude=float(center[0]),
                longitude=float(center[1]),
                count=len(indices),
                radius=self.config.hotspot_radius_m,
            ))

        return hotspots
