"""Normalize raw meter-reading events into per-asset chronological series."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, List, Mapping

from .asset import MaintenanceUnit
from .reading import (
    ChecklistReading,
    FuelTransaction,
    MeterReadingEvent,
    Reading,
    ReadingSource,
)

logger = logging.getLogger(__name__)


@dataclass
class ReadingSeries:
    """Chronological, deduplicated readings for one asset, split by source."""

    asset_id: str
    fuel: List[Reading] = field(default_factory=list)
    checklist: List[Reading] = field(default_factory=list)

    @property
    def merged(self) -> List[Reading]:
        return sort_and_dedupe(self.fuel + self.checklist)

    def __len__(self) -> int:
        return len(self.fuel) + len(self.checklist)


def sort_and_dedupe(readings: Iterable[Reading]) -> List[Reading]:
    """Sort readings by time and collapse entries with identical ts and value."""
    unique: List[Reading] = []
    for reading in sorted(readings, key=lambda r: (r.ts, r.value)):
        if unique and unique[-1] == reading:
            continue
        unique.append(reading)
    return unique


def extract_events(
    fuel_transactions: Iterable[FuelTransaction],
    checklist_readings: Iterable[ChecklistReading],
    unit_by_asset: Mapping[str, MaintenanceUnit],
) -> List[MeterReadingEvent]:
    """
    Turn raw source rows into reading events in each asset's unit.

    Rows for assets outside `unit_by_asset`, rows without a reading, and
    rows with malformed values or timestamps are dropped.
    """
    events = []
    for row in list(fuel_transactions) + list(checklist_readings):
        unit = unit_by_asset.get(row.asset_id)
        if unit is None:
            continue
        event = row.to_event(unit)
        if event is not None:
            events.append(event)
    return events


def normalize_events(
    events: Iterable[MeterReadingEvent],
    window_start: datetime,
    window_end: datetime,
) -> Dict[str, ReadingSeries]:
    """
    Group events per asset and source within `[window_start, window_end)`.

    `window_start` is normally the report start minus the lookback margin.
    """
    buckets: Dict[str, Dict[ReadingSource, List[Reading]]] = {}
    for event in events:
        if not (window_start <= event.ts < window_end):
            continue
        per_source = buckets.setdefault(event.asset_id, {source: [] for source in ReadingSource})
        per_source[event.source].append(event.reading)

    series = {}
    for asset_id, per_source in buckets.items():
        series[asset_id] = ReadingSeries(
            asset_id=asset_id,
            fuel=sort_and_dedupe(per_source[ReadingSource.FUEL_TRANSACTION]),
            checklist=sort_and_dedupe(per_source[ReadingSource.INSPECTION_CHECKLIST]),
        )
    logger.debug("Normalized readings for %d assets", len(series))
    return series
