"""
Cross-source validation of meter readings.

Fuel-transaction readings are checked against themselves for plausible
progression. The surviving values then bound the inspection-checklist
readings (corridor validation). When an asset has no fuel readings at all,
checklist readings are kept as-is.
"""

import logging
from typing import List, Optional, Sequence

from .config import ReportConfig
from .calculations import is_plausible_step
from .normalizer import ReadingSeries, sort_and_dedupe
from .reading import Reading

logger = logging.getLogger(__name__)


def validate_fuel_readings(
    readings: Sequence[Reading], max_rate_per_day: float, long_gap_days: float
) -> List[Reading]:
    """
    Keep fuel readings that progress plausibly from their predecessor.

    The first reading is always kept. Every later reading is compared with
    the reading immediately before it in the raw sequence.
    """
    ordered = sorted(readings, key=lambda r: r.ts)
    valid: List[Reading] = []
    for i, current in enumerate(ordered):
        if i == 0 or is_plausible_step(ordered[i - 1], current, max_rate_per_day, long_gap_days):
            valid.append(current)
        else:
            logger.debug("Rejected fuel reading %s after %s", current, ordered[i - 1])
    return valid


class UncorroboratedCleaner:
    """Policy used when no independent source exists: keep everything."""

    name = "uncorroborated"

    def filter(self, readings: Sequence[Reading]) -> List[Reading]:
        return list(readings)


class CorroboratedCleaner:
    """Keep only readings inside a corridor around reference values."""

    name = "corroborated"

    def __init__(self, reference_values: Sequence[float], corridor_factor: float = 2.0):
        if not reference_values:
            raise ValueError("CorroboratedCleaner needs at least one reference value")
        low = min(reference_values)
        high = max(reference_values)
        spread = high - low
        self.allowed_min = low - spread * corridor_factor
        self.allowed_max = high + spread * corridor_factor

    def accepts(self, reading: Reading) -> bool:
        return self.allowed_min <= reading.value <= self.allowed_max

    def filter(self, readings: Sequence[Reading]) -> List[Reading]:
        kept = [r for r in readings if self.accepts(r)]
        if len(kept) < len(readings):
            logger.debug(
                "Dropped %d checklist readings outside [%s, %s]",
                len(readings) - len(kept), self.allowed_min, self.allowed_max,
            )
        return kept


def select_cleaner(
    validated_fuel: Sequence[Reading],
    validation_values: Optional[Sequence[float]],
    corridor_factor: float = 2.0,
):
    """
    Pick the cleaning policy for checklist readings from data availability.

    The wider validation set is preferred as the reference; the validated
    fuel sequence is used when that set is empty.
    """
    if validation_values:
        return CorroboratedCleaner(validation_values, corridor_factor)
    if validated_fuel:
        return CorroboratedCleaner([r.value for r in validated_fuel], corridor_factor)
    return UncorroboratedCleaner()


def clean_series(
    series: ReadingSeries,
    config: ReportConfig,
    validation_values: Optional[Sequence[float]] = None,
) -> List[Reading]:
    """
    Produce the cleaned, merged reading sequence for one asset.

    If `validation_values` is None, the values of the validated fuel
    sequence serve as the validation set.
    """
    fuel = validate_fuel_readings(series.fuel, config.max_rate_per_day, config.long_gap_days)
    if validation_values is None:
        validation_values = [r.value for r in fuel]
    cleaner = select_cleaner(fuel, validation_values, config.corridor_factor)
    checklist = cleaner.filter(series.checklist)
    return sort_and_dedupe(fuel + checklist)
