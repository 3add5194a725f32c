"""Usage accrued within a reporting window from a cleaned reading sequence."""

import logging
from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from .calculations import PairContribution, pair_contribution
from .config import ReportConfig
from .reading import Reading

logger = logging.getLogger(__name__)


def find_baseline(readings: Sequence[Reading], window_start: datetime) -> Optional[int]:
    """
    Index of the reading usage accumulation starts from.

    The last reading strictly before the window, otherwise the first
    reading at or after its start. None for an empty sequence.
    """
    before = [i for i, r in enumerate(readings) if r.ts < window_start]
    if before:
        return before[-1]
    return 0 if readings else None


def trace_usage(
    readings: Sequence[Reading], config: ReportConfig
) -> List[Tuple[Reading, Reading, PairContribution]]:
    """Judge every pair from the baseline onward. Empty if usage is unknown."""
    if len(readings) < 2:
        return []
    baseline = find_baseline(readings, config.window_start)
    if baseline is None or baseline >= len(readings) - 1:
        return []
    return [
        (readings[i], readings[i + 1], pair_contribution(readings[i], readings[i + 1], config))
        for i in range(baseline, len(readings) - 1)
    ]


def calc_usage(readings: Sequence[Reading], config: ReportConfig) -> Optional[float]:
    """
    Total usage within `[window_start, window_end)`.

    Returns None when usage cannot be established (fewer than two readings,
    or no reading after the baseline). Never negative.
    """
    pairs = trace_usage(readings, config)
    if not pairs:
        return None
    total = 0.0
    for current, nxt, result in pairs:
        if result.skip_reason is not None:
            logger.debug("Skipped %s -> %s: %s", current, nxt, result.skip_reason.value)
            continue
        total += result.contribution
    return total if total > 0 else 0.0
