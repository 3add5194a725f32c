"""Helper functions for cycle, due-point, and usage calculations."""

import math
from typing import NamedTuple, Optional

from .config import ReportConfig
from .reading import Reading
from .status import IntervalState, SkipReason

SECONDS_PER_DAY = 86400.0


class PairContribution(NamedTuple):
    """Usage contributed by one pair of consecutive readings."""

    contribution: float
    skip_reason: Optional[SkipReason] = None
    capped: bool = False


def elapsed_days(earlier: Reading, later: Reading) -> float:
    """Days between two readings (fractional)."""
    return (later.ts - earlier.ts).total_seconds() / SECONDS_PER_DAY


def calc_current_cycle(current_value: float, cycle_length: float) -> int:
    """Cycle number (1-based) containing the current counter value."""
    return math.floor(current_value / cycle_length) + 1


def calc_due_value(cycle: int, cycle_length: float, interval_value: float) -> float:
    """Counter value at which an interval falls due within `cycle`."""
    return (cycle - 1) * cycle_length + interval_value


def check_status(current: float, due: float, soon_threshold: float) -> IntervalState:
    """Determine status by comparing current value to due threshold."""
    if current >= due:
        return IntervalState.OVERDUE
    if current >= due - soon_threshold:
        return IntervalState.UPCOMING
    return IntervalState.SCHEDULED


def is_plausible_step(
    previous: Reading, current: Reading, max_rate_per_day: float, long_gap_days: float
) -> bool:
    """
    Check whether a reading follows plausibly from the one before it.

    The counter must not go backwards, and it must not advance faster than
    `max_rate_per_day` unless the readings are at least `long_gap_days` apart.
    """
    delta = current.value - previous.value
    days = elapsed_days(previous, current)
    rate = delta / days if days > 0 else 0
    return delta >= 0 and (days >= long_gap_days or rate <= max_rate_per_day)


def pair_contribution(current: Reading, nxt: Reading, config: ReportConfig) -> PairContribution:
    """
    Usage accrued between two consecutive cleaned readings.

    Pairs outside the window, counter resets, near-duplicate readings and
    unrealistic jumps contribute nothing. Large deltas spanning a long
    silent gap are capped at `max_rate_per_day` per elapsed day.
    """
    if nxt.ts < config.window_start:
        return PairContribution(0.0, SkipReason.BEFORE_WINDOW)
    if current.ts >= config.window_end:
        return PairContribution(0.0, SkipReason.AFTER_WINDOW)

    delta = nxt.value - current.value
    if delta < 0:
        if -delta <= config.reset_tolerance:
            return PairContribution(0.0, SkipReason.JITTER)
        return PairContribution(0.0, SkipReason.COUNTER_RESET)

    days = elapsed_days(current, nxt)
    if days <= 0 or days < config.min_elapsed_days:
        return PairContribution(0.0, SkipReason.DUPLICATE)

    rate = delta / days
    if rate > config.max_rate_per_day and days < config.long_gap_days:
        return PairContribution(0.0, SkipReason.UNREALISTIC_JUMP)

    max_reasonable = config.max_rate_per_day * days
    if delta > max_reasonable:
        return PairContribution(max_reasonable, capped=True)
    return PairContribution(delta)
