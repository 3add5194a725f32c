"""Status enums for interval classification and reading-pair rejection."""

from enum import Enum


class IntervalState(Enum):
    """Interval status categories. Lower value = more urgent."""

    OVERDUE = 1
    UPCOMING = 2
    SCHEDULED = 3
    COVERED = 4  # A higher-tier service done at/after this due point
    COMPLETED = 5
    NOT_APPLICABLE = 6  # First-cycle-only, or next cycle too far ahead

    @property
    def label(self) -> str:
        return self.name.lower()

    @property
    def is_actionable(self) -> bool:
        return self in (IntervalState.OVERDUE, IntervalState.UPCOMING, IntervalState.SCHEDULED)


class SkipReason(Enum):
    """Why a pair of consecutive readings contributed nothing."""

    BEFORE_WINDOW = "before_window"
    AFTER_WINDOW = "after_window"
    COUNTER_RESET = "counter_reset"
    JITTER = "jitter"  # Small backwards step within reset_tolerance
    DUPLICATE = "duplicate"
    UNREALISTIC_JUMP = "unrealistic_jump"
