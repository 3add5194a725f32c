"""Interval cycle resolution: due points and status for every catalog interval."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .asset import MaintenanceUnit
from .calculations import calc_current_cycle, calc_due_value, check_status
from .config import DEFAULT_FAR_FUTURE_THRESHOLD, DEFAULT_NEAR_DUE_THRESHOLD
from .interval import MaintenanceInterval
from .service_record import ServiceRecord
from .status import IntervalState


@dataclass
class IntervalStatus:
    """Calculated status of one interval for the asset's current cycle."""

    interval: MaintenanceInterval
    state: IntervalState
    due_value: Optional[float] = None
    cycle: Optional[int] = None

    def overdue_by(self, current_value: float) -> float:
        return current_value - (self.due_value or 0)

    def remaining(self, current_value: float) -> float:
        return (self.due_value or 0) - current_value


@dataclass
class CycleResolution:
    """Every interval's status plus the cycle it was computed for."""

    current_value: float
    cycle_length: float
    current_cycle: int
    statuses: List[IntervalStatus] = field(default_factory=list)
    last_service: Optional[ServiceRecord] = None

    @property
    def cycle_start(self) -> float:
        return (self.current_cycle - 1) * self.cycle_length

    @property
    def cycle_end(self) -> float:
        return self.current_cycle * self.cycle_length

    def by_state(self, state: IntervalState) -> List[IntervalStatus]:
        return [s for s in self.statuses if s.state is state]


class IntervalCycleResolver:
    """A model's interval catalog together with one asset's service history."""

    def __init__(
        self,
        intervals: List[MaintenanceInterval],
        history: Optional[List[ServiceRecord]] = None,
        unit: MaintenanceUnit = MaintenanceUnit.HOURS,
        near_due_threshold: float = DEFAULT_NEAR_DUE_THRESHOLD,
        far_future_threshold: float = DEFAULT_FAR_FUTURE_THRESHOLD,
    ):
        self.intervals = intervals
        self.unit = unit
        self.near_due_threshold = near_due_threshold
        self.far_future_threshold = far_future_threshold
        self._by_id: Dict[str, MaintenanceInterval] = {i.id: i for i in intervals}
        # Only preventive records pointing at a catalog interval count
        self.history = [
            h for h in (history or [])
            if h.is_preventive and h.interval_id in self._by_id
        ]

    @property
    def cycle_length(self) -> float:
        """Largest interval value; the schedule restarts after it."""
        if not self.intervals:
            return 0
        return max(i.interval_value for i in self.intervals)

    @property
    def last_service(self) -> Optional[ServiceRecord]:
        """Most recent preventive service overall, regardless of cycle."""
        if not self.history:
            return None
        return max(self.history, key=lambda h: (h.performed_at, h.usage_value(self.unit)))

    def get_interval(self, interval_id: Optional[str]) -> Optional[MaintenanceInterval]:
        return self._by_id.get(interval_id) if interval_id else None

    def get_history_for_interval(self, interval_id: str) -> List[ServiceRecord]:
        return [h for h in self.history if h.interval_id == interval_id]

    def get_last_service(self, interval_id: str) -> Optional[ServiceRecord]:
        """Most recent service for one interval."""
        entries = self.get_history_for_interval(interval_id)
        if not entries:
            return None
        return max(entries, key=lambda h: h.performed_at)

    def get_cycle_history(self, cycle_start: float, cycle_end: float) -> List[ServiceRecord]:
        """Services performed strictly inside `(cycle_start, cycle_end)`."""
        return [
            h for h in self.history
            if cycle_start < h.usage_value(self.unit) < cycle_end
        ]

    def is_covered(
        self, interval: MaintenanceInterval, due_value: float, cycle_history: List[ServiceRecord]
    ) -> bool:
        """
        Check whether a higher-or-equal tier service subsumes `interval`.

        The covering service must have been performed at or after the
        interval's own due point.
        """
        for record in cycle_history:
            performed = self.get_interval(record.interval_id)
            if performed is None:
                continue
            if performed.can_cover(interval) and record.usage_value(self.unit) >= due_value:
                return True
        return False

    def classify(
        self,
        interval: MaintenanceInterval,
        current_value: float,
        current_cycle: int,
        cycle_history: List[ServiceRecord],
    ) -> IntervalStatus:
        """
        Determine one interval's status in the current cycle.

        Logic:
        - First-cycle-only intervals outside cycle 1: NOT_APPLICABLE
        - Due point past the cycle end moves to the next cycle; if that is
          more than far_future_threshold ahead: NOT_APPLICABLE
        - Performed in this cycle: COMPLETED
        - Covered by a higher tier at/after the due point: COVERED
        - Otherwise OVERDUE / UPCOMING / SCHEDULED by distance to due
        """
        length = self.cycle_length
        if interval.is_first_cycle_only and current_cycle != 1:
            return IntervalStatus(interval, IntervalState.NOT_APPLICABLE)

        cycle = current_cycle
        due = calc_due_value(cycle, length, interval.interval_value)
        if due > current_cycle * length:
            cycle = current_cycle + 1
            due = calc_due_value(cycle, length, interval.interval_value)
            if due - current_value > self.far_future_threshold:
                return IntervalStatus(interval, IntervalState.NOT_APPLICABLE)
            # Current-cycle work never satisfies a next-cycle due point
            return IntervalStatus(interval, IntervalState.SCHEDULED, due, cycle)

        if any(h.interval_id == interval.id for h in cycle_history):
            return IntervalStatus(interval, IntervalState.COMPLETED, due, cycle)

        if self.is_covered(interval, due, cycle_history):
            return IntervalStatus(interval, IntervalState.COVERED, due, cycle)

        state = check_status(current_value, due, self.near_due_threshold)
        return IntervalStatus(interval, state, due, cycle)

    def resolve(self, current_value: float) -> Optional[CycleResolution]:
        """Classify every interval; None when the catalog defines no cycle."""
        length = self.cycle_length
        if length <= 0:
            return None

        current_cycle = calc_current_cycle(current_value, length)
        resolution = CycleResolution(
            current_value=current_value,
            cycle_length=length,
            current_cycle=current_cycle,
            last_service=self.last_service,
        )
        cycle_history = self.get_cycle_history(resolution.cycle_start, resolution.cycle_end)
        resolution.statuses = [
            self.classify(interval, current_value, current_cycle, cycle_history)
            for interval in self.intervals
        ]
        return resolution
