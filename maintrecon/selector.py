"""Pick the single most relevant interval to report for an asset."""

from dataclasses import dataclass
from typing import List, Optional

from .cycle import CycleResolution, IntervalCycleResolver, IntervalStatus
from .status import IntervalState


@dataclass
class MaintenanceSelection:
    """Selected interval and the last-service triple that goes with it."""

    interval_id: Optional[str] = None
    interval_label: Optional[str] = None
    interval_value: Optional[float] = None
    state: Optional[IntervalState] = None
    due_value: Optional[float] = None
    overdue: Optional[float] = None
    remaining: Optional[float] = None
    last_service_date: Optional[str] = None
    last_service_value: Optional[float] = None
    last_service_interval_value: Optional[float] = None

    @property
    def is_overdue(self) -> bool:
        return self.overdue is not None and self.overdue > 0


def pick_overdue(overdue: List[IntervalStatus], current_value: float) -> IntervalStatus:
    """Lowest interval value first; ties go to the larger overdue amount."""
    return min(
        overdue,
        key=lambda s: (s.interval.interval_value, -s.overdue_by(current_value)),
    )


def pick_upcoming(upcoming: List[IntervalStatus]) -> IntervalStatus:
    """Soonest due point."""
    return min(upcoming, key=lambda s: s.due_value if s.due_value is not None else float("inf"))


def select_interval(
    resolution: CycleResolution, resolver: IntervalCycleResolver
) -> MaintenanceSelection:
    """
    Select the interval to surface and attach its last service.

    The fallback last service is the most recent preventive record overall.
    A record for the selected interval replaces it only when it is at least
    as recent.
    """
    selection = MaintenanceSelection()
    fallback = resolution.last_service
    if fallback is not None:
        selection.last_service_date = fallback.date
        selection.last_service_value = fallback.usage_value(resolver.unit)
        performed = resolver.get_interval(fallback.interval_id)
        selection.last_service_interval_value = performed.interval_value if performed else None

    current_value = resolution.current_value
    overdue = resolution.by_state(IntervalState.OVERDUE)
    upcoming = [
        s for s in resolution.statuses
        if s.state in (IntervalState.UPCOMING, IntervalState.SCHEDULED)
    ]
    if overdue:
        chosen = pick_overdue(overdue, current_value)
        selection.overdue = chosen.overdue_by(current_value)
    elif upcoming:
        chosen = pick_upcoming(upcoming)
        selection.remaining = chosen.remaining(current_value)
    else:
        return selection

    interval = chosen.interval
    selection.interval_id = interval.id
    selection.interval_label = interval.label
    selection.interval_value = interval.interval_value
    selection.state = chosen.state
    selection.due_value = chosen.due_value

    specific = resolver.get_last_service(interval.id)
    if specific is not None and (
        fallback is None or specific.performed_at >= fallback.performed_at
    ):
        selection.last_service_date = specific.date
        selection.last_service_value = specific.usage_value(resolver.unit)
        selection.last_service_interval_value = interval.interval_value
    return selection
