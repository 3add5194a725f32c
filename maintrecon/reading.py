"""Meter reading events and the raw source rows they are extracted from."""

import logging
from datetime import date, datetime, timezone
from enum import Enum
from typing import Any, NamedTuple, Optional

from dateutil.parser import isoparse

from .asset import MaintenanceUnit

logger = logging.getLogger(__name__)


class ReadingSource(Enum):
    """Independent origins of meter readings."""

    FUEL_TRANSACTION = "fuel_transaction"
    INSPECTION_CHECKLIST = "inspection_checklist"


class Reading(NamedTuple):
    """A normalized (timestamp, counter value) pair."""

    ts: datetime
    value: float


class MeterReadingEvent(NamedTuple):
    """A single meter reading as reported by one source."""

    asset_id: str
    ts: datetime
    value: float
    source: ReadingSource

    @property
    def reading(self) -> Reading:
        return Reading(self.ts, self.value)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """
    Parse an ISO timestamp or date into a naive UTC datetime.

    Returns None for missing or unparseable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        ts = value
    elif isinstance(value, date):
        ts = datetime(value.year, value.month, value.day)
    else:
        try:
            ts = isoparse(str(value))
        except (ValueError, OverflowError):
            return None
    if ts.tzinfo is not None:
        ts = ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts


def parse_value(value: Any) -> Optional[float]:
    """Coerce a counter value to float; None when missing or non-numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if result != result:  # NaN
        return None
    return result


def make_event(
    asset_id: Optional[str], ts: Any, value: Any, source: ReadingSource
) -> Optional[MeterReadingEvent]:
    """Build an event from raw fields, or None if any field is unusable."""
    parsed_ts = parse_timestamp(ts)
    parsed_value = parse_value(value)
    if not asset_id or parsed_ts is None or parsed_value is None:
        logger.debug(
            "Dropping %s reading for asset %s: ts=%r value=%r",
            source.value, asset_id, ts, value,
        )
        return None
    return MeterReadingEvent(asset_id, parsed_ts, parsed_value, source)


class FuelTransaction:
    """A fuel dispensing transaction, optionally carrying a meter reading."""

    def __init__(
            self,
            asset_id: Optional[str],
            transaction_date: Any,
            transaction_type: str = "consumption",
            quantity_liters: Optional[float] = None,
            unit_cost: Optional[float] = None,
            product_id: Optional[str] = None,
            hours_reading: Any = None,
            kilometers_reading: Any = None,
            is_transfer: bool = False,
    ):
        self.asset_id = asset_id
        self.transaction_date = transaction_date
        self.transaction_type = transaction_type
        self.quantity_liters = quantity_liters
        self.unit_cost = unit_cost
        self.product_id = product_id
        self.hours_reading = hours_reading
        self.kilometers_reading = kilometers_reading
        self.is_transfer = is_transfer or False

    @property
    def is_consumption(self) -> bool:
        return (self.transaction_type or "").lower() == "consumption" and not self.is_transfer

    @property
    def timestamp(self) -> Optional[datetime]:
        return parse_timestamp(self.transaction_date)

    def to_event(self, unit: MaintenanceUnit) -> Optional[MeterReadingEvent]:
        """Meter reading in the given unit, if this transaction carries one."""
        if not self.is_consumption:
            return None
        raw = self.kilometers_reading if unit is MaintenanceUnit.KILOMETERS else self.hours_reading
        if raw is None:
            return None
        return make_event(self.asset_id, self.transaction_date, raw, ReadingSource.FUEL_TRANSACTION)


class ChecklistReading:
    """An inspection submission with an operator-entered meter reading."""

    def __init__(
            self,
            asset_id: Optional[str],
            reading_timestamp: Any = None,
            completion_date: Any = None,
            hours_reading: Any = None,
            kilometers_reading: Any = None,
    ):
        self.asset_id = asset_id
        self.reading_timestamp = reading_timestamp
        self.completion_date = completion_date
        self.hours_reading = hours_reading
        self.kilometers_reading = kilometers_reading

    @property
    def timestamp(self) -> Optional[datetime]:
        """Reading timestamp, falling back to the completion date."""
        return parse_timestamp(self.reading_timestamp) or parse_timestamp(self.completion_date)

    def to_event(self, unit: MaintenanceUnit) -> Optional[MeterReadingEvent]:
        raw = self.kilometers_reading if unit is MaintenanceUnit.KILOMETERS else self.hours_reading
        if raw is None:
            return None
        return make_event(self.asset_id, self.timestamp, raw, ReadingSource.INSPECTION_CHECKLIST)
