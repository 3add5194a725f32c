"""ServiceRecord class for preventive maintenance history."""
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union

from .asset import MaintenanceUnit
from .reading import parse_timestamp

PREVENTIVE_SPELLINGS = frozenset({"preventive", "preventivo", "preventiva", "preventative"})
CORRECTIVE_SPELLINGS = frozenset({"corrective", "correctivo", "correctiva"})


class ServiceType(Enum):
    """Normalized maintenance record type."""

    PREVENTIVE = "preventive"
    CORRECTIVE = "corrective"
    OTHER = "other"

    @classmethod
    def parse(cls, value: Optional[str]) -> "ServiceType":
        """Match English or Spanish spellings, case-insensitively."""
        normalized = (value or "").strip().lower()
        if normalized in PREVENTIVE_SPELLINGS:
            return cls.PREVENTIVE
        if normalized in CORRECTIVE_SPELLINGS:
            return cls.CORRECTIVE
        return cls.OTHER


class ServiceRecord:
    """A record of maintenance performed on an asset."""

    def __init__(
            self,
            asset_id: str,
            interval_id: Optional[str],
            date: Union[str, date],
            hours: Optional[float] = None,
            kilometers: Optional[float] = None,
            type: Union[str, ServiceType, None] = ServiceType.PREVENTIVE,
    ):
        self.asset_id = asset_id
        self.interval_id = interval_id
        self.date = date if isinstance(date, str) else date.isoformat()
        # Comparable instant; unparseable dates sort first
        self.performed_at = parse_timestamp(self.date) or datetime.min
        self.hours = hours
        self.kilometers = kilometers
        self.type = type if isinstance(type, ServiceType) else ServiceType.parse(type)

    @property
    def is_preventive(self) -> bool:
        return self.type is ServiceType.PREVENTIVE

    def usage_value(self, unit: MaintenanceUnit) -> float:
        """Counter at service time in the given unit (0 when not recorded)."""
        value = self.kilometers if unit is MaintenanceUnit.KILOMETERS else self.hours
        return float(value) if value is not None else 0.0
