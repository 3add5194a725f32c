"""Asset class for equipment identification and counters."""

from enum import Enum
from typing import Optional


class MaintenanceUnit(Enum):
    """Counter a model's maintenance schedule is expressed in."""

    HOURS = "hours"
    KILOMETERS = "kilometers"

    @property
    def symbol(self) -> str:
        return "h" if self is MaintenanceUnit.HOURS else "km"

    @classmethod
    def parse(cls, value: Optional[str]) -> "MaintenanceUnit":
        """Parse a unit name, defaulting to hours when missing."""
        if not value:
            return cls.HOURS
        normalized = str(value).strip().lower()
        if normalized in ("kilometers", "kilometres", "km", "distance"):
            return cls.KILOMETERS
        return cls.HOURS


class Asset:
    """A piece of equipment with its current cumulative counters."""

    def __init__(
        self,
        id: str,
        code: str,
        name: Optional[str] = None,
        plant_id: Optional[str] = None,
        model_id: Optional[str] = None,
        maintenance_unit: MaintenanceUnit = MaintenanceUnit.HOURS,
        current_hours: Optional[float] = None,
        current_kilometers: Optional[float] = None,
    ):
        self.id = id
        self.code = code
        self.name = name
        self.plant_id = plant_id
        self.model_id = model_id
        self.maintenance_unit = maintenance_unit
        self.current_hours = current_hours or 0
        self.current_kilometers = current_kilometers or 0

    @property
    def current_value(self) -> float:
        """Current counter in the asset's maintenance unit."""
        if self.maintenance_unit is MaintenanceUnit.KILOMETERS:
            return self.current_kilometers
        return self.current_hours

    @property
    def display_name(self) -> str:
        """Human-readable asset name."""
        return f"{self.code} {self.name}" if self.name else self.code
