"""MaintenanceInterval class for cyclic maintenance schedule entries."""
from typing import List, Optional

from .asset import MaintenanceUnit


class MaintenanceInterval:
    """A recurring maintenance task due at a usage count within a cycle."""

    def __init__(
            self,
            id: str,
            interval_value: float,
            name: Optional[str] = None,
            type: MaintenanceUnit = MaintenanceUnit.HOURS,
            model_id: Optional[str] = None,
            maintenance_category: Optional[str] = None,
            is_recurring: bool = True,
            is_first_cycle_only: bool = False,
    ):
        self.id = id
        self.interval_value = interval_value or 0
        self.name = name
        self.type = type
        self.model_id = model_id
        self.maintenance_category = maintenance_category
        self.is_recurring = True if is_recurring is None else is_recurring
        self.is_first_cycle_only = is_first_cycle_only or False

    @property
    def label(self) -> str:
        """Catalog name, or the magnitude with its unit symbol."""
        if self.name:
            return self.name
        return f"{self.interval_value:g} {self.type.symbol}"

    def can_cover(self, other: "MaintenanceInterval") -> bool:
        """
        Check whether performing this interval subsumes `other`.

        Requires the same unit, a magnitude at least as large, and the same
        maintenance category when both intervals define one. The timing
        condition is checked by the caller against the due point.
        """
        if self.type is not other.type:
            return False
        if self.maintenance_category and other.maintenance_category:
            if self.maintenance_category != other.maintenance_category:
                return False
        return self.interval_value >= other.interval_value


class EquipmentModel:
    """An equipment model and the interval catalog its assets follow."""

    def __init__(
            self,
            id: str,
            name: Optional[str] = None,
            maintenance_unit: MaintenanceUnit = MaintenanceUnit.HOURS,
            intervals: Optional[List[MaintenanceInterval]] = None,
    ):
        self.id = id
        self.name = name
        self.maintenance_unit = maintenance_unit
        self.intervals = intervals or []
        for interval in self.intervals:
            interval.model_id = id
            # Intervals without an explicit unit follow the model
            if interval.type is None:
                interval.type = maintenance_unit
