"""
Asset maintenance status and usage reconciliation.

This package provides the engine behind the asset maintenance summary:
- IntervalState / SkipReason: Status categories
- Asset, MaintenanceInterval, ServiceRecord: Input data
- Reading normalization, cross-source cleaning, and usage calculation
- IntervalCycleResolver: Due points and status per interval
- select_interval: The single interval to surface per asset
- build_report: One AssetMaintenanceSummary per in-scope asset
"""

from .status import IntervalState, SkipReason
from .asset import Asset, MaintenanceUnit
from .interval import EquipmentModel, MaintenanceInterval
from .service_record import ServiceRecord, ServiceType
from .reading import (
    ChecklistReading,
    FuelTransaction,
    MeterReadingEvent,
    Reading,
    ReadingSource,
)
from .errors import ReportError, StoreUnavailableError
from .config import ReportConfig, load_config
from .calculations import (
    PairContribution,
    calc_current_cycle,
    calc_due_value,
    check_status,
    pair_contribution,
)
from .normalizer import ReadingSeries, normalize_events
from .cleaning import (
    CorroboratedCleaner,
    UncorroboratedCleaner,
    clean_series,
    select_cleaner,
    validate_fuel_readings,
)
from .usage import calc_usage, find_baseline, trace_usage
from .cycle import CycleResolution, IntervalCycleResolver, IntervalStatus
from .selector import MaintenanceSelection, select_interval
from .collaborators import CostAggregationClient, CostFigures, StaticCostSource
from .loader import SnapshotStore, load_snapshot
from .summary import AssetMaintenanceSummary, build_report, resolve_maintenance

__all__ = [
    "IntervalState",
    "SkipReason",
    "Asset",
    "MaintenanceUnit",
    "EquipmentModel",
    "MaintenanceInterval",
    "ServiceRecord",
    "ServiceType",
    "ChecklistReading",
    "FuelTransaction",
    "MeterReadingEvent",
    "Reading",
    "ReadingSource",
    "ReportError",
    "StoreUnavailableError",
    "ReportConfig",
    "load_config",
    "PairContribution",
    "calc_current_cycle",
    "calc_due_value",
    "check_status",
    "pair_contribution",
    "ReadingSeries",
    "normalize_events",
    "CorroboratedCleaner",
    "UncorroboratedCleaner",
    "clean_series",
    "select_cleaner",
    "validate_fuel_readings",
    "calc_usage",
    "find_baseline",
    "trace_usage",
    "CycleResolution",
    "IntervalCycleResolver",
    "IntervalStatus",
    "MaintenanceSelection",
    "select_interval",
    "CostAggregationClient",
    "CostFigures",
    "StaticCostSource",
    "SnapshotStore",
    "load_snapshot",
    "AssetMaintenanceSummary",
    "build_report",
    "resolve_maintenance",
]
