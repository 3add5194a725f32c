"""Report assembly: one maintenance and usage summary per in-scope asset."""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, List, Optional, Tuple

from .asset import Asset, MaintenanceUnit
from .cleaning import clean_series
from .collaborators import CostFigures, StaticCostSource, merge_figures, tally_fuel
from .config import ReportConfig
from .cycle import CycleResolution, IntervalCycleResolver
from .interval import MaintenanceInterval
from .loader import SnapshotStore
from .normalizer import ReadingSeries, extract_events, normalize_events
from .selector import MaintenanceSelection, select_interval
from .service_record import ServiceRecord
from .status import IntervalState
from .usage import calc_usage

logger = logging.getLogger(__name__)


@dataclass
class AssetMaintenanceSummary:
    """Maintenance status, usage, and merged cost figures for one asset."""

    asset_id: str
    asset_code: str
    asset_name: Optional[str]
    plant_id: Optional[str]
    plant_name: Optional[str]
    maintenance_unit: MaintenanceUnit
    current_value: float
    interval_id: Optional[str] = None
    interval_name: Optional[str] = None
    interval_value: Optional[float] = None
    interval_state: Optional[IntervalState] = None
    due_value: Optional[float] = None
    overdue: Optional[float] = None
    remaining: Optional[float] = None
    last_service_date: Optional[str] = None
    last_service_value: Optional[float] = None
    last_service_interval_value: Optional[float] = None
    usage: float = 0.0
    fuel_liters: float = 0.0
    fuel_cost: float = 0.0
    preventive_cost: float = 0.0
    corrective_cost: float = 0.0
    delivery_count: float = 0.0
    delivered_volume: float = 0.0

    @property
    def maintenance_cost(self) -> float:
        return self.preventive_cost + self.corrective_cost

    def to_dict(self) -> Dict[str, Any]:
        return {
            "asset_id": self.asset_id,
            "asset_code": self.asset_code,
            "asset_name": self.asset_name,
            "plant_id": self.plant_id,
            "plant_name": self.plant_name,
            "maintenance_unit": self.maintenance_unit.value,
            "current_value": self.current_value,
            "interval_id": self.interval_id,
            "interval_name": self.interval_name,
            "interval_value": self.interval_value,
            "interval_state": self.interval_state.label if self.interval_state else None,
            "due_value": self.due_value,
            "overdue": self.overdue,
            "remaining": self.remaining,
            "last_service_date": self.last_service_date,
            "last_service_value": self.last_service_value,
            "last_service_interval_value": self.last_service_interval_value,
            "usage": self.usage,
            "fuel_liters": self.fuel_liters,
            "fuel_cost": self.fuel_cost,
            "preventive_cost": self.preventive_cost,
            "corrective_cost": self.corrective_cost,
            "maintenance_cost": self.maintenance_cost,
            "delivery_count": self.delivery_count,
            "delivered_volume": self.delivered_volume,
        }


def format_interval_name(selection: MaintenanceSelection, unit: MaintenanceUnit) -> Optional[str]:
    """
    Interval label, annotated with the cycle due point when it differs
    from the catalog value (i.e. past the first cycle).
    """
    if selection.interval_label is None:
        return None
    due = selection.due_value
    if due is None or due == selection.interval_value:
        return selection.interval_label
    status_text = "overdue at" if selection.state is IntervalState.OVERDUE else "due at"
    return f"{selection.interval_label} ({status_text} {round(due):,} {unit.symbol})"


def resolve_maintenance(
    asset: Asset,
    intervals: List[MaintenanceInterval],
    history: List[ServiceRecord],
    config: ReportConfig,
) -> Tuple[Optional[CycleResolution], MaintenanceSelection]:
    """Run the cycle resolver and selector for one asset."""
    resolver = IntervalCycleResolver(
        intervals,
        history,
        asset.maintenance_unit,
        near_due_threshold=config.near_due_threshold,
        far_future_threshold=config.far_future_threshold,
    )
    resolution = resolver.resolve(asset.current_value)
    if resolution is None:
        return None, MaintenanceSelection()
    return resolution, select_interval(resolution, resolver)


def summarize_asset(
    asset: Asset,
    plant_id: Optional[str],
    plant_name: Optional[str],
    intervals: List[MaintenanceInterval],
    history: List[ServiceRecord],
    series: Optional[ReadingSeries],
    figures: CostFigures,
    config: ReportConfig,
) -> AssetMaintenanceSummary:
    """Compute the full summary for one asset. Missing data never raises."""
    usage = None
    if series is not None:
        usage = calc_usage(clean_series(series, config), config)

    _, selection = resolve_maintenance(asset, intervals, history, config)

    return AssetMaintenanceSummary(
        asset_id=asset.id,
        asset_code=asset.code,
        asset_name=asset.name,
        plant_id=plant_id,
        plant_name=plant_name,
        maintenance_unit=asset.maintenance_unit,
        current_value=asset.current_value,
        interval_id=selection.interval_id,
        interval_name=format_interval_name(selection, asset.maintenance_unit),
        interval_value=selection.interval_value,
        interval_state=selection.state,
        due_value=selection.due_value,
        overdue=selection.overdue,
        remaining=selection.remaining,
        last_service_date=selection.last_service_date,
        last_service_value=selection.last_service_value,
        last_service_interval_value=selection.last_service_interval_value,
        usage=usage or 0.0,
        fuel_liters=figures.fuel_liters,
        fuel_cost=figures.fuel_cost,
        preventive_cost=figures.preventive_cost,
        corrective_cost=figures.corrective_cost,
        delivery_count=figures.delivery_count,
        delivered_volume=figures.delivered_volume,
    )


def attribute_assets(
    store: SnapshotStore,
    config: ReportConfig,
    business_unit_id: Optional[str] = None,
    plant_id: Optional[str] = None,
) -> List[Tuple[Asset, str]]:
    """
    In-scope assets paired with the plant they belonged to in the period.

    Attribution is resolved at the window start, falling back to the last
    instant of the window. Assets with no attribution are dropped.
    """
    last_instant = config.window_end - timedelta(microseconds=1)
    in_scope = []
    unattributed = 0
    for asset in store.fetch_assets():
        historical = store.resolve_plant_at(asset.id, config.window_start)
        if historical is None:
            historical = store.resolve_plant_at(asset.id, last_instant)
        if historical is None:
            unattributed += 1
            continue
        if plant_id and historical != plant_id:
            continue
        if business_unit_id:
            plant = store.get_plant(historical)
            if plant is None or plant.business_unit_id != business_unit_id:
                continue
        in_scope.append((asset, historical))
    if unattributed:
        logger.warning("Excluded %d assets with no plant attribution for the period", unattributed)
    return in_scope


def build_report(
    store: SnapshotStore,
    config: ReportConfig,
    cost_source=None,
    business_unit_id: Optional[str] = None,
    plant_id: Optional[str] = None,
) -> List[AssetMaintenanceSummary]:
    """
    Build the maintenance summary for every in-scope asset.

    All store reads happen up front, in bulk; per-asset work then runs on a
    thread pool and results keep the store's asset order. Store failures
    propagate; collaborator failures leave cost fields at zero.
    """
    logger.info("Building report for %s to %s", config.date_from, config.date_to)
    in_scope = attribute_assets(store, config, business_unit_id, plant_id)
    if not in_scope:
        return []

    asset_ids = [asset.id for asset, _ in in_scope]
    model_ids = {asset.model_id for asset, _ in in_scope if asset.model_id}
    intervals_by_model = store.fetch_intervals(model_ids)
    history_by_asset = store.fetch_service_history(asset_ids)
    fuel_transactions = store.fetch_fuel_transactions(asset_ids, config.extended_start, config.window_end)
    checklist_readings = store.fetch_checklist_readings(asset_ids, config.extended_start, config.window_end)

    unit_by_asset = {asset.id: asset.maintenance_unit for asset, _ in in_scope}
    events = extract_events(fuel_transactions, checklist_readings, unit_by_asset)
    series_by_asset = normalize_events(events, config.extended_start, config.window_end)

    local_fuel = tally_fuel(fuel_transactions, config.window_start, config.window_end, store.fuel_prices())
    source = cost_source if cost_source is not None else StaticCostSource(store.cost_figures)
    external = source.fetch(config, business_unit_id, plant_id)

    def summarize(item: Tuple[Asset, str]) -> AssetMaintenanceSummary:
        asset, historical_plant = item
        plant = store.get_plant(historical_plant)
        return summarize_asset(
            asset,
            historical_plant,
            plant.name if plant else None,
            intervals_by_model.get(asset.model_id or "", []),
            history_by_asset.get(asset.id, []),
            series_by_asset.get(asset.id),
            merge_figures(local_fuel.get(asset.id), external.get(asset.id)),
            config,
        )

    with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
        summaries = list(executor.map(summarize, in_scope))

    logger.info("Built %d asset summaries", len(summaries))
    return summaries
