"""YAML snapshot loading: the engine's view of the backing data store."""

import json
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import yaml

from .asset import Asset, MaintenanceUnit
from .errors import StoreUnavailableError
from .interval import EquipmentModel, MaintenanceInterval
from .organization import BusinessUnit, Plant, PlantAssignment
from .reading import ChecklistReading, FuelTransaction
from .service_record import ServiceRecord

logger = logging.getLogger(__name__)

SnapshotObject = Union[
    Asset, Plant, BusinessUnit, EquipmentModel, MaintenanceInterval, ServiceRecord,
    FuelTransaction, ChecklistReading, PlantAssignment, dict,
]


def _parse_object(dct: Dict[str, Any]) -> SnapshotObject:
    """Parse dictionary into appropriate object type."""
    # Interval (inside a model's 'intervals' list)
    if "intervalValue" in dct:
        return MaintenanceInterval(
            dct["id"],
            dct["intervalValue"],
            dct.get("name"),
            MaintenanceUnit.parse(dct["type"]) if dct.get("type") else None,
            dct.get("modelId"),
            dct.get("maintenanceCategory"),
            dct.get("isRecurring"),
            dct.get("isFirstCycleOnly"),
        )
    # Equipment model
    elif "intervals" in dct:
        return EquipmentModel(
            dct["id"],
            dct.get("name"),
            MaintenanceUnit.parse(dct.get("maintenanceUnit")),
            dct["intervals"],
        )
    # Asset (inside a plant's 'assets' list)
    elif "code" in dct and "modelId" in dct:
        return Asset(
            dct["id"],
            dct["code"],
            dct.get("name"),
            None,
            dct["modelId"],
            current_hours=dct.get("currentHours"),
            current_kilometers=dct.get("currentKilometers"),
        )
    elif "assets" in dct:
        return Plant(dct["id"], dct.get("name"), dct["assets"])
    elif "plants" in dct:
        return BusinessUnit(dct["id"], dct.get("name"), dct["plants"])
    # Maintenance history entry
    elif "assetId" in dct and "intervalId" in dct:
        return ServiceRecord(
            dct["assetId"],
            dct["intervalId"],
            dct["date"],
            dct.get("hours"),
            dct.get("kilometers"),
            dct.get("type", "preventive"),
        )
    elif "transactionDate" in dct:
        return FuelTransaction(
            dct.get("assetId"),
            dct["transactionDate"],
            dct.get("transactionType", "consumption"),
            dct.get("quantityLiters"),
            dct.get("unitCost"),
            dct.get("productId"),
            dct.get("hoursReading"),
            dct.get("kilometersReading"),
            dct.get("isTransfer"),
        )
    elif "readingTimestamp" in dct or "completionDate" in dct:
        return ChecklistReading(
            dct.get("assetId"),
            dct.get("readingTimestamp"),
            dct.get("completionDate"),
            dct.get("hoursReading"),
            dct.get("kilometersReading"),
        )
    elif "assignedAt" in dct:
        return PlantAssignment(dct["assetId"], dct["plantId"], dct["assignedAt"])
    else:
        # Return dict as-is for unknown structures (cost rows, products, top level)
        return dct


def _json_default(value: Any) -> str:
    """YAML may yield date objects; keep them as ISO strings."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    raise TypeError(f"Unsupported snapshot value: {value!r}")


class SnapshotStore:
    """In-memory snapshot of assets, catalog, history, and readings."""

    def __init__(
        self,
        business_units: Optional[List[BusinessUnit]] = None,
        models: Optional[List[EquipmentModel]] = None,
        history: Optional[List[ServiceRecord]] = None,
        fuel_transactions: Optional[List[FuelTransaction]] = None,
        checklist_readings: Optional[List[ChecklistReading]] = None,
        plant_assignments: Optional[List[PlantAssignment]] = None,
        fuel_products: Optional[List[Dict[str, Any]]] = None,
        cost_figures: Optional[List[Dict[str, Any]]] = None,
    ):
        self.business_units = business_units or []
        self.models = {m.id: m for m in (models or [])}
        self.history = history or []
        self.fuel_transactions = fuel_transactions or []
        self.checklist_readings = checklist_readings or []
        self.plant_assignments = plant_assignments or []
        self.fuel_products = fuel_products or []
        self.cost_figures = cost_figures or []

        self._plants: Dict[str, Plant] = {}
        self._assets: Dict[str, Asset] = {}
        for bu in self.business_units:
            for plant in bu.plants:
                self._plants[plant.id] = plant
                for asset in plant.assets:
                    model = self.models.get(asset.model_id)
                    if model is not None:
                        asset.maintenance_unit = model.maintenance_unit
                    self._assets[asset.id] = asset

    def fetch_assets(
        self, business_unit_id: Optional[str] = None, plant_id: Optional[str] = None
    ) -> List[Asset]:
        """Assets in business unit / plant order, optionally by current plant."""
        assets = []
        for asset in self._assets.values():
            if plant_id and asset.plant_id != plant_id:
                continue
            if business_unit_id:
                plant = self._plants.get(asset.plant_id)
                if plant is None or plant.business_unit_id != business_unit_id:
                    continue
            assets.append(asset)
        return assets

    def get_asset(self, asset_id: str) -> Optional[Asset]:
        return self._assets.get(asset_id)

    def get_plant(self, plant_id: Optional[str]) -> Optional[Plant]:
        return self._plants.get(plant_id) if plant_id else None

    def fetch_intervals(self, model_ids: Iterable[str]) -> Dict[str, List[MaintenanceInterval]]:
        """Interval catalogs keyed by model id."""
        wanted = set(model_ids)
        return {m.id: list(m.intervals) for m in self.models.values() if m.id in wanted}

    def fetch_service_history(self, asset_ids: Iterable[str]) -> Dict[str, List[ServiceRecord]]:
        """Preventive records with an interval reference, keyed by asset id."""
        wanted = set(asset_ids)
        by_asset: Dict[str, List[ServiceRecord]] = {}
        for record in self.history:
            if record.asset_id in wanted and record.is_preventive and record.interval_id:
                by_asset.setdefault(record.asset_id, []).append(record)
        return by_asset

    def fetch_fuel_transactions(
        self, asset_ids: Iterable[str], start: datetime, end: datetime
    ) -> List[FuelTransaction]:
        wanted = set(asset_ids)
        return [
            tx for tx in self.fuel_transactions
            if tx.asset_id in wanted and tx.timestamp is not None and start <= tx.timestamp < end
        ]

    def fetch_checklist_readings(
        self, asset_ids: Iterable[str], start: datetime, end: datetime
    ) -> List[ChecklistReading]:
        wanted = set(asset_ids)
        return [
            c for c in self.checklist_readings
            if c.asset_id in wanted and c.timestamp is not None and start <= c.timestamp < end
        ]

    def fuel_prices(self) -> Dict[str, float]:
        """Price per liter keyed by fuel product id."""
        prices = {}
        for product in self.fuel_products:
            if product.get("id") is not None:
                prices[product["id"]] = float(product.get("pricePerLiter") or 0)
        return prices

    def resolve_plant_at(self, asset_id: str, ts: datetime) -> Optional[str]:
        """
        Plant an asset belonged to at `ts`.

        Uses the latest assignment at or before `ts`. Assets with no
        assignment history are attributed to their current plant.
        """
        assignments = [
            a for a in self.plant_assignments
            if a.asset_id == asset_id and a.assigned_at is not None
        ]
        if not assignments:
            asset = self._assets.get(asset_id)
            return asset.plant_id if asset else None
        earlier = [a for a in assignments if a.assigned_at <= ts]
        if not earlier:
            return None
        return max(earlier, key=lambda a: a.assigned_at).plant_id


def load_snapshot(filename: Union[str, Path]) -> SnapshotStore:
    """
    Load a store snapshot from a YAML file.

    Raises StoreUnavailableError if the file cannot be read or parsed.
    """
    try:
        with open(filename, "rb") as fp:
            raw = yaml.load(fp, Loader=yaml.SafeLoader) or {}
        json_data = json.dumps(raw, indent=4, default=_json_default)
        data = json.loads(json_data, object_hook=_parse_object)
        store = SnapshotStore(
            data.get("businessUnits"),
            data.get("models"),
            data.get("maintenanceHistory"),
            data.get("fuelTransactions"),
            data.get("checklistReadings"),
            data.get("plantAssignments"),
            data.get("fuelProducts"),
            data.get("costFigures"),
        )
    except (OSError, yaml.YAMLError) as e:
        raise StoreUnavailableError(f"Cannot read snapshot {filename}: {e}") from e
    except (KeyError, TypeError, AttributeError) as e:
        raise StoreUnavailableError(f"Malformed snapshot {filename}: {e}") from e
    logger.info(
        "Loaded snapshot %s: %d assets, %d models",
        filename, len(store.fetch_assets()), len(store.models),
    )
    return store
