"""Cost and usage figures supplied by the external aggregation service."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional

import requests

from .config import ReportConfig
from .reading import FuelTransaction, parse_value

logger = logging.getLogger(__name__)


@dataclass
class CostFigures:
    """Per-asset financial and throughput figures for the period."""

    preventive_cost: float = 0.0
    corrective_cost: float = 0.0
    fuel_cost: float = 0.0
    fuel_liters: float = 0.0
    delivery_count: float = 0.0
    delivered_volume: float = 0.0

    @property
    def maintenance_cost(self) -> float:
        return self.preventive_cost + self.corrective_cost

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "CostFigures":
        """Build from the aggregation service's field names; missing means 0."""
        def number(key):
            return parse_value(data.get(key)) or 0.0

        return cls(
            preventive_cost=number("preventive_cost"),
            corrective_cost=number("corrective_cost"),
            fuel_cost=number("diesel_cost"),
            fuel_liters=number("diesel_liters"),
            delivery_count=number("remisiones_count"),
            delivered_volume=number("concrete_m3"),
        )


def parse_cost_rows(rows: Optional[Iterable[Mapping[str, Any]]]) -> Dict[str, CostFigures]:
    """Key aggregation rows by asset id, skipping rows without one."""
    figures = {}
    for row in rows or []:
        if not isinstance(row, Mapping):
            continue
        asset_id = row.get("id") or row.get("asset_id")
        if asset_id:
            figures[asset_id] = CostFigures.from_dict(row)
    return figures


class StaticCostSource:
    """Figures already present in the snapshot."""

    def __init__(self, rows: Optional[List[Mapping[str, Any]]] = None):
        self._figures = parse_cost_rows(rows)

    def fetch(
        self,
        config: ReportConfig,
        business_unit_id: Optional[str] = None,
        plant_id: Optional[str] = None,
    ) -> Dict[str, CostFigures]:
        return dict(self._figures)


class CostAggregationClient:
    """
    HTTP client for the cost aggregation service.

    Called once per report. Any transport failure, timeout, error status or
    malformed body yields an empty result so the report can still be built.
    """

    def __init__(self, url: str, timeout: Optional[float] = None, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch(
        self,
        config: ReportConfig,
        business_unit_id: Optional[str] = None,
        plant_id: Optional[str] = None,
    ) -> Dict[str, CostFigures]:
        payload = {
            "dateFrom": config.date_from,
            "dateTo": config.date_to,
            "businessUnitId": business_unit_id,
            "plantId": plant_id,
            "hideZeroActivity": False,
        }
        timeout = self.timeout if self.timeout is not None else config.collaborator_timeout
        try:
            response = self.session.post(self.url, json=payload, timeout=timeout)
            response.raise_for_status()
            body = response.json()
        except requests.RequestException as e:
            logger.warning("Cost aggregation call to %s failed: %s", self.url, e)
            return {}
        except ValueError as e:
            logger.warning("Cost aggregation returned malformed JSON: %s", e)
            return {}

        if not isinstance(body, dict):
            logger.warning("Cost aggregation returned unexpected payload type %s", type(body).__name__)
            return {}
        rows = body.get("assets")
        if rows is not None and not isinstance(rows, list):
            logger.warning("Cost aggregation returned non-list assets field %s", type(rows).__name__)
            return {}
        return parse_cost_rows(rows)


def tally_fuel(
    transactions: Iterable[FuelTransaction],
    window_start: datetime,
    window_end: datetime,
    price_by_product: Optional[Mapping[str, float]] = None,
) -> Dict[str, CostFigures]:
    """
    Liters and cost of consumption transactions inside the window.

    Price is the transaction's unit cost, else the product's price per liter.
    """
    prices = price_by_product or {}
    figures: Dict[str, CostFigures] = {}
    for tx in transactions:
        if not tx.asset_id or not tx.is_consumption:
            continue
        ts = tx.timestamp
        if ts is None or not (window_start <= ts < window_end):
            continue
        liters = parse_value(tx.quantity_liters) or 0.0
        price = parse_value(tx.unit_cost) or prices.get(tx.product_id or "", 0.0)
        entry = figures.setdefault(tx.asset_id, CostFigures())
        entry.fuel_liters += liters
        entry.fuel_cost += liters * price
    return figures


def merge_figures(local: Optional[CostFigures], external: Optional[CostFigures]) -> CostFigures:
    """
    Combine the local fuel tally with the aggregation service's figures.

    Costs and throughput come from the service. Its fuel cost wins when
    non-zero; the local fuel volume wins unless it is zero.
    """
    local = local or CostFigures()
    if external is None:
        return CostFigures(fuel_cost=local.fuel_cost, fuel_liters=local.fuel_liters)
    return CostFigures(
        preventive_cost=external.preventive_cost,
        corrective_cost=external.corrective_cost,
        fuel_cost=external.fuel_cost or local.fuel_cost,
        fuel_liters=local.fuel_liters or external.fuel_liters,
        delivery_count=external.delivery_count,
        delivered_volume=external.delivered_volume,
    )
