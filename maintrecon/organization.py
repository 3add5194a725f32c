"""Organizational hierarchy: business units, plants, and assignment history."""

from datetime import datetime
from typing import List, Optional

from .asset import Asset
from .reading import parse_timestamp


class Plant:
    """A plant and the assets currently assigned to it."""

    def __init__(
        self,
        id: str,
        name: Optional[str] = None,
        assets: Optional[List[Asset]] = None,
        business_unit_id: Optional[str] = None,
    ):
        self.id = id
        self.name = name
        self.business_unit_id = business_unit_id
        self.assets = assets or []
        for asset in self.assets:
            asset.plant_id = id


class BusinessUnit:
    """A business unit grouping several plants."""

    def __init__(self, id: str, name: Optional[str] = None, plants: Optional[List[Plant]] = None):
        self.id = id
        self.name = name
        self.plants = plants or []
        for plant in self.plants:
            plant.business_unit_id = id


class PlantAssignment:
    """An asset moved to a plant at a point in time."""

    def __init__(self, asset_id: str, plant_id: str, assigned_at):
        self.asset_id = asset_id
        self.plant_id = plant_id
        self.assigned_at: Optional[datetime] = parse_timestamp(assigned_at)
