from dataclasses import dataclass
from enum import Enum

import numpy as np
from loguru import logger

from .config import DEFAULT_SETTINGS, Settings
from .viewport import BoundingBox, Coordinate

MIN_HEIGHT = 10.0
COMMERCIAL_HEIGHT = 50.0  # taller than this -> commercial
FIRST_YEAR = 1950
YEAR_SPAN = 70


class BuildingType(str, Enum):
    COMMERCIAL = "commercial"
    RESIDENTIAL = "residential"


@dataclass(frozen=True)
class Building:
    id: int
    lat: float
    lng: float
    height: float            # m
    width: float             # m
    depth: float             # m
    carbon_footprint: float  # t CO2
    energy_efficiency: float  # 0–1
    building_type: BuildingType
    year_built: int


def generate_buildings(
    bounds: BoundingBox,
    center: Coordinate,
    *,
    settings: Settings | None = None,
    rng=None,
) -> list[Building]:
    """
    A fixed number of buildings scattered uniformly inside `bounds`.

    The count does not scale with the box area. Ids are batch indices and do
    not carry over between calls.
    """
    settings = settings or DEFAULT_SETTINGS
    rng = rng if rng is not None else np.random.default_rng()

    n = settings.building_count
    if n == 0 or not bounds.is_valid:
        return []

    def draw(low, high):
        return np.asarray(rng.uniform(low, high, n), dtype=float)

    lat = bounds.south + draw(0, 1) * (bounds.north - bounds.south)
    lng = bounds.west + draw(0, 1) * (bounds.east - bounds.west)
    height = np.maximum(MIN_HEIGHT, 120 - draw(0, 80))
    width = 15 + draw(0, 25)
    depth = 15 + draw(0, 25)
    carbon = 0.8 * height + draw(0, 15)
    efficiency = draw(0, 1)
    year = FIRST_YEAR + np.floor(draw(0, YEAR_SPAN)).astype(int)

    logger.debug(f"building layer: {n} buildings")
    return [
        Building(
            id=i,
            lat=float(lat[i]),
            lng=float(lng[i]),
            height=float(height[i]),
            width=float(width[i]),
            depth=float(depth[i]),
            carbon_footprint=float(carbon[i]),
            energy_efficiency=float(efficiency[i]),
            building_type=(
                BuildingType.COMMERCIAL if height[i] > COMMERCIAL_HEIGHT else BuildingType.RESIDENTIAL
            ),
            year_built=int(year[i]),
        )
        for i in range(n)
    ]
