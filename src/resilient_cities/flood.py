from dataclasses import dataclass

import numpy as np
from loguru import logger

from .config import DEFAULT_SETTINGS, Settings
from .grid import sample_grid
from .viewport import BoundingBox, Coordinate

COASTAL_LNG = 70.0  # |lng| beyond this counts as an ocean-facing band


@dataclass(frozen=True)
class FloodPoint:
    lat: float
    lng: float
    flood_risk: float  # 0–1
    elevation: float   # metres, relative


def coastal_risk(center: Coordinate) -> float:
    return 0.3 if abs(center.lng) > COASTAL_LNG else 0.1


def generate_flood_risk(
    bounds: BoundingBox,
    center: Coordinate,
    *,
    settings: Settings | None = None,
    rng=None,
) -> list[FloodPoint]:
    """
    Flood-risk points on a fine grid, keeping only cells above the inclusion threshold.

    Elevation oscillates with (degree-space) distance from the centre; low
    ground adds risk on top of the coastal baseline. The threshold is applied
    to the raw risk, the stored value is capped at 1.
    """
    settings = settings or DEFAULT_SETTINGS
    rng = rng if rng is not None else np.random.default_rng()

    lat, lng = sample_grid(bounds, settings.flood_step)
    n = len(lat)
    if n == 0:
        return []

    distance = np.hypot(lat - center.lat, lng - center.lng)
    elevation = 50 * np.sin(200 * distance) + np.asarray(rng.uniform(0, 20, n), dtype=float)
    raw = (
        coastal_risk(center)
        + np.maximum(0.0, (20 - elevation) / 30)
        + np.asarray(rng.uniform(0, 0.2, n), dtype=float)
    )

    keep = raw > settings.flood_threshold
    risk = np.minimum(raw, 1.0)

    logger.debug(f"flood layer: {int(keep.sum())}/{n} grid points above {settings.flood_threshold}")
    return [
        FloodPoint(lat=float(a), lng=float(b), flood_risk=float(r), elevation=float(e))
        for a, b, r, e in zip(lat[keep], lng[keep], risk[keep], elevation[keep])
    ]
