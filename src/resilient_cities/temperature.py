from dataclasses import dataclass

import numpy as np
from loguru import logger

from .climate import base_temperature
from .config import DEFAULT_SETTINGS, Settings
from .grid import sample_grid
from .viewport import BoundingBox, Coordinate


@dataclass(frozen=True)
class TemperaturePoint:
    lat: float
    lng: float
    temperature: float  # °C
    heat_index: float   # °C


def generate_temperature(
    bounds: BoundingBox,
    center: Coordinate,
    *,
    settings: Settings | None = None,
    rng=None,
) -> list[TemperaturePoint]:
    """
    Surface temperature on a regular grid over `bounds`.

    The latitude band of the centre sets the baseline; a sine/cosine ripple
    around the centre plus uniform noise gives local variation. `rng` is any
    object with numpy's ``Generator.uniform(low, high, size)``.
    """
    settings = settings or DEFAULT_SETTINGS
    rng = rng if rng is not None else np.random.default_rng()

    lat, lng = sample_grid(bounds, settings.temperature_step)
    n = len(lat)
    if n == 0:
        return []

    temp = (
        base_temperature(center.lat)
        + 3 * np.sin(100 * (lat - center.lat))
        + 2 * np.cos(100 * (lng - center.lng))
        + np.asarray(rng.uniform(0, 4, n), dtype=float)
    )
    heat_index = temp + np.asarray(rng.uniform(0, 5, n), dtype=float)

    logger.debug(f"temperature layer: {n} grid points")
    return [
        TemperaturePoint(lat=float(a), lng=float(b), temperature=float(t), heat_index=float(h))
        for a, b, t, h in zip(lat, lng, temp, heat_index)
    ]
