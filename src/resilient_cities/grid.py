import math

import numpy as np

from .viewport import BoundingBox

# keeps the last sample when the span is an exact multiple of the step
_EPS = 1e-6  # in steps


def grid_axis(start: float, stop: float, step: float) -> np.ndarray:
    """Samples start, start+step, ... up to and including stop."""
    if step <= 0:
        raise ValueError(f"grid step must be positive, got {step}")
    if stop < start:
        return np.empty(0)
    n = int(math.floor((stop - start) / step + _EPS)) + 1
    return start + step * np.arange(n)


def sample_grid(bounds: BoundingBox, step: float):
    """
    Flat (lat, lng) arrays for a regular grid over the box, latitude-major.
    Degenerate boxes give two empty arrays.
    """
    if not bounds.is_valid:
        return np.empty(0), np.empty(0)
    lats = grid_axis(bounds.south, bounds.north, step)
    lngs = grid_axis(bounds.west, bounds.east, step)
    lat_grid, lng_grid = np.meshgrid(lats, lngs, indexing="ij")
    return lat_grid.ravel(), lng_grid.ravel()
