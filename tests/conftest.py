import itertools

import numpy as np
import pytest

from resilient_cities.viewport import Coordinate, derive_bounds

NYC = Coordinate(40.7589, -73.9851)


class SequenceRandom:
    """Random source replaying fixed fractions in [0, 1); uniform() scales them to [low, high)."""

    def __init__(self, fractions):
        self._it = itertools.cycle(fractions)
        self.calls = []

    def uniform(self, low=0.0, high=1.0, size=None):
        self.calls.append((low, high, size))
        n = 1 if size is None else size
        u = np.array([next(self._it) for _ in range(n)], dtype=float)
        out = low + u * (high - low)
        return out if size is not None else float(out[0])


@pytest.fixture
def nyc():
    return NYC


@pytest.fixture
def nyc_bounds():
    return derive_bounds(NYC, 0.05)
