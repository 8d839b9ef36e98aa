import asyncio
from dataclasses import dataclass, field, replace
from functools import partial

from loguru import logger

from .analytics import AnalyticsSummary, summarize
from .buildings import Building, generate_buildings
from .config import DEFAULT_SETTINGS, Settings
from .flood import FloodPoint, generate_flood_risk
from .geocoding import DEFAULT_LOCATION, Location
from .temperature import TemperaturePoint, generate_temperature
from .viewport import Coordinate, Viewport, set_viewport

LAYERS = ("temperature", "buildings", "flood")


class RefreshFailed(RuntimeError):
    """A generation round failed; the previously published data is still in place."""


@dataclass(frozen=True)
class ClimateDataset:
    temperature: list[TemperaturePoint] = field(default_factory=list)
    buildings: list[Building] = field(default_factory=list)
    flood: list[FloodPoint] = field(default_factory=list)
    loading: bool = False


def summarize_dataset(dataset: ClimateDataset, *, settings: Settings | None = None) -> AnalyticsSummary:
    return summarize(dataset.temperature, dataset.buildings, dataset.flood, settings=settings)


class DataCoordinator:
    """
    Owns the current viewport and the published dataset + summary.

    `refresh` runs the three layer generators concurrently against one
    snapshot of the viewport and publishes them together. Each call gets a
    generation token; only the most recent call is allowed to publish, so a
    slow, superseded round can never overwrite newer data.
    """

    def __init__(self, settings: Settings | None = None, rng=None, generators: dict | None = None):
        # rng: None (fresh unseeded source per layer), a numpy Generator,
        # or a {layer: source} mapping
        if isinstance(rng, dict):
            unknown = set(rng) - set(LAYERS)
            if unknown:
                raise ValueError(f"Unknown layers: {sorted(unknown)}")
        self.settings = settings or DEFAULT_SETTINGS
        self.rng = rng
        self.generators = {
            "temperature": generate_temperature,
            "buildings": generate_buildings,
            "flood": generate_flood_risk,
        }
        if generators:
            unknown = set(generators) - set(LAYERS)
            if unknown:
                raise ValueError(f"Unknown layers: {sorted(unknown)}")
            self.generators.update(generators)

        self.viewport: Viewport = set_viewport(
            DEFAULT_LOCATION.coordinate, self.settings.default_zoom, self.settings.bounds_margin
        )
        self.dataset = ClimateDataset()
        self.summary = AnalyticsSummary()
        self._token = 0

    @property
    def loading(self) -> bool:
        return self.dataset.loading

    def set_viewport(self, center: Coordinate, zoom: int | None = None) -> Viewport:
        zoom = self.settings.default_zoom if zoom is None else zoom
        self.viewport = set_viewport(center, zoom, self.settings.bounds_margin)
        return self.viewport

    def _layer_sources(self) -> dict:
        """
        One random source per layer for this round.

        The layers draw from worker threads, so a single shared source would
        be consumed in scheduling order. A numpy Generator is split with
        `spawn`; a mapping gives each layer its own source; anything else is
        shared as is.
        """
        if self.rng is None:
            return dict.fromkeys(LAYERS)
        if isinstance(self.rng, dict):
            return {name: self.rng.get(name) for name in LAYERS}
        if hasattr(self.rng, "spawn"):
            return dict(zip(LAYERS, self.rng.spawn(len(LAYERS))))
        return dict.fromkeys(LAYERS, self.rng)

    async def select_location(self, location: Location, zoom: int | None = None) -> ClimateDataset:
        logger.info(f"Selected {location.name} ({location.lat:.4f}, {location.lng:.4f})")
        self.set_viewport(location.coordinate, zoom)
        return await self.refresh()

    async def refresh(self, viewport: Viewport | None = None) -> ClimateDataset:
        if viewport is not None:
            self.viewport = viewport
        snapshot = self.viewport
        self._token += 1
        token = self._token
        self.dataset = replace(self.dataset, loading=True)

        sources = self._layer_sources()
        calls = [
            partial(self.generators[name], snapshot.bounds, snapshot.center,
                    settings=self.settings, rng=sources[name])
            for name in LAYERS
        ]
        try:
            results = await asyncio.gather(*(asyncio.to_thread(call) for call in calls))
        except Exception as e:
            if token == self._token:
                self.dataset = replace(self.dataset, loading=False)
            logger.exception(f"Refresh #{token} failed; keeping previous data")
            raise RefreshFailed(f"refresh #{token} failed: {e}") from e

        temperature, buildings, flood = results
        dataset = ClimateDataset(temperature=temperature, buildings=buildings, flood=flood)
        summary = summarize(temperature, buildings, flood, settings=self.settings)

        if token != self._token:
            logger.warning(f"Refresh #{token} superseded by #{self._token}; not published")
            return dataset

        self.dataset = dataset
        self.summary = summary
        logger.info(
            f"Refresh #{token}: {len(temperature)} temperature, {len(flood)} flood, "
            f"{len(buildings)} buildings"
        )
        return dataset
