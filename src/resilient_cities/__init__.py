"""Synthetic climate layers (temperature, flood risk, buildings) for a map viewport."""
from .analytics import AnalyticsSummary, summarize
from .buildings import Building, BuildingType, generate_buildings
from .climate import base_temperature
from .config import Settings, load_settings
from .coordinator import ClimateDataset, DataCoordinator, RefreshFailed
from .flood import FloodPoint, generate_flood_risk
from .geocoding import Location, NominatimResolver, StaticLocationResolver
from .temperature import TemperaturePoint, generate_temperature
from .viewport import BoundingBox, Coordinate, Viewport, derive_bounds, set_viewport

__version__ = "0.1.0"
