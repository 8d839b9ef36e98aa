from dataclasses import dataclass
from typing import Sequence

from .buildings import Building
from .config import DEFAULT_SETTINGS, Settings
from .flood import FloodPoint
from .temperature import TemperaturePoint


@dataclass(frozen=True)
class AnalyticsSummary:
    avg_temperature: float = 0.0  # °C
    flood_risk_area: float = 0.0  # km²
    building_count: int = 0
    carbon_total: float = 0.0     # t CO2

    def display(self) -> dict:
        """Dashboard strings, rounded the way the metric tiles show them."""
        return {
            "Avg Temperature": f"{self.avg_temperature:.1f}°C",
            "Buildings Analyzed": self.building_count,
            "At-Risk Area": f"{self.flood_risk_area:.2f} km²",
            "Carbon Impact": f"{self.carbon_total:.0f}t CO₂",
        }


def summarize(
    temperature: Sequence[TemperaturePoint],
    buildings: Sequence[Building],
    flood: Sequence[FloodPoint],
    *,
    settings: Settings | None = None,
) -> AnalyticsSummary:
    """
    Scalar metrics for one generation round. Empty inputs give zeros.

    Flood area is a count proxy: each retained flood point stands for a fixed
    nominal cell area.
    """
    settings = settings or DEFAULT_SETTINGS
    avg = sum(p.temperature for p in temperature) / len(temperature) if temperature else 0.0
    return AnalyticsSummary(
        avg_temperature=avg,
        flood_risk_area=settings.flood_cell_area_km2 * len(flood),
        building_count=len(buildings),
        carbon_total=sum(b.carbon_footprint for b in buildings),
    )

