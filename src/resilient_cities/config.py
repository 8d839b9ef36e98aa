import os
from dataclasses import dataclass

from dotenv import load_dotenv
from loguru import logger


@dataclass(frozen=True)
class Settings:
    """Tunable constants for grid sampling, building placement and aggregation."""

    temperature_step: float = 0.008   # degrees between temperature samples
    flood_step: float = 0.006         # finer grid for flood risk
    bounds_margin: float = 0.05       # half-width of the viewport box, degrees
    building_count: int = 60
    flood_threshold: float = 0.15     # raw risk a flood point must exceed
    flood_cell_area_km2: float = 0.01  # nominal area per retained flood point
    default_zoom: int = 12

    def __post_init__(self):
        for name in ("temperature_step", "flood_step", "bounds_margin", "flood_cell_area_km2"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive, got {getattr(self, name)}")
        if self.building_count < 0:
            raise ValueError(f"building_count must be >= 0, got {self.building_count}")


DEFAULT_SETTINGS = Settings()

# env var -> (field, parser)
_ENV_FIELDS = {
    "RC_TEMPERATURE_STEP": ("temperature_step", float),
    "RC_FLOOD_STEP": ("flood_step", float),
    "RC_BOUNDS_MARGIN": ("bounds_margin", float),
    "RC_BUILDING_COUNT": ("building_count", int),
    "RC_FLOOD_THRESHOLD": ("flood_threshold", float),
    "RC_FLOOD_CELL_AREA_KM2": ("flood_cell_area_km2", float),
    "RC_DEFAULT_ZOOM": ("default_zoom", int),
}


def load_settings(env_file: str | None = None) -> Settings:
    """
    Build Settings from a .env file (if present) and RC_* environment variables.
    Unset variables keep the defaults.
    """
    load_dotenv(env_file)
    overrides = {}
    for var, (field, parse) in _ENV_FIELDS.items():
        raw = os.environ.get(var)
        if raw is None or raw.strip() == "":
            continue
        try:
            overrides[field] = parse(raw)
        except ValueError as e:
            raise ValueError(f"{var}={raw!r} is not a valid {parse.__name__}") from e
    if overrides:
        logger.debug(f"Settings overrides from environment: {overrides}")
    return Settings(**overrides)
