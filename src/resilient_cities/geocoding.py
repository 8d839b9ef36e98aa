from dataclasses import dataclass

from geopy.extra.rate_limiter import RateLimiter
from geopy.geocoders import Nominatim
from loguru import logger

from .viewport import Coordinate


@dataclass(frozen=True)
class Location:
    lat: float
    lng: float
    name: str

    @property
    def coordinate(self) -> Coordinate:
        return Coordinate(self.lat, self.lng)


CITIES = {
    "new york": Location(40.7589, -73.9851, "New York City, NY"),
    "san francisco": Location(37.7749, -122.4194, "San Francisco, CA"),
    "chicago": Location(41.8781, -87.6298, "Chicago, IL"),
    "miami": Location(25.7617, -80.1918, "Miami, FL"),
    "seattle": Location(47.6062, -122.3321, "Seattle, WA"),
    "boston": Location(42.3601, -71.0589, "Boston, MA"),
    "los angeles": Location(34.0522, -118.2437, "Los Angeles, CA"),
    "denver": Location(39.7392, -104.9903, "Denver, CO"),
}

DEFAULT_LOCATION = CITIES["new york"]


class StaticLocationResolver:
    """Name lookup against a fixed table of demo cities."""

    def __init__(self, locations: dict[str, Location] | None = None):
        self.locations = dict(CITIES if locations is None else locations)

    def search(self, text: str) -> list[Location]:
        key = (text or "").strip().lower()
        # every key contains "", so a blank query would match the first city
        if not key:
            return []
        # a key match ("york", "new york city") wins outright
        for name, loc in self.locations.items():
            if key in name or name in key:
                return [loc]
        return [loc for loc in self.locations.values() if key in loc.name.lower()]


class NominatimResolver:
    """Free-text lookup through OpenStreetMap's Nominatim, rate limited."""

    def __init__(self, user_agent: str = "resilient-cities", limit: int = 5,
                 min_delay_seconds: float = 1.1, geolocator=None):
        self.geolocator = geolocator or Nominatim(user_agent=user_agent)
        self.limit = limit
        self._geocode = RateLimiter(self.geolocator.geocode, min_delay_seconds=min_delay_seconds)

    def search(self, text: str) -> list[Location]:
        query = (text or "").strip()
        if not query:
            return []
        found = self._geocode(query, exactly_one=False, limit=self.limit)
        if not found:
            logger.info(f"Nominatim: no match for {query!r}")
            return []
        return [Location(float(r.latitude), float(r.longitude), r.address) for r in found]
