from dataclasses import dataclass

from shapely.geometry import Polygon


@dataclass(frozen=True)
class Coordinate:
    lat: float
    lng: float


@dataclass(frozen=True)
class BoundingBox:
    north: float
    south: float
    east: float
    west: float

    @property
    def is_valid(self) -> bool:
        return self.north > self.south and self.east > self.west

    def contains(self, lat: float, lng: float, tolerance: float = 0.0) -> bool:
        """Inclusive containment test; tolerance widens every edge by that many degrees."""
        return (
            self.south - tolerance <= lat <= self.north + tolerance
            and self.west - tolerance <= lng <= self.east + tolerance
        )

    def to_polygon(self) -> Polygon:
        # shapely wants (x, y) = (lng, lat)
        return Polygon([
            (self.west, self.south),
            (self.east, self.south),
            (self.east, self.north),
            (self.west, self.north),
        ])


@dataclass(frozen=True)
class Viewport:
    center: Coordinate
    zoom: int
    bounds: BoundingBox


def derive_bounds(center: Coordinate, margin: float) -> BoundingBox:
    """Square box (in lat/lng space, not metres) of half-width `margin` around center."""
    return BoundingBox(
        north=center.lat + margin,
        south=center.lat - margin,
        east=center.lng + margin,
        west=center.lng - margin,
    )


def set_viewport(center: Coordinate, zoom: int, margin: float) -> Viewport:
    return Viewport(center=center, zoom=zoom, bounds=derive_bounds(center, margin))
