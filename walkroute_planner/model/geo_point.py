"""GeoPoint - The fundamental geometry atom for route planning.

A GeoPoint is a single WGS84 coordinate. It is hashable, so elevation
providers key their batch results by it.
"""

from dataclasses import dataclass
from math import isfinite

from walkroute_planner.core.geo_calculator import GeoCalculator
from walkroute_planner.errors import InvalidInputError


@dataclass(frozen=True)
class GeoPoint:
    """A geographic position in decimal degrees.

    Attributes:
        lon: Longitude in decimal degrees (WGS84)
        lat: Latitude in decimal degrees (WGS84)

    Example:
        point = GeoPoint(lon=-111.65, lat=35.19)
    """

    lon: float
    lat: float

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if not (isfinite(self.lon) and isfinite(self.lat)):
            raise InvalidInputError(f"GeoPoint coordinates must be finite, got ({self.lon}, {self.lat})")

    @property
    def lat_lon(self) -> tuple[float, float]:
        """Return (lat, lon) tuple - standard geographic order."""
        return (self.lat, self.lon)

    @property
    def lon_lat(self) -> tuple[float, float]:
        """Return (lon, lat) tuple - GeoJSON order."""
        return (self.lon, self.lat)

    def distance_to(self, other: "GeoPoint") -> float:
        """Calculate haversine distance to another point in meters."""
        return GeoCalculator.haversine_distance_m(
            lat1=self.lat,
            lon1=self.lon,
            lat2=other.lat,
            lon2=other.lon,
        )

    def is_east_of(self, other: "GeoPoint") -> bool:
        """True if this point has a strictly larger longitude than other."""
        return self.lon > other.lon

    def __repr__(self) -> str:
        return f"GeoPoint(lon={self.lon:.6f}, lat={self.lat:.6f})"
