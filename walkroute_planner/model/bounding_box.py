"""BoundingBox - Axis-aligned search region in degree-space."""

from dataclasses import dataclass

from walkroute_planner.model.geo_point import GeoPoint


@dataclass(frozen=True)
class BoundingBox:
    """Rectangle spanned by four corner points.

    Attributes:
        top_left: (min_lon, max_lat)
        top_right: (max_lon, max_lat)
        bottom_left: (min_lon, min_lat)
        bottom_right: (max_lon, min_lat)
    """

    top_left: GeoPoint
    top_right: GeoPoint
    bottom_left: GeoPoint
    bottom_right: GeoPoint

    @classmethod
    def from_extents(cls, min_lon: float, min_lat: float, max_lon: float, max_lat: float) -> "BoundingBox":
        """Create box from its (west, south, east, north) extents."""
        return cls(
            top_left=GeoPoint(lon=min_lon, lat=max_lat),
            top_right=GeoPoint(lon=max_lon, lat=max_lat),
            bottom_left=GeoPoint(lon=min_lon, lat=min_lat),
            bottom_right=GeoPoint(lon=max_lon, lat=min_lat),
        )

    @property
    def min_lon(self) -> float:
        return self.bottom_left.lon

    @property
    def max_lon(self) -> float:
        return self.top_right.lon

    @property
    def min_lat(self) -> float:
        return self.bottom_left.lat

    @property
    def max_lat(self) -> float:
        return self.top_right.lat

    @property
    def width_deg(self) -> float:
        """Longitude extent in degrees."""
        return self.max_lon - self.min_lon

    @property
    def height_deg(self) -> float:
        """Latitude extent in degrees."""
        return self.max_lat - self.min_lat

    def contains(self, point: GeoPoint) -> bool:
        """True if point lies inside or on the border of the box."""
        return self.min_lon <= point.lon <= self.max_lon and self.min_lat <= point.lat <= self.max_lat

    def __repr__(self) -> str:
        return (
            f"BoundingBox(lon=[{self.min_lon:.6f}, {self.max_lon:.6f}], "
            f"lat=[{self.min_lat:.6f}, {self.max_lat:.6f}])"
        )
