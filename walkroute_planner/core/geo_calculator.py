"""Geodesic calculations on Earth's surface.

All calculations use a spherical Earth approximation (R = 6,371 km).
Adapted from http://www.movable-type.co.uk/scripts/latlong.html
"""

from math import atan2, cos, radians, sin, sqrt

from walkroute_planner.constants import CostConfig, GridConfig

# Earth's mean radius in meters
EARTH_RADIUS_M = CostConfig.EARTH_RADIUS_M


class GeoCalculator:
    """Static methods for geodesic calculations on Earth's surface.

    Coordinates are in decimal degrees (WGS84). Distances are in meters.
    """

    EARTH_RADIUS_M = EARTH_RADIUS_M

    @staticmethod
    def haversine_distance_m(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
        """Calculate great-circle distance between two points using Haversine formula.

        Args:
            lat1: Latitude of first point (decimal degrees)
            lon1: Longitude of first point (decimal degrees)
            lat2: Latitude of second point (decimal degrees)
            lon2: Longitude of second point (decimal degrees)

        Returns:
            Distance in meters.
        """
        dlat = radians(lat2 - lat1)
        dlon = radians(lon2 - lon1)
        a = sin(dlat / 2) ** 2 + cos(radians(lat1)) * cos(radians(lat2)) * sin(dlon / 2) ** 2
        return EARTH_RADIUS_M * 2 * atan2(sqrt(a), sqrt(1 - a))

    @staticmethod
    def meters_to_degree_steps(spacing_m: float) -> tuple[float, float]:
        """Convert a linear grid spacing into (lon_step, lat_step) in degrees.

        Uses the fixed meters-per-degree ratios from GridConfig; the longitude
        ratio is not corrected for latitude.
        """
        return (
            spacing_m / GridConfig.METERS_PER_DEGREE_LON,
            spacing_m / GridConfig.METERS_PER_DEGREE_LAT,
        )
