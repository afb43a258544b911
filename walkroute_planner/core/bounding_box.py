"""Bounding box derivation from two route endpoints.

The raw min/max rectangle of two points degenerates into a sliver when they
are nearly axis-aligned. The shorter axis is therefore widened by one third
of the longer axis's extent on both sides, so the grid has room to detour.
"""

import logging
from math import isclose

from walkroute_planner.errors import InvalidInputError
from walkroute_planner.model.bounding_box import BoundingBox
from walkroute_planner.model.geo_point import GeoPoint

logger = logging.getLogger(__name__)


class BoundingBoxCalculator:
    """Builds the search region for a pair of endpoints.

    Example:
        box = BoundingBoxCalculator.from_endpoints(p1=start, p2=end)
    """

    EXPANSION_DIVISOR = 3

    @staticmethod
    def validate_endpoint(point: GeoPoint) -> None:
        """Reject coordinates outside the valid WGS84 range."""
        if not (-180.0 <= point.lon <= 180.0 and -90.0 <= point.lat <= 90.0):
            raise InvalidInputError(f"Endpoint {point} is outside valid lon/lat range")

    @staticmethod
    def from_endpoints(p1: GeoPoint, p2: GeoPoint) -> BoundingBox:
        """Compute the (possibly widened) rectangle enclosing both endpoints.

        Slope is |dlat / dlon|. Below 1 the latitude axis is widened, above 1
        the longitude axis; exactly 1 leaves the box as is. The widening is
        shorter_extent / 3 * (1 / slope), evaluated as longer_extent / 3 so
        near-degenerate slopes cannot overflow.
        Axis-aligned inputs never divide by zero: a vertical line (dlon == 0)
        widens longitude by |dlat| / 3, a horizontal one latitude by |dlon| / 3.

        Args:
            p1: First endpoint
            p2: Second endpoint

        Returns:
            BoundingBox containing both endpoints.

        Raises:
            InvalidInputError: If the points coincide or are out of range.
        """
        BoundingBoxCalculator.validate_endpoint(p1)
        BoundingBoxCalculator.validate_endpoint(p2)
        if p1 == p2:
            raise InvalidInputError(f"Start and end coincide at {p1}; bounding box would have zero area")

        min_lon, max_lon = min(p1.lon, p2.lon), max(p1.lon, p2.lon)
        min_lat, max_lat = min(p1.lat, p2.lat), max(p1.lat, p2.lat)
        delta_lon = abs(p2.lon - p1.lon)
        delta_lat = abs(p2.lat - p1.lat)
        divisor = BoundingBoxCalculator.EXPANSION_DIVISOR

        if delta_lon == 0:
            # Vertical line
            lon_pad = delta_lat / divisor
            min_lon -= lon_pad
            max_lon += lon_pad
        elif delta_lat == 0:
            # Horizontal line
            lat_pad = delta_lon / divisor
            min_lat -= lat_pad
            max_lat += lat_pad
        else:
            slope = delta_lat / delta_lon
            if isclose(slope, 1.0):
                pass
            elif slope < 1:
                lat_pad = delta_lon / divisor
                min_lat -= lat_pad
                max_lat += lat_pad
            else:
                lon_pad = delta_lat / divisor
                min_lon -= lon_pad
                max_lon += lon_pad

        box = BoundingBox.from_extents(
            min_lon=max(min_lon, -180.0),
            min_lat=max(min_lat, -90.0),
            max_lon=min(max_lon, 180.0),
            max_lat=min(max_lat, 90.0),
        )
        logger.debug(f"Bounding box for {p1} -> {p2}: {box}")
        return box
