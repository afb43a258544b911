"""GridNode - A positioned, elevation-tagged vertex of the terrain grid.

Nodes are identified by their (col, row) position in the grid, which is
unique within one build. Row 0 is the southern edge, column 0 the western.
"""

from dataclasses import dataclass
from math import isfinite
from typing import Optional

from walkroute_planner.model.geo_point import GeoPoint

NodeId = tuple[int, int]


@dataclass(frozen=True)
class GridNode:
    """A vertex of the terrain grid.

    Attributes:
        id: (col, row) grid position
        location: Geographic position of the grid cell
        elevation_m: Elevation in meters (providers in feet are converted on build)
        terrain: Optional terrain classification, not used for routing

    Example:
        node = GridNode(id=(0, 0), location=GeoPoint(lon=-111.65, lat=35.19), elevation_m=2100.0)
    """

    id: NodeId
    location: GeoPoint
    elevation_m: float
    terrain: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if not isfinite(self.elevation_m):
            raise ValueError(f"GridNode {self.id} cannot have non-finite elevation {self.elevation_m}")

    @property
    def col(self) -> int:
        return self.id[0]

    @property
    def row(self) -> int:
        return self.id[1]

    @property
    def lon(self) -> float:
        """Longitude delegated from location."""
        return self.location.lon

    @property
    def lat(self) -> float:
        """Latitude delegated from location."""
        return self.location.lat

    def __repr__(self) -> str:
        return f"GridNode({self.col}/{self.row}, {self.location}, elev={self.elevation_m:.1f}m)"
