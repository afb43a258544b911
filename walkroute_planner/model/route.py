"""Route - Result of one planning call.

Routes are created fresh per call and never shared or mutated afterwards.
"""

from dataclasses import dataclass

from walkroute_planner.model.geo_point import GeoPoint
from walkroute_planner.model.grid_node import NodeId


@dataclass(frozen=True)
class Route:
    """A planned walking route, always oriented from the caller's start to end.

    Attributes:
        path: True start, positions of the traversed grid nodes, true end
        node_ids: Traversed grid node ids, start anchor first
        total_distance_m: Sum of traversed edge distances
        total_calories: Sum of directional edge calories
        eta_s: Walking time for total_distance_m at the fixed walking speed
        elevation_delta_m: End anchor elevation minus start anchor elevation
    """

    path: tuple[GeoPoint, ...]
    node_ids: tuple[NodeId, ...]
    total_distance_m: float
    total_calories: float
    eta_s: float
    elevation_delta_m: float

    @property
    def start(self) -> GeoPoint:
        return self.path[0]

    @property
    def end(self) -> GeoPoint:
        return self.path[-1]

    @property
    def eta_min(self) -> float:
        """ETA in minutes."""
        return self.eta_s / 60

    def __repr__(self) -> str:
        return (
            f"Route({len(self.node_ids)} nodes, {self.total_distance_m:.0f}m, "
            f"{self.total_calories:.1f}kcal, {self.eta_min:.1f}min, {self.elevation_delta_m:+.1f}m)"
        )


@dataclass(frozen=True)
class RouteDiagnostics:
    """Phase timings of one route query, for observability only.

    Attributes:
        bounding_box_ms: Bounding box computation
        grid_build_ms: Whole grid build including elevation fetch
        elevation_fetch_ms: Elevation batch lookup alone
        search_ms: Shortest-path search and reconstruction
        node_count: Nodes in the built graph
        edge_count: Directed edges in the built graph
    """

    bounding_box_ms: float
    grid_build_ms: float
    elevation_fetch_ms: float
    search_ms: float
    node_count: int
    edge_count: int

    @property
    def total_ms(self) -> float:
        return self.bounding_box_ms + self.grid_build_ms + self.search_ms
