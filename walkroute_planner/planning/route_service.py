"""Route query surface.

High-level routing service:
- derives the bounding box for the two endpoints
- builds the terrain grid (one elevation batch)
- runs the shortest-path search
- reports phase timings separately from the Route value
"""

import logging
import threading
from dataclasses import dataclass
from time import perf_counter
from typing import Optional

from walkroute_planner.constants import GridConfig
from walkroute_planner.core.bounding_box import BoundingBoxCalculator
from walkroute_planner.model.geo_point import GeoPoint
from walkroute_planner.model.route import Route, RouteDiagnostics
from walkroute_planner.planning.grid_builder import GeoGridBuilder
from walkroute_planner.planning.route_planner import RoutePlanner
from walkroute_planner.providers.base import ElevationProvider, TerrainProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RoutePlan:
    """A Route together with the diagnostics of the query that produced it."""

    route: Route
    diagnostics: RouteDiagnostics


class RouteService:
    """Plans routes between arbitrary endpoints using one elevation provider.

    Each call builds its own grid; nothing is cached between calls.

    Example:
        service = RouteService(elevation_provider=EPQSElevationProvider(unit="ft"))
        plan = service.plan(start=GeoPoint(lon=-111.652, lat=35.198), end=GeoPoint(lon=-111.648, lat=35.201))
        print(plan.route, plan.diagnostics.total_ms)
    """

    def __init__(
        self,
        elevation_provider: ElevationProvider,
        terrain_provider: Optional[TerrainProvider] = None,
        spacing_m: float = GridConfig.NODE_SPACING_M,
        max_nodes: int = GridConfig.MAX_GRID_NODES,
    ) -> None:
        self.grid_builder = GeoGridBuilder(
            elevation_provider=elevation_provider,
            terrain_provider=terrain_provider,
            spacing_m=spacing_m,
            max_nodes=max_nodes,
        )

    def plan(
        self,
        start: GeoPoint,
        end: GeoPoint,
        cancel_event: Optional[threading.Event] = None,
    ) -> RoutePlan:
        """Plan the minimum-calorie route from start to end.

        1. Bounding box around both endpoints.
        2. Grid build with elevation batch and anchor resolution.
        3. Shortest-path search and route aggregation.

        Raises:
            InvalidInputError, ProviderError, GridConstructionError,
            NodeResolutionError, RouteNotFoundError
        """
        logger.info(f"Received routing request {start} -> {end}")

        t0 = perf_counter()
        bbox = BoundingBoxCalculator.from_endpoints(p1=start, p2=end)
        t1 = perf_counter()

        grid = self.grid_builder.build(bbox=bbox, start=start, end=end, cancel_event=cancel_event)
        t2 = perf_counter()

        route = RoutePlanner(graph=grid.graph).plan(
            start=start,
            end=end,
            start_node_id=grid.start_node_id,
            end_node_id=grid.end_node_id,
        )
        t3 = perf_counter()

        diagnostics = RouteDiagnostics(
            bounding_box_ms=(t1 - t0) * 1000.0,
            grid_build_ms=(t2 - t1) * 1000.0,
            elevation_fetch_ms=grid.elevation_fetch_ms,
            search_ms=(t3 - t2) * 1000.0,
            node_count=len(grid.graph),
            edge_count=grid.graph.edge_count,
        )
        logger.info(
            f"Route planned in {diagnostics.total_ms:.1f} ms "
            f"(grid {diagnostics.grid_build_ms:.1f} ms, elevations {diagnostics.elevation_fetch_ms:.1f} ms, "
            f"search {diagnostics.search_ms:.1f} ms)"
        )
        return RoutePlan(route=route, diagnostics=diagnostics)


def plan_route(
    start: GeoPoint,
    end: GeoPoint,
    spacing_m: float,
    elevation_provider: ElevationProvider,
    terrain_provider: Optional[TerrainProvider] = None,
    cancel_event: Optional[threading.Event] = None,
) -> Route:
    """Plan a route and return only the Route value (see RouteService.plan)."""
    service = RouteService(
        elevation_provider=elevation_provider,
        terrain_provider=terrain_provider,
        spacing_m=spacing_m,
    )
    return service.plan(start=start, end=end, cancel_event=cancel_event).route
