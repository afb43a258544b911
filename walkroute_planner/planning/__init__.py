"""Grid construction and route search.

- GeoGridBuilder: Terrain graph from a bounding box and an elevation provider
- RoutePlanner: Dijkstra search with decrease-key over a shared graph
- RouteService / plan_route: End-to-end route query surface
"""

from walkroute_planner.planning.grid_builder import BuiltGrid, GeoGridBuilder
from walkroute_planner.planning.route_planner import RoutePlanner, SearchState, shortest_path_tree
from walkroute_planner.planning.route_service import RoutePlan, RouteService, plan_route

__all__ = [
    "GeoGridBuilder",
    "BuiltGrid",
    "RoutePlanner",
    "SearchState",
    "shortest_path_tree",
    "RouteService",
    "RoutePlan",
    "plan_route",
]
