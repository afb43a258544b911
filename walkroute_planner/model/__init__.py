"""Data model classes for the terrain graph and route results.

- GeoPoint: Geometry atom (lon, lat)
- BoundingBox: Search region spanned by two endpoints
- GridNode: Positioned, elevation-tagged grid vertex
- Edge: Directed link with distance, calories and grade penalty
- TerrainGraph: Frozen graph shared by route queries
- Route / RouteDiagnostics: Per-call results
"""

from walkroute_planner.model.bounding_box import BoundingBox
from walkroute_planner.model.edge import Edge
from walkroute_planner.model.geo_point import GeoPoint
from walkroute_planner.model.grid_node import GridNode, NodeId
from walkroute_planner.model.route import Route, RouteDiagnostics
from walkroute_planner.model.terrain_graph import TerrainGraph

__all__ = [
    "GeoPoint",
    "BoundingBox",
    "GridNode",
    "NodeId",
    "Edge",
    "TerrainGraph",
    "Route",
    "RouteDiagnostics",
]
