"""Walk Route Planner - Minimum-effort walking routes over real terrain.

Models the area between two points as a grid of elevation-tagged nodes and
finds the route that burns the fewest calories:
- Bounding box and grid layout from two endpoints
- Batched elevation lookups from a DEM raster or a web service
- Asymmetric uphill/downhill calorie costs with steep-grade penalty
- Dijkstra search with true decrease-key

Modules:
    core: Foundation classes (geo calculations, min-heap, bounding box, cost model)
    model: Data structures (GeoPoint, GridNode, Edge, TerrainGraph, Route)
    providers: Elevation and terrain sources
    planning: Grid builder, route planner, route service

Example:
    from walkroute_planner import GeoPoint, plan_route
    from walkroute_planner.providers import EPQSElevationProvider

    route = plan_route(
        start=GeoPoint(lon=-111.652, lat=35.198),
        end=GeoPoint(lon=-111.648, lat=35.201),
        spacing_m=10.0,
        elevation_provider=EPQSElevationProvider(unit="ft"),
    )
"""

from walkroute_planner.model import GeoPoint, Route
from walkroute_planner.planning import RouteService, plan_route

__all__ = [
    "GeoPoint",
    "Route",
    "RouteService",
    "plan_route",
]
