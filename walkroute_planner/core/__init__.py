"""Core foundation classes for geodesy, cost modeling and search.

- GeoCalculator: Haversine distance and degree-step conversion
- MinHeap: Priority queue with identity-indexed decrease-key
- BoundingBoxCalculator: Search region from two endpoints
- EdgeCostModel: Distance, time, calories and grade penalty between nodes
"""

from walkroute_planner.core.geo_calculator import GeoCalculator
from walkroute_planner.core.min_heap import MinHeap

# BoundingBoxCalculator and EdgeCostModel have circular import with model
# Import directly: from walkroute_planner.core.edge_cost import EdgeCostModel

__all__ = [
    "GeoCalculator",
    "MinHeap",
]
