"""GeoGrid Builder - Terrain grid graph over a bounding box.

Lays out a regular lon/lat grid, fetches all elevations in one provider batch,
links each node to its already-created neighbors, and resolves the grid nodes
closest to the route endpoints (anchors).

Nodes are created column by column, south to north. Node (c, r) is linked to
(c-1, r), (c-1, r+1), (c-1, r-1) and (c, r-1) where they exist, so every
neighbor pair of the 8-connected grid is linked exactly once.
"""

import logging
import threading
import time
from collections import defaultdict
from dataclasses import dataclass
from math import ceil, isfinite
from typing import Optional

import numpy as np

from walkroute_planner.constants import GridConfig, UnitConfig
from walkroute_planner.core.edge_cost import EdgeCostModel
from walkroute_planner.core.geo_calculator import GeoCalculator
from walkroute_planner.errors import GridConstructionError, InvalidInputError, NodeResolutionError, ProviderError
from walkroute_planner.model.bounding_box import BoundingBox
from walkroute_planner.model.edge import Edge
from walkroute_planner.model.geo_point import GeoPoint
from walkroute_planner.model.grid_node import GridNode, NodeId
from walkroute_planner.model.terrain_graph import TerrainGraph
from walkroute_planner.providers.base import ElevationProvider, TerrainProvider

logger = logging.getLogger(__name__)

# Already-created neighbors of (c, r) as (dc, dr) offsets
BACKWARD_NEIGHBORS = [(-1, 0), (-1, 1), (-1, -1), (0, -1)]


@dataclass(frozen=True)
class BuiltGrid:
    """Result of one grid build.

    Attributes:
        graph: Frozen terrain graph
        start_node_id: Anchor node for the route start
        end_node_id: Anchor node for the route end
        lons: Longitude of each grid column
        lats: Latitude of each grid row (row 0 = south)
        elevation_fetch_ms: Time spent in the elevation provider batch
    """

    graph: TerrainGraph
    start_node_id: NodeId
    end_node_id: NodeId
    lons: tuple[float, ...]
    lats: tuple[float, ...]
    elevation_fetch_ms: float

    @property
    def n_cols(self) -> int:
        return len(self.lons)

    @property
    def n_rows(self) -> int:
        return len(self.lats)


class GeoGridBuilder:
    """Builds a TerrainGraph from a bounding box and an elevation provider.

    Example:
        builder = GeoGridBuilder(elevation_provider=provider, spacing_m=10.0)
        grid = builder.build(bbox=box, start=start, end=end)
        print(grid.graph, grid.start_node_id, grid.end_node_id)
    """

    def __init__(
        self,
        elevation_provider: ElevationProvider,
        terrain_provider: Optional[TerrainProvider] = None,
        spacing_m: float = GridConfig.NODE_SPACING_M,
        max_nodes: int = GridConfig.MAX_GRID_NODES,
    ) -> None:
        """Initialize builder.

        Args:
            elevation_provider: Batch elevation source
            terrain_provider: Optional batch terrain classification source
            spacing_m: Distance between neighboring nodes in meters
            max_nodes: Reject grids with more nodes than this

        Raises:
            InvalidInputError: If spacing_m is not a positive finite number.
        """
        if not (isfinite(spacing_m) and spacing_m > 0):
            raise InvalidInputError(f"Grid spacing must be positive, got {spacing_m}")
        self.elevation_provider = elevation_provider
        self.terrain_provider = terrain_provider
        self.spacing_m = spacing_m
        self.max_nodes = max_nodes

    @staticmethod
    def step_count(extent_deg: float, step_deg: float) -> int:
        """Number of grid lines along an axis (at least one)."""
        return max(1, ceil(extent_deg / step_deg - GridConfig.STEP_COUNT_EPSILON))

    @staticmethod
    def grid_axes(bbox: BoundingBox, spacing_m: float) -> tuple[np.ndarray, np.ndarray]:
        """Column longitudes and row latitudes covering the box.

        Column c sits at min_lon + c * lon_step, row r at min_lat + r * lat_step.

        Returns:
            (lons, lats) arrays.
        """
        lon_step, lat_step = GeoCalculator.meters_to_degree_steps(spacing_m)
        n_cols = GeoGridBuilder.step_count(bbox.width_deg, lon_step)
        n_rows = GeoGridBuilder.step_count(bbox.height_deg, lat_step)
        lons = bbox.min_lon + np.arange(n_cols, dtype=np.float64) * lon_step
        lats = bbox.min_lat + np.arange(n_rows, dtype=np.float64) * lat_step
        return lons, lats

    @staticmethod
    def nearest_index(axis: np.ndarray, value: float) -> int:
        """Index of the axis coordinate closest to value (first on ties)."""
        if len(axis) == 0:
            raise NodeResolutionError(f"No grid line to resolve coordinate {value}")
        return int(np.argmin(np.abs(axis - value)))

    @staticmethod
    def resolve_anchor(lons: np.ndarray, lats: np.ndarray, point: GeoPoint) -> NodeId:
        """Grid node for an endpoint, chosen per axis.

        Column and row are minimized independently. On this axis-aligned
        lattice that is the nearest node in degree-space, which can differ
        slightly from the haversine-nearest node.
        """
        return (
            GeoGridBuilder.nearest_index(lons, point.lon),
            GeoGridBuilder.nearest_index(lats, point.lat),
        )

    def build(
        self,
        bbox: BoundingBox,
        start: GeoPoint,
        end: GeoPoint,
        cancel_event: Optional[threading.Event] = None,
    ) -> BuiltGrid:
        """Build the terrain graph and resolve the endpoint anchors.

        Args:
            bbox: Region to cover
            start: Caller's true start point
            end: Caller's true end point
            cancel_event: Set by the caller to abort the elevation batch

        Returns:
            BuiltGrid with the frozen graph and anchor ids.

        Raises:
            ProviderError: Elevation or terrain batch failed (no graph is built).
            GridConstructionError: Grid too large or inconsistent.
            NodeResolutionError: No anchor node for an endpoint.
        """
        start_time = time.time()

        lons, lats = self.grid_axes(bbox, self.spacing_m)
        n_cols, n_rows = len(lons), len(lats)
        if n_cols * n_rows > self.max_nodes:
            raise GridConstructionError(
                f"Grid of {n_cols}x{n_rows} nodes exceeds limit of {self.max_nodes}; increase spacing_m"
            )

        positions: dict[NodeId, GeoPoint] = {}
        for col in range(n_cols):
            for row in range(n_rows):
                positions[(col, row)] = GeoPoint(lon=float(lons[col]), lat=float(lats[row]))

        fetch_start = time.perf_counter()
        elevations = self._fetch_elevations(list(positions.values()), cancel_event)
        elevation_fetch_ms = (time.perf_counter() - fetch_start) * 1000.0

        terrain: dict[GeoPoint, str] = {}
        if self.terrain_provider is not None:
            terrain = self._fetch_terrain(list(positions.values()), cancel_event)

        nodes: dict[NodeId, GridNode] = {}
        adjacency: dict[NodeId, list[Edge]] = defaultdict(list)
        unit = self.elevation_provider.unit

        for (col, row), location in positions.items():
            raw_elevation = elevations.get(location)
            if raw_elevation is None or not isfinite(raw_elevation):
                raise ProviderError(f"Provider returned no elevation for grid node {col}/{row} at {location}")

            node = GridNode(
                id=(col, row),
                location=location,
                elevation_m=UnitConfig.to_meters(raw_elevation, unit),
                terrain=terrain.get(location),
            )
            nodes[node.id] = node
            adjacency[node.id] = []

            for dc, dr in BACKWARD_NEIGHBORS:
                neighbor_id = (col + dc, row + dr)
                if 0 <= neighbor_id[0] < n_cols and 0 <= neighbor_id[1] < n_rows:
                    self._link(nodes=nodes, adjacency=adjacency, node=node, neighbor_id=neighbor_id)

        graph = TerrainGraph(nodes=nodes, adjacency=adjacency)
        start_node_id = self.resolve_anchor(lons, lats, start)
        end_node_id = self.resolve_anchor(lons, lats, end)

        elapsed = time.time() - start_time
        logger.info(
            f"Built {n_cols}x{n_rows} grid ({len(graph)} nodes, {graph.edge_count} edges) in {elapsed:.2f}s; "
            f"anchors {start_node_id} -> {end_node_id}"
        )

        return BuiltGrid(
            graph=graph,
            start_node_id=start_node_id,
            end_node_id=end_node_id,
            lons=tuple(float(lon) for lon in lons),
            lats=tuple(float(lat) for lat in lats),
            elevation_fetch_ms=elevation_fetch_ms,
        )

    @staticmethod
    def _link(
        nodes: dict[NodeId, GridNode],
        adjacency: dict[NodeId, list[Edge]],
        node: GridNode,
        neighbor_id: NodeId,
    ) -> None:
        neighbor = nodes.get(neighbor_id)
        if neighbor is None:
            raise GridConstructionError(f"Neighbor {neighbor_id} of {node.id} was not created before linking")
        forward, backward = EdgeCostModel.link(node, neighbor)
        adjacency[node.id].append(forward)
        adjacency[neighbor.id].append(backward)

    def _fetch_elevations(
        self,
        points: list[GeoPoint],
        cancel_event: Optional[threading.Event],
    ) -> dict[GeoPoint, float]:
        try:
            return self.elevation_provider.get_elevations(points, cancel_event=cancel_event)
        except ProviderError as e:
            logger.error(f"Elevation batch of {len(points)} points failed, grid build aborted: {e}")
            raise
        except Exception as e:
            logger.error(f"Elevation provider raised {type(e).__name__}, grid build aborted: {e}")
            raise ProviderError(f"Elevation provider failed: {e}") from e

    def _fetch_terrain(
        self,
        points: list[GeoPoint],
        cancel_event: Optional[threading.Event],
    ) -> dict[GeoPoint, str]:
        assert self.terrain_provider is not None
        try:
            return self.terrain_provider.get_terrain(points, cancel_event=cancel_event)
        except ProviderError as e:
            logger.error(f"Terrain batch of {len(points)} points failed, grid build aborted: {e}")
            raise
        except Exception as e:
            logger.error(f"Terrain provider raised {type(e).__name__}, grid build aborted: {e}")
            raise ProviderError(f"Terrain provider failed: {e}") from e
