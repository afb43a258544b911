"""RoutePlanner - Minimum-calorie route search over a TerrainGraph.

Dijkstra's algorithm with MinHeap decrease-key. Edge weights are
calories x grade penalty factor, all non-negative.

All search state lives in a SearchState allocated per call; the graph is
only read, so any number of planners can share one graph concurrently.

Orientation: when the caller's end lies east of the start, the search runs
from the end anchor over reversed edges (relaxing u -> v with the weight of
v -> u). The resulting tree still yields the cheapest path in the caller's
direction, and the Route is always reported from the caller's start.
"""

import logging
import time
from dataclasses import dataclass, field
from math import inf
from typing import Optional

from walkroute_planner.constants import CostConfig
from walkroute_planner.core.min_heap import MinHeap
from walkroute_planner.errors import NodeResolutionError, RouteNotFoundError
from walkroute_planner.model.geo_point import GeoPoint
from walkroute_planner.model.grid_node import NodeId
from walkroute_planner.model.route import Route
from walkroute_planner.model.terrain_graph import TerrainGraph

logger = logging.getLogger(__name__)


@dataclass
class SearchState:
    """Distances and predecessors of one shortest-path search.

    Attributes:
        source: Node the search started from
        distances: Best known cost from source (inf if unreached)
        predecessors: Previous node on the best path (absent for source/unreached)
        reverse: True if weights were taken from reversed edges
    """

    source: NodeId
    distances: dict[NodeId, float] = field(default_factory=dict)
    predecessors: dict[NodeId, NodeId] = field(default_factory=dict)
    reverse: bool = False

    def is_reachable(self, node_id: NodeId) -> bool:
        return self.distances.get(node_id, inf) < inf

    def chain_to(self, node_id: NodeId) -> list[NodeId]:
        """Node ids from node_id back to the source, following predecessors.

        Raises:
            RouteNotFoundError: If node_id was not reached.
        """
        if not self.is_reachable(node_id):
            raise RouteNotFoundError(f"Node {node_id} is not reachable from {self.source}")
        chain = [node_id]
        while chain[-1] != self.source:
            chain.append(self.predecessors[chain[-1]])
        return chain


def shortest_path_tree(
    graph: TerrainGraph,
    source: NodeId,
    target: Optional[NodeId] = None,
    reverse: bool = False,
) -> SearchState:
    """Run Dijkstra from source.

    Every node is queued up front with its initial distance (0 for source,
    inf otherwise) and lowered with decrease_key as shorter paths appear.

    Args:
        graph: Graph to search
        source: Start node
        target: Stop once this node is settled (None = settle everything reachable)
        reverse: Relax u -> v with the weight of the reverse edge v -> u

    Returns:
        Fresh SearchState for this call.

    Raises:
        NodeResolutionError: If source is not in the graph.
    """
    if source not in graph:
        raise NodeResolutionError(f"Search source {source} is not a graph node")

    state = SearchState(source=source, reverse=reverse)
    distances = state.distances
    predecessors = state.predecessors

    queue: MinHeap[NodeId] = MinHeap()
    for node_id in graph.nodes:
        distances[node_id] = 0.0 if node_id == source else inf
        queue.insert(node_id, distances[node_id])

    while queue:
        u, dist_u = queue.extract_min()
        if u == target or dist_u == inf:
            break

        for edge in graph.neighbors(u):
            v = edge.target
            if v not in queue:
                continue
            weight = graph.edge(v, u).weight if reverse else edge.weight
            candidate = dist_u + weight
            if candidate < distances[v]:
                distances[v] = candidate
                predecessors[v] = u
                queue.decrease_key(v, candidate)

    return state


class RoutePlanner:
    """Plans minimum-calorie routes on a shared, immutable TerrainGraph.

    Example:
        planner = RoutePlanner(graph=grid.graph)
        route = planner.plan(start, end, grid.start_node_id, grid.end_node_id)
        print(route.total_calories)
    """

    def __init__(self, graph: TerrainGraph) -> None:
        self.graph = graph

    def plan(
        self,
        start: GeoPoint,
        end: GeoPoint,
        start_node_id: NodeId,
        end_node_id: NodeId,
    ) -> Route:
        """Find the cheapest route from start to end.

        Args:
            start: Caller's true start point
            end: Caller's true end point
            start_node_id: Anchor node for start
            end_node_id: Anchor node for end

        Returns:
            Route from start to end with aggregate metrics.

        Raises:
            NodeResolutionError: If an anchor is not a graph node.
            RouteNotFoundError: If end is unreachable from start.
        """
        for anchor in (start_node_id, end_node_id):
            if anchor not in self.graph:
                raise NodeResolutionError(f"Anchor node {anchor} is not a graph node")

        start_time = time.time()
        swapped = end.is_east_of(start)

        try:
            if swapped:
                # Predecessors point toward end_node_id, so the chain is already in travel order
                state = shortest_path_tree(self.graph, source=end_node_id, target=start_node_id, reverse=True)
                node_ids = state.chain_to(start_node_id)
            else:
                state = shortest_path_tree(self.graph, source=start_node_id, target=end_node_id)
                node_ids = state.chain_to(end_node_id)
                node_ids.reverse()
        except RouteNotFoundError:
            logger.warning(f"No route between anchors {start_node_id} and {end_node_id}")
            raise RouteNotFoundError(f"End anchor {end_node_id} is not reachable from {start_node_id}") from None

        route = self._build_route(start=start, end=end, node_ids=node_ids)

        elapsed = time.time() - start_time
        logger.info(f"Route search finished in {elapsed:.3f}s (swapped={swapped}): {route}")
        return route

    def _build_route(self, start: GeoPoint, end: GeoPoint, node_ids: list[NodeId]) -> Route:
        """Aggregate metrics over the exact edge of every consecutive node pair."""
        total_distance = 0.0
        total_calories = 0.0
        for from_id, to_id in zip(node_ids, node_ids[1:]):
            edge = self.graph.edge(from_id, to_id)
            total_distance += edge.distance_m
            total_calories += edge.calories

        start_node = self.graph.node(node_ids[0])
        end_node = self.graph.node(node_ids[-1])

        return Route(
            path=(start, *(self.graph.node(node_id).location for node_id in node_ids), end),
            node_ids=tuple(node_ids),
            total_distance_m=total_distance,
            total_calories=total_calories,
            eta_s=total_distance / CostConfig.WALKING_SPEED_MPS,
            elevation_delta_m=end_node.elevation_m - start_node.elevation_m,
        )
