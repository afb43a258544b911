"""TerrainGraph - Immutable grid graph shared by route queries.

Holds every GridNode and its outgoing Edges. Once constructed nothing can be
added, removed or changed, so one graph can serve concurrent planners.

Each Edge is also indexed by its exact (source, target) pair; path costs are
always looked up through that index.
"""

import logging
from collections.abc import Iterable, Iterator, Mapping
from types import MappingProxyType

from walkroute_planner.errors import GridConstructionError
from walkroute_planner.model.edge import Edge
from walkroute_planner.model.grid_node import GridNode, NodeId

logger = logging.getLogger(__name__)


class TerrainGraph:
    """Read-only adjacency graph of the terrain grid.

    Construction validates that every edge endpoint is a known node and that
    every edge has a reverse edge between the same pair.

    Example:
        graph = TerrainGraph(nodes=nodes, adjacency=adjacency)
        edge = graph.edge((0, 0), (1, 0))
        print(edge.calories)
    """

    def __init__(
        self,
        nodes: Mapping[NodeId, GridNode],
        adjacency: Mapping[NodeId, Iterable[Edge]],
    ) -> None:
        """Freeze nodes and adjacency into a validated graph.

        Args:
            nodes: Node id -> GridNode
            adjacency: Node id -> outgoing edges (missing ids get no edges)

        Raises:
            GridConstructionError: If an edge is dangling, duplicated or has no reverse.
        """
        frozen_adjacency: dict[NodeId, tuple[Edge, ...]] = {}
        edge_index: dict[tuple[NodeId, NodeId], Edge] = {}

        for node_id, node in nodes.items():
            if node.id != node_id:
                raise GridConstructionError(f"Node registered as {node_id} carries id {node.id}")

        for node_id, edges in adjacency.items():
            if node_id not in nodes:
                raise GridConstructionError(f"Adjacency given for unknown node {node_id}")
            out_edges = tuple(edges)
            for edge in out_edges:
                if edge.source != node_id:
                    raise GridConstructionError(f"Edge {edge.pair} listed under node {node_id}")
                if edge.target not in nodes:
                    raise GridConstructionError(f"Edge {edge.pair} points to unknown node {edge.target}")
                if edge.pair in edge_index:
                    raise GridConstructionError(f"Duplicate edge {edge.pair}")
                edge_index[edge.pair] = edge
            frozen_adjacency[node_id] = out_edges

        for source, target in edge_index:
            if (target, source) not in edge_index:
                raise GridConstructionError(f"Edge {(source, target)} has no reverse edge")

        for node_id in nodes:
            frozen_adjacency.setdefault(node_id, ())

        self._nodes = MappingProxyType(dict(nodes))
        self._adjacency = MappingProxyType(frozen_adjacency)
        self._edge_index = MappingProxyType(edge_index)

        logger.debug(f"TerrainGraph frozen with {len(self._nodes)} nodes and {len(self._edge_index)} edges")

    @property
    def nodes(self) -> Mapping[NodeId, GridNode]:
        """Read-only node id -> GridNode mapping."""
        return self._nodes

    @property
    def adjacency(self) -> Mapping[NodeId, tuple[Edge, ...]]:
        """Read-only node id -> outgoing edges mapping."""
        return self._adjacency

    @property
    def edge_count(self) -> int:
        """Number of directed edges."""
        return len(self._edge_index)

    def node(self, node_id: NodeId) -> GridNode:
        """Get node by id (raises KeyError if unknown)."""
        return self._nodes[node_id]

    def neighbors(self, node_id: NodeId) -> tuple[Edge, ...]:
        """Outgoing edges of a node."""
        return self._adjacency[node_id]

    def edge(self, source: NodeId, target: NodeId) -> Edge:
        """Get the edge for the exact (source, target) pair.

        Raises:
            KeyError: If the two nodes are not linked.
        """
        try:
            return self._edge_index[(source, target)]
        except KeyError:
            raise KeyError(f"No edge from {source} to {target}") from None

    def has_edge(self, source: NodeId, target: NodeId) -> bool:
        return (source, target) in self._edge_index

    def edges(self) -> Iterator[Edge]:
        """Iterate over all directed edges."""
        return iter(self._edge_index.values())

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    def __repr__(self) -> str:
        return f"TerrainGraph(nodes={len(self._nodes)}, edges={len(self._edge_index)})"
