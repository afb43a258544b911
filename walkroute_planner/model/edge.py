"""Edge - Directed, cost-bearing link between two grid nodes.

Linking a node pair always yields two Edges, one per direction. Distance and
grade penalty are equal both ways; calories differ when the pair is not level.
"""

from dataclasses import dataclass

from walkroute_planner.model.grid_node import NodeId


@dataclass(frozen=True)
class Edge:
    """A directed edge of the terrain graph.

    Attributes:
        source: Node the edge leaves
        target: Node the edge enters
        distance_m: Great-circle distance in meters
        calories: Calories burned walking source -> target
        grade: Signed grade in travel direction (rise / run)
        grade_penalty_factor: Weight multiplier from steepness classification
    """

    source: NodeId
    target: NodeId
    distance_m: float
    calories: float
    grade: float
    grade_penalty_factor: float

    def __post_init__(self) -> None:
        """Validate data after initialization."""
        if self.distance_m < 0:
            raise ValueError(f"Edge {self.source}->{self.target} has negative distance {self.distance_m}")
        if self.calories < 0:
            raise ValueError(f"Edge {self.source}->{self.target} has negative calories {self.calories}")

    @property
    def weight(self) -> float:
        """Search weight: calories scaled by the grade penalty."""
        return self.calories * self.grade_penalty_factor

    @property
    def pair(self) -> tuple[NodeId, NodeId]:
        """(source, target) identity pair."""
        return (self.source, self.target)
