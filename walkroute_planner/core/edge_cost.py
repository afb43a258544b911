"""Calorie cost model for walking between two grid nodes.

A 150 lb person burns about 4 kcal/minute walking at 1.34112 m/s on flat
ground (https://caloriesburnedhq.com/calories-burned-walking/). Every 1% of
uphill grade adds roughly 0.007456472% on top
(https://www.verywellfit.com/how-many-more-calories-do-you-burn-walking-uphill-3975557).

Ascents are scaled up, descents cost the flat rate, so the two directions of a
node pair generally carry different calories. The grade penalty factor is a
separate weight multiplier: steep edges (|grade| above the threshold) are
penalized, shallow ones are not.
"""

from dataclasses import dataclass

from walkroute_planner.constants import CostConfig
from walkroute_planner.core.geo_calculator import GeoCalculator
from walkroute_planner.model.edge import Edge
from walkroute_planner.model.geo_point import GeoPoint
from walkroute_planner.model.grid_node import GridNode


@dataclass(frozen=True)
class EdgeCost:
    """Cost of walking one direction between two points.

    Attributes:
        distance_m: Great-circle distance in meters
        travel_time_s: Walking time at the fixed walking speed
        calories: Calories burned, ascent-adjusted
        grade: Signed grade in travel direction (rise / run)
        grade_penalty_factor: Weight multiplier from steepness classification
    """

    distance_m: float
    travel_time_s: float
    calories: float
    grade: float
    grade_penalty_factor: float


class EdgeCostModel:
    """Static cost functions between positioned, elevation-tagged points."""

    @staticmethod
    def travel_time_s(distance_m: float) -> float:
        """Seconds to walk a distance at the fixed walking speed."""
        return distance_m / CostConfig.WALKING_SPEED_MPS

    @staticmethod
    def base_calories(distance_m: float) -> float:
        """Calories for walking a distance on flat ground."""
        return CostConfig.KCAL_PER_MINUTE / 60 * EdgeCostModel.travel_time_s(distance_m)

    @staticmethod
    def grade(distance_m: float, elevation_from_m: float, elevation_to_m: float) -> float:
        """Signed grade (rise / run); 0 for coincident points."""
        if distance_m < CostConfig.MIN_DISTANCE_M:
            return 0.0
        return (elevation_to_m - elevation_from_m) / distance_m

    @staticmethod
    def ascent_multiplier(grade: float) -> float:
        """Calorie multiplier for a signed grade. Descents and flat ground are 1."""
        percent_grade = grade * 100
        if percent_grade <= 0:
            return 1.0
        return 1.0 + CostConfig.CALORIE_INCREASE_PER_GRADE_PCT * percent_grade

    @staticmethod
    def grade_penalty_factor(grade: float) -> float:
        """Steep grade => penalized.

        Edges with |grade| strictly above STEEP_GRADE_THRESHOLD get the steep
        penalty, all others the normal factor. Same value in both directions.
        """
        if abs(grade) > CostConfig.STEEP_GRADE_THRESHOLD:
            return CostConfig.STEEP_GRADE_PENALTY
        return CostConfig.NORMAL_GRADE_FACTOR

    @staticmethod
    def cost(
        from_point: GeoPoint,
        from_elevation_m: float,
        to_point: GeoPoint,
        to_elevation_m: float,
    ) -> EdgeCost:
        """Compute the cost of walking from one point to another.

        Args:
            from_point: Start position
            from_elevation_m: Start elevation in meters
            to_point: End position
            to_elevation_m: End elevation in meters

        Returns:
            EdgeCost for this direction of travel.
        """
        distance = GeoCalculator.haversine_distance_m(
            lat1=from_point.lat,
            lon1=from_point.lon,
            lat2=to_point.lat,
            lon2=to_point.lon,
        )
        grade = EdgeCostModel.grade(
            distance_m=distance,
            elevation_from_m=from_elevation_m,
            elevation_to_m=to_elevation_m,
        )
        calories = EdgeCostModel.base_calories(distance) * EdgeCostModel.ascent_multiplier(grade)

        return EdgeCost(
            distance_m=distance,
            travel_time_s=EdgeCostModel.travel_time_s(distance),
            calories=calories,
            grade=grade,
            grade_penalty_factor=EdgeCostModel.grade_penalty_factor(grade),
        )

    @staticmethod
    def link(node_a: GridNode, node_b: GridNode) -> tuple[Edge, Edge]:
        """Build the pair of directed edges a -> b and b -> a."""
        forward = EdgeCostModel.cost(
            from_point=node_a.location,
            from_elevation_m=node_a.elevation_m,
            to_point=node_b.location,
            to_elevation_m=node_b.elevation_m,
        )
        backward = EdgeCostModel.cost(
            from_point=node_b.location,
            from_elevation_m=node_b.elevation_m,
            to_point=node_a.location,
            to_elevation_m=node_a.elevation_m,
        )
        return (
            Edge(
                source=node_a.id,
                target=node_b.id,
                distance_m=forward.distance_m,
                calories=forward.calories,
                grade=forward.grade,
                grade_penalty_factor=forward.grade_penalty_factor,
            ),
            Edge(
                source=node_b.id,
                target=node_a.id,
                distance_m=backward.distance_m,
                calories=backward.calories,
                grade=backward.grade,
                grade_penalty_factor=backward.grade_penalty_factor,
            ),
        )
