"""Tests for GeoGridBuilder.

Tests: grid layout, 8-connectivity, elevation batching and unit conversion,
anchor resolution, failure handling.

Note: Mock providers and the box_for_grid helper live in conftest.py.
"""

import itertools
import threading
from collections.abc import Callable
from typing import TYPE_CHECKING

import numpy as np
import pytest

from walkroute_planner.core.geo_calculator import GeoCalculator
from walkroute_planner.errors import (
    GridConstructionError,
    InvalidInputError,
    LookupCancelledError,
    NodeResolutionError,
    ProviderError,
)
from walkroute_planner.model.bounding_box import BoundingBox
from walkroute_planner.model.geo_point import GeoPoint
from walkroute_planner.planning.grid_builder import GeoGridBuilder

if TYPE_CHECKING:
    from conftest import (
        FailingElevationProvider,
        MockElevationProvider,
        MockTerrainProvider,
        PartialElevationProvider,
    )

LON_STEP, LAT_STEP = GeoCalculator.meters_to_degree_steps(10.0)
ORIGIN = GeoPoint(lon=0.0, lat=0.0)


def _expected_directed_edges(n_cols: int, n_rows: int) -> int:
    """Directed edge count of an 8-connected n_cols x n_rows lattice."""
    undirected = (n_cols - 1) * n_rows + n_cols * (n_rows - 1) + 2 * (n_cols - 1) * (n_rows - 1)
    return 2 * undirected


# =============================================================================
# LAYOUT
# =============================================================================


class TestGridLayout:
    """Grid axes and node positions."""

    def test_step_count_rounds_up(self) -> None:
        assert GeoGridBuilder.step_count(extent_deg=2.5, step_deg=1.0) == 3
        assert GeoGridBuilder.step_count(extent_deg=0.1, step_deg=1.0) == 1

    def test_step_count_exact_multiple_not_inflated(self) -> None:
        assert GeoGridBuilder.step_count(extent_deg=3.0, step_deg=1.0) == 3
        # 1.1 / 0.1 == 11.000000000000002 in floating point
        assert GeoGridBuilder.step_count(extent_deg=1.1, step_deg=0.1) == 11

    def test_step_count_never_zero(self) -> None:
        assert GeoGridBuilder.step_count(extent_deg=0.0, step_deg=1.0) == 1

    def test_axes_start_at_box_corner(self, box_4x3: BoundingBox) -> None:
        lons, lats = GeoGridBuilder.grid_axes(box_4x3, spacing_m=10.0)
        assert len(lons) == 4
        assert len(lats) == 3
        np.testing.assert_allclose(lons, [c * LON_STEP for c in range(4)])
        np.testing.assert_allclose(lats, [r * LAT_STEP for r in range(3)])

    def test_node_positions(self, flat_provider: "MockElevationProvider", box_4x3: BoundingBox) -> None:
        grid = GeoGridBuilder(elevation_provider=flat_provider).build(
            bbox=box_4x3, start=ORIGIN, end=GeoPoint(lon=3 * LON_STEP, lat=2 * LAT_STEP)
        )
        assert (grid.n_cols, grid.n_rows) == (4, 3)
        assert len(grid.graph) == 12
        for (col, row), node in grid.graph.nodes.items():
            assert node.lon == pytest.approx(col * LON_STEP)
            assert node.lat == pytest.approx(row * LAT_STEP)

    def test_coarser_spacing_gives_fewer_nodes(self) -> None:
        box = BoundingBox.from_extents(min_lon=0.0, min_lat=0.0, max_lon=0.002, max_lat=0.002)
        fine, _ = GeoGridBuilder.grid_axes(box, spacing_m=10.0)
        coarse, _ = GeoGridBuilder.grid_axes(box, spacing_m=50.0)
        assert len(coarse) < len(fine)


# =============================================================================
# CONNECTIVITY
# =============================================================================


class TestGridConnectivity:
    """8-connectivity with each neighbor pair linked exactly once."""

    @pytest.mark.parametrize("n_cols,n_rows", [(1, 1), (2, 2), (4, 3), (1, 5), (6, 1)])
    def test_edge_count(
        self,
        flat_provider: "MockElevationProvider",
        grid_box: Callable[..., BoundingBox],
        n_cols: int,
        n_rows: int,
    ) -> None:
        grid = GeoGridBuilder(elevation_provider=flat_provider).build(
            bbox=grid_box(n_cols, n_rows), start=ORIGIN, end=GeoPoint(lon=1e-5, lat=0.0)
        )
        assert len(grid.graph) == n_cols * n_rows
        assert grid.graph.edge_count == _expected_directed_edges(n_cols, n_rows)

    def test_every_node_linked_to_all_lattice_neighbors(
        self, flat_provider: "MockElevationProvider", box_4x3: BoundingBox
    ) -> None:
        grid = GeoGridBuilder(elevation_provider=flat_provider).build(bbox=box_4x3, start=ORIGIN, end=GeoPoint(lon=1e-5, lat=0.0))
        graph = grid.graph
        for col, row in graph.nodes:
            expected = {
                (col + dc, row + dr)
                for dc, dr in itertools.product((-1, 0, 1), repeat=2)
                if (dc, dr) != (0, 0) and 0 <= col + dc < 4 and 0 <= row + dr < 3
            }
            assert {edge.target for edge in graph.neighbors((col, row))} == expected

    def test_edges_are_symmetric_pairs(
        self, east_rising_provider: "MockElevationProvider", box_4x3: BoundingBox
    ) -> None:
        """Each a->b has b->a with equal distance and penalty; calories differ on slopes."""
        grid = GeoGridBuilder(elevation_provider=east_rising_provider).build(
            bbox=box_4x3, start=ORIGIN, end=GeoPoint(lon=1e-5, lat=0.0)
        )
        graph = grid.graph
        for edge in graph.edges():
            reverse = graph.edge(edge.target, edge.source)
            assert reverse.distance_m == pytest.approx(edge.distance_m)
            assert reverse.grade_penalty_factor == edge.grade_penalty_factor
            assert reverse.grade == pytest.approx(-edge.grade)

        east = graph.edge((0, 0), (1, 0))
        west = graph.edge((1, 0), (0, 0))
        assert east.calories > west.calories


# =============================================================================
# ELEVATIONS
# =============================================================================


class TestGridElevations:
    """Elevation batch, unit conversion and provider failures."""

    def test_single_batch_for_all_nodes(self, flat_provider: "MockElevationProvider", box_4x3: BoundingBox) -> None:
        GeoGridBuilder(elevation_provider=flat_provider).build(bbox=box_4x3, start=ORIGIN, end=GeoPoint(lon=1e-5, lat=0.0))
        assert len(flat_provider.calls) == 1
        assert len(flat_provider.calls[0]) == 12

    def test_feet_converted_to_meters(self, feet_provider: "MockElevationProvider", box_4x3: BoundingBox) -> None:
        grid = GeoGridBuilder(elevation_provider=feet_provider).build(bbox=box_4x3, start=ORIGIN, end=GeoPoint(lon=1e-5, lat=0.0))
        for node in grid.graph.nodes.values():
            assert node.elevation_m == pytest.approx(100.0)

    def test_elevation_follows_provider(self, east_rising_provider: "MockElevationProvider", box_4x3: BoundingBox) -> None:
        grid = GeoGridBuilder(elevation_provider=east_rising_provider).build(
            bbox=box_4x3, start=ORIGIN, end=GeoPoint(lon=1e-5, lat=0.0)
        )
        for node in grid.graph.nodes.values():
            assert node.elevation_m == pytest.approx(east_rising_provider.elevation_at(node.location))

    def test_provider_error_aborts_build(self, failing_provider: "FailingElevationProvider", box_4x3: BoundingBox) -> None:
        with pytest.raises(ProviderError, match="unavailable"):
            GeoGridBuilder(elevation_provider=failing_provider).build(bbox=box_4x3, start=ORIGIN, end=GeoPoint(lon=1e-5, lat=0.0))

    def test_unexpected_provider_exception_wrapped(
        self, crashing_provider: "FailingElevationProvider", box_4x3: BoundingBox
    ) -> None:
        with pytest.raises(ProviderError, match="connection reset") as exc_info:
            GeoGridBuilder(elevation_provider=crashing_provider).build(bbox=box_4x3, start=ORIGIN, end=GeoPoint(lon=1e-5, lat=0.0))
        assert isinstance(exc_info.value.__cause__, ConnectionResetError)

    def test_missing_elevation_aborts_build(
        self, partial_provider: "PartialElevationProvider", box_4x3: BoundingBox
    ) -> None:
        with pytest.raises(ProviderError, match="no elevation for grid node 0/0"):
            GeoGridBuilder(elevation_provider=partial_provider).build(bbox=box_4x3, start=ORIGIN, end=GeoPoint(lon=1e-5, lat=0.0))

    def test_cancelled_fan_out_aborts_build(
        self, make_slow_provider: Callable[..., object], box_4x3: BoundingBox
    ) -> None:
        cancel = threading.Event()
        cancel.set()
        builder = GeoGridBuilder(elevation_provider=make_slow_provider(delay_s=0.01))  # type: ignore[arg-type]
        with pytest.raises(LookupCancelledError):
            builder.build(bbox=box_4x3, start=ORIGIN, end=GeoPoint(lon=1e-5, lat=0.0), cancel_event=cancel)

    def test_terrain_tags(
        self,
        flat_provider: "MockElevationProvider",
        terrain_provider: "MockTerrainProvider",
        grid_box: Callable[..., BoundingBox],
    ) -> None:
        box = grid_box(2, 3, origin=GeoPoint(lon=0.0, lat=-LAT_STEP))
        grid = GeoGridBuilder(elevation_provider=flat_provider, terrain_provider=terrain_provider).build(
            bbox=box, start=ORIGIN, end=GeoPoint(lon=1e-5, lat=0.0)
        )
        assert grid.graph.node((0, 0)).terrain == "meadow"
        assert grid.graph.node((0, 2)).terrain == "forest"

    def test_terrain_failure_aborts_build(
        self, flat_provider: "MockElevationProvider", broken_terrain_provider: object, box_4x3: BoundingBox
    ) -> None:
        builder = GeoGridBuilder(elevation_provider=flat_provider, terrain_provider=broken_terrain_provider)  # type: ignore[arg-type]
        with pytest.raises(ProviderError, match="terrain service offline"):
            builder.build(bbox=box_4x3, start=ORIGIN, end=GeoPoint(lon=1e-5, lat=0.0))

    def test_elevation_fetch_is_timed(self, flat_provider: "MockElevationProvider", box_4x3: BoundingBox) -> None:
        grid = GeoGridBuilder(elevation_provider=flat_provider).build(bbox=box_4x3, start=ORIGIN, end=GeoPoint(lon=1e-5, lat=0.0))
        assert grid.elevation_fetch_ms >= 0.0


# =============================================================================
# LIMITS AND ANCHORS
# =============================================================================


class TestGridLimits:
    """Parameter validation and node cap."""

    @pytest.mark.parametrize("spacing", [0.0, -10.0, float("nan"), float("inf")])
    def test_invalid_spacing_rejected(self, flat_provider: "MockElevationProvider", spacing: float) -> None:
        with pytest.raises(InvalidInputError):
            GeoGridBuilder(elevation_provider=flat_provider, spacing_m=spacing)

    def test_node_cap(self, flat_provider: "MockElevationProvider", box_4x3: BoundingBox) -> None:
        builder = GeoGridBuilder(elevation_provider=flat_provider, max_nodes=11)
        with pytest.raises(GridConstructionError, match="exceeds limit"):
            builder.build(bbox=box_4x3, start=ORIGIN, end=GeoPoint(lon=1e-5, lat=0.0))
        # Rejected before any lookup
        assert flat_provider.calls == []


class TestAnchorResolution:
    """Endpoint -> grid node resolution."""

    def test_nearest_index_first_on_ties(self) -> None:
        assert GeoGridBuilder.nearest_index(np.array([0.0, 1.0, 2.0]), 0.5) == 0
        assert GeoGridBuilder.nearest_index(np.array([0.0, 1.0, 2.0]), 1.6) == 2

    def test_empty_axis_raises(self) -> None:
        with pytest.raises(NodeResolutionError):
            GeoGridBuilder.nearest_index(np.array([]), 0.5)

    def test_points_outside_grid_snap_to_border(self) -> None:
        lons = np.array([0.0, 1.0, 2.0])
        lats = np.array([10.0, 11.0])
        assert GeoGridBuilder.resolve_anchor(lons, lats, GeoPoint(lon=-5.0, lat=50.0)) == (0, 1)

    @pytest.mark.parametrize(
        "lon_steps,lat_steps",
        [(0.0, 0.0), (2.3, 1.6), (3.49, 0.51), (0.7, 2.2), (2.9, 0.1)],
    )
    def test_anchor_is_nearest_node_in_degree_space(
        self,
        flat_provider: "MockElevationProvider",
        box_4x3: BoundingBox,
        lon_steps: float,
        lat_steps: float,
    ) -> None:
        point = GeoPoint(lon=lon_steps * LON_STEP, lat=lat_steps * LAT_STEP)
        grid = GeoGridBuilder(elevation_provider=flat_provider).build(bbox=box_4x3, start=point, end=ORIGIN)

        brute_force = min(
            grid.graph.nodes.values(),
            key=lambda node: (node.lon - point.lon) ** 2 + (node.lat - point.lat) ** 2,
        )
        assert grid.start_node_id == brute_force.id
        assert grid.end_node_id == (0, 0)
