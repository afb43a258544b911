"""Shared pytest fixtures for walkroute_planner tests.

Provides mock elevation/terrain providers and grid helpers.
All fixtures use explicit values with documented rationale.

COORDINATE SYSTEM:
    Tests use coordinates near the equator (lat~0) and prime meridian (lon~0).
    Grid steps are GridConfig-derived (10 m => ~8.95e-5 deg lon, ~9.01e-5 deg lat),
    so box sizes are given in whole grid steps instead of meters.
"""

import threading
import time
from collections.abc import Callable, Sequence
from typing import Optional

import pytest

from walkroute_planner.constants import UnitConfig
from walkroute_planner.core.geo_calculator import GeoCalculator
from walkroute_planner.errors import ProviderError
from walkroute_planner.model.bounding_box import BoundingBox
from walkroute_planner.model.geo_point import GeoPoint
from walkroute_planner.providers.base import ElevationProvider, PointElevationProvider, TerrainProvider

# Meters per degree used by the linear mock terrain (not by the code under test)
M = 111_000.0


# =============================================================================
# MOCK PROVIDERS
# =============================================================================


class MockElevationProvider(ElevationProvider):
    """Batch provider returning synthetic elevation from a linear formula.

    Elevation formula:
        elevation = base_elev + (lat * M * slope_ns_pct / 100)
                              + (lon * M * slope_ew_pct / 100)

    Positive slope_ns_pct rises going north, positive slope_ew_pct rises going east.
    An optional override function replaces the formula per point (spikes, pits).

    Every call is recorded, so tests can assert on batching.
    """

    def __init__(
        self,
        base_elevation: float = 100.0,
        slope_ns_pct: float = 0.0,
        slope_ew_pct: float = 0.0,
        unit: str = UnitConfig.METERS,
        override: Optional[Callable[[GeoPoint], Optional[float]]] = None,
    ) -> None:
        self.base_elevation = base_elevation
        self.slope_ns_pct = slope_ns_pct
        self.slope_ew_pct = slope_ew_pct
        self.unit = unit
        self.override = override
        self.calls: list[list[GeoPoint]] = []

    def elevation_at(self, point: GeoPoint) -> float:
        if self.override is not None:
            value = self.override(point)
            if value is not None:
                return value
        return (
            self.base_elevation
            + point.lat * M * (self.slope_ns_pct / 100)
            + point.lon * M * (self.slope_ew_pct / 100)
        )

    def get_elevations(
        self,
        points: Sequence[GeoPoint],
        cancel_event: Optional[threading.Event] = None,
    ) -> dict[GeoPoint, float]:
        self.calls.append(list(points))
        return {point: self.elevation_at(point) for point in points}


class FailingElevationProvider(ElevationProvider):
    """Provider whose batch always fails with the configured exception."""

    def __init__(self, error: Exception) -> None:
        self.error = error

    def get_elevations(
        self,
        points: Sequence[GeoPoint],
        cancel_event: Optional[threading.Event] = None,
    ) -> dict[GeoPoint, float]:
        raise self.error


class PartialElevationProvider(ElevationProvider):
    """Provider that silently drops the first point of the batch."""

    def get_elevations(
        self,
        points: Sequence[GeoPoint],
        cancel_event: Optional[threading.Event] = None,
    ) -> dict[GeoPoint, float]:
        return {point: 0.0 for point in points[1:]}


class SlowPointProvider(PointElevationProvider):
    """Per-point provider with a fixed delay, tracking peak concurrency."""

    def __init__(self, delay_s: float, max_workers: int = 4, timeout_s: Optional[float] = 5.0) -> None:
        super().__init__(max_workers=max_workers, timeout_s=timeout_s)
        self.delay_s = delay_s
        self._lock = threading.Lock()
        self.active = 0
        self.peak_active = 0
        self.lookups = 0

    def get_elevation(self, point: GeoPoint) -> float:
        with self._lock:
            self.active += 1
            self.lookups += 1
            self.peak_active = max(self.peak_active, self.active)
        try:
            time.sleep(self.delay_s)
            return 10.0
        finally:
            with self._lock:
                self.active -= 1


class MockTerrainProvider(TerrainProvider):
    """Classifies everything north of the equator as 'forest', the rest as 'meadow'."""

    def get_terrain(
        self,
        points: Sequence[GeoPoint],
        cancel_event: Optional[threading.Event] = None,
    ) -> dict[GeoPoint, str]:
        return {point: "forest" if point.lat > 0 else "meadow" for point in points}


class BrokenTerrainProvider(TerrainProvider):
    """Terrain provider that fails with a non-provider exception."""

    def get_terrain(
        self,
        points: Sequence[GeoPoint],
        cancel_event: Optional[threading.Event] = None,
    ) -> dict[GeoPoint, str]:
        raise RuntimeError("terrain service offline")


# =============================================================================
# GRID HELPERS
# =============================================================================


def box_for_grid(
    n_cols: int,
    n_rows: int,
    spacing_m: float = 10.0,
    origin: GeoPoint = GeoPoint(lon=0.0, lat=0.0),
) -> BoundingBox:
    """Box whose 10 m grid has exactly n_cols x n_rows nodes.

    Extents are (n - 0.5) steps, so ceil() lands on n without touching
    a step boundary.
    """
    lon_step, lat_step = GeoCalculator.meters_to_degree_steps(spacing_m)
    return BoundingBox.from_extents(
        min_lon=origin.lon,
        min_lat=origin.lat,
        max_lon=origin.lon + (n_cols - 0.5) * lon_step,
        max_lat=origin.lat + (n_rows - 0.5) * lat_step,
    )


# =============================================================================
# PROVIDER FIXTURES
# =============================================================================


@pytest.fixture
def flat_provider() -> MockElevationProvider:
    """Flat terrain at 100 m: every edge costs the base calorie rate."""
    return MockElevationProvider(base_elevation=100.0)


@pytest.fixture
def east_rising_provider() -> MockElevationProvider:
    """10% grade rising east, flat north-south.

    Walking east burns more than walking west, but no edge is steep
    (diagonals stay below 10%), so no penalties apply.
    """
    return MockElevationProvider(base_elevation=100.0, slope_ew_pct=10.0)


@pytest.fixture
def rolling_provider() -> MockElevationProvider:
    """Mixed 30% north and 20% east slopes: asymmetric costs in every direction."""
    return MockElevationProvider(base_elevation=500.0, slope_ns_pct=30.0, slope_ew_pct=20.0)


@pytest.fixture
def feet_provider() -> MockElevationProvider:
    """Flat terrain reported in feet: 328.08 ft == 100 m."""
    return MockElevationProvider(base_elevation=328.08, unit=UnitConfig.FEET)


@pytest.fixture
def terrain_provider() -> MockTerrainProvider:
    return MockTerrainProvider()


@pytest.fixture
def box_4x3() -> BoundingBox:
    """Box spanning a 4 column x 3 row grid at 10 m spacing, origin (0, 0)."""
    return box_for_grid(n_cols=4, n_rows=3)


@pytest.fixture
def grid_box() -> Callable[..., BoundingBox]:
    """Factory: box_for_grid(n_cols, n_rows, spacing_m=10.0, origin=GeoPoint(0, 0))."""
    return box_for_grid


@pytest.fixture
def make_slow_provider() -> Callable[..., SlowPointProvider]:
    """Factory: SlowPointProvider(delay_s, max_workers=4, timeout_s=5.0)."""
    return SlowPointProvider


@pytest.fixture
def make_elevation_provider() -> Callable[..., MockElevationProvider]:
    """Factory for MockElevationProvider with custom slopes or overrides."""
    return MockElevationProvider


@pytest.fixture
def failing_provider() -> FailingElevationProvider:
    """Provider batch fails with ProviderError (e.g. service down)."""
    return FailingElevationProvider(ProviderError("elevation service unavailable"))


@pytest.fixture
def crashing_provider() -> FailingElevationProvider:
    """Provider batch fails with an unexpected, non-provider exception."""
    return FailingElevationProvider(ConnectionResetError("connection reset by peer"))


@pytest.fixture
def partial_provider() -> PartialElevationProvider:
    return PartialElevationProvider()


@pytest.fixture
def broken_terrain_provider() -> BrokenTerrainProvider:
    return BrokenTerrainProvider()
