"""Configuration constants for Walk Route Planner.

All configurable parameters are centralized here for easy tuning.

Classes:
    GridConfig: Grid spacing and meters-per-degree ratios
    CostConfig: Walking speed, calorie burn and grade penalty parameters
    UnitConfig: Elevation unit names and conversion factors
    ProviderConfig: Elevation lookup concurrency and HTTP parameters
    DEMConfig: Local elevation raster paths
"""

from pathlib import Path

# Package root directory (where walkroute_planner/ lives)
PACKAGE_DIR = Path(__file__).parent

# Project root directory (parent of walkroute_planner/)
PROJECT_ROOT = PACKAGE_DIR.parent

# Data directory outside package (downloaded separately, not shipped with package)
DATA_DIR = PROJECT_ROOT / "data"


class GridConfig:
    """Grid layout parameters.

    Ratios from USGS "How much distance does a degree cover":
    https://www.usgs.gov/faqs/how-much-distance-does-a-degree-minute-and-second-cover-your-maps
    The longitude ratio is not corrected for latitude.
    """

    # Distance between neighboring grid nodes (meters)
    # Larger = coarser route, smaller = many more elevation lookups
    NODE_SPACING_M = 10.0

    METERS_PER_DEGREE_LON = 111_699.0
    METERS_PER_DEGREE_LAT = 111_000.0

    # Hard cap on nodes per build (each node costs one elevation lookup)
    MAX_GRID_NODES = 250_000

    # Tolerance when dividing extents by steps (exact multiples stay exact)
    STEP_COUNT_EPSILON = 1e-9


class CostConfig:
    """Walking cost model parameters.

    150 lb person burns 4 kcal/minute at 1.34112 m/s (3 mph) on flat ground.
    Every 1% of uphill grade adds about 0.007456472% calories.
    """

    EARTH_RADIUS_M = 6_371_000

    WALKING_SPEED_MPS = 1.34112
    KCAL_PER_MINUTE = 4.0
    CALORIE_INCREASE_PER_GRADE_PCT = 0.00007456472

    # Below this distance two nodes are treated as coincident (grade = 0)
    MIN_DISTANCE_M = 1e-6

    # Steep grade => penalized. |grade| above threshold multiplies the weight.
    STEEP_GRADE_THRESHOLD = 0.5
    STEEP_GRADE_PENALTY = 50.0
    NORMAL_GRADE_FACTOR = 1.0

    @staticmethod
    def kcal_per_meter() -> float:
        """Base calories burned per meter walked on flat ground."""
        return CostConfig.KCAL_PER_MINUTE / 60 / CostConfig.WALKING_SPEED_MPS


class UnitConfig:
    """Elevation units. Everything inside a graph is stored in meters."""

    METERS = "m"
    FEET = "ft"
    FEET_PER_METER = 3.2808

    UNITS = (METERS, FEET)

    @staticmethod
    def to_meters(value: float, unit: str) -> float:
        """Convert an elevation value in the given unit to meters.

        Args:
            value: Elevation value
            unit: "m" or "ft"

        Returns:
            Elevation in meters.
        """
        if unit == UnitConfig.METERS:
            return value
        if unit == UnitConfig.FEET:
            return value / UnitConfig.FEET_PER_METER
        raise ValueError(f"Unknown elevation unit: {unit!r}")


class ProviderConfig:
    """Elevation lookup parameters."""

    # Upper bound on concurrently outstanding point lookups
    MAX_CONCURRENT_LOOKUPS = 8

    # Whole-batch deadline (seconds); the build aborts when exceeded
    BATCH_TIMEOUT_S = 120.0

    # Poll interval while waiting for lookups (cancellation latency)
    CANCEL_POLL_INTERVAL_S = 0.05

    # After an aborted batch, how long to wait for lookups already running
    ABORT_JOIN_TIMEOUT_S = 1.0

    # USGS Elevation Point Query Service
    EPQS_URL = "https://epqs.nationalmap.gov/v1/json"
    EPQS_REQUEST_TIMEOUT_S = 10.0
    # EPQS reports this value for points without coverage
    EPQS_NO_DATA_VALUE = -1_000_000


class DEMConfig:
    """Local elevation raster paths."""

    # Default GeoTIFF used by RasterElevationProvider when no path is given
    DEM_PATH = DATA_DIR / "elevation.tif"
