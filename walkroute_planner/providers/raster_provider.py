"""GeoTIFF elevation provider.

Samples a Digital Elevation Model raster:
- Lazy, thread-safe load of the raster band into a NumPy array
- Automatic coordinate transformation from WGS84 to the raster's native CRS
- Vectorized batch lookup; any point outside coverage fails the batch
"""

import logging
import threading
import time
from collections.abc import Sequence
from pathlib import Path
from typing import Optional

import numpy as np
import rasterio
from rasterio.transform import rowcol
from rasterio.warp import transform

from walkroute_planner.constants import DEMConfig, UnitConfig
from walkroute_planner.errors import LookupCancelledError, ProviderError
from walkroute_planner.model.geo_point import GeoPoint
from walkroute_planner.providers.base import ElevationProvider

logger = logging.getLogger(__name__)

WGS84 = "EPSG:4326"


class RasterElevationProvider(ElevationProvider):
    """Elevation sampling from a single-band GeoTIFF.

    The raster is loaded on first access and cached for fast subsequent queries.

    Example:
        dem = RasterElevationProvider(dem_path=Path("data/elevation.tif"))
        elevations = dem.get_elevations([GeoPoint(lon=-111.65, lat=35.19)])
    """

    def __init__(self, dem_path: Optional[Path] = None, unit: str = UnitConfig.METERS) -> None:
        """Initialize provider.

        Args:
            dem_path: Path to GeoTIFF (uses DEMConfig.DEM_PATH by default)
            unit: Unit of the raster values ("m" or "ft")
        """
        if unit not in UnitConfig.UNITS:
            raise ValueError(f"Unknown elevation unit: {unit!r}")
        self.unit = unit
        self._dem_path = Path(dem_path) if dem_path is not None else DEMConfig.DEM_PATH
        self._load_lock = threading.Lock()
        self._dem_crs: Optional[str] = None
        self._dem_array: Optional[np.ndarray] = None
        self._dem_transform = None
        self._dem_nodata = None
        self._dem_bounds: Optional[tuple[float, float, float, float]] = None

    @property
    def is_loaded(self) -> bool:
        """Check if raster data has been fully loaded into memory."""
        return self._dem_transform is not None

    def _ensure_loaded(self) -> None:
        """Load raster into memory on first access (thread-safe)."""
        if self.is_loaded:
            return

        with self._load_lock:
            # Double-check after acquiring lock
            if self.is_loaded:
                return

            if not self._dem_path.exists():
                raise ProviderError(f"DEM file not found at {self._dem_path}")

            logger.info(f"Loading DEM from {self._dem_path}...")
            start_time = time.time()

            with rasterio.open(self._dem_path) as dem:
                self._dem_crs = dem.crs.to_string() if dem.crs else WGS84
                self._dem_array = dem.read(1)
                self._dem_nodata = dem.nodata
                b = dem.bounds
                self._dem_bounds = (b.left, b.bottom, b.right, b.top)
                # Set _dem_transform LAST - this is what is_loaded checks
                self._dem_transform = dem.transform

            elapsed = time.time() - start_time
            logger.info(f"DEM loaded in {elapsed:.2f}s (shape: {self._dem_array.shape}, CRS: {self._dem_crs})")

    def _to_dem_crs(self, lons: list[float], lats: list[float]) -> tuple[list[float], list[float]]:
        if self._dem_crs == WGS84:
            return lons, lats
        xs, ys = transform(WGS84, self._dem_crs, lons, lats)
        return list(xs), list(ys)

    def get_elevation(self, point: GeoPoint) -> float:
        """Get elevation at a single point, in self.unit.

        Raises:
            ProviderError: If the point is outside coverage or on no-data.
        """
        return self.get_elevations([point])[point]

    def get_elevations(
        self,
        points: Sequence[GeoPoint],
        cancel_event: Optional[threading.Event] = None,
    ) -> dict[GeoPoint, float]:
        if cancel_event is not None and cancel_event.is_set():
            raise LookupCancelledError("Raster lookup cancelled before start")

        unique_points = list(dict.fromkeys(points))
        if not unique_points:
            return {}

        self._ensure_loaded()
        assert self._dem_array is not None

        xs, ys = self._to_dem_crs([p.lon for p in unique_points], [p.lat for p in unique_points])
        rows, cols = rowcol(self._dem_transform, xs, ys)
        rows = np.atleast_1d(np.asarray(rows, dtype=np.int64))
        cols = np.atleast_1d(np.asarray(cols, dtype=np.int64))

        n_rows, n_cols = self._dem_array.shape
        inside = (rows >= 0) & (rows < n_rows) & (cols >= 0) & (cols < n_cols)
        if not inside.all():
            bad = unique_points[int(np.argmin(inside))]
            logger.warning(f"Coordinates outside DEM bounds: {bad} (shape={self._dem_array.shape})")
            raise ProviderError(f"{int((~inside).sum())} point(s) outside DEM coverage, first at {bad}")

        values = self._dem_array[rows, cols].astype(np.float64)
        invalid = ~np.isfinite(values)
        if self._dem_nodata is not None:
            invalid |= values == self._dem_nodata
        if invalid.any():
            bad = unique_points[int(np.argmax(invalid))]
            logger.warning(f"No-data elevation at {bad}")
            raise ProviderError(f"{int(invalid.sum())} point(s) have no elevation data, first at {bad}")

        return {point: float(value) for point, value in zip(unique_points, values)}

    @property
    def bounds(self) -> tuple[float, float, float, float]:
        """Return (west, south, east, north) bounds in WGS84."""
        self._ensure_loaded()
        assert self._dem_bounds is not None
        left, bottom, right, top = self._dem_bounds

        if self._dem_crs != WGS84:
            corners_x = [left, right, left, right]
            corners_y = [bottom, bottom, top, top]
            lons, lats = transform(self._dem_crs, WGS84, corners_x, corners_y)
            return min(lons), min(lats), max(lons), max(lats)

        return left, bottom, right, top
