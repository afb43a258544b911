"""Shared pytest fixtures for walkroute_planner workflow tests.

Writes synthetic GeoTIFF elevation models with rasterio so the whole stack
(raster provider -> grid builder -> route planner) runs against real files.
Keep this conftest minimal.

COORDINATE SYSTEM:
    Rasters are WGS84 and centered on the equator/prime meridian intersection,
    where 1 degree is ~111 km in both directions.
"""

from pathlib import Path

import numpy as np
import pytest
import rasterio
from rasterio.transform import from_origin

# Raster layout: 0.012° square at 1e-4° resolution (~11 m cells)
HALF_EXTENT_DEG = 0.006
CELL_DEG = 1e-4
N_CELLS = int(round(2 * HALF_EXTENT_DEG / CELL_DEG))
METERS_PER_DEGREE = 111_000.0

# Gaussian hill at the origin
HILL_HEIGHT_M = 200.0
HILL_SIGMA_M = 90.0
BASE_ELEVATION_M = 1000.0


def _cell_centers() -> tuple[np.ndarray, np.ndarray]:
    """(lon, lat) grids of cell centers, row 0 = north."""
    offsets = -HALF_EXTENT_DEG + (np.arange(N_CELLS) + 0.5) * CELL_DEG
    lon_grid, lat_grid = np.meshgrid(offsets, offsets[::-1])
    return lon_grid, lat_grid


def _write_dem(path: Path, elevations: np.ndarray) -> Path:
    with rasterio.open(
        path,
        "w",
        driver="GTiff",
        height=elevations.shape[0],
        width=elevations.shape[1],
        count=1,
        dtype="float32",
        crs="EPSG:4326",
        transform=from_origin(-HALF_EXTENT_DEG, HALF_EXTENT_DEG, CELL_DEG, CELL_DEG),
        nodata=-9999.0,
    ) as dst:
        dst.write(elevations.astype(np.float32), 1)
    return path


@pytest.fixture
def hill_dem_path(tmp_path: Path) -> Path:
    """Gaussian hill, 200 m tall, sigma 90 m, on a 1000 m plain.

    Flanks between ~20 m and ~190 m from the summit are steeper than 50%,
    so any route crossing the hill picks up 50x penalties.
    """
    lon_grid, lat_grid = _cell_centers()
    r2 = ((lon_grid * METERS_PER_DEGREE) ** 2 + (lat_grid * METERS_PER_DEGREE) ** 2) / HILL_SIGMA_M**2
    return _write_dem(tmp_path / "hill.tif", BASE_ELEVATION_M + HILL_HEIGHT_M * np.exp(-r2 / 2))


@pytest.fixture
def plain_dem_path(tmp_path: Path) -> Path:
    """Perfectly flat 1000 m plain, same footprint as the hill raster."""
    lon_grid, _ = _cell_centers()
    return _write_dem(tmp_path / "plain.tif", np.full_like(lon_grid, BASE_ELEVATION_M))
