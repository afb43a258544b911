"""Elevation and terrain providers consumed by the grid builder.

- ElevationProvider / TerrainProvider: Batch lookup interfaces
- PointElevationProvider: Per-point lookups fanned out with bounded concurrency
- RasterElevationProvider: Local GeoTIFF DEM (rasterio)
- EPQSElevationProvider: USGS Elevation Point Query Service (HTTP)
"""

from walkroute_planner.providers.base import (
    ElevationProvider,
    PointElevationProvider,
    TerrainProvider,
    fetch_concurrently,
)
from walkroute_planner.providers.epqs_provider import EPQSElevationProvider
from walkroute_planner.providers.raster_provider import RasterElevationProvider

__all__ = [
    "ElevationProvider",
    "TerrainProvider",
    "PointElevationProvider",
    "fetch_concurrently",
    "RasterElevationProvider",
    "EPQSElevationProvider",
]
