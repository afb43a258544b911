"""Crop a large elevation raster to a planning region for faster loading.

Developer utility: RasterElevationProvider loads the whole raster band into
memory, so continental DEMs should be cropped to the area routes are planned in.

To create a cropped DEM:
1. Download a GeoTIFF DEM (e.g. USGS 3DEP 1/3 arc-second tiles from
   https://apps.nationalmap.gov/downloader/)
2. Run: python scripts/crop_dem.py path/to/dem.tif --west -111.8 --south 35.1 --east -111.5 --north 35.4
3. The result is written to DEMConfig.DEM_PATH unless --output is given
"""

import argparse
from pathlib import Path

import rasterio
from rasterio.mask import mask
from rasterio.warp import transform_bounds
from shapely.geometry import box

from walkroute_planner.constants import DEMConfig

WGS84 = "EPSG:4326"

# Default region: Flagstaff, Arizona (inside EPQS coverage for cross-checks)
DEFAULT_WEST_DEG = -111.75
DEFAULT_EAST_DEG = -111.55
DEFAULT_SOUTH_DEG = 35.10
DEFAULT_NORTH_DEG = 35.30


def crop_dem(
    input_file: Path,
    output_file: Path,
    west: float,
    south: float,
    east: float,
    north: float,
) -> Path:
    """Crop a DEM to a WGS84 bounding box and save it as a compressed GeoTIFF.

    Args:
        input_file: Source raster (any CRS rasterio can read)
        output_file: Destination GeoTIFF
        west, south, east, north: Region in decimal degrees

    Returns:
        output_file
    """
    if not (west < east and south < north):
        raise ValueError(f"Invalid region W={west}, S={south}, E={east}, N={north}")

    with rasterio.open(input_file) as src:
        print(f"Input CRS: {src.crs}")
        print(f"Input bounds: {src.bounds}")
        print(f"Input shape: {src.width} x {src.height}")

        # Region corners in the raster's native CRS
        src_crs = src.crs.to_string() if src.crs else WGS84
        native_bounds = transform_bounds(WGS84, src_crs, west, south, east, north)
        print(f"Region in {src_crs}: {native_bounds}")
        geo = [box(*native_bounds).__geo_interface__]

        out_image, out_transform = mask(dataset=src, shapes=geo, crop=True)
        out_meta = src.meta.copy()
        out_meta.update(
            {
                "driver": "GTiff",
                "height": out_image.shape[1],
                "width": out_image.shape[2],
                "transform": out_transform,
                "compress": "lzw",  # Lossless compression
            }
        )

        print(f"Output shape: {out_meta['width']} x {out_meta['height']}")

        output_file.parent.mkdir(parents=True, exist_ok=True)
        with rasterio.open(output_file, "w", **out_meta) as dest:
            dest.write(out_image)

    print(f"Saved cropped DEM to {output_file}")
    return output_file


def main() -> None:
    parser = argparse.ArgumentParser(description="Crop a DEM GeoTIFF to a WGS84 region.")
    parser.add_argument("input", type=Path, help="Source DEM GeoTIFF")
    parser.add_argument("--output", type=Path, default=DEMConfig.DEM_PATH, help="Destination GeoTIFF")
    parser.add_argument("--west", type=float, default=DEFAULT_WEST_DEG)
    parser.add_argument("--south", type=float, default=DEFAULT_SOUTH_DEG)
    parser.add_argument("--east", type=float, default=DEFAULT_EAST_DEG)
    parser.add_argument("--north", type=float, default=DEFAULT_NORTH_DEG)
    args = parser.parse_args()

    crop_dem(
        input_file=args.input,
        output_file=args.output,
        west=args.west,
        south=args.south,
        east=args.east,
        north=args.north,
    )


if __name__ == "__main__":
    main()
