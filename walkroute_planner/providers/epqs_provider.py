"""USGS Elevation Point Query Service (EPQS) provider.

One HTTP request per point against https://epqs.nationalmap.gov/v1/json,
fanned out with bounded concurrency by PointElevationProvider. Coverage is
the United States only; points outside coverage fail the batch.
"""

import logging
from math import isfinite
from typing import Optional

import requests

from walkroute_planner.constants import ProviderConfig, UnitConfig
from walkroute_planner.errors import ProviderError
from walkroute_planner.model.geo_point import GeoPoint
from walkroute_planner.providers.base import PointElevationProvider

logger = logging.getLogger(__name__)

# EPQS "units" query parameter per elevation unit
EPQS_UNITS = {
    UnitConfig.METERS: "Meters",
    UnitConfig.FEET: "Feet",
}


class EPQSElevationProvider(PointElevationProvider):
    """Elevation lookups from the USGS national map web service.

    Example:
        provider = EPQSElevationProvider(unit="ft", max_workers=4)
        elevations = provider.get_elevations(points)
    """

    def __init__(
        self,
        unit: str = UnitConfig.METERS,
        url: str = ProviderConfig.EPQS_URL,
        request_timeout_s: float = ProviderConfig.EPQS_REQUEST_TIMEOUT_S,
        max_workers: int = ProviderConfig.MAX_CONCURRENT_LOOKUPS,
        timeout_s: Optional[float] = ProviderConfig.BATCH_TIMEOUT_S,
    ) -> None:
        """Initialize provider.

        Args:
            unit: "m" or "ft" - unit requested from the service
            url: EPQS endpoint
            request_timeout_s: Timeout for a single HTTP request
            max_workers: Bound on concurrently outstanding requests
            timeout_s: Deadline for one whole batch
        """
        super().__init__(max_workers=max_workers, timeout_s=timeout_s)
        if unit not in EPQS_UNITS:
            raise ValueError(f"Unknown elevation unit: {unit!r}")
        self.unit = unit
        self.url = url
        self.request_timeout_s = request_timeout_s

    def get_elevation(self, point: GeoPoint) -> float:
        """Query the elevation of one point.

        Raises:
            ProviderError: On HTTP failure, malformed payload or no-data value.
        """
        params = {
            "x": point.lon,
            "y": point.lat,
            "wkid": 4326,
            "units": EPQS_UNITS[self.unit],
            "includeDate": "false",
        }
        try:
            response = requests.get(self.url, params=params, timeout=self.request_timeout_s)
            response.raise_for_status()
            data = response.json()
        except requests.RequestException as e:
            raise ProviderError(f"EPQS request failed at {point}: {e}") from e
        except ValueError as e:
            raise ProviderError(f"EPQS returned invalid JSON at {point}: {e}") from e

        raw_value = data.get("value") if isinstance(data, dict) else None
        try:
            elevation = float(raw_value)
        except (TypeError, ValueError):
            raise ProviderError(f"EPQS returned no elevation at {point}: {raw_value!r}") from None

        if not isfinite(elevation) or elevation <= ProviderConfig.EPQS_NO_DATA_VALUE:
            raise ProviderError(f"EPQS has no coverage at {point} (value={elevation})")

        return elevation
