"""Elevation and terrain provider interfaces.

The grid builder only talks to these abstractions. A provider answers a whole
batch of points at once and fails as a unit: either every point gets a value
or ProviderError is raised and nothing is returned.

PointElevationProvider adapts a per-point lookup (e.g. one HTTP request per
point) to the batch contract with a bounded thread pool fan-out.
"""

import logging
import threading
import time
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from concurrent.futures import FIRST_EXCEPTION, Future, ThreadPoolExecutor, wait
from typing import Optional, TypeVar

from walkroute_planner.constants import ProviderConfig, UnitConfig
from walkroute_planner.errors import LookupCancelledError, LookupTimeoutError, ProviderError
from walkroute_planner.model.geo_point import GeoPoint

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ElevationProvider(ABC):
    """Batch elevation lookup in a fixed unit.

    Attributes:
        unit: "m" or "ft"; the grid builder converts values to meters
    """

    unit: str = UnitConfig.METERS

    @abstractmethod
    def get_elevations(
        self,
        points: Sequence[GeoPoint],
        cancel_event: Optional[threading.Event] = None,
    ) -> dict[GeoPoint, float]:
        """Look up the elevation of every point.

        Args:
            points: Positions to query (duplicates are answered once)
            cancel_event: Set by the caller to abort the batch

        Returns:
            Mapping from each point to its elevation in self.unit.

        Raises:
            ProviderError: If any lookup fails, times out or is cancelled.
        """


class TerrainProvider(ABC):
    """Optional batch terrain classification lookup."""

    @abstractmethod
    def get_terrain(
        self,
        points: Sequence[GeoPoint],
        cancel_event: Optional[threading.Event] = None,
    ) -> dict[GeoPoint, str]:
        """Classify the terrain at every point (same failure contract as elevations)."""


def fetch_concurrently(
    points: Sequence[GeoPoint],
    lookup: Callable[[GeoPoint], T],
    max_workers: int = ProviderConfig.MAX_CONCURRENT_LOOKUPS,
    timeout_s: Optional[float] = ProviderConfig.BATCH_TIMEOUT_S,
    cancel_event: Optional[threading.Event] = None,
) -> dict[GeoPoint, T]:
    """Run lookup for every point with at most max_workers outstanding calls.

    Results are keyed by point, so completion order does not matter. The
    first failing lookup, the deadline or the cancel event aborts the whole
    batch; lookups not yet started are cancelled.

    Aborting is best-effort for lookups that are already running: they cannot
    be interrupted, so the abort waits up to ABORT_JOIN_TIMEOUT_S for them and
    then raises, leaving any stragglers to finish in their worker threads.

    Args:
        points: Positions to query
        lookup: Per-point lookup, may raise
        max_workers: Bound on concurrently running lookups
        timeout_s: Deadline for the whole batch (None = no deadline)
        cancel_event: Abort signal checked while waiting

    Returns:
        Mapping from each distinct point to its lookup result.

    Raises:
        LookupTimeoutError: Deadline exceeded.
        LookupCancelledError: cancel_event was set.
        ProviderError: A lookup raised.
    """
    if max_workers < 1:
        raise ValueError(f"max_workers must be >= 1, got {max_workers}")

    unique_points = list(dict.fromkeys(points))
    if not unique_points:
        return {}

    deadline = time.monotonic() + timeout_s if timeout_s is not None else None
    results: dict[GeoPoint, T] = {}
    futures: dict[Future, GeoPoint] = {}
    pending: set[Future] = set()

    executor = ThreadPoolExecutor(
        max_workers=min(max_workers, len(unique_points)),
        thread_name_prefix="elevation-lookup",
    )
    try:
        futures = {executor.submit(lookup, point): point for point in unique_points}
        pending = set(futures)

        while pending:
            if cancel_event is not None and cancel_event.is_set():
                logger.warning(f"Lookup batch cancelled with {len(pending)}/{len(futures)} lookups pending")
                raise LookupCancelledError(f"Lookup batch cancelled ({len(pending)} lookups pending)")

            wait_s = ProviderConfig.CANCEL_POLL_INTERVAL_S
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.error(f"Lookup batch timed out after {timeout_s}s with {len(pending)} lookups pending")
                    raise LookupTimeoutError(f"Lookup batch exceeded {timeout_s}s ({len(pending)} lookups pending)")
                wait_s = min(wait_s, remaining)

            done, pending = wait(pending, timeout=wait_s, return_when=FIRST_EXCEPTION)
            for future in done:
                point = futures[future]
                try:
                    results[point] = future.result()
                except ProviderError:
                    logger.error(f"Lookup failed at {point}, aborting batch of {len(futures)}")
                    raise
                except Exception as e:
                    logger.error(f"Lookup failed at {point}: {e}, aborting batch of {len(futures)}")
                    raise ProviderError(f"Lookup failed at {point}: {e}") from e
    finally:
        executor.shutdown(wait=False, cancel_futures=True)
        if pending:
            # Cancelled futures count as done; only running lookups are joined
            _, still_running = wait(pending, timeout=ProviderConfig.ABORT_JOIN_TIMEOUT_S)
            if still_running:
                logger.warning(
                    f"{len(still_running)} lookup(s) still running after "
                    f"{ProviderConfig.ABORT_JOIN_TIMEOUT_S}s, leaving them to finish in the background"
                )

    return results


class PointElevationProvider(ElevationProvider):
    """ElevationProvider built on a per-point lookup, fanned out concurrently.

    Subclasses implement get_elevation(); get_elevations() runs it for the
    whole batch through fetch_concurrently().
    """

    def __init__(
        self,
        max_workers: int = ProviderConfig.MAX_CONCURRENT_LOOKUPS,
        timeout_s: Optional[float] = ProviderConfig.BATCH_TIMEOUT_S,
    ) -> None:
        """Initialize fan-out limits.

        Args:
            max_workers: Bound on concurrently outstanding lookups
            timeout_s: Deadline for one whole batch
        """
        self.max_workers = max_workers
        self.timeout_s = timeout_s

    @abstractmethod
    def get_elevation(self, point: GeoPoint) -> float:
        """Look up one point; raise ProviderError on failure."""

    def get_elevations(
        self,
        points: Sequence[GeoPoint],
        cancel_event: Optional[threading.Event] = None,
    ) -> dict[GeoPoint, float]:
        start_time = time.time()
        elevations = fetch_concurrently(
            points=points,
            lookup=self.get_elevation,
            max_workers=self.max_workers,
            timeout_s=self.timeout_s,
            cancel_event=cancel_event,
        )
        elapsed = time.time() - start_time
        logger.info(f"Fetched {len(elevations)} elevations in {elapsed:.2f}s (max_workers={self.max_workers})")
        return elevations
