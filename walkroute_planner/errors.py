"""Error types raised by the route planner.

Every failure surfaces as one of these; no partial route or graph is returned.

    RoutePlannerError
    ├── InvalidInputError      degenerate endpoints or parameters
    ├── ProviderError          elevation/terrain batch failed as a unit
    │   ├── LookupTimeoutError
    │   └── LookupCancelledError
    ├── GridConstructionError  grid too large or inconsistent adjacency
    ├── NodeResolutionError    no anchor node for an endpoint
    ├── EmptyQueueError        heap misuse (programming error)
    └── RouteNotFoundError     destination unreachable from start
"""


class RoutePlannerError(Exception):
    """Base class for all route planner errors."""


class InvalidInputError(RoutePlannerError, ValueError):
    """Input endpoints or parameters cannot produce a route."""


class ProviderError(RoutePlannerError):
    """An elevation or terrain batch lookup failed."""


class LookupTimeoutError(ProviderError):
    """The batch lookup did not finish before its deadline."""


class LookupCancelledError(ProviderError):
    """The batch lookup was cancelled by the caller."""


class GridConstructionError(RoutePlannerError):
    """The grid graph could not be assembled consistently."""


class NodeResolutionError(RoutePlannerError):
    """No grid node could be selected for a start or end point."""


class EmptyQueueError(RoutePlannerError, IndexError):
    """extract_min() or peek() called on an empty heap."""


class RouteNotFoundError(RoutePlannerError):
    """The destination is not reachable from the start."""
