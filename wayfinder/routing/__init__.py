"""Route search over pool snapshots.

Module structure:
- graph.py: PoolGraph adjacency view and simple-route enumeration
- bounds.py: RouteBounds optimistic output bounds, OverflowLimits
- search.py: RouteSearch best-output search
- config.py: SearchConfig
- types.py: HopResult, RouteResult, SearchOutcome, RouteError
"""

from wayfinder.routing.config import DEFAULT_SEARCH_CONFIG, SearchConfig
from wayfinder.routing.graph import Edge, PoolGraph
from wayfinder.routing.search import RouteSearch, find_best_route
from wayfinder.routing.types import HopResult, RouteError, RouteResult, SearchOutcome

__all__ = [
    "DEFAULT_SEARCH_CONFIG",
    "Edge",
    "HopResult",
    "PoolGraph",
    "RouteError",
    "RouteResult",
    "RouteSearch",
    "SearchConfig",
    "SearchOutcome",
    "find_best_route",
]
