"""Query Groups - Composable in-memory index queries with named groups."""

from query_groups.context import BoundQuery, QueryContext, invoke
from query_groups.errors import (
    GroupCycleError,
    InvalidRangeError,
    KeyNotFoundError,
    QueryDepthError,
    QueryError,
    UnknownGroupError,
)
from query_groups.format import format_query
from query_groups.parsing import QueryParser
from query_groups.types import (
    Difference,
    GroupReference,
    Intersection,
    ListCombination,
    Query,
    RangeLookup,
    SingleLookup,
    make_index_set,
)

__all__ = [
    # Main API
    "QueryContext",
    "BoundQuery",
    "invoke",
    "format_query",
    "QueryParser",
    # Query variants
    "Query",
    "SingleLookup",
    "RangeLookup",
    "GroupReference",
    "ListCombination",
    "Intersection",
    "Difference",
    "make_index_set",
    # Errors
    "QueryError",
    "KeyNotFoundError",
    "UnknownGroupError",
    "InvalidRangeError",
    "GroupCycleError",
    "QueryDepthError",
]

__version__ = "0.1.0"
