from .search import detect, every, some
from .partition import filter, reject
from .fold import reduce, transform
from .ordering import sort, sort_by
from .traverse import concat, each, map

__all__ = (
    # Fan-out
    "concat",
    "each",
    "map",
    # Filter
    "filter",
    "reject",
    # Detect
    "detect",
    "every",
    "some",
    # Sort
    "sort",
    "sort_by",
    # Series
    "reduce",
    "transform",
)
