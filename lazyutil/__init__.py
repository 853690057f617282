"""
lazyutil - lazy sequences and the utilities to combine and drain them.

Combinators (``concat``, ``map``, ``grep``, ``take``, ``find``, ``nfind``,
``until``, ``uniq``, ``nuniq``) return new lazy Sequences; aggregators
(``count``, ``first``, ``last``, ``max``, ``min``, ``sum``, ``prod``,
``join``) drain them into a single value.
"""

from .lazy import (
    END, Sequence, LazyError, NotAProducerError, InvalidPushbackError, is_deferred
)
from .combinators import concat, map, grep, filter, take, find, nfind, until, uniq, nuniq
from .aggregators import count, first, last, max, min, sum, prod, join
from .config import configure, configure_logging, get_settings, reset_settings
from .models import LazySettings

__all__ = [
    "END", "Sequence", "LazyError", "NotAProducerError", "InvalidPushbackError", "is_deferred",
    "concat", "map", "grep", "filter", "take", "find", "nfind", "until", "uniq", "nuniq",
    "count", "first", "last", "max", "min", "sum", "prod", "join",
    "configure", "configure_logging", "get_settings", "reset_settings", "LazySettings",
]
