"""
Aggregators: drain sources into a single value.

Sources are chained with ``concat`` exactly as for the combinators. Apart
from ``first`` and ``prod`` these pull everything, so they never return on
an infinite source.
"""

import logging
from typing import Any

from .combinators import concat
from .lazy import END

logger = logging.getLogger(__name__)


def count(*sources) -> int:
    """Number of values in ``sources``"""
    seq = concat(*sources)
    total = 0
    while seq.pull() is not END:
        total += 1
    return total


def first(*sources, default: Any = None) -> Any:
    """The first value, or ``default`` when there is none. Pulls only once."""
    value = concat(*sources).pull()
    return default if value is END else value


def last(*sources, default: Any = None) -> Any:
    """The final value, or ``default`` when there is none."""
    seq = concat(*sources)
    result = default
    while True:
        value = seq.pull()
        if value is END:
            return result
        result = value


def _extreme(better, sources, default):
    seq = concat(*sources)
    best = seq.pull()
    if best is END:
        return default
    while True:
        value = seq.pull()
        if value is END:
            return best
        if better(value, best):
            best = value


def max(*sources, default: Any = None) -> Any:
    """
    The greatest value, or ``default`` when there is none.

    Ties keep the earliest value. Values must be comparable with ``>``.
    """
    return _extreme(lambda value, best: value > best, sources, default)


def min(*sources, default: Any = None) -> Any:
    """
    The least value, or ``default`` when there is none.

    Ties keep the earliest value. Values must be comparable with ``<``.
    """
    return _extreme(lambda value, best: value < best, sources, default)


def sum(*sources) -> Any:
    """Arithmetic sum of the values, 0 when there are none"""
    seq = concat(*sources)
    total = 0
    while True:
        value = seq.pull()
        if value is END:
            return total
        total = total + value


def prod(*sources) -> Any:
    """
    Arithmetic product of the values, 1 when there are none.

    Stops as soon as the product is zero: later sources are never touched.
    """
    seq = concat(*sources)
    product = 1
    while True:
        value = seq.pull()
        if value is END:
            return product
        product = product * value
        if product == 0:
            logger.debug("Product reached zero, not pulling further values")
            return product


def join(separator: str, *sources, default: Any = None) -> Any:
    """
    The string form of every value with ``separator`` in between.

    Returns ``default`` when there are no values.
    """
    seq = concat(*sources)
    value = seq.pull()
    if value is END:
        return default

    parts = [str(value)]
    while True:
        value = seq.pull()
        if value is END:
            return separator.join(parts)
        parts.append(str(value))
