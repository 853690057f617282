"""
Combinators: build new lazy sequences out of existing ones.

Every combinator takes its sources as trailing positional arguments. A source
can be a plain value, a zero-argument producer, a deferred value or another
Sequence; they are chained left to right by ``concat``. Nothing is pulled
until the returned Sequence is.
"""

import logging
import numbers
from collections import deque
from collections.abc import Iterator
from typing import Any, Callable

from .lazy import END, Sequence, is_deferred, one_shot

logger = logging.getLogger(__name__)


def numeric_key(value: Any) -> Any:
    """Value used for numeric comparisons: numbers as-is, anything else through float()"""
    if isinstance(value, numbers.Number):
        return value
    return float(value)


def _call(function: Callable[[Any], Any], value: Any) -> Any:
    # StopIteration from a callback must not look like the end of the producer
    try:
        return function(value)
    except StopIteration as e:
        raise RuntimeError(f"{function!r} raised StopIteration") from e


def _normalize(source: Any) -> Sequence:
    if isinstance(source, Sequence):
        return source
    if is_deferred(source) or callable(source):
        return Sequence(source)
    return one_shot(source)


def concat(*sources) -> Sequence:
    """
    Chain ``sources`` into one Sequence.

    Each source is turned into a Sequence the first time it is reached and
    pulled until it runs out, then the next one takes over. A single
    Sequence argument is returned as it is.
    """
    pending = deque(source for source in sources if source is not END)

    if len(pending) == 1 and isinstance(pending[0], Sequence):
        return pending[0]

    if not pending:
        return Sequence.empty()

    logger.debug(f"Concatenating {len(pending)} sources")

    def producer():
        while pending:
            head = pending[0]
            if not isinstance(head, Sequence):
                head = pending[0] = _normalize(head)

            value = head.pull()
            if value is not END:
                return value
            pending.popleft()
        return END

    return Sequence(producer)


def map(function: Callable[[Any], Any], *sources) -> Sequence:
    """
    Apply ``function`` to every value.

    If ``function`` returns an iterator (a generator, say) its items are
    emitted one by one before the next value is pulled; an empty iterator
    drops the value.
    """
    upstream = concat(*sources)
    expansion = None

    def producer():
        nonlocal expansion
        while True:
            if expansion is not None:
                value = next(expansion, END)
                if value is not END:
                    return value
                expansion = None

            value = upstream.pull()
            if value is END:
                return END

            result = _call(function, value)
            if isinstance(result, Iterator):
                expansion = result
                continue
            return result

    return Sequence(producer)


def grep(predicate: Callable[[Any], Any], *sources) -> Sequence:
    """Keep only the values for which ``predicate`` is true."""
    upstream = concat(*sources)

    def producer():
        while True:
            value = upstream.pull()
            if value is END or _call(predicate, value):
                return value

    return Sequence(producer)


filter = grep


def take(n: int, *sources) -> Sequence:
    """
    The first ``n`` values of ``sources``.

    Useful to cut an infinite source short. The upstream is not pulled once
    ``n`` values have been handed out.
    """
    upstream = concat(*sources)
    if n <= 0:
        return Sequence.empty()

    remaining = n

    def producer():
        nonlocal remaining
        if remaining <= 0:
            return END
        remaining -= 1
        return upstream.pull()

    return Sequence(producer)


def _take_through(matches: Callable[[Any], Any], upstream: Sequence) -> Sequence:
    done = False

    def producer():
        nonlocal done
        if done:
            return END
        value = upstream.pull()
        if value is not END and _call(matches, value):
            done = True
        return value

    return Sequence(producer)


def until(predicate: Callable[[Any], Any], *sources) -> Sequence:
    """Values up to and including the first one for which ``predicate`` is true."""
    return _take_through(predicate, concat(*sources))


def find(target: Any, *sources) -> Sequence:
    """Values up to and including the first one equal to ``target``."""
    return _take_through(lambda value: value == target, concat(*sources))


def nfind(target: Any, *sources) -> Sequence:
    """Like ``find`` but compares numerically, so ``"2"`` matches ``2.0``."""
    wanted = numeric_key(target)
    return _take_through(lambda value: numeric_key(value) == wanted, concat(*sources))


def _first_seen(key: Callable[[Any], Any], upstream: Sequence) -> Sequence:
    # grows with every distinct value seen
    seen = set()

    def producer():
        while True:
            value = upstream.pull()
            if value is END:
                return END
            k = _call(key, value)
            if k not in seen:
                seen.add(k)
                return value

    return Sequence(producer)


def uniq(*sources) -> Sequence:
    """Drop values equal to one already seen. Values must be hashable."""
    return _first_seen(lambda value: value, concat(*sources))


def nuniq(*sources) -> Sequence:
    """Drop values numerically equal to one already seen."""
    return _first_seen(numeric_key, concat(*sources))
