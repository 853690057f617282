"""
Lazy sequences

A Sequence wraps a zero-argument producer and hands out its values one pull
at a time. It remembers when the producer has run dry and lets callers push
values back so they come out again on the next pull.
"""

import logging
from typing import Any, Callable, Iterable, List

from .config import get_settings

logger = logging.getLogger(__name__)


class _End:
    """Type of the end-of-sequence marker. There is only ever one instance."""
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self):
        return "<END>"

    def __bool__(self):
        return False

    def __reduce__(self):
        return (_End, ())


END = _End()


class LazyError(Exception):
    """Base class for lazyutil errors."""
    pass


class NotAProducerError(LazyError, TypeError):
    """Raised when a sequence source is neither callable nor a deferred value."""
    pass


class InvalidPushbackError(LazyError, ValueError):
    """Raised when the end-of-sequence marker is pushed back."""
    pass


def is_deferred(value: Any) -> bool:
    """Check whether ``value`` can be forced for its next value"""
    settings = get_settings()
    if not settings.recognize_deferred:
        return False
    if isinstance(value, Sequence):
        return False
    force = getattr(value, settings.deferred_method, None)
    return callable(force)


class Sequence:
    """
    A lazily evaluated sequence of values.

    Values come from ``producer`` which is called with no arguments each time
    a new value is needed. It returns ``END`` (or raises ``StopIteration``)
    when it has nothing more to give; from then on it is never called again.
    Values pushed back with ``pushback()`` are returned before the producer
    is consulted, most recently pushed first.
    """

    def __init__(self, producer: Callable[[], Any]):
        if is_deferred(producer):
            deferred = producer
            force = getattr(deferred, get_settings().deferred_method)
            producer = force
            logger.debug(f"Wrapping deferred value {deferred!r}")

        if not callable(producer):
            logger.error(f"Cannot build a Sequence from {producer!r}")
            raise NotAProducerError(f"Not a producer: {producer!r}")

        self._producer = producer
        self._exhausted = False
        self._pushback: List[Any] = []   # stack; last item comes out first

    @classmethod
    def from_iterable(cls, iterable: Iterable) -> "Sequence":
        """Build a Sequence that pulls from ``iterable`` on demand"""
        return cls(iter(iterable).__next__)

    @classmethod
    def empty(cls) -> "Sequence":
        """An already exhausted Sequence"""
        seq = cls(lambda: END)
        seq._exhausted = True
        return seq

    @property
    def exhausted(self) -> bool:
        """Whether the producer has reported end-of-sequence"""
        return self._exhausted

    def pull(self) -> Any:
        """Return the next value, or ``END`` when there are no more values."""
        if self._pushback:
            return self._pushback.pop()

        if self._exhausted:
            return END

        try:
            value = self._producer()
        except StopIteration:
            value = END

        if value is END:
            self._exhausted = True
            self._producer = None
            logger.debug(f"{self!r} is exhausted")
        elif get_settings().trace_pulls:
            logger.debug(f"{self!r} pulled {value!r}")

        return value

    def pushback(self, value: Any) -> "Sequence":
        """
        Stash ``value`` so the next ``pull()`` returns it.

        Can be called repeatedly; the latest stashed value comes out first.
        """
        if value is END:
            raise InvalidPushbackError("Can't push back the end-of-sequence marker")

        self._pushback.append(value)
        return self

    def is_exhausted(self) -> bool:
        """
        Check whether the producer has run out.

        The check pulls one value and pushes it straight back, so the next
        ``pull()`` still sees it. Pushed back values are still returned by
        ``pull()`` after the producer has run out.
        """
        value = self.pull()
        if value is not END:
            self.pushback(value)
        return self._exhausted

    def drain_all(self) -> List[Any]:
        """
        Pull every remaining value into a list.

        Never returns for an infinite source.
        """
        values = []
        while True:
            value = self.pull()
            if value is END:
                return values
            values.append(value)

    # --------- iterator protocol ----------
    def __iter__(self):
        return self

    def __next__(self):
        value = self.pull()
        if value is END:
            raise StopIteration
        return value

    def __repr__(self):
        state = "exhausted" if self._exhausted else "active"
        return f"<Sequence {state} pending={len(self._pushback)} at 0x{id(self):x}>"


def one_shot(value: Any) -> Sequence:
    """A Sequence that yields ``value`` once"""
    pending = [value]

    def producer():
        if pending:
            return pending.pop()
        return END

    return Sequence(producer)
