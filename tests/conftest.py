import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

from lazyutil import END
from lazyutil.config import reset_settings
from lazyutil.utils import clear_performance_metrics


ENV_VARS = (
    "LAZYUTIL_RECOGNIZE_DEFERRED",
    "LAZYUTIL_DEFERRED_METHOD",
    "LAZYUTIL_TRACE_PULLS",
    "LAZYUTIL_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    reset_settings()
    clear_performance_metrics()
    yield
    reset_settings()
    clear_performance_metrics()


class CountingProducer:
    """Producer handing out items from a list, counting every call"""

    def __init__(self, items):
        self.items = list(items)
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.items:
            return self.items.pop(0)
        return END


class Deferred:
    """Minimal deferred value: forcing it yields the next item"""

    def __init__(self, items):
        self._it = iter(items)

    def force(self):
        return next(self._it, END)
