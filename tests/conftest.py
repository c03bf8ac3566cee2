import pytest

from eventmap import OrderedEventMap


@pytest.fixture
def abc_map():
    return OrderedEventMap([("a", 1), ("b", 2), ("c", 3)])


@pytest.fixture
def recorder():
    """Collects (event, key, value) tuples from map listeners."""

    class Recorder:
        def __init__(self):
            self.calls = []

        def attach(self, m):
            m.on("set", lambda k, v: self.calls.append(("set", k, v)))
            m.on("delete", lambda k, v: self.calls.append(("delete", k, v)))
            return m

    return Recorder()
