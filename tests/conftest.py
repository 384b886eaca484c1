import gc
from collections import deque

import numpy
import pytest

from msaforge.maths.rng import set_default_random_source


class ScriptedRandom:
    """a random source returning pre-set values, in order"""

    def __init__(self, ints=(), perms=(), floats=()):
        self._ints = deque(ints)
        self._perms = deque(perms)
        self._floats = deque(floats)

    def randint(self, n):
        value = self._ints.popleft()
        assert 0 <= value < n, (value, n)
        return value

    def permutation(self, n):
        value = list(self._perms.popleft())
        assert sorted(value) == list(range(n)), (value, n)
        return numpy.array(value, dtype=int)

    def random(self):
        return self._floats.popleft()

    @property
    def exhausted(self):
        return not (self._ints or self._perms or self._floats)


@pytest.fixture
def scripted():
    """factory for random sources with pre-set draws"""
    return ScriptedRandom


@pytest.fixture(scope="session", autouse=True)
def _try_cleaning_up_on_autouse_fixture_teardown():
    yield
    for _ in range(10):
        gc.collect()


@pytest.fixture(autouse=True)
def fresh_default_random_source():
    """each test starts without a shared default random source"""
    set_default_random_source(None)
    yield
    set_default_random_source(None)
