"""The random source consumed by the simulation operators.

Every randomised operation takes an ``rng`` argument, which may be a
``RandomSource``, an integer seed or None. None draws from a single shared
source, created on first use with the seed from the ``MSAFORGE_RANDOM``
environment variable (e.g. ``MSAFORGE_RANDOM=seed=42``), or unseeded if that
is not set.
"""

import numpy
import numpy.typing as npt

from msaforge.util.misc import get_setting_from_environ

NumpyIntArrayType = npt.NDArray[numpy.integer]

RANDOM_ENV = "MSAFORGE_RANDOM"


class RandomSource:
    """Uniform random integers, permutations and floats.

    Parameters
    ----------
    seed
        seed for a ``numpy.random.Generator``, identical seeds reproduce
        identical draws
    """

    def __init__(self, seed: int | None = None) -> None:
        self._seed = seed
        self._rng = numpy.random.default_rng(seed)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(seed={self._seed!r})"

    @property
    def seed(self) -> int | None:
        return self._seed

    def randint(self, n: int) -> int:
        """random integer in [0, n)"""
        return int(self._rng.integers(n))

    def randints(self, n: int, size: int) -> NumpyIntArrayType:
        """size random integers in [0, n)"""
        return self._rng.integers(n, size=size)

    def permutation(self, n: int) -> NumpyIntArrayType:
        """random permutation of range(n)"""
        return self._rng.permutation(n)

    def random(self) -> float:
        """random float in [0, 1)"""
        return float(self._rng.random())


_default_source: RandomSource | None = None


def set_default_random_source(rng: "RandomSource | int | None" = None) -> None:
    """sets the source used when an operation is given rng=None

    Parameters
    ----------
    rng
        a random source or a seed. None discards the current default, the
        next draw creates a new one from ``MSAFORGE_RANDOM``.
    """
    global _default_source
    _default_source = None if rng is None else get_random_source(rng)


def get_default_random_source() -> RandomSource:
    """the shared source used when an operation is given rng=None

    Created on first use, seeded from the ``MSAFORGE_RANDOM`` environment
    variable if set. Successive operations continue the same stream.
    """
    global _default_source
    if _default_source is None:
        seed = get_setting_from_environ(RANDOM_ENV, {"seed": int}).get("seed")
        _default_source = RandomSource(seed=seed)
    return _default_source


def get_random_source(rng: "RandomSource | int | None" = None) -> RandomSource:
    """returns a RandomSource from a source, a seed or the shared default

    Any object providing ``randint``, ``permutation`` and ``random`` is
    returned unchanged.
    """
    if rng is None:
        return get_default_random_source()
    if isinstance(rng, RandomSource) or all(
        hasattr(rng, attr) for attr in ("randint", "permutation", "random")
    ):
        return rng
    return RandomSource(seed=rng)
