from abc import ABC, abstractmethod
from collections.abc import (
    Callable,
    Hashable,
    ItemsView,
    Iterable,
    Iterator,
    KeysView,
    MutableMapping,
    ValuesView,
)
from typing import Any, Generic, TypeVar, cast

import numpy
import numpy.typing as npt
from typing_extensions import Self

K = TypeVar("K", bound=Hashable)
V = TypeVar("V", float, int)

NumpyArray = npt.NDArray[Any]


class SummaryStatBase(Generic[K, V], ABC, MutableMapping[K, V]):
    @abstractmethod
    def expanded_values(self) -> list[V]: ...

    @abstractmethod
    def __len__(self) -> int: ...

    @abstractmethod
    def items(self) -> ItemsView[K, V]: ...

    @property
    def mean(self) -> numpy.floating | float | int:
        return numpy.mean(self.expanded_values()) if len(self) > 0 else 0

    @property
    def mode(self) -> K:
        mode, _ = max(self.items(), key=lambda item: item[1])
        return mode

    @property
    def sum(self) -> numpy.floating | int:
        return numpy.sum(self.expanded_values()) if len(self) > 0 else 0


class CategoryCounter(SummaryStatBase[K, int]):
    """counting class with summary statistic attributes

    Notes
    -----
    Keys are kept in order of first occurrence. ``len()`` is the total
    count, ``num_categories`` the number of distinct keys.
    """

    def __init__(self, data: dict[K, int] | Iterable[K] | None = None) -> None:
        self._counts: dict[K, int] = {}
        if data is not None:
            if isinstance(data, dict):
                self.update_from_counts(cast("dict[K, int]", data))
            else:
                self.update_from_series(data)

    def update_from_counts(self, data: dict[K, int]) -> None:
        """updates values of self using counts dict"""
        for k, v in data.items():
            self[k] += v

    def update_from_series(self, data: Iterable[K]) -> None:
        """updates values of self from raw series"""
        for element in data:
            self[element] += 1

    def expand(self) -> list[K]:
        """returns list of [[k] * val, ..]"""
        result: list[K] = []
        for k in self:
            result.extend([k] * self[k])
        return result

    def expanded_values(self) -> list[int]:
        return list(self.values())

    def copy(self) -> Self:
        data = self.to_dict().copy()
        return self.__class__(data)

    def __setitem__(self, key: K, val: int) -> None:
        self._counts[key] = val

    def __getitem__(self, key: K) -> int:
        return self._counts.get(key, 0)

    def __delitem__(self, key: K) -> None:
        del self._counts[key]

    def __len__(self) -> int:
        return sum(self.values())

    def __iter__(self) -> Iterator[K]:
        return iter(self._counts)

    def __contains__(self, key: object) -> bool:
        return key in self._counts

    def __eq__(self, other: object) -> bool:
        if isinstance(other, CategoryCounter):
            other = other.to_dict()
        return self.to_dict() == other

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self._counts!r})"

    @property
    def num_categories(self) -> int:
        return len(self._counts)

    def keys(self) -> KeysView[K]:
        return self._counts.keys()

    def values(self) -> ValuesView[int]:
        return self._counts.values()

    def items(self) -> ItemsView[K, int]:
        return self._counts.items()

    def to_dict(self) -> dict[K, int]:
        return dict(self._counts)

    def tolist(self, keys: Iterable[K] | None = None) -> list[int]:
        """return values for these keys as a list"""
        if keys is None:
            keys = list(self)
        return [self[key] for key in keys]

    def to_array(self, keys: Iterable[K] | None = None) -> npt.NDArray[numpy.integer]:
        """return values for these keys as an array"""
        data = self.tolist(keys=keys)
        return numpy.array(data, dtype=int)

    def entropy(
        self, log: Callable[[NumpyArray], NumpyArray] = numpy.log2
    ) -> numpy.floating | float:
        """Shannon entropy of the category frequencies

        Parameters
        ----------
        log
            the logarithm function, log2 by default. Returns nan if there
            are no counts.
        """
        total = self.sum
        if not total:
            return numpy.nan
        data = self.to_array() / total
        data = data[data > 0]
        return -(data * log(data)).sum()
