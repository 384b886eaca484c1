"""Assignment of alignment columns to named partitions."""

from __future__ import annotations

from collections.abc import Iterable

import numpy
import numpy.typing as npt

from msaforge.core.errors import InvalidArgumentError, OutOfRangeError

UNASSIGNED = -1


class PartitionSet:
    """maps each column of an alignment to a partition index

    Parameters
    ----------
    length
        the number of alignment columns covered
    names
        partition names, their order defines the partition indices

    Notes
    -----
    Columns not assigned to any partition have index -1 and are dropped by
    ``Alignment.split()``.
    """

    def __init__(self, length: int, names: Iterable[str] | None = None) -> None:
        if length < 0:
            msg = f"length must be >= 0, not {length}"
            raise InvalidArgumentError(msg)
        self._length = length
        self._names: list[str] = list(names or [])
        self._sites = numpy.full(length, UNASSIGNED, dtype=int)

    @classmethod
    def from_labels(cls, labels: Iterable[str]) -> PartitionSet:
        """one partition per distinct label, in order of first occurrence"""
        labels = list(labels)
        result = cls(len(labels))
        for pos, label in enumerate(labels):
            result._sites[pos] = result._name_index(label)
        return result

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(length={self._length}, "
            f"names={self._names!r})"
        )

    def __len__(self) -> int:
        return self._length

    @property
    def length(self) -> int:
        """number of alignment columns covered"""
        return self._length

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._names)

    @property
    def num_partitions(self) -> int:
        return len(self._names)

    @property
    def sites(self) -> npt.NDArray[numpy.integer]:
        """partition index of every column"""
        return self._sites.copy()

    def _name_index(self, name: str) -> int:
        if name not in self._names:
            self._names.append(name)
        return self._names.index(name)

    def add_range(self, name: str, start: int, end: int, modulo: int = 1) -> None:
        """assigns columns start..end (inclusive, 0-based) to partition name

        Parameters
        ----------
        name
            partition name, created if it does not exist
        start, end
            inclusive range of columns
        modulo
            only every modulo-th column from start is assigned, 3 selects a
            single codon position
        """
        if start < 0 or end >= self._length or start > end:
            msg = f"range {start}-{end} is outside 0-{self._length - 1}"
            raise InvalidArgumentError(msg)
        if modulo < 1:
            msg = f"modulo must be >= 1, not {modulo}"
            raise InvalidArgumentError(msg)

        index = self._name_index(name)
        self._sites[start : end + 1 : modulo] = index

    def partition(self, pos: int) -> int:
        """the partition index of column pos, -1 if unassigned"""
        if pos < 0 or pos >= self._length:
            msg = f"position {pos} is outside 0-{self._length - 1}"
            raise OutOfRangeError(msg)
        return int(self._sites[pos])

    def partition_name(self, index: int) -> str:
        return self._names[index]

    def positions(self, index: int) -> npt.NDArray[numpy.integer]:
        """columns assigned to partition index, in increasing order"""
        return numpy.flatnonzero(self._sites == index)

    def check_sites(self) -> None:
        """raises InvalidArgumentError if any column has no partition"""
        missing = numpy.flatnonzero(self._sites == UNASSIGNED)
        if missing.size:
            msg = f"{missing.size} columns not assigned to a partition, first is {missing[0]}"
            raise InvalidArgumentError(msg)
