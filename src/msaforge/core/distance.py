"""Pairwise distances between the rows of an alignment.

Characters are encoded as bit sets over the canonical characters of the
moltype, so an ambiguity code is the union of the characters it stands for.
Two characters differ by one minus the size of their intersection over the
size of their union, e.g. R (A/G) and S (C/G) differ by 2/3 and N and G by
3/4. Gaps are handled according to a ``GapCount`` mode. Characters that
stand for nothing (``*``, ``?``, ``.``, unknown symbols) are never counted.
"""

from __future__ import annotations

import enum
from collections.abc import Callable, Iterable
from typing import TYPE_CHECKING

import numba
import numpy
import numpy.typing as npt

from msaforge.core.errors import (
    InvalidArgumentError,
    LengthMismatchError,
    UnknownSequenceError,
)
from msaforge.core.moltype import GAP_CODE, MolType

if TYPE_CHECKING:
    from msaforge.core.alignment import Alignment

NumpyFloatArrayType = npt.NDArray[numpy.floating]

# bit set of a gap, outside the range used by canonical characters
GAP_BITS = numpy.uint32(1 << 31)


class GapCount(enum.IntEnum):
    """how a gap facing a character contributes to a difference count

    NONE: gapped positions are ignored
    INTERNAL: a gap counts as one difference unless it is in the leading or
    trailing gap run of its sequence, in which case the position is ignored
    ALL: every gap facing a character counts as one difference
    """

    NONE = 0
    INTERNAL = 1
    ALL = 2


def _get_gap_count(gap_count: GapCount | int | str) -> GapCount:
    if isinstance(gap_count, str):
        try:
            return GapCount[gap_count.upper()]
        except KeyError:
            pass
    else:
        try:
            return GapCount(gap_count)
        except ValueError:
            pass
    choices = [g.name.lower() for g in GapCount]
    msg = f"gap count mode not available: {gap_count!r}, choose from {choices}"
    raise InvalidArgumentError(msg)


def char_bits(moltype: MolType) -> npt.NDArray[numpy.uint32]:
    """bit set of every ASCII code, 0 for codes that stand for nothing"""
    table = numpy.zeros(256, dtype=numpy.uint32)
    alphabet = moltype.alphabet
    for index, char in enumerate(alphabet):
        table[ord(char)] = 1 << index
    for code, chars in moltype.ambiguities.items():
        bits = 0
        for char in chars:
            bits |= 1 << alphabet.index(char)
        table[ord(code)] = bits
    if moltype.is_nucleic:
        table[ord("U")] = table[ord("T")]
    for upper in range(ord("A"), ord("Z") + 1):
        table[upper + 32] = table[upper]
    table[GAP_CODE] = GAP_BITS
    return table


@numba.njit(cache=True)
def _num_bits(value):  # pragma: no cover
    count = 0
    while value:
        value &= value - numba.uint32(1)
        count += 1
    return count


@numba.njit(cache=True)
def _count_diffs(
    seq1, seq2, ends1, ends2, selected, weights, gap_count
):  # pragma: no cover
    """weighted differences and the weighted number of compared positions"""
    diffs = 0.0
    total = 0.0
    for i in range(len(seq1)):
        if not selected[i]:
            continue
        a = seq1[i]
        b = seq2[i]
        if a == GAP_BITS or b == GAP_BITS:
            if a == b or gap_count == 0:
                continue
            if a == GAP_BITS:
                other, ends = b, ends1
            else:
                other, ends = a, ends2
            if other == 0:
                continue
            if gap_count == 1 and (i < ends[0] or i > ends[1]):
                continue
            diffs += weights[i]
            total += weights[i]
            continue
        if a == 0 or b == 0:
            continue
        if a != b:
            diffs += weights[i] * (1.0 - _num_bits(a & b) / _num_bits(a | b))
        total += weights[i]
    return diffs, total


@numba.njit(cache=True)
def _diff_matrices(seqs, ends, selected, weights, gap_count):  # pragma: no cover
    num_seqs = seqs.shape[0]
    diffs = numpy.zeros((num_seqs, num_seqs), dtype=numpy.float64)
    totals = numpy.zeros((num_seqs, num_seqs), dtype=numpy.float64)
    for i in range(num_seqs - 1):
        for j in range(i + 1, num_seqs):
            d, t = _count_diffs(
                seqs[i], seqs[j], ends[i], ends[j], selected, weights, gap_count
            )
            diffs[i, j] = diffs[j, i] = d
            totals[i, j] = totals[j, i] = t
    return diffs, totals


def _ungapped_ends(data: npt.NDArray[numpy.uint8]) -> npt.NDArray[numpy.int64]:
    """first and last non-gap column of every row, (length, -1) if all gaps"""
    ends = numpy.empty((data.shape[0], 2), dtype=numpy.int64)
    for row, seq in enumerate(data):
        filled = numpy.flatnonzero(seq != GAP_CODE)
        ends[row] = (filled[0], filled[-1]) if len(filled) else (len(seq), -1)
    return ends


def _get_weights(aln: Alignment, weights: Iterable[float] | None) -> NumpyFloatArrayType:
    if weights is None:
        return numpy.ones(len(aln), dtype=numpy.float64)
    weights = numpy.array(list(weights), dtype=numpy.float64)
    if len(weights) != len(aln):
        msg = f"{len(weights)} weights for an alignment of length {len(aln)}"
        raise LengthMismatchError(msg)
    if (weights < 0).any():
        msg = "weights must be >= 0"
        raise InvalidArgumentError(msg)
    return weights


def count_differences(
    aln: Alignment,
    gap_count: GapCount | int | str = GapCount.NONE,
    remove_gaps: bool = False,
    weights: Iterable[float] | None = None,
) -> tuple[NumpyFloatArrayType, NumpyFloatArrayType]:
    """pairwise weighted difference counts and compared position counts

    Parameters
    ----------
    aln
        the alignment
    gap_count
        a GapCount mode, or its name or value
    remove_gaps
        if True, columns with a gap in any row are excluded
    weights
        per column weights, e.g. from ``bootstrap_weights()``, defaults to 1

    Returns
    -------
    two symmetric num_seqs x num_seqs arrays, the differences and the
    totals, with zero diagonals
    """
    gap_count = _get_gap_count(gap_count)
    weights = _get_weights(aln, weights)
    if aln.num_seqs == 0:
        return numpy.zeros((0, 0)), numpy.zeros((0, 0))

    data = aln.array_seqs
    selected = numpy.ones(data.shape[1], dtype=bool)
    if remove_gaps:
        selected = ~(data == GAP_CODE).any(axis=0)

    seqs = char_bits(aln.moltype)[data]
    return _diff_matrices(
        seqs, _ungapped_ends(data), selected, weights, int(gap_count)
    )


class DistanceMatrix:
    """Symmetric pairwise distances between named sequences.

    Index with a pair of names, ``dists["a", "b"]``, or with one name for that
    sequence's distances to all sequences as a dict.
    """

    __slots__ = ("_array", "_index", "_names")

    def __init__(self, array: NumpyFloatArrayType, names: Iterable[str]) -> None:
        self._names = tuple(names)
        self._array = numpy.array(array, dtype=numpy.float64)
        if self._array.shape != (len(self._names), len(self._names)):
            msg = f"shape {self._array.shape} does not match {len(self._names)} names"
            raise LengthMismatchError(msg)
        self._index = {name: i for i, name in enumerate(self._names)}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(names={list(self._names)!r})"

    def __len__(self) -> int:
        return len(self._names)

    def _get_index(self, name: str) -> int:
        try:
            return self._index[name]
        except KeyError:
            msg = f"sequence {name!r} does not exist"
            raise UnknownSequenceError(msg) from None

    def __getitem__(self, key: str | tuple[str, str]) -> float | dict[str, float]:
        if isinstance(key, tuple):
            name1, name2 = key
            return float(self._array[self._get_index(name1), self._get_index(name2)])
        row = self._array[self._get_index(key)]
        return dict(zip(self._names, row.tolist()))

    @property
    def names(self) -> tuple[str, ...]:
        return self._names

    @property
    def array(self) -> NumpyFloatArrayType:
        """a copy of the distances"""
        return self._array.copy()

    def to_dict(self) -> dict[tuple[str, str], float]:
        """{(name1, name2): distance} for all pairs of distinct names"""
        return {
            (n1, n2): float(self._array[i, j])
            for i, n1 in enumerate(self._names)
            for j, n2 in enumerate(self._names)
            if i != j
        }


def raw(
    aln: Alignment,
    gap_count: GapCount | int | str = GapCount.NONE,
    remove_gaps: bool = False,
    weights: Iterable[float] | None = None,
) -> DistanceMatrix:
    """the weighted number of differences, not divided by the number of sites

    See ``count_differences()`` for the arguments.
    """
    diffs, _ = count_differences(aln, gap_count, remove_gaps, weights)
    return DistanceMatrix(diffs, aln.names)


def pdist(
    aln: Alignment,
    gap_count: GapCount | int | str = GapCount.NONE,
    remove_gaps: bool = False,
    weights: Iterable[float] | None = None,
) -> DistanceMatrix:
    """the proportion of compared positions that differ

    nan for a pair with no position compared.
    """
    diffs, totals = count_differences(aln, gap_count, remove_gaps, weights)
    with numpy.errstate(divide="ignore", invalid="ignore"):
        props = numpy.where(totals > 0, diffs / totals, numpy.nan)
    numpy.fill_diagonal(props, 0.0)
    return DistanceMatrix(props, aln.names)


def jc69(
    aln: Alignment,
    gap_count: GapCount | int | str = GapCount.NONE,
    remove_gaps: bool = False,
    weights: Iterable[float] | None = None,
) -> DistanceMatrix:
    """Jukes-Cantor distances for the number of canonical characters

    Notes
    -----
    With k canonical characters and p the proportion of differences, the
    distance is -(k - 1) / k * log(1 - k / (k - 1) * p). It is nan when
    p >= (k - 1) / k or when no position is compared.
    """
    diffs, totals = count_differences(aln, gap_count, remove_gaps, weights)
    num_states = len(aln.moltype.alphabet)
    frac = num_states / (num_states - 1)
    with numpy.errstate(divide="ignore", invalid="ignore"):
        props = numpy.where(totals > 0, diffs / totals, numpy.nan)
        valid = props < 1 / frac
        safe = numpy.where(valid, props, 0.0)
        dists = numpy.where(valid, -numpy.log(1.0 - frac * safe) / frac, numpy.nan)
    dists[props == 0] = 0.0
    numpy.fill_diagonal(dists, 0.0)
    return DistanceMatrix(dists, aln.names)


_calculators: dict[str, Callable[..., DistanceMatrix]] = {
    "raw": raw,
    "pdist": pdist,
    "jc69": jc69,
}


def available_calculators() -> list[str]:
    return sorted(_calculators)


def get_distance_calculator(name: str) -> Callable[..., DistanceMatrix]:
    """returns a pairwise distance calculator

    name is converted to lower case"""
    name = name.lower()
    if name not in _calculators:
        msg = (
            f"unknown pairwise distance calculator {name!r}, "
            f"choose from {available_calculators()}"
        )
        raise InvalidArgumentError(msg)

    return _calculators[name]
