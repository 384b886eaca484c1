"""Perturbation of alignments for benchmarking downstream tools.

Every operator takes an ``rng`` argument (see ``msaforge.maths.rng``) and
draws from it in a fixed order, so identical seeds give identical results.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING

import numpy
import numpy.typing as npt

from msaforge.core.errors import InvalidArgumentError, UnknownSequenceError
from msaforge.core.moltype import GAP_CODE, STD_AMINO_ACIDS, STD_NUCLEOTIDES
from msaforge.maths.rng import RandomSource, get_random_source

if TYPE_CHECKING:
    from msaforge.core.alignment import Alignment

RngType = RandomSource | int | None


def _check_proportion(value: float, label: str) -> None:
    if not 0 <= value <= 1:
        msg = f"{label} must be >= 0 and <= 1, not {value}"
        raise InvalidArgumentError(msg)


def _swap_rows(data: npt.NDArray[numpy.uint8], a: int, b: int, cols) -> None:
    data[[a, b], cols] = data[[b, a], cols]


def shuffle_sites(
    aln: Alignment,
    rate: float,
    rogue_rate: float = 0.0,
    rogue_first: bool = False,
    rng: RngType = None,
) -> list[str]:
    """vertically shuffles a proportion of columns in place

    Parameters
    ----------
    aln
        the alignment, modified in place
    rate
        int(rate * length) columns have the characters of all rows shuffled
    rogue_rate
        int(rogue_rate * num_seqs) rows are rogues. In a further
        int(rate * (1 - rate) * length) columns only the rogue rows are
        shuffled among themselves.
    rogue_first
        if True the row permutation choosing the rogues is drawn before the
        column permutation, so a given seed picks the same rogues for
        alignments of different lengths
    rng
        random source

    Returns
    -------
    names of the rogue rows
    """
    _check_proportion(rate, "shuffle rate")
    _check_proportion(rogue_rate, "rogue rate")

    length = max(aln.length, 0)
    num_seqs = aln.num_seqs
    num_sites = int(rate * length)
    num_rogue_sites = int(rate * (1.0 - rate) * length)
    num_rogues = int(rogue_rate * num_seqs)
    if num_sites + num_rogue_sites > length:
        msg = f"too many sites to shuffle ({num_sites}+{num_rogue_sites}>{length})"
        raise InvalidArgumentError(msg)

    rng = get_random_source(rng)
    if rogue_first:
        rows = rng.permutation(num_seqs)
        sites = rng.permutation(length)
    else:
        sites = rng.permutation(length)
        rows = rng.permutation(num_seqs)

    data = aln.array_seqs
    for site in sites[:num_sites]:
        n = num_seqs
        while n > 1:
            r = rng.randint(n)
            n -= 1
            _swap_rows(data, n, r, site)

    for site in sites[num_sites : num_sites + num_rogue_sites]:
        for r in range(num_rogues):
            j = rng.randint(r + 1)
            _swap_rows(data, rows[r], rows[j], site)

    aln.update_from_array(data)
    names = aln.names
    return [names[i] for i in rows[:num_rogues]]


def swap(aln: Alignment, rate: float, rng: RngType = None) -> None:
    """exchanges the tails of int(rate * num_seqs / 2) pairs of rows

    Each pair swaps all characters from a random column to the end. Does
    nothing if rate is outside [0, 1].
    """
    if not 0 <= rate <= 1 or aln.length <= 0:
        return

    rng = get_random_source(rng)
    half = int(rate * aln.num_seqs) // 2
    rows = rng.permutation(aln.num_seqs)
    data = aln.array_seqs
    for i in range(half):
        pos = rng.randint(aln.length)
        _swap_rows(data, rows[i], rows[i + half], slice(pos, None))
    aln.update_from_array(data)


def recombine(
    aln: Alignment, prop: float, len_prop: float, rng: RngType = None
) -> None:
    """copies a block of int(len_prop * length) columns between pairs of rows

    int(prop * num_seqs) rows each receive the block, at a random offset,
    from a distinct donor row. Does nothing unless 0 <= prop <= 0.5 and
    0 <= len_prop <= 1.
    """
    if not 0 <= prop <= 0.5 or not 0 <= len_prop <= 1 or aln.length <= 0:
        return

    rng = get_random_source(rng)
    num = int(prop * aln.num_seqs)
    size = int(len_prop * aln.length)
    rows = rng.permutation(aln.num_seqs)
    data = aln.array_seqs
    for i in range(num):
        pos = rng.randint(aln.length - size + 1)
        data[rows[i], pos : pos + size] = data[rows[i + num], pos : pos + size]
    aln.update_from_array(data)


def add_gaps(
    aln: Alignment, len_prop: float, prop: float, rng: RngType = None
) -> None:
    """sets int(len_prop * length) random columns of int(prop * num_seqs) rows to gaps

    Does nothing if either proportion is outside [0, 1].
    """
    if not 0 <= prop <= 1 or not 0 <= len_prop <= 1 or aln.length <= 0:
        return

    rng = get_random_source(rng)
    num = int(prop * aln.num_seqs)
    num_gaps = int(len_prop * aln.length)
    rows = rng.permutation(aln.num_seqs)
    data = aln.array_seqs
    for i in range(num):
        sites = rng.permutation(aln.length)
        data[rows[i], sites[:num_gaps]] = GAP_CODE
    aln.update_from_array(data)


def mutate(aln: Alignment, rate: float, rng: RngType = None) -> None:
    """substitutes characters uniformly at random

    Every character is replaced with probability rate (capped at 1) by a
    uniform draw from the 20 standard amino acids (protein) or ACGT. Gaps,
    match points and other characters are never changed. Does nothing if
    rate <= 0.
    """
    if rate <= 0 or aln.length <= 0:
        return
    rate = min(rate, 1.0)

    rng = get_random_source(rng)
    alphabet = STD_AMINO_ACIDS if aln.moltype.name == "protein" else STD_NUCLEOTIDES
    codes = [ord(c) for c in alphabet]
    data = aln.array_seqs
    eligible = aln.moltype.informative_mask(data)
    for i in range(aln.num_seqs):
        for j in range(aln.length):
            if rng.random() <= rate and eligible[i, j]:
                data[i, j] = codes[rng.randint(len(codes))]
    aln.update_from_array(data)


def simulate_rogue(
    aln: Alignment, prop: float, prop_len: float, rng: RngType = None
) -> tuple[list[str], list[str]]:
    """shuffles positions within a proportion of rows, making them rogues

    Parameters
    ----------
    prop
        int(prop * num_seqs) rows become rogues
    prop_len
        int(prop_len * length) random positions of each rogue are shuffled
        in place. 0 means there are no rogues.

    Returns
    -------
    rogue names, intact names
    """
    _check_proportion(prop, "rogue proportion")
    _check_proportion(prop_len, "rogue length proportion")
    if prop_len == 0:
        prop = 0.0

    rng = get_random_source(rng)
    length = max(aln.length, 0)
    num = int(prop * aln.num_seqs)
    size = int(prop_len * length)
    rows = rng.permutation(aln.num_seqs)
    data = aln.array_seqs
    for r in range(num):
        row = rows[r]
        sites = rng.permutation(length)[:size]
        for i in range(len(sites)):
            j = rng.randint(i + 1)
            data[row, [sites[i], sites[j]]] = data[row, [sites[j], sites[i]]]
    aln.update_from_array(data)

    names = aln.names
    return [names[i] for i in rows[:num]], [names[i] for i in rows[num:]]


def bootstrap_indices(length: int, rng: RngType = None) -> list[int]:
    """length column indices drawn uniformly with replacement"""
    rng = get_random_source(rng)
    return [rng.randint(length) for _ in range(length)]


def bootstrap_weights(length: int, rng: RngType = None) -> npt.NDArray[numpy.floating]:
    """per column weights of a bootstrap replicate

    The weight of a column is the number of times it is drawn in
    ``bootstrap_indices()``, from the same draws, so the weights sum to
    length.
    """
    indices = numpy.array(bootstrap_indices(length, rng=rng), dtype=numpy.int64)
    return numpy.bincount(indices, minlength=length).astype(numpy.float64)


def sample_indices(num_seqs: int, n: int, rng: RngType = None) -> list[int]:
    """n distinct row indices drawn without replacement, in row order"""
    if n < 1 or n > num_seqs:
        msg = f"number of sequences to sample must be in 1-{num_seqs}, not {n}"
        raise InvalidArgumentError(msg)
    rng = get_random_source(rng)
    return sorted(int(i) for i in rng.permutation(num_seqs)[:n])


def rarefy_indices(
    names: Sequence[str],
    n: int,
    counts: Mapping[str, int],
    rng: RngType = None,
) -> list[int]:
    """indices of the distinct rows in a draw of n from a weighted population

    Parameters
    ----------
    names
        row names, in row order
    n
        number of individuals drawn without replacement from the population
        where each row occurs counts[name] times
    counts
        multiplicity of each row, missing names count 0

    Returns
    -------
    the indices of rows drawn at least once, in row order
    """
    unknown = [name for name in counts if name not in names]
    if unknown:
        msg = f"sequences {unknown} do not exist"
        raise UnknownSequenceError(msg)
    negative = [name for name, count in counts.items() if count < 0]
    if negative:
        msg = f"counts must be >= 0, check {negative}"
        raise InvalidArgumentError(msg)

    population = numpy.repeat(
        numpy.arange(len(names)), [counts.get(name, 0) for name in names]
    )
    total = len(population)
    if n < 1 or n > total:
        msg = f"number to sample must be in 1-{total}, not {n}"
        raise InvalidArgumentError(msg)

    rng = get_random_source(rng)
    chosen = population[rng.permutation(total)[:n]]
    return sorted(set(chosen.tolist()))
