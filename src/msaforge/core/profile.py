"""Per-site and whole alignment summary statistics.

All statistics compare upper cased characters. The functions take an
``Alignment`` and are exposed as its methods.
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

import numpy
import numpy.typing as npt

from msaforge.core.errors import (
    LengthMismatchError,
    OutOfRangeError,
    UnknownCharacterError,
    UnsupportedAlphabetError,
    UnsupportedNormalizationError,
)
from msaforge.core.moltype import (
    GAP,
    GAP_CODE,
    POINT,
    STRONG_GROUPS,
    UNKNOWN,
    WEAK_GROUPS,
    to_upper,
)
from msaforge.maths.stats.number import CategoryCounter
from msaforge.maths.util import log2_with_neg_inf, safe_p_log_p

if TYPE_CHECKING:
    from msaforge.core.alignment import Alignment

NumpyFloatArrayType = npt.NDArray[numpy.floating]
NumpyByteArrayType = npt.NDArray[numpy.uint8]


class Conservation(enum.IntEnum):
    """conservation status of an alignment column"""

    IDENTICAL = 0
    CONSERVED = 1
    SEMI_CONSERVED = 2
    NOT_CONSERVED = 3


class PssmNorm(enum.Enum):
    """normalisation applied to the counts of a PSSM"""

    NONE = "none"
    UNIFORM = "uniform"
    FREQUENCY = "frequency"
    DATA = "data"
    LOGO = "logo"


def _column_counts(column: NumpyByteArrayType) -> CategoryCounter[str]:
    """counts of characters in column, keys in order of first occurrence"""
    codes, first, counts = numpy.unique(column, return_index=True, return_counts=True)
    order = numpy.argsort(first)
    return CategoryCounter(
        {chr(codes[i]): int(counts[i]) for i in order.tolist()},
    )


def _check_site(aln: Alignment, site: int) -> None:
    if site < 0 or site >= aln.length:
        msg = f"site {site} is outside the alignment of length {max(aln.length, 0)}"
        raise OutOfRangeError(msg)


def char_stats_at(aln: Alignment, site: int) -> CategoryCounter[str]:
    """character counts at one column"""
    _check_site(aln, site)
    return _column_counts(to_upper(aln.array_seqs[:, site]))


def max_char_stats(
    aln: Alignment, exclude_gaps: bool = False
) -> tuple[list[str], list[int]]:
    """the most frequent character of every column and its count

    Notes
    -----
    A gap with a count of the number of rows is the default. Ties are won
    by the character seen first. If exclude_gaps, a gap is never chosen
    unless the column has nothing else, in which case the default applies.
    """
    if aln.length <= 0:
        return [], []

    data = to_upper(aln.array_seqs)
    chars = []
    occur = []
    for column in data.T:
        best, best_count = GAP, aln.num_seqs
        maximum = 0
        for char, count in _column_counts(column).items():
            if exclude_gaps and char == GAP:
                continue
            if count > maximum:
                best, best_count, maximum = char, count, count
        chars.append(best)
        occur.append(best_count)
    return chars, occur


def entropy(aln: Alignment, site: int, remove_gaps: bool = False) -> float:
    """Shannon entropy (natural log) of the characters at site

    Other characters and match points are always excluded, gaps only when
    remove_gaps. Returns nan if no character remains.
    """
    _check_site(aln, site)
    column = to_upper(aln.array_seqs[:, site])
    keep = ~aln.moltype.is_other(column) & (column != ord(POINT))
    if remove_gaps:
        keep &= column != GAP_CODE
    counts = _column_counts(column[keep])
    return float(counts.entropy(log=numpy.log))


def _informative(aln: Alignment) -> tuple[NumpyByteArrayType, npt.NDArray[numpy.bool_]]:
    data = to_upper(aln.array_seqs)
    return data, aln.moltype.informative_mask(data)


def _num_alleles(aln: Alignment) -> list[int]:
    """number of distinct informative characters in every column"""
    data, informative = _informative(aln)
    return [
        len(set(column[mask].tolist())) for column, mask in zip(data.T, informative.T)
    ]


def avg_alleles_per_site(aln: Alignment) -> float:
    """mean number of distinct characters over columns with any character

    Gaps, match points and other characters are not counted. Returns nan
    if no column qualifies.
    """
    alleles = [n for n in _num_alleles(aln) if n]
    if not alleles:
        return numpy.nan
    return float(numpy.mean(alleles))


def num_variable_sites(aln: Alignment) -> int:
    """number of columns with at least two distinct characters"""
    return sum(n > 1 for n in _num_alleles(aln))


def site_conservation(aln: Alignment, position: int) -> Conservation:
    """Clustal conservation class of a column

    IDENTICAL if every row has the same non-gap character. For protein
    alignments, CONSERVED if all characters belong to one of the strong
    groups and SEMI_CONSERVED if they all belong to one of the weak groups.
    Otherwise NOT_CONSERVED.
    """
    _check_site(aln, position)
    column = to_upper(aln.array_seqs[:, position]).tobytes().decode("ascii")
    chars = set(column)
    if len(chars) == 1 and GAP not in chars:
        return Conservation.IDENTICAL

    if aln.moltype.name == "protein":
        if any(chars <= set(group) for group in STRONG_GROUPS):
            return Conservation.CONSERVED
        if any(chars <= set(group) for group in WEAK_GROUPS):
            return Conservation.SEMI_CONSERVED

    return Conservation.NOT_CONSERVED


class PSSM:
    """position specific scoring matrix

    Parameters
    ----------
    data
        2D array, rows are alignment positions and columns the characters
    motifs
        the characters, in column order
    """

    def __init__(self, data: NumpyFloatArrayType, motifs: str) -> None:
        data = numpy.asarray(data, dtype=float)
        if data.ndim != 2 or data.shape[1] != len(motifs):
            msg = f"data of shape {data.shape} does not match {len(motifs)} motifs"
            raise ValueError(msg)
        self.array = data
        self.motifs = tuple(motifs)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(shape={self.shape}, motifs={''.join(self.motifs)!r})"

    def __len__(self) -> int:
        return self.array.shape[0]

    def __getitem__(self, motif: str) -> NumpyFloatArrayType:
        """the values of motif at every position"""
        try:
            index = self.motifs.index(motif.upper())
        except ValueError:
            msg = f"{motif!r} not in {self.motifs}"
            raise UnknownCharacterError(msg) from None
        return self.array[:, index]

    @property
    def shape(self) -> tuple[int, int]:
        return self.array.shape

    def to_dict(self) -> dict[str, list[float]]:
        """{motif: [value per position]}"""
        return {m: self.array[:, i].tolist() for i, m in enumerate(self.motifs)}

    def get_indexed_seq(self, seq: str) -> npt.NDArray[numpy.integer]:
        """converts seq to numpy array of int
        characters in seq not present in motifs are assigned out-of-range index
        """
        get_index = {c: i for i, c in enumerate(self.motifs)}.get
        num_motifs = len(self.motifs)
        return numpy.array([get_index(c, num_motifs) for c in seq.upper()], dtype=int)

    def score_seq(self, seq: str) -> float:
        """sum of the values of the characters of seq at each position

        Characters not in motifs contribute 0.
        """
        if len(seq) != len(self):
            msg = f"sequence length {len(seq)} != PSSM length {len(self)}"
            raise ValueError(msg)
        indexed = self.get_indexed_seq(seq)
        valid = indexed < len(self.motifs)
        positions = numpy.arange(len(self))[valid]
        return float(self.array[positions, indexed[valid]].sum())


def pssm(
    aln: Alignment,
    use_log2: bool = False,
    pseudocount: float = 0.0,
    normalization: str | PssmNorm = "none",
) -> PSSM:
    """position specific scoring matrix of the canonical characters

    Parameters
    ----------
    aln
        a nucleotide or protein alignment
    use_log2
        log2 transform the result, ignored for the "logo" normalization
    pseudocount
        added to every count when > 0
    normalization
        one of "none", "uniform", "frequency", "data" or "logo". With N rows,
        A canonical characters and p the pseudocount, counts are multiplied
        by 1 ("none"), 1/(N + p*A) ("frequency"), A/(N + p*A) ("uniform") or
        1/(N + p*A) divided by the frequency of the character in the whole
        alignment ("data"). "logo" divides by N, then rescales each position
        by log2(A) minus its entropy in bits.
    """
    if aln.moltype == UNKNOWN:
        msg = "cannot compute a PSSM for an alignment of unknown moltype"
        raise UnsupportedAlphabetError(msg)
    try:
        norm = PssmNorm(normalization)
    except ValueError:
        msg = f"unknown normalization {normalization!r}, choose from {[n.value for n in PssmNorm]}"
        raise UnsupportedNormalizationError(msg) from None

    alphabet = aln.moltype.alphabet
    num_chars = len(alphabet)
    num_seqs = aln.num_seqs
    if not num_seqs:
        return PSSM(numpy.zeros((0, num_chars)), alphabet)

    denominator = num_seqs + pseudocount * num_chars

    if norm is PssmNorm.NONE:
        factors = numpy.ones(num_chars)
    elif norm is PssmNorm.UNIFORM:
        factors = numpy.full(num_chars, num_chars / denominator)
    elif norm is PssmNorm.FREQUENCY:
        factors = numpy.full(num_chars, 1 / denominator)
    elif norm is PssmNorm.LOGO:
        factors = numpy.full(num_chars, 1 / num_seqs)
    else:
        stats = aln.char_stats()
        missing = [c for c in alphabet if c not in stats]
        if missing:
            msg = f"characters {missing} are absent from the alignment"
            raise UnknownCharacterError(msg)
        freqs = stats.to_array(keys=alphabet) / sum(stats[c] for c in alphabet)
        factors = 1 / denominator / freqs

    data = to_upper(aln.array_seqs)
    counts = numpy.array(
        [(data == ord(c)).sum(axis=0) for c in alphabet], dtype=float
    ).T
    if pseudocount > 0:
        counts += pseudocount

    values = counts * factors
    if norm is PssmNorm.LOGO:
        bits = safe_p_log_p(values).sum(axis=1)
        values *= (numpy.log2(num_chars) - bits)[:, None]
    elif use_log2:
        values = log2_with_neg_inf(values)

    return PSSM(values, alphabet)


class CountProfile:
    """per-site character counts, used as a background for unique changes

    Parameters
    ----------
    counts
        one CategoryCounter of upper cased characters per site
    """

    def __init__(self, counts: list[CategoryCounter[str]] | None = None) -> None:
        self._counts = list(counts or [])

    @classmethod
    def from_alignment(cls, aln: Alignment) -> CountProfile:
        if aln.length <= 0:
            return cls()
        data = to_upper(aln.array_seqs)
        return cls([_column_counts(column) for column in data.T])

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(length={len(self)})"

    def __len__(self) -> int:
        return len(self._counts)

    @property
    def chars(self) -> str:
        """sorted distinct characters"""
        chars = set()
        for counts in self._counts:
            chars.update(counts)
        return "".join(sorted(chars))

    def check_length(self, length: int) -> bool:
        return len(self) == length

    def char_stats_at(self, site: int) -> CategoryCounter[str]:
        if site < 0 or site >= len(self):
            msg = f"site {site} is outside the profile of length {len(self)}"
            raise OutOfRangeError(msg)
        return self._counts[site]

    def count(self, char: str, site: int) -> int:
        """number of times char occurs at site"""
        return self.char_stats_at(site)[char.upper()]

    def to_array(self) -> npt.NDArray[numpy.integer]:
        """sites x chars array of counts, columns ordered as self.chars"""
        chars = self.chars
        return numpy.array(
            [counts.tolist(keys=chars) for counts in self._counts], dtype=int
        ).reshape(len(self), len(chars))


def _validate_profile(aln: Alignment, profile: CountProfile | None) -> None:
    if profile is not None and not profile.check_length(max(aln.length, 0)):
        msg = f"profile length {len(profile)} != alignment length {aln.length}"
        raise LengthMismatchError(msg)


def num_gaps_unique_per_seq(
    aln: Alignment, profile: CountProfile | None = None
) -> tuple[list[int], list[int], list[int]]:
    """per row counts of gaps that are unique to their column

    Returns
    -------
    num_unique
        gaps that are the only gap of their column
    num_new
        gaps at columns with no gap in profile, 0 if profile is None
    num_both
        gaps that are both unique and new
    """
    _validate_profile(aln, profile)
    num_seqs = aln.num_seqs
    if aln.length <= 0:
        return [0] * num_seqs, [0] * num_seqs, [0] * num_seqs

    gaps = aln.array_seqs == GAP_CODE
    unique_cols = gaps.sum(axis=0) == 1
    num_unique = gaps[:, unique_cols].sum(axis=1)
    if profile is None:
        zeros = [0] * num_seqs
        return num_unique.tolist(), zeros, list(zeros)

    absent = numpy.array([profile.count(GAP, i) == 0 for i in range(aln.length)])
    num_new = (gaps & absent).sum(axis=1)
    num_both = (gaps & absent & unique_cols).sum(axis=1)
    return num_unique.tolist(), num_new.tolist(), num_both.tolist()


def num_mutations_unique_per_seq(
    aln: Alignment, profile: CountProfile | None = None
) -> tuple[list[int], list[int], list[int]]:
    """per row counts of characters that are unique to their column

    Gaps and the all-ambiguous character of the moltype (the match point
    for an unknown moltype) are never counted.

    Returns
    -------
    num_unique
        characters occurring once in their column
    num_new
        characters absent at that site of profile, 0 if profile is None
    num_both
        characters that are both unique and new
    """
    _validate_profile(aln, profile)
    num_seqs = aln.num_seqs
    num_unique = [0] * num_seqs
    num_new = [0] * num_seqs
    num_both = [0] * num_seqs
    if aln.length <= 0:
        return num_unique, num_new, num_both

    excluded = {GAP_CODE, ord(aln.moltype.all_ambiguous or POINT)}
    data = to_upper(aln.array_seqs)
    for site, column in enumerate(data.T):
        _, inverse, counts = numpy.unique(
            column, return_inverse=True, return_counts=True
        )
        for row, code in enumerate(column.tolist()):
            if code in excluded:
                continue
            new = profile is not None and profile.count(chr(code), site) == 0
            num_new[row] += new
            if counts[inverse[row]] == 1:
                num_unique[row] += 1
                num_both[row] += new

    return num_unique, num_new, num_both
