"""Reading frame analysis of nucleotide rows against an in-frame reference.

The first row of an alignment is the in-frame reference. Every other row is
scanned left to right tracking a phase in {0, 1, 2}. A gap in the reference
advances the phase (an insertion in the scanned row), a gap in the scanned
row retreats it (a deletion).
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

import numba
import numpy
import numpy.typing as npt

from msaforge.core.genetic_code import GeneticCode, get_code
from msaforge.core.moltype import GAP_CODE

if TYPE_CHECKING:
    from msaforge.core.alignment import Alignment

NumpyIntArrayType = npt.NDArray[numpy.integer]

CodeType = int | str | GeneticCode | Mapping[str, str] | Callable[[str], str]


@numba.njit(cache=True)
def _longest_dephased_run(
    ref: npt.NDArray[numpy.uint8],
    seq: npt.NDArray[numpy.uint8],
    gap: int,
    incomplete: bool,
) -> tuple[int, int]:  # pragma: no cover
    """start and end, in ungapped positions of seq, of the longest dephased run

    Returns (0, 0) if no run spans more than one position.
    """
    best_start = 0
    best_end = 0
    phase = 0
    start = 0
    pos = 0
    started = False
    last = len(ref) - 1
    for i in range(len(ref)):
        if ref[i] == gap:
            phase = (phase + 1) % 3

        if seq[i] == gap:
            phase -= 1
            if phase < 0:
                phase = 2
        elif not started and incomplete and phase != 0:
            phase -= 1
            if phase < 0:
                phase = 2
        else:
            started = True
            pos += 1

        if (
            (phase == 0 or i == last)
            and pos - start > 1
            and pos - start > best_end - best_start
        ):
            best_start = start
            best_end = pos

        if phase == 0:
            start = pos

    return best_start, best_end


@numba.njit(cache=True)
def _codon_positions(
    ref: npt.NDArray[numpy.uint8],
    seq: npt.NDArray[numpy.uint8],
    gap: int,
    incomplete: bool,
) -> NumpyIntArrayType:  # pragma: no cover
    """column indices of the characters of seq that make up its codons"""
    result = numpy.empty(len(seq), dtype=numpy.int64)
    num = 0
    phase = 0
    started = False
    for i in range(len(ref)):
        if ref[i] == gap:
            phase = (phase + 1) % 3

        if seq[i] == gap:
            phase -= 1
            if phase < 0:
                phase = 2
        elif not started and incomplete and phase != 0:
            phase -= 1
            if phase < 0:
                phase = 2
        else:
            started = True

        if seq[i] != gap and (not incomplete or started):
            result[num] = i
            num += 1

    return result[:num]


def get_translator(code: CodeType = 1) -> Callable[[str], str]:
    """returns a callable mapping an upper case DNA codon to an amino acid

    Parameters
    ----------
    code
        a genetic code id, name or alias, a GeneticCode, a mapping of codons
        to amino acids or a callable. Codons missing from a mapping translate
        to 'X'.
    """
    if isinstance(code, GeneticCode):
        return code
    if isinstance(code, Mapping):
        return lambda codon: code.get(codon, "X")
    if callable(code):
        return code
    return get_code(code)


def frameshifts(
    aln: Alignment, starting_gaps_as_incomplete: bool = False
) -> dict[str, tuple[int, int]]:
    """longest dephased region of every row relative to the first row

    Parameters
    ----------
    aln
        the alignment, its first row is the in-frame reference
    starting_gaps_as_incomplete
        if True, a row that starts out of phase is treated as an incomplete
        sequence, its leading characters shift the phase rather than
        counting as a frameshift

    Returns
    -------
    {name: (start, end)} for every row but the first. Coordinates are
    0-based ungapped positions of the row, (0, 0) means no frameshift.
    """
    if aln.num_seqs < 2:
        return {}

    data = aln.array_seqs
    ref = data[0]
    return {
        name: tuple(
            int(v)
            for v in _longest_dephased_run(
                ref, data[i], GAP_CODE, starting_gaps_as_incomplete
            )
        )
        for i, name in enumerate(aln.names)
        if i
    }


def stop_codons(
    aln: Alignment,
    starting_gaps_as_incomplete: bool = False,
    code: CodeType = 1,
) -> dict[str, int]:
    """position of the first in-frame stop codon of every row but the first

    Parameters
    ----------
    aln
        the alignment, its first row is the in-frame reference
    starting_gaps_as_incomplete
        if True, characters of a row before it is in phase are not part of
        its codons
    code
        the genetic code, see ``get_translator()``

    Returns
    -------
    {name: position} with the 1-based ungapped position of the last
    nucleotide of the stop codon, -1 if the row has no stop codon.
    """
    translate = get_translator(code)
    if aln.num_seqs < 2:
        return {}

    data = aln.array_seqs
    ref = data[0]
    result = {}
    for i, name in enumerate(aln.names):
        if not i:
            continue

        seq = data[i]
        positions = _codon_positions(ref, seq, GAP_CODE, starting_gaps_as_incomplete)
        chars = seq[positions].tobytes().decode("ascii").upper().replace("U", "T")
        result[name] = -1
        for end in range(3, len(chars) + 1, 3):
            if translate(chars[end - 3 : end]) == "*":
                result[name] = end
                break

    return result
