"""Sequence collections and alignments.

``SequenceCollection`` is an ordered bag of named sequences of any length.
``Alignment`` adds the invariant that every row has the same number of
columns, its ``length`` (-1 while it has no rows). Both compose a
``SeqsData`` store rather than inheriting from each other.

Alignment operations act in place unless they are documented as returning
a new instance. An operation that fails raises before any row is changed.
"""

from __future__ import annotations

import dataclasses
import re
import warnings
from collections.abc import Iterable, Iterator, Mapping
from typing import Any

import numpy
import numpy.typing as npt

from msaforge.core import distance, frame, profile, simulate
from msaforge.core import genetic_code as msa_genetic_code
from msaforge.core import moltype as msa_moltype
from msaforge.core.errors import (
    InvalidArgumentError,
    LengthMismatchError,
    LongSequenceError,
    MissingSequenceError,
    OutOfRangeError,
    ShortSequenceError,
    UnsupportedAlphabetError,
)
from msaforge.core.partition import PartitionSet
from msaforge.core.seq_storage import (
    SeqRecord,
    SeqsData,
    SeqType,
    array_to_str,
    seq_to_array,
)
from msaforge.maths.rng import RandomSource, get_random_source
from msaforge.maths.stats.number import CategoryCounter
from msaforge.util.misc import get_setting_from_environ

NumpyByteArrayType = npt.NDArray[numpy.uint8]
MolTypes = str | msa_moltype.MolType | None
RngType = RandomSource | int | None
DataType = (
    Mapping[str, SeqType]
    | Iterable[tuple[str, SeqType] | tuple[str, SeqType, str] | SeqType]
)

REPR_POLICY_ENV = "MSAFORGE_ALIGNMENT_REPR_POLICY"


def _iter_input(data: DataType) -> Iterator[tuple[str, SeqType, str]]:
    """yields (name, seq, comment) from a dict or a series of items

    Items may be (name, seq), (name, seq, comment) or bare sequences, the
    latter are named seq_0, seq_1, ...
    """
    if isinstance(data, Mapping):
        for name, seq in data.items():
            yield name, seq, ""
        return

    for i, item in enumerate(data):
        if isinstance(item, tuple):
            if len(item) == 2:
                name, seq = item
                comment = ""
            else:
                name, seq, comment = item
            yield name, seq, comment
        else:
            yield f"seq_{i}", item, ""


def _replaced_rows(
    store: SeqsData, old: str, new: str, regex: bool
) -> dict[str, str]:
    """{name: sequence} after replacing old with new in every row"""
    if not regex:
        return {name: seq.replace(old, new) for name, seq, _ in store.iter_rows()}
    try:
        pattern = re.compile(old)
    except re.error as err:
        msg = f"invalid regular expression {old!r}: {err}"
        raise InvalidArgumentError(msg) from err
    return {name: pattern.sub(new, seq) for name, seq, _ in store.iter_rows()}


def _translate_seq(
    seq: str, phase: int, code: msa_genetic_code.GeneticCode
) -> str:
    return "".join(
        code.translate_codon(seq[i : i + 3]) for i in range(phase, len(seq) - 2, 3)
    )


def _check_translatable(moltype: msa_moltype.MolType) -> None:
    if not moltype.is_nucleic:
        msg = f"cannot translate sequences of moltype {moltype.name!r}"
        raise UnsupportedAlphabetError(msg)


def _format_seqs(rows: Iterable[tuple[str, str, str]], num_seqs: int, limit: int) -> str:
    seqs: list[str] = []
    for count, (name, seq, _) in enumerate(rows):
        if count == num_seqs:
            seqs.append("...")
            break
        elts = list(seq[: limit + 1])
        if len(elts) > limit:
            elts[-1] = "..."
        seqs.append(f"{name}[{''.join(elts)}]")
    return ", ".join(seqs)


class SequenceCollection:
    """An ordered collection of named, unaligned sequences.

    Parameters
    ----------
    moltype
        name of a moltype or a MolType instance
    ignore_identical
        if True, adding a sequence whose name and characters both match an
        existing one is ignored (with a warning)
    """

    def __init__(
        self, moltype: MolTypes = "unknown", ignore_identical: bool = False
    ) -> None:
        self._seqs_data = SeqsData(moltype, ignore_identical=ignore_identical)

    def __repr__(self) -> str:
        seqs_str = _format_seqs(self.iter_rows(), 3, 10)
        return f"{self.num_seqs}x {self.moltype.label} seqcollection: ({seqs_str})"

    def __len__(self) -> int:
        return self.num_seqs

    def __contains__(self, name: object) -> bool:
        return name in self._seqs_data

    @property
    def moltype(self) -> msa_moltype.MolType:
        return self._seqs_data.moltype

    @property
    def ignore_identical(self) -> bool:
        return self._seqs_data.ignore_identical

    @property
    def names(self) -> tuple[str, ...]:
        return self._seqs_data.names

    @property
    def num_seqs(self) -> int:
        return len(self._seqs_data)

    def add_seq(self, name: str, seq: SeqType, comment: str = "") -> str | None:
        """adds a sequence, returns its stored name or None if ignored"""
        return self._seqs_data.add_seq(name, seq, comment)

    def get_seq(self, name: str) -> str:
        return self._seqs_data.get_seq_str(name)

    def get_record(self, name: str) -> SeqRecord:
        """a copy of the named record"""
        return self._seqs_data[name].copy()

    def iter_rows(self) -> Iterator[tuple[str, str, str]]:
        """yields (name, sequence, comment) in insertion order"""
        return self._seqs_data.iter_rows()

    def to_dict(self) -> dict[str, str]:
        return {name: seq for name, seq, _ in self.iter_rows()}

    def seq_lengths(self) -> dict[str, int]:
        return {record.name: len(record) for record in self._seqs_data}

    def char_stats(self) -> CategoryCounter[str]:
        """counts of upper cased characters over all sequences"""
        return self._seqs_data.char_stats()

    def unique_chars(self) -> str:
        return self._seqs_data.unique_chars()

    def clear(self, moltype: MolTypes = None) -> None:
        """removes all sequences, optionally setting a new moltype"""
        self._seqs_data.clear(moltype)

    def clone(self) -> SequenceCollection:
        new = self.__class__(self.moltype, ignore_identical=self.ignore_identical)
        new._seqs_data = self._seqs_data.copy()
        return new

    def replace(self, old: str, new: str, regex: bool = False) -> None:
        """replaces old with new in every sequence

        Parameters
        ----------
        old
            substring, or regular expression if regex is True
        new
            the replacement
        """
        for name, seq in _replaced_rows(self._seqs_data, old, new, regex).items():
            self._seqs_data[name].seq = seq_to_array(seq)

    def translate(self, phase: int = 0, code: Any = 1) -> None:
        """translates nucleotide sequences to protein in place

        Parameters
        ----------
        phase
            number of leading nucleotides to skip (0, 1 or 2). -1 translates
            all three phases, sequence name_0, name_1 and name_2 hold the
            translation in phase 0, 1 and 2.
        code
            genetic code identifier, see ``get_code()``
        """
        _check_translatable(self.moltype)
        if phase not in (-1, 0, 1, 2):
            msg = f"phase must be -1, 0, 1 or 2, not {phase}"
            raise InvalidArgumentError(msg)

        gc = msa_genetic_code.get_code(code)
        rows = list(self.iter_rows())
        self._seqs_data.clear(msa_moltype.PROTEIN)
        for name, seq, comment in rows:
            if phase == -1:
                for frame_phase in range(3):
                    self._seqs_data.add_seq(
                        f"{name}_{frame_phase}",
                        _translate_seq(seq, frame_phase, gc),
                        comment,
                    )
            else:
                self._seqs_data.add_seq(name, _translate_seq(seq, phase, gc), comment)

    def _take_rows(self, indices: Iterable[int]) -> SequenceCollection:
        new = self.__class__(self.moltype, ignore_identical=self.ignore_identical)
        records = list(self._seqs_data)
        for index in indices:
            new._seqs_data.add_record(records[index].copy())
        return new

    def sample(self, n: int, rng: RngType = None) -> SequenceCollection:
        """n sequences drawn without replacement, in collection order"""
        return self._take_rows(simulate.sample_indices(self.num_seqs, n, rng=rng))

    def rarefy(
        self, n: int, counts: Mapping[str, int], rng: RngType = None
    ) -> SequenceCollection:
        """distinct sequences in a draw of n from the population described by counts

        See ``msaforge.core.simulate.rarefy_indices()``.
        """
        return self._take_rows(
            simulate.rarefy_indices(self.names, n, counts, rng=rng),
        )

    def to_alignment(self) -> Alignment:
        """returns an Alignment, raises LengthMismatchError if lengths differ"""
        lengths = set(self.seq_lengths().values())
        if len(lengths) > 1:
            msg = f"sequences have different lengths {sorted(lengths)}"
            raise LengthMismatchError(msg)
        aln = Alignment(self.moltype, ignore_identical=self.ignore_identical)
        aln._seqs_data = self._seqs_data.copy()
        aln._length = lengths.pop() if lengths else -1
        return aln


@dataclasses.dataclass
class PatternCount:
    """occurrences of a column pattern and the index it was first seen at"""

    weight: int
    first_index: int


class Alignment:
    """Equal length, named sequences.

    Parameters
    ----------
    moltype
        name of a moltype or a MolType instance
    ignore_identical
        if True, adding a sequence whose name and characters both match an
        existing one is ignored (with a warning)

    Notes
    -----
    Characters are stored as numpy uint8 arrays of ASCII codes, their case
    is preserved. Statistics compare upper cased characters.
    """

    def __init__(
        self, moltype: MolTypes = "unknown", ignore_identical: bool = False
    ) -> None:
        self._seqs_data = SeqsData(moltype, ignore_identical=ignore_identical)
        self._length = -1
        self._repr_policy: dict[str, Any] = {"num_seqs": 10, "num_pos": 60}

    def __repr__(self) -> str:
        settings = self._repr_policy.copy()
        env_vals = get_setting_from_environ(
            REPR_POLICY_ENV,
            {"num_seqs": int, "num_pos": int},
        )
        settings.update(env_vals)
        seqs_str = _format_seqs(
            self.iter_rows(), settings["num_seqs"], settings["num_pos"]
        )
        return f"{self.num_seqs} x {len(self)} {self.moltype.label} alignment: {seqs_str}"

    def set_repr_policy(
        self, num_seqs: int | None = None, num_pos: int | None = None
    ) -> None:
        """specify policy for repr(self)

        Parameters
        ----------
        num_seqs
            number of sequences to include in represented display.
        num_pos
            length of sequences to include in represented display.
        """
        if num_seqs:
            if not isinstance(num_seqs, int):
                msg = "num_seqs is not an integer"
                raise TypeError(msg)
            self._repr_policy["num_seqs"] = num_seqs

        if num_pos:
            if not isinstance(num_pos, int):
                msg = "num_pos is not an integer"
                raise TypeError(msg)
            self._repr_policy["num_pos"] = num_pos

    def __len__(self) -> int:
        return max(self._length, 0)

    def __contains__(self, name: object) -> bool:
        return name in self._seqs_data

    @property
    def length(self) -> int:
        """number of columns, -1 if there are no rows"""
        return self._length

    @property
    def moltype(self) -> msa_moltype.MolType:
        return self._seqs_data.moltype

    @property
    def ignore_identical(self) -> bool:
        return self._seqs_data.ignore_identical

    @property
    def names(self) -> tuple[str, ...]:
        return self._seqs_data.names

    @property
    def num_seqs(self) -> int:
        return len(self._seqs_data)

    @property
    def array_seqs(self) -> NumpyByteArrayType:
        """num_seqs x length array of character codes, a copy"""
        if not self.num_seqs:
            return numpy.zeros((0, 0), dtype=numpy.uint8)
        return numpy.array([record.seq for record in self._seqs_data], dtype=numpy.uint8)

    def add_seq(self, name: str, seq: SeqType, comment: str = "") -> str | None:
        """adds a row, returns its stored name or None if it was ignored

        Raises LengthMismatchError if seq differs in length from the
        existing rows. A duplicate name is made unique with a numeric
        suffix, see ``SeqsData``.
        """
        record = SeqRecord(name, seq, comment)
        if self._length != -1 and len(record) != self._length:
            msg = (
                f"sequence {name!r} has length {len(record)}, "
                f"the alignment has length {self._length}"
            )
            raise LengthMismatchError(msg)

        stored = self._seqs_data.add_record(record)
        if stored is not None:
            self._length = len(record)
        return stored

    def get_seq(self, name: str) -> str:
        return self._seqs_data.get_seq_str(name)

    def get_record(self, name: str) -> SeqRecord:
        """a copy of the named record"""
        return self._seqs_data[name].copy()

    def iter_rows(self) -> Iterator[tuple[str, str, str]]:
        """yields (name, sequence, comment) in row order"""
        return self._seqs_data.iter_rows()

    def to_dict(self) -> dict[str, str]:
        return {name: seq for name, seq, _ in self.iter_rows()}

    def clear(self, moltype: MolTypes = None) -> None:
        """removes all rows, optionally setting a new moltype"""
        self._seqs_data.clear(moltype)
        self._length = -1

    def _new(self) -> Alignment:
        new = self.__class__(self.moltype, ignore_identical=self.ignore_identical)
        new._repr_policy = self._repr_policy.copy()
        return new

    def clone(self) -> Alignment:
        """a deep copy"""
        new = self._new()
        new._seqs_data = self._seqs_data.copy()
        new._length = self._length
        return new

    def _new_from_array(self, data: NumpyByteArrayType) -> Alignment:
        new = self._new()
        for record, row in zip(self._seqs_data, data):
            new._seqs_data.add_record(SeqRecord(record.name, row, record.comment))
        new._length = data.shape[1] if self.num_seqs else -1
        return new

    def update_from_array(self, data: NumpyByteArrayType) -> None:
        """replaces the characters of every row with the rows of data

        Parameters
        ----------
        data
            num_seqs x new length array of character codes, rows in the
            order of self.names
        """
        data = numpy.asarray(data, dtype=numpy.uint8)
        if data.ndim != 2 or data.shape[0] != self.num_seqs:
            msg = f"array of shape {data.shape} does not match {self.num_seqs} rows"
            raise LengthMismatchError(msg)
        if not self.num_seqs:
            return
        for record, row in zip(self._seqs_data, data):
            record.seq = row.copy()
        self._length = data.shape[1]

    def append(self, other: Alignment) -> None:
        """adds the rows of other, renaming rows whose names already exist"""
        if self._length != -1 and other.num_seqs and other.length != self._length:
            msg = f"alignment lengths differ, {self._length} != {other.length}"
            raise LengthMismatchError(msg)
        for name, seq, comment in other.iter_rows():
            self.add_seq(name, seq, comment)

    # site filtering, trimming and masking
    def remove_gap_columns(
        self, cutoff: float = 0.0, only_ends: bool = False
    ) -> tuple[int, int]:
        """removes columns with too many gaps

        Parameters
        ----------
        cutoff
            with cutoff 0 a column is removable if it has any gap, with a
            cutoff in (0, 1] if at least cutoff * num_seqs of it are gaps.
            Values outside [0, 1] are treated as 0.
        only_ends
            only remove the unbroken runs of removable columns at the start
            and the end of the alignment

        Returns
        -------
        lengths of the leading and trailing runs of removable columns. If
        every column is removable both equal the original length.
        """
        if cutoff < 0 or cutoff > 1:
            cutoff = 0.0
        if self._length <= 0:
            return 0, 0

        length = self._length
        gaps = (self.array_seqs == msa_moltype.GAP_CODE).sum(axis=0)
        if cutoff > 0:
            removable = gaps >= cutoff * self.num_seqs
        else:
            removable = gaps > 0

        if removable.all():
            leading = trailing = length
        else:
            leading = int(numpy.argmin(removable))
            trailing = int(numpy.argmin(removable[::-1]))

        if only_ends:
            remove = numpy.zeros(length, dtype=bool)
            remove[:leading] = True
            remove[length - trailing :] = True
        else:
            remove = removable

        self.update_from_array(self.array_seqs[:, ~remove])
        return leading, trailing

    def remove_gap_rows(self, cutoff: float = 0.0) -> list[str]:
        """removes rows with too many gaps, returns the removed names

        Parameters
        ----------
        cutoff
            with cutoff 0 a row is removed if it has any gap, with a cutoff
            in (0, 1] if at least cutoff * length of it are gaps. Values
            outside [0, 1] are treated as 0.
        """
        if cutoff < 0 or cutoff > 1:
            cutoff = 0.0
        if not self.num_seqs:
            return []

        gaps = (self.array_seqs == msa_moltype.GAP_CODE).sum(axis=1)
        if cutoff > 0:
            removable = gaps >= cutoff * len(self)
        else:
            removable = gaps > 0

        removed = [name for name, drop in zip(self.names, removable) if drop]
        for name in removed:
            self._seqs_data.remove(name)
        if not self.num_seqs:
            self._length = -1
        return removed

    def trim(self, size: int, from_start: bool = True) -> None:
        """removes size columns from the start or the end"""
        if size < 0:
            msg = f"trim size must be >= 0, not {size}"
            raise InvalidArgumentError(msg)
        if size >= self._length:
            msg = f"trim size must be < alignment length ({self._length})"
            raise InvalidArgumentError(msg)

        data = self.array_seqs
        data = data[:, size:] if from_start else data[:, : self._length - size]
        self.update_from_array(data)

    def mask(self, start: int, length: int) -> None:
        """replaces columns start to start + length with the all-ambiguous character

        N for nucleotide and X for protein alignments. Columns beyond the
        end of the alignment are ignored.
        """
        if start < 0:
            msg = f"mask start must be >= 0, not {start}"
            raise InvalidArgumentError(msg)
        if start > self._length:
            msg = f"mask start {start} is beyond the alignment length {self._length}"
            raise InvalidArgumentError(msg)
        symbol = self.moltype.all_ambiguous
        if symbol is None:
            msg = f"cannot mask an alignment of moltype {self.moltype.name!r}"
            raise UnsupportedAlphabetError(msg)

        if length <= 0 or not self.num_seqs:
            return
        data = self.array_seqs
        data[:, start : start + length] = ord(symbol)
        self.update_from_array(data)

    def sub_align(self, start: int, length: int) -> Alignment:
        """a new alignment of columns start to start + length"""
        if start < 0 or start > self._length:
            msg = f"start {start} is outside the alignment"
            raise OutOfRangeError(msg)
        if length < 0:
            msg = f"length must be >= 0, not {length}"
            raise InvalidArgumentError(msg)
        if start + length > self._length:
            msg = f"start + length ({start} + {length}) is beyond the alignment length"
            raise OutOfRangeError(msg)
        return self._new_from_array(self.array_seqs[:, start : start + length])

    def random_sub_align(self, length: int, rng: RngType = None) -> Alignment:
        """a new alignment of length columns from a uniformly drawn start"""
        if length > self._length:
            msg = f"length {length} exceeds the alignment length {self._length}"
            raise InvalidArgumentError(msg)
        if length <= 0:
            msg = f"length must be > 0, not {length}"
            raise InvalidArgumentError(msg)
        rng = get_random_source(rng)
        start = rng.randint(self._length - length + 1)
        return self.sub_align(start, length)

    def take_positions(self, cols: Iterable[int]) -> Alignment:
        """a new alignment of the given columns, in the given order"""
        cols = numpy.array(list(cols), dtype=int)
        if cols.size and (cols.min() < 0 or cols.max() >= len(self)):
            msg = f"columns must be in 0-{len(self) - 1}"
            raise OutOfRangeError(msg)
        return self._new_from_array(self.array_seqs[:, cols])

    def replace(self, old: str, new: str, regex: bool = False) -> None:
        """replaces old with new in every row

        Raises LengthMismatchError, leaving the rows unchanged, if any row
        would change length.
        """
        updated = _replaced_rows(self._seqs_data, old, new, regex)
        changed = [name for name, seq in updated.items() if len(seq) != self._length]
        if changed:
            msg = f"replacement changes the length of {changed}"
            raise LengthMismatchError(msg)
        for name, seq in updated.items():
            self._seqs_data[name].seq = seq_to_array(seq)

    def replace_match_chars(self) -> None:
        """replaces '.' in rows after the first by the first row character

        Positions where the first row is also '.' are left unchanged.
        """
        if self.num_seqs < 2:
            return
        data = self.array_seqs
        ref = data[0]
        rest = data[1:]
        matched = (rest == msa_moltype.POINT_CODE) & (ref != msa_moltype.POINT_CODE)
        rest[matched] = numpy.broadcast_to(ref, rest.shape)[matched]
        self.update_from_array(data)

    def diff_with_first(self) -> None:
        """characters identical to those of the first row become '.'"""
        if self.num_seqs < 2:
            return
        data = self.array_seqs
        rest = data[1:]
        rest[rest == data[0]] = msa_moltype.POINT_CODE
        self.update_from_array(data)

    def count_differences(self) -> tuple[list[str], list[dict[str, int]]]:
        """counts the differences of every row to the first

        Returns
        -------
        all_diffs
            every difference seen, as REF + NEW character, e.g. 'AC', in
            order of first occurrence
        diffs
            {difference: count} for each row after the first
        """
        all_diffs: dict[str, None] = {}
        diffs: list[dict[str, int]] = []
        if self.num_seqs < 2:
            return [], diffs

        rows = [seq for _, seq, _ in self.iter_rows()]
        first = rows[0]
        for other in rows[1:]:
            counts: dict[str, int] = {}
            for ref_char, char in zip(first, other):
                if ref_char != char:
                    key = f"{ref_char}{char}"
                    counts[key] = counts.get(key, 0) + 1
                    all_diffs[key] = None
            diffs.append(counts)
        return list(all_diffs), diffs

    def translate(self, phase: int = 0, code: Any = 1) -> None:
        """translates a nucleotide alignment to protein in place

        Parameters
        ----------
        phase
            number of leading columns to skip, 0, 1 or 2
        code
            genetic code identifier, see ``get_code()``

        Notes
        -----
        A codon of three gaps translates to '-', a partially gapped or
        untranslatable codon to 'X'.
        """
        _check_translatable(self.moltype)
        if phase not in (0, 1, 2):
            msg = f"phase must be 0, 1 or 2, not {phase}"
            raise InvalidArgumentError(msg)

        gc = msa_genetic_code.get_code(code)
        rows = list(self.iter_rows())
        self.clear(msa_moltype.PROTEIN)
        for name, seq, comment in rows:
            self.add_seq(name, _translate_seq(seq, phase, gc), comment)

    # pattern compression and coordinates
    def compress(self) -> list[int]:
        """keeps one column per distinct pattern, returns the pattern weights

        Patterns are kept in the order they are first seen. The weight of a
        pattern is the number of columns it occurred in.
        """
        if self._length <= 0:
            return []

        data = self.array_seqs
        patterns: dict[bytes, PatternCount] = {}
        for index in range(self._length):
            key = data[:, index].tobytes()
            if key in patterns:
                patterns[key].weight += 1
            else:
                patterns[key] = PatternCount(weight=1, first_index=index)

        keep = [count.first_index for count in patterns.values()]
        self.update_from_array(data[:, keep])
        return [count.weight for count in patterns.values()]

    def ref_coordinates(
        self, name: str, ref_start: int, ref_len: int
    ) -> tuple[int, int]:
        """converts ungapped coordinates of a row to alignment coordinates

        Parameters
        ----------
        name
            the reference row
        ref_start
            0-based start on the ungapped row
        ref_len
            number of ungapped characters

        Returns
        -------
        the number of columns before ref_start and the number of columns,
        including gaps, spanned by the ref_len characters
        """
        seq = self._seqs_data.get_seq_array(name)
        if ref_start < 0:
            msg = f"start on reference sequence must be >= 0, not {ref_start}"
            raise InvalidArgumentError(msg)
        if ref_len <= 0:
            msg = f"reference length must be > 0, not {ref_len}"
            raise InvalidArgumentError(msg)

        ungapped = seq != msa_moltype.GAP_CODE
        if ref_start + ref_len > ungapped.sum():
            msg = (
                f"start + length ({ref_start} + {ref_len}) falls outside "
                f"the ungapped sequence of length {ungapped.sum()}"
            )
            raise OutOfRangeError(msg)

        # index of the ungapped character at or before each column
        ungapped_index = numpy.cumsum(ungapped) - 1
        ali_start = int((ungapped_index < ref_start).sum())
        ali_end = int(numpy.argmax(ungapped_index >= ref_start + ref_len - 1))
        return ali_start, ali_end - ali_start + 1

    # frame analysis
    def frameshifts(
        self, starting_gaps_as_incomplete: bool = False
    ) -> dict[str, tuple[int, int]]:
        """see ``msaforge.core.frame.frameshifts()``"""
        return frame.frameshifts(self, starting_gaps_as_incomplete)

    def stop_codons(
        self, starting_gaps_as_incomplete: bool = False, code: frame.CodeType = 1
    ) -> dict[str, int]:
        """see ``msaforge.core.frame.stop_codons()``"""
        return frame.stop_codons(self, starting_gaps_as_incomplete, code=code)

    # statistics
    def char_stats(self) -> CategoryCounter[str]:
        """counts of upper cased characters over the whole alignment"""
        return self._seqs_data.char_stats()

    def unique_chars(self) -> str:
        """sorted distinct characters"""
        return self._seqs_data.unique_chars()

    def char_stats_at(self, site: int) -> CategoryCounter[str]:
        return profile.char_stats_at(self, site)

    def max_char_stats(
        self, exclude_gaps: bool = False
    ) -> tuple[list[str], list[int]]:
        return profile.max_char_stats(self, exclude_gaps)

    def consensus(self, exclude_gaps: bool = False) -> Alignment:
        """a single row alignment, named 'consensus', of the majority characters"""
        chars, _ = profile.max_char_stats(self, exclude_gaps)
        cons = self.__class__(self.moltype)
        cons.add_seq("consensus", "".join(chars))
        return cons

    def entropy(self, site: int, remove_gaps: bool = False) -> float:
        return profile.entropy(self, site, remove_gaps)

    def avg_alleles_per_site(self) -> float:
        return profile.avg_alleles_per_site(self)

    def num_variable_sites(self) -> int:
        return profile.num_variable_sites(self)

    def site_conservation(self, position: int) -> profile.Conservation:
        return profile.site_conservation(self, position)

    def pssm(
        self,
        use_log2: bool = False,
        pseudocount: float = 0.0,
        normalization: str | profile.PssmNorm = "none",
    ) -> profile.PSSM:
        """see ``msaforge.core.profile.pssm()``"""
        return profile.pssm(self, use_log2, pseudocount, normalization)

    def count_profile(self) -> profile.CountProfile:
        """per-site character counts of this alignment"""
        return profile.CountProfile.from_alignment(self)

    def num_gaps_unique_per_seq(
        self, count_profile: profile.CountProfile | None = None
    ) -> tuple[list[int], list[int], list[int]]:
        return profile.num_gaps_unique_per_seq(self, count_profile)

    def num_mutations_unique_per_seq(
        self, count_profile: profile.CountProfile | None = None
    ) -> tuple[list[int], list[int], list[int]]:
        return profile.num_mutations_unique_per_seq(self, count_profile)

    # perturbation
    def shuffle_sites(
        self,
        rate: float,
        rogue_rate: float = 0.0,
        rogue_first: bool = False,
        rng: RngType = None,
    ) -> list[str]:
        """see ``msaforge.core.simulate.shuffle_sites()``"""
        return simulate.shuffle_sites(self, rate, rogue_rate, rogue_first, rng=rng)

    def swap(self, rate: float, rng: RngType = None) -> None:
        simulate.swap(self, rate, rng=rng)

    def recombine(self, prop: float, len_prop: float, rng: RngType = None) -> None:
        simulate.recombine(self, prop, len_prop, rng=rng)

    def add_gaps(self, len_prop: float, prop: float, rng: RngType = None) -> None:
        simulate.add_gaps(self, len_prop, prop, rng=rng)

    def mutate(self, rate: float, rng: RngType = None) -> None:
        simulate.mutate(self, rate, rng=rng)

    def simulate_rogue(
        self, prop: float, prop_len: float, rng: RngType = None
    ) -> tuple[list[str], list[str]]:
        return simulate.simulate_rogue(self, prop, prop_len, rng=rng)

    def build_bootstrap(
        self, rng: RngType = None, with_indices: bool = False
    ) -> Alignment | tuple[Alignment, list[int]]:
        """a new alignment of length columns drawn with replacement

        If with_indices, also returns the source index of every column.
        """
        indices = simulate.bootstrap_indices(len(self), rng=rng)
        boot = self._new_from_array(self.array_seqs[:, indices])
        return (boot, indices) if with_indices else boot

    def bootstrap_weights(self, rng: RngType = None) -> npt.NDArray[numpy.floating]:
        """number of times each column is drawn in a bootstrap replicate

        Use as the weights of a distance calculation instead of building
        the replicate alignment.
        """
        return simulate.bootstrap_weights(len(self), rng=rng)

    def distance_matrix(
        self,
        calc: str = "pdist",
        gap_count: distance.GapCount | int | str = distance.GapCount.NONE,
        remove_gaps: bool = False,
        weights: Iterable[float] | None = None,
    ) -> distance.DistanceMatrix:
        """pairwise distances between rows

        Parameters
        ----------
        calc
            one of "raw", "pdist" or "jc69"
        gap_count
            how gaps facing characters are counted, "none", "internal" or
            "all"
        remove_gaps
            if True, columns with a gap in any row are excluded
        weights
            per column weights, e.g. from ``bootstrap_weights()``
        """
        calculator = distance.get_distance_calculator(calc)
        return calculator(
            self, gap_count=gap_count, remove_gaps=remove_gaps, weights=weights
        )

    def _take_rows(self, indices: Iterable[int]) -> Alignment:
        new = self._new()
        records = list(self._seqs_data)
        for index in indices:
            new._seqs_data.add_record(records[index].copy())
        new._length = self._length if new.num_seqs else -1
        return new

    def sample(self, n: int, rng: RngType = None) -> Alignment:
        """n rows drawn without replacement, in alignment order"""
        return self._take_rows(simulate.sample_indices(self.num_seqs, n, rng=rng))

    def rarefy(
        self, n: int, counts: Mapping[str, int], rng: RngType = None
    ) -> Alignment:
        """distinct rows in a draw of n from the population described by counts

        See ``msaforge.core.simulate.rarefy_indices()``.
        """
        return self._take_rows(
            simulate.rarefy_indices(self.names, n, counts, rng=rng),
        )

    # set operations
    def concat(self, other: Alignment) -> None:
        """appends the columns of other to self

        Rows present in only one alignment are filled with gaps for the
        columns of the other.
        """
        if self.moltype != other.moltype:
            msg = f"moltypes differ, {self.moltype.name!r} != {other.moltype.name!r}"
            raise UnsupportedAlphabetError(msg)

        gap = msa_moltype.GAP_CODE
        self_len = len(self)
        other_len = len(other)
        rows: dict[str, tuple[NumpyByteArrayType, str]] = {}
        for record in self._seqs_data:
            if record.name in other:
                tail = other._seqs_data.get_seq_array(record.name)
            else:
                tail = numpy.full(other_len, gap, dtype=numpy.uint8)
            rows[record.name] = numpy.concatenate([record.seq, tail]), record.comment
        for record in other._seqs_data:
            if record.name not in self:
                head = numpy.full(self_len, gap, dtype=numpy.uint8)
                rows[record.name] = numpy.concatenate([head, record.seq]), record.comment

        lengths = {len(seq) for seq, _ in rows.values()}
        if len(lengths) > 1:
            msg = f"concatenated sequences have different lengths {sorted(lengths)}"
            raise LengthMismatchError(msg)

        self.clear()
        for name, (seq, comment) in rows.items():
            self._seqs_data.add_seq(name, seq, comment)
        self._length = lengths.pop() if lengths else -1

    def split(self, partitions: PartitionSet) -> list[Alignment]:
        """one new alignment per partition, of the columns assigned to it"""
        if partitions.num_partitions < 2:
            msg = "the partition set must have at least 2 partitions"
            raise InvalidArgumentError(msg)
        if partitions.length != self._length:
            msg = (
                f"partition set length {partitions.length} != "
                f"alignment length {self._length}"
            )
            raise InvalidArgumentError(msg)
        return [
            self.take_positions(partitions.positions(index))
            for index in range(partitions.num_partitions)
        ]

    def codon_align(self, nt_seqs: SequenceCollection | Alignment) -> Alignment:
        """aligns nucleotide sequences using this protein alignment

        Every amino acid column becomes three columns, filled with the next
        codon of the matching nucleotide sequence, or '---' for a gap.

        Parameters
        ----------
        nt_seqs
            unaligned nucleotide sequences with the same names as self

        Notes
        -----
        The translation of the nucleotides is not checked. Up to two
        trailing nucleotides that do not form a codon are dropped with a
        warning.
        """
        if self.moltype != msa_moltype.PROTEIN:
            msg = f"cannot reverse translate a {self.moltype.name!r} alignment"
            raise UnsupportedAlphabetError(msg)
        if not nt_seqs.moltype.is_nucleic:
            msg = f"nucleotide sequences have moltype {nt_seqs.moltype.name!r}"
            raise UnsupportedAlphabetError(msg)

        rows: list[tuple[str, str, str]] = []
        for name, aa_seq, comment in self.iter_rows():
            if name not in nt_seqs:
                msg = f"sequence {name!r} is missing from the nucleotide sequences"
                raise MissingSequenceError(msg)

            nt_seq = nt_seqs.get_seq(name)
            codons = []
            cursor = 0
            for aa in aa_seq:
                if aa == msa_moltype.GAP:
                    codons.append(msa_moltype.GAP * 3)
                    continue
                if cursor + 3 > len(nt_seq):
                    msg = f"nucleotide sequence {name!r} is shorter than its amino acid counterpart"
                    raise ShortSequenceError(msg)
                codons.append(nt_seq[cursor : cursor + 3])
                cursor += 3

            remaining = len(nt_seq) - cursor
            if remaining > 2:
                msg = (
                    f"nucleotide sequence {name!r} is longer than its amino acid "
                    f"counterpart ({remaining} nucleotides remaining)"
                )
                raise LongSequenceError(msg)
            if remaining:
                warnings.warn(
                    f"{name}: dropping {remaining} trailing nucleotides",
                    UserWarning,
                    stacklevel=2,
                )
            rows.append((name, "".join(codons), comment))

        result = self.__class__(nt_seqs.moltype)
        for name, seq, comment in rows:
            result.add_seq(name, seq, comment)
        return result


def make_unaligned_seqs(
    data: DataType,
    *,
    moltype: MolTypes = None,
    ignore_identical: bool = False,
) -> SequenceCollection:
    """Initialise an unaligned collection of sequences.

    Parameters
    ----------
    data
        a dict {name: seq, ...}, or a series of (name, seq),
        (name, seq, comment) or bare sequences
    moltype
        string representation of the moltype, e.g., 'dna', 'protein'.
        Inferred from the sequences if None.
    ignore_identical
        ignore sequences whose name and characters match an existing one
    """
    items = list(_iter_input(data))
    if moltype is None:
        moltype = msa_moltype.detect_moltype(_as_str(seq) for _, seq, _ in items)
    seqs = SequenceCollection(moltype, ignore_identical=ignore_identical)
    for name, seq, comment in items:
        seqs.add_seq(name, seq, comment)
    return seqs


def make_aligned_seqs(
    data: DataType,
    *,
    moltype: MolTypes = None,
    ignore_identical: bool = False,
) -> Alignment:
    """Initialise an aligned collection of sequences.

    Parameters
    ----------
    data
        a dict {name: seq, ...}, or a series of (name, seq),
        (name, seq, comment) or bare sequences, all of the same length
    moltype
        string representation of the moltype, e.g., 'dna', 'protein'.
        Inferred from the sequences if None.
    ignore_identical
        ignore sequences whose name and characters match an existing one
    """
    items = list(_iter_input(data))
    if moltype is None:
        moltype = msa_moltype.detect_moltype(_as_str(seq) for _, seq, _ in items)
    aln = Alignment(moltype, ignore_identical=ignore_identical)
    for name, seq, comment in items:
        aln.add_seq(name, seq, comment)
    return aln


def _as_str(seq: SeqType) -> str:
    return seq if isinstance(seq, str) else array_to_str(seq_to_array(seq))


def random_alignment(
    moltype: MolTypes, length: int, num_seqs: int, rng: RngType = None
) -> Alignment:
    """an alignment of uniformly drawn canonical characters

    Rows are named Seq0000, Seq0001, ... and filled row by row.
    """
    moltype = msa_moltype.get_moltype(moltype)
    if moltype == msa_moltype.UNKNOWN:
        msg = "cannot simulate sequences of unknown moltype"
        raise UnsupportedAlphabetError(msg)
    if length < 0 or num_seqs < 0:
        msg = f"length and num_seqs must be >= 0, not {length} and {num_seqs}"
        raise InvalidArgumentError(msg)

    rng = get_random_source(rng)
    alphabet = moltype.alphabet
    aln = Alignment(moltype)
    for i in range(num_seqs):
        seq = "".join(alphabet[rng.randint(len(alphabet))] for _ in range(length))
        aln.add_seq(f"Seq{i:04d}", seq)
    return aln
