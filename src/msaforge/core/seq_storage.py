"""Storage of named sequence records.

The characters of a record are held as a numpy ``uint8`` array of ASCII
codes. ``SeqsData`` owns the records and enforces name uniqueness; it is
composed by both ``SequenceCollection`` and ``Alignment``.
"""

from __future__ import annotations

import warnings
from collections.abc import Iterator
from typing import TYPE_CHECKING

import numpy
import numpy.typing as npt

from msaforge.core import moltype as msa_moltype
from msaforge.core.errors import InvalidArgumentError, UnknownSequenceError
from msaforge.maths.stats.number import CategoryCounter

if TYPE_CHECKING:
    from collections.abc import Iterable

NumpyByteArrayType = npt.NDArray[numpy.uint8]
SeqType = str | bytes | NumpyByteArrayType


def seq_to_array(seq: SeqType | Iterable[str]) -> NumpyByteArrayType:
    """converts a str, bytes, list of characters or array to a new uint8 array"""
    if isinstance(seq, numpy.ndarray):
        if seq.dtype.kind == "U":
            seq = "".join(seq.tolist())
        else:
            return numpy.array(seq, dtype=numpy.uint8)
    if not isinstance(seq, (str, bytes)):
        seq = "".join(seq)
    if isinstance(seq, str):
        try:
            seq = seq.encode("ascii")
        except UnicodeEncodeError as err:
            msg = f"sequences must be ASCII: {err}"
            raise InvalidArgumentError(msg) from err
    return numpy.frombuffer(seq, dtype=numpy.uint8).copy()


def array_to_str(data: NumpyByteArrayType) -> str:
    return numpy.asarray(data, dtype=numpy.uint8).tobytes().decode("ascii")


class SeqRecord:
    """a named sequence with a free text comment"""

    __slots__ = ("comment", "name", "seq")

    def __init__(self, name: str, seq: SeqType, comment: str = "") -> None:
        self.name = name
        self.seq = seq_to_array(seq)
        self.comment = comment or ""

    def __repr__(self) -> str:
        seq = str(self)
        if len(seq) > 10:
            seq = f"{seq[:10]}..."
        return f"{self.__class__.__name__}(name={self.name!r}, seq={seq!r})"

    def __str__(self) -> str:
        return array_to_str(self.seq)

    def __len__(self) -> int:
        return len(self.seq)

    def same_seq(self, seq: SeqType) -> bool:
        return numpy.array_equal(self.seq, seq_to_array(seq))

    def copy(self) -> SeqRecord:
        return self.__class__(self.name, self.seq, self.comment)


class SeqsData:
    """Ordered storage of sequence records keyed by unique name.

    Parameters
    ----------
    moltype
        name of a moltype or a MolType instance, fixed for the lifetime of
        the store except through ``clear()``
    ignore_identical
        if True, adding a record whose name and sequence match an existing
        record is ignored

    Notes
    -----
    Insertion order is the canonical output order. Adding a record whose
    name is already present (and is not ignored) stores it under the name
    with a zero padded numeric suffix, e.g. ``seq_0001``. Both situations
    emit a ``UserWarning``.
    """

    __slots__ = ("_moltype", "_records", "ignore_identical")

    def __init__(
        self,
        moltype: str | msa_moltype.MolType | None = None,
        ignore_identical: bool = False,
    ) -> None:
        self._moltype = msa_moltype.get_moltype(moltype)
        self._records: dict[str, SeqRecord] = {}
        self.ignore_identical = ignore_identical

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, name: object) -> bool:
        return name in self._records

    def __iter__(self) -> Iterator[SeqRecord]:
        return iter(self._records.values())

    def __getitem__(self, index: str | int) -> SeqRecord:
        if isinstance(index, int):
            return list(self._records.values())[index]
        try:
            return self._records[index]
        except KeyError:
            msg = f"sequence {index!r} does not exist"
            raise UnknownSequenceError(msg) from None

    @property
    def moltype(self) -> msa_moltype.MolType:
        return self._moltype

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._records)

    def unique_name(self, name: str) -> str:
        """returns name, or name with the first free numeric suffix"""
        new_name = name
        idx = 0
        while new_name in self._records:
            idx += 1
            new_name = f"{name}_{idx:04d}"
        return new_name

    def add_record(self, record: SeqRecord) -> str | None:
        """adds record, returns the name it is stored under or None if ignored"""
        name = record.name
        existing = self._records.get(name)
        if existing is not None and self.ignore_identical and existing.same_seq(
            record.seq
        ):
            warnings.warn(
                f"sequence {name!r} already exists with the same sequence, ignoring",
                UserWarning,
                stacklevel=3,
            )
            return None

        if existing is not None:
            new_name = self.unique_name(name)
            warnings.warn(
                f"sequence {name!r} already exists, renamed to {new_name!r}",
                UserWarning,
                stacklevel=3,
            )
            record.name = new_name

        self._records[record.name] = record
        return record.name

    def add_seq(self, name: str, seq: SeqType, comment: str = "") -> str | None:
        return self.add_record(SeqRecord(name, seq, comment))

    def get_seq_array(self, name: str) -> NumpyByteArrayType:
        """returns the stored array for name, not a copy"""
        return self[name].seq

    def get_seq_str(self, name: str) -> str:
        return str(self[name])

    def remove(self, name: str) -> SeqRecord:
        record = self[name]
        del self._records[name]
        return record

    def clear(self, moltype: str | msa_moltype.MolType | None = None) -> None:
        """removes all records, optionally resetting the moltype"""
        self._records.clear()
        if moltype is not None:
            self._moltype = msa_moltype.get_moltype(moltype)

    def iter_rows(self) -> Iterator[tuple[str, str, str]]:
        """yields (name, sequence, comment) in insertion order"""
        for record in self._records.values():
            yield record.name, str(record), record.comment

    def char_stats(self) -> CategoryCounter[str]:
        """counts of each upper cased character across all records"""
        counts: CategoryCounter[str] = CategoryCounter()
        for record in self._records.values():
            codes, nums = numpy.unique(
                msa_moltype.to_upper(record.seq), return_counts=True
            )
            for code, num in zip(codes.tolist(), nums.tolist()):
                counts[chr(code)] += num
        return counts

    def unique_chars(self) -> str:
        """sorted string of the distinct characters, case preserved"""
        chars: set[int] = set()
        for record in self._records.values():
            chars.update(numpy.unique(record.seq).tolist())
        return "".join(chr(c) for c in sorted(chars))

    def copy(self) -> SeqsData:
        """deep copy of self"""
        new = self.__class__(self._moltype, ignore_identical=self.ignore_identical)
        for record in self._records.values():
            new._records[record.name] = record.copy()
        return new
