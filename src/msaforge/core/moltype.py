"""Molecular types and the character classes used by alignment operations.

Characters are stored as ASCII codes in ``numpy.uint8`` arrays. Every
character belongs to one of four classes: a gap (``-``), a match point
(``.``), an "other" character (``*``, ``?`` and the all-ambiguous symbol of
the moltype) or an ordinary symbol.
"""

import numpy
import numpy.typing as npt

NumpyByteArrayType = npt.NDArray[numpy.uint8]

GAP = "-"
POINT = "."
OTHER = "*"
MISSING = "?"
ALL_NUCLEOTIDE = "N"
ALL_AMINO_ACID = "X"

GAP_CODE = ord(GAP)
POINT_CODE = ord(POINT)

STD_NUCLEOTIDES = "ACGT"
STD_AMINO_ACIDS = "ARNDCQEGHILKMFPSTWYV"

IUPAC_DNA_ambiguities: dict[str, frozenset[str]] = {
    "N": frozenset(("A", "C", "T", "G")),
    "R": frozenset(("A", "G")),
    "Y": frozenset(("C", "T")),
    "W": frozenset(("A", "T")),
    "S": frozenset(("C", "G")),
    "K": frozenset(("T", "G")),
    "M": frozenset(("C", "A")),
    "B": frozenset(("C", "T", "G")),
    "D": frozenset(("A", "T", "G")),
    "H": frozenset(("A", "C", "T")),
    "V": frozenset(("A", "C", "G")),
}

IUPAC_PROTEIN_ambiguities: dict[str, frozenset[str]] = {
    "B": frozenset(("N", "D")),
    "Z": frozenset(("Q", "E")),
    "J": frozenset(("I", "L")),
    "X": frozenset(STD_AMINO_ACIDS),
}

# Clustal strong and weak amino acid substitution groups
STRONG_GROUPS = (
    "STA",
    "NEQK",
    "NHQK",
    "NDEQ",
    "QHRK",
    "MILV",
    "MILF",
    "HY",
    "FYW",
)
WEAK_GROUPS = (
    "CSA",
    "ATV",
    "SAG",
    "STNK",
    "STPA",
    "SGND",
    "SNDEQK",
    "NDEQHK",
    "NEQHRK",
    "FVLIM",
    "HFY",
)


def to_upper(data: NumpyByteArrayType) -> NumpyByteArrayType:
    """returns a copy of an ASCII code array with lower case letters upper cased"""
    data = numpy.array(data, dtype=numpy.uint8)
    lower = (data >= ord("a")) & (data <= ord("z"))
    data[lower] -= 32
    return data


def _codes(chars: str) -> NumpyByteArrayType:
    return numpy.frombuffer(chars.encode("ascii"), dtype=numpy.uint8).copy()


class MolType:
    """Holds the canonical characters and special states of a molecule type.

    Parameters
    ----------
    name
        identifier of the moltype
    alphabet
        the canonical characters, in order, used for PSSMs and mutation
    ambiguities
        mapping of ambiguity codes to the canonical characters they stand for
    all_ambiguous
        the symbol used to mask positions, None if masking is not defined
    is_nucleic
        whether the moltype is a nucleic acid
    """

    __slots__ = (
        "_other_codes",
        "alphabet",
        "all_ambiguous",
        "ambiguities",
        "is_nucleic",
        "label",
        "name",
    )

    def __init__(
        self,
        name: str,
        alphabet: str,
        ambiguities: dict[str, frozenset[str]] | None = None,
        all_ambiguous: str | None = None,
        is_nucleic: bool = False,
        label: str | None = None,
    ) -> None:
        self.name = name
        self.label = label or name
        self.alphabet = alphabet
        self.ambiguities = ambiguities or {}
        self.all_ambiguous = all_ambiguous
        self.is_nucleic = is_nucleic
        others = OTHER + MISSING + (all_ambiguous or "")
        self._other_codes = _codes(others)

    def __repr__(self) -> str:
        return f"MolType({self.name!r})"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            other = get_moltype(other)
        return isinstance(other, MolType) and other.name == self.name

    def __hash__(self) -> int:
        return hash(self.name)

    @property
    def alphabet_array(self) -> NumpyByteArrayType:
        """canonical characters as ASCII codes"""
        return _codes(self.alphabet)

    @property
    def other_chars(self) -> str:
        return self._other_codes.tobytes().decode("ascii")

    def is_other(self, data: NumpyByteArrayType) -> npt.NDArray[numpy.bool_]:
        """True where an upper cased code is an 'other' character"""
        return numpy.isin(to_upper(data), self._other_codes)

    def informative_mask(self, data: NumpyByteArrayType) -> npt.NDArray[numpy.bool_]:
        """True where a code is not a gap, point or other character"""
        data = numpy.asarray(data, dtype=numpy.uint8)
        return (data != GAP_CODE) & (data != POINT_CODE) & ~self.is_other(data)

    def resolve_ambiguity(self, char: str) -> frozenset[str]:
        """the canonical characters an upper cased character may stand for"""
        char = char.upper()
        if char in self.alphabet:
            return frozenset(char)
        return self.ambiguities.get(char, frozenset())


DNA = MolType(
    "dna",
    STD_NUCLEOTIDES,
    ambiguities=IUPAC_DNA_ambiguities,
    all_ambiguous=ALL_NUCLEOTIDE,
    is_nucleic=True,
    label="nucleotide",
)
PROTEIN = MolType(
    "protein",
    STD_AMINO_ACIDS,
    ambiguities=IUPAC_PROTEIN_ambiguities,
    all_ambiguous=ALL_AMINO_ACID,
    label="amino acid",
)
UNKNOWN = MolType("unknown", STD_NUCLEOTIDES)

_moltype_aliases = {
    "dna": DNA,
    "rna": DNA,
    "nucleotide": DNA,
    "nt": DNA,
    "both": DNA,
    "protein": PROTEIN,
    "aa": PROTEIN,
    "amino_acid": PROTEIN,
    "unknown": UNKNOWN,
    "text": UNKNOWN,
}


def get_moltype(name: "str | MolType | None") -> MolType:
    """returns the moltype corresponding to name

    Notes
    -----
    Sequences valid as both nucleotide and protein ("both") are treated as
    nucleotide. None returns the unknown moltype.
    """
    if isinstance(name, MolType):
        return name
    if name is None:
        return UNKNOWN
    try:
        return _moltype_aliases[name.lower()]
    except KeyError:
        msg = f"unknown moltype {name!r}, choose from {sorted(_moltype_aliases)}"
        raise ValueError(msg) from None


def available_moltypes() -> list[str]:
    return sorted(_moltype_aliases)


_nucleotide_chars = frozenset(
    STD_NUCLEOTIDES + "U" + "".join(IUPAC_DNA_ambiguities) + GAP + POINT + MISSING
)
_protein_chars = frozenset(
    STD_AMINO_ACIDS
    + "".join(IUPAC_PROTEIN_ambiguities)
    + "UO"
    + GAP
    + POINT
    + OTHER
    + MISSING
)


def detect_moltype(seqs) -> MolType:
    """infers the moltype from a series of sequence strings

    Sequences made only of nucleotide characters are nucleotide, even if
    they are also valid protein.
    """
    chars = set()
    for seq in seqs:
        chars.update(str(seq).upper())

    if chars <= _nucleotide_chars:
        return DNA
    if chars <= _protein_chars:
        return PROTEIN
    return UNKNOWN
