"""Translates codons to amino acids.

NOTE: * is used to denote termination (as per NCBI standard).
NOTE: Codons are handled in DNA form, U is converted to T on lookup.
"""

from itertools import product

from msaforge.core.moltype import GAP, IUPAC_DNA_ambiguities


class GeneticCodeError(Exception):
    pass


class GeneticCodeInitError(ValueError, GeneticCodeError):
    pass


class InvalidCodonError(KeyError, GeneticCodeError):
    pass


_bases = "TCAG"


class GeneticCode:
    """Holds codon to amino acid mapping, and vice versa.

    Use the `get_code()` function to get one of the included code instances.

    >>> sgc = get_code(1)
    >>> sgc['UUU'] == 'F'
    >>> sgc['TTT'] == 'F'
    >>> sgc['F'] == ['TTT', 'TTC']
    >>> sgc['*'] == ['TAA', 'TAG', 'TGA']

    GeneticCode is immutable once created.
    """

    _codons = tuple(map("".join, product(_bases, _bases, _bases)))

    def __init__(self, code_sequence, ID=None, name=None, start_codon_sequence=None):
        """
        Parameters
        ----------
        code_sequence : str
            64-character string containing NCBI representation of the genetic code.
        ID
            Identifier
        name
            name of the Genetic code
        start_codon_sequence
            64-character string where the '-' character indicates the corresponding
            position of code_sequence **is not** a start codon
        """
        if len(code_sequence) != 64:
            msg = f"code_sequence: {code_sequence} has length {len(code_sequence)}, but expected 64"
            raise GeneticCodeInitError(msg)

        self.code_sequence = code_sequence
        self.ID = ID
        self.name = name
        self.start_codon_sequence = start_codon_sequence
        start_codons = {}
        if start_codon_sequence:
            for codon, aa in zip(self._codons, start_codon_sequence):
                if aa != "-":
                    start_codons[codon] = aa
        self.start_codons = start_codons
        self.codons = dict(zip(self._codons, code_sequence))
        synonyms = {}
        for codon in self._codons:
            synonyms.setdefault(self.codons[codon], []).append(codon)
        self.synonyms = synonyms
        self.sense_codons = {c: aa for c, aa in self.codons.items() if aa != "*"}

    def __str__(self):
        return self.code_sequence

    def __repr__(self):
        return f"GeneticCode(ID={self.ID!r}, name={self.name!r})"

    def __eq__(self, other):
        return str(self) == str(other)

    def __hash__(self):
        return hash(self.code_sequence)

    def __getitem__(self, item):
        """Returns amino acid corresponding to codon, or codons for an aa.

        Returns [] for an unknown amino acid, 'X' for an unknown codon.
        """
        item = str(item)
        if len(item) == 1:
            return self.synonyms.get(item, [])
        if len(item) == 3:
            key = item.upper().replace("U", "T")
            return self.codons.get(key, "X")
        msg = f"Codon or aa {item} has wrong length"
        raise InvalidCodonError(msg)

    def __call__(self, codon):
        return self[codon]

    def translate_codon(self, codon):
        """translates a codon, resolving IUPAC ambiguities when possible

        Returns '-' for a codon of three gaps, 'X' for a partially gapped
        codon or an ambiguity that resolves to more than one amino acid.
        """
        codon = codon.upper().replace("U", "T")
        if codon == GAP * 3:
            return GAP
        if GAP in codon:
            return "X"
        if codon in self.codons:
            return self.codons[codon]

        options = []
        for base in codon:
            if base in _bases:
                options.append(base)
            elif base in IUPAC_DNA_ambiguities:
                options.append("".join(sorted(IUPAC_DNA_ambiguities[base])))
            else:
                return "X"
        aas = {self.codons["".join(c)] for c in product(*options)}
        return aas.pop() if len(aas) == 1 else "X"

    def translate(self, dna, start=0):
        """Translates DNA to protein with current GeneticCode.

        Parameters
        ----------
        dna: str
            a string of nucleotides, may include gaps
        start: int
            position to begin translation (used to implement frames)

        Returns
        -------
        String containing amino acid sequence. Trailing nucleotides that do
        not make a complete codon are ignored.
        """
        if not dna:
            return ""
        if start + 1 > len(dna):
            msg = "Translation starts after end of sequence"
            raise ValueError(msg)
        return "".join(
            self.translate_codon(dna[i : i + 3]) for i in range(start, len(dna) - 2, 3)
        )

    def is_start(self, codon):
        """Returns True if codon is a start codon, False otherwise."""
        fixed_codon = codon.upper().replace("U", "T")
        return fixed_codon in self.start_codons

    def is_stop(self, codon):
        """Returns True if codon is a stop codon, False otherwise."""
        return self[codon] == "*"


NcbiGeneticCodeData = [
    GeneticCode(*data)
    for data in [
        [
            "FFLLSSSSYY**CC*WLLLLPPPPHHQQRRRRIIIMTTTTNNKKSSRRVVVVAAAADDEEGGGG",
            1,
            "Standard Nuclear",
            "---M---------------M---------------M----------------------------",
        ],
        [
            "FFLLSSSSYY**CCWWLLLLPPPPHHQQRRRRIIMMTTTTNNKKSS**VVVVAAAADDEEGGGG",
            2,
            "Vertebrate Mitochondrial",
            "--------------------------------MMMM---------------M------------",
        ],
        [
            "FFLLSSSSYY**CCWWTTTTPPPPHHQQRRRRIIMMTTTTNNKKSSRRVVVVAAAADDEEGGGG",
            3,
            "Yeast Mitochondrial",
            "----------------------------------MM----------------------------",
        ],
        [
            "FFLLSSSSYY**CCWWLLLLPPPPHHQQRRRRIIMMTTTTNNKKSSSSVVVVAAAADDEEGGGG",
            5,
            "Invertebrate Mitochondrial",
            "---M----------------------------MMMM---------------M------------",
        ],
        [
            "FFLLSSSSYY**CC*WLLLLPPPPHHQQRRRRIIIMTTTTNNKKSSRRVVVVAAAADDEEGGGG",
            11,
            "Bacterial Nuclear and Plant Plastid",
            "---M---------------M------------MMMM---------------M------------",
        ],
    ]
]

GeneticCodes = {gc.ID: gc for gc in NcbiGeneticCodeData}

_code_aliases = {
    "standard": 1,
    "mitov": 2,
    "mitoi": 5,
}

DEFAULT = GeneticCodes[1]


def get_code(code_id=1):
    """returns the genetic code

    Parameters
    ----------
    code_id
        genetic code identifier, name, alias ('standard', 'mitov',
        'mitoi'), number or string(number), defaults to standard genetic
        code
    """
    code_id = code_id or 1
    if isinstance(code_id, GeneticCode):
        return code_id

    code = None
    if str(code_id).isdigit():
        code = GeneticCodes.get(int(code_id))
    elif str(code_id).lower() in _code_aliases:
        code = GeneticCodes[_code_aliases[str(code_id).lower()]]
    else:
        for gc in GeneticCodes.values():
            if gc.name == code_id:
                code = gc

    if code is None:
        msg = f'No genetic code matching "{code_id}"'
        raise ValueError(msg)

    return code


def available_codes():
    """returns list of (code ID, name) for the available genetic codes"""
    return [(k, GeneticCodes[k].name) for k in sorted(GeneticCodes)]
