"""Exception classes raised by the alignment engine."""


class AlignmentError(Exception):
    """base class for all alignment errors"""


class LengthMismatchError(ValueError, AlignmentError):
    """a row width is inconsistent with the alignment"""


class InvalidArgumentError(ValueError, AlignmentError):
    """a rate, cutoff, size or position argument is out of range"""


class OutOfRangeError(IndexError, AlignmentError):
    """a site, column or row index is outside the current bounds"""


class UnknownSequenceError(KeyError, AlignmentError):
    """a named sequence is not present"""


class MissingSequenceError(KeyError, AlignmentError):
    """a sequence required from a companion collection is absent"""


class UnsupportedAlphabetError(TypeError, AlignmentError):
    """operation not defined for the moltype"""


class UnsupportedNormalizationError(ValueError, AlignmentError):
    """unknown PSSM normalisation"""


class UnknownCharacterError(KeyError, AlignmentError):
    """a character is missing from the statistics"""


class ShortSequenceError(ValueError, AlignmentError):
    """nucleotide sequence is shorter than its protein counterpart"""


class LongSequenceError(ValueError, AlignmentError):
    """nucleotide sequence is longer than its protein counterpart"""
