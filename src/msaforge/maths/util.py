"""Provides small utility functions for numpy arrays."""

import numpy


def safe_p_log_p(data):
    """Returns -(p*log2(p)) for every non-negative, nonzero p in a.

    WARNING: log2 is only defined on positive numbers, so make sure
    there are no negative numbers in the array.

    Always returns an array with floats in there to avoid unexpected
    results when applying it to an array with just integers.
    """
    data = numpy.asarray(data)
    non_zero = data != 0
    result = numpy.zeros(data.shape, dtype=float)
    with numpy.errstate(invalid="raise"):
        result[non_zero] = -data[non_zero] * numpy.log2(data[non_zero])
    return result


def log2_with_neg_inf(data):
    """Returns log2 of data, with -inf where data is 0."""
    data = numpy.asarray(data, dtype=float)
    with numpy.errstate(divide="ignore"):
        return numpy.log2(data)
