"""msaforge: in-memory transformation, simulation and summary statistics
for multiple sequence alignments."""

import logging
import os
import typing
import warnings
from importlib import import_module

from msaforge._version import __version__

__license__ = "BSD-3"


def __getattr__(name: str) -> typing.Any:  # noqa: ANN401
    if (attr := globals().get(name)) is not None:
        return attr

    if name not in _import_mapping:
        raise AttributeError(name)

    module_name = _import_mapping[name]
    module = import_module(f".{module_name}", package=__name__)
    attr = getattr(module, name)
    globals()[name] = attr
    return attr


_import_mapping = {
    "Alignment": "core.alignment",
    "SequenceCollection": "core.alignment",
    "make_aligned_seqs": "core.alignment",
    "make_unaligned_seqs": "core.alignment",
    "random_alignment": "core.alignment",
    "PartitionSet": "core.partition",
    "DistanceMatrix": "core.distance",
    "Conservation": "core.profile",
    "CountProfile": "core.profile",
    "PSSM": "core.profile",
    "DNA": "core.moltype",
    "PROTEIN": "core.moltype",
    "available_moltypes": "core.moltype",
    "get_moltype": "core.moltype",
    "available_codes": "core.genetic_code",
    "get_code": "core.genetic_code",
    "RandomSource": "maths.rng",
    "get_random_source": "maths.rng",
    "set_default_random_source": "maths.rng",
    "AlignmentPipeline": "app.pipeline",
}


def __dir__() -> list[str]:
    return list(_import_mapping.keys()) + list(globals().keys())


__all__ = list(_import_mapping.keys())

version = __version__
version_info = tuple(int(v) for v in version.split(".") if v.isdigit())


warn_env = "MSAFORGE_WARNINGS"

if warn := os.environ.get(warn_env):
    warnings.simplefilter(warn)


# suppress numba warnings
__numba_logger = logging.getLogger("numba")
__numba_logger.setLevel(logging.WARNING)
