"""Sequential application of alignment operations with provenance logging.

A pipeline is a series of ``Alignment`` method calls. It consumes
alignments one at a time, applying every step to a clone of each, and
records what it did with a ``scitrack.CachingLogger``.
"""

from __future__ import annotations

import dataclasses
import re
import time
from collections.abc import Iterable, Iterator
from pathlib import Path
from typing import Any, Literal
from uuid import uuid4

from scitrack import CachingLogger

from msaforge.core.alignment import Alignment


@dataclasses.dataclass(frozen=True)
class PipelineStep:
    """an Alignment method name and the keyword arguments to call it with"""

    name: str
    kwargs: dict[str, Any] = dataclasses.field(default_factory=dict)

    def __post_init__(self) -> None:
        method = getattr(Alignment, self.name, None)
        if self.name.startswith("_") or not callable(method):
            msg = f"{self.name!r} is not an alignment operation"
            raise ValueError(msg)

    def __hash__(self) -> int:
        return hash((self.name, str(self)))

    def __str__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self.kwargs.items())
        return f"{self.name}({args})"

    def __call__(self, aln: Alignment) -> Any:  # noqa: ANN401
        return getattr(aln, self.name)(**self.kwargs)


@dataclasses.dataclass
class PipelineResult:
    """the transformed alignment and the value returned by every step"""

    alignment: Alignment
    outputs: list[Any]


def _make_logfile_name(pipeline: AlignmentPipeline) -> str:
    parts = [re.sub(r"\(.*", "", str(step)) for step in pipeline.steps]
    uid = str(uuid4())
    return f"{'-'.join(parts) or 'pipeline'}-{uid[:8]}.log"


class AlignmentPipeline:
    """Applies a series of alignment operations to each of many alignments.

    Parameters
    ----------
    steps
        PipelineStep instances, method names, or (name, kwargs) pairs

    Notes
    -----
    Steps run in order on a clone of the input. A step returning an
    Alignment (e.g. ``sub_align`` or ``consensus``) replaces the alignment
    the following steps act on. Errors raised by a step propagate.
    """

    def __init__(
        self, steps: Iterable[PipelineStep | str | tuple[str, dict[str, Any]]]
    ) -> None:
        self.steps: list[PipelineStep] = []
        for step in steps:
            if isinstance(step, str):
                step = PipelineStep(step)
            elif not isinstance(step, PipelineStep):
                step = PipelineStep(*step)
            self.steps.append(step)
        self.logger: CachingLogger | None = None

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({' + '.join(map(str, self.steps))})"

    def __call__(self, aln: Alignment) -> PipelineResult:
        """applies the steps to a clone of aln"""
        current = aln.clone()
        outputs = []
        for step in self.steps:
            value = step(current)
            if isinstance(value, Alignment):
                current = value
            outputs.append(value)
        return PipelineResult(alignment=current, outputs=outputs)

    def set_logger(
        self,
        logger: CachingLogger | Literal[False] | None = None,
        log_dir: str | Path | None = None,
    ) -> None:
        """sets the logger used by apply_to

        Parameters
        ----------
        logger
            a CachingLogger, None to create one, False to disable logging
        log_dir
            directory for the log file of a logger without a log_file_path,
            defaults to the current directory
        """
        if logger is False:
            self.logger = None
            return
        if logger is None:
            logger = CachingLogger(create_dir=True)
        if not isinstance(logger, CachingLogger):
            msg = f"logger must be of type CachingLogger not {type(logger)}"
            raise TypeError(msg)
        if not logger.log_file_path:
            src = Path(log_dir or ".")
            logger.log_file_path = str(src / _make_logfile_name(self))
        self.logger = logger

    def apply_to(
        self,
        alignments: Iterable[Alignment],
        logger: CachingLogger | Literal[False] | None = None,
        log_dir: str | Path | None = None,
    ) -> Iterator[PipelineResult]:
        """applies the pipeline to alignments, one at a time

        Parameters
        ----------
        alignments
            consumed lazily, the next alignment is requested only after the
            previous result has been yielded
        logger
            see ``set_logger()``
        log_dir
            see ``set_logger()``
        """
        self.set_logger(logger, log_dir=log_dir)
        logger = self.logger
        start = time.time()
        if logger:
            logger.log_message(str(self), label="pipeline")
            logger.log_versions(["msaforge", "numpy", "numba"])

        for index, aln in enumerate(alignments):
            result = self(aln)
            if logger:
                logger.log_message(
                    f"{index}: {result.alignment.num_seqs} x {len(result.alignment)}",
                    label="output",
                )
            yield result

        if logger:
            taken = time.time() - start
            logger.log_message(f"{taken}", label="TIME TAKEN")
            logger.shutdown()
