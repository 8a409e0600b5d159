# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Data models for experiments and their outcomes.

Frozen dataclasses again: an experiment is decided by the pair of versions
it was built from, and a result record is written once and never edited.
The results file is the only durable copy, so there is nothing to keep in
sync in memory.
"""

from dataclasses import dataclass, field
from enum import Enum

from sympi.mpi.models import ArtifactDescriptor

Identity = tuple[str, str]


class ExperimentStatus(str, Enum):
    """Aggregate verdict of an experiment over all of its runs."""

    PASS = "PASS"
    FAIL = "FAIL"
    ERROR = "ERROR"


@dataclass(frozen=True)
class Experiment:
    """One host MPI / container MPI pairing."""

    host: ArtifactDescriptor
    container: ArtifactDescriptor

    @property
    def identity(self) -> Identity:
        return (self.host.version, self.container.version)


@dataclass(frozen=True)
class RunOutcome:
    """What one invocation of the runner reported."""

    passed: bool
    note: str = ""


@dataclass(frozen=True)
class ResultRecord:
    """
    The recorded verdict for one experiment.

    The note is free text for a human (last line of the benchmark output,
    or the infrastructure error) and carries no meaning for resumption.
    """

    host_version: str
    container_version: str
    status: ExperimentStatus
    note: str = ""

    @property
    def identity(self) -> Identity:
        return (self.host_version, self.container_version)


@dataclass
class ExecutionReport:
    """What happened during one pass of the execution loop."""

    records: list[ResultRecord] = field(default_factory=list)
    skipped: int = 0
    stopped_early: bool = False

    def count(self, status: ExperimentStatus) -> int:
        return sum(1 for r in self.records if r.status == status)
