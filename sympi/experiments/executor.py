# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Experiment executor: runs a campaign one experiment at a time.

For each pending experiment the executor:
  1. Invokes the runner N times, one after the other
  2. Stops early if the runner reports an infrastructure error
  3. Folds the runs into a single verdict:
       any infrastructure error  -> ERROR
       any run that didn't pass  -> FAIL
       otherwise                 -> PASS
  4. Appends the verdict to the results store before touching the next one

Experiments run strictly one at a time. Runners share build and scratch
directories between experiments, and those are not safe to mutate
concurrently.

An ERROR does not stop the batch by default: the record is written and the
loop moves on. stop_on_error=True restores fail-fast behaviour for
operators who want to look at the first broken experiment immediately.
"""

from typing import Iterable, Protocol

from sympi.experiments.exceptions import InfrastructureError
from sympi.experiments.models import (
    ExecutionReport,
    Experiment,
    ExperimentStatus,
    ResultRecord,
    RunOutcome,
)
from sympi.logging.logger import get_logger
from sympi.results.store import ResultsStore

logger = get_logger(__name__)


class ExperimentRunner(Protocol):
    """
    Anything that can carry out one iteration of an experiment.

    Return a RunOutcome for a benchmark that ran (passed or not). Raise
    InfrastructureError when the experiment could not be carried out.
    """

    def run(self, experiment: Experiment) -> RunOutcome: ...


def run_experiment(
    experiment: Experiment,
    runner: ExperimentRunner,
    nrun: int,
) -> ResultRecord:
    """
    Run one experiment `nrun` times and fold the runs into a ResultRecord.

    The note of the record is the last iteration's note, or the error
    message when an iteration hit an infrastructure error.
    """
    if nrun < 1:
        raise ValueError(f"nrun must be a positive integer, got {nrun}")

    host_version, container_version = experiment.identity
    status = ExperimentStatus.PASS
    note = ""

    for iteration in range(1, nrun + 1):
        logger.info(
            "Running experiment",
            extra={
                "iteration": iteration,
                "nrun": nrun,
                "host_version": host_version,
                "container_version": container_version,
            },
        )

        try:
            outcome = runner.run(experiment)
        except InfrastructureError as err:
            logger.warning(
                "Cannot run experiment",
                extra={
                    "iteration": iteration,
                    "host_version": host_version,
                    "container_version": container_version,
                    "error": str(err),
                },
            )
            status = ExperimentStatus.ERROR
            note = str(err)
            break

        note = outcome.note
        if not outcome.passed:
            status = ExperimentStatus.FAIL

    return ResultRecord(
        host_version=host_version,
        container_version=container_version,
        status=status,
        note=note,
    )


def execute_matrix(
    experiments: Iterable[Experiment],
    runner: ExperimentRunner,
    store: ResultsStore,
    nrun: int,
    stop_on_error: bool = False,
) -> ExecutionReport:
    """
    Run every experiment in order, recording each verdict as soon as it's known.

    Storage failures propagate: if a verdict can't be made durable, carrying
    on would only produce work that gets repeated on the next invocation.
    """
    pending = list(experiments)
    report = ExecutionReport()

    for index, experiment in enumerate(pending):
        record = run_experiment(experiment, runner, nrun)
        store.append(record)
        report.records.append(record)

        logger.info(
            "Experiment finished",
            extra={
                "host_version": record.host_version,
                "container_version": record.container_version,
                "status": record.status.value,
                "progress": f"{index + 1}/{len(pending)}",
            },
        )

        if record.status == ExperimentStatus.ERROR and stop_on_error:
            report.skipped = len(pending) - index - 1
            report.stopped_early = True
            logger.error(
                "Stopping after infrastructure error",
                extra={
                    "host_version": record.host_version,
                    "container_version": record.container_version,
                    "skipped": report.skipped,
                },
            )
            break

    return report
