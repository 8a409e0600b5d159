# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Resume support: drop experiments that already have a result on record.

This is a plain set difference on (host version, container version). The
status of the recorded line is not looked at, so an ERROR counts as
"attempted" and is not retried by re-running sympi. To force a retry,
delete the line from the results file.
"""

from typing import Iterable

from sympi.experiments.models import Experiment, ResultRecord


def prune_experiments(
    experiments: Iterable[Experiment],
    history: Iterable[ResultRecord],
) -> list[Experiment]:
    """Return the experiments whose identity is absent from history, in order."""
    done = {record.identity for record in history}
    return [e for e in experiments if e.identity not in done]
