# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Experiment matrix construction.

Every version is tested against every version, itself included: k versions
give k² experiments, k of them on the diagonal. The self-pairs are the
control group. If 3.0.4-in-3.0.4 fails, the problem isn't compatibility.

Ordering is host-major with versions in natural order, so the results file
of a fresh run reads like a table and two runs of the same config produce
the same file.
"""

import re

from sympi.experiments.models import Experiment
from sympi.mpi.models import VersionsConfig

_NUMBER_RUN = re.compile(r"(\d+)")


def version_sort_key(version: str) -> tuple[tuple[tuple[int, object], ...], str]:
    """
    Natural sort key: digit runs compare as integers, so "3.10.0" comes
    after "3.9.1". The raw string breaks ties ("3.0" vs "3.00").
    """
    parts: list[tuple[int, object]] = []
    for chunk in _NUMBER_RUN.split(version):
        if not chunk:
            continue
        if chunk.isdigit():
            parts.append((0, int(chunk)))
        else:
            parts.append((1, chunk))
    return tuple(parts), version


def build_matrix(config: VersionsConfig) -> list[Experiment]:
    """Expand a versions config into the full host × container matrix."""
    artifacts = sorted(config.artifacts(), key=lambda a: version_sort_key(a.version))

    return [
        Experiment(host=host, container=container)
        for host in artifacts
        for container in artifacts
    ]
