# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
MPI implementation and version detection.

The versions file only lists download locations, for example:

    https://download.open-mpi.org/release/open-mpi/v3.0/openmpi-3.0.4.tar.bz2

Each implementation names its release tarballs with a fixed marker followed
by the version and a ".tar" suffix. The version is whatever sits between the
marker and the first ".tar" after it.

Markers are tried in a fixed order (Open MPI, MPICH, Intel MPI) and the
first hit wins. The order matters for strings that could match more than
one marker, so don't reshuffle the table.
"""

import re
from dataclasses import dataclass
from typing import Optional

from sympi.mpi.models import MPIImplementation

_MARKERS: tuple[tuple[MPIImplementation, str], ...] = (
    (MPIImplementation.OPENMPI, "openmpi-"),
    (MPIImplementation.MPICH, "mpich-"),
    (MPIImplementation.INTEL, "l_mpi_"),
)

_PATTERNS: tuple[tuple[MPIImplementation, re.Pattern[str]], ...] = tuple(
    (implementation, re.compile(re.escape(marker) + r"(?P<version>.*?)\.tar"))
    for implementation, marker in _MARKERS
)


@dataclass(frozen=True)
class Detection:
    implementation: MPIImplementation
    version: str


def _match(pattern: re.Pattern[str], text: str) -> Optional[str]:
    match = pattern.search(text)
    if match is None:
        return None
    version = match.group("version")
    return version or None


def detect_implementation(text: str) -> Optional[Detection]:
    """
    Figure out which MPI implementation and version a location points to.

    Returns None when nothing is recognised: no known marker, no ".tar"
    after the marker, or an empty version between the two. Only the first
    implementation in priority order that yields a version is trusted.
    """
    for implementation, pattern in _PATTERNS:
        version = _match(pattern, text)
        if version is not None:
            return Detection(implementation=implementation, version=version)

    return None
