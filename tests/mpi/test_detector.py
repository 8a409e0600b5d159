# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for MPI implementation detection.

The happy paths use real download URLs. The unhappy paths cover every way
a location can fail to yield a version: no marker, no .tar after the
marker, nothing between the two.
"""

import pytest

from sympi.mpi.detector import Detection, detect_implementation
from sympi.mpi.models import MPIImplementation


class TestRecognisedLocations:
    @pytest.mark.parametrize(
        ("location", "implementation", "version"),
        [
            (
                "https://download.open-mpi.org/release/open-mpi/v3.0/openmpi-3.0.4.tar.bz2",
                MPIImplementation.OPENMPI,
                "3.0.4",
            ),
            (
                "https://download.open-mpi.org/release/open-mpi/v4.0/openmpi-4.0.1rc2.tar.gz",
                MPIImplementation.OPENMPI,
                "4.0.1rc2",
            ),
            (
                "http://www.mpich.org/static/downloads/3.3/mpich-3.3.tar.gz",
                MPIImplementation.MPICH,
                "3.3",
            ),
            (
                "http://www.mpich.org/static/downloads/3.2.1/mpich-3.2.1.tar.gz",
                MPIImplementation.MPICH,
                "3.2.1",
            ),
            (
                "http://registrationcenter-download.intel.com/akdlm/irc_nas/tec/15838/l_mpi_2019.5.281.tar.gz",
                MPIImplementation.INTEL,
                "2019.5.281",
            ),
            ("openmpi-3.1.0.tar", MPIImplementation.OPENMPI, "3.1.0"),
        ],
    )
    def test_detects_implementation_and_version(
        self, location: str, implementation: MPIImplementation, version: str
    ) -> None:
        assert detect_implementation(location) == Detection(implementation, version)

    def test_uses_first_tar_after_marker(self) -> None:
        detection = detect_implementation("mirror/openmpi-3.0.4.tar.bz2.tar")
        assert detection is not None
        assert detection.version == "3.0.4"

    def test_tar_before_marker_is_ignored(self) -> None:
        detection = detect_implementation("/data.tar/openmpi-3.0.4.tar.bz2")
        assert detection == Detection(MPIImplementation.OPENMPI, "3.0.4")


class TestPriorityOrder:
    def test_openmpi_wins_over_mpich(self) -> None:
        detection = detect_implementation("mpich-3.3.tar.gz?also=openmpi-4.0.1.tar.gz")
        assert detection is not None
        assert detection.implementation == MPIImplementation.OPENMPI
        assert detection.version == "4.0.1"

    def test_mpich_wins_over_intel(self) -> None:
        detection = detect_implementation("l_mpi_2019.tar/mpich-3.3.tar.gz")
        assert detection is not None
        assert detection.implementation == MPIImplementation.MPICH

    def test_falls_through_when_higher_priority_marker_has_no_tar(self) -> None:
        detection = detect_implementation("mpich-3.3.tar.gz#openmpi-notes")
        assert detection == Detection(MPIImplementation.MPICH, "3.3")


class TestUndetected:
    @pytest.mark.parametrize(
        "location",
        [
            "",
            "https://example.org/some-other-library-1.0.tar.gz",
            "https://download.open-mpi.org/release/open-mpi/v3.0/openmpi-3.0.4.zip",
            "https://example.org/openmpi-.tar.gz",
            "mpich-3.3",
            "l_mpi_2019.5.281.tgz",
            "OPENMPI-3.0.4.tar.gz",
        ],
    )
    def test_returns_none(self, location: str) -> None:
        assert detect_implementation(location) is None
