# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Tests for versions file parsing.

The important failure modes: a value we can't detect, a file that mixes
two MPI families (whatever the order), duplicates in strict mode and an
empty file. All of them abort the whole load.
"""

from pathlib import Path

import pytest

from sympi.config.exceptions import (
    ConfigLoadError,
    ConfigValidationError,
    DetectionError,
    DuplicateVersionError,
    ImplementationConflictError,
)
from sympi.config.kv import KeyValue
from sympi.mpi.models import MPIImplementation
from sympi.mpi.versions import load_versions_file, parse_version_entries

OMPI_304 = "https://download.open-mpi.org/release/open-mpi/v3.0/openmpi-3.0.4.tar.bz2"
OMPI_304_MIRROR = "https://mirror.example.org/openmpi-3.0.4.tar.gz"
OMPI_310 = "https://download.open-mpi.org/release/open-mpi/v3.1/openmpi-3.1.0.tar.bz2"
MPICH_33 = "http://www.mpich.org/static/downloads/3.3/mpich-3.3.tar.gz"


class TestParseEntries:
    def test_builds_versions_map(self) -> None:
        config = parse_version_entries([("a", OMPI_304), ("b", OMPI_310)])

        assert config.implementation == MPIImplementation.OPENMPI
        assert set(config.versions) == {"3.0.4", "3.1.0"}
        assert config.versions["3.0.4"].location == OMPI_304
        assert config.versions["3.1.0"].implementation == MPIImplementation.OPENMPI

    def test_accepts_key_value_objects(self) -> None:
        config = parse_version_entries([KeyValue("x", MPICH_33)])
        assert config.implementation == MPIImplementation.MPICH
        assert list(config.versions) == ["3.3"]

    def test_versions_map_is_read_only(self) -> None:
        config = parse_version_entries([("a", OMPI_304)])
        with pytest.raises(TypeError):
            config.versions["9.9.9"] = config.versions["3.0.4"]  # type: ignore[index]

    def test_undetectable_value_aborts(self) -> None:
        with pytest.raises(DetectionError) as excinfo:
            parse_version_entries([("a", OMPI_304), ("b", "https://example.org/foo.zip")])
        assert excinfo.value.value == "https://example.org/foo.zip"

    @pytest.mark.parametrize(
        "value",
        [
            "https://mirror.example.org/openmpi-3.0\t4.tar.gz",
            "https://mirror.example.org/openmpi-3.0 4.tar.gz",
            "https://mirror.example.org/openmpi-3.0\x014.tar.gz",
        ],
    )
    def test_version_that_cannot_be_recorded_aborts(self, value: str) -> None:
        with pytest.raises(DetectionError) as excinfo:
            parse_version_entries([("a", OMPI_304), ("b", value)])
        assert excinfo.value.value == value
        assert "whitespace or control characters" in str(excinfo.value)

    def test_tab_in_versions_file_aborts_load(self, tmp_path: Path) -> None:
        versions_file = tmp_path / "openmpi.conf"
        versions_file.write_text(
            f"a = {OMPI_304}\nb = https://mirror.example.org/openmpi-3.0\t4.tar.gz\n",
            encoding="utf-8",
        )
        with pytest.raises(DetectionError):
            load_versions_file(versions_file)

    @pytest.mark.parametrize(
        "entries",
        [
            [("a", OMPI_304), ("b", MPICH_33)],
            [("b", MPICH_33), ("a", OMPI_304)],
        ],
    )
    def test_mixed_implementations_conflict_in_any_order(
        self, entries: list[tuple[str, str]]
    ) -> None:
        with pytest.raises(ImplementationConflictError):
            parse_version_entries(entries)

    def test_duplicate_version_last_write_wins(self) -> None:
        config = parse_version_entries([("a", OMPI_304), ("b", OMPI_304_MIRROR)])
        assert len(config.versions) == 1
        assert config.versions["3.0.4"].location == OMPI_304_MIRROR

    def test_duplicate_version_rejected_in_strict_mode(self) -> None:
        with pytest.raises(DuplicateVersionError) as excinfo:
            parse_version_entries([("a", OMPI_304), ("b", OMPI_304_MIRROR)], strict=True)
        assert excinfo.value.version == "3.0.4"
        assert excinfo.value.first == OMPI_304
        assert excinfo.value.second == OMPI_304_MIRROR

    def test_empty_entries_are_invalid(self) -> None:
        with pytest.raises(ConfigValidationError):
            parse_version_entries([])


class TestLoadVersionsFile:
    def test_loads_file(self, openmpi_versions_file: Path) -> None:
        config = load_versions_file(openmpi_versions_file)
        assert config.implementation == MPIImplementation.OPENMPI
        assert sorted(config.versions) == ["3.0.4", "3.1.0"]
        assert config.source == str(openmpi_versions_file)

    def test_file_with_only_comments_is_invalid(self, tmp_path: Path) -> None:
        path = tmp_path / "empty.conf"
        path.write_text("# nothing here\n", encoding="utf-8")
        with pytest.raises(ConfigValidationError):
            load_versions_file(path)

    def test_missing_file_is_load_error(self, tmp_path: Path) -> None:
        with pytest.raises(ConfigLoadError):
            load_versions_file(tmp_path / "missing.conf")
