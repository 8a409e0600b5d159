# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Shared pytest fixtures for sympi tests.

Fixtures here are available to every test file automatically.
We keep them minimal: just the stuff that multiple test modules need.
"""

import logging
import textwrap
from pathlib import Path

import pytest

OMPI_304 = "https://download.open-mpi.org/release/open-mpi/v3.0/openmpi-3.0.4.tar.bz2"
OMPI_310 = "https://download.open-mpi.org/release/open-mpi/v3.1/openmpi-3.1.0.tar.bz2"
MPICH_33 = "http://www.mpich.org/static/downloads/3.3/mpich-3.3.tar.gz"


@pytest.fixture(autouse=True)
def _reset_package_logger() -> None:
    """Drop handlers installed by get_logger/bootstrap so tests don't leak file handles."""
    yield  # type: ignore[misc]
    logger = logging.getLogger("sympi")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture()
def tmp_config_file(tmp_path: Path) -> Path:
    """
    Create a minimal valid config YAML file in a temp directory.

    This is the smallest config that passes schema validation.
    Tests that need specific config values should write their own files.
    """
    config_content = textwrap.dedent("""\
        global:
          config_version: "1.0.0"
          log_level: "DEBUG"
    """)
    config_file = tmp_path / "test_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def invalid_config_file(tmp_path: Path) -> Path:
    """A config file that's valid YAML but fails schema validation (missing required field)."""
    config_content = textwrap.dedent("""\
        global:
          log_level: "INFO"
    """)
    config_file = tmp_path / "invalid_config.yaml"
    config_file.write_text(config_content, encoding="utf-8")
    return config_file


@pytest.fixture()
def broken_yaml_file(tmp_path: Path) -> Path:
    """A file that isn't valid YAML at all."""
    config_file = tmp_path / "broken.yaml"
    config_file.write_text("{{not: yaml: at: all:::", encoding="utf-8")
    return config_file


@pytest.fixture()
def openmpi_versions_file(tmp_path: Path) -> Path:
    """Two Open MPI releases, the smallest interesting matrix."""
    versions_file = tmp_path / "openmpi.conf"
    versions_file.write_text(
        f"# test versions\nompi304 = {OMPI_304}\nompi310 = {OMPI_310}\n",
        encoding="utf-8",
    )
    return versions_file
