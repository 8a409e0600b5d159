# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Runtime bootstrap for sympi.

One-time setup before any real work:
  1. Validate the environment (Python version)
  2. Configure the JSON logger (level, optional log file)
  3. Log what machine we're on, since results are only meaningful per host

Plus the implementation-dependent defaults: where results go and which
scratch directory the runner works in when the config doesn't say.
"""

from pathlib import Path

from sympi import __version__
from sympi.config.schema import GlobalConfig
from sympi.logging.logger import configure_logging, get_logger
from sympi.mpi.models import MPIImplementation
from sympi.runtime.environment import check_minimum_python, get_system_info
from sympi.utils.filesystem import ensure_directory, reset_directory


def default_output_filename(implementation: MPIImplementation) -> str:
    """Results file used when the config doesn't name one."""
    return f"{implementation.value}-results.txt"


def default_scratch_directory(implementation: MPIImplementation) -> str:
    return f"scratch-{implementation.value}"


def prepare_scratch_directory(path: Path, clean: bool = False) -> Path:
    """Create the scratch directory, wiping it first when `clean` is set."""
    logger = get_logger("sympi.runtime")
    if clean and path.exists():
        logger.info("Cleaning scratch directory", extra={"path": str(path)})
        return reset_directory(path)
    return ensure_directory(path)


def bootstrap(config: GlobalConfig) -> None:
    """
    Run the bootstrap sequence. Called once at the start of every CLI command
    that has a config.
    """
    check_minimum_python()

    log_file = Path(config.log_file) if config.log_file is not None else None
    configure_logging(config.log_level, log_file)

    logger = get_logger("sympi.runtime")
    system_info = get_system_info()
    logger.info(
        "sympi bootstrap complete",
        extra={
            "sympi_version": __version__,
            **system_info._asdict(),
        },
    )
