# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Host environment probing for sympi.

A compatibility verdict only means something together with the machine it
was obtained on: the same host/container pair can pass on one distro and
fail on another because of libc. So besides refusing to start on an old
interpreter, we collect what is known about the host and log it at the
start of every campaign.
"""

import platform
import shutil
import sys
from typing import NamedTuple, Optional

MINIMUM_PYTHON = (3, 11)

# Launchers whose presence on PATH tells us which job manager to expect.
_JOB_MANAGER_LAUNCHERS: tuple[tuple[str, str], ...] = (
    ("slurm", "srun"),
    ("pbs", "qsub"),
)


class SystemInfo(NamedTuple):
    """What we know about the host a campaign runs on."""

    python_version: str
    platform: str
    architecture: str
    hostname: str
    distro: Optional[str]
    job_manager: str


def check_minimum_python() -> None:
    """
    Raises:
        RuntimeError: The interpreter is older than MINIMUM_PYTHON.
    """
    if sys.version_info[:2] < MINIMUM_PYTHON:
        required = ".".join(str(part) for part in MINIMUM_PYTHON)
        running = ".".join(str(part) for part in sys.version_info[:3])
        raise RuntimeError(f"sympi requires Python >= {required}, found {running}")


def detect_distro() -> Optional[str]:
    """
    Return "<id>-<version_id>" from os-release (e.g. "ubuntu-22.04").

    None when the host has no os-release file. That is not an error, the
    campaign just runs without the information.
    """
    try:
        release = platform.freedesktop_os_release()
    except OSError:
        return None

    distro_id = release.get("ID")
    if not distro_id:
        return None
    version_id = release.get("VERSION_ID")
    return f"{distro_id}-{version_id}" if version_id else distro_id


def detect_job_manager() -> str:
    """Name of the first job manager whose launcher is on PATH, else "native"."""
    for name, launcher in _JOB_MANAGER_LAUNCHERS:
        if shutil.which(launcher) is not None:
            return name
    return "native"


def get_system_info() -> SystemInfo:
    return SystemInfo(
        python_version=platform.python_version(),
        platform=platform.system(),
        architecture=platform.machine(),
        hostname=platform.node(),
        distro=detect_distro(),
        job_manager=detect_job_manager(),
    )
