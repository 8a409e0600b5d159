# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subprocess-backed experiment runner.

sympi doesn't know how to build a container or launch MPI ranks. That is
the job of an external command (a shell script, a Slurm wrapper, ...)
configured in the `runner:` section. This module runs that command once
per iteration and turns its exit status into a RunOutcome:

  exit code in pass_exit_codes -> passed
  any other exit code          -> failed, note = last line of output
  cannot start / timed out     -> InfrastructureError (recorded as ERROR)

The command is an argv list and is never run through a shell. Experiment
details reach it twice: as {placeholders} in the argv and as SYMPI_*
environment variables. Output is decoded as UTF-8 with undecodable bytes
replaced: a benchmark printing garbage still gets a verdict.
"""

import os
import subprocess
import time
from pathlib import Path
from typing import Mapping, Optional, Sequence

from sympi.config.schema import RunnerConfig
from sympi.experiments.exceptions import InfrastructureError
from sympi.experiments.models import Experiment, RunOutcome
from sympi.logging.logger import get_logger

logger = get_logger(__name__)


def _last_line(text: str) -> str:
    for line in reversed(text.splitlines()):
        if line.strip():
            return line.strip()
    return ""


class CommandRunner:
    """Runs a configured command for each experiment iteration."""

    def __init__(
        self,
        command: Sequence[str],
        timeout_seconds: int = 3600,
        pass_exit_codes: Sequence[int] = (0,),
        environment: Optional[Mapping[str, str]] = None,
        scratch_dir: Optional[Path] = None,
    ) -> None:
        if not command:
            raise ValueError("CommandRunner needs a non-empty command")
        self._command = list(command)
        self._timeout_seconds = timeout_seconds
        self._pass_exit_codes = frozenset(pass_exit_codes)
        self._environment = dict(environment or {})
        self._scratch_dir = scratch_dir

    @classmethod
    def from_config(cls, config: RunnerConfig, scratch_dir: Optional[Path] = None) -> "CommandRunner":
        return cls(
            command=config.command,
            timeout_seconds=config.timeout_seconds,
            pass_exit_codes=config.pass_exit_codes,
            environment=config.environment,
            scratch_dir=scratch_dir,
        )

    def _placeholders(self, experiment: Experiment) -> dict[str, str]:
        return {
            "host_version": experiment.host.version,
            "host_url": experiment.host.location,
            "container_version": experiment.container.version,
            "container_url": experiment.container.location,
            "implementation": experiment.host.implementation.value,
            "scratch_dir": str(self._scratch_dir) if self._scratch_dir is not None else "",
        }

    def build_argv(self, experiment: Experiment) -> list[str]:
        """Substitute experiment placeholders into the configured command."""
        values = self._placeholders(experiment)
        try:
            return [arg.format(**values) for arg in self._command]
        except (KeyError, IndexError, AttributeError, ValueError) as err:
            raise InfrastructureError(
                f"Invalid placeholder in runner command {self._command}: {err}"
            ) from err

    def build_env(self, experiment: Experiment) -> dict[str, str]:
        env = dict(os.environ)
        env.update(self._environment)
        for key, value in self._placeholders(experiment).items():
            env[f"SYMPI_{key.upper()}"] = value
        return env

    def run(self, experiment: Experiment) -> RunOutcome:
        argv = self.build_argv(experiment)
        cwd = str(self._scratch_dir) if self._scratch_dir is not None else None
        start = time.monotonic()

        try:
            result = subprocess.run(
                argv,
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=self._timeout_seconds,
                cwd=cwd,
                env=self.build_env(experiment),
            )
        except subprocess.TimeoutExpired as err:
            raise InfrastructureError(
                f"Experiment timed out after {self._timeout_seconds}s"
            ) from err
        except FileNotFoundError as err:
            raise InfrastructureError(f"Runner executable not found: {argv[0]}") from err
        except OSError as err:
            raise InfrastructureError(f"Cannot launch {argv[0]}: {err}") from err

        elapsed = time.monotonic() - start
        passed = result.returncode in self._pass_exit_codes

        logger.debug(
            "Runner command finished",
            extra={
                "exit_code": result.returncode,
                "passed": passed,
                "elapsed_seconds": round(elapsed, 3),
                "host_version": experiment.host.version,
                "container_version": experiment.container.version,
            },
        )

        if passed:
            note = _last_line(result.stdout)
        else:
            note = (
                _last_line(result.stderr)
                or _last_line(result.stdout)
                or f"exit code {result.returncode}"
            )
        return RunOutcome(passed=passed, note=note)
