# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Type-safe configuration schemas for sympi.

One frozen pydantic model per config section. Frozen means once you create
it, you cannot mutate it: CLI overrides are validated into a new
object, so every component sees exactly the config it
was handed and nothing else.

The models use pydantic v2's ConfigDict with:
  - frozen=True: immutability after construction
  - extra="forbid": unknown fields cause immediate failure
  - validate_default=True: even defaults get type-checked
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class GlobalConfig(BaseModel):
    """Cross-cutting settings: schema version and observability."""

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    config_version: str = Field(
        description="Schema version for compatibility tracking, e.g. '1.0.0'"
    )
    log_level: str = Field(
        default="INFO",
        description="One of DEBUG, INFO, WARNING, ERROR, CRITICAL",
    )
    log_file: Optional[str] = Field(
        default=None,
        description="Optional path for JSON log output in addition to stdout",
    )

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        upper = value.upper()
        if upper not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return upper


class RunConfig(BaseModel):
    """
    What to test and where to record it.

    output_file and scratch_directory are optional because their sensible
    defaults depend on the MPI implementation, which is only known once the
    versions file has been parsed.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    versions_file: Optional[str] = Field(
        default=None,
        description="Key/value file listing one MPI tarball URL per version",
    )
    output_file: Optional[str] = Field(
        default=None,
        description="Results file; defaults to <implementation>-results.txt",
    )
    nrun: int = Field(
        default=1,
        ge=1,
        description="How many times each experiment is executed",
    )
    stop_on_error: bool = Field(
        default=False,
        description="Stop the whole batch after the first ERROR record",
    )
    strict_versions: bool = Field(
        default=False,
        description="Reject a versions file that lists the same version twice",
    )
    scratch_directory: Optional[str] = Field(
        default=None,
        description="Working directory handed to the runner; defaults to scratch-<implementation>",
    )
    clean_scratch: bool = Field(
        default=False,
        description="Wipe the scratch directory before the first experiment",
    )


class RunnerConfig(BaseModel):
    """
    How a single experiment iteration is executed.

    The command is an argv list (never run through a shell). Each element may
    contain placeholders: {host_version}, {host_url}, {container_version},
    {container_url}, {implementation}, {scratch_dir}.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    command: list[str] = Field(
        default_factory=list,
        description="Experiment command; empty means no runner is configured",
    )
    timeout_seconds: int = Field(
        default=3600,
        ge=1,
        description="Max seconds one iteration may take before it counts as an ERROR",
    )
    pass_exit_codes: list[int] = Field(
        default_factory=lambda: [0],
        min_length=1,
        description="Exit codes that mean the benchmark passed",
    )
    environment: dict[str, str] = Field(
        default_factory=dict,
        description="Extra environment variables for the command",
    )


class SympiConfig(BaseModel):
    """
    Top-level config container.

    Only `global` is mandatory. A file with just `global:` is enough for
    `sympi detect` or `sympi summary`; `sympi run` additionally needs a
    versions file and a runner command, which it checks itself.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", validate_default=True)

    global_config: GlobalConfig = Field(alias="global")
    run: RunConfig = Field(default_factory=RunConfig)
    runner: RunnerConfig = Field(default_factory=RunnerConfig)
