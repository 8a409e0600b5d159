# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Subcommand handlers for the sympi CLI.

Each function here corresponds to one CLI subcommand and returns an exit
code. No print() calls: everything goes through the structured logger.

Failure mapping:
  - bad tool config, bad versions file, undetectable URL -> CONFIG_ERROR
  - corrupted results file                                 -> VALIDATION_ERROR
  - storage failure or anything unexpected                 -> RUNTIME_ERROR
A single experiment failing to run is not a command failure: it is
recorded as ERROR and the campaign goes on.
"""

import argparse
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from sympi.cli.exit_codes import CONFIG_ERROR, RUNTIME_ERROR, SUCCESS, USER_ERROR, VALIDATION_ERROR
from sympi.config.exceptions import ConfigError
from sympi.config.loader import default_config, load_config
from sympi.config.schema import RunConfig, SympiConfig
from sympi.experiments.models import Experiment, ResultRecord
from sympi.logging.logger import get_logger
from sympi.mpi.models import VersionsConfig
from sympi.results.exceptions import ResultsParseError, ResultsStoreError
from sympi.runtime.bootstrap import bootstrap


def _load_and_bootstrap(
    args: argparse.Namespace,
    command_name: str,
) -> tuple[int, SympiConfig | None, logging.Logger]:
    """
    The shared setup that every command needs: load config, run bootstrap.

    Returns a tuple of (exit_code, config, logger). config is None exactly when
    setup failed, and the caller should then return exit_code as is.
    """
    logger = get_logger(f"sympi.cli.{command_name}", log_level=args.log_level or "INFO")

    if args.config is not None:
        try:
            config = load_config(Path(args.config))
        except ConfigError as err:
            logger.error(
                "Configuration error",
                extra={"command": command_name, "config": args.config, "error": str(err)},
            )
            return CONFIG_ERROR, None, logger
    else:
        logger.debug(
            "No config provided, running with defaults",
            extra={"command": command_name},
        )
        config = default_config()

    if args.log_level is not None:
        config = config.model_copy(
            update={"global_config": config.global_config.model_copy(update={"log_level": args.log_level})}
        )

    bootstrap(config.global_config)
    return SUCCESS, config, logger


def _apply_run_overrides(config: SympiConfig, args: argparse.Namespace) -> SympiConfig:
    """
    Fold command-line flags into the run section.

    Goes through model_validate rather than model_copy so that flags get the
    same checks as the YAML (e.g. -n 0 is rejected).

    Raises:
        ConfigError: An override doesn't pass validation.
    """
    updates: dict[str, Any] = {}
    if getattr(args, "versions", None) is not None:
        updates["versions_file"] = args.versions
    if getattr(args, "output", None) is not None:
        updates["output_file"] = args.output
    if getattr(args, "nrun", None) is not None:
        updates["nrun"] = args.nrun
    if getattr(args, "stop_on_error", False):
        updates["stop_on_error"] = True

    if not updates:
        return config

    try:
        run_config = RunConfig.model_validate({**config.run.model_dump(), **updates})
    except ValidationError as err:
        raise ConfigError(f"Invalid command-line option:\n{err}") from err

    return config.model_copy(update={"run": run_config})


@dataclass
class _Campaign:
    """Everything a run or plan needs, resolved from config and disk."""

    versions: VersionsConfig
    matrix: list[Experiment]
    output_file: Path
    history: list[ResultRecord]
    pending: list[Experiment]


def _prepare_campaign(config: SympiConfig) -> _Campaign:
    """
    Load versions, expand the matrix, read history and prune.

    Raises:
        ConfigError: Missing or invalid versions file.
        ResultsParseError / ResultsStoreError: The results file can't be trusted or read.
    """
    from sympi.experiments.matrix import build_matrix
    from sympi.experiments.pruning import prune_experiments
    from sympi.mpi.versions import load_versions_file
    from sympi.results.store import load_results
    from sympi.runtime.bootstrap import default_output_filename

    if config.run.versions_file is None:
        raise ConfigError("No versions file given (run.versions_file or --versions)")

    versions = load_versions_file(Path(config.run.versions_file), strict=config.run.strict_versions)
    matrix = build_matrix(versions)

    output_file = Path(
        config.run.output_file or default_output_filename(versions.implementation)
    )
    history = load_results(output_file)
    pending = prune_experiments(matrix, history)

    return _Campaign(
        versions=versions,
        matrix=matrix,
        output_file=output_file,
        history=history,
        pending=pending,
    )


def _log_campaign(logger: logging.Logger, campaign: _Campaign) -> None:
    logger.info(
        "Experiment matrix",
        extra={
            "implementation": campaign.versions.implementation.value,
            "versions": len(campaign.versions.versions),
            "experiments": len(campaign.matrix),
            "recorded": len(campaign.matrix) - len(campaign.pending),
            "pending": len(campaign.pending),
            "output_file": str(campaign.output_file),
        },
    )


def handle_run(args: argparse.Namespace) -> int:
    """Run every experiment of the matrix that isn't on record yet."""
    exit_code, config, logger = _load_and_bootstrap(args, "run")
    if config is None:
        return exit_code

    try:
        config = _apply_run_overrides(config, args)
        if not config.runner.command and not args.dry_run:
            raise ConfigError("No runner command configured (runner.command)")
        campaign = _prepare_campaign(config)
    except ConfigError as err:
        logger.error("Configuration error", extra={"command": "run", "error": str(err)})
        return CONFIG_ERROR
    except ResultsParseError as err:
        logger.error(
            "Results file is corrupted; fix or remove the offending line",
            extra={"command": "run", "error": str(err)},
        )
        return VALIDATION_ERROR
    except ResultsStoreError as err:
        logger.error("Cannot read results file", extra={"command": "run", "error": str(err)})
        return RUNTIME_ERROR

    _log_campaign(logger, campaign)

    if not campaign.pending:
        logger.info("Nothing to run, every experiment is on record", extra={"command": "run"})
        return SUCCESS

    if args.dry_run:
        for experiment in campaign.pending:
            logger.info(
                "Dry run, would run experiment",
                extra={
                    "host_version": experiment.host.version,
                    "container_version": experiment.container.version,
                    "nrun": config.run.nrun,
                },
            )
        return SUCCESS

    from sympi.experiments.command_runner import CommandRunner
    from sympi.experiments.executor import execute_matrix
    from sympi.results.store import ResultsStore
    from sympi.results.summary import format_summary_text, summarize_results
    from sympi.runtime.bootstrap import default_scratch_directory, prepare_scratch_directory

    try:
        scratch_dir = Path(
            config.run.scratch_directory
            or default_scratch_directory(campaign.versions.implementation)
        ).resolve()
        prepare_scratch_directory(scratch_dir, clean=config.run.clean_scratch)

        runner = CommandRunner.from_config(config.runner, scratch_dir=scratch_dir)
        with ResultsStore(campaign.output_file) as store:
            report = execute_matrix(
                campaign.pending,
                runner,
                store,
                nrun=config.run.nrun,
                stop_on_error=config.run.stop_on_error,
            )
            history = store.load()

        summary = summarize_results(history)
        for line in format_summary_text(summary).splitlines():
            if line.strip():
                logger.info(line, extra={"command": "run"})

        logger.info(
            "Run finished",
            extra={
                "command": "run",
                "executed": len(report.records),
                "skipped": report.skipped,
                "stopped_early": report.stopped_early,
            },
        )
        return RUNTIME_ERROR if report.stopped_early else SUCCESS

    except ResultsStoreError as err:
        logger.error("Results storage failure", extra={"command": "run", "error": str(err)})
        return RUNTIME_ERROR
    except Exception as err:
        logger.error("Run failed", extra={"command": "run", "error": str(err)}, exc_info=True)
        return RUNTIME_ERROR


def handle_plan(args: argparse.Namespace) -> int:
    """Show the matrix and which experiments are still pending."""
    exit_code, config, logger = _load_and_bootstrap(args, "plan")
    if config is None:
        return exit_code

    try:
        config = _apply_run_overrides(config, args)
        campaign = _prepare_campaign(config)
    except ConfigError as err:
        logger.error("Configuration error", extra={"command": "plan", "error": str(err)})
        return CONFIG_ERROR
    except ResultsParseError as err:
        logger.error("Results file is corrupted", extra={"command": "plan", "error": str(err)})
        return VALIDATION_ERROR
    except ResultsStoreError as err:
        logger.error("Cannot read results file", extra={"command": "plan", "error": str(err)})
        return RUNTIME_ERROR

    _log_campaign(logger, campaign)
    for experiment in campaign.pending:
        logger.info(
            "Pending experiment",
            extra={
                "host_version": experiment.host.version,
                "container_version": experiment.container.version,
            },
        )
    return SUCCESS


def handle_detect(args: argparse.Namespace) -> int:
    """Report the implementation and version detected for each given location."""
    logger = get_logger("sympi.cli.detect", log_level=args.log_level or "INFO")

    from sympi.mpi.detector import detect_implementation

    undetected = 0
    for value in args.values:
        detection = detect_implementation(value)
        if detection is None:
            undetected += 1
            logger.error("Cannot detect the MPI implementation", extra={"value": value})
            continue
        logger.info(
            "Detected MPI implementation",
            extra={
                "value": value,
                "implementation": detection.implementation.value,
                "version": detection.version,
            },
        )

    return USER_ERROR if undetected else SUCCESS


def handle_summary(args: argparse.Namespace) -> int:
    """Summarize an existing results file, optionally writing a report."""
    exit_code, config, logger = _load_and_bootstrap(args, "summary")
    if config is None:
        return exit_code

    from sympi.results.store import load_results
    from sympi.results.summary import format_summary_text, summarize_results, write_summary

    output = args.output or config.run.output_file
    if output is None:
        logger.error("No results file given (--output or run.output_file)")
        return USER_ERROR

    try:
        records = load_results(Path(output))
    except ResultsParseError as err:
        logger.error("Results file is corrupted", extra={"command": "summary", "error": str(err)})
        return VALIDATION_ERROR
    except ResultsStoreError as err:
        logger.error("Cannot read results file", extra={"command": "summary", "error": str(err)})
        return RUNTIME_ERROR

    summary = summarize_results(records)
    for line in format_summary_text(summary).splitlines():
        if line.strip():
            logger.info(line, extra={"command": "summary"})

    if args.report_dir is not None and not args.dry_run:
        try:
            write_summary(summary, Path(args.report_dir))
        except OSError as err:
            logger.error("Cannot write report", extra={"command": "summary", "error": str(err)})
            return RUNTIME_ERROR

    return SUCCESS


def handle_info(args: argparse.Namespace) -> int:
    """Display environment and configuration information."""
    logger = get_logger("sympi.cli.info", log_level=args.log_level or "INFO")

    from sympi import __version__
    from sympi.runtime.environment import get_system_info

    system_info = get_system_info()

    logger.info(
        "System information",
        extra={
            "sympi_version": __version__,
            **system_info._asdict(),
            "config": args.config,
        },
    )
    return SUCCESS
