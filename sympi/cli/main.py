# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
CLI entrypoint for sympi.

This is the single root command; every operation is a subcommand of `sympi`.
The global options (--config, --log-level, --dry-run) are inherited by every
subcommand through argparse's parent parser mechanism.

Usage:
    sympi run --config sympi.yaml
    sympi run --config sympi.yaml --versions etc/mpich.conf -n 3
    sympi plan --config sympi.yaml
    sympi detect https://download.open-mpi.org/release/open-mpi/v3.0/openmpi-3.0.4.tar.bz2
    sympi summary --output openmpi-results.txt --report-dir reports/
"""

import argparse
import sys

from sympi.cli.commands import (
    handle_detect,
    handle_info,
    handle_plan,
    handle_run,
    handle_summary,
)
from sympi.cli.exit_codes import USER_ERROR


def _build_global_parser() -> argparse.ArgumentParser:
    """
    Build the parent parser with global options.

    add_help=False so help text doesn't collide between the parent and the
    subcommand parsers.
    """
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file.",
    )
    parent.add_argument(
        "--log-level",
        type=str,
        default=None,
        dest="log_level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Set the logging verbosity level (overrides the config).",
    )
    parent.add_argument(
        "--dry-run",
        action="store_true",
        default=False,
        dest="dry_run",
        help="Show what would happen without running experiments or writing files.",
    )
    return parent


def _add_campaign_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--versions",
        type=str,
        default=None,
        help="Key/value file listing the MPI versions to test (overrides run.versions_file).",
    )
    parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Results file (overrides run.output_file).",
    )


def _register_subcommands(
    subparsers: argparse._SubParsersAction,  # type: ignore[type-arg]
    parent: argparse.ArgumentParser,
) -> None:
    """
    Register all subcommands with their handler functions.

    Each subcommand gets the global options from the parent parser and sets
    its handler via set_defaults(func=...).
    """
    commands = [
        ("run", "Run the pending experiments of the matrix.", handle_run),
        ("plan", "Show the experiment matrix and what is still pending.", handle_plan),
        ("detect", "Detect MPI implementation and version from locations.", handle_detect),
        ("summary", "Summarize a results file.", handle_summary),
        ("info", "Display environment and config info.", handle_info),
    ]

    for name, help_text, handler in commands:
        parser = subparsers.add_parser(name, parents=[parent], help=help_text)
        parser.set_defaults(func=handler)

    run_parser = subparsers.choices["run"]
    _add_campaign_options(run_parser)
    run_parser.add_argument(
        "-n",
        "--nrun",
        type=int,
        default=None,
        help="Number of iterations per experiment (overrides run.nrun).",
    )
    run_parser.add_argument(
        "--stop-on-error",
        action="store_true",
        default=False,
        dest="stop_on_error",
        help="Stop the batch after the first experiment that cannot be run.",
    )

    _add_campaign_options(subparsers.choices["plan"])

    subparsers.choices["detect"].add_argument(
        "values",
        nargs="+",
        metavar="LOCATION",
        help="Download URL or file name of an MPI release tarball.",
    )

    summary_parser = subparsers.choices["summary"]
    summary_parser.add_argument(
        "--output",
        type=str,
        default=None,
        help="Results file to summarize (overrides run.output_file).",
    )
    summary_parser.add_argument(
        "--report-dir",
        type=str,
        default=None,
        dest="report_dir",
        help="Write summary.json and summary.txt into this directory.",
    )


def main() -> None:
    """
    Main CLI entrypoint, what pyproject.toml's [project.scripts] points to.

    If no subcommand is given, we show help and exit with USER_ERROR.
    """
    parent = _build_global_parser()

    root_parser = argparse.ArgumentParser(
        prog="sympi",
        description="sympi: resumable MPI host/container compatibility matrix.",
        parents=[parent],
    )
    subparsers = root_parser.add_subparsers(dest="command")
    _register_subcommands(subparsers, parent)

    args = root_parser.parse_args()

    if not hasattr(args, "func") or args.func is None:
        root_parser.print_help()
        sys.exit(USER_ERROR)

    exit_code = args.func(args)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
