# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Results summary and report writing.

Reads what's on record and answers "how compatible are these versions?".
Duplicates are collapsed first (the last line on disk wins), so an operator
who deleted an ERROR line and re-ran the experiment sees the new verdict.

Written reports:

    <output_dir>/
    ├── summary.json : machine-readable counts and failing pairs
    └── summary.txt  : the same thing for humans
"""

import json
from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from pathlib import Path

from sympi.experiments.matrix import version_sort_key
from sympi.experiments.models import ExperimentStatus, ResultRecord
from sympi.logging.logger import get_logger
from sympi.results.store import latest_by_identity
from sympi.utils.filesystem import atomic_write

logger = get_logger(__name__)


@dataclass
class ResultsSummary:
    total_experiments: int = 0
    passed: int = 0
    failed: int = 0
    errors: int = 0
    pass_rate: float = 0.0
    duplicate_records: int = 0
    failing_pairs: list[tuple[str, str]] = field(default_factory=list)
    error_pairs: list[tuple[str, str]] = field(default_factory=list)


def _pair_key(pair: tuple[str, str]) -> tuple[object, object]:
    return version_sort_key(pair[0]), version_sort_key(pair[1])


def summarize_results(records: list[ResultRecord]) -> ResultsSummary:
    """Crunch a list of records (in file order) into a ResultsSummary."""
    latest = latest_by_identity(records)
    if not latest:
        return ResultsSummary()

    by_status: dict[ExperimentStatus, list[tuple[str, str]]] = {
        status: [] for status in ExperimentStatus
    }
    for identity, record in latest.items():
        by_status[record.status].append(identity)

    total = len(latest)
    passed = len(by_status[ExperimentStatus.PASS])

    summary = ResultsSummary(
        total_experiments=total,
        passed=passed,
        failed=len(by_status[ExperimentStatus.FAIL]),
        errors=len(by_status[ExperimentStatus.ERROR]),
        pass_rate=passed / total,
        duplicate_records=len(records) - total,
        failing_pairs=sorted(by_status[ExperimentStatus.FAIL], key=_pair_key),
        error_pairs=sorted(by_status[ExperimentStatus.ERROR], key=_pair_key),
    )

    logger.info(
        "Results summarized",
        extra={
            "total": summary.total_experiments,
            "passed": summary.passed,
            "failed": summary.failed,
            "errors": summary.errors,
        },
    )
    return summary


def format_summary_text(summary: ResultsSummary, title: str = "SYMPI RESULTS SUMMARY") -> str:
    """Render a summary as a plain-text block."""
    timestamp = datetime.now(tz=timezone.utc).isoformat()
    lines: list[str] = [
        "=" * 60,
        title,
        f"Generated: {timestamp}",
        "=" * 60,
        "",
        f"Experiments: {summary.total_experiments}",
        f"PASS: {summary.passed}",
        f"FAIL: {summary.failed}",
        f"ERROR: {summary.errors}",
        f"Pass rate: {summary.pass_rate:.2%}",
    ]

    if summary.duplicate_records:
        lines.append(f"Superseded records: {summary.duplicate_records}")

    if summary.failing_pairs:
        lines.extend(["", "--- FAILING (host -> container) ---"])
        lines.extend(f"  {host} -> {container}" for host, container in summary.failing_pairs)

    if summary.error_pairs:
        lines.extend(["", "--- ERRORS (host -> container) ---"])
        lines.extend(f"  {host} -> {container}" for host, container in summary.error_pairs)

    lines.extend(["", "=" * 60])
    return "\n".join(lines) + "\n"


def write_summary(summary: ResultsSummary, output_dir: Path) -> Path:
    """Write summary.json and summary.txt into output_dir and return it."""
    output_dir.mkdir(parents=True, exist_ok=True)

    atomic_write(
        output_dir / "summary.json",
        json.dumps(asdict(summary), indent=2, sort_keys=True),
    )
    atomic_write(output_dir / "summary.txt", format_summary_text(summary))

    logger.info("Summary written", extra={"output_dir": str(output_dir)})
    return output_dir
