# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Tests for results summaries and report writing."""

import json
from pathlib import Path

import pytest

from sympi.experiments.models import ExperimentStatus, ResultRecord
from sympi.results.summary import (
    ResultsSummary,
    format_summary_text,
    summarize_results,
    write_summary,
)

P, F, E = ExperimentStatus.PASS, ExperimentStatus.FAIL, ExperimentStatus.ERROR


@pytest.fixture()
def records() -> list[ResultRecord]:
    return [
        ResultRecord("3.0.4", "3.0.4", P, "ok"),
        ResultRecord("3.10.0", "3.0.4", F, "abi mismatch"),
        ResultRecord("3.0.4", "3.10.0", E, "pull failed"),
        ResultRecord("3.9.1", "3.0.4", F, "abi mismatch"),
        ResultRecord("3.10.0", "3.10.0", P, "ok"),
    ]


class TestSummarizeResults:
    def test_counts(self, records) -> None:
        summary = summarize_results(records)
        assert summary.total_experiments == 5
        assert summary.passed == 2
        assert summary.failed == 2
        assert summary.errors == 1
        assert summary.pass_rate == pytest.approx(0.4)
        assert summary.duplicate_records == 0

    def test_pairs_are_in_natural_order(self, records) -> None:
        summary = summarize_results(records)
        assert summary.failing_pairs == [("3.9.1", "3.0.4"), ("3.10.0", "3.0.4")]
        assert summary.error_pairs == [("3.0.4", "3.10.0")]

    def test_later_record_supersedes_earlier(self, records) -> None:
        records.append(ResultRecord("3.0.4", "3.10.0", P, "rerun ok"))
        summary = summarize_results(records)
        assert summary.total_experiments == 5
        assert summary.errors == 0
        assert summary.passed == 3
        assert summary.duplicate_records == 1

    def test_empty_history(self) -> None:
        assert summarize_results([]) == ResultsSummary()


class TestFormatSummaryText:
    def test_contains_counts_and_failing_pairs(self, records) -> None:
        text = format_summary_text(summarize_results(records))
        assert "PASS: 2" in text
        assert "FAIL: 2" in text
        assert "ERROR: 1" in text
        assert "Pass rate: 40.00%" in text
        assert "--- FAILING (host -> container) ---" in text
        assert "  3.9.1 -> 3.0.4" in text
        assert "--- ERRORS (host -> container) ---" in text

    def test_clean_run_has_no_pair_sections(self) -> None:
        text = format_summary_text(summarize_results([ResultRecord("1.0", "1.0", P, "")]))
        assert "FAILING" not in text
        assert "ERRORS" not in text


class TestWriteSummary:
    def test_writes_json_and_text(self, records, tmp_path: Path) -> None:
        out = tmp_path / "reports"
        write_summary(summarize_results(records), out)

        data = json.loads((out / "summary.json").read_text(encoding="utf-8"))
        assert data["total_experiments"] == 5
        assert data["failing_pairs"] == [["3.9.1", "3.0.4"], ["3.10.0", "3.0.4"]]
        assert "PASS: 2" in (out / "summary.txt").read_text(encoding="utf-8")

    def test_no_temp_files_left(self, records, tmp_path: Path) -> None:
        write_summary(summarize_results(records), tmp_path)
        assert list(tmp_path.glob(".sympi_tmp_*")) == []
