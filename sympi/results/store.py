# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Append-only results store.

The results file is the whole memory of a campaign. One line per decided
experiment, four tab-separated fields:

    3.0.4\t3.1.0\tPASS\tall 10 benchmarks ok

Rules that everything else relies on:
  - a missing file means "nothing done yet", not an error
  - lines are only ever appended, never rewritten
  - append() returns only after the line has been fsync'd, so an outcome
    that was decided survives a kill right after it
  - a line that doesn't parse makes the whole load fail; a history that
    is partly garbage can't be trusted to skip work

The store is opened once per run and kept open. Every append is still
synced on its own.
"""

import os
from pathlib import Path
from types import TracebackType
from typing import IO, Optional

from sympi.experiments.models import ExperimentStatus, Identity, ResultRecord
from sympi.logging.logger import get_logger
from sympi.results.exceptions import ResultsParseError, ResultsStoreError

logger = get_logger(__name__)

FIELD_SEPARATOR = "\t"
_FIELD_COUNT = 4
_VALID_STATUSES = {status.value: status for status in ExperimentStatus}


def _sanitize(text: str) -> str:
    """Keep a field on one line and inside its column."""
    return text.replace("\r\n", " ").replace("\t", " ").replace("\r", " ").replace("\n", " ")


def format_record(record: ResultRecord) -> str:
    """
    Serialize a record into one results line, trailing newline included.

    Versions are written verbatim: resume matches them against the matrix,
    so a rewritten version would never be recognised as done. Only the note
    is sanitized.

    Raises:
        ValueError: A version contains a tab, CR or LF.
    """
    for version in record.identity:
        if _sanitize(version) != version:
            raise ValueError(f"Version {version!r} cannot be stored in a results line")

    fields = (
        record.host_version,
        record.container_version,
        record.status.value,
        _sanitize(record.note),
    )
    return FIELD_SEPARATOR.join(fields) + "\n"


def parse_record_line(
    line: str,
    line_number: int = 1,
    path: Optional[Path] = None,
) -> ResultRecord:
    """
    Parse one non-blank results line.

    The note is the last field and may be empty, but the separator before it
    has to be there: "a\\tb\\tPASS\\t" is valid, "a\\tb\\tPASS" is not.

    Raises:
        ResultsParseError: Wrong number of fields, empty version or unknown status.
    """
    stripped = line.rstrip("\r\n")
    fields = stripped.split(FIELD_SEPARATOR, _FIELD_COUNT - 1)
    if len(fields) != _FIELD_COUNT:
        raise ResultsParseError(
            path, line_number, stripped,
            f"expected {_FIELD_COUNT} tab-separated fields, got {len(fields)}",
        )

    host_version, container_version, status_text, note = fields
    if not host_version or not container_version:
        raise ResultsParseError(path, line_number, stripped, "empty version field")

    status = _VALID_STATUSES.get(status_text)
    if status is None:
        raise ResultsParseError(path, line_number, stripped, f"unknown status {status_text!r}")

    return ResultRecord(
        host_version=host_version,
        container_version=container_version,
        status=status,
        note=note,
    )


def load_results(path: Path) -> list[ResultRecord]:
    """
    Load every record from a results file, in file order.

    Raises:
        ResultsParseError: A non-blank line is not a valid record.
        ResultsStoreError: The file exists but cannot be read.
    """
    if not path.exists():
        logger.debug("No results file yet", extra={"path": str(path)})
        return []

    if not path.is_file():
        raise ResultsStoreError(f"Results path is not a file: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise ResultsStoreError(f"Cannot read results file {path}: {err}") from err

    records: list[ResultRecord] = []
    for line_number, line in enumerate(text.split("\n"), start=1):
        if not line.strip():
            continue
        records.append(parse_record_line(line, line_number, path))

    logger.debug(
        "Results loaded",
        extra={"path": str(path), "records": len(records)},
    )
    return records


def latest_by_identity(records: list[ResultRecord]) -> dict[Identity, ResultRecord]:
    """Collapse duplicates: for each experiment, the last line on disk wins."""
    latest: dict[Identity, ResultRecord] = {}
    for record in records:
        latest[record.identity] = record
    return latest


def _fsync_directory(path: Path) -> None:
    fd = os.open(path, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


class ResultsStore:
    """
    Durable, append-only writer for a results file.

    Usage:
        with ResultsStore(path) as store:
            store.append(record)   # on disk when this returns

    Only one process may write to a given file at a time. Nothing here locks
    the file; running two campaigns against the same output is unsupported.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._handle: Optional[IO[str]] = None

    @property
    def path(self) -> Path:
        return self._path

    @property
    def is_open(self) -> bool:
        return self._handle is not None

    def open(self) -> "ResultsStore":
        """Open (creating if needed) the results file for appending."""
        if self._handle is not None:
            return self

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            created = not self._path.exists()
            needs_newline = self._ends_without_newline()
            self._handle = open(self._path, "a", encoding="utf-8")
            # A new directory entry is only durable once the directory is synced.
            if created:
                _fsync_directory(self._path.parent)
            # Hand-edited files may lack the final newline; don't glue onto that line.
            if needs_newline:
                self._handle.write("\n")
                self._handle.flush()
        except OSError as err:
            if self._handle is not None:
                self._handle.close()
                self._handle = None
            raise ResultsStoreError(f"Cannot open results file {self._path}: {err}") from err

        logger.debug("Results file opened", extra={"path": str(self._path)})
        return self

    def _ends_without_newline(self) -> bool:
        if not self._path.is_file() or self._path.stat().st_size == 0:
            return False
        with open(self._path, "rb") as f:
            f.seek(-1, os.SEEK_END)
            return f.read(1) != b"\n"

    def load(self) -> list[ResultRecord]:
        return load_results(self._path)

    def append(self, record: ResultRecord) -> None:
        """
        Append one record and force it to stable storage before returning.

        Raises:
            ResultsStoreError: The store is closed, or the write/flush/fsync failed.
        """
        if self._handle is None:
            raise ResultsStoreError(f"Results file {self._path} is not open")

        try:
            line = format_record(record)
        except ValueError as err:
            raise ResultsStoreError(f"Cannot record result in {self._path}: {err}") from err

        try:
            self._handle.write(line)
            self._handle.flush()
            os.fsync(self._handle.fileno())
        except OSError as err:
            raise ResultsStoreError(
                f"Failed to record result {record.identity} in {self._path}: {err}"
            ) from err

        logger.debug(
            "Result recorded",
            extra={
                "path": str(self._path),
                "host_version": record.host_version,
                "container_version": record.container_version,
                "status": record.status.value,
            },
        )

    def close(self) -> None:
        if self._handle is None:
            return
        handle, self._handle = self._handle, None
        try:
            handle.close()
        except OSError as err:
            raise ResultsStoreError(f"Failed to close results file {self._path}: {err}") from err

    def __enter__(self) -> "ResultsStore":
        return self.open()

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
