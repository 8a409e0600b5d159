# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Exceptions for the results store.

Kept apart from the store itself so the CLI can tell a corrupted history
(the operator has to fix the file) from storage that went away underneath
us (nothing we can record anymore).
"""

from pathlib import Path


class ResultsError(Exception):
    """Base for all results store errors."""


class ResultsParseError(ResultsError):
    """Raised when a line of the results file is not a valid record."""

    def __init__(self, path: Path | None, line_number: int, line: str, reason: str) -> None:
        where = f"{path}:{line_number}" if path is not None else f"line {line_number}"
        super().__init__(f"Invalid result record at {where}: {reason} ({line!r})")
        self.path = path
        self.line_number = line_number
        self.line = line
        self.reason = reason


class ResultsStoreError(ResultsError):
    """Raised when the results file cannot be opened, read, written or synced."""
