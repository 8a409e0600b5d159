# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Reader for the key/value files that list MPI versions.

The format is deliberately dumb so it can be written by hand:

    # Open MPI releases to test
    ompi304 = https://download.open-mpi.org/release/open-mpi/v3.0/openmpi-3.0.4.tar.bz2
    ompi310 = https://download.open-mpi.org/release/open-mpi/v3.1/openmpi-3.1.0.tar.bz2

Blank lines and lines starting with '#' are ignored. The first '=' splits
key from value, so URLs with query strings survive. Order is preserved.
"""

from dataclasses import dataclass
from pathlib import Path

from sympi.config.exceptions import ConfigLoadError


@dataclass(frozen=True)
class KeyValue:
    key: str
    value: str


def parse_key_value_lines(lines: list[str], source: str = "<input>") -> list[KeyValue]:
    """Parse already-read lines. `source` only shows up in error messages."""
    entries: list[KeyValue] = []

    for line_number, raw_line in enumerate(lines, start=1):
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        key, sep, value = line.partition("=")
        key = key.strip()
        if not sep:
            raise ConfigLoadError(f"{source}:{line_number}: expected 'key = value', got {line!r}")
        if not key:
            raise ConfigLoadError(f"{source}:{line_number}: empty key in {line!r}")

        entries.append(KeyValue(key=key, value=value.strip()))

    return entries


def load_key_value_file(path: Path) -> list[KeyValue]:
    """
    Load a key/value file from disk.

    Raises:
        ConfigLoadError: If the file is missing, unreadable or has a malformed line.
    """
    if not path.is_file():
        raise ConfigLoadError(f"Key/value file not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as err:
        raise ConfigLoadError(f"Cannot read {path}: {err}") from err

    return parse_key_value_lines(text.splitlines(), source=str(path))
