# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Versions file parsing.

Turns the ordered key/value entries of a versions file into a VersionsConfig.
The rules:
  - every value must be a recognisable MPI tarball location whose version
    has no whitespace or control characters
  - all entries must belong to the same implementation family
  - the version string is the key; a version listed twice keeps the last
    location unless strict mode is on, in which case it is rejected

Any violation aborts the whole load. A partially understood versions file
would silently shrink the matrix, which is worse than not running at all.
"""

import re
from pathlib import Path
from typing import Iterable, Optional, Union

from sympi.config.exceptions import (
    ConfigValidationError,
    DetectionError,
    DuplicateVersionError,
    ImplementationConflictError,
)
from sympi.config.kv import KeyValue, load_key_value_file
from sympi.logging.logger import get_logger
from sympi.mpi.detector import detect_implementation
from sympi.mpi.models import ArtifactDescriptor, MPIImplementation, VersionsConfig

logger = get_logger(__name__)

Entry = Union[KeyValue, tuple[str, str]]

# A version is half of a results-file identity; it has to survive the
# tab-separated line format unchanged.
_UNSAFE_VERSION_CHARS = re.compile(r"[\s\x00-\x1f\x7f]")


def _split_entry(entry: Entry) -> tuple[str, str]:
    if isinstance(entry, KeyValue):
        return entry.key, entry.value
    key, value = entry
    return key, value


def parse_version_entries(
    entries: Iterable[Entry],
    strict: bool = False,
    source: Optional[str] = None,
) -> VersionsConfig:
    """
    Build a VersionsConfig from ordered (key, value) entries.

    Keys are only labels; everything is derived from the value.

    Raises:
        DetectionError: A value matches no known implementation, or its version
            contains whitespace or control characters.
        ImplementationConflictError: Two values belong to different families.
        DuplicateVersionError: strict is set and a version appears twice.
        ConfigValidationError: There are no entries at all.
    """
    implementation: Optional[MPIImplementation] = None
    versions: dict[str, ArtifactDescriptor] = {}

    for entry in entries:
        key, value = _split_entry(entry)

        detection = detect_implementation(value)
        if detection is None:
            raise DetectionError(value)
        if _UNSAFE_VERSION_CHARS.search(detection.version):
            raise DetectionError(
                value, f"version {detection.version!r} contains whitespace or control characters"
            )

        if implementation is None:
            implementation = detection.implementation
        elif detection.implementation != implementation:
            raise ImplementationConflictError(
                implementation.value, detection.implementation.value, value
            )

        previous = versions.get(detection.version)
        if previous is not None:
            if strict:
                raise DuplicateVersionError(detection.version, previous.location, value)
            logger.warning(
                "Version listed twice, keeping the last location",
                extra={"key": key, "version": detection.version, "dropped": previous.location},
            )

        versions[detection.version] = ArtifactDescriptor(
            implementation=detection.implementation,
            version=detection.version,
            location=value,
        )

    if implementation is None:
        where = f" in {source}" if source else ""
        raise ConfigValidationError(f"No MPI versions listed{where}")

    return VersionsConfig(implementation=implementation, versions=versions, source=source)


def load_versions_file(path: Path, strict: bool = False) -> VersionsConfig:
    """Read a key/value versions file and validate it into a VersionsConfig."""
    entries = load_key_value_file(path)
    config = parse_version_entries(entries, strict=strict, source=str(path))

    logger.info(
        "Versions loaded",
        extra={
            "file": str(path),
            "implementation": config.implementation.value,
            "versions": sorted(config.versions),
        },
    )
    return config
