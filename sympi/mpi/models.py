# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Data models for MPI artifacts.

All frozen: an artifact is identified once, from its URL, and nothing
downstream is allowed to rewrite what version it is.
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional


class MPIImplementation(str, Enum):
    """MPI implementation families sympi knows how to recognise."""

    OPENMPI = "openmpi"
    MPICH = "mpich"
    INTEL = "intel"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ArtifactDescriptor:
    """One downloadable build of an MPI implementation."""

    implementation: MPIImplementation
    version: str
    location: str


@dataclass(frozen=True)
class VersionsConfig:
    """
    The set of versions of a single MPI implementation to test.

    `versions` maps the version string (e.g. "3.0.4") to its artifact. The
    mapping is wrapped read-only on construction so a config can be shared
    between components without anybody sneaking a version in.
    """

    implementation: MPIImplementation
    versions: Mapping[str, ArtifactDescriptor]
    source: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.versions:
            raise ValueError("A versions config needs at least one artifact")
        for version, artifact in self.versions.items():
            if artifact.implementation != self.implementation:
                raise ValueError(
                    f"Artifact {version} is {artifact.implementation.value}, "
                    f"expected {self.implementation.value}"
                )
            if artifact.version != version:
                raise ValueError(f"Artifact keyed as {version} reports version {artifact.version}")
        object.__setattr__(self, "versions", MappingProxyType(dict(self.versions)))

    def artifacts(self) -> list[ArtifactDescriptor]:
        return list(self.versions.values())
