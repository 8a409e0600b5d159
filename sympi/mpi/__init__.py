# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
MPI artifact handling.

Subsystems:
  - models: implementation enum and the artifact / versions types
  - detector: infer implementation and version from a download URL
  - versions: turn a key/value versions file into a validated VersionsConfig
"""
