# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
sympi experiment matrix package.

Subsystems:
  - models: experiments, per-run outcomes and result records
  - matrix: expanding a versions config into host × container pairs
  - pruning: dropping experiments that are already on record
  - executor: running experiments N times and recording the verdict
  - command_runner: the subprocess-backed ExperimentRunner
"""
