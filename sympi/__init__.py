# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
sympi: resumable MPI compatibility matrix harness.

Takes a list of MPI release tarballs, pairs every version with every other
version (host side × container side), runs each pair through an external
experiment command and keeps an append-only record of the outcomes so an
interrupted campaign can pick up where it left off.
"""

__version__ = "0.3.0"
