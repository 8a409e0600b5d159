# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""Exceptions raised by experiment runners."""


class InfrastructureError(Exception):
    """
    The experiment could not be carried out at all (launcher missing,
    build crashed, timeout). This is different from a benchmark that ran
    and failed: it gets recorded as ERROR instead of FAIL.
    """
