#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RepeatWeaver v0.1.0

Exception types raised by the repeat graph multiplicity pipeline.

Author: RepeatWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from typing import Optional


class RepeatWeaverError(Exception):
    """Base class for all RepeatWeaver errors."""
    pass


class GraphError(RepeatWeaverError):
    """Raised when the repeat graph is missing a required relation."""
    pass


class LPSolveError(RepeatWeaverError):
    """
    Raised when the multiplicity linear program cannot be solved.

    The balancing pass is aborted and no edge multiplicity is modified.

    Attributes:
        status: Solver status that caused the failure
    """

    def __init__(self, status, message: Optional[str] = None):
        self.status = status
        super().__init__(message or f"Error while solving LP (status: {status.value})")

# RepeatWeaver v0.1.0
# Any usage is subject to this software's license.
