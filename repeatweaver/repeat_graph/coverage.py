#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RepeatWeaver v0.1.0

Coverage-based multiplicity estimation — length-weighted mean coverage
and per-edge copy number from the coverage ratio.

Author: RepeatWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
import math

from .graph import RepeatGraph

logger = logging.getLogger(__name__)

DEFAULT_MEAN_COVERAGE = 1.0


def round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero (2.5 -> 3, -2.5 -> -3)."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


def estimate_mean_coverage(graph: RepeatGraph) -> float:
    """
    Length-weighted mean coverage over all edges.

    Falls back to 1.0 when the graph has no sequence or no coverage, so the
    result can always be used as a divisor.
    """
    sum_cov = 0.0
    sum_length = 0
    for edge in graph.iter_edges():
        sum_cov += edge.coverage * edge.length
        sum_length += edge.length

    if sum_length == 0:
        return DEFAULT_MEAN_COVERAGE
    mean_coverage = sum_cov / sum_length
    return mean_coverage if mean_coverage > 0 else DEFAULT_MEAN_COVERAGE


def estimate_by_coverage(graph: RepeatGraph) -> float:
    """
    Set every edge multiplicity from its coverage relative to the mean.

    Tips may drop to multiplicity 0, all other edges keep at least 1.

    Returns:
        The mean coverage used for normalisation
    """
    mean_coverage = estimate_mean_coverage(graph)
    logger.info(f"Mean edge coverage: {mean_coverage:.2f}")

    for edge in graph.iter_edges():
        min_mult = 0 if edge.is_tip else 1
        edge.multiplicity = max(min_mult, round_half_away(edge.coverage / mean_coverage))

    return mean_coverage

# RepeatWeaver v0.1.0
# Any usage is subject to this software's license.
