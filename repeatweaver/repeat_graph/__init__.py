"""
RepeatWeaver v0.1.0

Repeat graph model and edge multiplicity inference.

Author: RepeatWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from .errors import RepeatWeaverError, GraphError, LPSolveError
from .graph import GraphEdge, GraphNode, RepeatGraph
from .coverage import estimate_by_coverage, estimate_mean_coverage, round_half_away
from .symmetry import CanonicalNumbering, SymmetryResolver
from .lp_solver import (
    ConstraintSense,
    LPResult,
    LPSolver,
    LPStatus,
    ObjectiveSense,
    ScipyLinprogSolver,
    get_solver,
)
from .constraint_model import (
    ConstraintModelBuilder,
    MultiplicityModel,
    RowIndependenceFilter,
)
from .multiplicity_inferer import BalanceReport, MultiplicityInferer

__all__ = [
    "RepeatWeaverError",
    "GraphError",
    "LPSolveError",
    "GraphEdge",
    "GraphNode",
    "RepeatGraph",
    "estimate_by_coverage",
    "estimate_mean_coverage",
    "round_half_away",
    "CanonicalNumbering",
    "SymmetryResolver",
    "ConstraintSense",
    "LPResult",
    "LPSolver",
    "LPStatus",
    "ObjectiveSense",
    "ScipyLinprogSolver",
    "get_solver",
    "ConstraintModelBuilder",
    "MultiplicityModel",
    "RowIndependenceFilter",
    "BalanceReport",
    "MultiplicityInferer",
]
