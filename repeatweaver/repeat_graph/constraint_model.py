#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RepeatWeaver v0.1.0

Constraint Model — linear program over canonical edge and node ids that
raises edge multiplicities until flow is conserved at junctions.

Variable layout for E canonical edges and N canonical nodes:

    [0, E)              edge multiplicities
    E + 2k              emergency source of node k
    E + 2k + 1          emergency sink of node k

Constraints:
    edge_var >= current multiplicity                 (one per edge)
    sum(in) - sum(out) + source - sink == 0          (one per node whose row
                                                      is independent of the
                                                      rows already admitted)

Objective: minimise sum(edge_var) + slack_penalty * sum(slack_var).

Author: RepeatWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging

import numpy as np

from .graph import GraphNode, RepeatGraph
from .lp_solver import ConstraintSense, LPSolver, ObjectiveSense
from .symmetry import CanonicalNumbering, SymmetryResolver

logger = logging.getLogger(__name__)

DEFAULT_EDGE_COST = 1.0
DEFAULT_SLACK_PENALTY = 1000.0
DEFAULT_RANK_TOLERANCE = 1e-9


# ============================================================================
#                       LINEAR INDEPENDENCE FILTER
# ============================================================================

class RowIndependenceFilter:
    """
    Incremental reduced-row-echelon basis over a fixed number of columns.

    Every admitted row is normalised to 1 at its pivot column, and the pivot
    column is zero in all other basis rows.
    """

    def __init__(self, num_columns: int, tolerance: float = DEFAULT_RANK_TOLERANCE):
        self.num_columns = num_columns
        self.tolerance = tolerance
        self._basis: List[np.ndarray] = []
        self._pivots: List[int] = []

    @property
    def rank(self) -> int:
        return len(self._basis)

    def _reduce(self, row) -> np.ndarray:
        residual = np.asarray(row, dtype=float).copy()
        if residual.shape != (self.num_columns,):
            raise ValueError(
                f"Row has shape {residual.shape}, expected ({self.num_columns},)"
            )
        for pivot, basis_row in zip(self._pivots, self._basis):
            factor = residual[pivot]
            if factor != 0.0:
                residual -= factor * basis_row
        residual[np.abs(residual) <= self.tolerance] = 0.0
        return residual

    def is_independent(self, row) -> bool:
        """True if the row is not in the span of the admitted rows."""
        return bool(np.any(self._reduce(row)))

    def admit(self, row) -> bool:
        """
        Add the row to the basis if it is independent.

        Returns:
            True if the row was admitted, False if it was dependent
        """
        residual = self._reduce(row)
        if not np.any(residual):
            return False

        pivot = int(np.argmax(np.abs(residual)))
        residual /= residual[pivot]
        for basis_row in self._basis:
            factor = basis_row[pivot]
            if factor != 0.0:
                basis_row -= factor * residual
        self._basis.append(residual)
        self._pivots.append(pivot)
        return True


# ============================================================================
#                           MODEL DATA STRUCTURES
# ============================================================================

@dataclass
class ConservationRow:
    """Flow-conservation equation of one canonical node."""
    node_id: int
    coefficients: Dict[int, int]
    source_var: int
    sink_var: int

    def as_constraint(self) -> Dict[int, float]:
        row = {i: float(c) for i, c in self.coefficients.items()}
        row[self.source_var] = 1.0
        row[self.sink_var] = -1.0
        return row


@dataclass
class MultiplicityModel:
    """
    Linear program for one balancing pass.

    Built fresh from the graph every pass and discarded after solving.
    """
    numbering: CanonicalNumbering
    variable_names: List[str] = field(default_factory=list)
    lower_bounds: List[int] = field(default_factory=list)
    conservation_rows: List[ConservationRow] = field(default_factory=list)
    skipped_nodes: List[int] = field(default_factory=list)
    objective: Dict[int, float] = field(default_factory=dict)

    @property
    def num_edge_vars(self) -> int:
        return self.numbering.num_edges

    @property
    def num_node_pairs(self) -> int:
        return self.numbering.num_nodes

    @property
    def num_variables(self) -> int:
        return self.num_edge_vars + 2 * self.num_node_pairs

    @property
    def num_constraints(self) -> int:
        return len(self.lower_bounds) + len(self.conservation_rows)

    def source_var(self, node_id: int) -> int:
        return self.num_edge_vars + 2 * node_id

    def sink_var(self, node_id: int) -> int:
        return self.num_edge_vars + 2 * node_id + 1


# ============================================================================
#                           MODEL BUILDER
# ============================================================================

class ConstraintModelBuilder:
    """
    Translates a repeat graph into a MultiplicityModel and loads the model
    into an LPSolver.
    """

    def __init__(
        self,
        edge_cost: float = DEFAULT_EDGE_COST,
        slack_penalty: float = DEFAULT_SLACK_PENALTY,
        rank_tolerance: float = DEFAULT_RANK_TOLERANCE,
        resolver: Optional[SymmetryResolver] = None,
    ):
        self.edge_cost = edge_cost
        self.slack_penalty = slack_penalty
        self.rank_tolerance = rank_tolerance
        self.resolver = resolver or SymmetryResolver()

    def build(self, graph: RepeatGraph) -> MultiplicityModel:
        """
        Enumerate canonical ids and formulate variables, bounds, flow
        equations and objective.
        """
        numbering = self.resolver.resolve(graph)
        model = MultiplicityModel(numbering=numbering)

        for edge, _ in numbering.edge_pairs:
            model.variable_names.append(str(edge.edge_id))
            model.lower_bounds.append(edge.multiplicity)

        independence = RowIndependenceFilter(numbering.num_edges, self.rank_tolerance)
        for node_id, node in enumerate(numbering.id_to_node):
            model.variable_names.append(f"{node_id}_source")
            model.variable_names.append(f"{node_id}_sink")

            coefficients = self._node_coefficients(node, numbering)
            dense = np.zeros(numbering.num_edges)
            for edge_var, coef in coefficients.items():
                dense[edge_var] = coef

            if not independence.admit(dense):
                logger.debug(f"Node {node.node_id}: flow equation is linearly dependent, skipped")
                model.skipped_nodes.append(node_id)
                continue

            model.conservation_rows.append(ConservationRow(
                node_id=node_id,
                coefficients=coefficients,
                source_var=model.source_var(node_id),
                sink_var=model.sink_var(node_id),
            ))

        for i in range(model.num_edge_vars):
            model.objective[i] = self.edge_cost
        for i in range(model.num_edge_vars, model.num_variables):
            model.objective[i] = self.slack_penalty

        logger.debug(
            f"Multiplicity model: {model.num_variables} variables, "
            f"{len(model.conservation_rows)} flow equations, "
            f"{len(model.skipped_nodes)} dependent equations skipped"
        )
        return model

    @staticmethod
    def _node_coefficients(node: GraphNode, numbering: CanonicalNumbering) -> Dict[int, int]:
        coefficients: Dict[int, int] = {}
        for edge in node.in_edges:
            if not edge.is_looped:
                edge_var = numbering.edge_to_id[edge]
                coefficients[edge_var] = coefficients.get(edge_var, 0) + 1
        for edge in node.out_edges:
            if not edge.is_looped:
                edge_var = numbering.edge_to_id[edge]
                coefficients[edge_var] = coefficients.get(edge_var, 0) - 1
        return {i: c for i, c in coefficients.items() if c != 0}

    @staticmethod
    def populate(model: MultiplicityModel, solver: LPSolver):
        """Declare the model's variables, constraints and objective on a solver."""
        for name in model.variable_names:
            solver.add_variable(name)

        for edge_var, lower in enumerate(model.lower_bounds):
            solver.add_constraint({edge_var: 1.0}, ConstraintSense.GREATER_EQUAL, float(lower))

        for row in model.conservation_rows:
            solver.add_constraint(row.as_constraint(), ConstraintSense.EQUAL, 0.0)

        solver.set_objective(model.objective, ObjectiveSense.MINIMIZE)

# RepeatWeaver v0.1.0
# Any usage is subject to this software's license.
