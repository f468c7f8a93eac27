#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RepeatWeaver v0.1.0

Multiplicity Inference — estimates edge copy numbers from coverage and
balances them with a linear program so that flow is conserved at graph
junctions.

Pipeline:
  1. estimate_by_coverage: multiplicity = round(coverage / mean coverage)
  2. balance_graph: build the constraint model over canonical ids, solve it,
     write the solved values back onto both strands of every edge and
     report junctions that could only be balanced with slack flow.

Balancing is best-effort. A solver failure aborts the pass before any
multiplicity is changed; leftover imbalance is only a warning.

Author: RepeatWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple
import logging

from .constraint_model import (
    DEFAULT_EDGE_COST,
    DEFAULT_RANK_TOLERANCE,
    DEFAULT_SLACK_PENALTY,
    ConstraintModelBuilder,
    MultiplicityModel,
)
from .coverage import estimate_by_coverage, round_half_away
from .errors import LPSolveError
from .graph import GraphEdge, GraphNode, RepeatGraph
from .lp_solver import LPResult, LPSolver, get_solver

logger = logging.getLogger(__name__)


@dataclass
class BalanceReport:
    """
    Outcome of one balancing pass.

    Attributes:
        changed_edges: Signed edge id -> (old multiplicity, new multiplicity)
            for both strands of every edge the solver raised
        unbalanced_nodes: Canonical nodes that needed slack flow or whose
            written multiplicities do not conserve flow
        extra_source: Total emergency source flow
        extra_sink: Total emergency sink flow
        num_variables: LP variable count
        num_constraints: LP constraint count
        skipped_equations: Flow equations dropped as linearly dependent
    """
    changed_edges: Dict[int, Tuple[int, int]] = field(default_factory=dict)
    unbalanced_nodes: int = 0
    extra_source: int = 0
    extra_sink: int = 0
    num_variables: int = 0
    num_constraints: int = 0
    skipped_equations: int = 0
    mean_coverage: Optional[float] = None

    @property
    def fully_balanced(self) -> bool:
        return self.unbalanced_nodes == 0

    def to_dict(self) -> Dict[str, Any]:
        """Serialise to a JSON-friendly dictionary."""
        return {
            "mean_coverage": self.mean_coverage,
            "changed_edges": {str(k): list(v) for k, v in self.changed_edges.items()},
            "unbalanced_nodes": self.unbalanced_nodes,
            "extra_source": self.extra_source,
            "extra_sink": self.extra_sink,
            "num_variables": self.num_variables,
            "num_constraints": self.num_constraints,
            "skipped_equations": self.skipped_equations,
        }


class MultiplicityInferer:
    """
    Assigns and corrects edge multiplicities of a repeat graph in place.

    The graph must not be modified by anyone else while a pass runs.
    """

    def __init__(
        self,
        graph: RepeatGraph,
        solver_factory: Optional[Callable[[], LPSolver]] = None,
        edge_cost: float = DEFAULT_EDGE_COST,
        slack_penalty: float = DEFAULT_SLACK_PENALTY,
        rank_tolerance: float = DEFAULT_RANK_TOLERANCE,
    ):
        """
        Initialize the inferer.

        Args:
            graph: Repeat graph with coverage and length set on every edge
            solver_factory: Callable returning a fresh LPSolver per pass
                (default: scipy HiGHS backend)
            edge_cost: Objective weight of each edge multiplicity
            slack_penalty: Objective weight of each source/sink variable
            rank_tolerance: Zero threshold of the row independence test
        """
        self.graph = graph
        self.solver_factory = solver_factory or get_solver
        self.builder = ConstraintModelBuilder(
            edge_cost=edge_cost,
            slack_penalty=slack_penalty,
            rank_tolerance=rank_tolerance,
        )
        self.logger = logging.getLogger(f"{__name__}.MultiplicityInferer")

    @classmethod
    def from_config(cls, graph: RepeatGraph, config: Dict[str, Any]) -> "MultiplicityInferer":
        """Create an inferer from the ``multiplicity`` section of a config dict."""
        mult_cfg = config.get('multiplicity', {})
        solver_cfg = mult_cfg.get('solver', {})
        backend = solver_cfg.get('backend', 'scipy')
        method = solver_cfg.get('method', 'highs-ds')

        return cls(
            graph,
            solver_factory=lambda: get_solver(backend, method=method),
            edge_cost=mult_cfg.get('edge_cost', DEFAULT_EDGE_COST),
            slack_penalty=mult_cfg.get('slack_penalty', DEFAULT_SLACK_PENALTY),
            rank_tolerance=mult_cfg.get('rank_tolerance', DEFAULT_RANK_TOLERANCE),
        )

    def fix_edges_multiplicity(self) -> BalanceReport:
        """Estimate multiplicities from coverage, then balance them."""
        mean_coverage = self.estimate_by_coverage()
        report = self.balance_graph()
        report.mean_coverage = mean_coverage
        return report

    def estimate_by_coverage(self) -> float:
        return estimate_by_coverage(self.graph)

    def balance_graph(self) -> BalanceReport:
        """
        Raise multiplicities so that flow is conserved where possible.

        Raises:
            LPSolveError: If the solver reports an infeasible, unbounded or
                unreliable result. No multiplicity is modified in that case.
        """
        self.logger.info("Updating edges multiplicity")

        model = self.builder.build(self.graph)
        solver = self.solver_factory()
        self.builder.populate(model, solver)
        result = solver.solve()
        if result.status.is_failure:
            raise LPSolveError(result.status)
        if len(result.values) != model.num_variables:
            raise LPSolveError(
                result.status,
                f"Solver returned {len(result.values)} values for "
                f"{model.num_variables} variables",
            )

        report = BalanceReport(
            num_variables=model.num_variables,
            num_constraints=model.num_constraints,
            skipped_equations=len(model.skipped_nodes),
        )
        self._write_back(model, result, report)
        self._report_imbalance(model, result, report)
        return report

    def _write_back(self, model: MultiplicityModel, result: LPResult, report: BalanceReport):
        updates: List[Tuple[GraphEdge, int]] = []
        for edge_var, (edge, complement) in enumerate(model.numbering.edge_pairs):
            inferred = round_half_away(result.values[edge_var])
            for strand in (edge, complement):
                if strand.multiplicity != inferred:
                    updates.append((strand, inferred))

        for edge, inferred in updates:
            self.logger.debug(f"Mult {edge.edge_id} {edge.multiplicity} -> {inferred}")
            report.changed_edges[edge.edge_id] = (edge.multiplicity, inferred)
            edge.multiplicity = inferred

    def _report_imbalance(self, model: MultiplicityModel, result: LPResult, report: BalanceReport):
        for node_id, node in enumerate(model.numbering.id_to_node):
            node_source = round_half_away(result.values[model.source_var(node_id)])
            node_sink = round_half_away(result.values[model.sink_var(node_id)])
            report.extra_source += node_source
            report.extra_sink += node_sink

            # Rounding or a skipped equation can leave a node unconserved
            # without any slack flow
            inflow, outflow = _node_flow(node)
            if inflow != outflow:
                self.logger.debug(f"Node {node.node_id}: in {inflow} != out {outflow} after write-back")
            if node_source + node_sink > 0 or inflow != outflow:
                report.unbalanced_nodes += 1

        if report.unbalanced_nodes:
            self.logger.warning(
                f"Could not balance assembly graph in full: {report.unbalanced_nodes} "
                f"nodes remained, extra source: {report.extra_source} "
                f"extra sink: {report.extra_sink}"
            )


def _node_flow(node: GraphNode) -> Tuple[int, int]:
    """Summed multiplicity of non-looped incoming and outgoing edges."""
    inflow = sum(edge.multiplicity for edge in node.in_edges if not edge.is_looped)
    outflow = sum(edge.multiplicity for edge in node.out_edges if not edge.is_looped)
    return inflow, outflow

# RepeatWeaver v0.1.0
# Any usage is subject to this software's license.
