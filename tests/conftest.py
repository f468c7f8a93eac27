#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RepeatWeaver v0.1.0

Pytest configuration and shared fixtures.

Author: RepeatWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import logging
import shutil
import tempfile
from pathlib import Path

import pytest

from repeatweaver.repeat_graph.graph import RepeatGraph
from repeatweaver.repeat_graph.lp_solver import LPResult, LPSolver, LPStatus


def build_graph(num_nodes, edges):
    """
    Build a double-stranded graph.

    Args:
        num_nodes: Number of forward nodes; each gets a distinct complement
        edges: (left index, right index, coverage, length) per forward edge

    Returns:
        (graph, forward nodes, forward edges)
    """
    graph = RepeatGraph()
    nodes = [graph.add_node_pair()[0] for _ in range(num_nodes)]
    forward = []
    for left, right, coverage, length in edges:
        edge, _ = graph.add_edge_pair(nodes[left], nodes[right],
                                      length=length, coverage=coverage)
        forward.append(edge)
    return graph, nodes, forward


class FixedStatusSolver(LPSolver):
    """Solver stub that records the model and returns a preset status."""

    def __init__(self, status=LPStatus.INFEASIBLE, values=None):
        super().__init__()
        self.status = status
        self.values = values
        self.solve_calls = 0

    def solve(self):
        self.solve_calls += 1
        values = self.values if self.values is not None else [0.0] * self.num_variables
        if self.status is not LPStatus.SOLVED:
            values = []
        return LPResult(status=self.status, values=values)


@pytest.fixture
def temp_output_dir():
    """Create temporary output directory for tests."""
    temp_dir = tempfile.mkdtemp(prefix="repeatweaver_test_")
    yield Path(temp_dir)
    # Cleanup after test
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def collapsed_repeat_graph():
    """
    Two unique edges entering a repeat and two leaving it.

        S1 --a1--\\            /--b1--> T1
                  Rin --r--> Rout
        S2 --a2--/            \\--b2--> T2

    All edges have the same coverage, so the repeat edge ``r`` is estimated
    at multiplicity 1 but needs 2 to conserve flow.
    """
    graph, nodes, edges = build_graph(6, [
        (0, 2, 10.0, 1000),   # a1
        (1, 2, 10.0, 1000),   # a2
        (2, 3, 10.0, 1000),   # r
        (3, 4, 10.0, 1000),   # b1
        (3, 5, 10.0, 1000),   # b2
    ])
    return graph, nodes, edges


@pytest.fixture
def triangle_graph():
    """Directed 3-cycle A -> B -> C -> A with uniform coverage."""
    return build_graph(3, [
        (0, 1, 20.0, 500),
        (1, 2, 20.0, 500),
        (2, 0, 20.0, 500),
    ])


@pytest.fixture
def bridged_triangles_graph():
    """
    Two directed 3-cycles joined by a one-way bridge C -> D.

    Flow leaving the first cycle through the bridge can never return, so
    balancing needs emergency source flow.
    """
    return build_graph(6, [
        (0, 1, 10.0, 1000),   # ab
        (1, 2, 10.0, 1000),   # bc
        (2, 0, 10.0, 1000),   # ca
        (3, 4, 10.0, 1000),   # de
        (4, 5, 10.0, 1000),   # ef
        (5, 3, 10.0, 1000),   # fd
        (2, 3, 10.0, 1000),   # g (bridge)
    ])


@pytest.fixture
def complement_junction_graph():
    """
    Edge ``x`` enters junction A, and edge ``e`` runs from A to its own
    complement A'.

        X --x--> A --e--> A'

    The complement of ``e`` also runs A -> A', so A's flow equation has
    coefficient -2 on the shared ``e`` variable. Multiplicities are preset
    (x = 3, e = 1), which the relaxation can only balance with e = 1.5.
    """
    graph = RepeatGraph()
    x_node, _ = graph.add_node_pair()
    a_node, a_rc = graph.add_node_pair()
    x, x_rc = graph.add_edge_pair(x_node, a_node, length=1000, coverage=30.0)
    e, e_rc = graph.add_edge_pair(a_node, a_rc, length=1000, coverage=10.0)
    for edge, mult in ((x, 3), (x_rc, 3), (e, 1), (e_rc, 1)):
        edge.multiplicity = mult
    return graph, a_node, x, e


@pytest.fixture
def restore_logging():
    """Restore root logging handlers after tests that configure logging."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers = handlers
    root.setLevel(level)

# RepeatWeaver v0.1.0
# Any usage is subject to this software's license.
