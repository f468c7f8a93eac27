#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RepeatWeaver v0.1.0

Tests for the repeat graph data model.

Author: RepeatWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest

from repeatweaver.repeat_graph.errors import GraphError
from repeatweaver.repeat_graph.graph import RepeatGraph

from conftest import build_graph


class TestComplementRelations:
    """Edge and node complements are explicit and involutive."""

    def test_edge_pair_ids_are_negated(self):
        graph = RepeatGraph()
        a, _ = graph.add_node_pair()
        b, _ = graph.add_node_pair()
        forward, reverse = graph.add_edge_pair(a, b, length=100, coverage=5.0)

        assert forward.edge_id == -reverse.edge_id
        assert graph.complement_edge(forward) is reverse
        assert graph.complement_edge(reverse) is forward

    def test_complement_edge_runs_between_complement_nodes(self):
        graph = RepeatGraph()
        a, a_rc = graph.add_node_pair()
        b, b_rc = graph.add_node_pair()
        _, reverse = graph.add_edge_pair(a, b)

        assert reverse.node_left is b_rc
        assert reverse.node_right is a_rc

    def test_node_complement_is_involutive(self):
        graph = RepeatGraph()
        node, complement = graph.add_node_pair()
        assert graph.complement_node(node) is complement
        assert graph.complement_node(complement) is node

    def test_self_complementary_node(self):
        graph = RepeatGraph()
        node = graph.add_node(self_complement=True)
        assert graph.complement_node(node) is node

    def test_missing_node_complement_raises(self):
        graph = RepeatGraph()
        node = graph.add_node()
        with pytest.raises(GraphError):
            graph.complement_node(node)

    def test_missing_edge_complement_raises(self):
        graph = RepeatGraph()
        a = graph.add_node(self_complement=True)
        b = graph.add_node(self_complement=True)
        edge = graph.add_edge(5, a, b)
        with pytest.raises(GraphError):
            graph.complement_edge(edge)

    def test_pair_shares_length_and_coverage(self):
        graph, _, edges = build_graph(2, [(0, 1, 7.5, 321)])
        reverse = graph.complement_edge(edges[0])
        assert reverse.length == 321
        assert reverse.coverage == 7.5


class TestGraphConstruction:

    def test_duplicate_edge_id_rejected(self):
        graph = RepeatGraph()
        a = graph.add_node(self_complement=True)
        graph.add_edge(1, a, a)
        with pytest.raises(GraphError):
            graph.add_edge(1, a, a)

    def test_zero_edge_id_rejected(self):
        graph = RepeatGraph()
        a = graph.add_node(self_complement=True)
        with pytest.raises(GraphError):
            graph.add_edge(0, a, a)

    def test_foreign_node_rejected(self):
        graph = RepeatGraph()
        other = RepeatGraph()
        a = graph.add_node(self_complement=True)
        foreign = other.add_node(self_complement=True)
        foreign.node_id = 99
        with pytest.raises(GraphError):
            graph.add_edge(1, a, foreign)

    def test_edge_ids_continue_after_explicit_ids(self):
        graph = RepeatGraph()
        a, _ = graph.add_node_pair()
        b, _ = graph.add_node_pair()
        graph.add_edge(10, a, b)
        graph.add_edge(-10, graph.complement_node(b), graph.complement_node(a))
        forward, _ = graph.add_edge_pair(a, b)
        assert forward.edge_id == 11

    def test_adjacency_lists(self, collapsed_repeat_graph):
        graph, nodes, edges = collapsed_repeat_graph
        a1, a2, r, b1, b2 = edges
        rin = nodes[2]
        assert rin.in_edges == [a1, a2]
        assert rin.out_edges == [r]
        assert len(graph.edges) == 10
        assert len(graph.nodes) == 12


class TestDerivedFlags:

    def test_tip_edges(self, collapsed_repeat_graph):
        _, _, edges = collapsed_repeat_graph
        a1, a2, r, b1, b2 = edges
        assert a1.is_tip and a2.is_tip and b1.is_tip and b2.is_tip
        assert not r.is_tip

    def test_looped_edge(self):
        graph = RepeatGraph()
        a, _ = graph.add_node_pair()
        loop, loop_rc = graph.add_edge_pair(a, a)
        assert loop.is_looped
        assert loop_rc.is_looped

    def test_neighbors(self, collapsed_repeat_graph):
        _, nodes, _ = collapsed_repeat_graph
        rin = nodes[2]
        assert rin.neighbors() == {nodes[0], nodes[1], nodes[3]}

    def test_neighbors_include_self_for_loop(self):
        graph = RepeatGraph()
        a, _ = graph.add_node_pair()
        graph.add_edge_pair(a, a)
        assert a.neighbors() == {a}

    def test_is_end(self, collapsed_repeat_graph):
        _, nodes, _ = collapsed_repeat_graph
        assert nodes[0].is_end()
        assert not nodes[2].is_end()

# RepeatWeaver v0.1.0
# Any usage is subject to this software's license.
