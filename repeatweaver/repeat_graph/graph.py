#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RepeatWeaver v0.1.0

Repeat Graph — double-stranded assembly graph where edges carry sequence
and nodes are junctions between edges.

Every edge has a reverse-complement partner with the opposite signed id
(+i <-> -i) and every node has a complement node (possibly itself). Both
relations are involutive and are stored explicitly so that no code relies
on object identity to find the opposite strand.

Author: RepeatWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional, Set, Tuple
import logging

from .errors import GraphError

logger = logging.getLogger(__name__)


@dataclass(eq=False)
class GraphNode:
    """
    Junction in the repeat graph.

    Nodes compare by identity so they can be used as dictionary keys
    while their adjacency lists change.
    """
    node_id: int
    in_edges: List["GraphEdge"] = field(default_factory=list)
    out_edges: List["GraphEdge"] = field(default_factory=list)

    def neighbors(self) -> Set["GraphNode"]:
        """Nodes adjacent through any incoming or outgoing edge."""
        result = {edge.node_left for edge in self.in_edges}
        result.update(edge.node_right for edge in self.out_edges)
        return result

    def is_end(self) -> bool:
        """True if the node has no incoming or no outgoing edges."""
        return not self.in_edges or not self.out_edges

    def __repr__(self) -> str:
        return (f"GraphNode(id={self.node_id}, in={len(self.in_edges)}, "
                f"out={len(self.out_edges)})")


@dataclass(eq=False)
class GraphEdge:
    """
    Sequence-carrying edge of the repeat graph.

    Attributes:
        edge_id: Signed id; the reverse-complement edge has the negated id
        node_left: Node the edge leaves
        node_right: Node the edge enters
        length: Sequence length in bases
        coverage: Mean read depth over the edge
        multiplicity: Estimated copy number of the edge in the genome
    """
    edge_id: int
    node_left: GraphNode
    node_right: GraphNode
    length: int = 0
    coverage: float = 0.0
    multiplicity: int = 0

    @property
    def is_looped(self) -> bool:
        """Self-loop: the edge starts and ends at the same node."""
        return self.node_left is self.node_right

    @property
    def is_tip(self) -> bool:
        """Dead end on at least one side."""
        return not self.node_left.in_edges or not self.node_right.out_edges

    def __repr__(self) -> str:
        return (f"GraphEdge(id={self.edge_id}, {self.node_left.node_id}->"
                f"{self.node_right.node_id}, len={self.length}, "
                f"cov={self.coverage}, mult={self.multiplicity})")


class RepeatGraph:
    """
    Container for repeat graph nodes, edges and their strand complements.

    Edges are created in complementary pairs with ``add_edge_pair``; the
    lower-level ``add_edge`` is available for loaders that register both
    strands themselves.
    """

    def __init__(self):
        self._nodes: Dict[int, GraphNode] = {}
        self._edges: Dict[int, GraphEdge] = {}
        self._node_complement: Dict[int, GraphNode] = {}
        self._next_node_id = 0
        self._next_edge_id = 1

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    def add_node(self, self_complement: bool = False) -> GraphNode:
        """
        Add a single node.

        Args:
            self_complement: Register the node as its own complement

        Returns:
            The new node
        """
        node = GraphNode(node_id=self._next_node_id)
        self._next_node_id += 1
        self._nodes[node.node_id] = node
        if self_complement:
            self._node_complement[node.node_id] = node
        return node

    def add_node_pair(self) -> Tuple[GraphNode, GraphNode]:
        """Add a node together with its (distinct) complement node."""
        node = self.add_node()
        complement = self.add_node()
        self.set_complement_nodes(node, complement)
        return node, complement

    def set_complement_nodes(self, node: GraphNode, complement: GraphNode):
        """Register two nodes as complements of each other."""
        self._check_owned(node)
        self._check_owned(complement)
        self._node_complement[node.node_id] = complement
        self._node_complement[complement.node_id] = node

    def add_edge(
        self,
        edge_id: int,
        node_left: GraphNode,
        node_right: GraphNode,
        length: int = 0,
        coverage: float = 0.0,
    ) -> GraphEdge:
        """
        Add one strand of an edge with an explicit signed id.

        The complement strand must be added with id ``-edge_id``.
        """
        if edge_id == 0:
            raise GraphError("Edge id 0 has no distinct complement")
        if edge_id in self._edges:
            raise GraphError(f"Duplicate edge id {edge_id}")
        self._check_owned(node_left)
        self._check_owned(node_right)

        edge = GraphEdge(edge_id=edge_id, node_left=node_left, node_right=node_right,
                         length=length, coverage=coverage)
        self._edges[edge_id] = edge
        node_left.out_edges.append(edge)
        node_right.in_edges.append(edge)
        self._next_edge_id = max(self._next_edge_id, abs(edge_id) + 1)
        return edge

    def add_edge_pair(
        self,
        node_left: GraphNode,
        node_right: GraphNode,
        length: int = 0,
        coverage: float = 0.0,
    ) -> Tuple[GraphEdge, GraphEdge]:
        """
        Add an edge and its reverse complement.

        The complement edge runs from complement(node_right) to
        complement(node_left) and shares length and coverage.

        Returns:
            (forward edge, complement edge)
        """
        edge_id = self._next_edge_id
        forward = self.add_edge(edge_id, node_left, node_right, length, coverage)
        reverse = self.add_edge(-edge_id, self.complement_node(node_right),
                                self.complement_node(node_left), length, coverage)
        return forward, reverse

    def _check_owned(self, node: GraphNode):
        if self._nodes.get(node.node_id) is not node:
            raise GraphError(f"Node {node.node_id} does not belong to this graph")

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def nodes(self) -> Dict[int, GraphNode]:
        return self._nodes

    @property
    def edges(self) -> Dict[int, GraphEdge]:
        return self._edges

    def iter_edges(self) -> Iterator[GraphEdge]:
        return iter(list(self._edges.values()))

    def iter_nodes(self) -> Iterator[GraphNode]:
        return iter(list(self._nodes.values()))

    def get_edge(self, edge_id: int) -> Optional[GraphEdge]:
        return self._edges.get(edge_id)

    def complement_edge(self, edge: GraphEdge) -> GraphEdge:
        """Reverse-complement strand of an edge."""
        complement = self._edges.get(-edge.edge_id)
        if complement is None:
            raise GraphError(f"Edge {edge.edge_id} has no complement edge")
        return complement

    def complement_node(self, node: GraphNode) -> GraphNode:
        """Complement node (may be the node itself)."""
        complement = self._node_complement.get(node.node_id)
        if complement is None:
            raise GraphError(f"Node {node.node_id} has no complement node")
        return complement

    def __len__(self) -> int:
        return len(self._edges)

    def __repr__(self) -> str:
        return f"RepeatGraph(nodes={len(self._nodes)}, edges={len(self._edges)})"

# RepeatWeaver v0.1.0
# Any usage is subject to this software's license.
