#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RepeatWeaver v0.1.0

Strand symmetry resolution — collapses every edge and node with its
reverse complement into one canonical integer id.

Author: RepeatWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from dataclasses import dataclass, field
from typing import Dict, List, Tuple
import logging

from .graph import GraphEdge, GraphNode, RepeatGraph

logger = logging.getLogger(__name__)


@dataclass
class CanonicalNumbering:
    """
    Canonical ids for one balancing pass.

    Attributes:
        edge_to_id: Both strands of each non-looped edge -> shared id
        edge_pairs: Canonical id -> (representative edge, its complement)
        node_to_id: Both strands of each eligible node -> shared id
        id_to_node: Canonical id -> representative node
    """
    edge_to_id: Dict[GraphEdge, int] = field(default_factory=dict)
    edge_pairs: List[Tuple[GraphEdge, GraphEdge]] = field(default_factory=list)
    node_to_id: Dict[GraphNode, int] = field(default_factory=dict)
    id_to_node: List[GraphNode] = field(default_factory=list)

    @property
    def num_edges(self) -> int:
        return len(self.edge_pairs)

    @property
    def num_nodes(self) -> int:
        return len(self.id_to_node)


class SymmetryResolver:
    """Builds a fresh CanonicalNumbering for a repeat graph."""

    def __init__(self, min_neighbors: int = 2):
        self.min_neighbors = min_neighbors

    def is_eligible_node(self, node: GraphNode) -> bool:
        """Junctions with flow on both sides and more than one neighbor."""
        if not node.in_edges or not node.out_edges:
            return False
        return len(node.neighbors()) >= self.min_neighbors

    def resolve(self, graph: RepeatGraph) -> CanonicalNumbering:
        numbering = CanonicalNumbering()

        for edge in graph.iter_edges():
            if edge.is_looped:
                continue
            if edge in numbering.edge_to_id:
                continue
            complement = graph.complement_edge(edge)
            edge_id = numbering.num_edges
            numbering.edge_to_id[edge] = edge_id
            numbering.edge_to_id[complement] = edge_id
            numbering.edge_pairs.append((edge, complement))

        for node in graph.iter_nodes():
            if not self.is_eligible_node(node):
                continue
            if node in numbering.node_to_id:
                continue
            complement = graph.complement_node(node)
            node_id = numbering.num_nodes
            numbering.node_to_id[node] = node_id
            numbering.node_to_id[complement] = node_id
            numbering.id_to_node.append(node)

        logger.debug(
            f"Canonical numbering: {numbering.num_edges} edge pairs, "
            f"{numbering.num_nodes} node pairs"
        )
        return numbering

# RepeatWeaver v0.1.0
# Any usage is subject to this software's license.
