#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RepeatWeaver v0.1.0

Multiplicity Export — per-edge multiplicity TSV, GFA with multiplicity
tags, and balancing report JSON.

Author: RepeatWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Set, Tuple, Union
import json
import logging

from ..repeat_graph.graph import GraphEdge, RepeatGraph
from ..repeat_graph.multiplicity_inferer import BalanceReport

logger = logging.getLogger(__name__)


@dataclass
class GFASegment:
    """Represents a GFA S-line for one edge pair."""
    name: str
    length: int
    coverage: float
    multiplicity: int

    def to_gfa_line(self) -> str:
        """
        Format: S <name> * LN:i:<length> dp:f:<coverage> MP:i:<multiplicity>
        """
        return (f"S\t{self.name}\t*\tLN:i:{self.length}\t"
                f"dp:f:{self.coverage:.2f}\tMP:i:{self.multiplicity}")


@dataclass(frozen=True)
class GFALink:
    """Represents a GFA L-line between two oriented segments."""
    from_name: str
    from_orient: str
    to_name: str
    to_orient: str

    def reverse_complement(self) -> "GFALink":
        flip = {'+': '-', '-': '+'}
        return GFALink(self.to_name, flip[self.to_orient],
                       self.from_name, flip[self.from_orient])

    def to_gfa_line(self) -> str:
        return f"L\t{self.from_name}\t{self.from_orient}\t{self.to_name}\t{self.to_orient}\t0M"


def generate_segment_name(edge_id: int) -> str:
    """Default segment name for an edge pair (e.g. 'edge_7' for +7 and -7)."""
    return f"edge_{abs(edge_id)}"


def _oriented_name(edge: GraphEdge, names: Dict[int, str]) -> Tuple[str, str]:
    name = names.get(abs(edge.edge_id)) or generate_segment_name(edge.edge_id)
    return name, '+' if edge.edge_id > 0 else '-'


def _collect_links(graph: RepeatGraph, names: Dict[int, str]) -> List[GFALink]:
    links: List[GFALink] = []
    seen: Set[GFALink] = set()
    for node in graph.iter_nodes():
        for in_edge in node.in_edges:
            for out_edge in node.out_edges:
                from_name, from_orient = _oriented_name(in_edge, names)
                to_name, to_orient = _oriented_name(out_edge, names)
                link = GFALink(from_name, from_orient, to_name, to_orient)
                if link in seen or link.reverse_complement() in seen:
                    continue
                seen.add(link)
                links.append(link)
    return links


def export_graph_to_gfa(
    graph: RepeatGraph,
    output_path: Union[str, Path],
    segment_names: Optional[Dict[int, str]] = None,
) -> None:
    """
    Export the repeat graph to GFA v1 with multiplicity tags.

    Each complementary edge pair is written once as a segment named after
    its positive strand; links are written once per complementary pair.

    Args:
        graph: Repeat graph with multiplicities assigned
        output_path: Path to output GFA file
        segment_names: Absolute edge id -> segment name (default 'edge_<id>')
    """
    output_path = Path(output_path)
    names = segment_names or {}
    logger.info(f"Exporting graph to GFA: {output_path}")

    segments: List[GFASegment] = []
    for edge in graph.iter_edges():
        if edge.edge_id < 0:
            continue
        name, _ = _oriented_name(edge, names)
        segments.append(GFASegment(name=name, length=edge.length,
                                   coverage=edge.coverage,
                                   multiplicity=edge.multiplicity))
    links = _collect_links(graph, names)

    with open(output_path, 'w') as f:
        f.write("H\tVN:Z:1.0\n")
        for seg in segments:
            f.write(seg.to_gfa_line() + "\n")
        for link in links:
            f.write(link.to_gfa_line() + "\n")

    logger.info(f"GFA export complete: {len(segments)} segments, {len(links)} links")


def export_multiplicity_tsv(
    graph: RepeatGraph,
    output_path: Union[str, Path],
    segment_names: Optional[Dict[int, str]] = None,
) -> None:
    """
    Write one row per edge strand: edge_id, name, length, coverage, multiplicity.
    """
    output_path = Path(output_path)
    names = segment_names or {}
    logger.info(f"Writing edge multiplicities: {output_path}")

    with open(output_path, 'w') as f:
        f.write("edge_id\tname\tlength\tcoverage\tmultiplicity\n")
        for edge in sorted(graph.iter_edges(), key=lambda e: (abs(e.edge_id), -e.edge_id)):
            name, _ = _oriented_name(edge, names)
            f.write(f"{edge.edge_id}\t{name}\t{edge.length}\t"
                    f"{edge.coverage:.2f}\t{edge.multiplicity}\n")


def export_balance_report(report: BalanceReport, output_path: Union[str, Path]) -> None:
    """Write the balancing report as JSON."""
    output_path = Path(output_path)
    with open(output_path, 'w') as f:
        json.dump(report.to_dict(), f, indent=2)
    logger.info(f"Balance report written: {output_path}")

# RepeatWeaver v0.1.0
# Any usage is subject to this software's license.
