#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RepeatWeaver v0.1.0

GFA Reader — builds a double-stranded repeat graph from a GFA v1 file.

Each segment (S-line) becomes a pair of complementary edges (+i / -i for
the i-th segment). Segment ends touching through links (L-lines) are merged
into shared junction nodes. Every link is applied together with its
reverse complement, so node complements follow from flipping the segment
orientation and end.

Author: RepeatWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union
import logging

from ..repeat_graph.graph import GraphNode, RepeatGraph

logger = logging.getLogger(__name__)

# (segment name, orientation, side) with side 'start' or 'end'
SegmentEnd = Tuple[str, str, str]

COVERAGE_TAGS = ('dp', 'DP')
COUNT_TAGS = ('KC', 'RC', 'FC')


class GFAFormatError(ValueError):
    """Raised on malformed GFA input."""

    def __init__(self, message: str, line_no: Optional[int] = None):
        self.line_no = line_no
        if line_no is not None:
            message = f"GFA line {line_no}: {message}"
        super().__init__(message)


@dataclass
class GFASegmentRecord:
    name: str
    length: int
    coverage: float


@dataclass
class LoadedGraph:
    """
    Repeat graph read from GFA.

    Attributes:
        graph: The repeat graph
        segment_names: Absolute edge id -> GFA segment name
    """
    graph: RepeatGraph
    segment_names: Dict[int, str] = field(default_factory=dict)


def _flip(orient: str) -> str:
    return '-' if orient == '+' else '+'


def _complement_end(end: SegmentEnd) -> SegmentEnd:
    name, orient, side = end
    return name, _flip(orient), 'end' if side == 'start' else 'start'


class _SegmentEndUnion:
    """Disjoint sets of segment ends that share one junction."""

    def __init__(self):
        self._parent: Dict[SegmentEnd, SegmentEnd] = {}

    def add(self, end: SegmentEnd):
        self._parent.setdefault(end, end)

    def find(self, end: SegmentEnd) -> SegmentEnd:
        root = end
        while self._parent[root] != root:
            root = self._parent[root]
        while self._parent[end] != root:
            self._parent[end], end = root, self._parent[end]
        return root

    def union(self, a: SegmentEnd, b: SegmentEnd):
        root_a, root_b = self.find(a), self.find(b)
        if root_a != root_b:
            self._parent[root_b] = root_a


def _parse_tags(fields: List[str], line_no: int) -> Dict[str, str]:
    tags = {}
    for tag in fields:
        parts = tag.split(':', 2)
        if len(parts) != 3:
            raise GFAFormatError(f"malformed tag '{tag}'", line_no)
        tags[parts[0]] = parts[2]
    return tags


def _parse_segment(parts: List[str], line_no: int) -> GFASegmentRecord:
    if len(parts) < 3:
        raise GFAFormatError("S-line needs a name and a sequence", line_no)
    name = parts[1]
    sequence = parts[2] if parts[2] != '*' else ''
    tags = _parse_tags(parts[3:], line_no)

    try:
        length = int(tags['LN']) if 'LN' in tags else len(sequence)
        coverage = None
        for tag in COVERAGE_TAGS:
            if tag in tags:
                coverage = float(tags[tag])
                break
        if coverage is None:
            for tag in COUNT_TAGS:
                if tag in tags:
                    coverage = float(tags[tag]) / length if length > 0 else 0.0
                    break
    except ValueError as e:
        raise GFAFormatError(f"invalid numeric tag on segment '{name}': {e}", line_no) from e

    if coverage is None:
        coverage = 1.0
    return GFASegmentRecord(name=name, length=length, coverage=coverage)


def load_repeat_graph_from_gfa(gfa_path: Union[str, Path]) -> LoadedGraph:
    """
    Load a repeat graph from a GFA v1 file.

    Segment length comes from the sequence or the ``LN:i`` tag; coverage
    from ``dp``/``DP``, else a k-mer/read count tag (``KC``, ``RC``, ``FC``)
    divided by length, else 1.0.

    Args:
        gfa_path: Path to a GFA v1 file

    Returns:
        LoadedGraph with the graph and segment names

    Raises:
        FileNotFoundError: If gfa_path does not exist
        GFAFormatError: On malformed lines or links to unknown segments
    """
    gfa_path = Path(gfa_path)
    if not gfa_path.exists():
        raise FileNotFoundError(f"GFA file not found: {gfa_path}")

    logger.info(f"Loading graph from GFA: {gfa_path}")

    segments: List[GFASegmentRecord] = []
    seen_names = set()
    links: List[Tuple[int, SegmentEnd, SegmentEnd]] = []

    with open(gfa_path, 'r') as f:
        for line_no, raw_line in enumerate(f, 1):
            line = raw_line.rstrip('\n').rstrip('\r')
            if not line or line.startswith('#'):
                continue
            parts = line.split('\t')
            record_type = parts[0]

            if record_type == 'S':
                segment = _parse_segment(parts, line_no)
                if segment.name in seen_names:
                    raise GFAFormatError(f"duplicate segment '{segment.name}'", line_no)
                seen_names.add(segment.name)
                segments.append(segment)

            elif record_type == 'L':
                if len(parts) < 5:
                    raise GFAFormatError("L-line needs from, orient, to, orient", line_no)
                from_name, from_orient, to_name, to_orient = parts[1:5]
                if from_orient not in ('+', '-') or to_orient not in ('+', '-'):
                    raise GFAFormatError("invalid link orientation", line_no)
                links.append((line_no,
                              (from_name, from_orient, 'end'),
                              (to_name, to_orient, 'start')))

            # H, P, W, C and other records carry nothing the graph needs

    ends = _SegmentEndUnion()
    for segment in segments:
        for orient in '+-':
            for side in ('start', 'end'):
                ends.add((segment.name, orient, side))

    for line_no, left, right in links:
        for name in (left[0], right[0]):
            if name not in seen_names:
                raise GFAFormatError(f"link refers to unknown segment '{name}'", line_no)
        ends.union(left, right)
        ends.union(_complement_end(right), _complement_end(left))

    graph = RepeatGraph()
    root_to_node: Dict[SegmentEnd, GraphNode] = {}

    def node_for(end: SegmentEnd) -> GraphNode:
        root = ends.find(end)
        node = root_to_node.get(root)
        if node is None:
            node = graph.add_node()
            root_to_node[root] = node
        return node

    for segment in segments:
        for orient in '+-':
            for side in ('start', 'end'):
                end = (segment.name, orient, side)
                graph.set_complement_nodes(node_for(end), node_for(_complement_end(end)))

    loaded = LoadedGraph(graph=graph)
    for index, segment in enumerate(segments, 1):
        graph.add_edge(index, node_for((segment.name, '+', 'start')),
                       node_for((segment.name, '+', 'end')),
                       length=segment.length, coverage=segment.coverage)
        graph.add_edge(-index, node_for((segment.name, '-', 'start')),
                       node_for((segment.name, '-', 'end')),
                       length=segment.length, coverage=segment.coverage)
        loaded.segment_names[index] = segment.name

    logger.info(
        f"Loaded graph: {len(segments)} segments, {len(links)} links, "
        f"{len(graph.nodes)} nodes, {len(graph.edges)} edges"
    )
    return loaded

# RepeatWeaver v0.1.0
# Any usage is subject to this software's license.
