#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RepeatWeaver v0.1.0

Tests for reading repeat graphs from GFA.

Author: RepeatWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

import pytest

from repeatweaver.io_utils.gfa import GFAFormatError, load_repeat_graph_from_gfa


X_REPEAT_GFA = "\n".join([
    "H\tVN:Z:1.0",
    "S\ta1\t*\tLN:i:1000\tdp:f:10.0",
    "S\ta2\t*\tLN:i:1000\tdp:f:10.0",
    "S\tr\t*\tLN:i:1000\tdp:f:10.0",
    "S\tb1\t*\tLN:i:1000\tdp:f:10.0",
    "S\tb2\t*\tLN:i:1000\tdp:f:10.0",
    "L\ta1\t+\tr\t+\t0M",
    "L\ta2\t+\tr\t+\t0M",
    "L\tr\t+\tb1\t+\t0M",
    "L\tr\t+\tb2\t+\t0M",
    "",
])


def _write(tmp_dir, text, name="graph.gfa"):
    path = tmp_dir / name
    path.write_text(text)
    return path


def _edge_by_name(loaded, name, sign=1):
    for abs_id, seg_name in loaded.segment_names.items():
        if seg_name == name:
            return loaded.graph.get_edge(sign * abs_id)
    raise KeyError(name)


class TestLoadStructure:

    def test_x_repeat_counts(self, temp_output_dir):
        loaded = load_repeat_graph_from_gfa(_write(temp_output_dir, X_REPEAT_GFA))
        assert len(loaded.graph.edges) == 10
        assert len(loaded.graph.nodes) == 12
        assert loaded.segment_names == {1: "a1", 2: "a2", 3: "r", 4: "b1", 5: "b2"}

    def test_links_merge_junctions(self, temp_output_dir):
        loaded = load_repeat_graph_from_gfa(_write(temp_output_dir, X_REPEAT_GFA))
        a1 = _edge_by_name(loaded, "a1")
        a2 = _edge_by_name(loaded, "a2")
        r = _edge_by_name(loaded, "r")
        b1 = _edge_by_name(loaded, "b1")

        assert a1.node_right is r.node_left
        assert a2.node_right is r.node_left
        assert r.node_right is b1.node_left
        assert set(r.node_left.in_edges) == {a1, a2}

    def test_reverse_strand_links(self, temp_output_dir):
        loaded = load_repeat_graph_from_gfa(_write(temp_output_dir, X_REPEAT_GFA))
        r_rc = _edge_by_name(loaded, "r", sign=-1)
        a1_rc = _edge_by_name(loaded, "a1", sign=-1)
        a2_rc = _edge_by_name(loaded, "a2", sign=-1)

        assert set(r_rc.node_right.out_edges) == {a1_rc, a2_rc}

    def test_complement_relations(self, temp_output_dir):
        loaded = load_repeat_graph_from_gfa(_write(temp_output_dir, X_REPEAT_GFA))
        graph = loaded.graph
        for edge in graph.iter_edges():
            complement = graph.complement_edge(edge)
            assert complement.edge_id == -edge.edge_id
            assert complement.node_left is graph.complement_node(edge.node_right)
            assert complement.node_right is graph.complement_node(edge.node_left)

    def test_repeat_edge_not_tip(self, temp_output_dir):
        loaded = load_repeat_graph_from_gfa(_write(temp_output_dir, X_REPEAT_GFA))
        assert not _edge_by_name(loaded, "r").is_tip
        assert _edge_by_name(loaded, "a1").is_tip

    def test_self_link_gives_loop(self, temp_output_dir):
        text = "S\tx\t*\tLN:i:50\nL\tx\t+\tx\t+\t0M\n"
        loaded = load_repeat_graph_from_gfa(_write(temp_output_dir, text))
        assert loaded.graph.get_edge(1).is_looped
        assert loaded.graph.get_edge(-1).is_looped

    def test_ignored_records(self, temp_output_dir):
        text = X_REPEAT_GFA + "# comment\nP\tpath1\ta1+,r+,b1+\t*\n"
        loaded = load_repeat_graph_from_gfa(_write(temp_output_dir, text))
        assert len(loaded.graph.edges) == 10


class TestSegmentAttributes:

    def test_length_and_depth_tags(self, temp_output_dir):
        text = "S\ts1\t*\tLN:i:1500\tdp:f:12.5\n"
        edge = load_repeat_graph_from_gfa(_write(temp_output_dir, text)).graph.get_edge(1)
        assert edge.length == 1500
        assert edge.coverage == pytest.approx(12.5)

    def test_length_from_sequence(self, temp_output_dir):
        text = "S\ts1\tACGTACGT\n"
        edge = load_repeat_graph_from_gfa(_write(temp_output_dir, text)).graph.get_edge(1)
        assert edge.length == 8
        assert edge.coverage == 1.0

    def test_kmer_count_divided_by_length(self, temp_output_dir):
        text = "S\ts1\t*\tLN:i:100\tKC:i:2000\n"
        edge = load_repeat_graph_from_gfa(_write(temp_output_dir, text)).graph.get_edge(1)
        assert edge.coverage == pytest.approx(20.0)

    def test_both_strands_share_attributes(self, temp_output_dir):
        text = "S\ts1\t*\tLN:i:300\tDP:f:4.0\n"
        graph = load_repeat_graph_from_gfa(_write(temp_output_dir, text)).graph
        forward, reverse = graph.get_edge(1), graph.get_edge(-1)
        assert (forward.length, forward.coverage) == (reverse.length, reverse.coverage)


class TestMalformedInput:

    def test_missing_file(self, temp_output_dir):
        with pytest.raises(FileNotFoundError):
            load_repeat_graph_from_gfa(temp_output_dir / "absent.gfa")

    def test_short_segment_line(self, temp_output_dir):
        with pytest.raises(GFAFormatError, match="GFA line 1"):
            load_repeat_graph_from_gfa(_write(temp_output_dir, "S\tonly_name\n"))

    def test_short_link_line(self, temp_output_dir):
        text = "S\ta\t*\nS\tb\t*\nL\ta\t+\tb\n"
        with pytest.raises(GFAFormatError, match="GFA line 3"):
            load_repeat_graph_from_gfa(_write(temp_output_dir, text))

    def test_bad_orientation(self, temp_output_dir):
        text = "S\ta\t*\nS\tb\t*\nL\ta\t?\tb\t+\t0M\n"
        with pytest.raises(GFAFormatError, match="orientation"):
            load_repeat_graph_from_gfa(_write(temp_output_dir, text))

    def test_unknown_segment_in_link(self, temp_output_dir):
        text = "S\ta\t*\nL\ta\t+\tmissing\t+\t0M\n"
        with pytest.raises(GFAFormatError, match="missing"):
            load_repeat_graph_from_gfa(_write(temp_output_dir, text))

    def test_duplicate_segment(self, temp_output_dir):
        text = "S\ta\t*\nS\ta\t*\n"
        with pytest.raises(GFAFormatError, match="duplicate"):
            load_repeat_graph_from_gfa(_write(temp_output_dir, text))

    def test_malformed_tag(self, temp_output_dir):
        with pytest.raises(GFAFormatError, match="tag"):
            load_repeat_graph_from_gfa(_write(temp_output_dir, "S\ta\t*\tLN100\n"))

    def test_non_numeric_tag(self, temp_output_dir):
        with pytest.raises(GFAFormatError):
            load_repeat_graph_from_gfa(_write(temp_output_dir, "S\ta\t*\tLN:i:abc\n"))

# RepeatWeaver v0.1.0
# Any usage is subject to this software's license.
