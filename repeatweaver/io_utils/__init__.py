"""
RepeatWeaver v0.1.0

GFA import and multiplicity export.

Author: RepeatWeaver Development Team
License: Dual License (Academic/Commercial) - See LICENSE_ACADEMIC.md and LICENSE_COMMERCIAL.md
"""

from .gfa import GFAFormatError, LoadedGraph, load_repeat_graph_from_gfa
from .export import (
    export_balance_report,
    export_graph_to_gfa,
    export_multiplicity_tsv,
    generate_segment_name,
)

__all__ = [
    "GFAFormatError",
    "LoadedGraph",
    "load_repeat_graph_from_gfa",
    "export_balance_report",
    "export_graph_to_gfa",
    "export_multiplicity_tsv",
    "generate_segment_name",
]
