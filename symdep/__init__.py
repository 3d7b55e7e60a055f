"""symdep - symbol dependency graphs from object file disassembly."""

from symdep.disasm import match_definition, match_reference, parse_sym_deps, unique_pairs
from symdep.graph import (
    SymbolGraph,
    build_graph,
    find_reachable,
    graph_from_disassembly,
    iter_reachable,
)
from symdep.render import FilterMode, OutputFormat, RenderOptions, UnsupportedFormatError, render

__version__ = "0.1.0"

__all__ = [
    "match_definition",
    "match_reference",
    "parse_sym_deps",
    "unique_pairs",
    "SymbolGraph",
    "build_graph",
    "graph_from_disassembly",
    "iter_reachable",
    "find_reachable",
    "FilterMode",
    "OutputFormat",
    "RenderOptions",
    "UnsupportedFormatError",
    "render",
]
