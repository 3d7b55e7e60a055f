#!/usr/bin/env python3
"""
Symbol dependency graph and reachability analysis.
"""

from collections.abc import Iterable, Iterator, Mapping

from symdep.disasm import parse_sym_deps, unique_pairs


class SymbolGraph:
    """Maps each defined symbol to its ordered, distinct dependencies.

    Symbols that are only ever referenced are not keys: `dependencies_of`
    returns None for them rather than an empty tuple.
    """

    def __init__(self):
        self._deps: dict[str, list[str]] = {}
        self._edges: set[tuple[str, str]] = set()

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Iterable[str]]) -> "SymbolGraph":
        graph = cls()
        for symbol, deps in mapping.items():
            graph.add_symbol(symbol)
            for dep in deps:
                graph.add_dependency(symbol, dep)
        return graph

    def add_symbol(self, symbol: str) -> None:
        """Register `symbol` as a key, with no dependencies if it is new."""
        self._deps.setdefault(symbol, [])

    def add_dependency(self, symbol: str, dep: str) -> None:
        if (symbol, dep) in self._edges:
            return
        self._edges.add((symbol, dep))
        self._deps.setdefault(symbol, []).append(dep)

    def keys(self) -> list[str]:
        return list(self._deps)

    def dependencies_of(self, symbol: str) -> tuple[str, ...] | None:
        deps = self._deps.get(symbol)
        if deps is None:
            return None
        return tuple(deps)

    def contains(self, symbol: str) -> bool:
        return symbol in self._deps

    def edge_count(self) -> int:
        return len(self._edges)

    def symbols(self) -> list[str]:
        """All symbols in the graph, referenced-only ones included, first-seen order."""
        seen: dict[str, None] = {}
        for symbol, deps in self._deps.items():
            seen.setdefault(symbol, None)
            for dep in deps:
                seen.setdefault(dep, None)
        return list(seen)

    def to_dict(self) -> dict[str, list[str]]:
        return {symbol: list(deps) for symbol, deps in self._deps.items()}

    def __contains__(self, symbol: object) -> bool:
        return symbol in self._deps

    def __iter__(self) -> Iterator[str]:
        return iter(self._deps)

    def __len__(self) -> int:
        return len(self._deps)

    def __repr__(self) -> str:
        return f"SymbolGraph({len(self)} symbols, {self.edge_count()} edges)"


def build_graph(pairs: Iterable[tuple[str, str]]) -> SymbolGraph:
    """Fold (symbol, dependency) pairs into a SymbolGraph."""
    graph = SymbolGraph()
    for symbol, dep in pairs:
        graph.add_dependency(symbol, dep)
    return graph


def graph_from_disassembly(lines: Iterable[str]) -> SymbolGraph:
    """Parse disassembly lines straight into a SymbolGraph."""
    return build_graph(unique_pairs(parse_sym_deps(lines)))


def iter_reachable(graph: SymbolGraph, start: str) -> Iterator[str]:
    """
    Yield every symbol reachable from `start`, `start` included, in the order
    a depth-first walk marks them (first-listed dependency first).

    A symbol is marked before its dependencies are expanded, so cycles and
    self references terminate.
    """
    marked = {start}
    yield start
    stack = [iter(graph.dependencies_of(start) or ())]
    while stack:
        for dep in stack[-1]:
            if dep in marked:
                continue
            marked.add(dep)
            yield dep
            stack.append(iter(graph.dependencies_of(dep) or ()))
            break
        else:
            stack.pop()


def find_reachable(graph: SymbolGraph, start: str) -> set[str]:
    """Return the set of symbols reachable from `start`."""
    return set(iter_reachable(graph, start))
