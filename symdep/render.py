#!/usr/bin/env python3
"""Filtering of graph symbols and rendering as a dependency list or Graphviz dot."""

from collections.abc import Callable, Iterator
from enum import Enum

from pydantic import BaseModel, model_validator

from symdep.demangle import identity
from symdep.graph import SymbolGraph, find_reachable


class OutputFormat(str, Enum):
    DEPS = "deps"
    DOT = "dot"
    RDEPS = "rdeps"


class FilterMode(str, Enum):
    ALL = "all"
    REACHABLE = "reachable"
    UNREACHABLE = "unreachable"


class UnsupportedFormatError(Exception):
    """Raised for output formats that are recognised but not implemented."""

    output_format: OutputFormat

    def __init__(self, output_format: OutputFormat):
        self.output_format = output_format
        super().__init__(f"Output format '{output_format.value}' is not supported yet")


class RenderOptions(BaseModel):
    """What to render and which graph symbols to include."""

    output_format: OutputFormat = OutputFormat.DEPS
    filter_mode: FilterMode = FilterMode.ALL
    start_symbol: str | None = None

    @model_validator(mode="after")
    def check_start_symbol(self) -> "RenderOptions":
        if self.filter_mode == FilterMode.ALL and self.start_symbol is not None:
            raise ValueError("start_symbol requires a reachable/unreachable filter")
        if self.filter_mode != FilterMode.ALL and self.start_symbol is None:
            raise ValueError(f"filter '{self.filter_mode.value}' requires a start_symbol")
        return self

    @classmethod
    def reachable_from(cls, symbol: str, **kwargs) -> "RenderOptions":
        return cls(filter_mode=FilterMode.REACHABLE, start_symbol=symbol, **kwargs)

    @classmethod
    def unreachable_from(cls, symbol: str, **kwargs) -> "RenderOptions":
        return cls(filter_mode=FilterMode.UNREACHABLE, start_symbol=symbol, **kwargs)


def check_supported(options: RenderOptions) -> None:
    if options.output_format == OutputFormat.RDEPS:
        raise UnsupportedFormatError(options.output_format)


def select_symbols(graph: SymbolGraph, options: RenderOptions) -> list[str]:
    """Return the graph keys to render, in graph iteration order."""
    if options.filter_mode == FilterMode.ALL:
        return graph.keys()

    if options.start_symbol is None:
        raise ValueError(f"filter '{options.filter_mode.value}' requires a start_symbol")
    reachable = find_reachable(graph, options.start_symbol)
    if options.filter_mode == FilterMode.REACHABLE:
        return [sym for sym in graph if sym in reachable]
    return [sym for sym in graph if sym not in reachable]


def escape_dot_label(label: str) -> str:
    return label.replace('"', '\\"').replace("\n", "\\n")


def render_deps(
    graph: SymbolGraph, symbols: list[str], demangle: Callable[[str], str]
) -> Iterator[str]:
    for sym in symbols:
        yield f"{demangle(sym)}:"
        for dep in graph.dependencies_of(sym) or ():
            yield f"\t{demangle(dep)}"
        yield ""


def render_dot(
    graph: SymbolGraph, symbols: list[str], demangle: Callable[[str], str]
) -> Iterator[str]:
    yield "digraph G {"
    for sym in symbols:
        yield f'"{sym}" [label="{escape_dot_label(demangle(sym))}"];'
        # Dependencies are drawn even when filtered out as nodes.
        for dep in graph.dependencies_of(sym) or ():
            yield f'"{sym}" -> "{dep}";'
    yield "}"


def render(
    graph: SymbolGraph,
    options: RenderOptions,
    demangle: Callable[[str], str] | None = None,
) -> Iterator[str]:
    """
    Render `graph` according to `options` as a sequence of output lines.

    Raises:
        UnsupportedFormatError: for the reverse-dependency format, before
            any output is produced.
    """
    check_supported(options)

    symbols = select_symbols(graph, options)
    demangle = demangle or identity
    if options.output_format == OutputFormat.DOT:
        return render_dot(graph, symbols, demangle)
    return render_deps(graph, symbols, demangle)
