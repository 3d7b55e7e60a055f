#!/usr/bin/env python3

import pytest
from pydantic import ValidationError

from symdep.graph import SymbolGraph, graph_from_disassembly
from symdep.render import (
    FilterMode,
    OutputFormat,
    RenderOptions,
    UnsupportedFormatError,
    escape_dot_label,
    render,
    select_symbols,
)


@pytest.fixture
def program_graph(program_lines):
    return graph_from_disassembly(program_lines)


def fake_demangle(name: str) -> str:
    return {"_Z3foov": "foo()", "_Z3barv": 'bar<"x">()'}.get(name, name)


class TestRenderOptions:
    def test_defaults(self):
        options = RenderOptions()
        assert options.output_format == OutputFormat.DEPS
        assert options.filter_mode == FilterMode.ALL
        assert options.start_symbol is None

    def test_filter_requires_start_symbol(self):
        with pytest.raises(ValidationError):
            RenderOptions(filter_mode=FilterMode.REACHABLE)

    def test_start_symbol_requires_filter(self):
        with pytest.raises(ValidationError):
            RenderOptions(start_symbol="main")

    def test_constructors(self):
        options = RenderOptions.unreachable_from("main", output_format=OutputFormat.DOT)
        assert options.filter_mode == FilterMode.UNREACHABLE
        assert options.start_symbol == "main"
        assert options.output_format == OutputFormat.DOT

    def test_format_from_string(self):
        assert RenderOptions(output_format="dot").output_format == OutputFormat.DOT


class TestSelectSymbols:
    def test_all(self, program_graph):
        assert select_symbols(program_graph, RenderOptions()) == [
            "_start",
            "main",
            "helper",
            "unused",
        ]

    def test_reachable(self, program_graph):
        selected = select_symbols(program_graph, RenderOptions.reachable_from("main"))
        assert set(selected) == {"main", "helper"}

    def test_unreachable(self, program_graph):
        selected = select_symbols(program_graph, RenderOptions.unreachable_from("_start"))
        assert selected == ["unused"]

    def test_unreachable_with_empty_key(self):
        graph = SymbolGraph.from_mapping({"a": ["b"], "c": []})
        selected = select_symbols(graph, RenderOptions.unreachable_from("a"))
        assert set(selected) == {"c"}

    def test_unknown_start_symbol(self, program_graph):
        assert select_symbols(program_graph, RenderOptions.reachable_from("nope")) == []
        assert len(select_symbols(program_graph, RenderOptions.unreachable_from("nope"))) == 4

    def test_unvalidated_options_without_start_symbol(self, program_graph):
        options = RenderOptions.model_construct(filter_mode=FilterMode.REACHABLE)
        with pytest.raises(ValueError, match="requires a start_symbol"):
            select_symbols(program_graph, options)


class TestDepsFormat:
    def test_program(self, program_graph):
        lines = list(render(program_graph, RenderOptions()))
        assert lines == [
            "_start:",
            "\tmain",
            "",
            "main:",
            "\thelper",
            "",
            "helper:",
            "\tprintf@plt",
            "",
            "unused:",
            "\thelper",
            "",
        ]

    def test_unreachable_only(self, program_graph):
        lines = list(render(program_graph, RenderOptions.unreachable_from("_start")))
        assert lines == ["unused:", "\thelper", ""]

    def test_demangled_names(self):
        graph = SymbolGraph.from_mapping({"_Z3foov": ["_Z3barv", "raw"]})
        lines = list(render(graph, RenderOptions(), fake_demangle))
        assert lines == ["foo():", '\tbar<"x">()', "\traw", ""]

    def test_empty_graph(self):
        assert list(render(SymbolGraph(), RenderOptions())) == []


class TestDotFormat:
    def test_program_reachable(self, program_graph):
        options = RenderOptions.reachable_from("main", output_format=OutputFormat.DOT)
        lines = list(render(program_graph, options))
        assert lines == [
            "digraph G {",
            '"main" [label="main"];',
            '"main" -> "helper";',
            '"helper" [label="helper"];',
            '"helper" -> "printf@plt";',
            "}",
        ]

    def test_edges_are_not_filtered(self, program_graph):
        """Only top-level nodes are filtered; their edges are always drawn."""
        options = RenderOptions.unreachable_from("_start", output_format=OutputFormat.DOT)
        lines = list(render(program_graph, options))
        assert lines == [
            "digraph G {",
            '"unused" [label="unused"];',
            '"unused" -> "helper";',
            "}",
        ]

    def test_label_escaping(self):
        graph = SymbolGraph.from_mapping({"_Z3barv": ["_Z3foov"]})
        options = RenderOptions(output_format=OutputFormat.DOT)
        lines = list(render(graph, options, fake_demangle))
        assert lines[1] == '"_Z3barv" [label="bar<\\"x\\">()"];'
        assert lines[2] == '"_Z3barv" -> "_Z3foov";'

    def test_empty_graph(self):
        options = RenderOptions(output_format=OutputFormat.DOT)
        assert list(render(SymbolGraph(), options)) == ["digraph G {", "}"]


def test_escape_dot_label():
    assert escape_dot_label('say "quoted"') == 'say \\"quoted\\"'
    assert escape_dot_label("two\nlines") == "two\\nlines"
    assert escape_dot_label("a\\b<c>") == "a\\b<c>"


def test_reverse_deps_unsupported(program_graph):
    options = RenderOptions(output_format=OutputFormat.RDEPS)
    with pytest.raises(UnsupportedFormatError, match="rdeps"):
        render(program_graph, options)


def test_render_is_deterministic(program_graph):
    for options in (
        RenderOptions(),
        RenderOptions.unreachable_from("_start", output_format=OutputFormat.DOT),
    ):
        first = "\n".join(render(program_graph, options))
        second = "\n".join(render(program_graph, options))
        assert first == second
