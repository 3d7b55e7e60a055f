#!/usr/bin/env python3
"""
Parsing of objdump disassembly listings into symbol dependency pairs.

Only two line shapes matter:

    000000000049b228 <_D3std7process7__arrayZ>:        symbol definition
      49b23d:	e8 7e a6 ff ff   callq  4958c0 <_d_array_bounds>   reference

Every other line (instruction bytes, section headers, blank lines) is skipped.
"""

import re
from collections.abc import Iterable, Iterator

# Address, then `<name>:` and nothing else on the line.
SYMBOL_DEFINITION_RE = re.compile(r"^[0-9a-fA-F]+\s+<([^>]+)>:\s*$")

# `<name>` or `<name+0x1f>`; the offset is dropped.
SYMBOL_REFERENCE_RE = re.compile(r"<([^>+]+)(?:\+(?:0x)?[0-9a-fA-F]+)?>")

NO_SYMBOL = ""


def match_definition(line: str) -> str | None:
    """Return the symbol defined by `line`, or None if it is not a definition."""
    m = SYMBOL_DEFINITION_RE.match(line)
    if m is None:
        return None
    return m.group(1)


def match_reference(line: str, current: str = NO_SYMBOL) -> str | None:
    """Return the first symbol referenced on `line` other than `current`.

    References back to the owning symbol (local jumps within a function) are
    skipped and scanning continues along the line.
    """
    for m in SYMBOL_REFERENCE_RE.finditer(line):
        name = m.group(1)
        if name != current:
            return name
    return None


def parse_sym_deps(lines: Iterable[str]) -> Iterator[tuple[str, str]]:
    """
    Parse disassembly lines into (symbol, dependency) pairs.

    A symbol depending on several others appears once per dependency (and
    once per referencing line; see `unique_pairs`). Definition lines are
    tested before references, since the reference pattern would otherwise
    pick up the name of the symbol being defined.

    References seen before the first definition are attributed to the empty
    symbol name.
    """
    current = NO_SYMBOL
    for line in lines:
        defined = match_definition(line)
        if defined is not None:
            current = defined
            continue

        dep = match_reference(line, current)
        if dep is not None:
            yield current, dep


def unique_pairs(pairs: Iterable[tuple[str, str]]) -> Iterator[tuple[str, str]]:
    """Drop repeated pairs, keeping first-seen order."""
    seen: set[tuple[str, str]] = set()
    for pair in pairs:
        if pair in seen:
            continue
        seen.add(pair)
        yield pair
