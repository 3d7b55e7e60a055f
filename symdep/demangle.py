#!/usr/bin/env python3
"""Display-only demangling of symbol names through external filters (c++filt)."""

import logging
import subprocess
from collections.abc import Iterable

logger = logging.getLogger(__name__)

# Each filter only sees the names the previous ones left unchanged.
DEFAULT_DEMANGLERS = [["c++filt"], ["c++filt", "-s", "dlang"]]


def identity(name: str) -> str:
    return name


class Demangler:
    """Demangles symbol names, falling back to the raw name.

    Names are sent to each filter in batches, one per line, and the results
    cached. C++ and D use different mangling schemes that a single c++filt
    run does not both handle, so filters are chained: names a filter leaves
    as-is are passed on to the next one. A filter that cannot be run, or
    that answers with the wrong number of lines, is skipped from then on.
    """

    def __init__(self, commands: list[list[str]] | None = None):
        self.commands = [list(c) for c in (commands or DEFAULT_DEMANGLERS)]
        self._cache: dict[str, str] = {}
        self._disabled: set[int] = set()

    def prime(self, names: Iterable[str]) -> None:
        """Demangle all not-yet-seen `names`, one run per filter."""
        pending = [n for n in dict.fromkeys(names) if n and n not in self._cache]
        if not pending:
            return

        for index in range(len(self.commands)):
            if not pending:
                break
            demangled = self._run_filter(index, pending)
            if demangled is None:
                continue
            unchanged = []
            for name, display in zip(pending, demangled):
                if display == name:
                    unchanged.append(name)
                else:
                    self._cache[name] = display
            pending = unchanged

        self._cache.update((n, n) for n in pending)

    def demangle(self, name: str) -> str:
        if name not in self._cache:
            self.prime([name])
        return self._cache.get(name, name)

    __call__ = demangle

    def _run_filter(self, index: int, names: list[str]) -> list[str] | None:
        if index in self._disabled:
            return None

        command = self.commands[index]
        shown = " ".join(command)
        logger.debug(f"Demangling {len(names)} symbols with {shown}")
        try:
            result = subprocess.run(
                command,
                input="\n".join(names) + "\n",
                capture_output=True,
                text=True,
            )
        except OSError as e:
            logger.warning(f"Demangler {shown} unavailable, skipping it: {e}")
            self._disabled.add(index)
            return None

        if result.returncode != 0:
            logger.warning(
                f"Demangler {shown} exited with status {result.returncode}, "
                f"skipping it: {result.stderr.strip()}"
            )
            self._disabled.add(index)
            return None

        demangled = result.stdout.splitlines()
        if len(demangled) != len(names):
            logger.warning(
                f"Demangler {shown} returned {len(demangled)} lines for {len(names)} symbols, "
                "skipping it"
            )
            self._disabled.add(index)
            return None
        return [d or n for n, d in zip(names, demangled)]
