#!/usr/bin/env python3

import logging

from rich.console import Console as RichConsole
from rich.logging import RichHandler
from rich.markup import escape


class Console:
    """Console wrapper for diagnostics; rendered output does not go through here."""

    def __init__(self, stderr: bool = True):
        self._rich = RichConsole(stderr=stderr)

    def error(self, message: str) -> None:
        """Print an error; symbol names may contain brackets, so no markup in `message`."""
        self._rich.print(f"[bold red]Error:[/bold red] {escape(message)}", soft_wrap=True)

    def setup_logging(self, verbose: bool = False) -> None:
        """Route log records to this console."""
        handler = RichHandler(console=self._rich, show_time=False, show_path=False)
        logging.basicConfig(
            level=logging.DEBUG if verbose else logging.WARNING,
            format="%(message)s",
            handlers=[handler],
            force=True,
        )
