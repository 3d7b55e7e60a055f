#!/usr/bin/env python3
"""
Symbol dependency graphs from object file disassembly.

Usage:
    symdep path/to/program                      # list every symbol's dependencies
    symdep -f dot path/to/program | dot -Tsvg   # Graphviz output
    symdep -u main path/to/program              # symbols unreachable from main
"""

import logging
import os
import sys
from collections.abc import Iterable
from pathlib import Path

import click

from symdep.config import SymdepConfig
from symdep.console import Console
from symdep.demangle import Demangler, identity
from symdep.graph import SymbolGraph, graph_from_disassembly
from symdep.objdump import listing_lines, objdump_lines
from symdep.render import (
    FilterMode,
    OutputFormat,
    RenderOptions,
    check_supported,
    render,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_USAGE = 1
EXIT_FAILURE = 2


class SymdepCommand(click.Command):
    """Command reporting every usage error with EXIT_USAGE."""

    def make_context(self, info_name, args, parent=None, **extra):
        try:
            return super().make_context(info_name, args, parent=parent, **extra)
        except click.UsageError as e:
            e.exit_code = EXIT_USAGE
            raise


def _show_help(ctx: click.Context, _param: click.Parameter, value: bool) -> None:
    if not value or ctx.resilient_parsing:
        return
    click.echo(ctx.get_help())
    ctx.exit(EXIT_USAGE)


def resolve_options(
    output_format: str, reachable_from: str | None, unreachable_from: str | None
) -> RenderOptions:
    """Turn command line selectors into RenderOptions; -r and -u are exclusive."""
    if reachable_from is not None and unreachable_from is not None:
        raise click.UsageError("-r and -u cannot be used together")

    fmt = OutputFormat(output_format.lower())
    if reachable_from is not None:
        return RenderOptions.reachable_from(reachable_from, output_format=fmt)
    if unreachable_from is not None:
        return RenderOptions.unreachable_from(unreachable_from, output_format=fmt)
    return RenderOptions(output_format=fmt, filter_mode=FilterMode.ALL)


def load_config(config_path: Path | None) -> SymdepConfig:
    if config_path is not None:
        return SymdepConfig.load_from_file(config_path)
    return SymdepConfig.find_config(Path.cwd()) or SymdepConfig()


def _silence_stdout() -> None:
    """Point stdout at devnull so the interpreter's final flush cannot fail again."""
    try:
        fd = sys.stdout.fileno()
    except (AttributeError, OSError, ValueError):
        return  # not backed by a file descriptor
    devnull = os.open(os.devnull, os.O_WRONLY)
    os.dup2(devnull, fd)
    os.close(devnull)


def run(lines: Iterable[str], options: RenderOptions, config: SymdepConfig) -> None:
    """Build the graph from `lines` and write the rendering to stdout."""
    check_supported(options)

    graph: SymbolGraph = graph_from_disassembly(lines)
    logger.debug(f"Built {graph!r}")

    demangle = identity
    if config.demangle:
        demangler = Demangler(config.demangler)
        demangler.prime(graph.symbols())
        demangle = demangler

    try:
        for line in render(graph, options, demangle):
            click.echo(line)
    except BrokenPipeError:
        # Reader went away (`| head`); stop writing without an error.
        logger.debug("Output closed early")
        _silence_stdout()


@click.command(cls=SymdepCommand, add_help_option=False)
@click.argument("objfile", type=click.Path(path_type=Path, allow_dash=True))
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice([e.value for e in OutputFormat], case_sensitive=False),
    default=OutputFormat.DEPS.value,
    show_default=True,
    help="Output format: dependency list or Graphviz dot",
)
@click.option(
    "-r", "--reachable-from", metavar="SYMBOL", help="Only show symbols reachable from SYMBOL"
)
@click.option(
    "-u",
    "--unreachable-from",
    metavar="SYMBOL",
    help="Only show symbols not reachable from SYMBOL",
)
@click.option(
    "--listing",
    is_flag=True,
    help="OBJFILE is a saved disassembly listing ('-' for stdin), not an object file",
)
@click.option("--objdump", "objdump_path", help="Disassembler executable")
@click.option("--no-demangle", is_flag=True, help="Show raw (mangled) symbol names")
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Path to symdep_config.json",
)
@click.option("-v", "--verbose", is_flag=True, help="Log progress to stderr")
@click.option(
    "-h",
    "--help",
    is_flag=True,
    expose_value=False,
    is_eager=True,
    callback=_show_help,
    help="Show this message and exit",
)
@click.pass_context
def cli(
    ctx: click.Context,
    objfile: Path,
    output_format: str,
    reachable_from: str | None,
    unreachable_from: str | None,
    listing: bool,
    objdump_path: str | None,
    no_demangle: bool,
    config_path: Path | None,
    verbose: bool,
):
    """Print the symbol dependency graph of OBJFILE."""
    console = Console()
    console.setup_logging(verbose)

    try:
        options = resolve_options(output_format, reachable_from, unreachable_from)
    except click.UsageError as e:
        e.ctx = ctx
        e.exit_code = EXIT_USAGE
        raise

    try:
        config = load_config(config_path)
        if objdump_path is not None:
            config.objdump = objdump_path
        if no_demangle:
            config.demangle = False

        if listing:
            lines = listing_lines(objfile)
        else:
            lines = objdump_lines(objfile, config)
        run(lines, options, config)
    except Exception as e:
        logger.debug("Analysis failed", exc_info=True)
        console.error(str(e))
        ctx.exit(EXIT_FAILURE)


def main(argv: list[str] | None = None) -> int:
    """Entry point returning the process exit status."""
    try:
        rv = cli.main(args=argv, prog_name="symdep", standalone_mode=False)
    except click.ClickException as e:
        e.show()
        return e.exit_code
    except click.Abort:
        click.echo("Aborted!", err=True)
        return EXIT_USAGE
    return rv if isinstance(rv, int) else EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
