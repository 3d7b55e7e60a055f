#!/usr/bin/env python3
"""Line sources: a live objdump subprocess or a saved disassembly listing."""

import logging
import subprocess
import sys
from collections.abc import Iterator
from pathlib import Path

from symdep.config import SymdepConfig

logger = logging.getLogger(__name__)


class ObjdumpError(Exception):
    command: list[str]
    status: int | None

    def __init__(self, command: list[str], status: int | None, reason: str = ""):
        self.command = command
        self.status = status
        self.reason = reason
        super().__init__(str(self))

    def __str__(self):
        if self.status is None:
            return f"Failed to run {self.command[0]}: {self.reason}"
        return f"{self.command[0]} exited with status {self.status}"


def objdump_lines(objfile: Path, config: SymdepConfig) -> Iterator[str]:
    """
    Run the disassembler on `objfile` and yield its output lines.

    The exit status is checked once the output is exhausted; a non-zero
    status raises ObjdumpError from the final pull. The process is killed if
    the consumer stops early.
    """
    command = config.objdump_command(objfile)
    logger.debug(f"Running {' '.join(command)}")
    try:
        proc = subprocess.Popen(
            command,
            stdout=subprocess.PIPE,
            text=True,
            encoding="utf-8",
            errors="replace",
        )
    except OSError as e:
        raise ObjdumpError(command, None, str(e)) from e

    stdout = proc.stdout
    if stdout is None:
        proc.kill()
        proc.wait()
        raise ObjdumpError(command, None, "no output pipe")

    finished = False
    try:
        for line in stdout:
            yield line.rstrip("\n")
        finished = True
    finally:
        stdout.close()
        if not finished:
            proc.kill()
        status = proc.wait()

    if status != 0:
        raise ObjdumpError(command, status)
    logger.debug(f"{command[0]} finished")


def listing_lines(path: Path | str) -> Iterator[str]:
    """Yield lines of a saved disassembly listing; `-` reads stdin."""
    if str(path) == "-":
        for line in sys.stdin:
            yield line.rstrip("\n")
        return

    with open(path, encoding="utf-8", errors="replace") as f:
        for line in f:
            yield line.rstrip("\n")
