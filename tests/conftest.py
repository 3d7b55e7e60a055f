#!/usr/bin/env python3

import stat
from pathlib import Path

import pytest

PROGRAM_LISTING = """
/tmp/prog:     file format elf64-x86-64


Disassembly of section .text:

0000000000001000 <_start>:
    1000:	e8 0b 00 00 00       	call   1010 <main>
    1005:	c3                   	ret

0000000000001010 <main>:
    1010:	e8 1b 00 00 00       	call   1030 <helper>
    1015:	e8 16 00 00 00       	call   1030 <helper>
    101a:	74 02                	je     101e <main+0xe>
    101c:	c3                   	ret

0000000000001030 <helper>:
    1030:	e8 00 00 00 00       	call   1040 <printf@plt>
    1035:	eb f9                	jmp    1030 <helper>

0000000000001050 <unused>:
    1050:	e8 db ff ff ff       	call   1030 <helper>
    1055:	c3                   	ret
"""


@pytest.fixture
def program_lines():
    return PROGRAM_LISTING.splitlines()


@pytest.fixture
def listing_file(tmp_path):
    path = tmp_path / "prog.dis"
    path.write_text(PROGRAM_LISTING)
    return path


@pytest.fixture
def make_script(tmp_path):
    """Write executable shell scripts standing in for external tools."""

    def write(name: str, body: str) -> Path:
        path = tmp_path / name
        path.write_text("#!/bin/sh\n" + body)
        path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        return path

    return write
