#!/usr/bin/env python3

import json
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from symdep.demangle import DEFAULT_DEMANGLERS

CONFIG_FILENAME = "symdep_config.json"


class SymdepConfig(BaseModel):
    """Configuration for running the disassembler and demangler."""

    # Disassembler
    objdump: str = "objdump"
    objdump_args: list[str] = Field(default_factory=lambda: ["-d"])  # code sections only

    # Display
    demangle: bool = True
    demangler: list[list[str]] = Field(
        default_factory=lambda: [list(c) for c in DEFAULT_DEMANGLERS]
    )  # filters tried in order

    @field_validator("demangler", mode="before")
    @classmethod
    def wrap_single_command(cls, value):
        """Accept one command (`["c++filt", "-s", "dlang"]`) as a one-filter chain."""
        if isinstance(value, list) and value and all(isinstance(v, str) for v in value):
            return [value]
        return value

    def objdump_command(self, objfile: Path) -> list[str]:
        """Get the full disassembler command line for `objfile`."""
        return [self.objdump, *self.objdump_args, str(objfile)]

    @classmethod
    def load_from_file(cls, config_path: Path) -> "SymdepConfig":
        """Load configuration from a JSON file."""
        args = json.loads(config_path.read_text())
        return cls.model_validate(args)

    def save_to_file(self, config_path: Path) -> None:
        """Save configuration to a JSON file."""
        config_path.write_text(json.dumps(self.model_dump(), indent=2))

    @classmethod
    def find_config(cls, start_path: Path) -> Optional["SymdepConfig"]:
        """Find configuration by searching up the directory tree."""
        current = start_path.resolve()
        while True:
            config_file = current / CONFIG_FILENAME
            if config_file.exists():
                return cls.load_from_file(config_file)
            if current == current.parent:
                return None
            current = current.parent
