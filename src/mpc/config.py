"""TOML config loading for mpc.toml."""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_NAME = "mpc.toml"


@dataclass
class GrammarConfig:
    comparisons: bool = True


@dataclass
class ParseConfig:
    require_end: bool = True


@dataclass
class OutputConfig:
    color: bool = True


@dataclass
class MpcConfig:
    grammar: GrammarConfig = field(default_factory=GrammarConfig)
    parse: ParseConfig = field(default_factory=ParseConfig)
    output: OutputConfig = field(default_factory=OutputConfig)


def find_config(start_path: Path | None = None) -> Path:
    """Walk up directories to find mpc.toml. Raises FileNotFoundError."""
    path = (start_path or Path.cwd()).resolve()
    if path.is_file():
        path = path.parent
    while True:
        candidate = path / CONFIG_NAME
        if candidate.exists():
            return candidate
        parent = path.parent
        if parent == path:
            raise FileNotFoundError(f"No {CONFIG_NAME} found in any parent directory")
        path = parent


def load_config(path: Path) -> MpcConfig:
    """Parse an mpc.toml file into an MpcConfig."""
    with open(path, "rb") as f:
        data = tomllib.load(f)

    config = MpcConfig()

    if "grammar" in data:
        config.grammar = GrammarConfig(
            comparisons=data["grammar"].get("comparisons", True),
        )

    if "parse" in data:
        config.parse = ParseConfig(
            require_end=data["parse"].get("require_end", True),
        )

    if "output" in data:
        config.output = OutputConfig(
            color=data["output"].get("color", True),
        )

    return config


def discover_config(start_path: Path | None = None) -> MpcConfig:
    """Load the nearest mpc.toml, or return defaults if there is none."""
    try:
        return load_config(find_config(start_path))
    except FileNotFoundError:
        return MpcConfig()
