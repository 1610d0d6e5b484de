"""Shared CLI helpers."""

from pathlib import Path
from typing import Optional

from rich.console import Console

from ..config import ModularityConfig, load_config

console = Console()


def resolve_config(
    config: Optional[Path] = None,
    resolution: Optional[float] = None,
    no_layout: bool = False,
    verbose: bool = False,
    quiet: bool = False,
) -> ModularityConfig:
    """Build the audit configuration from CLI options."""
    overrides = {}
    if resolution is not None:
        overrides["resolution"] = resolution
    if no_layout:
        overrides["include_layout"] = False
        overrides["require_layout"] = False
    if verbose:
        overrides["verbose"] = True
    if quiet:
        overrides["quiet"] = True
    return load_config(config_file=config, **overrides)
