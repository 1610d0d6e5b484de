"""Configuration loading and management for Modularity Insight.

Configuration sources are merged in priority order:
    1. Defaults (defined in ModularityConfig)
    2. Global config (~/.modularity-insight.toml)
    3. Project config (./modularity-insight.toml)
    4. Explicit config file
    5. Environment variables (MODULARITY_* prefix)
    6. CLI overrides (passed as kwargs)

Example:
    >>> config = load_config(resolution=1.0, verbose=True)
    >>> config.resolution
    1.0
    >>> config.verbosity
    'verbose'
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, Optional, get_type_hints

from .exceptions import ModularityInsightError

Verbosity = Literal["quiet", "normal", "verbose"]

GLOBAL_CONFIG_NAME = ".modularity-insight.toml"
PROJECT_CONFIG_NAME = "modularity-insight.toml"
ENV_PREFIX = "MODULARITY_"


@dataclass(frozen=True)
class ModularityConfig:
    """Configuration for one modularity audit run.

    Attributes:
        Community detection:
            resolution: Louvain resolution; scales the expected-edges term of
                the modularity gain. Values above 1.0 split the graph into
                more, smaller communities; values below 1.0 merge more.
            louvain_max_passes: Safety cap on local-moving passes per level
            louvain_max_levels: Safety cap on aggregation levels

        Execution:
            parallel_metrics: Run community, centrality and density concurrently
            max_workers: Thread pool size for the metric stage

        Layout:
            include_layout: Ask the extractor for a diagram and recover positions
            require_layout: Treat a missing or unparseable diagram as an empty run

        Extraction:
            file_extensions: Source file suffixes the import extractor reads
            exclude_patterns: Glob patterns (fnmatch) skipped during discovery
            max_files: Maximum number of files to extract

        Output control:
            verbosity: Logging verbosity level
    """

    # Community detection
    resolution: float = 0.8
    louvain_max_passes: int = 20
    louvain_max_levels: int = 10

    # Execution
    parallel_metrics: bool = True
    max_workers: int = 3

    # Layout
    include_layout: bool = True
    require_layout: bool = False

    # Extraction
    file_extensions: list[str] = field(default_factory=lambda: [".py"])
    exclude_patterns: list[str] = field(
        default_factory=lambda: [
            "venv/*",
            ".venv/*",
            "build/*",
            "dist/*",
            ".git/*",
            "__pycache__/*",
            ".tox/*",
            ".mypy_cache/*",
            ".pytest_cache/*",
            ".ruff_cache/*",
            "*.egg-info/*",
            ".eggs/*",
            "node_modules/*",
        ]
    )
    max_files: int = 10000

    # Output control
    verbosity: Verbosity = "normal"

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if self.resolution <= 0:
            raise ValueError("resolution must be positive")
        if self.louvain_max_passes < 1:
            raise ValueError("louvain_max_passes must be at least 1")
        if self.louvain_max_levels < 1:
            raise ValueError("louvain_max_levels must be at least 1")

        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")

        if self.require_layout and not self.include_layout:
            raise ValueError("require_layout needs include_layout enabled")

        if not self.file_extensions:
            raise ValueError("file_extensions must not be empty")
        for ext in self.file_extensions:
            if not ext.startswith("."):
                raise ValueError(f"file extension '{ext}' must start with '.'")
        if self.max_files < 1:
            raise ValueError("max_files must be at least 1")

        if self.verbosity not in ("quiet", "normal", "verbose"):
            raise ValueError("verbosity must be one of: quiet, normal, verbose")


DEFAULT_CONFIG = ModularityConfig()


def load_config(config_file: Optional[Path] = None, **overrides) -> ModularityConfig:
    """Load configuration with auto-discovery and merging.

    Args:
        config_file: Optional explicit config file path
        **overrides: Direct overrides (typically from CLI flags). ``None``
            values are ignored so unset CLI options keep lower-priority values.

    Returns:
        Validated ModularityConfig instance

    Raises:
        ModularityInsightError: If a config file is invalid or missing, or
            the merged values fail validation
    """
    merged: dict = {}

    global_config = Path.home() / GLOBAL_CONFIG_NAME
    if global_config.exists():
        try:
            merged.update(_load_toml_file(global_config))
        except Exception as e:
            raise ModularityInsightError(f"Invalid global config '{global_config}': {e}")

    project_config = Path.cwd() / PROJECT_CONFIG_NAME
    if project_config.exists():
        try:
            merged.update(_load_toml_file(project_config))
        except Exception as e:
            raise ModularityInsightError(f"Invalid project config '{project_config}': {e}")

    if config_file is not None:
        if not config_file.exists():
            raise ModularityInsightError(f"Config file not found: {config_file}")
        try:
            merged.update(_load_toml_file(config_file))
        except Exception as e:
            raise ModularityInsightError(f"Invalid config file '{config_file}': {e}")

    merged.update(_load_env_vars())

    # Verbosity flags from the CLI map onto the single verbosity field
    if "verbose" in overrides:
        if overrides["verbose"]:
            overrides["verbosity"] = "verbose"
        del overrides["verbose"]
    if "quiet" in overrides:
        if overrides["quiet"]:
            overrides["verbosity"] = "quiet"
        del overrides["quiet"]

    merged.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return ModularityConfig(**merged)
    except TypeError as e:
        # Unknown field in config
        raise ModularityInsightError(f"Invalid configuration: {e}")
    except ValueError as e:
        raise ModularityInsightError(f"Invalid configuration: {e}")


def _load_env_vars() -> dict[str, Any]:
    """Load configuration from MODULARITY_* environment variables.

    Supported environment variables:
        MODULARITY_RESOLUTION: float
        MODULARITY_LOUVAIN_MAX_PASSES: int
        MODULARITY_LOUVAIN_MAX_LEVELS: int
        MODULARITY_PARALLEL_METRICS: bool (true/false/1/0)
        MODULARITY_MAX_WORKERS: int
        MODULARITY_INCLUDE_LAYOUT: bool
        MODULARITY_REQUIRE_LAYOUT: bool
        MODULARITY_MAX_FILES: int
        MODULARITY_VERBOSITY: quiet/normal/verbose

    Returns:
        Dict of field_name -> parsed_value for any MODULARITY_* vars found.
    """
    type_hints = get_type_hints(ModularityConfig)

    result: dict[str, Any] = {}

    for field_name in ModularityConfig.__dataclass_fields__:
        env_key = f"{ENV_PREFIX}{field_name.upper()}"
        env_value = os.environ.get(env_key)

        if env_value is None:
            continue

        type_hint = type_hints.get(field_name)
        if type_hint is None:
            continue

        try:
            parsed = _parse_env_value(env_value, type_hint)
            if parsed is not None:
                result[field_name] = parsed
        except ValueError as e:
            raise ModularityInsightError(f"Invalid {env_key}: {e}")

    return result


def _parse_env_value(value: str, type_hint: Any) -> Any:
    """Parse environment variable string to the correct type.

    Returns None for types that cannot be expressed as a single env string.

    Raises:
        ValueError: If value can't be parsed to expected type
    """
    origin = getattr(type_hint, "__origin__", None)

    # Lists (file_extensions, exclude_patterns) only come from TOML
    if origin is list or type_hint is list:
        return None

    if type_hint is bool:
        lower = value.lower()
        if lower in ("true", "1", "yes", "on"):
            return True
        elif lower in ("false", "0", "no", "off"):
            return False
        else:
            raise ValueError(f"expected true/false, got '{value}'")

    if type_hint is int:
        return int(value)

    if type_hint is float:
        return float(value)

    if type_hint is str or origin is Literal:
        return value

    return None


def _load_toml_file(path: Path) -> dict:
    """Load TOML file and return parsed dict.

    A ``[modularity]`` table is used when present, so the settings can
    live inside a larger shared config file.
    """
    with open(path, "rb") as f:
        data = tomllib.load(f)
    section = data.get("modularity")
    if isinstance(section, dict):
        return section
    return data
