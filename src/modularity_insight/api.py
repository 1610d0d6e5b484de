"""Public API for Modularity Insight.

Example:
    >>> from modularity_insight import audit_modularity
    >>>
    >>> # Scan a Python source tree
    >>> bundle = audit_modularity("/path/to/code")
    >>> bundle["modularity"], bundle["density"]
    >>>
    >>> # Audit an adjacency mapping computed elsewhere
    >>> bundle = audit_modularity(adjacency={"a.py": ["b.py"], "b.py": []}, resolution=1.0)
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from .config import load_config
from .extraction import DependencyExtractor, PythonImportExtractor, StaticExtractor
from .graph.engine import AuditObserver, ModularityAuditor
from .graph.models import ModularityReport
from .logging_config import get_logger

logger = get_logger(__name__)


def build_auditor(
    path: str | Path = ".",
    adjacency: Optional[Mapping[str, Optional[Sequence[str]]]] = None,
    config_file: Optional[Path] = None,
    observer: Optional[AuditObserver] = None,
    **overrides,
) -> ModularityAuditor:
    """Resolve configuration and pick the extractor for one audit.

    Raises:
        ModularityInsightError: If the configuration is invalid
    """
    config = load_config(config_file=config_file, **overrides)

    extractor: DependencyExtractor
    if adjacency is not None:
        extractor = StaticExtractor(adjacency)
    else:
        extractor = PythonImportExtractor(Path(path).resolve(), config)

    logger.debug(f"Auditing with {type(extractor).__name__}, resolution={config.resolution}")
    return ModularityAuditor(extractor, config=config, observer=observer)


def audit_modularity(
    path: str | Path = ".",
    adjacency: Optional[Mapping[str, Optional[Sequence[str]]]] = None,
    config_file: Optional[Path] = None,
    observer: Optional[AuditObserver] = None,
    **overrides,
) -> dict[str, Any]:
    """Audit module dependencies and return the result bundle.

    Args:
        path: Source tree to scan for Python imports (ignored with ``adjacency``)
        adjacency: Pre-computed ``{module: [dependencies]}`` mapping
        config_file: Optional explicit TOML config file
        observer: Receives stage transitions, warnings and errors
        **overrides: Config overrides (e.g. ``resolution=1.2``)

    Returns:
        The result bundle, or ``{}`` when there was nothing to audit or the
        audit failed.

    Raises:
        ModularityInsightError: If the configuration is invalid
    """
    return build_auditor(path, adjacency, config_file, observer, **overrides).run()


def audit_report(
    path: str | Path = ".",
    adjacency: Optional[Mapping[str, Optional[Sequence[str]]]] = None,
    config_file: Optional[Path] = None,
    observer: Optional[AuditObserver] = None,
    **overrides,
) -> Optional[ModularityReport]:
    """Same as :func:`audit_modularity` but returns the typed report (or None)."""
    return build_auditor(path, adjacency, config_file, observer, **overrides).audit()
