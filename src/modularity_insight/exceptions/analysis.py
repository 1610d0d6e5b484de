"""Analysis-related exceptions: extraction, graph construction, metrics."""

from pathlib import Path
from typing import Optional

from .base import ModularityInsightError


class AnalysisError(ModularityInsightError):
    """Base class for analysis-related errors."""
    pass


class ExtractionError(AnalysisError):
    """Raised when the dependency extractor cannot produce an adjacency mapping."""

    def __init__(self, source: str, reason: str):
        super().__init__(
            f"Dependency extraction failed for {source}",
            details={"source": source, "reason": reason},
        )
        self.source = source
        self.reason = reason


class GraphConstructionError(AnalysisError):
    """Raised when the dependency graph cannot be built from the normalized tree."""

    def __init__(self, reason: str, node_count: Optional[int] = None):
        details = {"reason": reason}
        if node_count is not None:
            details["node_count"] = str(node_count)

        super().__init__(f"Cannot build dependency graph: {reason}", details=details)
        self.reason = reason
        self.node_count = node_count


class MetricComputationError(AnalysisError):
    """Raised when a single graph metric fails."""

    def __init__(self, metric: str, reason: str):
        super().__init__(
            f"Failed to compute {metric}",
            details={"metric": metric, "reason": reason},
        )
        self.metric = metric
        self.reason = reason


class LayoutParseError(AnalysisError):
    """Raised when a dependency diagram cannot be read back into positions."""

    def __init__(self, reason: str, filepath: Optional[Path] = None):
        details = {"reason": reason}
        if filepath:
            details["filepath"] = str(filepath)

        super().__init__(f"Cannot parse dependency diagram: {reason}", details=details)
        self.reason = reason
        self.filepath = filepath
