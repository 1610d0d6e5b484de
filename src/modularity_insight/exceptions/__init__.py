"""Exception hierarchy for Modularity Insight."""

from .analysis import (
    AnalysisError,
    ExtractionError,
    GraphConstructionError,
    LayoutParseError,
    MetricComputationError,
)
from .base import ModularityInsightError
from .config import (
    ConfigurationError,
    InvalidConfigError,
    InvalidPathError,
)

__all__ = [
    "ModularityInsightError",
    "AnalysisError",
    "ExtractionError",
    "GraphConstructionError",
    "MetricComputationError",
    "LayoutParseError",
    "ConfigurationError",
    "InvalidPathError",
    "InvalidConfigError",
]
