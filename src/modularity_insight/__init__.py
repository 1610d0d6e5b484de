"""
Modularity Insight - module dependency structure analysis

Turns a module dependency listing into a directed graph and measures it:
afferent/efferent coupling and instability per module, Louvain communities
and modularity, degree centrality, density, and circular dependency groups.
"""

__version__ = "0.3.0"

from .api import audit_modularity, audit_report
from .extraction import DependencyExtractor, ExtractionResult, PythonImportExtractor, StaticExtractor
from .graph import DependencyGraph, ModularityReport
from .graph.engine import (
    AuditObserver,
    AuditStage,
    ModularityAuditor,
    RecordingAuditObserver,
)

__all__ = [
    "audit_modularity",  # Main entry point
    "audit_report",
    "ModularityAuditor",  # Advanced usage (custom extractor / observer)
    "ModularityReport",
    "DependencyGraph",
    "DependencyExtractor",
    "ExtractionResult",
    "PythonImportExtractor",
    "StaticExtractor",
    "AuditObserver",
    "AuditStage",
    "RecordingAuditObserver",
]
