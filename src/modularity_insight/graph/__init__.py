"""Dependency graph model and metric algorithms.

The audit engine lives in :mod:`modularity_insight.graph.engine`; it is not
re-exported here because extractors import the algorithms from this package.
"""

from .models import (
    CentralityMaps,
    Community,
    CommunityPartition,
    CouplingRecord,
    DependencyGraph,
    ModularityReport,
    NodePosition,
    NormalizedTree,
)

__all__ = [
    "CentralityMaps",
    "Community",
    "CommunityPartition",
    "CouplingRecord",
    "DependencyGraph",
    "ModularityReport",
    "NodePosition",
    "NormalizedTree",
]
