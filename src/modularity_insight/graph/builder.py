"""Dependency graph construction from a normalized tree."""

from typing import Optional, Sequence

from ..logging_config import get_logger
from .models import DependencyGraph, NodePosition, NormalizedTree

logger = get_logger(__name__)


def build_dependency_graph(
    tree: NormalizedTree,
    positions: Optional[Sequence[NodePosition]] = None,
) -> DependencyGraph:
    """Build a frozen DependencyGraph from normalized nodes and edges.

    All nodes are added before any edge. Nodes get ``x``/``y`` attributes
    when the layout recovered a position with a matching title; a node
    without one is still added, just without coordinates.

    Edges whose endpoints are not nodes (imports of files excluded from
    the analysis) and repeated edges are dropped without error.
    """
    position_by_title: dict[str, NodePosition] = {}
    for position in positions or ():
        position_by_title.setdefault(position.title, position)

    graph = DependencyGraph()

    for node in tree.nodes:
        if not node:
            continue
        position = position_by_title.get(node)
        attributes = {"x": position.x, "y": position.y} if position else None
        graph.add_node(node, attributes)

    dropped = 0
    for source, target in tree.edges:
        if not graph.add_edge(source, target):
            dropped += 1

    if dropped:
        logger.debug(
            f"Dropped {dropped} edge(s) with unknown endpoints or duplicates "
            f"while building graph of {graph.node_count()} nodes"
        )

    return graph.freeze()
