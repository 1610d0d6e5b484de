"""Flatten an adjacency mapping into node and edge lists."""

from typing import Mapping, Optional, Sequence

from .models import NormalizedTree


def normalize_tree(tree: Mapping[str, Optional[Sequence[str]]]) -> NormalizedTree:
    """Convert ``{module: [deps...]}`` into ordered node and edge lists.

    Nodes are the mapping's keys in declaration order. Edges hold one
    ``(module, dependency)`` pair per occurrence, also in declaration
    order; duplicates and dangling targets are left for the graph
    builder to drop. A ``None`` dependency list counts as empty.
    """
    if not tree:
        return NormalizedTree(nodes=[], edges=[])

    nodes: list[str] = []
    edges: list[tuple[str, str]] = []
    for module, dependencies in tree.items():
        nodes.append(module)
        for dependency in dependencies or ():
            edges.append((module, dependency))

    return NormalizedTree(nodes=nodes, edges=edges)
