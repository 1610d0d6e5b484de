"""Data models for module dependency analysis.

Levels:
  Level 1: Modules (nodes) and their direct imports (edges)
  Level 2: Per-module measurements (coupling, centrality)
  Level 3: Derived structures (communities, circular groups)
  Level 4: The report bundle handed to formatters
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Optional

from ..exceptions import GraphConstructionError

# ── Level 1: The dependency graph ──────────────────────────────────


@dataclass(frozen=True)
class NodePosition:
    """Display coordinates recovered from a dependency diagram."""

    title: str
    x: float
    y: float


class DependencyGraph:
    """Directed module dependency graph.

    Edges are directed: an edge (A, B) means module A imports/depends on B.
    There is at most one edge per ordered pair and self-loops are allowed.
    Nodes and edges keep insertion order, which every algorithm relies on
    for deterministic tie-breaking.

    Mutators are best-effort: adding an existing node, a duplicate edge, or
    an edge with an unknown endpoint is a silent no-op that returns False.
    Once :meth:`freeze` is called the graph is read-only and safe to share
    between concurrent readers.
    """

    def __init__(self) -> None:
        self._attributes: dict[str, Mapping[str, float]] = {}
        self._successors: dict[str, dict[str, None]] = {}
        self._predecessors: dict[str, dict[str, None]] = {}
        self._edge_count = 0
        self._frozen = False

    # ── Construction ──────────────────────────────────────────────

    def add_node(self, node: str, attributes: Optional[Mapping[str, float]] = None) -> bool:
        """Add a node; returns False when it already exists."""
        self._check_mutable()
        if node in self._attributes:
            return False
        self._attributes[node] = MappingProxyType(dict(attributes or {}))
        self._successors[node] = {}
        self._predecessors[node] = {}
        return True

    def add_edge(self, source: str, target: str) -> bool:
        """Add a directed edge; returns False when it was dropped.

        Dropped means either endpoint is not a node yet, or the edge
        already exists.
        """
        self._check_mutable()
        if source not in self._attributes or target not in self._attributes:
            return False
        if target in self._successors[source]:
            return False
        self._successors[source][target] = None
        self._predecessors[target][source] = None
        self._edge_count += 1
        return True

    def freeze(self) -> "DependencyGraph":
        """Make the graph read-only. Returns self for chaining."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        return self._frozen

    def _check_mutable(self) -> None:
        if self._frozen:
            raise GraphConstructionError("graph is frozen", node_count=self.node_count())

    # ── Queries ───────────────────────────────────────────────────

    def node_count(self) -> int:
        return len(self._attributes)

    def edge_count(self) -> int:
        return self._edge_count

    def nodes(self) -> list[str]:
        """Nodes in insertion order."""
        return list(self._attributes)

    def edges(self) -> list[tuple[str, str]]:
        """Edges grouped by source, each group in insertion order."""
        return [(src, tgt) for src, targets in self._successors.items() for tgt in targets]

    def has_node(self, node: str) -> bool:
        return node in self._attributes

    def has_edge(self, source: str, target: str) -> bool:
        return target in self._successors.get(source, {})

    def neighbors(self, node: str) -> list[str]:
        """Modules that ``node`` depends on (out-neighbors)."""
        return list(self._successors.get(node, {}))

    def in_neighbors(self, node: str) -> list[str]:
        """Modules that depend on ``node`` (in-neighbors)."""
        return list(self._predecessors.get(node, {}))

    def out_degree(self, node: str) -> int:
        return len(self._successors.get(node, {}))

    def in_degree(self, node: str) -> int:
        return len(self._predecessors.get(node, {}))

    def node_attributes(self, node: str) -> Mapping[str, float]:
        """Read-only attributes of a node (empty when no coordinates were recovered)."""
        return self._attributes[node]

    def self_loop_count(self) -> int:
        return sum(1 for node, targets in self._successors.items() if node in targets)

    def __contains__(self, node: object) -> bool:
        return node in self._attributes

    def __len__(self) -> int:
        return len(self._attributes)

    def __repr__(self) -> str:
        return f"DependencyGraph(nodes={self.node_count()}, edges={self.edge_count()})"

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe view: nodes with optional coordinates, and edge pairs."""
        nodes = []
        for node, attrs in self._attributes.items():
            entry: dict[str, Any] = {"id": node}
            entry.update(attrs)
            nodes.append(entry)
        return {"nodes": nodes, "edges": [list(edge) for edge in self.edges()]}


@dataclass(frozen=True)
class NormalizedTree:
    """Flat node and edge lists derived from an adjacency mapping."""

    nodes: list[str] = field(default_factory=list)
    edges: list[tuple[str, str]] = field(default_factory=list)


# ── Level 2: Per-module measurements ───────────────────────────────


@dataclass(frozen=True)
class CouplingRecord:
    """Martin coupling metrics for one module.

    instability_index = Ce / (Ce + Ca), 0 when the module is isolated,
    rounded half-up to two decimals.
    """

    efferent_coupling: int
    afferent_coupling: int
    instability_index: float

    @property
    def formatted_instability(self) -> str:
        return f"{self.instability_index:.2f}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "efferentCoupling": self.efferent_coupling,
            "afferentCoupling": self.afferent_coupling,
            "instabilityIndex": self.instability_index,
        }


@dataclass
class CentralityMaps:
    """Degree centralities normalized by max(1, n - 1)."""

    degree: dict[str, float] = field(default_factory=dict)
    in_degree: dict[str, float] = field(default_factory=dict)
    out_degree: dict[str, float] = field(default_factory=dict)


# ── Level 3: Derived structures ────────────────────────────────────


@dataclass
class Community:
    """A group of modules discovered by modularity optimization."""

    id: int
    members: list[str]


@dataclass
class CommunityPartition:
    """Module -> community id mapping plus the partition's modularity Q."""

    partition: dict[str, int] = field(default_factory=dict)
    modularity: float = 0.0

    @property
    def communities(self) -> list[Community]:
        """Communities ordered by id, members in node insertion order."""
        grouped: dict[int, list[str]] = {}
        for node, comm_id in self.partition.items():
            grouped.setdefault(comm_id, []).append(node)
        return [Community(id=cid, members=grouped[cid]) for cid in sorted(grouped)]

    @property
    def community_count(self) -> int:
        return len(set(self.partition.values()))


# ── Level 4: Report bundle ─────────────────────────────────────────


@dataclass
class ModularityReport:
    """Complete result of one modularity audit run."""

    tree: dict[str, list[str]]
    graph: DependencyGraph
    communities: CommunityPartition = field(default_factory=CommunityPartition)
    density: float = 0.0
    centrality: CentralityMaps = field(default_factory=CentralityMaps)
    coupling: dict[str, CouplingRecord] = field(default_factory=dict)
    circular_groups: list[list[str]] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    orphan_modules: list[str] = field(default_factory=list)
    leaf_modules: list[str] = field(default_factory=list)
    diagram: Optional[bytes] = None

    @property
    def modularity(self) -> float:
        return self.communities.modularity

    def as_bundle(self) -> dict[str, Any]:
        """The result mapping handed to report formatters (graph left opaque)."""
        return {
            "tree": self.tree,
            "graph": self.graph,
            "modularity": self.communities.modularity,
            "communities": self.communities.partition,
            "density": self.density,
            "degreeCentrality": self.centrality.degree,
            "inDegreeCentrality": self.centrality.in_degree,
            "outDegreeCentrality": self.centrality.out_degree,
            "couplingByModule": self.coupling,
            "circularGroups": self.circular_groups,
            "warnings": self.warnings,
            "orphanModules": self.orphan_modules,
            "leafModules": self.leaf_modules,
        }

    def to_dict(self) -> dict[str, Any]:
        """JSON-safe version of :meth:`as_bundle`."""
        bundle = self.as_bundle()
        bundle["graph"] = self.graph.to_dict()
        bundle["couplingByModule"] = {
            module: record.to_dict() for module, record in self.coupling.items()
        }
        return bundle
