"""Graph algorithms: community detection, degree centrality, density, cycles."""

from typing import Mapping, Optional, Sequence

from .models import CentralityMaps, CommunityPartition, DependencyGraph

# Gains closer than this are ties; ties keep the earlier candidate
_GAIN_EPSILON = 1e-12

EdgeWeights = dict[tuple[int, int], float]


# ── Community detection (Louvain) ──────────────────────────────────


def _undirected_weights(graph: DependencyGraph) -> tuple[EdgeWeights, dict[int, float]]:
    """Collapse directed edges into canonical (min, max) undirected weights.

    Nodes are replaced by their insertion index. A <-> B pairs become one
    edge of weight 2. Every edge adds 1 to the degree of both endpoints,
    so a self-loop adds 2 and sum(degree) == 2 * m.
    """
    index = {node: i for i, node in enumerate(graph.nodes())}
    edge_weights: EdgeWeights = {}
    degree: dict[int, float] = {i: 0.0 for i in index.values()}

    for source, target in graph.edges():
        a, b = index[source], index[target]
        key = (min(a, b), max(a, b))
        edge_weights[key] = edge_weights.get(key, 0.0) + 1.0
        degree[a] += 1.0
        degree[b] += 1.0

    return edge_weights, degree


def _phase1_local_moving(
    nodes: list[int],
    edge_weights: EdgeWeights,
    degree: dict[int, float],
    m: float,
    resolution: float,
    max_passes: int,
) -> tuple[dict[int, int], bool]:
    """Phase 1 of Louvain: greedily move nodes to maximize modularity.

    Each node is taken out of its community and put into the neighboring
    community with the best gain

        gain(C) = k_i,in(C) - resolution * sigma_tot(C) * k_i / 2m

    (the modularity gain scaled by m). Staying put wins ties, then the
    first community met in neighbor order. A full pass without moves
    ends the phase.

    Returns:
        (node_comm, moved) where *node_comm* maps each node to its
        community id and *moved* is True if any node changed community.
    """
    two_m = 2.0 * m

    node_comm: dict[int, int] = {n: n for n in nodes}
    sigma_tot: dict[int, float] = {n: degree[n] for n in nodes}

    # Self-loops add the same constant to every candidate, so they are left out
    neighbors: dict[int, dict[int, float]] = {n: {} for n in nodes}
    for (a, b), w in edge_weights.items():
        if a == b:
            continue
        neighbors[a][b] = neighbors[a].get(b, 0.0) + w
        neighbors[b][a] = neighbors[b].get(a, 0.0) + w

    any_moved = False
    for _pass in range(max_passes):
        moved = False
        for node in nodes:
            current_comm = node_comm[node]
            ki = degree[node]

            comm_weights: dict[int, float] = {}
            for neighbor, w in neighbors[node].items():
                comm = node_comm[neighbor]
                comm_weights[comm] = comm_weights.get(comm, 0.0) + w

            sigma_tot[current_comm] -= ki

            best_comm = current_comm
            best_gain = (
                comm_weights.get(current_comm, 0.0)
                - resolution * sigma_tot[current_comm] * ki / two_m
            )
            for comm, ki_in in comm_weights.items():
                if comm == current_comm:
                    continue
                gain = ki_in - resolution * sigma_tot[comm] * ki / two_m
                if gain > best_gain + _GAIN_EPSILON:
                    best_gain = gain
                    best_comm = comm

            sigma_tot[best_comm] += ki

            if best_comm != current_comm:
                node_comm[node] = best_comm
                moved = True
                any_moved = True

        if not moved:
            break

    return node_comm, any_moved


def _coarsen_graph(
    nodes: list[int],
    edge_weights: EdgeWeights,
    degree: dict[int, float],
    node_comm: dict[int, int],
) -> tuple[list[int], EdgeWeights, dict[int, float], dict[int, int]]:
    """Phase 2 of Louvain: collapse communities into super-nodes.

    Super-nodes are numbered 0..k-1 in order of first appearance of their
    community among *nodes*. Edges between communities are summed; edges
    inside one become a self-loop so the next level still sees them in
    the super-node's degree.

    Returns:
        (new_nodes, new_edge_weights, new_degree, relabel) where *relabel*
        maps a phase-1 community id to its super-node.
    """
    relabel: dict[int, int] = {}
    for node in nodes:
        relabel.setdefault(node_comm[node], len(relabel))

    new_edge_weights: EdgeWeights = {}
    for (a, b), w in edge_weights.items():
        ca = relabel[node_comm[a]]
        cb = relabel[node_comm[b]]
        key = (min(ca, cb), max(ca, cb))
        new_edge_weights[key] = new_edge_weights.get(key, 0.0) + w

    new_degree: dict[int, float] = {i: 0.0 for i in range(len(relabel))}
    for node in nodes:
        new_degree[relabel[node_comm[node]]] += degree[node]

    return list(range(len(relabel))), new_edge_weights, new_degree, relabel


def louvain(
    graph: DependencyGraph,
    resolution: float = 1.0,
    max_passes: int = 20,
    max_levels: int = 10,
) -> CommunityPartition:
    """Louvain community detection (Phase 1 + Phase 2).

    Edge direction is ignored for modularity. The local-moving and
    coarsening phases repeat until a level produces no move, or
    *max_levels* is reached. Iteration follows node insertion order
    throughout, so a given graph always yields the same partition and
    bit-identical modularity.

    Community ids are renumbered 0..k-1 in order of each community's
    first member in insertion order.
    """
    original_nodes = graph.nodes()
    if not original_nodes:
        return CommunityPartition(partition={}, modularity=0.0)

    edge_weights, degree = _undirected_weights(graph)
    m = sum(edge_weights.values())
    if m == 0:
        return CommunityPartition(
            partition={node: i for i, node in enumerate(original_nodes)},
            modularity=0.0,
        )

    orig_edge_weights, orig_degree = edge_weights, degree

    # membership[i] = current-level node that original node i belongs to
    membership = list(range(len(original_nodes)))
    nodes = list(membership)

    for _level in range(max_levels):
        node_comm, moved = _phase1_local_moving(
            nodes, edge_weights, degree, m, resolution, max_passes
        )
        if not moved:
            break

        if len(set(node_comm.values())) == len(nodes):
            # Nodes swapped places but nothing merged
            break

        nodes, edge_weights, degree, relabel = _coarsen_graph(
            nodes, edge_weights, degree, node_comm
        )
        membership = [relabel[node_comm[level_node]] for level_node in membership]

    renumber: dict[int, int] = {}
    for level_node in membership:
        renumber.setdefault(level_node, len(renumber))

    partition = {
        node: renumber[membership[i]] for i, node in enumerate(original_nodes)
    }
    index_comm = {i: renumber[membership[i]] for i in range(len(original_nodes))}
    modularity = compute_modularity(orig_edge_weights, orig_degree, index_comm, m, resolution)

    return CommunityPartition(partition=partition, modularity=modularity)


def compute_modularity(
    edge_weights: Mapping[tuple[int, int], float],
    degree: Mapping[int, float],
    node_comm: Mapping[int, int],
    m: float,
    resolution: float = 1.0,
) -> float:
    """Compute modularity Q = sum_c [L_c/m - resolution * (sigma_c/2m)^2].

    Where:
      L_c = total weight of edges within community c
      sigma_c = sum of degrees of nodes in community c
      m = total edge weight (sum of canonical edge weights)
    """
    if m == 0:
        return 0.0

    e_in = 0.0
    for (a, b), w in edge_weights.items():
        if node_comm.get(a) == node_comm.get(b):
            e_in += w

    sigma: dict[int, float] = {}
    for node, deg in degree.items():
        comm = node_comm.get(node)
        if comm is not None:
            sigma[comm] = sigma.get(comm, 0.0) + deg

    four_m_sq = 4.0 * m * m
    null_term = sum(s * s for s in sigma.values()) / four_m_sq
    return e_in / m - resolution * null_term


# ── Centrality and density ─────────────────────────────────────────


def compute_degree_centrality(graph: DependencyGraph) -> CentralityMaps:
    """Degree, in-degree and out-degree centrality, divided by max(1, n - 1).

    A self-loop counts once toward both the in- and the out-degree of its
    node. Graphs with fewer than two nodes get 0 everywhere.
    """
    nodes = graph.nodes()
    n = len(nodes)
    centrality = CentralityMaps()

    if n <= 1:
        for node in nodes:
            centrality.degree[node] = 0.0
            centrality.in_degree[node] = 0.0
            centrality.out_degree[node] = 0.0
        return centrality

    divisor = float(max(1, n - 1))
    for node in nodes:
        in_deg = graph.in_degree(node)
        out_deg = graph.out_degree(node)
        centrality.degree[node] = (in_deg + out_deg) / divisor
        centrality.in_degree[node] = in_deg / divisor
        centrality.out_degree[node] = out_deg / divisor

    return centrality


def compute_density(graph: DependencyGraph) -> float:
    """Fraction of the n * (n - 1) possible directed edges that exist.

    Self-loops are not among the possible edges, so they are not counted
    either. Fewer than two nodes gives 0.
    """
    n = graph.node_count()
    if n <= 1:
        return 0.0
    return (graph.edge_count() - graph.self_loop_count()) / float(n * (n - 1))


# ── Cycles ─────────────────────────────────────────────────────────


def _ordered_successors(adjacency: Mapping[str, Optional[Sequence[str]]]) -> dict[str, list[str]]:
    """Deduplicated successors restricted to known modules, declaration order kept."""
    successors: dict[str, list[str]] = {}
    for module, deps in adjacency.items():
        successors[module] = [d for d in dict.fromkeys(deps or ()) if d in adjacency]
    return successors


def tarjan_scc(successors: Mapping[str, Sequence[str]]) -> list[list[str]]:
    """Tarjan's algorithm for strongly connected components (iterative).

    Uses an explicit call stack to avoid Python recursion limits on deep
    dependency chains. Roots and neighbors are visited in mapping order.
    """
    counter = 0
    scc_stack: list[str] = []
    on_stack: set[str] = set()
    index: dict[str, int] = {}
    lowlink: dict[str, int] = {}
    result: list[list[str]] = []

    for root in successors:
        if root in index:
            continue

        index[root] = lowlink[root] = counter
        counter += 1
        scc_stack.append(root)
        on_stack.add(root)
        call_stack = [(root, iter(successors.get(root, ())))]

        while call_stack:
            v, it = call_stack[-1]
            pushed = False
            for w in it:
                if w not in index:
                    index[w] = lowlink[w] = counter
                    counter += 1
                    scc_stack.append(w)
                    on_stack.add(w)
                    call_stack.append((w, iter(successors.get(w, ()))))
                    pushed = True
                    break
                elif w in on_stack:
                    lowlink[v] = min(lowlink[v], index[w])

            if not pushed:
                call_stack.pop()
                if call_stack:
                    caller = call_stack[-1][0]
                    lowlink[caller] = min(lowlink[caller], lowlink[v])

                if lowlink[v] == index[v]:
                    component: list[str] = []
                    while True:
                        w = scc_stack.pop()
                        on_stack.discard(w)
                        component.append(w)
                        if w == v:
                            break
                    result.append(component)

    return result


def _representative_cycle(
    start: str, members: set[str], successors: Mapping[str, Sequence[str]]
) -> list[str]:
    """DFS inside one SCC for a simple path start -> ... -> v with v -> start."""
    single = len(members) == 1
    path = [start]
    visited = {start}
    stack = [iter(successors[start])]

    while stack:
        advanced = False
        for nxt in stack[-1]:
            if nxt == start and (single or len(path) > 1):
                return list(path)
            if nxt in members and nxt not in visited:
                visited.add(nxt)
                path.append(nxt)
                stack.append(iter(successors[nxt]))
                advanced = True
                break
        if not advanced:
            stack.pop()
            path.pop()

    return [start]


def find_circular_groups(adjacency: Mapping[str, Optional[Sequence[str]]]) -> list[list[str]]:
    """One representative circular dependency per cyclic SCC.

    An SCC is cyclic when it has more than one module, or is a single
    module importing itself. The cycle starts at the SCC's earliest
    declared module and is returned open (``[A, B, C]`` for A->B->C->A).
    Groups are ordered by their starting module's declaration order, and
    a module appears in at most one group.
    """
    successors = _ordered_successors(adjacency)
    position = {module: i for i, module in enumerate(successors)}

    groups: list[tuple[int, list[str]]] = []
    for component in tarjan_scc(successors):
        members = set(component)
        if len(members) == 1:
            (only,) = members
            if only not in successors[only]:
                continue
        start = min(members, key=position.__getitem__)
        groups.append((position[start], _representative_cycle(start, members, successors)))

    return [cycle for _, cycle in sorted(groups)]


# ── Extractor helpers ──────────────────────────────────────────────


def compute_orphans(adjacency: Mapping[str, Optional[Sequence[str]]]) -> list[str]:
    """Modules that no other module depends on, in declaration order."""
    depended_on: set[str] = set()
    for module, deps in adjacency.items():
        depended_on.update(d for d in deps or () if d != module)
    return [module for module in adjacency if module not in depended_on]


def compute_leaves(adjacency: Mapping[str, Optional[Sequence[str]]]) -> list[str]:
    """Modules that depend on nothing, in declaration order."""
    return [module for module, deps in adjacency.items() if not deps]
