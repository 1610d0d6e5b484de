"""Tests for Louvain communities, centrality, density and cycle groups."""

import pytest

from modularity_insight.graph.algorithms import (
    compute_degree_centrality,
    compute_density,
    compute_leaves,
    compute_modularity,
    compute_orphans,
    find_circular_groups,
    louvain,
    tarjan_scc,
)


class TestLouvain:
    def test_empty_graph(self, build_graph):
        result = louvain(build_graph({}))
        assert result.partition == {}
        assert result.modularity == 0.0

    def test_graph_without_edges_keeps_singletons(self, build_graph):
        result = louvain(build_graph({"a": [], "b": [], "c": []}))
        assert result.partition == {"a": 0, "b": 1, "c": 2}
        assert result.modularity == 0.0

    def test_disconnected_pairs_split(self, build_graph, two_pairs_adjacency):
        result = louvain(build_graph(two_pairs_adjacency))
        partition = result.partition
        assert partition["A"] == partition["B"]
        assert partition["C"] == partition["D"]
        assert partition["A"] != partition["C"]
        assert result.modularity > 0

    def test_disconnected_pairs_modularity_value(self, build_graph, two_pairs_adjacency):
        graph = build_graph(two_pairs_adjacency)
        assert louvain(graph, resolution=1.0).modularity == pytest.approx(0.5)
        assert louvain(graph, resolution=0.8).modularity == pytest.approx(0.6)

    def test_two_cliques_found(self, build_graph, two_cliques_adjacency):
        result = louvain(build_graph(two_cliques_adjacency), resolution=0.8)
        assert result.community_count == 2
        assert {result.partition[f"a{i}"] for i in range(1, 5)} == {0}
        assert {result.partition[f"b{i}"] for i in range(1, 5)} == {1}
        assert result.modularity > 0.4

    def test_every_node_in_exactly_one_community(self, build_graph, two_cliques_adjacency):
        graph = build_graph(two_cliques_adjacency)
        result = louvain(graph)
        assert list(result.partition) == graph.nodes()
        members = [m for community in result.communities for m in community.members]
        assert sorted(members) == sorted(graph.nodes())

    def test_ids_numbered_by_first_member(self, build_graph, two_pairs_adjacency):
        result = louvain(build_graph(two_pairs_adjacency))
        assert result.partition == {"A": 0, "B": 0, "C": 1, "D": 1}

    def test_deterministic(self, build_graph, two_cliques_adjacency):
        first = louvain(build_graph(two_cliques_adjacency), resolution=0.8)
        second = louvain(build_graph(two_cliques_adjacency), resolution=0.8)
        assert first.partition == second.partition
        assert first.modularity == second.modularity

    def test_resolution_controls_granularity(self, build_graph, two_cliques_adjacency):
        graph = build_graph(two_cliques_adjacency)
        coarse = louvain(graph, resolution=0.05).community_count
        default = louvain(graph, resolution=0.8).community_count
        fine = louvain(graph, resolution=10.0).community_count
        assert coarse <= default <= fine
        assert fine == graph.node_count()

    def test_self_loop_does_not_break_detection(self, build_graph):
        result = louvain(build_graph({"a": ["a", "b"], "b": [], "c": ["d"], "d": []}))
        assert result.partition["a"] == result.partition["b"]
        assert result.partition["c"] == result.partition["d"]

    @pytest.mark.slow
    def test_large_ring_of_cliques(self, build_graph):
        adjacency = {}
        for c in range(40):
            names = [f"c{c}_{i}" for i in range(5)]
            for i, name in enumerate(names):
                adjacency[name] = names[i + 1 :]
            adjacency[names[-1]] = [f"c{(c + 1) % 40}_0"]
        result = louvain(build_graph(adjacency), resolution=1.0)
        assert result.community_count >= 20
        assert result.modularity > 0.7


class TestComputeModularity:
    def test_no_edges(self):
        assert compute_modularity({}, {0: 0.0}, {0: 0}, 0.0) == 0.0

    def test_single_community_is_zero_at_unit_resolution(self):
        # One edge 0-1, both in the same community: Q = 1 - (2/2)^2
        assert compute_modularity({(0, 1): 1.0}, {0: 1.0, 1: 1.0}, {0: 0, 1: 0}, 1.0) == 0.0


class TestDegreeCentrality:
    def test_hub(self, build_graph, hub_adjacency):
        centrality = compute_degree_centrality(build_graph(hub_adjacency))
        assert centrality.in_degree["H"] == 1.0
        assert centrality.out_degree["H"] == 0.0
        assert centrality.degree["H"] == 1.0
        assert centrality.degree["X"] == pytest.approx(1 / 3)

    def test_single_node_all_zero(self, build_graph):
        centrality = compute_degree_centrality(build_graph({"only": ["only"]}))
        assert centrality.degree == {"only": 0.0}
        assert centrality.in_degree == {"only": 0.0}
        assert centrality.out_degree == {"only": 0.0}

    def test_empty_graph(self, build_graph):
        centrality = compute_degree_centrality(build_graph({}))
        assert centrality.degree == {}

    def test_self_loop_counts_once_each_way(self, build_graph):
        centrality = compute_degree_centrality(build_graph({"a": ["a", "b"], "b": []}))
        assert centrality.in_degree["a"] == 1.0
        assert centrality.out_degree["a"] == 2.0

    def test_in_and_out_within_unit_range(self, build_graph, two_cliques_adjacency):
        centrality = compute_degree_centrality(build_graph(two_cliques_adjacency))
        for values in (centrality.in_degree, centrality.out_degree, centrality.degree):
            assert all(0.0 <= v <= 1.0 for v in values.values())


class TestDensity:
    def test_complete_directed_triangle(self, build_graph, complete_adjacency):
        assert compute_density(build_graph(complete_adjacency)) == 1.0

    @pytest.mark.parametrize("adjacency", [{}, {"a": []}, {"a": ["a"]}])
    def test_zero_or_one_node(self, build_graph, adjacency):
        assert compute_density(build_graph(adjacency)) == 0.0

    def test_self_loops_not_counted(self, build_graph):
        assert compute_density(build_graph({"a": ["a", "b"], "b": []})) == 0.5

    def test_within_bounds(self, build_graph, two_cliques_adjacency):
        density = compute_density(build_graph(two_cliques_adjacency))
        assert 0.0 <= density <= 1.0
        assert density == pytest.approx(13 / 56)


class TestCircularGroups:
    def test_three_cycle(self, cycle_adjacency):
        assert find_circular_groups(cycle_adjacency) == [["A", "B", "C"]]

    def test_acyclic(self, hub_adjacency):
        assert find_circular_groups(hub_adjacency) == []

    def test_self_import(self):
        assert find_circular_groups({"a": ["a"], "b": ["a"]}) == [["a"]]

    def test_disjoint_groups_in_declaration_order(self):
        adjacency = {"e": [], "c": ["d"], "d": ["c"], "a": ["b"], "b": ["a"]}
        assert find_circular_groups(adjacency) == [["c", "d"], ["a", "b"]]

    def test_one_group_per_component(self):
        # A <-> B and B <-> C share B; one representative cycle is reported
        adjacency = {"A": ["B"], "B": ["A", "C"], "C": ["B"]}
        groups = find_circular_groups(adjacency)
        assert groups == [["A", "B"]]

    def test_module_in_at_most_one_group(self, two_cliques_adjacency):
        adjacency = dict(two_cliques_adjacency)
        adjacency["a4"] = ["b1", "a1"]
        adjacency["b4"] = ["b1"]
        groups = find_circular_groups(adjacency)
        flat = [m for group in groups for m in group]
        assert len(flat) == len(set(flat))
        assert len(groups) == 2

    def test_each_member_depends_on_next(self):
        adjacency = {"a": ["b", "x"], "b": ["c"], "c": ["d", "a"], "d": ["b"], "x": []}
        (group,) = find_circular_groups(adjacency)
        for current, following in zip(group, group[1:] + group[:1]):
            assert following in adjacency[current]

    def test_unknown_targets_ignored(self):
        assert find_circular_groups({"a": ["missing"], "b": None}) == []

    def test_long_chain_does_not_recurse(self):
        size = 5000
        adjacency = {f"m{i}": [f"m{i + 1}"] for i in range(size - 1)}
        adjacency[f"m{size - 1}"] = ["m0"]
        (group,) = find_circular_groups(adjacency)
        assert len(group) == size
        assert group[0] == "m0"


class TestTarjanScc:
    def test_components_partition_nodes(self):
        successors = {"a": ["b"], "b": ["a"], "c": ["a"], "d": []}
        components = [set(c) for c in tarjan_scc(successors)]
        assert {"a", "b"} in components
        assert {"c"} in components
        assert {"d"} in components
        assert sum(len(c) for c in components) == 4


class TestOrphansAndLeaves:
    def test_hub(self, hub_adjacency):
        assert compute_orphans(hub_adjacency) == ["X", "Y", "Z"]
        assert compute_leaves(hub_adjacency) == ["H"]

    def test_self_import_still_orphan(self):
        assert compute_orphans({"a": ["a"]}) == ["a"]
        assert compute_leaves({"a": ["a"]}) == []
