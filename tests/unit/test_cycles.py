"""
Unit tests for cycle detection.

Tests cover:
- Simple, long and self-loop cycles
- DAGs and empty graphs
- Disconnected components
- Independence from input ordering
- Deep chains (no recursion limit)
"""

import itertools

import pytest

from concept_graph.graph.cycles import build_adjacency, find_cycle, has_cycle


class TestHasCycle:
    """Tests for has_cycle()."""

    def test_detects_three_node_cycle(self):
        edges = [("A", "B"), ("B", "C"), ("C", "A")]

        assert has_cycle(["A", "B", "C"], edges) is True

    def test_detects_self_loop(self):
        assert has_cycle(["A"], [("A", "A")]) is True

    def test_detects_long_cycle(self):
        nodes = ["A", "B", "C", "D", "E"]
        edges = list(zip(nodes, nodes[1:] + nodes[:1]))

        assert has_cycle(nodes, edges) is True

    def test_returns_false_for_dag(self):
        edges = [
            ("variables", "functions"),
            ("variables", "loops"),
            ("functions", "recursion"),
        ]

        assert has_cycle(["variables", "functions", "loops", "recursion"], edges) is False

    def test_returns_false_for_empty_graph(self):
        assert has_cycle([], []) is False
        assert has_cycle(["A", "B"], []) is False

    def test_diamond_is_not_a_cycle(self):
        edges = [("A", "B"), ("A", "C"), ("B", "D"), ("C", "D")]

        assert has_cycle(["A", "B", "C", "D"], edges) is False

    def test_finds_cycle_in_disconnected_component(self):
        nodes = ["A", "B", "X", "Y"]
        edges = [("A", "B"), ("X", "Y"), ("Y", "X")]

        assert has_cycle(nodes, edges) is True

    def test_nodes_only_in_edges_are_visited(self):
        assert has_cycle([], [("A", "B"), ("B", "A")]) is True

    @pytest.mark.parametrize(
        "edges",
        list(itertools.permutations([("A", "B"), ("B", "C"), ("C", "A"), ("D", "A")])),
    )
    def test_result_does_not_depend_on_edge_order(self, edges):
        assert has_cycle(["D", "C", "B", "A"], list(edges)) is True

    def test_handles_deep_chains(self):
        nodes = list(range(5000))
        edges = list(zip(nodes, nodes[1:]))

        assert has_cycle(nodes, edges) is False
        assert has_cycle(nodes, edges + [(4999, 0)]) is True


class TestFindCycle:
    """Tests for find_cycle() diagnostics."""

    def test_returns_cycle_members(self):
        cycle = find_cycle(["A", "B", "C", "D"], [("A", "B"), ("B", "C"), ("C", "A"), ("C", "D")])

        assert set(cycle) == {"A", "B", "C"}

    def test_returns_none_when_acyclic(self):
        assert find_cycle(["A", "B"], [("A", "B")]) is None


class TestBuildAdjacency:
    """Tests for build_adjacency()."""

    def test_includes_isolated_nodes_and_targets(self):
        adjacency = build_adjacency(["A", "Z"], [("A", "B")])

        assert adjacency == {"A": ["B"], "Z": [], "B": []}
