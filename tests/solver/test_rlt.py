"""
Tests for the flow/rank formulation.

This module contains tests for:
- Single-graph solves with and without a fixed root
- Lower bounds and time budget accounting
- Agreement with exhaustive search on random connected graphs
"""

import random

import pytest
from pytest import approx

from gmwcs.config import SolverOptions
from gmwcs.errors import ModelError
from gmwcs.graph import Graph, Node, Synonyms
from gmwcs.solver import PulpBackend, RLTModel, RLTSolver, SolveStatus
from gmwcs.time_limit import TimeLimit


def with_bonus(graph: Graph, root: Node, bonus: float) -> Graph:
    """Copy ``graph`` with ``bonus`` added to the weight of ``root``."""
    boosted = Graph()
    lookup = {}
    for node in graph.node_units():
        weight = node.weight + bonus if node == root else node.weight
        lookup[node] = Node(node.num, weight)
        boosted.add_node(lookup[node])
    for edge in graph.edge_units():
        source, target = graph.endpoints(edge)
        boosted.add_edge(lookup[source], lookup[target], edge)
    return boosted


class TestRLTModel:
    def test_objective_matches_weight(self, bowtie):
        model = RLTModel(bowtie, Synonyms(), SolverOptions(), PulpBackend()).build()
        solution = model.solve()
        assert model.status == SolveStatus.OPTIMAL
        assert solution.optimal
        assert solution.weight == approx(8)
        assert model.objective_value() == approx(solution.weight)

    def test_variables(self, path5):
        model = RLTModel(path5, Synonyms(), SolverOptions(), PulpBackend()).build()
        assert len(model.y) == 5
        assert len(model.w) == 4
        # Two opposite arcs per edge, each with a flow amount
        assert len(model.x) == 8
        assert set(model.x) == set(model.t)
        assert (Node(2), Node(1)) in model.x

    def test_tolerance_reads_selection(self, hexagon):
        options = SolverOptions(tolerance=0.4)
        model = RLTModel(hexagon, Synonyms(), options, PulpBackend()).build()
        solution = model.solve()
        assert solution.weight == approx(7)
        assert set(model.selected_units()) == set(solution.units)


class TestRLTSolver:
    def test_empty_graph(self):
        solution = RLTSolver().solve(Graph())
        assert solution.is_empty()
        assert solution.weight == 0

    def test_single_vertex(self, make_graph):
        assert RLTSolver().solve(make_graph([5], [])).weight == approx(5)

    def test_always_selects_a_vertex(self, make_graph):
        # The formulation picks a root even when every unit is negative
        solution = RLTSolver().solve(make_graph([-3, -5], [(1, 2, -1)]))
        assert solution.weight == approx(-3)
        assert solution.nodes == [Node(1)]

    def test_path(self, path5):
        solution = RLTSolver().solve(path5)
        assert solution.weight == approx(6)
        assert [n.num for n in solution.nodes] == [1, 2, 3]
        assert [e.num for e in solution.edges] == [1, 2]
        assert solution.is_connected(path5)

    def test_root_enforced(self, path5):
        solution = RLTSolver(SolverOptions(root=Node(5))).solve(path5)
        assert Node(5) in solution
        assert solution.weight == approx(2)

    def test_root_across_negative_vertex(self, path5):
        solution = RLTSolver(SolverOptions(root=Node(4))).solve(path5)
        assert Node(4) in solution
        assert solution.weight == approx(-2)
        assert solution.is_connected(path5)

    def test_unknown_root(self, path5):
        with pytest.raises(ModelError):
            RLTSolver(SolverOptions(root=Node(99))).solve(path5)

    def test_unreachable_lower_bound(self, bowtie):
        solver = RLTSolver(SolverOptions(lower_bound=100))
        assert solver.solve(bowtie) is None
        assert solver.status == SolveStatus.INFEASIBLE

    def test_reachable_lower_bound(self, bowtie):
        solution = RLTSolver(SolverOptions(lower_bound=8)).solve(bowtie)
        assert solution.weight == approx(8)

    def test_time_spent(self, bowtie):
        budget = TimeLimit(60)
        RLTSolver(SolverOptions(time_limit=budget)).solve(bowtie)
        assert budget.remaining() < 60

    def test_exhausted_budget_still_runs(self, make_graph):
        budget = TimeLimit(0)
        solver = RLTSolver(SolverOptions(time_limit=budget))
        solver.solve(make_graph([1, 1], [(1, 2, 1)]))
        assert solver.status is not None
        assert budget.remaining() == 0

    def test_backend_per_solve(self, bowtie):
        created = []

        def factory():
            created.append(PulpBackend())
            return created[-1]

        solver = RLTSolver(backend_factory=factory)
        solver.solve(bowtie)
        solver.solve(bowtie)
        assert len(created) == 2
        assert created[0] is not created[1]

    @pytest.mark.parametrize("case", range(25))
    def test_unrooted_matches_exhaustive(self, case, random_connected, reference):
        graph = random_connected(random.Random(case), 1 + case % 12)
        expected, _ = reference(graph)

        solution = RLTSolver().solve(graph)

        assert solution.is_connected(graph)
        assert max(solution.weight, 0) == approx(expected)

    @pytest.mark.parametrize("case", range(25))
    def test_rooted_matches_exhaustive(self, case, random_connected, reference):
        rng = random.Random(1000 + case)
        graph = random_connected(rng, 2 + case % 11)
        root = rng.choice(graph.node_units())
        bonus = 1000
        expected, _ = reference(with_bonus(graph, root, bonus))

        solution = RLTSolver(SolverOptions(root=root)).solve(graph)

        assert root in solution
        assert solution.is_connected(graph)
        assert solution.weight == approx(expected - bonus)
