"""Convenience entry point for solving a graph in one call."""

from __future__ import annotations

from typing import Callable, Optional

from gmwcs.config import SolverOptions
from gmwcs.graph.graph import Graph
from gmwcs.graph.synonyms import Synonyms
from gmwcs.solver.backend import Backend, PulpBackend
from gmwcs.solver.bicomponent import BicomponentSolver
from gmwcs.solver.solution import Solution


def solve(
    graph: Graph,
    synonyms: Optional[Synonyms] = None,
    options: Optional[SolverOptions] = None,
    backend_factory: Callable[[], Backend] = PulpBackend,
) -> Optional[Solution]:
    """Find a maximum weight connected subgraph of ``graph``.

    Example:
        graph = Graph()
        a, b = Node(1, 4.0), Node(2, -1.0)
        graph.add_node(a)
        graph.add_node(b)
        graph.add_edge(a, b, Edge(1, 3.0))
        solve(graph).weight  # 6.0

    Args:
        graph: Input graph; not modified.
        synonyms: Groups of units scored once.
        options: Time limit, threads, fixed root, lower bound, callback.
        backend_factory: MILP backend to use for every sub-solve.

    Returns:
        The optimal (or best within the time limit) solution, possibly empty;
        None only when ``options.lower_bound`` cannot be reached.
    """
    return BicomponentSolver(options, backend_factory).solve(graph, synonyms)
