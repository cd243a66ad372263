"""gmwcs: Generalized Maximum Weight Connected Subgraph solver.

Finds a connected subgraph of a vertex- and edge-weighted undirected graph
with maximum total weight, counting each synonym group at most once. The
problem is written as a flow/rank mixed-integer program, tightened with
block-cut tree decomposition and minimum vertex cuts, and solved by an
external MILP backend (CBC through PuLP by default).

Example:
    from gmwcs import Edge, Graph, Node, solve

    graph = Graph()
    a, b, c = Node(1, 5.0), Node(2, -2.0), Node(3, 4.0)
    for node in (a, b, c):
        graph.add_node(node)
    graph.add_edge(a, b, Edge(1, 0.0))
    graph.add_edge(b, c, Edge(2, 0.0))

    solution = solve(graph)
    solution.weight  # 7.0
"""

from __future__ import annotations

from gmwcs import logging
from gmwcs._version import __version__
from gmwcs.config import DEFAULT_TOLERANCE, SolverOptions
from gmwcs.decomposition import BlockDecomposition, Cut, SupportGraph, decompose
from gmwcs.errors import (
    GMWCSError,
    ModelError,
    SolverError,
    SolverInternalError,
    SolverUnavailable,
)
from gmwcs.graph import (
    Edge,
    Graph,
    Node,
    SynonymGroup,
    Synonyms,
    Unit,
    from_networkx,
    to_dot,
    to_networkx,
)
from gmwcs.solver import (
    BicomponentSolver,
    PulpBackend,
    RLTSolver,
    Solution,
    solve,
    total_weight,
)
from gmwcs.time_limit import TimeLimit

__all__ = [
    # Version
    "__version__",
    # Model
    "Graph",
    "Node",
    "Edge",
    "Unit",
    "Synonyms",
    "SynonymGroup",
    # Solving (primary API)
    "solve",
    "SolverOptions",
    "TimeLimit",
    "Solution",
    "total_weight",
    "BicomponentSolver",
    "RLTSolver",
    "PulpBackend",
    "DEFAULT_TOLERANCE",
    # Decomposition
    "decompose",
    "BlockDecomposition",
    "SupportGraph",
    "Cut",
    # Errors
    "GMWCSError",
    "ModelError",
    "SolverError",
    "SolverUnavailable",
    "SolverInternalError",
    # Library integrations (NetworkX, DOT)
    "from_networkx",
    "to_networkx",
    "to_dot",
    # Utilities
    "logging",
]
