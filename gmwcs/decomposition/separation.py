"""Minimum vertex cuts between a root and a target inside one block.

`SupportGraph` splits every vertex ``v`` into ``(v, IN) -> (v, OUT)`` with
unit capacity and turns every undirected edge into two uncapacitated arcs
``(u, OUT) -> (v, IN)`` and ``(v, OUT) -> (u, IN)``. A maximum flow from the
root's out-copy to the target's in-copy then saturates a minimum vertex cut.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet

import networkx as nx
from networkx.algorithms.flow import edmonds_karp

from gmwcs.graph.graph import Graph
from gmwcs.graph.units import Node

IN = "in"
OUT = "out"


@dataclass(frozen=True)
class Cut:
    """Minimum vertex cut separating a root from a target.

    Every path from the root to a vertex of ``sink`` passes through ``cut``,
    so ``y_r <= sum(y_c for c in cut)`` holds for every ``r`` in ``sink``
    whenever the root is selected.

    Attributes:
        cut: Vertices of the minimum cut.
        sink: Vertices strictly behind the cut, the target included.
    """

    cut: FrozenSet[Node]
    sink: FrozenSet[Node]


class SupportGraph:
    """Vertex-split flow network of a block, built once per block."""

    def __init__(self, graph: Graph) -> None:
        self._graph = graph
        self._network = nx.DiGraph()
        for node in graph.node_units():
            self._network.add_edge((node, IN), (node, OUT), capacity=1)
        for edge in graph.edge_units():
            u, v = graph.endpoints(edge)
            # No capacity attribute means infinite capacity
            self._network.add_edge((u, OUT), (v, IN))
            self._network.add_edge((v, OUT), (u, IN))

    @property
    def graph(self) -> Graph:
        return self._graph

    def find_cut(self, root: Node, target: Node) -> Cut:
        """Compute a minimum vertex cut between ``root`` and ``target``.

        Args:
            root: Vertex on the source side.
            target: Vertex to separate; must be reachable from ``root`` and
                not adjacent to it.

        Returns:
            Cut: The cut vertices and the vertices behind them.

        Raises:
            ValueError: If a precondition does not hold.
        """
        if root not in self._graph or target not in self._graph:
            raise ValueError(f"Both {root} and {target} must belong to the support graph.")
        if root == target:
            raise ValueError(f"Root and target are the same vertex {root}.")
        if self._graph.has_edge(root, target):
            raise ValueError(f"Target {target} is adjacent to root {root}.")
        if not nx.has_path(self._graph, root, target):
            raise ValueError(f"Target {target} is unreachable from root {root}.")

        source = (root, OUT)
        residual = edmonds_karp(self._network, source, (target, IN))
        # Cut closest to the root: copies reachable over unsaturated arcs
        unsaturated = nx.subgraph_view(
            residual,
            filter_edge=lambda u, v: residual[u][v]["flow"] < residual[u][v]["capacity"],
        )
        reachable = nx.descendants(unsaturated, source) | {source}
        cut = set()
        sink = set()
        for node in self._graph.nodes:
            if node == root:
                continue
            head = (node, IN) in reachable
            tail = (node, OUT) in reachable
            if head and not tail:
                cut.add(node)
            elif not head and not tail:
                sink.add(node)
        return Cut(frozenset(cut), frozenset(sink))
