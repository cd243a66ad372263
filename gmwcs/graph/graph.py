"""Strict undirected graph of weighted units.

`Graph` extends `networkx.Graph` so that vertices are `Node` units and every
networkx edge carries its `Edge` unit under the ``unit`` attribute. The class
rejects the inputs the solver cannot model (self-loops, parallel edges,
dangling endpoints, duplicate units) and remembers the orientation each edge
was added with, which is used only for naming and indexing arc variables.
"""

from __future__ import annotations

from pickle import dumps, loads
from typing import Any, Dict, Iterable, Iterator, List, Optional, Set, Tuple

import networkx as nx

from gmwcs.errors import ModelError
from gmwcs.graph.units import Edge, Node, Unit

#: Edge attribute holding the `Edge` unit.
UNIT_ATTR = "unit"


class Graph(nx.Graph):
    """An undirected simple graph over `Node` units with `Edge` units.

    This class enforces:
      - No automatic creation of missing nodes when adding an edge.
      - No duplicate nodes and no duplicate edge units.
      - No self-loops and no parallel edges.
      - Removing non-existent nodes raises `ModelError`.
    """

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        # Edge unit -> (source, target) in insertion orientation
        self._ends: Dict[Edge, Tuple[Node, Node]] = {}

    def copy(self, as_view: bool = False, pickle: bool = True) -> Graph:
        """Create a copy of this graph.

        By default a pickle-based deep copy is made, which also preserves edge
        orientation. With ``pickle=False`` the networkx copy (or view) is used.
        """
        if not pickle:
            return super().copy(as_view=as_view)  # type: ignore[return-value]
        return loads(dumps(self))

    #
    # Node management
    #
    def add_node(self, node_for_adding: Node, **attr: Any) -> None:
        """Add a single node, disallowing duplicates.

        Raises:
            ModelError: If the node is not a `Node` or already exists.
        """
        if not isinstance(node_for_adding, Node):
            raise ModelError(f"Vertices must be Node units, got {node_for_adding!r}")
        if node_for_adding in self:
            raise ModelError(f"Node {node_for_adding} already exists in this graph.")
        super().add_node(node_for_adding, **attr)

    def add_nodes_from(self, nodes_for_adding: Iterable[Node], **attr: Any) -> None:
        for node in nodes_for_adding:
            self.add_node(node, **attr)

    def remove_node(self, n: Node) -> None:
        """Remove a node together with its incident edges.

        Raises:
            ModelError: If the node does not exist.
        """
        if n not in self:
            raise ModelError(f"Node {n} does not exist.")
        for edge in list(self.edges_of(n)):
            del self._ends[edge]
        super().remove_node(n)

    #
    # Edge management
    #
    def add_edge(  # pyright: ignore[reportIncompatibleMethodOverride]
        self, u_of_edge: Node, v_of_edge: Node, edge: Edge, **attr: Any
    ) -> Edge:
        """Connect two existing nodes with the given `Edge` unit.

        Args:
            u_of_edge: Source endpoint. Must exist in the graph.
            v_of_edge: Target endpoint. Must exist in the graph.
            edge: The edge unit; must not be used elsewhere in the graph.
            **attr: Extra networkx edge attributes.

        Returns:
            Edge: The added edge unit.

        Raises:
            ModelError: On missing endpoints, self-loops, parallel edges or a
                reused edge unit.
        """
        if not isinstance(edge, Edge):
            raise ModelError(f"Edges must be Edge units, got {edge!r}")
        if u_of_edge not in self:
            raise ModelError(f"Source node {u_of_edge} does not exist.")
        if v_of_edge not in self:
            raise ModelError(f"Target node {v_of_edge} does not exist.")
        if u_of_edge == v_of_edge:
            raise ModelError(f"Self-loop on {u_of_edge} is not allowed.")
        if self.has_edge(u_of_edge, v_of_edge):
            raise ModelError(
                f"Parallel edge between {u_of_edge} and {v_of_edge} is not allowed."
            )
        if edge in self._ends:
            raise ModelError(f"Edge {edge} already exists in this graph.")

        super().add_edge(u_of_edge, v_of_edge, **{UNIT_ATTR: edge, **attr})
        self._ends[edge] = (u_of_edge, v_of_edge)
        return edge

    def add_edges_from(self, ebunch_to_add: Iterable[Tuple[Node, Node, Edge]], **attr: Any) -> None:
        for u, v, edge in ebunch_to_add:
            self.add_edge(u, v, edge, **attr)

    def remove_edge(self, u: Node, v: Node) -> None:
        """Remove the edge between ``u`` and ``v``.

        Raises:
            ModelError: If no such edge exists.
        """
        if not self.has_edge(u, v):
            raise ModelError(f"No edge between {u} and {v} to remove.")
        del self._ends[self[u][v][UNIT_ATTR]]
        super().remove_edge(u, v)

    #
    # Unit accessors
    #
    def node_units(self) -> List[Node]:
        """Return the vertices sorted by ``num``."""
        return sorted(self.nodes, key=lambda node: node.num)

    def edge_units(self) -> List[Edge]:
        """Return the edge units sorted by ``num``."""
        return sorted(self._ends, key=lambda edge: edge.num)

    def units(self) -> List[Unit]:
        """Return all vertices followed by all edges."""
        return [*self.node_units(), *self.edge_units()]

    def has_unit(self, unit: Unit) -> bool:
        if isinstance(unit, Node):
            return unit in self
        return unit in self._ends

    def edge_between(self, u: Node, v: Node) -> Optional[Edge]:
        """Return the edge unit connecting ``u`` and ``v``, or None."""
        data = self.get_edge_data(u, v)
        return None if data is None else data[UNIT_ATTR]

    def edges_of(self, node: Node) -> Iterator[Edge]:
        """Iterate over edge units incident to ``node``."""
        for data in self._adj[node].values():
            yield data[UNIT_ATTR]

    def edge_source(self, edge: Edge) -> Node:
        return self._ends[edge][0]

    def edge_target(self, edge: Edge) -> Node:
        return self._ends[edge][1]

    def endpoints(self, edge: Edge) -> Tuple[Node, Node]:
        """Return ``(source, target)`` of an edge unit.

        Raises:
            ModelError: If the edge is not in the graph.
        """
        try:
            return self._ends[edge]
        except KeyError:
            raise ModelError(f"Edge {edge} is not in this graph.") from None

    def opposite(self, edge: Edge, node: Node) -> Node:
        """Return the endpoint of ``edge`` that is not ``node``."""
        source, target = self.endpoints(edge)
        if node == source:
            return target
        if node == target:
            return source
        raise ModelError(f"Node {node} is not an endpoint of {edge}.")

    #
    # Derived graphs
    #
    def induced(self, nodes: Iterable[Node]) -> Graph:
        """Return a strict copy of the subgraph induced by ``nodes``.

        Edge orientation is preserved; units are shared with this graph.
        """
        keep: Set[Node] = set(nodes)
        missing = keep.difference(self.nodes)
        if missing:
            raise ModelError(f"Nodes {sorted(missing, key=lambda n: n.num)} are not in this graph.")
        sub = Graph()
        for node in self.node_units():
            if node in keep:
                sub.add_node(node, **self.nodes[node])
        for edge in self.edge_units():
            source, target = self._ends[edge]
            if source in keep and target in keep:
                sub.add_edge(source, target, edge)
        return sub

    def without(self, nodes: Iterable[Node]) -> Graph:
        """Return a copy of this graph with ``nodes`` removed."""
        drop = set(nodes)
        return self.induced(node for node in self.nodes if node not in drop)

    def connected_components(self) -> List[List[Node]]:
        """Return connected components, each sorted by ``num``.

        Components are ordered by the smallest ``num`` they contain.
        """
        components = [
            sorted(component, key=lambda node: node.num)
            for component in nx.connected_components(self)
        ]
        components.sort(key=lambda component: component[0].num)
        return components
