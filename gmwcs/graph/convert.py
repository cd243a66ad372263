"""Conversion between plain NetworkX graphs and unit `Graph` objects.

Example:
    >>> import networkx as nx
    >>> G = nx.Graph()
    >>> G.add_node("a", weight=3.0)
    >>> G.add_node("b", weight=-1.0)
    >>> G.add_edge("a", "b", weight=2.0)
    >>> graph, node_map = from_networkx(G)
    >>> node_map["a"].weight
    3.0
"""

from __future__ import annotations

from typing import Dict, Hashable, Tuple

import networkx as nx

from gmwcs.errors import ModelError
from gmwcs.graph.graph import Graph
from gmwcs.graph.units import Edge, Node


def from_networkx(
    nx_graph: nx.Graph, weight: str = "weight", default: float = 0.0
) -> Tuple[Graph, Dict[Hashable, Node]]:
    """Build a `Graph` from an undirected NetworkX graph.

    Nodes and edges are numbered from 1 in NetworkX iteration order; the
    original node labels are kept in the ``label`` node attribute and in the
    returned mapping.

    Args:
        nx_graph: Undirected simple graph with optional weight attributes.
        weight: Attribute name holding vertex and edge weights.
        default: Weight used when the attribute is absent.

    Returns:
        The converted graph and a mapping from original labels to `Node` units.

    Raises:
        ModelError: For directed graphs, multigraphs or self-loops.
    """
    if nx_graph.is_directed() or nx_graph.is_multigraph():
        raise ModelError("Only undirected simple graphs can be converted.")

    graph = Graph()
    node_map: Dict[Hashable, Node] = {}
    for num, (label, data) in enumerate(nx_graph.nodes(data=True), start=1):
        node = Node(num, float(data.get(weight, default)))
        graph.add_node(node, label=label)
        node_map[label] = node

    for num, (u, v, data) in enumerate(nx_graph.edges(data=True), start=1):
        graph.add_edge(node_map[u], node_map[v], Edge(num, float(data.get(weight, default))))
    return graph, node_map


def to_networkx(graph: Graph, weight: str = "weight") -> nx.Graph:
    """Convert a `Graph` to a plain NetworkX graph keyed by original labels.

    Nodes without a ``label`` attribute are keyed by their ``num``.
    """
    nx_graph = nx.Graph()
    labels: Dict[Node, Hashable] = {}
    for node in graph.node_units():
        label = graph.nodes[node].get("label", node.num)
        labels[node] = label
        nx_graph.add_node(label, **{weight: node.weight, "num": node.num})
    for edge in graph.edge_units():
        source, target = graph.endpoints(edge)
        nx_graph.add_edge(labels[source], labels[target], **{weight: edge.weight, "num": edge.num})
    return nx_graph
