"""Graph model: weighted units, the strict unit graph and synonym groups."""

from gmwcs.graph.convert import from_networkx, to_networkx
from gmwcs.graph.dot import to_dot
from gmwcs.graph.graph import Graph
from gmwcs.graph.synonyms import SynonymGroup, Synonyms
from gmwcs.graph.units import Edge, Node, Unit

__all__ = [
    "Edge",
    "Graph",
    "Node",
    "SynonymGroup",
    "Synonyms",
    "Unit",
    "from_networkx",
    "to_dot",
    "to_networkx",
]
