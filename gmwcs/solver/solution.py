"""Solution container and weight accounting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, List, Optional, Tuple

import networkx as nx

from gmwcs.graph.graph import Graph
from gmwcs.graph.synonyms import Synonyms
from gmwcs.graph.units import Edge, Node, Unit


def total_weight(units: Optional[Iterable[Unit]], synonyms: Optional[Synonyms] = None) -> float:
    """Sum unit weights, counting each synonym group once.

    A group present in ``units`` contributes its canonical weight a single
    time no matter how many of its members appear. ``None`` sums to zero.
    """
    if units is None:
        return 0.0
    total = 0.0
    counted = set()
    for unit in units:
        group = synonyms.group_of(unit) if synonyms is not None else None
        if group is None:
            total += unit.weight
        elif group not in counted:
            counted.add(group)
            total += group.weight
    return total


@dataclass(frozen=True)
class Solution:
    """Selected units forming a connected subgraph.

    Attributes:
        units: Selected vertices followed by selected edges.
        weight: Collapsed total weight of ``units``.
        optimal: False if any contributing solve stopped at the time limit.
    """

    units: Tuple[Unit, ...] = ()
    weight: float = 0.0
    optimal: bool = True

    @classmethod
    def empty(cls, optimal: bool = True) -> Solution:
        return cls((), 0.0, optimal)

    @classmethod
    def of(
        cls, units: Iterable[Unit], synonyms: Optional[Synonyms] = None, optimal: bool = True
    ) -> Solution:
        selected = tuple(units)
        return cls(selected, total_weight(selected, synonyms), optimal)

    @property
    def nodes(self) -> List[Node]:
        return [unit for unit in self.units if isinstance(unit, Node)]

    @property
    def edges(self) -> List[Edge]:
        return [unit for unit in self.units if isinstance(unit, Edge)]

    def is_empty(self) -> bool:
        return not self.units

    def is_connected(self, graph: Graph) -> bool:
        """Check that the selected vertices and edges form one component.

        Edges whose endpoints are not both selected make the check fail.
        """
        if not self.units:
            return True
        nodes = set(self.nodes)
        selected = nx.Graph()
        selected.add_nodes_from(nodes)
        for edge in self.edges:
            source, target = graph.endpoints(edge)
            if source not in nodes or target not in nodes:
                return False
            selected.add_edge(source, target)
        return selected.number_of_nodes() > 0 and nx.is_connected(selected)

    def __len__(self) -> int:
        return len(self.units)

    def __iter__(self) -> Iterator[Unit]:
        return iter(self.units)

    def __contains__(self, unit: object) -> bool:
        return unit in self.units
