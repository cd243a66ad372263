"""Weighted units: the vertices and edges that contribute to the objective."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Unit:
    """A weighted graph element with an ordinal identity.

    Equality and hashing use the concrete class and ``num`` only, so a
    ``Node`` and an ``Edge`` with the same number are distinct units. Units
    order by ``(weight, num)``.

    Attributes:
        num: Ordinal identity, unique among units of the same kind.
        weight: Contribution to the objective; may be negative.
    """

    num: int
    weight: float = field(default=0.0, compare=False)

    def __lt__(self, other: Unit) -> bool:
        if not isinstance(other, Unit):
            return NotImplemented
        return (self.weight, self.num) < (other.weight, other.num)

    def __str__(self) -> str:
        return f"{type(self).__name__.lower()}{self.num}({self.weight:g})"


@dataclass(frozen=True)
class Node(Unit):
    """A vertex."""


@dataclass(frozen=True)
class Edge(Unit):
    """An undirected edge; its endpoints are held by the graph."""
