"""Synonym groups: units that score as one underlying signal."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

from gmwcs.errors import ModelError
from gmwcs.graph.units import Unit


@dataclass(frozen=True)
class SynonymGroup:
    """Units that are interchangeable for scoring.

    The group contributes its canonical ``weight`` at most once, no matter
    how many members end up in a solution. Members may mix vertices and
    edges.

    Attributes:
        units: Members in declaration order.
        weight: Canonical weight of the group.
    """

    units: Tuple[Unit, ...]
    weight: float

    @classmethod
    def of(cls, units: Iterable[Unit], weight: Optional[float] = None) -> SynonymGroup:
        """Build a group; the canonical weight defaults to the first member's.

        Raises:
            ModelError: If the group is empty or lists a unit twice.
        """
        members = tuple(units)
        if not members:
            raise ModelError("A synonym group needs at least one unit.")
        if len(set(members)) != len(members):
            raise ModelError(f"Synonym group lists a unit twice: {[str(u) for u in members]}")
        if weight is None:
            weight = members[0].weight
        return cls(members, float(weight))

    def __len__(self) -> int:
        return len(self.units)

    def __iter__(self) -> Iterator[Unit]:
        return iter(self.units)


class Synonyms:
    """A collection of disjoint synonym groups.

    Units without a group behave as singleton groups carrying their own
    weight.
    """

    def __init__(self, groups: Iterable[SynonymGroup] = ()) -> None:
        self._groups: List[SynonymGroup] = []
        self._group_of: Dict[Unit, SynonymGroup] = {}
        for group in groups:
            self.add(group)

    def add(self, group: SynonymGroup) -> SynonymGroup:
        """Register a group.

        Raises:
            ModelError: If one of its units already belongs to another group.
        """
        for unit in group.units:
            if unit in self._group_of:
                raise ModelError(f"Unit {unit} already belongs to a synonym group.")
        self._groups.append(group)
        for unit in group.units:
            self._group_of[unit] = group
        return group

    def add_group(self, units: Iterable[Unit], weight: Optional[float] = None) -> SynonymGroup:
        """Create and register a group from ``units``."""
        return self.add(SynonymGroup.of(units, weight))

    def group_of(self, unit: Unit) -> Optional[SynonymGroup]:
        return self._group_of.get(unit)

    def groups(self) -> List[SynonymGroup]:
        return list(self._groups)

    def restricted_to(self, units: Iterable[Unit]) -> Synonyms:
        """Return groups narrowed to ``units``; emptied groups are dropped.

        Canonical weights are kept even when the first member is dropped.
        """
        present = set(units)
        narrowed = Synonyms()
        for group in self._groups:
            members = [unit for unit in group.units if unit in present]
            if members:
                narrowed.add(SynonymGroup(tuple(members), group.weight))
        return narrowed

    def __len__(self) -> int:
        return len(self._groups)

    def __iter__(self) -> Iterator[SynonymGroup]:
        return iter(self._groups)
