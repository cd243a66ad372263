"""Collapse synonym groups into objective terms.

A group with more than one member gets one auxiliary binary ``s``:

- positive canonical weight: ``s <= sum(members)``. Maximization switches
  ``s`` on as soon as one member is selected, and the weight is earned once.
- non-positive canonical weight: ``|group| * s >= sum(members)``. Any selected
  member forces ``s`` on, so the penalty is charged once per group rather than
  once per member.

The two directions are deliberately different and must stay that way.
Singleton groups and ungrouped units use their own indicator.
"""

from __future__ import annotations

from typing import Any, Dict, List, Sequence, Tuple

from gmwcs.graph.synonyms import Synonyms
from gmwcs.graph.units import Unit
from gmwcs.solver.backend import Backend

Term = Tuple[float, Any]


def collapse(
    backend: Backend,
    units: Sequence[Unit],
    indicators: Dict[Unit, Any],
    synonyms: Synonyms,
) -> List[Term]:
    """Return ``(weight, variable)`` objective terms for ``units``.

    Args:
        backend: Backend receiving auxiliary variables and constraints.
        units: Units of the model, in a deterministic order.
        indicators: Selection variable of every unit.
        synonyms: Groups restricted to ``units``.

    Returns:
        List[Term]: One term per ungrouped unit or singleton group and one
            per larger group.
    """
    terms: List[Term] = []
    done = set()
    for unit in units:
        group = synonyms.group_of(unit)
        if group is None:
            terms.append((unit.weight, indicators[unit]))
            continue
        if group in done:
            continue
        done.add(group)
        members = [member for member in group.units if member in indicators]
        if len(members) == 1:
            terms.append((group.weight, indicators[members[0]]))
            continue

        signal = backend.binary(f"s_{len(done)}_{members[0].num}")
        members_sum = backend.sum(indicators[member] for member in members)
        if group.weight > 0:
            backend.add(signal <= members_sum)
        else:
            backend.add(len(members) * signal >= members_sum)
        terms.append((group.weight, signal))
    return terms
