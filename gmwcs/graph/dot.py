"""DOT rendering for comparing two solutions on the same graph."""

from __future__ import annotations

from typing import Iterable, List, Optional, Set

from gmwcs.graph.graph import Graph
from gmwcs.graph.units import Unit


def _color(unit: Unit, expected: Set[Unit], actual: Optional[Set[Unit]]) -> str:
    if actual is not None and unit in expected and unit in actual:
        return "YELLOW"
    if unit in expected:
        return "GREEN"
    if actual is not None and unit in actual:
        return "RED"
    return "BLACK"


def to_dot(
    graph: Graph,
    expected: Iterable[Unit],
    actual: Optional[Iterable[Unit]] = None,
    name: str = "test",
) -> str:
    """Render ``graph`` as a DOT document highlighting two solutions.

    Units in both solutions are yellow, only in ``expected`` green, only in
    ``actual`` red; everything else is black. Labels read ``"num, weight"``.

    Args:
        graph: Graph to render.
        expected: Reference solution.
        actual: Solution under inspection, if any.
        name: DOT graph name.

    Returns:
        The DOT source text.
    """
    expected_set = set(expected)
    actual_set = None if actual is None else set(actual)
    lines: List[str] = [f"graph {name} {{"]
    for node in graph.node_units():
        lines.append(
            f'{node.num} [label = "{node.num}, {node.weight:g}" '
            f"color={_color(node, expected_set, actual_set)}]"
        )
    for edge in graph.edge_units():
        source, target = graph.endpoints(edge)
        lines.append(
            f'{source.num}--{target.num}[label = "{edge.num}, {edge.weight:g}" '
            f"color={_color(edge, expected_set, actual_set)}]"
        )
    lines.append("}")
    return "\n".join(lines) + "\n"
