"""Global pytest configuration.

Provides small hand-built graphs, seeded random instance generators that
mirror the connected/disconnected generators of the solver's regression
suite, and a brute-force reference solver used as ground truth.
"""

from __future__ import annotations

import random
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import pytest

from gmwcs.graph import Edge, Graph, Node, Synonyms, Unit
from gmwcs.solver import total_weight

SEED = 20160309
MAX_SIZE = 16


def build_graph(node_weights: Sequence[float], edges: Sequence[Tuple[int, int, float]]) -> Graph:
    """Build a graph with nodes numbered from 1 and edges numbered in order.

    Args:
        node_weights: Weight of node ``i + 1`` at position ``i``.
        edges: ``(u, v, weight)`` triples over node numbers.
    """
    graph = Graph()
    nodes = [Node(i + 1, w) for i, w in enumerate(node_weights)]
    for node in nodes:
        graph.add_node(node)
    for num, (u, v, w) in enumerate(edges, start=1):
        graph.add_edge(nodes[u - 1], nodes[v - 1], Edge(num, w))
    return graph


def node(graph: Graph, num: int) -> Node:
    return next(n for n in graph.nodes if n.num == num)


def _weight(rng: random.Random) -> int:
    return rng.randint(-8, 7)


def _fill_nodes(graph: Graph, rng: random.Random, size: int) -> List[Node]:
    nodes = [Node(j + 1, _weight(rng)) for j in range(size)]
    for n in nodes:
        graph.add_node(n)
    return nodes


def _fill_edges(graph: Graph, rng: random.Random, nodes: List[Node], count: int, offset: int) -> None:
    added = 0
    while added < count:
        u, v = rng.choice(nodes), rng.choice(nodes)
        if u == v or graph.has_edge(u, v):
            continue
        graph.add_edge(u, v, Edge(offset + added, _weight(rng)))
        added += 1


def connected_graph(rng: random.Random, size: int) -> Graph:
    """Random connected graph: a shuffled spanning path plus extra edges.

    The total number of edges never exceeds ``MAX_SIZE``.
    """
    graph = Graph()
    nodes = _fill_nodes(graph, rng, size)
    extra = 0
    if size > 1:
        upper = min(size * (size - 1) // 2 + 1, MAX_SIZE) - (size - 1)
        extra = rng.randrange(max(upper, 1))
    order = list(range(size))
    rng.shuffle(order)
    for j in range(size - 1):
        graph.add_edge(nodes[order[j]], nodes[order[j + 1]], Edge(j + 1, _weight(rng)))
    _fill_edges(graph, rng, nodes, extra, size)
    return graph


def random_graph(rng: random.Random, max_size: int = MAX_SIZE) -> Graph:
    """Random, usually disconnected, graph with at most ``max_size`` nodes and edges."""
    graph = Graph()
    n = rng.randrange(max_size) + 1
    m = min(n * (n - 1) // 2, rng.randrange(max_size))
    nodes = _fill_nodes(graph, rng, n)
    _fill_edges(graph, rng, nodes, m, 1)
    return graph


def _connected_masks(nodes: List[Node], adjacency: List[int]) -> Iterator[int]:
    for mask in range(1, 1 << len(nodes)):
        seen = frontier = mask & -mask
        while frontier:
            i = frontier.bit_length() - 1
            frontier &= ~(1 << i)
            new = adjacency[i] & mask & ~seen
            seen |= new
            frontier |= new
        if seen == mask:
            yield mask


def _find(parent: Dict[int, int], i: int) -> int:
    while parent[i] != i:
        parent[i] = parent[parent[i]]
        i = parent[i]
    return i


def brute_force(graph: Graph, synonyms: Optional[Synonyms] = None) -> Tuple[float, List[Unit]]:
    """Exact reference solution by enumerating connected vertex sets.

    Without synonyms, every non-negative induced edge of a vertex set is
    taken and the remaining pieces are joined by the cheapest negative edges
    (Kruskal). With synonyms that shortcut is not exact, so every spanning
    subset of induced edges is scored instead; keep such graphs small. The
    empty subgraph of weight 0 is always a candidate.
    """
    nodes = graph.node_units()
    index: Dict[Node, int] = {n: i for i, n in enumerate(nodes)}
    adjacency = [0] * len(nodes)
    edges = []
    for edge in graph.edge_units():
        s, t = (index[n] for n in graph.endpoints(edge))
        adjacency[s] |= 1 << t
        adjacency[t] |= 1 << s
        edges.append((s, t, edge))
    edges.sort(key=lambda item: -item[2].weight)

    best_weight, best_units = 0.0, []
    for mask in _connected_masks(nodes, adjacency):
        members = [i for i in range(len(nodes)) if mask >> i & 1]
        vertices: List[Unit] = [nodes[i] for i in members]
        induced = [(s, t, e) for s, t, e in edges if mask >> s & 1 and mask >> t & 1]

        if synonyms is None:
            candidates = [_kruskal(members, induced)]
        else:
            candidates = _spanning_subsets(members, induced)
        for chosen in candidates:
            units = vertices + chosen
            weight = total_weight(units, synonyms)
            if weight > best_weight:
                best_weight, best_units = weight, units
    return best_weight, best_units


def _kruskal(members: List[int], induced: List[Tuple[int, int, Edge]]) -> List[Unit]:
    parent = {i: i for i in members}
    chosen: List[Unit] = []
    for s, t, edge in induced:
        rs, rt = _find(parent, s), _find(parent, t)
        if edge.weight >= 0 or rs != rt:
            parent[rs] = rt
            chosen.append(edge)
    return chosen


def _spanning_subsets(
    members: List[int], induced: List[Tuple[int, int, Edge]]
) -> Iterator[List[Unit]]:
    for subset in range(1 << len(induced)):
        parent = {i: i for i in members}
        pieces = len(members)
        chosen: List[Unit] = []
        for k, (s, t, edge) in enumerate(induced):
            if subset >> k & 1:
                chosen.append(edge)
                rs, rt = _find(parent, s), _find(parent, t)
                if rs != rt:
                    parent[rs] = rt
                    pieces -= 1
        if pieces == 1:
            yield chosen


def random_synonyms(rng: random.Random, graph: Graph, groups: int = 3) -> Synonyms:
    """Random disjoint groups of two or three units with weights in ``[-8, 7]``."""
    units = graph.units()
    rng.shuffle(units)
    synonyms = Synonyms()
    for _ in range(groups):
        size = rng.randint(2, 3)
        if len(units) < size:
            break
        members, units = units[:size], units[size:]
        synonyms.add_group(members, weight=_weight(rng))
    return synonyms


@pytest.fixture
def rng():
    return random.Random(SEED)


@pytest.fixture
def path5():
    # 1 -- 2 -- 3 -- 4 -- 5
    # weights: 3, -1, 4, -10, 2 ; edges 0
    return build_graph([3, -1, 4, -10, 2], [(1, 2, 0), (2, 3, 0), (3, 4, 0), (4, 5, 0)])


@pytest.fixture
def bowtie():
    # Two triangles sharing node 3:
    #
    #   1       4
    #   | \   / |
    #   |  3    |
    #   | /   \ |
    #   2       5
    return build_graph(
        [1, 1, -2, 1, 1],
        [(1, 2, 1), (2, 3, 1), (1, 3, 1), (3, 4, 1), (4, 5, 1), (3, 5, 1)],
    )


@pytest.fixture
def hexagon():
    # 6-cycle 1-2-3-4-5-6-1 with a pendant 7 attached to 4
    return build_graph(
        [5, -1, -1, 2, -1, -1, 3],
        [(1, 2, 0), (2, 3, 0), (3, 4, 0), (4, 5, 0), (5, 6, 0), (6, 1, 0), (4, 7, -1)],
    )


@pytest.fixture
def make_graph():
    return build_graph


@pytest.fixture
def find_node():
    return node


@pytest.fixture
def reference():
    return brute_force


@pytest.fixture
def random_connected():
    return connected_graph


@pytest.fixture
def random_disconnected():
    return random_graph


@pytest.fixture
def random_groups():
    return random_synonyms
