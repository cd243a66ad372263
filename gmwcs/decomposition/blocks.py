"""Biconnected components (blocks), cut vertices and block-cut trees.

`decompose` runs an iterative Hopcroft-Tarjan depth-first search with an
explicit stack, so chain-like graphs of any length are handled without deep
recursion. Vertices and neighbours are visited in ascending ``num`` order,
which makes the result identical across runs.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, FrozenSet, Iterator, List, Optional, Set, Tuple

import networkx as nx

from gmwcs.graph.graph import Graph
from gmwcs.graph.units import Edge, Node
from gmwcs.logging import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class Block:
    """A maximal biconnected subgraph.

    A block of an isolated vertex has one node and no edges; a bridge forms a
    block of two nodes and one edge.

    Attributes:
        index: Position in discovery order.
        nodes: Vertices of the block.
        edges: Edge units of the block.
    """

    index: int
    nodes: FrozenSet[Node]
    edges: FrozenSet[Edge]

    def __contains__(self, node: object) -> bool:
        return node in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def __repr__(self) -> str:
        nums = sorted(node.num for node in self.nodes)
        return f"Block(index={self.index}, nodes={nums})"


class BlockCutTree:
    """Bipartite tree over the blocks and cut vertices of one component.

    A block and a cut vertex are adjacent iff the cut vertex belongs to the
    block. The tree is read-only once built.
    """

    def __init__(self, blocks: List[Block], cut_vertices: Set[Node]) -> None:
        self._tree = nx.Graph()
        self._tree.add_nodes_from(blocks, kind="block")
        self._tree.add_nodes_from(cut_vertices, kind="cut")
        for block in blocks:
            for node in block.nodes:
                if node in cut_vertices:
                    self._tree.add_edge(block, node)

    @property
    def tree(self) -> nx.Graph:
        return self._tree

    @property
    def blocks(self) -> List[Block]:
        return sorted(
            (n for n, kind in self._tree.nodes(data="kind") if kind == "block"),
            key=lambda block: block.index,
        )

    @property
    def cut_vertices(self) -> List[Node]:
        return sorted(
            (n for n, kind in self._tree.nodes(data="kind") if kind == "cut"),
            key=lambda node: node.num,
        )

    def center_cut_vertex(self) -> Optional[Node]:
        """Return the cut vertex closest to the center of the tree.

        When the center is a block, its cut vertex with the most incident
        blocks is chosen; ties go to the smallest ``num``. Returns None for a
        component made of a single block.
        """
        if self._tree.number_of_nodes() <= 1:
            return None
        centers = nx.center(self._tree)
        cuts = [c for c in centers if isinstance(c, Node)]
        if not cuts:
            cuts = [n for block in centers for n in self._tree.neighbors(block)]
        return min(cuts, key=lambda node: (-self._tree.degree(node), node.num))


class BlockDecomposition:
    """Blocks and cut vertices of a whole graph.

    Contract: every vertex belongs to at least one block, to more than one
    block iff it is a cut vertex, and every edge belongs to exactly one block.
    """

    def __init__(
        self,
        blocks: List[Block],
        cut_vertices: Set[Node],
        trees: List[BlockCutTree],
    ) -> None:
        self._blocks = blocks
        self._cut_vertices = frozenset(cut_vertices)
        self._blocks_of: Dict[Node, List[Block]] = {}
        for block in blocks:
            for node in block.nodes:
                self._blocks_of.setdefault(node, []).append(block)
        self._tree_of: Dict[Node, BlockCutTree] = {}
        for tree in trees:
            for block in tree.blocks:
                for node in block.nodes:
                    self._tree_of[node] = tree

    @property
    def blocks(self) -> List[Block]:
        return list(self._blocks)

    @property
    def cut_vertices(self) -> FrozenSet[Node]:
        return self._cut_vertices

    def is_cut_vertex(self, node: Node) -> bool:
        return node in self._cut_vertices

    def blocks_of(self, node: Node) -> List[Block]:
        """Return every block containing ``node``."""
        try:
            return list(self._blocks_of[node])
        except KeyError:
            raise ValueError(f"Node {node} is not part of the decomposition.") from None

    def block_of(self, node: Node) -> Block:
        """Return the unique block of a vertex that is not a cut vertex.

        Raises:
            ValueError: If ``node`` is a cut vertex or unknown.
        """
        if node in self._cut_vertices:
            raise ValueError(f"Cut vertex {node} belongs to several blocks.")
        return self.blocks_of(node)[0]

    def incident_blocks(self, cut_vertex: Node) -> List[Block]:
        """Return the blocks sharing ``cut_vertex``."""
        if cut_vertex not in self._cut_vertices:
            raise ValueError(f"Node {cut_vertex} is not a cut vertex.")
        return self.blocks_of(cut_vertex)

    def cut_vertices_of(self, block: Block) -> List[Node]:
        """Return the cut vertices of ``block`` sorted by ``num``."""
        return sorted(
            (node for node in block.nodes if node in self._cut_vertices),
            key=lambda node: node.num,
        )

    def component_of(self, node: Node) -> BlockCutTree:
        """Return the block-cut tree of the component containing ``node``."""
        try:
            return self._tree_of[node]
        except KeyError:
            raise ValueError(f"Node {node} is not part of the decomposition.") from None


def _sorted_neighbors(graph: Graph, node: Node) -> Iterator[Node]:
    return iter(sorted(graph.neighbors(node), key=lambda n: n.num))


def _make_block(graph: Graph, index: int, pairs: List[Tuple[Node, Node]]) -> Block:
    nodes: Set[Node] = set()
    edges: Set[Edge] = set()
    for u, v in pairs:
        nodes.add(u)
        nodes.add(v)
        edge = graph.edge_between(u, v)
        assert edge is not None
        edges.add(edge)
    return Block(index, frozenset(nodes), frozenset(edges))


def decompose(graph: Graph) -> BlockDecomposition:
    """Split ``graph`` into blocks and build one block-cut tree per component.

    Runs in O(|V| + |E|).

    Args:
        graph: Graph to decompose; it is not modified.

    Returns:
        BlockDecomposition: Blocks, cut vertices and block-cut trees.
    """
    discovery: Dict[Node, int] = {}
    low: Dict[Node, int] = {}
    blocks: List[Block] = []
    cut_vertices: Set[Node] = set()
    trees: List[BlockCutTree] = []

    for start in graph.node_units():
        if start in discovery:
            continue
        first_block = len(blocks)
        component_cuts: Set[Node] = set()
        discovery[start] = low[start] = len(discovery)

        if graph.degree(start) == 0:
            blocks.append(Block(len(blocks), frozenset([start]), frozenset()))
            trees.append(BlockCutTree(blocks[first_block:], component_cuts))
            continue

        root_children = 0
        edge_stack: List[Tuple[Node, Node]] = []
        # Frames of (vertex, DFS parent, pending neighbours)
        stack: List[Tuple[Node, Optional[Node], Iterator[Node]]] = [
            (start, None, _sorted_neighbors(graph, start))
        ]
        while stack:
            node, parent, neighbors = stack[-1]
            descended = False
            for neighbor in neighbors:
                if neighbor == parent:
                    continue
                if neighbor not in discovery:
                    edge_stack.append((node, neighbor))
                    discovery[neighbor] = low[neighbor] = len(discovery)
                    stack.append((neighbor, node, _sorted_neighbors(graph, neighbor)))
                    descended = True
                    break
                if discovery[neighbor] < discovery[node]:
                    # Back edge to an ancestor
                    edge_stack.append((node, neighbor))
                    low[node] = min(low[node], discovery[neighbor])
            if descended:
                continue

            stack.pop()
            if parent is None:
                continue
            low[parent] = min(low[parent], low[node])
            if low[node] >= discovery[parent]:
                pairs: List[Tuple[Node, Node]] = []
                while True:
                    pair = edge_stack.pop()
                    pairs.append(pair)
                    if pair == (parent, node):
                        break
                blocks.append(_make_block(graph, len(blocks), pairs))
                if parent == start:
                    root_children += 1
                else:
                    component_cuts.add(parent)

        if root_children >= 2:
            component_cuts.add(start)
        cut_vertices |= component_cuts
        trees.append(BlockCutTree(blocks[first_block:], component_cuts))

    LOGGER.debug(
        "Decomposed graph with %d nodes and %d edges into %d blocks, %d cut vertices",
        graph.number_of_nodes(),
        graph.number_of_edges(),
        len(blocks),
        len(cut_vertices),
    )
    return BlockDecomposition(blocks, cut_vertices, trees)
