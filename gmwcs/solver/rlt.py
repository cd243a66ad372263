"""Flow/rank MILP formulation of the maximum weight connected subgraph.

Connectivity is encoded with a single unit of "root" choice plus one oriented
arc into every other selected vertex. Each vertex carries an integer rank
``v``; arcs carry a flow amount ``t`` equal to the rank of their tail. The
constraint pair (37)/(38) forces the head of every used arc to be ranked one
above its tail, so the selected arcs form a tree hanging from the root and
cycles or detached islands cannot satisfy the in-arc equations.

With ``n`` vertices, for every vertex ``i`` and incident edge ``{i, j}``:

    (31)  sum(x0) = 1
    (32)  sum(x_ji for j) + x0_i = y_i
    (33)  sum(x_ji for j) + x0_i + sum(t_ji for j) = v_i
    (34)  2 y_i - x0_i <= v_i <= n y_i - (n - 1) x0_i
    (35)  x_ij <= t_ij <= (n - 1) x_ij
    (36)  x_ij + x_ji <= w_ij
    (37)  x_ij + v_i - y_i >= t_ji + t_ij
    (38)  v_i - n y_i + (n - 1) x_ji + n x_ij <= t_ji + t_ij
    (39)  w_ij <= y_i, w_ij <= y_j

The big-M coefficients ``n`` and ``n - 1`` are part of the encoding; changing
them either cuts off connected solutions or admits disconnected ones.
"""

from __future__ import annotations

import math
import time
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

from gmwcs.config import SolverOptions
from gmwcs.decomposition.blocks import Block, decompose
from gmwcs.decomposition.separation import SupportGraph
from gmwcs.errors import ModelError
from gmwcs.graph.graph import Graph
from gmwcs.graph.synonyms import Synonyms
from gmwcs.graph.units import Edge, Node, Unit
from gmwcs.logging import get_logger
from gmwcs.solver.backend import Backend, PulpBackend, SolveStatus
from gmwcs.solver.equivalence import collapse
from gmwcs.solver.solution import Solution, total_weight

LOGGER = get_logger(__name__)

#: Time limit handed to the backend once the shared budget is used up.
MIN_TIME_LIMIT = 0.01

Arc = Tuple[Node, Node]


class RLTModel:
    """One MILP instance: variables, constraints and result extraction.

    A model is built for a single solve and discarded afterwards; it owns all
    variable maps, so independent models never interfere.
    """

    def __init__(
        self,
        graph: Graph,
        synonyms: Synonyms,
        options: SolverOptions,
        backend: Backend,
    ) -> None:
        self.graph = graph
        self.synonyms = synonyms
        self.options = options
        self.backend = backend
        self.n = graph.number_of_nodes()
        self.nodes: List[Node] = graph.node_units()
        self.edges: List[Edge] = graph.edge_units()
        self.y: Dict[Node, Any] = {}
        self.w: Dict[Edge, Any] = {}
        self.x0: Dict[Node, Any] = {}
        self.v: Dict[Node, Any] = {}
        self.x: Dict[Arc, Any] = {}
        self.t: Dict[Arc, Any] = {}
        self.objective: Any = None
        self.status: Optional[SolveStatus] = None

    def build(self) -> RLTModel:
        self._init_variables()
        self._add_root_constraints()
        self._add_flow_constraints()
        self._add_edge_constraints()
        self._add_rank_constraints()
        self._add_potential_constraints()
        self._add_dominance_constraints()
        self._add_objective()
        if self.options.root is None:
            self._break_symmetry()
        else:
            self._tighten()
        return self

    def _init_variables(self) -> None:
        n = self.n
        for node in self.nodes:
            self.y[node] = self.backend.binary(f"y_{node.num}")
            self.x0[node] = self.backend.binary(f"x0_{node.num}")
            self.v[node] = self.backend.integer(f"v_{node.num}", 0, n)
        for edge in self.edges:
            source, target = self.graph.endpoints(edge)
            self.w[edge] = self.backend.binary(f"w_{edge.num}")
            for tail, head in ((source, target), (target, source)):
                self.x[tail, head] = self.backend.binary(f"x_{tail.num}_{head.num}")
                self.t[tail, head] = self.backend.integer(f"t_{tail.num}_{head.num}", 0, n - 1)

    def _add_root_constraints(self) -> None:
        # (31)
        self.backend.add(self.backend.sum(self.x0.values()) == 1, "one_root")
        if self.options.root is not None:
            self.backend.add(self.x0[self.options.root] == 1, "fixed_root")

    def _add_flow_constraints(self) -> None:
        # (32), (33)
        for node in self.nodes:
            inbound = [(neighbor, node) for neighbor in self._neighbors(node)]
            arcs_in = self.backend.sum(self.x[arc] for arc in inbound)
            flow_in = self.backend.sum(self.t[arc] for arc in inbound)
            self.backend.add(arcs_in + self.x0[node] == self.y[node])
            self.backend.add(arcs_in + self.x0[node] + flow_in == self.v[node])

    def _add_edge_constraints(self) -> None:
        n = self.n
        for edge in self.edges:
            source, target = self.graph.endpoints(edge)
            # (36), (39)
            self.backend.add(self.x[source, target] + self.x[target, source] <= self.w[edge])
            self.backend.add(self.w[edge] <= self.y[source])
            self.backend.add(self.w[edge] <= self.y[target])
            # (35)
            for arc in ((source, target), (target, source)):
                self.backend.add(self.x[arc] <= self.t[arc])
                self.backend.add(self.t[arc] <= (n - 1) * self.x[arc])

    def _add_rank_constraints(self) -> None:
        # (34)
        n = self.n
        for node in self.nodes:
            y, x0, v = self.y[node], self.x0[node], self.v[node]
            self.backend.add(2 * y - x0 <= v)
            self.backend.add(v <= n * y - (n - 1) * x0)

    def _add_potential_constraints(self) -> None:
        n = self.n
        for node in self.nodes:
            y, v = self.y[node], self.v[node]
            for neighbor in self._neighbors(node):
                x_out, x_in = self.x[node, neighbor], self.x[neighbor, node]
                flow = self.t[node, neighbor] + self.t[neighbor, node]
                # (37)
                self.backend.add(x_out + v - y >= flow)
                # (38)
                self.backend.add(v - n * y + (n - 1) * x_in + n * x_out <= flow)

    def _add_dominance_constraints(self) -> None:
        """Select free neighbours: a non-negative edge to a non-negative vertex.

        Extending any solution by such a neighbour never lowers its weight,
        so some optimal solution satisfies these constraints.
        """
        for node in self.nodes:
            for neighbor in self._neighbors(node):
                edge = self.graph.edge_between(node, neighbor)
                if self._scoring_weight(neighbor) >= 0 and self._scoring_weight(edge) >= 0:
                    self.backend.add(self.y[node] <= self.w[edge])

    def _scoring_weight(self, unit: Unit) -> float:
        group = self.synonyms.group_of(unit)
        return unit.weight if group is None else group.weight

    def _add_objective(self) -> None:
        indicators: Dict[Unit, Any] = {**self.y, **self.w}
        terms = collapse(self.backend, self.graph.units(), indicators, self.synonyms)
        self.objective = self.backend.sum(weight * var for weight, var in terms)
        if self.options.lower_bound is not None:
            self.backend.add(self.objective >= self.options.lower_bound, "lower_bound")
        self.backend.maximize(self.objective)

    def _break_symmetry(self) -> None:
        """Make the root the selected vertex with the largest multiplier.

        Vertices are ordered by ascending weight and receive multipliers from
        ``n`` downwards; equal weights share a multiplier, so every selected
        set keeps at least one admissible root.
        """
        multipliers: Dict[Node, int] = {}
        j = self.n
        last: Optional[float] = None
        for node in sorted(self.nodes):
            if last is not None and node.weight == last:
                j += 1
            last = node.weight
            multipliers[node] = j
            j -= 1
        root_rank = self.backend.sum(multipliers[node] * self.x0[node] for node in self.nodes)
        for node in self.nodes:
            self.backend.add(root_rank >= multipliers[node] * self.y[node])

    def _tighten(self) -> None:
        """Add block-local cut and ordering constraints around the fixed root.

        Blocks are walked outwards over the block-cut tree. Inside a block
        the local root is the true root or the cut vertex through which the
        block is entered: no arc may point into it, every cut between it and
        a farther vertex must be crossed, and (for cut vertices) no block
        vertex may be selected without it.
        """
        root = self.options.root
        assert root is not None
        decomposition = decompose(self.graph)
        work: List[Tuple[Block, Node, bool]] = [
            (block, root, True) for block in decomposition.blocks_of(root)
        ]
        seen: Set[Block] = {block for block, _, _ in work}
        while work:
            block, local_root, is_true_root = work.pop()
            if not is_true_root:
                for node in block.nodes:
                    if node != local_root:
                        self.backend.add(self.y[node] <= self.y[local_root])
            for neighbor in self._neighbors(local_root):
                if neighbor in block:
                    self.backend.add(self.x[neighbor, local_root] == 0)
            self._separate(block, local_root)
            for cut_vertex in decomposition.cut_vertices_of(block):
                if cut_vertex == local_root:
                    continue
                for other in decomposition.blocks_of(cut_vertex):
                    if other not in seen:
                        seen.add(other)
                        work.append((other, cut_vertex, False))

    def _separate(self, block: Block, local_root: Node) -> None:
        if len(block) < 3:
            return
        subgraph = self.graph.induced(block.nodes)
        support = SupportGraph(subgraph)
        covered: Set[Node] = set()
        count = 0
        for node in subgraph.node_units():
            if node == local_root or node in covered or subgraph.has_edge(node, local_root):
                continue
            cut = support.find_cut(local_root, node)
            cut_sum = self.backend.sum(self.y[c] for c in sorted(cut.cut, key=lambda c: c.num))
            for behind in sorted(cut.sink, key=lambda r: r.num):
                self.backend.add(self.y[behind] <= cut_sum)
            covered |= cut.sink
            count += 1
        LOGGER.debug("Block %d: %d cuts separated from %s", block.index, count, local_root)

    def _neighbors(self, node: Node) -> List[Node]:
        return sorted(self.graph.neighbors(node), key=lambda n: n.num)

    def solve(self, time_limit: float = math.inf) -> Optional[Solution]:
        """Run the backend and read the selected units back.

        Returns:
            The solution, or None if the model is infeasible or no incumbent
            was found in time.
        """
        self.status = self.backend.solve(
            time_limit=time_limit,
            threads=self.options.threads,
            suppress_output=self.options.suppress_output,
        )
        if not self.status.has_solution:
            LOGGER.debug("No solution: %s", self.status.name)
            return None
        units = self.selected_units()
        return Solution(
            tuple(units),
            total_weight(units, self.synonyms),
            self.status == SolveStatus.OPTIMAL,
        )

    def selected_units(self) -> List[Unit]:
        tolerance = self.options.tolerance
        units: List[Unit] = [
            node for node in self.nodes if self.backend.value(self.y[node]) > tolerance
        ]
        units.extend(edge for edge in self.edges if self.backend.value(self.w[edge]) > tolerance)
        return units

    def objective_value(self) -> float:
        return self.backend.objective_value()


class RLTSolver:
    """Solve one graph with the RLT formulation.

    Args:
        options: Solve options; the time budget inside is shared and drained.
        backend_factory: Creates a fresh backend for every solve.
    """

    def __init__(
        self,
        options: Optional[SolverOptions] = None,
        backend_factory: Callable[[], Backend] = PulpBackend,
    ) -> None:
        self.options = options if options is not None else SolverOptions()
        self.backend_factory = backend_factory
        #: Backend status of the last solve; None if the backend was not run.
        self.status: Optional[SolveStatus] = None

    def solve(self, graph: Graph, synonyms: Optional[Synonyms] = None) -> Optional[Solution]:
        """Find a maximum weight connected subgraph of ``graph``.

        The formulation always selects at least one vertex (the root).

        Returns:
            The best solution, the empty solution for an empty graph, or None
            if the model is infeasible (e.g. the lower bound is unreachable).

        Raises:
            ModelError: If the fixed root is not in ``graph``.
            SolverUnavailable: If the backend cannot run.
            SolverInternalError: If the backend fails.
        """
        if graph.number_of_nodes() == 0:
            return Solution.empty()
        root = self.options.root
        if root is not None and root not in graph:
            raise ModelError(f"Root {root} is not in the graph.")
        synonyms = (synonyms if synonyms is not None else Synonyms()).restricted_to(graph.units())

        time_limit = self.options.time_limit
        self.status = None
        started = time.monotonic()
        try:
            model = RLTModel(graph, synonyms, self.options, self.backend_factory()).build()
            remaining = time_limit.remaining()
            solution = model.solve(MIN_TIME_LIMIT if remaining <= 0 else remaining)
            self.status = model.status
        finally:
            elapsed = time.monotonic() - started
            time_limit.spend(min(time_limit.remaining(), elapsed))

        if solution is None:
            LOGGER.debug(
                "%d nodes, root %s: no solution in %.3fs", graph.number_of_nodes(), root, elapsed
            )
        else:
            LOGGER.debug(
                "%d nodes, root %s: weight %g (objective %g, optimal=%s) in %.3fs",
                graph.number_of_nodes(),
                root,
                solution.weight,
                model.objective_value(),
                solution.optimal,
                elapsed,
            )
        return solution
