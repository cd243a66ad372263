"""Root selection over block-cut trees and reconciliation of sub-solves.

Without a fixed root the solver picks, for each connected component, the cut
vertex at the center of its block-cut tree and solves the component rooted
there, which enables the block-local tightening. Every connected subgraph
either contains that vertex or lies inside one component of the remainder,
so the remainder's components are queued and solved the same way. A
component without cut vertices is solved unrooted. Each sub-solve must beat
the incumbent, and components whose positive weight cannot beat it are
skipped outright.
"""

from __future__ import annotations

from typing import Callable, List, Optional

import networkx as nx

from gmwcs.config import SolverOptions
from gmwcs.decomposition.blocks import decompose
from gmwcs.errors import ModelError
from gmwcs.graph.graph import Graph
from gmwcs.graph.synonyms import Synonyms
from gmwcs.logging import get_logger
from gmwcs.solver.backend import Backend, PulpBackend, SolveStatus
from gmwcs.solver.rlt import RLTSolver
from gmwcs.solver.solution import Solution

LOGGER = get_logger(__name__)


def positive_weight(graph: Graph, synonyms: Synonyms) -> float:
    """Upper bound on the weight of any subgraph of ``graph``.

    Sums positive unit weights, counting a positive synonym group once.
    """
    bound = 0.0
    counted = set()
    for unit in graph.units():
        group = synonyms.group_of(unit)
        if group is None:
            bound += max(unit.weight, 0.0)
        elif group not in counted:
            counted.add(group)
            bound += max(group.weight, 0.0)
    return bound


class BicomponentSolver:
    """Orchestrate rooted and unrooted RLT solves over a whole graph.

    Args:
        options: Solve options; ``time_limit`` is shared by all sub-solves.
        backend_factory: Creates a fresh MILP backend for every sub-solve.
    """

    def __init__(
        self,
        options: Optional[SolverOptions] = None,
        backend_factory: Callable[[], Backend] = PulpBackend,
    ) -> None:
        self.options = options if options is not None else SolverOptions()
        self.backend_factory = backend_factory

    def solve(self, graph: Graph, synonyms: Optional[Synonyms] = None) -> Optional[Solution]:
        """Find a maximum weight connected subgraph.

        Returns:
            The best solution; the empty solution if nothing has positive
            weight; None only if ``options.lower_bound`` is set and no
            connected subgraph reaches it.

        Raises:
            ModelError: If the fixed root is not in ``graph``.
            SolverUnavailable: If the backend cannot run.
            SolverInternalError: If the backend fails.
        """
        root = self.options.root
        if root is not None and root not in graph:
            raise ModelError(f"Root {root} is not in the graph.")
        if graph.number_of_nodes() == 0:
            return Solution.empty()
        synonyms = synonyms if synonyms is not None else Synonyms()
        if root is not None:
            return self._solve_rooted(graph, synonyms)
        return self._solve_unrooted(graph, synonyms)

    def _solve_rooted(self, graph: Graph, synonyms: Synonyms) -> Optional[Solution]:
        root = self.options.root
        lower_bound = self.options.lower_bound
        options = self.options
        if lower_bound is not None and lower_bound <= 0:
            # The empty solution already meets the bound
            options = options.with_lower_bound(None)
        component = graph.induced(nx.node_connected_component(graph, root))
        solution = RLTSolver(options, self.backend_factory).solve(component, synonyms)
        if solution is None:
            LOGGER.info("No subgraph containing %s reaches lower bound %g", root, lower_bound)
            return None
        if solution.weight < 0:
            return Solution.empty(solution.optimal)
        self._notify(solution)
        return solution

    def _solve_unrooted(self, graph: Graph, synonyms: Synonyms) -> Optional[Solution]:
        lower_bound = self.options.lower_bound
        best: Optional[Solution] = None
        bound = lower_bound
        if lower_bound is None or lower_bound <= 0:
            best = Solution.empty()
            bound = 0.0
        optimal = True
        solves = 0

        work: List[Graph] = [graph.induced(c) for c in reversed(graph.connected_components())]
        while work:
            component = work.pop()
            upper = positive_weight(component, synonyms)
            if (best is not None and upper <= best.weight) or (best is None and upper < bound):
                continue
            tree = decompose(component).component_of(component.node_units()[0])
            anchor = tree.center_cut_vertex()
            options = self.options.with_root(anchor).with_lower_bound(bound)
            solver = RLTSolver(options, self.backend_factory)
            result = solver.solve(component, synonyms)
            solves += 1
            if solver.status == SolveStatus.NO_SOLUTION:
                optimal = False
            if result is not None:
                optimal = optimal and result.optimal
                if best is None or result.weight > best.weight:
                    best = result
                    bound = result.weight
                    self._notify(result)
            if anchor is not None:
                rest = component.without([anchor])
                work.extend(rest.induced(c) for c in reversed(rest.connected_components()))

        if best is None:
            LOGGER.info("No connected subgraph reaches lower bound %g", lower_bound)
            return None
        LOGGER.info(
            "Best weight %g with %d units after %d solves (optimal=%s)",
            best.weight,
            len(best),
            solves,
            optimal,
        )
        return Solution(best.units, best.weight, optimal)

    def _notify(self, solution: Solution) -> None:
        if self.options.callback is not None:
            self.options.callback(list(solution.units))
