"""MILP backend capability interface and its PuLP/CBC implementation.

The formulation only needs to declare binary and bounded integer variables,
add linear constraints, set a maximization objective, solve under a time
limit and read variable values back. `Backend` captures exactly that, so any
compliant solver can be substituted; `PulpBackend` drives CBC through PuLP.
Variables and expressions are the backend's own objects and support the usual
arithmetic and comparison operators.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod
from enum import IntEnum
from typing import Any, Iterable, Optional

import pulp

from gmwcs.errors import SolverInternalError, SolverUnavailable
from gmwcs.logging import get_logger

LOGGER = get_logger(__name__)


class SolveStatus(IntEnum):
    """Outcome of a backend solve."""

    #: Proven optimal solution.
    OPTIMAL = 1
    #: Integer-feasible incumbent, search stopped by the time limit.
    FEASIBLE = 2
    #: The model has no feasible solution.
    INFEASIBLE = 3
    #: The time limit expired before any incumbent was found.
    NO_SOLUTION = 4

    @property
    def has_solution(self) -> bool:
        return self in (SolveStatus.OPTIMAL, SolveStatus.FEASIBLE)


class Backend(ABC):
    """Minimal MILP capability used by the formulation builder.

    A backend instance holds exactly one model and is discarded after its
    solve. Backends report only the final result; improving solutions are
    passed to the user callback by the orchestration after each sub-solve.
    """

    @abstractmethod
    def binary(self, name: str) -> Any:
        """Declare a 0/1 variable."""

    @abstractmethod
    def integer(self, name: str, low: int, up: int) -> Any:
        """Declare an integer variable in ``[low, up]``."""

    @abstractmethod
    def sum(self, terms: Iterable[Any]) -> Any:
        """Return the linear expression summing ``terms``."""

    @abstractmethod
    def add(self, constraint: Any, name: Optional[str] = None) -> None:
        """Add a linear (in)equality built from backend expressions."""

    @abstractmethod
    def maximize(self, objective: Any) -> None:
        """Set the objective to maximize."""

    @abstractmethod
    def solve(
        self,
        time_limit: float = math.inf,
        threads: int = 1,
        suppress_output: bool = True,
    ) -> SolveStatus:
        """Solve the model.

        Raises:
            SolverUnavailable: If the solver cannot be started.
            SolverInternalError: If the solver fails.
        """

    @abstractmethod
    def value(self, var: Any) -> float:
        """Return the solved value of ``var`` (0.0 if it has none)."""

    @abstractmethod
    def objective_value(self) -> float:
        """Return the objective value of the last solution."""


class PulpBackend(Backend):
    """Backend built on a PuLP problem solved by the bundled CBC binary."""

    def __init__(self, name: str = "gmwcs") -> None:
        self._problem = pulp.LpProblem(name, pulp.LpMaximize)

    @property
    def problem(self) -> pulp.LpProblem:
        return self._problem

    def binary(self, name: str) -> pulp.LpVariable:
        return pulp.LpVariable(name, cat=pulp.LpBinary)

    def integer(self, name: str, low: int, up: int) -> pulp.LpVariable:
        return pulp.LpVariable(name, lowBound=low, upBound=up, cat=pulp.LpInteger)

    def sum(self, terms: Iterable[Any]) -> pulp.LpAffineExpression:
        return pulp.lpSum(terms)

    def add(self, constraint: pulp.LpConstraint, name: Optional[str] = None) -> None:
        try:
            self._problem.addConstraint(constraint, name)
        except pulp.PulpError as exc:
            raise SolverInternalError(f"Cannot add constraint {name or ''}: {exc}") from exc

    def maximize(self, objective: pulp.LpAffineExpression) -> None:
        self._problem.setObjective(objective)

    def make_solver(
        self, time_limit: float, threads: int, suppress_output: bool
    ) -> pulp.LpSolver:
        return pulp.PULP_CBC_CMD(
            msg=not suppress_output,
            timeLimit=None if math.isinf(time_limit) else time_limit,
            threads=threads,
        )

    def solve(
        self,
        time_limit: float = math.inf,
        threads: int = 1,
        suppress_output: bool = True,
    ) -> SolveStatus:
        solver = self.make_solver(time_limit, threads, suppress_output)
        if not solver.available():
            raise SolverUnavailable(
                f"MILP solver {solver.name} is not available; "
                "check that PuLP ships a CBC binary for this platform"
            )
        LOGGER.debug(
            "Solving %s: %d variables, %d constraints, time limit %s",
            self._problem.name,
            len(self._problem.variables()),
            len(self._problem.constraints),
            time_limit,
        )
        try:
            self._problem.solve(solver)
        except pulp.PulpError as exc:
            raise SolverInternalError(str(exc)) from exc
        return self._status()

    def _status(self) -> SolveStatus:
        status = self._problem.status
        solution_status = self._problem.sol_status
        if solution_status == pulp.LpSolutionOptimal:
            return SolveStatus.OPTIMAL
        if solution_status == pulp.LpSolutionIntegerFeasible:
            return SolveStatus.FEASIBLE
        if status == pulp.LpStatusInfeasible or solution_status == pulp.LpSolutionInfeasible:
            return SolveStatus.INFEASIBLE
        if status == pulp.LpStatusNotSolved:
            return SolveStatus.NO_SOLUTION
        raise SolverInternalError(
            f"Unexpected solver status {pulp.LpStatus.get(status, status)}"
        )

    def value(self, var: pulp.LpVariable) -> float:
        solved = var.varValue
        return 0.0 if solved is None else float(solved)

    def objective_value(self) -> float:
        objective = pulp.value(self._problem.objective)
        return 0.0 if objective is None else float(objective)
