"""MILP formulation, backends and orchestration."""

from gmwcs.solver.api import solve
from gmwcs.solver.backend import Backend, PulpBackend, SolveStatus
from gmwcs.solver.bicomponent import BicomponentSolver
from gmwcs.solver.rlt import RLTModel, RLTSolver
from gmwcs.solver.solution import Solution, total_weight

__all__ = [
    "Backend",
    "BicomponentSolver",
    "PulpBackend",
    "RLTModel",
    "RLTSolver",
    "Solution",
    "SolveStatus",
    "solve",
    "total_weight",
]
