"""Exception hierarchy for graph modeling and solver failures.

Infeasibility is not an error: solvers report it by returning an empty
solution (or ``None`` when a requested lower bound is unmet).
"""

from __future__ import annotations


class GMWCSError(Exception):
    """Base class for all gmwcs errors."""


class ModelError(GMWCSError, ValueError):
    """Malformed input: duplicate or parallel edges, self-loops, unknown units."""


class SolverError(GMWCSError):
    """Base class for failures of the MILP backend."""


class SolverUnavailable(SolverError):
    """The MILP backend cannot be loaded or initialized in this environment."""


class SolverInternalError(SolverError):
    """The MILP backend raised an error while building or solving a model."""
