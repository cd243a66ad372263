"""Configuration classes for gmwcs solvers."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Callable, List, Optional

from gmwcs.time_limit import TimeLimit

if TYPE_CHECKING:
    from gmwcs.graph.units import Node, Unit

#: Solved indicator values above this threshold count as selected. It must stay
#: above the backend's integrality tolerance.
DEFAULT_TOLERANCE = 0.01


@dataclass
class SolverOptions:
    """Options of a single ``solve`` invocation.

    Attributes:
        time_limit: Shared wall-clock budget; unbounded by default.
        threads: Worker threads forwarded to the MILP backend.
        root: Vertex the solution must contain, anchoring the flow.
        lower_bound: Minimum objective; solves that cannot reach it yield nothing.
        callback: Invoked with the units of every improving solution.
        suppress_output: Silence the backend's own log.
        tolerance: Threshold for reading solved binaries as selected.
    """

    time_limit: TimeLimit = field(default_factory=TimeLimit)
    threads: int = 1
    root: Optional[Node] = None
    lower_bound: Optional[float] = None
    callback: Optional[Callable[[List[Unit]], None]] = None
    suppress_output: bool = True
    tolerance: float = DEFAULT_TOLERANCE

    def __post_init__(self) -> None:
        if self.threads < 1:
            raise ValueError(f"threads must be at least 1, got {self.threads}")
        if not 0 < self.tolerance < 0.5:
            raise ValueError(f"tolerance must be in (0, 0.5), got {self.tolerance}")

    def with_root(self, root: Optional[Node]) -> SolverOptions:
        """Return a copy anchored at ``root`` (sharing the same time budget)."""
        return replace(self, root=root)

    def with_lower_bound(self, lower_bound: Optional[float]) -> SolverOptions:
        """Return a copy with a different objective lower bound."""
        return replace(self, lower_bound=lower_bound)
