"""Wall-clock budget shared by consecutive solver calls."""

from __future__ import annotations

import math


class TimeLimit:
    """Remaining time budget in seconds.

    One instance is shared by every sub-solve of a single ``solve`` call so
    that repeated backend invocations draw from the same overall deadline.
    An unbounded budget is represented by ``math.inf``.
    """

    def __init__(self, seconds: float = math.inf) -> None:
        if seconds < 0:
            raise ValueError(f"Time limit must be non-negative, got {seconds}")
        self._remaining = float(seconds)

    def remaining(self) -> float:
        """Return the remaining number of seconds (may be ``inf``)."""
        return self._remaining

    def spend(self, seconds: float) -> None:
        """Deduct ``seconds`` from the budget.

        Raises:
            ValueError: If more time is spent than remains.
        """
        if seconds < 0:
            raise ValueError(f"Cannot spend negative time: {seconds}")
        if seconds > self._remaining:
            raise ValueError(
                f"Cannot spend {seconds:.3f}s, only {self._remaining:.3f}s remain"
            )
        self._remaining -= seconds

    @property
    def bounded(self) -> bool:
        return not math.isinf(self._remaining)

    @property
    def exhausted(self) -> bool:
        return self._remaining <= 0

    def __repr__(self) -> str:
        return f"TimeLimit(remaining={self._remaining})"
