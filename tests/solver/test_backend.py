import math

import pulp
import pytest
from pytest import approx

from gmwcs.errors import SolverError, SolverInternalError, SolverUnavailable
from gmwcs.solver import PulpBackend, SolveStatus


def knapsack(backend):
    a, b = backend.binary("a"), backend.binary("b")
    k = backend.integer("k", 0, 3)
    backend.add(a + b <= 1, "pick_one")
    backend.add(k <= 2 * a + b)
    backend.maximize(backend.sum([3 * a, 2 * b, k]))
    return a, b, k


class TestPulpBackend:
    def test_optimal(self):
        backend = PulpBackend()
        a, b, k = knapsack(backend)
        assert backend.solve() == SolveStatus.OPTIMAL
        assert backend.value(a) == approx(1)
        assert backend.value(b) == approx(0)
        assert backend.value(k) == approx(2)
        assert backend.objective_value() == approx(5)

    def test_time_limit_forwarded(self):
        backend = PulpBackend()
        solver = backend.make_solver(time_limit=2.5, threads=2, suppress_output=True)
        assert solver.timeLimit == 2.5
        assert not solver.msg
        assert backend.make_solver(math.inf, 1, False).timeLimit is None

    def test_infeasible(self):
        backend = PulpBackend()
        x = backend.binary("x")
        backend.add(x >= 2)
        backend.maximize(x)
        status = backend.solve()
        assert status == SolveStatus.INFEASIBLE
        assert not status.has_solution

    def test_unsolved_value_is_zero(self):
        backend = PulpBackend()
        assert backend.value(backend.binary("x")) == 0.0

    def test_unavailable(self, monkeypatch):
        monkeypatch.setattr(pulp.PULP_CBC_CMD, "available", lambda self: False)
        backend = PulpBackend()
        knapsack(backend)
        with pytest.raises(SolverUnavailable):
            backend.solve()

    def test_internal_error_wrapped(self, monkeypatch):
        def fail(self, solver=None, **kwargs):
            raise pulp.PulpSolverError("cbc crashed")

        monkeypatch.setattr(pulp.LpProblem, "solve", fail)
        backend = PulpBackend()
        knapsack(backend)
        with pytest.raises(SolverInternalError, match="cbc crashed"):
            backend.solve()

    def test_error_hierarchy(self):
        assert issubclass(SolverUnavailable, SolverError)
        assert issubclass(SolverInternalError, SolverError)


def test_status_has_solution():
    assert SolveStatus.OPTIMAL.has_solution
    assert SolveStatus.FEASIBLE.has_solution
    assert not SolveStatus.NO_SOLUTION.has_solution


def test_declared_pulp_range_excludes_v4():
    """PuLP 4 drops the variable and CBC command APIs used by PulpBackend."""
    from importlib.metadata import PackageNotFoundError, requires

    try:
        requirements = requires("gmwcs") or []
    except PackageNotFoundError:
        pytest.skip("gmwcs is not installed")
    (pulp_requirement,) = [r for r in requirements if r.startswith("pulp")]
    assert "<4" in pulp_requirement
