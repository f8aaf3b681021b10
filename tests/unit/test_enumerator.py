"""
Tests for single-value solving and solution enumeration.
"""
import pytest

from smtcompose import ConstraintModel
from smtcompose.enumerator import enumerate_values, solve_all_for, solve_for
from smtcompose.errors import BackendError, Undefined, Unsat
from smtcompose.logics import QF_BV, QF_LIA
from smtcompose.solver import SolverResult, Z3Backend
from smtcompose.theories import bitvec, core, ints
from smtcompose.types import Type


def _int_model(*bounds):
    m = ConstraintModel(QF_LIA)
    x = m.declare("x", Type.int())
    for op, value in bounds:
        m.assert_("x", QF_LIA.apply(op, x, QF_LIA.int_const(value)))
    return m


def test_solve_for_single_value():
    """Test x == 5 and x > 0 yields 5."""
    m = _int_model((core.OpCodes.EQ, 5), (ints.OpCodes.GT, 0))
    assert m.solve_for("x", Z3Backend()) == 5
    assert m.solve_all_for("x", Z3Backend()) == [5]


def test_contradiction():
    """Test x == 5 and x == 6 has no solution."""
    m = _int_model((core.OpCodes.EQ, 5), (core.OpCodes.EQ, 6))
    backend = Z3Backend()

    assert m.check_sat(backend) is False
    with pytest.raises(Unsat):
        m.solve_for("x", backend)
    assert m.solve_all_for("x", Z3Backend()) == []


def test_unconstrained_bitvec_enumerates_domain():
    """Test an unconstrained 2-bit variable yields each of its 4 values once."""
    m = ConstraintModel(QF_BV)
    m.declare("y", Type.bitvec(2))

    values = m.solve_all_for("y", Z3Backend())

    assert sorted(values) == [0, 1, 2, 3]
    assert len(values) == len(set(values))


def test_values_are_individually_satisfying():
    """Test every enumerated value satisfies the constraints on its own."""
    m = ConstraintModel(QF_BV)
    y = m.declare("y", Type.bitvec(4))
    m.assert_("y", QF_BV.apply(bitvec.OpCodes.BVULT, y, QF_BV.bv_const(6, 4)))
    m.assert_("y", QF_BV.apply(core.OpCodes.NOT, QF_BV.eq(y, QF_BV.bv_const(2, 4))))

    values = m.solve_all_for("y", Z3Backend())

    assert sorted(values) == [0, 1, 3, 4, 5]
    assert len(values) <= Type.bitvec(4).domain_size()
    for v in values:
        check = ConstraintModel(QF_BV)
        check_y = check.declare("y", Type.bitvec(4))
        for _, assertion in m.assertions:
            check.assert_("y", assertion)
        check.assert_("y", QF_BV.eq(check_y, QF_BV.bv_const(v, 4)))
        assert check.check_sat(Z3Backend())


def test_negative_int_values_are_blocked():
    """Test enumeration over Int values below zero."""
    m = _int_model((ints.OpCodes.GE, -2), (ints.OpCodes.LE, 0))
    values = m.solve_all_for("x", Z3Backend())
    mask = (1 << 64) - 1
    assert sorted(values) == sorted([0, mask, mask - 1])


def test_max_solutions():
    """Test enumeration stops at the requested number of values."""
    m = ConstraintModel(QF_BV)
    m.declare("y", Type.bitvec(8))

    result = m.enumerate_values("y", Z3Backend(), max_solutions=3)

    assert len(result.values) == 3
    assert result.limit_reached
    assert not result.exhausted
    assert result.first_result == SolverResult.SAT
    assert "limit reached" in str(result)

    with pytest.raises(ValueError):
        m.solve_all_for("y", Z3Backend(), max_solutions=0)


def test_enumeration_result_outcomes():
    """Test the result distinguishes exhaustion from unsatisfiability."""
    m = ConstraintModel(QF_BV)
    m.declare("y", Type.bitvec(1))
    done = m.enumerate_values("y", Z3Backend())
    assert done.exhausted
    assert done.solver_name == "z3"

    none = _int_model((core.OpCodes.EQ, 5), (core.OpCodes.EQ, 6)).enumerate_values("x", Z3Backend())
    assert none.values == []
    assert none.first_result == SolverResult.UNSAT
    assert not none.exhausted
    assert str(none).startswith("No solutions")


def test_functions_on_raw_backend():
    """Test the module-level helpers on a backend driven directly."""
    backend = Z3Backend()
    backend.set_logic(QF_BV)
    backend.new_var("y", Type.bitvec(2))
    backend.assert_("y", "(bvuge y #b10)")

    assert solve_for("y", backend) in (2, 3)
    assert sorted(solve_all_for("y", Type.bitvec(2), backend)) == [2, 3]
    with pytest.raises(Unsat):
        solve_for("y", backend)


class _ScriptedBackend:
    """Backend replaying canned answers."""

    name = "scripted"

    def __init__(self, answers):
        self.answers = list(answers)
        self.written = []

    def check_sat(self):
        answer = self.answers.pop(0)
        if answer is None:
            raise Undefined("scripted unknown")
        return answer is not False

    def solve(self):
        return {"y": self._value}

    def raw_write(self, text):
        self.written.append(text)


class _RepeatingBackend(_ScriptedBackend):
    _value = 1


def test_undefined_propagates():
    """Test an unknown result mid-way is raised, not truncated."""
    backend = _RepeatingBackend([True, None])
    with pytest.raises(Undefined):
        enumerate_values("y", Type.bitvec(2), backend)
    assert backend.written == ["(assert (not (= y (_ bv1 2))))"]


def test_repeated_value_is_backend_error():
    """Test a backend ignoring a blocking assertion is detected."""
    backend = _RepeatingBackend([True, True])
    with pytest.raises(BackendError):
        enumerate_values("y", Type.bitvec(2), backend)
