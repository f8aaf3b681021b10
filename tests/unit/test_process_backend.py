"""
Tests for the SMT-LIB 2 subprocess backend.

These need a z3 executable on PATH.
"""
import pytest

from smtcompose import ConstraintModel
from smtcompose.errors import (
    BackendError,
    BackendStateError,
    DuplicateDeclarationError,
    SortMismatchError,
    Unsat,
)
from smtcompose.logics import QF_AUFBV, QF_BV, QF_LIA
from smtcompose.solver import SMT2ProcessBackend, is_solver_available
from smtcompose.theories import array_ex, bitvec, core, ints, uf
from smtcompose.types import U64_MASK, Type

pytestmark = pytest.mark.skipif(not is_solver_available("z3"), reason="z3 executable not found")


@pytest.fixture
def backend():
    with SMT2ProcessBackend("z3") as b:
        yield b


def test_check_and_solve(backend):
    """Test a simple satisfiable query round trip."""
    backend.set_logic(QF_BV)
    backend.new_var("x", Type.bitvec(8))
    x = QF_BV.var("x", bitvec.BitVector(8))
    backend.assert_("x", QF_BV.eq(x, QF_BV.bv_const(42, 8)))

    assert backend.check_sat() is True
    assert backend.solve() == {"x": 42}


def test_protocol_state_errors(backend):
    with pytest.raises(BackendStateError):
        backend.new_var("x", Type.int())
    backend.set_logic(QF_LIA)
    with pytest.raises(BackendStateError):
        backend.set_logic(QF_LIA)
    backend.new_var("x", Type.int())
    with pytest.raises(DuplicateDeclarationError):
        backend.new_var("x", Type.int())
    with pytest.raises(BackendStateError):
        backend.solve()


def test_unsat(backend):
    backend.set_logic(QF_LIA)
    backend.new_var("x", Type.int())
    backend.assert_("x", "(> x 10)")
    backend.assert_("x", "(< x 5)")

    assert backend.check_sat() is False
    with pytest.raises(Unsat):
        backend.solve()


def test_negative_int(backend):
    backend.set_logic(QF_LIA)
    backend.new_var("x", Type.int())
    x = QF_LIA.var("x", ints.Int())
    backend.assert_("x", QF_LIA.eq(x, QF_LIA.int_const(-7)))

    assert backend.check_sat()
    assert backend.solve() == {"x": U64_MASK - 6}


def test_raw_channel(backend):
    """Test raw commands and replies."""
    backend.set_logic(QF_BV)
    backend.new_var("y", Type.bitvec(2))
    backend.raw_write("(assert (bvugt y #b10))")
    backend.raw_write("(check-sat)")
    assert backend.raw_read() == "sat"
    backend.raw_write("(get-value (y))")
    assert backend.raw_read() == "((y #b11))"


def test_solver_error_reply(backend):
    """Test a solver error is raised by the command that caused it."""
    backend.set_logic(QF_BV)
    with pytest.raises(BackendError):
        backend.raw_write("(assert undefined_symbol)")
    assert backend.raw_read() == ""


def test_session_usable_after_error(backend):
    """Test answers stay in step with commands after a solver error."""
    backend.set_logic(QF_BV)
    backend.new_var("y", Type.bitvec(2))
    backend.assert_("y", "(= y #b01)")
    with pytest.raises(BackendError):
        backend.raw_write("(assert (= y undefined_sym))")

    assert backend.check_sat() is True
    assert backend.solve() == {"y": 1}

    backend.raw_write("(assert (= y #b10))")
    assert backend.check_sat() is False
    with pytest.raises(Unsat):
        backend.solve()


def test_failed_assert_is_not_recorded(backend):
    backend.set_logic(QF_BV)
    backend.new_var("y", Type.bitvec(2))
    with pytest.raises(BackendError):
        backend.assert_("y", "(= y nothing_here)")
    assert backend.assertions == []
    assert backend.check_sat() is True


def test_new_var_adopts_synthesized_declaration(backend):
    """Test declaring a variable a term already introduced."""
    backend.set_logic(QF_BV)
    z = QF_BV.var("z", bitvec.BitVector(8))
    backend.assert_("z", QF_BV.eq(z, QF_BV.bv_const(4, 8)))

    backend.new_var("z", Type.bitvec(8))
    with pytest.raises(DuplicateDeclarationError):
        backend.new_var("z", Type.bitvec(8))
    assert backend.check_sat()
    assert backend.solve() == {"z": 4}


def test_new_var_rejects_synthesized_sort_mismatch(backend):
    backend.set_logic(QF_BV)
    z = QF_BV.var("z", bitvec.BitVector(8))
    backend.assert_("z", QF_BV.eq(z, QF_BV.bv_const(4, 8)))
    with pytest.raises(SortMismatchError):
        backend.new_var("z", Type.bitvec(4))


def test_synthesized_declarations(backend):
    """Test arrays and functions used only inside terms are declared."""
    backend.set_logic(QF_AUFBV)
    backend.new_var("x", Type.bitvec(8))
    bv8 = QF_AUFBV.sort(bitvec.BitVector(8))
    mem = QF_AUFBV.var("mem", array_ex.Array(bv8, bv8))
    f = uf.Apply("f", (bv8,), QF_AUFBV.sort(core.Bool()))
    x = QF_AUFBV.var("x", bitvec.BitVector(8))

    backend.assert_("x", QF_AUFBV.eq(QF_AUFBV.apply(array_ex.OpCodes.SELECT, mem, x), x))
    backend.assert_("x", QF_AUFBV.apply(f, x))
    backend.assert_("x", QF_AUFBV.eq(x, QF_AUFBV.bv_const(3, 8)))

    assert backend.check_sat()
    assert backend.solve() == {"x": 3}


def test_enumeration(backend):
    """Test blocking assertions accumulate in the live session."""
    m = ConstraintModel(QF_BV)
    m.declare("y", Type.bitvec(3))
    assert sorted(m.solve_all_for("y", backend)) == list(range(8))


def test_close():
    b = SMT2ProcessBackend("z3")
    b.close()
    assert b.closed
    with pytest.raises(BackendError):
        b.set_logic(QF_BV)
    b.close()


def test_missing_executable():
    with pytest.raises(BackendError):
        SMT2ProcessBackend("/nonexistent/solver")
