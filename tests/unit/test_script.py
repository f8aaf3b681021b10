"""
Tests for running a model as a one-shot SMT-LIB script.
"""
import pytest

from smtcompose import ConstraintModel
from smtcompose.logics import QF_BV
from smtcompose.solver import SolverResult, check_model_script, is_solver_available, write_model_smt2
from smtcompose.theories import bitvec
from smtcompose.translator import parse_get_value_output
from smtcompose.types import Type


def _model(value):
    m = ConstraintModel(QF_BV)
    x = m.declare("x", Type.bitvec(8))
    m.assert_("x", QF_BV.eq(x, QF_BV.bv_const(value, 8)))
    return m


def test_write_model_smt2(tmp_path):
    path = write_model_smt2(_model(9), tmp_path / "model.smt2")
    text = path.read_text()
    assert text.startswith("; constraint model over QF_BV")
    assert "(assert (= x (_ bv9 8)))" in text


@pytest.mark.skipif(not is_solver_available("z3"), reason="z3 executable not found")
def test_check_model_script(tmp_path):
    """Test a one-shot solver run on the generated script."""
    res = check_model_script(_model(9), tmp_path / "model.smt2", solver="z3", timeout_s=30)

    assert res.result == SolverResult.SAT
    assert res.returncode == 0
    values = res.stdout.split("\n", 1)[1]
    assert parse_get_value_output(values) == {"x": 9}
