"""
Tests for type translator.
"""
import pytest
import z3

from smtcompose.logics import QF_AUFBV, QF_LIA
from smtcompose.theories import array_ex, bitvec, core, ints
from smtcompose.translator import TypeTranslator
from smtcompose.types import Type


def test_translate_backend_types():
    """Test translation of Int and bit-vector types."""
    translator = TypeTranslator()

    assert translator.translate_type(Type.int()) == z3.IntSort()
    assert translator.translate_type(Type.bitvec(32)) == z3.BitVecSort(32)


def test_translate_var():
    """Test creating constants of backend types."""
    translator = TypeTranslator()

    x = translator.translate_var("x", Type.bitvec(32))
    n = translator.translate_var("n", Type.int())

    assert isinstance(x, z3.BitVecRef)
    assert x.size() == 32
    assert str(x) == "x"
    assert isinstance(n, z3.ArithRef)


def test_translate_composed_sorts():
    """Test translation of composed logic sorts."""
    translator = TypeTranslator()

    assert translator.translate_sort(QF_AUFBV.sort(core.Bool())) == z3.BoolSort()
    assert translator.translate_sort(QF_AUFBV.sort(bitvec.BitVector(8))) == z3.BitVecSort(8)
    assert translator.translate_sort(QF_LIA.sort(ints.Int())) == z3.IntSort()


def test_translate_array_sort():
    """Test translation of nested array sorts."""
    translator = TypeTranslator()
    bv32 = QF_AUFBV.sort(bitvec.BitVector(32))
    bv8 = QF_AUFBV.sort(bitvec.BitVector(8))
    mem = QF_AUFBV.sort(array_ex.Array(bv32, bv8))
    banks = QF_AUFBV.sort(array_ex.Array(bv8, mem))

    var = translator.translate_var("mem", mem)
    assert isinstance(var, z3.ArrayRef)
    assert var.domain() == z3.BitVecSort(32)
    assert var.range() == z3.BitVecSort(8)

    nested = translator.translate_sort(banks)
    assert nested.range() == z3.ArraySort(z3.BitVecSort(32), z3.BitVecSort(8))


def test_translate_function():
    """Test uninterpreted function declarations."""
    translator = TypeTranslator()
    bv8 = QF_AUFBV.sort(bitvec.BitVector(8))

    f = translator.translate_function("f", (bv8, bv8), QF_AUFBV.sort(core.Bool()))

    assert f.arity() == 2
    assert f.range() == z3.BoolSort()

    solver = z3.Solver()
    a = z3.BitVec("a", 8)
    solver.add(f(a, a), z3.Not(f(a, a)))
    assert solver.check() == z3.unsat


def test_unknown_sort_fails():
    """Test sorts with no Z3 counterpart are rejected."""
    translator = TypeTranslator()
    with pytest.raises(TypeError):
        translator.translate_sort(object())


def test_sort_cache():
    """Test translated sorts are cached."""
    translator = TypeTranslator()
    sort = QF_AUFBV.sort(bitvec.BitVector(16))
    first = translator.translate_sort(sort)
    assert translator.translate_sort(sort) is first
