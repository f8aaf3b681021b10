"""
Tests for the theory modules.
"""
import copy
from dataclasses import dataclass

import pytest

from smtcompose.errors import CompositionError
from smtcompose.theories import array_ex, bitvec, core, ints, uf
from smtcompose.theories.base import FreeVarOp, OpSymbols, Sort, Theory, quote_symbol


def test_core_variants():
    """Test the core theory exposes Bool and its connectives."""
    assert core.THEORY.sort_variants() == ("Bool",)
    ops = core.THEORY.op_variants()
    for name in ("TRUE", "FALSE", "NOT", "AND", "OR", "EQ", "ITE", "FreeVar"):
        assert name in ops
    assert core.THEORY.free_var is core.FreeVar


def test_op_symbols_carry_symbol_and_arity():
    """Test enum operators know their SMT-LIB symbol and arity."""
    assert core.OpCodes.IMPLIES.smtlib() == "=>"
    assert core.OpCodes.ITE.arity == 3
    assert core.OpCodes.AND.arity == -1
    assert bitvec.OpCodes.BVULT.smtlib() == "bvult"
    assert array_ex.OpCodes.STORE.arity == 3
    assert ints.OpCodes.NEG is not ints.OpCodes.SUB


def test_bitvector_sort():
    """Test bit-vector sort rendering and equality."""
    assert bitvec.BitVector(32).smtlib() == "(_ BitVec 32)"
    assert bitvec.BitVector(8) == bitvec.BitVector(8)
    assert bitvec.BitVector(8) != bitvec.BitVector(16)
    assert copy.deepcopy(bitvec.BitVector(8)) == bitvec.BitVector(8)
    assert "BitVector(width=8)" in repr(bitvec.BitVector(8))

    with pytest.raises(ValueError):
        bitvec.BitVector(0)


def test_bitvec_parametric_ops():
    """Test literals and indexed bit-vector operators."""
    assert bitvec.Const(5, 8).smtlib() == "(_ bv5 8)"
    assert bitvec.Const(-1, 4).value == 15
    assert bitvec.Extract(7, 0).smtlib() == "(_ extract 7 0)"
    assert bitvec.Extract(7, 0).arity == 1
    assert bitvec.ZeroExtend(24).smtlib() == "(_ zero_extend 24)"
    assert bitvec.SignExtend(8).smtlib() == "(_ sign_extend 8)"
    assert bitvec.Repeat(2).smtlib() == "(_ repeat 2)"
    assert bitvec.RotateLeft(3).smtlib() == "(_ rotate_left 3)"
    assert bitvec.RotateRight(3).smtlib() == "(_ rotate_right 3)"

    with pytest.raises(ValueError):
        bitvec.Extract(0, 3)


def test_int_literals():
    """Test integer literal rendering."""
    assert ints.Const(5).smtlib() == "5"
    assert ints.Const(-5).smtlib() == "(- 5)"
    assert ints.Int().smtlib() == "Int"


def test_uf_contributes_no_sorts():
    """Test the UF theory only adds function application."""
    assert uf.THEORY.sorts == ()
    assert uf.THEORY.free_var is None
    assert uf.THEORY.op_variants() == ("Apply",)


def test_free_var_renders_symbol():
    """Test free variables render as (quoted) symbols."""
    assert core.FreeVar("p", None).smtlib() == "p"
    assert bitvec.FreeVar("my var", None).smtlib() == "|my var|"
    assert quote_symbol("x.1") == "x.1"
    assert quote_symbol("1x") == "|1x|"
    with pytest.raises(ValueError):
        quote_symbol("a|b")


def test_theory_requires_free_var_for_sorts():
    """Test a sort-producing theory must provide a free-variable op."""

    @dataclass(frozen=True)
    class Widget(Sort):
        def smtlib(self) -> str:
            return "Widget"

    with pytest.raises(CompositionError):
        Theory(name="Widgets", sorts=(Widget,), opcodes=())


def test_theory_rejects_duplicate_variants():
    """Test variant names must be unique within a theory."""

    class Ops(OpSymbols):
        FreeVar = ("freevar", 0)

    @dataclass(frozen=True)
    class FreeVar(FreeVarOp):
        pass

    with pytest.raises(CompositionError):
        Theory(name="Dup", opcodes=(Ops, FreeVar))


def test_theory_rejects_non_variants():
    """Test theory members must be Sort/OpCode variants."""
    with pytest.raises(CompositionError):
        Theory(name="Bad", sorts=(int,))
    with pytest.raises(CompositionError):
        Theory(name="Bad", opcodes=(str,))


def test_reserved_words_are_quoted():
    """Test identifiers spelled like SMT-LIB reserved words are quoted."""
    for word in ("_", "!", "as", "let", "par", "exists", "forall", "match", "assert"):
        assert quote_symbol(word) == f"|{word}|"
    assert quote_symbol("lets") == "lets"
