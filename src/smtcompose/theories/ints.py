"""
Integer theory, restricted to the operators used in linear problems.

See: https://smt-lib.org/theories-Ints.shtml
"""
from dataclasses import dataclass

from .base import FreeVarOp, OpCode, OpSymbols, Sort, Theory


@dataclass(frozen=True)
class Int(Sort):
    """The unbounded integer sort."""

    def smtlib(self) -> str:
        return "Int"


class OpCodes(OpSymbols):
    NEG = ("-", 1)
    ADD = ("+", -1)
    SUB = ("-", -1)
    MUL = ("*", -1)
    DIV = ("div", 2)
    MOD = ("mod", 2)
    ABS = ("abs", 1)
    LT = ("<", -1)
    LE = ("<=", -1)
    GT = (">", -1)
    GE = (">=", -1)


@dataclass(frozen=True)
class Const(OpCode):
    """Integer literal."""
    value: int

    def smtlib(self) -> str:
        if self.value < 0:
            return f"(- {-self.value})"
        return str(self.value)


@dataclass(frozen=True)
class FreeVar(FreeVarOp):
    """Unbound integer variable."""


THEORY = Theory(
    name="Ints",
    sorts=(Int,),
    opcodes=(OpCodes, Const, FreeVar),
    free_var=FreeVar,
)
