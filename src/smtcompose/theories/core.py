"""
Core theory: the Boolean sort and its connectives.

See: https://smt-lib.org/theories-Core.shtml
"""
from dataclasses import dataclass

from .base import FreeVarOp, OpSymbols, Sort, Theory


@dataclass(frozen=True)
class Bool(Sort):
    """The Boolean sort."""

    def smtlib(self) -> str:
        return "Bool"


class OpCodes(OpSymbols):
    TRUE = ("true", 0)
    FALSE = ("false", 0)
    NOT = ("not", 1)
    IMPLIES = ("=>", -1)
    AND = ("and", -1)
    OR = ("or", -1)
    XOR = ("xor", -1)
    EQ = ("=", -1)
    DISTINCT = ("distinct", -1)
    ITE = ("ite", 3)


@dataclass(frozen=True)
class FreeVar(FreeVarOp):
    """Unbound Boolean variable."""


THEORY = Theory(
    name="Core",
    sorts=(Bool,),
    opcodes=(OpCodes, FreeVar),
    free_var=FreeVar,
)
