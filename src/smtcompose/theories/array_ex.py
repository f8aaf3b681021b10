"""
Extensional array theory.

`Array` is parametric: its index and element sorts are composed sorts of
whichever logic the theory is merged into, so arrays can nest and range over
any sort of that logic.

See: https://smt-lib.org/theories-ArraysEx.shtml
"""
from dataclasses import dataclass
from typing import Any

from .base import FreeVarOp, OpSymbols, Sort, Theory


@dataclass(frozen=True)
class Array(Sort):
    """Array sort from `index` to `element`.

    Attributes:
        index: Composed index sort
        element: Composed element sort
    """
    index: Any
    element: Any

    def smtlib(self) -> str:
        return f"(Array {self.index.smtlib()} {self.element.smtlib()})"


class OpCodes(OpSymbols):
    SELECT = ("select", 2)
    STORE = ("store", 3)


@dataclass(frozen=True)
class FreeVar(FreeVarOp):
    """Unbound array variable."""


THEORY = Theory(
    name="ArraysEx",
    sorts=(Array,),
    opcodes=(OpCodes, FreeVar),
    free_var=FreeVar,
)
