"""
Uninterpreted functions.

This theory adds no sorts; its only operator applies a named function whose
signature is given over the sorts of the enclosing logic.
"""
from dataclasses import dataclass
from typing import Any, Tuple

from .base import OpCode, Theory, quote_symbol


@dataclass(frozen=True)
class Apply(OpCode):
    """Application of the uninterpreted function `name`.

    Attributes:
        name: Function symbol
        domain: Composed argument sorts
        range: Composed result sort
    """
    name: str
    domain: Tuple[Any, ...]
    range: Any

    @property
    def arity(self) -> int:
        return len(self.domain)

    def smtlib(self) -> str:
        return quote_symbol(self.name)

    def declaration(self) -> str:
        dom = " ".join(s.smtlib() for s in self.domain)
        return f"(declare-fun {quote_symbol(self.name)} ({dom}) {self.range.smtlib()})"


THEORY = Theory(
    name="UF",
    opcodes=(Apply,),
)
