"""
Formulas over a composed operator union.
"""
from dataclasses import dataclass
from typing import Any, Iterator, Tuple

from ..theories.base import FreeVarOp
from ..theories.uf import Apply
from ..translator.smt2_printer import render_term


@dataclass(frozen=True)
class Term:
    """Application of a composed operator to argument terms.

    Attributes:
        op: A `TaggedOp` of the logic the term was built with
        args: Argument terms
    """
    op: Any
    args: Tuple["Term", ...] = ()

    def walk(self) -> Iterator["Term"]:
        """Pre-order traversal of the term and its sub-terms."""
        stack = [self]
        while stack:
            t = stack.pop()
            yield t
            stack.extend(reversed(t.args))

    def free_vars(self) -> Iterator[FreeVarOp]:
        """Distinct free variables referenced by the term, in order of appearance."""
        seen = set()
        for t in self.walk():
            v = t.op.value
            if isinstance(v, FreeVarOp) and v not in seen:
                seen.add(v)
                yield v

    def functions(self) -> Iterator[Apply]:
        """Distinct uninterpreted function symbols applied in the term."""
        seen = set()
        for t in self.walk():
            v = t.op.value
            if isinstance(v, Apply) and v not in seen:
                seen.add(v)
                yield v

    def smtlib(self) -> str:
        return render_term(self)

    def __str__(self) -> str:
        return self.smtlib()
