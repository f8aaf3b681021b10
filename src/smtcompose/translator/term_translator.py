"""
Translation of formulas (terms, SMT-LIB text) into Z3 expressions.

Terms are rendered to SMT-LIB and parsed by Z3 against the symbols declared
so far. Free variables and uninterpreted functions a term mentions but that
were never declared are synthesized from the sorts they carry.
"""
import logging
from typing import Any, Dict, List

import z3

from ..theories.base import FreeVarOp
from ..theories.uf import Apply
from .smt2_printer import render_assertion
from .type_translator import TypeTranslator

logger = logging.getLogger(__name__)


class TermTranslator:
    """Translates formulas to Z3, keeping the table of declared symbols.

    Attributes:
        decls: Symbol name -> Z3 constant or function declaration
    """

    def __init__(self, type_translator: TypeTranslator = None):
        self.types = type_translator or TypeTranslator()
        self.decls: Dict[str, Any] = {}

    def declare(self, name: Any, ty: Any) -> z3.ExprRef:
        """Declare a constant of a backend type or composed sort."""
        key = str(name)
        var = self.types.translate_var(key, ty)
        self.decls[key] = var
        return var

    def is_declared(self, name: Any) -> bool:
        return str(name) in self.decls

    def synthesize(self, term: Any) -> List[str]:
        """Declare the undeclared free variables and functions of `term`.

        Returns:
            Names of the symbols declared by this call
        """
        added = []
        for t in term.walk():
            v = t.op.value
            if isinstance(v, FreeVarOp) and not self.is_declared(v.name):
                self.declare(v.name, v.sort)
                added.append(str(v.name))
            elif isinstance(v, Apply) and not self.is_declared(v.name):
                self.decls[v.name] = self.types.translate_function(v.name, v.domain, v.range)
                added.append(v.name)
        if added:
            logger.debug("Synthesized declarations for %s", ", ".join(added))
        return added

    def translate(self, formula: Any) -> List[z3.BoolRef]:
        """Translate a formula to a list of Z3 Boolean expressions.

        Args:
            formula: Z3 expression, `Term`, SMT-LIB formula text, or SMT-LIB
                text made of `assert`/`declare-*` commands

        Raises:
            z3.Z3Exception: If Z3 rejects the text
        """
        if z3.is_expr(formula):
            return [formula]
        if isinstance(formula, str):
            text = formula if _is_command(formula) else render_assertion(formula)
        else:
            self.synthesize(formula)
            text = render_assertion(formula)
        exprs = list(z3.parse_smt2_string(text, decls=self.decls))
        for e in exprs:
            self._harvest(e)
        return exprs

    def _harvest(self, expr: z3.ExprRef) -> None:
        # Symbols declared inside raw text stay visible to later formulas
        stack = [expr]
        seen = set()
        while stack:
            e = stack.pop()
            if e.get_id() in seen:
                continue
            seen.add(e.get_id())
            if z3.is_app(e):
                d = e.decl()
                if d.kind() == z3.Z3_OP_UNINTERPRETED and d.name() not in self.decls:
                    self.decls[d.name()] = d if d.arity() else e
                stack.extend(e.children())


_COMMANDS = ("(assert", "(declare-fun", "(declare-const", "(define-fun", "(define-sort")


def _is_command(text: str) -> bool:
    head = text.lstrip()
    return any(head.startswith(c) for c in _COMMANDS)
