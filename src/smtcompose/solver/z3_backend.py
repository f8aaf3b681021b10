"""
Z3 SMT solver backend implementation.
"""
import logging
import time
from typing import Any, Dict, Hashable, List, Optional, Tuple, Union

import z3

from ..errors import (
    BackendError,
    BackendStateError,
    DuplicateDeclarationError,
    SortMismatchError,
    UndeclaredIdentifierError,
    Undefined,
    Unsat,
)
from ..translator.term_translator import TermTranslator
from ..types import Model, Type, to_u64
from .result import SolverResult

logger = logging.getLogger(__name__)


class Z3Backend:
    """Z3 backend using the Python bindings.

    Assertions may be `Term` objects, SMT-LIB text or Z3 Boolean expressions.
    The raw channel accepts SMT-LIB `assert`/`declare-*` commands and reads
    back a transcript of the solver's replies.
    """

    name = "z3"

    def __init__(self):
        """Initialize Z3 solver instance."""
        self.solver = z3.Solver()
        self.logic: Optional[str] = None
        self.translator = TermTranslator()
        self.solver_time_ms = 0.0
        self._types: Dict[Hashable, Type] = {}
        self._assertions: List[Tuple[Hashable, Any]] = []
        self._last: Optional[SolverResult] = None
        self._responses: List[str] = []

    def set_logic(self, logic: Union[str, Any]) -> None:
        """Select the logic for this session.

        Args:
            logic: `Logic` or SMT-LIB logic name
        """
        if self.logic is not None:
            raise BackendStateError(f"Logic already set to {self.logic}")
        self.logic = str(logic)
        logger.debug("z3: logic %s", self.logic)

    def new_var(self, ident: Hashable, ty: Type) -> None:
        """Declare a variable.

        A name already introduced by an earlier term or raw declaration is
        adopted if its sort matches `ty`.

        Args:
            ident: Variable identifier
            ty: Concrete type
        """
        self._require_logic()
        if ident in self._types:
            raise DuplicateDeclarationError(f"Variable {ident!r} already declared")
        existing = self.translator.decls.get(str(ident))
        if existing is None:
            self.translator.declare(ident, ty)
        elif not (isinstance(existing, z3.ExprRef)
                  and existing.sort() == self.translator.types.translate_type(ty)):
            raise SortMismatchError(f"{ident!r} was already used at another sort, cannot declare it as {ty}")
        self._types[ident] = ty

    def assert_(self, ident: Hashable, assertion: Any) -> None:
        """Add a formula to the solver.

        Args:
            ident: Label kept with the assertion
            assertion: `Term`, SMT-LIB text or Z3 Boolean expression
        """
        self._require_logic()
        self.solver.add(*self._translate(assertion))
        self._assertions.append((ident, assertion))
        self._last = None

    def check_sat(self) -> bool:
        """Check satisfiability of the asserted formulas.

        Returns:
            True if SAT, False if UNSAT
        """
        start_time = time.time()
        result = self.solver.check()
        self.solver_time_ms += (time.time() - start_time) * 1000

        if result == z3.sat:
            self._last = SolverResult.SAT
        elif result == z3.unsat:
            self._last = SolverResult.UNSAT
        else:
            self._last = SolverResult.UNKNOWN
        self._responses.append(self._last.value)

        if self._last == SolverResult.UNKNOWN:
            raise Undefined(f"z3 returned unknown: {self.solver.reason_unknown()}")
        return self._last == SolverResult.SAT

    def solve(self) -> Model:
        """Extract the model of the last check.

        Returns:
            Dictionary mapping every declared identifier to its value
        """
        if self._last is None:
            raise BackendStateError("solve() requires a current check_sat()")
        if self._last == SolverResult.UNSAT:
            raise Unsat("No model: constraints are unsatisfiable")
        if self._last == SolverResult.UNKNOWN:
            raise Undefined("No model: satisfiability is unknown")

        model = self.solver.model()
        result: Model = {}
        for ident in self._types:
            value = model.eval(self.var(ident), model_completion=True)
            result[ident] = to_u64(value.as_long())
        self._responses.append(model.sexpr())
        return result

    def raw_write(self, text: str) -> None:
        """Send SMT-LIB `assert`/`declare-*` commands to the solver."""
        self._require_logic()
        self.solver.add(*self._translate(text))
        self._last = None

    def raw_read(self) -> str:
        """Return and clear the transcript of replies since the last read."""
        out = "\n".join(self._responses)
        self._responses.clear()
        return out

    def var(self, ident: Hashable) -> z3.ExprRef:
        """Get the Z3 constant of a declared variable.

        Args:
            ident: Variable identifier

        Returns:
            Z3 constant, for building native assertions
        """
        var = self.translator.decls.get(str(ident))
        if var is None:
            raise UndeclaredIdentifierError(f"Variable {ident!r} is not declared")
        return var

    @property
    def assertions(self) -> List[Tuple[Hashable, Any]]:
        return list(self._assertions)

    def _require_logic(self) -> None:
        if self.logic is None:
            raise BackendStateError("set_logic() must be called first")

    def _translate(self, formula: Any) -> List[z3.BoolRef]:
        try:
            return self.translator.translate(formula)
        except z3.Z3Exception as e:
            raise BackendError(f"z3 rejected formula: {e}") from e
