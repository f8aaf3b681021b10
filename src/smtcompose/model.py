"""
Constraint model: declared variables and assertions over one logic.
"""
import weakref
from types import MappingProxyType
from typing import Any, Hashable, List, Mapping, Optional, Tuple

from . import enumerator
from .errors import DuplicateDeclarationError, SortMismatchError, UndeclaredIdentifierError
from .logics.composer import Logic
from .logics.terms import Term
from .solver.base import SMTBackend
from .solver.result import EnumerationResult
from .solver.script import generate_model_smt2
from .types import Type


class ConstraintModel:
    """Named, typed variables and the formulas asserted over them.

    The model does not decide anything itself; it is pushed to a backend with
    `realize`, which the solving helpers call for you. Pushing is incremental:
    a backend only receives what it has not seen yet, so a model can grow
    between solves.

    Example:
        >>> m = ConstraintModel(QF_LIA)
        >>> x = m.declare("x", Type.int())
        >>> m.assert_("x", m.logic.eq(x, m.logic.int_const(5)))
        >>> m.solve_for("x", Z3Backend())
        5
    """

    def __init__(self, logic: Logic):
        self.logic = logic
        self._types: dict = {}
        self._vars: dict = {}
        # undeclared name -> sort it was used at in an assertion
        self._implicit: dict = {}
        self._assertions: List[Tuple[Hashable, Any]] = []
        # backend -> (declarations sent, assertions sent)
        self._sessions: "weakref.WeakKeyDictionary[Any, Tuple[int, int]]" = weakref.WeakKeyDictionary()

    def declare(self, ident: Hashable, ty: Type) -> Term:
        """Declare `ident` with type `ty`.

        A name may be declared after an assertion already used it, provided
        the sorts agree.

        Returns:
            The free-variable term standing for `ident`

        Raises:
            DuplicateDeclarationError: If `ident` is already declared
            UnsupportedTypeError: If the logic has no sort for `ty`
            SortMismatchError: If an assertion used `ident` at another sort
        """
        if ident in self._types:
            raise DuplicateDeclarationError(f"Variable {ident!r} already declared")
        sort = self.logic.sort_for_type(ty)
        used = self._implicit.get(ident)
        if used is not None and used != sort:
            raise SortMismatchError(f"{ident!r} is used as {used} but declared as {sort}")
        term = self.logic.var(ident, sort)
        self._implicit.pop(ident, None)
        self._types[ident] = ty
        self._vars[ident] = term
        return term

    def var(self, ident: Hashable) -> Term:
        try:
            return self._vars[ident]
        except KeyError:
            raise UndeclaredIdentifierError(f"Variable {ident!r} is not declared") from None

    def type_of(self, ident: Hashable) -> Type:
        try:
            return self._types[ident]
        except KeyError:
            raise UndeclaredIdentifierError(f"Variable {ident!r} is not declared") from None

    def assert_(self, ident: Hashable, assertion: Any) -> None:
        """Record `assertion` against the declared identifier `ident`.

        Args:
            ident: Declared identifier the formula is recorded under
            assertion: `Term` of this model's logic, or backend-native formula

        Raises:
            UndeclaredIdentifierError: If `ident` is not declared
            CompositionError: If a `Term` uses operators outside the logic
            SortMismatchError: If a `Term` uses a name at a sort other than the
                one it is declared (or was earlier used) at
        """
        if ident not in self._types:
            raise UndeclaredIdentifierError(f"Cannot assert over undeclared variable {ident!r}")
        if isinstance(assertion, Term):
            self.logic.check_term(assertion)
            implicit = {}
            for v in assertion.free_vars():
                declared = self._vars.get(v.name)
                if declared is not None:
                    if declared.op.value.sort != v.sort:
                        raise SortMismatchError(
                            f"{v.name!r} is declared as {declared.op.value.sort} but used as {v.sort}")
                    continue
                used = self._implicit.get(v.name, implicit.get(v.name, v.sort))
                if used != v.sort:
                    raise SortMismatchError(f"{v.name!r} is used both as {used} and as {v.sort}")
                implicit[v.name] = v.sort
            self._implicit.update(implicit)
        self._assertions.append((ident, assertion))

    @property
    def declarations(self) -> Mapping[Hashable, Type]:
        return MappingProxyType(self._types)

    @property
    def assertions(self) -> Tuple[Tuple[Hashable, Any], ...]:
        return tuple(self._assertions)

    def realize(self, backend: SMTBackend) -> SMTBackend:
        """Push the logic, declarations and assertions not yet sent to `backend`.

        Progress is recorded item by item, so after a failure the next call
        resumes at the item that failed.
        """
        if backend not in self._sessions:
            backend.set_logic(self.logic)
            self._sessions[backend] = (0, 0)
        n_decls, n_asserts = self._sessions[backend]

        decls = list(self._types.items())
        for ident, ty in decls[n_decls:]:
            backend.new_var(ident, ty)
            n_decls += 1
            self._sessions[backend] = (n_decls, n_asserts)
        for ident, assertion in self._assertions[n_asserts:]:
            backend.assert_(ident, assertion)
            n_asserts += 1
            self._sessions[backend] = (n_decls, n_asserts)
        return backend

    def check_sat(self, backend: SMTBackend) -> bool:
        return self.realize(backend).check_sat()

    def solve_for(self, ident: Hashable, backend: SMTBackend) -> int:
        self.type_of(ident)
        return enumerator.solve_for(ident, self.realize(backend))

    def solve_all_for(self,
                      ident: Hashable,
                      backend: SMTBackend,
                      max_solutions: Optional[int] = None) -> List[int]:
        return self.enumerate_values(ident, backend, max_solutions).values

    def enumerate_values(self,
                         ident: Hashable,
                         backend: SMTBackend,
                         max_solutions: Optional[int] = None) -> EnumerationResult:
        ty = self.type_of(ident)
        return enumerator.enumerate_values(ident, ty, self.realize(backend), max_solutions)

    def to_smt2(self, get_values: bool = True) -> str:
        """Standalone SMT-LIB script for this model."""
        return generate_model_smt2(self, get_values=get_values)
