"""
Abstract interface for SMT solver backends.
"""
from typing import Any, Hashable, Protocol, Union

from ..types import Model, Type


class SMTBackend(Protocol):
    """Protocol every solver integration implements.

    This is a minimal API; operation names follow their SMT-LIB 2 meaning.
    Features it does not cover go through `raw_write` / `raw_read`.

    A backend instance owns exactly one solver session and one logic for its
    lifetime.
    """

    def set_logic(self, logic: Union[str, Any]) -> None:
        """Select the logic. Must precede any declaration.

        Args:
            logic: A `Logic` or its SMT-LIB name (e.g. "QF_AUFBV")

        Raises:
            BackendStateError: If a logic was already selected
        """
        ...

    def new_var(self, ident: Hashable, ty: Type) -> None:
        """Declare `ident` with the concrete type `ty`.

        Raises:
            BackendStateError: If no logic was selected
            DuplicateDeclarationError: If `ident` is already declared
        """
        ...

    def assert_(self, ident: Hashable, assertion: Any) -> None:
        """Record a formula.

        Args:
            ident: Label kept as bookkeeping; not itself a value
            assertion: Backend-defined formula representation
        """
        ...

    def check_sat(self) -> bool:
        """Run one satisfiability check over all asserted formulas.

        Returns:
            True if satisfiable, False if unsatisfiable

        Raises:
            Undefined: If the solver could not decide
            BackendError: On transport failure
        """
        ...

    def solve(self) -> Model:
        """Return values for every declared identifier.

        Requires the most recent `check_sat` to still be current.

        Raises:
            Unsat: If the last check was unsatisfiable
            BackendStateError: If there is no current check
        """
        ...

    def raw_write(self, text: str) -> None:
        """Send solver-native text."""
        ...

    def raw_read(self) -> str:
        """Receive solver-native text."""
        ...
