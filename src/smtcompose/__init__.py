"""
Typed composition of SMT theories into logics, and a minimal protocol for
driving external solvers to one or all satisfying values.

Theories (`theories`) contribute sorts and operators; the composer
(`logics`) merges them into named logics; a `ConstraintModel` collects
declarations and assertions; backends (`solver`) realize the model against a
decision procedure; the enumerator extracts one or every satisfying value.
"""

__version__ = "0.1.0"

from .errors import (
    BackendError,
    BackendStateError,
    CompositionError,
    DeclarationError,
    DuplicateDeclarationError,
    ModelValueError,
    SMTError,
    SortMismatchError,
    UndeclaredIdentifierError,
    Undefined,
    Unsat,
    UnsupportedTypeError,
)
from .types import Model, Type, TypeKind
from .logics import (
    LOGICS,
    QF_ABV,
    QF_AUFB,
    QF_AUFBV,
    QF_AX,
    QF_BV,
    QF_LIA,
    Logic,
    Term,
    compose_fns,
    compose_sorts,
    define_logic,
    get_logic,
)
from .solver import (
    EnumerationResult,
    SMT2ProcessBackend,
    SMTBackend,
    SolverResult,
    Z3Backend,
)
from .model import ConstraintModel
from .enumerator import enumerate_values, solve_all_for, solve_for

__all__ = [
    "BackendError",
    "BackendStateError",
    "CompositionError",
    "DeclarationError",
    "DuplicateDeclarationError",
    "ModelValueError",
    "SMTError",
    "SortMismatchError",
    "UndeclaredIdentifierError",
    "Undefined",
    "Unsat",
    "UnsupportedTypeError",
    "Model",
    "Type",
    "TypeKind",
    "LOGICS",
    "QF_ABV",
    "QF_AUFB",
    "QF_AUFBV",
    "QF_AX",
    "QF_BV",
    "QF_LIA",
    "Logic",
    "Term",
    "compose_fns",
    "compose_sorts",
    "define_logic",
    "get_logic",
    "EnumerationResult",
    "SMT2ProcessBackend",
    "SMTBackend",
    "SolverResult",
    "Z3Backend",
    "ConstraintModel",
    "enumerate_values",
    "solve_all_for",
    "solve_for",
]
