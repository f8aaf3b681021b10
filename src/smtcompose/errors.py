"""
Exception hierarchy for smtcompose.

`Unsat` and `Undefined` are ordinary outcomes of a solving session and are
expected to be caught by callers. Composition errors are raised while logics
are being defined, before any constraint model exists.
"""


class SMTError(Exception):
    """Base class for every error raised by smtcompose."""


class Unsat(SMTError):
    """The current assertion set has no model."""


class Undefined(SMTError):
    """The solver could not decide satisfiability (unknown, timeout, ...)."""


class BackendError(SMTError):
    """Transport or solver-reported failure inside a backend."""


class BackendStateError(SMTError):
    """A backend operation was called out of protocol order."""


class CompositionError(SMTError):
    """A theory or logic composition is malformed."""


class DeclarationError(SMTError):
    """Misuse of variable declarations."""


class UndeclaredIdentifierError(DeclarationError):
    """An identifier was used before being declared."""


class DuplicateDeclarationError(DeclarationError):
    """An identifier was declared twice."""


class SortMismatchError(DeclarationError):
    """A term refers to a declared identifier with a different sort."""


class UnsupportedTypeError(SMTError):
    """A logic has no sort for the requested backend type."""


class ModelValueError(SMTError):
    """A model value cannot be represented as a 64-bit integer."""
