"""
Building blocks shared by all theory modules.

A theory exposes a closed set of sort variants and a closed set of operator
variants. Fixed-symbol operators are members of an `OpSymbols` enum; operators
with parameters (constants, indexed operators, free variables) are frozen
dataclasses deriving from `OpCode`.
"""
import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterator, Optional, Tuple

from ..errors import CompositionError

_SIMPLE_SYMBOL = re.compile(r"^[A-Za-z~!@$%^&*_+=<>.?/\-][A-Za-z0-9~!@$%^&*_+=<>.?/\-]*$")

# Reserved words of SMT-LIB 2.6 (section 3.1); these are never simple symbols
_RESERVED = frozenset((
    "!", "_", "as", "let", "exists", "forall", "match", "par",
    "BINARY", "DECIMAL", "HEXADECIMAL", "NUMERAL", "STRING",
    "assert", "check-sat", "check-sat-assuming", "declare-const",
    "declare-datatype", "declare-datatypes", "declare-fun", "declare-sort",
    "define-fun", "define-fun-rec", "define-funs-rec", "define-sort", "echo",
    "exit", "get-assertions", "get-assignment", "get-info", "get-model",
    "get-option", "get-proof", "get-unsat-assumptions", "get-unsat-core",
    "get-value", "pop", "push", "reset", "reset-assertions", "set-info",
    "set-logic", "set-option",
))


def quote_symbol(name: Any) -> str:
    """Render an identifier as an SMT-LIB symbol, quoting it when needed."""
    s = str(name)
    if _SIMPLE_SYMBOL.match(s) and s not in _RESERVED:
        return s
    if "|" in s or "\\" in s:
        raise ValueError(f"Identifier cannot be quoted as an SMT-LIB symbol: {s!r}")
    return f"|{s}|"


class Sort:
    """Base class of every theory sort variant."""

    def smtlib(self) -> str:
        raise NotImplementedError


class OpCode:
    """Base class of every parametric operator variant."""

    @property
    def arity(self) -> int:
        return 0

    def smtlib(self) -> str:
        raise NotImplementedError


class OpSymbols(Enum):
    """Fixed-symbol operators of a theory.

    Member values are `(symbol, arity)` pairs. An arity of -1 marks a
    chainable/variadic operator that takes at least two arguments.
    """

    def __init__(self, symbol: str, arity: int):
        self.symbol = symbol
        self.arity = arity

    def smtlib(self) -> str:
        return self.symbol


@dataclass(frozen=True)
class FreeVarOp(OpCode):
    """An unbound named value of `sort`.

    Attributes:
        name: Identifier of the variable
        sort: Composed sort of the variable (a `TaggedSort`)
    """
    name: Any
    sort: Any

    def smtlib(self) -> str:
        return quote_symbol(self.name)


def _is_symbol_enum(cls: Any) -> bool:
    return isinstance(cls, type) and issubclass(cls, OpSymbols)


@dataclass(frozen=True)
class Theory:
    """Descriptor of one theory module.

    Attributes:
        name: Theory name (e.g. "FixedSizeBitVectors")
        sorts: Sort variant classes
        opcodes: Operator variant classes and `OpSymbols` enums
        free_var: The `FreeVarOp` subclass for this theory's sorts, if any
    """
    name: str
    sorts: Tuple[type, ...] = ()
    opcodes: Tuple[type, ...] = ()
    free_var: Optional[type] = None

    def __post_init__(self):
        for cls in self.sorts:
            if not (isinstance(cls, type) and issubclass(cls, Sort)):
                raise CompositionError(f"{self.name}: {cls!r} is not a Sort variant")
        for cls in self.opcodes:
            if not (_is_symbol_enum(cls) or (isinstance(cls, type) and issubclass(cls, OpCode))):
                raise CompositionError(f"{self.name}: {cls!r} is not an OpCode variant")

        if self.sorts and self.free_var is None:
            raise CompositionError(f"{self.name}: theory introduces sorts but has no free-variable op")
        if self.free_var is not None:
            if self.free_var not in self.opcodes or not issubclass(self.free_var, FreeVarOp):
                raise CompositionError(f"{self.name}: free-variable op must be one of its FreeVarOp variants")

        for names in (self.sort_variants(), self.op_variants()):
            seen = set()
            for n in names:
                if n in seen:
                    raise CompositionError(f"{self.name}: duplicate variant '{n}'")
                seen.add(n)

    def sort_variants(self) -> Tuple[str, ...]:
        return tuple(cls.__name__ for cls in self.sorts)

    def op_variants(self) -> Tuple[str, ...]:
        names = []
        for cls in self.opcodes:
            if _is_symbol_enum(cls):
                names.extend(m.name for m in cls)
            else:
                names.append(cls.__name__)
        return tuple(names)

    def variant_classes(self) -> Iterator[type]:
        yield from self.sorts
        yield from self.opcodes
