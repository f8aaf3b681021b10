"""
Composition of theory modules into logics.

A logic merges an ordered list of theories into one closed sort union and one
closed operator union. Each branch of a union is a tag wrapping exactly one
theory; values of the union are `TaggedSort` / `TaggedOp` pairs. The logic also
records, for every sort branch, which operator variant stands for an
unconstrained free variable of that sort.

All validation happens when a logic is defined, so a malformed composition
fails at import time of the module defining it.
"""
import logging
from dataclasses import dataclass, fields, is_dataclass
from types import MappingProxyType
from typing import Any, Dict, Iterator, List, Mapping, Sequence, Tuple, Union

from ..errors import CompositionError, UnsupportedTypeError
from ..types import Type, TypeKind
from ..theories import bitvec, core, ints
from ..theories.base import FreeVarOp, OpCode, OpSymbols, Sort, Theory
from .terms import Term

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TaggedSort:
    """A sort of a composed logic: branch tag plus theory sort variant."""
    tag: str
    value: Sort

    def smtlib(self) -> str:
        return self.value.smtlib()

    def __str__(self) -> str:
        return self.smtlib()


@dataclass(frozen=True)
class TaggedOp:
    """An operator of a composed logic: branch tag plus theory op variant."""
    tag: str
    value: Any

    @property
    def arity(self) -> int:
        return self.value.arity

    def smtlib(self) -> str:
        return self.value.smtlib()

    def __str__(self) -> str:
        return self.smtlib()


class _TaggedUnion:
    """Disjoint tagged union over the variants of several theories."""

    _kind = "variant"

    def __init__(self, branches: Sequence[Tuple[str, Theory]]):
        self._branches: Dict[str, Theory] = {}
        self._owner: Dict[type, str] = {}

        for tag, theory in branches:
            if not isinstance(tag, str) or not tag.isidentifier():
                raise CompositionError(f"Invalid {self._kind} branch tag: {tag!r}")
            if tag in self._branches:
                raise CompositionError(f"Duplicate {self._kind} branch tag '{tag}'")
            if not isinstance(theory, Theory):
                raise CompositionError(f"Branch '{tag}' does not wrap a Theory: {theory!r}")
            for cls in self._classes(theory):
                if cls in self._owner:
                    raise CompositionError(
                        f"{self._kind} variant '{cls.__name__}' claimed by both "
                        f"'{self._owner[cls]}' and '{tag}'")
                self._owner[cls] = tag
            self._branches[tag] = theory

    @staticmethod
    def _classes(theory: Theory) -> Tuple[type, ...]:
        raise NotImplementedError

    @staticmethod
    def _names(theory: Theory) -> Tuple[str, ...]:
        raise NotImplementedError

    @property
    def tags(self) -> Tuple[str, ...]:
        return tuple(self._branches)

    def theory(self, tag: str) -> Theory:
        return self._branches[tag]

    def variants(self) -> List[Tuple[str, str]]:
        """All `(branch tag, variant name)` pairs of the union."""
        return [(tag, name)
                for tag, theory in self._branches.items()
                for name in self._names(theory)]

    def owns_class(self, cls: type) -> bool:
        return cls in self._owner

    def branch_of(self, inner: Any) -> str:
        """Return the tag of the branch that owns `inner`.

        Raises:
            CompositionError: If no branch of this union owns the variant
        """
        tag = self._owner.get(type(inner))
        if tag is None:
            raise CompositionError(f"{inner!r} is not a {self._kind} of this union")
        return tag

    def __len__(self) -> int:
        return len(self.variants())

    def __repr__(self) -> str:
        inner = ", ".join(f"{t}={th.name}" for t, th in self._branches.items())
        return f"{type(self).__name__}({inner})"


class SortUnion(_TaggedUnion):
    """Closed union of the sorts of several theories."""

    _kind = "sort"

    @staticmethod
    def _classes(theory: Theory) -> Tuple[type, ...]:
        return theory.sorts

    @staticmethod
    def _names(theory: Theory) -> Tuple[str, ...]:
        return theory.sort_variants()

    def wrap(self, inner: Union[Sort, TaggedSort]) -> TaggedSort:
        """Wrap a theory sort into this union, checking nested sort parameters."""
        if isinstance(inner, TaggedSort):
            self.check(inner)
            return inner
        tagged = TaggedSort(self.branch_of(inner), inner)
        self.check(tagged)
        return tagged

    def check(self, sort: TaggedSort) -> None:
        """Raise CompositionError unless `sort` (and its parameters) belong here."""
        if not isinstance(sort, TaggedSort):
            raise CompositionError(f"Expected a composed sort, got {sort!r}")
        if self._owner.get(type(sort.value)) != sort.tag:
            raise CompositionError(f"Sort {sort!r} is not a member of {self!r}")
        for param in _sort_params(sort.value):
            self.check(param)

    def __contains__(self, sort: Any) -> bool:
        try:
            self.check(sort)
        except CompositionError:
            return False
        return True


class OpUnion(_TaggedUnion):
    """Closed union of the operators of several theories."""

    _kind = "opcode"

    @staticmethod
    def _classes(theory: Theory) -> Tuple[type, ...]:
        return theory.opcodes

    @staticmethod
    def _names(theory: Theory) -> Tuple[str, ...]:
        return theory.op_variants()

    def wrap(self, inner: Union[OpCode, OpSymbols, TaggedOp]) -> TaggedOp:
        if isinstance(inner, TaggedOp):
            if self._owner.get(type(inner.value)) != inner.tag:
                raise CompositionError(f"Opcode {inner!r} is not a member of {self!r}")
            return inner
        return TaggedOp(self.branch_of(inner), inner)


def _sort_params(value: Any) -> Iterator[Any]:
    # Composed sorts embedded in a variant (array index/element, UF signature)
    if not is_dataclass(value):
        return
    for f in fields(value):
        v = getattr(value, f.name)
        if isinstance(v, (TaggedSort, Sort)):
            yield v
        elif isinstance(v, tuple):
            yield from (x for x in v if isinstance(x, (TaggedSort, Sort)))


def compose_sorts(**branches: Theory) -> SortUnion:
    """Build a sort union; keyword order is branch order.

    Example:
        >>> sorts = compose_sorts(BV=bitvec.THEORY, Core=core.THEORY)
    """
    return SortUnion(list(branches.items()))


def compose_fns(**branches: Theory) -> OpUnion:
    """Build an operator union; keyword order is branch order."""
    return OpUnion(list(branches.items()))


@dataclass(frozen=True, eq=False)
class Logic:
    """A named logic: composed sorts, composed operators and the
    free-variable mapping.

    Attributes:
        name: SMT-LIB logic name passed to a backend's `set_logic`
        sorts: Closed union of the logic's sorts
        fns: Closed union of the logic's operators
        free_vars: Sort branch tag -> free-variable operator class
    """
    name: str
    sorts: SortUnion
    fns: OpUnion
    free_vars: Mapping[str, type]

    def __post_init__(self):
        mapping = dict(self.free_vars)
        for tag in mapping:
            if tag not in self.sorts.tags:
                raise CompositionError(f"{self.name}: free-variable mapping names unknown sort branch '{tag}'")
        for tag in self.sorts.tags:
            if tag not in mapping:
                raise CompositionError(f"{self.name}: no free-variable op for sort branch '{tag}'")
            cls = mapping[tag]
            if not (isinstance(cls, type) and self.fns.owns_class(cls)):
                raise CompositionError(f"{self.name}: free-variable op {cls!r} for '{tag}' is outside the opcode union")
            if not issubclass(cls, FreeVarOp):
                raise CompositionError(f"{self.name}: {cls.__name__} for '{tag}' is not a free-variable op")
        object.__setattr__(self, "free_vars", MappingProxyType(mapping))

    def __str__(self) -> str:
        return self.name

    def __repr__(self) -> str:
        return f"Logic({self.name!r})"

    def sort(self, inner: Union[Sort, TaggedSort]) -> TaggedSort:
        return self.sorts.wrap(inner)

    def op(self, inner: Union[OpCode, OpSymbols, TaggedOp]) -> TaggedOp:
        tagged = self.fns.wrap(inner)
        for param in _sort_params(tagged.value):
            self.sorts.check(param)
        return tagged

    def free_var_op(self, sort: Union[Sort, TaggedSort]) -> type:
        """Operator class that denotes a free variable of `sort`."""
        return self.free_vars[self.sort(sort).tag]

    def var(self, name: Any, sort: Union[Sort, TaggedSort]) -> Term:
        """Synthesize the free-variable term `name` of `sort`."""
        tagged = self.sort(sort)
        cls = self.free_vars[tagged.tag]
        return Term(self.op(cls(name, tagged)))

    def apply(self, op: Union[OpCode, OpSymbols, TaggedOp], *args: Term) -> Term:
        """Build the application of `op` to `args`.

        Raises:
            CompositionError: If `op` is not part of this logic
            ValueError: If the number of arguments does not match the arity
        """
        tagged = self.op(op)
        arity = tagged.arity
        if arity == -1:
            if len(args) < 2:
                raise ValueError(f"'{tagged.smtlib()}' takes at least 2 arguments, got {len(args)}")
        elif len(args) != arity:
            raise ValueError(f"'{tagged.smtlib()}' takes {arity} arguments, got {len(args)}")
        for a in args:
            if not isinstance(a, Term):
                raise TypeError(f"Expected Term argument, got {type(a).__name__}")
        return Term(tagged, tuple(args))

    def check_term(self, term: Term) -> None:
        """Raise CompositionError if `term` uses an operator outside this logic."""
        for t in term.walk():
            self.op(t.op)

    def sort_for_type(self, ty: Type) -> TaggedSort:
        """Map a backend `Type` onto this logic's sort for it."""
        inner = ints.Int() if ty.kind is TypeKind.INT else bitvec.BitVector(ty.width)
        try:
            return self.sort(inner)
        except CompositionError:
            raise UnsupportedTypeError(f"Logic {self.name} has no sort for type {ty}") from None

    def bool_const(self, value: bool) -> Term:
        return self.apply(core.OpCodes.TRUE if value else core.OpCodes.FALSE)

    def eq(self, lhs: Term, rhs: Term) -> Term:
        return self.apply(core.OpCodes.EQ, lhs, rhs)

    def bv_const(self, value: int, width: int) -> Term:
        return self.apply(bitvec.Const(value, width))

    def int_const(self, value: int) -> Term:
        return self.apply(ints.Const(value))


def define_logic(name: str,
                 sorts: SortUnion,
                 fns: OpUnion,
                 free_vars: Mapping[str, type]) -> Logic:
    """Define a named logic, validating the composition.

    Raises:
        CompositionError: If the free-variable mapping is not total over the
            sort branches or points outside the operator union
    """
    logic = Logic(name, sorts, fns, free_vars)
    logger.debug("Defined logic %s: sorts=%r fns=%r (%d sort / %d op variants)",
                 name, sorts, fns, len(sorts), len(fns))
    return logic
