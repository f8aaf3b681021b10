"""
Type translator from backend types and composed sorts to Z3 sorts.
"""
from typing import Any, Dict, Union

import z3

from ..theories import array_ex, bitvec, core, ints
from ..types import Type, TypeKind


class TypeTranslator:
    """Translates smtcompose types and sorts to Z3 sorts.

    Mapping:
        Type.int() / ints.Int -> IntSort
        Type.bitvec(N) / bitvec.BitVector(N) -> BitVecSort(N)
        core.Bool -> BoolSort
        array_ex.Array(I, E) -> ArraySort(I, E)
    """

    def __init__(self, ctx: z3.Context = None):
        """Initialize type translator.

        Args:
            ctx: Z3 context the sorts are created in (default: main context)
        """
        self.ctx = ctx
        self._type_cache: Dict[Any, z3.SortRef] = {}

    def translate_type(self, ty: Type) -> z3.SortRef:
        """Translate a backend type to a Z3 sort.

        Args:
            ty: Int or bit-vector type

        Returns:
            Z3 sort
        """
        if ty.kind is TypeKind.INT:
            return z3.IntSort(self.ctx)
        return z3.BitVecSort(ty.width, self.ctx)

    def translate_sort(self, sort: Any) -> z3.SortRef:
        """Translate a composed (`TaggedSort`) or bare theory sort to a Z3 sort.

        Raises:
            TypeError: If the sort variant has no Z3 counterpart
        """
        cached = self._type_cache.get(sort)
        if cached is not None:
            return cached

        value = getattr(sort, "value", sort)
        if isinstance(value, core.Bool):
            result = z3.BoolSort(self.ctx)
        elif isinstance(value, bitvec.BitVector):
            result = z3.BitVecSort(value.width, self.ctx)
        elif isinstance(value, ints.Int):
            result = z3.IntSort(self.ctx)
        elif isinstance(value, array_ex.Array):
            result = z3.ArraySort(self.translate_sort(value.index),
                                  self.translate_sort(value.element))
        else:
            raise TypeError(f"No Z3 sort for {sort!r}")

        self._type_cache[sort] = result
        return result

    def translate_var(self, name: str, ty: Union[Type, Any]) -> z3.ExprRef:
        """Create a Z3 constant named `name` of a type or sort.

        Args:
            name: Variable name
            ty: Backend `Type` or composed sort

        Returns:
            Z3 constant
        """
        if isinstance(ty, Type):
            return z3.Const(name, self.translate_type(ty))
        return z3.Const(name, self.translate_sort(ty))

    def translate_function(self, name: str, domain: Any, range: Any) -> z3.FuncDeclRef:
        """Create an uninterpreted Z3 function declaration."""
        sorts = [self.translate_sort(s) for s in domain] + [self.translate_sort(range)]
        return z3.Function(name, *sorts)
