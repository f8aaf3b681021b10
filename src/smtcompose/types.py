"""
Backend-facing variable types and model values.

A backend only needs to know enough to declare a variable: either an
unbounded integer or a fixed-width bit-vector.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Hashable, Optional

from .errors import ModelValueError

U64_MASK = (1 << 64) - 1

# Identifier -> unsigned 64-bit value
Model = Dict[Hashable, int]


class TypeKind(Enum):
    INT = "Int"
    BITVECTOR = "BitVec"


@dataclass(frozen=True)
class Type:
    """Concrete type announced to a backend when declaring a variable.

    Attributes:
        kind: INT or BITVECTOR
        width: Bit width for BITVECTOR, None for INT
    """
    kind: TypeKind
    width: Optional[int] = None

    def __post_init__(self):
        if self.kind is TypeKind.BITVECTOR:
            if self.width is None or self.width < 1:
                raise ValueError(f"Bit-vector width must be positive, got {self.width}")
        elif self.width is not None:
            raise ValueError("Int type takes no width")

    @classmethod
    def int(cls) -> "Type":
        return cls(TypeKind.INT)

    @classmethod
    def bitvec(cls, width: int) -> "Type":
        return cls(TypeKind.BITVECTOR, width)

    @property
    def is_bitvec(self) -> bool:
        return self.kind is TypeKind.BITVECTOR

    def domain_size(self) -> Optional[int]:
        """Number of distinct values, or None when unbounded."""
        return 1 << self.width if self.is_bitvec else None

    def __str__(self) -> str:
        if self.kind is TypeKind.INT:
            return "Int"
        return f"(_ BitVec {self.width})"


def to_u64(value: Any) -> int:
    """Convert a solver value to its unsigned 64-bit representation.

    Negative integers are wrapped in two's complement.

    Raises:
        ModelValueError: If the value does not fit in 64 bits
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise ModelValueError(f"Model value is not an integer: {value!r}")
    if not -(1 << 63) <= value <= U64_MASK:
        raise ModelValueError(f"Model value does not fit in 64 bits: {value}")
    return value & U64_MASK
