"""
Fixed-size bit-vector theory.

Fixed-symbol operators live in `OpCodes`; operators carrying indices
(`extract`, `zero_extend`, ...) and literals are dataclass variants.

See: https://smt-lib.org/theories-FixedSizeBitVectors.shtml
"""
from dataclasses import dataclass

from .base import FreeVarOp, OpCode, OpSymbols, Sort, Theory


@dataclass(frozen=True)
class BitVector(Sort):
    """Bit-vector sort of a fixed `width`."""
    width: int

    def __post_init__(self):
        if self.width < 1:
            raise ValueError(f"Bit-vector width must be positive, got {self.width}")

    def smtlib(self) -> str:
        return f"(_ BitVec {self.width})"


class OpCodes(OpSymbols):
    CONCAT = ("concat", 2)
    BVNOT = ("bvnot", 1)
    BVAND = ("bvand", -1)
    BVOR = ("bvor", -1)
    BVXOR = ("bvxor", -1)
    BVNAND = ("bvnand", 2)
    BVNOR = ("bvnor", 2)
    BVXNOR = ("bvxnor", 2)
    BVCOMP = ("bvcomp", 2)
    BVNEG = ("bvneg", 1)
    BVADD = ("bvadd", -1)
    BVSUB = ("bvsub", 2)
    BVMUL = ("bvmul", -1)
    BVUDIV = ("bvudiv", 2)
    BVUREM = ("bvurem", 2)
    BVSDIV = ("bvsdiv", 2)
    BVSREM = ("bvsrem", 2)
    BVSMOD = ("bvsmod", 2)
    BVSHL = ("bvshl", 2)
    BVLSHR = ("bvlshr", 2)
    BVASHR = ("bvashr", 2)
    BVULT = ("bvult", 2)
    BVULE = ("bvule", 2)
    BVUGT = ("bvugt", 2)
    BVUGE = ("bvuge", 2)
    BVSLT = ("bvslt", 2)
    BVSLE = ("bvsle", 2)
    BVSGT = ("bvsgt", 2)
    BVSGE = ("bvsge", 2)


@dataclass(frozen=True)
class Const(OpCode):
    """Bit-vector literal `value` of `width` bits, stored unsigned."""
    value: int
    width: int

    def __post_init__(self):
        if self.width < 1:
            raise ValueError(f"Bit-vector width must be positive, got {self.width}")
        # Normalize to the unsigned representative
        object.__setattr__(self, "value", self.value % (1 << self.width))

    def smtlib(self) -> str:
        return f"(_ bv{self.value} {self.width})"


@dataclass(frozen=True)
class Extract(OpCode):
    high: int
    low: int

    def __post_init__(self):
        if not 0 <= self.low <= self.high:
            raise ValueError(f"Invalid extract range [{self.high}:{self.low}]")

    @property
    def arity(self) -> int:
        return 1

    def smtlib(self) -> str:
        return f"(_ extract {self.high} {self.low})"


@dataclass(frozen=True)
class _Indexed(OpCode):
    n: int

    _symbol = ""

    @property
    def arity(self) -> int:
        return 1

    def smtlib(self) -> str:
        return f"(_ {self._symbol} {self.n})"


@dataclass(frozen=True)
class ZeroExtend(_Indexed):
    _symbol = "zero_extend"


@dataclass(frozen=True)
class SignExtend(_Indexed):
    _symbol = "sign_extend"


@dataclass(frozen=True)
class Repeat(_Indexed):
    _symbol = "repeat"


@dataclass(frozen=True)
class RotateLeft(_Indexed):
    _symbol = "rotate_left"


@dataclass(frozen=True)
class RotateRight(_Indexed):
    _symbol = "rotate_right"


@dataclass(frozen=True)
class FreeVar(FreeVarOp):
    """Unbound bit-vector variable."""


THEORY = Theory(
    name="FixedSizeBitVectors",
    sorts=(BitVector,),
    opcodes=(OpCodes, Const, Extract, ZeroExtend, SignExtend, Repeat,
             RotateLeft, RotateRight, FreeVar),
    free_var=FreeVar,
)
