"""
Theory modules.

Each module exports its sort variants, its operator variants and a `THEORY`
descriptor used by the logic composer.
"""

from .base import FreeVarOp, OpCode, OpSymbols, Sort, Theory, quote_symbol
from . import array_ex, bitvec, core, ints, uf

__all__ = [
    "FreeVarOp",
    "OpCode",
    "OpSymbols",
    "Sort",
    "Theory",
    "quote_symbol",
    "array_ex",
    "bitvec",
    "core",
    "ints",
    "uf",
]
