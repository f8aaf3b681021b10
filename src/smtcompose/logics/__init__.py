"""
Logic composition and the predefined logics.
"""

from .terms import Term
from .composer import (
    Logic,
    OpUnion,
    SortUnion,
    TaggedOp,
    TaggedSort,
    compose_fns,
    compose_sorts,
    define_logic,
)
from .catalog import (
    LOGICS,
    QF_ABV,
    QF_AUFB,
    QF_AUFBV,
    QF_AX,
    QF_BV,
    QF_LIA,
    get_logic,
)

__all__ = [
    "Term",
    "Logic",
    "OpUnion",
    "SortUnion",
    "TaggedOp",
    "TaggedSort",
    "compose_fns",
    "compose_sorts",
    "define_logic",
    "LOGICS",
    "QF_ABV",
    "QF_AUFB",
    "QF_AUFBV",
    "QF_AX",
    "QF_BV",
    "QF_LIA",
    "get_logic",
]
