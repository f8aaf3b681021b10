"""
Named logics, following SMT-LIB logic names.

Array theories are parameterized by the sort union of the logic they are
merged into, so every array here ranges over that logic's own sorts.
"""
from typing import Dict

from ..theories import array_ex, bitvec, core, ints, uf
from .composer import Logic, compose_fns, compose_sorts, define_logic

QF_BV = define_logic(
    "QF_BV",
    compose_sorts(Core=core.THEORY, BV=bitvec.THEORY),
    compose_fns(CoreOps=core.THEORY, BVOps=bitvec.THEORY),
    {"Core": core.FreeVar, "BV": bitvec.FreeVar},
)

QF_AX = define_logic(
    "QF_AX",
    compose_sorts(Core=core.THEORY, ArrayEx=array_ex.THEORY),
    compose_fns(CoreOps=core.THEORY, ArrayOps=array_ex.THEORY),
    {"Core": core.FreeVar, "ArrayEx": array_ex.FreeVar},
)

QF_ABV = define_logic(
    "QF_ABV",
    compose_sorts(Core=core.THEORY, BV=bitvec.THEORY, ArrayEx=array_ex.THEORY),
    compose_fns(CoreOps=core.THEORY, BVOps=bitvec.THEORY, ArrayOps=array_ex.THEORY),
    {"Core": core.FreeVar, "BV": bitvec.FreeVar, "ArrayEx": array_ex.FreeVar},
)

QF_AUFB = define_logic(
    "QF_AUFB",
    compose_sorts(Core=core.THEORY, ArrayEx=array_ex.THEORY),
    compose_fns(CoreOps=core.THEORY, ArrayOps=array_ex.THEORY, UFOps=uf.THEORY),
    {"Core": core.FreeVar, "ArrayEx": array_ex.FreeVar},
)

QF_AUFBV = define_logic(
    "QF_AUFBV",
    compose_sorts(BV=bitvec.THEORY, Core=core.THEORY, ArrayEx=array_ex.THEORY),
    compose_fns(BVOps=bitvec.THEORY, CoreOps=core.THEORY, ArrayOps=array_ex.THEORY, UFOps=uf.THEORY),
    {"BV": bitvec.FreeVar, "Core": core.FreeVar, "ArrayEx": array_ex.FreeVar},
)

QF_LIA = define_logic(
    "QF_LIA",
    compose_sorts(Core=core.THEORY, Int=ints.THEORY),
    compose_fns(CoreOps=core.THEORY, IntOps=ints.THEORY),
    {"Core": core.FreeVar, "Int": ints.FreeVar},
)

LOGICS: Dict[str, Logic] = {
    logic.name: logic
    for logic in (QF_BV, QF_AX, QF_ABV, QF_AUFB, QF_AUFBV, QF_LIA)
}


def get_logic(name: str) -> Logic:
    """Look up a predefined logic by its SMT-LIB name.

    Raises:
        KeyError: If no logic of that name is defined
    """
    try:
        return LOGICS[name]
    except KeyError:
        raise KeyError(f"Unknown logic '{name}' (known: {', '.join(LOGICS)})") from None
