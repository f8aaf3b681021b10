"""Solver abstraction layer.

`SMTBackend` is the protocol; `Z3Backend` uses the Z3 Python bindings and
`SMT2ProcessBackend` drives any SMT-LIB 2 solver executable.
"""

from .base import SMTBackend
from .result import EnumerationResult, SolverResult
from .solver_runner import (
    SolverRunResult,
    SolverSpec,
    is_solver_available,
    pick_solver,
    resolve_solver,
    run_solver,
)
from .process_backend import SMT2ProcessBackend
from .script import check_model_script, generate_model_smt2, write_model_smt2
from .z3_backend import Z3Backend

__all__ = [
    "SMTBackend",
    "EnumerationResult",
    "SolverResult",
    "SolverRunResult",
    "SolverSpec",
    "is_solver_available",
    "pick_solver",
    "resolve_solver",
    "run_solver",
    "SMT2ProcessBackend",
    "check_model_script",
    "generate_model_smt2",
    "write_model_smt2",
    "Z3Backend",
]
