"""SMT-LIBv2 scripts for a whole constraint model.

The generated script declares the model's variables, asserts its formulas,
checks satisfiability and, optionally, asks for the declared values. It can be
handed to any SMT-LIB solver in one shot.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Set

from ..theories.base import quote_symbol
from ..translator.smt2_printer import declare_const, render_assertion, term_declarations
from .solver_runner import SolverRunResult, resolve_solver, run_solver


def generate_model_smt2(model: Any, *, get_values: bool = True) -> str:
    lines: list[str] = []

    lines.append(f"; constraint model over {model.logic.name}")
    lines.append("(set-option :produce-models true)")
    lines.append(f"(set-logic {model.logic.name})")
    lines.append("")

    declared: Set[str] = set()
    for ident, ty in model.declarations.items():
        lines.append(declare_const(ident, ty))
        declared.add(str(ident))
    lines.append("")

    for ident, assertion in model.assertions:
        if not isinstance(assertion, str):
            lines.extend(term_declarations(assertion, declared))
        lines.append(f"; {ident}")
        lines.append(render_assertion(assertion))

    lines.append("(check-sat)")
    if get_values and model.declarations:
        syms = " ".join(quote_symbol(i) for i in model.declarations)
        lines.append(f"(get-value ({syms}))")

    return "\n".join(lines) + "\n"


def write_model_smt2(model: Any, out_file: str | Path, *, get_values: bool = True) -> Path:
    out_path = Path(out_file)
    out_path.write_text(generate_model_smt2(model, get_values=get_values))
    return out_path


def check_model_script(
    model: Any,
    out_file: str | Path,
    *,
    solver: str = "z3",
    timeout_s: Optional[float] = None,
) -> SolverRunResult:
    """Write the model's script to `out_file` and run `solver` on it once."""
    path = write_model_smt2(model, out_file)
    return run_solver(resolve_solver(solver), path, timeout_s=timeout_s)
