"""
Solution enumeration on top of the backend protocol.

`solve_all_for` repeatedly checks satisfiability, reads the value of one
variable from the model and then excludes that value by writing a blocking
assertion through the backend's raw channel:

    (assert (not (= x <value>)))

The blocks accumulate in the live session, so after N rounds the solver holds
the conjunction of N disequalities. Enumeration stops at the first unsat
check. An empty result therefore means the constraints were unsatisfiable
from the start; `Undefined` or a backend error raised mid-way propagates to
the caller instead of truncating the result.
"""
import logging
import time
from typing import Hashable, List, Optional

from .errors import BackendError, UndeclaredIdentifierError, Unsat
from .solver.base import SMTBackend
from .solver.result import EnumerationResult, SolverResult
from .translator.smt2_printer import blocking_assertion
from .types import Model, Type

logger = logging.getLogger(__name__)


def _value_of(ident: Hashable, model: Model) -> int:
    try:
        return model[ident]
    except KeyError:
        raise UndeclaredIdentifierError(f"Variable {ident!r} is not in the model") from None


def solve_for(ident: Hashable, backend: SMTBackend) -> int:
    """Return one satisfying value of `ident`.

    Raises:
        Unsat: If the constraints have no model
        Undefined: If the backend cannot decide
    """
    if not backend.check_sat():
        raise Unsat(f"No value for {ident!r}: constraints are unsatisfiable")
    return _value_of(ident, backend.solve())


def enumerate_values(ident: Hashable,
                     ty: Type,
                     backend: SMTBackend,
                     max_solutions: Optional[int] = None) -> EnumerationResult:
    """Enumerate the distinct values `ident` takes across all models.

    Args:
        ident: Declared variable to enumerate
        ty: Its type, used to encode blocking literals
        backend: Backend holding the constraints; blocks are added to it
        max_solutions: Stop after this many values (None: no limit)

    Returns:
        EnumerationResult with the values in order of discovery
    """
    if max_solutions is not None and max_solutions < 1:
        raise ValueError(f"max_solutions must be positive, got {max_solutions}")

    result = EnumerationResult(solver_name=getattr(backend, "name", type(backend).__name__))
    seen = set()
    start_time = time.time()

    while True:
        if max_solutions is not None and len(result.values) >= max_solutions:
            result.limit_reached = True
            break

        sat = backend.check_sat()
        if result.first_result == SolverResult.UNKNOWN:
            result.first_result = SolverResult.SAT if sat else SolverResult.UNSAT
        if not sat:
            break

        value = _value_of(ident, backend.solve())
        if value in seen:
            raise BackendError(f"{result.solver_name} returned blocked value {value} for {ident!r} again")
        seen.add(value)
        result.values.append(value)
        logger.debug("%s: found %s = %d", result.solver_name, ident, value)

        backend.raw_write(blocking_assertion(ident, ty, value))

    result.solver_time_ms = (time.time() - start_time) * 1000
    logger.info("Enumerated %d value(s) for %s%s", len(result.values), ident,
                " (limit reached)" if result.limit_reached else "")
    return result


def solve_all_for(ident: Hashable,
                  ty: Type,
                  backend: SMTBackend,
                  max_solutions: Optional[int] = None) -> List[int]:
    """Return every distinct satisfying value of `ident`, in discovery order.

    An empty list means the constraints are unsatisfiable. Without
    `max_solutions` an unbounded (Int) variable may enumerate forever;
    bit-vector domains are finite.
    """
    return enumerate_values(ident, ty, backend, max_solutions).values
