"""
Solver result types.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List


class SolverResult(Enum):
    """Result from SMT solver check."""
    SAT = "sat"
    UNSAT = "unsat"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, text: str) -> "SolverResult":
        """Map a solver's check-sat reply onto a result (anything else is UNKNOWN)."""
        try:
            return cls(text.strip())
        except ValueError:
            return cls.UNKNOWN


@dataclass
class EnumerationResult:
    """Result of enumerating the values of one variable.

    An empty `values` list together with `first_result == UNSAT` means the
    constraints were unsatisfiable from the start; a non-empty list with
    `limit_reached == False` means every satisfying value was found.

    Attributes:
        values: Distinct values in order of discovery
        first_result: Outcome of the first satisfiability check
        limit_reached: True if enumeration stopped at `max_solutions`
        solver_time_ms: Time spent in the enumeration loop
        solver_name: Name of the backend used
    """
    values: List[int] = field(default_factory=list)
    first_result: SolverResult = SolverResult.UNKNOWN
    limit_reached: bool = False
    solver_time_ms: float = 0.0
    solver_name: str = "unknown"

    @property
    def exhausted(self) -> bool:
        return self.first_result == SolverResult.SAT and not self.limit_reached

    def __str__(self) -> str:
        if self.first_result == SolverResult.UNSAT:
            return f"No solutions ({self.solver_name}, {self.solver_time_ms:.2f}ms)"
        more = " (limit reached)" if self.limit_reached else ""
        vals = ", ".join(str(v) for v in self.values)
        return f"{len(self.values)} solutions{more}: {vals} ({self.solver_name}, {self.solver_time_ms:.2f}ms)"
