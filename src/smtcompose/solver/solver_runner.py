"""Locate and run external SMT-LIB solvers.

Solvers are invoked either one-shot on an SMT2 file (printing one of
sat/unsat/unknown), or interactively over stdin/stdout by
`SMT2ProcessBackend`.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple
import logging
import os
import shutil
import subprocess
import time

from ..errors import BackendError
from .result import SolverResult

logger = logging.getLogger(__name__)

SOLVER_ENV_VAR = "SMTCOMPOSE_SOLVER"


@dataclass(frozen=True)
class SolverSpec:
    """Describes how to invoke an external SMT solver.

    `argv` runs the solver on a file given as trailing argument;
    `argv + interactive_args` runs it reading commands from stdin.
    """

    name: str
    argv: Tuple[str, ...]
    interactive_args: Tuple[str, ...] = ()

    def interactive_argv(self) -> Tuple[str, ...]:
        return (*self.argv, *self.interactive_args)


@dataclass(frozen=True)
class SolverRunResult:
    """Outcome of one non-incremental solver run.

    Attributes:
        result: First check-sat answer printed
        stdout: Everything the solver printed
        stderr: Diagnostics on the error stream
        returncode: Process exit status (-1 if killed on timeout)
        time_ms: Wall-clock run time
        errors: `(error ...)` lines the solver printed
        timed_out: True if the run was stopped at the timeout
    """
    result: SolverResult
    stdout: str
    stderr: str
    returncode: int
    time_ms: float
    errors: Tuple[str, ...] = ()
    timed_out: bool = False


_KNOWN_SOLVERS = {
    "z3": SolverSpec("z3", ("z3", "-smt2"), ("-in",)),
    "cvc5": SolverSpec("cvc5", ("cvc5", "--lang", "smt2"), ("--incremental",)),
    "cvc4": SolverSpec("cvc4", ("cvc4", "--lang", "smt2"), ("--incremental",)),
    "yices": SolverSpec("yices", ("yices-smt2",), ("--incremental",)),
    "yices-smt2": SolverSpec("yices-smt2", ("yices-smt2",), ("--incremental",)),
    "boolector": SolverSpec("boolector", ("boolector", "--smt2"), ("--incremental",)),
    "bitwuzla": SolverSpec("bitwuzla", ("bitwuzla", "--lang", "smt2")),
}


def resolve_solver(name_or_path: str) -> SolverSpec:
    """Resolve a solver name to an invocation spec."""
    if name_or_path in _KNOWN_SOLVERS:
        return _KNOWN_SOLVERS[name_or_path]

    p = Path(name_or_path)
    known = _KNOWN_SOLVERS.get(p.name)
    if known is not None:
        # Known solver at an explicit path
        return SolverSpec(known.name, (str(p), *known.argv[1:]), known.interactive_args)
    return SolverSpec(p.name or str(p), (str(p),))


def is_solver_available(name_or_path: str) -> bool:
    """Return True if the solver executable can be launched on this system.

    Bare names are looked up on PATH; anything containing a directory part is
    checked as an executable file.
    """
    exe = resolve_solver(name_or_path).argv[0]
    if Path(exe).name != exe:
        return os.access(exe, os.X_OK) and Path(exe).is_file()
    return shutil.which(exe) is not None


def pick_solver(preferred: Sequence[str] = ("z3", "cvc5", "yices-smt2")) -> Optional[SolverSpec]:
    """Pick the first available solver from a preference list.

    Users can override by setting $SMTCOMPOSE_SOLVER.
    """
    env = os.environ.get(SOLVER_ENV_VAR)
    if env and is_solver_available(env):
        return resolve_solver(env)

    for n in preferred:
        if is_solver_available(n):
            return resolve_solver(n)

    return None


def _parse_solver_result(stdout: str) -> SolverResult:
    """First check-sat answer in `stdout`; UNKNOWN if there is none."""
    for line in stdout.splitlines():
        s = line.strip()
        if s in ("sat", "unsat", "unknown"):
            return SolverResult.parse(s)
    return SolverResult.UNKNOWN


def _solver_errors(stdout: str) -> Tuple[str, ...]:
    return tuple(line.strip() for line in stdout.splitlines() if line.lstrip().startswith("(error"))


def run_solver(
    solver: SolverSpec,
    smt2_file: str | Path,
    *,
    timeout_s: Optional[float] = None,
    extra_args: Sequence[str] = (),
) -> SolverRunResult:
    """Run `solver` once on an SMT2 script.

    A run that exceeds `timeout_s` is reported as UNKNOWN with `timed_out`
    set, matching how an incremental session reports an undecided check.

    Raises:
        BackendError: If the solver executable cannot be started
    """
    argv = [*solver.argv, *extra_args, str(Path(smt2_file))]
    logger.debug("Running %s", " ".join(argv))

    start_time = time.time()
    try:
        proc = subprocess.run(argv, capture_output=True, text=True, timeout=timeout_s)
    except subprocess.TimeoutExpired as e:
        stdout = e.stdout.decode() if isinstance(e.stdout, bytes) else (e.stdout or "")
        stderr = e.stderr.decode() if isinstance(e.stderr, bytes) else (e.stderr or "")
        logger.info("%s timed out after %.1fs", solver.name, timeout_s)
        return SolverRunResult(
            result=SolverResult.UNKNOWN,
            stdout=stdout,
            stderr=stderr,
            returncode=-1,
            time_ms=(time.time() - start_time) * 1000,
            errors=_solver_errors(stdout),
            timed_out=True,
        )
    except OSError as e:
        raise BackendError(f"Cannot run solver {argv!r}: {e}") from e

    return SolverRunResult(
        result=_parse_solver_result(proc.stdout),
        stdout=proc.stdout,
        stderr=proc.stderr,
        returncode=proc.returncode,
        time_ms=(time.time() - start_time) * 1000,
        errors=_solver_errors(proc.stdout),
    )
