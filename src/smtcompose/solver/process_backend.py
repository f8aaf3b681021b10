"""
Backend driving an external SMT-LIB 2 solver process over stdin/stdout.

The solver runs in incremental mode for the lifetime of the backend, so
enumeration adds blocking assertions to the live session instead of
re-running the whole encoding. Each call blocks until the solver replies;
there is no timeout.

Every command is followed by an `(echo ...)` marker and the replies are read
up to that marker. A solver `(error ...)` is therefore raised by the call
that caused it, and a reply is never mistaken for the answer to a later
command.
"""
from __future__ import annotations

import itertools
import logging
import subprocess
import weakref
from collections import deque
from typing import Any, Deque, Dict, Hashable, List, Optional, Sequence, Tuple, Union

from ..errors import (
    BackendError,
    BackendStateError,
    DuplicateDeclarationError,
    SortMismatchError,
    Undefined,
    Unsat,
)
from ..theories.base import quote_symbol
from ..translator.smt2_printer import (
    declare_const,
    paren_depth,
    parse_get_value_output,
    render_assertion,
    term_declarations,
)
from ..types import Model, Type, to_u64
from .result import SolverResult
from .solver_runner import SolverSpec, pick_solver, resolve_solver

logger = logging.getLogger(__name__)

_SYNC_PREFIX = "smtcompose-sync-"


def _terminate(proc: subprocess.Popen) -> None:
    if proc.poll() is None:
        try:
            proc.stdin.write("(exit)\n")
            proc.stdin.flush()
            proc.stdin.close()
        except (OSError, ValueError):
            pass
        try:
            proc.wait(timeout=1.0)
        except subprocess.TimeoutExpired:
            proc.kill()
            proc.wait()
    if proc.stdout is not None:
        proc.stdout.close()


class SMT2ProcessBackend:
    """Backend talking SMT-LIB 2 to a solver subprocess.

    Assertions may be `Term` objects or SMT-LIB formula text. Free variables
    and uninterpreted functions a `Term` introduces are declared on first use;
    a later `new_var` of such a name at the same sort adopts that declaration.

    The process is owned by this instance and terminated by `close()`, on
    leaving a `with` block, or when the backend is garbage collected.

    Attributes:
        spec: How the solver was launched
        name: Solver name, for reporting
    """

    def __init__(self,
                 solver: Union[str, SolverSpec, None] = None,
                 *,
                 extra_args: Sequence[str] = ()):
        """Launch the solver.

        Args:
            solver: Solver name, path or spec; None picks an available one
            extra_args: Additional command-line arguments

        Raises:
            BackendError: If no solver is available or it cannot be started
        """
        if solver is None:
            spec = pick_solver()
            if spec is None:
                raise BackendError("No SMT solver found on PATH")
        elif isinstance(solver, SolverSpec):
            spec = solver
        else:
            spec = resolve_solver(solver)

        self.spec = spec
        self.name = spec.name
        argv = [*spec.interactive_argv(), *extra_args]
        try:
            self._proc = subprocess.Popen(
                argv,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE,
                stderr=subprocess.STDOUT,
                text=True,
                bufsize=1,
            )
        except OSError as e:
            raise BackendError(f"Cannot start solver {argv!r}: {e}") from e
        self._finalizer = weakref.finalize(self, _terminate, self._proc)
        logger.debug("Started %s (pid %d): %s", self.name, self._proc.pid, " ".join(argv))

        self.logic: Optional[str] = None
        self._types: Dict[Hashable, Type] = {}
        # symbol -> sort text (or declaration text for functions)
        self._declared: Dict[str, str] = {}
        self._assertions: List[Tuple[Hashable, Any]] = []
        self._last: Optional[SolverResult] = None
        self._pending: Deque[str] = deque()
        self._markers = itertools.count()

        self._command("(set-option :print-success false)")
        self._command("(set-option :produce-models true)")

    def __enter__(self) -> "SMT2ProcessBackend":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Terminate the solver process."""
        self._finalizer()

    @property
    def closed(self) -> bool:
        return not self._finalizer.alive

    def set_logic(self, logic: Union[str, Any]) -> None:
        if self.logic is not None:
            raise BackendStateError(f"Logic already set to {self.logic}")
        self._command(f"(set-logic {logic})")
        self.logic = str(logic)

    def new_var(self, ident: Hashable, ty: Type) -> None:
        self._require_logic()
        if ident in self._types:
            raise DuplicateDeclarationError(f"Variable {ident!r} already declared")
        key = str(ident)
        implicit = self._declared.get(key)
        if implicit is None:
            self._command(declare_const(ident, ty))
            self._declared[key] = str(ty)
        elif implicit != str(ty):
            raise SortMismatchError(f"{ident!r} was already used as {implicit}, cannot declare it as {ty}")
        self._types[ident] = ty

    def assert_(self, ident: Hashable, assertion: Any) -> None:
        self._require_logic()
        if not isinstance(assertion, str):
            self._declare_symbols(assertion)
        self._last = None
        self._command(render_assertion(assertion))
        self._assertions.append((ident, assertion))

    def check_sat(self) -> bool:
        self._last = None
        replies = self._command("(check-sat)")
        if len(replies) != 1 or replies[0] not in ("sat", "unsat", "unknown"):
            raise BackendError(f"{self.name}: unexpected check-sat reply: {replies!r}")
        self._last = SolverResult.parse(replies[0])
        if self._last == SolverResult.UNKNOWN:
            raise Undefined(f"{self.name} returned unknown")
        return self._last == SolverResult.SAT

    def solve(self) -> Model:
        if self._last is None:
            raise BackendStateError("solve() requires a current check_sat()")
        if self._last == SolverResult.UNSAT:
            raise Unsat("No model: constraints are unsatisfiable")
        if self._last == SolverResult.UNKNOWN:
            raise Undefined("No model: satisfiability is unknown")
        if not self._types:
            return {}

        syms = " ".join(quote_symbol(i) for i in self._types)
        replies = self._command(f"(get-value ({syms}))")
        if len(replies) != 1:
            raise BackendError(f"{self.name}: unexpected get-value reply: {replies!r}")
        try:
            values = parse_get_value_output(replies[0])
        except ValueError as e:
            raise BackendError(f"{self.name}: cannot parse get-value reply: {replies[0]!r}") from e

        result: Model = {}
        for ident in self._types:
            if str(ident) not in values:
                raise BackendError(f"{self.name}: no value for {ident!r} in reply")
            result[ident] = to_u64(values[str(ident)])
        return result

    def raw_write(self, text: str) -> None:
        """Send SMT-LIB commands; their replies are queued for `raw_read`.

        Raises:
            BackendError: If the solver reports an error for the text
        """
        self._last = None
        self._pending.extend(self._command(text))

    def raw_read(self) -> str:
        """Return the oldest queued reply, or "" if there is none."""
        if self._pending:
            return self._pending.popleft()
        return ""

    @property
    def assertions(self) -> List[Tuple[Hashable, Any]]:
        return list(self._assertions)

    def _declare_symbols(self, term: Any) -> None:
        known = set(self._declared)
        for cmd in term_declarations(term, known):
            logger.debug("%s: synthesized declaration %s", self.name, cmd)
            self._command(cmd)
        for v in term.free_vars():
            self._declared.setdefault(str(v.name), v.sort.smtlib())
        for f in term.functions():
            self._declared.setdefault(f.name, f.declaration())

    def _require_logic(self) -> None:
        if self.logic is None:
            raise BackendStateError("set_logic() must be called first")

    def _command(self, cmd: str) -> List[str]:
        """Send `cmd` and return its replies, raising on a solver error."""
        marker = f"{_SYNC_PREFIX}{next(self._markers)}"
        self._send(cmd)
        self._send(f'(echo "{marker}")')

        replies = []
        while True:
            reply = self._read_response()
            if reply.strip('"') == marker:
                break
            replies.append(reply)

        errors = [r for r in replies if r.startswith("(error")]
        if errors:
            raise BackendError(f"{self.name}: {' '.join(errors)}")
        return replies

    def _send(self, cmd: str) -> None:
        if self.closed:
            raise BackendError(f"{self.name}: backend is closed")
        logger.debug("%s <- %s", self.name, cmd)
        try:
            self._proc.stdin.write(cmd + "\n")
            self._proc.stdin.flush()
        except (OSError, ValueError) as e:
            raise BackendError(f"{self.name}: cannot write to solver: {e}") from e

    def _read_response(self) -> str:
        lines: List[str] = []
        while True:
            line = self._proc.stdout.readline()
            if not line:
                raise BackendError(f"{self.name}: solver exited (code {self._proc.poll()})")
            if not lines and not line.strip():
                continue
            lines.append(line)
            text = "".join(lines)
            try:
                if paren_depth(text) <= 0:
                    break
            except ValueError:
                # Unterminated string or quoted symbol spanning lines
                continue

        text = text.strip()
        logger.debug("%s -> %s", self.name, text)
        return text
