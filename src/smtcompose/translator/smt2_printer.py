"""
SMT-LIB 2 text for terms, literals and declarations, plus parsing of the
`(get-value ...)` replies needed to read models back.

Only the subset produced by smtcompose itself is printed; this is not a
general SMT-LIB printer or parser.
"""
import re
from typing import Any, Dict, Hashable, List, Set, Union

from ..types import Type, TypeKind, U64_MASK
from ..theories.base import FreeVarOp, quote_symbol
from ..theories.uf import Apply


def render_term(term: Any) -> str:
    """Render a `Term` as an SMT-LIB expression."""
    head = term.op.smtlib()
    if not term.args:
        return head
    return "(" + " ".join([head] + [render_term(a) for a in term.args]) + ")"


def render_literal(value: int, ty: Type) -> str:
    """Render a 64-bit model value as a literal of type `ty`.

    Int values at or above 2**63 are read back as negative two's-complement
    numbers, the inverse of the conversion applied to model values.
    """
    if ty.kind is TypeKind.INT:
        if value > U64_MASK >> 1:
            value -= U64_MASK + 1
        return f"(- {-value})" if value < 0 else str(value)
    return f"(_ bv{value % (1 << ty.width)} {ty.width})"


def declare_const(ident: Hashable, sort: Union[Type, Any]) -> str:
    """`declare-fun` command for a nullary symbol of `sort` (Type or composed sort)."""
    sort_txt = sort.smtlib() if hasattr(sort, "smtlib") else str(sort)
    return f"(declare-fun {quote_symbol(ident)} () {sort_txt})"


def blocking_assertion(ident: Hashable, ty: Type, value: int) -> str:
    """Assertion excluding `value` for `ident` from future models."""
    return f"(assert (not (= {quote_symbol(ident)} {render_literal(value, ty)})))"


def render_assertion(formula: Any) -> str:
    text = formula if isinstance(formula, str) else render_term(formula)
    return f"(assert {text})"


_TOKEN = re.compile(r"\s*(?:(\()|(\))|(\|[^|]*\|)|(\"(?:[^\"]|\"\")*\")|([^\s()|\"]+))")


def tokenize(text: str) -> List[str]:
    tokens = []
    pos = 0
    text = text.rstrip()
    while pos < len(text):
        m = _TOKEN.match(text, pos)
        if m is None:
            raise ValueError(f"Cannot tokenize SMT-LIB text at offset {pos}: {text[pos:pos + 20]!r}")
        tokens.append(next(g for g in m.groups() if g is not None))
        pos = m.end()
    return tokens


def parse_sexpr(text: str) -> Any:
    """Parse one s-expression into nested lists of atom strings."""
    tokens = tokenize(text)
    if not tokens:
        raise ValueError("Empty s-expression")
    stack: List[List[Any]] = [[]]
    for tok in tokens:
        if tok == "(":
            stack.append([])
        elif tok == ")":
            if len(stack) == 1:
                raise ValueError(f"Unbalanced ')' in {text!r}")
            done = stack.pop()
            stack[-1].append(done)
        else:
            stack[-1].append(tok)
    if len(stack) != 1 or len(stack[0]) != 1:
        raise ValueError(f"Expected exactly one s-expression in {text!r}")
    return stack[0][0]


def paren_depth(text: str) -> int:
    """Net parenthesis depth of `text`, ignoring quoted symbols and strings."""
    depth = 0
    for tok in tokenize(text):
        if tok == "(":
            depth += 1
        elif tok == ")":
            depth -= 1
    return depth


def _symbol_name(atom: str) -> str:
    if len(atom) >= 2 and atom[0] == "|" and atom[-1] == "|":
        return atom[1:-1]
    return atom


def parse_value(value: Any) -> Any:
    """Decode a model value s-expression.

    Booleans become bool, numerals and bit-vector literals become int;
    anything else is returned as SMT-LIB text.
    """
    if isinstance(value, str):
        if value == "true":
            return True
        if value == "false":
            return False
        if value.startswith("#b"):
            return int(value[2:], 2)
        if value.startswith("#x"):
            return int(value[2:], 16)
        if re.fullmatch(r"\d+", value):
            return int(value)
        return value

    if len(value) == 2 and value[0] == "-":
        inner = parse_value(value[1])
        if isinstance(inner, int) and not isinstance(inner, bool):
            return -inner
    if len(value) == 3 and value[0] == "_" and isinstance(value[1], str) and value[1].startswith("bv"):
        return int(value[1][2:])
    return _unparse(value)


def _unparse(value: Any) -> str:
    if isinstance(value, str):
        return value
    return "(" + " ".join(_unparse(v) for v in value) + ")"


def parse_get_value_output(stdout: str) -> Dict[str, Any]:
    """Parse a `(get-value ...)` reply such as `((x 5) (y #b01))`.

    Keys are symbol names with `|quotes|` removed.
    """
    sexpr = parse_sexpr(stdout)
    if isinstance(sexpr, str):
        raise ValueError(f"Not a get-value reply: {stdout!r}")

    out: Dict[str, Any] = {}
    for pair in sexpr:
        if isinstance(pair, str) or len(pair) != 2:
            raise ValueError(f"Malformed get-value entry: {_unparse(pair)}")
        term, val = pair
        out[_symbol_name(_unparse(term))] = parse_value(val)
    return out


def term_declarations(term: Any, declared: Set[str]) -> List[str]:
    """`declare-fun` commands for symbols of `term` not yet in `declared`.

    Free variables are declared from the sort they carry, uninterpreted
    functions from their signature. `declared` is updated in place.
    """
    cmds = []
    for t in term.walk():
        v = t.op.value
        if isinstance(v, FreeVarOp) and str(v.name) not in declared:
            cmds.append(declare_const(v.name, v.sort))
            declared.add(str(v.name))
        elif isinstance(v, Apply) and v.name not in declared:
            cmds.append(v.declaration())
            declared.add(v.name)
    return cmds
