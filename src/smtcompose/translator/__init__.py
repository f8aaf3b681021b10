"""
Translation of types, sorts and terms to Z3 and to SMT-LIB text.
"""

from .type_translator import TypeTranslator
from .term_translator import TermTranslator
from .smt2_printer import (
    blocking_assertion,
    declare_const,
    parse_get_value_output,
    render_assertion,
    render_literal,
    render_term,
)

__all__ = [
    "TypeTranslator",
    "TermTranslator",
    "blocking_assertion",
    "declare_const",
    "parse_get_value_output",
    "render_assertion",
    "render_literal",
    "render_term",
]
