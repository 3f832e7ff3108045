"""Export of scalar and complex values to SymPy expressions.

The expression text is parsed by our own parser, so only the grammar of
parser.py ever reaches SymPy; variables always become plain Symbols, even when
their name clashes with a SymPy object such as ``E`` or ``I``.
"""

from __future__ import annotations

import math
from typing import Any

import sympy as sp

from .complex_value import ComplexValue
from .config import ALLOWED_SYMPY_NAMES
from .parser import Parser
from .scalar import ScalarValue


class _SympyBuilder:
    """Parser semantics producing SymPy expressions."""

    def number(self, value: float) -> sp.Expr:
        if math.isinf(value):
            return sp.oo
        if value.is_integer():
            return sp.Integer(int(value))
        return sp.Float(value)

    def variable(self, name: str, position: int) -> sp.Expr:
        return sp.Symbol(name)

    def unary(self, op: str, operand: sp.Expr) -> sp.Expr:
        return -operand if op == "-" else operand

    def binary(self, op: str, left: sp.Expr, right: sp.Expr, position: int) -> sp.Expr:
        if op == "+":
            return left + right
        if op == "-":
            return left - right
        if op == "*":
            return left * right
        if op == "/":
            return left / right
        return left**right

    def call(self, name: str, args: list[sp.Expr], position: int) -> sp.Expr:
        return ALLOWED_SYMPY_NAMES[name](*args)


_BUILDER = _SympyBuilder()


def text_to_sympy(text: str, limits: bool = True) -> sp.Expr:
    """Parse expression text into a SymPy expression.

    Raises:
        ParseError: If the text is malformed
    """
    return Parser(text, _BUILDER, limits).parse()


def to_sympy(value: Any) -> sp.Expr:
    """Convert a ScalarValue, ComplexValue, expression text or number to SymPy.

    Args:
        value: Value to convert (e.g. ScalarValue("x ^ 2"), ComplexValue(1, "y"))

    Returns:
        SymPy expression; complex values become ``re + I*im``

    Raises:
        NotConvertibleError: If value is none of the accepted kinds
        ParseError: If expression text is malformed
    """
    if isinstance(value, (ComplexValue, complex)):
        value = ComplexValue.coerce(value)
        return to_sympy(value.real) + sp.I * to_sympy(value.imag)
    value = ScalarValue.coerce(value)
    if value.is_float:
        if math.isnan(value.value):
            return sp.nan
        if math.isinf(value.value):
            return sp.oo if value.value > 0 else -sp.oo
        return _BUILDER.number(value.value)
    return text_to_sympy(value.value, limits=False)
