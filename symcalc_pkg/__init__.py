"""symcalc package: numeric/symbolic scalars, complex values, and the expression calculator."""

from .calculator import Calculator, parse_str
from .complex_value import ComplexValue
from .scalar import ScalarValue
from .types import (
    CalculatorError,
    DivisionByZeroError,
    NotConvertibleError,
    ParseError,
    SymbolicNotNumericError,
    UnknownVariableError,
)

__all__ = [
    "Calculator",
    "ComplexValue",
    "ScalarValue",
    "parse_str",
    "CalculatorError",
    "DivisionByZeroError",
    "NotConvertibleError",
    "ParseError",
    "SymbolicNotNumericError",
    "UnknownVariableError",
]
