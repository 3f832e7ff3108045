"""Public API for symcalc - returns structured objects without side effects."""

from __future__ import annotations

from typing import Any, Mapping

from .complex_value import ComplexValue
from .conversion import to_sympy
from .logging_config import get_logger
from .numeric import format_float
from .parser import Evaluator, check_syntax, variable_names
from .scalar import ScalarValue
from .types import CalculatorError, EvalResult, ParseError, UnknownVariableError

logger = get_logger("api")

__all__ = ["evaluate", "validate_expression", "free_variables", "to_sympy"]


def evaluate(expression: Any, variables: Mapping[str, float] | None = None) -> EvalResult:
    """Evaluate an expression to a float.

    Args:
        expression: Expression text (e.g. "2 * (x + 1)"), a ScalarValue or a number
        variables: Optional variable bindings (e.g. {"x": 2.0})

    Returns:
        EvalResult with the formatted result and float value, or the error.
        When the expression references unbound variables, free_symbols lists them.

    Example:
        >>> from symcalc_pkg.api import evaluate
        >>> evaluate("2 * (3 + 4)").value
        14.0
        >>> evaluate("x + 1").free_symbols
        ['x']
    """
    bindings = dict(variables or {})
    try:
        value = Evaluator(bindings).parse_and_resolve(expression)
    except UnknownVariableError as e:
        unbound = [
            name for name in free_variables(expression) if name not in bindings
        ]
        logger.info("Unbound variables in %r: %s", str(expression), unbound)
        return EvalResult(
            ok=False, error=str(e), error_code=e.code, free_symbols=unbound
        )
    except CalculatorError as e:
        logger.info("Evaluation of %r failed: %s", str(expression), e)
        return EvalResult(ok=False, error=str(e), error_code=e.code)
    return EvalResult(ok=True, result=format_float(value), value=value)


def validate_expression(expression: str) -> tuple[bool, str | None]:
    """Validate an expression without evaluating it.

    Args:
        expression: Expression string to validate

    Returns:
        Tuple of (is_valid, error_message)

    Example:
        >>> from symcalc_pkg.api import validate_expression
        >>> validate_expression("2 + x")
        (True, None)
        >>> validate_expression("(1 + 2")
        (False, "Unbalanced parentheses: missing ')' (at position 0)")
    """
    try:
        check_syntax(expression)
    except ParseError as e:
        return False, str(e)
    return True, None


def free_variables(value: Any) -> list[str]:
    """List the variable names a value depends on.

    Args:
        value: Expression text, ScalarValue, ComplexValue or number

    Returns:
        Sorted variable names (empty for concrete numbers)
    """
    if isinstance(value, (ComplexValue, complex)):
        value = ComplexValue.coerce(value)
        return sorted(set(free_variables(value.real)) | set(free_variables(value.imag)))
    if isinstance(value, str):
        return variable_names(value)
    scalar = ScalarValue.coerce(value)
    if scalar.is_float:
        return []
    return variable_names(scalar.value)
