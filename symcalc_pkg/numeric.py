"""IEEE-754 helpers shared by ScalarValue and the expression evaluator.

Python's math module raises on domain errors and overflow where a double
would quietly produce nan or inf. These wrappers restore the IEEE results so
numeric and evaluated values agree.
"""

from __future__ import annotations

import math

NAN = float("nan")
INF = float("inf")


def format_float(value: float) -> str:
    """Format a float as text that re-parses to the same number.

    Finite values use the shortest round-trip representation. Non-finite values
    are written as expressions the evaluator understands (``1e999`` overflows
    to infinity).

    Args:
        value: Float to format

    Returns:
        Canonical text (e.g. "1.0", "2.5e-08", "1e999")
    """
    if math.isfinite(value):
        return repr(value)
    if math.isnan(value):
        return "(1e999 - 1e999)"
    return "1e999" if value > 0 else "(-1e999)"


def _is_odd_integer(value: float) -> bool:
    return value.is_integer() and int(value) % 2 == 1


def powf(base: float, exponent: float) -> float:
    """Raise base to exponent with IEEE semantics (no exceptions)."""
    try:
        return math.pow(base, exponent)
    except OverflowError:
        if base < 0 and _is_odd_integer(exponent):
            return -INF
        return INF
    except ValueError:
        if base == 0.0:
            # negative exponent of zero
            if math.copysign(1.0, base) < 0 and _is_odd_integer(exponent):
                return -INF
            return INF
        return NAN


def sqrt(value: float) -> float:
    if value < 0:
        return NAN
    return math.sqrt(value)


def exp(value: float) -> float:
    try:
        return math.exp(value)
    except OverflowError:
        return INF


def sin(value: float) -> float:
    if math.isinf(value):
        return NAN
    return math.sin(value)


def cos(value: float) -> float:
    if math.isinf(value):
        return NAN
    return math.cos(value)


def acos(value: float) -> float:
    if not -1.0 <= value <= 1.0:
        return NAN
    return math.acos(value)


def signum(value: float) -> float:
    """Sign of value: 1.0 for positives and +0.0, -1.0 for negatives and -0.0."""
    if math.isnan(value):
        return NAN
    return math.copysign(1.0, value)


# Numeric implementation of every function the evaluator knows
FUNCTIONS = {
    "sqrt": sqrt,
    "exp": exp,
    "sin": sin,
    "cos": cos,
    "acos": acos,
    "abs": math.fabs,
    "sign": signum,
    "signum": signum,
    "atan2": math.atan2,
}
