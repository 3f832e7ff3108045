"""ScalarValue: a float that may instead be a symbolic expression.

A ScalarValue holds either a concrete float or expression text. Arithmetic
between two floats is computed directly; as soon as one operand is symbolic
the result is new expression text, e.g. ``ScalarValue("a") + 2`` is
``ScalarValue("(a + 2.0)")``. Symbolic values are turned into numbers later by
an Evaluator or Calculator that knows the variables.
"""

from __future__ import annotations

import math
import operator
from typing import Any, Callable

from .config import ISCLOSE_EPSILON
from .numeric import FUNCTIONS, format_float, powf
from .parser import TokenType, check_syntax, tokenize
from .types import DivisionByZeroError, NotConvertibleError, SymbolicNotNumericError


def _to_float(value: Any) -> float:
    if isinstance(value, complex):
        raise NotConvertibleError("Complex input can not be converted to ScalarValue")
    if isinstance(value, (int, float)) or hasattr(type(value), "__float__"):
        try:
            return float(value)
        except (TypeError, ValueError, OverflowError) as e:
            raise NotConvertibleError(
                f"Input can not be converted to ScalarValue: {e}"
            ) from e
    raise NotConvertibleError(
        f"Input of type {type(value).__name__} can not be converted to ScalarValue"
    )


def _is_grouped(text: str) -> bool:
    """True if text is a single operand: a literal, a name, a call or a parenthesized group."""
    tokens = tokenize(text)[:-1]
    if len(tokens) == 1:
        return tokens[0].type in (TokenType.NUMBER, TokenType.IDENT)
    if tokens[0].type is TokenType.IDENT:
        tokens = tokens[1:]
    if tokens[0].type is not TokenType.LPAREN:
        return False
    depth = 0
    for index, token in enumerate(tokens):
        if token.type is TokenType.LPAREN:
            depth += 1
        elif token.type is TokenType.RPAREN:
            depth -= 1
            if depth == 0:
                return index == len(tokens) - 1
    return False


def _operator(name: str, reflected: bool = False) -> Callable[[Any, Any], Any]:
    """Build an operator dunder delegating to the named method."""

    def dunder(self, other):
        try:
            other = type(self).coerce(other)
        except NotConvertibleError:
            return NotImplemented
        if reflected:
            return getattr(other, name)(self)
        return getattr(self, name)(other)

    dunder.__name__ = f"__{'r' if reflected else ''}{name}__"
    return dunder


class ScalarValue:
    """A float or a symbolic expression.

    Construct from a number (``ScalarValue(1.5)``), from expression text
    (``ScalarValue("x + 1")``, kept verbatim after a syntax check) or from
    another ScalarValue.
    """

    # _grouped: the symbolic text is a single operand and embeds without parentheses
    __slots__ = ("_value", "_grouped")

    def __init__(self, value: Any = 0.0):
        if isinstance(value, ScalarValue):
            self._value = value._value
            self._grouped = value._grouped
        elif isinstance(value, str):
            check_syntax(value)
            self._value = value
            self._grouped = _is_grouped(value)
        else:
            self._value = _to_float(value)
            self._grouped = False

    @classmethod
    def coerce(cls, value: Any) -> "ScalarValue":
        """Return value itself if it is a ScalarValue, else construct one from it."""
        if isinstance(value, cls):
            return value
        return cls(value)

    @classmethod
    def _from_float(cls, value: float) -> "ScalarValue":
        result = cls.__new__(cls)
        result._value = value
        result._grouped = False
        return result

    @classmethod
    def _from_text(cls, text: str, grouped: bool = True) -> "ScalarValue":
        """Wrap text that is already known to parse, skipping the syntax check."""
        result = cls.__new__(cls)
        result._value = text
        result._grouped = grouped
        return result

    @classmethod
    def from_pair(cls, is_float: bool, value: Any) -> "ScalarValue":
        """Rebuild a ScalarValue from the pair produced by to_pair().

        Symbolic text is syntax-checked without the input limits, so any pair
        produced by to_pair() round trips, however large the text.
        """
        if is_float:
            return cls._from_float(_to_float(value))
        if not isinstance(value, str):
            raise NotConvertibleError("Symbolic ScalarValue requires a string payload")
        check_syntax(value, limits=False)
        return cls._from_text(value, _is_grouped(value))

    def to_pair(self) -> tuple[bool, float | str]:
        return self.is_float, self._value

    @property
    def is_float(self) -> bool:
        return isinstance(self._value, float)

    @property
    def is_symbolic(self) -> bool:
        return not self.is_float

    @property
    def value(self) -> float | str:
        """The float, or the expression text of a symbolic value."""
        return self._value

    def _operand_text(self) -> str:
        if self.is_float:
            return format_float(self._value)
        if self._grouped:
            return self._value
        return f"({self._value})"

    # Arithmetic

    def _binary(
        self, other: Any, symbol: str, func: Callable[[float, float], float]
    ) -> "ScalarValue":
        other = ScalarValue.coerce(other)
        if self.is_float and other.is_float:
            return ScalarValue._from_float(func(self._value, other._value))
        return ScalarValue._from_text(
            f"({self._operand_text()} {symbol} {other._operand_text()})"
        )

    def add(self, other: Any) -> "ScalarValue":
        return self._binary(other, "+", operator.add)

    def sub(self, other: Any) -> "ScalarValue":
        return self._binary(other, "-", operator.sub)

    def mul(self, other: Any) -> "ScalarValue":
        return self._binary(other, "*", operator.mul)

    def div(self, other: Any) -> "ScalarValue":
        """Divide by other.

        Raises:
            DivisionByZeroError: If other is a float equal to zero. A symbolic
                divisor is never checked; a zero there surfaces when the
                result is evaluated.
        """
        other = ScalarValue.coerce(other)
        if other.is_float and other._value == 0.0:
            raise DivisionByZeroError()
        return self._binary(other, "/", operator.truediv)

    def pow(self, other: Any) -> "ScalarValue":
        return self._binary(other, "^", powf)

    def atan2(self, other: Any) -> "ScalarValue":
        """Two-argument arctangent with self as the y coordinate."""
        other = ScalarValue.coerce(other)
        if self.is_float and other.is_float:
            return ScalarValue._from_float(math.atan2(self._value, other._value))
        return ScalarValue._from_text(f"atan2({self}, {other})")

    def _function(self, name: str) -> "ScalarValue":
        if self.is_float:
            return ScalarValue._from_float(FUNCTIONS[name](self._value))
        return ScalarValue._from_text(f"{name}({self._value})")

    def sqrt(self) -> "ScalarValue":
        return self._function("sqrt")

    def exp(self) -> "ScalarValue":
        return self._function("exp")

    def sin(self) -> "ScalarValue":
        return self._function("sin")

    def cos(self) -> "ScalarValue":
        return self._function("cos")

    def acos(self) -> "ScalarValue":
        return self._function("acos")

    def abs(self) -> "ScalarValue":
        return self._function("abs")

    def signum(self) -> "ScalarValue":
        return self._function("signum")

    sign = signum

    def neg(self) -> "ScalarValue":
        if self.is_float:
            return ScalarValue._from_float(-self._value)
        return ScalarValue._from_text(f"(-{self._operand_text()})")

    def recip(self) -> "ScalarValue":
        """Return 1 / self.

        Raises:
            DivisionByZeroError: If self is a float equal to zero
        """
        return ScalarValue._from_float(1.0).div(self)

    # Comparison

    def equals(self, other: Any) -> bool:
        other = ScalarValue.coerce(other)
        return self.is_float == other.is_float and self._value == other._value

    def isclose(self, other: Any, epsilon: float | None = None) -> bool:
        """Approximate equality.

        Two floats are close when they differ by at most epsilon (default
        ISCLOSE_EPSILON); two symbolic values only when their text is identical.
        A float is never close to a symbolic value.
        """
        other = ScalarValue.coerce(other)
        if self.is_float and other.is_float:
            if epsilon is None:
                epsilon = ISCLOSE_EPSILON
            return abs(self._value - other._value) <= epsilon
        if self.is_symbolic and other.is_symbolic:
            return self._value == other._value
        return False

    # Conversion

    def to_float(self) -> float:
        """Return the float value.

        Raises:
            SymbolicNotNumericError: If the value is symbolic
        """
        if self.is_symbolic:
            raise SymbolicNotNumericError(
                f"Symbolic value can not be cast to float: {self._value}"
            )
        return self._value

    def __float__(self) -> float:
        return self.to_float()

    def __complex__(self) -> complex:
        if self.is_symbolic:
            raise SymbolicNotNumericError(
                f"Symbolic value can not be cast to complex: {self._value}"
            )
        return complex(self._value, 0.0)

    def __str__(self) -> str:
        if self.is_float:
            return format_float(self._value)
        return self._value

    def __repr__(self) -> str:
        return f"ScalarValue({self._value!r})"

    def __format__(self, format_spec: str) -> str:
        if format_spec and self.is_float:
            return format(self._value, format_spec)
        return str(self)

    def __eq__(self, other: Any) -> bool:
        try:
            return self.equals(other)
        except (NotConvertibleError, ValueError):
            return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    # Pickled text was valid when it was stored, so it is not checked again
    def __reduce__(self):
        if self.is_float:
            return (ScalarValue._from_float, (self._value,))
        return (ScalarValue._from_text, (self._value, self._grouped))

    def __copy__(self) -> "ScalarValue":
        return self

    def __deepcopy__(self, memo: dict) -> "ScalarValue":
        return self

    # Operators

    __add__ = _operator("add")
    __radd__ = _operator("add", reflected=True)
    __sub__ = _operator("sub")
    __rsub__ = _operator("sub", reflected=True)
    __mul__ = _operator("mul")
    __rmul__ = _operator("mul", reflected=True)
    __truediv__ = _operator("div")
    __rtruediv__ = _operator("div", reflected=True)
    __rpow__ = _operator("pow", reflected=True)

    def __pow__(self, other: Any, modulo: Any = None) -> "ScalarValue":
        if modulo is not None:
            return NotImplemented
        try:
            other = ScalarValue.coerce(other)
        except NotConvertibleError:
            return NotImplemented
        return self.pow(other)

    def __neg__(self) -> "ScalarValue":
        return self.neg()

    def __pos__(self) -> "ScalarValue":
        return self

    def __abs__(self) -> "ScalarValue":
        return self.abs()

    def __invert__(self) -> "ScalarValue":
        return self.recip()
