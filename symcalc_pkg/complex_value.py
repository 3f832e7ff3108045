"""ComplexValue: a complex number built from two ScalarValue components.

Each component is independently a float or symbolic text, and all arithmetic
goes through ScalarValue so symbolic propagation happens component-wise.
"""

from __future__ import annotations

import math
from typing import Any

from .scalar import ScalarValue, _operator
from .types import DivisionByZeroError, NotConvertibleError, SymbolicNotNumericError


_NO_IMAG = object()


def _is_zero(value: ScalarValue) -> bool:
    return value.is_float and value.value == 0.0


def _component(value: Any) -> ScalarValue:
    # accepts a serialization pair (is_float, value) or anything ScalarValue coerces
    if isinstance(value, tuple) and len(value) == 2 and isinstance(value[0], bool):
        return ScalarValue.from_pair(*value)
    return ScalarValue.coerce(value)


class ComplexValue:
    """A complex number whose real and imaginary parts are ScalarValues.

    ``ComplexValue(re, im)`` coerces each part like ScalarValue. With a single
    argument, a ComplexValue or Python complex supplies both parts and anything
    else becomes the real part.
    """

    __slots__ = ("_real", "_imag")

    def __init__(self, real: Any = 0.0, imag: Any = _NO_IMAG):
        if imag is _NO_IMAG:
            if isinstance(real, (ComplexValue, complex)):
                real, imag = real.real, real.imag
            else:
                imag = 0.0
        self._real = ScalarValue.coerce(real)
        self._imag = ScalarValue.coerce(imag)

    @classmethod
    def coerce(cls, value: Any) -> "ComplexValue":
        """Convert a ComplexValue, complex, ScalarValue, number or expression text.

        Raises:
            NotConvertibleError: If value is none of these
        """
        if isinstance(value, cls):
            return value
        return cls(value)

    @classmethod
    def from_pair(cls, real: Any, imag: Any) -> "ComplexValue":
        """Build from two components, each a ScalarValue serialization pair or a plain value."""
        return cls(_component(real), _component(imag))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ComplexValue":
        """Reverse of to_dict()."""
        if not data.get("is_calculator_complex"):
            raise NotConvertibleError("Dictionary does not describe a ComplexValue")
        try:
            return cls(data["real"], data["imag"])
        except KeyError as e:
            raise NotConvertibleError(f"Missing ComplexValue component: {e}") from e

    def to_pair(self) -> tuple[tuple[bool, float | str], tuple[bool, float | str]]:
        return self._real.to_pair(), self._imag.to_pair()

    def to_dict(self) -> dict[str, Any]:
        return {
            "is_calculator_complex": True,
            "real": self._real.value,
            "imag": self._imag.value,
        }

    @property
    def real(self) -> ScalarValue:
        return self._real

    @property
    def imag(self) -> ScalarValue:
        return self._imag

    @property
    def is_float(self) -> bool:
        """True when both components are floats."""
        return self._real.is_float and self._imag.is_float

    # Arithmetic

    def add(self, other: Any) -> "ComplexValue":
        other = ComplexValue.coerce(other)
        return ComplexValue(self._real.add(other._real), self._imag.add(other._imag))

    def sub(self, other: Any) -> "ComplexValue":
        other = ComplexValue.coerce(other)
        return ComplexValue(self._real.sub(other._real), self._imag.sub(other._imag))

    def mul(self, other: Any) -> "ComplexValue":
        other = ComplexValue.coerce(other)
        real = self._real.mul(other._real).sub(self._imag.mul(other._imag))
        imag = self._real.mul(other._imag).add(self._imag.mul(other._real))
        return ComplexValue(real, imag)

    def div(self, other: Any) -> "ComplexValue":
        """Divide by other, multiplying by its conjugate over its squared norm.

        Raises:
            DivisionByZeroError: If the squared norm of other is a float equal
                to zero. A symbolic norm is not checked.
        """
        other = ComplexValue.coerce(other)
        norm_sqr = other.norm_sqr()
        if _is_zero(norm_sqr):
            raise DivisionByZeroError()
        real = self._real.mul(other._real).add(self._imag.mul(other._imag))
        imag = self._imag.mul(other._real).sub(self._real.mul(other._imag))
        return ComplexValue(real.div(norm_sqr), imag.div(norm_sqr))

    def neg(self) -> "ComplexValue":
        return ComplexValue(self._real.neg(), self._imag.neg())

    def conj(self) -> "ComplexValue":
        return ComplexValue(self._real, self._imag.neg())

    conjugate = conj

    def norm_sqr(self) -> ScalarValue:
        return self._real.mul(self._real).add(self._imag.mul(self._imag))

    def norm(self) -> ScalarValue:
        if self.is_float:
            return ScalarValue(math.hypot(self._real.value, self._imag.value))
        return self.norm_sqr().sqrt()

    abs = norm

    def arg(self) -> ScalarValue:
        return self._imag.atan2(self._real)

    def recip(self) -> "ComplexValue":
        """Return 1 / self as conj / norm_sqr.

        Raises:
            DivisionByZeroError: If the squared norm is a float equal to zero
        """
        norm_sqr = self.norm_sqr()
        if _is_zero(norm_sqr):
            raise DivisionByZeroError()
        conj = self.conj()
        return ComplexValue(conj._real.div(norm_sqr), conj._imag.div(norm_sqr))

    # Comparison

    def equals(self, other: Any) -> bool:
        other = ComplexValue.coerce(other)
        return self._real.equals(other._real) and self._imag.equals(other._imag)

    def isclose(self, other: Any, epsilon: float | None = None) -> bool:
        other = ComplexValue.coerce(other)
        return self._real.isclose(other._real, epsilon) and self._imag.isclose(
            other._imag, epsilon
        )

    # Conversion

    def to_complex(self) -> complex:
        """Return a Python complex.

        Raises:
            SymbolicNotNumericError: If either component is symbolic
        """
        if not self.is_float:
            raise SymbolicNotNumericError(
                f"Symbolic value can not be cast to complex: {self}"
            )
        return complex(self._real.value, self._imag.value)

    def to_float(self) -> float:
        """Return the real part as a float when the imaginary part is zero.

        Raises:
            SymbolicNotNumericError: If either component is symbolic
            NotConvertibleError: If the imaginary part is not zero
        """
        value = self.to_complex()
        if value.imag != 0.0:
            raise NotConvertibleError(
                f"Complex value with non-zero imaginary part can not be cast to float: {self}"
            )
        return value.real

    def __complex__(self) -> complex:
        return self.to_complex()

    def __str__(self) -> str:
        return f"({self._real} + i * {self._imag})"

    def __repr__(self) -> str:
        return f"ComplexValue({self._real.value!r}, {self._imag.value!r})"

    def __format__(self, format_spec: str) -> str:
        return str(self)

    def __eq__(self, other: Any) -> bool:
        try:
            return self.equals(other)
        except (NotConvertibleError, ValueError):
            return NotImplemented

    def __hash__(self) -> int:
        # matches hash(complex) / hash(float) / hash(str) for values equal to them
        if self.is_float:
            return hash(self.to_complex())
        if _is_zero(self._imag):
            return hash(self._real)
        return hash((self._real, self._imag))

    def __reduce__(self):
        return (ComplexValue, (self._real, self._imag))

    def __copy__(self) -> "ComplexValue":
        return self

    def __deepcopy__(self, memo: dict) -> "ComplexValue":
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

    def __neg__(self) -> "ComplexValue":
        return self.neg()

    def __pos__(self) -> "ComplexValue":
        return self

    def __abs__(self) -> ScalarValue:
        return self.norm()

    def __invert__(self) -> "ComplexValue":
        return self.recip()
