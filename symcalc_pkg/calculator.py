"""Stateful calculator: a variable environment plus the expression evaluator."""

from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping

from .complex_value import ComplexValue
from .logging_config import get_logger
from .parser import Evaluator
from .scalar import ScalarValue
from .types import NotConvertibleError, UnknownVariableError

logger = get_logger("calculator")


class Calculator:
    """Holds variable bindings and resolves expressions against them.

    A Calculator is not meant to be shared between threads without external
    locking; use one instance per thread instead.
    """

    def __init__(self) -> None:
        self._variables: dict[str, float] = {}
        self._evaluator = Evaluator(self._variables)

    @property
    def variables(self) -> Mapping[str, float]:
        """Read-only view of the current bindings."""
        return MappingProxyType(self._variables)

    def set(self, name: str, value: Any) -> None:
        """Bind name to a float value, replacing any previous binding.

        The name is not validated; a name that can not appear in an expression
        is simply never looked up.

        Raises:
            NotConvertibleError: If value is not a number
            SymbolicNotNumericError: If value is a symbolic ScalarValue
        """
        if isinstance(value, str):
            raise NotConvertibleError(
                f"Value of variable {name!r} must be a number, not a string"
            )
        self._variables[name] = ScalarValue.coerce(value).to_float()
        logger.debug("Set %s = %r", name, self._variables[name])

    def get(self, name: str) -> float:
        try:
            return self._variables[name]
        except KeyError:
            raise UnknownVariableError(name) from None

    def unset(self, name: str) -> None:
        try:
            del self._variables[name]
        except KeyError:
            raise UnknownVariableError(name) from None

    def clear(self) -> None:
        self._variables.clear()

    def parse(self, text: str) -> float:
        """Evaluate expression text against the current bindings."""
        return self._evaluator.evaluate(text)

    parse_str = parse

    def resolve(self, value: Any) -> float:
        """Return a float for a number, expression text or ScalarValue.

        Numbers and float ScalarValues are returned directly; text and symbolic
        ScalarValues are evaluated with parse().
        """
        return self._evaluator.parse_and_resolve(value)

    parse_get = resolve

    def resolve_complex(self, value: Any) -> complex:
        """Resolve both components of a ComplexValue (or anything it coerces) to a complex."""
        value = ComplexValue.coerce(value)
        return complex(self.resolve(value.real), self.resolve(value.imag))

    def __repr__(self) -> str:
        return f"Calculator(variables={self._variables!r})"


def parse_str(expression: str) -> float:
    """Evaluate an expression that uses no variables."""
    return Calculator().parse(expression)
