"""Type definitions: error classes and result dataclasses for consistent API responses."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class EvalResult:
    """Result of evaluating an expression."""

    ok: bool
    result: str | None = None
    value: float | None = None
    free_symbols: list[str] | None = None
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        result_dict: dict[str, Any] = {"ok": self.ok}
        if self.result is not None:
            result_dict["result"] = self.result
        if self.value is not None:
            result_dict["value"] = self.value
        if self.free_symbols is not None:
            result_dict["free_symbols"] = self.free_symbols
        if self.error is not None:
            result_dict["error"] = self.error
        if self.error_code is not None:
            result_dict["error_code"] = self.error_code
        return result_dict

    def __repr__(self) -> str:
        """Return string representation of the result."""
        if not self.ok:
            return (
                f"EvalResult(ok=False, error={self.error!r}, "
                f"error_code={self.error_code!r})"
            )
        parts = [f"ok={self.ok}"]
        if self.result is not None:
            parts.append(f"result={self.result!r}")
        if self.free_symbols is not None:
            parts.append(f"free_symbols={self.free_symbols!r}")
        return f"EvalResult({', '.join(parts)})"


class CalculatorError(Exception):
    """Base class of every error raised by the calculator core."""

    default_code = "CALCULATOR_ERROR"

    def __init__(self, message: str, code: str | None = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


class NotConvertibleError(CalculatorError, TypeError):
    """Raised when an input can not be coerced into a scalar or complex value."""

    default_code = "NOT_CONVERTIBLE"


class ParseError(CalculatorError, ValueError):
    """Raised when expression text is malformed.

    ``position`` is the character offset the parser stopped at, or None when the
    error concerns the input as a whole.
    """

    default_code = "PARSE_ERROR"

    def __init__(self, message: str, position: int | None = None):
        self.position = position
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)


class UnknownVariableError(CalculatorError, LookupError):
    """Raised when an expression references an unbound variable."""

    default_code = "UNKNOWN_VARIABLE"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown variable: {name}")


class DivisionByZeroError(CalculatorError, ZeroDivisionError):
    """Raised when a concrete zero divisor is detected."""

    default_code = "DIVISION_BY_ZERO"

    def __init__(self, message: str = "Division by zero!"):
        super().__init__(message)


class SymbolicNotNumericError(CalculatorError, ValueError):
    """Raised when a numeric value is requested from symbolic text."""

    default_code = "SYMBOLIC_NOT_NUMERIC"
