"""Centralized configuration for symcalc.

This module defines:
- Numeric tolerances used by approximate comparison
- Input validation limits (length, nesting depth) for text supplied by callers
- Cache sizes for tokenization and the default logging level
- The function table of the expression evaluator
- Allowed SymPy names used when exporting to SymPy

Configuration can be overridden via environment variables (prefixed with SYMCALC_).
"""

import os
import re

import sympy as sp

# Version is defined in pyproject.toml [project] section
try:
    import importlib.metadata

    VERSION = importlib.metadata.version("symcalc")
except importlib.metadata.PackageNotFoundError:
    # Package not installed (running from a source checkout)
    VERSION = "0.3.0"

# Numeric tolerance for ScalarValue.isclose / ComplexValue.isclose
ISCLOSE_EPSILON = float(os.getenv("SYMCALC_ISCLOSE_EPSILON", "1e-12"))

# Input validation limits
MAX_INPUT_LENGTH = int(os.getenv("SYMCALC_MAX_INPUT_LENGTH", "10000"))  # characters
MAX_EXPRESSION_DEPTH = int(
    os.getenv("SYMCALC_MAX_EXPRESSION_DEPTH", "100")
)  # open parentheses, calls and pending operators; applies to caller-supplied text only

# Cache configuration
CACHE_SIZE_PARSE = int(os.getenv("SYMCALC_CACHE_SIZE_PARSE", "1024"))

# Default level of setup_logging() when none is given
LOG_LEVEL = os.getenv("SYMCALC_LOG_LEVEL", "INFO")

# Functions understood by the evaluator, with their argument count
FUNCTION_ARITY = {
    "sqrt": 1,
    "exp": 1,
    "sin": 1,
    "cos": 1,
    "acos": 1,
    "abs": 1,
    "sign": 1,
    "signum": 1,
    "atan2": 2,
}

ALLOWED_SYMPY_NAMES = {
    "sqrt": sp.sqrt,
    "exp": sp.exp,
    "sin": sp.sin,
    "cos": sp.cos,
    "acos": sp.acos,
    "abs": sp.Abs,
    "sign": sp.sign,
    "signum": sp.sign,
    "atan2": sp.atan2,
}

VAR_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
