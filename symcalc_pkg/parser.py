"""Expression tokenizer, operator-precedence parser and evaluator.

This module handles:
- Tokenization of expression text (numbers, identifiers, operators, commas, parentheses)
- Parsing with the precedence rules below, using explicit stacks so that the
  deeply nested text built by ScalarValue arithmetic never hits Python's
  recursion limit
- Evaluation to a concrete float against a variable environment
- Syntax checking without evaluation (used to validate symbolic text)

Grammar, from lowest to highest precedence::

    expression := term (("+" | "-") term)*
    term       := power (("*" | "/") power)*
    power      := unary ("^" power)?
    unary      := ("-" | "+") unary | primary
    primary    := NUMBER | IDENT | IDENT "(" arguments ")" | "(" expression ")"

The parser itself does not know what a value is: it reports every number,
variable, operator and call to a semantics object, which either computes a
float, builds a SymPy expression (see conversion.py) or does nothing at all
(syntax checking).

The input limits MAX_INPUT_LENGTH and MAX_EXPRESSION_DEPTH apply to text
handed in by callers. Text held by a ScalarValue was validated when it was
constructed, or synthesized by arithmetic, and is parsed with ``limits=False``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from functools import lru_cache
from typing import Any, Mapping, MutableMapping

from .config import (
    CACHE_SIZE_PARSE,
    FUNCTION_ARITY,
    MAX_EXPRESSION_DEPTH,
    MAX_INPUT_LENGTH,
    VAR_NAME_RE,
)
from .logging_config import get_logger
from .numeric import FUNCTIONS, powf
from .types import DivisionByZeroError, NotConvertibleError, ParseError, UnknownVariableError

logger = get_logger("parser")


class TokenType(Enum):
    NUMBER = "NUMBER"
    IDENT = "IDENT"
    OPERATOR = "OPERATOR"
    COMMA = "COMMA"
    LPAREN = "LPAREN"
    RPAREN = "RPAREN"
    END = "END"


@dataclass(frozen=True)
class Token:
    type: TokenType
    text: str
    position: int
    value: float | None = None


# ASCII only: "\d" would otherwise accept digits of any script
TOKEN_RE = re.compile(
    r"""
    (?P<space>\s+)
    |(?P<number>(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?)
    |(?P<ident>[A-Za-z_][A-Za-z0-9_]*)
    |(?P<operator>[-+*/^])
    |(?P<comma>,)
    |(?P<lparen>\()
    |(?P<rparen>\))
    """,
    re.VERBOSE | re.ASCII,
)

_GROUP_TYPES = {
    "number": TokenType.NUMBER,
    "ident": TokenType.IDENT,
    "operator": TokenType.OPERATOR,
    "comma": TokenType.COMMA,
    "lparen": TokenType.LPAREN,
    "rparen": TokenType.RPAREN,
}

# Binary operator precedence; unary prefix operators bind tighter than all of them
_PRECEDENCE = {"+": 1, "-": 1, "*": 2, "/": 2, "^": 3}
_UNARY_PRECEDENCE = 4
_RIGHT_ASSOCIATIVE = {"^"}


@lru_cache(maxsize=CACHE_SIZE_PARSE)
def tokenize(text: str) -> tuple[Token, ...]:
    """Split expression text into tokens.

    Args:
        text: Expression text (e.g. "2 * (x + 1)")

    Returns:
        Tuple of tokens, always terminated by an END token

    Raises:
        ParseError: If the text contains an unexpected character
    """
    tokens = []
    pos = 0
    while pos < len(text):
        match = TOKEN_RE.match(text, pos)
        if match is None:
            raise ParseError(f"Unexpected character {text[pos]!r}", pos)
        kind = match.lastgroup
        if kind != "space":
            token_type = _GROUP_TYPES[kind]
            value = float(match.group()) if token_type is TokenType.NUMBER else None
            tokens.append(Token(token_type, match.group(), pos, value))
        pos = match.end()
    tokens.append(Token(TokenType.END, "", len(text)))
    return tuple(tokens)


@dataclass
class _Pending:
    """An operator, parenthesis or function call waiting on the parser stack."""

    kind: str  # "unary", "binary", "group" or "call"
    token: Token
    precedence: int = 0
    opening: Token | None = None
    args: list = field(default_factory=list)


class Parser:
    """Operator-precedence parser driving a semantics object over one expression.

    Operands and pending operators live on two explicit stacks; an operator is
    reduced as soon as the next operator binds less tightly. Parentheses and
    function calls sit on the operator stack as barriers.
    """

    def __init__(self, text: str, semantics: Any, limits: bool = True):
        if limits and len(text) > MAX_INPUT_LENGTH:
            raise ParseError(f"Input too long (max {MAX_INPUT_LENGTH} characters)")
        self.text = text
        self.tokens = tokenize(text)
        self.semantics = semantics
        self.limits = limits
        self.pos = 0
        self.operands: list[Any] = []
        self.pending: list[_Pending] = []

    def parse(self) -> Any:
        if self.tokens[0].type is TokenType.END:
            raise ParseError("Empty expression", 0)
        expect_operand = True
        while True:
            token = self.tokens[self.pos]
            self.pos += 1
            if expect_operand:
                expect_operand = self._operand(token)
            elif token.type is TokenType.END:
                return self._finish()
            else:
                expect_operand = self._after_operand(token)

    def _push(self, entry: _Pending) -> None:
        if self.limits and len(self.pending) >= MAX_EXPRESSION_DEPTH:
            raise ParseError(
                f"Expression too deeply nested (>{MAX_EXPRESSION_DEPTH} levels)",
                entry.token.position,
            )
        self.pending.append(entry)

    def _operand(self, token: Token) -> bool:
        """Handle a token where an operand is expected; return whether one is still expected."""
        if token.type is TokenType.NUMBER:
            self.operands.append(self.semantics.number(token.value))
            return False
        if token.type is TokenType.OPERATOR and token.text in "+-":
            self._push(_Pending("unary", token, _UNARY_PRECEDENCE))
            return True
        if token.type is TokenType.LPAREN:
            self._push(_Pending("group", token))
            return True
        if token.type is TokenType.IDENT:
            if self.tokens[self.pos].type is TokenType.LPAREN:
                return self._open_call(token)
            if token.text in FUNCTION_ARITY:
                raise ParseError(
                    f"Function {token.text!r} must be called with arguments",
                    token.position,
                )
            self.operands.append(self.semantics.variable(token.text, token.position))
            return False
        if token.type is TokenType.END:
            raise ParseError("Unexpected end of expression", token.position)
        raise ParseError(f"Unexpected token {token.text!r}", token.position)

    def _open_call(self, name: Token) -> bool:
        if name.text not in FUNCTION_ARITY:
            raise ParseError(f"Unknown function {name.text!r}", name.position)
        opening = self.tokens[self.pos]
        self.pos += 1
        call = _Pending("call", name, opening=opening)
        self._push(call)
        if self.tokens[self.pos].type is TokenType.RPAREN:
            self.pos += 1
            self.pending.pop()
            self._complete_call(call)
            return False
        return True

    def _after_operand(self, token: Token) -> bool:
        """Handle a token following a complete operand; return whether an operand is expected."""
        if token.type is TokenType.OPERATOR:
            precedence = _PRECEDENCE[token.text]
            right_associative = token.text in _RIGHT_ASSOCIATIVE
            while self.pending and self.pending[-1].kind in ("unary", "binary"):
                top = self.pending[-1].precedence
                if top < precedence or (top == precedence and right_associative):
                    break
                self._reduce()
            self._push(_Pending("binary", token, precedence))
            return True
        barrier = self._reduce_to_barrier()
        if token.type is TokenType.RPAREN:
            if barrier is None:
                raise ParseError("Unbalanced parentheses: unexpected ')'", token.position)
            self.pending.pop()
            if barrier.kind == "call":
                barrier.args.append(self.operands.pop())
                self._complete_call(barrier)
            return False
        if token.type is TokenType.COMMA and barrier is not None and barrier.kind == "call":
            barrier.args.append(self.operands.pop())
            return True
        if barrier is not None:
            raise ParseError(f"Expected ')' but found {token.text!r}", token.position)
        raise ParseError(f"Unexpected token {token.text!r}", token.position)

    def _complete_call(self, call: _Pending) -> None:
        name = call.token
        arity = FUNCTION_ARITY[name.text]
        if len(call.args) != arity:
            raise ParseError(
                f"Function {name.text!r} takes {arity} argument(s), got {len(call.args)}",
                name.position,
            )
        self.operands.append(self.semantics.call(name.text, call.args, name.position))

    def _reduce(self) -> None:
        entry = self.pending.pop()
        if entry.kind == "unary":
            operand = self.operands.pop()
            self.operands.append(self.semantics.unary(entry.token.text, operand))
            return
        right = self.operands.pop()
        left = self.operands.pop()
        self.operands.append(
            self.semantics.binary(entry.token.text, left, right, entry.token.position)
        )

    def _reduce_to_barrier(self) -> _Pending | None:
        """Reduce pending operators down to the innermost open parenthesis or call."""
        while self.pending and self.pending[-1].kind in ("unary", "binary"):
            self._reduce()
        return self.pending[-1] if self.pending else None

    def _finish(self) -> Any:
        barrier = self._reduce_to_barrier()
        if barrier is not None:
            opening = barrier.opening if barrier.kind == "call" else barrier.token
            raise ParseError("Unbalanced parentheses: missing ')'", opening.position)
        return self.operands.pop()


class _SyntaxOnly:
    """Semantics that accepts any well-formed expression and computes nothing."""

    def number(self, value):
        return None

    def variable(self, name, position):
        return None

    def unary(self, op, operand):
        return None

    def binary(self, op, left, right, position):
        return None

    def call(self, name, args, position):
        return None


class _FloatEvaluation:
    """Semantics computing a float, looking variables up in an environment."""

    def __init__(self, variables: Mapping[str, float]):
        self.variables = variables

    def number(self, value: float) -> float:
        return value

    def variable(self, name: str, position: int) -> float:
        try:
            return self.variables[name]
        except KeyError:
            raise UnknownVariableError(name) from None

    def unary(self, op: str, operand: float) -> float:
        return -operand if op == "-" else operand

    def binary(self, op: str, left: float, right: float, position: int) -> float:
        if op == "+":
            return left + right
        if op == "-":
            return left - right
        if op == "*":
            return left * right
        if op == "/":
            if right == 0.0:
                raise DivisionByZeroError()
            return left / right
        return powf(left, right)

    def call(self, name: str, args: list[float], position: int) -> float:
        return FUNCTIONS[name](*args)


_SYNTAX_ONLY = _SyntaxOnly()


def check_syntax(text: str, limits: bool = True) -> None:
    """Validate expression text without looking up variables or computing anything.

    Args:
        text: Expression text
        limits: Enforce MAX_INPUT_LENGTH and MAX_EXPRESSION_DEPTH

    Raises:
        ParseError: If the text is not a well-formed expression
    """
    Parser(text, _SYNTAX_ONLY, limits).parse()


def variable_names(text: str) -> list[str]:
    """Return the sorted, de-duplicated variable names referenced by the text."""
    tokens = tokenize(text)
    names = set()
    for index, token in enumerate(tokens):
        if token.type is not TokenType.IDENT:
            continue
        if tokens[index + 1].type is TokenType.LPAREN or token.text in FUNCTION_ARITY:
            continue
        names.add(token.text)
    return sorted(names)


def is_valid_identifier(name: str) -> bool:
    """Check whether name can be referenced as a variable in an expression."""
    return bool(VAR_NAME_RE.match(name)) and name not in FUNCTION_ARITY


class Evaluator:
    """Evaluates expression text to floats against a variable environment.

    The environment mapping is used by reference, so bindings added to it by the
    owner are visible to later evaluations.
    """

    def __init__(self, variables: MutableMapping[str, float] | None = None):
        self.variables = variables if variables is not None else {}

    def evaluate(self, text: str, limits: bool = True) -> float:
        """Parse and evaluate text.

        Args:
            text: Expression text (e.g. "2 * (x + 1)")
            limits: Enforce the input length and nesting limits

        Returns:
            The evaluated float

        Raises:
            ParseError: If the text is malformed
            UnknownVariableError: If the text references an unbound variable
            DivisionByZeroError: If a divisor evaluates to zero
        """
        result = Parser(text, _FloatEvaluation(self.variables), limits).parse()
        logger.debug("Evaluated %r -> %r", text, result)
        return result

    def parse_and_resolve(self, value: Any) -> float:
        """Return a concrete float for a ScalarValue, expression text or plain number.

        Raises:
            NotConvertibleError: If value is none of the accepted kinds
        """
        from .scalar import ScalarValue

        if isinstance(value, ScalarValue):
            if value.is_float:
                return value.value
            return self.evaluate(value.value, limits=False)
        if isinstance(value, str):
            return self.evaluate(value)
        if isinstance(value, (int, float)) or hasattr(type(value), "__float__"):
            return ScalarValue.coerce(value).to_float()
        raise NotConvertibleError(
            f"Input of type {type(value).__name__} can not be resolved to a float"
        )


def evaluate(text: str, variables: MutableMapping[str, float] | None = None) -> float:
    """Evaluate text once with an optional variable mapping."""
    return Evaluator(variables).evaluate(text)


def parse_and_resolve(
    value: Any, variables: MutableMapping[str, float] | None = None
) -> float:
    """Resolve a ScalarValue, text or number to a float with an optional variable mapping."""
    return Evaluator(variables).parse_and_resolve(value)
