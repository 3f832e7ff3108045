"""Command-line interface: one-shot evaluation and an interactive REPL."""

from __future__ import annotations

import argparse
import json
import sys

from .api import evaluate
from .calculator import Calculator
from .config import VERSION
from .conversion import to_sympy
from .logging_config import get_logger, setup_logging
from .parser import is_valid_identifier
from .types import CalculatorError, EvalResult

logger = get_logger("cli")

HELP_TEXT = """Commands:
  <expression>          evaluate, e.g. 2 * (x + 1) or atan2(1, 1)
  NAME = <expression>   evaluate and bind the result to NAME
  set NAME <expression> same as NAME = <expression>
  unset NAME            remove a binding
  vars                  list bindings
  clear                 remove all bindings
  sympy <expression>    show the expression as a SymPy expression
  help                  show this text
  quit, exit            leave"""


def print_result(result: EvalResult, output_format: str = "human") -> None:
    """Print an EvalResult as JSON or human-readable text."""
    if output_format == "json":
        print(json.dumps(result.to_dict()))
    elif result.ok:
        print(result.result)
    else:
        print(f"Error: {result.error}")


def _assign(calculator: Calculator, name: str, expression: str) -> EvalResult:
    if not is_valid_identifier(name):
        return EvalResult(
            ok=False, error=f"Invalid variable name: {name!r}", error_code="INVALID_NAME"
        )
    result = evaluate(expression, calculator.variables)
    if result.ok:
        calculator.set(name, result.value)
    return result


def _split_assignment(text: str) -> tuple[str, str] | None:
    if "=" not in text:
        return None
    name, expression = text.split("=", 1)
    return name.strip(), expression.strip()


def execute_line(calculator: Calculator, raw: str, output_format: str = "human") -> bool:
    """Run one REPL line, printing its output.

    Returns:
        False when the line asked to leave the REPL, True otherwise
    """
    line = raw.strip()
    if not line:
        return True
    command, _, rest = line.partition(" ")
    command = command.lower()
    rest = rest.strip()

    if command in ("quit", "exit") and not rest:
        return False
    if command == "help" and not rest:
        print(HELP_TEXT)
        return True
    if command == "vars" and not rest:
        if not calculator.variables:
            print("(no variables)")
        for name, value in sorted(calculator.variables.items()):
            print(f"{name} = {value!r}")
        return True
    if command == "clear" and not rest:
        calculator.clear()
        return True
    if command == "unset" and rest:
        try:
            calculator.unset(rest)
        except CalculatorError as e:
            print(f"Error: {e}")
        return True
    if command == "set" and rest:
        name, _, expression = rest.partition(" ")
        print_result(_assign(calculator, name, expression.strip()), output_format)
        return True
    if command == "sympy" and rest:
        try:
            print(to_sympy(rest))
        except CalculatorError as e:
            print(f"Error: {e}")
        return True

    assignment = _split_assignment(line)
    if assignment is not None:
        print_result(_assign(calculator, *assignment), output_format)
        return True
    print_result(evaluate(line, calculator.variables), output_format)
    return True


def repl_loop(calculator: Calculator, output_format: str = "human") -> None:
    """Interactive REPL loop with graceful interrupt handling."""
    try:
        import readline  # noqa: F401
    except ImportError:
        # line editing is optional (missing on Windows)
        pass

    print("symcalc: type 'help' for commands, 'quit' to exit.")
    while True:
        try:
            raw = input(">>> ")
        except (EOFError, KeyboardInterrupt):
            print("\nGoodbye.")
            break
        if not execute_line(calculator, raw, output_format):
            print("Goodbye.")
            break


def main_entry(argv: list[str] | None = None) -> int:
    """
    Main entry point for the symcalc CLI.

    Args:
        argv: Optional command-line arguments (defaults to sys.argv)

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    parser = argparse.ArgumentParser(prog="symcalc")
    parser.add_argument(
        "-e",
        "--eval",
        type=str,
        help="Evaluate one expression and exit (non-interactive)",
        dest="eval_expr",
    )
    parser.add_argument(
        "-s",
        "--set",
        action="append",
        default=[],
        metavar="NAME=EXPR",
        help="Bind a variable before evaluating (repeatable)",
        dest="bindings",
    )
    parser.add_argument(
        "--format",
        type=str,
        choices=["json", "human"],
        default="human",
        help="Output format: json (machine-readable) or human (human-readable)",
    )
    parser.add_argument(
        "--sympy",
        action="store_true",
        help="Print the expression of --eval as a SymPy expression instead of evaluating it",
    )
    parser.add_argument(
        "-v", "--version", action="store_true", help="Show program version"
    )
    parser.add_argument(
        "--log-level",
        type=str,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Set logging level",
    )
    parser.add_argument("--log-file", type=str, help="Write logs to file")
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level, log_file=args.log_file)

    if args.version:
        print(VERSION)
        return 0

    calculator = Calculator()
    for binding in args.bindings:
        assignment = _split_assignment(binding)
        if assignment is None:
            print(f"Error: Expected NAME=EXPR, got {binding!r}")
            return 1
        result = _assign(calculator, *assignment)
        if not result.ok:
            print_result(result, args.format)
            return 1
        logger.debug("Bound %s from command line", assignment[0])

    if args.eval_expr is not None:
        expression = args.eval_expr.strip()
        if args.sympy:
            try:
                print(to_sympy(expression))
            except CalculatorError as e:
                print(f"Error: {e}")
                return 1
            return 0
        result = evaluate(expression, calculator.variables)
        print_result(result, args.format)
        return 0 if result.ok else 1

    repl_loop(calculator, args.format)
    return 0


if __name__ == "__main__":
    sys.exit(main_entry())
