"""Unit tests for ScalarValue."""

import copy
import math
import pickle
import unittest

from symcalc_pkg.config import MAX_EXPRESSION_DEPTH, MAX_INPUT_LENGTH
from symcalc_pkg.parser import Evaluator, evaluate
from symcalc_pkg.scalar import ScalarValue
from symcalc_pkg.types import (
    DivisionByZeroError,
    NotConvertibleError,
    ParseError,
    SymbolicNotNumericError,
)


class TestConstruction(unittest.TestCase):
    """Test coercion of heterogeneous input."""

    def test_float_round_trip(self):
        for x in (-3.5, 0.0, -0.0, 0.25, 1e300, -1e-300, 42.0):
            self.assertEqual(ScalarValue(x).to_float(), x)

    def test_int_becomes_float(self):
        value = ScalarValue(3)
        self.assertTrue(value.is_float)
        self.assertEqual(value.value, 3.0)
        self.assertIsInstance(value.value, float)

    def test_string_is_symbolic_verbatim(self):
        value = ScalarValue("x + 1")
        self.assertTrue(value.is_symbolic)
        self.assertEqual(value.value, "x + 1")

    def test_numeric_string_stays_symbolic(self):
        self.assertTrue(ScalarValue("1.5").is_symbolic)

    def test_pass_through(self):
        value = ScalarValue("a")
        self.assertIs(ScalarValue.coerce(value), value)
        self.assertEqual(ScalarValue(value), value)

    def test_malformed_text_rejected(self):
        with self.assertRaises(ParseError):
            ScalarValue("(1 + 2")
        with self.assertRaises(ParseError):
            ScalarValue("")

    def test_not_convertible(self):
        for bad in (None, [1.0], complex(1, 2), object()):
            with self.assertRaises(NotConvertibleError):
                ScalarValue(bad)

    def test_not_convertible_is_type_error(self):
        with self.assertRaises(TypeError):
            ScalarValue(None)


class TestArithmetic(unittest.TestCase):
    """Test numeric and symbolic arithmetic."""

    def test_numeric_operations(self):
        self.assertEqual(ScalarValue(1.5) + 2, ScalarValue(3.5))
        self.assertEqual(ScalarValue(5) - 7, -2.0)
        self.assertEqual(ScalarValue(2.5) * 4, 10.0)
        self.assertEqual(ScalarValue(9) / 2, 4.5)
        self.assertEqual(ScalarValue(2) ** 10, 1024.0)

    def test_reflected_numeric_operations(self):
        self.assertEqual(1 + ScalarValue(2), 3.0)
        self.assertEqual(10 - ScalarValue(4), 6.0)
        self.assertEqual(3 * ScalarValue(2), 6.0)
        self.assertEqual(1 / ScalarValue(4), 0.25)
        self.assertEqual(2 ** ScalarValue(3), 8.0)

    def test_symbolic_text(self):
        a = ScalarValue("a")
        self.assertEqual((a + 2).value, "(a + 2.0)")
        self.assertEqual((a - 2).value, "(a - 2.0)")
        self.assertEqual((a * 2).value, "(a * 2.0)")
        self.assertEqual((a / 2).value, "(a / 2.0)")
        self.assertEqual((a ** 2).value, "(a ^ 2.0)")
        self.assertEqual((2 - a).value, "(2.0 - a)")
        self.assertEqual((2 ** a).value, "(2.0 ^ a)")
        self.assertEqual((a + ScalarValue("b")).value, "(a + b)")

    def test_named_methods_match_operators(self):
        a = ScalarValue("a")
        self.assertEqual(a.add(1), a + 1)
        self.assertEqual(a.sub(1), a - 1)
        self.assertEqual(a.mul(1), a * 1)
        self.assertEqual(a.div(1), a / 1)
        self.assertEqual(a.pow(1), a ** 1)

    def test_compound_text_is_grouped(self):
        value = ScalarValue("x + 1") * 2
        self.assertEqual(value.value, "((x + 1) * 2.0)")
        self.assertEqual(evaluate(value.value, {"x": 2.0}), 6.0)

    def test_grouped_text_not_wrapped_twice(self):
        value = ScalarValue("(x + 1)") * ScalarValue("sqrt(y)")
        self.assertEqual(value.value, "((x + 1) * sqrt(y))")

    def test_negative_number_in_text(self):
        value = ScalarValue("x") * -2.0
        self.assertEqual(value.value, "(x * -2.0)")
        self.assertEqual(evaluate(value.value, {"x": 3.0}), -6.0)

    def test_negative_base_power_matches_numeric(self):
        symbolic = ScalarValue(-2.0) ** ScalarValue("n")
        self.assertEqual(evaluate(symbolic.value, {"n": 2.0}), (ScalarValue(-2.0) ** 2).value)

    def test_numeric_division_by_zero(self):
        for x in (1.0, -2.0, 0.0, 1e-300):
            with self.assertRaises(DivisionByZeroError):
                ScalarValue(x) / ScalarValue(0.0)
        with self.assertRaises(DivisionByZeroError):
            ScalarValue(1.0) / -0.0

    def test_symbolic_dividend_numeric_zero_divisor(self):
        with self.assertRaises(DivisionByZeroError):
            ScalarValue("a") / 0

    def test_division_by_zero_is_zero_division_error(self):
        with self.assertRaises(ZeroDivisionError):
            ScalarValue(1.0).div(0)

    def test_division_by_symbolic_never_checks(self):
        for x in (3.0, 0.0, -1.5):
            result = ScalarValue(x) / ScalarValue("a")
            self.assertEqual(result, ScalarValue(f"({x!r} / a)"))

    def test_ieee_power(self):
        self.assertEqual((ScalarValue(0.0) ** -1).value, math.inf)
        self.assertTrue(math.isnan((ScalarValue(-8.0) ** (1 / 3)).value))
        self.assertEqual((ScalarValue(10.0) ** 400).value, math.inf)


class TestFunctions(unittest.TestCase):
    """Test transcendental and unary operations."""

    def test_numeric_functions(self):
        self.assertEqual(ScalarValue(16).sqrt(), 4.0)
        self.assertEqual(ScalarValue(0).exp(), 1.0)
        self.assertEqual(ScalarValue(0).sin(), 0.0)
        self.assertEqual(ScalarValue(0).cos(), 1.0)
        self.assertEqual(ScalarValue(1).acos(), 0.0)
        self.assertEqual(ScalarValue(-2).abs(), 2.0)
        self.assertEqual(abs(ScalarValue(-2)), 2.0)

    def test_domain_errors_give_nan(self):
        self.assertTrue(math.isnan(ScalarValue(-1.0).sqrt().value))
        self.assertTrue(math.isnan(ScalarValue(2.0).acos().value))
        self.assertTrue(math.isnan(ScalarValue(math.inf).sin().value))

    def test_overflow_gives_inf(self):
        self.assertEqual(ScalarValue(1000.0).exp().value, math.inf)

    def test_symbolic_functions(self):
        self.assertEqual(ScalarValue("a").sqrt().value, "sqrt(a)")
        self.assertEqual(ScalarValue("a + 1").cos().value, "cos(a + 1)")
        self.assertEqual(ScalarValue("a").exp().value, "exp(a)")
        self.assertEqual(ScalarValue("a").sin().value, "sin(a)")
        self.assertEqual(ScalarValue("a").acos().value, "acos(a)")
        self.assertEqual(abs(ScalarValue("a")).value, "abs(a)")
        self.assertEqual(ScalarValue("a").signum().value, "signum(a)")

    def test_signum(self):
        self.assertEqual(ScalarValue(3).signum(), 1.0)
        self.assertEqual(ScalarValue(-2).signum(), -1.0)
        self.assertEqual(ScalarValue(0.0).signum(), 1.0)
        self.assertEqual(ScalarValue(-0.0).signum(), -1.0)
        self.assertTrue(math.isnan(ScalarValue(math.nan).signum().value))
        self.assertEqual(ScalarValue(-5).sign(), -1.0)

    def test_neg(self):
        self.assertEqual(-ScalarValue(2), -2.0)
        self.assertEqual((-ScalarValue("a")).value, "(-a)")
        self.assertEqual((-ScalarValue("a + b")).value, "(-(a + b))")

    def test_recip(self):
        self.assertEqual(~ScalarValue(4), 0.25)
        self.assertEqual(ScalarValue("a").recip().value, "(1.0 / a)")
        with self.assertRaises(DivisionByZeroError):
            ScalarValue(0.0).recip()

    def test_atan2(self):
        self.assertTrue(ScalarValue(1).atan2(1).isclose(math.pi / 4))
        self.assertEqual(ScalarValue("y").atan2(2).value, "atan2(y, 2.0)")
        self.assertEqual(ScalarValue(1).atan2("x").value, "atan2(1.0, x)")

    def test_symbolic_text_reevaluates(self):
        def build(x):
            return (
                ((x + 1.5) * (2 - x) / (x ** 2 + 1)).abs().sqrt()
                + x.sin() * x.cos()
                - (-x).exp()
                + x.atan2(3)
                + ~(x + 1)
                + x.signum()
                + x.acos()
            )

        numeric = build(ScalarValue(0.7)).to_float()
        symbolic = build(ScalarValue("x"))
        self.assertTrue(symbolic.is_symbolic)
        self.assertTrue(math.isclose(evaluate(symbolic.value, {"x": 0.7}), numeric, rel_tol=1e-12))

    def test_non_finite_text_reevaluates(self):
        inf_sum = ScalarValue("a") + math.inf
        self.assertEqual(evaluate(inf_sum.value, {"a": 1.0}), math.inf)
        neg_inf = ScalarValue("a") + -math.inf
        self.assertEqual(evaluate(neg_inf.value, {"a": 1.0}), -math.inf)
        nan_sum = ScalarValue("a") + math.nan
        self.assertTrue(math.isnan(evaluate(nan_sum.value, {"a": 1.0})))


class TestComparison(unittest.TestCase):
    """Test equality and approximate equality."""

    def test_equality(self):
        self.assertEqual(ScalarValue(1.0), 1)
        self.assertEqual(ScalarValue("a"), "a")
        self.assertNotEqual(ScalarValue(1.0), ScalarValue("1.0"))
        self.assertNotEqual(ScalarValue("a"), ScalarValue("b"))

    def test_nan_not_equal_to_itself(self):
        nan = ScalarValue(math.nan)
        self.assertNotEqual(nan, ScalarValue(math.nan))
        self.assertFalse(nan.equals(nan))

    def test_uncoercible_compares_unequal(self):
        self.assertFalse(ScalarValue(1.0) == None)  # noqa: E711
        self.assertFalse(ScalarValue("a") == "a b")

    def test_hash_consistent_with_eq(self):
        self.assertEqual(hash(ScalarValue(1.5)), hash(1.5))
        self.assertEqual(hash(ScalarValue("a")), hash("a"))
        self.assertEqual(len({ScalarValue(1.0), ScalarValue(1), ScalarValue("a")}), 2)

    def test_isclose_numeric(self):
        a = ScalarValue(1.0)
        b = ScalarValue(1.0 + 1e-13)
        self.assertTrue(a.isclose(a))
        self.assertTrue(a.isclose(b))
        self.assertTrue(b.isclose(a))
        self.assertFalse(a.isclose(1.1))
        self.assertTrue(a.isclose(1.1, epsilon=0.2))

    def test_isclose_symbolic(self):
        self.assertTrue(ScalarValue("a").isclose("a"))
        self.assertFalse(ScalarValue("a").isclose("a "))
        self.assertFalse(ScalarValue(1.0).isclose("a"))
        self.assertFalse(ScalarValue("a").isclose(1.0))


class TestConversion(unittest.TestCase):
    """Test conversion, formatting and serialization."""

    def test_symbolic_to_float_fails(self):
        with self.assertRaises(SymbolicNotNumericError):
            ScalarValue("a").to_float()
        with self.assertRaises(ValueError):
            float(ScalarValue("a"))
        with self.assertRaises(SymbolicNotNumericError):
            complex(ScalarValue("a"))

    def test_float_and_complex(self):
        self.assertEqual(float(ScalarValue(2.5)), 2.5)
        self.assertEqual(complex(ScalarValue(2)), complex(2, 0))

    def test_text(self):
        self.assertEqual(str(ScalarValue(2.5)), "2.5")
        self.assertEqual(str(ScalarValue(1)), "1.0")
        self.assertEqual(str(ScalarValue("x + 1")), "x + 1")
        self.assertEqual(repr(ScalarValue(2.5)), "ScalarValue(2.5)")
        self.assertEqual(repr(ScalarValue("a")), "ScalarValue('a')")
        self.assertEqual(format(ScalarValue(3.14159), ".2f"), "3.14")
        self.assertEqual(f"{ScalarValue('a')}", "a")

    def test_non_finite_text(self):
        self.assertEqual(str(ScalarValue(math.inf)), "1e999")
        self.assertEqual(str(ScalarValue(-math.inf)), "(-1e999)")

    def test_pair_round_trip(self):
        for value in (ScalarValue(2.5), ScalarValue("x * 2")):
            self.assertEqual(ScalarValue.from_pair(*value.to_pair()), value)
        self.assertEqual(ScalarValue(2.5).to_pair(), (True, 2.5))
        self.assertEqual(ScalarValue("a").to_pair(), (False, "a"))

    def test_from_pair_rejects_non_string_symbolic(self):
        with self.assertRaises(NotConvertibleError):
            ScalarValue.from_pair(False, 1.0)

    def test_pickle_and_copy(self):
        for value in (ScalarValue(-0.5), ScalarValue("sqrt(a)")):
            self.assertEqual(pickle.loads(pickle.dumps(value)), value)
            self.assertEqual(copy.copy(value), value)
            self.assertEqual(copy.deepcopy(value), value)


class TestLongExpressions(unittest.TestCase):
    """Test text built by many operations, beyond the limits for caller input."""

    def setUp(self):
        self.deep = ScalarValue("x")
        for _ in range(MAX_EXPRESSION_DEPTH + 50):
            self.deep = self.deep + 1

        self.names = [f"x{i}" for i in range(1500)]
        self.long = ScalarValue(self.names[0])
        for name in self.names[1:]:
            self.long = self.long + ScalarValue(name)

    def test_deep_text_evaluates(self):
        self.assertEqual(
            Evaluator({"x": 0.0}).parse_and_resolve(self.deep), MAX_EXPRESSION_DEPTH + 50
        )

    def test_arithmetic_on_long_text(self):
        self.assertGreater(len(self.long.value), MAX_INPUT_LENGTH)
        doubled = self.long * 2
        self.assertTrue(doubled.value.endswith(") * 2.0)"))
        env = dict.fromkeys(self.names, 1.0)
        self.assertEqual(Evaluator(env).parse_and_resolve(doubled), 3000.0)

    def test_alternating_operators(self):
        numeric = ScalarValue(0.5)
        symbolic = ScalarValue("x")
        for _ in range(300):
            numeric = (numeric * 3 + 1).sqrt() / 2
            symbolic = (symbolic * 3 + 1).sqrt() / 2
        self.assertEqual(Evaluator({"x": 0.5}).parse_and_resolve(symbolic), numeric.value)

    def test_pickle_and_pair_round_trip(self):
        for value in (self.deep, self.long):
            self.assertEqual(pickle.loads(pickle.dumps(value)), value)
            self.assertEqual(ScalarValue.from_pair(*value.to_pair()), value)
            restored = pickle.loads(pickle.dumps(value))
            self.assertEqual((restored * 2).value, (value * 2).value)

    def test_caller_text_still_limited(self):
        with self.assertRaises(ParseError):
            ScalarValue(self.long.value)
        with self.assertRaises(ParseError):
            ScalarValue(self.deep.value)


if __name__ == "__main__":
    unittest.main()
