# tests/test_exact_arithmetic.py
"""
Tests for the exact arithmetic layer (component_1).

Tests:
- Reduced fractions for + - * /
- Exactness of multiply/divide round trips
- Bounded exponentiation (exponent limit, digit gap, negative exponents)
- Non-integer exponents and root markers
- Display form of integers and non-integers
- Tagged evaluation results
"""

from fractions import Fraction

import pytest

from component_1_exact_arithmetic import (
    Evaluation,
    EvaluationKind,
    Exact,
    ExactArithmetic,
    add,
    describe,
    digit_length,
    divide,
    evaluate,
    multiply,
    power,
    subtract,
    to_display_form,
)
from sixnine_exceptions import (
    ExactDivisionByZeroError,
    ExactOverflowError,
    InvalidExponentError,
)


class TestExactValue:
    """Tests for the Exact value type"""

    def test_int_is_coerced_to_fraction(self):
        value = Exact(7)
        assert isinstance(value.value, Fraction)
        assert value.numerator == 7
        assert value.denominator == 1
        assert value.is_integer

    def test_fraction_is_reduced(self):
        value = Exact(Fraction(6, -9))
        assert value.numerator == -2
        assert value.denominator == 3
        assert not value.is_integer

    def test_root_marker_makes_value_non_integer(self):
        assert not Exact(4, root=2).is_integer

    def test_str(self):
        assert str(Exact(Fraction(1, 2))) == "1/2"
        assert str(Exact(4, root=2)) == "4 [root 2]"

    def test_digit_length(self):
        assert digit_length(0) == 1
        assert digit_length(-123) == 3
        assert digit_length(10077696) == 8

    def test_digit_length_at_powers_of_ten(self):
        for exponent in (1, 15, 16, 17, 300):
            assert digit_length(10 ** exponent) == exponent + 1
            assert digit_length(10 ** exponent - 1) == exponent

    def test_digit_length_above_str_limit(self):
        assert digit_length(10 ** 5000) == 5001
        assert digit_length(-(10 ** 5000 - 1)) == 5000

    def test_describe(self):
        assert describe(Exact(Fraction(2, 3))) == "2/3"
        assert describe(Exact(Fraction(10 ** 5000, 3))) == "<5001/1 digit fraction>"


class TestBasicOperations:
    """Tests for add, subtract, multiply and divide"""

    def test_add_reduces(self):
        assert add(Fraction(1, 2), Fraction(1, 3)).value == Fraction(5, 6)
        assert add(Fraction(1, 2), Fraction(1, 2)).value == 1

    def test_subtract(self):
        assert subtract(69, 69).value == 0
        assert subtract(-6, 9).value == -15

    def test_multiply(self):
        assert multiply(Fraction(2, 3), Fraction(3, 4)).value == Fraction(1, 2)

    def test_multiply_by_zero_is_clean(self):
        result = multiply(Exact(4, root=2), 0)
        assert result.value == 0
        assert result.root == 1
        assert to_display_form(result) == "0"

    def test_divide(self):
        assert divide(69, 69).value == 1
        assert divide(6, 9).value == Fraction(2, 3)
        assert divide(6, -9).denominator == 3

    def test_divide_by_zero_raises(self):
        with pytest.raises(ExactDivisionByZeroError):
            divide(6, 0)

    @pytest.mark.parametrize(
        "a, b",
        [
            (Fraction(2, 3), Fraction(-9, 4)),
            (69, 6),
            (Fraction(-1, 69), 9),
            (10077696, Fraction(1, 6)),
        ],
    )
    def test_multiply_then_divide_is_exact(self, a, b):
        original = Exact(a)
        assert divide(multiply(a, b), b) == original

    def test_roots_propagate(self):
        rooted = Exact(4, root=2)
        assert add(rooted, 1).root == 2
        assert subtract(1, rooted).root == 2
        assert divide(rooted, Exact(3, root=3)).root == 6


class TestPower:
    """Tests for bounded exponentiation"""

    def test_nine_to_the_six(self):
        assert power(9, 6).value == 531441

    def test_six_to_the_nine(self):
        assert to_display_form(power(6, 9)) == "10077696"

    def test_zero_exponent_is_one(self):
        assert power(69, 0).value == 1

    def test_negative_exponent(self):
        assert power(6, -2).value == Fraction(1, 36)
        assert power(Fraction(1, 2), -2).value == 4

    def test_negative_base(self):
        assert power(-6, 3).value == -216

    def test_sixty_nine_to_the_sixty_nine_overflows(self):
        with pytest.raises(ExactOverflowError) as exc_info:
            power(69, 69)
        assert exc_info.value.context["exponent"] == 69
        assert exc_info.value.context["digit_gap"] > 20

    def test_exponent_above_limit_overflows(self):
        with pytest.raises(ExactOverflowError):
            power(1, 101)

    def test_exponent_at_limit_is_allowed(self):
        assert power(1, 100).value == 1
        assert power(-1, -100).value == 1

    def test_custom_limits(self):
        arithmetic = ExactArithmetic(max_exponent=5, max_digit_gap=2)
        with pytest.raises(ExactOverflowError):
            arithmetic.power(Exact(2), Exact(6))
        with pytest.raises(ExactOverflowError):
            arithmetic.power(Exact(10), Exact(3))
        assert arithmetic.power(Exact(10), Exact(2)).value == 100

    def test_zero_to_negative_exponent(self):
        with pytest.raises(ExactDivisionByZeroError):
            power(0, -1)

    def test_fractional_exponent_carries_root(self):
        result = power(4, Fraction(1, 2))
        assert result.value == 4
        assert result.root == 2
        assert to_display_form(result) is None

    def test_rooted_exponent_is_invalid(self):
        with pytest.raises(InvalidExponentError):
            power(2, Exact(4, root=2))

    def test_long_fraction_power_overflows_by_digit_gap(self):
        # (70/69) ** 69 keeps numerator and denominator about the same length,
        # raising it again passes thousands of digits before the gap opens
        base = power(Fraction(70, 69), 69)
        assert abs(digit_length(base.numerator) - digit_length(base.denominator)) <= 1
        with pytest.raises(ExactOverflowError):
            power(base, 69)

    def test_zero_divisor_error_context_stays_short(self):
        huge = Exact(Fraction(7 ** 6000, 6 ** 6000))
        with pytest.raises(ExactDivisionByZeroError) as exc_info:
            divide(huge, 0)
        assert "digit fraction" in exc_info.value.context["dividend"]


class TestDisplayForm:
    """Tests for to_display_form"""

    def test_integers(self):
        assert to_display_form(Exact(0)) == "0"
        assert to_display_form(Exact(-5)) == "-5"
        assert to_display_form(Exact(Fraction(138, 1))) == "138"

    def test_non_integer(self):
        assert to_display_form(Exact(Fraction(2, 3))) is None


class TestEvaluate:
    """Tests for tagged evaluation results"""

    @pytest.fixture
    def arithmetic(self):
        return ExactArithmetic()

    def test_integer_result(self, arithmetic):
        evaluation = arithmetic.evaluate("+", Exact(-6), Exact(9))
        assert evaluation.kind is EvaluationKind.INTEGER
        assert evaluation.key == "3"
        assert evaluation.succeeded

    def test_non_integer_result(self, arithmetic):
        evaluation = arithmetic.evaluate("/", Exact(6), Exact(9))
        assert evaluation.kind is EvaluationKind.NON_INTEGER
        assert evaluation.key is None
        assert evaluation.value.value == Fraction(2, 3)

    def test_division_by_zero_variant(self, arithmetic):
        evaluation = arithmetic.evaluate("/", Exact(6), Exact(0))
        assert evaluation.kind is EvaluationKind.DIVISION_BY_ZERO
        assert evaluation.value is None
        assert not evaluation.succeeded

    def test_overflow_variant(self, arithmetic):
        evaluation = arithmetic.evaluate("**", Exact(69), Exact(69))
        assert evaluation.kind is EvaluationKind.OVERFLOW
        assert evaluation.error

    def test_invalid_exponent_variant(self, arithmetic):
        evaluation = arithmetic.evaluate("**", Exact(6), Exact(4, root=2))
        assert evaluation.kind is EvaluationKind.INVALID_EXPONENT

    def test_unknown_operator(self, arithmetic):
        with pytest.raises(ValueError):
            arithmetic.evaluate("%", Exact(6), Exact(9))

    def test_from_value(self):
        assert Evaluation.from_value(Exact(-138)).key == "-138"
        assert Evaluation.from_value(Exact(4, root=2)).kind is EvaluationKind.NON_INTEGER

    def test_module_level_evaluate(self):
        assert evaluate("-", 69, 69).key == "0"
        assert evaluate("**", 0, -1).kind is EvaluationKind.DIVISION_BY_ZERO

    def test_long_fraction_power_is_overflow_variant(self, arithmetic):
        base = power(Fraction(70, 69), 69)
        evaluation = arithmetic.evaluate("**", base, Exact(69))
        assert evaluation.kind is EvaluationKind.OVERFLOW
        assert evaluation.value is None
