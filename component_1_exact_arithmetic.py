"""
Exact Arithmetic for SixNine
Reduced rational value type and tagged evaluation results.

All arithmetic is performed on fractions.Fraction, so every value is stored in
lowest terms with a positive denominator and no floating point rounding ever
takes place. Values that come out of a non-integer exponent carry a `root`
marker != 1 and are reported as non-representable.
"""

import math
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
from typing import Callable, Dict, Optional, Union

from common.constants import DESCRIBE_MAX_DIGITS, MAX_DIGIT_GAP, MAX_EXPONENT
from sixnine_exceptions import (
    ArithmeticException,
    ExactDivisionByZeroError,
    ExactOverflowError,
    InvalidExponentError,
)


_LOG10_2 = math.log10(2)


def digit_length(n: int) -> int:
    """
    Number of decimal digits of |n| (0 has one digit).

    Counted from the bit length, so it also works for integers above the
    interpreter's int-to-str digit limit.
    """
    n = abs(n)
    if n == 0:
        return 1
    digits = int((n.bit_length() - 1) * _LOG10_2) + 1
    if n >= 10 ** digits:
        return digits + 1
    if n < 10 ** (digits - 1):
        return digits - 1
    return digits


def describe(a: "Exact") -> str:
    """Short text for error context; very long values are given by size only"""
    size = digit_length(a.numerator) + digit_length(a.denominator)
    if size > DESCRIBE_MAX_DIGITS:
        return f"<{digit_length(a.numerator)}/{digit_length(a.denominator)} digit fraction>"
    return str(a)


@dataclass(frozen=True)
class Exact:
    """
    Immutable signed rational number.

    Attributes:
        value: The fraction (always reduced, denominator > 0)
        root: 1 for clean values, the exponent denominator for values that
              stem from a non-integer exponent
    """

    value: Fraction
    root: int = 1

    def __post_init__(self):
        if not isinstance(self.value, Fraction):
            object.__setattr__(self, "value", Fraction(self.value))

    @property
    def numerator(self) -> int:
        return self.value.numerator

    @property
    def denominator(self) -> int:
        return self.value.denominator

    @property
    def is_integer(self) -> bool:
        """True if the value is a clean integer (denominator 1, root 1)"""
        return self.value.denominator == 1 and self.root == 1

    def __str__(self) -> str:
        text = str(self.value)
        return text if self.root == 1 else f"{text} [root {self.root}]"


ExactLike = Union[Exact, int, Fraction]


def as_exact(value: ExactLike) -> Exact:
    """Wrap ints and Fractions, pass Exact through"""
    return value if isinstance(value, Exact) else Exact(value)


class EvaluationKind(Enum):
    """Variants of an evaluation result"""

    INTEGER = "integer"
    NON_INTEGER = "non_integer"
    DIVISION_BY_ZERO = "division_by_zero"
    OVERFLOW = "overflow"
    INVALID_EXPONENT = "invalid_exponent"


@dataclass(frozen=True)
class Evaluation:
    """
    Tagged result of applying one operator to two Exact values.

    `value` is set for INTEGER and NON_INTEGER, `key` (the signed decimal
    string) only for INTEGER, `error` only for the failure variants.
    """

    kind: EvaluationKind
    value: Optional[Exact] = None
    key: Optional[str] = None
    error: Optional[str] = None

    @property
    def succeeded(self) -> bool:
        return self.kind in (EvaluationKind.INTEGER, EvaluationKind.NON_INTEGER)

    @classmethod
    def from_value(cls, value: Exact) -> "Evaluation":
        key = to_display_form(value)
        if key is None:
            return cls(EvaluationKind.NON_INTEGER, value=value)
        return cls(EvaluationKind.INTEGER, value=value, key=key)


_ERROR_KINDS = {
    ExactDivisionByZeroError: EvaluationKind.DIVISION_BY_ZERO,
    ExactOverflowError: EvaluationKind.OVERFLOW,
    InvalidExponentError: EvaluationKind.INVALID_EXPONENT,
}


def to_display_form(a: Exact) -> Optional[str]:
    """
    Render an Exact as a signed base-10 string.

    Returns:
        None (non-integer marker) if the denominator != 1 or root != 1,
        otherwise the decimal string ("0" for zero, "-" prefix when negative)
    """
    if not a.is_integer:
        return None
    return str(a.numerator)


class ExactArithmetic:
    """Exact fraction arithmetic with bounded exponentiation"""

    def __init__(self, max_exponent: int = MAX_EXPONENT, max_digit_gap: int = MAX_DIGIT_GAP):
        self.max_exponent = max_exponent
        self.max_digit_gap = max_digit_gap

        self._operations: Dict[str, Callable[[Exact, Exact], Exact]] = {
            "+": self.add,
            "-": self.subtract,
            "*": self.multiply,
            "/": self.divide,
            "**": self.power,
        }

    def add(self, a: Exact, b: Exact) -> Exact:
        """Add two values"""
        return Exact(a.value + b.value, math.lcm(a.root, b.root))

    def subtract(self, a: Exact, b: Exact) -> Exact:
        """Subtract b from a"""
        return Exact(a.value - b.value, math.lcm(a.root, b.root))

    def multiply(self, a: Exact, b: Exact) -> Exact:
        """Multiply two values; a zero factor yields a clean zero"""
        if a.value == 0 or b.value == 0:
            return Exact(0)
        return Exact(a.value * b.value, math.lcm(a.root, b.root))

    def divide(self, a: Exact, b: Exact) -> Exact:
        """
        Divide a by b.

        Raises:
            ExactDivisionByZeroError: if b is zero
        """
        if b.value == 0:
            raise ExactDivisionByZeroError(
                "Division by zero", operation="/", context={"dividend": describe(a)}
            )
        return Exact(a.value / b.value, math.lcm(a.root, b.root))

    def power(self, a: Exact, b: Exact) -> Exact:
        """
        Raise a to the power b by repeated multiplication.

        Only the numerator of the exponent is used as repetition count; a
        non-integer exponent p/q yields a^p tagged with root q.

        Raises:
            InvalidExponentError: if the exponent carries a root marker
            ExactOverflowError: if |exponent| exceeds max_exponent or the
                numerator and denominator lengths drift apart by more than
                max_digit_gap digits
            ExactDivisionByZeroError: for zero raised to a negative exponent
        """
        if b.root != 1:
            raise InvalidExponentError(
                "Exponent is not representable",
                operation="**",
                context={"exponent": describe(b)},
            )

        exponent = b.numerator
        if abs(exponent) > self.max_exponent:
            raise ExactOverflowError(
                "Exponent magnitude above limit",
                exponent=exponent,
                operation="**",
            )

        base = a.value
        if exponent < 0:
            if base == 0:
                raise ExactDivisionByZeroError(
                    "Zero raised to a negative exponent", operation="**"
                )
            base = 1 / base

        result = Fraction(1)
        for _ in range(abs(exponent)):
            result *= base
            gap = abs(digit_length(result.numerator) - digit_length(result.denominator))
            if gap > self.max_digit_gap:
                raise ExactOverflowError(
                    "Power grows beyond digit gap limit",
                    exponent=exponent,
                    digit_gap=gap,
                    operation="**",
                )

        return Exact(result, math.lcm(a.root, b.denominator))

    def compute(self, symbol: str, a: Exact, b: Exact) -> Exact:
        """
        Apply the operator `symbol` to a and b.

        Raises:
            ValueError: for an unknown operator symbol
            ArithmeticException: if the arithmetic itself fails
        """
        operation = self._operations.get(symbol)
        if operation is None:
            raise ValueError(f"Unknown operator: {symbol}")
        return operation(a, b)

    def evaluate(self, symbol: str, a: Exact, b: Exact) -> Evaluation:
        """
        Apply the operator `symbol` and classify the outcome.

        Arithmetic failures are returned as variants, never raised.

        Raises:
            ValueError: for an unknown operator symbol
        """
        try:
            value = self.compute(symbol, a, b)
        except ArithmeticException as e:
            return Evaluation(_ERROR_KINDS[type(e)], error=e.message)

        return Evaluation.from_value(value)


_default_arithmetic = ExactArithmetic()


def add(a: ExactLike, b: ExactLike) -> Exact:
    return _default_arithmetic.add(as_exact(a), as_exact(b))


def subtract(a: ExactLike, b: ExactLike) -> Exact:
    return _default_arithmetic.subtract(as_exact(a), as_exact(b))


def multiply(a: ExactLike, b: ExactLike) -> Exact:
    return _default_arithmetic.multiply(as_exact(a), as_exact(b))


def divide(a: ExactLike, b: ExactLike) -> Exact:
    return _default_arithmetic.divide(as_exact(a), as_exact(b))


def power(a: ExactLike, b: ExactLike) -> Exact:
    return _default_arithmetic.power(as_exact(a), as_exact(b))


def evaluate(symbol: str, a: ExactLike, b: ExactLike) -> Evaluation:
    return _default_arithmetic.evaluate(symbol, as_exact(a), as_exact(b))
