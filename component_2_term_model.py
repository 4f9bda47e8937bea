"""
Term Model for SixNine
Atoms, the closed operator set and immutable expression tree nodes.

A Term is either a leaf wrapping one Atom or a binary node (left, operator,
right). Its start digit is the start digit of the leftmost leaf, its end digit
the end digit of the rightmost leaf. A term is complete when it starts with a 6
and ends with a 9.

Adjacency rule: a left term may only be joined to a right term if
left.end != right.start, so no literal run of two sixes or two nines is ever
formed across a join. combine() trusts its caller to have checked can_join().
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Tuple

from common.constants import ATOM_VALUES, COMPLETE_END_DIGIT, COMPLETE_START_DIGIT
from component_1_exact_arithmetic import Evaluation, Exact, ExactArithmetic

_default_arithmetic = ExactArithmetic()


class Operator(Enum):
    """Binary operators, in canonical iteration order"""

    ADD = ("+", True)
    SUBTRACT = ("-", False)
    MULTIPLY = ("*", True)
    DIVIDE = ("/", False)
    POWER = ("**", False)

    def __init__(self, symbol: str, commutative: bool):
        self.symbol = symbol
        self.commutative = commutative

    def apply(self, arithmetic: ExactArithmetic, a: Exact, b: Exact) -> Evaluation:
        """Evaluate `a op b`; failures come back as Evaluation variants"""
        return arithmetic.evaluate(self.symbol, a, b)

    def compute(self, arithmetic: ExactArithmetic, a: Exact, b: Exact) -> Exact:
        """Evaluate `a op b`, raising on arithmetic failure"""
        return arithmetic.compute(self.symbol, a, b)

    @classmethod
    def from_symbol(cls, symbol: str) -> "Operator":
        for operator in cls:
            if operator.symbol == symbol:
                return operator
        raise ValueError(f"Unknown operator: {symbol}")


def operators_for(include_power: bool = True) -> Tuple[Operator, ...]:
    """Operators used by a search, in canonical order"""
    if include_power:
        return tuple(Operator)
    return tuple(op for op in Operator if op is not Operator.POWER)


@dataclass(frozen=True)
class Atom:
    """Signed literal with its first and last magnitude digit"""

    value: int
    start: int = field(init=False)
    end: int = field(init=False)

    def __post_init__(self):
        if self.value == 0:
            raise ValueError("Atoms must be non-zero")
        digits = str(abs(self.value))
        object.__setattr__(self, "start", int(digits[0]))
        object.__setattr__(self, "end", int(digits[-1]))

    @property
    def display(self) -> str:
        return str(self.value)


ATOMS: Tuple[Atom, ...] = tuple(Atom(value) for value in ATOM_VALUES)


@dataclass(frozen=True, eq=False)
class Term:
    """
    Immutable expression tree node.

    Leaves have `atom` set and no operator; composite terms have left,
    operator and right set. Sub-terms are shared by reference.
    """

    value: Exact
    start: int
    end: int
    operations: int
    atom: Optional[Atom] = None
    left: Optional["Term"] = None
    operator: Optional[Operator] = None
    right: Optional["Term"] = None

    @classmethod
    def leaf(cls, atom: Atom) -> "Term":
        return cls(
            value=Exact(atom.value),
            start=atom.start,
            end=atom.end,
            operations=0,
            atom=atom,
        )

    @property
    def is_leaf(self) -> bool:
        return self.atom is not None

    @property
    def valid(self) -> bool:
        # Invalid joins are never constructed
        return True

    @property
    def complete(self) -> bool:
        return self.start == COMPLETE_START_DIGIT and self.end == COMPLETE_END_DIGIT

    @property
    def display(self) -> str:
        """Fully parenthesised form, e.g. ((-6 + 9) * (-6 + 9))"""
        if self.atom is not None:
            return self.atom.display
        return f"({self.left.display} {self.operator.symbol} {self.right.display})"

    @property
    def depth(self) -> int:
        if self.atom is not None:
            return 0
        return 1 + max(self.left.depth, self.right.depth)

    def iter_leaves(self) -> Iterator[Atom]:
        """Yield the atoms from left to right"""
        if self.atom is not None:
            yield self.atom
            return
        yield from self.left.iter_leaves()
        yield from self.right.iter_leaves()

    def __repr__(self) -> str:
        return f"Term({self.display} = {self.value})"


def can_join(left: Term, right: Term) -> bool:
    """Adjacency rule: no 66 or 99 run across the join"""
    return left.end != right.start


def joins_complete(left: Term, right: Term) -> bool:
    """Whether combining left and right would give a complete term"""
    return left.start == COMPLETE_START_DIGIT and right.end == COMPLETE_END_DIGIT


def combine(
    left: Term,
    operator: Operator,
    right: Term,
    value: Optional[Exact] = None,
    arithmetic: Optional[ExactArithmetic] = None,
) -> Term:
    """
    Build the node (left operator right).

    The adjacency rule is not re-checked here. If `value` is given it must be
    the already evaluated result; otherwise it is computed now.

    Raises:
        ArithmeticException: if the value has to be computed and fails
    """
    if value is None:
        value = operator.compute(arithmetic or _default_arithmetic, left.value, right.value)
    return Term(
        value=value,
        start=left.start,
        end=right.end,
        operations=left.operations + right.operations + 1,
        left=left,
        operator=operator,
        right=right,
    )


def leaf_terms() -> Tuple[Term, ...]:
    """One leaf term per atom, in canonical order"""
    return tuple(Term.leaf(atom) for atom in ATOMS)
