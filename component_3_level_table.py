"""
Level Tables for SixNine
Per-operation-count arenas of retained terms and their statistics.

A LevelTable maps canonical keys to exactly one Term. Integer values are keyed
by their signed decimal string, non-integer building blocks by a unique
"~{level}.{counter}" marker. Once frozen, a table is read-only and may be
shared between worker threads.
"""

from dataclasses import asdict, dataclass
from typing import Any, Dict, Iterator, Optional, Tuple

from common.constants import NON_INTEGER_KEY_PREFIX
from component_2_term_model import Term
from sixnine_exceptions import FrozenLevelError


def is_non_integer_key(key: str) -> bool:
    return key.startswith(NON_INTEGER_KEY_PREFIX)


@dataclass
class LevelStatistics:
    """Counters collected while one level is built"""

    level: int
    candidates: int = 0
    adjacency_skips: int = 0
    division_by_zero: int = 0
    overflow: int = 0
    invalid_exponent: int = 0
    range_discards: int = 0
    settled_discards: int = 0
    duplicate_discards: int = 0
    final_level_discards: int = 0
    non_integer_retained: int = 0
    incomplete_retained: int = 0
    complete_retained: int = 0
    retained: int = 0
    elapsed_ms: float = 0.0

    def merge(self, other: "LevelStatistics") -> None:
        """Add the counters of a worker's statistics to this one"""
        for name, value in asdict(other).items():
            if name in ("level", "retained", "elapsed_ms"):
                continue
            setattr(self, name, getattr(self, name) + value)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class LevelTable:
    """Insertion-ordered arena of the terms retained for one level"""

    def __init__(self, level: int):
        self.level = level
        self.frozen = False
        self._entries: Dict[str, Term] = {}
        self._non_integer_count = 0

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[Term]:
        return iter(self._entries.values())

    def get(self, key: str) -> Optional[Term]:
        return self._entries.get(key)

    def items(self) -> Iterator[Tuple[str, Term]]:
        return iter(self._entries.items())

    def terms(self) -> Tuple[Term, ...]:
        """Snapshot of the retained terms, in discovery order"""
        return tuple(self._entries.values())

    def _check_writable(self):
        if self.frozen:
            raise FrozenLevelError(
                "Level table is frozen", context={"level": self.level}
            )

    def retain(self, key: str, term: Term, replace: bool = False) -> None:
        """
        Store `term` under an integer key.

        With replace=True an existing entry is removed first, so the new term
        takes the position of its own discovery.
        """
        self._check_writable()
        if key in self._entries:
            if not replace:
                raise KeyError(f"Key {key} already retained at level {self.level}")
            del self._entries[key]
        self._entries[key] = term

    def retain_non_integer(self, term: Term) -> str:
        """Store a non-integer building block under a fresh unique key"""
        self._check_writable()
        key = f"{NON_INTEGER_KEY_PREFIX}{self.level}.{self._non_integer_count}"
        self._non_integer_count += 1
        self._entries[key] = term
        return key

    def freeze(self) -> None:
        self.frozen = True

    def integer_items(self) -> Iterator[Tuple[str, Term]]:
        for key, term in self._entries.items():
            if not is_non_integer_key(key):
                yield key, term

    def complete_items(self) -> Iterator[Tuple[str, Term]]:
        """Integer entries whose term is complete"""
        for key, term in self.integer_items():
            if term.complete:
                yield key, term

    def __repr__(self) -> str:
        state = "frozen" if self.frozen else "open"
        return f"LevelTable(level={self.level}, entries={len(self)}, {state})"
