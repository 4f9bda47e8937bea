"""
Enumeration Engine for SixNine
Minimal-operation-count search over all expressions built from the atoms.

Level k holds every value first reachable with exactly k operations. A term of
level k is one operator applied to two terms whose levels sum to k - 1, so each
level is built only from strictly smaller, already frozen levels.

Retention rules for a candidate (left op right) at level k of N:
- adjacency violations are never evaluated
- failed arithmetic (division by zero, overflow, invalid exponent) is dropped
- non-integers are kept under a unique marker key only while k < N
- integers with a key longer than max_key_length are dropped
- integers already settled (complete at a smaller or equal level) are dropped
- a complete integer is kept and settled; it replaces an incomplete entry for
  the same value found earlier in the level
- an incomplete integer is kept only while k < N, first discovery wins

Iteration order (compositions with the left level descending, left terms,
right terms, operators) decides which of several equally short expressions
becomes the canonical one.
"""

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Container, Dict, Iterator, List, Optional, Tuple

from component_1_exact_arithmetic import EvaluationKind, Exact, ExactArithmetic, to_display_form
from component_2_term_model import (
    Operator,
    Term,
    can_join,
    combine,
    joins_complete,
    leaf_terms,
    operators_for,
)
from component_3_level_table import LevelStatistics, LevelTable
from component_5_logging_config import (
    PerformanceLogger,
    get_logger,
    log_component_end,
    log_component_start,
)
from component_6_search_config import SearchConfig
from sixnine_exceptions import LevelOrderError

logger = get_logger(__name__)


def compositions(level: int) -> List[Tuple[int, int]]:
    """
    Splits of a level-`level` term into (left level, right level).

    Returns all (i, j) with i + j = level - 1, i running from level - 1 down to 0.
    """
    total = level - 1
    return [(i, total - i) for i in range(total, -1, -1)]


@dataclass(frozen=True)
class Candidate:
    """An evaluated combination that survived the scan filters"""

    key: Optional[str]  # None for non-integer values
    left: Term
    operator: Operator
    right: Term
    value: Exact
    complete: bool

    def build(self) -> Term:
        return combine(self.left, self.operator, self.right, value=self.value)


class CompositionScanner:
    """Evaluates every operand pair of one composition (i, j)"""

    def __init__(
        self,
        arithmetic: ExactArithmetic,
        operators: Tuple[Operator, ...],
        max_key_length: int,
        prune_commutative: bool = True,
    ):
        self.arithmetic = arithmetic
        self.operators = operators
        self.max_key_length = max_key_length
        self.prune_commutative = prune_commutative
        self._non_commutative = tuple(op for op in operators if not op.commutative)

    def operators_for(self, i: int, j: int) -> Tuple[Operator, ...]:
        """
        Operators attempted for composition (i, j).

        When the left level is smaller than the right one, the mirrored
        composition (j, i) already covers + and *.
        """
        if self.prune_commutative and i < j:
            return self._non_commutative
        return self.operators

    def scan(
        self,
        left_table: LevelTable,
        right_table: LevelTable,
        i: int,
        j: int,
        settled: Container[str],
        is_final: bool,
        stats: LevelStatistics,
    ) -> Iterator[Candidate]:
        """
        Yield candidates in canonical order.

        `settled` is consulted lazily, so a live registry that is updated while
        the generator is consumed filters values settled earlier in the same
        level as well.
        """
        operators = self.operators_for(i, j)
        evaluate = self.arithmetic.evaluate

        for left in left_table:
            for right in right_table:
                if not can_join(left, right):
                    stats.candidates += len(operators)
                    stats.adjacency_skips += len(operators)
                    continue

                complete = joins_complete(left, right)

                for operator in operators:
                    stats.candidates += 1

                    # Nothing but complete integers survives the last level
                    if is_final and not complete:
                        stats.final_level_discards += 1
                        continue

                    evaluation = evaluate(operator.symbol, left.value, right.value)
                    kind = evaluation.kind

                    if kind is EvaluationKind.INTEGER:
                        key = evaluation.key
                        if len(key) > self.max_key_length:
                            stats.range_discards += 1
                        elif key in settled:
                            stats.settled_discards += 1
                        else:
                            yield Candidate(
                                key, left, operator, right, evaluation.value, complete
                            )
                    elif kind is EvaluationKind.NON_INTEGER:
                        if is_final:
                            stats.final_level_discards += 1
                        else:
                            yield Candidate(
                                None, left, operator, right, evaluation.value, complete
                            )
                    elif kind is EvaluationKind.DIVISION_BY_ZERO:
                        stats.division_by_zero += 1
                    elif kind is EvaluationKind.OVERFLOW:
                        stats.overflow += 1
                    else:
                        stats.invalid_exponent += 1


class EnumerationEngine:
    """
    Builds level tables 0..N bottom-up.

    The settled registry (integer key -> level at which it became complete)
    belongs to the engine instance; each level construction receives a copy
    and hands back the extended registry.
    """

    def __init__(self, config: Optional[SearchConfig] = None):
        self.config = config or SearchConfig()
        self.arithmetic = ExactArithmetic(
            max_exponent=self.config.max_exponent,
            max_digit_gap=self.config.max_digit_gap,
        )
        self.operators = operators_for(self.config.include_power)
        self.scanner = CompositionScanner(
            self.arithmetic,
            self.operators,
            self.config.max_key_length,
            self.config.prune_commutative,
        )

        self.levels: List[LevelTable] = []
        self.settled: Dict[str, int] = {}
        self.statistics: List[LevelStatistics] = []

        self._initialize()

        logger.info(
            "EnumerationEngine initialized: max_operations=%d, operators=%s, "
            "parallel=%s",
            self.config.max_operations,
            " ".join(op.symbol for op in self.operators),
            self.config.enable_parallel_execution,
        )

    @property
    def max_operations(self) -> int:
        return self.config.max_operations

    @property
    def next_level(self) -> int:
        return len(self.levels)

    @property
    def finished(self) -> bool:
        return self.next_level > self.max_operations

    def _initialize(self):
        """Level 0: one leaf per atom; complete atoms are settled at once"""
        table = LevelTable(0)
        stats = LevelStatistics(level=0)

        for term in leaf_terms():
            key = to_display_form(term.value)
            table.retain(key, term)
            if term.complete:
                self.settled[key] = 0
                stats.complete_retained += 1
            else:
                stats.incomplete_retained += 1

        stats.retained = len(table)
        table.freeze()
        self.levels.append(table)
        self.statistics.append(stats)

    def build_level(self, level: int) -> LevelTable:
        """
        Build and freeze the next level.

        Raises:
            LevelOrderError: if `level` is not the next unbuilt level or lies
                beyond max_operations
        """
        if level != self.next_level or level > self.max_operations:
            raise LevelOrderError(
                "Levels must be built one after another up to max_operations",
                requested_level=level,
                next_level=self.next_level,
                context={"max_operations": self.max_operations},
            )

        with PerformanceLogger(logger.logger, "Build level", level=level) as perf:
            table, settled, stats = self._construct_level(level, dict(self.settled))

        stats.elapsed_ms = perf.duration_ms
        table.freeze()

        self.levels.append(table)
        self.settled = settled
        self.statistics.append(stats)

        logger.info("Level %d built", level, extra=stats.to_dict())
        return table

    def run(self) -> List[LevelTable]:
        """Build every remaining level up to max_operations"""
        log_component_start(
            logger, "EnumerationEngine.run", max_operations=self.max_operations
        )
        while not self.finished:
            self.build_level(self.next_level)
        log_component_end(
            logger,
            "EnumerationEngine.run",
            max_operations=self.max_operations,
            settled=len(self.settled),
        )
        return list(self.levels)

    def _construct_level(
        self, level: int, settled: Dict[str, int]
    ) -> Tuple[LevelTable, Dict[str, int], LevelStatistics]:
        table = LevelTable(level)
        stats = LevelStatistics(level=level)
        is_final = level == self.max_operations
        splits = compositions(level)

        if self.config.enable_parallel_execution and len(splits) > 1:
            self._construct_parallel(level, splits, table, settled, is_final, stats)
        else:
            for i, j in splits:
                logger.debug(
                    "Scanning composition (%d, %d) for level %d", i, j, level
                )
                for candidate in self.scanner.scan(
                    self.levels[i], self.levels[j], i, j, settled, is_final, stats
                ):
                    self._admit(candidate, table, settled, stats)

        stats.retained = len(table)
        return table, settled, stats

    def _construct_parallel(
        self,
        level: int,
        splits: List[Tuple[int, int]],
        table: LevelTable,
        settled: Dict[str, int],
        is_final: bool,
        stats: LevelStatistics,
    ):
        """
        Scan compositions in worker threads, merge in composition order.

        Workers only see the registry as it was at the start of the level; the
        merge re-checks every candidate against the live registry.
        """
        snapshot = frozenset(settled)
        logger.debug(
            "[Parallel Execution] Level %d: %d compositions on %d workers",
            level,
            len(splits),
            self.config.max_workers,
        )

        with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
            futures = [
                executor.submit(self._collect, i, j, snapshot, is_final)
                for i, j in splits
            ]
            for (i, j), future in zip(splits, futures):
                candidates, worker_stats = future.result()
                stats.merge(worker_stats)
                logger.debug(
                    "[Parallel Execution] composition (%d, %d) yielded %d candidates",
                    i,
                    j,
                    len(candidates),
                )
                for candidate in candidates:
                    self._admit(candidate, table, settled, stats)

    def _collect(
        self, i: int, j: int, settled: frozenset, is_final: bool
    ) -> Tuple[List[Candidate], LevelStatistics]:
        worker_stats = LevelStatistics(level=i + j + 1)
        candidates = list(
            self.scanner.scan(
                self.levels[i], self.levels[j], i, j, settled, is_final, worker_stats
            )
        )
        return candidates, worker_stats

    def _admit(
        self,
        candidate: Candidate,
        table: LevelTable,
        settled: Dict[str, int],
        stats: LevelStatistics,
    ):
        """First-discovery decision for one candidate"""
        if candidate.key is None:
            table.retain_non_integer(candidate.build())
            stats.non_integer_retained += 1
            return

        key = candidate.key
        if key in settled:
            stats.settled_discards += 1
        elif candidate.complete:
            table.retain(key, candidate.build(), replace=True)
            settled[key] = table.level
            stats.complete_retained += 1
        elif key in table:
            stats.duplicate_discards += 1
        else:
            table.retain(key, candidate.build())
            stats.incomplete_retained += 1
