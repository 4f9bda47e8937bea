"""
Expression Search Service for SixNine
Public facade: run a search, cache finished results, look up single values.

Usage:
    from component_7_expression_search import get_expressions

    levels = get_expressions(1)
    levels[1]["0"]   # "(69 - 69)"
"""

import time
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple, Union

from common.constants import SEARCH_RESULT_CACHE_NAME
from component_3_enumeration_engine import EnumerationEngine
from component_3_level_table import LevelStatistics
from component_4_result_projector import ResultProjector
from component_5_logging_config import get_logger, log_component_error
from component_6_search_config import SearchConfig
from infrastructure.cache_manager import CachePolicy, get_cache_manager

logger = get_logger(__name__)


@dataclass
class SearchResult:
    """Outcome of one finished search"""

    max_operations: int
    config: SearchConfig
    levels: List[Dict[str, str]]
    settled: List[Tuple[str, int]] = field(default_factory=list)
    statistics: List[LevelStatistics] = field(default_factory=list)
    elapsed_ms: float = 0.0

    def expressions_at(self, level: int) -> Dict[str, str]:
        return dict(self.levels[level])

    def lookup(self, value: Union[int, str]) -> Optional[Tuple[int, str]]:
        """(level, display) of the shortest complete expression for `value`"""
        key = str(value)
        for level, mapping in enumerate(self.levels):
            if key in mapping:
                return level, mapping[key]
        return None

    @property
    def total_found(self) -> int:
        return sum(len(mapping) for mapping in self.levels)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "max_operations": self.max_operations,
            "levels": [dict(mapping) for mapping in self.levels],
        }

    def copy(self) -> "SearchResult":
        """Copy whose level mappings and statistics can be changed freely"""
        return replace(
            self,
            levels=[dict(mapping) for mapping in self.levels],
            settled=list(self.settled),
            statistics=[replace(stats) for stats in self.statistics],
        )


class ExpressionSearchService:
    """
    Runs searches and keeps finished results in a named TTL cache.

    Results are cached per (operation budget, search semantics); settings that
    only affect how a search runs (parallelism) share cache entries.
    """

    def __init__(self, config: Optional[SearchConfig] = None):
        self.config = config or SearchConfig()
        self.cache_manager = get_cache_manager()

        self._ensure_result_cache()

    def _ensure_result_cache(self) -> None:
        """
        Register the shared result cache with this config's policy.

        A different cache_maxsize or cache_ttl replaces the cache, which drops
        results cached under the previous policy.
        """
        policy = CachePolicy(maxsize=self.config.cache_maxsize, ttl=self.config.cache_ttl)
        registered = self.cache_manager.is_registered(SEARCH_RESULT_CACHE_NAME)
        if registered and self.cache_manager.get_policy(SEARCH_RESULT_CACHE_NAME) == policy:
            return

        if registered:
            logger.info(
                "Search result cache policy changed, replacing cache",
                extra={"maxsize": policy.maxsize, "ttl": policy.ttl},
            )
        self.cache_manager.register_cache(
            SEARCH_RESULT_CACHE_NAME,
            maxsize=policy.maxsize,
            ttl=policy.ttl,
            overwrite=registered,
        )

    def search(self, max_operations: Optional[int] = None) -> SearchResult:
        """
        Run (or fetch from cache) the search up to `max_operations`.

        Every call returns its own copy, so callers cannot alter cached results.

        Args:
            max_operations: Operation budget N; defaults to the configured one

        Raises:
            InvalidConfigError: for a negative or non-integer budget
        """
        config = self.config
        if max_operations is not None:
            config = config.with_overrides(max_operations=max_operations)

        cache_key = config.cache_key()
        cached = self.cache_manager.get(SEARCH_RESULT_CACHE_NAME, cache_key)
        if cached is not None:
            logger.info(
                "Search result served from cache",
                extra={"max_operations": config.max_operations},
            )
            return cached.copy()

        start = time.perf_counter()
        try:
            engine = EnumerationEngine(config)
            tables = engine.run()
        except Exception as e:
            log_component_error(
                logger, "ExpressionSearchService.search", e,
                max_operations=config.max_operations,
            )
            raise

        projector = ResultProjector(tables)
        result = SearchResult(
            max_operations=config.max_operations,
            config=config,
            levels=projector.project(),
            settled=projector.settled_index(),
            statistics=list(engine.statistics),
            elapsed_ms=(time.perf_counter() - start) * 1000,
        )

        self.cache_manager.set(SEARCH_RESULT_CACHE_NAME, cache_key, result)
        logger.info(
            "Search finished",
            extra={
                "max_operations": result.max_operations,
                "found": result.total_found,
                "elapsed_ms": round(result.elapsed_ms, 2),
            },
        )
        return result.copy()

    def lookup(
        self, value: Union[int, str], max_operations: Optional[int] = None
    ) -> Optional[Tuple[int, str]]:
        """Shortest complete expression for `value` within the budget, if any"""
        return self.search(max_operations).lookup(value)

    def clear_cache(self) -> int:
        """Drop all cached search results; returns the number of entries removed"""
        return self.cache_manager.invalidate(SEARCH_RESULT_CACHE_NAME)


def get_expressions(
    max_operations: int, config: Optional[SearchConfig] = None
) -> List[Dict[str, str]]:
    """
    Shortest complete expressions for every integer reachable within
    `max_operations` operations.

    Returns:
        max_operations + 1 mappings; mapping k holds {integer string: display}
        for the values first expressible with exactly k operations
    """
    result = ExpressionSearchService(config).search(max_operations)
    return [dict(mapping) for mapping in result.levels]
