"""
Centralized constants for the SixNine expression search.

This module provides a single source of truth for the literal values, guard
thresholds and default settings used throughout the codebase. Centralizing
these values keeps the enumeration engine, the Exact arithmetic and the
configuration layer in agreement.

Organization:
    - Atoms: The fixed signed literals and their iteration order
    - Completeness: Digits a complete expression starts and ends with
    - Arithmetic Guards: Exponentiation limits
    - Range Guards: Maximum length of retained integer keys
    - Search Defaults: Default operation budget and execution settings
    - Cache Configuration: Result cache policy

Usage:
    from common.constants import ATOM_VALUES, MAX_EXPONENT

Note:
    These constants define default values. SearchConfig may override the
    guards per run; the atoms themselves are fixed.
"""

from typing import Tuple

# =============================================================================
# Atoms
# =============================================================================

ATOM_VALUES: Tuple[int, ...] = (69, -69, 6, -6, 9, -9)
"""
The six signed literals an expression may be built from, in iteration order.

The order is load-bearing: when several expressions with the same operation
count evaluate to the same integer, the first one discovered is kept. Positive
literals come before their negations and the two-digit literal comes first,
so that e.g. 0 is represented as (69 - 69) and 3 as (-6 + 9).

Used by:
    - component_2_term_model.py: ATOMS tuple
    - component_3_enumeration_engine.py: level 0 initialization
"""

# =============================================================================
# Completeness
# =============================================================================

COMPLETE_START_DIGIT: int = 6
"""First digit of every complete expression."""

COMPLETE_END_DIGIT: int = 9
"""Last digit of every complete expression."""

# =============================================================================
# Arithmetic Guards
# =============================================================================

MAX_EXPONENT: int = 100
"""
Largest exponent magnitude attempted by Exact.power().

- |exponent| <= 100: computed by repeated multiplication
- |exponent| > 100: rejected with ExactOverflowError without computation

Used by:
    - component_1_exact_arithmetic.py: power()
    - component_6_search_config.py: SearchConfig.max_exponent default
"""

MAX_DIGIT_GAP: int = 20
"""
Largest allowed difference between the decimal lengths of numerator and
denominator while a power is being accumulated.

Rationale:
    Values such as 9 ** 69 have far more digits than any useful search key.
    Checking after every multiplication step stops the growth early.

Used by:
    - component_1_exact_arithmetic.py: power()
"""

DESCRIBE_MAX_DIGITS: int = 64
"""
Longest value (numerator plus denominator digits) written out in full in
arithmetic error context. Longer values are described by their digit counts.

Used by:
    - component_1_exact_arithmetic.py: describe()
"""

# =============================================================================
# Range Guards
# =============================================================================

MAX_KEY_LENGTH: int = 20
"""
Longest decimal key (sign included) an integer may have to be retained.

Longer keys are treated as unbounded growth and discarded, whether or not the
term is complete.

Used by:
    - component_3_enumeration_engine.py: integer retention
"""

NON_INTEGER_KEY_PREFIX: str = "~"
"""
Prefix of the unique keys under which non-integer building blocks are stored.

The full key is "~{level}.{counter}", which can never collide with a signed
decimal string.
"""

# =============================================================================
# Search Defaults
# =============================================================================

DEFAULT_MAX_OPERATIONS: int = 3
"""
Default operation budget N.

Level sizes grow roughly factorially; N=3 finishes in seconds, N=5 takes
minutes and N=6 hours.
"""

DEFAULT_MAX_WORKERS: int = 4
"""Worker threads used when parallel composition scanning is enabled."""

# =============================================================================
# Cache Configuration
# =============================================================================

SEARCH_RESULT_CACHE_NAME: str = "expression_search_results"
"""Name of the cache holding finished SearchResult objects."""

CACHE_MAXSIZE_RESULTS: int = 16
"""Number of (N, configuration) search results kept in memory."""

CACHE_TTL_RESULTS: int = 3600
"""
TTL for cached search results (1 hour).

Rationale:
    Results never go stale (the search is deterministic), the TTL only bounds
    how long large level tables stay in memory.
"""
