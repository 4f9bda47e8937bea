"""
Common constants for the SixNine expression search.

This package provides the fixed literal values, guard thresholds and default
settings shared by the arithmetic, enumeration and configuration components.
"""

from common.constants import *

__all__ = [
    # Atoms
    "ATOM_VALUES",
    # Completeness
    "COMPLETE_START_DIGIT",
    "COMPLETE_END_DIGIT",
    # Arithmetic Guards
    "MAX_EXPONENT",
    "MAX_DIGIT_GAP",
    "DESCRIBE_MAX_DIGITS",
    # Range Guards
    "MAX_KEY_LENGTH",
    "NON_INTEGER_KEY_PREFIX",
    # Search Defaults
    "DEFAULT_MAX_OPERATIONS",
    "DEFAULT_MAX_WORKERS",
    # Cache Configuration
    "SEARCH_RESULT_CACHE_NAME",
    "CACHE_MAXSIZE_RESULTS",
    "CACHE_TTL_RESULTS",
]
