"""
infrastructure package

Shared infrastructure components for the SixNine expression search.

Modules:
    - cache_manager: Centralized cache management system
"""

from infrastructure.cache_manager import (
    CacheManager,
    get_cache_manager,
    reset_cache_manager,
)

__all__ = [
    "CacheManager",
    "get_cache_manager",
    "reset_cache_manager",
]
