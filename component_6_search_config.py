"""
Search Configuration for SixNine
Validated settings for the enumeration engine and the result cache.

Settings can be given directly or loaded from a YAML file:

    search:
      max_operations: 3
      include_power: true
      prune_commutative: true
      max_exponent: 100
      max_digit_gap: 20
      max_key_length: 20
      enable_parallel_execution: false
      max_workers: 4
    cache:
      maxsize: 16
      ttl: 3600
"""

from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Optional, Union

import yaml

from common.constants import (
    CACHE_MAXSIZE_RESULTS,
    CACHE_TTL_RESULTS,
    DEFAULT_MAX_OPERATIONS,
    DEFAULT_MAX_WORKERS,
    MAX_DIGIT_GAP,
    MAX_EXPONENT,
    MAX_KEY_LENGTH,
)
from component_5_logging_config import get_logger
from sixnine_exceptions import ConfigFileError, InvalidConfigError, wrap_exception

logger = get_logger(__name__)


@dataclass(frozen=True)
class SearchConfig:
    """Configuration for EnumerationEngine and ExpressionSearchService"""

    # Operation budget N
    max_operations: int = DEFAULT_MAX_OPERATIONS

    # Operator set
    include_power: bool = True  # Disable for faster, power-free searches
    prune_commutative: bool = True  # Skip + and * when left level < right level

    # Arithmetic guards
    max_exponent: int = MAX_EXPONENT
    max_digit_gap: int = MAX_DIGIT_GAP

    # Range guard for retained integers
    max_key_length: int = MAX_KEY_LENGTH

    # Threaded composition scanning
    enable_parallel_execution: bool = False
    max_workers: int = DEFAULT_MAX_WORKERS

    # Result cache
    cache_maxsize: int = CACHE_MAXSIZE_RESULTS
    cache_ttl: int = CACHE_TTL_RESULTS

    def __post_init__(self):
        """Validate configuration"""
        for f in fields(self):
            value = getattr(self, f.name)
            expected = bool if f.type in (bool, "bool") else int
            # bool is a subclass of int, so int fields must reject it explicitly
            if expected is int and isinstance(value, bool):
                raise InvalidConfigError(
                    f"{f.name} must be an integer", context={f.name: value}
                )
            if not isinstance(value, expected):
                raise InvalidConfigError(
                    f"{f.name} must be of type {expected.__name__}",
                    context={f.name: value},
                )

        if self.max_operations < 0:
            raise InvalidConfigError(
                "max_operations must be >= 0",
                context={"max_operations": self.max_operations},
            )
        for name in ("max_exponent", "max_digit_gap", "max_key_length", "max_workers"):
            if getattr(self, name) < 1:
                raise InvalidConfigError(
                    f"{name} must be >= 1", context={name: getattr(self, name)}
                )
        if self.cache_maxsize < 1 or self.cache_ttl < 1:
            raise InvalidConfigError(
                "cache_maxsize and cache_ttl must be >= 1",
                context={"cache_maxsize": self.cache_maxsize, "cache_ttl": self.cache_ttl},
            )

    def with_overrides(self, **overrides: Any) -> "SearchConfig":
        """Copy with some settings replaced (validated again)"""
        return replace(self, **overrides)

    def cache_key(self) -> str:
        """
        Identify the search semantics of this configuration.

        Settings that do not change the result (parallelism, cache policy)
        are left out.
        """
        return (
            f"n={self.max_operations}|power={int(self.include_power)}"
            f"|prune={int(self.prune_commutative)}|exp={self.max_exponent}"
            f"|gap={self.max_digit_gap}|key={self.max_key_length}"
        )

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SearchConfig":
        """
        Build a config from the parsed YAML structure.

        Unknown keys are ignored with a warning.
        """
        known = {f.name for f in fields(cls)}
        values: Dict[str, Any] = {}

        search_section = data.get("search") or {}
        cache_section = data.get("cache") or {}
        if not isinstance(search_section, dict) or not isinstance(cache_section, dict):
            raise InvalidConfigError("'search' and 'cache' sections must be mappings")

        for key, value in search_section.items():
            if key in known and not key.startswith("cache_"):
                values[key] = value
            else:
                logger.warning(f"Unknown search setting in config: {key}")

        for key, value in cache_section.items():
            name = f"cache_{key}"
            if name in known:
                values[name] = value
            else:
                logger.warning(f"Unknown cache setting in config: {key}")

        return cls(**values)


def load_search_config(config_path: Union[str, Path, None]) -> SearchConfig:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to YAML config file; None returns the defaults

    Returns:
        SearchConfig (defaults if the file does not exist)

    Raises:
        ConfigFileError: if the file cannot be read or parsed
        InvalidConfigError: if a value is rejected by validation
    """
    if config_path is None:
        return SearchConfig()

    config_file = Path(config_path)
    if not config_file.exists():
        logger.warning(f"Config file not found: {config_path}, using defaults")
        return SearchConfig()

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            data: Optional[Dict[str, Any]] = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigFileError(
            "YAML error in config file",
            config_path=str(config_file),
            original_exception=e,
        ) from e
    except OSError as e:
        raise wrap_exception(
            e, ConfigFileError, "Config file could not be read", config_path=str(config_file)
        ) from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigFileError(
            "Config file must contain a mapping", config_path=str(config_file)
        )

    config = SearchConfig.from_dict(data)
    logger.info(
        f"[OK] Configuration loaded from {config_path}",
        extra={"cache_key": config.cache_key()},
    )
    return config
