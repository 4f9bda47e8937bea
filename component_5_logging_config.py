"""
component_5_logging_config.py

Logging for the SixNine expression search.

Every module logs through get_logger(__name__), which returns a
StructuredLogger: keyword data passed as `extra` is attached to the record as
`extra_info` and rendered by SixNineLogFormatter as `| key=value` pairs.
Level builds are timed with PerformanceLogger, which also reports to the
separate "sixnine.performance" logger.

Nothing is configured on import. Applications (the CLI) call setup_logging().

Usage:
    from component_5_logging_config import get_logger

    logger = get_logger(__name__)
    logger.info("Level built", extra={"level": 3, "retained": 5821})
"""

import logging
import logging.handlers
import os
import sys
import time
import traceback
from pathlib import Path
from types import TracebackType
from typing import Any, Dict, Literal, MutableMapping, Optional, Tuple, Type, Union

LOG_DIR: Path = Path(os.environ.get("SIXNINE_LOG_DIR", "logs"))

DEFAULT_LOG_FILE: Path = LOG_DIR / "sixnine.log"
ERROR_LOG_FILE: Path = LOG_DIR / "sixnine_errors.log"
PERFORMANCE_LOG_FILE: Path = LOG_DIR / "sixnine_performance.log"

PERFORMANCE_LOGGER_NAME: str = "sixnine.performance"

CONSOLE_LOG_LEVEL: int = logging.INFO
FILE_LOG_LEVEL: int = logging.DEBUG

MAIN_LOG_MAX_BYTES: int = 10 * 1024 * 1024
SIDE_LOG_MAX_BYTES: int = 5 * 1024 * 1024


class SixNineLogFormatter(logging.Formatter):
    """
    `[time] [LEVEL] [component] message | key=value ...`

    Optionally wraps each line in an ANSI colour for the console.
    """

    LEVEL_COLORS: Dict[str, str] = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET: str = "\033[0m"

    def __init__(self, use_colors: bool = False, include_extra: bool = True) -> None:
        super().__init__(
            fmt="[%(asctime)s] [%(levelname)-8s] [%(name)s] %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
        self.use_colors = use_colors
        self.include_extra = include_extra

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)

        extra_info = getattr(record, "extra_info", None)
        if self.include_extra and extra_info:
            line += " | " + " | ".join(f"{k}={v}" for k, v in extra_info.items())

        if self.use_colors:
            color = self.LEVEL_COLORS.get(record.levelname, self.RESET)
            line = f"{color}{line}{self.RESET}"

        return line


class PerformanceLogger:
    """
    Times a block and logs START/END (or FAILED) around it.

    Usage:
        with PerformanceLogger(logger.logger, "Build level", level=3) as perf:
            ...
        perf.duration_ms
    """

    def __init__(
        self, logger: logging.Logger, operation_name: str, **context: Any
    ) -> None:
        self.logger = logger
        self.operation_name = operation_name
        self.context: Dict[str, Any] = context
        self.duration_ms: float = 0.0
        self._started: Optional[float] = None

    def __enter__(self) -> "PerformanceLogger":
        self._started = time.perf_counter()
        self.logger.debug(
            f"START: {self.operation_name}", extra={"extra_info": self.context}
        )
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> Literal[False]:
        assert self._started is not None, "PerformanceLogger used outside a with block"
        self.duration_ms = (time.perf_counter() - self._started) * 1000
        info = {**self.context, "duration_ms": round(self.duration_ms, 2)}

        if exc_type is not None:
            self.logger.error(
                f"FAILED: {self.operation_name} ({self.duration_ms:.2f}ms)",
                extra={"extra_info": {**info, "error": str(exc_val)}},
            )
            return False

        self.logger.debug(
            f"END: {self.operation_name} ({self.duration_ms:.2f}ms)",
            extra={"extra_info": info},
        )
        logging.getLogger(PERFORMANCE_LOGGER_NAME).info(
            f"{self.operation_name}: {self.duration_ms:.2f}ms",
            extra={"extra_info": info},
        )
        return False


class StructuredLogger(logging.LoggerAdapter[logging.Logger]):
    """LoggerAdapter that files `extra` under `extra_info`"""

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> Tuple[str, MutableMapping[str, Any]]:
        extra = kwargs.get("extra")
        if extra:
            kwargs["extra"] = {"extra_info": extra}
        return msg, kwargs

    def log_exception(self, exc: Exception, message: str = "", **context: Any) -> None:
        """ERROR record with the exception's traceback appended"""
        tb_str = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
        self.error(f"{message}: {type(exc).__name__}: {exc}\n{tb_str}", extra=context)


def parse_log_level(level: Union[int, str]) -> int:
    """Accept logging constants or their names ("debug", "INFO", ...)"""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level}")
    return value


def _rotating_handler(
    path: Path, level: int, max_bytes: int, backup_count: int
) -> logging.Handler:
    handler = logging.handlers.RotatingFileHandler(
        path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    handler.setLevel(level)
    handler.setFormatter(SixNineLogFormatter(use_colors=False))
    return handler


def setup_logging(
    console_level: Union[int, str] = CONSOLE_LOG_LEVEL,
    file_level: Union[int, str] = FILE_LOG_LEVEL,
    log_file: Optional[Path] = None,
    enable_performance_logging: bool = True,
    enable_file_logging: bool = True,
) -> None:
    """
    Install the SixNine handlers on the root logger.

    Replaces any handlers installed earlier, so repeated calls do not
    duplicate output.

    Args:
        console_level: Level for stdout
        file_level: Level for the main log file
        log_file: Main log file (default: logs/sixnine.log)
        enable_performance_logging: Write the separate performance log
        enable_file_logging: Write log files at all
    """
    console_level = parse_log_level(console_level)
    file_level = parse_log_level(file_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(SixNineLogFormatter(use_colors=sys.stdout.isatty()))
    root_logger.addHandler(console_handler)

    main_log = log_file or DEFAULT_LOG_FILE
    perf_logger = logging.getLogger(PERFORMANCE_LOGGER_NAME)
    perf_logger.handlers.clear()
    perf_logger.propagate = True

    if enable_file_logging:
        main_log.parent.mkdir(parents=True, exist_ok=True)
        LOG_DIR.mkdir(parents=True, exist_ok=True)

        root_logger.addHandler(_rotating_handler(main_log, file_level, MAIN_LOG_MAX_BYTES, 5))
        root_logger.addHandler(
            _rotating_handler(ERROR_LOG_FILE, logging.ERROR, SIDE_LOG_MAX_BYTES, 3)
        )

        if enable_performance_logging:
            perf_logger.setLevel(logging.INFO)
            perf_logger.propagate = False
            perf_logger.addHandler(
                _rotating_handler(PERFORMANCE_LOG_FILE, logging.INFO, SIDE_LOG_MAX_BYTES, 3)
            )

    get_logger("sixnine.logging_config").info(
        "Logging initialized",
        extra={
            "console_level": logging.getLevelName(console_level),
            "file_level": logging.getLevelName(file_level),
            "log_file": str(main_log) if enable_file_logging else "disabled",
            "performance_logging": enable_performance_logging and enable_file_logging,
        },
    )


def get_logger(name: str) -> StructuredLogger:
    """StructuredLogger for a component, usually get_logger(__name__)"""
    return StructuredLogger(logging.getLogger(name), {})


def log_component_start(
    logger: StructuredLogger, component_name: str, **context: Any
) -> None:
    logger.info(f"START: {component_name}", extra=context)


def log_component_end(
    logger: StructuredLogger, component_name: str, **context: Any
) -> None:
    logger.info(f"END: {component_name}", extra=context)


def log_component_error(
    logger: StructuredLogger, component_name: str, error: Exception, **context: Any
) -> None:
    logger.log_exception(error, message=f"ERROR in {component_name}", **context)
