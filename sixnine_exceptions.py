"""
sixnine_exceptions.py

Central exception hierarchy for the SixNine expression search.
Defines specialised exception classes for the different failure scenarios.

Exception hierarchy:
    SixNineException (base)
    ├── ArithmeticException
    │   ├── ExactDivisionByZeroError
    │   ├── ExactOverflowError
    │   └── InvalidExponentError
    ├── SearchException
    │   ├── LevelOrderError
    │   └── FrozenLevelError
    └── ConfigurationException
        ├── InvalidConfigError
        └── ConfigFileError

Arithmetic exceptions are raised by the Exact value type and converted into
tagged Evaluation results by component_1_exact_arithmetic.evaluate(). They never
abort an enumeration run.

Usage:
    from sixnine_exceptions import InvalidConfigError, SixNineException

    try:
        config = load_search_config("config/search.yml")
    except InvalidConfigError as e:
        logger.error(f"Invalid configuration: {e}")
        logger.error(f"Context: {e.context}")
"""

from typing import Any, Dict, Optional


class SixNineException(Exception):
    """
    Base exception for all SixNine-specific errors.

    All SixNine exceptions support:
    - Detailed error messages
    - Contextual information (dict)
    - Original exception chaining (via 'from')
    """

    def __init__(
        self,
        message: str,
        context: Optional[Dict[str, Any]] = None,
        original_exception: Optional[Exception] = None,
    ):
        super().__init__(message)
        self.message = message
        self.context = context or {}
        self.original_exception = original_exception

    def __str__(self) -> str:
        base_msg = self.message

        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            base_msg += f" | Context: {context_str}"

        if self.original_exception:
            base_msg += f" | Caused by: {type(self.original_exception).__name__}: {str(self.original_exception)}"

        return base_msg

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(message={self.message!r}, context={self.context!r})"


# ============================================================================
# ARITHMETIC EXCEPTIONS
# ============================================================================


class ArithmeticException(SixNineException):
    """Base exception for failed Exact arithmetic."""

    def __init__(self, message: str, operation: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if operation is not None:
            context["operation"] = operation
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class ExactDivisionByZeroError(ArithmeticException):
    """
    The divisor evaluates to exactly zero.

    Causes:
    - Division by a term whose value is 0
    - Zero raised to a negative exponent
    """


class ExactOverflowError(ArithmeticException):
    """
    Exponentiation grows beyond the configured bounds.

    Causes:
    - Exponent magnitude above the exponent limit (default 100)
    - Numerator/denominator digit lengths drifting apart by more than the
      digit gap limit (default 20) during repeated multiplication
    """

    def __init__(
        self,
        message: str,
        exponent: Optional[int] = None,
        digit_gap: Optional[int] = None,
        **kwargs,
    ):
        context = kwargs.get("context", {})
        if exponent is not None:
            context["exponent"] = exponent
        if digit_gap is not None:
            context["digit_gap"] = digit_gap
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class InvalidExponentError(ArithmeticException):
    """
    The exponent is itself non-representable (carries a fractional root).
    """


# ============================================================================
# SEARCH EXCEPTIONS
# ============================================================================


class SearchException(SixNineException):
    """Base exception for enumeration engine misuse."""


class LevelOrderError(SearchException):
    """
    A level was requested out of order.

    Causes:
    - build_level(k) called before level k-1 was frozen
    - build_level(k) called for a level that already exists
    - k above the configured maximum operation count
    """

    def __init__(
        self,
        message: str,
        requested_level: Optional[int] = None,
        next_level: Optional[int] = None,
        **kwargs,
    ):
        context = kwargs.get("context", {})
        context["requested_level"] = requested_level
        context["next_level"] = next_level
        kwargs["context"] = context
        super().__init__(message, **kwargs)


class FrozenLevelError(SearchException):
    """A frozen level table was asked to retain another term."""


# ============================================================================
# CONFIGURATION EXCEPTIONS
# ============================================================================


class ConfigurationException(SixNineException):
    """Base exception for configuration errors."""


class InvalidConfigError(ConfigurationException):
    """
    Invalid configuration.

    Causes:
    - Negative operation budget
    - Non-positive guard limits or worker counts
    - Wrong value types in a config file
    """


class ConfigFileError(ConfigurationException):
    """
    A configuration file could not be read or parsed.

    Causes:
    - YAML syntax error
    - Top-level document is not a mapping
    - I/O error while reading
    """

    def __init__(self, message: str, config_path: Optional[str] = None, **kwargs):
        context = kwargs.get("context", {})
        if config_path is not None:
            context["config_path"] = config_path
        kwargs["context"] = context
        super().__init__(message, **kwargs)


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================


def wrap_exception(
    exc: Exception,
    sixnine_exception_class: type[SixNineException],
    message: str,
    **context,
) -> SixNineException:
    """
    Convert a generic exception into a SixNine-specific exception.

    Args:
        exc: Original exception
        sixnine_exception_class: Target exception class (e.g. ConfigFileError)
        message: Custom error message
        **context: Additional context information

    Returns:
        SixNine exception chained to the original exception

    Example:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise wrap_exception(e, InvalidConfigError, "Bad YAML", path=str(path))
    """
    return sixnine_exception_class(
        message=message, context=context, original_exception=exc
    )


def get_user_friendly_message(exc: Exception, include_details: bool = False) -> str:
    """
    Build a user-facing error message from an exception.

    Args:
        exc: Exception object
        include_details: Append technical details (debug mode)

    Returns:
        Short message suitable for the command line
    """
    friendly_messages = {
        ExactDivisionByZeroError: "[ERROR] Division by zero.",
        ExactOverflowError: "[ERROR] Exponentiation exceeded the growth limits.",
        InvalidExponentError: "[ERROR] The exponent is not a whole number.",
        LevelOrderError: "[ERROR] Levels must be built in order, starting at 1.",
        FrozenLevelError: "[ERROR] A finished level cannot be modified.",
        InvalidConfigError: "[ERROR] Invalid configuration. Please check the settings.",
        ConfigFileError: "[ERROR] The configuration file could not be read.",
    }

    default_message = "[ERROR] An unexpected error occurred."

    user_message = friendly_messages.get(type(exc), default_message)

    if isinstance(exc, ConfigFileError) and exc.context.get("config_path"):
        user_message = (
            f"[ERROR] The configuration file '{exc.context['config_path']}' "
            f"could not be read."
        )

    if include_details and isinstance(exc, SixNineException):
        user_message += f"\n\nDetails: {exc.message}"
        if exc.context:
            user_message += f"\n   Context: {exc.context}"

    return user_message
