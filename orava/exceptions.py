from typing import Any, Optional

__all__ = (
    "ExecutionError",
    "ImproperConfigurationError",
    "LexError",
    "MissingDependencyError",
    "MultipleResultsFoundError",
    "NotFoundError",
    "OravaError",
    "ParameterError",
    "RepositoryError",
    "SQLParsingError",
    "UnknownParameterError",
)


class OravaError(Exception):
    """Root of every error raised by orava.

    The first truthy positional argument becomes ``detail`` unless ``detail`` is
    passed explicitly; the remaining arguments are kept as ``args``.
    """

    detail: str

    def __init__(self, *args: Any, detail: str = "") -> None:
        messages = [str(arg) for arg in args if arg]
        if not detail and messages:
            detail = messages.pop(0)
        self.detail = detail or getattr(type(self), "default_detail", "")
        super().__init__(*messages)

    def __repr__(self) -> str:
        name = type(self).__name__
        return f"{name} - {self.detail}" if self.detail else name

    def __str__(self) -> str:
        return " ".join((*self.args, self.detail)).strip()


class MissingDependencyError(OravaError, ImportError):
    """An optional dependency needed for the requested feature is not installed."""

    def __init__(self, package: str, install_package: Optional[str] = None) -> None:
        extra = install_package or package
        super().__init__(
            f"{package!r} is required for this feature; install it with 'pip install orava[{extra}]'"
            f" or 'pip install {extra}'"
        )


class ImproperConfigurationError(OravaError):
    """A delimiter, parameter style, tag key or name mapper is invalid."""


class SQLParsingError(OravaError):
    """The raw query text could not be scanned."""

    default_detail = "could not scan SQL statement"


class LexError(SQLParsingError):
    """Malformed quoting or commenting in a raw query.

    ``position`` is the offset of the quote or comment opener that was never closed.
    """

    sql: str
    position: int

    def __init__(self, message: str, sql: str, position: int) -> None:
        super().__init__(f"{message} at position {position}")
        self.sql = sql
        self.position = position


class ParameterError(OravaError):
    """Argument binding failed; ``sql`` is the raw query when known."""

    sql: Optional[str]

    def __init__(self, message: str, sql: Optional[str] = None) -> None:
        super().__init__(detail=f"{message}\nSQL: {sql}" if sql else message)
        self.sql = sql


class UnknownParameterError(ParameterError):
    """A placeholder name has no value in the argument source."""

    parameter_name: str

    def __init__(self, parameter_name: str, source: Any = None, sql: Optional[str] = None) -> None:
        message = f"unknown parameter {parameter_name!r}"
        if source is not None:
            message = f"{message} for argument source of type {type(source).__name__}"
        super().__init__(message, sql)
        self.parameter_name = parameter_name


class ExecutionError(OravaError):
    """Wraps an error raised by the external query executor.

    The original exception is always chained as ``__cause__``.
    """

    operation: str
    sql: Optional[str]

    def __init__(self, operation: str, sql: Optional[str] = None, message: Optional[str] = None) -> None:
        detail = message or f"{operation} failed"
        super().__init__(detail=f"{detail}\nSQL: {sql}" if sql else detail)
        self.operation = operation
        self.sql = sql


class RepositoryError(OravaError):
    """A row-count expectation of a single-row fetch was not met."""


class NotFoundError(RepositoryError):
    """No row was returned where exactly one was expected."""


class MultipleResultsFoundError(RepositoryError):
    """More than one row was returned where exactly one was expected."""
