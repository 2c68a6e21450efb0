"""Shared plumbing for the sync and async named-query drivers."""

from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, ClassVar, Optional, Protocol, Union

from orava.base import NamedQueryAPI
from orava.driver.mixins import SchemaRowScanner
from orava.exceptions import ExecutionError, NotFoundError, OravaError
from orava.parameters.prepared import BoundQuery, PreparedQuery
from orava.parameters.types import ParameterStyle
from orava.utils.logging import get_logger

if TYPE_CHECKING:
    from orava.typing import RowSource, SupportedArgumentSource

__all__ = ("CommonDriverAttributesMixin", "NamedStatement", "RowScanner")

logger = get_logger("driver")

NamedStatement = Union[str, PreparedQuery]
"""Raw named SQL or a query prepared by the driver's API."""


class RowScanner(Protocol):
    """Row-to-record decoding collaborator."""

    def scan_all(self, rows: "RowSource", schema_type: "Optional[type[Any]]" = None) -> "list[Any]": ...

    def scan_one(self, rows: "RowSource", schema_type: "Optional[type[Any]]" = None) -> Any: ...


class CommonDriverAttributesMixin:
    """Binds named statements and normalizes executor errors.

    Args:
        querier: The query executor collaborator.
        api: Named query API. Defaults to one using ``default_parameter_style``.
        scanner: Row decoder. Defaults to :class:`SchemaRowScanner`.
    """

    __slots__ = ("api", "querier", "scanner")

    default_parameter_style: ClassVar[ParameterStyle] = ParameterStyle.NUMERIC

    def __init__(self, querier: Any, api: Optional[NamedQueryAPI] = None, scanner: Optional[RowScanner] = None) -> None:
        self.querier = querier
        self.api = api or NamedQueryAPI(parameter_style=self.default_parameter_style)
        self.scanner: RowScanner = scanner or SchemaRowScanner()

    def bind(self, statement: NamedStatement, source: "SupportedArgumentSource" = None) -> BoundQuery:
        """Compile or reuse ``statement`` and resolve its arguments."""
        if isinstance(statement, PreparedQuery):
            return statement.bind(source)
        return self.api.named_query_params(statement, source)

    @contextmanager
    def handle_execution_errors(self, operation: str, sql: str) -> Generator[None, None, None]:
        """Translate executor errors raised inside the block.

        orava's own errors pass through. Errors the querier lists in
        ``no_rows_errors`` become :class:`NotFoundError`; anything else becomes
        :class:`ExecutionError` for ``operation``. The original is chained.
        """
        no_rows_errors: tuple[type[BaseException], ...] = getattr(self.querier, "no_rows_errors", ())
        try:
            yield
        except OravaError:
            raise
        except no_rows_errors as exc:
            msg = "no rows returned where exactly one was expected"
            raise NotFoundError(msg) from exc
        except Exception as exc:
            logger.debug(
                "named %s failed", operation, extra={"extra_fields": {"operation": operation, "error": repr(exc)}}
            )
            raise ExecutionError(operation, sql, f"{operation} failed: {exc}") from exc
