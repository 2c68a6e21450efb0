"""Asynchronous named-query driver."""

from typing import TYPE_CHECKING, Any, Optional

from orava.driver._common import CommonDriverAttributesMixin, NamedStatement

if TYPE_CHECKING:
    from orava.typing import AsyncQuerier, RowSource, SupportedArgumentSource

__all__ = ("AsyncNamedDriver",)


class AsyncNamedDriver(CommonDriverAttributesMixin):
    """Runs named statements through an :class:`~orava.typing.AsyncQuerier`.

    Compilation and argument resolution are synchronous; only the querier
    calls are awaited.
    """

    __slots__ = ()

    querier: "AsyncQuerier"

    async def query_named(self, statement: NamedStatement, source: "SupportedArgumentSource" = None) -> "RowSource":
        bound = self.bind(statement, source)
        with self.handle_execution_errors("query", bound.sql):
            return await self.querier.query(bound.sql, bound.parameters)

    async def select_named(
        self,
        statement: NamedStatement,
        source: "SupportedArgumentSource" = None,
        schema_type: "Optional[type[Any]]" = None,
    ) -> "list[Any]":
        bound = self.bind(statement, source)
        with self.handle_execution_errors("query", bound.sql):
            rows = await self.querier.query(bound.sql, bound.parameters)
        return self.scanner.scan_all(rows, schema_type)

    async def get_named(
        self,
        statement: NamedStatement,
        source: "SupportedArgumentSource" = None,
        schema_type: "Optional[type[Any]]" = None,
    ) -> Any:
        """Execute a read statement expected to return exactly one row.

        Raises:
            NotFoundError: If no row is returned.
            MultipleResultsFoundError: If more than one row is returned.
        """
        bound = self.bind(statement, source)
        with self.handle_execution_errors("query", bound.sql):
            rows = await self.querier.query(bound.sql, bound.parameters)
        return self.scanner.scan_one(rows, schema_type)

    async def exec_named(self, statement: NamedStatement, source: "SupportedArgumentSource" = None) -> int:
        bound = self.bind(statement, source)
        with self.handle_execution_errors("exec", bound.sql):
            return await self.querier.execute(bound.sql, bound.parameters)
