"""Synchronous named-query driver."""

from typing import TYPE_CHECKING, Any, Optional

from orava.driver._common import CommonDriverAttributesMixin, NamedStatement

if TYPE_CHECKING:
    from orava.typing import Querier, RowSource, SupportedArgumentSource

__all__ = ("SyncNamedDriver",)


class SyncNamedDriver(CommonDriverAttributesMixin):
    """Runs named statements through a synchronous :class:`~orava.typing.Querier`."""

    __slots__ = ()

    querier: "Querier"

    def query_named(self, statement: NamedStatement, source: "SupportedArgumentSource" = None) -> "RowSource":
        """Execute a read statement and return the raw row source.

        The caller owns the returned row source and must close it.
        """
        bound = self.bind(statement, source)
        with self.handle_execution_errors("query", bound.sql):
            return self.querier.query(bound.sql, bound.parameters)

    def select_named(
        self,
        statement: NamedStatement,
        source: "SupportedArgumentSource" = None,
        schema_type: "Optional[type[Any]]" = None,
    ) -> "list[Any]":
        """Execute a read statement and decode every row.

        Args:
            statement: Raw named SQL or a prepared query.
            source: Argument source for the placeholders.
            schema_type: Record type to decode rows into; dicts when omitted.

        Returns:
            The decoded rows.
        """
        bound = self.bind(statement, source)
        with self.handle_execution_errors("query", bound.sql):
            rows = self.querier.query(bound.sql, bound.parameters)
        return self.scanner.scan_all(rows, schema_type)

    def get_named(
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
            rows = self.querier.query(bound.sql, bound.parameters)
        return self.scanner.scan_one(rows, schema_type)

    def exec_named(self, statement: NamedStatement, source: "SupportedArgumentSource" = None) -> int:
        """Execute a write statement and return the number of affected rows."""
        bound = self.bind(statement, source)
        with self.handle_execution_errors("exec", bound.sql):
            return self.querier.execute(bound.sql, bound.parameters)
