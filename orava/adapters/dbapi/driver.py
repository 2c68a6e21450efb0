"""Named-query driver for PEP 249 (DB-API 2.0) connections."""

from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Any, ClassVar, Optional

from orava.driver import SyncNamedDriver
from orava.parameters.types import ParameterStyle

if TYPE_CHECKING:
    from orava.base import NamedQueryAPI
    from orava.driver import RowScanner
    from orava.typing import StatementParameters

__all__ = ("CursorRowSource", "DBAPIDriver", "DBAPIQuerier")


class CursorRowSource:
    """Row source over an executed DB-API cursor."""

    __slots__ = ("_closed", "cursor")

    def __init__(self, cursor: Any) -> None:
        self.cursor = cursor
        self._closed = False

    def columns(self) -> "list[str]":
        description = self.cursor.description
        if not description:
            return []
        return [column[0] for column in description]

    def __iter__(self) -> "Iterator[Sequence[Any]]":
        fetchone = self.cursor.fetchone
        while (row := fetchone()) is not None:
            yield row

    def close(self) -> None:
        if not self._closed:
            self._closed = True
            self.cursor.close()


class DBAPIQuerier:
    """Query executor over a DB-API connection.

    Args:
        connection: Any PEP 249 connection.
        no_rows_errors: Driver exception types signalling "no rows".
    """

    __slots__ = ("connection", "no_rows_errors")

    def __init__(self, connection: Any, no_rows_errors: "tuple[type[BaseException], ...]" = ()) -> None:
        self.connection = connection
        self.no_rows_errors = no_rows_errors

    def query(self, sql: str, parameters: "StatementParameters") -> CursorRowSource:
        cursor = self.connection.cursor()
        try:
            cursor.execute(sql, parameters)
        except Exception:
            cursor.close()
            raise
        return CursorRowSource(cursor)

    def execute(self, sql: str, parameters: "StatementParameters") -> int:
        cursor = self.connection.cursor()
        try:
            cursor.execute(sql, parameters)
            return max(cursor.rowcount, 0)
        finally:
            cursor.close()


class DBAPIDriver(SyncNamedDriver):
    """Synchronous driver for DB-API connections.

    Defaults to the ``qmark`` style used by :mod:`sqlite3`; pass an ``api``
    configured for the driver's paramstyle otherwise.
    """

    __slots__ = ()

    default_parameter_style: ClassVar[ParameterStyle] = ParameterStyle.QMARK

    def __init__(
        self,
        connection: Any,
        api: "Optional[NamedQueryAPI]" = None,
        scanner: "Optional[RowScanner]" = None,
        no_rows_errors: "tuple[type[BaseException], ...]" = (),
    ) -> None:
        super().__init__(DBAPIQuerier(connection, no_rows_errors), api, scanner)
