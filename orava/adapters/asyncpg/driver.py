"""Named-query driver for asyncpg connections."""

import re
from collections.abc import Iterator, Sequence
from typing import TYPE_CHECKING, Any, ClassVar, Final, Optional

from orava.driver import AsyncNamedDriver
from orava.parameters.types import ParameterStyle

if TYPE_CHECKING:
    from orava.base import NamedQueryAPI
    from orava.driver import RowScanner
    from orava.typing import StatementParameters

__all__ = ("ASYNC_PG_STATUS_REGEX", "AsyncpgDriver", "AsyncpgQuerier", "RecordRowSource", "parse_asyncpg_status")

ASYNC_PG_STATUS_REGEX: "Final[re.Pattern[str]]" = re.compile(r"^([A-Z]+)(?:\s+(\d+))?\s+(\d+)$", re.IGNORECASE)

EXPECTED_REGEX_GROUPS: Final[int] = 3


def parse_asyncpg_status(status: str) -> int:
    """Parse an asyncpg command status string to extract the row count.

    Args:
        status: Status string like "INSERT 0 1", "UPDATE 3", "DELETE 2"

    Returns:
        Number of affected rows, or 0 if the status carries no count
    """
    if not status:
        return 0

    match = ASYNC_PG_STATUS_REGEX.match(status.strip())
    if match and len(match.groups()) >= EXPECTED_REGEX_GROUPS:
        return int(match.groups()[-1])
    return 0


class RecordRowSource:
    """Row source over records already fetched by asyncpg."""

    __slots__ = ("_columns", "_records")

    def __init__(self, columns: "list[str]", records: "Sequence[Any]") -> None:
        self._columns = columns
        self._records = records

    def columns(self) -> "list[str]":
        return list(self._columns)

    def __iter__(self) -> "Iterator[Sequence[Any]]":
        for record in self._records:
            yield tuple(record)

    def close(self) -> None:
        self._records = ()


class AsyncpgQuerier:
    """Query executor over an asyncpg connection."""

    __slots__ = ("connection",)

    no_rows_errors: "tuple[type[BaseException], ...]" = ()

    def __init__(self, connection: Any) -> None:
        self.connection = connection

    async def query(self, sql: str, parameters: "StatementParameters") -> RecordRowSource:
        statement = await self.connection.prepare(sql)
        records = await statement.fetch(*parameters)
        return RecordRowSource([attribute.name for attribute in statement.get_attributes()], records)

    async def execute(self, sql: str, parameters: "StatementParameters") -> int:
        status = await self.connection.execute(sql, *parameters)
        return parse_asyncpg_status(status)


class AsyncpgDriver(AsyncNamedDriver):
    """Asynchronous driver for asyncpg, compiling to ``$n`` markers."""

    __slots__ = ()

    default_parameter_style: ClassVar[ParameterStyle] = ParameterStyle.NUMERIC

    def __init__(
        self, connection: Any, api: "Optional[NamedQueryAPI]" = None, scanner: "Optional[RowScanner]" = None
    ) -> None:
        super().__init__(AsyncpgQuerier(connection), api, scanner)
