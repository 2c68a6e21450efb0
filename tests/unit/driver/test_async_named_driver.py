"""Tests for the asynchronous named-query driver."""

from collections.abc import Iterator, Sequence
from typing import Any, Optional

import msgspec
import pytest

from orava.driver import AsyncNamedDriver
from orava.exceptions import ExecutionError, NotFoundError, UnknownParameterError

pytestmark = pytest.mark.anyio


class Rows:
    def __init__(self, columns: "list[str]", rows: "list[tuple[Any, ...]]") -> None:
        self._columns = columns
        self._rows = rows
        self.closed = False

    def columns(self) -> "list[str]":
        return self._columns

    def __iter__(self) -> "Iterator[Sequence[Any]]":
        return iter(self._rows)

    def close(self) -> None:
        self.closed = True


class AsyncQuerier:
    no_rows_errors: "tuple[type[BaseException], ...]" = ()

    def __init__(self, rows: Optional[Rows] = None, error: Optional[Exception] = None) -> None:
        self.rows = rows or Rows([], [])
        self.error = error
        self.calls: list[tuple[str, list[Any]]] = []

    async def query(self, sql: str, parameters: "list[Any]") -> Rows:
        self.calls.append((sql, parameters))
        if self.error is not None:
            raise self.error
        return self.rows

    async def execute(self, sql: str, parameters: "list[Any]") -> int:
        self.calls.append((sql, parameters))
        if self.error is not None:
            raise self.error
        return 1


class Author(msgspec.Struct):
    id: int
    fullName: str


async def test_select_named_into_struct() -> None:
    querier = AsyncQuerier(Rows(["id", "fullName"], [(1, "Ann Leckie")]))
    driver = AsyncNamedDriver(querier)

    sql = "SELECT id, full_name AS \"fullName\" FROM authors WHERE id = :id"
    result = await driver.select_named(sql, {"id": 1}, Author)

    assert result == [Author(id=1, fullName="Ann Leckie")]
    assert querier.calls == [('SELECT id, full_name AS "fullName" FROM authors WHERE id = $1', [1])]
    assert querier.rows.closed


async def test_get_named_not_found() -> None:
    with pytest.raises(NotFoundError):
        await AsyncNamedDriver(AsyncQuerier()).get_named("SELECT id FROM authors WHERE id = :id", {"id": 9})


async def test_exec_named() -> None:
    querier = AsyncQuerier()

    assert await AsyncNamedDriver(querier).exec_named("DELETE FROM authors WHERE id = :id", {"id": 3}) == 1
    assert querier.calls == [("DELETE FROM authors WHERE id = $1", [3])]


async def test_executor_error_is_wrapped() -> None:
    original = ConnectionError("gone")

    with pytest.raises(ExecutionError) as exc_info:
        await AsyncNamedDriver(AsyncQuerier(error=original)).query_named("SELECT 1")

    assert exc_info.value.operation == "query"
    assert exc_info.value.__cause__ is original


async def test_unknown_parameter_is_not_wrapped() -> None:
    querier = AsyncQuerier()

    with pytest.raises(UnknownParameterError):
        await AsyncNamedDriver(querier).select_named("SELECT :missing", {})

    assert querier.calls == []


async def test_decode_error_is_not_wrapped() -> None:
    querier = AsyncQuerier(Rows(["id"], [(1,)]))

    with pytest.raises(msgspec.ValidationError):
        await AsyncNamedDriver(querier).get_named("SELECT id FROM authors WHERE id = :id", {"id": 1}, Author)

    assert querier.rows.closed
