from collections.abc import Iterator, Mapping, Sequence
from importlib.util import find_spec
from typing import TYPE_CHECKING, Any, Callable, Protocol, Union, runtime_checkable

from typing_extensions import TypeAlias, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable

__all__ = (
    "ATTRS_INSTALLED",
    "CATTRS_INSTALLED",
    "PYDANTIC_INSTALLED",
    "ArgumentSource",
    "AsyncQuerier",
    "DictRow",
    "NameMapper",
    "Querier",
    "RowSource",
    "StatementParameters",
    "SupportedArgumentSource",
)

ATTRS_INSTALLED: bool = find_spec("attrs") is not None
CATTRS_INSTALLED: bool = find_spec("cattrs") is not None
PYDANTIC_INSTALLED: bool = find_spec("pydantic") is not None

T = TypeVar("T")

DictRow: TypeAlias = dict[str, Any]
NameMapper: TypeAlias = Callable[[str], str]
"""Maps a declared record field name to the placeholder name it answers to."""
StatementParameters: TypeAlias = list[Any]
"""Ordered positional values handed to a driver."""


@runtime_checkable
class ArgumentSource(Protocol):
    """Uniform lookup-by-name capability for argument sources.

    Objects implementing ``lookup`` are consulted directly instead of being
    introspected; ``lookup`` must raise :class:`KeyError` for unknown names.
    """

    def lookup(self, name: str) -> Any: ...


SupportedArgumentSource: TypeAlias = Union[ArgumentSource, Mapping[str, Any], Any]


@runtime_checkable
class RowSource(Protocol):
    """Row cursor capability handed to the row scanner."""

    def columns(self) -> list[str]: ...

    def __iter__(self) -> Iterator[Sequence[Any]]: ...

    def close(self) -> None: ...


class Querier(Protocol):
    """Synchronous query executor collaborator."""

    no_rows_errors: "tuple[type[BaseException], ...]"

    def query(self, sql: str, parameters: StatementParameters) -> RowSource: ...

    def execute(self, sql: str, parameters: StatementParameters) -> int: ...


class AsyncQuerier(Protocol):
    """Asynchronous query executor collaborator."""

    no_rows_errors: "tuple[type[BaseException], ...]"

    def query(self, sql: str, parameters: StatementParameters) -> "Awaitable[RowSource]": ...

    def execute(self, sql: str, parameters: StatementParameters) -> "Awaitable[int]": ...


def get_type_adapter(f: "type[T]") -> Any:
    """Return a pydantic ``TypeAdapter`` for ``f``.

    Raises:
        MissingDependencyError: If pydantic is not installed.
    """
    if not PYDANTIC_INSTALLED:
        from orava.exceptions import MissingDependencyError

        raise MissingDependencyError(package="pydantic")
    from pydantic import TypeAdapter

    return TypeAdapter(f)
