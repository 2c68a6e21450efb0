# pyright: reportCallIssue=false, reportAttributeAccessIssue=false, reportArgumentType=false
import datetime
from collections.abc import Sequence
from enum import Enum
from functools import partial
from pathlib import Path, PurePath
from typing import Any, Callable, Optional, cast
from uuid import UUID

import msgspec
from mypy_extensions import trait

from orava.exceptions import MultipleResultsFoundError, NotFoundError, OravaError
from orava.typing import CATTRS_INSTALLED, DictRow, RowSource, get_type_adapter
from orava.utils.type_guards import is_attrs_schema, is_dataclass, is_msgspec_struct, is_pydantic_model

__all__ = ("DEFAULT_TYPE_DECODERS", "SchemaRowScanner", "ToSchemaMixin", "rows_to_dicts")


DEFAULT_TYPE_DECODERS: "list[tuple[Callable[[Any], bool], Callable[[Any, Any], Any]]]" = [
    (lambda x: x is UUID, lambda t, v: t(v.hex) if isinstance(v, UUID) else t(v)),
    (lambda x: x is datetime.datetime, lambda t, v: v if isinstance(v, t) else t.fromisoformat(v)),
    (lambda x: x is datetime.date, lambda t, v: v if isinstance(v, t) else t.fromisoformat(v)),
    (lambda x: x is datetime.time, lambda t, v: v if isinstance(v, t) else t.fromisoformat(v)),
]


def _default_msgspec_deserializer(
    target_type: Any, value: Any, type_decoders: "Optional[Sequence[tuple[Any, Any]]]" = None
) -> Any:
    """Decode driver values msgspec does not convert natively."""
    if type_decoders:
        for predicate, decoder in type_decoders:
            if predicate(target_type):
                return decoder(target_type, value)
    if isinstance(target_type, type) and issubclass(target_type, Enum) and not isinstance(value, Enum):
        return target_type(value)
    if isinstance(target_type, type) and isinstance(value, target_type):
        return value
    if isinstance(target_type, type) and issubclass(target_type, (Path, PurePath, UUID)):
        return target_type(value)
    return value


def rows_to_dicts(rows: RowSource) -> "list[DictRow]":
    """Materialize a row source as one dict per row keyed by column name."""
    columns = rows.columns()
    return [dict(zip(columns, row)) for row in rows]


@trait
class ToSchemaMixin:
    __slots__ = ()

    @staticmethod
    def to_schema(data: "list[DictRow]", *, schema_type: "Optional[type[Any]]" = None) -> "list[Any]":
        """Convert dict rows to a record type.

        Supports dataclasses, msgspec structs, pydantic models and attrs
        classes. With no ``schema_type`` the dicts are returned unchanged.

        Raises:
            OravaError: If ``schema_type`` is not a supported record type.

        Returns:
            One record per row.
        """
        if schema_type is None:
            return data
        if is_dataclass(schema_type):
            return [schema_type(**row) for row in data]
        if is_msgspec_struct(schema_type):
            return cast(
                "list[Any]",
                msgspec.convert(
                    data,
                    type=list[schema_type],  # type: ignore[valid-type]
                    strict=False,
                    dec_hook=partial(_default_msgspec_deserializer, type_decoders=DEFAULT_TYPE_DECODERS),
                ),
            )
        if is_pydantic_model(schema_type):
            return cast("list[Any]", get_type_adapter(list[schema_type]).validate_python(data))  # type: ignore[valid-type]
        if is_attrs_schema(schema_type):
            if CATTRS_INSTALLED:
                from cattrs import structure

                return cast("list[Any]", structure(data, list[schema_type]))  # type: ignore[valid-type]
            return [schema_type(**row) for row in data]
        msg = "`schema_type` should be a valid Dataclass, Pydantic model, Msgspec struct, or Attrs class"
        raise OravaError(msg)


class SchemaRowScanner(ToSchemaMixin):
    """Default row scanner decoding rows into dicts or record types.

    Row sources are always closed, including when iteration fails.
    """

    __slots__ = ()

    def scan_all(self, rows: RowSource, schema_type: "Optional[type[Any]]" = None) -> "list[Any]":
        try:
            data = rows_to_dicts(rows)
        finally:
            rows.close()
        return self.to_schema(data, schema_type=schema_type)

    def scan_one(self, rows: RowSource, schema_type: "Optional[type[Any]]" = None) -> Any:
        """Decode exactly one row.

        Raises:
            NotFoundError: If there are no rows.
            MultipleResultsFoundError: If there is more than one row.
        """
        try:
            columns = rows.columns()
            head: list[DictRow] = []
            for row in rows:
                head.append(dict(zip(columns, row)))
                if len(head) > 1:
                    break
        finally:
            rows.close()
        if not head:
            msg = "no rows returned where exactly one was expected"
            raise NotFoundError(msg)
        if len(head) > 1:
            msg = "more than one row returned where exactly one was expected"
            raise MultipleResultsFoundError(msg)
        return self.to_schema(head, schema_type=schema_type)[0]
