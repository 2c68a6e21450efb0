"""Type guards for the record and mapping shapes orava understands."""

from collections.abc import Mapping
from dataclasses import is_dataclass as _is_dataclass
from typing import Any

from msgspec import Struct
from typing_extensions import TypeGuard

from orava.typing import ATTRS_INSTALLED, PYDANTIC_INSTALLED, ArgumentSource

__all__ = (
    "is_argument_source",
    "is_attrs_schema",
    "is_dataclass",
    "is_mapping",
    "is_msgspec_struct",
    "is_pydantic_model",
)


def is_argument_source(obj: Any) -> "TypeGuard[ArgumentSource]":
    """Check if an object implements the lookup-by-name protocol.

    ``lookup`` must be callable on the class; an instance attribute of that name
    does not count.
    """
    return not isinstance(obj, type) and callable(getattr(type(obj), "lookup", None))


def is_mapping(obj: Any) -> "TypeGuard[Mapping[str, Any]]":
    return isinstance(obj, Mapping)


def is_dataclass(obj: Any) -> bool:
    """Check if an object is a dataclass type or instance."""
    return _is_dataclass(obj)


def is_msgspec_struct(obj: Any) -> bool:
    """Check if an object is a msgspec ``Struct`` type or instance."""
    if isinstance(obj, type):
        return issubclass(obj, Struct)
    return isinstance(obj, Struct)


def is_pydantic_model(obj: Any) -> bool:
    """Check if an object is a pydantic model type or instance."""
    if not PYDANTIC_INSTALLED:
        return False
    from pydantic import BaseModel

    if isinstance(obj, type):
        return issubclass(obj, BaseModel)
    return isinstance(obj, BaseModel)


def is_attrs_schema(cls: Any) -> bool:
    """Check if a type is an attrs class."""
    if not ATTRS_INSTALLED or not isinstance(cls, type):
        return False
    import attrs

    return attrs.has(cls)
