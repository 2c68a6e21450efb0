"""Projection of argument sources onto a compiled query's parameter names.

Mappings and objects implementing :class:`~orava.typing.ArgumentSource` are
looked up directly. Records (dataclasses, msgspec structs, pydantic models,
attrs classes) are resolved through a :class:`FieldMap` that is built once per
record type and kept in the resolver's registry, so field declarations and tag
metadata are inspected only on first use.

Tags are read from the field metadata each library offers:

- dataclasses and attrs: ``field(metadata={"db": "user_id"})``
- msgspec: ``Annotated[str, msgspec.Meta(extra={"db": "user_id"})]``
- pydantic: ``Field(json_schema_extra={"db": "user_id"})``
"""

import dataclasses
import threading
from collections.abc import Iterable, Mapping, Sequence
from typing import Annotated, Any, Callable, NamedTuple, Optional, get_origin, get_type_hints

import msgspec

from orava.exceptions import ImproperConfigurationError, UnknownParameterError
from orava.typing import NameMapper
from orava.utils.text import snake_case
from orava.utils.type_guards import (
    is_argument_source,
    is_attrs_schema,
    is_dataclass,
    is_mapping,
    is_msgspec_struct,
    is_pydantic_model,
)

__all__ = ("DEFAULT_TAG_KEY", "ArgumentResolver", "FieldMap", "RecordField", "declared_fields")

DEFAULT_TAG_KEY = "db"

_MISSING = object()


class RecordField(NamedTuple):
    """A declared record field and its tag value under the configured key."""

    attribute: str
    tag: Optional[str] = None


class FieldMap:
    """Parameter name to attribute name lookup for one record type.

    Precedence, each in field declaration order: a tag equal to the name, then
    an untagged field whose mapped name equals it, then a field whose declared
    name equals it exactly.
    """

    __slots__ = ("_attributes",)

    def __init__(self, attributes: "dict[str, str]") -> None:
        self._attributes = attributes

    @classmethod
    def from_fields(cls, fields: "Iterable[RecordField]", name_mapper: NameMapper) -> "FieldMap":
        fields = list(fields)
        attributes: dict[str, str] = {}
        for field in fields:
            if field.tag:
                attributes.setdefault(field.tag, field.attribute)
        for field in fields:
            if not field.tag:
                attributes.setdefault(name_mapper(field.attribute), field.attribute)
        for field in fields:
            attributes.setdefault(field.attribute, field.attribute)
        return cls(attributes)

    def get(self, name: str) -> Optional[str]:
        return self._attributes.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._attributes

    def __len__(self) -> int:
        return len(self._attributes)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._attributes!r})"


def _annotated_tag(hint: Any, tag_key: str) -> Optional[str]:
    if get_origin(hint) is not Annotated:
        return None
    for meta in hint.__metadata__:
        if isinstance(meta, msgspec.Meta) and meta.extra and tag_key in meta.extra:
            return str(meta.extra[tag_key])
    return None


def _metadata_tag(metadata: "Optional[Mapping[str, Any]]", tag_key: str) -> Optional[str]:
    if metadata and tag_key in metadata:
        return str(metadata[tag_key])
    return None


def declared_fields(record_type: type, tag_key: str) -> "Optional[list[RecordField]]":
    """List the declared fields of a record type with their tags.

    Args:
        record_type: A msgspec struct, pydantic model, attrs or dataclass type.
        tag_key: The metadata key holding a field's placeholder name.

    Returns:
        Fields in declaration order, or ``None`` when ``record_type`` is not a
        recognised record type.
    """
    if is_msgspec_struct(record_type):
        hints = get_type_hints(record_type, include_extras=True)
        return [
            RecordField(info.name, _annotated_tag(hints.get(info.name), tag_key))
            for info in msgspec.structs.fields(record_type)
        ]
    if is_pydantic_model(record_type):
        fields = []
        for name, info in record_type.model_fields.items():
            extra = info.json_schema_extra
            fields.append(RecordField(name, _metadata_tag(extra if isinstance(extra, Mapping) else None, tag_key)))
        return fields
    if is_attrs_schema(record_type):
        import attrs

        return [RecordField(field.name, _metadata_tag(field.metadata, tag_key)) for field in attrs.fields(record_type)]
    if is_dataclass(record_type):
        return [
            RecordField(field.name, _metadata_tag(field.metadata, tag_key))
            for field in dataclasses.fields(record_type)
        ]
    return None


def _instance_attributes(obj: Any) -> "list[str]":
    if hasattr(obj, "__dict__"):
        return [name for name in vars(obj) if not name.startswith("_")]
    slots: list[str] = []
    for klass in type(obj).__mro__:
        klass_slots = klass.__dict__.get("__slots__", ())
        if isinstance(klass_slots, str):
            klass_slots = (klass_slots,)
        slots.extend(name for name in klass_slots if not name.startswith("_") and hasattr(obj, name))
    return slots


class ArgumentResolver:
    """Resolves parameter names against argument sources.

    Args:
        tag_key: Metadata key under which record fields declare their placeholder name.
        name_mapper: Maps an untagged field's declared name to a placeholder name.
    """

    __slots__ = ("_lock", "_registry", "name_mapper", "tag_key")

    def __init__(self, tag_key: str = DEFAULT_TAG_KEY, name_mapper: NameMapper = snake_case) -> None:
        if not tag_key:
            msg = "tag_key must be a non-empty string"
            raise ImproperConfigurationError(msg)
        if not callable(name_mapper):
            msg = f"name_mapper must be callable, got {type(name_mapper).__name__}"
            raise ImproperConfigurationError(msg)
        self.tag_key = tag_key
        self.name_mapper = name_mapper
        self._registry: dict[type, FieldMap] = {}
        self._lock = threading.Lock()

    def register(self, record_type: type, attributes: "Optional[Mapping[str, str]]" = None) -> FieldMap:
        """Register how ``record_type`` answers placeholder names.

        Args:
            record_type: The record type.
            attributes: Explicit ``{parameter_name: attribute_name}`` mapping. When
                omitted the map is built from the type's declared fields.

        Raises:
            ImproperConfigurationError: If no mapping is given and the type has
                no declared fields.

        Returns:
            The registered field map.
        """
        if attributes is not None:
            field_map = FieldMap(dict(attributes))
        else:
            fields = declared_fields(record_type, self.tag_key)
            if fields is None:
                msg = f"{record_type.__name__} has no declared fields; pass an explicit attribute mapping"
                raise ImproperConfigurationError(msg)
            field_map = FieldMap.from_fields(fields, self.name_mapper)
        with self._lock:
            self._registry[record_type] = field_map
        return field_map

    def field_map(self, record_type: type) -> Optional[FieldMap]:
        """Return the registered field map for ``record_type``, building it on first use."""
        field_map = self._registry.get(record_type)
        if field_map is not None:
            return field_map
        fields = declared_fields(record_type, self.tag_key)
        if fields is None:
            return None
        field_map = FieldMap.from_fields(fields, self.name_mapper)
        with self._lock:
            return self._registry.setdefault(record_type, field_map)

    def resolve(self, parameter_names: "Sequence[str]", source: Any, sql: Optional[str] = None) -> "list[Any]":
        """Return one value per parameter name, in order.

        Repeated names yield repeated values. ``source`` is never mutated.

        Args:
            parameter_names: Names from a compiled query.
            source: A mapping, an ``ArgumentSource``, a record, or ``None`` when
                the query has no parameters.
            sql: Optional SQL for error context.

        Raises:
            UnknownParameterError: If a name has no value in ``source``.

        Returns:
            The ordered argument values.
        """
        if not parameter_names:
            return []
        getter = self._getter(source, sql)
        return [getter(name) for name in parameter_names]

    def validate(self, parameter_names: "Sequence[str]", source: Any, sql: Optional[str] = None) -> None:
        """Check that every name is resolvable against ``source``.

        ``source`` may be an example value or a record type; for a type only
        its field map is consulted.

        Raises:
            UnknownParameterError: On the first unresolvable name.
        """
        if isinstance(source, type):
            field_map = self.field_map(source)
            if field_map is None:
                msg = f"{source.__name__} has no declared fields; pass an example instance instead"
                raise ImproperConfigurationError(msg)
            for name in parameter_names:
                if name not in field_map:
                    raise UnknownParameterError(name, source, sql)
            return
        self.resolve(parameter_names, source, sql)

    def _getter(self, source: Any, sql: Optional[str]) -> "Callable[[str], Any]":
        if source is None:

            def missing(name: str) -> Any:
                raise UnknownParameterError(name, None, sql)

            return missing

        field_map = None if is_mapping(source) else self.field_map(type(source))

        if field_map is None and is_argument_source(source):

            def lookup(name: str) -> Any:
                try:
                    return source.lookup(name)
                except KeyError:
                    raise UnknownParameterError(name, source, sql) from None

            return lookup

        if is_mapping(source):

            def item(name: str) -> Any:
                value = source.get(name, _MISSING)
                if value is _MISSING:
                    raise UnknownParameterError(name, source, sql)
                return value

            return item

        if field_map is None:
            field_map = FieldMap.from_fields(
                (RecordField(attribute) for attribute in _instance_attributes(source)), self.name_mapper
            )

        def attribute(name: str) -> Any:
            attribute_name = field_map.get(name)
            if attribute_name is None:
                raise UnknownParameterError(name, source, sql)
            return getattr(source, attribute_name)

        return attribute
