"""Tests for argument resolution against mappings, records and lookup objects."""

from dataclasses import dataclass, field
from typing import Annotated, Any
from unittest.mock import patch

import attrs
import msgspec
import pydantic
import pytest

from orava.exceptions import ImproperConfigurationError, UnknownParameterError
from orava.parameters import resolver as resolver_module
from orava.parameters.resolver import ArgumentResolver, FieldMap, RecordField, declared_fields
from orava.utils.text import identity


@dataclass
class User:
    ID: str = field(metadata={"db": "user_id"})
    FullName: str = ""
    Email: str = ""
    Age: int = 0


class Account(msgspec.Struct):
    account_id: Annotated[int, msgspec.Meta(extra={"db": "id"})]
    displayName: str


class Customer(pydantic.BaseModel):
    customer_id: int = pydantic.Field(json_schema_extra={"db": "id"})
    homeCity: str


@attrs.define
class Order:
    order_id: int = attrs.field(metadata={"db": "id"})
    totalCents: int = 0


class Environment:
    def __init__(self, values: "dict[str, Any]") -> None:
        self.values = values

    def lookup(self, name: str) -> Any:
        return self.values[name]


@pytest.fixture
def resolver() -> ArgumentResolver:
    return ArgumentResolver()


@pytest.fixture
def bob() -> User:
    return User(ID="bob", FullName="Bob Smith", Email="bob@example.com", Age=42)


class TestMappings:
    def test_values_follow_name_order(self, resolver: ArgumentResolver) -> None:
        assert resolver.resolve(["a", "b", "a"], {"a": 1, "b": 2}) == [1, 2, 1]

    def test_missing_key(self, resolver: ArgumentResolver) -> None:
        with pytest.raises(UnknownParameterError) as exc_info:
            resolver.resolve(["a", "b"], {"a": 1}, "x=:a AND y=:b")

        assert exc_info.value.parameter_name == "b"
        assert exc_info.value.sql == "x=:a AND y=:b"
        assert "unknown parameter 'b' for argument source of type dict" in str(exc_info.value)

    def test_none_value_is_not_missing(self, resolver: ArgumentResolver) -> None:
        assert resolver.resolve(["a"], {"a": None}) == [None]

    def test_source_is_not_mutated(self, resolver: ArgumentResolver) -> None:
        source = {"a": [1, 2], "b": "x"}
        snapshot = {"a": [1, 2], "b": "x"}

        resolver.resolve(["a", "b", "a"], source)

        assert source == snapshot

    def test_extra_keys_are_ignored(self, resolver: ArgumentResolver) -> None:
        assert resolver.resolve(["a"], {"a": 1, "unused": 2}) == [1]


class TestNoSource:
    def test_none_with_no_parameters(self, resolver: ArgumentResolver) -> None:
        assert resolver.resolve([], None) == []

    def test_none_with_parameters(self, resolver: ArgumentResolver) -> None:
        with pytest.raises(UnknownParameterError) as exc_info:
            resolver.resolve(["a"], None)

        assert str(exc_info.value) == "unknown parameter 'a'"

    def test_scalar_source(self, resolver: ArgumentResolver) -> None:
        with pytest.raises(UnknownParameterError):
            resolver.resolve(["a"], 5)


class TestRecords:
    def test_dataclass_tags_and_mapped_names(self, resolver: ArgumentResolver, bob: User) -> None:
        values = resolver.resolve(["full_name", "email", "age", "user_id"], bob)

        assert values == ["Bob Smith", "bob@example.com", 42, "bob"]

    def test_exact_declared_name(self, resolver: ArgumentResolver, bob: User) -> None:
        assert resolver.resolve(["ID", "FullName"], bob) == ["bob", "Bob Smith"]

    def test_tagged_field_does_not_answer_to_mapped_name(self, resolver: ArgumentResolver, bob: User) -> None:
        with pytest.raises(UnknownParameterError) as exc_info:
            resolver.resolve(["id"], bob)

        assert "argument source of type User" in str(exc_info.value)

    def test_msgspec_struct(self, resolver: ArgumentResolver) -> None:
        account = Account(account_id=7, displayName="Ops")

        assert resolver.resolve(["id", "display_name"], account) == [7, "Ops"]

    def test_pydantic_model(self, resolver: ArgumentResolver) -> None:
        customer = Customer(customer_id=3, homeCity="Oslo")

        assert resolver.resolve(["id", "home_city"], customer) == [3, "Oslo"]

    def test_attrs_class(self, resolver: ArgumentResolver) -> None:
        order = Order(order_id=11, totalCents=990)

        assert resolver.resolve(["id", "total_cents"], order) == [11, 990]

    def test_custom_tag_key(self) -> None:
        @dataclass
        class Row:
            key: str = field(metadata={"sql": "row_key", "db": "ignored"})

        assert ArgumentResolver(tag_key="sql").resolve(["row_key"], Row("k")) == ["k"]

    def test_custom_name_mapper(self, bob: User) -> None:
        resolver = ArgumentResolver(name_mapper=identity)

        assert resolver.resolve(["FullName"], bob) == ["Bob Smith"]
        with pytest.raises(UnknownParameterError):
            resolver.resolve(["full_name"], bob)

    def test_first_tag_wins(self, resolver: ArgumentResolver) -> None:
        @dataclass
        class Twice:
            first: int = field(metadata={"db": "value"})
            second: int = field(metadata={"db": "value"})

        assert resolver.resolve(["value"], Twice(1, 2)) == [1]

    def test_field_map_built_once_per_type(self, resolver: ArgumentResolver, bob: User) -> None:
        with patch.object(resolver_module, "declared_fields", wraps=declared_fields) as spy:
            resolver.resolve(["user_id"], bob)
            resolver.resolve(["email"], User(ID="amy"))

        assert spy.call_count == 1

    def test_record_values_read_at_bind_time(self, resolver: ArgumentResolver, bob: User) -> None:
        resolver.resolve(["email"], bob)
        bob.Email = "new@example.com"

        assert resolver.resolve(["email"], bob) == ["new@example.com"]


class TestPlainObjects:
    def test_instance_attributes(self, resolver: ArgumentResolver) -> None:
        class Point:
            def __init__(self) -> None:
                self.xCoord = 1
                self.y = 2
                self._hidden = 3

        assert resolver.resolve(["x_coord", "y"], Point()) == [1, 2]
        with pytest.raises(UnknownParameterError):
            resolver.resolve(["_hidden"], Point())

    def test_slotted_object(self, resolver: ArgumentResolver) -> None:
        class Slotted:
            __slots__ = ("userName",)

            def __init__(self) -> None:
                self.userName = "amy"

        assert resolver.resolve(["user_name"], Slotted()) == ["amy"]

    def test_registered_attribute_mapping(self, resolver: ArgumentResolver) -> None:
        class Point:
            def __init__(self, x: int) -> None:
                self.x = x

        resolver.register(Point, {"x_coord": "x"})

        assert resolver.resolve(["x_coord"], Point(4)) == [4]
        with pytest.raises(UnknownParameterError):
            resolver.resolve(["x"], Point(4))

    def test_register_without_fields_requires_mapping(self, resolver: ArgumentResolver) -> None:
        class Plain:
            pass

        with pytest.raises(ImproperConfigurationError):
            resolver.register(Plain)

    def test_register_record_type(self, resolver: ArgumentResolver) -> None:
        field_map = resolver.register(User)

        assert "user_id" in field_map
        assert resolver.field_map(User) is field_map


class TestArgumentSourceProtocol:
    def test_lookup(self, resolver: ArgumentResolver) -> None:
        source = Environment({"a": 1, "b": 2})

        assert resolver.resolve(["b", "a", "b"], source) == [2, 1, 2]

    def test_lookup_key_error(self, resolver: ArgumentResolver) -> None:
        with pytest.raises(UnknownParameterError) as exc_info:
            resolver.resolve(["missing"], Environment({}))

        assert exc_info.value.parameter_name == "missing"
        assert exc_info.value.__cause__ is None

    def test_record_field_named_lookup(self, resolver: ArgumentResolver) -> None:
        @dataclass
        class Search:
            lookup: str
            user_id: int

        assert resolver.resolve(["lookup", "user_id"], Search("x", 1)) == ["x", 1]

    def test_instance_attribute_named_lookup(self, resolver: ArgumentResolver) -> None:
        class Search:
            def __init__(self) -> None:
                self.lookup = "x"

        assert resolver.resolve(["lookup"], Search()) == ["x"]


class TestValidate:
    def test_record_type(self, resolver: ArgumentResolver) -> None:
        resolver.validate(["user_id", "full_name"], User)

        with pytest.raises(UnknownParameterError):
            resolver.validate(["nope"], User)

    def test_plain_type_is_rejected(self, resolver: ArgumentResolver) -> None:
        with pytest.raises(ImproperConfigurationError):
            resolver.validate(["a"], dict)

    def test_example_instance(self, resolver: ArgumentResolver) -> None:
        resolver.validate(["a"], {"a": 1})

        with pytest.raises(UnknownParameterError):
            resolver.validate(["a"], {})


class TestFieldMap:
    def test_precedence(self) -> None:
        field_map = FieldMap.from_fields(
            [RecordField("userId"), RecordField("owner", "user_id")], name_mapper=lambda name: "user_id"
        )

        assert field_map.get("user_id") == "owner"
        assert field_map.get("userId") == "userId"
        assert field_map.get("owner") == "owner"
        assert field_map.get("missing") is None

    def test_invalid_configuration(self) -> None:
        with pytest.raises(ImproperConfigurationError):
            ArgumentResolver(tag_key="")
        with pytest.raises(ImproperConfigurationError):
            ArgumentResolver(name_mapper="snake")  # type: ignore[arg-type]
