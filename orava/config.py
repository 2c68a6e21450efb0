"""Configuration for named query compilation and argument resolution."""

from dataclasses import dataclass, field
from typing import Any, Union

from orava.exceptions import ImproperConfigurationError
from orava.parameters.lexer import DEFAULT_DELIMITER, validate_delimiter
from orava.parameters.resolver import DEFAULT_TAG_KEY
from orava.parameters.types import ParameterStyle
from orava.typing import NameMapper
from orava.utils.text import snake_case

__all__ = ("NamedQueryConfig",)


@dataclass(frozen=True)
class NamedQueryConfig:
    """Immutable settings shared by a :class:`~orava.base.NamedQueryAPI` and its prepared queries.

    Args:
        delimiter: Character introducing a named placeholder.
        parameter_style: Positional syntax of the target driver. Accepts a
            :class:`ParameterStyle` or its value, e.g. ``"qmark"``.
        tag_key: Record field metadata key naming the placeholder a field answers to.
        name_mapper: Maps untagged record field names to placeholder names.
    """

    delimiter: str = DEFAULT_DELIMITER
    parameter_style: "Union[ParameterStyle, str]" = ParameterStyle.NUMERIC
    tag_key: str = DEFAULT_TAG_KEY
    name_mapper: NameMapper = field(default=snake_case)

    def __post_init__(self) -> None:
        validate_delimiter(self.delimiter)
        try:
            style = ParameterStyle(self.parameter_style)
        except ValueError:
            valid = ", ".join(repr(s.value) for s in ParameterStyle)
            msg = f"unknown parameter style {self.parameter_style!r}; expected one of {valid}"
            raise ImproperConfigurationError(msg) from None
        object.__setattr__(self, "parameter_style", style)
        if not isinstance(self.tag_key, str) or not self.tag_key:
            msg = "tag_key must be a non-empty string"
            raise ImproperConfigurationError(msg)
        if not callable(self.name_mapper):
            msg = f"name_mapper must be callable, got {type(self.name_mapper).__name__}"
            raise ImproperConfigurationError(msg)

    def replace(self, **changes: Any) -> "NamedQueryConfig":
        """Return a copy with ``changes`` applied and validated."""
        values = {
            "delimiter": self.delimiter,
            "parameter_style": self.parameter_style,
            "tag_key": self.tag_key,
            "name_mapper": self.name_mapper,
        }
        values.update(changes)
        return type(self)(**values)
