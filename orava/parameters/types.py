"""Core parameter types: the positional dialects and the lexer's segments."""

from enum import Enum
from typing import Final, Union

__all__ = (
    "SEQUENTIAL_STYLES",
    "Literal",
    "ParameterStyle",
    "Placeholder",
    "Segment",
)


class ParameterStyle(str, Enum):
    """Positional placeholder syntax a driver expects.

    Each member renders the marker for a 1-based occurrence index.
    """

    NUMERIC = "numeric"
    QMARK = "qmark"
    POSITIONAL_PYFORMAT = "pyformat_positional"
    POSITIONAL_COLON = "positional_colon"

    def __str__(self) -> str:
        """String representation for better error messages.

        Returns:
            The enum value as a string.
        """
        return self.value

    @property
    def is_sequential(self) -> bool:
        """Whether markers carry their occurrence index."""
        return self in SEQUENTIAL_STYLES

    def render(self, index: int) -> str:
        """Return the marker text for the ``index``-th placeholder occurrence.

        Args:
            index: 1-based occurrence index.

        Raises:
            ValueError: If ``index`` is smaller than 1.

        Returns:
            The positional marker, e.g. ``$3`` or ``?``.
        """
        if index < 1:
            msg = f"placeholder index must be >= 1, got {index}"
            raise ValueError(msg)
        if self is ParameterStyle.NUMERIC:
            return f"${index}"
        if self is ParameterStyle.POSITIONAL_COLON:
            return f":{index}"
        if self is ParameterStyle.POSITIONAL_PYFORMAT:
            return "%s"
        return "?"


SEQUENTIAL_STYLES: Final = frozenset({ParameterStyle.NUMERIC, ParameterStyle.POSITIONAL_COLON})


class Placeholder:
    """One named-placeholder occurrence in a raw query."""

    __slots__ = ("name", "ordinal", "placeholder_text", "position")

    def __init__(self, name: str, position: int, ordinal: int, placeholder_text: str) -> None:
        self.name = name
        self.position = position
        self.ordinal = ordinal
        self.placeholder_text = placeholder_text

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return (
            self.name == other.name
            and self.position == other.position
            and self.ordinal == other.ordinal
            and self.placeholder_text == other.placeholder_text
        )

    def __hash__(self) -> int:
        return hash((self.name, self.position, self.ordinal))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(name={self.name!r}, ordinal={self.ordinal!r}, "
            f"placeholder_text={self.placeholder_text!r}, position={self.position!r})"
        )


class Literal:
    """A verbatim span of a raw query."""

    __slots__ = ("position", "text")

    def __init__(self, text: str, position: int) -> None:
        self.text = text
        self.position = position

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, type(self)):
            return False
        return self.text == other.text and self.position == other.position

    def __hash__(self) -> int:
        return hash((self.text, self.position))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(text={self.text!r}, position={self.position!r})"


Segment = Union[Literal, Placeholder]
